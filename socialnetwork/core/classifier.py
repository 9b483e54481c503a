"""
Inbound redirect classification.

Decides whether a URL is a native application callback for one of the
app-capable providers, a generic web redirect forwarded by the landing
page, or something this package does not own.
"""

import logging
import re
from typing import Optional
from urllib.parse import urlsplit

from socialnetwork.core.credentials import CredentialRegistry
from socialnetwork.core.domain import Classification
from socialnetwork.core.profiles import (
    WEB_REDIRECT_PATH_SEGMENT,
    WEB_REDIRECT_SCHEME,
    native_profiles,
)


logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")


def raw_scheme(url: str) -> Optional[str]:
    """
    Return the URL scheme exactly as written.

    urlsplit() lower-cases schemes, which would break the case-sensitive
    comparison against client-id based schemes.
    """
    match = _SCHEME_RE.match(url)
    return match.group(1) if match else None


def _is_web_redirect(url: str, scheme: str) -> bool:
    if scheme.lower() != WEB_REDIRECT_SCHEME:
        return False
    segments = urlsplit(url).path.split("/")
    return any(segment.lower() == WEB_REDIRECT_PATH_SEGMENT for segment in segments)


def classify(url: str, credentials: CredentialRegistry) -> Classification:
    """
    Classify an inbound URL.

    Native checks run first, one per app-capable provider with registered
    credentials; the web check runs only when none of them matched.

    Args:
        url: Inbound URL as delivered by the host
        credentials: Registered credential sources

    Returns:
        Exactly one of native(provider), web() or unrecognized()
    """
    scheme = raw_scheme(url)
    if scheme is None:
        return Classification.unrecognized()

    for profile in native_profiles():
        provider_credentials = credentials.get(profile.provider)
        if provider_credentials is None:
            continue
        if profile.native.scheme_for(provider_credentials.client_id) == scheme:
            logger.debug(f"Native redirect for provider: {profile.provider.value}")
            return Classification.native(profile.provider)

    if _is_web_redirect(url, scheme):
        logger.debug("Web redirect received")
        return Classification.web()

    return Classification.unrecognized()
