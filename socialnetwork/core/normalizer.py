"""
Redirect normalization.

Turns the provider-specific encoding of a redirect (fragment payloads on
native callbacks, query strings with a JSON `state` on web redirects) into
a flat ParameterMap.
"""

from typing import Tuple
from urllib.parse import unquote, urlsplit

from pydantic import ValidationError

from socialnetwork.core.classifier import raw_scheme
from socialnetwork.core.domain import (
    Classification,
    ParameterMap,
    Provider,
    RedirectKind,
    StatePayload,
)
from socialnetwork.core.exceptions import InvalidStateError, MissingStateError
from socialnetwork.core.profiles import get_profile


STATE_PARAMETER = "state"


def parse_query(query: str) -> ParameterMap:
    """
    Parse a query string into a ParameterMap.

    Repeated keys keep the last value. Values are percent-decoded only;
    a literal `+` is kept.
    """
    parameters: ParameterMap = {}
    for pair in query.split("&"):
        if not pair:
            continue
        name, _, value = pair.partition("=")
        parameters[unquote(name)] = unquote(value)
    return parameters


def decode_state(raw_state: str) -> Provider:
    """
    Decode a `state` value into the provider it names.

    Raises:
        InvalidStateError: If the value is not a {"provider": <tag>} JSON object
        UnknownProviderError: If the tag matches no provider
    """
    try:
        payload = StatePayload.model_validate_json(raw_state)
    except ValidationError as e:
        raise InvalidStateError(f"Unable to parse 'state': {raw_state!r}") from e
    return Provider.from_tag(payload.provider)


def normalize_native(url: str, provider: Provider) -> ParameterMap:
    """
    Normalize a native application callback.

    The payload arrives after a fixed marker on the `authorize` path
    (`#`, or `?#` for Vkontakte); the marker is rewritten to `?` so the
    payload can be read as a regular query string.
    """
    native = get_profile(provider).native
    if native is None:
        raise ValueError(f"Provider '{provider.value}' has no native redirect")

    scheme = raw_scheme(url) or ""
    rewritten = url.replace(
        scheme + native.fragment_marker, scheme + "://authorize?"
    )
    return parse_query(urlsplit(rewritten).query)


def normalize_web(url: str) -> Tuple[Provider, ParameterMap]:
    """
    Normalize a web redirect forwarded by the landing page.

    The provider is taken exclusively from `state`, which is stripped
    from the returned parameters.

    Raises:
        MissingStateError: If `state` is absent
        InvalidStateError: If `state` is malformed
        UnknownProviderError: If `state` names an unknown provider
    """
    parameters = parse_query(urlsplit(url).query)
    raw_state = parameters.pop(STATE_PARAMETER, None)
    if raw_state is None:
        raise MissingStateError("'state' is missing from web redirect")
    return decode_state(raw_state), parameters


def normalize(url: str, classification: Classification) -> Tuple[Provider, ParameterMap]:
    """
    Normalize a classified redirect into a (Provider, ParameterMap) pair.

    Raises:
        ValueError: If the URL was classified as unrecognized
        RedirectValidationError: If a web redirect carries an unusable `state`
    """
    if classification.kind is RedirectKind.NATIVE:
        return classification.provider, normalize_native(url, classification.provider)
    if classification.kind is RedirectKind.WEB:
        return normalize_web(url)
    raise ValueError("Cannot normalize an unrecognized redirect")
