"""
Per-provider OAuth2 profiles.

Each provider's endpoints, request parameters and redirect shape are
described once here; the builder, classifier, normalizer and exchange
client iterate this table instead of branching per provider.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from socialnetwork.core.domain import ParameterMap, Provider


# Public page every web flow returns to; it forwards to the sentinel scheme
DEFAULT_REDIRECT_URL = "https://iwheelbuy.github.io/SocialNetwork/simplified.html"

# Scheme and path segment the landing page forwards web redirects to
WEB_REDIRECT_SCHEME = "socialnetwork"
WEB_REDIRECT_PATH_SEGMENT = "simplified"

AUTHORIZATION_CODE_GRANT = "authorization_code"


@dataclass(frozen=True)
class NativeProfile:
    """
    How a provider's installed application authorizes and calls back.

    Parameter values may reference `{client_id}` and `{scheme}`, which are
    substituted when the application URL is built.
    """

    scheme_prefix: str
    fragment_marker: str
    authorize_url: str
    authorize_params: Tuple[Tuple[str, str], ...]

    def scheme_for(self, client_id: str) -> str:
        return f"{self.scheme_prefix}{client_id}"

    def authorize_params_for(self, client_id: str) -> list[tuple[str, str]]:
        scheme = self.scheme_for(client_id)
        return [
            (name, value.format(client_id=client_id, scheme=scheme))
            for name, value in self.authorize_params
        ]


@dataclass(frozen=True)
class OAuthProviderProfile:
    """Static OAuth2 description of one identity provider."""

    provider: Provider
    authorize_url: str
    authorize_params: Tuple[Tuple[str, str], ...]
    token_url: str
    token_grant_type: Optional[str] = None
    client_id_suffix: str = ""
    native: Optional[NativeProfile] = None
    token_keys: Tuple[str, ...] = field(default=("access_token",))

    def public_client_id(self, client_id: str) -> str:
        """Client identifier as the provider expects it on the wire."""
        return f"{client_id}{self.client_id_suffix}"

    @property
    def supports_native(self) -> bool:
        return self.native is not None

    def token_from(self, parameters: ParameterMap) -> Optional[str]:
        """
        Pick the bearer token out of completion parameters.

        Keys are tried in order; Google prefers its ID token over the
        access token.
        """
        for key in self.token_keys:
            if parameters.get(key):
                return parameters[key]
        return None


_PROFILES = {
    Provider.FACEBOOK: OAuthProviderProfile(
        provider=Provider.FACEBOOK,
        authorize_url="https://www.facebook.com/v2.12/dialog/oauth",
        authorize_params=(("scope", "public_profile"),),
        token_url="https://graph.facebook.com/v2.12/oauth/access_token",
        native=NativeProfile(
            scheme_prefix="fb",
            fragment_marker="://authorize#",
            authorize_url="fbauth://authorize",
            authorize_params=(
                ("client_id", "{client_id}"),
                ("sdk", "ios"),
                ("return_scopes", "true"),
                ("redirect_uri", "fbconnect://success"),
                ("scope", "public_profile"),
                ("display", "touch"),
                ("response_type", "token"),
                ("legacy_override", "v2.6"),
                ("sdk_version", "4.7"),
            ),
        ),
    ),
    Provider.GOOGLE: OAuthProviderProfile(
        provider=Provider.GOOGLE,
        authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
        authorize_params=(("scope", "email"),),
        token_url="https://www.googleapis.com/oauth2/v4/token",
        token_grant_type=AUTHORIZATION_CODE_GRANT,
        client_id_suffix=".apps.googleusercontent.com",
        token_keys=("id_token", "access_token"),
    ),
    Provider.ODNOKLASSNIKI: OAuthProviderProfile(
        provider=Provider.ODNOKLASSNIKI,
        authorize_url="https://connect.ok.ru/oauth/authorize",
        authorize_params=(("scope", "VALUABLE_ACCESS"), ("layout", "m")),
        token_url="https://api.ok.ru/oauth/token.do",
        token_grant_type=AUTHORIZATION_CODE_GRANT,
        native=NativeProfile(
            scheme_prefix="ok",
            fragment_marker="://authorize#",
            authorize_url="okauth://authorize",
            authorize_params=(
                ("client_id", "{client_id}"),
                ("response_type", "token"),
                ("redirect_uri", "{scheme}://authorize"),
                ("scope", "VALUABLE_ACCESS"),
                ("layout", "m"),
            ),
        ),
    ),
    Provider.VKONTAKTE: OAuthProviderProfile(
        provider=Provider.VKONTAKTE,
        authorize_url="https://oauth.vk.com/authorize",
        authorize_params=(("revoke", "1"), ("v", "5.73")),
        token_url="https://oauth.vk.com/access_token",
        native=NativeProfile(
            scheme_prefix="vk",
            fragment_marker="://authorize?#",
            authorize_url="vkauthorize://authorize",
            authorize_params=(
                ("client_id", "{client_id}"),
                ("revoke", "1"),
                ("v", "5.73"),
                ("sdk_version", "1.4.6"),
            ),
        ),
    ),
}

PROFILES: Mapping[Provider, OAuthProviderProfile] = MappingProxyType(_PROFILES)


def get_profile(provider: Provider) -> OAuthProviderProfile:
    """Get the profile for a provider."""
    return PROFILES[provider]


def native_profiles() -> list[OAuthProviderProfile]:
    """Profiles of providers whose applications can call back natively."""
    return [profile for profile in PROFILES.values() if profile.supports_native]
