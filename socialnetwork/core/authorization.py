"""
Outbound authorization request building.

Builds the URL the user is sent to: the provider's web authorization
endpoint, or the provider application's own authorization URL.
"""

import logging

from authlib.common.urls import add_params_to_uri

from socialnetwork.core.credentials import CredentialRegistry
from socialnetwork.core.domain import Credentials, Provider, StatePayload
from socialnetwork.core.exceptions import UnsupportedFlowError
from socialnetwork.core.profiles import DEFAULT_REDIRECT_URL, get_profile


logger = logging.getLogger(__name__)

RESPONSE_TYPE_CODE = "code"
RESPONSE_TYPE_TOKEN = "token"


def _response_type_for(credentials: Credentials) -> str:
    return RESPONSE_TYPE_CODE if credentials.has_secret else RESPONSE_TYPE_TOKEN


class AuthorizationRequestBuilder:
    """
    Builds authorization URLs from provider profiles and credentials.

    The response type follows the credentials: a configured secret selects
    the authorization-code grant, otherwise the implicit grant is used.
    """

    def __init__(
        self,
        credentials: CredentialRegistry,
        redirect_url: str = DEFAULT_REDIRECT_URL,
    ):
        self.credentials = credentials
        self.redirect_url = redirect_url

    def response_type(self, provider: Provider) -> str:
        """Grant selected for the provider by its current credentials."""
        return _response_type_for(self.credentials.require(provider))

    def authorization_url(self, provider: Provider) -> str:
        """
        Build the web authorization URL for a provider.

        The provider tag travels in `state` so the generic landing page
        can be traced back to it.

        Raises:
            MissingCredentialsError: If the provider has no credential source
        """
        profile = get_profile(provider)
        credentials = self.credentials.require(provider)
        response_type = _response_type_for(credentials)

        params = [
            ("client_id", profile.public_client_id(credentials.client_id)),
            ("redirect_uri", self.redirect_url),
            ("state", StatePayload.for_provider(provider).encode()),
            ("response_type", response_type),
            *profile.authorize_params,
        ]

        logger.info(
            f"Built authorization URL for provider: {provider.value}",
            extra={"provider": provider.value, "response_type": response_type},
        )
        return add_params_to_uri(profile.authorize_url, params)

    def app_authorization_url(self, provider: Provider) -> str:
        """
        Build the authorization URL handled by the provider's application.

        Native flows are always implicit and call back on the provider's
        client-id scheme, so no `state` is sent.

        Raises:
            UnsupportedFlowError: If the provider has no native application flow
            MissingCredentialsError: If the provider has no credential source
        """
        profile = get_profile(provider)
        if profile.native is None:
            raise UnsupportedFlowError(
                f"Provider '{provider.value}' does not support native authorization"
            )
        credentials = self.credentials.require(provider)
        params = profile.native.authorize_params_for(credentials.client_id)
        return add_params_to_uri(profile.native.authorize_url, params)
