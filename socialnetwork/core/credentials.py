"""
Credential lookup across the registered per-provider sources.
"""

from typing import Mapping, Optional

from socialnetwork.core.domain import Credentials, Provider
from socialnetwork.core.exceptions import MissingCredentialsError
from socialnetwork.core.ports import CredentialSource


class CredentialRegistry:
    """
    Read-only view over the credential sources injected at start-up.

    Every lookup reads the source afresh and returns an immutable
    snapshot, so a single request never sees credentials change under it.
    """

    def __init__(self, sources: Optional[Mapping[Provider, CredentialSource]] = None):
        self._sources = dict(sources or {})

    def __contains__(self, provider: Provider) -> bool:
        return provider in self._sources

    def get(self, provider: Provider) -> Optional[Credentials]:
        """Snapshot a provider's credentials, or None when no source is registered."""
        source = self._sources.get(provider)
        if source is None:
            return None
        return Credentials(
            client_id=source.client_id(),
            client_secret=source.client_secret(),
        )

    def require(self, provider: Provider) -> Credentials:
        """
        Snapshot a provider's credentials.

        Raises:
            MissingCredentialsError: If no source is registered for the provider
        """
        credentials = self.get(provider)
        if credentials is None:
            raise MissingCredentialsError(
                f"No credential source registered for provider '{provider.value}'"
            )
        return credentials

    def require_secret(self, provider: Provider) -> Credentials:
        """
        Snapshot credentials that must include a client secret.

        Raises:
            MissingCredentialsError: If the source or its secret is missing
        """
        credentials = self.require(provider)
        if not credentials.has_secret:
            raise MissingCredentialsError(
                f"Client secret required for provider '{provider.value}'"
            )
        return credentials

    def configured_providers(self) -> list[Provider]:
        return [provider for provider in Provider if provider in self._sources]
