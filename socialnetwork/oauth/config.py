"""
OAuth configuration and credential sources.

Each provider (Facebook, Google, Odnoklassniki, Vkontakte) can be
configured independently. A provider with only a client ID uses the
implicit grant; adding a client secret switches it to the
authorization-code grant.
"""

import os
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from socialnetwork.core.credentials import CredentialRegistry
from socialnetwork.core.domain import Provider
from socialnetwork.core.profiles import DEFAULT_REDIRECT_URL


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StaticCredentialSource:
    """Credential source backed by fixed values."""

    id: str
    secret: Optional[str] = None

    def client_id(self) -> str:
        return self.id

    def client_secret(self) -> Optional[str]:
        return self.secret


@dataclass
class SocialNetworkConfig:
    """
    OAuth configuration settings.

    Loaded from environment variables. Providers without a client ID are
    left unregistered.
    """

    redirect_url: str = DEFAULT_REDIRECT_URL

    facebook_client_id: str | None = None
    facebook_client_secret: str | None = None
    google_client_id: str | None = None
    google_client_secret: str | None = None
    odnoklassniki_client_id: str | None = None
    odnoklassniki_client_secret: str | None = None
    vkontakte_client_id: str | None = None
    vkontakte_client_secret: str | None = None

    # Completion publishing
    gcp_project_id: str | None = None
    pubsub_topic_name: str | None = None

    @classmethod
    def from_env(cls) -> "SocialNetworkConfig":
        """Load configuration from environment variables."""
        return cls(
            redirect_url=os.getenv("SOCIALNETWORK_REDIRECT_URL") or DEFAULT_REDIRECT_URL,
            facebook_client_id=os.getenv("FACEBOOK_CLIENT_ID"),
            facebook_client_secret=os.getenv("FACEBOOK_CLIENT_SECRET"),
            google_client_id=os.getenv("GOOGLE_CLIENT_ID"),
            google_client_secret=os.getenv("GOOGLE_CLIENT_SECRET"),
            odnoklassniki_client_id=os.getenv("ODNOKLASSNIKI_CLIENT_ID"),
            odnoklassniki_client_secret=os.getenv("ODNOKLASSNIKI_CLIENT_SECRET"),
            vkontakte_client_id=os.getenv("VKONTAKTE_CLIENT_ID"),
            vkontakte_client_secret=os.getenv("VKONTAKTE_CLIENT_SECRET"),
            gcp_project_id=os.getenv("GCP_PROJECT_ID"),
            pubsub_topic_name=os.getenv("PUBSUB_TOPIC_NAME"),
        )

    def get_client_id(self, provider: Provider) -> str | None:
        return getattr(self, f"{provider.value}_client_id")

    def get_client_secret(self, provider: Provider) -> str | None:
        return getattr(self, f"{provider.value}_client_secret") or None

    def is_provider_configured(self, provider: str) -> bool:
        """Check if a provider has at least a client ID configured."""
        try:
            return bool(self.get_client_id(Provider(provider)))
        except ValueError:
            return False

    def get_configured_providers(self) -> list[str]:
        """List all providers with valid configuration."""
        return [
            provider.value
            for provider in Provider
            if self.is_provider_configured(provider.value)
        ]

    @property
    def publishes_to_pubsub(self) -> bool:
        return bool(self.pubsub_topic_name)

    def credential_sources(self) -> dict[Provider, StaticCredentialSource]:
        """Build a credential source for every configured provider."""
        sources = {}
        for provider in Provider:
            client_id = self.get_client_id(provider)
            if not client_id:
                logger.debug(f"{provider.value} OAuth not configured (missing client ID)")
                continue
            sources[provider] = StaticCredentialSource(
                id=client_id, secret=self.get_client_secret(provider)
            )
        return sources

    def credential_registry(self) -> CredentialRegistry:
        return CredentialRegistry(self.credential_sources())


@lru_cache()
def get_config() -> SocialNetworkConfig:
    """Get configuration singleton."""
    return SocialNetworkConfig.from_env()


# List of supported providers (for validation)
SUPPORTED_PROVIDERS = [provider.value for provider in Provider]
