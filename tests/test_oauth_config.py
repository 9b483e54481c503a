"""
Tests for OAuth configuration and credential sources.
"""

import os
from unittest.mock import patch

from socialnetwork.core.domain import Credentials, Provider
from socialnetwork.core.profiles import DEFAULT_REDIRECT_URL
from socialnetwork.oauth.config import (
    SUPPORTED_PROVIDERS,
    SocialNetworkConfig,
    StaticCredentialSource,
    get_config,
)


class TestSocialNetworkConfig:
    """Tests for SocialNetworkConfig."""

    def test_from_env_loads_variables(self):
        """Test loading config from environment variables."""
        env = {
            "SOCIALNETWORK_REDIRECT_URL": "https://example.com/landing",
            "FACEBOOK_CLIENT_ID": "fb-id",
            "FACEBOOK_CLIENT_SECRET": "fb-secret",
            "VKONTAKTE_CLIENT_ID": "vk-id",
            "GCP_PROJECT_ID": "test-project",
            "PUBSUB_TOPIC_NAME": "oauth-completions",
        }

        with patch.dict(os.environ, env, clear=True):
            config = SocialNetworkConfig.from_env()

        assert config.redirect_url == "https://example.com/landing"
        assert config.facebook_client_id == "fb-id"
        assert config.facebook_client_secret == "fb-secret"
        assert config.vkontakte_client_id == "vk-id"
        assert config.vkontakte_client_secret is None
        assert config.publishes_to_pubsub is True

    def test_from_env_handles_missing(self):
        """Test loading config with missing variables."""
        with patch.dict(os.environ, {}, clear=True):
            config = SocialNetworkConfig.from_env()

        assert config.redirect_url == DEFAULT_REDIRECT_URL
        assert config.google_client_id is None
        assert config.publishes_to_pubsub is False
        assert config.get_configured_providers() == []

    def test_is_provider_configured_needs_only_client_id(self):
        """Implicit-flow providers need no secret."""
        config = SocialNetworkConfig(odnoklassniki_client_id="ok-id")

        assert config.is_provider_configured("odnoklassniki") is True
        assert config.is_provider_configured("google") is False

    def test_is_provider_configured_unknown(self):
        """Test unknown provider returns False."""
        config = SocialNetworkConfig(google_client_id="id")

        assert config.is_provider_configured("adobe") is False

    def test_get_configured_providers(self):
        config = SocialNetworkConfig(
            google_client_id="g-id",
            vkontakte_client_id="vk-id",
            vkontakte_client_secret="vk-secret",
        )

        assert config.get_configured_providers() == ["google", "vkontakte"]

    def test_empty_secret_is_none(self):
        config = SocialNetworkConfig(
            google_client_id="g-id", google_client_secret=""
        )

        assert config.get_client_secret(Provider.GOOGLE) is None

    def test_credential_registry(self):
        config = SocialNetworkConfig(
            facebook_client_id="fb-id",
            google_client_id="g-id",
            google_client_secret="g-secret",
        )

        registry = config.credential_registry()

        assert registry.configured_providers() == [Provider.FACEBOOK, Provider.GOOGLE]
        assert registry.get(Provider.FACEBOOK) == Credentials("fb-id", None)
        assert registry.get(Provider.GOOGLE) == Credentials("g-id", "g-secret")
        assert registry.get(Provider.VKONTAKTE) is None

    def test_get_config_is_cached(self):
        get_config.cache_clear()
        try:
            assert get_config() is get_config()
        finally:
            get_config.cache_clear()


class TestStaticCredentialSource:
    def test_returns_values(self):
        source = StaticCredentialSource(id="id", secret="secret")

        assert source.client_id() == "id"
        assert source.client_secret() == "secret"

    def test_secret_defaults_to_none(self):
        assert StaticCredentialSource(id="id").client_secret() is None


class TestSupportedProviders:
    def test_all_providers_supported(self):
        assert SUPPORTED_PROVIDERS == [
            "facebook",
            "google",
            "odnoklassniki",
            "vkontakte",
        ]
