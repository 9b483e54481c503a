"""
Shared test configuration and fixtures.
"""

import asyncio
import os
import threading
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from socialnetwork.core.credentials import CredentialRegistry
from socialnetwork.core.dispatcher import RedirectDispatcher
from socialnetwork.core.domain import Provider
from socialnetwork.core.exchange import CodeExchangeClient
from socialnetwork.core.notifier import CompletionNotifier
from socialnetwork.main import app
from socialnetwork.oauth.config import StaticCredentialSource, get_config


FACEBOOK_ID = "1234"
GOOGLE_ID = "987-abc"
ODNOKLASSNIKI_ID = "512"
VKONTAKTE_ID = "6543"

CLIENT_IDS = {
    Provider.FACEBOOK: FACEBOOK_ID,
    Provider.GOOGLE: GOOGLE_ID,
    Provider.ODNOKLASSNIKI: ODNOKLASSNIKI_ID,
    Provider.VKONTAKTE: VKONTAKTE_ID,
}


class RecordingObserver:
    """Completion observer that records events and the delivering thread."""

    def __init__(self):
        self.events = []
        self.threads = []

    def __call__(self, provider, result):
        self.events.append((provider, result))
        self.threads.append(threading.get_ident())


class FakeTransport:
    """FormTransport returning a canned body or raising a canned error."""

    def __init__(self, body: bytes = b"{}", error: Exception | None = None):
        self.body = body
        self.error = error
        self.calls = []

    async def send_form_post(self, url, headers, body):
        self.calls.append((url, dict(headers), body))
        if self.error is not None:
            raise self.error
        return self.body


@pytest.fixture
def implicit_credentials():
    """All four providers registered without client secrets."""
    return CredentialRegistry(
        {
            provider: StaticCredentialSource(id=client_id)
            for provider, client_id in CLIENT_IDS.items()
        }
    )


@pytest.fixture
def code_credentials():
    """All four providers registered with client secrets."""
    return CredentialRegistry(
        {
            provider: StaticCredentialSource(
                id=client_id, secret=f"{provider.value}-secret"
            )
            for provider, client_id in CLIENT_IDS.items()
        }
    )


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def transport():
    return FakeTransport(body=b'{"access_token": "T", "expires_in": 3600}')


@pytest.fixture
def make_dispatcher(observer, transport):
    """
    Factory building a dispatcher bound to the running test loop.

    Must be called from inside an async test.
    """

    def _make(credentials: CredentialRegistry) -> RedirectDispatcher:
        notifier = CompletionNotifier(
            loop=asyncio.get_running_loop(), observer=observer
        )
        return RedirectDispatcher(
            credentials=credentials,
            exchange_client=CodeExchangeClient(transport),
            notifier=notifier,
        )

    return _make


TEST_ENV = {
    "FACEBOOK_CLIENT_ID": FACEBOOK_ID,
    "GOOGLE_CLIENT_ID": GOOGLE_ID,
    "GOOGLE_CLIENT_SECRET": "google-secret",
    "VKONTAKTE_CLIENT_ID": VKONTAKTE_ID,
    "VKONTAKTE_CLIENT_SECRET": "vkontakte-secret",
}


@pytest.fixture
def client():
    """
    Test client running the application lifespan.

    Facebook is implicit-only, Google and Vkontakte use the code grant and
    Odnoklassniki is left unconfigured.
    """
    with patch.dict(os.environ, TEST_ENV, clear=True):
        get_config.cache_clear()
        with TestClient(app) as test_client:
            yield test_client
    get_config.cache_clear()
