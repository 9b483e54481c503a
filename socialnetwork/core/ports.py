"""
Port definitions (interfaces) for the core domain.

Ports define the contracts between the core domain and external systems.
Infrastructure adapters implement these ports.
"""

from typing import Mapping, Optional, Protocol

from socialnetwork.core.domain import CompletionResult, Provider


class CredentialSource(Protocol):
    """
    Port (interface) supplying a provider's client credentials.

    Implemented by configuration adapters (e.g., StaticCredentialSource).
    """

    def client_id(self) -> str:
        """Return the client identifier issued by the provider."""
        ...

    def client_secret(self) -> Optional[str]:
        """Return the client secret, or None for implicit-flow clients."""
        ...


class FormTransport(Protocol):
    """
    Port (interface) for sending form-encoded POST requests.

    The core hands over a ready-encoded body and receives the raw response
    bytes regardless of HTTP status.
    """

    async def send_form_post(
        self, url: str, headers: Mapping[str, str], body: bytes
    ) -> bytes:
        """
        Send the request and return the response body.

        Raises:
            ExchangeTransportError: If no response could be obtained
        """
        ...


class CompletionObserver(Protocol):
    """
    Port (interface) receiving completion events.

    Always invoked on the notifier's event loop.
    """

    def __call__(self, provider: Provider, result: CompletionResult) -> None: ...
