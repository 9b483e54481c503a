"""
Core use case: handling an inbound OAuth redirect.

Classifies the URL, normalizes its payload, exchanges authorization codes
when needed and reports exactly one completion per accepted redirect.
"""

import asyncio
import concurrent.futures
import logging

from socialnetwork.core.classifier import classify
from socialnetwork.core.credentials import CredentialRegistry
from socialnetwork.core.domain import (
    CompletionFailure,
    CompletionSuccess,
    ExchangeRequest,
    FailureKind,
    ParameterMap,
    Provider,
    RedirectKind,
)
from socialnetwork.core.exceptions import ExchangeError, ExchangeResponseError
from socialnetwork.core.exchange import CodeExchangeClient
from socialnetwork.core.normalizer import normalize
from socialnetwork.core.notifier import CompletionNotifier
from socialnetwork.core.profiles import DEFAULT_REDIRECT_URL


logger = logging.getLogger(__name__)


class RedirectDispatcher:
    """
    Entry point for inbound redirect URLs.

    `handle()` may be called from any thread. Classification and
    normalization run synchronously on the caller's thread; code
    exchanges run on the notifier's loop, and every observer callback is
    delivered there too.
    """

    def __init__(
        self,
        credentials: CredentialRegistry,
        exchange_client: CodeExchangeClient,
        notifier: CompletionNotifier,
        redirect_url: str = DEFAULT_REDIRECT_URL,
    ):
        """
        Initialize the dispatcher.

        Args:
            credentials: Registered credential sources
            exchange_client: Client used for authorization code exchanges
            notifier: Delivers completion events to the observer
            redirect_url: Landing page sent as `redirect_uri` when exchanging
        """
        self.credentials = credentials
        self.exchange_client = exchange_client
        self.notifier = notifier
        self.redirect_url = redirect_url
        self._pending: set[concurrent.futures.Future] = set()

    def handle(self, url: str) -> bool:
        """
        Handle an inbound URL.

        Args:
            url: URL delivered to the host application

        Returns:
            False if the URL does not belong to this package, True once the
            redirect has been accepted and its completion scheduled

        Raises:
            RedirectValidationError: If a web redirect carries an unusable `state`
            MissingCredentialsError: If a code arrives for a provider without a secret
        """
        classification = classify(url, self.credentials)
        if not classification.is_recognized:
            return False

        provider, parameters = normalize(url, classification)

        logger.info(
            f"Redirect received for provider: {provider.value}",
            extra={"provider": provider.value, "kind": classification.kind.value},
        )

        code = parameters.get("code")
        if classification.kind is RedirectKind.WEB and code is not None:
            request = ExchangeRequest(
                provider=provider,
                code=code,
                credentials=self.credentials.require_secret(provider),
                redirect_uri=self.redirect_url,
            )
            self._schedule_exchange(request)
        else:
            self.notifier.notify(provider, CompletionSuccess(parameters))
        return True

    def _schedule_exchange(self, request: ExchangeRequest) -> None:
        future = asyncio.run_coroutine_threadsafe(
            self._exchange(request), self.notifier.loop
        )
        self._pending.add(future)
        future.add_done_callback(self._pending.discard)

    async def _exchange(self, request: ExchangeRequest) -> None:
        provider: Provider = request.provider
        try:
            parameters: ParameterMap = await self.exchange_client.exchange(request)
        except ExchangeResponseError as e:
            logger.warning(
                f"Invalid code exchange response for {provider.value}: {e}",
                extra={"provider": provider.value},
            )
            self.notifier.notify(
                provider, CompletionFailure(FailureKind.INVALID_RESPONSE, str(e))
            )
            return
        except ExchangeError as e:
            logger.warning(
                f"Code exchange transport failure for {provider.value}: {e}",
                extra={"provider": provider.value},
            )
            self.notifier.notify(
                provider, CompletionFailure(FailureKind.TRANSPORT, str(e))
            )
            return
        except Exception as e:
            # Unexpected transport errors still complete the redirect
            logger.error(
                f"Unexpected code exchange error for {provider.value}: {e}",
                extra={"provider": provider.value},
                exc_info=True,
            )
            self.notifier.notify(
                provider, CompletionFailure(FailureKind.TRANSPORT, str(e))
            )
            return

        self.notifier.notify(provider, CompletionSuccess(parameters))

    @property
    def pending_exchanges(self) -> int:
        return len(self._pending)

    async def wait_idle(self) -> None:
        """
        Wait for in-flight exchanges and their deliveries to finish.

        Must be awaited on the notifier's loop.
        """
        pending = [asyncio.wrap_future(future) for future in list(self._pending)]
        if pending:
            await asyncio.gather(*pending)
        await self.notifier.flush()
