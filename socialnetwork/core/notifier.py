"""
Completion delivery.

Hands every completion event to a single observer on one designated
event loop, whichever thread produced the event.
"""

import asyncio
import logging
import threading
from typing import Optional

from socialnetwork.core.domain import CompletionResult, Provider
from socialnetwork.core.ports import CompletionObserver


logger = logging.getLogger(__name__)


class CompletionNotifier:
    """
    Delivers completion events to one observer on a fixed event loop.

    Registration is guarded by a lock so that swapping the observer while
    exchanges are in flight is safe; an event is delivered to whichever
    observer is registered at delivery time. Events arriving with no
    observer registered are dropped.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        observer: Optional[CompletionObserver] = None,
    ):
        self.loop = loop
        self._observer = observer
        self._lock = threading.Lock()

    def register(self, observer: CompletionObserver) -> None:
        with self._lock:
            self._observer = observer

    def unregister(self) -> None:
        with self._lock:
            self._observer = None

    @property
    def observer(self) -> Optional[CompletionObserver]:
        with self._lock:
            return self._observer

    def notify(self, provider: Provider, result: CompletionResult) -> None:
        """Schedule delivery of a completion event on the notifier's loop."""
        self.loop.call_soon_threadsafe(self._deliver, provider, result)

    def _deliver(self, provider: Provider, result: CompletionResult) -> None:
        observer = self.observer
        if observer is None:
            logger.debug(
                f"No completion observer registered, dropping event for {provider.value}",
                extra={"provider": provider.value},
            )
            return

        try:
            observer(provider, result)
        except Exception as e:
            logger.error(
                f"Completion observer failed for provider {provider.value}: {e}",
                exc_info=True,
                extra={"provider": provider.value},
            )

    async def flush(self) -> None:
        """
        Wait until every event scheduled before this call has been delivered.

        Must be awaited on the notifier's loop.
        """
        done = self.loop.create_future()
        self.loop.call_soon_threadsafe(done.set_result, None)
        await done
