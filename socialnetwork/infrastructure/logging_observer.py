"""
Completion observer that only logs events.

Used when no Pub/Sub topic is configured.
"""

import logging

from socialnetwork.core.domain import CompletionResult, CompletionSuccess, Provider

logger = logging.getLogger(__name__)


class LoggingCompletionObserver:
    """Logs completion events; parameter values are never written out."""

    def __call__(self, provider: Provider, result: CompletionResult) -> None:
        if isinstance(result, CompletionSuccess):
            logger.info(
                f"OAuth completed for provider: {provider.value}",
                extra={"provider": provider.value, "keys": sorted(result.parameters)},
            )
        else:
            logger.warning(
                f"OAuth failed for provider {provider.value}: {result.kind.value}",
                extra={"provider": provider.value, "detail": result.detail},
            )
