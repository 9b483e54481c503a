"""
Google Cloud Pub/Sub completion publisher.

This is a driven adapter that implements the CompletionObserver port
defined in the core domain.
"""

import asyncio
import json
import logging
import os
from typing import Any, Dict, Optional

from google.api_core import exceptions
from google.cloud import pubsub_v1

from socialnetwork.core.domain import (
    CompletionFailure,
    CompletionResult,
    CompletionSuccess,
    Provider,
)

logger = logging.getLogger(__name__)


def completion_message(provider: Provider, result: CompletionResult) -> Dict[str, Any]:
    """Serialize a completion event into the published message body."""
    if isinstance(result, CompletionSuccess):
        return {
            "provider": provider.value,
            "status": "success",
            "parameters": result.parameters,
        }
    return {
        "provider": provider.value,
        "status": "failure",
        "failure_kind": result.kind.value,
        "detail": result.detail,
    }


class GooglePubSubPublisher:
    """
    Completion observer publishing events to Google Cloud Pub/Sub.

    Automatically detects and configures for:
    - Production: Uses GCP Pub/Sub service
    - Local development: Uses Pub/Sub emulator (via PUBSUB_EMULATOR_HOST)
    """

    def __init__(
        self, project_id: Optional[str] = None, topic_name: Optional[str] = None
    ):
        """
        Initialize Google Cloud Pub/Sub publisher.

        Args:
            project_id: GCP project ID (defaults to GCP_PROJECT_ID env var)
            topic_name: Pub/Sub topic name (defaults to PUBSUB_TOPIC_NAME env var)
        """
        self.project_id = project_id or os.getenv("GCP_PROJECT_ID")
        self.topic_name = topic_name or os.getenv("PUBSUB_TOPIC_NAME")

        # Check if using emulator
        self.emulator_host = os.getenv("PUBSUB_EMULATOR_HOST")

        if not self.project_id:
            raise ValueError("GCP_PROJECT_ID must be set for Pub/Sub publisher")

        if not self.topic_name:
            raise ValueError("PUBSUB_TOPIC_NAME must be set for Pub/Sub publisher")

        self.publisher = pubsub_v1.PublisherClient()
        self.topic_path = self.publisher.topic_path(self.project_id, self.topic_name)
        self._tasks: set[asyncio.Task] = set()

        if self.emulator_host:
            logger.info(f"Using Pub/Sub emulator at {self.emulator_host}")
        else:
            logger.info(f"Pub/Sub publisher initialized for topic: {self.topic_path}")

    def __call__(self, provider: Provider, result: CompletionResult) -> None:
        """
        Observer entry point, called on the notifier's event loop.

        Publishing is handed to a task so the loop is never blocked.
        """
        task = asyncio.get_running_loop().create_task(self.publish(provider, result))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def publish(
        self, provider: Provider, result: CompletionResult
    ) -> Optional[str]:
        """
        Publish a completion event to the Pub/Sub topic asynchronously.

        Uses asyncio.to_thread() to avoid blocking the event loop while waiting
        for the Pub/Sub publish to complete.

        Args:
            provider: Provider the redirect belonged to
            result: Completion result to publish

        Returns:
            Message ID if successful, None if failed
        """
        try:
            message_bytes = json.dumps(
                completion_message(provider, result), default=str
            ).encode("utf-8")

            attributes = {
                "provider": provider.value,
                "status": "success" if result.ok else "failure",
            }
            if isinstance(result, CompletionFailure):
                attributes["failure_kind"] = result.kind.value

            # Publish message (returns a future immediately)
            future = self.publisher.publish(
                self.topic_path, message_bytes, **attributes
            )

            message_id: str = await asyncio.to_thread(future.result, 10.0)
            logger.info(f"Published completion to Pub/Sub: {message_id}")

            return message_id

        except exceptions.NotFound:
            logger.error(f"Pub/Sub topic not found: {self.topic_path}")
            return None
        except exceptions.PermissionDenied:
            logger.error(f"Permission denied publishing to topic: {self.topic_path}")
            return None
        except Exception as e:
            logger.error(f"Failed to publish completion to Pub/Sub: {str(e)}")
            return None

    async def drain(self) -> None:
        """Wait for publishes started by the observer entry point."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def close(self) -> None:
        """Close the publisher client."""
        if self.publisher:
            # Flush any pending messages
            self.publisher.stop()
