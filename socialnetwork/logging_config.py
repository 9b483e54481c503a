"""
Logging configuration for Cloud Run and local environments.

Automatically detects Cloud Run environment and configures appropriate logging:
- Cloud Run: google-cloud-logging with trace correlation
- Local/Test: Standard Python logging to stdout with JSON formatting
"""

import json
import logging
import os
from datetime import UTC, datetime


# Attributes set through `extra=` by this package's log calls
CONTEXT_FIELDS = ("provider", "kind", "response_type", "status_code", "keys", "detail")


class JsonFormatter(logging.Formatter):
    """
    JSON log formatter.

    Emits one JSON object per record, shaped like the entries Google Cloud
    Logging expects, with the package's `extra=` context merged in.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_object = {
            "timestamp": datetime.now(UTC).isoformat(),
            "severity": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_object[field] = getattr(record, field)

        if record.exc_info:
            log_object["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_object, default=str)


def setup_global_logging(level: int = logging.INFO) -> None:
    """
    Configure global logging based on environment.

    When running in Cloud Run (K_SERVICE env var is set), google-cloud-logging
    is used so entries land under jsonPayload with trace correlation.
    Otherwise a single stdout handler with JsonFormatter is installed.
    """
    if os.getenv("K_SERVICE") is not None:
        try:
            import google.cloud.logging

            client = google.cloud.logging.Client()
            client.setup_logging(log_level=level)
            logging.info("Cloud Logging initialized for Cloud Run.")
            return
        except Exception as e:
            logging.basicConfig(
                level=level,
                format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            )
            logging.warning(f"Cloud Logging setup failed, using basic config: {e}")
            return

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
