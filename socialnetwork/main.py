"""
FastAPI application for social network OAuth redirects.

This module wires dependencies and configures the application.
Business logic is in socialnetwork/core, infrastructure in
socialnetwork/infrastructure.
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from datetime import UTC, datetime

# Configure logging FIRST, before other local imports
from socialnetwork.logging_config import setup_global_logging

setup_global_logging()

# Now import other modules (they will use the configured logging)
from fastapi import FastAPI, Request, status  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402

from socialnetwork.core.authorization import AuthorizationRequestBuilder  # noqa: E402
from socialnetwork.core.dispatcher import RedirectDispatcher  # noqa: E402
from socialnetwork.core.exceptions import (  # noqa: E402
    MissingCredentialsError,
    RedirectValidationError,
    UnsupportedFlowError,
)
from socialnetwork.core.exchange import CodeExchangeClient  # noqa: E402
from socialnetwork.core.notifier import CompletionNotifier  # noqa: E402
from socialnetwork.core.ports import CompletionObserver  # noqa: E402
from socialnetwork.infrastructure.http_transport import HttpxFormTransport  # noqa: E402
from socialnetwork.infrastructure.logging_observer import (  # noqa: E402
    LoggingCompletionObserver,
)
from socialnetwork.infrastructure.pubsub_publisher import (  # noqa: E402
    GooglePubSubPublisher,
)
from socialnetwork.oauth import router as oauth_router  # noqa: E402
from socialnetwork.oauth.config import SocialNetworkConfig, get_config  # noqa: E402

logger = logging.getLogger(__name__)


# ============================================================================
# Dependency Injection Configuration (Wiring)
# ============================================================================


def create_observer(config: SocialNetworkConfig) -> CompletionObserver:
    """
    Provide the completion observer.

    Publishes to Pub/Sub when a topic is configured, otherwise only logs.
    """
    if config.publishes_to_pubsub:
        return GooglePubSubPublisher(
            project_id=config.gcp_project_id, topic_name=config.pubsub_topic_name
        )
    return LoggingCompletionObserver()


def create_dispatcher(
    config: SocialNetworkConfig,
    loop: asyncio.AbstractEventLoop,
    observer: CompletionObserver | None = None,
) -> RedirectDispatcher:
    """
    Wire the redirect dispatcher with its infrastructure dependencies.

    Completions are delivered on `loop`.
    """
    return RedirectDispatcher(
        credentials=config.credential_registry(),
        exchange_client=CodeExchangeClient(HttpxFormTransport()),
        notifier=CompletionNotifier(loop=loop, observer=observer),
        redirect_url=config.redirect_url,
    )


# ============================================================================
# Application Lifecycle
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Binds the dispatcher to the serving event loop, which becomes the
    delivery context for every completion event.
    """
    logger.info("Application starting up...")
    config = get_config()
    observer = create_observer(config)

    app.state.authorization_builder = AuthorizationRequestBuilder(
        config.credential_registry(), redirect_url=config.redirect_url
    )
    app.state.dispatcher = create_dispatcher(
        config, asyncio.get_running_loop(), observer
    )
    logger.info(f"Configured providers: {config.get_configured_providers()}")

    yield

    logger.info("Shutting down application...")
    try:
        await app.state.dispatcher.wait_idle()
    except Exception as e:
        logger.warning(f"Error waiting for in-flight exchanges during shutdown: {e}")
    if config.publishes_to_pubsub:
        try:
            await observer.drain()
        except Exception as e:
            logger.warning(f"Error draining completion publishes during shutdown: {e}")
        try:
            observer.close()
        except Exception as e:
            logger.warning(f"Error closing completion publisher during shutdown: {e}")


app = FastAPI(
    title="SocialNetwork OAuth",
    description="Normalizes Facebook, Google, Odnoklassniki and Vkontakte OAuth2 redirects",
    version="1.0.0",
    lifespan=lifespan,
)


# ============================================================================
# Centralized Exception Handlers
# ============================================================================


@app.exception_handler(RedirectValidationError)
async def redirect_validation_error_handler(
    request: Request, exc: RedirectValidationError
):
    """
    Handle malformed web redirects (missing/invalid state, unknown provider).

    Returns 400 Bad Request; no completion event is fired.
    """
    logger.warning(f"Rejected redirect: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "status": "error",
            "error": type(exc).__name__,
            "message": str(exc),
        },
    )


@app.exception_handler(UnsupportedFlowError)
async def unsupported_flow_error_handler(request: Request, exc: UnsupportedFlowError):
    """Handle requests for a flow the provider does not offer."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"status": "error", "message": str(exc)},
    )


@app.exception_handler(MissingCredentialsError)
async def missing_credentials_error_handler(
    request: Request, exc: MissingCredentialsError
):
    """
    Handle providers that are used without being configured.

    Returns 503 Service Unavailable: this is a deployment problem, not a
    client error.
    """
    logger.error(f"Configuration error: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "error", "message": str(exc)},
    )


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "socialnetwork",
        "timestamp": datetime.now(UTC).isoformat(),
    }


@app.get("/health")
async def health():
    """Health check endpoint for Cloud Run."""
    return {"status": "healthy"}


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(oauth_router.router)


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8080))
    uvicorn.run(app, host="0.0.0.0", port=port)
