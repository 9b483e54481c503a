"""
FastAPI dependencies for OAuth endpoints.

Provides dependency injection for the redirect dispatcher, the
authorization request builder and provider validation.
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from socialnetwork.core.authorization import AuthorizationRequestBuilder
from socialnetwork.core.dispatcher import RedirectDispatcher
from socialnetwork.core.domain import Provider
from socialnetwork.oauth.config import SUPPORTED_PROVIDERS


logger = logging.getLogger(__name__)


def get_dispatcher(request: Request) -> RedirectDispatcher:
    """
    Provide the redirect dispatcher.

    The dispatcher is bound to the serving event loop, so it is created in
    the application lifespan and stored on app.state.
    """
    return request.app.state.dispatcher


def get_authorization_builder(request: Request) -> AuthorizationRequestBuilder:
    """Provide the authorization request builder."""
    return request.app.state.authorization_builder


async def validate_provider(provider: str) -> Provider:
    """
    Validate that the provider is supported.

    Args:
        provider: OAuth provider name from path

    Returns:
        Validated provider

    Raises:
        HTTPException: If provider is unknown
    """
    if provider not in SUPPORTED_PROVIDERS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown provider: {provider}. Supported: {SUPPORTED_PROVIDERS}",
        )
    return Provider(provider)


# Type aliases for cleaner dependency injection
ValidProvider = Annotated[Provider, Depends(validate_provider)]
Dispatcher = Annotated[RedirectDispatcher, Depends(get_dispatcher)]
AuthorizationBuilder = Annotated[
    AuthorizationRequestBuilder, Depends(get_authorization_builder)
]
