"""
OAuth2 API endpoints.

Provides the HTTP surface for the social network OAuth flows:
- GET /oauth/{provider}/authorize - Redirect to the provider's authorization page
- GET /oauth/{provider}/authorization-url - Authorization URL as JSON
- POST /oauth/redirect - Hand an inbound redirect URL to the dispatcher

Domain errors raised here are mapped to responses by the exception
handlers in main.py.
"""

import logging

from fastapi import APIRouter, Query, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field

from socialnetwork.oauth.dependencies import (
    AuthorizationBuilder,
    Dispatcher,
    ValidProvider,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/oauth", tags=["oauth"])


class InboundRedirect(BaseModel):
    """Inbound redirect URL delivered by the host application."""

    url: str = Field(description="Redirect URL as received by the host")


@router.get("/{provider}/authorize")
async def authorize(provider: ValidProvider, builder: AuthorizationBuilder):
    """
    Start the OAuth2 web authorization flow.

    Redirects the user to the provider's authorization page. The response
    type is chosen from the provider's configured credentials.

    Args:
        provider: OAuth provider name
        builder: Authorization request builder

    Returns:
        Redirect to provider's authorization page
    """
    url = builder.authorization_url(provider)

    logger.info(
        f"Starting OAuth flow for provider: {provider.value}",
        extra={"provider": provider.value},
    )

    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)


@router.get("/{provider}/authorization-url")
async def authorization_url(
    provider: ValidProvider,
    builder: AuthorizationBuilder,
    native: bool = Query(
        default=False, description="Build the provider application's URL instead"
    ),
):
    """
    Return an authorization URL without redirecting.

    Native URLs are opened by the host in the provider's installed
    application and always use the implicit grant.

    Args:
        provider: OAuth provider name
        builder: Authorization request builder
        native: Whether to build the native application URL

    Returns:
        Provider, flow and URL
    """
    if native:
        url = builder.app_authorization_url(provider)
        response_type = "token"
    else:
        url = builder.authorization_url(provider)
        response_type = builder.response_type(provider)

    return {
        "provider": provider.value,
        "native": native,
        "response_type": response_type,
        "url": url,
    }


@router.post("/redirect")
async def redirect(inbound: InboundRedirect, dispatcher: Dispatcher):
    """
    Handle an inbound redirect URL.

    The completion is delivered asynchronously to the registered observer;
    this endpoint only reports whether the URL was accepted.

    Args:
        inbound: Redirect URL
        dispatcher: Redirect dispatcher

    Returns:
        "accepted" when the URL belonged to a known flow, "ignored" otherwise
    """
    handled = dispatcher.handle(inbound.url)

    if not handled:
        logger.info("Ignoring unrecognized redirect URL")
        return {"status": "ignored"}

    return {"status": "accepted"}
