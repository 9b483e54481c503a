"""
Authorization code exchange.

Trades the code returned by a web redirect for the provider's token
response and flattens it into a ParameterMap.
"""

import json
import logging
from typing import Any

from authlib.common.urls import url_encode

from socialnetwork.core.domain import ExchangeRequest, ParameterMap
from socialnetwork.core.exceptions import ExchangeResponseError
from socialnetwork.core.ports import FormTransport
from socialnetwork.core.profiles import get_profile


logger = logging.getLogger(__name__)

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


def flatten_token_response(body: bytes) -> ParameterMap:
    """
    Flatten a token endpoint response into a ParameterMap.

    String values pass through; everything else is kept as compact JSON
    text. Provider error fields are not treated specially.

    Raises:
        ExchangeResponseError: If the body is not a JSON object
    """
    try:
        data = json.loads(body)
    except ValueError as e:
        raise ExchangeResponseError(f"Token response is not JSON: {e}") from e

    if not isinstance(data, dict):
        raise ExchangeResponseError(
            f"Token response is not a JSON object: {type(data).__name__}"
        )

    return {str(key): _stringify(value) for key, value in data.items()}


class CodeExchangeClient:
    """Exchanges authorization codes at each provider's token endpoint."""

    def __init__(self, transport: FormTransport):
        self.transport = transport

    @staticmethod
    def build_body(request: ExchangeRequest) -> bytes:
        """Form-encode the token request body for the request's provider."""
        profile = get_profile(request.provider)
        params = [
            ("code", request.code),
            ("client_id", profile.public_client_id(request.credentials.client_id)),
            ("client_secret", request.credentials.client_secret or ""),
            ("redirect_uri", request.redirect_uri),
        ]
        if profile.token_grant_type:
            params.append(("grant_type", profile.token_grant_type))
        return url_encode(params).encode("utf-8")

    async def exchange(self, request: ExchangeRequest) -> ParameterMap:
        """
        Exchange an authorization code for the provider's token response.

        Args:
            request: Code, credentials snapshot and redirect URI

        Returns:
            Flattened token response

        Raises:
            ExchangeTransportError: If the token endpoint could not be reached
            ExchangeResponseError: If the response is not a JSON object
        """
        profile = get_profile(request.provider)
        logger.info(
            f"Exchanging authorization code for provider: {request.provider.value}",
            extra={"provider": request.provider.value},
        )

        body = await self.transport.send_form_post(
            profile.token_url, FORM_HEADERS, self.build_body(request)
        )
        parameters = flatten_token_response(body)

        logger.info(
            f"Code exchange completed for provider: {request.provider.value}",
            extra={"provider": request.provider.value, "keys": sorted(parameters)},
        )
        return parameters
