"""
HTTP transport for token endpoint calls.

This is a driven adapter that implements the FormTransport port
defined in the core domain.
"""

import logging
from typing import Mapping, Optional

import httpx

from socialnetwork.core.exceptions import ExchangeTransportError


logger = logging.getLogger(__name__)


class HttpxFormTransport:
    """
    FormTransport implementation backed by httpx.

    A fresh client is opened per request; the response body is returned
    whatever the status code, since providers report grant errors as
    JSON bodies on 4xx responses.
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Args:
            timeout: Request timeout in seconds (httpx default when None)
        """
        self.timeout = timeout

    async def send_form_post(
        self, url: str, headers: Mapping[str, str], body: bytes
    ) -> bytes:
        client_kwargs = {} if self.timeout is None else {"timeout": self.timeout}
        try:
            async with httpx.AsyncClient(**client_kwargs) as client:
                response = await client.post(url, headers=dict(headers), content=body)
        except httpx.RequestError as e:
            logger.error(f"Network error calling token endpoint {url}: {e}")
            raise ExchangeTransportError(f"Network error: {e}") from e

        if response.is_error:
            logger.warning(
                f"Token endpoint {url} answered {response.status_code}",
                extra={"status_code": response.status_code},
            )
        return response.content
