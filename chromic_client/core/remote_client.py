"""
Rendering Service Client
========================

HTTP client for the remote rendering service. Serializes a rendering request
to JSON, posts it to the operation's endpoint and returns the raw response
bytes. A single attempt is made per call.
"""

import asyncio
import base64
import json
from typing import Any, Dict, Mapping, Optional, Union

import aiohttp

from chromic_client.config.logging import get_logger
from chromic_client.core.errors import RemoteStatusError, TransportError
from chromic_client.models.schemas import Operation

logger = get_logger(__name__)

# Options that only make sense on the caller's machine
LOCAL_ONLY_OPTIONS = frozenset({"output"})


def build_options(options: Mapping[str, Any]) -> Dict[str, Any]:
    """Return the options to transmit, without the local-only entries."""
    return {key: value for key, value in options.items() if key not in LOCAL_ONLY_OPTIONS}


def build_payload(
    operation: Operation, content: Union[str, bytes], options: Mapping[str, Any]
) -> Dict[str, Any]:
    """
    Build the JSON request body for an operation.

    PDF content for conversion is base64 encoded, markup and URLs are sent
    as text.
    """
    if isinstance(content, bytes):
        # Raw PDF bytes cannot travel in a JSON string; the service must
        # base64-decode the ``pdf`` field
        content = base64.b64encode(content).decode("ascii")
    return {operation.body_field: content, "options": build_options(options)}


class RenderServiceClient:
    """Client for communicating with the remote rendering service."""

    def __init__(
        self,
        service_url: str = "http://localhost:8080",
        receive_timeout: float = 30.0,
        connect_timeout: float = 8.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.service_url = service_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(
            total=None, connect=connect_timeout, sock_read=receive_timeout
        )
        self.logger: Any = logger.bind(
            component="render_service_client"
        )  # structlog.BoundLoggerBase
        self._session = session

    def endpoint_url(self, operation: Operation) -> str:
        return f"{self.service_url}{operation.path}"

    async def render(
        self, operation: Operation, content: Union[str, bytes], options: Mapping[str, Any]
    ) -> bytes:
        """
        Run an operation on the rendering service.

        Args:
            operation: Operation to run
            content: Markup, URL, or PDF bytes for conversion
            options: Rendering options; ``output`` is never transmitted

        Returns:
            Response body bytes

        Raises:
            RemoteStatusError: If the service answers with a non-200 status
            TransportError: If the service cannot be reached or times out
        """
        url = self.endpoint_url(operation)
        body = json.dumps(build_payload(operation, content, options), default=str)
        headers = {"Content-Type": "application/json"}

        self.logger.debug(
            "Posting render request", operation=operation.value, url=url, body_size=len(body)
        )

        try:
            if self._session is not None:
                return await self._post(self._session, url, body, headers)
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                return await self._post(session, url, body, headers)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger.error(
                "Rendering service request failed",
                operation=operation.value,
                url=url,
                error=str(e) or type(e).__name__,
            )
            raise TransportError(e) from e

    async def _post(
        self, session: aiohttp.ClientSession, url: str, body: str, headers: Dict[str, str]
    ) -> bytes:
        async with session.post(url, data=body, headers=headers, timeout=self.timeout) as response:
            if response.status == 200:
                data = await response.read()
                self.logger.debug("Render response received", url=url, file_size=len(data))
                return data

            error_text = await response.text(errors="replace")
            self.logger.error(
                "Rendering service returned an error",
                url=url,
                status=response.status,
                response=error_text[:200],
            )
            raise RemoteStatusError(response.status, error_text)
