"""HTTP proxying to the backend with streaming pass-through."""

from collections.abc import AsyncIterable

import httpx
from fastapi import Response
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from core.exceptions import UpstreamConnectionError, UpstreamError, UpstreamTimeoutError
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import PreparedRequest


class UpstreamClient:
    """Send prepared requests to the backend and relay the answer verbatim."""

    def __init__(self, backend_client: httpx.AsyncClient, header_builder: HeaderBuilder) -> None:
        self._client = backend_client
        self._headers = header_builder

    async def forward(
        self,
        prepared: PreparedRequest,
        content: AsyncIterable[bytes] | None,
        logger: RequestLogger,
        path: str,
    ) -> Response | StreamingResponse:
        """Proxy a request; transport failures become 502/504 responses."""
        try:
            response = await self._send(prepared, content)
        except UpstreamError as e:
            logger.log_error("backend", e.status_code, str(e))
            return Response(
                content=f'{{"error": "{e}"}}',
                status_code=e.status_code,
                media_type="application/json",
            )

        logger.log_proxy(
            prepared.method,
            path,
            prepared.target_url,
            response.status_code,
            headers=dict(prepared.headers),
        )
        if response.status_code >= 500:
            logger.log_error("backend", response.status_code, prepared.target_url)

        # Transports may hand back an already-read body
        if response.is_stream_consumed:
            body = iter([response.content])
        else:
            body = response.aiter_raw()
        relayed = StreamingResponse(
            body,
            status_code=response.status_code,
            background=BackgroundTask(self._cleanup_streaming, response),
        )
        relayed.raw_headers = [
            (key.encode("latin-1"), value.encode("latin-1"))
            for key, value in self._headers.build_client_headers(response.headers.multi_items())
        ]
        return relayed

    async def _send(
        self,
        prepared: PreparedRequest,
        content: AsyncIterable[bytes] | None,
    ) -> httpx.Response:
        """Send and wait for response headers only; the body is streamed later."""
        req = self._client.build_request(
            prepared.method,
            prepared.target_url,
            headers=prepared.headers,
            content=content,
        )
        try:
            return await self._client.send(req, stream=True)
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError("Upstream timeout", target=prepared.target_url) from e
        except httpx.RequestError as e:
            raise UpstreamConnectionError(
                f"Upstream connection error: {type(e).__name__}",
                target=prepared.target_url,
            ) from e

    async def _cleanup_streaming(self, response: httpx.Response) -> None:
        """Clean up streaming resources."""
        await response.aclose()
