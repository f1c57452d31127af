"""Reverse-proxy middleware: local dispatch or forward to the backend."""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from core.protocols import RequestLogger


class ReverseProxyMiddleware(BaseHTTPMiddleware):
    """Send API and docs traffic to the local app, everything else to the backend."""

    def __init__(self, app: ASGIApp, logger: RequestLogger) -> None:
        super().__init__(app)
        self._logger = logger

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        routing_service = request.app.state.routing_service
        path = request.url.path
        host = request.headers.get("host")

        decision = routing_service.decide(path, host)
        if decision.is_local:
            self._logger.log_local(request.method, path, decision.reason)
            return await call_next(request)

        prepared = routing_service.prepare(
            request.method,
            _raw_path(request),
            request.url.query,
            request.headers.items(),
            client_host=request.client.host if request.client else None,
            original_host=host,
            original_scheme=request.url.scheme,
        )
        content = request.stream() if _has_body(request) else None
        upstream = request.app.state.upstream_client
        return await upstream.forward(prepared, content, self._logger, path)


def _raw_path(request: Request) -> str:
    """Path exactly as received, percent-encoding intact."""
    raw = request.scope.get("raw_path")
    if raw:
        return raw.decode("latin-1")
    return request.url.path


def _has_body(request: Request) -> bool:
    if "transfer-encoding" in request.headers:
        return True
    return request.headers.get("content-length", "0") not in ("", "0")
