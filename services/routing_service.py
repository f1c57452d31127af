"""Routing orchestration for inbound requests."""

from collections.abc import Iterable

from core.headers import HeaderBuilder
from core.request_types import PreparedRequest
from core.router import RouteDecider, RouteDecision
from core.transform import RequestTransformer
from services.targets import BackendTarget


class RoutingService:
    """Classify requests and prepare the outbound copy for forwarded ones."""

    def __init__(
        self,
        target: BackendTarget,
        decider: RouteDecider,
        transformer: RequestTransformer,
        header_builder: HeaderBuilder,
    ) -> None:
        self.target = target
        self._decider = decider
        self._transformer = transformer
        self._headers = header_builder

    def decide(self, path: str, host: str | None) -> RouteDecision:
        return self._decider.decide(path, host)

    def prepare(
        self,
        method: str,
        path: str,
        query: str,
        headers: Iterable[tuple[str, str]],
        *,
        client_host: str | None = None,
        original_host: str | None = None,
        original_scheme: str = "http",
    ) -> PreparedRequest:
        """Build the backend request; the inbound headers are left untouched."""
        url = self._transformer.rewrite_url(self.target, path, query)
        upstream_headers = self._headers.build_backend_headers(
            headers,
            self.target.authority,
            client_host=client_host,
            original_host=original_host,
            original_scheme=original_scheme,
        )
        return PreparedRequest(method, url, upstream_headers)
