"""Header construction for proxied requests and relayed responses."""

from collections.abc import Iterable

# RFC 7230 section 6.1
HOP_BY_HOP = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "proxy-connection",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
    }
)


class HeaderBuilder:
    """Build outbound headers for the backend and relayed headers for the caller."""

    def __init__(self, marker_header: str = "Reverse-Proxy") -> None:
        self.marker_header = marker_header

    def build_backend_headers(
        self,
        headers: Iterable[tuple[str, str]],
        backend_authority: str,
        *,
        client_host: str | None = None,
        original_host: str | None = None,
        original_scheme: str = "http",
    ) -> list[tuple[str, str]]:
        """Return a new header list targeting the backend.

        The input is never modified; Host is replaced, the marker header and
        X-Forwarded-* headers are added.
        """
        headers = list(headers)
        connection_tokens = self._connection_tokens(headers)
        upstream: list[tuple[str, str]] = []
        forwarded_for = None
        for key, value in headers:
            key_lower = key.lower()
            if key_lower in HOP_BY_HOP or key_lower in connection_tokens:
                continue
            if key_lower in ("host", self.marker_header.lower()):
                continue
            if key_lower == "x-forwarded-for":
                forwarded_for = value
                continue
            upstream.append((key, value))

        upstream.append(("host", backend_authority))
        if client_host:
            forwarded_for = f"{forwarded_for}, {client_host}" if forwarded_for else client_host
        if forwarded_for:
            upstream.append(("x-forwarded-for", forwarded_for))
        if original_host:
            upstream.append(("x-forwarded-host", original_host))
        upstream.append(("x-forwarded-proto", original_scheme))
        upstream.append((self.marker_header, "true"))
        return upstream

    def build_client_headers(self, headers: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
        """Pass backend response headers through, minus hop-by-hop ones."""
        headers = list(headers)
        connection_tokens = self._connection_tokens(headers)
        return [
            (key, value)
            for key, value in headers
            if key.lower() not in HOP_BY_HOP and key.lower() not in connection_tokens
        ]

    @staticmethod
    def _connection_tokens(headers: Iterable[tuple[str, str]]) -> set[str]:
        tokens: set[str] = set()
        for key, value in headers:
            if key.lower() == "connection":
                tokens.update(t.strip().lower() for t in value.split(",") if t.strip())
        return tokens
