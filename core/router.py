"""Request routing logic - determines local dispatch vs backend forwarding."""

from dataclasses import dataclass
from typing import Literal

LOCAL = "local"
BACKEND = "backend"


@dataclass(frozen=True)
class RouteDecision:
    """Routing decision for a request."""

    route: str
    reason: str = ""

    @property
    def is_local(self) -> bool:
        return self.route == LOCAL


class RouteDecider:
    """Decide whether a request is handled here or forwarded to the backend."""

    def __init__(
        self,
        local_prefixes: list[str],
        backend_authority: str,
        match_mode: Literal["prefix", "segment"] = "prefix",
    ):
        self.local_prefixes = list(local_prefixes)
        self.backend_authority = backend_authority.lower()
        self.match_mode = match_mode

    def decide(self, path: str, host: str | None) -> RouteDecision:
        """Return the route for a raw request path and its Host header."""
        prefix = self._matching_prefix(path)
        if prefix is not None:
            return RouteDecision(route=LOCAL, reason=f"prefix {prefix}")
        # Request already addressed to the backend: forwarding would loop
        if host and host.lower() == self.backend_authority:
            return RouteDecision(route=LOCAL, reason="host is backend")
        return RouteDecision(route=BACKEND)

    def _matching_prefix(self, path: str) -> str | None:
        for prefix in self.local_prefixes:
            if self._matches(path, prefix):
                return prefix
        return None

    def _matches(self, path: str, prefix: str) -> bool:
        if self.match_mode == "segment":
            prefix = prefix.rstrip("/")
            return path == prefix or path.startswith(prefix + "/")
        # Literal string prefix: "/api" also matches "/api-old"
        return path.startswith(prefix)
