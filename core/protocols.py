"""Shared protocol definitions."""

from typing import Protocol

from core.models import Address


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard, ConsoleLog)."""

    def log_local(self, method: str, path: str, reason: str) -> None: ...
    def log_proxy(
        self,
        method: str,
        path: str,
        target_url: str,
        status: int,
        headers: dict[str, str] | None = None,
    ) -> None: ...
    def log_api(self, endpoint: str, query: str, count: int) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...


class GeoProvider(Protocol):
    """External geocoding collaborator.

    Both calls return an empty list when nothing matches and raise
    GeocoderError only on transport or provider failure.
    """

    async def address_search(self, query: str) -> list[Address]: ...
    async def geocode(self, lat: str, lng: str) -> list[Address]: ...
