"""Shared request data types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PreparedRequest:
    """Outbound copy of an inbound request, rewritten for the backend."""

    method: str
    target_url: str
    headers: list[tuple[str, str]]
