"""DaData suggestions API client used as the geocoding collaborator."""

import math
from json import JSONDecodeError
from typing import Any

import httpx

from core.exceptions import GeocoderError
from core.models import Address


class DadataGeocoder:
    """Address search and reverse geocoding over the DaData suggestions API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        secret_key: str = "",
        count: int = 10,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._secret_key = secret_key
        self._count = count

    async def address_search(self, query: str) -> list[Address]:
        """Suggest addresses matching free text; [] when nothing matches."""
        if not query.strip():
            return []
        payload = {"query": query, "count": self._count}
        return await self._suggest("/suggest/address", payload)

    async def geocode(self, lat: str, lng: str) -> list[Address]:
        """Addresses nearest to a point; [] for unparseable or out-of-range input."""
        point = _parse_point(lat, lng)
        if point is None:
            return []
        payload = {"lat": point[0], "lon": point[1], "count": self._count}
        return await self._suggest("/geolocate/address", payload)

    async def _suggest(self, path: str, payload: dict[str, Any]) -> list[Address]:
        try:
            response = await self._client.post(path, json=payload, headers=self._auth_headers())
        except httpx.TimeoutException as e:
            raise GeocoderError("Geocoder timeout") from e
        except httpx.RequestError as e:
            raise GeocoderError(f"Geocoder connection error: {e}") from e

        if response.status_code != 200:
            raise GeocoderError(
                f"Geocoder returned {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        try:
            data = response.json()
        except (JSONDecodeError, ValueError) as e:
            raise GeocoderError(f"Geocoder returned invalid JSON: {e}") from e

        suggestions = data.get("suggestions") if isinstance(data, dict) else None
        return [_to_address(s) for s in suggestions or [] if isinstance(s, dict)]

    def _auth_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Token {self._api_key}",
        }
        if self._secret_key:
            headers["X-Secret"] = self._secret_key
        return headers


def _parse_point(lat: str, lng: str) -> tuple[float, float] | None:
    try:
        lat_f, lng_f = float(lat), float(lng)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(lat_f) and math.isfinite(lng_f)):
        return None
    if abs(lat_f) > 90 or abs(lng_f) > 180:
        return None
    return lat_f, lng_f


def _to_address(suggestion: dict[str, Any]) -> Address:
    data = suggestion.get("data") or {}
    return Address(
        value=suggestion.get("value") or "",
        unrestricted_value=suggestion.get("unrestricted_value") or "",
        city=data.get("city"),
        street=data.get("street"),
        house=data.get("house"),
        postal_code=data.get("postal_code"),
        lat=_as_str(data.get("geo_lat")),
        lon=_as_str(data.get("geo_lon")),
    )


def _as_str(value: Any) -> str | None:
    return None if value is None else str(value)
