"""Wire models for the address API."""

from pydantic import BaseModel, ConfigDict, Field


class Address(BaseModel):
    """A single address suggestion returned by the geocoding provider."""

    value: str
    unrestricted_value: str = ""
    city: str | None = None
    street: str | None = None
    house: str | None = None
    postal_code: str | None = None
    lat: str | None = None
    lon: str | None = None


class SearchRequest(BaseModel):
    """Free-text address query, e.g. "Москва Обуховская 11"."""

    model_config = ConfigDict(strict=True)

    query: str = ""


class GeocodeRequest(BaseModel):
    """Coordinates for reverse geocoding, as strings."""

    model_config = ConfigDict(strict=True)

    lat: str = ""
    lng: str = ""


class SearchResponse(BaseModel):
    addresses: list[Address] = Field(default_factory=list)


class GeocodeResponse(BaseModel):
    addresses: list[Address] = Field(default_factory=list)
