"""FastAPI route handlers for the address API."""

from typing import TypeVar

from fastapi import Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ValidationError

from core.config import Config
from core.exceptions import GeocoderError, InvalidRequestBody, RequestTooLarge
from core.models import GeocodeRequest, GeocodeResponse, SearchRequest, SearchResponse
from core.protocols import RequestLogger

SEARCH_PATH = "/api/address/search"
GEOCODE_PATH = "/api/address/geocode"

ModelT = TypeVar("ModelT", bound=BaseModel)


async def _parse_json_body(request: Request, model: type[ModelT], config: Config) -> ModelT:
    """Parse request body into model or raise InvalidRequestBody/RequestTooLarge."""
    raw_body = await request.body()
    if len(raw_body) > config.limits.max_body_size:
        raise RequestTooLarge("Request body too large")
    try:
        return model.model_validate_json(raw_body)
    except ValidationError as e:
        raise InvalidRequestBody(f"Invalid request body: {e.error_count()} error(s)") from e


def _bad_request(
    path: str,
    error: InvalidRequestBody | RequestTooLarge,
    logger: RequestLogger,
) -> Response:
    if isinstance(error, RequestTooLarge):
        logger.log_error(path, 413, str(error))
        return PlainTextResponse("Request body too large", status_code=413)
    logger.log_error(path, 400, str(error))
    return PlainTextResponse("Invalid request body", status_code=400)


def _first_param(request: Request, name: str) -> str:
    """First value of a repeated URL parameter, "" when absent."""
    values = request.query_params.getlist(name)
    return values[0] if values else ""


def _server_error(path: str, error: GeocoderError, logger: RequestLogger) -> Response:
    logger.log_error(path, 500, str(error))
    return PlainTextResponse("Internal server error", status_code=500)


async def handle_search(request: Request, config: Config, logger: RequestLogger) -> Response:
    """Handle /api/address/search.

    The `query` URL parameter wins; the JSON body is only read when the
    parameter is missing or empty.
    """
    query = _first_param(request, "query")
    if not query:
        try:
            body = await _parse_json_body(request, SearchRequest, config)
        except (InvalidRequestBody, RequestTooLarge) as e:
            return _bad_request(SEARCH_PATH, e, logger)
        query = body.query

    geocoder = request.app.state.geocoder
    try:
        addresses = await geocoder.address_search(query)
    except GeocoderError as e:
        return _server_error(SEARCH_PATH, e, logger)

    logger.log_api(SEARCH_PATH, query, len(addresses))
    return JSONResponse(SearchResponse(addresses=addresses).model_dump())


async def handle_geocode(request: Request, config: Config, logger: RequestLogger) -> Response:
    """Handle /api/address/geocode.

    `lat` and `lng` are taken from the URL when both are non-empty. Otherwise
    the JSON body is read, and each field it carries replaces the URL value.
    """
    lat = _first_param(request, "lat")
    lng = _first_param(request, "lng")
    if not lat or not lng:
        try:
            body = await _parse_json_body(request, GeocodeRequest, config)
        except (InvalidRequestBody, RequestTooLarge) as e:
            return _bad_request(GEOCODE_PATH, e, logger)
        if "lat" in body.model_fields_set:
            lat = body.lat
        if "lng" in body.model_fields_set:
            lng = body.lng

    geocoder = request.app.state.geocoder
    try:
        addresses = await geocoder.geocode(lat, lng)
    except GeocoderError as e:
        return _server_error(GEOCODE_PATH, e, logger)

    logger.log_api(GEOCODE_PATH, f"{lat},{lng}", len(addresses))
    return JSONResponse(GeocodeResponse(addresses=addresses).model_dump())
