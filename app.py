"""FastAPI application factory."""

from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles

from api.handlers import handle_geocode, handle_search
from api.middleware import ReverseProxyMiddleware
from auth import Credentials
from core.config import Config
from core.exceptions import ConfigurationError
from core.headers import HeaderBuilder
from core.protocols import GeoProvider, RequestLogger
from core.router import RouteDecider
from core.transform import RequestTransformer
from services.geocoder import DadataGeocoder
from services.routing_service import RoutingService
from services.targets import BackendTarget
from services.upstream import UpstreamClient

SWAGGER_DIR = Path(__file__).parent / "api" / "swagger"


def create_app(
    config: Config,
    logger: RequestLogger,
    credentials: Credentials | None = None,
    *,
    geocoder: GeoProvider | None = None,
    backend_transport: httpx.AsyncBaseTransport | None = None,
    geocoder_transport: httpx.AsyncBaseTransport | None = None,
    docs_dir: Path = SWAGGER_DIR,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Transports are only injected by tests; in production httpx opens real
    connections.
    """
    if geocoder is None and not (credentials and credentials.api_key):
        raise ConfigurationError("Geocoder API key not configured")

    target = BackendTarget.from_settings(config.backend)
    header_builder = HeaderBuilder(config.routing.marker_header)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(max_connections=100, max_keepalive_connections=20)
        backend_client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.backend.timeout),
            limits=limits,
            transport=backend_transport,
            trust_env=False,
        )
        geocoder_client = httpx.AsyncClient(
            base_url=config.geocoder.base_url,
            timeout=config.geocoder.timeout,
            limits=limits,
            transport=geocoder_transport,
        )
        app.state.upstream_client = UpstreamClient(backend_client, header_builder)
        app.state.geocoder = geocoder or DadataGeocoder(
            geocoder_client,
            api_key=credentials.api_key,
            secret_key=credentials.secret_key,
            count=config.geocoder.count,
        )
        app.state.routing_service = RoutingService(
            target=target,
            decider=RouteDecider(
                config.routing.local_prefixes,
                target.authority,
                config.routing.match_mode,
            ),
            transformer=RequestTransformer(),
            header_builder=header_builder,
        )
        try:
            yield
        finally:
            await backend_client.aclose()
            await geocoder_client.aclose()

    # /docs, /redoc and /openapi.json belong to the backend
    app = FastAPI(
        title="Geoservice Proxy",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.add_middleware(ReverseProxyMiddleware, logger=logger)

    @app.post("/api/address/search")
    async def address_search(request: Request):
        return await handle_search(request, config, logger)

    @app.post("/api/address/geocode")
    async def address_geocode(request: Request):
        return await handle_geocode(request, config, logger)

    app.mount("/swagger", StaticFiles(directory=docs_dir, html=True), name="swagger")

    return app
