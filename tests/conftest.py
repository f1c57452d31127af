import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import BackendSettings, Config
from core.exceptions import GeocoderError
from core.models import Address


class RecordingLogger:
    def __init__(self):
        self.local = []
        self.proxied = []
        self.api = []
        self.errors = []

    def log_local(self, method, path, reason):
        self.local.append((method, path, reason))

    def log_proxy(self, method, path, target_url, status, headers=None):
        self.proxied.append((method, path, target_url, status))

    def log_api(self, endpoint, query, count):
        self.api.append((endpoint, query, count))

    def log_error(self, route, status, message):
        self.errors.append((route, status, message))


class FakeGeocoder:
    """In-memory stand-in for the geocoding provider."""

    def __init__(self):
        self.searches = []
        self.points = []
        self.fail = False
        self.known = {
            "Москва, ул Сухонская": [
                Address(value="г Москва, ул Сухонская", city="Москва", street="Сухонская"),
            ],
        }

    async def address_search(self, query):
        self.searches.append(query)
        if self.fail:
            raise GeocoderError("provider down")
        return self.known.get(query, [])

    async def geocode(self, lat, lng):
        self.points.append((lat, lng))
        if self.fail:
            raise GeocoderError("provider down")
        if (lat, lng) == ("55.878", "37.653"):
            return [Address(value="г Москва, ул Сухонская, д 11", city="Москва", house="11")]
        return []


class ChunkStream(httpx.AsyncByteStream):
    """Response body delivered in pieces, like a live socket."""

    def __init__(self, chunks):
        self.chunks = list(chunks)
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk

    async def aclose(self):
        self.closed = True


class BackendStub:
    """MockTransport handler recording what reached the backend."""

    def __init__(self):
        self.requests = []
        self.responder = self._default

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @staticmethod
    def _default(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            stream=ChunkStream([b"backend ", request.url.path.encode()]),
            headers={"X-Backend": "hugo", "Content-Type": "text/plain"},
        )


@pytest.fixture()
def config():
    return Config(backend=BackendSettings(host="hugo_task", port="1313"))


@pytest.fixture()
def logger():
    return RecordingLogger()


@pytest.fixture()
def geocoder():
    return FakeGeocoder()


@pytest.fixture()
def backend():
    return BackendStub()


@pytest.fixture()
def make_client(logger, geocoder, backend):
    clients = []

    def _make(config):
        app = create_app(
            config,
            logger,
            geocoder=geocoder,
            backend_transport=httpx.MockTransport(backend),
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture()
def client(make_client, config):
    return make_client(config)


@pytest.fixture()
def chunked():
    return ChunkStream
