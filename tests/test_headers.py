from core.headers import HeaderBuilder
from core.router import RouteDecider
from core.transform import RequestTransformer
from services.routing_service import RoutingService
from services.targets import BackendTarget


def test_backend_headers_replace_host_and_add_marker():
    builder = HeaderBuilder()
    original = [
        ("host", "geo.example.com"),
        ("accept", "text/html"),
        ("cookie", "a=1"),
        ("connection", "keep-alive, x-private"),
        ("x-private", "drop me"),
        ("keep-alive", "timeout=5"),
    ]
    snapshot = list(original)

    headers = builder.build_backend_headers(
        original,
        "hugo_task:1313",
        client_host="10.0.0.7",
        original_host="geo.example.com",
    )
    as_dict = dict(headers)

    assert as_dict["host"] == "hugo_task:1313"
    assert as_dict["Reverse-Proxy"] == "true"
    assert as_dict["accept"] == "text/html"
    assert as_dict["cookie"] == "a=1"
    assert as_dict["x-forwarded-for"] == "10.0.0.7"
    assert as_dict["x-forwarded-host"] == "geo.example.com"
    assert as_dict["x-forwarded-proto"] == "http"
    assert "connection" not in as_dict
    assert "keep-alive" not in as_dict
    assert "x-private" not in as_dict
    assert original == snapshot


def test_backend_headers_extend_existing_forwarded_for():
    headers = HeaderBuilder().build_backend_headers(
        [("X-Forwarded-For", "1.2.3.4")],
        "hugo:1313",
        client_host="10.0.0.7",
    )
    assert dict(headers)["x-forwarded-for"] == "1.2.3.4, 10.0.0.7"


def test_incoming_marker_is_not_duplicated():
    headers = HeaderBuilder("X-Proxied").build_backend_headers(
        [("x-proxied", "spoofed")],
        "hugo:1313",
    )
    assert [v for k, v in headers if k.lower() == "x-proxied"] == ["true"]


def test_client_headers_keep_duplicates_and_drop_hop_by_hop():
    headers = HeaderBuilder().build_client_headers(
        [
            ("set-cookie", "a=1"),
            ("set-cookie", "b=2"),
            ("transfer-encoding", "chunked"),
            ("content-type", "text/html"),
        ]
    )
    assert headers == [("set-cookie", "a=1"), ("set-cookie", "b=2"), ("content-type", "text/html")]


def test_routing_service_prepares_outbound_copy():
    target = BackendTarget(host="hugo_task", port="1313")
    service = RoutingService(
        target=target,
        decider=RouteDecider(["/api"], target.authority),
        transformer=RequestTransformer(),
        header_builder=HeaderBuilder(),
    )
    inbound = [("host", "geo.example.com"), ("accept", "*/*")]

    prepared = service.prepare("GET", "/tasks", "q=1", inbound, original_host="geo.example.com")

    assert prepared.method == "GET"
    assert prepared.target_url == "http://hugo_task:1313/tasks?q=1"
    assert ("host", "hugo_task:1313") in prepared.headers
    assert ("Reverse-Proxy", "true") in prepared.headers
    assert inbound == [("host", "geo.example.com"), ("accept", "*/*")]
