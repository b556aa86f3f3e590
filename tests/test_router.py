from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from welcome_server.common.config import ServerConfig
from welcome_server.common.schema import GreetingRequest
from welcome_server.serve.fastapi_app import create_app
from welcome_server.serve.router import GreetingRouter, raw_segment


@pytest.fixture()
def client() -> TestClient:
    return TestClient(create_app(ServerConfig()))


def test_handle_root() -> None:
    resp = GreetingRouter().handle_root(GreetingRequest.absent())
    assert resp.body == "Hello, World!"


def test_handle_named_verbatim() -> None:
    router = GreetingRouter()
    for name in ["Borris", " x ", "UPPER", "<script>", "50%", "a/b"]:
        assert router.handle_named(GreetingRequest.present(name)).body == "Hello, " + name


def test_handle_named_requires_name() -> None:
    with pytest.raises(ValueError):
        GreetingRouter().handle_named(GreetingRequest.absent())


def test_present_rejects_empty_name() -> None:
    with pytest.raises(ValueError):
        GreetingRequest.present("")


def test_handle_dispatches_on_name() -> None:
    router = GreetingRouter()
    assert router.handle(GreetingRequest.absent()).body == "Hello, World!"
    assert router.handle(GreetingRequest.present("Ada")).body == "Hello, Ada"


def test_handle_named_escape_toggle() -> None:
    req = GreetingRequest.present("<script>")
    assert GreetingRouter().handle_named(req).body == "Hello, <script>"
    assert GreetingRouter(escape=True).handle_named(req).body == "Hello, &lt;script&gt;"


def test_get_root(client: TestClient) -> None:
    r = client.get("/welcome/")
    assert r.status_code == 200
    assert r.text == "Hello, World!"
    assert r.headers["content-type"].startswith("text/plain")


def test_get_named(client: TestClient) -> None:
    r = client.get("/welcome/Borris")
    assert r.status_code == 200
    assert r.text == "Hello, Borris"


def test_get_named_is_not_escaped(client: TestClient) -> None:
    r = client.get("/welcome/<script>")
    assert r.status_code == 200
    assert r.text == "Hello, <script>"


def test_get_named_escaped_when_enabled() -> None:
    client = TestClient(create_app(ServerConfig(escape=True)))
    r = client.get("/welcome/<script>")
    assert r.status_code == 200
    assert r.text == "Hello, &lt;script&gt;"


def test_unmounted_path_is_not_found(client: TestClient) -> None:
    r = client.get("/unmounted-path")
    assert r.status_code == 404


def test_health_ok(client: TestClient) -> None:
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "prefix": "/welcome"}


def test_repeated_requests_are_identical(client: TestClient) -> None:
    bodies = {client.get("/welcome/Borris").text for _ in range(5)}
    assert bodies == {"Hello, Borris"}


def test_concurrent_requests_do_not_mix() -> None:
    app = create_app(ServerConfig())
    names = [f"user{i}" for i in range(32)]

    def _fetch(name: str) -> str:
        return TestClient(app).get(f"/welcome/{name}").text

    with ThreadPoolExecutor(max_workers=8) as pool:
        bodies = list(pool.map(_fetch, names))
    assert bodies == [f"Hello, {n}" for n in names]


def test_mount_custom_prefix() -> None:
    app = FastAPI()
    prefix = GreetingRouter().mount(app, "greetings/")
    assert prefix == "/greetings"
    client = TestClient(app)
    assert client.get("/greetings/").text == "Hello, World!"
    assert client.get("/greetings/Ada").text == "Hello, Ada"
    assert client.get("/welcome/Ada").status_code == 404


def test_mount_at_root_keeps_health() -> None:
    client = TestClient(create_app(ServerConfig(prefix="/")))
    assert client.get("/").text == "Hello, World!"
    assert client.get("/Ada").text == "Hello, Ada"
    assert client.get("/health").json()["status"] == "ok"


def test_router_mounted_twice() -> None:
    app = FastAPI()
    router = GreetingRouter()
    router.mount(app, "/a")
    router.mount(app, "/b")
    client = TestClient(app)
    assert client.get("/a/x").text == "Hello, x"
    assert client.get("/b/y").text == "Hello, y"


def test_get_named_with_encoded_slash(client: TestClient) -> None:
    r = client.get("/welcome/a%2Fb")
    assert r.status_code == 200
    assert r.text == "Hello, a/b"


def test_get_named_with_encoded_characters(client: TestClient) -> None:
    assert client.get("/welcome/50%25").text == "Hello, 50%"
    assert client.get("/welcome/a%3Fb").text == "Hello, a?b"
    assert client.get("/welcome/Borris%20Smith").text == "Hello, Borris Smith"


def test_get_two_segments_is_not_found(client: TestClient) -> None:
    assert client.get("/welcome/a/b").status_code == 404


def test_get_named_trailing_slash(client: TestClient) -> None:
    r = client.get("/welcome/Borris/")
    assert r.status_code == 200
    assert r.text == "Hello, Borris"


def test_get_bare_prefix_without_redirect(client: TestClient) -> None:
    r = client.get("/welcome", follow_redirects=False)
    assert r.status_code == 200
    assert r.text == "Hello, World!"


def test_raw_segment_without_raw_path() -> None:
    req = Request({"type": "http", "path": "/welcome/a/b", "headers": []})
    assert raw_segment(req, "a/b") is None
    assert raw_segment(req, "Ada") == "Ada"
    assert raw_segment(req, "Ada/") == "Ada"
    assert raw_segment(req, "") is None
