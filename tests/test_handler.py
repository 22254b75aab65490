import json
import socket
import threading
from http.server import HTTPServer

import pytest
import requests

from api import download, simple
from conftest import StubProvider
from tubechain.events import EventRecorder
from tubechain.normalizer import normalize

# local server; keep proxy settings from the environment out of the way
client = requests.Session()
client.trust_env = False

VARIANT = {"quality": "720p", "url": "https://cdn.example/abc123.mp4", "mime": "video/mp4"}


def serve(handler_class):
    server = HTTPServer(("127.0.0.1", 0), handler_class)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server


@pytest.fixture
def chain():
    return {
        "a": StubProvider("A", result=normalize({"identifier": "abc123", "variants": []}, "A")),
        "b": StubProvider("B", result=normalize({"identifier": "abc123", "variants": [VARIANT]}, "B")),
    }


@pytest.fixture
def endpoint(chain):
    handler_class = type("TestHandler", (download.Handler,), {
        "providers": [chain["a"], chain["b"]],
        "timeout": 1,
        "deadline": 5,
        "events": EventRecorder(),
    })
    server = serve(handler_class)
    yield f"http://127.0.0.1:{server.server_address[1]}/api/download"
    server.shutdown()
    server.server_close()


def test_success_response(endpoint, chain):
    response = client.get(endpoint, params={"url": "https://example.com/watch?v=abc123"}, timeout=5)

    assert response.status_code == 200
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    body = response.json()
    assert body["status"] == "success"
    assert body["source"] == "B"
    assert body["media_variants"][0]["url"] == "https://cdn.example/abc123.mp4"
    assert (chain["a"].calls, chain["b"].calls) == (1, 1)


def test_missing_url_is_client_error(endpoint, chain):
    response = client.get(endpoint, timeout=5)

    assert response.status_code == 400
    body = response.json()
    assert body["status"] == "error"
    assert body["message"]
    assert "example" in body
    assert chain["a"].calls == 0


def test_empty_url_never_invokes_providers(endpoint, chain):
    response = client.get(endpoint, params={"url": ""}, timeout=5)

    assert response.status_code == 400
    assert response.json()["status"] == "error"
    assert chain["a"].calls == 0 and chain["b"].calls == 0


def test_invalid_url_is_client_error(endpoint):
    response = client.get(endpoint, params={"url": "https://example.com/"}, timeout=5)

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid YouTube URL"


def test_post_json_body(endpoint):
    response = client.post(endpoint, json={"url": "https://youtu.be/abc123"}, timeout=5)

    assert response.status_code == 200
    assert response.json()["source"] == "B"


def test_preflight(endpoint):
    response = client.options(endpoint, timeout=5)

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert "OPTIONS" in response.headers["Access-Control-Allow-Methods"]


def test_all_declined_is_info_not_error():
    handler_class = type("DecliningHandler", (download.Handler,), {
        "providers": [StubProvider("A", error=RuntimeError("down")), StubProvider("B", result=None)],
        "timeout": 1,
        "deadline": 5,
        "events": EventRecorder(),
    })
    server = serve(handler_class)
    try:
        url = f"http://127.0.0.1:{server.server_address[1]}/api/download"
        response = client.get(url, params={"url": "https://youtu.be/xyz999"}, timeout=5)
    finally:
        server.shutdown()
        server.server_close()

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "info"
    assert body["identifier"] == "xyz999"
    assert body["alternative_links"]


def test_simple_endpoint(monkeypatch):
    monkeypatch.setattr(simple, "fetch_oembed", lambda identifier, timeout=None: {
        "title": "oEmbed title",
        "author": "Channel",
        "thumbnail": "https://i.ytimg.com/vi/abc123/hqdefault.jpg",
    })
    server = serve(simple.Handler)
    try:
        url = f"http://127.0.0.1:{server.server_address[1]}/api/simple"
        response = client.get(url, params={"url": "https://youtu.be/abc123"}, timeout=5)
        bad = client.get(url, timeout=5)
    finally:
        server.shutdown()
        server.server_close()

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "info"
    assert body["title"] == "oEmbed title"
    assert body["identifier"] == "abc123"
    assert body["alternative_links"]
    assert bad.status_code == 400


def test_non_string_url_is_client_error(endpoint, chain):
    response = client.post(endpoint, json={"url": 123}, timeout=5)

    assert response.status_code == 400
    body = response.json()
    assert body["status"] == "error"
    assert body["message"] == "Invalid YouTube URL"
    assert chain["a"].calls == 0


def test_bad_content_length_is_treated_as_empty_body(endpoint, chain):
    port = int(endpoint.split(":")[2].split("/")[0])
    request = (
        "POST /api/download HTTP/1.0\r\n"
        "Host: 127.0.0.1\r\n"
        "Content-Type: application/json\r\n"
        "Content-Length: abc\r\n"
        "\r\n"
    ).encode()
    with socket.create_connection(("127.0.0.1", port), timeout=5) as sock:
        sock.sendall(request)
        received = b""
        while True:
            chunk = sock.recv(4096)
            if not chunk:
                break
            received += chunk

    head, _, body = received.partition(b"\r\n\r\n")
    assert head.split(b"\r\n")[0].split()[1] == b"400"
    assert json.loads(body)["status"] == "error"
    assert chain["a"].calls == 0
