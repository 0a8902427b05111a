"""ASGI middleware wired into the FastAPI app."""
import re

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient

from corsware.middleware.cors import CORSMiddleware
from tests.conftest import run


def test_preflight_short_circuit(make_client):
    client = make_client()
    r = client.options("/health/live", headers={
        "Origin": "http://a.com",
        "Access-Control-Request-Method": "POST",
        "Access-Control-Request-Headers": "X-Foo,X-Bar",
    })
    assert r.status_code == 204
    assert r.headers["content-length"] == "0"
    assert r.content == b""
    assert r.headers["access-control-allow-origin"] == "*"
    assert r.headers["access-control-allow-methods"] == "GET,HEAD,PUT,PATCH,POST,DELETE"
    assert r.headers["access-control-allow-headers"] == "X-Foo,X-Bar"
    assert r.headers["vary"] == "Access-Control-Request-Headers"
    assert "x-request-id" not in r.headers


def test_preflight_custom_success_status(make_client):
    client = make_client({"options_success_status": 200, "max_age": 0})
    r = client.options("/health/live", headers={"Origin": "http://a.com"})
    assert r.status_code == 200
    assert r.headers["access-control-max-age"] == "0"
    assert r.content == b""


def test_preflight_continue_reaches_app(make_client):
    client = make_client({"preflight_continue": True})
    r = client.options("/health/live", headers={"Origin": "http://a.com"})
    # the route only accepts GET, so the app answers itself
    assert r.status_code == 405
    assert r.json()["code"] == "method_not_allowed"
    assert r.headers["access-control-allow-origin"] == "*"
    assert r.headers["access-control-allow-methods"] == "GET,HEAD,PUT,PATCH,POST,DELETE"
    assert "x-request-id" in r.headers


def test_actual_request_list_origin(make_client):
    client = make_client({
        "origin": ["http://a.com", re.compile(r"\.b\.com$")],
        "credentials": True,
        "exposed_headers": ["X-Request-ID"],
    })
    r = client.get("/health/live", headers={"Origin": "http://x.b.com"})
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "http://x.b.com"
    assert r.headers["access-control-allow-credentials"] == "true"
    assert r.headers["access-control-expose-headers"] == "X-Request-ID"
    assert "Origin" in r.headers["vary"]
    assert "access-control-allow-methods" not in r.headers

    r = client.get("/health/live", headers={"Origin": "http://evil.com"})
    assert r.status_code == 200
    assert "access-control-allow-origin" not in r.headers


def test_dynamic_origin_denial_passes_through(make_client):
    async def origin_for(origin):
        return None

    client = make_client({"origin": origin_for})
    r = client.get("/health/live", headers={"Origin": "http://a.com"})
    assert r.status_code == 200
    assert "access-control-allow-origin" not in r.headers


def test_dynamic_options_per_request(make_client):
    async def options_for(request):
        if request.origin == "http://trusted.com":
            return {"origin": True, "credentials": True}
        return {"origin": False}

    client = make_client(options_for)
    r = client.get("/health/live", headers={"Origin": "http://trusted.com"})
    assert r.headers["access-control-allow-origin"] == "http://trusted.com"
    assert r.headers["access-control-allow-credentials"] == "true"

    r = client.get("/health/live", headers={"Origin": "http://other.com"})
    assert "access-control-allow-origin" not in r.headers


def test_options_resolver_error_is_a_server_error(make_client):
    async def options_for(request):
        raise RuntimeError("config store down")

    client = make_client(options_for, raise_server_exceptions=False)
    r = client.get("/health/live", headers={"Origin": "http://a.com"})
    assert r.status_code == 500
    assert r.json()["code"] == "internal_error"
    assert "access-control-allow-origin" not in r.headers


def test_headers_set_by_app_are_kept():
    async def endpoint():
        return PlainTextResponse(
            "ok",
            headers={"Access-Control-Allow-Origin": "http://app.com", "Vary": "Accept-Encoding"},
        )

    app = FastAPI()
    app.add_api_route("/", endpoint)
    app.add_middleware(CORSMiddleware, options={"origin": "http://fixed.com"})
    r = TestClient(app).get("/", headers={"Origin": "http://a.com"})
    assert r.headers["access-control-allow-origin"] == "http://app.com"
    assert r.headers["vary"] == "Accept-Encoding, Origin"


def test_non_http_scope_passes_through():
    seen = []

    async def inner(scope, receive, send):
        seen.append(scope["type"])

    middleware = CORSMiddleware(inner)

    run(middleware({"type": "lifespan"}, None, None))
    assert seen == ["lifespan"]
