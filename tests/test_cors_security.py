import importlib
import sys


def load_app(monkeypatch, cors_value):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", cors_value)
    for module in ["main", "app.config"]:
        if module in sys.modules:
            del sys.modules[module]
    main = importlib.import_module("main")
    return main.app


def test_cors_preflight_allows_whitelisted_origin(monkeypatch):
    app = load_app(monkeypatch, "http://localhost:3000,https://app.example.com")
    app.config.update(TESTING=True)
    client = app.test_client()
    resp = client.open(
        "/__ok",
        method="OPTIONS",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert resp.status_code in (200, 204)
    assert resp.headers.get("Access-Control-Allow-Origin") == "http://localhost:3000"
    vary = resp.headers.get("Vary")
    if vary:
        assert "Origin" in vary


def test_cors_preflight_blocks_disallowed_origin(monkeypatch):
    app = load_app(monkeypatch, "https://app.example.com")
    app.config.update(TESTING=True)
    client = app.test_client()
    resp = client.open(
        "/__ok",
        method="OPTIONS",
        headers={
            "Origin": "http://evil.test",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert resp.status_code in (200, 204)
    assert "Access-Control-Allow-Origin" not in resp.headers


def test_security_headers_and_expose_request_id(monkeypatch):
    app = load_app(monkeypatch, "*")
    app.config.update(TESTING=True)
    client = app.test_client()
    resp = client.get(
        "/__ok",
        headers={"Origin": "http://any.test", "X-Request-ID": "abc-123"},
    )
    assert resp.status_code == 200
    assert resp.headers.get("X-Content-Type-Options") == "nosniff"
    assert resp.headers.get("X-Frame-Options") == "DENY"
    assert resp.headers.get("Referrer-Policy") == "no-referrer"
    assert resp.headers.get("X-Request-ID") == "abc-123"
    expose = resp.headers.get("Access-Control-Expose-Headers", "")
    assert "X-Request-ID" in expose



def test_api_preflight_allows_authorization_header(monkeypatch):
    app = load_app(monkeypatch, "https://app.example.com")
    app.config.update(TESTING=True)
    client = app.test_client()
    resp = client.open(
        "/api/v1/cart",
        method="OPTIONS",
        headers={
            "Origin": "https://app.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization, Content-Type",
        },
    )
    assert resp.status_code in (200, 204)
    assert resp.headers.get("Access-Control-Allow-Origin") == "https://app.example.com"
    allowed = resp.headers.get("Access-Control-Allow-Headers", "").lower()
    assert "authorization" in allowed


def test_origin_whitelist_follows_environment_between_apps(monkeypatch):
    open_app = load_app(monkeypatch, "*")
    open_app.config.update(TESTING=True)
    assert open_app.test_client().get("/__ok", headers={"Origin": "http://evil.test"}).headers.get(
        "Access-Control-Allow-Origin"
    )

    # app.config stays imported from the first load
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "https://app.example.com")
    del sys.modules["main"]
    strict_app = importlib.import_module("main").app
    strict_app.config.update(TESTING=True)
    resp = strict_app.test_client().get("/__ok", headers={"Origin": "http://evil.test"})
    assert "Access-Control-Allow-Origin" not in resp.headers


def test_gated_preflights_skip_authentication(monkeypatch):
    app = load_app(monkeypatch, "https://app.example.com")
    app.config.update(TESTING=True)
    client = app.test_client()
    for path in ("/api/v1/cart", "/api/v1/admin/users", "/api/v1/vendor/orders",
                 "/api/v1/regional-admin/users", "/api/v1/customer/wishlist", "/api/v1/wishlist"):
        resp = client.open(
            path,
            method="OPTIONS",
            headers={
                "Origin": "https://app.example.com",
                "Access-Control-Request-Method": "GET",
                "Access-Control-Request-Headers": "Authorization",
            },
        )
        assert resp.status_code in (200, 204), path
        assert resp.headers.get("Access-Control-Allow-Origin") == "https://app.example.com"


def test_gated_endpoint_still_requires_token(monkeypatch):
    app = load_app(monkeypatch, "https://app.example.com")
    app.config.update(TESTING=True)
    assert app.test_client().get("/api/v1/cart").status_code == 401
