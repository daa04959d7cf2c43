"""Tests for the hardened static file server."""

import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from countdown.main import create_app
from countdown.server.security import (
    SECURITY_HEADERS,
    ForbiddenPath,
    RateLimiter,
    resolve_static_path,
)

INDEX_HTML = "<!DOCTYPE html>\n<html><body><h1>Countdown</h1></body></html>\n"


@pytest.fixture
def static_dir(tmp_path) -> Path:
    root = tmp_path / "static"
    (root / "images").mkdir(parents=True)
    (root / "index.html").write_text(INDEX_HTML)
    (root / "styles.css").write_text("body { margin: 0; }\n")
    (root / "app.js").write_text("console.log('hi');\n")
    (root / "big.html").write_text("<!DOCTYPE html>" + "<p>countdown</p>" * 200)
    (root / "images" / "countdown.png").write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 32)
    (root / "images" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 16)
    (root / ".env").write_text("SECRET=1\n")
    (root / "deploy.sh").write_text("#!/bin/sh\n")
    return root


@pytest.fixture
def client(static_dir):
    app = create_app(static_dir=str(static_dir), rate_limiter=RateLimiter(max_requests=1000))
    return TestClient(app)


class TestServing:
    def test_root_serves_index(self, client):
        res = client.get("/")
        assert res.status_code == 200
        assert res.headers["content-type"] == "text/html"
        assert "<!DOCTYPE html>" in res.text

    def test_html_not_cached(self, client):
        assert "no-cache" in client.get("/index.html").headers["cache-control"]

    def test_css(self, client):
        res = client.get("/styles.css")
        assert res.status_code == 200
        assert res.headers["content-type"] == "text/css"
        assert "max-age" in res.headers["cache-control"]

    def test_js(self, client):
        res = client.get("/app.js")
        assert res.headers["content-type"] == "text/javascript"
        assert "max-age" in res.headers["cache-control"]

    def test_nested_image(self, client):
        res = client.get("/images/countdown.png")
        assert res.status_code == 200
        assert res.headers["content-type"] == "image/png"

    def test_query_string_ignored(self, client):
        assert client.get("/index.html?v=2").status_code == 200

    def test_content_length(self, client):
        res = client.get("/index.html", headers={"Accept-Encoding": "identity"})
        assert res.headers["content-length"] == str(len(INDEX_HTML.encode()))

    def test_head(self, client):
        res = client.head("/index.html")
        assert res.status_code == 200
        assert res.headers["content-type"] == "text/html"
        assert res.headers["content-length"] == str(len(INDEX_HTML.encode()))
        assert res.content == b""

    def test_dashboard_image_not_cached(self, client):
        res = client.get("/images/countdown.png")
        assert res.headers["cache-control"] == "no-cache"

    def test_other_images_cached(self, client):
        assert client.get("/images/logo.png").headers["cache-control"] == "public, max-age=86400"

    def test_unreadable_file(self, client, monkeypatch):
        real_access = os.access
        monkeypatch.setattr(
            os, "access", lambda path, mode: Path(path).name != "styles.css" and real_access(path, mode)
        )

        res = client.get("/styles.css")

        assert res.status_code == 500
        assert res.text == "500 Internal Server Error"

    def test_gzip(self, client):
        res = client.get("/big.html", headers={"Accept-Encoding": "gzip"})
        assert res.status_code == 200
        assert res.headers["content-encoding"] == "gzip"
        assert "<p>countdown</p>" in res.text

    def test_missing_file(self, client):
        res = client.get("/missing.html")
        assert res.status_code == 404
        assert res.headers["content-type"] == "text/plain"
        assert res.text == "404 Not Found"

    def test_status(self, client):
        body = client.get("/status").json()
        assert body["status"] == "running"
        assert body["index_present"] is True


class TestSecurityHeaders:
    @pytest.mark.parametrize("path", ["/", "/styles.css", "/app.js", "/missing.html", "/.env"])
    def test_present_on_every_response(self, client, path):
        res = client.get(path)
        for name, value in SECURITY_HEADERS.items():
            assert res.headers[name] == value

    def test_values(self, client):
        headers = client.get("/").headers
        assert headers["x-frame-options"] == "DENY"
        assert headers["x-content-type-options"] == "nosniff"
        assert headers["x-xss-protection"] == "1; mode=block"
        assert headers["referrer-policy"] == "strict-origin-when-cross-origin"
        assert "geolocation=()" in headers["permissions-policy"]
        assert "default-src 'self'" in headers["content-security-policy"]


class TestMethods:
    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "PATCH"])
    def test_rejected(self, client, method):
        res = client.request(method, "/index.html")
        assert res.status_code == 405
        assert res.headers["allow"] == "GET, HEAD"
        assert res.headers["x-frame-options"] == "DENY"


class TestPathProtection:
    @pytest.mark.parametrize(
        "path",
        [
            "/%2e%2e/etc/passwd",
            "/%252e%252e/etc/passwd",
            "/images/%2e%2e/%2e%2e/secret.html",
            "/.env",
            "/.git/config",
            "/deploy.sh",
            "/images",
        ],
    )
    def test_forbidden(self, client, path):
        res = client.get(path)
        assert res.status_code == 403
        assert res.text == "403 Forbidden"


class TestRateLimit:
    def test_reasonable_volume(self, client):
        assert all(client.get("/index.html").status_code == 200 for _ in range(10))

    def test_limit_exceeded(self, static_dir):
        app = create_app(static_dir=str(static_dir), rate_limiter=RateLimiter(max_requests=3))
        client = TestClient(app)

        statuses = [client.get("/").status_code for _ in range(4)]

        assert statuses == [200, 200, 200, 429]
        res = client.get("/")
        assert res.status_code == 429
        assert int(res.headers["retry-after"]) > 0
        assert res.headers["x-content-type-options"] == "nosniff"


# ---- resolve_static_path ----

class TestResolveStaticPath:
    def test_root_is_index(self, static_dir):
        assert resolve_static_path(static_dir, "/") == (static_dir / "index.html").resolve()

    def test_plain_file(self, static_dir):
        assert resolve_static_path(static_dir, "/app.js") == (static_dir / "app.js").resolve()

    @pytest.mark.parametrize(
        "raw_path",
        [
            "/../etc/passwd",
            "//etc/passwd",
            "/images//countdown.png",
            "/%2e%2e/index.html",
            "/%252e%252e/index.html",
            "/..%5cindex.html",
            "/index.html%00.png",
            "/.hidden/index.html",
            "/run.exe",
            "/noext",
        ],
    )
    def test_rejected(self, static_dir, raw_path):
        with pytest.raises(ForbiddenPath):
            resolve_static_path(static_dir, raw_path)

    def test_symlink_escape(self, static_dir, tmp_path):
        outside = tmp_path / "outside.html"
        outside.write_text("secret")
        (static_dir / "link.html").symlink_to(outside)

        with pytest.raises(ForbiddenPath):
            resolve_static_path(static_dir, "/link.html")

    def test_extension_case_insensitive(self, static_dir):
        resolve_static_path(static_dir, "/INDEX.HTML")


class TestRateLimiter:
    def make(self, max_requests=3, window=60.0):
        self.now = 0.0
        return RateLimiter(max_requests=max_requests, window=window, clock=lambda: self.now)

    def test_under_limit(self):
        limiter = self.make()
        assert [limiter.allow("a") for _ in range(3)] == [True, True, True]

    def test_blocks_at_limit(self):
        limiter = self.make()
        for _ in range(3):
            limiter.allow("a")
        assert limiter.allow("a") is False

    def test_clients_are_independent(self):
        limiter = self.make(max_requests=1)
        assert limiter.allow("a") is True
        assert limiter.allow("b") is True
        assert limiter.allow("a") is False

    def test_resets_after_window(self):
        limiter = self.make(max_requests=1)
        limiter.allow("a")
        assert limiter.allow("a") is False

        self.now = 61.0
        assert limiter.allow("a") is True

    def test_retry_after(self):
        limiter = self.make(max_requests=1)
        limiter.allow("a")
        self.now = 20.0
        assert limiter.retry_after("a") == 41

    def test_prune(self):
        limiter = self.make()
        limiter.allow("a")
        self.now = 100.0
        limiter.prune()
        assert limiter._clients == {}
