"""Tests for the shared-secret auth gate and the /auth cookie exchange.

Covers:
- Missing credential -> 401 JSON, handler never runs
- Bearer token and app_token cookie both accepted
- Wrong, empty, and different-case tokens rejected
- /auth sets the cookie and redirects, or 401 plain text
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from doctracker.config import Settings
from doctracker.main import create_app


PROTECTED_GETS = ["/api/reviews", "/api/reviews/some-doc", "/api/issues", "/api/gaps", "/api/stats", "/"]


# =============================================================================
#  Auth gate
# =============================================================================


class TestAuthGate:
    @pytest.mark.parametrize("path", PROTECTED_GETS)
    def test_missing_credential_returns_401(self, client: TestClient, path: str) -> None:
        response = client.get(path)
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    @pytest.mark.parametrize(
        "mangle",
        [lambda t: "", lambda t: "wrong", str.upper, lambda t: t[:-1], lambda t: t + "x"],
        ids=["empty", "other", "upper-case", "truncated", "extended"],
    )
    def test_wrong_bearer_token_returns_401(
        self, client: TestClient, token: str, mangle: Callable[[str], str]
    ) -> None:
        response = client.get("/api/issues", headers={"Authorization": f"Bearer {mangle(token)}"})
        assert response.status_code == 401

    def test_wrong_cookie_returns_401(self, client: TestClient) -> None:
        response = client.get("/api/issues", headers={"Cookie": "app_token=wrong"})
        assert response.status_code == 401

    def test_bearer_token_accepted(self, client: TestClient, token: str) -> None:
        response = client.get("/api/issues", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json() == []

    def test_cookie_accepted(self, client: TestClient, token: str) -> None:
        response = client.get(
            "/api/issues",
            headers={"Cookie": f"theme=dark; app_token={token}"},
        )
        assert response.status_code == 200

    def test_wrong_bearer_with_valid_cookie_accepted(self, client: TestClient, token: str) -> None:
        response = client.get(
            "/api/issues",
            headers={"Authorization": "Bearer nope", "Cookie": f"app_token={token}"},
        )
        assert response.status_code == 200

    def test_rejected_write_never_reaches_handler(
        self, client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        rejected = client.post(
            "/api/issues",
            json={"issue_type": "typo", "description": "should not be stored"},
            headers={"Authorization": "Bearer wrong"},
        )
        assert rejected.status_code == 401

        stored = client.get("/api/issues", params={"status": "all"}, headers=auth_headers)
        assert stored.json() == []

    def test_health_needs_no_credential(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


# =============================================================================
#  /auth cookie exchange
# =============================================================================


class TestCookieExchange:
    def test_valid_token_sets_cookie_and_redirects(self, client: TestClient, token: str) -> None:
        response = client.get("/auth", params={"token": token}, follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/"

        set_cookie = response.headers["set-cookie"]
        assert f"app_token={token}" in set_cookie
        assert "HttpOnly" in set_cookie
        assert "Max-Age=31536000" in set_cookie
        assert "Path=/" in set_cookie
        assert "samesite=strict" in set_cookie.lower()

    def test_invalid_token_returns_plain_401(self, client: TestClient) -> None:
        response = client.get("/auth", params={"token": "wrong"}, follow_redirects=False)
        assert response.status_code == 401
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Invalid token"
        assert "set-cookie" not in response.headers

    def test_missing_token_returns_401(self, client: TestClient) -> None:
        response = client.get("/auth", follow_redirects=False)
        assert response.status_code == 401

    def test_issued_cookie_opens_the_ui(self, client: TestClient, token: str) -> None:
        client.get("/auth", params={"token": token}, follow_redirects=False)
        response = client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Doc Tracker" in response.text

    @pytest.mark.parametrize("secret", ["YWJj/ZGVm==", "abc/def", "k=v=="])
    def test_cookie_round_trip_for_non_token_characters(self, tmp_path: Path, secret: str) -> None:
        """Secrets with "=" or "/" come back from the browser exactly as issued."""
        settings = Settings(
            _env_file=None,
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'tracker.db'}",
            database_ssl=False,
            app_token=secret,
        )
        with TestClient(create_app(settings), raise_server_exceptions=False) as client:
            issued = client.get("/auth", params={"token": secret}, follow_redirects=False)
            assert issued.status_code == 302

            cookie_pair = issued.headers["set-cookie"].split(";")[0]
            assert cookie_pair == f"app_token={secret}"

            client.cookies.clear()
            response = client.get("/api/issues", headers={"Cookie": cookie_pair})
            assert response.status_code == 200


# =============================================================================
#  Static assets
# =============================================================================


class TestStaticAssets:
    def test_asset_served_verbatim(self, client: TestClient) -> None:
        response = client.get("/app.js")
        assert response.status_code == 200
        assert "/api/stats" in response.text

    def test_unknown_asset_is_404(self, client: TestClient) -> None:
        assert client.get("/nope.css").status_code == 404

    def test_missing_entry_document_warned_once_at_startup(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        settings = Settings(
            _env_file=None,
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'tracker.db'}",
            database_ssl=False,
            app_token="secret",
            static_dir=tmp_path,
        )
        with caplog.at_level(logging.WARNING):
            with TestClient(create_app(settings), raise_server_exceptions=False) as client:
                for _ in range(2):
                    client.get("/", headers={"Authorization": "Bearer secret"})

        warnings = [r for r in caplog.records if "UI entry document not found" in r.getMessage()]
        assert len(warnings) == 1
