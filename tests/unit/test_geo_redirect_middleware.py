"""
Tests for the geo redirect middleware and the backend-request guard.
"""

from __future__ import annotations

import sqlite3

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from src.adapters.memory_store import InMemoryRuleStore
from src.api.main import create_app
from src.api.middleware import is_backend_request
from src.components.geo_redirect import Category, sanitize
from src.config.models import AppConfig, GuardConfig, HeaderConfig, RedirectConfig

TX_URL = "https://www.defendonlineprivacy.com/tx/"


def make_request(path: str, headers: dict[str, str] | None = None) -> Request:
    """Build a bare Starlette request for guard tests."""
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": path,
            "query_string": b"",
            "headers": raw_headers,
        }
    )


class FailingRuleStore:
    """Store whose reads always fail."""

    def get(self, category: Category) -> None:
        raise sqlite3.OperationalError("database is locked")

    def save(self, category: Category, rule_set: object) -> object:
        raise sqlite3.OperationalError("database is locked")


class TestRedirects:
    """Visitors matching an enabled rule get a 302."""

    def test_default_state_redirects(self, client: TestClient) -> None:
        response = client.get("/page", headers={"CF-Region-Code": "TX"}, follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == TX_URL

    def test_header_values_are_canonicalized(self, client: TestClient) -> None:
        response = client.get(
            "/page", headers={"CF-Region-Code": "ks"}, follow_redirects=False
        )

        assert response.status_code == 302
        assert response.headers["location"] == "https://www.defendonlineprivacy.com/ks/"

    def test_unrouted_path_still_redirects(self, client: TestClient) -> None:
        """The decision runs before routing."""
        response = client.get("/", headers={"CF-Region-Code": "TX"}, follow_redirects=False)

        assert response.status_code == 302

    def test_state_beats_country(
        self, client: TestClient, memory_store: InMemoryRuleStore
    ) -> None:
        memory_store.save(
            Category.STATES,
            sanitize(Category.STATES, {"NY": {"enabled": True, "url": "https://example.com/ny"}}),
        )
        memory_store.save(
            Category.COUNTRIES,
            sanitize(
                Category.COUNTRIES, {"FR": {"enabled": True, "url": "https://example.com/fr"}}
            ),
        )

        response = client.get(
            "/page",
            headers={"CF-Region-Code": "NY", "CF-IPCountry": "FR"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/ny"

    def test_country_redirect(self, client: TestClient, memory_store: InMemoryRuleStore) -> None:
        memory_store.save(
            Category.COUNTRIES,
            sanitize(Category.COUNTRIES, {"DE": {"enabled": True}}),
        )

        response = client.get("/page", headers={"CF-IPCountry": "de"}, follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "https://eff.org"


class TestPassThrough:
    """Requests without a matching rule continue to the app."""

    def test_no_headers(self, client: TestClient) -> None:
        response = client.get("/page")

        assert response.status_code == 200
        assert response.json() == {"page": "content"}

    def test_disabled_codes(self, client: TestClient) -> None:
        response = client.get("/page", headers={"CF-Region-Code": "CA", "CF-IPCountry": "FR"})

        assert response.status_code == 200

    def test_missing_region_disabled_country(self, client: TestClient) -> None:
        response = client.get("/page", headers={"CF-IPCountry": "DE"})

        assert response.status_code == 200

    def test_store_failure_does_not_block_request(self) -> None:
        app = create_app(store=FailingRuleStore())

        @app.get("/page")
        def page() -> dict[str, str]:
            return {"page": "content"}

        response = TestClient(app).get("/page", headers={"CF-Region-Code": "TX"})

        assert response.status_code == 200

    def test_master_switch_off(self, memory_store: InMemoryRuleStore) -> None:
        config = AppConfig(redirect=RedirectConfig(enabled=False))
        client = TestClient(create_app(config=config, store=memory_store))

        response = client.get("/", headers={"CF-Region-Code": "TX"}, follow_redirects=False)

        assert response.status_code == 404


class TestBackendGuard:
    """Admin, tooling and async requests are never redirected."""

    def test_admin_api_not_redirected(self, client: TestClient) -> None:
        response = client.get(
            "/api/admin/geo-redirects",
            headers={"CF-Region-Code": "TX"},
            follow_redirects=False,
        )

        assert response.status_code == 200

    def test_health_not_redirected(self, client: TestClient) -> None:
        response = client.get("/health", headers={"CF-Region-Code": "TX"}, follow_redirects=False)

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_ajax_not_redirected(self, client: TestClient) -> None:
        response = client.get(
            "/page",
            headers={"CF-Region-Code": "TX", "X-Requested-With": "XMLHttpRequest"},
            follow_redirects=False,
        )

        assert response.status_code == 200

    def test_admin_session_not_redirected(self, client: TestClient) -> None:
        client.cookies.set("admin_session", "abc")

        response = client.get("/page", headers={"CF-Region-Code": "TX"}, follow_redirects=False)

        assert response.status_code == 200

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/api/admin", True),
            ("/api/admin/geo-redirects/states", True),
            ("/api/administrator", False),
            ("/docs", True),
            ("/openapi.json", True),
            ("/health", True),
            ("/healthz", False),
            ("/", False),
            ("/blog/post", False),
        ],
    )
    def test_path_prefixes(self, path: str, expected: bool) -> None:
        assert is_backend_request(make_request(path), GuardConfig()) is expected

    def test_ajax_header_case_insensitive(self) -> None:
        request = make_request("/page", {"X-Requested-With": "xmlhttprequest"})

        assert is_backend_request(request, GuardConfig())

    def test_cookie_check_can_be_disabled(self) -> None:
        request = make_request("/page", {"Cookie": "admin_session=1"})

        assert is_backend_request(request, GuardConfig())
        assert not is_backend_request(request, GuardConfig(admin_session_cookie=None))


class TestConfiguration:
    """Header names and status code come from config."""

    def test_custom_headers_and_status(self, memory_store: InMemoryRuleStore) -> None:
        config = AppConfig(
            headers=HeaderConfig(region="X-Geo-Region", country="X-Geo-Country"),
            redirect=RedirectConfig(status_code=307),
        )
        client = TestClient(create_app(config=config, store=memory_store))

        ignored = client.get("/", headers={"CF-Region-Code": "TX"}, follow_redirects=False)
        response = client.get("/", headers={"X-Geo-Region": "TX"}, follow_redirects=False)

        assert ignored.status_code == 404
        assert response.status_code == 307
        assert response.headers["location"] == TX_URL
