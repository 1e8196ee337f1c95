from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.adapters.memory_store import InMemoryRuleStore
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteRuleStore
from src.api.main import create_app
from src.components.geo_redirect import GeoRedirectService
from src.config.models import AppConfig

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def memory_store() -> InMemoryRuleStore:
    """Fresh in-memory store with nothing saved."""
    return InMemoryRuleStore()


@pytest.fixture
def service(memory_store: InMemoryRuleStore) -> GeoRedirectService:
    return GeoRedirectService(memory_store)


@pytest.fixture
def sqlite_store(tmp_path) -> SQLiteRuleStore:
    """SQLite store over a freshly migrated database."""
    db_path = str(tmp_path / "region_redirect.db")
    SQLiteMigrator(db_path, str(PROJECT_ROOT / "migrations")).run_migrations()
    return SQLiteRuleStore(db_path)


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def client(app_config: AppConfig, memory_store: InMemoryRuleStore) -> TestClient:
    """Test client over an app with an in-memory store and a public page."""
    app = create_app(config=app_config, store=memory_store)

    @app.get("/page")
    def page() -> dict[str, str]:
        return {"page": "content"}

    return TestClient(app)
