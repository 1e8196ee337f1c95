import logging
import os
from functools import lru_cache
from pathlib import Path

from fastapi import HTTPException, Request, status

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteRuleStore
from src.components.geo_redirect import Category, GeoRedirectService
from src.config.models import AppConfig

logger = logging.getLogger(__name__)


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("REGION_REDIRECT_DATA_DIR", "./data"))
        self.config_path = Path(
            os.environ.get("REGION_REDIRECT_CONFIG", self.base_dir / "region_redirect.yaml")
        )
        self.migrations_dir = self.base_dir / "migrations"

    def db_path(self, config: AppConfig) -> str:
        return str(self.data_dir / config.storage.db_filename)


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Stores ---
def build_sqlite_store(settings: Settings, config: AppConfig) -> SQLiteRuleStore:
    """Migrate the database and return a store over it."""
    db_path = settings.db_path(config)
    applied = SQLiteMigrator(db_path, str(settings.migrations_dir)).run_migrations()
    if applied:
        logger.info("Applied %d migration(s) to %s", len(applied), db_path)
    return SQLiteRuleStore(db_path, config.urls.allowed_schemes)


# --- App State ---
def get_config(request: Request) -> AppConfig:
    config: AppConfig | None = getattr(request.app.state, "config", None)
    if config is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not configured",
        )
    return config


def get_geo_redirect_service(request: Request) -> GeoRedirectService:
    service: GeoRedirectService | None = getattr(request.app.state, "geo_redirect_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not configured",
        )
    return service


def parse_category(category: str) -> Category:
    """Path parameter to Category; unknown names are a 404."""
    try:
        return Category(category.lower())
    except ValueError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown category '{category}'. Expected one of: "
            + ", ".join(c.value for c in Category),
        ) from err
