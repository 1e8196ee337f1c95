import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from src.api.deps import build_sqlite_store, get_settings
from src.api.middleware import GeoRedirectMiddleware
from src.api.routes import admin_geo_redirects
from src.components.geo_redirect import RuleStorePort, create_geo_redirect_service
from src.config.loader import load_config
from src.config.models import AppConfig

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load config on startup (fail-fast)
    if app.state.config is None:
        try:
            app.state.config = load_config(settings.config_path)
            logger.info("Config loaded from %s", settings.config_path)
        except (FileNotFoundError, ValueError):
            logger.critical("Config load failed for %s", settings.config_path, exc_info=True)
            raise

    config: AppConfig = app.state.config

    if app.state.geo_redirect_service is None:
        store = build_sqlite_store(settings, config)
        app.state.geo_redirect_service = create_geo_redirect_service(
            store, config.urls.allowed_schemes
        )

    # Activation: first run gets the default tables.
    app.state.geo_redirect_service.seed_defaults()

    yield
    # Shutdown cleanup if needed


def create_app(
    config: AppConfig | None = None,
    store: RuleStorePort | None = None,
) -> FastAPI:
    """
    Build the application.

    With a store injected the app is ready without running the lifespan;
    otherwise config and the SQLite store are set up on startup.
    """
    app = FastAPI(
        title="Region Redirect API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if store is not None and config is None:
        config = AppConfig()

    app.state.config = config
    app.state.geo_redirect_service = (
        create_geo_redirect_service(store, config.urls.allowed_schemes)
        if store is not None and config is not None
        else None
    )

    app.include_router(
        admin_geo_redirects.router,
        prefix="/api/admin/geo-redirects",
        tags=["Admin Geo Redirects"],
    )
    app.add_middleware(GeoRedirectMiddleware)

    @app.get("/health")
    def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "service": "region-redirect"}

    return app


app = create_app()
