"""
Geo redirect middleware.

Runs before routing: backend requests are skipped, everything else is
resolved against the stored rules and answered with a redirect when a
rule fires.

Key behaviors:
- Backend guard is evaluated before any rule is read
- Codes come verbatim from the edge network's headers
- Store failures never block a request (no redirect instead)
"""

from __future__ import annotations

import logging

from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.components.geo_redirect import GeoRedirectService, RedirectTo
from src.config.models import AppConfig, GuardConfig

logger = logging.getLogger(__name__)


def _matches_prefix(path: str, prefix: str) -> bool:
    prefix = prefix.rstrip("/")
    if not prefix:
        return False
    return path == prefix or path.startswith(prefix + "/")


def is_backend_request(request: Request, guard: GuardConfig) -> bool:
    """
    True for admin, tooling and async backend calls.

    These are never redirected, so administrators can always reach the
    settings regardless of where they are.
    """
    path = request.url.path
    if any(_matches_prefix(path, prefix) for prefix in guard.backend_path_prefixes):
        return True

    ajax = request.headers.get(guard.ajax_header, "")
    if ajax and ajax.lower() == guard.ajax_header_value.lower():
        return True

    if guard.admin_session_cookie and guard.admin_session_cookie in request.cookies:
        return True

    return False


class GeoRedirectMiddleware(BaseHTTPMiddleware):
    """Redirect visitors whose region or country matches an enabled rule."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        config: AppConfig | None = getattr(request.app.state, "config", None)
        service: GeoRedirectService | None = getattr(
            request.app.state, "geo_redirect_service", None
        )

        if config is None or service is None:
            logger.warning("Geo redirect not configured; passing %s through", request.url.path)
            return await call_next(request)

        if not config.redirect.enabled:
            return await call_next(request)

        if is_backend_request(request, config.guard):
            logger.debug("Skipping geo redirect for backend request %s", request.url.path)
            return await call_next(request)

        region = request.headers.get(config.headers.region)
        country = request.headers.get(config.headers.country)

        try:
            decision = await run_in_threadpool(service.decide, region, country)
        except Exception:
            logger.exception("Geo redirect lookup failed; continuing without redirect")
            return await call_next(request)

        if isinstance(decision, RedirectTo):
            logger.info(
                "Redirecting %s (%s %s) to %s",
                request.url.path,
                decision.category.value if decision.category else "-",
                decision.code,
                decision.url,
            )
            return RedirectResponse(url=decision.url, status_code=config.redirect.status_code)

        logger.debug("No geo redirect for region=%r country=%r", region, country)
        return await call_next(request)
