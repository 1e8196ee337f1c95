"""
Admin Geo Redirects API.

Read and edit the state and country redirect rules.

Key behaviors:
- GET returns every canonical code with its name, flag and URL
- PUT accepts loosely-shaped submissions; they are sanitized, not rejected
- A whole-form PUT replaces both categories
- /resolve is a dry run and never redirects
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel

from src.api.deps import get_geo_redirect_service, parse_category
from src.components.geo_redirect import (
    Category,
    GeoRedirectService,
    RedirectTo,
    RuleSet,
    canonicalize_code,
    code_names,
)

router = APIRouter()


# --- Request/Response Models ---


class RuleResponse(BaseModel):
    """One row of the settings form."""

    code: str
    name: str
    enabled: bool
    url: str


class RuleSetResponse(BaseModel):
    """All rules for one category, in catalog order."""

    category: str
    rules: list[RuleResponse]


class GeoRedirectSettingsResponse(BaseModel):
    """Both categories."""

    states: RuleSetResponse
    countries: RuleSetResponse


class ResolveResponse(BaseModel):
    """Dry-run decision."""

    region_code: str
    country_code: str
    redirect: bool
    url: str | None = None
    matched_category: str | None = None
    matched_code: str | None = None


# --- Helper Functions ---


def rule_set_to_response(category: Category, rule_set: RuleSet) -> RuleSetResponse:
    """Convert a rule set to its response model."""
    names = code_names(category)
    return RuleSetResponse(
        category=category.value,
        rules=[
            RuleResponse(code=code, name=names.get(code, code), enabled=rule.enabled, url=rule.url)
            for code, rule in rule_set.items()
        ],
    )


def _settings_response(service: GeoRedirectService) -> GeoRedirectSettingsResponse:
    return GeoRedirectSettingsResponse(
        states=rule_set_to_response(Category.STATES, service.get_rule_set(Category.STATES)),
        countries=rule_set_to_response(
            Category.COUNTRIES, service.get_rule_set(Category.COUNTRIES)
        ),
    )


# --- Endpoints ---


@router.get(
    "",
    response_model=GeoRedirectSettingsResponse,
    summary="Get geo redirect settings",
)
def get_geo_redirects(
    service: GeoRedirectService = Depends(get_geo_redirect_service),
) -> GeoRedirectSettingsResponse:
    """Both rule sets; defaults if never saved."""
    return _settings_response(service)


@router.put(
    "",
    response_model=GeoRedirectSettingsResponse,
    summary="Save geo redirect settings",
    description="Save a whole settings submission. Omitted codes are saved disabled.",
)
def update_geo_redirects(
    payload: Any = Body(default=None),
    service: GeoRedirectService = Depends(get_geo_redirect_service),
) -> GeoRedirectSettingsResponse:
    """
    Save both categories from one submission.

    Expected shape ``{"states": {"TX": {"enabled": true, "url": "..."}},
    "countries": {...}}``. Anything else is sanitized down to that shape.
    """
    service.update_all(payload)
    return _settings_response(service)


@router.get(
    "/resolve",
    response_model=ResolveResponse,
    summary="Dry-run a redirect decision",
)
def resolve_geo_redirect(
    region: str = "",
    country: str = "",
    service: GeoRedirectService = Depends(get_geo_redirect_service),
) -> ResolveResponse:
    """Show what a visitor with these codes would get."""
    decision = service.decide(region, country)
    response = ResolveResponse(
        region_code=canonicalize_code(region),
        country_code=canonicalize_code(country),
        redirect=isinstance(decision, RedirectTo),
    )
    if isinstance(decision, RedirectTo):
        response.url = decision.url
        response.matched_category = decision.category.value if decision.category else None
        response.matched_code = decision.code
    return response


@router.get(
    "/{category}",
    response_model=RuleSetResponse,
    summary="Get one category's rules",
)
def get_category(
    category: Category = Depends(parse_category),
    service: GeoRedirectService = Depends(get_geo_redirect_service),
) -> RuleSetResponse:
    return rule_set_to_response(category, service.get_rule_set(category))


@router.put(
    "/{category}",
    response_model=RuleSetResponse,
    summary="Save one category's rules",
)
def update_category(
    payload: Any = Body(default=None),
    category: Category = Depends(parse_category),
    service: GeoRedirectService = Depends(get_geo_redirect_service),
) -> RuleSetResponse:
    return rule_set_to_response(category, service.update(category, payload))


@router.post(
    "/{category}/reset",
    response_model=RuleSetResponse,
    summary="Reset one category to defaults",
)
def reset_category(
    category: Category = Depends(parse_category),
    service: GeoRedirectService = Depends(get_geo_redirect_service),
) -> RuleSetResponse:
    return rule_set_to_response(category, service.reset(category))
