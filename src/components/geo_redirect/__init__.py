"""
Geo redirect component - redirect visitors by region or country code.
"""

from ._impl import (
    COUNTRY_DEFAULT_URL,
    DEFAULT_ALLOWED_SCHEMES,
    DEFAULT_ENABLED_STATES,
    GeoRedirectService,
    canonicalize_code,
    create_geo_redirect_service,
    default_url,
    defaults,
    normalize_url,
    resolve,
    rule_set_to_dict,
    sanitize,
)
from .catalog import COUNTRY_NAMES, STATE_NAMES, canonical_codes, code_names
from .component import (
    run,
    run_get,
    run_reset,
    run_resolve,
    run_seed,
    run_update,
)
from .models import (
    NO_REDIRECT,
    Category,
    Decision,
    GetRuleSetInput,
    NoRedirect,
    RedirectTo,
    ResetRuleSetInput,
    ResolveInput,
    ResolveOutput,
    Rule,
    RuleSet,
    RuleSetOutput,
    SeedDefaultsInput,
    SeedDefaultsOutput,
    UpdateRuleSetInput,
)
from .ports import RuleStorePort

__all__ = [
    # Entry points
    "run",
    "run_get",
    "run_reset",
    "run_resolve",
    "run_seed",
    "run_update",
    # Input models
    "GetRuleSetInput",
    "ResetRuleSetInput",
    "ResolveInput",
    "SeedDefaultsInput",
    "UpdateRuleSetInput",
    # Output models
    "ResolveOutput",
    "RuleSetOutput",
    "SeedDefaultsOutput",
    # Core types
    "Category",
    "Decision",
    "NO_REDIRECT",
    "NoRedirect",
    "RedirectTo",
    "Rule",
    "RuleSet",
    # Ports
    "RuleStorePort",
    # Catalog
    "COUNTRY_NAMES",
    "STATE_NAMES",
    "canonical_codes",
    "code_names",
    # _impl re-exports
    "COUNTRY_DEFAULT_URL",
    "DEFAULT_ALLOWED_SCHEMES",
    "DEFAULT_ENABLED_STATES",
    "GeoRedirectService",
    "canonicalize_code",
    "create_geo_redirect_service",
    "default_url",
    "defaults",
    "normalize_url",
    "resolve",
    "rule_set_to_dict",
    "sanitize",
]
