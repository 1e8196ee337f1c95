"""
Geo redirect component - redirect visitors by region or country.

Invariants:
- An enabled state rule beats an enabled country rule
- Stored rule sets cover exactly the canonical code list
- Stored rule URLs are never empty
- Resolution never writes
"""

from __future__ import annotations

from collections.abc import Iterable

from ._impl import DEFAULT_ALLOWED_SCHEMES, GeoRedirectService, canonicalize_code
from .models import (
    GetRuleSetInput,
    ResetRuleSetInput,
    ResolveInput,
    ResolveOutput,
    RuleSetOutput,
    SeedDefaultsInput,
    SeedDefaultsOutput,
    UpdateRuleSetInput,
)
from .ports import RuleStorePort

# --- Component Entry Points ---


def run_resolve(
    inp: ResolveInput,
    *,
    store: RuleStorePort,
    allowed_schemes: Iterable[str] = DEFAULT_ALLOWED_SCHEMES,
) -> ResolveOutput:
    """
    Resolve a request's raw region/country header values.

    Args:
        inp: Raw header values (may be None or blank).
        store: Rule store port.
        allowed_schemes: URL schemes accepted when sanitizing.

    Returns:
        ResolveOutput with the decision and the canonical codes used.
    """
    service = GeoRedirectService(store, allowed_schemes)
    decision = service.decide(inp.region_code, inp.country_code)
    return ResolveOutput(
        decision=decision,
        region_code=canonicalize_code(inp.region_code),
        country_code=canonicalize_code(inp.country_code),
    )


def run_get(
    inp: GetRuleSetInput,
    *,
    store: RuleStorePort,
    allowed_schemes: Iterable[str] = DEFAULT_ALLOWED_SCHEMES,
) -> RuleSetOutput:
    """Get a category's rule set, falling back to defaults."""
    service = GeoRedirectService(store, allowed_schemes)
    return RuleSetOutput(category=inp.category, rules=service.get_rule_set(inp.category))


def run_update(
    inp: UpdateRuleSetInput,
    *,
    store: RuleStorePort,
    allowed_schemes: Iterable[str] = DEFAULT_ALLOWED_SCHEMES,
) -> RuleSetOutput:
    """
    Sanitize and save a category's rule set.

    Never fails on malformed input; see ``sanitize``.
    """
    service = GeoRedirectService(store, allowed_schemes)
    return RuleSetOutput(category=inp.category, rules=service.update(inp.category, inp.raw))


def run_reset(
    inp: ResetRuleSetInput,
    *,
    store: RuleStorePort,
    allowed_schemes: Iterable[str] = DEFAULT_ALLOWED_SCHEMES,
) -> RuleSetOutput:
    """Reset a category's rule set to defaults."""
    service = GeoRedirectService(store, allowed_schemes)
    return RuleSetOutput(category=inp.category, rules=service.reset(inp.category))


def run_seed(
    inp: SeedDefaultsInput,
    *,
    store: RuleStorePort,
    allowed_schemes: Iterable[str] = DEFAULT_ALLOWED_SCHEMES,
) -> SeedDefaultsOutput:
    """Seed defaults for categories never saved (activation)."""
    service = GeoRedirectService(store, allowed_schemes)
    return SeedDefaultsOutput(seeded=tuple(service.seed_defaults()))


def run(
    inp: ResolveInput | GetRuleSetInput | UpdateRuleSetInput | ResetRuleSetInput | SeedDefaultsInput,
    *,
    store: RuleStorePort,
    allowed_schemes: Iterable[str] = DEFAULT_ALLOWED_SCHEMES,
) -> ResolveOutput | RuleSetOutput | SeedDefaultsOutput:
    """
    Main entry point for the geo redirect component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, ResolveInput):
        return run_resolve(inp, store=store, allowed_schemes=allowed_schemes)
    elif isinstance(inp, GetRuleSetInput):
        return run_get(inp, store=store, allowed_schemes=allowed_schemes)
    elif isinstance(inp, UpdateRuleSetInput):
        return run_update(inp, store=store, allowed_schemes=allowed_schemes)
    elif isinstance(inp, ResetRuleSetInput):
        return run_reset(inp, store=store, allowed_schemes=allowed_schemes)
    elif isinstance(inp, SeedDefaultsInput):
        return run_seed(inp, store=store, allowed_schemes=allowed_schemes)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
