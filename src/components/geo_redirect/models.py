"""
Geo redirect component models.

Rules, rule sets, redirect decisions and the component input/output types.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeAlias

# --- Core Types ---


class Category(str, Enum):
    """Rule set category, also the persistence key."""

    STATES = "states"
    COUNTRIES = "countries"


@dataclass(frozen=True)
class Rule:
    """Redirect rule for a single code."""

    enabled: bool
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {"enabled": self.enabled, "url": self.url}


# Immutable mapping of code -> Rule (a MappingProxyType once built).
RuleSet: TypeAlias = Mapping[str, Rule]


@dataclass(frozen=True)
class NoRedirect:
    """Request proceeds unmodified."""


@dataclass(frozen=True)
class RedirectTo:
    """Request is answered with a redirect to ``url``."""

    url: str
    # Which rule fired; informational only.
    category: Category | None = field(default=None, compare=False)
    code: str | None = field(default=None, compare=False)


Decision: TypeAlias = NoRedirect | RedirectTo

NO_REDIRECT = NoRedirect()


# --- Input Models ---


@dataclass(frozen=True)
class ResolveInput:
    """Input for resolving raw header values into a decision."""

    region_code: str | None
    country_code: str | None


@dataclass(frozen=True)
class GetRuleSetInput:
    """Input for reading a category's rule set."""

    category: Category


@dataclass(frozen=True)
class UpdateRuleSetInput:
    """Input for the sanitizing write path."""

    category: Category
    raw: Any


@dataclass(frozen=True)
class ResetRuleSetInput:
    """Input for restoring a category to its defaults."""

    category: Category


@dataclass(frozen=True)
class SeedDefaultsInput:
    """Input for activation-time seeding."""

    pass


# --- Output Models ---


@dataclass(frozen=True)
class ResolveOutput:
    """Output from resolving a request's codes."""

    decision: Decision
    region_code: str
    country_code: str

    @property
    def should_redirect(self) -> bool:
        return isinstance(self.decision, RedirectTo)


@dataclass(frozen=True)
class RuleSetOutput:
    """Output carrying a category's rule set."""

    category: Category
    rules: RuleSet


@dataclass(frozen=True)
class SeedDefaultsOutput:
    """Output from seeding; lists categories that were written."""

    seeded: tuple[Category, ...] = ()
