"""
GeoRedirectService - region/country based redirects.

Decides whether a visitor is redirected based on the region and country
codes supplied by the edge network, and owns the sanitizing write path
for the two rule sets the decision reads.

Key behaviors:
- State rules take precedence over country rules
- Codes are canonicalized (trimmed, uppercased) before matching
- Sanitized rule sets are total over the canonical code lists
- Unsafe or empty URLs fall back to the category default
- Malformed rule entries never redirect
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from functools import lru_cache
from types import MappingProxyType
from typing import Any
from urllib.parse import quote, urlsplit

from .catalog import canonical_codes
from .models import (
    NO_REDIRECT,
    Category,
    Decision,
    RedirectTo,
    Rule,
    RuleSet,
)
from .ports import RuleStorePort

logger = logging.getLogger(__name__)

# --- Constants ---

DEFAULT_ENABLED_STATES = frozenset({"TX", "KS", "IN"})
STATE_DEFAULT_URL_TEMPLATE = "https://www.defendonlineprivacy.com/{code}/"
COUNTRY_DEFAULT_URL = "https://eff.org"

DEFAULT_ALLOWED_SCHEMES: tuple[str, ...] = ("http", "https")

# Characters left as-is when percent-encoding a URL. "%" keeps existing
# escapes intact so normalization is idempotent.
_URL_SAFE_CHARS = "!#$%&'()*+,/:;=?@[]~"

_FALSE_STRINGS = frozenset({"", "0", "false", "off", "no"})


# --- Codes ---


def canonicalize_code(raw: Any) -> str:
    """Trim and uppercase a header value. Non-strings become ""."""
    if not isinstance(raw, str):
        return ""
    return raw.strip().upper()


# --- Field Helpers ---


def _is_truthy(value: Any) -> bool:
    """
    Form-style truthiness: checkbox values like "1"/"on" are true.

    "0", "false", "off" and "no" (any case) are false, so JSON clients
    sending {"enabled": "false"} do not switch a rule on.
    """
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def _field(entry: Any, name: str) -> Any:
    """Read a field from a Rule or a loosely-shaped mapping entry."""
    if isinstance(entry, Rule):
        return getattr(entry, name)
    if isinstance(entry, Mapping):
        return entry.get(name)
    return None


# --- URL Safety ---


def normalize_url(
    raw: Any,
    allowed_schemes: Iterable[str] = DEFAULT_ALLOWED_SCHEMES,
) -> str:
    """
    Normalize a redirect destination.

    Returns "" when the value is not an absolute URL with an allowed
    scheme and a host. Otherwise control characters are removed and
    unsafe characters percent-encoded.
    """
    if not isinstance(raw, str):
        return ""

    cleaned = "".join(ch for ch in raw.strip() if ord(ch) >= 32 and ord(ch) != 127)
    if not cleaned:
        return ""

    try:
        parsed = urlsplit(cleaned)
    except ValueError:
        return ""

    schemes = {s.lower() for s in allowed_schemes}
    if parsed.scheme.lower() not in schemes or not parsed.netloc:
        return ""

    return quote(cleaned, safe=_URL_SAFE_CHARS)


# --- Default Table Builder ---


def default_url(category: Category | str, code: str = "") -> str:
    """Default destination for a code. Country defaults ignore the code."""
    if Category(category) is Category.STATES:
        return STATE_DEFAULT_URL_TEMPLATE.format(code=code.lower())
    return COUNTRY_DEFAULT_URL


@lru_cache(maxsize=None)
def _defaults(category: Category) -> RuleSet:
    if category is Category.STATES:
        table = {
            code: Rule(
                enabled=code in DEFAULT_ENABLED_STATES,
                url=default_url(category, code),
            )
            for code in canonical_codes(category)
        }
    else:
        table = {
            code: Rule(enabled=False, url=default_url(category, code))
            for code in canonical_codes(category)
        }
    return MappingProxyType(table)


def defaults(category: Category | str) -> RuleSet:
    """Default rule set for a category (first run fallback)."""
    return _defaults(Category(category))


# --- Sanitizer ---


def sanitize(
    category: Category | str,
    raw_input: Any,
    allowed_schemes: Iterable[str] = DEFAULT_ALLOWED_SCHEMES,
) -> RuleSet:
    """
    Turn loosely-shaped input into a total, validated rule set.

    Never raises. Keys outside the canonical list are dropped, missing
    codes are filled in disabled with their default URL.
    """
    category = Category(category)
    schemes = tuple(allowed_schemes)

    if not isinstance(raw_input, Mapping):
        raw_input = {}

    # Submitted keys may arrive in any case ("tx").
    by_code: dict[str, Any] = {}
    for key, value in raw_input.items():
        code = canonicalize_code(key)
        if code and (code not in by_code or key == code):
            by_code[code] = value

    sanitized: dict[str, Rule] = {}
    for code in canonical_codes(category):
        entry = by_code.get(code)
        url = normalize_url(_field(entry, "url"), schemes)
        sanitized[code] = Rule(
            enabled=_is_truthy(_field(entry, "enabled")),
            url=url or default_url(category, code),
        )

    return MappingProxyType(sanitized)


def rule_set_to_dict(rule_set: RuleSet) -> dict[str, dict[str, Any]]:
    """Plain JSON-friendly form of a rule set."""
    return {code: rule.to_dict() for code, rule in rule_set.items()}


# --- Resolver ---


def _active_url(rule_set: Any, code: str) -> str | None:
    """URL of an enabled rule for ``code``, or None."""
    if not code or not isinstance(rule_set, Mapping) or code not in rule_set:
        return None

    entry = rule_set[code]
    if not _is_truthy(_field(entry, "enabled")):
        return None

    url = _field(entry, "url")
    # An enabled rule without a destination behaves as disabled.
    if not isinstance(url, str) or not url.strip():
        return None
    return url


def resolve(
    region_code: str,
    country_code: str,
    states: RuleSet,
    countries: RuleSet,
) -> Decision:
    """
    Decide whether a visitor is redirected.

    A matching enabled state rule wins; country rules are only consulted
    when no state rule fires. Codes must already be canonical.
    """
    url = _active_url(states, region_code)
    if url is not None:
        return RedirectTo(url=url, category=Category.STATES, code=region_code)

    url = _active_url(countries, country_code)
    if url is not None:
        return RedirectTo(url=url, category=Category.COUNTRIES, code=country_code)

    return NO_REDIRECT


# --- Geo Redirect Service ---


class GeoRedirectService:
    """
    Geo redirect service.

    Reads rule sets through an injected store, falling back to defaults,
    and writes them only through the sanitizer.
    """

    def __init__(
        self,
        store: RuleStorePort,
        allowed_schemes: Iterable[str] = DEFAULT_ALLOWED_SCHEMES,
    ) -> None:
        """Initialize service."""
        self._store = store
        self._allowed_schemes = tuple(allowed_schemes)

    def get_rule_set(self, category: Category | str) -> RuleSet:
        """Get the stored rule set, or the defaults if never saved."""
        category = Category(category)
        stored = self._store.get(category)
        if stored is None:
            return defaults(category)
        return stored

    def decide(self, region_code: Any, country_code: Any) -> Decision:
        """Canonicalize raw header values and resolve them."""
        return resolve(
            canonicalize_code(region_code),
            canonicalize_code(country_code),
            self.get_rule_set(Category.STATES),
            self.get_rule_set(Category.COUNTRIES),
        )

    def update(self, category: Category | str, raw: Any) -> RuleSet:
        """Sanitize a submission and replace the category's rule set."""
        category = Category(category)
        rule_set = sanitize(category, raw, self._allowed_schemes)
        saved = self._store.save(category, rule_set)
        enabled = sorted(code for code, rule in saved.items() if rule.enabled)
        logger.info("Saved %s rules; enabled: %s", category.value, ", ".join(enabled) or "none")
        return saved

    def update_all(self, raw: Any) -> dict[Category, RuleSet]:
        """
        Save a whole settings submission covering both categories.

        A category missing from the submission is saved as empty, the
        same as a form posted with every box unchecked.
        """
        if not isinstance(raw, Mapping):
            raw = {}
        return {category: self.update(category, raw.get(category.value)) for category in Category}

    def reset(self, category: Category | str) -> RuleSet:
        """Restore a category to its defaults."""
        category = Category(category)
        saved = self._store.save(category, defaults(category))
        logger.info("Reset %s rules to defaults", category.value)
        return saved

    def seed_defaults(self) -> list[Category]:
        """Write defaults for categories that have never been saved."""
        seeded: list[Category] = []
        for category in Category:
            if self._store.get(category) is None:
                self._store.save(category, defaults(category))
                seeded.append(category)
        if seeded:
            logger.info("Seeded default rules for: %s", ", ".join(c.value for c in seeded))
        return seeded


def create_geo_redirect_service(
    store: RuleStorePort,
    allowed_schemes: Iterable[str] = DEFAULT_ALLOWED_SCHEMES,
) -> GeoRedirectService:
    """Factory for GeoRedirectService."""
    return GeoRedirectService(store=store, allowed_schemes=allowed_schemes)
