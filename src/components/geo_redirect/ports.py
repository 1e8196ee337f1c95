"""
Geo redirect component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from .models import Category, RuleSet


class RuleStorePort(Protocol):
    """Persistence interface for rule sets, one value per category."""

    def get(self, category: Category) -> RuleSet | None:
        """Get the stored rule set, or None if never saved."""
        ...

    def save(self, category: Category, rule_set: RuleSet) -> RuleSet:
        """Replace the whole rule set for a category in one atomic write."""
        ...
