"""
In-memory rule store.

Used by tests and single-process deployments without a database.
Each save swaps the category's whole rule set under a lock.
"""

from __future__ import annotations

from threading import Lock

from src.components.geo_redirect import Category, RuleSet


class InMemoryRuleStore:
    """Rule store backed by a dict of immutable rule sets."""

    def __init__(self, initial: dict[Category, RuleSet] | None = None) -> None:
        self._rule_sets: dict[Category, RuleSet] = dict(initial or {})
        self._lock = Lock()
        self.save_count = 0

    def get(self, category: Category) -> RuleSet | None:
        return self._rule_sets.get(Category(category))

    def save(self, category: Category, rule_set: RuleSet) -> RuleSet:
        with self._lock:
            self._rule_sets[Category(category)] = rule_set
            self.save_count += 1
        return rule_set
