import json
import logging
import sqlite3
from datetime import UTC, datetime
from collections.abc import Iterable
from typing import Any

from src.components.geo_redirect import (
    DEFAULT_ALLOWED_SCHEMES,
    Category,
    RuleSet,
    rule_set_to_dict,
    sanitize,
)

logger = logging.getLogger(__name__)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


class SQLiteRuleStore:
    """SQLite adapter for rule sets (one row per category)."""

    def __init__(
        self,
        db_path: str,
        allowed_schemes: Iterable[str] = DEFAULT_ALLOWED_SCHEMES,
    ):
        self.db_path = db_path
        self.allowed_schemes = tuple(allowed_schemes)

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        return conn

    def get(self, category: Category) -> RuleSet | None:
        category = Category(category)
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT rules_json FROM rule_sets WHERE category = ?",
                (category.value,),
            ).fetchone()
        finally:
            conn.close()

        if not row:
            return None

        try:
            data = json.loads(row["rules_json"])
        except (TypeError, ValueError):
            logger.warning("Stored %s rules are not valid JSON; treating as unset", category.value)
            return None

        # Re-sanitize with the same schemes as writes; repairs rows from older code.
        return sanitize(category, data, self.allowed_schemes)

    def save(self, category: Category, rule_set: RuleSet) -> RuleSet:
        category = Category(category)
        conn = self._get_conn()
        try:
            # Single upsert: readers see either the old or the new rule set.
            conn.execute(
                """
                INSERT INTO rule_sets (category, rules_json, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(category) DO UPDATE SET
                    rules_json=excluded.rules_json,
                    updated_at=excluded.updated_at
            """,
                (
                    category.value,
                    json.dumps(rule_set_to_dict(rule_set)),
                    datetime.now(UTC).isoformat(),
                ),
            )
            conn.commit()
            return rule_set
        finally:
            conn.close()

