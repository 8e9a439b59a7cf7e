"""Supabase implementation for the food database."""

import logging
import re
from dataclasses import dataclass

from supabase import Client

from macros_tracker.domain.foods import FoodEntry
from macros_tracker.services.foods import FoodRepository

_GRAMS_PATTERN = re.compile(r"\d+(?:\.\d+)?")
_MACRO_FIELDS = ("calories", "protein", "fat", "carbs")

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase-backed read-only food database."""

    client: Client
    table: str = "foods"

    def list_foods(self) -> list[FoodEntry]:
        """Return every valid food entry."""
        response = self.client.table(self.table).select("*").execute()
        return _parse_foods(response.data or [])

    def search_foods(self, query: str, limit: int) -> list[FoodEntry]:
        """Return entries whose name contains the query."""
        response = (
            self.client.table(self.table)
            .select("*")
            .ilike("name", f"%{query}%")
            .order("name")
            .limit(limit)
            .execute()
        )
        return _parse_foods(response.data or [])


def _parse_foods(rows: list[dict[str, object]]) -> list[FoodEntry]:
    foods: list[FoodEntry] = []
    for row in rows:
        food = _parse_food(row)
        if food is not None:
            foods.append(food)
    return foods


def _parse_food(row: dict[str, object]) -> FoodEntry | None:
    """Parse a food row, returning None when a macro field is not numeric."""
    name = str(row.get("name") or "").strip()
    if not name:
        return None
    macros: dict[str, float] = {}
    for key in _MACRO_FIELDS:
        value = _to_float(row.get(key, 0))
        if value is None:
            _logger.debug("Dropping food %r: %s is not numeric", name, key)
            return None
        macros[key] = value
    return FoodEntry(
        name=name,
        serving_size_g=_parse_serving_size(row.get("serving_size")),
        **macros,
    )


def _parse_serving_size(value: object) -> float | None:
    """Parse a stored serving size such as ``100`` or ``"100g"``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str) and "g" in value.lower():
        match = _GRAMS_PATTERN.search(value)
        if match:
            return float(match.group(0))
    return None


def _to_float(value: object) -> float | None:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None
