"""Food lookup and portion scaling against the food database."""

import logging
import math
from dataclasses import dataclass
from typing import Protocol

from macros_tracker.domain.foods import FoodEntry
from macros_tracker.domain.macros import MacroRow, round1
from macros_tracker.services.notation import format_grams

_logger = logging.getLogger(__name__)


class FoodRepository(Protocol):
    """Read-only interface to the food database."""

    def list_foods(self) -> list[FoodEntry]:
        """Return every food entry."""

    def search_foods(self, query: str, limit: int) -> list[FoodEntry]:
        """Return entries whose name contains the query."""


@dataclass
class FoodResolver:
    """Resolves food queries against a snapshot of the food database."""

    foods: list[FoodEntry]

    def find(self, query: str) -> FoodEntry | None:
        """Return the entry matching exactly, else the single partial match."""
        if not query or not query.strip():
            return None
        query_lower = query.strip().lower()

        exact = [food for food in self.foods if food.name.lower() == query_lower]
        if len(exact) == 1:
            return exact[0]

        partial = [food for food in self.foods if query_lower in food.name.lower()]
        if len(partial) == 1:
            return partial[0]
        if len(partial) > 1:
            _logger.warning(
                "Ambiguous food query %r matches %s",
                query,
                ", ".join(food.name for food in partial),
            )
        return None

    def resolve(
        self,
        query: str,
        quantity_g: float | None = None,
        *,
        macro_line: str | None = None,
        comment: str | None = None,
        timestamp: str | None = None,
    ) -> MacroRow | None:
        """Resolve a query into a row scaled to the requested grams.

        Without an explicit quantity the entry's stored serving size is used.
        Returns None when the food is unknown, ambiguous or invalid.
        """
        food = self.find(query)
        if food is None:
            _logger.debug("No food entry for query %r", query)
            return None
        if not food.has_valid_serving:
            _logger.debug("Food %r has no usable serving size", food.name)
            return None
        if not _has_numeric_macros(food):
            _logger.debug("Food %r has non-numeric macros", food.name)
            return None

        quantity = quantity_g if quantity_g is not None else food.serving_size_g
        scale = quantity / food.serving_size_g
        return MacroRow(
            name=food.name,
            serving=f"{format_grams(quantity)}g",
            calories=round1(food.calories * scale),
            protein=round1(food.protein * scale),
            fat=round1(food.fat * scale),
            carbs=round1(food.carbs * scale),
            macro_line=macro_line or query,
            comment=comment,
            timestamp=timestamp,
        )


def _has_numeric_macros(food: FoodEntry) -> bool:
    values = (food.calories, food.protein, food.fat, food.carbs)
    return all(
        isinstance(value, int | float) and math.isfinite(value) for value in values
    )
