"""Domain models for the food database."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class FoodEntry:
    """A food database entry with macros per stored serving."""

    name: str
    serving_size_g: float | None
    calories: float
    protein: float
    fat: float
    carbs: float

    @property
    def has_valid_serving(self) -> bool:
        """Return whether the serving size can be used for scaling."""
        size = self.serving_size_g
        return isinstance(size, int | float) and math.isfinite(size) and size > 0
