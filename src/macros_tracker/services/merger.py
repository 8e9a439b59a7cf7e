"""Normalization pass that merges duplicate block lines."""

import re
from dataclasses import dataclass

from macros_tracker.domain.notation import LineKind
from macros_tracker.services.notation import classify_line, format_grams

FOOD_GRAMS_PATTERN = re.compile(r"^([^:]+):\s*([\d.]+)g$", re.IGNORECASE)

MealKey = tuple[str, str | None, str | None]


@dataclass
class _MergedFood:
    name: str
    grams: float
    first_index: int


@dataclass
class _MergedMeal:
    name: str
    count: int
    first_index: int
    comment: str | None
    timestamp: str | None


def merge_macro_lines(lines: list[str]) -> list[str]:
    """Merge duplicate bare ``Name:<n>g`` lines and duplicate meal headers.

    Bare food lines sum their grams into the first occurrence and meal headers
    sum their ``× N`` counts the same way. Meals only merge when their
    timestamp and comment also match. Bullets, groups and every other line
    pass through in place. Merging twice gives the same result as merging once.
    """
    foods: dict[str, _MergedFood] = {}
    meals: dict[MealKey, _MergedMeal] = {}

    for index, line in enumerate(lines):
        meal = _meal_key(line)
        if meal is not None:
            key, name, count = meal
            if key in meals:
                meals[key].count += count
            else:
                _, timestamp, comment = key
                meals[key] = _MergedMeal(name, count, index, comment, timestamp)
            continue
        food = _food_key(line)
        if food is not None:
            key, name, grams = food
            if key in foods:
                foods[key].grams += grams
            else:
                foods[key] = _MergedFood(name, grams, index)

    output: list[str] = []
    for index, line in enumerate(lines):
        meal = _meal_key(line)
        if meal is not None:
            merged_meal = meals[meal[0]]
            if merged_meal.first_index == index:
                output.append(_format_meal(merged_meal))
            continue
        food = _food_key(line)
        if food is not None:
            merged_food = foods[food[0]]
            if merged_food.first_index == index:
                output.append(f"{merged_food.name}:{format_grams(merged_food.grams)}g")
            continue
        output.append(line)
    return output


def _meal_key(line: str) -> tuple[MealKey, str, int] | None:
    if not line.strip().lower().startswith("meal:"):
        return None
    parsed = classify_line(line)
    if parsed.kind is not LineKind.MEAL:
        return None
    key = (parsed.name.lower(), parsed.timestamp, parsed.comment)
    return key, parsed.name, parsed.count


def _food_key(line: str) -> tuple[str, str, float] | None:
    stripped = line.strip()
    if stripped.startswith("-"):
        return None
    match = FOOD_GRAMS_PATTERN.match(stripped)
    if match is None:
        return None
    try:
        grams = float(match.group(2))
    except ValueError:
        return None
    name = match.group(1).strip()
    return name.lower(), name, grams


def _format_meal(meal: _MergedMeal) -> str:
    text = f"meal:{meal.name}"
    if meal.count > 1:
        text = f"{text} × {meal.count}"
    if meal.timestamp:
        text = f"{text} @{meal.timestamp}"
    if meal.comment:
        text = f"{text} // {meal.comment}"
    return text
