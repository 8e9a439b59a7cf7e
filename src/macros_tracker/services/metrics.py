"""Summary metrics over a multi-block comparison."""

import re
from collections.abc import Sequence
from datetime import date

from macros_tracker.domain.macros import CalcBreakdown, CalcResult, MacroTotals, round1
from macros_tracker.domain.metrics import (
    DateRange,
    DayValue,
    MacroExtremes,
    MacroMetrics,
    MacroRatios,
)

DATE_ID_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
MACRO_FIELDS = ("calories", "protein", "fat", "carbs")

PROTEIN_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9
CARBS_KCAL_PER_G = 4


def summarize(result: CalcResult) -> MacroMetrics:
    """Compute averages, extremes and ratios for a comparison result.

    Averages divide by the number of date-shaped block ids, or by the number
    of blocks when none of the ids is a date. An empty breakdown yields only a
    zero day count.
    """
    breakdown = result.breakdown
    if not breakdown:
        return MacroMetrics(day_count=0)
    span = date_range([item.id for item in breakdown])
    day_count = span.day_count if span is not None else len(breakdown)
    return MacroMetrics(
        day_count=day_count,
        date_range=span,
        averages=average_totals(result.aggregate, day_count),
        extremes={name: _extremes(breakdown, name) for name in MACRO_FIELDS},
        ratios=macro_ratios(result.aggregate),
    )


def date_range(block_ids: Sequence[str]) -> DateRange | None:
    """Return the earliest and latest ``YYYY-MM-DD`` id, or None."""
    dates = sorted(
        day for day in (parse_date_id(block_id) for block_id in block_ids) if day
    )
    if not dates:
        return None
    return DateRange(start=dates[0], end=dates[-1], day_count=len(dates))


def parse_date_id(block_id: str) -> date | None:
    """Parse a ``YYYY-MM-DD`` block id."""
    match = DATE_ID_PATTERN.match(block_id)
    if match is None:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def average_totals(totals: MacroTotals, day_count: int) -> MacroTotals:
    """Divide totals evenly across days."""
    days = max(day_count, 1)
    return MacroTotals(
        calories=round1(totals.calories / days),
        protein=round1(totals.protein / days),
        fat=round1(totals.fat / days),
        carbs=round1(totals.carbs / days),
    )


def macro_ratios(totals: MacroTotals) -> MacroRatios | None:
    """Return the energy split of protein, fat and carbs.

    Uses 4/9/4 kcal per gram. Returns None when there is no energy to split.
    """
    if totals.calories <= 0:
        return None
    protein = totals.protein * PROTEIN_KCAL_PER_G
    fat = totals.fat * FAT_KCAL_PER_G
    carbs = totals.carbs * CARBS_KCAL_PER_G
    macro_energy = protein + fat + carbs
    if macro_energy <= 0:
        return None
    return MacroRatios(
        protein=round1(protein / macro_energy * 100),
        fat=round1(fat / macro_energy * 100),
        carbs=round1(carbs / macro_energy * 100),
    )


def _extremes(breakdown: Sequence[CalcBreakdown], name: str) -> MacroExtremes:
    values = [
        DayValue(id=item.id, value=getattr(item.totals, name)) for item in breakdown
    ]
    return MacroExtremes(
        max=max(values, key=_value),
        min=min(values, key=_value),
    )


def _value(item: DayValue) -> float:
    return item.value
