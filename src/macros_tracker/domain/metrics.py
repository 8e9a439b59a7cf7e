"""Domain models for multi-block summary metrics."""

from dataclasses import dataclass, field
from datetime import date

from macros_tracker.domain.macros import MacroTotals


@dataclass(frozen=True)
class DateRange:
    """Span covered by the date-shaped block ids of a comparison."""

    start: date
    end: date
    day_count: int


@dataclass(frozen=True)
class DayValue:
    """One macro value of one block."""

    id: str
    value: float


@dataclass(frozen=True)
class MacroExtremes:
    """Highest and lowest block for a single macro."""

    max: DayValue
    min: DayValue


@dataclass(frozen=True)
class MacroRatios:
    """Share of macro energy from protein, fat and carbs, in percent."""

    protein: float
    fat: float
    carbs: float


@dataclass(frozen=True)
class MacroMetrics:
    """Per-day averages, extremes and ratios of a comparison."""

    day_count: int
    date_range: DateRange | None = None
    averages: MacroTotals | None = None
    extremes: dict[str, MacroExtremes] = field(default_factory=dict)
    ratios: MacroRatios | None = None
