"""Nutrition aggregate models shared by block display and comparison."""

import math
from dataclasses import dataclass, field
from enum import Enum


def round1(value: float) -> float:
    """Round half-up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


@dataclass(frozen=True)
class MacroTotals:
    """Four-field nutrition aggregate."""

    calories: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    carbs: float = 0.0

    def add(self, other: "MacroTotals | MacroRow") -> "MacroTotals":
        """Return the component-wise sum, kept on the 0.1 grid."""
        return MacroTotals(
            calories=round1(self.calories + other.calories),
            protein=round1(self.protein + other.protein),
            fat=round1(self.fat + other.fat),
            carbs=round1(self.carbs + other.carbs),
        )


@dataclass(frozen=True)
class MacroRow:
    """A resolved food line with rounded macros."""

    name: str
    serving: str
    calories: float
    protein: float
    fat: float
    carbs: float
    macro_line: str
    comment: str | None = None
    timestamp: str | None = None


class GroupKind(Enum):
    """Origin of a group of rows."""

    MEAL = "meal"
    GROUP = "group"
    OTHER = "other"


@dataclass(frozen=True)
class Group:
    """A named section of rows with its footed total."""

    name: str
    kind: GroupKind
    rows: list[MacroRow] = field(default_factory=list)
    total: MacroTotals = field(default_factory=MacroTotals)
    macro_line: str | None = None
    count: int = 1
    comment: str | None = None
    timestamp: str | None = None


@dataclass(frozen=True)
class BlockView:
    """Parsed groups and totals of one macros block."""

    id: str
    groups: list[Group]
    totals: MacroTotals


@dataclass(frozen=True)
class CalcBreakdown:
    """Totals of one block in a multi-block comparison."""

    id: str
    totals: MacroTotals


@dataclass(frozen=True)
class CalcResult:
    """Combined totals across blocks with the per-block breakdown."""

    aggregate: MacroTotals
    breakdown: list[CalcBreakdown]
