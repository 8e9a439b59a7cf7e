"""Models for classified notation lines."""

from dataclasses import dataclass
from enum import Enum


class LineKind(Enum):
    """Directive kinds of a macros block line."""

    ID = "id"
    MEAL = "meal"
    GROUP = "group"
    BULLET = "bullet"
    ITEM = "item"


@dataclass(frozen=True)
class ParsedLine:
    """One source line split into its semantic parts."""

    kind: LineKind
    raw_text: str
    name: str
    quantity_text: str | None = None
    quantity: float | None = None
    comment: str | None = None
    timestamp: str | None = None
    count: int = 1

    @property
    def is_section(self) -> bool:
        """Return whether the line opens a meal or group section."""
        return self.kind in {LineKind.MEAL, LineKind.GROUP}
