"""Parser turning block lines into resolved, footed groups."""

import logging
from dataclasses import dataclass, field

from macros_tracker.domain.macros import Group, GroupKind, MacroRow, MacroTotals
from macros_tracker.domain.notation import LineKind, ParsedLine
from macros_tracker.services.foods import FoodResolver
from macros_tracker.services.notation import classify_line

OTHER_ITEMS_LABEL = "Other Items"

_logger = logging.getLogger(__name__)

_GROUP_KINDS = {
    LineKind.MEAL: GroupKind.MEAL,
    LineKind.GROUP: GroupKind.GROUP,
}


@dataclass
class _GroupBuilder:
    name: str
    kind: GroupKind
    macro_line: str | None = None
    count: int = 1
    comment: str | None = None
    timestamp: str | None = None
    rows: list[MacroRow] = field(default_factory=list)
    total: MacroTotals = field(default_factory=MacroTotals)

    def append(self, row: MacroRow) -> None:
        self.rows.append(row)
        self.total = self.total.add(row)

    def build(self) -> Group:
        return Group(
            name=self.name,
            kind=self.kind,
            rows=list(self.rows),
            total=self.total,
            macro_line=self.macro_line,
            count=self.count,
            comment=self.comment,
            timestamp=self.timestamp,
        )


@dataclass
class BlockParser:
    """Single-pass parser for the lines of one macros block."""

    resolver: FoodResolver
    other_items_label: str = OTHER_ITEMS_LABEL

    def parse(self, lines: list[str]) -> list[Group]:
        """Return meal/group sections in source order, then "Other Items"."""
        sections: list[_GroupBuilder] = []
        other: _GroupBuilder | None = None
        current: _GroupBuilder | None = None
        in_malformed_section = False

        for index, raw in enumerate(lines):
            text = raw.strip()
            if not text:
                current = None
                in_malformed_section = False
                continue
            parsed = classify_line(text, allow_id=index == 0)

            if parsed.kind is LineKind.ID:
                continue

            if parsed.is_section:
                if not parsed.name:
                    _logger.debug("Skipping section without a name: %r", text)
                    current = None
                    in_malformed_section = True
                    continue
                current = _GroupBuilder(
                    name=parsed.name,
                    kind=_GROUP_KINDS[parsed.kind],
                    macro_line=parsed.raw_text,
                    count=parsed.count,
                    comment=parsed.comment,
                    timestamp=parsed.timestamp,
                )
                in_malformed_section = False
                sections.append(current)
                continue

            if parsed.kind is LineKind.BULLET:
                if current is None:
                    if not in_malformed_section:
                        _logger.debug("Discarding bullet outside a section: %r", text)
                    continue
                row = self._resolve(parsed)
                if row is not None:
                    current.append(row)
                continue

            current = None
            in_malformed_section = False
            row = self._resolve(parsed)
            if row is None:
                continue
            if other is None:
                other = _GroupBuilder(name=self.other_items_label, kind=GroupKind.OTHER)
            other.append(row)

        groups = [section.build() for section in sections]
        if other is not None and other.rows:
            groups.append(other.build())
        return groups

    def _resolve(self, parsed: ParsedLine) -> MacroRow | None:
        if not parsed.name:
            _logger.debug("Skipping line without a food name: %r", parsed.raw_text)
            return None
        row = self.resolver.resolve(
            parsed.name,
            parsed.quantity,
            macro_line=parsed.raw_text,
            comment=parsed.comment,
            timestamp=parsed.timestamp,
        )
        if row is None:
            _logger.debug("Unresolved food %r", parsed.name)
        return row
