"""Single-block display and edit flows over the document store."""

import logging
from dataclasses import dataclass
from typing import Protocol

from macros_tracker.domain.macros import BlockView, CalcResult
from macros_tracker.domain.notation import LineKind
from macros_tracker.services.aggregator import CrossBlockCalculator, compute_block
from macros_tracker.services.foods import FoodRepository, FoodResolver
from macros_tracker.services.merger import merge_macro_lines
from macros_tracker.services.notation import (
    classify_line,
    extract_block_id,
    format_item_line,
)
from macros_tracker.services.parser import OTHER_ITEMS_LABEL

_logger = logging.getLogger(__name__)


class BlockRepository(Protocol):
    """Document store holding the raw lines of each macros block."""

    async def get_block_lines(self, block_id: str) -> list[str] | None:
        """Return the ordered raw lines of a block, or None if missing."""

    async def save_block_lines(self, block_id: str, lines: list[str]) -> None:
        """Replace the raw lines of a block."""


class BlockNotFoundError(LookupError):
    """Raised when the document store has no block for an id."""

    def __init__(self, block_id: str) -> None:
        super().__init__(f"No macros block found for id {block_id}")
        self.block_id = block_id


class LineNotFoundError(LookupError):
    """Raised when an edit targets a line the block does not contain."""

    def __init__(self, block_id: str, macro_line: str) -> None:
        super().__init__(f"Line {macro_line!r} not found in block {block_id}")
        self.block_id = block_id
        self.macro_line = macro_line


class InvalidEditError(ValueError):
    """Raised when an edit does not apply to the targeted line."""


@dataclass
class MacroBlockService:
    """Application service for reading and editing macros blocks."""

    block_repository: BlockRepository
    food_repository: FoodRepository
    other_items_label: str = OTHER_ITEMS_LABEL

    async def get_block(self, block_id: str) -> BlockView:
        """Parse one block into groups and totals.

        Store failures propagate to the caller.
        """
        lines = await self._load_lines(block_id)
        return self._view(block_id, lines)

    async def calculate(self, block_ids: list[str]) -> CalcResult:
        """Aggregate totals across blocks, in input order."""
        calculator = CrossBlockCalculator(
            block_repository=self.block_repository,
            food_repository=self.food_repository,
            other_items_label=self.other_items_label,
        )
        return await calculator.calculate(block_ids)

    async def add_lines(self, block_id: str, new_lines: list[str]) -> BlockView:
        """Append lines to a block, merging duplicates, and persist."""
        lines = await self._load_lines(block_id)
        additions = [line.strip() for line in new_lines if line.strip()]
        updated = merge_macro_lines(lines + additions)
        await self.block_repository.save_block_lines(block_id, updated)
        _logger.info("Added %s lines to block %s", len(additions), block_id)
        return self._view(block_id, updated)

    async def remove_line(self, block_id: str, macro_line: str) -> BlockView:
        """Remove a row, or a whole meal/group section with its bullets."""
        lines = merge_macro_lines(await self._load_lines(block_id))
        index = _locate(lines, block_id, macro_line)
        end = index + 1
        if classify_line(lines[index]).is_section:
            while end < len(lines) and lines[end].strip().startswith("-"):
                end += 1
        updated = lines[:index] + lines[end:]
        await self.block_repository.save_block_lines(block_id, updated)
        _logger.info("Removed %s lines from block %s", end - index, block_id)
        return self._view(block_id, updated)

    async def update_quantity(
        self, block_id: str, macro_line: str, grams: float
    ) -> BlockView:
        """Rewrite a food line with a new quantity, keeping its annotations."""
        if grams <= 0:
            raise InvalidEditError("Quantity must be positive")
        lines = merge_macro_lines(await self._load_lines(block_id))
        index = _locate(lines, block_id, macro_line)
        parsed = classify_line(lines[index])
        if parsed.kind not in {LineKind.ITEM, LineKind.BULLET} or not parsed.name:
            raise InvalidEditError(f"Line {macro_line!r} is not a food line")
        lines[index] = format_item_line(
            parsed.name,
            grams,
            comment=parsed.comment,
            timestamp=parsed.timestamp,
            bullet=parsed.kind is LineKind.BULLET,
        )
        updated = merge_macro_lines(lines)
        await self.block_repository.save_block_lines(block_id, updated)
        return self._view(block_id, updated)

    async def _load_lines(self, block_id: str) -> list[str]:
        lines = await self.block_repository.get_block_lines(block_id)
        if lines is None:
            raise BlockNotFoundError(block_id)
        return list(lines)

    def _view(self, block_id: str, lines: list[str]) -> BlockView:
        resolver = FoodResolver(self.food_repository.list_foods())
        groups, totals = compute_block(lines, resolver, self.other_items_label)
        return BlockView(id=block_id, groups=groups, totals=totals)


def _locate(lines: list[str], block_id: str, macro_line: str) -> int:
    """Return the index of the line an edit targets."""
    target = macro_line.strip()
    start = 1 if extract_block_id(lines) is not None else 0
    for index in range(start, len(lines)):
        if lines[index].strip() == target:
            return index
    raise LineNotFoundError(block_id, macro_line)
