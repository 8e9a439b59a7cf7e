"""Block totals and cross-block aggregation."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from macros_tracker.domain.macros import (
    CalcBreakdown,
    CalcResult,
    Group,
    MacroTotals,
)
from macros_tracker.services.foods import FoodRepository, FoodResolver
from macros_tracker.services.merger import merge_macro_lines
from macros_tracker.services.parser import OTHER_ITEMS_LABEL, BlockParser

if TYPE_CHECKING:
    from macros_tracker.services.blocks import BlockRepository

_logger = logging.getLogger(__name__)


def sum_totals(totals: Iterable[MacroTotals]) -> MacroTotals:
    """Sum totals component-wise on the 0.1 grid."""
    result = MacroTotals()
    for total in totals:
        result = result.add(total)
    return result


def block_totals(groups: Iterable[Group]) -> MacroTotals:
    """Sum the totals of every group in a block."""
    return sum_totals(group.total for group in groups)


def compute_block(
    lines: list[str],
    resolver: FoodResolver,
    other_items_label: str = OTHER_ITEMS_LABEL,
) -> tuple[list[Group], MacroTotals]:
    """Merge, parse and total one block.

    This is the only path from raw lines to numbers, shared by block display
    and multi-block comparison.
    """
    merged = merge_macro_lines(lines)
    groups = BlockParser(resolver, other_items_label).parse(merged)
    return groups, block_totals(groups)


@dataclass
class CrossBlockCalculator:
    """Computes per-block totals and their aggregate for many blocks."""

    block_repository: "BlockRepository"
    food_repository: FoodRepository
    other_items_label: str = OTHER_ITEMS_LABEL

    async def calculate(self, block_ids: list[str]) -> CalcResult:
        """Return the aggregate and per-block breakdown in input order.

        Blocks are fetched one at a time. A block that cannot be fetched or
        processed is logged and left out of the breakdown.
        """
        resolver = FoodResolver(self.food_repository.list_foods())
        aggregate = MacroTotals()
        breakdown: list[CalcBreakdown] = []
        _logger.debug("Calculating totals for %s blocks", len(block_ids))

        for block_id in block_ids:
            try:
                lines = await self.block_repository.get_block_lines(block_id)
                if lines is None:
                    _logger.warning("No macros block found for id %s", block_id)
                    continue
                _, totals = compute_block(lines, resolver, self.other_items_label)
            except Exception:
                _logger.exception("Failed to calculate macros for block %s", block_id)
                continue
            breakdown.append(CalcBreakdown(id=block_id, totals=totals))
            aggregate = aggregate.add(totals)

        _logger.debug(
            "Aggregate totals: calories=%.1f protein=%.1f fat=%.1f carbs=%.1f",
            aggregate.calories,
            aggregate.protein,
            aggregate.fat,
            aggregate.carbs,
        )
        return CalcResult(aggregate=aggregate, breakdown=breakdown)
