"""Tests for block totals and cross-block aggregation."""

import asyncio
import logging

import pytest

from macros_tracker.domain.foods import FoodEntry
from macros_tracker.domain.macros import MacroTotals
from macros_tracker.services.aggregator import (
    CrossBlockCalculator,
    block_totals,
    compute_block,
    sum_totals,
)
from macros_tracker.services.blocks import MacroBlockService
from macros_tracker.services.foods import FoodResolver
from macros_tracker.services.merger import merge_macro_lines
from macros_tracker.services.parser import BlockParser
from tests.conftest import InMemoryBlockRepository, InMemoryFoodRepository


def test_sum_totals_stays_on_decimal_grid() -> None:
    totals = sum_totals(
        [
            MacroTotals(calories=0.1, protein=0.2, fat=0.1, carbs=0.7),
            MacroTotals(calories=0.2, protein=0.1, fat=0.2, carbs=0.1),
        ]
    )

    assert totals == MacroTotals(calories=0.3, protein=0.3, fat=0.3, carbs=0.8)
    assert sum_totals([]) == MacroTotals()


def test_aggregate_sums_days() -> None:
    foods = InMemoryFoodRepository(
        foods=[FoodEntry("Feast", 100, calories=2000, protein=100, fat=80, carbs=200)]
    )
    blocks = InMemoryBlockRepository(
        blocks={
            "2024-01-01": ["id: 2024-01-01", "Feast"],
            "2024-01-02": ["id: 2024-01-02", "Feast:90g"],
        }
    )
    calculator = CrossBlockCalculator(blocks, foods)

    result = asyncio.run(calculator.calculate(["2024-01-01", "2024-01-02"]))

    assert result.aggregate.calories == 3800
    assert result.aggregate.protein == 190
    assert len(result.breakdown) == 2
    assert [entry.id for entry in result.breakdown] == ["2024-01-01", "2024-01-02"]
    assert result.breakdown[1].totals.calories == 1800


def test_breakdown_matches_single_block_parse(
    block_repository: InMemoryBlockRepository,
    food_repository: InMemoryFoodRepository,
    resolver: FoodResolver,
) -> None:
    calculator = CrossBlockCalculator(block_repository, food_repository)
    result = asyncio.run(calculator.calculate(["2024-01-01", "2024-01-02"]))

    for entry in result.breakdown:
        lines = block_repository.blocks[entry.id]
        groups = BlockParser(resolver).parse(merge_macro_lines(lines))
        assert entry.totals == block_totals(groups)

    assert result.breakdown[0].totals == MacroTotals(
        calories=233.6, protein=7.3, fat=3.1, carbs=47.5
    )
    assert result.breakdown[1].totals == MacroTotals(
        calories=430, protein=79, fat=7.9, carbs=6
    )
    assert result.aggregate == MacroTotals(
        calories=663.6, protein=86.3, fat=11.0, carbs=53.5
    )


def test_breakdown_matches_block_view(block_service: MacroBlockService) -> None:
    view = asyncio.run(block_service.get_block("2024-01-01"))
    result = asyncio.run(block_service.calculate(["2024-01-01"]))

    assert result.breakdown[0].totals == view.totals


def test_empty_block_contributes_zero(
    block_repository: InMemoryBlockRepository,
    food_repository: InMemoryFoodRepository,
) -> None:
    block_repository.blocks["empty"] = ["id: empty", "UnknownFood:100g"]
    calculator = CrossBlockCalculator(block_repository, food_repository)

    result = asyncio.run(calculator.calculate(["empty", "2024-01-02"]))

    assert len(result.breakdown) == 2
    assert result.breakdown[0].totals == MacroTotals()
    assert result.aggregate.calories == 430


def test_failed_and_missing_blocks_are_skipped(
    block_repository: InMemoryBlockRepository,
    food_repository: InMemoryFoodRepository,
    caplog: pytest.LogCaptureFixture,
) -> None:
    block_repository.failing_ids.add("broken")
    calculator = CrossBlockCalculator(block_repository, food_repository)

    with caplog.at_level(logging.WARNING, logger="macros_tracker"):
        result = asyncio.run(
            calculator.calculate(["broken", "2024-01-02", "missing", "2024-01-01"])
        )

    assert [entry.id for entry in result.breakdown] == ["2024-01-02", "2024-01-01"]
    assert result.aggregate.calories == 663.6
    assert "broken" in caplog.text
    assert "missing" in caplog.text


def test_blocks_are_fetched_in_input_order(
    block_repository: InMemoryBlockRepository,
    food_repository: InMemoryFoodRepository,
) -> None:
    calculator = CrossBlockCalculator(block_repository, food_repository)

    asyncio.run(calculator.calculate(["2024-01-02", "2024-01-01"]))

    assert block_repository.reads == ["2024-01-02", "2024-01-01"]


def test_compute_block_merges_before_parsing(resolver: FoodResolver) -> None:
    groups, totals = compute_block(["Apple:100g", "Apple:50g"], resolver)

    assert len(groups[0].rows) == 1
    assert groups[0].rows[0].serving == "150g"
    assert totals.calories == 78.0


def test_split_meal_is_counted_once(resolver: FoodResolver) -> None:
    groups, totals = compute_block(
        ["meal:Lunch", "- Oats:40g", "meal:Lunch", "- Apple:100g"], resolver
    )

    lunch = groups[0]
    assert lunch.count == 2
    assert [row.serving for row in lunch.rows] == ["40g", "100g"]
    assert lunch.total.calories == 207.6
    assert totals.calories == 207.6
