"""Shared test fixtures."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

import pytest

from macros_tracker.app_logging import QUIET_LOGGERS
from macros_tracker.config import Settings
from macros_tracker.containers import AppContainer
from macros_tracker.domain.foods import FoodEntry
from macros_tracker.services.blocks import BlockRepository, MacroBlockService
from macros_tracker.services.cache import CachedBlockRepository, InMemoryCache
from macros_tracker.services.foods import FoodRepository, FoodResolver

FAKE_SERVICE_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
    "c2lnbmF0dXJl"
)


def sample_foods() -> list[FoodEntry]:
    """Food database used across tests."""
    return [
        FoodEntry("Apple", 100, calories=52, protein=0.3, fat=0.2, carbs=14),
        FoodEntry("Oats", 100, calories=389, protein=16.9, fat=6.9, carbs=66.3),
        FoodEntry("Oat Milk", 240, calories=120, protein=3, fat=5, carbs=16),
        FoodEntry("Almond Milk", 240, calories=39, protein=1, fat=2.5, carbs=3.4),
        FoodEntry("Chicken Breast", 100, calories=165, protein=31, fat=3.6, carbs=0),
        FoodEntry("Greek Yogurt", 170, calories=100, protein=17, fat=0.7, carbs=6),
        FoodEntry("Banana", 118, calories=105, protein=1.3, fat=0.4, carbs=27),
        FoodEntry("Mystery Bar", None, calories=200, protein=10, fat=8, carbs=20),
    ]


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food database for tests."""

    foods: list[FoodEntry] = field(default_factory=sample_foods)

    def list_foods(self) -> list[FoodEntry]:
        return list(self.foods)

    def search_foods(self, query: str, limit: int) -> list[FoodEntry]:
        query_lower = query.strip().lower()
        matches = [food for food in self.foods if query_lower in food.name.lower()]
        return sorted(matches, key=lambda food: food.name)[:limit]


@dataclass
class InMemoryBlockRepository(BlockRepository):
    """In-memory document store for tests."""

    blocks: dict[str, list[str]] = field(default_factory=dict)
    failing_ids: set[str] = field(default_factory=set)
    reads: list[str] = field(default_factory=list)
    saves: list[str] = field(default_factory=list)

    async def get_block_lines(self, block_id: str) -> list[str] | None:
        self.reads.append(block_id)
        if block_id in self.failing_ids:
            raise RuntimeError("store unavailable")
        lines = self.blocks.get(block_id)
        return list(lines) if lines is not None else None

    async def save_block_lines(self, block_id: str, lines: list[str]) -> None:
        self.saves.append(block_id)
        self.blocks[block_id] = list(lines)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=FAKE_SERVICE_KEY,
    )


@pytest.fixture
def resolver() -> FoodResolver:
    return FoodResolver(sample_foods())


@pytest.fixture
def food_repository() -> InMemoryFoodRepository:
    return InMemoryFoodRepository()


@pytest.fixture
def block_repository() -> InMemoryBlockRepository:
    return InMemoryBlockRepository(
        blocks={
            "2024-01-01": [
                "id: 2024-01-01",
                "meal:Breakfast // weekday",
                "- Oats:40g @07:30",
                "Apple:150g",
            ],
            "2024-01-02": [
                "id: 2024-01-02",
                "Chicken Breast:200g",
                "Greek Yogurt",
            ],
        }
    )


@pytest.fixture
def block_service(
    block_repository: InMemoryBlockRepository,
    food_repository: InMemoryFoodRepository,
) -> MacroBlockService:
    return MacroBlockService(
        block_repository=block_repository,
        food_repository=food_repository,
    )


@pytest.fixture
def container(
    settings: Settings,
    block_repository: InMemoryBlockRepository,
    food_repository: InMemoryFoodRepository,
) -> AppContainer:
    cached_repository = CachedBlockRepository(
        repository=block_repository, cache=InMemoryCache()
    )
    return AppContainer(
        settings=settings,
        food_repository=food_repository,
        block_repository=cached_repository,
        block_service=MacroBlockService(
            block_repository=cached_repository,
            food_repository=food_repository,
            other_items_label=settings.other_items_label,
        ),
    )


@pytest.fixture(autouse=True)
def _reset_app_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("macros_tracker")
    logger.handlers.clear()
    logger.propagate = True
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)
