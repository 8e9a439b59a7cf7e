"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from macros_tracker.adapters.supabase_block_repository import SupabaseBlockRepository
from macros_tracker.adapters.supabase_food_repository import SupabaseFoodRepository
from macros_tracker.config import Settings
from macros_tracker.services.blocks import MacroBlockService
from macros_tracker.services.cache import CachedBlockRepository, InMemoryCache
from macros_tracker.services.foods import FoodRepository


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    food_repository: FoodRepository
    block_repository: CachedBlockRepository
    block_service: MacroBlockService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_repository = SupabaseFoodRepository(
        supabase_client, table=resolved_settings.foods_table
    )
    block_repository = CachedBlockRepository(
        repository=SupabaseBlockRepository(
            supabase_client, table=resolved_settings.blocks_table
        ),
        cache=InMemoryCache(),
        ttl_seconds=resolved_settings.block_cache_ttl_seconds,
    )
    block_service = MacroBlockService(
        block_repository=block_repository,
        food_repository=food_repository,
        other_items_label=resolved_settings.other_items_label,
    )
    return AppContainer(
        settings=resolved_settings,
        food_repository=food_repository,
        block_repository=block_repository,
        block_service=block_service,
    )
