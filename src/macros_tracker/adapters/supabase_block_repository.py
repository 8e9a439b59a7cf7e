"""Supabase implementation for the macros block document store."""

import asyncio
from dataclasses import dataclass

from supabase import Client

from macros_tracker.services.blocks import BlockRepository


@dataclass
class SupabaseBlockRepository(BlockRepository):
    """Supabase-backed storage of block lines."""

    client: Client
    table: str = "macro_blocks"

    async def get_block_lines(self, block_id: str) -> list[str] | None:
        """Return the raw lines of a block, if present."""
        return await asyncio.to_thread(self._select_lines, block_id)

    async def save_block_lines(self, block_id: str, lines: list[str]) -> None:
        """Replace the raw lines of a block."""
        await asyncio.to_thread(self._update_lines, block_id, lines)

    def _select_lines(self, block_id: str) -> list[str] | None:
        response = (
            self.client.table(self.table)
            .select("lines")
            .eq("id", block_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        raw = response.data[0].get("lines") or []
        if isinstance(raw, str):
            raw = raw.splitlines()
        return [str(line) for line in raw]

    def _update_lines(self, block_id: str, lines: list[str]) -> None:
        response = (
            self.client.table(self.table)
            .update({"lines": lines})
            .eq("id", block_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to update macros block {block_id}")
