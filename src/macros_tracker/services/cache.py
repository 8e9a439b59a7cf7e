"""Caller-owned caches for document store reads."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

from macros_tracker.services.blocks import BlockRepository

_logger = logging.getLogger(__name__)


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL in seconds."""

    def delete(self, key: str) -> None:
        """Drop a cached value."""

    def clear(self) -> None:
        """Drop every cached value."""


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime


@dataclass
class InMemoryCache(Cache):
    """Process-local TTL cache."""

    _entries: dict[str, _CacheEntry]

    def __init__(self) -> None:
        self._entries = {}

    def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL."""
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=ttl_seconds)
        self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)

    def delete(self, key: str) -> None:
        """Drop a cached value."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop every cached value."""
        self._entries.clear()


@dataclass
class CachedBlockRepository(BlockRepository):
    """Block repository that remembers the last known lines of each block.

    Owners call ``invalidate`` when the underlying store changes outside of
    this process.
    """

    repository: BlockRepository
    cache: Cache
    ttl_seconds: int = 300

    async def get_block_lines(self, block_id: str) -> list[str] | None:
        """Return cached lines, reading through to the store on a miss."""
        cache_key = _cache_key(block_id)
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return list(cached)
        lines = await self.repository.get_block_lines(block_id)
        if lines is not None:
            self.cache.set(cache_key, list(lines), ttl_seconds=self.ttl_seconds)
        return lines

    async def save_block_lines(self, block_id: str, lines: list[str]) -> None:
        """Persist lines and refresh the cached copy."""
        await self.repository.save_block_lines(block_id, lines)
        self.cache.set(_cache_key(block_id), list(lines), ttl_seconds=self.ttl_seconds)

    def invalidate(self, block_id: str | None = None) -> None:
        """Forget one block, or every block when no id is given."""
        if block_id is None:
            self.cache.clear()
            _logger.debug("Invalidated all cached blocks")
            return
        self.cache.delete(_cache_key(block_id))
        _logger.debug("Invalidated cached block %s", block_id)


def _cache_key(block_id: str) -> str:
    return f"block:lines:{block_id}"
