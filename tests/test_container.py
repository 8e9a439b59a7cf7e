"""Tests for container wiring."""

from macros_tracker.config import Settings
from macros_tracker.containers import build_container


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    assert container.block_service is not None
    assert container.block_service.other_items_label == "Other Items"
    assert container.block_repository.ttl_seconds == 300
