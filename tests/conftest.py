"""Shared fixtures for drplayer-dashboard tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pytest
from loguru import logger

from drplayer_dashboard.skip import (
    ManualScheduler,
    MemoryStore,
    SkipController,
    SkipSettings,
    SkipSettingsStore,
)

# Non-zero so that stamps taken at the start count as "set"
START_MS = 1_000_000.0


@dataclass
class FakePlayer:
    position: float = 0.0
    duration: float = 1200.0
    seeks: list[float] = field(default_factory=list)

    def get_current_time(self) -> float:
        return self.position

    def set_current_time(self, seconds: float) -> None:
        self.seeks.append(seconds)
        self.position = seconds

    def get_duration(self) -> float:
        return self.duration


@pytest.fixture
def player() -> FakePlayer:
    return FakePlayer()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler(start_ms=START_MS)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def make_controller(player, scheduler, store):
    """Build a controller wired to the fake player, clock and store."""

    def _make(settings: Optional[SkipSettings] = None) -> SkipController:
        settings_store = SkipSettingsStore(store)
        if settings is not None:
            settings_store.save(settings)
        controller = SkipController(
            settings_store,
            get_current_time=player.get_current_time,
            set_current_time=player.set_current_time,
            get_duration=player.get_duration,
            scheduler=scheduler,
            clock=scheduler.clock,
        )
        controller.init()
        return controller

    return _make


@pytest.fixture
def log_messages():
    """Collect Loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(
        lambda message: messages.append(message.record["message"]),
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)
