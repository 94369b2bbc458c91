"""Dry-run of the skip controller over a simulated playback."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .controller import SkipController
from .models import SkipSettings
from .scheduler import MANUAL_CLOCK_START_MS, ManualScheduler
from .storage import MemoryStore, SkipSettingsStore


@dataclass
class SkipEvent:
    """A playhead jump performed by the controller."""

    at_ms: float  # Simulated wall-clock offset from playback start
    from_seconds: float
    to_seconds: float


@dataclass
class SimulatedPlayer:
    """Minimal media element: a position that advances unless seeked."""

    duration: float
    position: float = 0.0
    events: list[SkipEvent] = field(default_factory=list)
    clock: Optional[ManualScheduler] = None

    def get_current_time(self) -> float:
        return self.position

    def get_duration(self) -> float:
        return self.duration

    def set_current_time(self, seconds: float) -> None:
        at_ms = self.clock.now_ms - MANUAL_CLOCK_START_MS if self.clock else 0.0
        self.events.append(SkipEvent(at_ms, self.position, seconds))
        self.position = seconds


def simulate_playback(
    settings: SkipSettings,
    duration: float,
    start: float = 0.0,
    step: float = 0.25,
) -> list[SkipEvent]:
    """Play ``duration`` seconds of media from ``start`` and record skips.

    Time-update signals arrive every ``step`` seconds, as a browser would
    deliver them; settings are applied once when playback starts.
    """
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")

    scheduler = ManualScheduler()
    player = SimulatedPlayer(duration=duration, position=start, clock=scheduler)
    controller = SkipController(
        SkipSettingsStore(MemoryStore()),
        get_current_time=player.get_current_time,
        set_current_time=player.set_current_time,
        get_duration=player.get_duration,
        scheduler=scheduler,
        clock=scheduler.clock,
    )
    controller.init()
    controller.save_settings(settings)

    while player.position < duration:
        player.position = min(duration, player.position + step)
        controller.handle_time_update()
        scheduler.advance(step * 1000)

    controller.cleanup()
    return player.events
