"""Intro/outro auto-skip for an already-playing media element."""

from .controller import SkipController
from .models import SkipSessionState, SkipSettings
from .scheduler import ManualScheduler, Scheduler, ThreadingScheduler
from .simulation import SkipEvent, simulate_playback
from .storage import JsonFileStore, KeyValueStore, MemoryStore, SkipSettingsStore

__all__ = [
    "SkipController",
    "SkipSessionState",
    "SkipSettings",
    "ManualScheduler",
    "Scheduler",
    "ThreadingScheduler",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "SkipSettingsStore",
    "SkipEvent",
    "simulate_playback",
]
