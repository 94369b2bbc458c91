"""DrPlayer Dashboard - local app server and intro/outro auto-skip."""

__version__ = "1.0.0"

from .skip import (
    JsonFileStore,
    MemoryStore,
    SkipController,
    SkipSessionState,
    SkipSettings,
    SkipSettingsStore,
)

__all__ = [
    # Skip
    "SkipController",
    "SkipSettings",
    "SkipSessionState",
    # Storage
    "SkipSettingsStore",
    "JsonFileStore",
    "MemoryStore",
]
