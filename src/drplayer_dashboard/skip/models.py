"""Data models for intro/outro skipping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..constants import DEFAULT_INTRO_SECONDS, DEFAULT_OUTRO_SECONDS


def _seconds(value: Any, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except OverflowError as e:
        # JSON integers are unbounded
        raise ValueError(f"{value!r:.20} is out of range") from e


@dataclass(frozen=True)
class SkipSettings:
    """User preferences for automatic intro/outro skipping.

    Persisted with the browser player's key names so either side can read
    what the other wrote.
    """

    intro_enabled: bool = False
    outro_enabled: bool = False
    intro_seconds: float = DEFAULT_INTRO_SECONDS
    outro_seconds: float = DEFAULT_OUTRO_SECONDS

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "skipIntroEnabled": self.intro_enabled,
            "skipOutroEnabled": self.outro_enabled,
            "skipIntroSeconds": self.intro_seconds,
            "skipOutroSeconds": self.outro_seconds,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SkipSettings":
        """Create from dictionary, filling absent values with defaults.

        Raises:
            TypeError, ValueError: If a seconds value is not a usable number
        """
        return cls(
            intro_enabled=bool(data.get("skipIntroEnabled", False)),
            outro_enabled=bool(data.get("skipOutroEnabled", False)),
            intro_seconds=_seconds(data.get("skipIntroSeconds"), DEFAULT_INTRO_SECONDS),
            outro_seconds=_seconds(data.get("skipOutroSeconds"), DEFAULT_OUTRO_SECONDS),
        )


@dataclass
class SkipSessionState:
    """Per-playback skip bookkeeping.

    Timestamps are wall-clock milliseconds; 0 means "never".
    """

    intro_applied: bool = False
    outro_applied: bool = False
    last_skip_action_at: float = 0.0

    # Manual scrubbing
    user_seeking: bool = False
    last_user_seek_at: float = 0.0

    # Fullscreen toggles
    fullscreen_transitioning: bool = False
    last_fullscreen_change_at: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for UI serialization."""
        return {
            "intro_applied": self.intro_applied,
            "outro_applied": self.outro_applied,
            "last_skip_action_at": self.last_skip_action_at,
            "user_seeking": self.user_seeking,
            "last_user_seek_at": self.last_user_seek_at,
            "fullscreen_transitioning": self.fullscreen_transitioning,
            "last_fullscreen_change_at": self.last_fullscreen_change_at,
        }
