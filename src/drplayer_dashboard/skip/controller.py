"""Intro/outro auto-skip controller.

One controller lives for as long as its playback view. The host player
feeds it time-update, seek and fullscreen signals; the controller decides
when to move the playhead past the intro or to just before the end.

Typical wiring::

    controller = SkipController(
        store,
        get_current_time=player.position,
        set_current_time=player.seek,
        get_duration=player.duration,
    )
    controller.init()                      # on every new media item
    player.on("timeupdate", controller.handle_time_update)
    player.on("seeking", controller.on_user_seek_start)
    player.on("seeked", controller.on_user_seek_end)
    ...
    controller.cleanup()                   # on view teardown
"""

from __future__ import annotations

import dataclasses
import threading
import time
from typing import Any, Callable, Optional, Union

from ..constants import (
    FULLSCREEN_GUARD_MS,
    IMMEDIATE_SKIP_WINDOW_SECONDS,
    INTRO_SKIP_DEBOUNCE_MS,
    OUTRO_END_MARGIN_SECONDS,
    OUTRO_LANDING_OFFSET_SECONDS,
    OUTRO_SKIP_DEBOUNCE_MS,
    TIME_UPDATE_DEBOUNCE_MS,
    USER_SEEK_GUARD_MS,
)
from ..exceptions import StorageError
from ..logging import get_logger
from .models import SkipSessionState, SkipSettings
from .scheduler import Scheduler, ThreadingScheduler, TimerHandle
from .storage import KeyValueStore, SkipSettingsStore


def _wall_clock_ms() -> float:
    return time.time() * 1000


def _within(stamp: float, now: float, window_ms: float) -> bool:
    """True if ``stamp`` is set and less than ``window_ms`` before ``now``."""
    return stamp > 0 and now - stamp < window_ms


class SkipController:
    """Per-playback intro/outro skip state machine.

    All public methods are serialised by a re-entrant lock so that timer
    callbacks never interleave with host signals.
    """

    def __init__(
        self,
        store: Union[KeyValueStore, SkipSettingsStore],
        *,
        get_current_time: Optional[Callable[[], float]] = None,
        set_current_time: Optional[Callable[[float], Any]] = None,
        get_duration: Optional[Callable[[], float]] = None,
        on_skip_to_next: Optional[Callable[[], Any]] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.settings_store = (
            store if isinstance(store, SkipSettingsStore) else SkipSettingsStore(store)
        )
        self._get_current_time = get_current_time or (lambda: 0.0)
        self._set_current_time = set_current_time or (lambda seconds: None)
        self._get_duration = get_duration or (lambda: 0.0)
        # Reserved for next-episode advance; outro skip relies on the host's
        # own end-of-media handling instead.
        self.on_skip_to_next = on_skip_to_next or (lambda: None)

        self._scheduler = scheduler or ThreadingScheduler()
        self._clock = clock or _wall_clock_ms
        self._lock = threading.RLock()

        self._settings = SkipSettings()
        self._state = SkipSessionState()

        self._pending_tick: Optional[TimerHandle] = None
        self._tick_generation = 0

        self.log = get_logger("skip")

    # --- Properties ---

    @property
    def settings(self) -> SkipSettings:
        with self._lock:
            return self._settings

    @property
    def state(self) -> SkipSessionState:
        """Copy of the session state."""
        with self._lock:
            return dataclasses.replace(self._state)

    @property
    def skip_enabled(self) -> bool:
        with self._lock:
            return self._settings.intro_enabled or self._settings.outro_enabled

    @property
    def has_pending_tick(self) -> bool:
        with self._lock:
            return self._pending_tick is not None

    # --- Settings ---

    def load_settings(self) -> SkipSettings:
        """Replace the in-memory settings with the stored ones."""
        settings = self.settings_store.load()
        with self._lock:
            self._settings = settings
        return settings

    def save_settings(self, settings: Union[SkipSettings, dict[str, Any]]) -> None:
        """Persist new settings and re-evaluate skips at the current position.

        A failed write is logged; the settings still apply for this session.
        """
        if isinstance(settings, dict):
            try:
                settings = SkipSettings.from_dict(settings)
            except (TypeError, ValueError) as e:
                self.log.warning(f"Ignoring malformed skip settings: {e}")
                return
        elif not isinstance(settings, SkipSettings):
            self.log.warning(f"Ignoring skip settings of type {type(settings).__name__}")
            return

        with self._lock:
            self._settings = settings
            try:
                self.settings_store.save(settings)
            except StorageError as e:
                self.log.warning(f"Failed to save skip settings: {e}")
            self.apply_skip_settings()

    def init(self) -> None:
        """Start a playback session: reset state, then load settings."""
        with self._lock:
            self.reset_skip_state()
            self.load_settings()

    # --- Decision engine ---

    def _intro_guarded(self, now: float) -> bool:
        """True while a manual seek or fullscreen change should block intro skip."""
        state = self._state
        if state.user_seeking or _within(state.last_user_seek_at, now, USER_SEEK_GUARD_MS):
            return True
        if state.fullscreen_transitioning or _within(
            state.last_fullscreen_change_at, now, FULLSCREEN_GUARD_MS
        ):
            return True
        return False

    def _skip_intro_to(self, current_time: float, now: float) -> None:
        target = self._settings.intro_seconds
        self._set_current_time(target)
        self._state.intro_applied = True
        self._state.last_skip_action_at = now
        self.log.info(f"Skipped intro: {current_time:.1f}s -> {target}s")

    def _try_intro_skip_immediate(self) -> bool:
        with self._lock:
            if not self._settings.intro_enabled or self._state.intro_applied:
                return False

            current_time = self._get_current_time()
            now = self._clock()
            if self._intro_guarded(now):
                return False

            if (
                current_time <= IMMEDIATE_SKIP_WINDOW_SECONDS
                and current_time <= self._settings.intro_seconds
            ):
                self._skip_intro_to(current_time, now)
                return True
            return False

    def _try_intro_skip(self) -> bool:
        with self._lock:
            if not self._settings.intro_enabled or self._state.intro_applied:
                return False

            current_time = self._get_current_time()
            now = self._clock()
            if self._intro_guarded(now):
                return False
            if _within(self._state.last_skip_action_at, now, INTRO_SKIP_DEBOUNCE_MS):
                return False

            if current_time <= self._settings.intro_seconds:
                self._skip_intro_to(current_time, now)
                return True
            return False

    def _try_outro_skip(self) -> bool:
        with self._lock:
            if not self._settings.outro_enabled or self._state.outro_applied:
                return False

            duration = self._get_duration()
            if not duration or duration <= 0:
                return False

            current_time = self._get_current_time()
            skip_point = duration - self._settings.outro_seconds
            now = self._clock()
            if _within(self._state.last_skip_action_at, now, OUTRO_SKIP_DEBOUNCE_MS):
                return False

            if skip_point <= current_time < duration - OUTRO_END_MARGIN_SECONDS:
                self._set_current_time(duration - OUTRO_LANDING_OFFSET_SECONDS)
                self._state.outro_applied = True
                self._state.last_skip_action_at = now
                self.log.info(
                    f"Skipped outro: {current_time:.1f}s -> end "
                    f"(last {self._settings.outro_seconds}s of {duration:.1f}s)"
                )
                return True
            return False

    def _evaluate(self, step: Callable[[], bool]) -> bool:
        """Run one decision step; host callback failures count as "did not fire"."""
        with self._lock:
            try:
                return step()
            except Exception as e:
                self.log.error(f"Skip evaluation failed: {e}")
                return False

    def apply_intro_skip_immediate(self) -> bool:
        """Skip the intro right at the start of playback.

        Returns True if the playhead was moved.
        """
        return self._evaluate(self._try_intro_skip_immediate)

    def apply_intro_skip(self) -> bool:
        """Skip the intro anywhere inside the intro window, debounced.

        Returns True if the playhead was moved.
        """
        return self._evaluate(self._try_intro_skip)

    def apply_outro_skip(self) -> bool:
        """Jump to just before the end once the outro window is reached.

        Returns True if the playhead was moved.
        """
        return self._evaluate(self._try_outro_skip)

    def apply_skip_settings(self) -> None:
        """Run a full evaluation: immediate intro, else regular intro, then outro."""
        with self._lock:
            try:
                if not self._try_intro_skip_immediate():
                    self._try_intro_skip()
                self._try_outro_skip()
            except Exception as e:
                self.log.error(f"Skip evaluation failed: {e}")

    # --- Time updates ---

    def handle_time_update(self) -> None:
        """Coalesce time-update signals; only the last one in a window evaluates."""
        with self._lock:
            self._cancel_pending_tick()
            generation = self._tick_generation
            self._pending_tick = self._scheduler.call_later(
                TIME_UPDATE_DEBOUNCE_MS / 1000,
                lambda: self._on_time_update_settled(generation),
            )

    def _on_time_update_settled(self, generation: int) -> None:
        with self._lock:
            # A newer tick, reset or cleanup superseded this callback
            if generation != self._tick_generation:
                return
            self._pending_tick = None

            try:
                if self._settings.intro_enabled and not self._state.intro_applied:
                    if not self._try_intro_skip_immediate():
                        self._try_intro_skip()
                if self._settings.outro_enabled and not self._state.outro_applied:
                    self._try_outro_skip()
            except Exception as e:
                self.log.error(f"Skip evaluation failed: {e}")

    def _cancel_pending_tick(self) -> None:
        """Cancel the pending tick (must be called with lock held)."""
        self._tick_generation += 1
        if self._pending_tick is not None:
            self._pending_tick.cancel()
            self._pending_tick = None

    # --- Session lifecycle ---

    def reset_skip_state(self) -> None:
        """Forget everything about the previous media item."""
        with self._lock:
            self._state = SkipSessionState()
            self._cancel_pending_tick()

    def on_user_seek_start(self) -> None:
        with self._lock:
            self._state.user_seeking = True
        self.log.debug("User seek started")

    def on_user_seek_end(self) -> None:
        with self._lock:
            self._state.user_seeking = False
            self._state.last_user_seek_at = self._clock()
        self.log.debug("User seek ended")

    def on_fullscreen_change_start(self) -> None:
        with self._lock:
            self._state.fullscreen_transitioning = True
        self.log.debug("Fullscreen change started")

    def on_fullscreen_change_end(self) -> None:
        with self._lock:
            self._state.fullscreen_transitioning = False
            self._state.last_fullscreen_change_at = self._clock()
        self.log.debug("Fullscreen change ended")

    def cleanup(self) -> None:
        """Cancel any outstanding timer; call on view teardown."""
        with self._lock:
            self._cancel_pending_tick()
