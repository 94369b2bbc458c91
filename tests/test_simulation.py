"""Tests for the playback dry-run."""

from __future__ import annotations

import pytest

from drplayer_dashboard.skip import SkipSettings, simulate_playback


def test_intro_and_outro_over_full_episode():
    settings = SkipSettings(intro_enabled=True, outro_enabled=True, intro_seconds=90, outro_seconds=90)

    events = simulate_playback(settings, duration=1200)

    assert [(e.from_seconds, e.to_seconds) for e in events] == [
        (0.0, 90),
        (1110.0, pytest.approx(1199.9)),
    ]
    assert events[0].at_ms == 0


def test_starting_mid_intro_uses_regular_skip():
    settings = SkipSettings(intro_enabled=True, intro_seconds=90)

    events = simulate_playback(settings, duration=600, start=30)

    assert len(events) == 1
    assert events[0].from_seconds == 30
    assert events[0].to_seconds == 90


def test_nothing_enabled():
    assert simulate_playback(SkipSettings(), duration=300) == []


def test_rejects_non_positive_step():
    with pytest.raises(ValueError):
        simulate_playback(SkipSettings(), duration=10, step=0)
