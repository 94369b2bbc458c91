"""Tests for the settings page helpers."""

from __future__ import annotations

from drplayer_dashboard.server.settings_ui import _describe, save_from_form, settings_from_form
from drplayer_dashboard.skip import MemoryStore, SkipSettings, SkipSettingsStore


class ReadOnlyStore:
    def get(self, key):
        return None

    def set(self, key, value):
        raise OSError("read-only file system")


def test_settings_from_form():
    settings = settings_from_form(True, False, 75, None)

    assert settings == SkipSettings(intro_enabled=True, outro_enabled=False, intro_seconds=75, outro_seconds=0)


def test_describe():
    text = _describe(SkipSettings(intro_enabled=True, intro_seconds=85))

    assert text == "Intro: skip first 85s | Outro: off"


def test_save_from_form_persists():
    settings_store = SkipSettingsStore(MemoryStore())

    ok, message = save_from_form(settings_store, False, True, 90, 45)

    assert ok is True
    assert message == "Settings saved"
    assert settings_store.load() == SkipSettings(outro_enabled=True, outro_seconds=45)


def test_save_from_form_reports_write_failure(log_messages):
    ok, message = save_from_form(SkipSettingsStore(ReadOnlyStore()), True, False, 80, 90)

    assert ok is False
    assert message.startswith("Could not save settings:")
    assert "read-only file system" in message
    assert any("read-only file system" in m for m in log_messages)
