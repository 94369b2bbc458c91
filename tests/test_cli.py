"""Tests for the command-line interface."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from drplayer_dashboard import server
from drplayer_dashboard import logging as dashboard_logging
from drplayer_dashboard.cli import main
from drplayer_dashboard.exceptions import PortUnavailableError
from drplayer_dashboard.skip import JsonFileStore, SkipSettings, SkipSettingsStore


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def settings_file(tmp_path):
    return tmp_path / "skip.json"


def _stored(settings_file):
    return SkipSettingsStore(JsonFileStore(settings_file)).load()


class TestSkipCommands:
    def test_show_defaults(self, runner, settings_file):
        result = runner.invoke(main, ["skip", "show", "-s", str(settings_file)])

        assert result.exit_code == 0
        assert "Intro" in result.output
        assert "90" in result.output

    def test_set_updates_only_given_options(self, runner, settings_file):
        runner.invoke(main, ["skip", "set", "--outro", "--outro-seconds", "60", "-s", str(settings_file)])
        result = runner.invoke(main, ["skip", "set", "--intro", "-s", str(settings_file)])

        assert result.exit_code == 0
        assert _stored(settings_file) == SkipSettings(
            intro_enabled=True, outro_enabled=True, outro_seconds=60
        )

    def test_set_rejects_negative_seconds(self, runner, settings_file):
        result = runner.invoke(main, ["skip", "set", "--intro-seconds", "-5", "-s", str(settings_file)])

        assert result.exit_code != 0
        assert not settings_file.exists()

    def test_reset(self, runner, settings_file):
        runner.invoke(main, ["skip", "set", "--intro", "--intro-seconds", "10", "-s", str(settings_file)])
        result = runner.invoke(main, ["skip", "reset", "-s", str(settings_file)])

        assert result.exit_code == 0
        assert _stored(settings_file) == SkipSettings()

    def test_simulate_reports_skips(self, runner, settings_file):
        runner.invoke(main, ["skip", "set", "--intro", "-s", str(settings_file)])

        result = runner.invoke(
            main, ["skip", "simulate", "--duration", "300", "-s", str(settings_file)]
        )

        assert result.exit_code == 0
        assert "90.00s" in result.output

    def test_simulate_without_skips(self, runner, settings_file):
        result = runner.invoke(
            main, ["skip", "simulate", "--duration", "300", "-s", str(settings_file)]
        )

        assert result.exit_code == 0
        assert "No skips would happen" in result.output


class TestServeCommand:
    @pytest.fixture(autouse=True)
    def quiet_logging(self, monkeypatch):
        monkeypatch.setattr(dashboard_logging, "setup_logging", lambda verbose=False: None)

    @pytest.fixture
    def apps_dir(self, tmp_path):
        app_dir = tmp_path / "apps" / "drplayer"
        app_dir.mkdir(parents=True)
        (app_dir / "index.html").write_text("<html></html>")
        return tmp_path / "apps"

    def test_passes_resolved_options(self, runner, monkeypatch, apps_dir, settings_file):
        calls = []
        monkeypatch.setattr(server, "run_server", lambda **kwargs: calls.append(kwargs))

        result = runner.invoke(
            main,
            [
                "serve",
                "--apps-dir", str(apps_dir),
                "--port", "8123",
                "--host", "127.0.0.1",
                "--no-auto-port",
                "--no-settings-ui",
                "-s", str(settings_file),
            ],
        )

        assert result.exit_code == 0, result.output
        assert calls == [
            {
                "apps_dir": apps_dir,
                "settings_file": settings_file,
                "spa_apps": ["drplayer"],
                "host": "127.0.0.1",
                "port": 8123,
                "auto_port": False,
                "settings_ui": False,
            }
        ]

    def test_strict_refuses_missing_app(self, runner, monkeypatch, tmp_path):
        calls = []
        monkeypatch.setattr(server, "run_server", lambda **kwargs: calls.append(kwargs))

        result = runner.invoke(main, ["serve", "--apps-dir", str(tmp_path), "--strict"])

        assert result.exit_code == 1
        assert calls == []

    def test_port_exhaustion_exits(self, runner, monkeypatch, apps_dir, settings_file):
        def no_port(**kwargs):
            raise PortUnavailableError(9978, 100)

        monkeypatch.setattr(server, "run_server", no_port)

        result = runner.invoke(main, ["serve", "--apps-dir", str(apps_dir), "-s", str(settings_file)])

        assert result.exit_code == 1
        assert "No available port" in result.output
