"""Tests for the dashboard web server."""

from __future__ import annotations

import json
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from drplayer_dashboard import __version__
from drplayer_dashboard.constants import NO_CACHE_HEADER, SKIP_SETTINGS_STORAGE_KEY
from drplayer_dashboard.server import create_app, render_landing_page, validate_apps
from drplayer_dashboard.server.app import _resolve_inside
from drplayer_dashboard.skip import MemoryStore, SkipSettings, SkipSettingsStore

INDEX_HTML = "<!DOCTYPE html><html><body><div id=app></div></body></html>"


@pytest.fixture
def apps_dir(tmp_path):
    root = tmp_path / "apps"
    player = root / "drplayer"
    (player / "assets").mkdir(parents=True)
    (player / "index.html").write_text(INDEX_HTML)
    (player / "assets" / "main.js").write_text("console.log('hi')")
    (root / "docs").mkdir()
    (root / "docs" / "index.html").write_text("<p>docs</p>")
    return root


@pytest.fixture
def settings_store():
    return SkipSettingsStore(MemoryStore())


@pytest.fixture
def client(apps_dir, settings_store):
    app = create_app(apps_dir, ["drplayer"], settings_store, port=9978)
    return TestClient(app)


class TestLandingAndHealth:
    def test_landing_page_lists_apps(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert 'href="/apps/drplayer/"' in response.text
        assert "port 9978" in response.text
        assert f"v{__version__}" in response.text
        assert 'href="/ui/settings"' in response.text

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["timestamp"].endswith("Z")
        datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))

    def test_landing_escapes_app_names(self):
        html = render_landing_page(["<script>"])
        assert "<script>" not in html.split("</style>")[1]
        assert "&lt;script&gt;" in html


class TestSpaRoutes:
    def test_bare_app_path_redirects(self, client):
        response = client.get("/apps/drplayer", follow_redirects=False)

        assert response.status_code == 301
        assert response.headers["location"] == "/apps/drplayer/"

    def test_app_root_serves_index_without_cache(self, client):
        response = client.get("/apps/drplayer/")

        assert response.status_code == 200
        assert response.text == INDEX_HTML
        assert response.headers["cache-control"] == NO_CACHE_HEADER

    def test_client_route_falls_back_to_index(self, client):
        response = client.get("/apps/drplayer/video/detail/42?from=home")

        assert response.status_code == 200
        assert response.text == INDEX_HTML
        assert response.headers["cache-control"] == NO_CACHE_HEADER

    def test_missing_asset_is_not_rewritten(self, client):
        response = client.get("/apps/drplayer/assets/missing.js")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    def test_missing_index_reports_app(self, tmp_path, settings_store):
        app = create_app(tmp_path / "empty", ["drplayer"], settings_store)
        client = TestClient(app)

        response = client.get("/apps/drplayer/")

        assert response.status_code == 404
        assert response.json() == {"error": "drplayer application not found"}


class TestStaticFiles:
    def test_serves_asset(self, client):
        response = client.get("/apps/drplayer/assets/main.js")

        assert response.status_code == 200
        assert response.text == "console.log('hi')"

    def test_directory_index_for_other_apps(self, client):
        response = client.get("/apps/docs/")

        assert response.status_code == 200
        assert response.text == "<p>docs</p>"

    def test_unknown_path_outside_spa(self, client):
        response = client.get("/apps/docs/missing")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    def test_unknown_top_level_path(self, client):
        assert client.get("/nope").status_code == 404

    def test_resolve_inside_refuses_escape(self, apps_dir):
        root = apps_dir.resolve()
        assert _resolve_inside(root, "../secret.txt") is None
        assert _resolve_inside(root, "drplayer/../../x") is None
        assert _resolve_inside(root, "drplayer/index.html") == root / "drplayer" / "index.html"


class TestSkipSettingsApi:
    def test_get_returns_defaults(self, client):
        response = client.get("/api/skip-settings")

        assert response.status_code == 200
        assert response.json() == SkipSettings().to_dict()

    def test_put_persists(self, client, settings_store):
        payload = {
            "skipIntroEnabled": True,
            "skipOutroEnabled": False,
            "skipIntroSeconds": 80,
            "skipOutroSeconds": 45,
        }

        response = client.put("/api/skip-settings", json=payload)

        assert response.status_code == 200
        assert settings_store.load() == SkipSettings(
            intro_enabled=True, intro_seconds=80, outro_seconds=45
        )
        assert json.loads(settings_store.store.get(SKIP_SETTINGS_STORAGE_KEY))["skipIntroSeconds"] == 80

    def test_put_rejects_bad_numbers(self, client):
        response = client.put("/api/skip-settings", json={"skipIntroSeconds": "soon"})

        assert response.status_code == 422
        assert "Invalid skip settings" in response.json()["error"]

    def test_put_rejects_out_of_range_seconds(self, client, settings_store):
        response = client.put(
            "/api/skip-settings",
            content='{"skipIntroEnabled": true, "skipIntroSeconds": 1' + "0" * 400 + "}",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 422
        assert settings_store.load() == SkipSettings()


class TestValidateApps:
    def test_all_present(self, apps_dir):
        assert validate_apps(apps_dir, ["drplayer", "docs"]) == []

    def test_missing_directory_and_index(self, apps_dir):
        (apps_dir / "bare").mkdir()

        problems = validate_apps(apps_dir, ["ghost", "bare"])

        assert [p.app_name for p in problems] == ["ghost", "bare"]
        assert problems[1].missing == "index.html"
