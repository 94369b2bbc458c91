"""FastAPI application: landing page, health check and bundled app serving."""

from __future__ import annotations

import html
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from fastapi import Body, FastAPI, Request
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse, RedirectResponse

from .. import __version__
from ..constants import NO_CACHE_HEADER, SPA_INDEX_FILE
from ..exceptions import AppNotFoundError, StorageError
from ..logging import get_logger
from ..skip import SkipSettings, SkipSettingsStore

log = get_logger("server")

# Last path segment looks like a file ("main.js", "logo.svg")
_FILE_EXTENSION = re.compile(r"\.[a-zA-Z0-9]+$")

_LANDING_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>DrPlayer Dashboard</title>
    <style>
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            margin: 0;
            padding: 40px;
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            min-height: 100vh;
            color: #333;
        }}
        .container {{
            max-width: 800px;
            margin: 0 auto;
            background: white;
            border-radius: 12px;
            padding: 40px;
            box-shadow: 0 10px 30px rgba(0,0,0,0.2);
        }}
        h1 {{ text-align: center; color: #2c3e50; }}
        .apps-grid {{
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(250px, 1fr));
            gap: 20px;
            margin-top: 30px;
        }}
        .app-card {{
            background: #f8f9fa;
            border: 2px solid #e9ecef;
            border-radius: 8px;
            padding: 20px;
            text-decoration: none;
            color: #495057;
        }}
        .app-card:hover {{ border-color: #667eea; }}
        .app-name {{ font-size: 1.2em; font-weight: bold; color: #2c3e50; }}
        .status {{
            margin-top: 30px;
            padding: 15px;
            background: #d4edda;
            border: 1px solid #c3e6cb;
            border-radius: 6px;
            color: #155724;
        }}
        .footer {{ text-align: center; margin-top: 40px; color: #6c757d; font-size: 0.9em; }}
    </style>
</head>
<body>
    <div class="container">
        <h1>DrPlayer Dashboard</h1>
        <div class="status"><strong>Server is running</strong>{port_note}</div>
        <div class="apps-grid">
{app_cards}
        </div>
        <div class="footer">
            <p>Health check: <a href="/health">/health</a></p>
            <p>Skip settings: <a href="/ui/settings">/ui/settings</a></p>
            <p>DrPlayer Dashboard v{version}</p>
        </div>
    </div>
</body>
</html>
"""

_APP_CARD_TEMPLATE = """            <a href="/apps/{name}/" class="app-card">
                <div class="app-name">{name}</div>
            </a>"""


def render_landing_page(spa_apps: list[str], port: Optional[int] = None) -> str:
    """Render the landing page listing the bundled apps."""
    app_cards = "\n".join(
        _APP_CARD_TEMPLATE.format(name=html.escape(name)) for name in spa_apps
    )
    port_note = f" - port {port}" if port else ""
    return _LANDING_TEMPLATE.format(
        port_note=port_note,
        app_cards=app_cards,
        version=html.escape(__version__),
    )


def validate_apps(apps_dir: Path, spa_apps: list[str]) -> list[AppNotFoundError]:
    """Check that every SPA app has an index document.

    Returns the problems found (empty when everything is in place).
    """
    problems: list[AppNotFoundError] = []
    for name in spa_apps:
        app_dir = apps_dir / name
        if not app_dir.is_dir():
            problems.append(AppNotFoundError(name, apps_dir=apps_dir, missing=str(app_dir)))
        elif not (app_dir / SPA_INDEX_FILE).is_file():
            problems.append(AppNotFoundError(name, apps_dir=apps_dir, missing=SPA_INDEX_FILE))

    for problem in problems:
        log.error(str(problem))
    if not problems:
        log.info(f"Static files found for: {', '.join(spa_apps) or '(no apps)'}")
    return problems


def _not_found(message: str = "Not Found") -> JSONResponse:
    return JSONResponse({"error": message}, status_code=404)


def _resolve_inside(root: Path, relative: str) -> Optional[Path]:
    """Resolve ``relative`` under ``root``; None if it escapes the root."""
    candidate = (root / relative).resolve()
    if candidate != root and root not in candidate.parents:
        return None
    return candidate


def create_app(
    apps_dir: Path,
    spa_apps: list[str],
    settings_store: SkipSettingsStore,
    port: Optional[int] = None,
) -> FastAPI:
    """Create the dashboard application with all routes."""
    app = FastAPI(title="DrPlayer Dashboard", version=__version__)
    apps_root = apps_dir.resolve()

    app.state.apps_dir = apps_root
    app.state.spa_apps = list(spa_apps)
    app.state.settings_store = settings_store
    app.state.port = port

    def serve_index(app_name: str):
        index_path = apps_root / app_name / SPA_INDEX_FILE
        try:
            content = index_path.read_text(encoding="utf-8")
        except OSError as e:
            log.error(f"[SPA] Failed to read {index_path}: {e}")
            return _not_found(f"{app_name} application not found")
        return HTMLResponse(content, headers={"Cache-Control": NO_CACHE_HEADER})

    @app.get("/", response_class=HTMLResponse)
    async def landing_page(request: Request) -> HTMLResponse:
        """Landing page listing the bundled apps."""
        return HTMLResponse(
            render_landing_page(request.app.state.spa_apps, request.app.state.port)
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness check."""
        timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        return {"status": "ok", "timestamp": timestamp.replace("+00:00", "Z")}

    @app.get("/api/skip-settings")
    def get_skip_settings() -> dict[str, Any]:
        """Current persisted skip settings."""
        return settings_store.load().to_dict()

    @app.put("/api/skip-settings")
    def put_skip_settings(payload: dict[str, Any] = Body(...)):
        """Replace the persisted skip settings."""
        try:
            settings = SkipSettings.from_dict(payload)
        except (TypeError, ValueError) as e:
            return JSONResponse({"error": f"Invalid skip settings: {e}"}, status_code=422)

        try:
            settings_store.save(settings)
        except StorageError as e:
            log.error(str(e))
            return JSONResponse({"error": str(e)}, status_code=500)

        log.info(f"Skip settings updated: {settings}")
        return settings.to_dict()

    for app_name in spa_apps:
        _add_spa_routes(app, app_name, serve_index)

    @app.get("/apps/{file_path:path}")
    async def apps_file(file_path: str):
        """Static files under the apps directory, with SPA fallback."""
        target = _resolve_inside(apps_root, file_path) if file_path else None
        if target is not None:
            if target.is_file():
                return FileResponse(target)
            if target.is_dir() and (target / SPA_INDEX_FILE).is_file():
                return FileResponse(target / SPA_INDEX_FILE)

        for app_name in spa_apps:
            prefix = f"{app_name}/"
            if file_path.startswith(prefix):
                if not _FILE_EXTENSION.search(file_path[len(prefix):]):
                    log.debug(f"[SPA] Fallback to index for /apps/{file_path}")
                    return serve_index(app_name)

        return _not_found()

    return app


def _add_spa_routes(app: FastAPI, app_name: str, serve_index) -> None:
    """Register the bare and trailing-slash routes of one SPA app."""

    @app.get(f"/apps/{app_name}", include_in_schema=False)
    async def spa_redirect() -> RedirectResponse:
        return RedirectResponse(f"/apps/{app_name}/", status_code=301)

    @app.get(f"/apps/{app_name}/", include_in_schema=False)
    async def spa_index():
        return serve_index(app_name)
