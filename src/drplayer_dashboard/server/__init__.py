"""DrPlayer Dashboard web server.

Serves the bundled front-end apps, a landing page and a health endpoint,
plus a NiceGUI page for editing skip settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import uvicorn

from ..constants import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_SPA_APPS
from ..logging import get_logger
from ..skip import JsonFileStore, SkipSettingsStore
from .app import create_app, render_landing_page, validate_apps
from .ports import find_available_port, is_port_available

__all__ = [
    "create_app",
    "find_available_port",
    "is_port_available",
    "render_landing_page",
    "run_server",
    "validate_apps",
]


def run_server(
    apps_dir: Path,
    settings_file: Path,
    spa_apps: Optional[list[str]] = None,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    auto_port: bool = True,
    settings_ui: bool = True,
) -> None:
    """Run the dashboard server.

    This function blocks until the server is shut down.
    """
    log = get_logger("server")
    spa_apps = list(DEFAULT_SPA_APPS if spa_apps is None else spa_apps)

    if auto_port:
        log.info(f"Looking for an available port starting at {port}")
        port = find_available_port(port, host=host)
    log.info(f"Using port {port}")

    settings_store = SkipSettingsStore(JsonFileStore(settings_file))
    app = create_app(apps_dir, spa_apps, settings_store, port=port)

    if settings_ui:
        from .settings_ui import mount_settings_ui

        mount_settings_ui(app, settings_store)

    for name in spa_apps:
        log.info(f"App: http://localhost:{port}/apps/{name}/")
    log.info(f"Health check: http://localhost:{port}/health")

    uvicorn.run(app, host=host, port=port, log_config=None, log_level="warning")
    log.info("Server stopped")
