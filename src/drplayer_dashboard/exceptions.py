"""Custom exceptions for drplayer-dashboard with detailed error information."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class DashboardError(Exception):
    """Base exception for drplayer-dashboard errors."""

    pass


class StorageError(DashboardError):
    """Exception for key-value store read/write failures."""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        path: Optional[Path] = None,
    ):
        self.key = key
        self.path = path

        parts = [message]
        if key:
            parts.append(f"Key: {key}")
        if path:
            parts.append(f"File: {path}")

        super().__init__(" | ".join(parts))


class AppNotFoundError(DashboardError):
    """Exception for a bundled app whose directory or index document is missing."""

    def __init__(
        self,
        app_name: str,
        apps_dir: Optional[Path] = None,
        missing: Optional[str] = None,
    ):
        self.app_name = app_name
        self.apps_dir = apps_dir
        self.missing = missing

        parts = [f"{app_name} application not found"]
        if apps_dir:
            parts.append(f"Apps dir: {apps_dir}")
        if missing:
            parts.append(f"Missing: {missing}")

        super().__init__(" | ".join(parts))


class PortUnavailableError(DashboardError):
    """Exception raised when no free port could be found."""

    def __init__(self, start_port: int, attempts: int):
        self.start_port = start_port
        self.attempts = attempts
        self.end_port = start_port + attempts - 1

        super().__init__(
            f"No available port found, tried {start_port} to {self.end_port}"
        )
