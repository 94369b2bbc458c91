"""Listening port selection."""

from __future__ import annotations

import socket

from ..constants import DEFAULT_HOST, DEFAULT_PORT, PORT_SEARCH_ATTEMPTS
from ..exceptions import PortUnavailableError
from ..logging import get_logger

log = get_logger("server.ports")


def is_port_available(port: int, host: str = DEFAULT_HOST) -> bool:
    """Check whether ``port`` can be bound on ``host``."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.settimeout(1.0)
            s.bind((host, port))
            return True
    except OSError:
        return False


def find_available_port(
    start_port: int = DEFAULT_PORT,
    max_attempts: int = PORT_SEARCH_ATTEMPTS,
    host: str = DEFAULT_HOST,
) -> int:
    """Return the first bindable port from ``start_port`` upward.

    Raises:
        PortUnavailableError: If none of ``max_attempts`` ports is free
    """
    for port in range(start_port, start_port + max_attempts):
        if is_port_available(port, host):
            return port
        log.info(f"Port {port} is in use, trying the next one...")
    raise PortUnavailableError(start_port, max_attempts)
