"""Constants and default values for drplayer-dashboard.

Centralizes magic numbers and default values for easier configuration
and maintenance.
"""

from pathlib import Path

# =============================================================================
# Skip Timing Constants (milliseconds unless noted)
# =============================================================================

# Trailing debounce applied to time-update signals
TIME_UPDATE_DEBOUNCE_MS = 200

# Minimum gap between a previous skip and a regular intro skip
INTRO_SKIP_DEBOUNCE_MS = 1000

# Minimum gap between a previous skip and an outro skip
OUTRO_SKIP_DEBOUNCE_MS = 2000

# Intro skip is suppressed for this long after a manual seek ends
USER_SEEK_GUARD_MS = 3000

# Intro skip is suppressed for this long after a fullscreen change ends
FULLSCREEN_GUARD_MS = 2000

# Playback positions at or below this are treated as "just started" (seconds)
IMMEDIATE_SKIP_WINDOW_SECONDS = 1.0

# Outro skip only fires while at least this much media remains (seconds)
OUTRO_END_MARGIN_SECONDS = 1.0

# Outro skip lands this far before the end so the host sees a natural end (seconds)
OUTRO_LANDING_OFFSET_SECONDS = 0.1

# =============================================================================
# Skip Settings Defaults
# =============================================================================

# Key under which skip settings are stored (shared with the browser player)
SKIP_SETTINGS_STORAGE_KEY = "drplayer_skip_settings"

DEFAULT_INTRO_SECONDS = 90.0
DEFAULT_OUTRO_SECONDS = 90.0

# =============================================================================
# Server Constants
# =============================================================================

DEFAULT_HOST = "0.0.0.0"

# First port tried by automatic port selection
DEFAULT_PORT = 9978

# Number of consecutive ports tried before giving up
PORT_SEARCH_ATTEMPTS = 100

# Single-page apps served from the apps directory
DEFAULT_SPA_APPS = ["drplayer"]

# Index document served for SPA routes
SPA_INDEX_FILE = "index.html"

# Cache policy for the SPA index document
NO_CACHE_HEADER = "no-cache, no-store, must-revalidate"

# =============================================================================
# Default Paths
# =============================================================================

# Apps directory (relative to the working directory)
DEFAULT_APPS_DIR = "apps"

# User config file locations (in order of precedence)
USER_CONFIG_PATHS = [
    Path.home() / ".config" / "drplayer-dashboard" / "config.toml",
    Path.home() / ".drplayer-dashboard.toml",
]

# Data directory for persisted settings
DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "drplayer-dashboard"

# File-backed key-value store for skip settings
DEFAULT_SETTINGS_FILE = DEFAULT_DATA_DIR / "skip_settings.json"

# Environment variable names
ENV_APPS_DIR = "DRPLAYER_APPS_DIR"
ENV_PORT = "DRPLAYER_PORT"
ENV_SETTINGS_FILE = "DRPLAYER_SETTINGS_FILE"

# =============================================================================
# Logging (Loguru)
# =============================================================================

# Default log directory
DEFAULT_LOG_DIR = DEFAULT_DATA_DIR / "logs"

# Log file date format
LOG_DATE_FORMAT = "%Y-%m-%d"
