"""Default configuration values and constants for configuration loading."""

from __future__ import annotations

from pathlib import Path
from typing import Any

# Default configuration tree used when no files are present.
DEFAULT_CONFIG: dict[str, Any] = {
    "general": {
        "verbosity": "warning",
        "output_format": "text",
        "color_enabled": True,
    },
    "execution": {
        # 0 disables the timeout
        "timeout_seconds": 0,
        "poll_interval_seconds": 0.05,
    },
    "files": {
        "encoding": "utf-8",
        "dir_mode": 0o755,
        "file_mode": 0o644,
    },
}

ENV_PREFIX = "BASHLIKE"
DEFAULT_CONFIG_RELATIVE_PATH = Path("configs") / "default.yaml"
PROJECT_CONFIG_FILENAME = "bashlike.yaml"
USER_CONFIG_PATH = Path.home() / ".bashlike" / "config.yaml"
