"""Paths and constants for the settings file."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

# Firmware-side paths (absolute on the SD card).
SETTINGS_DIR: Final = "/.crosspoint"
SETTINGS_FILE: Final = SETTINGS_DIR + "/settings.bin"

# Tag passed to the storage layer; shows up in its log lines.
STORAGE_TAG: Final = "CPS"

# Host directory standing in for the SD card root.
# Example:
#   export CROSSPOINT_SD_ROOT=/media/$USER/CROSSPOINT
ENV_SD_ROOT: Final = "CROSSPOINT_SD_ROOT"


def default_sd_root() -> Path:
    env = (os.environ.get(ENV_SD_ROOT) or "").strip()
    if env:
        return Path(env).expanduser()
    return Path.home() / ".crosspoint_sd"
