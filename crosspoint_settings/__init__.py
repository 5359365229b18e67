"""Persistent reader settings for CrossPoint devices.

The settings live in one small versioned binary file on the SD card
(``/.crosspoint/settings.bin``). This package encodes and decodes that file.

Design goals:
  * Files written by older firmware (fewer fields) still load
  * Out-of-range or conflicting values are repaired, never propagated
  * Load/save report success as a bool; failure means defaults apply
"""

__version__ = "1.0.0"

from .codec import SETTINGS_COUNT, SETTINGS_FILE_VERSION, decode_settings, encode_settings
from .record import SettingsRecord
from .storage import LocalStorage, Storage
from .store import SettingsStore

__all__ = [
    "__version__",
    "SETTINGS_COUNT",
    "SETTINGS_FILE_VERSION",
    "decode_settings",
    "encode_settings",
    "SettingsRecord",
    "Storage",
    "LocalStorage",
    "SettingsStore",
]
