from __future__ import annotations

import logging
import posixpath
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from .codec import SETTINGS_COUNT, decode_settings, encode_settings
from .config import SETTINGS_DIR, SETTINGS_FILE, STORAGE_TAG
from .record import SettingsRecord
from .storage import LocalStorage, Storage

logger = logging.getLogger(__name__)


@dataclass
class SettingsStore:
    """Owner of the single live ``SettingsRecord``.

    Load once at startup, before anything reads the record, then save after
    each user-initiated change. Components that need settings get the store
    (or ``store.record``) passed in; the record object itself is never
    replaced, so references handed out before ``load()`` stay valid.

    ``load`` and ``save`` never raise: failure means defaults apply. A file
    that exists but cannot be decoded is copied to ``<path>.bak.<timestamp>``
    first, so a later ``save()`` does not destroy it.
    """

    storage: Storage = field(default_factory=LocalStorage)
    path: str = SETTINGS_FILE
    record: SettingsRecord = field(default_factory=SettingsRecord)
    last_backup: Optional[str] = field(default=None, init=False)
    _write_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    def settings_dir(self) -> str:
        if self.path == SETTINGS_FILE:
            return SETTINGS_DIR
        return posixpath.dirname(self.path)

    def load(self) -> bool:
        handle = self.storage.open_for_read(STORAGE_TAG, self.path)
        if handle is None:
            return False
        try:
            with handle:
                data = handle.read()
        except OSError:
            logger.exception("Failed to read settings from %s", self.path)
            return False

        _, ok = decode_settings(data, self.record)
        if ok:
            logger.info("Settings loaded from %s", self.path)
        else:
            self._backup(data)
        return ok

    def _backup(self, data: bytes) -> None:
        ts = time.strftime("%Y%m%d_%H%M%S")
        bak = f"{self.path}.bak.{ts}"
        with self._write_lock:
            if not self._write(bak, data):
                logger.error("Could not back up unreadable settings %s", self.path)
                return
        self.last_backup = bak
        logger.warning("Unreadable settings %s backed up to %s", self.path, bak)

    def _write(self, path: str, payload: bytes) -> bool:
        directory = self.settings_dir()
        if directory and directory != "/":
            self.storage.mkdir(directory)

        handle = self.storage.open_for_write(STORAGE_TAG, path)
        if handle is None:
            return False
        try:
            # Leaving the block through an exception keeps the previous file.
            with handle:
                handle.write(payload)
        except OSError:
            logger.exception("Failed to write %s", path)
            return False
        return True

    def save(self) -> bool:
        payload = encode_settings(self.record)
        # Concurrent saves would interleave writes to the same file.
        with self._write_lock:
            if not self._write(self.path, payload):
                return False

        logger.info("Settings saved to %s (%d fields, %d bytes)", self.path, SETTINGS_COUNT, len(payload))
        return True

    # Convenience helpers -------------------------------------------------
    def update(self, name: str, value: Any) -> bool:
        """Set one field and persist the record."""
        self.record.set(name, value)
        return self.save()

    def reset(self) -> bool:
        self.record.reset()
        return self.save()
