"""Storage collaborator used by the settings store.

The device exposes a tiny SD card API (mkdir / open for read / open for write)
with firmware-style absolute paths. ``LocalStorage`` maps that API onto a host
directory so the same code runs against a mounted card or a test folder.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Optional, Protocol

from .config import default_sd_root

logger = logging.getLogger(__name__)


class Storage(Protocol):
    """Storage contract.

    Failures are reported through the return value, never raised:
    - mkdir returns False
    - open_for_read / open_for_write return None
    Returned handles are binary file objects (read/write/close) usable as
    context managers; a write handle leaving its context through an exception
    must not replace the previous file.
    """

    def mkdir(self, path: str) -> bool: ...

    def open_for_read(self, tag: str, path: str) -> Optional[BinaryIO]: ...

    def open_for_write(self, tag: str, path: str) -> Optional[BinaryIO]: ...


class AtomicFile:
    """Write handle that replaces the target only once writing succeeded.

    Bytes go to ``<target>.tmp``; ``close()`` moves it over the target with
    ``os.replace``. Used as a context manager, an exception discards the
    temporary file and leaves the previous target untouched.
    """

    def __init__(self, target: Path) -> None:
        self.target = Path(target)
        self.tmp = self.target.with_name(self.target.name + ".tmp")
        self._fh: Optional[BinaryIO] = open(self.tmp, "wb")

    def write(self, data: bytes) -> int:
        if self._fh is None:
            raise ValueError("write to closed AtomicFile")
        return self._fh.write(data)

    def close(self) -> None:
        if self._fh is None:
            return
        fh, self._fh = self._fh, None
        try:
            fh.close()
            os.replace(self.tmp, self.target)
        except OSError:
            self._remove_tmp()
            raise

    def discard(self) -> None:
        if self._fh is not None:
            fh, self._fh = self._fh, None
            try:
                fh.close()
            except OSError:
                logger.exception("Failed to close %s", self.tmp)
        self._remove_tmp()

    def _remove_tmp(self) -> None:
        try:
            self.tmp.unlink()
        except FileNotFoundError:
            pass
        except OSError:
            logger.exception("Failed to remove %s", self.tmp)

    def __enter__(self) -> "AtomicFile":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.close()
        else:
            self.discard()
        return False


@dataclass
class LocalStorage:
    """Storage rooted at a host directory standing in for the SD card.

    Paths that would leave the root are refused like any other open failure.
    """

    root: Path = field(default_factory=default_sd_root)

    def resolve(self, path: str) -> Path:
        rel = str(path).replace("\\", "/").lstrip("/")
        if any(part == ".." for part in rel.split("/")):
            raise ValueError(f"path escapes storage root: {path!r}")
        return Path(self.root) / rel

    def mkdir(self, path: str) -> bool:
        try:
            target = self.resolve(path)
            target.mkdir(parents=True, exist_ok=True)
        except ValueError as exc:
            logger.error("mkdir refused: %s", exc)
            return False
        except OSError:
            logger.exception("mkdir failed: %s", path)
            return False
        return True

    def open_for_read(self, tag: str, path: str) -> Optional[BinaryIO]:
        try:
            return open(self.resolve(path), "rb")
        except ValueError as exc:
            logger.error("[%s] Refusing to open %s: %s", tag, path, exc)
        except FileNotFoundError:
            logger.info("[%s] %s does not exist", tag, path)
        except OSError:
            logger.exception("[%s] Failed to open %s for read", tag, path)
        return None

    def open_for_write(self, tag: str, path: str) -> Optional[AtomicFile]:
        try:
            return AtomicFile(self.resolve(path))
        except ValueError as exc:
            logger.error("[%s] Refusing to open %s: %s", tag, path, exc)
        except OSError:
            logger.exception("[%s] Failed to open %s for write", tag, path)
        return None
