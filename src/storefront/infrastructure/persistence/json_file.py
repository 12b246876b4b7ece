"""A JSON array on disk, shared by threads and by processes.

Every CLI call is its own process, so the in-process locks of the stores
are not enough.  Writers hold ``<file>.lock`` (via ``filelock``) for the
whole read-modify-write cycle, and each write lands as a single rename,
so readers see either the old file or the new one, never a partial one.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager, suppress
from pathlib import Path

from filelock import FileLock, Timeout

from storefront.domain.exceptions import ConcurrencyError

LOCK_TIMEOUT_SECONDS = 10.0


class JsonFile:

    def __init__(self, path: Path, timeout: float = LOCK_TIMEOUT_SECONDS) -> None:
        self.path = path
        self._thread_lock = threading.RLock()
        path.parent.mkdir(parents=True, exist_ok=True)
        self._file_lock = FileLock(str(path.with_name(path.name + ".lock")), timeout=timeout)
        with self.locked():
            if not path.exists():
                self.write([])

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the file against other threads and processes.  Re-entrant."""
        with self._thread_lock:
            try:
                self._file_lock.acquire()
            except Timeout:
                raise ConcurrencyError(
                    f"Timed out waiting for another writer of {self.path.name}"
                ) from None
            try:
                yield
            finally:
                self._file_lock.release()

    def read(self) -> list[dict]:
        return json.loads(self.path.read_text(encoding="utf-8"))

    def write(self, rows: list[dict]) -> None:
        with self.locked():
            _replace(self.path, json.dumps(rows, indent=2) + "\n")


def _replace(path: Path, text: str) -> None:
    """Write *text* to a sibling temp file, then rename it over *path*."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise
