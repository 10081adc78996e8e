"""
JSON file storage for service data.

Features
- Read/write JSON collections under {DATA_DIR}/*.json
- Atomic writes via a unique temp file per write + os.replace
- Read-modify-write helpers hold a per-data-dir lock: a thread RLock plus
  flock(2) on {DATA_DIR}/.storage.lock, so gunicorn workers sharing a
  data dir serialize their writes
- Optional JSON Schema validation of each record (jsonschema)

Used by:
- retrieval/saved_responses_store.py
- retrieval/custom_styles_store.py
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, IO, List, Optional

import jsonschema

logger = logging.getLogger("Storage")

LOCK_FILENAME = ".storage.lock"


class StorageError(Exception):
    pass


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _atomic_write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # Temp file in the target dir so os.replace never crosses filesystems.
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=path.name + ".", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp, path)
    except OSError:
        Path(tmp).unlink(missing_ok=True)
        raise


def _atomic_write_json(path: Path, data: Any) -> None:
    _atomic_write_text(path, json.dumps(data, ensure_ascii=False, indent=2))


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


class DirLock:
    """
    Exclusive lock on a data dir, re-entrant within a thread.

    Threads of one process queue on the RLock; the outermost holder then
    takes flock on the lock file, which excludes other processes.
    """

    def __init__(self, root: Path):
        self.root = root
        self._thread_lock = threading.RLock()
        self._depth = 0
        self._fh: Optional[IO[bytes]] = None

    def __enter__(self) -> "DirLock":
        self._thread_lock.acquire()
        if self._depth == 0:
            try:
                self._fh = self._acquire_file()
            except OSError as e:
                self._thread_lock.release()
                raise StorageError(f"Cannot lock {self.root}: {e}") from e
        self._depth += 1
        return self

    def __exit__(self, *exc) -> None:
        self._depth -= 1
        if self._depth == 0 and self._fh is not None:
            try:
                fcntl.flock(self._fh.fileno(), fcntl.LOCK_UN)
            finally:
                self._fh.close()
                self._fh = None
        self._thread_lock.release()

    def _acquire_file(self) -> IO[bytes]:
        self.root.mkdir(parents=True, exist_ok=True)
        fh = open(self.root / LOCK_FILENAME, "a+b")
        try:
            fcntl.flock(fh.fileno(), fcntl.LOCK_EX)
        except OSError:
            fh.close()
            raise
        return fh


_LOCKS: Dict[str, DirLock] = {}
_LOCKS_GUARD = threading.Lock()


def _lock_for(root: Path) -> DirLock:
    key = str(root.resolve())
    with _LOCKS_GUARD:
        lock = _LOCKS.get(key)
        if lock is None:
            lock = _LOCKS[key] = DirLock(Path(key))
        return lock


@dataclass
class Storage:
    data_dir: Path
    _lock: DirLock = field(init=False, repr=False)

    def __post_init__(self):
        self.data_dir = Path(self.data_dir)
        self._lock = _lock_for(self.data_dir)

    # -------- paths --------

    def file_path(self, filename: str) -> Path:
        return self.data_dir / filename

    # -------- public API --------

    def read_list(self, filename: str) -> List[Dict[str, Any]]:
        """
        Read a JSON array collection. A missing file is an empty collection.
        Lock-free: os.replace means readers see either the old or the new file.
        """
        path = self.file_path(filename)
        if not path.exists():
            return []
        try:
            data = _read_json(path)
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read {filename}: {e}") from e
        if not isinstance(data, list):
            raise StorageError(f"{filename} does not hold a JSON array")
        return data

    def write_list(
        self,
        filename: str,
        items: List[Dict[str, Any]],
        *,
        schema: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Validate (optional) each record, then write atomically to {DATA_DIR}/{filename}.
        """
        if schema is not None:
            for item in items:
                self._validate(item, schema)
        with self._lock:
            try:
                _atomic_write_json(self.file_path(filename), items)
            except OSError as e:
                raise StorageError(f"Cannot write {filename}: {e}") from e

    def update_list(
        self,
        filename: str,
        fn: Callable[[List[Dict[str, Any]]], Any],
        *,
        schema: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Read-modify-write under the store lock. `fn` mutates the list in place
        and its return value is passed back to the caller.
        """
        with self._lock:
            items = self.read_list(filename)
            result = fn(items)
            self.write_list(filename, items, schema=schema)
            return result

    # -------- internal helpers --------

    @staticmethod
    def _validate(item: Any, schema: Dict[str, Any]) -> None:
        try:
            jsonschema.validate(instance=item, schema=schema)
        except jsonschema.ValidationError as e:
            raise StorageError(f"Record failed schema validation: {e.message}") from e
