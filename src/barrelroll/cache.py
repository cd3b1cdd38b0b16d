"""SQLite cache of extracted exports, keyed by file path and modification time."""

from __future__ import annotations

import hashlib
import json
import logging
import sqlite3
import time
from pathlib import Path

from barrelroll.models import ExportDescriptor

log = logging.getLogger(__name__)

CACHE_DIR = ".barrelroll"


def _file_key(path: Path) -> str:
    """SHA-256 of path + mtime + size, so any edit invalidates the entry."""
    stat = path.stat()
    raw = f"{path.resolve()}\0{stat.st_mtime_ns}\0{stat.st_size}"
    return hashlib.sha256(raw.encode()).hexdigest()


def _serialize_exports(exports: list[ExportDescriptor]) -> str:
    return json.dumps([{"name": e.name, "type_only": e.type_only} for e in exports])


def _deserialize_exports(data: str) -> list[ExportDescriptor]:
    return [ExportDescriptor(name=d["name"], type_only=d["type_only"]) for d in json.loads(data)]


class ExportCache:
    """SQLite cache stored at {root}/.barrelroll/cache.db."""

    def __init__(self, root: str | Path) -> None:
        cache_dir = Path(root) / CACHE_DIR
        cache_dir.mkdir(parents=True, exist_ok=True)
        self._db_path = cache_dir / "cache.db"
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._create_tables()

    def _create_tables(self) -> None:
        self._conn.executescript("""
            CREATE TABLE IF NOT EXISTS exports (
                key TEXT PRIMARY KEY,
                path TEXT NOT NULL,
                data TEXT NOT NULL,
                stored_at REAL NOT NULL
            );
        """)

    def close(self) -> None:
        self._conn.close()

    def key_for(self, path: Path) -> str | None:
        """Current cache key of ``path``, or None if it cannot be stat'ed."""
        try:
            return _file_key(path)
        except OSError:
            return None

    def get_exports(self, path: Path, *, key: str | None = None) -> list[ExportDescriptor] | None:
        if key is None:
            key = self.key_for(path)
            if key is None:
                return None
        row = self._conn.execute("SELECT data FROM exports WHERE key = ?", (key,)).fetchone()
        if row is None:
            log.debug("Cache miss: %s", path)
            return None
        log.debug("Cache hit: %s", path)
        return _deserialize_exports(row[0])

    def set_exports(
        self, path: Path, exports: list[ExportDescriptor], *, key: str | None = None
    ) -> None:
        """Store ``exports`` under ``key``, by default the current key of ``path``."""
        if key is None:
            key = _file_key(path)
        self._conn.execute(
            "INSERT OR REPLACE INTO exports (key, path, data, stored_at) VALUES (?, ?, ?, ?)",
            (key, str(path), _serialize_exports(exports), time.time()),
        )
        self._conn.commit()

    def prune(self, max_entries: int = 1000) -> int:
        """Drop all but the ``max_entries`` most recently stored rows. Returns rows removed."""
        cur = self._conn.execute(
            """
            DELETE FROM exports WHERE key NOT IN (
                SELECT key FROM exports ORDER BY stored_at DESC LIMIT ?
            )
            """,
            (max_entries,),
        )
        self._conn.commit()
        return cur.rowcount

    def __len__(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM exports").fetchone()[0]
