# src/storage/sqlite_store.py - v1
"""SQLite-based topic store (STORE_BACKEND=sqlite).

Uses stdlib sqlite3. UNIQUE indexes on the normalized title and on slug
reject duplicates at the storage layer; each method runs its statements
without suspending, so a read-modify-write is atomic under asyncio.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

from topicforge.core.errors import StorageConflict
from topicforge.core.models import Topic
from topicforge.storage.base_topic_store import BaseTopicStore, apply_patch, title_key

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS topics (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    title_key TEXT NOT NULL UNIQUE,
    slug TEXT UNIQUE,
    data TEXT NOT NULL,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_topics_slug ON topics(slug);
"""


class SqliteTopicStore(BaseTopicStore):
    """SQLite-backed topic store."""

    def __init__(self, db_path: Path | str) -> None:
        if str(db_path) == ":memory:":
            self._db_path = db_path
        else:
            self._db_path = Path(db_path).expanduser()
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def find_by_slug(self, slug: str) -> Topic | None:
        row = self._conn.execute(
            "SELECT data FROM topics WHERE slug = ?", (slug,)
        ).fetchone()
        return self._load(row)

    async def find_by_title(self, title: str) -> Topic | None:
        row = self._conn.execute(
            "SELECT data FROM topics WHERE title_key = ?", (title_key(title),)
        ).fetchone()
        return self._load(row)

    async def slug_taken(self, slug: str, exclude_title: str | None = None) -> bool:
        if exclude_title is None:
            row = self._conn.execute(
                "SELECT 1 FROM topics WHERE slug = ?", (slug,)
            ).fetchone()
        else:
            row = self._conn.execute(
                "SELECT 1 FROM topics WHERE slug = ? AND title_key != ?",
                (slug, title_key(exclude_title)),
            ).fetchone()
        return row is not None

    async def insert(self, topic: Topic) -> Topic:
        try:
            with self._conn:
                self._conn.execute(
                    """INSERT INTO topics (title, title_key, slug, data)
                       VALUES (?, ?, ?, ?)""",
                    (
                        topic.title,
                        title_key(topic.title),
                        topic.slug or None,
                        topic.model_dump_json(),
                    ),
                )
        except sqlite3.IntegrityError as e:
            raise self._conflict(e, topic) from e
        logger.debug("Inserted topic %r (slug=%s)", topic.title, topic.slug)
        return topic

    async def update_one(self, title: str, patch: dict[str, Any]) -> Topic | None:
        key = title_key(title)
        row = self._conn.execute(
            "SELECT data FROM topics WHERE title_key = ?", (key,)
        ).fetchone()
        current = self._load(row)
        if current is None:
            return None
        updated = apply_patch(current, patch)
        try:
            with self._conn:
                self._conn.execute(
                    "UPDATE topics SET slug = ?, data = ? WHERE title_key = ?",
                    (updated.slug or None, updated.model_dump_json(), key),
                )
        except sqlite3.IntegrityError as e:
            raise self._conflict(e, updated) from e
        return updated

    async def search_titles(self, query: str, limit: int = 10) -> list[Topic]:
        needle = query.strip().casefold()
        if not needle:
            return []
        escaped = needle.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        rows = self._conn.execute(
            "SELECT data FROM topics WHERE title_key LIKE ? ESCAPE '\\' ORDER BY id LIMIT ?",
            (f"%{escaped}%", limit),
        ).fetchall()
        return [Topic.model_validate_json(r[0]) for r in rows]

    async def list_topics(self) -> list[Topic]:
        rows = self._conn.execute("SELECT data FROM topics ORDER BY id").fetchall()
        return [Topic.model_validate_json(r[0]) for r in rows]

    async def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    @staticmethod
    def _load(row: tuple | None) -> Topic | None:
        if row is None:
            return None
        return Topic.model_validate_json(row[0])

    @staticmethod
    def _conflict(error: sqlite3.IntegrityError, topic: Topic) -> StorageConflict:
        message = str(error)
        if "topics.slug" in message:
            return StorageConflict("slug", topic.slug)
        if "topics.title_key" in message:
            return StorageConflict("title", topic.title)
        return StorageConflict("unknown", message)
