# src/tally_lists/todos/list_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
import uuid
from collections.abc import Sequence
from pathlib import Path

from .codec import dumps_forest, loads_forest
from .editor import check_unique_ids
from .models import TaskList, TaskNode

logger = logging.getLogger(__name__)

LIST_SORTS = ("updated", "alpha")


class ListStore:
    """
    SQLite store for TaskList values.

    One row per list; the whole task forest lives in the `items` column as a
    JSON document. The tree engine returns a new forest per user action and
    save_items() commits it (bumping updated_at).

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "lists.sqlite3", *, check_ids: bool = False) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._check_ids = check_ids
        self._ensure_schema()
        try:
            total = self.count_lists()
        except sqlite3.Error:
            total = -1
        logger.info("ListStore ready db=%s total=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS lists (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    color TEXT NOT NULL DEFAULT '',
                    items TEXT NOT NULL DEFAULT '[]',
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            cur.execute("PRAGMA table_info(lists)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE lists ADD COLUMN {name} {decl}")
                logger.info("ListStore migration: added column %s", name)

            add_col("color", "TEXT NOT NULL DEFAULT ''")
            add_col("items", "TEXT NOT NULL DEFAULT '[]'")
            add_col("created_at", "REAL NOT NULL DEFAULT 0")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_lists_updated ON lists(updated_at)")
            conn.commit()
        finally:
            conn.close()

    def _row_to_list(self, row: sqlite3.Row) -> TaskList:
        try:
            items = loads_forest(row["items"])
        except ValueError:
            # json.JSONDecodeError is a ValueError too.
            logger.exception("Failed to decode items for list id=%s; treating as empty.", row["id"])
            items = ()
        return TaskList(
            id=str(row["id"]),
            title=str(row["title"] or ""),
            color=str(row["color"] or ""),
            items=items,
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    # ---- public API ----

    def count_lists(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM lists").fetchone()
            return int(n)
        finally:
            conn.close()

    def create_list(self, *, title: str, color: str = "") -> TaskList:
        if not title or not title.strip():
            raise ValueError("title is required")

        now = time.time()
        task_list = TaskList(
            id=uuid.uuid4().hex,
            title=title.strip(),
            color=color,
            items=(),
            created_at=now,
            updated_at=now,
        )

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO lists(id, title, color, items, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (task_list.id, task_list.title, color, "[]", now, now),
            )
            conn.commit()
        finally:
            conn.close()

        logger.debug("List created id=%s title=%s", task_list.id, task_list.title)
        return task_list

    def get_list(self, list_id: str) -> TaskList | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM lists WHERE id = ?", (list_id,)).fetchone()
            return self._row_to_list(row) if row else None
        finally:
            conn.close()

    def list_lists(
        self,
        *,
        sort: str = "updated",
        search: str | None = None,
        limit: int | None = None,
    ) -> list[TaskList]:
        """
        Dashboard listing.

        sort:
        - updated: most recently updated first
        - alpha: by title, case-insensitive
        search: case-insensitive substring match on title
        """
        if sort not in LIST_SORTS:
            raise ValueError(f"unknown list sort: {sort!r}")

        order = "updated_at DESC" if sort == "updated" else "title COLLATE NOCASE ASC"
        sql = "SELECT * FROM lists"
        params: list[object] = []
        if search and search.strip():
            sql += " WHERE instr(lower(title), ?) > 0"
            params.append(search.strip().lower())
        sql += f" ORDER BY {order}"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(int(limit))

        conn = self._get_conn()
        try:
            rows = conn.execute(sql, params).fetchall()
            return [self._row_to_list(r) for r in rows]
        finally:
            conn.close()

    def save_items(self, list_id: str, items: Sequence[TaskNode]) -> TaskList | None:
        """
        Commit a new forest for list_id and bump updated_at.

        Returns the stored list, or None if list_id is unknown.
        """
        if self._check_ids:
            check_unique_ids(items)

        now = time.time()
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "UPDATE lists SET items = ?, updated_at = ? WHERE id = ?",
                (dumps_forest(items), now, list_id),
            )
            conn.commit()
            if cur.rowcount != 1:
                logger.debug("save_items: list id=%s not found", list_id)
                return None
        finally:
            conn.close()
        return self.get_list(list_id)

    def update_list_fields(
        self,
        list_id: str,
        *,
        title: str | None = None,
        color: str | None = None,
    ) -> bool:
        fields: list[str] = []
        params: list[object] = []

        if title is not None:
            if not title.strip():
                raise ValueError("title must not be blank")
            fields.append("title = ?")
            params.append(title.strip())

        if color is not None:
            fields.append("color = ?")
            params.append(color)

        if not fields:
            return False

        fields.append("updated_at = ?")
        params.append(time.time())
        params.append(list_id)

        sql = f"UPDATE lists SET {', '.join(fields)} WHERE id = ?"
        conn = self._get_conn()
        try:
            cur = conn.execute(sql, params)
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def delete_list(self, list_id: str) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM lists WHERE id = ?", (list_id,))
            conn.commit()
            deleted = cur.rowcount == 1
        finally:
            conn.close()
        if deleted:
            logger.info("List deleted id=%s", list_id)
        return deleted
