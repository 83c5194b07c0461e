"""SQLite-backed task store.

Owns every write to the ``tasks`` and ``tags`` tables. Driver exceptions are
translated into :class:`StoreIOError`, :class:`StoreDecodeError` or
:class:`ConstraintError` before they leave this module.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from tui_kanban.models import (
    ARCHIVE_TAG,
    ConstraintError,
    StoreDecodeError,
    StoreIOError,
    Task,
    TaskState,
    unique_tags,
)

logger = logging.getLogger(__name__)

FALLBACK_DB_NAME = "kanban.db"

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id INTEGER PRIMARY KEY,
        state INTEGER NOT NULL,
        title TEXT NOT NULL,
        description TEXT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tags (
        tag TEXT NOT NULL,
        task_id INTEGER NOT NULL,
        PRIMARY KEY (tag, task_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_tags_task ON tags(task_id)",
)


def _connect(db_path: str) -> sqlite3.Connection:
    """Open a connection returning rows addressable by column name.

    Text comes back as raw bytes so invalid UTF-8 surfaces as a decode
    error on the row instead of a driver error on the query.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.text_factory = bytes
    return conn


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    """Map sqlite3 failures onto the store's error taxonomy."""
    try:
        yield
    except sqlite3.IntegrityError as exc:
        raise ConstraintError(f"{operation}: {exc}") from exc
    except (sqlite3.OperationalError, sqlite3.ProgrammingError, sqlite3.DatabaseError) as exc:
        raise StoreIOError(f"{operation}: {exc}") from exc
    except OSError as exc:
        raise StoreIOError(f"{operation}: {exc}") from exc


def _text(value: object, what: str) -> str:
    """Decode a text column. Undecodable or non-text values raise StoreDecodeError."""
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise StoreDecodeError(f"{what} is not valid UTF-8") from exc
    if not isinstance(value, str):
        raise StoreDecodeError(f"{what} is not text: {value!r}")
    return value


def _row_to_task(row: sqlite3.Row, tags: list[str]) -> Task:
    """Decode one ``tasks`` row. Unknown state ordinals become TODO."""
    try:
        task_id = row["id"]
        state = row["state"]
        title = row["title"]
        description = row["description"]
    except (IndexError, KeyError) as exc:
        raise StoreDecodeError(f"Malformed task row: {exc}") from exc
    if not isinstance(task_id, int) or not isinstance(state, int):
        raise StoreDecodeError(f"Malformed task row: id={task_id!r} state={state!r}")
    return Task(
        id=task_id,
        state=TaskState.from_ordinal(state),
        title=_text(title, f"Title of task {task_id}"),
        description=None if description is None else _text(description, f"Description of task {task_id}"),
        tags=tags,
    )


def _tag_value(value: object, task_id: object) -> str:
    return _text(value, f"Tag of task {task_id}")


class TaskStore:
    """Persistence gateway for tasks and their tags."""

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = Path(db_path)
        with _translate_errors(f"Cannot open {self.db_path}"):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = _connect(str(self.db_path))
            self._init_schema()
        logger.debug("Opened task store at %s", self.db_path)

    def _init_schema(self) -> None:
        with self._conn:
            for statement in _SCHEMA:
                self._conn.execute(statement)

    def close(self) -> None:
        self._conn.close()

    # ── Queries ──

    def load_tasks(self, selected_tags: list[str] | tuple[str, ...] = ()) -> list[Task]:
        """Load the tasks visible under a tag filter.

        No selected tags: every task except those tagged ``Archive``.
        Otherwise: every task carrying at least one selected tag, archived
        or not.
        """
        if selected_tags:
            placeholders = ", ".join("?" for _ in selected_tags)
            sql = (
                "SELECT id, state, title, description FROM tasks "
                f"WHERE id IN (SELECT task_id FROM tags WHERE tag IN ({placeholders})) "
                "ORDER BY id"
            )
            params: tuple = tuple(selected_tags)
        else:
            sql = (
                "SELECT id, state, title, description FROM tasks "
                "WHERE id NOT IN (SELECT task_id FROM tags WHERE tag = ?) "
                "ORDER BY id"
            )
            params = (ARCHIVE_TAG,)

        with _translate_errors("Cannot load tasks"):
            rows = self._conn.execute(sql, params).fetchall()
            tag_map = self._tags_by_task([row["id"] for row in rows])
        tasks = [_row_to_task(row, tag_map.get(row["id"], [])) for row in rows]
        logger.debug("Loaded %d tasks for filter %s", len(tasks), list(selected_tags))
        return tasks

    def _tags_by_task(self, task_ids: list[int]) -> dict[int, list[str]]:
        result: dict[int, list[str]] = {}
        if not task_ids:
            return result
        placeholders = ", ".join("?" for _ in task_ids)
        rows = self._conn.execute(
            f"SELECT task_id, tag FROM tags WHERE task_id IN ({placeholders}) "
            "ORDER BY task_id, tag",
            tuple(task_ids),
        ).fetchall()
        for row in rows:
            result.setdefault(row["task_id"], []).append(_tag_value(row["tag"], row["task_id"]))
        return result

    def get_task(self, task_id: int) -> Task:
        """Load one task with its tags. Missing ids raise ConstraintError."""
        with _translate_errors(f"Cannot load task #{task_id}"):
            row = self._conn.execute(
                "SELECT id, state, title, description FROM tasks WHERE id = ?",
                (task_id,),
            ).fetchone()
            if row is None:
                raise ConstraintError(f"Task #{task_id} does not exist")
            tags = self._tags_by_task([task_id]).get(task_id, [])
        return _row_to_task(row, tags)

    def list_tags(self) -> list[str]:
        """Distinct tag names, sorted."""
        with _translate_errors("Cannot list tags"):
            rows = self._conn.execute("SELECT DISTINCT tag FROM tags ORDER BY tag").fetchall()
        return [_tag_value(row["tag"], "?") for row in rows]

    # ── Writes ──

    def save_task(self, task: Task) -> Task:
        """Insert or update a task and sync its tag set in one transaction.

        Returns a copy of the task carrying its (possibly new) identity, with
        tags sorted the way the queries return them.
        """
        tags = unique_tags(task.tags)
        with _translate_errors("Cannot save task"):
            with self._conn:
                if task.id is None:
                    cursor = self._conn.execute(
                        "INSERT INTO tasks (state, title, description) VALUES (?, ?, ?)",
                        (task.state.ordinal, task.title, task.description),
                    )
                    task_id = cursor.lastrowid
                else:
                    task_id = task.id
                    cursor = self._conn.execute(
                        "UPDATE tasks SET state = ?, title = ?, description = ? WHERE id = ?",
                        (task.state.ordinal, task.title, task.description, task_id),
                    )
                    if cursor.rowcount == 0:
                        raise ConstraintError(f"Task #{task_id} does not exist")
                self._sync_tags(task_id, tags)
        logger.debug("Saved task #%s (%d tags)", task_id, len(tags))
        return Task(
            id=task_id,
            state=task.state,
            title=task.title,
            description=task.description,
            tags=sorted(tags),
        )

    def _sync_tags(self, task_id: int, tags: list[str]) -> None:
        existing = {
            _tag_value(row["tag"], task_id)
            for row in self._conn.execute("SELECT tag FROM tags WHERE task_id = ?", (task_id,))
        }
        wanted = set(tags)
        removed = sorted(existing - wanted)
        added = [t for t in tags if t not in existing]
        if removed:
            self._conn.executemany(
                "DELETE FROM tags WHERE tag = ? AND task_id = ?",
                [(tag, task_id) for tag in removed],
            )
        if added:
            self._conn.executemany(
                "INSERT INTO tags (tag, task_id) VALUES (?, ?)",
                [(tag, task_id) for tag in added],
            )

    def set_state(self, task_id: int, state: TaskState) -> None:
        """Persist a state change for an existing task."""
        with _translate_errors(f"Cannot move task #{task_id}"):
            with self._conn:
                cursor = self._conn.execute(
                    "UPDATE tasks SET state = ? WHERE id = ?",
                    (state.ordinal, task_id),
                )
                if cursor.rowcount == 0:
                    raise ConstraintError(f"Task #{task_id} does not exist")
        logger.debug("Task #%s moved to %s", task_id, state.value)


def open_store(db_path: Path | str, fallback: Path | str | None = None) -> TaskStore:
    """Open ``db_path``; on I/O failure fall back to ``./kanban.db``."""
    try:
        return TaskStore(db_path)
    except StoreIOError as exc:
        fallback_path = Path(fallback) if fallback is not None else Path.cwd() / FALLBACK_DB_NAME
        logger.warning("%s; falling back to %s", exc, fallback_path)
        return TaskStore(fallback_path)
