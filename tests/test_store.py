"""Tests for the SQLite task store."""

import sqlite3

import pytest

from tui_kanban.models import (
    ARCHIVE_TAG,
    ConstraintError,
    StoreDecodeError,
    StoreIOError,
    Task,
    TaskState,
)
from tui_kanban.store import TaskStore, open_store


def _titles(tasks):
    return [t.title for t in tasks]


class TestSchema:
    def test_tables_created(self, store):
        conn = sqlite3.connect(store.db_path)
        names = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
        conn.close()
        assert {"tasks", "tags"} <= names

    def test_reopen_keeps_data(self, tmp_path):
        path = tmp_path / "kanban.db"
        first = TaskStore(path)
        first.save_task(Task(title="Persisted"))
        first.close()
        second = TaskStore(path)
        assert _titles(second.load_tasks()) == ["Persisted"]
        second.close()

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "kanban.db"
        s = TaskStore(path)
        assert path.exists()
        s.close()


class TestSaveTask:
    def test_insert_assigns_identity(self, store):
        saved = store.save_task(Task(title="Write spec"))
        assert saved.id is not None
        assert saved.title == "Write spec"

    def test_insert_persists_state_ordinal(self, store):
        saved = store.save_task(Task(title="t", state=TaskState.BLOCKED))
        conn = sqlite3.connect(store.db_path)
        (state,) = conn.execute("SELECT state FROM tasks WHERE id = ?", (saved.id,)).fetchone()
        conn.close()
        assert state == 2

    def test_update_keeps_identity(self, store):
        saved = store.save_task(Task(title="old"))
        saved.title = "new"
        saved.description = "details"
        again = store.save_task(saved)
        assert again.id == saved.id
        loaded = store.get_task(saved.id)
        assert loaded.title == "new"
        assert loaded.description == "details"
        assert len(store.load_tasks()) == 1

    def test_tag_diff(self, store):
        saved = store.save_task(Task(title="t", tags=["a", "b"]))
        saved.tags = ["b", "c"]
        store.save_task(saved)
        assert store.get_task(saved.id).tags == ["b", "c"]
        assert store.list_tags() == ["b", "c"]

    def test_duplicate_tags_collapse(self, store):
        saved = store.save_task(Task(title="t", tags=["x", "x", "y"]))
        assert saved.tags == ["x", "y"]
        assert store.get_task(saved.id).tags == ["x", "y"]

    def test_update_missing_task(self, store):
        with pytest.raises(ConstraintError):
            store.save_task(Task(title="ghost", id=99, tags=["orphan"]))
        assert store.list_tags() == []

    def test_empty_title_allowed(self, store):
        saved = store.save_task(Task(title=""))
        assert store.get_task(saved.id).title == ""


class TestQueries:
    def test_saved_copy_has_sorted_tags(self, store):
        saved = store.save_task(Task(title="t", tags=["zeta", "alpha"]))
        assert saved.tags == ["alpha", "zeta"]

    def test_get_task_with_sorted_tags(self, store):
        saved = store.save_task(Task(title="t", tags=["zeta", "alpha"]))
        loaded = store.get_task(saved.id)
        assert loaded.tags == ["alpha", "zeta"]
        assert loaded.state is TaskState.TODO

    def test_get_missing_task(self, store):
        with pytest.raises(ConstraintError):
            store.get_task(42)

    def test_load_without_filter_hides_archived(self, store):
        store.save_task(Task(title="visible", tags=["work"]))
        store.save_task(Task(title="archived", tags=[ARCHIVE_TAG]))
        assert _titles(store.load_tasks()) == ["visible"]

    def test_load_with_filter_is_union(self, store):
        store.save_task(Task(title="a", tags=["red"]))
        store.save_task(Task(title="b", tags=["blue"]))
        store.save_task(Task(title="c", tags=["green"]))
        store.save_task(Task(title="d", tags=["red", "blue"]))
        assert _titles(store.load_tasks(["red", "blue"])) == ["a", "b", "d"]

    def test_load_with_archive_filter_includes_archived(self, store):
        store.save_task(Task(title="archived", tags=[ARCHIVE_TAG]))
        store.save_task(Task(title="other"))
        assert _titles(store.load_tasks([ARCHIVE_TAG])) == ["archived"]

    def test_load_with_filter_includes_archived_carrying_tag(self, store):
        store.save_task(Task(title="old work", tags=["work", ARCHIVE_TAG]))
        assert _titles(store.load_tasks(["work"])) == ["old work"]

    def test_loaded_tasks_carry_tags(self, store):
        store.save_task(Task(title="t", tags=["b", "a"]))
        (task,) = store.load_tasks()
        assert task.tags == ["a", "b"]

    def test_list_tags_distinct_sorted(self, store):
        store.save_task(Task(title="1", tags=["b", "a"]))
        store.save_task(Task(title="2", tags=["a", "c"]))
        assert store.list_tags() == ["a", "b", "c"]

    def test_set_state(self, store):
        saved = store.save_task(Task(title="t"))
        store.set_state(saved.id, TaskState.DONE)
        assert store.get_task(saved.id).state is TaskState.DONE

    def test_set_state_missing(self, store):
        with pytest.raises(ConstraintError):
            store.set_state(7, TaskState.DONE)


class TestDecoding:
    def _raw(self, store, sql, params=()):
        conn = sqlite3.connect(store.db_path)
        conn.execute(sql, params)
        conn.commit()
        conn.close()

    def test_unknown_ordinal_decodes_to_todo(self, store):
        self._raw(store, "INSERT INTO tasks (id, state, title) VALUES (5, 9, 'odd')")
        assert store.get_task(5).state is TaskState.TODO

    def test_non_integer_state_is_decode_error(self, store):
        self._raw(store, "INSERT INTO tasks (id, state, title) VALUES (5, 'abc', 'bad')")
        with pytest.raises(StoreDecodeError):
            store.load_tasks()

    def test_non_text_title_is_decode_error(self, store):
        self._raw(store, "INSERT INTO tasks (id, state, title) VALUES (5, 0, X'00ff')")
        with pytest.raises(StoreDecodeError):
            store.get_task(5)

    def test_invalid_utf8_title_is_decode_error(self, store):
        self._raw(store, "INSERT INTO tasks (id, state, title) VALUES (5, 0, CAST(X'FFFE41' AS TEXT))")
        with pytest.raises(StoreDecodeError):
            store.load_tasks()
        with pytest.raises(StoreDecodeError):
            store.get_task(5)

    def test_invalid_utf8_tag_is_decode_error(self, store):
        saved = store.save_task(Task(title="ok"))
        self._raw(
            store,
            "INSERT INTO tags (tag, task_id) VALUES (CAST(X'FF41' AS TEXT), ?)",
            (saved.id,),
        )
        with pytest.raises(StoreDecodeError):
            store.list_tags()
        with pytest.raises(StoreDecodeError):
            store.load_tasks()

    def test_non_ascii_text_survives(self, store):
        saved = store.save_task(Task(title="Café", description="naïve", tags=["日本"]))
        loaded = store.get_task(saved.id)
        assert loaded.title == "Café"
        assert loaded.description == "naïve"
        assert loaded.tags == ["日本"]


class TestFailures:
    def test_closed_store_is_io_error(self, store):
        store.close()
        with pytest.raises(StoreIOError):
            store.load_tasks()

    def test_open_directory_is_io_error(self, tmp_path):
        with pytest.raises(StoreIOError):
            TaskStore(tmp_path)

    def test_open_store_falls_back(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        fallback = tmp_path / "fallback.db"
        s = open_store(blocker / "sub" / "kanban.db", fallback=fallback)
        try:
            assert s.db_path == fallback
            assert fallback.exists()
        finally:
            s.close()

    def test_open_store_primary(self, tmp_path):
        s = open_store(tmp_path / "main.db", fallback=tmp_path / "fallback.db")
        try:
            assert s.db_path == tmp_path / "main.db"
            assert not (tmp_path / "fallback.db").exists()
        finally:
            s.close()
