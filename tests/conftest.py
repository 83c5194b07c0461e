"""Shared fixtures for the TUI Kanban tests."""

import pytest

from tui_kanban.models import StoreIOError
from tui_kanban.store import TaskStore


class BrokenStore:
    """Wraps a real store; the named operations raise StoreIOError."""

    def __init__(self, inner: TaskStore, *failing: str) -> None:
        self.inner = inner
        self.failing = set(failing)
        self.calls: list[str] = []

    def __getattr__(self, name):
        attr = getattr(self.inner, name)
        if name not in self.failing:
            return attr

        def fail(*args, **kwargs):
            self.calls.append(name)
            raise StoreIOError(f"{name}: database is unreachable")

        return fail


@pytest.fixture
def store(tmp_path):
    s = TaskStore(tmp_path / "kanban.db")
    yield s
    s.close()


@pytest.fixture
def break_store(store):
    """Factory: ``break_store("get_task")`` fails only get_task."""

    def factory(*failing: str) -> BrokenStore:
        return BrokenStore(store, *failing)

    return factory
