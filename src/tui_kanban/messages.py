"""Messages consumed by the update engine, one class per kind."""

from __future__ import annotations

from dataclasses import dataclass

from tui_kanban.models import TaskState


@dataclass(frozen=True)
class Message:
    """Base class for every board message."""


@dataclass(frozen=True)
class Quit(Message):
    pass


@dataclass(frozen=True)
class Reload(Message):
    """Refresh the tag list and re-run the tag filter."""


# ── Navigation ──


@dataclass(frozen=True)
class NextLane(Message):
    pass


@dataclass(frozen=True)
class PrevLane(Message):
    pass


@dataclass(frozen=True)
class NextTask(Message):
    pass


@dataclass(frozen=True)
class PrevTask(Message):
    pass


@dataclass(frozen=True)
class NextTag(Message):
    pass


@dataclass(frozen=True)
class PrevTag(Message):
    pass


@dataclass(frozen=True)
class NextPane(Message):
    pass


@dataclass(frozen=True)
class PrevPane(Message):
    pass


# ── Task lifecycle ──


@dataclass(frozen=True)
class OpenTask(Message):
    pass


@dataclass(frozen=True)
class NewTask(Message):
    pass


@dataclass(frozen=True)
class SaveTask(Message):
    pass


@dataclass(frozen=True)
class CloseTask(Message):
    pass


@dataclass(frozen=True)
class MoveTask(Message):
    state: TaskState


@dataclass(frozen=True)
class ToggleTaskTag(Message):
    tag: str


@dataclass(frozen=True)
class ToggleTagFilter(Message):
    pass


# ── Editor ──


@dataclass(frozen=True)
class FocusNextField(Message):
    pass


@dataclass(frozen=True)
class FocusPrevField(Message):
    pass


@dataclass(frozen=True)
class EditorKey(Message):
    key: str
    character: str | None = None


@dataclass(frozen=True)
class DismissError(Message):
    pass
