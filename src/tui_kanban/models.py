"""Data models for TUI Kanban."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from tui_kanban.editor import TaskEditor


class StateInfo(NamedTuple):
    """Persistence ordinal and display label for one task state."""

    ordinal: int
    label: str


class TaskState(Enum):
    """Kanban task state. Each state owns exactly one lane."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    BLOCKED = "BLOCKED"
    DONE = "DONE"

    @property
    def ordinal(self) -> int:
        return STATE_INFO[self].ordinal

    @property
    def label(self) -> str:
        return STATE_INFO[self].label

    @property
    def lane(self) -> int:
        """Lane index for this state (same as the ordinal)."""
        return STATE_INFO[self].ordinal

    @classmethod
    def from_ordinal(cls, ordinal: int) -> TaskState:
        """Decode a persisted ordinal. Unknown values fall back to TODO."""
        return _BY_ORDINAL.get(ordinal, cls.TODO)

    @classmethod
    def from_lane(cls, lane: int) -> TaskState:
        return _BY_ORDINAL[lane]


STATE_INFO: dict[TaskState, StateInfo] = {
    TaskState.TODO: StateInfo(0, "TODO"),
    TaskState.IN_PROGRESS: StateInfo(1, "In progress"),
    TaskState.BLOCKED: StateInfo(2, "Blocked"),
    TaskState.DONE: StateInfo(3, "Done"),
}

_BY_ORDINAL: dict[int, TaskState] = {info.ordinal: s for s, info in STATE_INFO.items()}

LANE_COUNT = len(STATE_INFO)

ARCHIVE_TAG = "Archive"


class Pane(Enum):
    """Independently navigable regions of the main view."""

    LANES = "LANES"
    TAGS = "TAGS"


class RunningState(Enum):
    MAIN_VIEW = "MAIN_VIEW"
    TASK_VIEW = "TASK_VIEW"
    DONE = "DONE"


# ── Errors ──


class KanbanError(Exception):
    """Base class for failures surfaced to the user as the model's last error."""

    title = "Error"


class StoreIOError(KanbanError):
    """The task store could not be reached, read or written."""

    title = "Storage error"


class StoreDecodeError(KanbanError):
    """A stored row could not be turned into a task."""

    title = "Data error"


class ConstraintError(KanbanError):
    """A write violated a store constraint or had no valid target."""

    title = "Invalid operation"


# ── Records ──


def unique_tags(tags) -> list[str]:
    """Drop duplicate tags, keeping the first occurrence."""
    seen: set[str] = set()
    result: list[str] = []
    for tag in tags:
        if tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


@dataclass
class Task:
    """A single card on the board. ``id`` is None until first saved."""

    title: str = ""
    state: TaskState = TaskState.TODO
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    id: int | None = None

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def with_tag_toggled(self, tag: str) -> Task:
        """Return a copy with ``tag`` added, or removed if already present."""
        if tag in self.tags:
            tags = [t for t in self.tags if t != tag]
        else:
            tags = [*self.tags, tag]
        return Task(
            title=self.title,
            state=self.state,
            description=self.description,
            tags=tags,
            id=self.id,
        )


@dataclass
class LaneState:
    """Selection cursor and active flag for one lane."""

    cursor: int | None = None
    active: bool = False


@dataclass
class TagItem:
    name: str
    selected: bool = False


@dataclass
class TagPanel:
    """Tag list shown beside the lanes, with per-tag filter flags."""

    items: list[TagItem] = field(default_factory=list)
    cursor: int | None = None
    active: bool = False

    def selected_names(self) -> list[str]:
        return [item.name for item in self.items if item.selected]


@dataclass
class Model:
    """Complete interaction state of the board."""

    tasks: dict[TaskState, list[Task]] = field(
        default_factory=lambda: {s: [] for s in TaskState}
    )
    lanes: list[LaneState] = field(
        default_factory=lambda: [LaneState() for _ in range(LANE_COUNT)]
    )
    active_lane: int = 0
    tag_panel: TagPanel = field(default_factory=TagPanel)
    active_pane: Pane = Pane.LANES
    editor: TaskEditor | None = None
    last_error: KanbanError | None = None
    running_state: RunningState = RunningState.MAIN_VIEW

    @classmethod
    def initial(cls) -> Model:
        """Empty board with the first lane active."""
        model = cls()
        model.lanes[0].active = True
        return model

    @property
    def active_state(self) -> TaskState:
        return TaskState.from_lane(self.active_lane)

    def lane_tasks(self, lane: int) -> list[Task]:
        return self.tasks[TaskState.from_lane(lane)]

    def selected_task(self) -> Task | None:
        """Task under the active lane's cursor, if any."""
        tasks = self.lane_tasks(self.active_lane)
        cursor = self.lanes[self.active_lane].cursor
        if cursor is None or not 0 <= cursor < len(tasks):
            return None
        return tasks[cursor]

    def selected_tags(self) -> list[str]:
        return self.tag_panel.selected_names()
