"""Tag filter: rebuild the per-state lane lists from the store."""

from __future__ import annotations

from typing import Protocol

from tui_kanban.models import Model, Task, TaskState


class TaskSource(Protocol):
    def load_tasks(self, selected_tags: list[str]) -> list[Task]: ...


def group_by_state(tasks: list[Task]) -> dict[TaskState, list[Task]]:
    """Split tasks into one list per state, keeping their order."""
    groups: dict[TaskState, list[Task]] = {s: [] for s in TaskState}
    for task in tasks:
        groups[task.state].append(task)
    return groups


def apply_filter(model: Model, store: TaskSource) -> None:
    """Reload every lane for the model's selected tags.

    Lane cursors reset to the first task, or to None for empty lanes. On a
    store error nothing in the model changes.
    """
    tasks = store.load_tasks(model.selected_tags())
    model.tasks = group_by_state(tasks)
    for state, lane_tasks in model.tasks.items():
        model.lanes[state.lane].cursor = 0 if lane_tasks else None
