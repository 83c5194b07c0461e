"""Update engine: apply one message to the model.

``update`` mutates the model in place and may return a follow-up message;
``run_update`` drains that chain. Store failures never escape: they land in
``model.last_error`` and the model is left as it was before the message,
except where a handler documents otherwise.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Protocol

from tui_kanban import messages as msg
from tui_kanban.editor import TaskEditor
from tui_kanban.filtering import apply_filter
from tui_kanban.models import (
    LANE_COUNT,
    ConstraintError,
    KanbanError,
    LaneState,
    Model,
    Pane,
    RunningState,
    TagItem,
    Task,
    TaskState,
)

logger = logging.getLogger(__name__)


class Gateway(Protocol):
    """The store operations the update engine relies on."""

    def load_tasks(self, selected_tags: list[str]) -> list[Task]: ...

    def get_task(self, task_id: int) -> Task: ...

    def save_task(self, task: Task) -> Task: ...

    def set_state(self, task_id: int, state: TaskState) -> None: ...

    def list_tags(self) -> list[str]: ...


Handler = Callable[[Model, msg.Message, Gateway], "msg.Message | None"]


def _fail(model: Model, error: KanbanError) -> None:
    logger.warning("%s: %s", error.title, error)
    model.last_error = error


def _wrap(index: int, step: int, count: int) -> int:
    return (index + step + count) % count


# ── Selection helpers ──


def remove_selected(tasks: list[Task], lane: LaneState) -> Task:
    """Pop the task under the lane cursor and fix the cursor up.

    Removing the last element steps the cursor back to ``len - 2`` of the
    shortened list (saturating at 0); an emptied lane has no cursor.
    """
    index = lane.cursor
    task = tasks.pop(index)
    if not tasks:
        lane.cursor = None
    elif index >= len(tasks):
        lane.cursor = max(len(tasks) - 2, 0)
    return task


def normalize_cursors(model: Model) -> None:
    """Keep every cursor inside its list: None when empty, valid otherwise."""
    for state, tasks in model.tasks.items():
        lane = model.lanes[state.lane]
        lane.cursor = _clamp_cursor(lane.cursor, len(tasks))
    panel = model.tag_panel
    panel.cursor = _clamp_cursor(panel.cursor, len(panel.items))


def _clamp_cursor(cursor: int | None, length: int) -> int | None:
    if length == 0:
        return None
    if cursor is None or cursor < 0:
        return 0
    return min(cursor, length - 1)


def _set_active_lane(model: Model, lane: int) -> None:
    model.lanes[model.active_lane].active = False
    model.active_lane = lane
    model.lanes[lane].active = model.active_pane is Pane.LANES


def refresh_tags(model: Model, store: Gateway) -> None:
    """Reload the tag list, keeping filter flags of tags that still exist."""
    names = store.list_tags()
    panel = model.tag_panel
    selected = set(panel.selected_names())
    panel.items = [TagItem(name, name in selected) for name in names]
    panel.cursor = _clamp_cursor(panel.cursor, len(panel.items))


# ── Handlers ──


def _quit(model: Model, message: msg.Message, store: Gateway) -> None:
    model.running_state = RunningState.DONE


def _reload(model: Model, message: msg.Message, store: Gateway) -> None:
    try:
        refresh_tags(model, store)
        apply_filter(model, store)
    except KanbanError as exc:
        _fail(model, exc)


def _next_lane(model: Model, message: msg.Message, store: Gateway) -> None:
    _set_active_lane(model, _wrap(model.active_lane, 1, LANE_COUNT))


def _prev_lane(model: Model, message: msg.Message, store: Gateway) -> None:
    _set_active_lane(model, _wrap(model.active_lane, -1, LANE_COUNT))


def _step_task(model: Model, step: int) -> None:
    count = len(model.lane_tasks(model.active_lane))
    lane = model.lanes[model.active_lane]
    if count == 0:
        lane.cursor = None
    elif lane.cursor is None:
        lane.cursor = 0
    else:
        lane.cursor = _wrap(lane.cursor, step, count)


def _next_task(model: Model, message: msg.Message, store: Gateway) -> None:
    _step_task(model, 1)


def _prev_task(model: Model, message: msg.Message, store: Gateway) -> None:
    _step_task(model, -1)


def _step_tag(model: Model, step: int) -> None:
    panel = model.tag_panel
    count = len(panel.items)
    if count == 0:
        panel.cursor = None
    elif panel.cursor is None:
        panel.cursor = 0
    else:
        panel.cursor = _wrap(panel.cursor, step, count)


def _next_tag(model: Model, message: msg.Message, store: Gateway) -> None:
    _step_tag(model, 1)


def _prev_tag(model: Model, message: msg.Message, store: Gateway) -> None:
    _step_tag(model, -1)


def _switch_pane(model: Model, message: msg.Message, store: Gateway) -> None:
    # Two panes: next and previous both land on the other one.
    if model.active_pane is Pane.LANES:
        model.active_pane = Pane.TAGS
        model.lanes[model.active_lane].active = False
        model.tag_panel.active = True
    else:
        model.active_pane = Pane.LANES
        model.tag_panel.active = False
        model.lanes[model.active_lane].active = True


def _open_task(model: Model, message: msg.Message, store: Gateway) -> None:
    task = model.selected_task()
    if task is None:
        return
    if task.id is None:
        _fail(model, ConstraintError("Selected task has not been saved"))
        return
    try:
        loaded = store.get_task(task.id)
    except KanbanError as exc:
        _fail(model, exc)
        return
    model.editor = TaskEditor.from_task(loaded)
    model.running_state = RunningState.TASK_VIEW


def _new_task(model: Model, message: msg.Message, store: Gateway) -> None:
    model.editor = TaskEditor.new(model.active_state)
    model.running_state = RunningState.TASK_VIEW


def _save_task(model: Model, message: msg.Message, store: Gateway) -> None:
    if model.editor is None:
        return
    try:
        saved = store.save_task(model.editor.to_task())
    except KanbanError as exc:
        # Editor stays open with its buffers untouched.
        _fail(model, exc)
        return
    logger.info("Saved task #%s", saved.id)
    model.editor = None
    model.running_state = RunningState.MAIN_VIEW
    try:
        refresh_tags(model, store)
        apply_filter(model, store)
    except KanbanError as exc:
        _fail(model, exc)

    lane_tasks = model.tasks[saved.state]
    for i, existing in enumerate(lane_tasks):
        if existing.id == saved.id:
            lane_tasks[i] = saved
            break
    else:
        lane_tasks.append(saved)


def _close_task(model: Model, message: msg.Message, store: Gateway) -> None:
    model.editor = None
    model.running_state = RunningState.MAIN_VIEW


def _move_task(model: Model, message: msg.MoveTask, store: Gateway) -> None:
    source = model.active_state
    if message.state is source:
        return
    task = model.selected_task()
    if task is None:
        return
    if task.id is None:
        _fail(model, ConstraintError("Selected task has not been saved"))
        return
    try:
        store.set_state(task.id, message.state)
    except KanbanError as exc:
        _fail(model, exc)
        return
    moved = remove_selected(model.tasks[source], model.lanes[source.lane])
    model.tasks[message.state].append(replace(moved, state=message.state))


def _toggle_task_tag(
    model: Model, message: msg.ToggleTaskTag, store: Gateway
) -> msg.Message | None:
    task = model.selected_task()
    if task is None:
        return None
    try:
        store.save_task(task.with_tag_toggled(message.tag))
    except KanbanError as exc:
        _fail(model, exc)
        return None
    return msg.Reload()


def _toggle_tag_filter(model: Model, message: msg.Message, store: Gateway) -> None:
    panel = model.tag_panel
    if panel.cursor is None or not panel.items:
        return
    item = panel.items[panel.cursor]
    item.selected = not item.selected
    try:
        apply_filter(model, store)
    except KanbanError as exc:
        # The flag stays flipped even though the lanes were not reloaded.
        _fail(model, exc)


def _focus_next_field(model: Model, message: msg.Message, store: Gateway) -> None:
    if model.editor is not None:
        model.editor.next_field()


def _focus_prev_field(model: Model, message: msg.Message, store: Gateway) -> None:
    if model.editor is not None:
        model.editor.prev_field()


def _editor_key(model: Model, message: msg.EditorKey, store: Gateway) -> None:
    if model.editor is not None:
        model.editor.handle_key(message.key, message.character)


def _dismiss_error(model: Model, message: msg.Message, store: Gateway) -> None:
    model.last_error = None


HANDLERS: dict[type[msg.Message], Handler] = {
    msg.Quit: _quit,
    msg.Reload: _reload,
    msg.NextLane: _next_lane,
    msg.PrevLane: _prev_lane,
    msg.NextTask: _next_task,
    msg.PrevTask: _prev_task,
    msg.NextTag: _next_tag,
    msg.PrevTag: _prev_tag,
    msg.NextPane: _switch_pane,
    msg.PrevPane: _switch_pane,
    msg.OpenTask: _open_task,
    msg.NewTask: _new_task,
    msg.SaveTask: _save_task,
    msg.CloseTask: _close_task,
    msg.MoveTask: _move_task,
    msg.ToggleTaskTag: _toggle_task_tag,
    msg.ToggleTagFilter: _toggle_tag_filter,
    msg.FocusNextField: _focus_next_field,
    msg.FocusPrevField: _focus_prev_field,
    msg.EditorKey: _editor_key,
    msg.DismissError: _dismiss_error,
}


def update(model: Model, message: msg.Message, store: Gateway) -> msg.Message | None:
    """Apply ``message`` to ``model``. Returns a chained message or None."""
    if model.running_state is RunningState.DONE:
        return None
    handler = HANDLERS[type(message)]
    follow_up = handler(model, message, store)
    normalize_cursors(model)
    return follow_up


def run_update(model: Model, message: msg.Message | None, store: Gateway) -> None:
    """Apply ``message`` and every message chained after it."""
    while message is not None:
        message = update(model, message, store)
