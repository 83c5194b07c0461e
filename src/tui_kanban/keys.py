"""Translate decoded key presses into board messages."""

from __future__ import annotations

from tui_kanban import messages as msg
from tui_kanban.models import ARCHIVE_TAG, Model, Pane, RunningState, TaskState

# Keys shared by both panes of the main view.
_MAIN_KEYS: dict[str, msg.Message] = {
    "q": msg.Quit(),
    "n": msg.NewTask(),
    "tab": msg.NextPane(),
    "shift+tab": msg.PrevPane(),
}

_LANE_KEYS: dict[str, msg.Message] = {
    "left": msg.PrevLane(),
    "h": msg.PrevLane(),
    "right": msg.NextLane(),
    "l": msg.NextLane(),
    "down": msg.NextTask(),
    "j": msg.NextTask(),
    "up": msg.PrevTask(),
    "k": msg.PrevTask(),
    "enter": msg.OpenTask(),
    "e": msg.OpenTask(),
    "a": msg.ToggleTaskTag(ARCHIVE_TAG),
    "1": msg.MoveTask(TaskState.TODO),
    "2": msg.MoveTask(TaskState.IN_PROGRESS),
    "3": msg.MoveTask(TaskState.BLOCKED),
    "4": msg.MoveTask(TaskState.DONE),
}

_TAG_KEYS: dict[str, msg.Message] = {
    "down": msg.NextTag(),
    "j": msg.NextTag(),
    "up": msg.PrevTag(),
    "k": msg.PrevTag(),
    "space": msg.ToggleTagFilter(),
}

_EDITOR_KEYS: dict[str, msg.Message] = {
    "tab": msg.FocusNextField(),
    "shift+tab": msg.FocusPrevField(),
    "escape": msg.CloseTask(),
    "ctrl+s": msg.SaveTask(),
}


def translate(model: Model, key: str, character: str | None = None) -> msg.Message | None:
    """Map a key press to a message for the model's current mode.

    A pending error swallows the key as a dismissal, whatever the mode.
    """
    if model.running_state is RunningState.DONE:
        return None
    if model.last_error is not None:
        return msg.DismissError()

    if model.running_state is RunningState.TASK_VIEW:
        return _EDITOR_KEYS.get(key) or msg.EditorKey(key, character)

    if key in _MAIN_KEYS:
        return _MAIN_KEYS[key]
    pane_keys = _TAG_KEYS if model.active_pane is Pane.TAGS else _LANE_KEYS
    return pane_keys.get(key)
