"""Kanban board widget: tag panel plus one column per task state."""

from __future__ import annotations

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Static

from tui_kanban.models import LANE_COUNT, Model, Pane, RunningState, TagPanel, Task, TaskState
from tui_kanban.theme import ColorScheme


def render_lane(tasks: list[Task], cursor: int | None, highlight: bool, colors: ColorScheme) -> Text:
    """Task lines for one lane; the cursor row is highlighted when the lane has focus."""
    text = Text()
    normal = colors.style("text_fg", "text_bg")
    selected = colors.style("cursor_fg", "cursor_bg")
    for i, task in enumerate(tasks):
        style = selected if highlight and i == cursor else normal
        if i:
            text.append("\n")
        text.append(task.title or "(untitled)", style=style)
        if task.tags:
            text.append(f" [{', '.join(task.tags)}]", style=f"bold {style}")
    return text


def lane_title_colors(highlight: bool, colors: ColorScheme) -> tuple[str | None, str | None]:
    """Border title (foreground, background) for a lane column."""
    prefix = "lane_active_title" if highlight else "lane_title"
    return colors.css_color(f"{prefix}_fg"), colors.css_color(f"{prefix}_bg")


def render_tags(panel: TagPanel, highlight: bool, colors: ColorScheme) -> Text:
    """Tag names; tags used as filters are marked and bold."""
    text = Text()
    if not panel.items:
        text.append("(no tags)", style="dim")
        return text
    for i, item in enumerate(panel.items):
        if i:
            text.append("\n")
        bold = "bold" if item.selected else ""
        if highlight and i == panel.cursor:
            style = colors.style("tag_selected_fg", "tag_selected_bg", bold)
        elif item.selected:
            style = colors.style("tag_filter_fg", "text_bg", bold)
        else:
            style = colors.style("text_fg", "text_bg")
        marker = "●" if item.selected else "○"
        text.append(f"{marker} {item.name}", style=style)
    return text


class LaneColumn(Static):
    """A single column on the board."""

    DEFAULT_CSS = """
    LaneColumn {
        width: 1fr;
        height: 1fr;
        border: round $primary;
        border-title-align: center;
        padding: 0 1;
    }
    LaneColumn.lane-active {
        border: double $accent;
        border-title-style: bold;
    }
    """

    def __init__(self, state: TaskState, colors: ColorScheme, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.state = state
        self.color_scheme = colors
        self.border_title = state.label

    def show(self, tasks: list[Task], cursor: int | None, active: bool, inactive: bool) -> None:
        highlight = active and not inactive
        self.set_class(highlight, "lane-active")
        self.border_title = f"{self.state.label} ({len(tasks)})"
        fg, bg = lane_title_colors(highlight, self.color_scheme)
        self.styles.border_title_color = fg
        self.styles.border_title_background = bg
        self.update(render_lane(tasks, cursor, highlight, self.color_scheme))


class TagList(Static):
    """Tag panel used to pick filter tags."""

    DEFAULT_CSS = """
    TagList {
        width: 22;
        height: 1fr;
        border: round $primary;
        border-title-align: left;
        padding: 0 1;
    }
    TagList.tags-active {
        border: double $accent;
        border-title-style: bold;
    }
    """

    def __init__(self, colors: ColorScheme, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.color_scheme = colors
        self.border_title = "Tags"

    def show(self, panel: TagPanel, inactive: bool) -> None:
        highlight = panel.active and not inactive
        self.set_class(highlight, "tags-active")
        self.update(render_tags(panel, highlight, self.color_scheme))


class KanbanBoard(Horizontal):
    """Focus holder for the whole board; forwards every key to the app."""

    can_focus = True

    DEFAULT_CSS = """
    KanbanBoard {
        height: 1fr;
    }
    """

    class KeyInput(Message):
        """A key pressed while the board has focus."""

        def __init__(self, key: str, character: str | None) -> None:
            super().__init__()
            self.key = key
            self.character = character

    def __init__(self, colors: ColorScheme, **kwargs) -> None:
        super().__init__(**kwargs)
        self.color_scheme = colors

    def compose(self) -> ComposeResult:
        yield TagList(self.color_scheme, id="tag-list")
        for lane in range(LANE_COUNT):
            yield LaneColumn(TaskState.from_lane(lane), self.color_scheme, id=f"lane-{lane}")

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.post_message(self.KeyInput(event.key, event.character))

    def show(self, model: Model) -> None:
        """Redraw every column and the tag panel from the model."""
        inactive = model.running_state is not RunningState.MAIN_VIEW
        for lane in range(LANE_COUNT):
            column = self.query_one(f"#lane-{lane}", LaneColumn)
            state = model.lanes[lane]
            column.show(
                model.lane_tasks(lane),
                state.cursor,
                state.active and model.active_pane is Pane.LANES,
                inactive,
            )
        self.query_one("#tag-list", TagList).show(model.tag_panel, inactive)
