"""Overlay panels drawn above the board: the task editor and the error box."""

from __future__ import annotations

from rich.console import Group
from rich.panel import Panel
from rich.text import Text
from textual.widgets import Static

from tui_kanban.editor import TaskEditor, TextBuffer
from tui_kanban.models import KanbanError
from tui_kanban.theme import ColorScheme


def render_buffer(buffer: TextBuffer, focused: bool, colors: ColorScheme) -> Text:
    """Buffer text; the focused buffer shows its cursor as a reversed cell."""
    text = Text()
    cursor_style = colors.style("cursor_fg", "cursor_bg", "reverse")
    for row, line in enumerate(buffer.lines):
        if row:
            text.append("\n")
        if not focused or row != buffer.row:
            text.append(line)
            continue
        text.append(line[: buffer.col])
        text.append(line[buffer.col : buffer.col + 1] or " ", style=cursor_style)
        text.append(line[buffer.col + 1 :])
    return text


def render_editor(editor: TaskEditor, colors: ColorScheme) -> Group:
    label_style = "bold"
    parts = []
    for index, label in enumerate(TaskEditor.FIELD_LABELS):
        focused = index == editor.focus
        body = render_buffer(editor.buffers[index], focused, colors)
        if index == TaskEditor.DESCRIPTION:
            parts.append(
                Panel(
                    body,
                    title=Text(label, style=label_style),
                    title_align="left",
                    border_style="bold" if focused else "dim",
                    height=8,
                )
            )
        else:
            line = Text(f"{label}: ", style=label_style)
            line.append_text(body)
            parts.append(line)
    parts.append(Text("Tab: next field  Ctrl+S: save  Esc: close", style="dim"))
    return Group(*parts)


class TaskEditorPanel(Static):
    """Modal task editor drawn over the lanes."""

    DEFAULT_CSS = """
    TaskEditorPanel {
        layer: overlay;
        display: none;
        width: 80%;
        height: 80%;
        offset: 10% 10%;
        background: $surface;
        border: double $accent;
        border-title-align: left;
        padding: 1 2;
    }
    """

    def __init__(self, colors: ColorScheme, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.color_scheme = colors

    def show(self, editor: TaskEditor | None) -> None:
        self.display = editor is not None
        if editor is None:
            return
        self.border_title = editor.heading
        self.update(render_editor(editor, self.color_scheme))


class ErrorBox(Static):
    """Error message shown until any key is pressed."""

    DEFAULT_CSS = """
    ErrorBox {
        layer: overlay;
        display: none;
        width: 60;
        height: auto;
        offset: 20 8;
        border: thick $error;
        padding: 0 1;
    }
    """

    def __init__(self, colors: ColorScheme, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.color_scheme = colors

    def show(self, error: KanbanError | None) -> None:
        self.display = error is not None
        if error is None:
            return
        self.border_title = error.title
        self.styles.background = self.color_scheme.css_color("error_bg")
        self.styles.color = self.color_scheme.css_color("error_fg")
        body = Text(str(error) or error.title)
        body.append("\n\nPress any key to continue", style="dim")
        self.update(body)
