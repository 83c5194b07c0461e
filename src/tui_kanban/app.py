"""Main Textual App for TUI Kanban."""

from __future__ import annotations

import logging
import os

from textual.app import App, ComposeResult
from textual.widgets import Header, Static

from tui_kanban import messages as msg
from tui_kanban.commands import KanbanCommandProvider
from tui_kanban.keys import translate
from tui_kanban.models import Model, Pane, RunningState
from tui_kanban.screens.help_screen import HelpScreen
from tui_kanban.theme import ColorScheme, load_color_scheme
from tui_kanban.update import Gateway, run_update
from tui_kanban.widgets.kanban_board import KanbanBoard
from tui_kanban.widgets.task_editor import ErrorBox, TaskEditorPanel

logger = logging.getLogger(__name__)

HELP_KEY = "question_mark"


class KanbanApp(App):
    """TUI Kanban Application.

    Every key reaching the board goes through ``translate`` and
    ``run_update``; widgets are then redrawn from the model.
    """

    TITLE = "TUI Kanban"
    CSS = """
    Screen {
        layers: base overlay;
    }
    #status-bar {
        dock: bottom;
        height: 1;
        padding: 0 1;
    }
    """

    COMMANDS = App.COMMANDS | {KanbanCommandProvider}

    def __init__(
        self,
        store: Gateway,
        colors: ColorScheme | None = None,
        no_color: bool = False,
        location: str = "",
    ) -> None:
        if no_color:
            os.environ["NO_COLOR"] = "1"
        super().__init__()
        self.store = store
        self.color_scheme = colors or load_color_scheme()
        self.location = location
        self.model = Model.initial()

    def compose(self) -> ComposeResult:
        yield Header()
        yield KanbanBoard(self.color_scheme, id="board")
        yield TaskEditorPanel(self.color_scheme, id="task-editor")
        yield ErrorBox(self.color_scheme, id="error-box")
        yield Static("", id="status-bar")

    def on_mount(self) -> None:
        self.set_timer(0.01, self._load_board)

    def _load_board(self) -> None:
        self.query_one(KanbanBoard).focus()
        self.apply_message(msg.Reload())

    @property
    def accepts_board_commands(self) -> bool:
        return (
            self.model.running_state is RunningState.MAIN_VIEW
            and self.model.last_error is None
        )

    def apply_message(self, message: msg.Message | None) -> None:
        """Run the update chain for ``message`` and redraw."""
        run_update(self.model, message, self.store)
        if self.model.running_state is RunningState.DONE:
            logger.info("Quit requested")
            self.exit()
            return
        self._refresh_ui()

    def on_kanban_board_key_input(self, event: KanbanBoard.KeyInput) -> None:
        if event.key == HELP_KEY and self.accepts_board_commands:
            self.push_screen(HelpScreen())
            return
        message = translate(self.model, event.key, event.character)
        if message is not None:
            self.apply_message(message)

    # ── UI Refresh ──

    def _refresh_ui(self) -> None:
        self.query_one(KanbanBoard).show(self.model)
        self.query_one(TaskEditorPanel).show(self.model.editor)
        self.query_one(ErrorBox).show(self.model.last_error)
        self._update_status_bar()

    def _update_status_bar(self) -> None:
        model = self.model
        parts = []
        if model.running_state is RunningState.TASK_VIEW:
            parts.append("EDIT")
        else:
            parts.append("TAGS" if model.active_pane is Pane.TAGS else model.active_state.label)
        selected = model.selected_tags()
        parts.append(f"filter: {', '.join(selected)}" if selected else "filter: (none)")
        if self.location:
            parts.append(self.location)
        parts.append("? help")
        bar = self.query_one("#status-bar", Static)
        bar.styles.background = self.color_scheme.css_color("status_bar_bg")
        bar.styles.color = self.color_scheme.css_color("status_bar_fg")
        bar.update(" │ ".join(parts))
