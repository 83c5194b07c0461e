"""Command Palette provider for TUI Kanban."""

from __future__ import annotations

from dataclasses import dataclass

from textual.command import Hit, Hits, Provider

from tui_kanban import messages as msg
from tui_kanban.models import ARCHIVE_TAG, TaskState


@dataclass(frozen=True)
class CommandDef:
    """A single command entry for the palette."""

    display: str
    message: msg.Message
    help: str = ""
    category: str = ""


COMMANDS: list[CommandDef] = [
    # -- Board --
    CommandDef("New Task", msg.NewTask(), "Create a task in the current lane (n)", "Board"),
    CommandDef("Open Task", msg.OpenTask(), "Edit the selected task (Enter)", "Board"),
    CommandDef("Toggle Archive", msg.ToggleTaskTag(ARCHIVE_TAG), "Archive / unarchive the selected task (a)", "Board"),
    CommandDef("Reload", msg.Reload(), "Reload tags and tasks from the database", "Board"),
    CommandDef("Quit", msg.Quit(), "Quit application (q)", "Board"),
    # -- Move --
    *(
        CommandDef(
            f"Move to {state.label}",
            msg.MoveTask(state),
            f"Move the selected task to {state.label} ({state.ordinal + 1})",
            "Move",
        )
        for state in TaskState
    ),
    # -- Navigation --
    CommandDef("Switch Pane", msg.NextPane(), "Switch between lanes and tags (Tab)", "Navigation"),
    CommandDef("Next Lane", msg.NextLane(), "Focus the next lane (l)", "Navigation"),
    CommandDef("Previous Lane", msg.PrevLane(), "Focus the previous lane (h)", "Navigation"),
]


class KanbanCommandProvider(Provider):
    """Textual Command Palette provider dispatching board messages."""

    @property
    def _board_ready(self) -> bool:
        """True when the board, not the editor or an error, has the user's attention."""
        try:
            return self.app.accepts_board_commands  # type: ignore[attr-defined]
        except AttributeError:
            return False

    async def discover(self) -> Hits:
        if not self._board_ready:
            return
        for cmd in COMMANDS:
            yield Hit(1.0, cmd.display, self._make_callback(cmd.message), help=cmd.help)

    async def search(self, query: str) -> Hits:
        """Search commands with fuzzy matching."""
        if not self._board_ready:
            return
        lowered = query.lower()
        for cmd in COMMANDS:
            searchable = f"{cmd.display} {cmd.help} {cmd.category}".lower()
            if self._fuzzy_match(lowered, searchable):
                yield Hit(
                    self._score(lowered, cmd.display.lower()),
                    cmd.display,
                    self._make_callback(cmd.message),
                    help=cmd.help,
                )

    def _make_callback(self, message: msg.Message):
        """Create a callback that feeds the message to the app."""
        def callback() -> None:
            self.app.apply_message(message)  # type: ignore[attr-defined]
        return callback

    @staticmethod
    def _fuzzy_match(query: str, text: str) -> bool:
        """Check if all characters of query appear in order in text."""
        it = iter(text)
        return all(ch in it for ch in query)

    @staticmethod
    def _score(query: str, text: str) -> float:
        """Score a match: higher is better (closer to 1.0)."""
        if not query:
            return 0.5
        if text == query:
            return 1.0
        if text.startswith(query):
            return 0.9
        if query in text:
            return 0.8
        return 0.7
