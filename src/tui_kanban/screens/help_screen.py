"""Help modal screen showing keybindings."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option


HELP_ITEMS: list[tuple[str, str]] = [
    # (key_display, description)
    # -- Board --
    ("← / h", "Previous lane"),
    ("→ / l", "Next lane"),
    ("↓ / j", "Next task (next tag in tag pane)"),
    ("↑ / k", "Previous task (previous tag in tag pane)"),
    ("Tab / Shift+Tab", "Switch between lanes and tags"),
    ("Enter / e", "Open selected task"),
    ("n", "New task in the current lane"),
    ("1 2 3 4", "Move task to TODO / In progress / Blocked / Done"),
    ("a", "Toggle the Archive tag on the selected task"),
    ("Space", "Toggle tag filter (tag pane)"),
    ("q", "Quit"),
    ("?", "This help"),
    # -- Editor --
    ("Tab / Shift+Tab", "Editor: next / previous field"),
    ("Enter", "Editor: next field when on the title"),
    ("Ctrl+S", "Editor: save and close"),
    ("Esc", "Editor: close without saving"),
]


class HelpScreen(ModalScreen[None]):
    """Modal screen listing key bindings."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("question_mark", "close", "Close"),
    ]

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }
    #help-container {
        width: 70;
        max-height: 80%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }
    #help-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }
    #help-list {
        height: auto;
        max-height: 100%;
    }
    """

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="help-container"):
            yield Static("[bold]Keybindings[/bold]  (Esc to close)", id="help-title")
            ol = OptionList(id="help-list")
            for key_display, desc in HELP_ITEMS:
                ol.add_option(Option(f"  {key_display:<16} {desc}"))
            yield ol

    def on_mount(self) -> None:
        self.query_one("#help-list", OptionList).focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)
