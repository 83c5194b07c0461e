"""Task editor: three text buffers and a focus cursor."""

from __future__ import annotations

from textual.widgets.text_area import Document, Location

from tui_kanban.models import Task, TaskState, unique_tags

NEWLINE_KEYS = frozenset({"enter", "ctrl+j", "ctrl+m"})


class TextBuffer:
    """A Textual :class:`Document` plus a (row, col) cursor, edited one key at a time.

    Edits go through ``Document.replace_range`` the way ``TextArea`` applies
    them; the buffer only tracks where the cursor lands.
    """

    def __init__(self, text: str = "") -> None:
        self.document = Document(text)
        self.row, self.col = self.document.end

    @property
    def lines(self) -> list[str]:
        return self.document.lines

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def location(self) -> Location:
        return (self.row, self.col)

    def _replace(self, start: Location, end: Location, text: str) -> None:
        result = self.document.replace_range(start, end, text)
        self.row, self.col = result.end_location

    def _left_of(self, location: Location) -> Location:
        row, col = location
        if col > 0:
            return (row, col - 1)
        if row > 0:
            return (row - 1, len(self.document.get_line(row - 1)))
        return location

    def _right_of(self, location: Location) -> Location:
        row, col = location
        if col < len(self.document.get_line(row)):
            return (row, col + 1)
        if row < self.document.line_count - 1:
            return (row + 1, 0)
        return location

    def insert(self, chars: str) -> None:
        self._replace(self.location, self.location, chars)

    def newline(self) -> None:
        self.insert("\n")

    def backspace(self) -> None:
        start = self._left_of(self.location)
        if start != self.location:
            self._replace(start, self.location, "")

    def delete(self) -> None:
        end = self._right_of(self.location)
        if end != self.location:
            self.document.replace_range(self.location, end, "")

    def move(self, key: str) -> None:
        line_count = self.document.line_count
        if key == "left":
            self.row, self.col = self._left_of(self.location)
        elif key == "right":
            self.row, self.col = self._right_of(self.location)
        elif key == "up" and self.row > 0:
            self.row -= 1
            self.col = min(self.col, len(self.document.get_line(self.row)))
        elif key == "down" and self.row < line_count - 1:
            self.row += 1
            self.col = min(self.col, len(self.document.get_line(self.row)))
        elif key == "home":
            self.col = 0
        elif key == "end":
            self.col = len(self.document.get_line(self.row))

    def input(self, key: str, character: str | None = None) -> bool:
        """Apply one key. Returns False when the key means nothing here."""
        if key in NEWLINE_KEYS:
            self.newline()
        elif key == "backspace":
            self.backspace()
        elif key == "delete":
            self.delete()
        elif key in ("left", "right", "up", "down", "home", "end"):
            self.move(key)
        elif character and character.isprintable():
            self.insert(character)
        else:
            return False
        return True


def parse_tags(text: str) -> list[str]:
    """Split a comma separated tag string. Blank pieces are dropped."""
    pieces = (piece.strip() for piece in text.split(","))
    return unique_tags(piece for piece in pieces if piece)


def format_tags(tags: list[str]) -> str:
    return ", ".join(tags)


class TaskEditor:
    """Editing session for one task copy.

    The editor never references a task held in the lane lists; results flow
    back only through :meth:`to_task` on save.
    """

    TITLE = 0
    DESCRIPTION = 1
    TAGS = 2
    FIELD_LABELS = ("Title", "Description", "Tags")

    def __init__(self, task_id: int | None, state: TaskState, buffers: list[TextBuffer]) -> None:
        self.task_id = task_id
        self.state = state
        self.buffers = buffers
        self.focus = self.TITLE

    @classmethod
    def from_task(cls, task: Task) -> TaskEditor:
        return cls(
            task.id,
            task.state,
            [
                TextBuffer(task.title),
                TextBuffer(task.description or ""),
                TextBuffer(format_tags(task.tags)),
            ],
        )

    @classmethod
    def new(cls, state: TaskState) -> TaskEditor:
        """Editor around a fresh, unsaved task in ``state``."""
        return cls.from_task(Task(state=state))

    def to_task(self) -> Task:
        description = self.buffers[self.DESCRIPTION].text.strip()
        return Task(
            id=self.task_id,
            state=self.state,
            title=self.buffers[self.TITLE].text,
            description=description or None,
            tags=parse_tags(self.buffers[self.TAGS].text),
        )

    @property
    def heading(self) -> str:
        return "New task" if self.task_id is None else f"Task #{self.task_id}"

    @property
    def focused_buffer(self) -> TextBuffer:
        return self.buffers[self.focus]

    def next_field(self) -> None:
        self.focus = (self.focus + 1) % len(self.buffers)

    def prev_field(self) -> None:
        self.focus = (self.focus + len(self.buffers) - 1) % len(self.buffers)

    def handle_key(self, key: str, character: str | None = None) -> None:
        """Send a key to the focused buffer; Enter in the title moves on."""
        if self.focus == self.TITLE and key in NEWLINE_KEYS:
            self.next_field()
            return
        self.focused_buffer.input(key, character)
