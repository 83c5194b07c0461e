"""Tests for the task editor."""

import pytest
from textual.widgets.text_area import Document

from tui_kanban.editor import TaskEditor, TextBuffer, format_tags, parse_tags
from tui_kanban.models import Task, TaskState


class TestTextBuffer:
    def test_cursor_starts_at_end(self):
        buf = TextBuffer("ab\ncde")
        assert (buf.row, buf.col) == (1, 3)

    def test_empty(self):
        buf = TextBuffer()
        assert buf.lines == [""]
        assert buf.text == ""

    def test_typing(self):
        buf = TextBuffer()
        for ch in "hi there":
            buf.input("space" if ch == " " else ch, ch)
        assert buf.text == "hi there"

    def test_backspace_joins_lines(self):
        buf = TextBuffer("ab\nc")
        buf.input("home")
        buf.input("backspace")
        assert buf.text == "abc"
        assert (buf.row, buf.col) == (0, 2)

    def test_backspace_at_start_is_noop(self):
        buf = TextBuffer("x")
        buf.input("home")
        buf.input("backspace")
        assert buf.text == "x"

    def test_newline_splits_line(self):
        buf = TextBuffer("abcd")
        buf.input("left")
        buf.input("left")
        buf.input("enter")
        assert buf.lines == ["ab", "cd"]
        assert (buf.row, buf.col) == (1, 0)

    def test_delete(self):
        buf = TextBuffer("abc")
        buf.input("home")
        buf.input("delete")
        assert buf.text == "bc"

    def test_delete_joins_next_line(self):
        buf = TextBuffer("a\nb")
        buf.input("up")
        buf.input("end")
        buf.input("delete")
        assert buf.text == "ab"

    def test_vertical_moves_clamp_column(self):
        buf = TextBuffer("long line\nab")
        buf.input("up")
        assert (buf.row, buf.col) == (0, 2)
        buf.input("end")
        buf.input("down")
        assert (buf.row, buf.col) == (1, 2)

    def test_left_wraps_to_previous_line(self):
        buf = TextBuffer("ab\n")
        buf.input("left")
        assert (buf.row, buf.col) == (0, 2)

    def test_insert_in_middle(self):
        buf = TextBuffer("ac")
        buf.input("left")
        buf.input("b", "b")
        assert buf.text == "abc"

    def test_unknown_key_ignored(self):
        buf = TextBuffer("abc")
        assert buf.input("f5") is False
        assert buf.text == "abc"

    def test_control_character_ignored(self):
        buf = TextBuffer()
        assert buf.input("ctrl+a", "\x01") is False
        assert buf.text == ""


class TestTagParsing:
    def test_split_and_trim(self):
        assert parse_tags(" a , b,c ") == ["a", "b", "c"]

    def test_whitespace_entries_collapse(self):
        assert parse_tags(" ,  , ") == []
        assert parse_tags("") == []

    def test_duplicates_collapse(self):
        assert parse_tags("a, a, b") == ["a", "b"]

    def test_tags_across_lines(self):
        assert parse_tags("a,\nb") == ["a", "b"]

    def test_format(self):
        assert format_tags(["a", "b"]) == "a, b"


class TestConversion:
    @pytest.mark.parametrize(
        "task",
        [
            Task(title="Write spec"),
            Task(title="Fix bug", state=TaskState.BLOCKED, description="line1\nline2", tags=["a", "b"], id=3),
            Task(title="", state=TaskState.DONE, tags=["Archive"], id=9),
        ],
    )
    def test_roundtrip(self, task):
        assert TaskEditor.from_task(task).to_task() == task

    def test_roundtrip_is_idempotent(self):
        editor = TaskEditor.from_task(Task(title="t", tags=["x"]))
        editor.buffers[TaskEditor.TAGS] = TextBuffer(" x ,  , ")
        once = editor.to_task()
        assert once.tags == ["x"]
        assert TaskEditor.from_task(once).to_task() == once

    def test_description_trimmed(self):
        editor = TaskEditor.new(TaskState.TODO)
        editor.buffers[TaskEditor.DESCRIPTION] = TextBuffer("  details \n")
        assert editor.to_task().description == "details"

    def test_blank_description_is_none(self):
        editor = TaskEditor.new(TaskState.TODO)
        editor.buffers[TaskEditor.DESCRIPTION] = TextBuffer("   \n  ")
        assert editor.to_task().description is None

    def test_title_kept_verbatim(self):
        editor = TaskEditor.new(TaskState.TODO)
        editor.buffers[TaskEditor.TITLE] = TextBuffer("  spaced  ")
        assert editor.to_task().title == "  spaced  "

    def test_new_editor(self):
        editor = TaskEditor.new(TaskState.IN_PROGRESS)
        task = editor.to_task()
        assert task.id is None
        assert task.state is TaskState.IN_PROGRESS
        assert editor.heading == "New task"

    def test_heading_with_identity(self):
        assert TaskEditor.from_task(Task(title="t", id=12)).heading == "Task #12"


class TestFocus:
    def test_starts_on_title(self):
        assert TaskEditor.new(TaskState.TODO).focus == TaskEditor.TITLE

    def test_next_wraps(self):
        editor = TaskEditor.new(TaskState.TODO)
        seen = []
        for _ in range(4):
            editor.next_field()
            seen.append(editor.focus)
        assert seen == [1, 2, 0, 1]

    def test_prev_wraps(self):
        editor = TaskEditor.new(TaskState.TODO)
        editor.prev_field()
        assert editor.focus == TaskEditor.TAGS

    def test_enter_in_title_advances(self):
        editor = TaskEditor.from_task(Task(title="abc"))
        editor.handle_key("enter")
        assert editor.focus == TaskEditor.DESCRIPTION
        assert editor.buffers[TaskEditor.TITLE].text == "abc"
        assert editor.buffers[TaskEditor.DESCRIPTION].text == ""

    def test_enter_in_description_inserts_newline(self):
        editor = TaskEditor.from_task(Task(title="t", description="a"))
        editor.next_field()
        editor.handle_key("enter")
        editor.handle_key("b", "b")
        assert editor.to_task().description == "a\nb"

    def test_keys_go_to_focused_buffer(self):
        editor = TaskEditor.new(TaskState.TODO)
        editor.next_field()
        editor.next_field()
        for ch in "x,y":
            editor.handle_key(ch, ch)
        task = editor.to_task()
        assert task.title == ""
        assert task.tags == ["x", "y"]


class TestDocumentBacking:
    def test_edits_land_in_document(self):
        buffer = TextBuffer("ab")
        buffer.input("enter")
        buffer.input("c", "c")
        assert isinstance(buffer.document, Document)
        assert buffer.document.text == "ab\nc"
        assert buffer.document.line_count == 2
        assert (buffer.row, buffer.col) == buffer.document.end

    def test_cursor_starts_at_document_end(self):
        buffer = TextBuffer("one\ntwo")
        assert buffer.location == (1, 3)
