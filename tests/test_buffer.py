"""Tests for the text buffer."""

from pathlib import Path

import pytest

from hexmate.core.buffer import Buffer
from hexmate.core.rewrite import Edit
from hexmate.exceptions import ApplyError


def test_offsets_and_positions() -> None:
    buf = Buffer("line one 10\nline 0x2")

    assert buf.get_line_count() == 2
    assert buf.offset_of(1, 5) == 17
    assert buf.position_of(17) == (1, 5)
    assert buf.position_of(11) == (0, 11)
    assert buf.position_of(12) == (1, 0)
    assert buf.position_of(1000) == (1, 8)


def test_apply_edits_then_undo_and_redo() -> None:
    buf = Buffer("a=10\nb=10")

    assert buf.apply_edits([Edit(2, 4, "0xA"), Edit(7, 9, "0xA")]) == 2
    assert buf.text == "a=0xA\nb=0xA"
    assert buf.modified

    assert buf.undo()
    assert buf.text == "a=10\nb=10"
    assert not buf.modified

    assert buf.redo()
    assert buf.text == "a=0xA\nb=0xA"


def test_failed_batch_changes_nothing() -> None:
    buf = Buffer("a=10")

    with pytest.raises(ApplyError):
        buf.apply_edits([Edit(2, 4, "0xA"), Edit(3, 4, "0")])

    assert buf.text == "a=10"
    assert not buf.modified
    assert not buf.undo()


def test_empty_edit_set_is_a_no_op() -> None:
    buf = Buffer("a=10")

    assert buf.apply_edits([]) == 0
    assert not buf.undo_stack


def test_insert_and_delete_are_undoable() -> None:
    buf = Buffer("x = 1")

    buf.insert_text(0, 5, "0")
    assert buf.text == "x = 10"
    assert buf.cursor_column == 6

    buf.delete_text(0, 0, 4)
    assert buf.text == "10"

    buf.undo()
    buf.undo()
    assert buf.text == "x = 1"


def test_split_and_join_lines() -> None:
    buf = Buffer("abcdef")

    buf.split_line(0, 3)
    assert buf.code_lines == ["abc", "def"]
    assert (buf.cursor_line, buf.cursor_column) == (1, 0)

    buf.join_with_previous(1)
    assert buf.code_lines == ["abcdef"]
    assert buf.cursor_column == 3

    buf.undo()
    assert buf.code_lines == ["abc", "def"]

    buf.redo()
    assert buf.code_lines == ["abcdef"]


def test_edit_clears_redo_stack() -> None:
    buf = Buffer("1")

    buf.apply_edits([Edit(0, 1, "0x1")])
    buf.undo()
    buf.insert_text(0, 0, "x")

    assert not buf.redo()


def test_load_and_save_keep_trailing_newline(tmp_path: Path) -> None:
    path = tmp_path / "regs.c"
    path.write_text("int a = 10;\nint b = 0x20;\n", encoding="utf-8")

    buf = Buffer()
    buf.load_file(str(path))

    assert buf.code_lines == ["int a = 10;", "int b = 0x20;"]
    assert buf.trailing_newline
    assert buf.language == "C"

    buf.apply_edits([Edit(8, 10, "0xA")])
    assert buf.save_file()
    assert not buf.modified
    assert path.read_text(encoding="utf-8") == "int a = 0xA;\nint b = 0x20;\n"


def test_save_without_filename() -> None:
    assert not Buffer("1").save_file()


def test_save_to_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(IOError):
        Buffer("1").save_file(str(tmp_path / "missing" / "out.txt"))
