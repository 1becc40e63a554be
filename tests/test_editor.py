import functools

import pytest

from bmgedit.bmg import BmgEntry, BmgFile
from bmgedit.editor import Editor, Screen, read_key, run_editor
from bmgedit.render import render_message
from bmgedit.terminal import clear_screen

UP = "\x1b[A"
DOWN = "\x1b[B"
RIGHT = "\x1b[C"
LEFT = "\x1b[D"


def make_editor(tmp_path, messages=(b"Hello",), read_only=False):
    bmg = BmgFile(entries=[BmgEntry(message=m) for m in messages], entry_length=12)
    path = tmp_path / "test.bmg"
    bmg.save(path)
    editor = Editor(path, bmg, read_only=read_only)
    editor.draw(80, 24)
    return editor


def press(editor, *keys):
    for key in keys:
        editor.feed(key)


def reader(text):
    return functools.partial(next, iter(text), "")


def open_control(editor, index):
    press(editor, "\r", "\x05", DOWN, "\r")
    press(editor, *([DOWN] * index))
    press(editor, "\r")


def test_read_key_plain_and_arrows():
    assert read_key(reader("a")) == "a"
    assert read_key(reader(UP)) == UP
    assert read_key(reader("")) == ""
    assert read_key(reader("\x1bx")) == "\x1bx"


def test_enter_opens_entry(tmp_path):
    editor = make_editor(tmp_path)
    press(editor, "\r")
    assert editor.screen is Screen.EDIT_ENTRY
    assert editor.cursor == 0


def test_typing_into_new_entry(tmp_path):
    editor = make_editor(tmp_path, messages=())
    press(editor, "\r", "H", "i")
    assert len(editor.entries) == 1
    assert editor.entries[0].message == b"Hi"
    assert editor.cursor == 2


def test_reserved_characters_need_control_keys(tmp_path):
    editor = make_editor(tmp_path, messages=(b"",))
    press(editor, "\r", "#", "@", "\x02", "\x01")
    assert editor.entries[0].message == b"#@"


def test_return_inserts_newline(tmp_path):
    editor = make_editor(tmp_path, messages=(b"",))
    press(editor, "\r", "a", "\r", "b")
    assert editor.entries[0].message == b"a\nb"


def test_cursor_is_bounded(tmp_path):
    editor = make_editor(tmp_path)
    press(editor, "\r", *([RIGHT] * 10))
    assert editor.cursor == len(b"Hello")
    press(editor, *([LEFT] * 10))
    assert editor.cursor == 0


def test_insert_at_cursor(tmp_path):
    editor = make_editor(tmp_path)
    press(editor, "\r", RIGHT, RIGHT, "X")
    assert editor.entries[0].message == b"HeXllo"


def test_backspace_removes_character(tmp_path):
    editor = make_editor(tmp_path)
    press(editor, "\r", RIGHT, RIGHT, "\x7f")
    assert editor.entries[0].message == b"Hllo"
    assert editor.cursor == 1


def test_backspace_removes_whole_control(tmp_path):
    editor = make_editor(tmp_path, messages=(b"A\x1a\x05\x00\x00\x01",))
    press(editor, "\r", RIGHT, RIGHT, "\x7f")
    assert editor.entries[0].message == b"A"
    assert editor.cursor == 1


def test_menu_quit_saves(tmp_path):
    editor = make_editor(tmp_path)
    press(editor, "\r", RIGHT, "Z", "\x05", "q")
    assert editor.screen is Screen.PICK_ENTRY
    saved = BmgFile.load(editor.path)
    assert [e.message for e in saved.entries] == [editor.entries[0].message]


def test_delete_entry(tmp_path):
    editor = make_editor(tmp_path, messages=(b"One", b"Two"))
    press(editor, "\r", "\x05", DOWN, DOWN, "\r")
    assert editor.screen is Screen.PICK_ENTRY
    assert [e.message for e in BmgFile.load(editor.path).entries] == [b"Two"]


def test_slow_control(tmp_path):
    editor = make_editor(tmp_path, messages=(b"",))
    open_control(editor, 0)
    assert editor.screen is Screen.EDIT_ENTRY
    assert editor.entries[0].message == b"\x1a\x05\x00\x00\x00"
    assert editor.cursor == 1


def test_speed_control_is_capped(tmp_path):
    editor = make_editor(tmp_path, messages=(b"",))
    open_control(editor, 2)
    assert editor.screen is Screen.CONTROL_DETAIL
    press(editor, "3", "0", "0", "9", "\r")
    assert editor.entries[0].message == b"\x1a\x06\x00\x00\x00" + bytes([255])
    assert editor.screen is Screen.EDIT_ENTRY


def test_yes_option_control(tmp_path):
    editor = make_editor(tmp_path, messages=(b"",))
    open_control(editor, 3)
    press(editor, "Y", "e", "s", "\r")
    message = editor.entries[0].message
    assert message[0] == 0x1A
    assert message[1] == len(message)
    assert message[5:] == b"Yes"
    assert "[yes option:Yes]" in render_message(message, 1, 3, 1)


def test_color_control(tmp_path):
    editor = make_editor(tmp_path, messages=(b"",))
    open_control(editor, 6)
    press(editor, DOWN, DOWN, "\r")
    message = editor.entries[0].message
    assert message == b"\x1a\x06\xff\x00\x00" + bytes([2])
    assert "[text color:red]" in render_message(message, 1, 3, 1)


def test_flag_control(tmp_path):
    editor = make_editor(tmp_path, messages=(b"",))
    open_control(editor, 5)
    press(editor, DOWN, DOWN, DOWN, DOWN, "\r")
    message = editor.entries[0].message
    assert message.startswith(b"\x1a\x06\x02\x00\x04")
    assert "[# of bananas]" in render_message(message, 1, 3, 0, read_only=True)


def test_read_only_ignores_typing(tmp_path):
    editor = make_editor(tmp_path, read_only=True)
    press(editor, "\r", "x", "\x7f", "\x05")
    assert editor.entries[0].message == b"Hello"
    assert editor.screen is Screen.EDIT_ENTRY
    press(editor, "q")
    assert editor.screen is Screen.PICK_ENTRY


@pytest.mark.parametrize("read_only, expected", [(False, 2), (True, 1)])
def test_entry_list_bounds(tmp_path, read_only, expected):
    editor = make_editor(tmp_path, messages=(b"One", b"Two"), read_only=read_only)
    press(editor, *([DOWN] * 5))
    assert editor.entry_index == expected
    press(editor, *([UP] * 5))
    assert editor.entry_index == 0


def test_draw_lists_entries(tmp_path):
    editor = make_editor(tmp_path, messages=(b"Hello\nWorld",))
    frame = editor.draw(80, 24)
    assert "Entry 0: Hello..." in frame
    assert "New Entry" in frame
    assert "World" not in frame


def test_quit(tmp_path):
    editor = make_editor(tmp_path)
    press(editor, "q")
    assert editor.running is False


def test_run_session(tmp_path):
    editor = make_editor(tmp_path, messages=())
    output = []
    editor.run(reader("\rA\x05qq"), output.append)
    assert editor.running is False
    assert output[-1].endswith(clear_screen())
    assert [e.message for e in BmgFile.load(editor.path).entries] == [b"A"]


def test_run_editor_missing_file(tmp_path, capsys):
    assert run_editor(tmp_path / "missing.bmg") == 1
    assert "does not exist." in capsys.readouterr().out


def test_run_editor_rejects_non_bmg(tmp_path, capsys):
    path = tmp_path / "bad.bmg"
    path.write_bytes(b"not a bmg file at all")
    assert run_editor(path) == 1
    assert "File is not a BMG file." in capsys.readouterr().out