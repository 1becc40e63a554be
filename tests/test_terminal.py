import os
from unittest import mock

from bmgedit.terminal import (
    TerminalColor,
    background_color,
    background_color_rgb,
    clear_screen,
    help_text,
    hide_cursor,
    move_cursor,
    show_cursor,
    terminal_size,
    text_color,
    text_color_rgb,
)


def test_clear_screen_sequence():
    assert clear_screen() == "\x1b[2J\x1b[H"


def test_cursor_visibility_sequences():
    assert hide_cursor() == "\x1b[?25l"
    assert show_cursor() == "\x1b[?25h"


def test_move_cursor_puts_row_first():
    assert move_cursor(3, 5) == "\x1b[5;3f"


def test_text_color_uses_code():
    assert text_color(TerminalColor.BRIGHT_BLACK) == "\x1b[90m"


def test_background_color_offsets_by_ten():
    assert background_color(TerminalColor.BLUE) == "\x1b[44m"


def test_rgb_sequences():
    assert text_color_rgb(1, 2, 3) == "\x1b[38;2;1;2;3m"
    assert background_color_rgb(0, 0, 255) == "\x1b[48;2;0;0;255m"


def test_help_text_contents():
    text = help_text()
    assert "bmgedit <args> <filename.bmg>" in text
    assert "-r : Open file as read-only." in text
    assert text.endswith("\n")


def test_terminal_size_reads_environment():
    with mock.patch.dict(os.environ, {"COLUMNS": "100", "LINES": "40"}):
        assert terminal_size() == (100, 40)