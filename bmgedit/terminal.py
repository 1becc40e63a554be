"""ANSI escape sequences and terminal helpers used by the editor."""

from __future__ import annotations

import shutil
from enum import IntEnum

__all__ = [
    "TerminalColor",
    "terminal_size",
    "clear_screen",
    "hide_cursor",
    "show_cursor",
    "move_cursor",
    "text_color",
    "text_color_rgb",
    "background_color",
    "background_color_rgb",
    "help_text",
]


class TerminalColor(IntEnum):
    """SGR foreground colour codes; background codes are these plus ten."""

    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37
    DEFAULT = 38
    BRIGHT_BLACK = 90
    BRIGHT_RED = 91
    BRIGHT_GREEN = 92
    BRIGHT_YELLOW = 93
    BRIGHT_BLUE = 94
    BRIGHT_MAGENTA = 95
    BRIGHT_CYAN = 96
    BRIGHT_WHITE = 97


def terminal_size() -> tuple[int, int]:
    """Return the terminal's (columns, rows)."""
    size = shutil.get_terminal_size()
    return size.columns, size.lines


def clear_screen() -> str:
    """Sequence that clears the screen and homes the cursor."""
    return "\x1b[2J\x1b[H"


def hide_cursor() -> str:
    """Sequence that hides the cursor."""
    return "\x1b[?25l"


def show_cursor() -> str:
    """Sequence that shows the cursor."""
    return "\x1b[?25h"


def move_cursor(x: int, y: int) -> str:
    """Sequence that moves the cursor to column ``x``, row ``y`` (1-based)."""
    return f"\x1b[{y};{x}f"


def text_color(color: TerminalColor) -> str:
    """Sequence that sets the foreground to a palette colour."""
    return f"\x1b[{int(color)}m"


def text_color_rgb(r: int, g: int, b: int) -> str:
    """Sequence that sets the foreground to a 24-bit colour."""
    return f"\x1b[38;2;{r};{g};{b}m"


def background_color(color: TerminalColor) -> str:
    """Sequence that sets the background to a palette colour."""
    return f"\x1b[{int(color) + 10}m"


def background_color_rgb(r: int, g: int, b: int) -> str:
    """Sequence that sets the background to a 24-bit colour."""
    return f"\x1b[48;2;{r};{g};{b}m"


_HELP_LINES = (
    "\x1b[7mBMGEdit\x1b[27m",
    "\x1b[1mUsage:\x1b[22m",
    "bmgedit <args> <filename.bmg>",
    "\x1b[1mArgs:\x1b[22m",
    "-h : Display this help page. This will prevent the editor from opening.",
    "-v : Print the version. This will prevent the editor from opening.",
    "-r : Open file as read-only.",
    "-c : Create a new BMG file with the filename specified. "
    "This will overwrite any existing file as well.",
    "-a : Use ANSI color codes instead of RGB values when rendering text. "
    "Use this if colors don't show up correctly in your terminal.",
    "-d : Enable debug information, and display more BMG info for advanced users.",
    "\x1b[1mEditing:\x1b[22m",
    "When exiting from a BMG entry, the file gets saved.",
    "Use ^<letter> to enter a controller symbol, for example ^a will insert "
    "the A button, ^b will insert the B button, etc.",
    "For left and right arrows, enter brackets, either [] or {}.",
)


def help_text() -> str:
    """The command help, one line per entry, ending in a newline."""
    return "\n".join(_HELP_LINES) + "\n"