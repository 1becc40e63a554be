"""Interactive full-screen editor for BMG message files."""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from enum import Enum, auto
from pathlib import Path
from typing import Callable, Iterator

from bmgedit.bmg import (
    ESCAPE,
    BmgEntry,
    BmgError,
    BmgFile,
    cursor_offset,
    cursor_on_control,
    message_column,
    message_row,
)
from bmgedit.render import first_line, render_message
from bmgedit.terminal import (
    TerminalColor,
    background_color,
    clear_screen,
    hide_cursor,
    move_cursor,
    show_cursor,
    terminal_size,
    text_color,
)

__all__ = ["Screen", "Editor", "read_key", "run_editor"]

ESC = "\x1b"
UP = "\x1b[A"
DOWN = "\x1b[B"
RIGHT = "\x1b[C"
LEFT = "\x1b[D"
ENTER = "\r"
BACKSPACE = "\x7f"
MENU = "\x05"

_RESERVED = set("#$%+<>@")

_CONTROL_KEYS = {
    "\x01": b"@",
    "\x02": b"#",
    "\x03": b"%",
    "\x0c": b"<",
    "\x12": b">",
    "\x18": b"+",
    "\x19": "¥".encode("utf-8"),
    "\x1a": b"$",
    "\r": b"\n",
}

_MENU_ITEMS = ("Back to entry edit", "Insert control code", "Delete entry")

_CONTROL_ITEMS = (
    "Slow delivery",
    "Auto-close",
    "Speed",
    "Define yes option",
    "Define no option",
    "Display flag",
    "Color text",
)

_FLAG_ITEMS = (
    "Pianta village piantissimo record",
    "Gelato Beach piantissimo record",
    "Box game record",
    "Blue coin shines",
    "Number of bananas",
    "Number of coconuts",
    "Number of pineapples",
    "Number of durians",
    "Noki Bay piantissimo record",
)

_COLOR_ITEMS = ("White (default)", "Grey", "Red", "Blue", "Yellow", "Green")

_FLAG_VALUES = {0: 0x00, 1: 0x01, 2: 0x02, 3: 0x03, 8: 0x06}

_PROMPTS = {
    2: "Speed value (0-255): ",
    3: "Yes option text: ",
    4: "No option text: ",
}


class Screen(Enum):
    """The editor's screens."""

    PICK_ENTRY = auto()
    EDIT_ENTRY = auto()
    ENTRY_MENU = auto()
    PICK_CONTROL = auto()
    CONTROL_DETAIL = auto()


def read_key(read: Callable[[], str]) -> str:
    """Read one key press; arrow keys come back as their three-character sequence.

    ``read`` returns one character per call, or an empty string at end of input.
    """
    ch = read()
    if ch != ESC:
        return ch
    nxt = read()
    if nxt != "[":
        return ch + nxt
    return ch + nxt + read()


class Editor:
    """State of an editing session, driven one key at a time."""

    def __init__(
        self,
        path,
        bmg: BmgFile,
        read_only: bool = False,
        ansi_colors: bool = False,
        developer_mode: bool = False,
    ) -> None:
        self.path = Path(path)
        self.entries: list[BmgEntry] = bmg.entries
        self.entry_length = bmg.entry_length
        self.read_only = read_only
        self.ansi_colors = ansi_colors
        self.developer_mode = developer_mode

        self.screen = Screen.PICK_ENTRY
        self.running = True
        self.entry_index = 0
        self.entry_page = 0
        self.cursor = 0
        self.menu_index = 0
        self.menu_page = 0
        self.control_index = 0
        self.control_page = 0
        self.detail_index = 0
        self.detail_input = ""
        self.last_key = ""
        self.width, self.height = terminal_size()

    # -- helpers -----------------------------------------------------------

    @property
    def _rows(self) -> int:
        return max(self.height - 2, 1)

    @property
    def _entry(self) -> BmgEntry:
        return self.entries[self.entry_index]

    def save(self) -> None:
        """Write the entries back to the file being edited."""
        BmgFile(entries=self.entries, entry_length=self.entry_length).save(self.path)

    def _reset_for_screen(self) -> None:
        if self.screen is not Screen.ENTRY_MENU:
            self.menu_index = 0
        if self.screen not in (Screen.PICK_CONTROL, Screen.CONTROL_DETAIL):
            self.control_index = 0
            self.control_page = 0
        if self.screen is not Screen.CONTROL_DETAIL:
            self.detail_index = 0
            self.detail_input = ""

    def _insert(self, data: bytes) -> None:
        entry = self._entry
        offset = cursor_offset(entry.message, self.cursor)
        entry.message = entry.message[:offset] + data + entry.message[offset:]
        self.cursor += 1

    def _scroll(self, key: str, index: int, page: int, last: int) -> tuple[int, int]:
        rows = self._rows
        if key == UP and index > 0:
            index -= 1
            if index < page * rows:
                page -= 1
        elif key == DOWN and index < last:
            index += 1
            if index >= (page + 1) * rows:
                page += 1
        return index, page

    def _list(self, items, selected: int, page: int) -> str:
        rows = self._rows
        start = page * rows
        out = [
            move_cursor(3, i - start + 3) + items[i]
            for i in range(start, min(len(items), start + rows))
        ]
        out.append(move_cursor(1, selected - start + 3) + ">")
        return "".join(out)

    # -- drawing -----------------------------------------------------------

    def draw(self, width: int, height: int) -> str:
        """Return the terminal output for the current screen."""
        self.width, self.height = width, height
        self._reset_for_screen()

        out = [
            background_color(TerminalColor.BLACK),
            clear_screen(),
            hide_cursor(),
            text_color(TerminalColor.WHITE),
            move_cursor(1, 1),
            "\x1b[1mBMGEdit\x1b[22m",
        ]
        screen = self.screen
        if self.read_only:
            out.append(" | Read-only")
        if screen is Screen.PICK_ENTRY:
            out.append(" | Press 'q' to quit")
        if screen is Screen.EDIT_ENTRY and not self.read_only:
            out.append(" | Press ^e for menu")
        if screen is Screen.ENTRY_MENU or (screen is Screen.EDIT_ENTRY and self.read_only):
            out.append(" | Press 'q' to return to entry list")
        if screen in (Screen.PICK_CONTROL, Screen.CONTROL_DETAIL):
            out.append(" | Press 'q' to return to entry menu")
        out.append(move_cursor(1, 2))
        out.append("=" * width)

        if screen is Screen.PICK_ENTRY:
            out.append(self._draw_pick_entry())
        elif screen is Screen.EDIT_ENTRY:
            out.append(self._draw_edit_entry())
        elif screen is Screen.ENTRY_MENU:
            out.append(self._list(_MENU_ITEMS, self.menu_index, self.menu_page))
        elif screen is Screen.PICK_CONTROL:
            out.append(self._list(_CONTROL_ITEMS, self.control_index, self.control_page))
        else:
            out.append(self._draw_control_detail())
        return "".join(out)

    def _draw_pick_entry(self) -> str:
        rows = self._rows
        start = self.entry_page * rows
        count = len(self.entries)
        out = []
        for i in range(start, start + rows):
            if i > count or (i >= count and self.read_only):
                break
            out.append(move_cursor(1, i - start + 3))
            if i == count:
                out.append("  New Entry")
            else:
                out.append(f"  Entry {i}: {first_line(self.entries[i].message)}...")
        out.append(move_cursor(1, self.entry_index - start + 3) + ">")
        return "".join(out)

    def _draw_edit_entry(self) -> str:
        message = self._entry.message
        out = [
            render_message(
                message, 1, 3, self.cursor, self.read_only, self.ansi_colors
            )
        ]
        if not self.read_only:
            out.append(show_cursor())
            out.append(
                move_cursor(
                    message_column(message, self.cursor) + 1,
                    message_row(message, self.cursor) + 3,
                )
            )
        if self.developer_mode and self.last_key:
            out.append(str(ord(self.last_key[0])))
        return "".join(out)

    def _draw_control_detail(self) -> str:
        if self.control_index in _PROMPTS:
            return (
                move_cursor(1, 3)
                + _PROMPTS[self.control_index]
                + self.detail_input
                + show_cursor()
            )
        items = _FLAG_ITEMS if self.control_index == 5 else _COLOR_ITEMS
        return self._list(items, self.detail_index, self.control_page)

    # -- input -------------------------------------------------------------

    def feed(self, key: str) -> None:
        """Handle one key press on the current screen."""
        self._reset_for_screen()
        self.last_key = key
        handler = {
            Screen.PICK_ENTRY: self._feed_pick_entry,
            Screen.EDIT_ENTRY: self._feed_edit_entry,
            Screen.ENTRY_MENU: self._feed_menu,
            Screen.PICK_CONTROL: self._feed_pick_control,
            Screen.CONTROL_DETAIL: self._feed_control_detail,
        }[self.screen]
        handler(key)

    def _feed_pick_entry(self, key: str) -> None:
        count = len(self.entries)
        if key == "q":
            self.running = False
        elif key == ENTER:
            self.cursor = 0
            self.screen = Screen.EDIT_ENTRY
            if self.entry_index == count:
                self.entries.append(BmgEntry())
        elif key in (UP, DOWN):
            rows = self._rows
            start = self.entry_page * rows
            last_page = not self.read_only and start <= count < start + rows
            last = count if last_page else count - 1
            self.entry_index, self.entry_page = self._scroll(
                key, self.entry_index, self.entry_page, last
            )

    def _feed_edit_entry(self, key: str) -> None:
        if not self.read_only:
            if len(key) == 1 and 32 <= ord(key) < 127 and key not in _RESERVED:
                self._insert(key.encode("latin-1"))
            elif key in _CONTROL_KEYS:
                self._insert(_CONTROL_KEYS[key])

        if key == BACKSPACE:
            if self.cursor > 0 and not self.read_only:
                self._backspace()
        elif key == MENU:
            if not self.read_only:
                self.screen = Screen.ENTRY_MENU
        elif key == "q":
            if self.read_only:
                self.screen = Screen.PICK_ENTRY
        elif key == LEFT:
            if self.cursor > 0:
                self.cursor -= 1
        elif key == RIGHT:
            if self.cursor < self._entry.char_count:
                self.cursor += 1

    def _backspace(self) -> None:
        entry = self._entry
        message = entry.message
        offset = cursor_offset(message, self.cursor)
        if cursor_on_control(message, self.cursor):
            start = message.rfind(bytes([ESCAPE]), 1, offset + 1)
            if start != -1:
                entry.message = message[:start] + message[offset:]
                self.cursor -= 1
        else:
            entry.message = message[: offset - 1] + message[offset:]
            self.cursor -= 1

    def _feed_menu(self, key: str) -> None:
        if key == "q":
            self.screen = Screen.PICK_ENTRY
            self.save()
        elif key == ENTER:
            if self.menu_index == 0:
                self.screen = Screen.EDIT_ENTRY
            elif self.menu_index == 1:
                self.screen = Screen.PICK_CONTROL
            else:
                del self.entries[self.entry_index]
                self.save()
                self.screen = Screen.PICK_ENTRY
        elif key in (UP, DOWN):
            self.menu_index, self.menu_page = self._scroll(
                key, self.menu_index, self.menu_page, len(_MENU_ITEMS) - 1
            )

    def _feed_pick_control(self, key: str) -> None:
        if key == "q":
            self.screen = Screen.ENTRY_MENU
        elif key == ENTER:
            if self.control_index in (0, 1):
                self._insert(b"\x1a\x05\x00\x00" + bytes([self.control_index]))
                self.screen = Screen.EDIT_ENTRY
            else:
                self.screen = Screen.CONTROL_DETAIL
                self.control_page = 0
        elif key in (UP, DOWN):
            self.control_index, self.control_page = self._scroll(
                key, self.control_index, self.control_page, len(_CONTROL_ITEMS) - 1
            )

    def _feed_control_detail(self, key: str) -> None:
        control = self.control_index
        if control == 2:
            self._feed_text(key, str.isdigit)
            if key == ENTER and self.detail_input:
                speed = min(int(self.detail_input), 255)
                self._insert(b"\x1a\x06\x00\x00\x00" + bytes([speed]))
                self.screen = Screen.EDIT_ENTRY
        elif control in (3, 4):
            self._feed_text(key, lambda c: "A" <= c <= "Z" or "a" <= c <= "{")
            if key == ENTER and self.detail_input:
                text = self.detail_input.encode("latin-1")
                self._insert(
                    bytes([ESCAPE, len(text) + 5, 0x01, 0x00, control - 3]) + text
                )
                self.screen = Screen.EDIT_ENTRY
        elif control == 5:
            self.detail_index, self.control_page = self._scroll(
                key, self.detail_index, self.control_page, len(_FLAG_ITEMS) - 1
            )
            if key == ENTER:
                if 4 <= self.detail_index <= 7:
                    self._insert(b"\x1a\x06\x02\x00\x04" + bytes([self.detail_index - 4]))
                else:
                    value = _FLAG_VALUES[self.detail_index]
                    self._insert(b"\x1a\x05\x02\x00" + bytes([value]))
                self.screen = Screen.EDIT_ENTRY
        elif control == 6:
            self.detail_index, self.control_page = self._scroll(
                key, self.detail_index, self.control_page, len(_COLOR_ITEMS) - 1
            )
            if key == ENTER:
                self._insert(b"\x1a\x06\xff\x00\x00" + bytes([self.detail_index]))
                self.screen = Screen.EDIT_ENTRY

        if key == "q":
            self.screen = Screen.ENTRY_MENU

    def _feed_text(self, key: str, accept: Callable[[str], bool]) -> None:
        if len(key) == 1 and key.isascii() and accept(key) and len(self.detail_input) < 3:
            self.detail_input += key
        elif key == BACKSPACE and self.detail_input:
            self.detail_input = self.detail_input[:-1]
        self.detail_index = len(self.detail_input)

    # -- main loop ---------------------------------------------------------

    def run(self, read: Callable[[], str], write: Callable[[str], object]) -> None:
        """Draw and handle keys until the user quits or input ends."""
        while self.running:
            write(self.draw(*terminal_size()))
            key = read_key(read)
            if not key:
                break
            self.feed(key)
        write(
            show_cursor()
            + text_color(TerminalColor.DEFAULT)
            + background_color(TerminalColor.DEFAULT)
            + clear_screen()
        )


@contextmanager
def _raw_mode(fd: int) -> Iterator[None]:
    try:
        import termios
        import tty
    except ImportError:
        yield
        return
    if not os.isatty(fd):
        yield
        return
    saved = termios.tcgetattr(fd)
    tty.setraw(fd)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def run_editor(
    path,
    read_only: bool = False,
    new_file: bool = False,
    ansi_colors: bool = False,
    developer_mode: bool = False,
) -> int:
    """Open ``path`` in the interactive editor; return the exit status."""
    path = Path(path)
    if not new_file and not path.exists():
        print(f'"{path}" does not exist.')
        return 1
    try:
        if new_file:
            BmgFile.empty().save(path)
        bmg = BmgFile.load(path)
    except BmgError as exc:
        print(exc)
        return 1
    except OSError:
        print(f'Failed to open file at "{path}".')
        return 1

    editor = Editor(path, bmg, read_only, ansi_colors, developer_mode)
    fd = sys.stdin.fileno()

    def read() -> str:
        return os.read(fd, 1).decode("latin-1")

    def write(text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()

    with _raw_mode(fd):
        editor.run(read, write)
    return 0