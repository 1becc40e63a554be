"""Turning BMG messages into terminal output."""

from __future__ import annotations

from bmgedit.bmg import ESCAPE, NEWLINE
from bmgedit.terminal import (
    TerminalColor,
    background_color,
    background_color_rgb,
    move_cursor,
    text_color,
    text_color_rgb,
)

__all__ = ["first_line", "render_message"]

_UNKNOWN = "[unknown control code]"
_SLOW = "[slow display]"
_SPEED = "[speed:{}]"
_AUTO_CLOSE = "[auto-close]"
_SELECT_YES = "[yes option:{}]"
_SELECT_NO = "[no option:{}]"
_COLOR = "[text color:{}]"
_GARBAGE = "garbage"

_VARIABLES = {
    0x00: "[pianta village piantissimo record]",
    0x01: "[gelato beach piantissimo record]",
    0x02: "[box game record]",
    0x03: "[# of blue coin shines]",
    0x06: "[noki bay piantissimo record]",
}

_FRUIT = {
    0x00: "[# of bananas]",
    0x01: "[# of coconuts]",
    0x02: "[# of pineapples]",
    0x03: "[# of durians]",
}

# value -> (label, palette colour, rgb colour)
_TEXT_COLORS = {
    0x00: ("white", TerminalColor.BRIGHT_WHITE, (255, 255, 255)),
    0x01: ("grey", TerminalColor.WHITE, (200, 200, 200)),
    0x02: ("red", TerminalColor.BRIGHT_RED, (255, 0, 0)),
    0x03: ("blue", TerminalColor.BRIGHT_BLUE, (100, 100, 255)),
    0x04: ("yellow", TerminalColor.BRIGHT_YELLOW, (255, 255, 0)),
    0x05: ("green", TerminalColor.BRIGHT_GREEN, (0, 255, 0)),
}


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def _byte_at(message: bytes, index: int) -> int | None:
    return message[index] if 0 <= index < len(message) else None


def _step(message: bytes, index: int) -> int:
    esc = _byte_at(message, index + 1) or 0
    return max(esc, 1)


def first_line(message: bytes) -> str:
    """The text of a message up to its first newline, without control sequences."""
    text = bytearray()
    i = 0
    while i < len(message):
        byte = message[i]
        if byte == ESCAPE:
            i += _step(message, i)
            continue
        if byte == NEWLINE:
            break
        text.append(byte)
        i += 1
    return _decode(bytes(text))


def _option_text(message: bytes, start: int, esc: int) -> bytes:
    if esc >= 5:
        return message[start:start + esc - 5]
    return message[start:]


def _foreground(color: TerminalColor, rgb: tuple[int, int, int], ansi_colors: bool) -> str:
    return text_color(color) if ansi_colors else text_color_rgb(*rgb)


def render_message(
    message: bytes,
    x: int,
    y: int,
    cursor: int,
    read_only: bool = False,
    ansi_colors: bool = False,
) -> str:
    """Render a full message at column ``x``, row ``y`` as terminal output.

    In edit mode each control sequence is drawn as ``§`` and described only
    when the cursor sits just after it; in read-only mode the sequences take
    effect as the game would show them.
    """
    out: list[str] = [move_cursor(x, y)]
    out.append(_foreground(TerminalColor.BRIGHT_WHITE, (255, 255, 255), ansi_colors))
    out.append(
        background_color(TerminalColor.BLUE) if ansi_colors else background_color_rgb(0, 0, 255)
    )

    line = y
    use_option = False
    yes_option = b""
    no_option = b""
    text = bytearray()

    def flush() -> None:
        if text:
            out.append(_decode(bytes(text)))
            text.clear()

    count = 0
    i = 0
    while i < len(message):
        count += 1
        byte = message[i]
        if byte == ESCAPE:
            flush()
            esc = _byte_at(message, i + 1) or 0
            here = cursor == count
            if not read_only:
                out.append("§")
                if here:
                    out.append(" ")
            shown = read_only or here
            kind = _byte_at(message, i + 2)
            arg = _byte_at(message, i + 4)

            if kind == 0x00:
                if shown:
                    if esc == 5:
                        if arg == 0x01:
                            out.append(_AUTO_CLOSE)
                        if arg == 0x00:
                            out.append(_SLOW)
                    elif esc == 6:
                        if arg == 0x00:
                            out.append(_SPEED.format(_byte_at(message, i + 5) or 0))
                    else:
                        out.append(_UNKNOWN)
            elif kind == 0x01:
                option = _option_text(message, i + 5, esc)
                if read_only:
                    use_option = True
                    if arg == 0x00:
                        yes_option = option
                    if arg == 0x01:
                        no_option = option
                elif here:
                    label = _decode(option.split(b"\x00", 1)[0])
                    if arg == 0x00:
                        out.append(_SELECT_YES.format(label))
                    if arg == 0x01:
                        out.append(_SELECT_NO.format(label))
            elif kind == 0x02:
                if shown:
                    if arg == 0x04:
                        fruit = _FRUIT.get(_byte_at(message, i + 5)) if esc == 6 else None
                        if esc != 6:
                            out.append(_UNKNOWN)
                        elif fruit is not None:
                            out.append(fruit)
                    else:
                        out.append(_VARIABLES.get(arg, _UNKNOWN))
            elif kind == 0xFF:
                value = _byte_at(message, i + 5)
                colour = _TEXT_COLORS.get(value)
                if colour is None:
                    if not read_only and here:
                        out.append(_COLOR.format(_GARBAGE))
                else:
                    name, palette, rgb = colour
                    if not read_only and here:
                        out.append(_COLOR.format(name))
                    out.append(_foreground(palette, rgb, ansi_colors))
            else:
                out.append(_UNKNOWN)

            i += max(esc, 1)
            continue
        if byte == NEWLINE:
            flush()
            line += 1
            out.append(move_cursor(1, line))
            i += 1
            continue
        text.append(byte)
        i += 1
    flush()

    if use_option:
        line += 2
        out.append(move_cursor(1, line))
        out.append(">" + _decode(yes_option))
        out.append(move_cursor(1, line + 1))
        out.append(" " + _decode(no_option))

    out.append(text_color(TerminalColor.WHITE))
    out.append(background_color(TerminalColor.BLACK))
    return "".join(out)