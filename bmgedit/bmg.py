"""Reading and writing BMG message files, and cursor maths over messages.

A message is a byte string in which ``0x1A`` starts a control sequence whose
total length in bytes is given by the byte that follows it. A control
sequence counts as a single character for cursor purposes.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

__all__ = [
    "BmgError",
    "BmgEntry",
    "BmgFile",
    "message_length",
    "char_length",
    "message_row",
    "message_column",
    "cursor_on_control",
    "cursor_offset",
]

ESCAPE = 0x1A
NEWLINE = 0x0A

_MAGIC = b"MESG"
_VERSION = b"bmg1"
_HEADER_SIZE = 32
_BLOCK = 32


class BmgError(Exception):
    """Raised when a BMG file cannot be read or written."""


def _units(message: bytes) -> Iterator[tuple[int, int, bool]]:
    """Yield ``(start, last, is_control)`` for each character of a message."""
    i = 0
    size = len(message)
    while i < size:
        if message[i] == ESCAPE:
            esc = message[i + 1] if i + 1 < size else 0
            step = max(esc, 1)
            yield i, i + step - 1, True
            i += step
        else:
            yield i, i, False
            i += 1


def _is_newline_at(message: bytes, index: int) -> bool:
    return index < len(message) and message[index] == NEWLINE


def message_length(buffer: bytes, offset: int) -> int:
    """Length in bytes of the null-terminated message at ``offset``."""
    length = 0
    while True:
        pos = offset + length
        if pos >= len(buffer):
            raise BmgError("message runs past the end of the data section")
        byte = buffer[pos]
        if byte == 0:
            return length
        if byte == ESCAPE:
            if pos + 1 >= len(buffer):
                raise BmgError("control sequence runs past the end of the data section")
            esc = buffer[pos + 1]
            if esc == 0:
                raise BmgError("control sequence has zero length")
            length += esc
            continue
        length += 1


def char_length(message: bytes) -> int:
    """Number of characters, counting each control sequence as one."""
    return sum(1 for _ in _units(message))


def message_row(message: bytes, index: int) -> int:
    """Row of the character at cursor position ``index``."""
    row = 0
    for count, (_, last, _) in enumerate(_units(message), 1):
        if _is_newline_at(message, last):
            row += 1
        if count >= index:
            break
    return row


def message_column(message: bytes, index: int) -> int:
    """Column of the character at cursor position ``index``."""
    if index == 0:
        return 0
    col = 0
    for count, (_, last, _) in enumerate(_units(message), 1):
        col += 1
        if _is_newline_at(message, last):
            col = 0
        if count >= index:
            break
    return col


def cursor_on_control(message: bytes, index: int) -> bool:
    """Whether the character just before cursor position ``index`` is a control sequence."""
    if index == 0:
        return False
    on_control = False
    for count, (_, _, is_control) in enumerate(_units(message), 1):
        on_control = is_control
        if count >= index:
            break
    return on_control


def cursor_offset(message: bytes, cursor_pos: int) -> int:
    """Byte offset in the message that corresponds to cursor position ``cursor_pos``."""
    if cursor_pos == 0:
        return 0
    offset = 0
    for count, (_, last, _) in enumerate(_units(message), 1):
        offset = last + 1
        if count >= cursor_pos:
            break
    return offset


@dataclass
class BmgEntry:
    """One message with its timing and sound information."""

    message: bytes = b""
    start_frame: int = 0
    end_frame: int = 0
    sound_id: int = 0

    @property
    def char_count(self) -> int:
        """Number of characters in the message."""
        return char_length(self.message)


def _padding(length: int) -> int:
    return -length % _BLOCK


@dataclass
class BmgFile:
    """A BMG file with an INF1 entry table and a DAT1 message section."""

    entries: list[BmgEntry] = field(default_factory=list)
    entry_length: int = 12

    @classmethod
    def empty(cls) -> "BmgFile":
        """A file with no entries and full-size entry records."""
        return cls(entries=[], entry_length=12)

    @classmethod
    def from_bytes(cls, data: bytes) -> "BmgFile":
        """Parse a BMG file held in memory."""
        data = bytes(data)
        if data[:4] != _MAGIC:
            raise BmgError("File is not a BMG file.")
        if data[4:8] != _VERSION:
            raise BmgError("This type of BMG file is not supported. (V)")
        try:
            (sections,) = struct.unpack_from(">I", data, 12)
            if sections != 2:
                raise BmgError("This type of BMG file is not supported. (S)")
            (inf_length,) = struct.unpack_from(">I", data, 36)
            messages = data[inf_length + _HEADER_SIZE + 8:]
            num_entries, entry_length = struct.unpack_from(">HH", data, 40)

            entries = []
            for number in range(num_entries):
                record = 48 + number * entry_length
                (msg_offset,) = struct.unpack_from(">I", data, record)
                text = messages[msg_offset:msg_offset + message_length(messages, msg_offset)]
                entry = BmgEntry(message=text)
                if entry_length > 4:
                    start, end, sound = struct.unpack_from(">HHB", data, record + 4)
                    entry.start_frame = start
                    entry.end_frame = end
                    entry.sound_id = sound
                entries.append(entry)
        except struct.error as exc:
            raise BmgError("BMG file is truncated") from exc
        return cls(entries=entries, entry_length=entry_length)

    def to_bytes(self) -> bytes:
        """Serialise the file."""
        count = len(self.entries)
        entry_length = self.entry_length
        blocks = 1

        inf_length = 16 + count * entry_length
        inf_pad = _padding(inf_length)
        inf_length += inf_pad
        blocks += inf_length // _BLOCK

        try:
            inf = bytearray(b"INF1")
            inf += struct.pack(">IHH", inf_length, count, entry_length)
            inf += bytes(4)

            dat_length = 9
            msg_offset = 1
            for entry in self.entries:
                record = struct.pack(">I", msg_offset)
                msg_offset += len(entry.message) + 1
                dat_length += len(entry.message) + 1
                if entry_length != 4:
                    record += struct.pack(
                        ">HHB", entry.start_frame, entry.end_frame, entry.sound_id
                    )
                inf += record.ljust(entry_length, b"\x00")[:entry_length]
            inf += bytes(inf_pad)
        except struct.error as exc:
            raise BmgError(f"entry field out of range: {exc}") from exc

        dat_pad = _padding(dat_length)
        dat_length += dat_pad
        blocks += dat_length // _BLOCK

        dat = bytearray(b"DAT1")
        dat += struct.pack(">I", dat_length)
        dat += b"\x00"
        for entry in self.entries:
            dat += entry.message + b"\x00"
        dat += bytes(dat_pad)

        header = _MAGIC + _VERSION + struct.pack(">II", blocks, 2) + bytes(16)
        return header + bytes(inf) + bytes(dat)

    @classmethod
    def load(cls, path) -> "BmgFile":
        """Read a BMG file from disk."""
        return cls.from_bytes(Path(path).read_bytes())

    def save(self, path) -> None:
        """Write the file to disk, replacing what is there."""
        Path(path).write_bytes(self.to_bytes())