# bmgedit

A full-screen terminal editor for `bmg1` message files. These files start
with the `MESG` magic and hold exactly two sections: an `INF1` entry table and
a `DAT1` message section. The editor lists every entry in the file. You can
edit the text of an entry and insert control codes, and the file is written
back from the entry menu.

## Installation

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Usage

```
bmgedit <args> <filename.bmg>
```

Options come before the file name:

- `-h`: show help and exit.
- `-v`: print the version (`1.0.0`) and exit.
- `-r`: open the file read-only. Control codes take effect as the game would
  show them: text colours are applied, and yes/no options are listed under
  the message.
- `-c`: create a new, empty BMG file at the given path, then open it. An
  existing file at that path is overwritten.
- `-a`: use palette ANSI colour codes instead of 24-bit RGB. Use this if your
  terminal does not show colours correctly.
- `-d`: developer mode. While you edit an entry, the code of the last key
  pressed is shown.

If you run `bmgedit` with no arguments, it shows the help. An unknown option
prints `Unknown argument: <option>.` and the command exits with status 1. The
command also exits with status 1 when the file is missing, cannot be opened,
or is not a supported BMG file.

## Editing

- **Entry list.** The up and down arrows choose an entry, Enter opens it, and
  `q` quits. The last row, "New Entry", adds an empty entry. This row is not
  shown in read-only mode.
- **Inside an entry.**
  - Type to insert text, and use the left and right arrows to move the cursor.
  - Enter inserts a line break.
  - Backspace deletes the character before the cursor. When that character is
    a control code, the whole control code is deleted.
  - In edit mode, each control code is drawn as `§`. When the cursor sits just
    after a control code, a description of it is shown.
  - In read-only mode, `q` goes back to the entry list.
- **Controller symbols.** The characters `@ # % < > + $` cannot be typed
  directly. You enter them with Ctrl and a letter:
  - `^a` gives `@`, the A button.
  - `^b` gives `#`, the B button.
  - `^c` gives `%`.
  - `^l` gives `<`.
  - `^r` gives `>`.
  - `^x` gives `+`.
  - `^y` gives `¥`.
  - `^z` gives `$`.

  For the left and right arrows, type brackets: either `[]` or `{}`.
- **Entry menu.** Press `^e` to open it. It has three items:
  - Go back to the entry.
  - Insert a control code. The choices are slow delivery, auto-close, speed
    (0–255), yes and no option text (up to three letters), display flags
    (records, blue coin shines, fruit counts) and text colour.
  - Delete the entry, which also saves the file.

  Pressing `q` in the menu saves the file and goes back to the entry list.

Changes are written to disk only from the entry menu, either with `q` or by
deleting an entry. Quitting from the entry list does not save.

## Library use

`bmgedit.bmg` reads and writes the file format on its own, without the
terminal interface:

```python
from bmgedit.bmg import BmgEntry, BmgFile

bmg = BmgFile.load("message.bmg")
for entry in bmg.entries:
    print(entry.start_frame, entry.end_frame, entry.sound_id, entry.message)

bmg.entries.append(BmgEntry(message=b"Hello"))
bmg.save("copy.bmg")
```

- `BmgFile` holds `entries` (a list of `BmgEntry`) and `entry_length`, which
  is the size in bytes of each entry record.
- `BmgFile.from_bytes()` and `BmgFile.to_bytes()` work on data in memory.
- `BmgFile.empty()` gives an empty file to start from.
- A malformed or unsupported file raises `BmgError`.
- Messages are raw `bytes`. A `0x1A` byte starts a control sequence, and the
  byte after it gives the sequence's total length. `BmgEntry.char_count`
  counts each control sequence as one character.

The module also has helpers that do cursor maths over a message:
`message_length`, `char_length`, `message_row`, `message_column`,
`cursor_on_control` and `cursor_offset`.

`bmgedit.render` turns messages into terminal output:

- `first_line(message)` returns the text up to the first line break, without
  control codes.
- `render_message(message, x, y, cursor, read_only, ansi_colors)` returns the
  escape sequences and text that draw a whole message.

`bmgedit.terminal` returns the escape sequences as strings:

- `clear_screen`, `move_cursor`, `hide_cursor` and `show_cursor`.
- `text_color` and `background_color` for palette colours, given as a
  `TerminalColor`.
- `text_color_rgb` and `background_color_rgb` for 24-bit colours.
- `terminal_size` and `help_text`.

`bmgedit.editor.Editor` is the editor's state machine. `draw(width, height)`
returns the current screen as a string, and `feed(key)` handles one key press.

## Limitations

- Only `bmg1` files with exactly two sections are supported. Other BMG
  variants are rejected.
- Message bytes are shown decoded as UTF-8. The editor does no other text
  encoding conversion.
- Raw keyboard input needs a POSIX terminal (`termios`). Elsewhere, the
  editor reads input without switching the terminal to raw mode.
- The editor has no undo. It has no way to save without leaving the entry
  through the menu.