"""Command-line entry point."""

from __future__ import annotations

import sys

from bmgedit.editor import run_editor
from bmgedit.terminal import help_text

__all__ = ["main"]

VERSION = "1.0.0"

_FLAGS = {
    "-r": "read_only",
    "-c": "new_file",
    "-a": "ansi_colors",
    "-d": "developer_mode",
}


def main(argv=None) -> int:
    """Parse arguments and start the editor; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)

    if not args:
        sys.stdout.write(help_text())
        return 0

    *options, filename = args
    if not options:
        if filename == "-h":
            sys.stdout.write(help_text())
            return 0
        if filename == "-v":
            print(VERSION)
            return 0
        return run_editor(filename)

    settings = {name: False for name in _FLAGS.values()}
    for option in options:
        if option == "-h":
            sys.stdout.write(help_text())
            return 0
        if option == "-v":
            print(VERSION)
            return 0
        if option in _FLAGS:
            settings[_FLAGS[option]] = True
            continue
        print(f"Unknown argument: {option}.")
        return 1

    return run_editor(filename, **settings)


if __name__ == "__main__":
    raise SystemExit(main())