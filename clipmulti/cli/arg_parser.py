"""Argument parsing for the clipmulti CLI.

Every parse failure (unknown command, missing arguments) surfaces as a
CommandLineError so the caller can map it to the "unknown command" exit code
instead of argparse's own exit status.
"""

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

# Global options that consume a value
_VALUE_OPTIONS = {"--data-dir", "--config"}

# Commands whose trailing words are free text and may start with "-"
_TEXT_COMMANDS = {"add", "search", "setslot"}


class CommandLineError(Exception):
    """Raised instead of exiting when argparse rejects the command line."""


class _RaisingParser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        raise CommandLineError(message)


def _command_index(argv: Sequence[str]) -> int | None:
    skip = False
    for i, arg in enumerate(argv):
        if skip:
            skip = False
            continue
        if arg in _VALUE_OPTIONS:
            skip = True
            continue
        if arg.startswith("-"):
            continue
        return i
    return None


def command_token(argv: Sequence[str]) -> str:
    """First argument that is not a global option, for error messages."""
    index = _command_index(argv)
    return "" if index is None else argv[index]


def build_parser() -> argparse.ArgumentParser:
    parser = _RaisingParser(
        prog="clipmulti",
        description="Clipboard history with numbered slots, pinning and undo.",
        epilog="With no command, watch the clipboard and record every change.",
    )
    parser.add_argument(
        "--data-dir",
        dest="data_dir",
        metavar="DIR",
        help="Directory holding clipboard_history.json (default: data)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        metavar="FILE",
        help="JSON config file (default: ./clipmulti.json if present)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging on stderr",
    )

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("history", help="List pinned items, then history")

    search_parser = subparsers.add_parser("search", help="Search unpinned history")
    search_parser.add_argument("query", nargs="+", help="Case-insensitive substring")

    for name, verb in (("pin", "Pin"), ("unpin", "Unpin"), ("delete", "Delete")):
        index_parser = subparsers.add_parser(name, help=f"{verb} the item at INDEX")
        index_parser.add_argument("index", help="Position in the history listing")

    subparsers.add_parser("undo", help="Restore the most recently deleted item")

    add_parser = subparsers.add_parser("add", help="Add text to history")
    add_parser.add_argument("text", nargs="+", help="Words joined with single spaces")

    add_file_parser = subparsers.add_parser(
        "add-from-file", help="Add the contents of a UTF-8 file to history"
    )
    add_file_parser.add_argument("path", type=Path)

    setslot_parser = subparsers.add_parser("setslot", help="Store text in a slot")
    setslot_parser.add_argument("slot")
    setslot_parser.add_argument("text", nargs="+")

    setslot_file_parser = subparsers.add_parser(
        "setslot-from-file", help="Store a file's contents in a slot"
    )
    setslot_file_parser.add_argument("slot")
    setslot_file_parser.add_argument("path", type=Path)

    getslot_parser = subparsers.add_parser("getslot", help="Print a slot's content")
    getslot_parser.add_argument("slot")

    export_parser = subparsers.add_parser(
        "export-json", help="Write the shared JSON snapshot and print its path"
    )
    export_parser.add_argument("out_path", nargs="?", type=Path)

    copy_parser = subparsers.add_parser(
        "copy", help="Store the current system clipboard text in a slot"
    )
    copy_parser.add_argument("slot")

    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Raises:
        CommandLineError: Unknown command or missing/extra arguments.
    """
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    index = _command_index(argv)
    if index is not None and argv[index] in _TEXT_COMMANDS:
        # Everything after the command is positional, so "add -n 5" stores "-n 5"
        if argv[index + 1 : index + 2] != ["--"]:
            argv.insert(index + 1, "--")
    return build_parser().parse_args(argv)
