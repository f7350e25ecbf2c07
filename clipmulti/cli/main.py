"""Entry point: one command per invocation, or watch mode with no command."""

import argparse
import logging
import sys
from collections.abc import Sequence

from dotenv import load_dotenv

from clipmulti.cli.arg_parser import CommandLineError, command_token, parse_args
from clipmulti.cli.bootstrap import configure_logging, reset_logging
from clipmulti.cli.commands import (
    EXIT_FAILED,
    EXIT_UNKNOWN_COMMAND,
    cmd_add,
    cmd_add_from_file,
    cmd_copy,
    cmd_delete,
    cmd_export_json,
    cmd_getslot,
    cmd_history,
    cmd_pin,
    cmd_search,
    cmd_setslot,
    cmd_setslot_from_file,
    cmd_undo,
    cmd_unpin,
    cmd_watch,
)
from clipmulti.cli.output import print_content, print_error
from clipmulti.clipboard.manager import ClipboardManager
from clipmulti.config.loader import load_config
from clipmulti.core.encoding import configure_stdio
from clipmulti.core.errors import ConfigError

logger = logging.getLogger(__name__)


def dispatch(args: argparse.Namespace, manager: ClipboardManager) -> int:
    """Run the parsed command against the manager's store."""
    if args.command is None:
        return cmd_watch(manager)

    store = manager.store
    command = args.command
    if command == "history":
        return cmd_history(store)
    if command == "search":
        return cmd_search(store, " ".join(args.query))
    if command == "pin":
        return cmd_pin(store, args.index)
    if command == "unpin":
        return cmd_unpin(store, args.index)
    if command == "delete":
        return cmd_delete(store, args.index)
    if command == "undo":
        return cmd_undo(store)
    if command == "add":
        return cmd_add(store, " ".join(args.text))
    if command == "add-from-file":
        return cmd_add_from_file(store, args.path)
    if command == "setslot":
        return cmd_setslot(store, args.slot, " ".join(args.text))
    if command == "setslot-from-file":
        return cmd_setslot_from_file(store, args.slot, args.path)
    if command == "getslot":
        return cmd_getslot(store, args.slot)
    if command == "export-json":
        return cmd_export_json(store, args.out_path)
    if command == "copy":
        return cmd_copy(store, args.slot)

    print_content(f"Unknown command: {command}")
    return EXIT_UNKNOWN_COMMAND


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, load config, run one command. Returns the exit code."""
    argv = list(sys.argv[1:] if argv is None else argv)

    try:
        args = parse_args(argv)
    except CommandLineError as e:
        logger.debug("Command line rejected: %s", e)
        print_content(f"Unknown command: {command_token(argv)}")
        return EXIT_UNKNOWN_COMMAND

    try:
        config = load_config(path=args.config)
    except ConfigError as e:
        print_error(e.message)
        return EXIT_FAILED
    if args.data_dir:
        config = config.model_copy(update={"data_dir": args.data_dir})

    try:
        configure_logging(config, verbose=args.verbose)
    except OSError as e:
        print_error(f"Data directory {config.data_path} is not writable: {e}")
        return EXIT_FAILED

    # Only the long-lived watch process may mirror; commands are the engine
    manager = ClipboardManager(config, allow_mirror=args.command is None)
    try:
        return dispatch(args, manager)
    finally:
        manager.close()
        reset_logging()


def run() -> None:
    """Console-script entry point."""
    configure_stdio()
    load_dotenv()
    sys.exit(main())
