"""Command handlers for the clipmulti command surface.

Each handler performs exactly one store operation, prints its result, and
returns the process exit code.
"""

import time
from pathlib import Path

import pyperclip

from clipmulti.clipboard.formatting import (
    format_capture_notice,
    format_history_line,
    format_search_line,
)
from clipmulti.clipboard.manager import ClipboardManager
from clipmulti.clipboard.monitor import ClipboardReader, read_system_clipboard
from clipmulti.clipboard.store import ClipboardStore
from clipmulti.cli.output import (
    print_content,
    print_error,
    print_failure,
    print_info,
    print_success,
)
from clipmulti.core.encoding import read_text_file
from clipmulti.core.normalize import is_blank

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_FILE_NOT_FOUND = 2
EXIT_UNKNOWN_COMMAND = 3
EXIT_CLIPBOARD_NO_TEXT = 4
EXIT_CLIPBOARD_UNAVAILABLE = 5


def _parse_int(value: str, what: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        print_error(f"Invalid {what}: {value!r}")
        return None


def _read_payload(path: Path) -> str | None:
    try:
        return read_text_file(path)
    except OSError:
        print_error(f"Failed to open file: {path}")
        return None


def cmd_history(store: ClipboardStore) -> int:
    for index, item in enumerate(store.history_items()):
        print_content(format_history_line(index, item))
    return EXIT_OK


def cmd_search(store: ClipboardStore, query: str) -> int:
    for item in store.search(query):
        print_content(format_search_line(item))
    return EXIT_OK


def cmd_pin(store: ClipboardStore, index_arg: str) -> int:
    index = _parse_int(index_arg, "index")
    if index is not None and store.pin_by_index(index):
        print_success("Item pinned successfully.")
        return EXIT_OK
    print_failure("Failed to pin item.")
    return EXIT_FAILED


def cmd_unpin(store: ClipboardStore, index_arg: str) -> int:
    index = _parse_int(index_arg, "index")
    if index is not None and store.unpin_by_index(index):
        print_success("Item unpinned successfully.")
        return EXIT_OK
    print_failure("Failed to unpin item.")
    return EXIT_FAILED


def cmd_delete(store: ClipboardStore, index_arg: str) -> int:
    index = _parse_int(index_arg, "index")
    if index is not None and store.delete_by_index(index):
        print_success("Item deleted successfully.")
        return EXIT_OK
    print_failure("Failed to delete item.")
    return EXIT_FAILED


def cmd_undo(store: ClipboardStore) -> int:
    if store.undo():
        print_success("Undo successful.")
        return EXIT_OK
    print_failure("Nothing to undo.")
    return EXIT_FAILED


def cmd_add(store: ClipboardStore, text: str) -> int:
    if store.add(text):
        print_success(f"Added: {text}")
        return EXIT_OK
    print_failure("Failed to add item.")
    return EXIT_FAILED


def cmd_add_from_file(store: ClipboardStore, path: Path) -> int:
    text = _read_payload(path)
    if text is None:
        return EXIT_FILE_NOT_FOUND
    if store.add(text):
        print_success(f"Added content from {path}")
        return EXIT_OK
    print_failure("Failed to add content.")
    return EXIT_FAILED


def cmd_setslot(store: ClipboardStore, slot_arg: str, text: str) -> int:
    slot = _parse_int(slot_arg, "slot")
    if slot is not None and store.set_slot(slot, text):
        print_success(f"Set slot {slot} to: {text}")
        return EXIT_OK
    print_failure("Failed to set slot.")
    return EXIT_FAILED


def cmd_setslot_from_file(store: ClipboardStore, slot_arg: str, path: Path) -> int:
    slot = _parse_int(slot_arg, "slot")
    if slot is None:
        return EXIT_FAILED
    text = _read_payload(path)
    if text is None:
        return EXIT_FILE_NOT_FOUND
    if store.set_slot(slot, text):
        print_success(f"Set slot {slot} from {path}")
        return EXIT_OK
    print_failure("Failed to set slot.")
    return EXIT_FAILED


def cmd_getslot(store: ClipboardStore, slot_arg: str) -> int:
    slot = _parse_int(slot_arg, "slot")
    if slot is None:
        return EXIT_FAILED
    content = store.get_slot(slot)
    if not content:
        return EXIT_FAILED
    print_content(content)
    return EXIT_OK


def cmd_export_json(store: ClipboardStore, out_path: Path | None) -> int:
    target = out_path if out_path is not None else store.path
    if store.export_json(out_path):
        print_content(str(target))
        return EXIT_OK
    print_failure("Failed to export JSON.")
    return EXIT_FAILED


def cmd_copy(
    store: ClipboardStore,
    slot_arg: str,
    reader: ClipboardReader = read_system_clipboard,
) -> int:
    """Store the system clipboard text in a slot (and history)."""
    slot = _parse_int(slot_arg, "slot")
    if slot is None:
        return EXIT_FAILED
    try:
        text = reader()
    except pyperclip.PyperclipException as e:
        print_error(f"Cannot access clipboard: {e}")
        return EXIT_CLIPBOARD_UNAVAILABLE
    if is_blank(text):
        print_error("Clipboard holds no text")
        return EXIT_CLIPBOARD_NO_TEXT
    if store.set_slot(slot, text):
        return EXIT_OK
    return EXIT_FAILED


def cmd_watch(manager: ClipboardManager, reader: ClipboardReader | None = None) -> int:
    """Record clipboard changes until interrupted."""
    store = manager.store
    print_info(f"Watching clipboard; history at {store.path}. Press Ctrl+C to stop.")
    manager.start_monitor(
        reader=reader,
        on_added=lambda item: print_info(format_capture_notice(item)),
    )
    try:
        while True:
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass
    finally:
        manager.stop_monitor()
    print_info("Stopped.")
    return EXIT_OK
