"""Clipboard history/slot store, sync protocol and change monitor."""
from clipmulti.clipboard.indexing import flatten, resolve_content, resolve_index
from clipmulti.clipboard.manager import ClipboardManager, open_store
from clipmulti.clipboard.mirror import EngineRunner, MirrorStore
from clipmulti.clipboard.monitor import ClipboardMonitor, MonitorState, capture_callback
from clipmulti.clipboard.storage import StoreFile, deserialize_state, serialize_state
from clipmulti.clipboard.store import ClipboardStore, LocalStore
from clipmulti.clipboard.types import FlatEntry, HistoryItem, StoreState

__all__ = [
    "ClipboardManager",
    "ClipboardMonitor",
    "ClipboardStore",
    "EngineRunner",
    "FlatEntry",
    "HistoryItem",
    "LocalStore",
    "MirrorStore",
    "MonitorState",
    "StoreFile",
    "StoreState",
    "capture_callback",
    "deserialize_state",
    "flatten",
    "open_store",
    "resolve_content",
    "resolve_index",
    "serialize_state",
]
