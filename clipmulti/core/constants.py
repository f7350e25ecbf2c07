"""Core constants and paths for clipmulti.

Single source of truth for default locations and limits. Modules import
from here instead of hardcoding `"data"` or `"clipboard_history.json"`.
"""

from pathlib import Path

DEFAULT_DATA_DIR = "data"
HISTORY_FILE_NAME = "clipboard_history.json"
LOG_DIR_NAME = "logs"
LOG_FILE_NAME = "clipmulti.log"
LOCAL_CONFIG_NAME = "clipmulti.json"

# Unpinned history bound; pinned entries are exempt
MAX_HISTORY_ITEMS = 100

# Monitor defaults (seconds)
DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_DEDUP_WINDOW = 2.0

DEFAULT_ENGINE_TIMEOUT = 30.0

# Environment variables
ENV_DATA_DIR = "CLIPMULTI_DATA_DIR"
ENV_ENGINE = "CLIPMULTI_ENGINE"
ENV_ENGINE_DATA_DIR = "CLIPMULTI_ENGINE_DATA_DIR"


def get_log_dir(data_dir: Path | str) -> Path:
    """Get the log directory inside a data directory."""
    return Path(data_dir) / LOG_DIR_NAME
