"""Pydantic models for clipmulti configuration validation."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from clipmulti.core.constants import (
    DEFAULT_DATA_DIR,
    DEFAULT_DEDUP_WINDOW,
    DEFAULT_ENGINE_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    HISTORY_FILE_NAME,
    MAX_HISTORY_ITEMS,
)


class EngineConfig(BaseModel):
    """How a mirror process locates and drives the engine.

    Example in clipmulti.json:
        "engine": {
            "command": "python -m clipmulti",
            "data_dir": "/home/me/.clipmulti",
            "timeout": 10
        }

    Leave ``command`` unset to manage the store in-process.
    """

    model_config = ConfigDict(extra="forbid")

    command: str | None = None
    """Engine command line, split with shlex (e.g. "clipmulti" or "python -m clipmulti")."""

    data_dir: str | None = None
    """Data directory passed to the engine as --data-dir (engine default if unset)."""

    timeout: float = Field(default=DEFAULT_ENGINE_TIMEOUT, gt=0)
    """Seconds to wait for a single engine invocation."""

    @field_validator("command", "data_dir")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


class MonitorConfig(BaseModel):
    """Clipboard change monitor timing."""

    model_config = ConfigDict(extra="forbid")

    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)
    """Seconds between clipboard polls."""

    dedup_window: float = Field(default=DEFAULT_DEDUP_WINDOW, ge=0)
    """Seconds during which an identical capture from the copy hook is suppressed."""


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    """Level written to the rotating log file."""

    file_logging: bool = True
    """Write <data_dir>/logs/clipmulti.log."""


class Config(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    data_dir: str = DEFAULT_DATA_DIR
    """Directory holding the shared history file and logs."""

    history_file: str = HISTORY_FILE_NAME
    """Shared history file name, relative to data_dir."""

    history_limit: int = Field(default=MAX_HISTORY_ITEMS, ge=1)
    """Maximum number of unpinned history entries."""

    engine: EngineConfig = Field(default_factory=EngineConfig)
    monitor: MonitorConfig = Field(default_factory=MonitorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("data_dir")
    @classmethod
    def data_dir_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("data_dir must not be empty")
        return v

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser()

    @property
    def history_path(self) -> Path:
        return self.data_path / self.history_file
