"""Configuration loading and validation."""

from clipmulti.config.loader import load_config
from clipmulti.config.schema import Config, EngineConfig, LoggingConfig, MonitorConfig

__all__ = [
    "Config",
    "EngineConfig",
    "LoggingConfig",
    "MonitorConfig",
    "load_config",
]
