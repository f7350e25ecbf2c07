"""Configuration loading with layered merging.

Layers, later overriding earlier:
1. Pydantic defaults
2. JSON config file (explicit path, else ./clipmulti.json when present)
3. Environment variables (CLIPMULTI_DATA_DIR, CLIPMULTI_ENGINE,
   CLIPMULTI_ENGINE_DATA_DIR)

Command-line flags are applied on top by the CLI.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from clipmulti.config.load_utils import load_json_file, load_json_file_optional
from clipmulti.config.schema import Config
from clipmulti.core.constants import (
    ENV_DATA_DIR,
    ENV_ENGINE,
    ENV_ENGINE_DATA_DIR,
    LOCAL_CONFIG_NAME,
)
from clipmulti.core.errors import ConfigError, LoadError
from clipmulti.core.utils import deep_merge

logger = logging.getLogger(__name__)


def load_config(
    path: Path | None = None,
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Load configuration from file and environment.

    Args:
        path: Explicit config file path. Must exist when given.
        cwd: Directory searched for clipmulti.json. Defaults to Path.cwd().
        environ: Environment mapping. Defaults to os.environ.

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If the file is missing (explicit path only), contains
            invalid JSON, or the merged config fails validation.
    """
    env = os.environ if environ is None else environ
    merged: dict[str, Any] = {}
    source = "defaults"

    try:
        if path is not None:
            file_data: dict[str, Any] | None = load_json_file(path, error_context="config")
            source = str(path)
        else:
            local = (cwd or Path.cwd()) / LOCAL_CONFIG_NAME
            file_data = load_json_file_optional(local, error_context="config")
            if file_data is not None:
                source = str(local)
    except LoadError as e:
        raise ConfigError(e.message) from e

    if file_data:
        merged = deep_merge(merged, file_data)
        logger.debug("Config loaded from: %s", source)

    overrides = _env_overrides(env)
    if overrides:
        merged = deep_merge(merged, overrides)
        logger.debug("Config environment overrides: %s", sorted(overrides))

    try:
        return Config.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(f"Config validation failed ({source}): {e}") from e


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect non-empty CLIPMULTI_* variables as a config fragment."""
    overrides: dict[str, Any] = {}

    data_dir = env.get(ENV_DATA_DIR, "").strip()
    if data_dir:
        overrides["data_dir"] = data_dir

    engine: dict[str, Any] = {}
    command = env.get(ENV_ENGINE, "").strip()
    if command:
        engine["command"] = command
    engine_data_dir = env.get(ENV_ENGINE_DATA_DIR, "").strip()
    if engine_data_dir:
        engine["data_dir"] = engine_data_dir
    if engine:
        overrides["engine"] = engine

    return overrides
