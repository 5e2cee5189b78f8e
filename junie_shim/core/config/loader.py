"""
Configuration loader — builds ShimSettings from the environment and shim.yml.

The data root comes from ``$JUNIE_DATA`` (default ``~/.local/share/junie``).
An optional ``shim.yml`` inside the data root may override the remaining
settings. It is read with PyYAML and validated with the pydantic model.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml

from junie_shim.core.models.settings import ShimSettings

logger = logging.getLogger(__name__)

# ── Environment variables ───────────────────────────────────────
DATA_ENV = "JUNIE_DATA"
VERSION_ENV = "JUNIE_VERSION"
WORKDIR_ENV = "EJ_RUNNER_PWD"
LOG_LEVEL_ENV = "JUNIE_SHIM_LOG_LEVEL"
LOG_FILE_ENV = "JUNIE_SHIM_LOG_FILE"
LOG_FILE_LEVEL_ENV = "JUNIE_SHIM_LOG_FILE_LEVEL"

# Optional config filename (relative to the data root)
SHIM_CONFIG_FILE = "shim.yml"

# Keys accepted in shim.yml
_CONFIG_KEYS = ("product", "install_hint", "verify_checksums", "log_level", "log_file")


class ConfigError(Exception):
    """Raised when shim.yml exists but cannot be used."""


def default_data_root() -> Path:
    """Per-user data directory used when ``$JUNIE_DATA`` is not set."""
    return Path.home() / ".local" / "share" / "junie"


def resolve_data_root(env: Mapping[str, str] | None = None) -> Path:
    """Return the data root from ``env`` (default: ``os.environ``)."""
    env = os.environ if env is None else env
    raw = env.get(DATA_ENV, "")
    if raw:
        return Path(raw).expanduser()
    return default_data_root()


def load_settings(env: Mapping[str, str] | None = None) -> ShimSettings:
    """Load settings strictly.

    Args:
        env: Environment mapping to read (default: ``os.environ``).

    Returns:
        Validated ShimSettings.

    Raises:
        ConfigError: If shim.yml exists but is unreadable or invalid.
    """
    data_root = resolve_data_root(env)
    config_path = data_root / SHIM_CONFIG_FILE

    if not config_path.is_file():
        return ShimSettings(data_root=data_root)

    logger.debug("Loading shim config from %s", config_path)

    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {config_path}, got {type(data).__name__}")

    unknown = sorted(set(data) - set(_CONFIG_KEYS))
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", config_path, ", ".join(unknown))

    overrides = {k: data[k] for k in _CONFIG_KEYS if k in data}

    try:
        return ShimSettings(data_root=data_root, config_path=config_path, **overrides)
    except Exception as e:
        raise ConfigError(f"Invalid shim configuration in {config_path}: {e}") from e


def load_settings_or_default(env: Mapping[str, str] | None = None) -> ShimSettings:
    """Load settings, falling back to defaults if shim.yml is broken.

    A bad config file must never stop the wrapped program from launching.
    """
    try:
        return load_settings(env)
    except ConfigError as e:
        logger.warning("%s (using defaults)", e)
        return ShimSettings(data_root=resolve_data_root(env))
