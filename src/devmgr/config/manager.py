"""
Configuration management and singleton pattern.

This module provides the main configuration loading interface, caching the
validated configuration so that it is read only once per process.
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from ..models.config import UdevConfig
from ..validation import handle_config_error, ErrorSeverity
from .loader import apply_env_overrides, load_main_config
from .validators import validate_udev_config

logger = logging.getLogger(__name__)

# --- Global Singleton for Configuration ---

_CONFIG: Optional[UdevConfig] = None

DEFAULT_CONFIG_FILE = Path("/etc/devmgr/devmgr.toml")
CONFIG_FILE_ENV = "DEVMGR_CONFIG_FILE"

# Set by set_config_path(); takes precedence over DEVMGR_CONFIG_FILE.
_CONFIG_FILE_PATH: Optional[Path] = None


def set_config_path(config_path: Path) -> None:
    """
    Set a custom configuration file path.

    Args:
        config_path: Path to the main devmgr.toml file

    Note:
        The cached configuration is dropped so the next get_config()
        call reads the new file.
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = Path(config_path)
    _CONFIG = None
    logger.debug(f"Configuration path set to: {config_path}")


def clear_config_cache() -> None:
    """
    Clear the cached configuration and any path override, forcing a reload
    on next access.
    """
    global _CONFIG, _CONFIG_FILE_PATH
    _CONFIG = None
    _CONFIG_FILE_PATH = None
    logger.debug("Configuration cache cleared")


def get_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Resolve which main configuration file to read."""
    if _CONFIG_FILE_PATH is not None:
        return _CONFIG_FILE_PATH
    environ = os.environ if environ is None else environ
    env_path = environ.get(CONFIG_FILE_ENV)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_FILE


def _load_config(config_path: Path, environ: Mapping[str, str]) -> UdevConfig:
    """
    Load the device manager configuration from its TOML file.

    Args:
        config_path: Path to the main devmgr.toml file
        environ: Environment providing UDEV_* overrides

    Returns:
        Fully validated UdevConfig instance

    Raises:
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    try:
        main_config_data = load_main_config(config_path)
        udev_data = apply_env_overrides(main_config_data.get("udev", {}), environ)
        udev_config = validate_udev_config(
            udev_data,
            main_config_data.get("bus", {}),
            config_path.parent,
        )
        logger.debug(
            f"Configuration loaded: root={udev_config.root} db={udev_config.db_path}"
        )
        return udev_config
    except Exception as e:
        handle_config_error(
            error=e,
            context="processing configuration",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def get_config(environ: Optional[Mapping[str, str]] = None) -> UdevConfig:
    """
    Get the process configuration, loading it if necessary.

    The first call reads and validates the configuration file; subsequent
    calls return the cached instance.

    Args:
        environ: Environment to read overrides from, defaults to os.environ

    Returns:
        The singleton UdevConfig instance
    """
    global _CONFIG
    if _CONFIG is None:
        environ = os.environ if environ is None else environ
        _CONFIG = _load_config(get_config_path(environ), environ)
    return _CONFIG


def is_config_loaded() -> bool:
    """Check if configuration has been loaded and cached."""
    return _CONFIG is not None


def get_config_info(environ: Optional[Mapping[str, str]] = None) -> dict:
    """
    Get information about the current configuration state.

    Args:
        environ: Environment used to resolve the configuration file path

    Returns:
        Dictionary with configuration metadata
    """
    return {
        "config_loaded": is_config_loaded(),
        "config_path": str(get_config_path(environ)),
        "root": _CONFIG.root if _CONFIG else None,
        "db_path": str(_CONFIG.db_path) if _CONFIG else None,
    }
