"""
Configuration file loading utilities.

This module handles the low-level loading and parsing of the TOML
configuration files: the main devmgr.toml and the naming rules file.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Mapping

from ..validation import handle_config_error, ErrorSeverity

logger = logging.getLogger(__name__)

# Environment variables that override values from the main configuration file.
ENV_OVERRIDES = {
    "UDEV_ROOT": "root",
    "UDEV_DB": "db_path",
    "UDEV_RULES": "rules_file",
    "SYSFS_PATH": "sysfs_root",
    "DEVMGR_LOG_LEVEL": "log_level",
}


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Load and parse a TOML file with error handling.

    Args:
        file_path: Path to the TOML file to load
        description: Human-readable description for error messages

    Returns:
        Parsed TOML data as a dictionary

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is malformed
    """
    logger.debug(f"Loading {description} from: {file_path}")

    if not file_path.exists():
        raise FileNotFoundError(f"{description} not found: {file_path}")

    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {description}",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def load_main_config(config_path: Path) -> Dict[str, Any]:
    """
    Load the main configuration file.

    A missing file is not an error: the device manager runs on built-in
    defaults, since a hotplug event must not fail for lack of configuration.

    Args:
        config_path: Path to devmgr.toml

    Returns:
        Parsed configuration data, empty if the file does not exist
    """
    try:
        return load_toml_file(config_path, "main configuration file")
    except FileNotFoundError:
        logger.debug(f"No configuration file at {config_path}, using defaults")
        return {}


def load_rules_config(rules_path: Path) -> List[Dict[str, Any]]:
    """
    Load the naming rules file.

    Args:
        rules_path: Path to rules.toml

    Returns:
        List of rule dictionaries, empty if the file does not exist
    """
    try:
        rules_data = load_toml_file(rules_path, "naming rules file")
    except FileNotFoundError:
        logger.debug(f"No naming rules file at {rules_path}")
        return []
    return rules_data.get("rules", [])


def apply_env_overrides(udev_data: Dict[str, Any], environ: Mapping[str, str]) -> Dict[str, Any]:
    """
    Return a copy of the [udev] section with environment overrides applied.

    Args:
        udev_data: The [udev] section of the main configuration
        environ: Process environment

    Returns:
        New dictionary with overridden values
    """
    merged = dict(udev_data)
    for env_name, key in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            logger.debug(f"{env_name} overrides udev.{key}: {value}")
            merged[key] = value
    return merged
