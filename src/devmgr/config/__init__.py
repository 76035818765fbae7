"""
Configuration management for the devmgr package.

This module provides a clean interface for loading, validating, and accessing
configuration data from TOML files with singleton pattern management.
"""

# Main configuration interface
from .manager import (
    clear_config_cache,
    get_config,
    get_config_info,
    get_config_path,
    is_config_loaded,
    set_config_path,
)

# For advanced usage - direct access to loaders and validators
from .loader import (
    apply_env_overrides,
    load_main_config,
    load_rules_config,
    load_toml_file,
)
from .validators import (
    validate_rules_config,
    validate_udev_config,
)

__all__ = [
    # Main interface
    "get_config",
    "get_config_path",
    "set_config_path",
    "clear_config_cache",
    "is_config_loaded",
    "get_config_info",
    # Advanced interface
    "apply_env_overrides",
    "load_toml_file",
    "load_main_config",
    "load_rules_config",
    "validate_udev_config",
    "validate_rules_config",
]
