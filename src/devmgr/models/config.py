"""
Configuration data models.

This module contains the configuration structures for the device manager
and its naming rules, loaded from TOML files.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union


@dataclass
class NamingRule:
    """
    A device naming rule, loaded from the rules file.
    """

    # Higher numbers are tried first.
    priority: int
    # One of "kernel", "devpath", "subsystem".
    match_field: str
    # One of "exact", "contains", "regex", "in_list".
    match_type: str
    # A single pattern, or a list of names for "in_list".
    patterns: Union[str, List[str]]
    # Node name template; "%k" is the kernel name, "%n" its trailing number.
    name: str
    # Space separated symlink templates, same substitutions as name.
    symlink: str = ""
    owner: Optional[str] = None
    group: Optional[str] = None
    mode: Optional[int] = None
    comment: str = ""


@dataclass
class UdevConfig:
    """
    Global device manager settings, loaded from the main configuration file.
    """

    # Directory device nodes are created in; always ends with "/".
    root: str = "/udev/"
    db_path: Path = Path("/var/lib/devmgr/devices.parquet")
    rules_file: Path = Path("/etc/devmgr/rules.toml")
    sysfs_root: Path = Path("/sys")
    default_mode: int = 0o666
    default_owner: str = "root"
    default_group: str = "root"
    log_level: str = "WARNING"
    bus_enabled: bool = False
