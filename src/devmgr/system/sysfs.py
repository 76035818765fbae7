"""
sysfs attribute access.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


def sysfs_device_dir(sysfs_root: Path, devpath: str) -> Path:
    """Join a devpath (which starts with "/") onto the sysfs mount point."""
    return Path(sysfs_root) / devpath.lstrip("/")


def read_attribute(sysfs_root: Path, devpath: str, attribute: str) -> Optional[str]:
    """
    Read a single sysfs attribute file.

    Returns:
        The stripped attribute value, or None if the attribute does not exist
    """
    attr_path = sysfs_device_dir(sysfs_root, devpath) / attribute
    try:
        return attr_path.read_text().strip()
    except FileNotFoundError:
        return None


def read_dev_numbers(sysfs_root: Path, devpath: str) -> Optional[Tuple[int, int]]:
    """
    Read the major and minor number of a device from its ``dev`` attribute.

    Args:
        sysfs_root: sysfs mount point, usually /sys
        devpath: sysfs device path

    Returns:
        (major, minor), or None if the device has no node or the
        attribute is malformed
    """
    value = read_attribute(sysfs_root, devpath, "dev")
    if value is None:
        logger.debug(f"'{devpath}' has no dev attribute")
        return None

    major, sep, minor = value.partition(":")
    if not sep or not major.isdigit() or not minor.isdigit():
        logger.warning(f"Malformed dev attribute '{value}' for '{devpath}'")
        return None
    return int(major), int(minor)
