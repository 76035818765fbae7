"""
System interaction: sysfs attributes, the system bus and device nodes.
"""

from .bus import LoggingBusNotifier, SystemBusNotifier
from .devices import DeviceOperations, resolve_gid, resolve_uid
from .sysfs import read_attribute, read_dev_numbers, sysfs_device_dir

__all__ = [
    "DeviceOperations",
    "LoggingBusNotifier",
    "SystemBusNotifier",
    "read_attribute",
    "read_dev_numbers",
    "resolve_gid",
    "resolve_uid",
    "sysfs_device_dir",
]
