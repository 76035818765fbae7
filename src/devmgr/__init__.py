"""
devmgr: userspace device-node manager.

The kernel runs devmgr once per hotplug event; it filters the event, names
the device and creates or removes its node, recording the result in the
device database. Run interactively, devmgr queries or dumps that database.

The package is organized into:
- cli: mode selection, entry point and the query/dump interface
- orchestration: hotplug event coordination and signal handling
- config: configuration loading and validation
- models: configuration, invocation and record types
- storage: the device record store
- naming: the naming policy engine
- system: sysfs access, bus notifications and device node operations
- validation: error types and field validation

Usage:
    From the kernel:
        DEVPATH=/class/tty/ttyS0 ACTION=add devmgr tty

    From the command line:
        devmgr -q name -p /class/tty/ttyS0 -r
        devmgr -d
"""

# Read by the submodules imported below.
__version__ = "0.1.0"

from .cli import main, main_cli
from .config import get_config, clear_config_cache, set_config_path
from .models import DeviceRecord, HotplugEvent, InvocationMode, QueryType, UdevConfig
from .orchestration import EventCoordinator

__all__ = [
    "main",
    "main_cli",
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "DeviceRecord",
    "HotplugEvent",
    "InvocationMode",
    "QueryType",
    "UdevConfig",
    "EventCoordinator",
]
