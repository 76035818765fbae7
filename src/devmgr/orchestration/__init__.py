"""
Hotplug event coordination: filtering, resource lifecycle and signal handling.
"""

from .coordinator import EventCoordinator, is_blacklisted, is_eligible_devpath, normalize_status
from .shared_state import (
    DEVPATH_MARKERS,
    SIGNAL_EXIT_BASE,
    SUBSYSTEM_BLACKLIST,
    TRAPPED_SIGNALS,
    ProcessLifecycleState,
)
from .signal_handler import SignalHandler

__all__ = [
    "EventCoordinator",
    "ProcessLifecycleState",
    "SignalHandler",
    "DEVPATH_MARKERS",
    "SIGNAL_EXIT_BASE",
    "SUBSYSTEM_BLACKLIST",
    "TRAPPED_SIGNALS",
    "is_blacklisted",
    "is_eligible_devpath",
    "normalize_status",
]
