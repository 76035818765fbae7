"""
Shared data structures for the orchestration module.

This module defines the lifecycle state of a hotplug run and the constants
that govern event filtering and signal exit codes.
"""

import logging
import signal
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..validation import StoreError

if TYPE_CHECKING:
    from ..storage import DeviceRecordStore
    from ..system.bus import SystemBusNotifier
    from .signal_handler import SignalHandler

logger = logging.getLogger(__name__)

# Subsystems whose events are never handled. The empty string terminates
# the list; entries after it are not consulted.
SUBSYSTEM_BLACKLIST = (
    "net",
    "scsi_host",
    "scsi_device",
    "usb_host",
    "pci_bus",
    "",
)

# Only class devices and block devices get nodes.
DEVPATH_MARKERS = ("class", "block")

# Exit status for a run ended by a trapped signal is SIGNAL_EXIT_BASE + signum.
SIGNAL_EXIT_BASE = 20

# SIGKILL cannot actually be caught; installing a handler for it is attempted
# and the failure logged.
TRAPPED_SIGNALS = (signal.SIGINT, signal.SIGTERM, signal.SIGKILL)


@dataclass
class ProcessLifecycleState:
    """
    Resources acquired while handling one hotplug event.

    Flags only move forward during acquisition. Each release method checks
    and clears its flag before releasing, so calling it again, from the
    normal path or after an interruption, is a no-op.
    """

    bus_connected: bool = False
    store_open: bool = False
    signal_handlers_installed: bool = False
    naming_initialized: bool = False
    teardown_error: Optional[StoreError] = None

    def close_store(self, store: "DeviceRecordStore") -> None:
        if not self.store_open:
            return
        self.store_open = False
        try:
            store.close()
        except StoreError as e:
            logger.error(f"Failed to close record store: {e}")
            self.teardown_error = e

    def disconnect_bus(self, bus: "SystemBusNotifier") -> None:
        if not self.bus_connected:
            return
        self.bus_connected = False
        bus.disconnect()

    def restore_signal_handlers(self, handler: "SignalHandler") -> None:
        if not self.signal_handlers_installed:
            return
        self.signal_handlers_installed = False
        handler.restore()

    @property
    def fully_released(self) -> bool:
        return not (self.bus_connected or self.store_open or self.signal_handlers_installed)
