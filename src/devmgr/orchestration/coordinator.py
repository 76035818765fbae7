"""
Hotplug event coordinator.

This module handles a single kernel hotplug event: it decides whether the
event concerns a device node at all, acquires the bus connection, the record
store, the signal handlers and the naming policy in that order, dispatches
the action, and releases everything it acquired on every exit path.
"""

import errno
import logging
from typing import Mapping, Optional

from ..models.config import UdevConfig
from ..models.events import Action, HotplugEvent
from ..naming import NamingPolicy
from ..storage import DeviceRecordStore, create_store
from ..system import DeviceOperations, LoggingBusNotifier, SystemBusNotifier
from ..validation import DevmgrError, ErrorSeverity, HotplugInterrupted, handle_error
from .shared_state import (
    DEVPATH_MARKERS,
    SIGNAL_EXIT_BASE,
    SUBSYSTEM_BLACKLIST,
    ProcessLifecycleState,
)
from .signal_handler import SignalHandler

logger = logging.getLogger(__name__)


def is_eligible_devpath(devpath: str) -> bool:
    """True for class and block devices."""
    return any(marker in devpath for marker in DEVPATH_MARKERS)


def is_blacklisted(subsystem: str) -> bool:
    """True if the subsystem is listed before the empty-string terminator."""
    for entry in SUBSYSTEM_BLACKLIST:
        if entry == "":
            break
        if subsystem == entry:
            return True
    return False


def normalize_status(status: int) -> int:
    """
    Turn a create/remove status into a process exit code.

    Positive statuses count as success; negative ones are errno values and
    are negated.
    """
    if status > 0:
        return 0
    return -status


class EventCoordinator:
    """
    Runs one hotplug event against the external collaborators.

    Collaborators that are not passed in are built from the configuration.
    """

    def __init__(
        self,
        config: UdevConfig,
        store: Optional[DeviceRecordStore] = None,
        bus: Optional[SystemBusNotifier] = None,
        naming: Optional[NamingPolicy] = None,
        devices: Optional[DeviceOperations] = None,
        signals: Optional[SignalHandler] = None,
    ):
        self.config = config
        self.store = store if store is not None else create_store(config)
        self.bus = bus if bus is not None else LoggingBusNotifier(config.bus_enabled)
        self.naming = naming if naming is not None else NamingPolicy(config)
        self.devices = devices if devices is not None else DeviceOperations(
            config, self.store, self.naming, self.bus
        )
        self.signals = signals if signals is not None else SignalHandler()

    def run_hotplug(self, subsystem: str, environ: Mapping[str, str]) -> int:
        """
        Handle the hotplug event described by environ for a subsystem.

        Args:
            subsystem: The single command line argument the kernel passes
            environ: Process environment carrying ACTION, DEVPATH and SEQNUM

        Returns:
            Process exit code: 0 for success and for events that do not
            concern us, an errno for failures, 20 + signum if interrupted
        """
        devpath = environ.get("DEVPATH")
        if not devpath:
            logger.debug("no devpath?")
            return 0
        logger.debug(f"looking at '{devpath}'")

        if not is_eligible_devpath(devpath):
            logger.debug("not a block or class device")
            return 0

        if is_blacklisted(subsystem):
            logger.debug(f"don't care about '{subsystem}' devices")
            return 0

        if environ.get("ACTION") is None:
            logger.debug("no action?")
            return 0

        event = HotplugEvent.from_environ(environ, subsystem)
        if event.seqnum is not None:
            logger.debug(f"event sequence number {event.seqnum}")

        state = ProcessLifecycleState()
        try:
            status = self._handle_event(event, state)
        except HotplugInterrupted as e:
            logger.warning(f"caught signal {e.signum}, shutting down")
            self._teardown(state, interrupted=True)
            return SIGNAL_EXIT_BASE + e.signum
        except DevmgrError as e:
            handle_error(
                error=e,
                context=f"handling '{event.raw_action}' for '{event.devpath}'",
                severity=ErrorSeverity.ERROR,
                reraise=False,
                logger=logger,
            )
            self._teardown(state)
            if self.signals.received_signal is not None:
                return SIGNAL_EXIT_BASE + self.signals.received_signal
            return e.errno
        finally:
            self._teardown(state)

        # A signal that arrived during teardown still decides the exit code.
        if self.signals.received_signal is not None:
            logger.warning(f"caught signal {self.signals.received_signal} during teardown")
            return SIGNAL_EXIT_BASE + self.signals.received_signal

        if state.teardown_error is not None and status >= 0:
            return state.teardown_error.errno

        return normalize_status(status)

    def _handle_event(self, event: HotplugEvent, state: ProcessLifecycleState) -> int:
        self.bus.connect()
        state.bus_connected = True

        self.store.init()
        state.store_open = True

        self.signals.install()
        state.signal_handlers_installed = True

        self.naming.init()
        state.naming_initialized = True

        self.signals.check()
        status = self._dispatch(event)
        self.signals.check()
        return status

    def _dispatch(self, event: HotplugEvent) -> int:
        if event.action is Action.ADD:
            status = self.devices.add_device(event.devpath, event.subsystem)
        elif event.action is Action.REMOVE:
            status = self.devices.remove_device(event.devpath, event.subsystem)
        else:
            logger.error(f"unknown action '{event.raw_action}'")
            return -errno.EINVAL
        logger.debug(f"'{event.raw_action}' of '{event.devpath}' returned {status}")
        return status

    def _teardown(self, state: ProcessLifecycleState, interrupted: bool = False) -> None:
        if interrupted:
            state.disconnect_bus(self.bus)
            state.close_store(self.store)
        else:
            state.close_store(self.store)
            state.disconnect_bus(self.bus)
        state.restore_signal_handlers(self.signals)
