"""
System bus notifier.

Other programs learn about created and removed device nodes through the
notifier. The bundled implementation reports through logging; a transport
such as D-Bus plugs in by implementing SystemBusNotifier.
"""

import logging
from abc import ABC, abstractmethod

from ..models.records import DeviceRecord

logger = logging.getLogger(__name__)


class SystemBusNotifier(ABC):
    """Connect/disconnect lifecycle plus device notifications."""

    @abstractmethod
    def connect(self) -> None:
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Close the connection. Must be safe to call when not connected."""
        pass

    @abstractmethod
    def notify_added(self, record: DeviceRecord) -> None:
        pass

    @abstractmethod
    def notify_removed(self, record: DeviceRecord) -> None:
        pass


class LoggingBusNotifier(SystemBusNotifier):
    """Notifier that publishes device events to the log when enabled."""

    def __init__(self, enabled: bool = False):
        self.enabled = enabled
        self.connected = False

    def connect(self) -> None:
        self.connected = True
        logger.debug(f"System bus connected (notifications {'on' if self.enabled else 'off'})")

    def disconnect(self) -> None:
        if not self.connected:
            return
        self.connected = False
        logger.debug("System bus disconnected")

    def notify_added(self, record: DeviceRecord) -> None:
        if self.enabled and self.connected:
            logger.info(f"device added: {record.path} -> {record.name}")

    def notify_removed(self, record: DeviceRecord) -> None:
        if self.enabled and self.connected:
            logger.info(f"device removed: {record.path} -> {record.name}")
