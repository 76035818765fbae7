"""
Abstract base class for device record stores.

This module defines the DeviceRecordStore interface the rest of the device
manager programs against. A store maps a sysfs device path to the
DeviceRecord produced when the device was added, and has an explicit
open/close lifecycle:

- init() opens the store for reading and writing (hotplug path)
- open_ro() opens an existing store read-only (query path)
- close() releases the store and must be safe to call more than once

Stores are responsible for their own cross-process locking: two hotplug
invocations may run concurrently and nothing above the store serializes them.
"""

from abc import ABC, abstractmethod
from typing import Callable

from ..models.records import DeviceRecord


class DeviceRecordStore(ABC):
    """Abstract base class for device record store implementations."""

    @abstractmethod
    def init(self) -> None:
        """
        Open the store for reading and writing, creating it if needed.

        Raises:
            StoreOpenError: If the store cannot be opened
        """
        pass

    @abstractmethod
    def open_ro(self) -> None:
        """
        Open an existing store read-only.

        Raises:
            StoreOpenError: If the store does not exist or cannot be read
        """
        pass

    @abstractmethod
    def get(self, path: str) -> DeviceRecord:
        """
        Look up the record for a sysfs path.

        Raises:
            RecordNotFoundError: If no record exists for path
        """
        pass

    @abstractmethod
    def add(self, record: DeviceRecord) -> None:
        """Insert a record, replacing any record with the same path."""
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        """
        Remove the record for a sysfs path.

        Raises:
            RecordNotFoundError: If no record exists for path
        """
        pass

    @abstractmethod
    def dump(self, callback: Callable[[DeviceRecord], None]) -> int:
        """
        Call callback once per stored record, in store order.

        Returns:
            0 on success
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Flush pending changes and release the store. Idempotent."""
        pass

    @property
    @abstractmethod
    def is_open(self) -> bool:
        pass
