"""
Device node creation and removal.

DeviceOperations carries out a hotplug "add" or "remove" once the
coordinator has acquired the record store, the bus connection and the
naming policy. Both operations return 0 on success or a negative errno,
mirroring the kernel convention the coordinator normalizes into an exit code.
"""

import errno
import grp
import logging
import os
import pwd
import stat
from pathlib import Path

from ..models.config import UdevConfig
from ..models.records import DeviceRecord
from ..naming import NamingPolicy
from ..storage import DeviceRecordStore
from ..validation import RecordNotFoundError, StoreError
from .bus import SystemBusNotifier
from .sysfs import read_dev_numbers

logger = logging.getLogger(__name__)


def resolve_uid(owner: str) -> int:
    """Map a user name or numeric string to a uid, falling back to 0."""
    if owner.isdigit():
        return int(owner)
    try:
        return pwd.getpwnam(owner).pw_uid
    except KeyError:
        logger.warning(f"Unknown user '{owner}', using uid 0")
        return 0


def resolve_gid(group: str) -> int:
    """Map a group name or numeric string to a gid, falling back to 0."""
    if group.isdigit():
        return int(group)
    try:
        return grp.getgrnam(group).gr_gid
    except KeyError:
        logger.warning(f"Unknown group '{group}', using gid 0")
        return 0


class DeviceOperations:
    """Creates and removes device nodes and keeps the record store in sync."""

    def __init__(
        self,
        config: UdevConfig,
        store: DeviceRecordStore,
        naming: NamingPolicy,
        bus: SystemBusNotifier,
    ):
        self.config = config
        self.store = store
        self.naming = naming
        self.bus = bus

    def node_path(self, name: str) -> Path:
        return Path(self.config.root) / name

    def add_device(self, devpath: str, subsystem: str) -> int:
        """
        Create the device node for a newly added device.

        Returns:
            0 on success (also when the device has no node), negative errno on failure
        """
        try:
            dev_numbers = read_dev_numbers(self.config.sysfs_root, devpath)
        except OSError as e:
            logger.error(f"Failed to read device numbers of '{devpath}': {e}")
            return -(e.errno or errno.EIO)
        if dev_numbers is None:
            logger.debug(f"'{devpath}' has no device numbers, nothing to create")
            return 0

        record = self.naming.name_device(devpath, subsystem, dev_numbers)
        try:
            self._create_node(record, block="block" in devpath)
            self._create_symlinks(record)
            self.store.add(record)
        except OSError as e:
            logger.error(f"Failed to create node '{record.name}' for '{devpath}': {e}")
            return -(e.errno or errno.EIO)
        except StoreError as e:
            logger.error(f"Failed to record '{devpath}': {e}")
            return -e.errno

        self.bus.notify_added(record)
        logger.info(f"Created {self.node_path(record.name)} for '{devpath}'")
        return 0

    def remove_device(self, devpath: str, subsystem: str) -> int:
        """
        Remove the device node and symlinks recorded for a device.

        Returns:
            0 on success, -ENODEV if the device is not recorded, other negative errno on failure
        """
        try:
            record = self.store.get(devpath)
        except RecordNotFoundError:
            logger.debug(f"'{devpath}' ({subsystem}) is not in the record store")
            return -errno.ENODEV

        try:
            for link in record.symlinks:
                self.node_path(link).unlink(missing_ok=True)
            self.node_path(record.name).unlink(missing_ok=True)
            self.store.delete(devpath)
        except OSError as e:
            logger.error(f"Failed to remove node '{record.name}' for '{devpath}': {e}")
            return -(e.errno or errno.EIO)
        except StoreError as e:
            logger.error(f"Failed to delete record for '{devpath}': {e}")
            return -e.errno

        self.bus.notify_removed(record)
        logger.info(f"Removed {self.node_path(record.name)} for '{devpath}'")
        return 0

    def _create_node(self, record: DeviceRecord, block: bool) -> None:
        node = self.node_path(record.name)
        node.parent.mkdir(parents=True, exist_ok=True)
        node.unlink(missing_ok=True)

        file_type = stat.S_IFBLK if block else stat.S_IFCHR
        os.mknod(node, record.mode | file_type, os.makedev(record.major, record.minor))
        # mknod() is subject to the umask.
        os.chmod(node, record.mode)
        os.chown(node, resolve_uid(record.owner), resolve_gid(record.group))

    def _create_symlinks(self, record: DeviceRecord) -> None:
        node = self.node_path(record.name)
        for link in record.symlinks:
            link_path = self.node_path(link)
            link_path.parent.mkdir(parents=True, exist_ok=True)
            link_path.unlink(missing_ok=True)
            os.symlink(os.path.relpath(node, link_path.parent), link_path)
