"""
Unit tests for sysfs access, the bus notifier and device node operations.

os.mknod and os.chown need privileges, so they are patched; everything else
runs against real files in a temporary directory.
"""

import errno
import logging
import os
import stat
from unittest.mock import patch

import pytest

from devmgr.models import DeviceRecord
from devmgr.naming import NamingPolicy
from devmgr.system import (
    DeviceOperations,
    LoggingBusNotifier,
    read_dev_numbers,
    resolve_gid,
    resolve_uid,
)
from devmgr.validation import RecordNotFoundError


def write_dev_attribute(udev_config, devpath, value):
    device_dir = udev_config.sysfs_root / devpath.lstrip("/")
    device_dir.mkdir(parents=True, exist_ok=True)
    (device_dir / "dev").write_text(value + "\n")


@pytest.fixture
def operations(udev_config, recording_store, recording_bus):
    naming = NamingPolicy(udev_config)
    naming.init()
    return DeviceOperations(udev_config, recording_store, naming, recording_bus)


@pytest.mark.unit
class TestSysfs:

    def test_read_dev_numbers(self, udev_config):
        write_dev_attribute(udev_config, "/class/tty/ttyS0", "4:64")
        assert read_dev_numbers(udev_config.sysfs_root, "/class/tty/ttyS0") == (4, 64)

    def test_missing_dev_attribute(self, udev_config):
        assert read_dev_numbers(udev_config.sysfs_root, "/class/net/eth0") is None

    @pytest.mark.parametrize("value", ["4", "a:b", "4:", ":64"])
    def test_malformed_dev_attribute(self, udev_config, value):
        write_dev_attribute(udev_config, "/class/tty/ttyS0", value)
        assert read_dev_numbers(udev_config.sysfs_root, "/class/tty/ttyS0") is None


@pytest.mark.unit
class TestAddDevice:

    @patch("os.chown")
    @patch("os.chmod")
    @patch("os.mknod")
    def test_add_character_device(self, mock_mknod, mock_chmod, mock_chown,
                                  operations, udev_config, recording_store, call_log):
        write_dev_attribute(udev_config, "/class/tty/ttyUSB0", "188:0")

        assert operations.add_device("/class/tty/ttyUSB0", "tty") == 0

        node = operations.node_path("ttyUSB0")
        mock_mknod.assert_called_once_with(
            node, udev_config.default_mode | stat.S_IFCHR, os.makedev(188, 0)
        )
        mock_chmod.assert_called_once_with(node, udev_config.default_mode)
        mock_chown.assert_called_once_with(node, 0, 0)
        record = recording_store.get("/class/tty/ttyUSB0")
        assert (record.major, record.minor) == (188, 0)
        assert "bus.added:/class/tty/ttyUSB0" in call_log

    @patch("os.chown")
    @patch("os.chmod")
    @patch("os.mknod")
    def test_add_block_device_with_symlinks(self, mock_mknod, mock_chmod, mock_chown,
                                            udev_config, recording_store, recording_bus):
        udev_config.rules_file.write_text(
            '[[rules]]\npriority = 1\nmatch_field = "kernel"\nmatch_type = "exact"\n'
            'pattern = "sdb"\nname = "disks/%k"\nsymlink = "usbdisk by-id/stick"\n'
        )
        naming = NamingPolicy(udev_config)
        naming.init()
        operations = DeviceOperations(udev_config, recording_store, naming, recording_bus)
        write_dev_attribute(udev_config, "/block/sdb", "8:16")

        assert operations.add_device("/block/sdb", "block") == 0

        assert stat.S_ISBLK(mock_mknod.call_args.args[1])
        link = operations.node_path("by-id/stick")
        assert link.is_symlink()
        assert os.readlink(link) == "../disks/sdb"
        assert os.readlink(operations.node_path("usbdisk")) == "disks/sdb"

    def test_device_without_numbers_is_skipped(self, operations, recording_store, call_log):
        assert operations.add_device("/class/net/eth0", "net") == 0
        with pytest.raises(RecordNotFoundError):
            recording_store.get("/class/net/eth0")
        assert call_log == []

    @patch("os.mknod", side_effect=PermissionError(errno.EPERM, "Operation not permitted"))
    def test_mknod_failure_returns_negative_errno(self, mock_mknod, operations,
                                                  udev_config, recording_store):
        write_dev_attribute(udev_config, "/class/tty/ttyS5", "4:69")

        assert operations.add_device("/class/tty/ttyS5", "tty") == -errno.EPERM
        assert "/class/tty/ttyS5" not in recording_store.records

    def test_unreadable_dev_attribute_returns_negative_errno(self, operations, udev_config):
        # A directory where the dev attribute should be cannot be read.
        (udev_config.sysfs_root / "class" / "tty" / "ttyS6" / "dev").mkdir(parents=True)

        assert operations.add_device("/class/tty/ttyS6", "tty") == -errno.EISDIR


@pytest.mark.unit
class TestRemoveDevice:

    def test_remove_unlinks_node_and_symlinks(self, operations, recording_store, call_log):
        record = recording_store.get("/block/sda")
        for name in [record.name] + record.symlinks:
            path = operations.node_path(name)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()

        assert operations.remove_device("/block/sda", "block") == 0

        assert not operations.node_path("sda").exists()
        assert not operations.node_path("disk/boot").exists()
        assert not operations.node_path("root").exists()
        assert "/block/sda" not in recording_store.records
        assert "bus.removed:/block/sda" in call_log

    def test_remove_tolerates_missing_files(self, operations, recording_store):
        assert operations.remove_device("/class/tty/ttyS0", "tty") == 0
        assert "/class/tty/ttyS0" not in recording_store.records

    def test_remove_unknown_device(self, operations):
        assert operations.remove_device("/class/tty/ttyS9", "tty") == -errno.ENODEV


@pytest.mark.unit
class TestOwnership:

    def test_numeric_ids(self):
        assert resolve_uid("1000") == 1000
        assert resolve_gid("5") == 5

    def test_root(self):
        assert resolve_uid("root") == 0
        assert resolve_gid("root") == 0

    def test_unknown_names_fall_back_to_zero(self):
        assert resolve_uid("no-such-user-devmgr") == 0
        assert resolve_gid("no-such-group-devmgr") == 0


@pytest.mark.unit
class TestLoggingBusNotifier:

    def test_notifications_logged_when_enabled(self, caplog):
        bus = LoggingBusNotifier(enabled=True)
        record = DeviceRecord(path="/class/tty/ttyS0", name="tts/0")
        with caplog.at_level(logging.INFO, logger="devmgr.system.bus"):
            bus.connect()
            bus.notify_added(record)
            bus.notify_removed(record)
            bus.disconnect()
        assert "device added: /class/tty/ttyS0 -> tts/0" in caplog.text
        assert "device removed: /class/tty/ttyS0 -> tts/0" in caplog.text

    def test_disabled_notifier_is_silent(self, caplog):
        bus = LoggingBusNotifier(enabled=False)
        with caplog.at_level(logging.INFO, logger="devmgr.system.bus"):
            bus.connect()
            bus.notify_added(DeviceRecord(path="/class/a", name="a"))
        assert "device added" not in caplog.text

    def test_disconnect_is_idempotent(self):
        bus = LoggingBusNotifier()
        bus.disconnect()
        bus.connect()
        bus.disconnect()
        bus.disconnect()
        assert not bus.connected
