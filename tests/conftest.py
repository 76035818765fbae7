"""
Pytest configuration and shared fixtures for the devmgr test suite.

This module provides temporary configurations, sample device records and
recording fakes for the coordinator's collaborators. The fakes append to a
shared call log so tests can assert on acquisition and release order.
"""

import shutil
import sys
import tempfile
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from devmgr.config import clear_config_cache
from devmgr.models import DeviceRecord, UdevConfig
from devmgr.orchestration import SignalHandler
from devmgr.storage import DeviceRecordStore, ParquetRecordStore
from devmgr.system import SystemBusNotifier
from devmgr.validation import RecordNotFoundError, StoreOpenError


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ============================================================================
# Recording fakes
# ============================================================================


class RecordingStore(DeviceRecordStore):
    """In-memory record store that logs lifecycle calls."""

    def __init__(self, calls: List[str], records: Optional[List[DeviceRecord]] = None,
                 fail_init: bool = False, on_close: Optional[Callable[[], None]] = None):
        self.calls = calls
        self.records: Dict[str, DeviceRecord] = {r.path: r for r in records or []}
        self.fail_init = fail_init
        self.on_close = on_close
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def init(self) -> None:
        self.calls.append("store.init")
        if self.fail_init:
            raise StoreOpenError("unable to initialize database")
        self._open = True

    def open_ro(self) -> None:
        self.calls.append("store.open_ro")
        self._open = True

    def get(self, path: str) -> DeviceRecord:
        try:
            return self.records[path]
        except KeyError:
            raise RecordNotFoundError(path)

    def add(self, record: DeviceRecord) -> None:
        self.records[record.path] = record

    def delete(self, path: str) -> None:
        if self.records.pop(path, None) is None:
            raise RecordNotFoundError(path)

    def dump(self, callback) -> int:
        for record in self.records.values():
            callback(record)
        return 0

    def close(self) -> None:
        self.calls.append("store.close")
        self._open = False
        if self.on_close is not None:
            self.on_close()


class RecordingBus(SystemBusNotifier):
    def __init__(self, calls: List[str]):
        self.calls = calls

    def connect(self) -> None:
        self.calls.append("bus.connect")

    def disconnect(self) -> None:
        self.calls.append("bus.disconnect")

    def notify_added(self, record: DeviceRecord) -> None:
        self.calls.append(f"bus.added:{record.path}")

    def notify_removed(self, record: DeviceRecord) -> None:
        self.calls.append(f"bus.removed:{record.path}")


class RecordingNaming:
    def __init__(self, calls: List[str], on_init: Optional[Callable[[], None]] = None):
        self.calls = calls
        self.on_init = on_init

    def init(self) -> None:
        self.calls.append("naming.init")
        if self.on_init is not None:
            self.on_init()


class RecordingDevices:
    """Create/remove operations returning a preset status."""

    def __init__(self, calls: List[str], status: int = 0,
                 side_effect: Optional[Callable[[], None]] = None):
        self.calls = calls
        self.status = status
        self.side_effect = side_effect

    def add_device(self, devpath: str, subsystem: str) -> int:
        self.calls.append(f"add:{devpath}:{subsystem}")
        if self.side_effect is not None:
            self.side_effect()
        return self.status

    def remove_device(self, devpath: str, subsystem: str) -> int:
        self.calls.append(f"remove:{devpath}:{subsystem}")
        if self.side_effect is not None:
            self.side_effect()
        return self.status


class RecordingSignals(SignalHandler):
    """Real flag-setting handler that also logs install/restore."""

    def __init__(self, calls: List[str], **kwargs):
        super().__init__(**kwargs)
        self.calls = calls

    def install(self) -> None:
        self.calls.append("signals.install")
        super().install()

    def restore(self) -> None:
        self.calls.append("signals.restore")
        super().restore()


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def udev_config(temp_dir):
    """Configuration rooted entirely inside the temporary directory."""
    return UdevConfig(
        root=str(temp_dir / "dev") + "/",
        db_path=temp_dir / "db" / "devices.parquet",
        rules_file=temp_dir / "rules.toml",
        sysfs_root=temp_dir / "sys",
    )


@pytest.fixture
def sample_records():
    """Three device records in store order."""
    return [
        DeviceRecord(path="/class/tty/ttyS0", name="tts/0", symlink="ttyS0",
                     owner="root", group="dialout", mode=0o660, major=4, minor=64),
        DeviceRecord(path="/block/sda", name="sda", symlink="disk/boot root",
                     owner="root", group="disk", mode=0o660, major=8, minor=0),
        DeviceRecord(path="/class/input/mouse0", name="input/mouse0",
                     owner="wheel", group="input", mode=0o664, major=13, minor=32),
    ]


@pytest.fixture
def populated_store(udev_config, sample_records):
    """A Parquet record store on disk holding sample_records, closed."""
    store = ParquetRecordStore(udev_config.db_path)
    store.init()
    for record in sample_records:
        store.add(record)
    store.close()
    return store


@pytest.fixture
def call_log():
    return []


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Drop any cached configuration between tests."""
    yield
    clear_config_cache()


@pytest.fixture
def make_coordinator(call_log, udev_config):
    """
    Build an EventCoordinator wired to recording fakes.

    Keyword arguments: fail_init, status, side_effect (run inside the
    create/remove call), on_close (run inside store.close()), on_naming_init
    (run inside naming.init()).
    """
    from devmgr.orchestration import EventCoordinator

    def _make(fail_init=False, status=0, side_effect=None, on_close=None, on_naming_init=None):
        return EventCoordinator(
            udev_config,
            store=RecordingStore(call_log, fail_init=fail_init, on_close=on_close),
            bus=RecordingBus(call_log),
            naming=RecordingNaming(call_log, on_init=on_naming_init),
            devices=RecordingDevices(call_log, status=status, side_effect=side_effect),
            signals=RecordingSignals(call_log),
        )

    return _make


@pytest.fixture
def recording_store(call_log, sample_records):
    """In-memory store preloaded with sample_records."""
    return RecordingStore(call_log, records=sample_records)


@pytest.fixture
def recording_bus(call_log):
    return RecordingBus(call_log)
