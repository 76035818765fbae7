"""
Unit tests for the Parquet device record store.
"""

import pytest
import polars as pl

from devmgr.models import DeviceRecord
from devmgr.storage import ParquetRecordStore, create_store
from devmgr.validation import RecordNotFoundError, StoreError, StoreOpenError


@pytest.mark.unit
class TestParquetRecordStore:
    """Test cases for ParquetRecordStore."""

    def test_init_creates_empty_store(self, udev_config):
        store = ParquetRecordStore(udev_config.db_path)
        store.init()
        assert store.is_open
        assert store.dump(lambda record: pytest.fail("store should be empty")) == 0
        store.close()
        assert not store.is_open

    def test_records_persist_across_instances(self, udev_config, populated_store, sample_records):
        store = ParquetRecordStore(udev_config.db_path)
        store.open_ro()
        try:
            assert store.get("/block/sda") == sample_records[1]
        finally:
            store.close()

    def test_file_is_parquet(self, udev_config, populated_store):
        df = pl.read_parquet(udev_config.db_path)
        assert df.columns == ["path", "name", "symlink", "owner", "group", "mode", "major", "minor"]
        assert df["path"].to_list() == ["/class/tty/ttyS0", "/block/sda", "/class/input/mouse0"]

    def test_dump_preserves_order(self, udev_config, populated_store, sample_records):
        store = ParquetRecordStore(udev_config.db_path)
        store.open_ro()
        seen = []
        assert store.dump(seen.append) == 0
        store.close()
        assert seen == sample_records

    def test_get_missing_record(self, udev_config, populated_store):
        store = ParquetRecordStore(udev_config.db_path)
        store.open_ro()
        with pytest.raises(RecordNotFoundError) as exc_info:
            store.get("/class/none")
        store.close()
        assert exc_info.value.path == "/class/none"

    def test_add_replaces_existing_path(self, udev_config, populated_store):
        store = ParquetRecordStore(udev_config.db_path)
        store.init()
        store.add(DeviceRecord(path="/block/sda", name="disk0", group="disk"))
        store.close()

        store.open_ro()
        assert store.get("/block/sda").name == "disk0"
        paths = []
        store.dump(lambda record: paths.append(record.path))
        store.close()
        assert paths.count("/block/sda") == 1

    def test_delete(self, udev_config, populated_store):
        store = ParquetRecordStore(udev_config.db_path)
        store.init()
        store.delete("/block/sda")
        with pytest.raises(RecordNotFoundError):
            store.delete("/block/sda")
        store.close()

        store.open_ro()
        with pytest.raises(RecordNotFoundError):
            store.get("/block/sda")
        store.close()

    def test_unmodified_store_is_not_rewritten(self, udev_config, populated_store):
        mtime = udev_config.db_path.stat().st_mtime_ns
        store = ParquetRecordStore(udev_config.db_path)
        store.init()
        store.close()
        assert udev_config.db_path.stat().st_mtime_ns == mtime

    def test_open_ro_requires_existing_store(self, udev_config):
        store = ParquetRecordStore(udev_config.db_path)
        with pytest.raises(StoreOpenError):
            store.open_ro()
        assert not store.is_open

    def test_open_ro_rejects_corrupt_file(self, udev_config):
        udev_config.db_path.parent.mkdir(parents=True)
        udev_config.db_path.write_text("not parquet")
        store = ParquetRecordStore(udev_config.db_path)
        with pytest.raises(StoreOpenError):
            store.open_ro()

    def test_init_rejects_corrupt_file(self, udev_config):
        udev_config.db_path.parent.mkdir(parents=True)
        udev_config.db_path.write_text("not parquet")
        store = ParquetRecordStore(udev_config.db_path)
        with pytest.raises(StoreOpenError):
            store.init()
        assert not store.is_open

    def test_read_only_store_rejects_writes(self, udev_config, populated_store):
        store = ParquetRecordStore(udev_config.db_path)
        store.open_ro()
        with pytest.raises(StoreError):
            store.add(DeviceRecord(path="/class/x", name="x"))
        with pytest.raises(StoreError):
            store.delete("/block/sda")
        store.close()

    def test_double_open_is_an_error(self, udev_config):
        store = ParquetRecordStore(udev_config.db_path)
        store.init()
        with pytest.raises(StoreError):
            store.init()
        store.close()

    def test_close_is_idempotent(self, udev_config):
        store = ParquetRecordStore(udev_config.db_path)
        store.close()
        store.init()
        store.add(DeviceRecord(path="/class/x", name="x"))
        store.close()
        store.close()
        assert udev_config.db_path.exists()

    def test_closed_store_rejects_lookups(self, udev_config):
        store = ParquetRecordStore(udev_config.db_path)
        with pytest.raises(StoreError):
            store.get("/class/x")

    def test_factory_uses_configured_path(self, udev_config):
        store = create_store(udev_config)
        assert isinstance(store, ParquetRecordStore)
        assert store.db_path == udev_config.db_path
