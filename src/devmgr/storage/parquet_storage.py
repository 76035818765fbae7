"""
Parquet device record store using Polars.
"""

import fcntl
import logging
import os
from pathlib import Path
from typing import Callable, IO, Literal, Optional

import polars as pl

from ..models.records import DeviceRecord
from ..validation import (
    RecordNotFoundError,
    StoreError,
    StoreOpenError,
    handle_store_error,
)
from .base import DeviceRecordStore

logger = logging.getLogger(__name__)

RECORD_SCHEMA = {
    "path": pl.Utf8,
    "name": pl.Utf8,
    "symlink": pl.Utf8,
    "owner": pl.Utf8,
    "group": pl.Utf8,
    "mode": pl.Int64,
    "major": pl.Int64,
    "minor": pl.Int64,
}


class ParquetRecordStore(DeviceRecordStore):
    """
    Device record store kept in a single Parquet file.

    The whole table is loaded into a Polars DataFrame when the store is
    opened and written back on close() if it was modified. Concurrent
    invocations are serialized with flock() on a sibling ``.lock`` file:
    exclusive for read/write, shared for read-only.
    """

    def __init__(
        self,
        db_path: Path,
        compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd"] = "snappy",
    ):
        self.db_path = Path(db_path)
        self.lock_path = self.db_path.with_name(self.db_path.name + ".lock")
        self.compression = compression
        self._frame: Optional[pl.DataFrame] = None
        self._lock_file: Optional[IO] = None
        self._writable = False
        self._dirty = False

    @property
    def is_open(self) -> bool:
        return self._frame is not None

    def init(self) -> None:
        if self.is_open:
            raise StoreError(f"record store {self.db_path} is already open")
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._acquire_lock(fcntl.LOCK_EX)
            if self.db_path.exists():
                frame = self._read_frame()
            else:
                frame = pl.DataFrame(schema=RECORD_SCHEMA)
        except Exception as e:
            self._release_lock()
            handle_store_error(e, f"initializing {self.db_path}", reraise=False, logger=logger)
            raise StoreOpenError(f"unable to initialize {self.db_path}: {e}") from e

        self._frame = frame
        self._writable = True
        self._dirty = False
        logger.debug(f"Opened record store {self.db_path} read/write ({len(frame)} records)")

    def open_ro(self) -> None:
        if self.is_open:
            raise StoreError(f"record store {self.db_path} is already open")
        if not self.db_path.exists():
            raise StoreOpenError(f"record store {self.db_path} does not exist")
        try:
            try:
                self._acquire_lock(fcntl.LOCK_SH)
            except PermissionError:
                logger.debug(f"Cannot open {self.lock_path}, reading without lock")
            frame = self._read_frame()
        except Exception as e:
            self._release_lock()
            handle_store_error(e, f"opening {self.db_path}", reraise=False, logger=logger)
            raise StoreOpenError(f"unable to open {self.db_path}: {e}") from e

        self._frame = frame
        self._writable = False
        self._dirty = False
        logger.debug(f"Opened record store {self.db_path} read-only ({len(frame)} records)")

    def get(self, path: str) -> DeviceRecord:
        frame = self._require_open()
        rows = frame.filter(pl.col("path") == path)
        if rows.height == 0:
            raise RecordNotFoundError(path)
        return DeviceRecord.from_dict(rows.row(0, named=True))

    def add(self, record: DeviceRecord) -> None:
        frame = self._require_writable()
        new_row = pl.DataFrame([record.to_dict()], schema=RECORD_SCHEMA)
        self._frame = pl.concat([frame.filter(pl.col("path") != record.path), new_row])
        self._dirty = True
        logger.debug(f"Stored record for {record.path} as '{record.name}'")

    def delete(self, path: str) -> None:
        frame = self._require_writable()
        remaining = frame.filter(pl.col("path") != path)
        if remaining.height == frame.height:
            raise RecordNotFoundError(path)
        self._frame = remaining
        self._dirty = True
        logger.debug(f"Deleted record for {path}")

    def dump(self, callback: Callable[[DeviceRecord], None]) -> int:
        frame = self._require_open()
        for row in frame.iter_rows(named=True):
            callback(DeviceRecord.from_dict(row))
        return 0

    def close(self) -> None:
        if not self.is_open:
            self._release_lock()
            return
        try:
            if self._writable and self._dirty:
                self._write_frame(self._frame)
        finally:
            self._frame = None
            self._writable = False
            self._dirty = False
            self._release_lock()
            logger.debug(f"Closed record store {self.db_path}")

    def _read_frame(self) -> pl.DataFrame:
        frame = pl.read_parquet(self.db_path)
        return frame.select(
            [pl.col(column).cast(dtype) for column, dtype in RECORD_SCHEMA.items()]
        )

    def _write_frame(self, frame: pl.DataFrame) -> None:
        # Write next to the target and rename so readers never see a partial file.
        tmp_path = self.db_path.with_name(self.db_path.name + ".tmp")
        try:
            frame.write_parquet(tmp_path, compression=self.compression)
            os.replace(tmp_path, self.db_path)
            logger.debug(f"Saved {len(frame)} records to {self.db_path}")
        except Exception as e:
            handle_store_error(e, f"writing {self.db_path}", reraise=False, logger=logger)
            raise StoreError(f"unable to write {self.db_path}: {e}") from e

    def _acquire_lock(self, operation: int) -> None:
        self._lock_file = open(self.lock_path, "a+")
        fcntl.flock(self._lock_file, operation)

    def _release_lock(self) -> None:
        if self._lock_file is None:
            return
        try:
            fcntl.flock(self._lock_file, fcntl.LOCK_UN)
        finally:
            self._lock_file.close()
            self._lock_file = None

    def _require_open(self) -> pl.DataFrame:
        if self._frame is None:
            raise StoreError(f"record store {self.db_path} is not open")
        return self._frame

    def _require_writable(self) -> pl.DataFrame:
        frame = self._require_open()
        if not self._writable:
            raise StoreError(f"record store {self.db_path} is open read-only")
        return frame
