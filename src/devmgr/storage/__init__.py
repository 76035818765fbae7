"""
Device record store.

Records are kept in a Parquet file through Polars, behind the
DeviceRecordStore interface so the coordinator and query interface can be
exercised against other implementations.
"""

from .base import DeviceRecordStore
from .factory import create_store
from .parquet_storage import ParquetRecordStore

__all__ = ["DeviceRecordStore", "ParquetRecordStore", "create_store"]
