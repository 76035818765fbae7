"""
Factory for creating record store instances.
"""

import logging

from ..models.config import UdevConfig
from .base import DeviceRecordStore
from .parquet_storage import ParquetRecordStore

logger = logging.getLogger(__name__)


def create_store(config: UdevConfig) -> DeviceRecordStore:
    """
    Create the record store configured for this process.

    Args:
        config: Loaded device manager configuration

    Returns:
        An unopened DeviceRecordStore
    """
    logger.debug(f"Creating ParquetRecordStore at {config.db_path}")
    return ParquetRecordStore(config.db_path)
