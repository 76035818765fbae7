"""
Command-line interface for the devmgr package.
"""

from .main import main, main_cli, setup_logging
from .mode import select_mode
from .query import QueryInterface, print_record, project_field

__all__ = [
    "QueryInterface",
    "main",
    "main_cli",
    "print_record",
    "project_field",
    "select_mode",
    "setup_logging",
]
