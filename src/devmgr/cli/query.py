"""
Interactive query and dump interface.

Options are processed in the order they appear on the command line, so
``-V``, ``-d`` and ``-h`` take effect as soon as they are reached and later
options are ignored.
"""

import argparse
import errno
import logging
import sys
from typing import Any, List, Optional, Sequence, Tuple

from .. import __version__
from ..models.config import UdevConfig
from ..models.events import QueryRequest, QueryType
from ..models.records import DeviceRecord
from ..storage import DeviceRecordStore, create_store
from ..validation import (
    InvalidQueryTypeError,
    RecordNotFoundError,
    StoreOpenError,
    UsageError,
)

logger = logging.getLogger(__name__)

PROG = "devmgr"

USAGE = (
    "Usage: [-pqrdVh]\n"
    "  -q TYPE  query database for the specified value:\n"
    "             'name'    name of device node\n"
    "             'symlink' pointing to node\n"
    "             'owner'   of node\n"
    "             'group'   of node\n"
    "  -p PATH  sysfs device path used for query\n"
    "  -r       print device root\n"
    "  -d       dump whole database\n"
    "  -V       print version\n"
    "  -h       print this help text\n"
)


def print_record(record: DeviceRecord) -> None:
    """Print one record as five tagged lines followed by a blank line."""
    print(f"P: {record.path}")
    print(f"N: {record.name}")
    print(f"S: {record.symlink}")
    print(f"O: {record.owner}")
    print(f"G: {record.group}")
    print()


def project_field(record: DeviceRecord, query_type: QueryType, root: Optional[str] = None) -> str:
    """
    Select the queried field of a record.

    Args:
        record: The record found for the queried path
        query_type: Field to return
        root: Device root to prepend; only used for QueryType.NAME

    Returns:
        The field value as printed by the query
    """
    if query_type is QueryType.NAME:
        return (root or "") + record.name
    if query_type is QueryType.SYMLINK:
        return record.symlink
    if query_type is QueryType.OWNER:
        return record.owner
    if query_type is QueryType.GROUP:
        return record.group
    return ""


class _OptionParser(argparse.ArgumentParser):
    """ArgumentParser that reports errors as UsageError instead of exiting."""

    def error(self, message: str) -> None:
        raise UsageError(message)


class _RecordOption(argparse.Action):
    """Append (dest, value) to namespace.ops in command line order."""

    def __call__(self, parser, namespace, values, option_string=None):
        namespace.ops.append((self.dest, values))


def build_parser() -> argparse.ArgumentParser:
    parser = _OptionParser(prog=PROG, add_help=False, allow_abbrev=False)
    parser.add_argument("-p", dest="path", action=_RecordOption, metavar="PATH")
    parser.add_argument("-q", dest="query", action=_RecordOption, metavar="TYPE")
    parser.add_argument("-r", dest="root", action=_RecordOption, nargs=0)
    parser.add_argument("-d", dest="dump", action=_RecordOption, nargs=0)
    parser.add_argument("-V", dest="version", action=_RecordOption, nargs=0)
    parser.add_argument("-h", dest="help", action=_RecordOption, nargs=0)
    return parser


class QueryInterface:
    """Read-only access to the device record store from the command line."""

    def __init__(self, config: UdevConfig, store: Optional[DeviceRecordStore] = None):
        self.config = config
        self.store = store if store is not None else create_store(config)
        self.parser = build_parser()

    def parse_options(self, args: Sequence[str]) -> Tuple[List[Tuple[str, Any]], Optional[UsageError]]:
        """
        Parse the command line into (option, value) pairs in command line order.

        An unrecognized argument is recorded as an ``unknown`` pair at its own
        position. A malformed option (such as ``-p`` without a path) stops
        parsing and is returned as the second element.
        """
        args = list(args)
        namespace = argparse.Namespace(ops=[])
        try:
            _, extras = self.parser.parse_known_args(args, namespace=namespace)
        except UsageError as e:
            return namespace.ops, e

        ops = namespace.ops
        if extras:
            ops.insert(self._ops_before(args, extras[0], len(ops)), ("unknown", extras[0]))
        return ops, None

    def _ops_before(self, args: List[str], token: str, default: int) -> int:
        # The first occurrence of token whose prefix parses cleanly is the
        # unrecognized one; earlier occurrences are option arguments.
        for index, arg in enumerate(args):
            if arg != token:
                continue
            prefix = argparse.Namespace(ops=[])
            try:
                self.parser.parse_known_args(args[:index], namespace=prefix)
            except UsageError:
                continue
            return len(prefix.ops)
        return default

    def run_interactive(self, args: Sequence[str]) -> int:
        """
        Run an interactive command.

        Args:
            args: Command line arguments without the program name

        Returns:
            Process exit code
        """
        ops, parse_error = self.parse_options(args)

        request = QueryRequest()
        for option, value in ops:
            logger.debug(f"option '{option}' {value if value else ''}")
            if option == "path":
                request.sysfs_path = value
            elif option == "query":
                try:
                    request.query_type = QueryType.parse(value)
                except InvalidQueryTypeError as e:
                    print("unknown query type")
                    return e.errno
            elif option == "root":
                request.root_prefix = True
            elif option == "dump":
                return self.dump()
            elif option == "version":
                print(f"{PROG}, version {__version__}")
                return 0
            elif option == "help":
                self.print_help()
                return 0
            elif option == "unknown":
                print(f"{PROG}: unrecognized argument '{value}'", file=sys.stderr)
                self.print_help()
                return errno.EINVAL

        if parse_error is not None:
            print(f"{PROG}: {parse_error}", file=sys.stderr)
            self.print_help()
            return parse_error.errno

        if request.query_type is not QueryType.NONE:
            return self.query(request)

        if request.root_prefix:
            print(self.config.root)
            return 0

        self.print_help()
        return errno.EINVAL

    def query(self, request: QueryRequest) -> int:
        """Print one field of the record stored for request.sysfs_path."""
        if not request.sysfs_path:
            print("query needs device path specified")
            return errno.EINVAL

        try:
            self.store.open_ro()
        except StoreOpenError as e:
            logger.debug(f"{e}")
            print("unable to open device database")
            return e.errno

        try:
            try:
                record = self.store.get(request.sysfs_path)
            except RecordNotFoundError as e:
                print("device not found in database")
                return e.errno

            root = self.config.root if request.root_prefix else None
            print(project_field(record, request.query_type, root))
            return 0
        finally:
            self.store.close()

    def dump(self) -> int:
        """Print every stored record."""
        try:
            self.store.open_ro()
        except StoreOpenError as e:
            logger.debug(f"{e}")
            print("unable to open device database")
            return e.errno

        try:
            return self.store.dump(print_record)
        finally:
            self.store.close()

    @staticmethod
    def print_help() -> None:
        print(USAGE)
