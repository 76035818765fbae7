"""
Invocation models: how the process was called and what it was asked to do.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from ..validation import InvalidQueryTypeError


class InvocationMode(Enum):
    """Whether the kernel or an operator started the process."""

    HOTPLUG = "hotplug"
    INTERACTIVE = "interactive"


class Action(Enum):
    """Hotplug action carried in the ``ACTION`` environment variable."""

    ADD = "add"
    REMOVE = "remove"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> "Action":
        if value == cls.ADD.value:
            return cls.ADD
        if value == cls.REMOVE.value:
            return cls.REMOVE
        return cls.UNKNOWN


@dataclass(frozen=True)
class HotplugEvent:
    """
    A single kernel hotplug event.

    ``raw_action`` keeps the original ``ACTION`` string so that unknown
    actions can be reported verbatim.
    """

    action: Action
    raw_action: str
    devpath: str
    subsystem: str
    seqnum: Optional[str] = None

    @classmethod
    def from_environ(cls, environ: Mapping[str, str], subsystem: str) -> "HotplugEvent":
        raw_action = environ["ACTION"]
        return cls(
            action=Action.parse(raw_action),
            raw_action=raw_action,
            devpath=environ["DEVPATH"],
            subsystem=subsystem,
            seqnum=environ.get("SEQNUM"),
        )


class QueryType(Enum):
    """Field of a device record requested with ``-q``."""

    NONE = "none"
    NAME = "name"
    SYMLINK = "symlink"
    OWNER = "owner"
    GROUP = "group"

    @classmethod
    def parse(cls, value: str) -> "QueryType":
        """
        Parse a ``-q`` argument. Matching is exact and case-sensitive.

        Raises:
            InvalidQueryTypeError: For anything but name, symlink, owner, group
        """
        for query_type in (cls.NAME, cls.SYMLINK, cls.OWNER, cls.GROUP):
            if value == query_type.value:
                return query_type
        raise InvalidQueryTypeError(value)


@dataclass
class QueryRequest:
    """Interactive query accumulated from command line options."""

    query_type: QueryType = QueryType.NONE
    sysfs_path: str = ""
    root_prefix: bool = False
