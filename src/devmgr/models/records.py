"""
Device record model.

A device record is what the naming policy produced for one sysfs device and
what the record store keeps for later queries.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional


@dataclass
class DeviceRecord:
    """
    Persisted naming result for a single device.

    Attributes:
        path: sysfs device path, the record's key (e.g. ``/class/tty/ttyS0``)
        name: device node name relative to the device root
        symlink: space-joined list of symlink names relative to the device root
        owner: owner user name of the node
        group: owner group name of the node
        mode: permission bits applied to the node
        major: device major number, None when the device has no node
        minor: device minor number, None when the device has no node
    """

    path: str
    name: str
    symlink: str = ""
    owner: str = "root"
    group: str = "root"
    mode: int = 0o666
    major: Optional[int] = None
    minor: Optional[int] = None

    @property
    def symlinks(self) -> List[str]:
        return self.symlink.split()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeviceRecord":
        return cls(
            path=data["path"],
            name=data.get("name") or "",
            symlink=data.get("symlink") or "",
            owner=data.get("owner") or "",
            group=data.get("group") or "",
            mode=data["mode"] if data.get("mode") is not None else 0o666,
            major=data.get("major"),
            minor=data.get("minor"),
        )
