"""
Data models for the device manager.

Configuration Models:
- Global settings and naming rules

Invocation Models:
- Invocation mode, hotplug events and interactive queries

Record Models:
- Device records kept by the record store
"""

from .config import NamingRule, UdevConfig
from .events import Action, HotplugEvent, InvocationMode, QueryRequest, QueryType
from .records import DeviceRecord

__all__ = [
    # Configuration
    "NamingRule",
    "UdevConfig",
    # Invocation
    "Action",
    "HotplugEvent",
    "InvocationMode",
    "QueryRequest",
    "QueryType",
    # Records
    "DeviceRecord",
]
