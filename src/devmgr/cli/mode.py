"""
Invocation mode selection.
"""

from typing import Sequence

from ..models.events import InvocationMode


def select_mode(argv: Sequence[str]) -> InvocationMode:
    """
    Decide whether the kernel's hotplug mechanism or a user started us.

    The kernel passes exactly one argument, the subsystem name, which never
    starts with "-". Everything else is an interactive invocation.

    Args:
        argv: Full argument vector, program name first

    Returns:
        InvocationMode.HOTPLUG or InvocationMode.INTERACTIVE
    """
    if len(argv) == 2 and not argv[1].startswith("-"):
        return InvocationMode.HOTPLUG
    return InvocationMode.INTERACTIVE
