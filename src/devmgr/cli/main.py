"""
Command-line entry point for the device manager.

The same program serves two callers. The kernel's hotplug mechanism runs it
with the subsystem name as the only argument and the event in the
environment; an operator runs it with options to query the device database.

Usage:
    devmgr SUBSYSTEM                 (hotplug, ACTION/DEVPATH in environment)
    devmgr [-p PATH] [-q TYPE] [-r] [-d] [-V] [-h]
"""

import errno
import logging
import os
import sys
import tomllib
from typing import Mapping, Optional, Sequence

from .. import __version__
from ..config import get_config, get_config_info
from ..models.events import InvocationMode
from ..orchestration import EventCoordinator
from ..validation import DevmgrError
from .mode import select_mode
from .query import QueryInterface

logger = logging.getLogger(__name__)


def setup_logging(level: str = "WARNING") -> None:
    """
    Configure process-wide logging.

    Logs go to stderr: stdout carries query and dump output.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )


def main(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    configure_logging: bool = False,
) -> int:
    """
    Run the device manager for one invocation.

    Args:
        argv: Full argument vector, program name first; defaults to sys.argv
        environ: Process environment; defaults to os.environ
        configure_logging: Apply the configured log level to the root logger

    Returns:
        Process exit code
    """
    argv = list(sys.argv if argv is None else argv)
    environ = os.environ if environ is None else environ

    try:
        config = get_config(environ)
    except (DevmgrError, tomllib.TOMLDecodeError, OSError) as e:
        print(f"unable to load configuration: {e}", file=sys.stderr)
        return errno.EINVAL

    if configure_logging:
        setup_logging(config.log_level)

    logger.debug(f"version {__version__}")
    logger.debug(f"Configuration: {get_config_info(environ)}")

    if select_mode(argv) is InvocationMode.HOTPLUG:
        logger.debug("called by hotplug")
        return EventCoordinator(config).run_hotplug(argv[1], environ)

    logger.debug("called by user")
    return QueryInterface(config).run_interactive(argv[1:])


def main_cli() -> None:
    """Console script entry point."""
    setup_logging()
    sys.exit(main(configure_logging=True))


if __name__ == "__main__":
    main_cli()
