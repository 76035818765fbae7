"""
Signal handling for hotplug runs.

The handler installed here only records which signal arrived. The event
coordinator polls for it at safe points and performs the shutdown on its
own execution path, so no teardown code ever runs inside a signal handler.
"""

import logging
import signal
from typing import Any, Callable, Dict, Iterable, Optional, Union

from ..validation import HotplugInterrupted
from .shared_state import TRAPPED_SIGNALS

logger = logging.getLogger(__name__)

_Handler = Union[Callable[[int, Any], Any], int, None]


class SignalHandler:
    """
    Installs flag-setting handlers for the trapped signals and restores the
    previous handlers afterwards.
    """

    def __init__(self, signals: Iterable[int] = TRAPPED_SIGNALS):
        self.signals = tuple(signals)
        self._original_handlers: Dict[int, _Handler] = {}
        self._received: Optional[int] = None

    @property
    def received_signal(self) -> Optional[int]:
        """The first trapped signal delivered since install(), if any."""
        return self._received

    def install(self) -> None:
        """Set up handlers for every trapped signal that can be caught."""
        self._received = None
        for signum in self.signals:
            try:
                self._original_handlers[signum] = signal.signal(signum, self._handle)
            except (OSError, ValueError) as e:
                logger.debug(f"Cannot trap signal {signum}: {e}")
        logger.debug(f"Signal handlers installed for {sorted(self._original_handlers)}")

    def restore(self) -> None:
        """Restore the handlers that were active before install()."""
        for signum, original in self._original_handlers.items():
            try:
                signal.signal(signum, original if original is not None else signal.SIG_DFL)
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to restore handler for signal {signum}: {e}")
        self._original_handlers.clear()
        logger.debug("Signal handlers restored")

    def check(self) -> None:
        """
        Raise HotplugInterrupted if a trapped signal has arrived.

        Raises:
            HotplugInterrupted: carrying the received signal number
        """
        if self._received is not None:
            raise HotplugInterrupted(self._received)

    def _handle(self, signum: int, frame: Any) -> None:
        # Flag only; the first signal wins.
        if self._received is None:
            self._received = signum
