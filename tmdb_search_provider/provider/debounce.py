"""Timer-based debouncing on the running asyncio loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from ..common.validation import require_non_negative


LOGGER = logging.getLogger(__name__)


class RequestDebouncer:
    """Run only the most recent of a burst of scheduled actions.

    Each :meth:`schedule` call cancels the previously armed timer, so an action
    fires only once the caller has been quiet for ``delay`` seconds.
    """

    def __init__(self, delay: float) -> None:
        self._delay = require_non_negative(delay, name="delay")
        self._handle: asyncio.TimerHandle | None = None
        self._closed = False

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """Whether a timer is armed and has not fired yet."""

        return self._handle is not None

    def schedule(self, action: Callable[[], object], delay: float | None = None) -> None:
        """Arm a timer for *action*, superseding any pending one."""

        if self._closed:
            raise RuntimeError("debouncer has been closed")
        wait = self._delay if delay is None else require_non_negative(delay, name="delay")
        self.cancel_pending()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(wait, self._fire, action)

    def cancel_pending(self) -> bool:
        """Cancel the armed timer; return ``True`` if one was cancelled."""

        handle, self._handle = self._handle, None
        if handle is None:
            return False
        handle.cancel()
        LOGGER.debug("Cancelled pending debounced action.")
        return True

    def close(self) -> None:
        """Cancel any pending action and refuse further scheduling."""

        self.cancel_pending()
        self._closed = True

    def _fire(self, action: Callable[[], object]) -> None:
        self._handle = None
        action()


__all__ = ["RequestDebouncer"]
