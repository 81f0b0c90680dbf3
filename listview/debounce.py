"""
Keyed cancellable delays on the running asyncio loop.

Scheduling a key that already has a pending call cancels that call first,
so at most one call per key is ever pending.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class DelayState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    FIRED = "fired"


class Debouncer:
    """cancel-and-restart delay per key"""

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.TimerHandle] = {}
        self._states: dict[str, DelayState] = {}

    def schedule(self, key: str, delay_ms: int, callback: Callable[[], None]) -> None:
        self.cancel(key)

        loop = asyncio.get_running_loop()
        self._pending[key] = loop.call_later(
            delay_ms / 1000, self._execute_callback, key, callback
        )
        self._states[key] = DelayState.PENDING

    def _execute_callback(self, key: str, callback: Callable[[], None]) -> None:
        self._pending.pop(key, None)
        self._states[key] = DelayState.FIRED

        try:
            callback()
        except Exception as e:
            logger.exception(f"error in debounced callback '{key}': {e}")

    def cancel(self, key: str) -> bool:
        handle = self._pending.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        self._states[key] = DelayState.IDLE
        return True

    def cancel_all(self) -> None:
        for key in list(self._pending):
            self.cancel(key)

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    def state(self, key: str) -> DelayState:
        return self._states.get(key, DelayState.IDLE)
