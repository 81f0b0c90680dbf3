import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handler = Callable[..., None]


class Signal:
    """synchronous observer list; listeners run in connection order"""

    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: list[Handler] = []

    def connect(self, handler: Handler) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def disconnect(self, handler: Handler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def emit(self, *args: Any) -> None:
        for handler in list(self._handlers):
            try:
                handler(*args)
            except Exception as e:
                logger.exception(f"error in {self.name} listener: {e}")

    def __len__(self) -> int:
        return len(self._handlers)
