"""Pure Python signal system for the listing viewmodels.

``Signal`` fans a call out to connected handlers; ``ObservableProperty``
emits ``changed(new, old)`` when its value is replaced by an unequal one.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Generic, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class Signal:
    """Observer-style callback list.

    A handler that raises is logged and skipped so that the remaining
    handlers still run.
    """

    def __init__(self, name: str = "") -> None:
        self._name = name
        self._handlers: list[Callable] = []
        self._lock = threading.Lock()

    def connect(self, handler: Callable) -> Callable:
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)
        return handler

    def disconnect(self, handler: Callable) -> None:
        with self._lock:
            self._handlers.remove(handler)

    def disconnect_all(self) -> None:
        with self._lock:
            self._handlers.clear()

    def emit(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(*args, **kwargs)
            except Exception:
                _logger.exception("Handler %r of signal %s failed", handler, self._name or "<anonymous>")

    @property
    def handler_count(self) -> int:
        with self._lock:
            return len(self._handlers)


class ObservableProperty(Generic[T]):
    """Value holder that announces changes."""

    def __init__(self, initial_value: T) -> None:
        self._value = initial_value
        self.changed = Signal()

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        self.set(new_value)

    def set(self, new_value: T) -> bool:
        """Store *new_value*; return ``True`` when it differed from the old one."""
        if self._value == new_value:
            return False
        old_value = self._value
        self._value = new_value
        self.changed.emit(new_value, old_value)
        return True
