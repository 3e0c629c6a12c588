from __future__ import annotations

import logging
import threading
from typing import Any, Optional, Protocol

from ..core.enums import ChangeType
from .events import ChangeEvent

logger = logging.getLogger(__name__)


class Observer(Protocol):
    """A connected client that can receive text frames."""

    @property
    def is_open(self) -> bool:
        raise NotImplementedError

    def send_text(self, text: str) -> None:
        raise NotImplementedError


class ChangeNotifier:
    """Fan-out of change events to every registered observer.

    Delivery is best effort. A failing observer is logged and skipped for
    that message only; it stays registered until its transport reports
    the connection closed and calls :meth:`unregister`.
    """

    def __init__(self):
        self._observers: list[Observer] = []
        self._lock = threading.Lock()

    def register(self, observer: Observer) -> None:
        with self._lock:
            self._observers.append(observer)
            count = len(self._observers)
        logger.debug("Observer registered, total=%d", count)

    def unregister(self, observer: Observer) -> None:
        with self._lock:
            try:
                self._observers.remove(observer)
            except ValueError:
                return
            count = len(self._observers)
        logger.debug("Observer unregistered, remaining=%d", count)

    def observer_count(self) -> int:
        with self._lock:
            return len(self._observers)

    def broadcast(self, change_type: ChangeType, data: Optional[Any] = None) -> int:
        """Send to all open observers; returns how many sends succeeded."""
        message = ChangeEvent(type=change_type, data=data).to_json()

        with self._lock:
            observers = list(self._observers)

        delivered = 0
        for observer in observers:
            if not observer.is_open:
                continue
            try:
                observer.send_text(message)
                delivered += 1
            except Exception as e:
                logger.warning("Failed to push %s to observer: %s", change_type.value, e)
        return delivered
