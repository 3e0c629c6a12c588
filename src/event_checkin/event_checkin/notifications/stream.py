from __future__ import annotations

import logging
import queue
from typing import Iterator

from ..core.constants import DEFAULT_BROADCAST_SEND_TIMEOUT, DEFAULT_STREAM_QUEUE_SIZE
from .notifier import ChangeNotifier

logger = logging.getLogger(__name__)

_CLOSE = object()


class QueueObserver:
    """Observer backed by a bounded queue, drained by one HTTP stream.

    ``send_text`` waits at most ``send_timeout`` seconds for room in the
    queue and raises :class:`queue.Full` otherwise.
    """

    def __init__(self, *, maxsize: int = DEFAULT_STREAM_QUEUE_SIZE, send_timeout: float = DEFAULT_BROADCAST_SEND_TIMEOUT):
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
        self._send_timeout = float(send_timeout)
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open

    def send_text(self, text: str) -> None:
        self._queue.put(text, timeout=self._send_timeout)

    def close(self) -> None:
        self._open = False
        try:
            self._queue.put_nowait(_CLOSE)
        except queue.Full:
            # Reader is behind; it stops at the next keep-alive check
            pass

    def frames(self, *, keepalive: float = 15.0) -> Iterator[str]:
        """Yield server-sent-event frames until :meth:`close` is called."""
        while self._open:
            try:
                item = self._queue.get(timeout=keepalive)
            except queue.Empty:
                yield ": keep-alive\n\n"
                continue
            if item is _CLOSE:
                break
            yield f"data: {item}\n\n"


def stream_changes(notifier: ChangeNotifier, observer: QueueObserver, *, keepalive: float = 15.0) -> Iterator[str]:
    """Register ``observer`` for the lifetime of the returned generator.

    The generator is closed by the server when the client disconnects;
    that is the connection-closed signal that unregisters the observer.
    """
    notifier.register(observer)
    try:
        yield ": connected\n\n"
        yield from observer.frames(keepalive=keepalive)
    finally:
        observer.close()
        notifier.unregister(observer)
        logger.debug("Change stream closed")
