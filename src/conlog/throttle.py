"""
Throttle coalescer — trailing-edge debounce for repeated messages.

The first call for a key is logged straight away and arms a timer. Every
further call inside the window replaces the pending payload and restarts
the timer. When the window passes in silence, the last payload is logged
once more, tagged ``Throttled - <call site>``::

    t=0.0  warn_throttle("disk low")   → logged now, timer armed
    t=0.2  warn_throttle("disk low")   → timer reset
    t=0.4  warn_throttle("disk low")   → timer reset
    t=1.4  (silence)                   → logged again, entry removed

So N rapid calls give exactly two lines: the first and a trailing one.
Keys are ``method + message`` and the table belongs to one logger, so
two loggers never swallow each other's messages.
"""

import itertools
import threading
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Mapping

from .record import LogRecord


THROTTLED_PREFIX = "Throttled - "


@dataclass
class ThrottleEntry:
    """Pending trailing emission for one key."""
    timer: Any
    payload: Any
    site: str
    token: int


def message_text(payload: Any) -> str:
    """Text used in the throttle key for a payload."""
    if isinstance(payload, LogRecord):
        value = payload.message or payload.msg
    elif isinstance(payload, Mapping):
        value = payload.get("message") or payload.get("msg") or ""
    else:
        value = payload
    return "" if value is None else str(value)


def with_suffix(payload: Any, suffix: str) -> Any:
    """Copy of the payload carrying ``suffix``; strings become mappings."""
    if isinstance(payload, LogRecord):
        return replace(payload, suffix=suffix)
    if isinstance(payload, Mapping):
        copied = dict(payload)
        copied["suffix"] = suffix
        return copied
    return {"message": payload, "suffix": suffix}


class ThrottleTable:
    """Per-logger table of pending throttle timers.

    Args:
        timer_factory: Called as ``timer_factory(seconds, func, args=...)``
            and must return an object with ``start()`` and ``cancel()``.
            Defaults to threading.Timer.
    """

    def __init__(self, timer_factory: Callable[..., Any] = threading.Timer):
        self._timer_factory = timer_factory
        self._entries: Dict[str, ThrottleEntry] = {}
        self._lock = threading.Lock()
        self._tokens = itertools.count(1)

    def throttle(self, emit: Callable[[str, Any], Any], payload: Any,
                 window: float = 1.0, method: str = "log",
                 site: str = "") -> None:
        """Log now if the key is idle, otherwise defer to the window's end.

        Args:
            emit: ``emit(method, payload)`` performs the actual logging
            payload: Message string, mapping, or LogRecord
            window: Seconds of silence before the trailing emission
            method: Logger method name (``'warn'``, ``'debug'`` ...)
            site: Caller location shown in the trailing suffix

        The timer is armed only after an immediate emit returns, so a
        payload that fails to log (a bad color, say) leaves nothing pending.
        """
        key = method + message_text(payload)
        with self._lock:
            idle = key not in self._entries
        if idle:
            emit(method, payload)

        with self._lock:
            previous = self._entries.pop(key, None)
            if previous is not None:
                previous.timer.cancel()
            token = next(self._tokens)
            timer = self._timer_factory(window, self._fire,
                                        args=(key, token, emit, method))
            if hasattr(timer, "daemon"):
                timer.daemon = True
            self._entries[key] = ThrottleEntry(timer, payload, site, token)
            timer.start()

    def _fire(self, key: str, token: int, emit: Callable[[str, Any], Any],
              method: str) -> None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.token != token:
                return
            del self._entries[key]
        emit(method, with_suffix(entry.payload, THROTTLED_PREFIX + entry.site))

    @property
    def pending(self) -> int:
        """Number of keys waiting for a trailing emission."""
        with self._lock:
            return len(self._entries)

    def cancel_all(self) -> None:
        """Drop every pending trailing emission."""
        with self._lock:
            entries = list(self._entries.values())
            self._entries.clear()
        for entry in entries:
            entry.timer.cancel()
