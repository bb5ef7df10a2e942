"""Bridge from the stdlib ``logging`` module into a conlog Logger.

Libraries that log through ``logging.getLogger(...)`` can be made to
print like the rest of the program::

    log = Logger()
    log.globalize()                 # root logger
    log.globalize("urllib3")        # a single library

Records are mapped onto conlog levels by number and titled with the
stdlib logger name. conlog's own threshold then decides what is shown.
"""

import logging
from typing import Optional


def conlog_method(levelno: int) -> str:
    """Logger method for a stdlib level number."""
    if levelno >= logging.ERROR:
        return "error"
    if levelno >= logging.WARNING:
        return "warn"
    if levelno >= logging.INFO:
        return "info"
    if levelno >= logging.DEBUG:
        return "debug"
    return "deep_debug"


class LoggerHandler(logging.Handler):
    """logging.Handler that re-emits records through a conlog Logger."""

    def __init__(self, logger, level=logging.NOTSET) -> None:
        super().__init__(level=level)
        self.logger = logger

    def emit(self, record: logging.LogRecord) -> None:
        try:
            payload = {"title": record.name, "message": record.getMessage()}
            if record.exc_info and record.exc_info[1] is not None:
                payload["error"] = record.exc_info[1]
            getattr(self.logger, conlog_method(record.levelno))(payload)
        except Exception:
            self.handleError(record)


def install_handler(logger, name: Optional[str] = None,
                    level: Optional[int] = logging.DEBUG) -> LoggerHandler:
    """Attach a LoggerHandler to a stdlib logger, replacing earlier ones.

    This changes process-wide state: the stdlib logger gets a new handler,
    its level, and (when named) stops propagating to the root.

    Args:
        logger: conlog Logger receiving the records
        name: stdlib logger name (None = root)
        level: Level set on the stdlib logger so its records reach conlog
            for filtering. None leaves the current level alone.

    Returns:
        The installed handler
    """
    target = logging.getLogger(name)
    for existing in list(target.handlers):
        if isinstance(existing, LoggerHandler):
            target.removeHandler(existing)
    handler = LoggerHandler(logger)
    target.addHandler(handler)
    if level is not None:
        target.setLevel(level)
    if name:
        target.propagate = False
    return handler
