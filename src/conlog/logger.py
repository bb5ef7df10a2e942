"""
Logger — leveled console logger facade.

Each severity method checks two pieces of state, ``silent`` and
``level``, then resolves its arguments into a LogRecord and hands it to
the Formatter, which writes through ``logger.console``::

    log = Logger(level="debug")
    log.info("Server", "listening on :8080")
    log.warn("Cache miss", {"key": "user:42"})
    log.debug({"title": "SQL", "message": query, "border_bottom": 40})
    log.warn_throttle("queue is full", 2.0)

    with log.grouped("Migrations"):
        log.info("0007_add_index applied")

Method results chain (every severity method returns the logger).
Assertions return booleans and warn instead of raising; only ``fatal()``
raises.
"""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Optional, Union

from .config import Settings, apply_overrides, load_settings
from .errors import FatalError
from .formatter import Formatter, call_site
from .levels import (
    DEBUG, LEVELS, LEVEL_METHODS, LEVEL_STYLES, coerce_level,
)
from .record import LogRecord
from .shapes import resolve_record, true_type
from .sink import ConsoleSink
from .styles import paint
from .throttle import ThrottleTable


GROUP_TITLE_LIMIT = 25


class Logger:
    """Leveled, colored console logger.

    Args:
        level: Level name or index (default: from settings, "info")
        silent: Start silenced
        console: Sink object (default: ConsoleSink writing to stdout/stderr)
        settings: Preloaded Settings; when None they are resolved from the
            environment and .conlog.json
        boring: Disable colors
        use_console_log: Write every line through ``console.log``
        hide_arguments: Skip the startup and level-change banners
        timer_factory: Timer class for throttling (threading.Timer)
        clock: Epoch-seconds clock used for timestamps
    """

    LEVELS = LEVELS

    def __init__(
        self,
        level: Union[str, int, None] = None,
        silent: Optional[bool] = None,
        console: Any = None,
        settings: Optional[Settings] = None,
        boring: Optional[bool] = None,
        use_console_log: Optional[bool] = None,
        hide_arguments: Optional[bool] = None,
        timer_factory: Callable[..., Any] = threading.Timer,
        clock: Callable[[], float] = time.time,
    ):
        overrides = dict(level=level, silent=silent, boring=boring,
                         use_console_log=use_console_log,
                         hide_arguments=hide_arguments)
        if settings is None:
            settings = load_settings(**overrides)
        else:
            settings = apply_overrides(settings, overrides)

        self.console = console if console is not None else ConsoleSink()
        self.silent = settings.silent
        self.hide_arguments = settings.hide_arguments
        self.is_grouped = False
        self._level = coerce_level(settings.level)
        self._console_log = settings.use_console_log
        self._group_title = ""
        self._formatter = Formatter(boring=settings.boring, clock=clock)
        self._throttle = ThrottleTable(timer_factory)

        if not self.hide_arguments:
            self.console.log(
                f"[LOG] Logging level set to {self._level}"
                f" | is {'' if self.is_debugging else 'not '}debugging"
                f" | is {'' if self.silent else 'not '}silent"
            )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def level(self) -> int:
        """Current threshold index into LEVELS."""
        return self._level

    @level.setter
    def level(self, value: Union[str, int]) -> None:
        if not self.hide_arguments:
            self.console.log(paint(
                "magentaBright",
                f"[LOG] Requested logging level to change to '{value}'",
                bold=True, boring=self.boring,
            ))
        self._level = coerce_level(value)

    @property
    def boring(self) -> bool:
        return self._formatter.boring

    @boring.setter
    def boring(self, value: bool) -> None:
        self._formatter.boring = bool(value)

    @property
    def console_log(self) -> bool:
        return self._console_log

    @console_log.setter
    def console_log(self, value: bool) -> None:
        self._console_log = bool(value)

    @property
    def is_debugging(self) -> bool:
        return self._level >= DEBUG

    @property
    def group_title(self) -> str:
        return self._group_title

    def silence(self) -> "Logger":
        """Stop all output until talk() is called."""
        self.silent = True
        return self

    def talk(self) -> "Logger":
        self.silent = False
        return self

    def enabled_for(self, level_name: str) -> bool:
        """True when a message at ``level_name`` would be written."""
        return not self.silent and self._level >= LEVELS.index(level_name)

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------
    def _do_log(self, level_name: str, args) -> None:
        style = LEVEL_STYLES[level_name]
        method = "log" if self._console_log else style.method
        defaults = LogRecord(color=style.color, suffix=self.is_debugging)
        record = resolve_record(args, defaults)
        self._formatter.emit(self.console, method, record, style.tag,
                             self._group_title)

    def error(self, *args) -> "Logger":
        """Log at level 0 (ERR, red)."""
        if self.enabled_for("error"):
            self._do_log("error", args)
        return self

    def warn(self, *args) -> "Logger":
        """Log at level 1 (WRN, yellow)."""
        if self.enabled_for("warn"):
            self._do_log("warn", args)
        return self

    def highlight(self, *args) -> "Logger":
        """Log at level 2 (HGH, bright yellow)."""
        if self.enabled_for("highlight"):
            self._do_log("highlight", args)
        return self

    def info(self, *args) -> "Logger":
        if self.enabled_for("info"):
            self._do_log("info", args)
        return self

    def log(self, *args) -> "Logger":
        if self.enabled_for("log"):
            self._do_log("log", args)
        return self

    def debug(self, *args) -> "Logger":
        if self.enabled_for("debug"):
            self._do_log("debug", args)
        return self

    def deep_debug(self, *args) -> "Logger":
        """Log at level 6 (DBG, muted); the most verbose level."""
        if self.enabled_for("deepDebug"):
            self._do_log("deepDebug", args)
        return self

    def fatal(self, *args):
        """Log as an error (unless silent), then raise FatalError.

        The exception message is the first argument, so
        ``log.fatal("bad config")`` raises ``FatalError("bad config")``.

        Raises:
            FatalError: always
        """
        if not self.silent:
            self._do_log("error", args)
        raise FatalError(args[0] if args else "")

    # ------------------------------------------------------------------
    # Throttling
    # ------------------------------------------------------------------
    def _throttled_emit(self, method: str, payload: Any) -> None:
        getattr(self, method)(payload)

    def throttle(self, msg: Any, window: float = 1.0,
                 method: str = "log") -> "Logger":
        """Coalesce repeats of ``msg`` into one trailing line per window.

        Args:
            msg: Message string, mapping, or LogRecord
            window: Seconds of silence before the trailing line is written
            method: Level or method name (``'warn'``, ``'deepDebug'`` ...)
        """
        method = LEVEL_METHODS.get(method, method)
        self._throttle.throttle(self._throttled_emit, msg, window, method,
                                call_site())
        return self

    def error_throttle(self, msg: Any, window: float = 1.0) -> "Logger":
        return self.throttle(msg, window, "error")

    def warn_throttle(self, msg: Any, window: float = 1.0) -> "Logger":
        return self.throttle(msg, window, "warn")

    def highlight_throttle(self, msg: Any, window: float = 1.0) -> "Logger":
        return self.throttle(msg, window, "highlight")

    def info_throttle(self, msg: Any, window: float = 1.0) -> "Logger":
        return self.throttle(msg, window, "info")

    def log_throttle(self, msg: Any, window: float = 1.0) -> "Logger":
        return self.throttle(msg, window, "log")

    def debug_throttle(self, msg: Any, window: float = 1.0) -> "Logger":
        return self.throttle(msg, window, "debug")

    def deep_debug_throttle(self, msg: Any, window: float = 1.0) -> "Logger":
        return self.throttle(msg, window, "deep_debug")

    @property
    def pending_throttles(self) -> int:
        return self._throttle.pending

    def close(self) -> None:
        """Cancel pending throttled lines."""
        self._throttle.cancel_all()

    # ------------------------------------------------------------------
    # Grouping
    # ------------------------------------------------------------------
    def group_start(self, *labels) -> "Logger":
        """Open a console group, closing the current one first.

        A string first label becomes the group title, shown as
        ``[title]`` on records that have no title of their own.
        """
        if self.is_grouped:
            self.group_end()
        self.console.group(*labels)
        if labels and isinstance(labels[0], str):
            title = labels[0]
            if len(title) > GROUP_TITLE_LIMIT:
                title = f"{title[:GROUP_TITLE_LIMIT - 3]}..."
            self._group_title = title
        else:
            self._group_title = ""
        self.is_grouped = True
        return self

    def group(self, *labels) -> "Logger":
        return self.group_start(*labels)

    def group_end(self) -> "Logger":
        self.console.group_end()
        self._group_title = ""
        self.is_grouped = False
        return self

    def ungroup(self, *args) -> "Logger":
        return self.group_end()

    def done(self) -> "Logger":
        return self.group_end()

    @contextmanager
    def grouped(self, *labels):
        """Context manager form of group_start()/group_end()."""
        self.group_start(*labels)
        try:
            yield self
        finally:
            self.group_end()

    # ------------------------------------------------------------------
    # Assertions — return bool, warn on failure, never raise
    # ------------------------------------------------------------------
    def assert_(self, *values) -> bool:
        """All values are truthy."""
        if all(values):
            return True
        self.warn("Assertion Failed: There is a falsy value")
        return False

    def assert_one(self, *values) -> bool:
        """At least one value is truthy."""
        if any(values):
            return True
        self.warn("Assertion Failed: No values are truthy")
        return False

    def assert_only_one(self, a, b) -> bool:
        """Exactly one of the two values is truthy."""
        if bool(a) != bool(b):
            return True
        self.warn(f"Assertion Failed: '{a}' is similar to '{b}'")
        return False

    def assert_equal(self, a, b) -> bool:
        if a != b:
            self.warn(f"Assertion Failed: Value {a} is not equal to {b}")
            return False
        return True

    def assert_not_equal(self, a, b) -> bool:
        if a == b:
            self.warn(f"Assertion Failed: Value '{a}' is equal to '{b}'")
            return False
        return True

    def assert_greater_than(self, a, b) -> bool:
        try:
            passed = a > b
        except TypeError:
            passed = False
        if not passed:
            self.warn(f"Assertion Failed: Value {a} is not greater than {b}")
            return False
        return True

    def assert_less_than(self, a, b) -> bool:
        try:
            passed = a < b
        except TypeError:
            passed = False
        if not passed:
            self.warn(f"Assertion Failed: Value {a} is not smaller than {b}")
            return False
        return True

    def assert_length(self, *values) -> bool:
        """Every value has a non-zero len(); values without len() fail."""
        for value in values:
            try:
                length = len(value)
            except TypeError:
                length = 0
            if not length:
                self.warn(f"Assertion Failed: Value '{value}' has no length")
                return False
        return True

    def assert_type(self, value, type_name: str) -> bool:
        """true_type(value) equals ``type_name`` ('string', 'array' ...)."""
        if true_type(value) != type_name:
            self.warn(f"Assertion Failed: Value {value} is not {type_name}")
            return False
        return True

    # ------------------------------------------------------------------
    # Adapters
    # ------------------------------------------------------------------
    def from_exec(self, error, stdout, stderr) -> "Logger":
        """Log the (error, stdout, stderr) result of running a command.

        The error and stderr go to ``error``, stdout to ``debug``; empty
        values are skipped.
        """
        if error:
            self.error(error)
        if stdout:
            self.debug(_exec_text(stdout))
        if stderr:
            self.error(_exec_text(stderr))
        return self

    def globalize(self, name: Optional[str] = None,
                  level: Optional[int] = logging.DEBUG):
        """Route stdlib ``logging`` records for ``name`` into this logger.

        The stdlib logger is set to ``level`` (DEBUG by default, so this
        logger's own threshold does the filtering). Pass None to keep
        the level it already has.

        Returns:
            The installed LoggerHandler
        """
        from .bridge import install_handler
        return install_handler(self, name, level)

    def __repr__(self):
        return f"Logger(level={self._level!r}, silent={self.silent!r})"


def _exec_text(value) -> str:
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8", errors="replace")
    return str(value).rstrip("\n")


# =============================================================================
# Module-level default instance
# =============================================================================

_logger: Optional[Logger] = None


def init_logger(**kwargs: Any) -> Logger:
    """Create the module-level default Logger, replacing any previous one.

    Call once at program startup. Keyword arguments go to Logger().
    """
    global _logger
    if _logger is not None:
        _logger.close()
    _logger = Logger(**kwargs)
    return _logger


def get_logger() -> Logger:
    """Get the module-level Logger, creating it from settings if needed."""
    global _logger
    if _logger is None:
        _logger = Logger()
    return _logger
