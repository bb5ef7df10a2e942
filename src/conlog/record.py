"""
LogRecord options struct and message variants.

A LogRecord is built fresh for every call and thrown away once the
formatter has written it. Callers can pass one directly instead of
relying on positional argument shapes::

    log.info(LogRecord(title="sync", message="done", border_bottom=20))

The message itself can be text, a zero-argument callable, an exception,
or a structure. classify_message() decides which once, at the call
boundary, and the formatter only ever sees the resulting variant.
"""

import json
import re
import traceback
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union


class _Unset:
    """Marks a field the caller left alone (falsy, so it formats as off)."""

    def __bool__(self):
        return False

    def __repr__(self):
        return "UNSET"


UNSET = _Unset()


@dataclass
class LogRecord:
    """Resolved per-call configuration.

    Attributes:
        title: Shown as ``[title]`` before the message
        message: Text, callable, exception, or structure to log
        msg: Alias of ``message`` (used when message is empty)
        data: Extra value serialized after the message
        type: Shown as ``[type]`` after the level tag
        color: Color name for the whole line (None = no color; left unset,
            the level color)
        indent: Literal string, or number of spaces, before the body line
        prefix: Show the ``[TAG]`` level prefix
        suffix: A literal suffix string, or True for the caller's file:line
            (left unset, on only while the logger is debugging)
        margin_top / margin_bottom: Blank lines outside the borders
        padding_top / padding_bottom: Blank lines inside the borders
        border_top / border_bottom: Border lines; the wider one sets the
            length at N-1 characters (0 = no border)
        border_char: Character repeated to draw borders
        ts / timestamp: Append epoch milliseconds
        muted: Render in the muted (gray) color, overriding ``color``
        stack: Traceback text printed after the body
        error: Exception whose text is appended to the message
        basics: Request-scoped context (``request.loggerPrefix``)
    """
    title: str = ""
    message: Any = ""
    msg: Any = ""
    data: Any = None
    type: str = ""
    color: Any = UNSET
    indent: Union[int, str] = 0
    prefix: bool = True
    suffix: Any = UNSET
    margin_top: int = 0
    margin_bottom: int = 0
    padding_top: int = 0
    padding_bottom: int = 0
    border_top: int = 0
    border_bottom: int = 0
    border_char: str = "-"
    ts: bool = False
    timestamp: bool = False
    muted: bool = False
    stack: Optional[str] = None
    error: Optional[BaseException] = None
    basics: Any = None


RECORD_FIELDS = frozenset(f.name for f in fields(LogRecord))

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def field_name(key: str) -> str:
    """Convert ``marginTop`` style keys to ``margin_top``."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def record_values(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    """Pick the LogRecord fields out of a mapping.

    Keys may be camelCase or snake_case. Unknown keys are dropped.
    """
    values = {}
    for key, value in mapping.items():
        name = field_name(str(key))
        if name in RECORD_FIELDS:
            values[name] = value
    return values


def merge_record(record: LogRecord, values: Mapping[str, Any]) -> LogRecord:
    """Return a copy of ``record`` with ``values`` applied."""
    return replace(record, **record_values(values))


# =============================================================================
# Message variants
# =============================================================================

@dataclass
class Text:
    text: str

    def render(self) -> Tuple[str, Optional[str]]:
        return self.text, None


@dataclass
class Lazy:
    func: Callable[[], Any]

    def render(self) -> Tuple[str, Optional[str]]:
        return classify_message(self.func(), allow_lazy=False).render()


@dataclass
class Fault:
    error: BaseException

    def render(self) -> Tuple[str, Optional[str]]:
        return error_text(self.error), error_stack(self.error)


@dataclass
class Structured:
    value: Any

    def render(self) -> Tuple[str, Optional[str]]:
        return to_json(self.value), None


Message = Union[Text, Lazy, Fault, Structured]


def classify_message(value: Any, allow_lazy: bool = True) -> Message:
    """Resolve a raw message value into exactly one variant.

    Args:
        value: Whatever the caller passed as the message
        allow_lazy: Treat callables as lazy messages. Disabled for the
            value a lazy message returns, so it is called only once.

    Returns:
        Text, Lazy, Fault, or Structured
    """
    if value is None:
        return Text("")
    if isinstance(value, str):
        return Text(value)
    if isinstance(value, BaseException):
        return Fault(value)
    if isinstance(value, (bytes, bytearray)):
        return Text(bytes(value).decode("utf-8", errors="replace"))
    if isinstance(value, (Mapping, list, tuple)):
        return Structured(value)
    if callable(value) and allow_lazy:
        return Lazy(value)
    return Text(str(value))


def error_text(error: BaseException) -> str:
    """Message text of an exception, falling back to its class name."""
    return str(error) or type(error).__name__


def error_stack(error: BaseException) -> Optional[str]:
    """Formatted traceback of a raised exception, or None if never raised."""
    if error.__traceback__ is None:
        return None
    lines = traceback.format_exception(type(error), error, error.__traceback__)
    return "".join(lines).rstrip("\n")


def to_json(value: Any) -> str:
    """Compact JSON; values JSON can't express fall back to str().

    Structures JSON rejects outright (non-string keys such as tuples,
    circular references) are shown with repr() instead.
    """
    try:
        return json.dumps(value, default=str, separators=(",", ":"))
    except (TypeError, ValueError):
        return repr(value)
