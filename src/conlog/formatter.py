"""
Formatter — turns a resolved LogRecord into console lines.

Composition order for the body line:

    [TAG] [type] [context] [title] message [error] {data} (suffix) > ts

followed by the color/mute styling of the whole line. The body is then
framed by margins, borders and paddings:

    margin_top    blank lines
    border_top    ----------
    padding_top   blank lines
    <indent>body
    stack         (traceback, when the message or error carried one)
    padding_bottom
    border_bottom ----------
    margin_bottom

An empty message produces no output at all. The only exception raised
here is UnknownColorError for a bad color name.
"""

import inspect
import os
import time
from typing import Any, Callable, List, Mapping, Optional, Tuple

from .record import (
    LogRecord, classify_message, error_stack, error_text, to_json,
)
from .styles import MUTED, color_code, paint


PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


def _is_internal(filename: str) -> bool:
    return os.path.abspath(filename).startswith(PACKAGE_DIR + os.sep)


def call_site() -> str:
    """Locate the first stack frame outside this package.

    Returns:
        ``"file.py line:col"`` (column omitted when the interpreter does
        not report one), or ``""`` if every frame is internal.
    """
    frame = inspect.currentframe()
    try:
        while frame is not None and _is_internal(frame.f_code.co_filename):
            frame = frame.f_back
        if frame is None:
            return ""
        info = inspect.getframeinfo(frame, context=0)
        name = os.path.basename(info.filename)
        positions = getattr(info, "positions", None)
        col = getattr(positions, "col_offset", None)
        if col is None:
            return f"{name} {info.lineno}"
        return f"{name} {info.lineno}:{col + 1}"
    finally:
        del frame


def _lookup(obj: Any, key: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def context_prefix(basics: Any) -> str:
    """Request-scoped tag from ``basics.request.loggerPrefix``."""
    request = _lookup(basics, "request")
    prefix = _lookup(request, "loggerPrefix") or _lookup(request, "logger_prefix")
    return str(prefix) if prefix else ""


def _count(value: Any) -> int:
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0


def _indentation(indent: Any) -> str:
    if isinstance(indent, str):
        return indent
    return " " * _count(indent)


class Formatter:
    """Compose LogRecords into lines and write them to a sink.

    Args:
        boring: Disable colors (color names are still validated)
        clock: Returns epoch seconds; used for timestamps
    """

    def __init__(self, boring: bool = False,
                 clock: Callable[[], float] = time.time):
        self.boring = boring
        self.clock = clock

    def compose(self, record: LogRecord, tag: str,
                group_title: str = "") -> Optional[Tuple[str, Optional[str]]]:
        """Build the styled body line and the stack text.

        Returns:
            ``(body, stack)``, or None when there is nothing to print.
        """
        color_code(record.color)

        raw = record.message
        if raw is None or (isinstance(raw, str) and raw == ""):
            raw = record.msg
        text, stack = classify_message(raw).render()
        stack = stack or record.stack

        error = record.error
        if error is not None:
            err_text = error_text(error) if isinstance(error, BaseException) else str(error)
            text = f"{text} [{err_text}]" if text else err_text
            if isinstance(error, BaseException):
                text = error_stack(error) or text

        if record.data is not None:
            data_text = to_json(record.data)
            text = f"{text} {data_text}" if text else data_text

        if text == "":
            return None

        title = record.title or group_title
        if title:
            text = f"[{title}] {text}"

        context = context_prefix(record.basics)
        if context:
            text = f"[{context}] {text}"

        if record.type:
            text = f"[{record.type}] {text}"
        if record.prefix:
            text = f"[{tag}] {text}"

        if isinstance(record.suffix, str):
            if record.suffix:
                text += paint(MUTED, f" ({record.suffix})", boring=self.boring)
        elif record.suffix:
            location = call_site()
            if location:
                text += paint(MUTED, f" ({location})", boring=self.boring)

        if record.ts or record.timestamp:
            millis = int(self.clock() * 1000)
            text += paint(MUTED, f" > {millis}", boring=self.boring)

        line_color = MUTED if record.muted else record.color
        text = paint(line_color, text, boring=self.boring)
        if stack:
            stack = paint(line_color, stack, boring=self.boring)
        return text, stack

    def format(self, record: LogRecord, tag: str,
               group_title: str = "") -> List[str]:
        """All output lines for a record (empty list = no-op)."""
        composed = self.compose(record, tag, group_title)
        if composed is None:
            return []
        body, stack = composed

        # A border of N is N-1 characters wide, drawn at the larger setting
        width = max(_count(record.border_top), _count(record.border_bottom))
        border = paint(record.color,
                       (record.border_char or "-") * max(0, width - 1),
                       boring=self.boring)

        lines = [""] * _count(record.margin_top)
        if _count(record.border_top):
            lines.append(border)
        lines.extend([""] * _count(record.padding_top))
        lines.append(_indentation(record.indent) + body)
        if stack:
            lines.append(stack)
        lines.extend([""] * _count(record.padding_bottom))
        if _count(record.border_bottom):
            lines.append(border)
        lines.extend([""] * _count(record.margin_bottom))
        return lines

    def emit(self, sink: Any, method: str, record: LogRecord, tag: str,
             group_title: str = "") -> int:
        """Format a record and write each line through ``sink.<method>``.

        Returns:
            Number of lines written.
        """
        lines = self.format(record, tag, group_title)
        write = getattr(sink, method)
        for line in lines:
            write(line)
        return len(lines)
