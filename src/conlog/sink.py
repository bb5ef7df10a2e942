"""
Output sinks.

A sink is anything with ``log/info/warn/error/debug(text)``,
``group(*labels)`` and ``group_end()``. The logger writes every line
through exactly one of those methods, so swapping the sink swaps the
destination (terminal, file, test double) without touching formatting.
"""

import sys
from typing import List, Optional, TextIO, Tuple


class ConsoleSink:
    """Terminal sink: log/info/debug to stdout, warn/error to stderr.

    Groups indent subsequent lines by two spaces per level, the way a
    browser console nests ``console.group()`` output.

    Usage::

        sink = ConsoleSink()
        sink.group("Sync")
        sink.info("[INF] [Sync] 3 files")      # printed indented
        sink.group_end()
    """

    INDENT = "  "

    def __init__(self, stdout: TextIO = None, stderr: TextIO = None):
        self._stdout = stdout
        self._stderr = stderr
        self.depth = 0

    @property
    def stdout(self) -> TextIO:
        # Resolved per call so pytest's capsys and redirect_stdout work
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    def _write(self, stream: TextIO, text: str) -> None:
        pad = self.INDENT * self.depth
        if pad:
            text = "\n".join(pad + line for line in str(text).split("\n"))
        print(text, file=stream)

    def log(self, text: str = "") -> None:
        self._write(self.stdout, text)

    def info(self, text: str = "") -> None:
        self._write(self.stdout, text)

    def debug(self, text: str = "") -> None:
        self._write(self.stdout, text)

    def warn(self, text: str = "") -> None:
        self._write(self.stderr, text)

    def error(self, text: str = "") -> None:
        self._write(self.stderr, text)

    def group(self, *labels) -> None:
        if labels:
            self._write(self.stdout, " ".join(str(label) for label in labels))
        self.depth += 1

    def group_end(self) -> None:
        self.depth = max(0, self.depth - 1)


class MemorySink:
    """Sink that records calls instead of printing them.

    ``calls`` holds ``(method, text)`` tuples in order; group starts are
    recorded as ``('group', label)`` and ends as ``('group_end', '')``.
    """

    def __init__(self):
        self.calls: List[Tuple[str, str]] = []

    def _record(self, method: str, text: str) -> None:
        self.calls.append((method, text))

    def log(self, text: str = "") -> None:
        self._record("log", text)

    def info(self, text: str = "") -> None:
        self._record("info", text)

    def debug(self, text: str = "") -> None:
        self._record("debug", text)

    def warn(self, text: str = "") -> None:
        self._record("warn", text)

    def error(self, text: str = "") -> None:
        self._record("error", text)

    def group(self, *labels) -> None:
        self._record("group", " ".join(str(label) for label in labels))

    def group_end(self) -> None:
        self._record("group_end", "")

    def lines(self, method: Optional[str] = None) -> List[str]:
        """Recorded texts, optionally only those written through ``method``."""
        return [text for m, text in self.calls
                if m not in ("group", "group_end")
                and (method is None or m == method)]

    def clear(self) -> None:
        self.calls.clear()
