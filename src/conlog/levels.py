"""
Severity level table.

Levels are an ordered tuple of names. The logger stores its threshold as
an index into that tuple and the emit rule is simple:

    logger.level >= LEVELS.index(message_level)  →  message is shown

Level assignments:
    ←── quieter ──────────────── default ──────────────── louder ──→
      0      1       2          3      4      5        6
    error  warn  highlight    info   log   debug  deepDebug
"""

from dataclasses import dataclass
from typing import Dict, Optional, Union


LEVELS = (
    "error",
    "warn",
    "highlight",
    "info",
    "log",
    "debug",
    "deepDebug",
)

DEFAULT_LEVEL = "info"

# Spellings accepted from config files and the command line
LEVEL_ALIASES = {
    "deep_debug": "deepDebug",
    "warning": "warn",
}

ERROR = LEVELS.index("error")
WARN = LEVELS.index("warn")
HIGHLIGHT = LEVELS.index("highlight")
INFO = LEVELS.index("info")
LOG = LEVELS.index("log")
DEBUG = LEVELS.index("debug")
DEEP_DEBUG = LEVELS.index("deepDebug")


@dataclass(frozen=True)
class LevelStyle:
    """How a severity is rendered.

    Attributes:
        tag: Three-letter tag shown as ``[TAG]`` in front of the message
        method: Sink method the lines are written through
        color: Default color name (None = terminal default)
    """
    tag: str
    method: str
    color: Optional[str] = None


LEVEL_STYLES: Dict[str, LevelStyle] = {
    "error":     LevelStyle("ERR", "error", "red"),
    "warn":      LevelStyle("WRN", "warn", "yellow"),
    "highlight": LevelStyle("HGH", "info", "yellowBright"),
    "info":      LevelStyle("INF", "info"),
    "log":       LevelStyle("LOG", "log"),
    "debug":     LevelStyle("DBG", "debug", "magenta"),
    "deepDebug": LevelStyle("DBG", "debug", "blackBright"),
}

# Logger method name for each level
LEVEL_METHODS = {
    "error": "error",
    "warn": "warn",
    "highlight": "highlight",
    "info": "info",
    "log": "log",
    "debug": "debug",
    "deepDebug": "deep_debug",
}


def normalize_level_name(name: str) -> Optional[str]:
    """Map a level name or alias to its canonical name, or None."""
    if name in LEVELS:
        return name
    lowered = name.lower()
    if lowered in LEVEL_ALIASES:
        return LEVEL_ALIASES[lowered]
    for level in LEVELS:
        if level.lower() == lowered:
            return level
    return None


def rank(name: str) -> int:
    """Return the index of a level name.

    Raises:
        KeyError: if the name is not a known level
    """
    canonical = normalize_level_name(name)
    if canonical is None:
        raise KeyError(name)
    return LEVELS.index(canonical)


def coerce_level(value: Union[str, int, None]) -> int:
    """Turn a level name, index, or numeric string into an index.

    Numbers are taken as-is (no clamping: a level above 6 simply shows
    everything). Unknown names fall back to 0, which only lets errors
    through.
    """
    if value is None:
        return LEVELS.index(DEFAULT_LEVEL)
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    canonical = normalize_level_name(text)
    return LEVELS.index(canonical) if canonical else 0


def format_level_list(current: Optional[int] = None) -> str:
    """Format the level table for display.

    Args:
        current: Active level index; marked with ``*`` when given.

    Returns:
        Formatted string listing every level with its index and tag.
    """
    lines = ["Available levels:"]
    width = max(len(name) for name in LEVELS)
    for index, name in enumerate(LEVELS):
        marker = "*" if current is not None and index == current else " "
        tag = LEVEL_STYLES[name].tag
        lines.append(f" {marker}{index}  {name:<{width}}  [{tag}]")
    return "\n".join(lines)
