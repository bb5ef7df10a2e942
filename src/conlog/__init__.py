"""
conlog — leveled console logger.

Prefixes, colors, indents, borders, groups and throttles messages
written to the terminal.

Public API:
    Logger           — the logger facade
    init_logger      — create the module-level default logger
    get_logger       — access (or lazily create) the default logger
    LogRecord        — typed per-call options
    ConsoleSink      — default stdout/stderr sink
    MemorySink       — recording sink for tests
    Settings         — startup configuration
    load_settings    — resolve Settings from env and .conlog.json
    LEVELS           — ordered level names
    FatalError       — raised by Logger.fatal()
    UnknownColorError — raised for bad color names
"""

from conlog._version import __version__, __app_name__
from conlog.config import Settings, load_settings
from conlog.errors import ConlogError, FatalError, UnknownColorError
from conlog.levels import LEVELS
from conlog.logger import Logger, get_logger, init_logger
from conlog.record import LogRecord
from conlog.sink import ConsoleSink, MemorySink

__all__ = [
    "__version__", "__app_name__",
    "Logger", "init_logger", "get_logger",
    "LogRecord", "ConsoleSink", "MemorySink",
    "Settings", "load_settings", "LEVELS",
    "ConlogError", "FatalError", "UnknownColorError",
]
