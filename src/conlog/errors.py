"""Exceptions raised by conlog.

Formatting degrades instead of failing, so the list is short: a bad color
name is a configuration mistake worth stopping for, and ``fatal()`` raises
by contract. Everything else (empty messages, failed assertions) is
handled without an exception.
"""


class ConlogError(Exception):
    """Base class for conlog exceptions."""


class UnknownColorError(ConlogError, ValueError):
    """A record asked for a color name the style table does not know."""

    def __init__(self, color):
        self.color = color
        super().__init__(f"Unknown color: {color!r}")


class FatalError(ConlogError, TypeError):
    """Raised by ``Logger.fatal()`` after the message has been logged."""
