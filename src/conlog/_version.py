"""
Version information for conlog.

setup.py reads ``__version__`` from here, so bump it in this file only.
"""

__version__ = "0.3.0"
__app_name__ = "conlog"

VERSION_INFO = tuple(int(part) for part in __version__.split("."))
