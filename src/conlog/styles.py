"""Color-name lookup over colorama.

Color names follow the usual terminal palette: ``red``, ``yellow`` ...
plus a ``Bright`` variant of each (``yellowBright``, ``blackBright``).
``gray``/``grey`` are accepted for ``blackBright``.
"""

from typing import Optional

from colorama import Fore, Style, just_fix_windows_console

from .errors import UnknownColorError

just_fix_windows_console()


_BASE_COLORS = ("black", "red", "green", "yellow", "blue", "magenta",
                "cyan", "white")

COLORS = {}
for _name in _BASE_COLORS:
    COLORS[_name] = getattr(Fore, _name.upper())
    COLORS[f"{_name}Bright"] = getattr(Fore, f"LIGHT{_name.upper()}_EX")
COLORS["gray"] = COLORS["grey"] = Fore.LIGHTBLACK_EX

MUTED = "blackBright"


def color_code(color: Optional[str]) -> str:
    """ANSI sequence for a color name ('' for None/empty).

    Raises:
        UnknownColorError: if the name is not in the palette
    """
    if not color:
        return ""
    try:
        return COLORS[color]
    except KeyError:
        raise UnknownColorError(color) from None


def paint(color: Optional[str], text: str, bold: bool = False,
          boring: bool = False) -> str:
    """Wrap text in a color (and optionally bold).

    The color name is checked even when ``boring`` disables styling, so a
    typo shows up on the first call rather than when colors are turned on.
    """
    code = color_code(color)
    if boring or not code:
        return text
    weight = Style.BRIGHT if bold else ""
    return f"{weight}{code}{text}{Style.RESET_ALL}"
