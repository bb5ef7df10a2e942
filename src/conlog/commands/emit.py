"""conlog emit — write one formatted log line.

Useful from shell scripts that want the same look as the Python side::

    conlog emit warn "disk almost full" --title backup --border 30
    conlog --level debug emit debug "payload" --data '{"rows": 42}'
"""

import argparse
import json

from conlog.levels import LEVEL_METHODS, LEVELS, normalize_level_name
from conlog.logger import get_logger


def register(subparsers, parents):
    """Register the 'emit' subcommand."""
    p = subparsers.add_parser(
        "emit",
        parents=parents,
        help="Write one formatted log line",
        description=(
            "Format MESSAGE at LEVEL and write it to the console.\n"
            "Nothing is printed when LEVEL is above the active level."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("level", metavar="LEVEL", type=_level_name,
                   help=f"One of: {', '.join(LEVELS)}")
    p.add_argument("message", nargs="+", metavar="MESSAGE",
                   help="Message text (words are joined with spaces)")
    p.add_argument("--type", default="", metavar="TEXT",
                   help="Shown as [TEXT] after the level tag")
    p.add_argument("--data", default=None, metavar="JSON",
                   help="Value appended after the message (JSON or plain text)")
    p.add_argument("--color", default=None, metavar="NAME",
                   help="Override the level color (e.g. cyanBright)")
    p.add_argument("--border", type=int, default=0, metavar="N",
                   help="Draw a border (N-1 characters) above and below")
    p.add_argument("--indent", type=int, default=0, metavar="N",
                   help="Indent the line by N spaces")
    p.add_argument("--timestamp", action="store_true", default=False,
                   help="Append epoch milliseconds")
    p.add_argument("--muted", action="store_true", default=False,
                   help="Render in the muted color")
    p.set_defaults(func=run)


def _level_name(value):
    name = normalize_level_name(value)
    if name is None:
        raise argparse.ArgumentTypeError(
            f"unknown level '{value}' (choose from {', '.join(LEVELS)})"
        )
    return name


def parse_data(text):
    """Decode --data as JSON, keeping it as a string when it isn't."""
    if text is None:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def build_record(args):
    """Turn parsed arguments into a record mapping for the logger."""
    record = {
        "message": " ".join(args.message),
        "data": parse_data(args.data),
        "type": args.type,
        "indent": args.indent,
        "border_top": args.border,
        "border_bottom": args.border,
        "timestamp": args.timestamp,
        "muted": args.muted,
    }
    if args.title:
        record["title"] = args.title
    if args.color:
        record["color"] = args.color
    return record


def run(args):
    """Execute the emit command."""
    log = get_logger()
    method = getattr(log, LEVEL_METHODS[args.level])
    method(build_record(args))
    return 0
