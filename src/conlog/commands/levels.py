"""conlog levels — list the level table."""

from conlog.levels import format_level_list
from conlog.logger import get_logger


def register(subparsers, parents):
    """Register the 'levels' subcommand."""
    p = subparsers.add_parser(
        "levels",
        parents=parents,
        help="List logging levels (the active one is marked with *)",
    )
    p.set_defaults(func=run)


def run(args):
    """Execute the levels command."""
    print(format_level_list(get_logger().level))
    return 0
