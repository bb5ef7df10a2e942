"""Command-line entry point for conlog.

Implements a Docker-style two-pass argument parser:
  1. First pass: extract global flags (--level, --silent, --no-color ...)
  2. Second pass: dispatch to a subcommand

Global flags can appear before OR after the subcommand:
  conlog --level debug emit info "hello"      # works
  conlog emit info "hello" --level debug      # also works

Everything after a bare ``--`` belongs to the subcommand, so
``conlog exec -- ls -l`` does not read ``-l`` as ``--level``.

Subcommands self-register via register(subparsers, parents) convention.
"""

import argparse
import sys

from conlog._version import __app_name__, __version__
from conlog.errors import ConlogError


# ---------------------------------------------------------------------------
# Global flags (Docker-style: can precede the subcommand)
# ---------------------------------------------------------------------------
GLOBAL_FLAGS = {
    "--level": {"aliases": ["-l"], "metavar": "LEVEL", "default": None,
                "help": "Logging level name or index (default: LOG_LEVEL or info)"},
    "--silent": {"action": "store_true", "default": None,
                 "help": "Start silenced (only fatal errors raise)"},
    "--no-color": {"action": "store_true", "default": None,
                   "help": "Disable colored output (same as BORING_LOG=true)"},
    "--console-log": {"action": "store_true", "default": None,
                      "help": "Write every line to stdout"},
    "--show-arguments": {"action": "store_true", "default": False,
                         "help": "Print the logging level banner at startup"},
}


def _split_passthrough(argv):
    """Split argv at the first bare '--'."""
    if "--" in argv:
        index = argv.index("--")
        return argv[:index], argv[index:]
    return argv, []


def _extract_global_flags(argv):
    """Two-pass parse: pull global flags from anywhere before '--'.

    Returns (global_namespace, remaining_argv).
    """
    head, passthrough = _split_passthrough(list(argv))
    global_parser = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
    for flag, kwargs in GLOBAL_FLAGS.items():
        kw = {k: v for k, v in kwargs.items() if k != "aliases"}
        global_parser.add_argument(flag, *kwargs.get("aliases", []), **kw)

    global_args, remaining = global_parser.parse_known_args(head)
    return global_args, remaining + passthrough


def _build_common_parser():
    """Shared arguments inherited by every subcommand."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--title", metavar="TEXT", default=None,
                        help="Title shown as [TEXT] before each message")
    return common


# ---------------------------------------------------------------------------
# Subcommand discovery and registration
# ---------------------------------------------------------------------------
def _discover_commands():
    """Import and return all command modules.

    Each module in conlog.commands must export:
      register(subparsers, parents) — add itself to the subparser
      run(args) — execute the command, returning an exit code
    """
    from conlog.commands import emit, execute, levels
    return [emit, execute, levels]


def _build_parser(commands, common_parser):
    """Build the main argparse parser with subcommand dispatch."""
    parser = argparse.ArgumentParser(
        prog="conlog",
        description="conlog — leveled console logger",
        epilog=(
            "Run 'conlog <command> --help' for details on a specific command.\n"
            "\n"
            "Global flags (--level, --silent, --no-color, --console-log)\n"
            "can appear before or after the subcommand."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"{__app_name__} {__version__}",
    )

    # Add global flags to main parser too (for --help display)
    for flag, kwargs in GLOBAL_FLAGS.items():
        kw = {k: v for k, v in kwargs.items() if k != "aliases"}
        parser.add_argument(flag, *kwargs.get("aliases", []), **kw)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    for cmd_module in commands:
        cmd_module.register(subparsers, parents=[common_parser])

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main(argv=None):
    """Main entry point for the conlog CLI.

    Args:
        argv: Command-line arguments. None means sys.argv[1:].

    Returns:
        Exit code (0 = success).
    """
    if argv is None:
        argv = sys.argv[1:]

    # Pass 1: extract global flags from anywhere in the arg list
    global_args, remaining = _extract_global_flags(argv)

    from conlog.logger import init_logger
    init_logger(
        level=global_args.level,
        silent=global_args.silent,
        boring=global_args.no_color,
        use_console_log=global_args.console_log,
        hide_arguments=not global_args.show_arguments,
    )

    # Pass 2: parse subcommand + its own args
    common_parser = _build_common_parser()
    commands = _discover_commands()
    parser = _build_parser(commands, common_parser)

    if not remaining:
        parser.print_help()
        return 0

    args = parser.parse_args(remaining)

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    try:
        return args.func(args) or 0
    except ConlogError as e:
        print(f"conlog: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
