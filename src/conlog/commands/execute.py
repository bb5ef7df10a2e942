"""conlog exec — run a command and log its result.

The command's stdout is logged at debug, its stderr and any failure at
error, through Logger.from_exec()::

    conlog --level debug exec -- git status --short

The exit code is the command's own (127 when it cannot be started).
"""

import argparse
import shlex
import subprocess

from conlog.logger import get_logger


def register(subparsers, parents):
    """Register the 'exec' subcommand."""
    p = subparsers.add_parser(
        "exec",
        parents=parents,
        help="Run a command and log its output",
        description=(
            "Run COMMAND, then log stdout at debug and stderr/failures at\n"
            "error. Put '--' before the command so its flags are not read\n"
            "as conlog flags."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--shell", action="store_true", default=False,
                   help="Run the command through the shell")
    p.add_argument("--timeout", type=float, default=None, metavar="SECONDS",
                   help="Kill the command after SECONDS")
    p.add_argument("command", nargs=argparse.REMAINDER,
                   help="Command and arguments")
    p.set_defaults(func=run)


def run_command(command, shell=False, timeout=None):
    """Run a command, returning (error, stdout, stderr, returncode).

    ``error`` is None on success, a CalledProcessError for a non-zero
    exit, or the OSError/TimeoutExpired that prevented completion.
    """
    if shell:
        command = shlex.join(command) if len(command) > 1 else command[0]
    try:
        result = subprocess.run(command, shell=shell, capture_output=True,
                                text=True, timeout=timeout)
    except (OSError, subprocess.TimeoutExpired) as e:
        return e, None, None, 127 if isinstance(e, OSError) else 124
    error = None
    if result.returncode != 0:
        error = subprocess.CalledProcessError(
            result.returncode, command, result.stdout, result.stderr,
        )
    return error, result.stdout, result.stderr, result.returncode


def run(args):
    """Execute the exec command."""
    command = list(args.command)
    if command and command[0] == "--":
        command = command[1:]
    if not command:
        print("conlog exec: no command given")
        return 2

    error, stdout, stderr, returncode = run_command(
        command, shell=args.shell, timeout=args.timeout,
    )
    log = get_logger()
    if args.title:
        with log.grouped(args.title):
            log.from_exec(error, stdout, stderr)
    else:
        log.from_exec(error, stdout, stderr)
    return returncode
