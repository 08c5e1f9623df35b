"""CLI for shell-secrets - plain-file secret store for shell sessions."""

import argparse
import dataclasses
import getpass
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .config import Config
from .errors import ArgumentError, UnknownOperationError
from . import secrets

console = Console()
err_console = Console(stderr=True)


def _write_raw(data: bytes) -> None:
    """Write bytes to stdout untouched (secret values can be anything)."""
    sys.stdout.flush()
    sys.stdout.buffer.write(data)
    sys.stdout.buffer.flush()


def require_args(operation: str, args: list, low: int, high: int = None) -> None:
    """Check the operand count for an operation."""
    high = low if high is None else high
    if not low <= len(args) <= high:
        raise ArgumentError(f"incorrect number of arguments for '{operation}'")


def cmd_set(config, args):
    """
    Store a secret.

    The value is taken from the command line, or read with a hidden
    prompt when omitted (keeps it out of shell history).
    """
    require_args("set", args, 1, 2)

    if len(args) == 2:
        key, value = args
        interactive = False
    else:
        key = args[0]
        value = getpass.getpass("Value: ")
        interactive = True

    secrets.set_secret(config.secrets_path, key, value, interactive=interactive)
    return 0


def cmd_get(config, args):
    """
    Print a secret value followed by a newline.

    Prints nothing for an unknown key; the exit status only reflects
    whether the store could be read.
    """
    require_args("get", args, 1)
    value = secrets.get_secret(config.secrets_path, args[0])
    if value is not None:
        _write_raw(value + b"\n")
    return 0


def cmd_del(config, args):
    """Forget a secret."""
    require_args("del", args, 1)
    secrets.delete_secret(config.secrets_path, args[0])
    return 0


def cmd_list(config, args):
    """List keys with their last-modified date (values never shown)."""
    require_args("list", args, 0)
    records = secrets.list_secrets(config.secrets_path)
    for row in secrets.format_listing(records, config.list_format, config.date_format):
        console.print(row, markup=False, highlight=False, emoji=False, soft_wrap=True)
    return 0


def cmd_dump(config, args):
    """Print the store file exactly as stored."""
    require_args("dump", args, 0)
    _write_raw(secrets.dump_secrets(config.secrets_path))
    return 0


OPERATIONS = {
    "set": cmd_set,
    "get": cmd_get,
    "del": cmd_del,
    "list": cmd_list,
    "dump": cmd_dump,
}

HELP_OPERATIONS = {"help", "usage"}


def build_parser():
    parser = argparse.ArgumentParser(
        prog="shell-secrets",
        description="Simple secrets manager for shell sessions (no encryption)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Operations:
  set <key> [<value>]    Store a secret (prompts when value is omitted)
  get <key>              Print a secret
  del <key>              Forget a secret
  list                   List keys and when they were last set
  dump                   Print the raw store file

Options go before the operation; everything after it is taken literally,
so keys and values may start with "-".

Examples:
  shell-secrets set my_secret_key my_secret
  shell-secrets set my_secret_key           # hidden prompt
  export API_KEY=$(shell-secrets get my_secret_key)
  shell-secrets del my_secret_key

Environment:
  SECRETS_PATH           Store file (default: ~/.secrets)
  SECRETS_LIST_FORMAT    printf-style row for 'list' (key, date)
  SECRETS_DATE_FORMAT    strftime format for 'list' (default: %F %I:%M%p %Z)
  COLUMNS                Width used by the default list format
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-f", "--file", type=Path, help="Secrets file (overrides SECRETS_PATH)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log store activity to stderr")
    parser.add_argument("operation", nargs="?", help="set, get, del, list or dump")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Operation arguments (taken literally)")
    return parser


def setup_logging(verbose: bool) -> None:
    """Send package logs to stderr; DEBUG with --verbose."""
    package_logger = logging.getLogger("shell_secrets")
    package_logger.handlers.clear()
    package_logger.addHandler(RichHandler(console=err_console, show_path=False))
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if not args.operation or args.operation in HELP_OPERATIONS:
        parser.print_help()
        return 0

    config = Config.from_env()
    if args.file:
        config = dataclasses.replace(config, secrets_path=args.file.expanduser())

    try:
        command = OPERATIONS.get(args.operation)
        if command is None:
            raise UnknownOperationError(
                "operation must be 'set', 'get', 'del', 'list' or 'dump'"
            )
        return command(config, args.args)

    except (ArgumentError, UnknownOperationError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        parser.print_usage(sys.stderr)
        return 1
    except secrets.SecretsError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        return 1


if __name__ == "__main__":
    sys.exit(main())
