"""Top-level ``cbztools`` command dispatcher."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
import sys
from typing import Callable

from cbztools.cli import concat

USAGE = """\
A utility for working with CBZ comic archives.

Usage: cbztools <command> [flags] [args]

Commands:
  concat    Concatenate multiple CBZ files into a single archive
  version   Show the version of the program and exit
  help      Show this help message

For help on a specific command:
  cbztools <command> -h

Examples:
  cbztools concat ./chapters ./output
  cbztools concat --verbose --order ./chapters ./output"""


def package_version() -> str:
    try:
        return version("cbztools")
    except PackageNotFoundError:
        return "unknown"


def _help(argv: list[str]) -> int:
    print(f"cbztools v{package_version()}")
    print(USAGE)
    return 0


def _version(argv: list[str]) -> int:
    print(f"cbztools {package_version()}")
    return 0


_COMMANDS: dict[str, Callable[[list[str]], int]] = {
    "concat": concat.main,
    "help": _help,
    "h": _help,
    "-h": _help,
    "--help": _help,
    "version": _version,
    "v": _version,
    "-v": _version,
    "--version": _version,
}


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        _help([])
        return 1

    command, command_args = args[0], args[1:]
    handler = _COMMANDS.get(command)
    if handler is None:
        print(f"Unknown command: {command}", file=sys.stderr)
        print("Run 'cbztools help' for usage information.", file=sys.stderr)
        return 1
    return handler(command_args)


if __name__ == "__main__":
    raise SystemExit(main())
