#!/usr/bin/env python3
"""``ascii-sketch <command>``: dispatch to the command modules."""

import importlib
import sys
from typing import Optional, Sequence

PROG = "ascii-sketch"

# command name -> module exposing main(argv)
COMMANDS = {
    "image": "ascii_sketch.image_to_ascii",
    "ramps": "ascii_sketch.ramps",
}

# exit codes
EXIT_OK = 0
EXIT_COMMAND_FAILED = 1
EXIT_UNKNOWN_COMMAND = 2
EXIT_IMPORT_FAILED = 3
EXIT_NO_ENTRY = 4


def usage(prog: str = PROG) -> None:
    print(f"Usage: {prog} <command> [args...]")
    print(f"Commands: {', '.join(sorted(COMMANDS))}")
    print(f"Run '{prog} <command> --help' for command options.")


def run_command(entry, argv: Sequence[str]) -> int:
    """Call a command's ``main(argv)`` and turn its outcome into an exit code."""
    try:
        code = entry(list(argv))
    except SystemExit as se:
        code = se.code
    except Exception as e:
        print(f"Error running command: {e}", file=sys.stderr)
        return EXIT_COMMAND_FAILED
    return code if isinstance(code, int) else EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    if not args or args[0] in ("-h", "--help"):
        usage()
        return EXIT_OK

    if args[0] == "--version":
        from . import __version__

        print(f"{PROG} {__version__}")
        return EXIT_OK

    cmd, rest = args[0], args[1:]
    if cmd not in COMMANDS:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        usage()
        return EXIT_UNKNOWN_COMMAND

    module_path = COMMANDS[cmd]
    try:
        module = importlib.import_module(module_path)
    except Exception as e:
        print(f"Failed to import command '{cmd}' ({module_path}): {e}", file=sys.stderr)
        return EXIT_IMPORT_FAILED

    entry = getattr(module, "main", None)
    if not callable(entry):
        print(f"Command module '{module_path}' has no callable 'main'", file=sys.stderr)
        return EXIT_NO_ENTRY

    return run_command(entry, rest)


if __name__ == "__main__":
    raise SystemExit(main())
