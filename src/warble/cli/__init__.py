"""Warble CLI: inspect a command registry from the shell.

Entry point registered as ``warble`` in ``pyproject.toml``::

    [project.scripts]
    warble = "warble.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``warble`` command."""
    parser = argparse.ArgumentParser(
        prog="warble",
        description="Warble: text-command dispatch for chat applications.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- warble commands --------------------------------------------------
    commands_parser = subparsers.add_parser("commands", help="List registered commands")
    commands_parser.add_argument(
        "target",
        help="Import string of a Dispatcher or Registry (e.g. mybot:dispatcher)",
    )

    # -- warble resolve ---------------------------------------------------
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Show which command a message would invoke, without running it",
    )
    resolve_parser.add_argument(
        "target",
        help="Import string of a Dispatcher or Registry (e.g. mybot:dispatcher)",
    )
    resolve_parser.add_argument("text", help="Message text, prefix included (e.g. '.tag list')")
    resolve_parser.add_argument(
        "--prefix",
        action="append",
        default=None,
        help="Override the command prefix (repeatable; defaults to the dispatcher's)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "commands":
        from warble.cli._commands import run_commands

        run_commands(args)
    elif args.command == "resolve":
        from warble.cli._explain import run_resolve

        run_resolve(args)
