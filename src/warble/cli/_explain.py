"""``warble resolve``: dry-run resolution of a message text.

Walks the registry exactly as dispatch would, but stops before
predicates and handlers run.
"""

import argparse
import sys

from warble.cli._resolve import resolve_dispatcher
from warble.routing.outcomes import Ignored, Resolution, UnknownSubcommand
from warble.routing.resolver import resolve


def run_resolve(args: argparse.Namespace) -> None:
    """Print the handler and arguments ``args.text`` would resolve to.

    Exits with status 1 for an unknown subcommand and 2 when the text
    is not a command at all, so scripts can branch on the result.
    """
    try:
        dispatcher = resolve_dispatcher(args.target)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    prefixes = tuple(args.prefix) if args.prefix else dispatcher.config.prefixes
    result = resolve(args.text, dispatcher.registry, prefixes)

    if isinstance(result, Resolution):
        print(f"handler: {result.leaf.name}")
        print(f"args:    {result.args!r}")
        return

    if isinstance(result, UnknownSubcommand):
        print(f"unknown subcommand: {result.attempted!r}")
        print(f"known:   {', '.join(result.known) or '(none)'}")
        raise SystemExit(1)

    if isinstance(result, Ignored):
        print("ignored: not a command")
        raise SystemExit(2)
