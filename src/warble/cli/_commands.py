"""``warble commands``: list registered commands.

Prints one line per command path with its handler and aliases.
"""

import argparse
import sys

from warble.cli._resolve import resolve_dispatcher
from warble.handler import handler_name, optional_callable
from warble.routing.registry import format_path


def run_commands(args: argparse.Namespace) -> None:
    """List the command tree of a dispatcher or registry."""
    try:
        dispatcher = resolve_dispatcher(args.target)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows: list[tuple[str, str, str]] = []
    for path, leaf in dispatcher.registry.walk():
        name = handler_name(leaf.handler)
        describe = optional_callable(leaf.handler, "description")
        if describe is not None and (text := describe()):
            name = f"{name}: {text}"
        rows.append((format_path(path), name, ", ".join(leaf.aliases)))

    if not rows:
        print("No commands registered.")
        return

    width = max(max(len(r[0]) for r in rows), len("COMMAND"))
    fmt = f"{{:<{width}}}  {{}}"
    print(fmt.format("COMMAND", "HANDLER"))
    print("-" * min(width + 2 + max(len(r[1]) for r in rows), 80))
    for path, name, aliases in rows:
        line = fmt.format(path, name)
        if aliases:
            line += f"  (aliases: {aliases})"
        print(line)
