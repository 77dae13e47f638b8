"""Command registry: a tree of command paths to handler leaves.

Top-level names map to a ``Leaf`` or a ``Group``; groups nest to any
depth and may carry a ``DEFAULT`` entry invoked when no subcommand
matches.

Free-threading safety:
    - Leaf and Group are immutable; updates build new nodes
    - Writers hold ``_lock`` and publish a fresh top-level dict
    - A published dict is never mutated, so readers need no lock and
      always see a whole, committed tree
"""

import logging
import threading
from collections.abc import Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any, TypeAlias

from warble.errors import ConfigurationError
from warble.handler import check_handler
from warble.routing.nodes import DEFAULT, Group, Leaf, Node, SubKey, bind_leaf, unbind_leaf
from warble.routing.outcomes import OK, Conflict, Mutation

_log = logging.getLogger("warble.registry")

Path: TypeAlias = Sequence[SubKey]


def parse_path(path: str | Path) -> tuple[str, tuple[SubKey, ...]]:
    """Validate a command path and split off the top-level name.

    Examples::

        "echo"                     -> ("echo", ())
        ["tag", "create"]          -> ("tag", ("create",))
        ["tag", DEFAULT]           -> ("tag", (DEFAULT,))
        ["tag", "list", DEFAULT]   -> ("tag", ("list", DEFAULT))

    ``DEFAULT`` is only allowed as the last segment of a nested path.
    """
    segments: tuple[SubKey, ...] = (path,) if isinstance(path, str) else tuple(path)
    if not segments:
        msg = "Command path must not be empty."
        raise ConfigurationError(msg)

    name, *rest = segments
    if not isinstance(name, str) or not name:
        msg = f"Top-level command name must be a non-empty string, got {name!r} in {segments!r}."
        raise ConfigurationError(msg)

    for i, segment in enumerate(rest):
        if segment is DEFAULT:
            if i != len(rest) - 1:
                msg = f"DEFAULT must be the last segment of a command path, got {segments!r}."
                raise ConfigurationError(msg)
        elif not isinstance(segment, str) or not segment:
            msg = f"Subcommand names must be non-empty strings, got {segment!r} in {segments!r}."
            raise ConfigurationError(msg)

    return name, tuple(rest)


def format_path(path: Path) -> str:
    """Render a command path for messages, e.g. ``tag list DEFAULT``."""
    return " ".join(str(segment) if isinstance(segment, str) else repr(segment) for segment in path)


class Registry:
    """Concurrent command registry.

    Usage::

        registry = Registry()
        registry.add(["echo"], Echo())
        registry.add(["tag", "create"], TagCreate())
        registry.add(["tag", DEFAULT], TagShow())
        registry.lookup("tag")  # -> Group({"create": Leaf(...), DEFAULT: Leaf(...)})

    The registry is an explicit object: construct one per application
    and pass it to the dispatcher. ``clear()`` drops every entry.
    """

    __slots__ = ("_commands", "_lock")

    def __init__(self) -> None:
        self._commands: Mapping[str, Node] = MappingProxyType({})
        self._lock = threading.Lock()

    # -- Writers ------------------------------------------------------------

    def add(self, path: str | Path, handler: Any) -> Mutation:
        """Register ``handler`` under ``path``, with its aliases.

        Aliases are bound next to the final segment, silently replacing
        whatever was bound under those names before. A command already
        at ``path`` is replaced together with its own aliases.

        Returns ``OK``, or a ``Conflict`` when a segment of ``path`` is
        already a command and so cannot hold subcommands. A conflict
        leaves the registry unchanged.
        """
        name, rest = parse_path(path)
        check_handler(handler)
        leaf = Leaf.for_handler(handler)

        with self._lock:
            commands = dict(self._commands)
            if not rest:
                for alias in leaf.aliases:
                    if alias in commands:
                        _log.debug("Alias %r of %s replaces an existing command", alias, leaf.name)
                bind_leaf(commands, name, leaf)
            else:
                current = commands.get(name)
                if isinstance(current, Leaf):
                    return self._conflict(f"{name} is a top-level command, cannot add subcommand")
                updated = _put_nested(current or Group(), rest, leaf, (name,))
                if isinstance(updated, Conflict):
                    return self._conflict(updated.reason)
                commands[name] = updated
            self._publish(commands)

        _log.debug("Added command %s -> %s", format_path((name, *rest)), leaf.name)
        return OK

    def remove(self, path: str | Path) -> Mutation:
        """Remove the command at ``path``, with its aliases.

        Groups left without any command are pruned all the way up,
        including the top-level entry. Removing a path that is not
        registered is a no-op.
        """
        name, rest = parse_path(path)

        with self._lock:
            commands = dict(self._commands)
            current = commands.get(name)
            if current is None:
                return OK

            if not rest:
                unbind_leaf(commands, name)
            else:
                if isinstance(current, Leaf):
                    return self._conflict(
                        f"{name} is a top-level command, cannot remove subcommand"
                    )
                updated = _pop_nested(current, rest, (name,))
                if isinstance(updated, Conflict):
                    return self._conflict(updated.reason)
                if updated.is_empty():
                    del commands[name]
                else:
                    commands[name] = updated
            self._publish(commands)

        _log.debug("Removed command %s", format_path((name, *rest)))
        return OK

    def clear(self) -> None:
        """Drop every command. Called when the owning application shuts down."""
        with self._lock:
            self._publish({})

    def _publish(self, commands: dict[str, Node]) -> None:
        # Caller holds _lock. The dict must not be touched after this.
        self._commands = MappingProxyType(commands)

    @staticmethod
    def _conflict(reason: str) -> Conflict:
        _log.warning("Rejected registry change: %s", reason)
        return Conflict(reason)

    # -- Readers ------------------------------------------------------------

    def lookup(self, name: str) -> Node | None:
        """Return the node bound to top-level ``name``, or ``None``."""
        return self._commands.get(name)

    def lookup_path(self, path: str | Path) -> Node | None:
        """Walk ``path`` through nested groups. ``None`` if any segment is missing."""
        name, rest = parse_path(path)
        node = self._commands.get(name)
        for segment in rest:
            if not isinstance(node, Group):
                return None
            node = node.get(segment)
        return node

    def all(self) -> Mapping[str, Node]:
        """Snapshot of every top-level name and its node.

        The returned mapping is read-only and does not change when the
        registry is modified afterwards.
        """
        return self._commands

    def walk(self) -> Iterator[tuple[tuple[SubKey, ...], Leaf]]:
        """Yield ``(path, leaf)`` for every leaf, sorted by path.

        Each leaf appears once per name it is bound under, aliases
        included. Useful for listings and introspection.
        """
        yield from _walk(self._commands, ())

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands


def _put_nested(
    group: Group,
    path: tuple[SubKey, ...],
    leaf: Leaf,
    trail: tuple[SubKey, ...],
) -> Group | Conflict:
    """Return a copy of ``group`` with ``leaf`` bound at ``path``."""
    key, *rest = path
    if not rest:
        return group.with_leaf(key, leaf)

    child = group.get(key)
    if isinstance(child, Leaf):
        return Conflict(f"{format_path((*trail, key))} is a command, cannot add subcommand")
    updated = _put_nested(child or Group(), tuple(rest), leaf, (*trail, key))
    if isinstance(updated, Conflict):
        return updated
    return group.with_entry(key, updated)


def _pop_nested(
    group: Group,
    path: tuple[SubKey, ...],
    trail: tuple[SubKey, ...],
) -> Group | Conflict:
    """Return a copy of ``group`` without the node at ``path``, pruning empty groups."""
    key, *rest = path
    if not rest:
        return group.without_leaf(key)

    child = group.get(key)
    if child is None:
        return group
    if isinstance(child, Leaf):
        return Conflict(f"{format_path((*trail, key))} is a command, cannot remove subcommand")
    updated = _pop_nested(child, tuple(rest), (*trail, key))
    if isinstance(updated, Conflict):
        return updated
    if updated.is_empty():
        return group.drop([key])
    return group.with_entry(key, updated)


def _walk(
    nodes: Mapping[SubKey, Node],
    prefix: tuple[SubKey, ...],
) -> Iterator[tuple[tuple[SubKey, ...], Leaf]]:
    # DEFAULT sorts first within its group
    for key in sorted(nodes, key=lambda k: (isinstance(k, str), k if isinstance(k, str) else "")):
        node = nodes[key]
        path = (*prefix, key)
        if isinstance(node, Leaf):
            yield path, node
        else:
            yield from _walk(node, path)

