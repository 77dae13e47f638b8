"""Leaf and Group registry nodes, plus the DEFAULT subcommand key."""

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Final, TypeAlias, final

from warble.handler import handler_aliases, handler_name, optional_callable


@final
class _Default:
    """Type of the ``DEFAULT`` key. Not a ``str``, so it never collides."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "DEFAULT"

    def __reduce__(self) -> str:
        return "DEFAULT"


DEFAULT: Final = _Default()

SubKey: TypeAlias = str | _Default


@dataclass(frozen=True, slots=True)
class Leaf:
    """A registry node bound to one handler.

    ``aliases`` and ``parse_args`` are captured when the leaf is built,
    so a handler changing its alias list later cannot leave stale
    entries behind on removal.
    """

    handler: Any
    aliases: tuple[str, ...] = ()
    parse_args: Callable[[list[str]], Any] | None = None

    @classmethod
    def for_handler(cls, handler: Any) -> "Leaf":
        return cls(
            handler=handler,
            aliases=handler_aliases(handler),
            parse_args=optional_callable(handler, "parse_args"),
        )

    @property
    def name(self) -> str:
        return handler_name(self.handler)


class Group(Mapping[SubKey, "Leaf | Group"]):
    """An immutable mapping of subcommand names to child nodes.

    Updates return a new Group; the original is never touched, which is
    what lets the registry swap whole subtrees in one assignment.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[SubKey, "Leaf | Group"] | None = None) -> None:
        self._entries: dict[SubKey, Leaf | Group] = dict(entries or {})

    def __getitem__(self, key: SubKey) -> "Leaf | Group":
        return self._entries[key]

    def __iter__(self) -> Iterator[SubKey]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Group({self._entries!r})"

    @property
    def default(self) -> "Leaf | Group | None":
        return self._entries.get(DEFAULT)

    def known(self) -> list[str]:
        """Sorted textual subkeys, without ``DEFAULT``."""
        return sorted(key for key in self._entries if isinstance(key, str))

    def with_entry(self, key: SubKey, node: "Leaf | Group") -> "Group":
        return Group({**self._entries, key: node})

    def drop(self, keys: Iterable[SubKey]) -> "Group":
        dropped = set(keys)
        return Group({k: v for k, v in self._entries.items() if k not in dropped})

    def with_leaf(self, key: SubKey, leaf: Leaf) -> "Group":
        """Bind ``leaf`` under ``key`` and each of its aliases.

        A leaf already at ``key`` is unbound first, aliases included.
        """
        entries = dict(self._entries)
        bind_leaf(entries, key, leaf)
        return Group(entries)

    def without_leaf(self, key: SubKey) -> "Group":
        """Drop ``key`` and any alias still pointing at the same handler."""
        entries = dict(self._entries)
        unbind_leaf(entries, key)
        return Group(entries)

    def is_empty(self) -> bool:
        """True if no leaf is reachable from this group."""
        return all(isinstance(node, Group) and node.is_empty() for node in self._entries.values())


Node: TypeAlias = Leaf | Group


def same_handler(node: Node | None, leaf: Leaf) -> bool:
    return isinstance(node, Leaf) and node.handler is leaf.handler


def unbind_leaf(entries: dict[Any, Node], key: SubKey) -> Node | None:
    """Pop ``key`` from ``entries`` in place, along with the aliases of a leaf bound there.

    An alias slot is only removed while it still points at the same
    handler; a name since taken over by another command stays.
    """
    node = entries.pop(key, None)
    if isinstance(node, Leaf):
        for alias in node.aliases:
            if same_handler(entries.get(alias), node):
                del entries[alias]
    return node


def bind_leaf(entries: dict[Any, Node], key: SubKey, leaf: Leaf) -> None:
    """Bind ``leaf`` under ``key`` and its aliases in place.

    A leaf bound at ``key`` under its own name is unbound first, aliases
    included. Taking over one alias of another command leaves that
    command's remaining names alone.
    """
    current = entries.get(key)
    if isinstance(current, Leaf) and key not in current.aliases:
        unbind_leaf(entries, key)
    for alias in leaf.aliases:
        entries[alias] = leaf
    entries[key] = leaf
