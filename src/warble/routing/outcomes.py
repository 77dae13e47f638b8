"""Frozen outcome values for registry mutations and message resolution.

Every branch of the dispatch path ends in one of these. None of them is
an exception: callers inspect the returned value.
"""

from dataclasses import dataclass, field
from typing import Any, Literal, TypeAlias

from warble.routing.nodes import Leaf

# -- Registry mutations -----------------------------------------------------


@dataclass(frozen=True, slots=True)
class Ok:
    """The registry mutation was applied (or was a no-op)."""

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Conflict:
    """The registry mutation was rejected; the registry is unchanged.

    Falsy, so callers can write ``if not registry.add(...)``.
    """

    reason: str

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.reason


OK = Ok()

Mutation: TypeAlias = Ok | Conflict


# -- Message resolution -----------------------------------------------------


@dataclass(frozen=True, slots=True)
class Ignored:
    """The message is not a command invocation. Never shown to users."""


@dataclass(frozen=True, slots=True)
class Invoked:
    """The handler ran. ``result`` is whatever ``execute`` returned."""

    result: Any


@dataclass(frozen=True, slots=True)
class UnknownSubcommand:
    """A command group matched, but no subcommand or default did.

    ``attempted`` is the token that failed to match, or ``None`` when
    the group was invoked without arguments. ``known`` lists the group's
    subcommand names, sorted, without the default entry.
    """

    attempted: str | None
    known: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PredicateFailure:
    """A predicate denied (``noperm``) or could not check (``error``)."""

    kind: Literal["noperm", "error"]
    reason: Any


@dataclass(frozen=True, slots=True)
class Resolution:
    """A leaf and the raw arguments it would be invoked with.

    Produced by ``resolve()`` before predicates run.
    """

    leaf: Leaf
    args: list[str]


IGNORED = Ignored()

Outcome: TypeAlias = Ignored | Invoked | UnknownSubcommand | PredicateFailure
