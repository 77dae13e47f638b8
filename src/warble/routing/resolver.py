"""Message resolver: turns raw message text into a dispatch outcome.

Pipeline::

    ".tag create intro hello there"
          |  strip_prefix(".")       -> "tag create intro hello there"
          |  split()                 -> ["tag", "create", "intro", "hello", "there"]
          |  registry.lookup("tag")  -> Group({"create": ..., DEFAULT: ...})
          |  descend "create"        -> Leaf(TagCreate), args ["intro", "hello", "there"]
          |  evaluate predicates     -> PASSTHROUGH
          |  parse_args + execute    -> Invoked(result)

Outcomes are values: ``Ignored``, ``Invoked``, ``UnknownSubcommand`` or
``PredicateFailure``. Exceptions raised by a handler's ``parse_args``
or ``execute`` are not caught here.
"""

import logging
from collections.abc import Sequence
from typing import Any

from warble.config import DEFAULT_PREFIX
from warble.predicates import NoPerm, PredicateError, evaluate
from warble.routing.nodes import Group, Leaf, Node
from warble.routing.outcomes import (
    IGNORED,
    Ignored,
    Invoked,
    Outcome,
    PredicateFailure,
    Resolution,
    UnknownSubcommand,
)
from warble.routing.registry import Registry
from warble.routing.tokens import split, strip_prefix

_log = logging.getLogger("warble.resolver")


def resolve(
    content: str,
    registry: Registry,
    prefix: str | Sequence[str] = DEFAULT_PREFIX,
) -> Resolution | Ignored | UnknownSubcommand:
    """Find the leaf ``content`` invokes, without running anything.

    Returns a ``Resolution`` with the leaf and its raw arguments,
    ``IGNORED`` when ``content`` is not a command, or
    ``UnknownSubcommand`` when a group matched but nothing inside it did.
    """
    remainder = strip_prefix(content, prefix)
    if remainder is None:
        return IGNORED

    tokens = split(remainder)
    if not tokens:
        return IGNORED

    name, *args = tokens
    node = registry.lookup(name)
    if node is None:
        return IGNORED
    return _descend(node, args)


def _descend(node: Node, args: list[str]) -> Resolution | UnknownSubcommand:
    """Walk down groups, consuming one token per level."""
    while isinstance(node, Group):
        head = args[0] if args else None
        if head is not None and head in node:
            node = node[head]
            args = args[1:]
            continue

        default = node.default
        if default is None:
            return UnknownSubcommand(attempted=head, known=node.known())
        # The default receives every argument, including the unmatched head.
        node = default

    return Resolution(leaf=node, args=args)


def authorize(message: Any, leaf: Leaf) -> PredicateFailure | None:
    """Evaluate the leaf's predicates; ``None`` means the invocation may proceed."""
    result = evaluate(message, leaf.handler.predicates())
    if isinstance(result, (NoPerm, PredicateError)):
        return PredicateFailure(kind=result.kind, reason=result.reason)
    return None


def prepare(message: Any, resolution: Resolution) -> PredicateFailure | tuple[Leaf, Any]:
    """Authorize a resolution and compute the arguments ``execute`` receives."""
    leaf = resolution.leaf
    failure = authorize(message, leaf)
    if failure is not None:
        _log.debug("Predicate failure for %s: %s %r", leaf.name, failure.kind, failure.reason)
        return failure
    args = leaf.parse_args(resolution.args) if leaf.parse_args is not None else resolution.args
    return leaf, args


def handle(
    message: Any,
    registry: Registry,
    prefix: str | Sequence[str] = DEFAULT_PREFIX,
) -> Outcome:
    """Resolve ``message`` against ``registry`` and invoke the matched handler.

    Usage::

        outcome = handle(message, registry, prefix="!")
        match outcome:
            case Invoked(result):
                ...
            case UnknownSubcommand(attempted, known):
                ...
            case PredicateFailure(kind, reason):
                ...

    The handler's return value is passed through as ``Invoked.result``
    unchanged; an ``async def`` handler's coroutine is not awaited here
    (use ``Dispatcher.handle_async`` for that).
    """
    resolution = resolve(message.content, registry, prefix)
    if not isinstance(resolution, Resolution):
        return resolution

    prepared = prepare(message, resolution)
    if isinstance(prepared, PredicateFailure):
        return prepared

    leaf, args = prepared
    _log.debug("Invoking %s", leaf.name)
    return Invoked(leaf.handler.execute(message, args))
