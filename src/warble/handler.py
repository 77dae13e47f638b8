"""Handler protocol.

A command handler is any object with ``execute`` and ``predicates``::

    class Echo:
        def predicates(self):
            return []

        def execute(self, message, args):
            return " ".join(args)

No base class required. The registry checks the shape, not the lineage.
Instances and modules work as long as the callables can be reached as
attributes. A class object works too when its callables are static or
class methods.

Optional callables:

- ``parse_args(args)`` turns the raw string tokens into whatever
  ``execute`` expects. Without it, ``execute`` receives the token list.
- ``aliases()`` returns alternate names bound next to the primary name.
- ``usage()`` and ``description()`` are listing metadata for tooling.

Optional callables are looked up once, when the handler is registered.
"""

import inspect
from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

from warble.predicates import Predicate

_REQUIRED = ("execute", "predicates")
_OPTIONAL = ("parse_args", "aliases", "usage", "description")


@runtime_checkable
class Handler(Protocol):
    """Protocol for warble command handlers."""

    def execute(self, message: Any, args: Any) -> Any: ...

    def predicates(self) -> Sequence[Predicate]: ...


def handler_name(handler: Any) -> str:
    """Human-readable name for a handler, used in logs and listings."""
    if isinstance(handler, FunctionHandler):
        return handler.name
    name = getattr(handler, "__qualname__", None) or getattr(handler, "__name__", None)
    if name is None:
        name = type(handler).__qualname__
    return name


def optional_callable(handler: Any, attribute: str) -> Callable[..., Any] | None:
    """Return ``handler.<attribute>`` when it is callable, else ``None``."""
    candidate = getattr(handler, attribute, None)
    return candidate if callable(candidate) else None


def handler_aliases(handler: Any) -> tuple[str, ...]:
    """Snapshot the handler's aliases, or ``()`` if it declares none."""
    aliases = optional_callable(handler, "aliases")
    if aliases is None:
        return ()
    return tuple(aliases())


def check_handler(handler: Any) -> None:
    """Raise ``TypeError`` unless ``handler`` satisfies the protocol.

    A class registered as-is (rather than an instance) must define its
    handler callables as static or class methods; plain methods would
    fail for want of ``self`` on the first dispatch.
    """
    missing = [name for name in _REQUIRED if optional_callable(handler, name) is None]
    if missing:
        msg = f"{handler_name(handler)} is not a command handler: missing {', '.join(missing)}"
        raise TypeError(msg)

    if isinstance(handler, type):
        unbound = [
            name
            for name in (*_REQUIRED, *_OPTIONAL)
            if inspect.isfunction(inspect.getattr_static(handler, name, None))
        ]
        if unbound:
            msg = (
                f"{handler_name(handler)} is registered as a class, so "
                f"{', '.join(unbound)} must be static or class methods; "
                "register an instance instead"
            )
            raise TypeError(msg)


class FunctionHandler:
    """Adapts a plain function into a handler.

    Built by ``Dispatcher.command()``; can also be constructed directly::

        registry.add(["ping"], FunctionHandler(lambda message, args: "pong"))
    """

    __slots__ = ("_aliases", "_description", "_predicates", "_usage", "func", "name", "parse_args")

    def __init__(
        self,
        func: Callable[[Any, Any], Any],
        *,
        aliases: Sequence[str] = (),
        predicates: Sequence[Predicate] = (),
        parse_args: Callable[[list[str]], Any] | None = None,
        usage: Sequence[str] = (),
        description: str = "",
    ) -> None:
        self.func = func
        self.parse_args = parse_args
        self._aliases = tuple(aliases)
        self._predicates = tuple(predicates)
        self._usage = tuple(usage)
        self._description = description or (func.__doc__ or "").strip().split("\n")[0]
        self.name = handler_name(func)

    def execute(self, message: Any, args: Any) -> Any:
        return self.func(message, args)

    def predicates(self) -> Sequence[Predicate]:
        return self._predicates

    def aliases(self) -> Sequence[str]:
        return self._aliases

    def usage(self) -> Sequence[str]:
        return self._usage

    def description(self) -> str:
        return self._description

    def __repr__(self) -> str:
        return f"FunctionHandler({self.name})"
