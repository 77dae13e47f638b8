"""Dispatcher: a registry handle bundled with its dispatch configuration.

Usage::

    from warble import Dispatcher, DispatchConfig, guild_only

    dispatcher = Dispatcher(config=DispatchConfig(prefix=("!", "?")))

    @dispatcher.command("echo", aliases=["say"])
    def echo(message, args):
        return " ".join(args)

    @dispatcher.command("tag", "create", predicates=[guild_only])
    async def tag_create(message, args):
        ...

    outcome = dispatcher.handle(message)               # sync, never awaits
    outcome = await dispatcher.handle_async(message)   # awaits async handlers
    outcomes = await dispatcher.handle_many(messages)  # concurrent batch
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any

import anyio

from warble._internal.invoke import invoke_leaf
from warble.config import DispatchConfig
from warble.errors import ConfigurationError
from warble.handler import FunctionHandler
from warble.predicates import Predicate
from warble.routing.outcomes import Mutation, Outcome, PredicateFailure, Resolution
from warble.routing.registry import Path, Registry
from warble.routing.resolver import handle, prepare, resolve

_log = logging.getLogger("warble.dispatcher")


class Dispatcher:
    """Dispatches inbound messages to the commands of one registry.

    The configuration is read once here; build a new dispatcher to
    change the prefix. Several dispatchers may share one registry.
    """

    __slots__ = ("config", "registry")

    def __init__(
        self,
        registry: Registry | None = None,
        config: DispatchConfig | None = None,
    ) -> None:
        self.registry = registry if registry is not None else Registry()
        self.config = config if config is not None else DispatchConfig()

    # -- Registration -------------------------------------------------------

    def add(self, path: str | Path, handler: Any) -> Mutation:
        return self.registry.add(path, handler)

    def remove(self, path: str | Path) -> Mutation:
        return self.registry.remove(path)

    def command(
        self,
        *path: Any,
        aliases: Sequence[str] = (),
        predicates: Sequence[Predicate] = (),
        parse_args: Callable[[list[str]], Any] | None = None,
        usage: Sequence[str] = (),
        description: str = "",
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register the decorated function as the handler for ``path``.

        The function receives ``(message, args)``. A registry conflict
        raises ``ConfigurationError`` here, since decorators run at import
        time and have nowhere to return it to.
        """

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            handler = FunctionHandler(
                func,
                aliases=aliases,
                predicates=predicates,
                parse_args=parse_args,
                usage=usage,
                description=description,
            )
            result = self.registry.add(path, handler)
            if not result:
                raise ConfigurationError(str(result))
            return func

        return decorator

    # -- Dispatch -----------------------------------------------------------

    def resolve(self, content: str) -> Outcome | Resolution:
        """Dry run: find the leaf ``content`` would invoke, run nothing."""
        return resolve(content, self.registry, self.config.prefixes)

    def handle(self, message: Any) -> Outcome:
        """Resolve and invoke synchronously. See ``warble.routing.resolver.handle``."""
        return handle(message, self.registry, self.config.prefixes)

    async def handle_async(self, message: Any) -> Outcome:
        """Like ``handle()``, but awaits the handler when it returns an awaitable."""
        resolution = self.resolve(message.content)
        if not isinstance(resolution, Resolution):
            return resolution

        prepared = prepare(message, resolution)
        if isinstance(prepared, PredicateFailure):
            return prepared

        leaf, args = prepared
        return await invoke_leaf(leaf, message, args)

    async def handle_many(self, messages: Iterable[Any]) -> list[Outcome]:
        """Dispatch a batch of messages concurrently.

        Outcomes come back in input order. If a handler raises, the
        task group cancels the rest of the batch and the error surfaces
        wrapped in an ``ExceptionGroup``.
        """
        pending = list(messages)
        outcomes: list[Outcome | None] = [None] * len(pending)

        async def _dispatch(index: int, message: Any) -> None:
            outcomes[index] = await self.handle_async(message)

        async with anyio.create_task_group() as tg:
            for index, message in enumerate(pending):
                tg.start_soon(_dispatch, index, message)

        _log.debug("Dispatched batch of %d message(s)", len(pending))
        return outcomes  # type: ignore[return-value]
