"""Leaf invocation for the async dispatch paths.

``Dispatcher.handle_async`` and ``handle_many`` run the matched leaf
through ``invoke_leaf`` so both settle handler results the same way::

    leaf, args = prepare(message, resolution)
    outcome = await invoke_leaf(leaf, message, args)  # -> Invoked(...)

The synchronous resolver never comes through here.
"""

import inspect
import logging
from typing import Any

from warble.routing.nodes import Leaf
from warble.routing.outcomes import Invoked

_log = logging.getLogger("warble.dispatcher")


async def invoke_leaf(leaf: Leaf, message: Any, args: Any) -> Invoked:
    """Run ``leaf.handler.execute`` and wrap the settled result.

    ``execute`` may be a plain method, an ``async def``, or a method
    returning some other awaitable such as a task; anything awaitable
    is awaited before it lands in ``Invoked.result``.
    """
    result = leaf.handler.execute(message, args)
    if inspect.isawaitable(result):
        _log.debug("Awaiting result of %s", leaf.name)
        result = await result
    return Invoked(result)
