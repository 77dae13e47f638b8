"""Import resolution: ``"module:attribute"`` strings to dispatchers.

Shared by ``warble commands`` and ``warble resolve`` to locate the
user's dispatcher (or bare registry).
"""

import importlib

from warble.config import DispatchConfig
from warble.dispatcher import Dispatcher
from warble.routing.registry import Registry


def resolve_dispatcher(import_string: str) -> Dispatcher:
    """Resolve an import string to a warble Dispatcher.

    Accepts ``"module:attribute"`` format. When the attribute portion
    is omitted, defaults to ``"dispatcher"`` (e.g. ``"mybot"`` resolves
    to ``mybot.dispatcher``).

    A bare ``Registry`` is wrapped in a Dispatcher with the default
    configuration. Factory functions are called.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is neither a Dispatcher, a
            Registry, nor a factory returning one.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "dispatcher"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, (Dispatcher, Registry)):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if isinstance(obj, Registry):
        return Dispatcher(obj, DispatchConfig())

    if not isinstance(obj, Dispatcher):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a warble Dispatcher or Registry"
        raise TypeError(msg)

    return obj
