"""Warble: text-command dispatch for event-driven chat applications.

Given an inbound message and a registry of commands, warble decides
whether the message invokes a command, walks nested subcommand groups,
runs the command's predicates and hands the message to its handler.

Basic usage::

    from warble import Dispatcher, Invoked

    dispatcher = Dispatcher()

    @dispatcher.command("echo")
    def echo(message, args):
        return " ".join(args)

    outcome = dispatcher.handle(message)  # message.content == ".echo hi"
    assert outcome == Invoked("hi")
"""

__version__ = "0.1.0"
__all__ = [
    "DEFAULT",
    "IGNORED",
    "OK",
    "PASSTHROUGH",
    "Conflict",
    "ConfigurationError",
    "DispatchConfig",
    "Dispatcher",
    "FunctionHandler",
    "Group",
    "Handler",
    "Ignored",
    "Invoked",
    "Leaf",
    "Message",
    "NoPerm",
    "Ok",
    "Passthrough",
    "PredicateError",
    "PredicateFailure",
    "Registry",
    "Resolution",
    "UnknownSubcommand",
    "WarbleError",
    "escape_server_mentions",
    "evaluate",
    "guild_only",
    "handle",
    "has_permission",
    "resolve",
]

_LAZY_IMPORTS: dict[str, str] = {
    "DispatchConfig": "warble.config",
    "Dispatcher": "warble.dispatcher",
    "ConfigurationError": "warble.errors",
    "WarbleError": "warble.errors",
    "FunctionHandler": "warble.handler",
    "Handler": "warble.handler",
    "escape_server_mentions": "warble.helpers",
    "Message": "warble.message",
    "PASSTHROUGH": "warble.predicates",
    "NoPerm": "warble.predicates",
    "Passthrough": "warble.predicates",
    "PredicateError": "warble.predicates",
    "evaluate": "warble.predicates",
    "guild_only": "warble.predicates",
    "has_permission": "warble.predicates",
    "DEFAULT": "warble.routing.nodes",
    "Group": "warble.routing.nodes",
    "Leaf": "warble.routing.nodes",
    "IGNORED": "warble.routing.outcomes",
    "OK": "warble.routing.outcomes",
    "Conflict": "warble.routing.outcomes",
    "Ignored": "warble.routing.outcomes",
    "Invoked": "warble.routing.outcomes",
    "Ok": "warble.routing.outcomes",
    "PredicateFailure": "warble.routing.outcomes",
    "Resolution": "warble.routing.outcomes",
    "UnknownSubcommand": "warble.routing.outcomes",
    "Registry": "warble.routing.registry",
    "handle": "warble.routing.resolver",
    "resolve": "warble.routing.resolver",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import warble`` fast while providing a clean top-level API.
    """
    module_path = _LAZY_IMPORTS.get(name)
    if module_path is None:
        msg = f"module 'warble' has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_path), name)
