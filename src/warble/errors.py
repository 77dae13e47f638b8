"""Warble exception hierarchy.

Dispatch outcomes are return values, not exceptions. The types here
signal programming mistakes found while wiring up a registry or a
dispatcher, so they surface at startup rather than per message.
"""


class WarbleError(Exception):
    """Base for all warble-specific errors."""


class ConfigurationError(WarbleError):
    """Raised when dispatch configuration or a command path is invalid.

    Typically raised from ``DispatchConfig.__post_init__`` or from
    ``Registry.add()`` / ``Registry.remove()`` given a malformed path.
    """
