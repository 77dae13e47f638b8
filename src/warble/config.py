"""Dispatch configuration.

DispatchConfig is a frozen dataclass: immutable after creation and read
once when a ``Dispatcher`` is built. Changing the prefix means building
a new dispatcher.
"""

from dataclasses import dataclass

from warble.errors import ConfigurationError

DEFAULT_PREFIX = "."


@dataclass(frozen=True, slots=True)
class DispatchConfig:
    """Dispatch configuration. Immutable after creation.

    ``prefix`` is either a single string or an ordered tuple of
    candidates. With several candidates the first one the message starts
    with wins, so overlapping prefixes must be ordered by the caller::

        DispatchConfig(prefix=("ab", "a"))  # "abfoo" -> command "foo"
        DispatchConfig(prefix=("a", "ab"))  # "abfoo" -> command "bfoo"
    """

    prefix: str | tuple[str, ...] = DEFAULT_PREFIX

    def __post_init__(self) -> None:
        if not isinstance(self.prefix, str):
            # Lists are accepted for convenience; store a hashable tuple.
            object.__setattr__(self, "prefix", tuple(self.prefix))
        candidates = self.prefixes
        if not candidates:
            msg = "At least one command prefix is required."
            raise ConfigurationError(msg)
        for candidate in candidates:
            if not isinstance(candidate, str) or not candidate:
                msg = f"Command prefixes must be non-empty strings, got {candidate!r}."
                raise ConfigurationError(msg)

    @property
    def prefixes(self) -> tuple[str, ...]:
        """The prefix candidates in match order."""
        if isinstance(self.prefix, str):
            return (self.prefix,)
        return tuple(self.prefix)
