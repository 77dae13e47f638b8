"""Message record consumed by the dispatcher.

The dispatcher only ever reads ``content``. Every other field is opaque
payload handed to predicates and handlers untouched, so any object with
a ``content`` attribute works. This dataclass is a convenient default
for adapters and tests; it is hashable, so messages can key caches and
sets.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Message:
    """An inbound chat message.

    ``guild_id`` is ``None`` for direct messages, which is what
    ``guild_only`` and ``has_permission`` check.
    """

    content: str
    author_id: int | None = None
    guild_id: int | None = None
    channel_id: int | None = None
