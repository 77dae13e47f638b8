"""Command predicates and predicate evaluation.

A predicate is any callable taking the inbound message and returning
one of three results::

    PASSTHROUGH           # allowed, keep checking
    NoPerm("reason")      # the author may not run this command
    PredicateError("...") # the check itself could not be completed

Denial is a return value, never an exception. ``evaluate()`` runs a
handler's predicates in order and stops at the first failure, so later
predicates may rely on earlier ones having passed::

    def predicates(self):
        return [guild_only, has_permission("ban_members", perms_for)]

Built-in predicates live at the bottom of this module.
"""

import logging
from collections.abc import Callable, Collection, Iterable
from dataclasses import dataclass
from typing import Any, ClassVar, Literal, TypeAlias

_log = logging.getLogger("warble.predicates")


@dataclass(frozen=True, slots=True)
class Passthrough:
    """The predicate permits the invocation."""

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class NoPerm:
    """The predicate definitively denies the invocation."""

    reason: Any
    kind: ClassVar[Literal["noperm"]] = "noperm"

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class PredicateError:
    """The predicate could not determine whether to permit the invocation.

    For example, the guild the message came from is not cached.
    """

    reason: Any
    kind: ClassVar[Literal["error"]] = "error"

    def __bool__(self) -> bool:
        return False


PASSTHROUGH = Passthrough()

PredicateResult: TypeAlias = Passthrough | NoPerm | PredicateError
Predicate: TypeAlias = Callable[[Any], PredicateResult]


def evaluate(message: Any, predicates: Iterable[Predicate]) -> PredicateResult:
    """Lazily evaluate ``predicates`` against ``message``.

    Returns the first ``NoPerm`` or ``PredicateError`` produced, without
    calling any predicate after it. Returns ``PASSTHROUGH`` when every
    predicate passes, including when there are none.
    """
    for predicate in predicates:
        result = predicate(message)
        if isinstance(result, (NoPerm, PredicateError)):
            _log.debug(
                "Predicate %s denied with %s: %r",
                getattr(predicate, "__name__", predicate),
                result.kind,
                result.reason,
            )
            return result
    return PASSTHROUGH


# -- Built-in predicates ----------------------------------------------------

PERMISSIONS: frozenset[str] = frozenset(
    {
        "add_reactions",
        "administrator",
        "attach_files",
        "ban_members",
        "change_nickname",
        "connect",
        "create_instant_invite",
        "create_private_threads",
        "create_public_threads",
        "deafen_members",
        "embed_links",
        "kick_members",
        "manage_channels",
        "manage_emojis_and_stickers",
        "manage_events",
        "manage_guild",
        "manage_messages",
        "manage_nicknames",
        "manage_roles",
        "manage_threads",
        "manage_webhooks",
        "mention_everyone",
        "moderate_members",
        "move_members",
        "mute_members",
        "priority_speaker",
        "read_message_history",
        "request_to_speak",
        "send_messages",
        "send_messages_in_threads",
        "send_tts_messages",
        "speak",
        "stream",
        "use_application_commands",
        "use_embedded_activities",
        "use_external_emojis",
        "use_external_stickers",
        "use_vad",
        "view_audit_log",
        "view_channel",
        "view_guild_insights",
    }
)


def guild_only(message: Any) -> PredicateResult:
    """Only allow messages sent on a guild.

    ``has_permission`` already checks this, so the two need not be
    stacked.
    """
    if getattr(message, "guild_id", None) is None:
        return PredicateError("this command can only be used on guilds")
    return PASSTHROUGH


def has_permission(
    permission: str,
    permissions_for: Callable[[Any], Collection[str]],
) -> Predicate:
    """Build a predicate requiring the message author to hold ``permission``.

    ``permissions_for(message)`` looks up the author's effective guild
    permissions in the embedding application's cache and returns their
    names. It should raise ``LookupError`` when the guild or member is
    not cached; that becomes a ``PredicateError`` rather than a denial.

    Usage::

        def predicates(self):
            return [has_permission("ban_members", cache.permissions_for)]

    Raises ``ValueError`` when ``permission`` is not a known permission
    name, so typos fail at startup.
    """
    if permission not in PERMISSIONS:
        msg = f"Unknown permission: {permission!r}"
        raise ValueError(msg)

    def predicate(message: Any) -> PredicateResult:
        if getattr(message, "guild_id", None) is None:
            return NoPerm("this command can only be used on guilds")
        try:
            granted = permissions_for(message)
        except LookupError:
            return PredicateError("the guild or member is not cached, can't check permissions")
        if permission in granted or "administrator" in granted:
            return PASSTHROUGH
        return NoPerm(f"you need the `{permission.upper()}` permission to do that")

    predicate.__name__ = f"has_permission_{permission}"
    return predicate
