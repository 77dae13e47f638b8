"""Message tokenizer: prefix stripping and shell-style splitting."""

import shlex
from collections.abc import Sequence


def strip_prefix(text: str, prefixes: str | Sequence[str]) -> str | None:
    """Remove the command prefix from ``text``.

    With several candidates, the first one ``text`` starts with is used
    (first match, not longest match). Returns ``None`` when no candidate
    matches.

    Examples::

        strip_prefix(".echo hi", ".")          -> "echo hi"
        strip_prefix("abfoo", ["a", "ab"])     -> "bfoo"
        strip_prefix("abfoo", ["ab", "a"])     -> "foo"
        strip_prefix("hello", ["!", "?"])      -> None
    """
    if isinstance(prefixes, str):
        prefixes = (prefixes,)
    for prefix in prefixes:
        if text.startswith(prefix):
            return text[len(prefix) :]
    return None


def split(text: str) -> list[str]:
    """Split ``text`` into tokens, honoring quoted spans.

    Examples::

        split('tag create "hello world"') -> ["tag", "create", "hello world"]
        split('say "unterminated')        -> ["say", '"unterminated']

    Malformed quoting falls back to plain whitespace splitting.
    """
    try:
        return shlex.split(text)
    except ValueError:
        return text.split()
