"""User interaction helpers that don't fit into their own module."""

_ZERO_WIDTH_SPACE = "\u200b"


def escape_server_mentions(content: str) -> str:
    """Defuse ``@everyone`` and ``@here`` mentions in ``content``.

    A zero-width space after the ``@`` keeps the text readable while
    stopping the platform from pinging everyone::

        >>> escape_server_mentions("hello @everyone @here")
        'hello @\\u200beveryone @\\u200bhere'
    """
    return content.replace("@everyone", f"@{_ZERO_WIDTH_SPACE}everyone").replace(
        "@here", f"@{_ZERO_WIDTH_SPACE}here"
    )
