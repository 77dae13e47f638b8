"""Tests for warble.helpers."""

from warble.helpers import escape_server_mentions


class TestEscapeServerMentions:
    def test_plain_text_untouched(self) -> None:
        assert escape_server_mentions("hello world") == "hello world"

    def test_everyone_and_here(self) -> None:
        assert escape_server_mentions("hello @everyone @here") == (
            "hello @\u200beveryone @\u200bhere"
        )

    def test_user_mentions_untouched(self) -> None:
        assert escape_server_mentions("<@1234> hi") == "<@1234> hi"
