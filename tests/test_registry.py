"""Tests for warble.routing.registry — command tree mutation and lookup."""

import threading
from typing import Any

import pytest

from warble.errors import ConfigurationError
from warble.routing.nodes import DEFAULT, Group, Leaf
from warble.routing.outcomes import OK, Conflict
from warble.routing.registry import Registry, parse_path


class Command:
    """Minimal handler."""

    def __init__(self, *aliases: str) -> None:
        self._aliases = list(aliases)

    def execute(self, message: Any, args: Any) -> Any:
        return args

    def predicates(self) -> list[Any]:
        return []


class Plain:
    def execute(self, message: Any, args: Any) -> Any:
        return args

    def predicates(self) -> list[Any]:
        return []


class Aliased(Command):
    def aliases(self) -> list[str]:
        return self._aliases


class TestParsePath:
    def test_single_string(self) -> None:
        assert parse_path("echo") == ("echo", ())

    def test_nested(self) -> None:
        assert parse_path(["tag", "create"]) == ("tag", ("create",))

    def test_default_last(self) -> None:
        assert parse_path(("tag", "list", DEFAULT)) == ("tag", ("list", DEFAULT))

    def test_empty_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="must not be empty"):
            parse_path([])

    def test_default_at_top_level_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="Top-level"):
            parse_path([DEFAULT])

    def test_default_in_the_middle_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="last segment"):
            parse_path(["tag", DEFAULT, "x"])

    def test_non_string_segment_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="non-empty strings"):
            parse_path(["tag", 3])  # type: ignore[list-item]


class TestReadingEmpty:
    def test_all_is_empty(self) -> None:
        assert Registry().all() == {}

    def test_lookup_missing(self) -> None:
        assert Registry().lookup("nothing") is None

    def test_len_and_contains(self) -> None:
        r = Registry()
        assert len(r) == 0
        assert "x" not in r


class TestTopLevelCommands:
    def test_add_returns_ok(self) -> None:
        assert Registry().add(["test"], Plain()) is OK

    def test_remove_absent_is_ok(self) -> None:
        assert Registry().remove(["abcdefg"]) is OK

    def test_lookup_returns_leaf(self) -> None:
        r = Registry()
        handler = Plain()
        r.add(["zoink"], handler)

        leaf = r.lookup("zoink")
        assert isinstance(leaf, Leaf)
        assert leaf.handler is handler

    def test_all_shows_command(self) -> None:
        r = Registry()
        handler = Plain()
        r.add(["zoink"], handler)
        assert r.all() == {"zoink": Leaf(handler)}

    def test_re_add_replaces(self) -> None:
        r = Registry()
        first, second = Plain(), Plain()
        r.add(["zoink"], first)
        r.add(["zoink"], second)
        assert r.lookup("zoink").handler is second  # type: ignore[union-attr]

    def test_re_add_drops_replaced_aliases(self) -> None:
        r = Registry()
        r.add(["n0"], Aliased("n1"))
        replacement = Plain()

        r.add(["n0"], replacement)

        assert r.lookup("n1") is None
        assert r.lookup("n0") == Leaf(replacement)

        r.remove(["n0"])

        assert r.all() == {}

    def test_taking_over_an_alias_keeps_other_names(self) -> None:
        r = Registry()
        h = Aliased("n1", "n2")
        r.add(["n0"], h)
        other = Plain()

        r.add(["n1"], other)

        assert r.lookup("n1") == Leaf(other)
        assert r.lookup("n0") == Leaf(h, ("n1", "n2"))
        assert r.lookup("n2") == Leaf(h, ("n1", "n2"))

    def test_re_add_same_handler_refreshes_aliases(self) -> None:
        r = Registry()
        h = Aliased("old")
        r.add(["cmd"], h)
        h._aliases[:] = ["new"]

        r.add(["cmd"], h)

        assert r.lookup("old") is None
        assert r.lookup("new") == Leaf(h, ("new",))

    def test_remove(self) -> None:
        r = Registry()
        r.add(["borg"], Plain())
        assert r.remove(["borg"]) is OK
        assert r.all() == {}

    def test_rejects_non_handler(self) -> None:
        with pytest.raises(TypeError, match="missing execute"):
            Registry().add(["x"], object())

    def test_rejects_class_with_instance_methods(self) -> None:
        r = Registry()
        with pytest.raises(TypeError, match="register an instance instead"):
            r.add(["x"], Plain)
        assert r.all() == {}

    def test_parse_args_captured(self) -> None:
        class Parsed(Plain):
            def parse_args(self, args: list[str]) -> str:
                return " ".join(args)

        r = Registry()
        r.add(["p"], Parsed())
        leaf = r.lookup("p")
        assert isinstance(leaf, Leaf)
        assert leaf.parse_args is not None
        assert leaf.parse_args(["a", "b"]) == "a b"

    def test_no_parse_args(self) -> None:
        r = Registry()
        r.add(["p"], Plain())
        assert r.lookup("p").parse_args is None  # type: ignore[union-attr]


class TestConflicts:
    def test_add_subcommand_under_leaf(self) -> None:
        r = Registry()
        h1, h2 = Plain(), Plain()
        r.add(["a"], h1)

        result = r.add(["a", "b"], h2)

        assert isinstance(result, Conflict)
        assert not result
        assert "a is a top-level command" in result.reason
        assert r.lookup("a") == Leaf(h1)

    def test_remove_subcommand_under_leaf(self) -> None:
        r = Registry()
        r.add(["zoink"], Plain())
        assert isinstance(r.remove(["zoink", "stuff"]), Conflict)

    def test_add_under_nested_leaf(self) -> None:
        r = Registry()
        r.add(["g", "x"], Plain())
        before = r.all()

        result = r.add(["g", "x", "y"], Plain())

        assert isinstance(result, Conflict)
        assert "g x is a command" in result.reason
        assert r.all() == before

    def test_remove_under_nested_leaf(self) -> None:
        r = Registry()
        r.add(["g", "x"], Plain())
        assert isinstance(r.remove(["g", "x", "y"]), Conflict)
        assert r.lookup_path(["g", "x"]) is not None

    def test_conflict_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        r = Registry()
        r.add(["a"], Plain())
        with caplog.at_level("WARNING", logger="warble.registry"):
            r.add(["a", "b"], Plain())
        assert "top-level command" in caplog.text


class TestSubcommands:
    def test_add_builds_group(self) -> None:
        r = Registry()
        handler = Plain()
        r.add(["zerg", "spawn"], handler)

        group = r.lookup("zerg")
        assert isinstance(group, Group)
        assert group == {"spawn": Leaf(handler)}

    def test_add_updates_group(self) -> None:
        r = Registry()
        h = Plain()
        r.add(["zerg", "spawn"], h)
        assert r.add(["zerg", "promote"], h) is OK
        assert r.lookup("zerg") == {"spawn": Leaf(h), "promote": Leaf(h)}

    def test_deep_chain(self) -> None:
        r = Registry()
        h = Plain()
        r.add(["simple", "nested", "subcommand"], h)
        assert r.lookup("simple") == {"nested": {"subcommand": Leaf(h)}}
        assert r.lookup_path(["simple", "nested", "subcommand"]) == Leaf(h)

    def test_default_entry(self) -> None:
        r = Registry()
        h = Plain()
        r.add(["test", DEFAULT], h)
        group = r.lookup("test")
        assert isinstance(group, Group)
        assert group.default == Leaf(h)
        assert group.known() == []

    def test_remove_subcommand(self) -> None:
        r = Registry()
        h = Plain()
        r.add(["zerg", "arise"], h)
        r.add(["zerg", "spawn"], h)

        assert r.remove(["zerg", "spawn"]) is OK
        assert r.lookup("zerg") == {"arise": Leaf(h)}

    def test_remove_missing_subcommand_is_noop(self) -> None:
        r = Registry()
        h = Plain()
        r.add(["zerg", "arise"], h)
        assert r.remove(["zerg", "nope", "deeper"]) is OK
        assert r.lookup("zerg") == {"arise": Leaf(h)}

    def test_remove_under_absent_top_level(self) -> None:
        assert Registry().remove(["ghost", "x"]) is OK

    def test_lookup_path_missing(self) -> None:
        r = Registry()
        r.add(["g", "x"], Plain())
        assert r.lookup_path(["g", "y"]) is None
        assert r.lookup_path(["g", "x", "z"]) is None
        assert r.lookup_path(["nope"]) is None


class TestPruning:
    def test_single_branch(self) -> None:
        r = Registry()
        r.add(["g", "x"], Plain())
        r.remove(["g", "x"])
        assert r.lookup("g") is None

    def test_deep_branch(self) -> None:
        r = Registry()
        r.add(["a", "b", "c", "d"], Plain())
        r.remove(["a", "b", "c", "d"])
        assert r.all() == {}

    def test_prunes_only_empty_levels(self) -> None:
        r = Registry()
        h = Plain()
        r.add(["a", "b", "c"], h)
        r.add(["a", "keep"], h)

        r.remove(["a", "b", "c"])

        assert r.lookup("a") == {"keep": Leaf(h)}

    def test_removing_default_prunes(self) -> None:
        r = Registry()
        r.add(["test", DEFAULT], Plain())
        r.remove(["test", DEFAULT])
        assert r.lookup("test") is None


class TestAliases:
    def test_top_level_symmetry(self) -> None:
        r = Registry()
        h = Aliased("n1", "n2")
        r.add(["n0"], h)

        assert r.lookup("n0") == r.lookup("n1") == r.lookup("n2") == Leaf(h, ("n1", "n2"))

        r.remove(["n0"])

        assert r.lookup("n0") is None
        assert r.lookup("n1") is None
        assert r.lookup("n2") is None

    def test_alias_overwrites_silently(self) -> None:
        r = Registry()
        old, new = Plain(), Aliased("old")
        r.add(["old"], old)

        assert r.add(["new"], new) is OK
        assert r.lookup("old").handler is new  # type: ignore[union-attr]

    def test_remove_keeps_alias_taken_by_another_command(self) -> None:
        r = Registry()
        first, second = Aliased("shared"), Plain()
        r.add(["first"], first)
        r.add(["shared"], second)

        r.remove(["first"])

        assert r.lookup("shared").handler is second  # type: ignore[union-attr]

    def test_nested_aliases(self) -> None:
        r = Registry()
        h = Aliased("ls")
        r.add(["tag", "list"], h)
        assert r.lookup("tag") == {"list": Leaf(h, ("ls",)), "ls": Leaf(h, ("ls",))}

        r.remove(["tag", "list"])

        assert r.lookup("tag") is None

    def test_nested_re_add_drops_replaced_aliases(self) -> None:
        r = Registry()
        replacement = Plain()
        r.add(["tag", "list"], Aliased("ls"))

        r.add(["tag", "list"], replacement)

        assert r.lookup("tag") == {"list": Leaf(replacement)}

        r.remove(["tag", "list"])

        assert r.lookup("tag") is None

    def test_remove_by_alias_keeps_primary(self) -> None:
        r = Registry()
        h = Aliased("n1", "n2")
        r.add(["n0"], h)

        r.remove(["n1"])

        assert list(r.all()) == ["n0"]

    def test_aliases_snapshotted_at_add(self) -> None:
        r = Registry()
        h = Aliased("n1")
        r.add(["n0"], h)
        h._aliases.append("late")

        r.remove(["n0"])

        assert r.all() == {}

    def test_handler_without_aliases(self) -> None:
        r = Registry()
        r.add(["solo"], Command("ignored"))
        assert list(r.all()) == ["solo"]


class TestSnapshots:
    def test_all_is_read_only(self) -> None:
        r = Registry()
        r.add(["x"], Plain())
        with pytest.raises(TypeError):
            r.all()["y"] = None  # type: ignore[index]

    def test_snapshot_unaffected_by_later_writes(self) -> None:
        r = Registry()
        r.add(["x"], Plain())
        snapshot = r.all()

        r.add(["y"], Plain())
        r.remove(["x"])

        assert list(snapshot) == ["x"]

    def test_group_snapshot_unaffected(self) -> None:
        r = Registry()
        h = Plain()
        r.add(["g", "a"], h)
        group = r.lookup("g")

        r.add(["g", "b"], h)

        assert group == {"a": Leaf(h)}

    def test_clear(self) -> None:
        r = Registry()
        r.add(["x"], Plain())
        r.add(["g", "y"], Plain())
        r.clear()
        assert r.all() == {}


class TestWalk:
    def test_sorted_paths(self) -> None:
        r = Registry()
        h = Plain()
        r.add(["zerg", "spawn"], h)
        r.add(["zerg", DEFAULT], h)
        r.add(["echo"], h)

        paths = [path for path, _leaf in r.walk()]

        assert paths == [("echo",), ("zerg", DEFAULT), ("zerg", "spawn")]


class TestConcurrentWriters:
    def test_parallel_adds_all_land(self) -> None:
        r = Registry()
        h = Plain()

        def add_many(start: int) -> None:
            for i in range(start, start + 50):
                r.add(["group", f"sub{i}"], h)

        threads = [threading.Thread(target=add_many, args=(n * 50,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        group = r.lookup("group")
        assert isinstance(group, Group)
        assert len(group) == 200
