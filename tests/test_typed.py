#
# Graphrepr - Typed Formatter Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import enum
import io
import itertools
import logging
import threading
from dataclasses import dataclass

# Third party ----------------------------------------------------------------------------------------------------------
import pytest
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from graphrepr.errors import UnsupportedPlatformError
from graphrepr.typed import FORMATTERS, FormatterCache, compile_formatter, fmt_typed


# Helpers --------------------------------------------------------------------------------------------------------------

class Point:
    def __init__(self, x=1, y=2):
        self.Y = y
        self.X = x


class Named:
    def __init__(self):
        self.name = "x"


class Inner:
    def __init__(self):
        self.v = 1


class Outer:
    def __init__(self):
        self.inner = Inner()


@dataclass
class Pair:
    left: int
    right: str


class Slotted:
    __slots__ = ("a", "b")

    def __init__(self):
        self.a = 1
        self.b = [2]


class Faulty:
    @property
    def a(self):
        raise UnsupportedPlatformError("windows only")

    @property
    def b(self):
        raise NotImplementedError

    @property
    def c(self):
        raise io.UnsupportedOperation("not seekable")

    @property
    def d(self):
        raise RuntimeError("broken")

    @property
    def ok(self):
        return 1


class Legacy:
    @property
    def current(self):
        return 1

    def _old(self):
        return 0

    _old.__deprecated__ = "use current"
    old = property(_old)


class Flags(enum.Flag):
    Read = 1
    Write = 2


class BrokenIterable:
    def __iter__(self):
        raise RuntimeError("boom")


class BrokenMapping(abc.Mapping):
    def __getitem__(self, key):
        raise KeyError(key)

    def __iter__(self):
        raise RuntimeError("boom")

    def __len__(self):
        return 1


class Endless:
    def __iter__(self):
        return itertools.count()


# Tests ----------------------------------------------------------------------------------------------------------------

class TestFmtTypedObjects:
    def test_plain_object(self):
        """Render members sorted by name."""
        assert fmt_typed(Point()) == "Point { X: 1, Y: 2 }"

    def test_members_quoted(self):
        """Quote text members."""
        assert fmt_typed(Named()) == "Named { name: 'x' }"

    def test_dataclass(self):
        assert fmt_typed(Pair(1, "r")) == "Pair { left: 1, right: 'r' }"

    def test_slots(self):
        assert fmt_typed(Slotted()) == "Slotted { a: 1, b: [2] }"

    @pytest.mark.parametrize(
        "depth, expected",
        [
            pytest.param(0, "Outer", id="depth-0"),
            pytest.param(1, "Outer { inner: Inner }", id="depth-1"),
            pytest.param(2, "Outer { inner: Inner { v: 1 } }", id="depth-2"),
        ],
    )
    def test_depth(self, depth, expected):
        """Render composites at depth 0 as their type name."""
        assert fmt_typed(Outer(), depth) == expected

    def test_member_failures(self):
        """Replace failing members by markers and render the others."""
        assert fmt_typed(Faulty()) == (
            "Faulty { a: !<unsupported platform>, b: !<unsupported operation>, "
            "c: !<unsupported operation>, d: !<invalid operation>, ok: 1 }"
        )

    def test_deprecated_skipped(self):
        assert fmt_typed(Legacy()) == "Legacy { current: 1 }"

    def test_exception(self):
        assert fmt_typed(ValueError("bad")) == "ValueError { args: ('bad',) }"


class TestFmtTypedCollections:
    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param({"b": 1, "a": 2}, "{'a': 2, 'b': 1}", id="dict-sorted"),
            pytest.param(frozendict(k="v"), "{'k': 'v'}", id="frozendict"),
            pytest.param({3, 1, 2}, "{1, 2, 3}", id="set-sorted"),
            pytest.param((1,), "(1,)", id="tuple-single"),
            pytest.param((), "()", id="tuple-empty"),
            pytest.param(["a", None], "['a', None]", id="list"),
            pytest.param({}, "{}", id="dict-empty"),
        ],
    )
    def test_collections(self, value, expected):
        assert fmt_typed(value) == expected

    def test_max_items(self):
        """Cap elements and count the rest."""
        assert fmt_typed(list(range(40))) == "[" + ", ".join(map(str, range(32))) + ", …8 more]"

    def test_max_items_unsized(self):
        assert fmt_typed(Endless(), max_items=2) == "[0, 1, …]"

    def test_max_items_unbounded(self):
        assert fmt_typed(list(range(40)), max_items=-1) == str(list(range(40)))

    def test_cycle_bounded_by_depth(self):
        items = []
        items.append(items)
        assert fmt_typed(items, depth=2) == "[[list]]"

    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(BrokenIterable(), "BrokenIterable {}", id="iterable"),
            pytest.param(BrokenMapping(), "BrokenMapping {}", id="mapping"),
            pytest.param([1, BrokenIterable()], "[1, BrokenIterable {}]", id="nested"),
        ],
    )
    def test_enumeration_failure(self, value, expected):
        """Fall back to the members when enumeration raises."""
        assert fmt_typed(value) == expected

    def test_enumeration_failure_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="graphrepr.typed")
        fmt_typed(BrokenIterable())
        assert "_fmt_iterable failed on BrokenIterable" in caplog.text


class TestFmtTypedScalars:
    @pytest.mark.parametrize(
        "value, use_quotes, expected",
        [
            pytest.param(None, False, "None", id="none"),
            pytest.param(True, False, "True", id="bool"),
            pytest.param("s", False, "s", id="str"),
            pytest.param("s", True, "'s'", id="str-quoted"),
            pytest.param(Flags.Read | Flags.Write, False, "Flags(0x3) = Read | Write", id="flags"),
            pytest.param(int, False, "int", id="class"),
        ],
    )
    def test_scalars(self, value, use_quotes, expected):
        assert fmt_typed(value, use_quotes=use_quotes) == expected

    @pytest.mark.parametrize(
        "kwargs, error",
        [
            pytest.param({"depth": -1}, ValueError, id="negative-depth"),
            pytest.param({"depth": "1"}, TypeError, id="str-depth"),
            pytest.param({"max_items": 1.0}, TypeError, id="float-max-items"),
        ],
    )
    def test_invalid(self, kwargs, error):
        with pytest.raises(error):
            fmt_typed([1], **kwargs)


class TestFormatterCache:
    def test_compile_once(self):
        calls = []

        def compiler(tp):
            calls.append(tp)
            return compile_formatter(tp)

        cache = FormatterCache(compiler)
        first = cache.get(Point)
        assert cache.get(Point) is first
        assert calls == [Point]
        assert Point in cache
        assert len(cache) == 1

    def test_compile_once_concurrently(self):
        """Compile a type once when first used from several threads."""
        calls = []
        barrier = threading.Barrier(8)

        def compiler(tp):
            calls.append(tp)
            return compile_formatter(tp)

        cache = FormatterCache(compiler)
        results = []

        def worker():
            barrier.wait()
            results.append(cache.get(Named))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert calls == [Named]
        assert all(r is results[0] for r in results)

    def test_clear(self):
        cache = FormatterCache()
        cache.get(Point)
        cache.clear()
        assert Point not in cache

    def test_shared_cache(self):
        """Cache the formatter of each type rendered by fmt_typed."""
        fmt_typed(Inner())
        assert Inner in FORMATTERS

    def test_compile_logged(self, caplog):
        class Fresh:
            pass

        caplog.set_level(logging.DEBUG, logger="graphrepr.typed")
        assert fmt_typed(Fresh()) == "Fresh {}"
        assert "Compiled formatter for" in caplog.text

    def test_instance_members_per_call(self):
        """Merge instance attributes per call on a cached formatter."""
        formatter = compile_formatter(Point)
        extra = Point()
        extra.Z = 3
        assert formatter(Point(), 1) == "Point { X: 1, Y: 2 }"
        assert formatter(extra, 1) == "Point { X: 1, Y: 2, Z: 3 }"
