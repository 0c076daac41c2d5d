"""
Graphrepr Typed Formatter

Depth-bounded formatter that renders objects by their public members. The
member list of each runtime type is resolved once and compiled into a
formatter, cached for the process lifetime.
"""

# Standard library -----------------------------------------------------------------------------------------------------

import collections.abc as abc
import io
import logging
import threading
from itertools import islice
from typing import Any, Callable, Iterable, Protocol

# Local ----------------------------------------------------------------------------------------------------------------

from graphrepr.errors import UnsupportedPlatformError
from graphrepr.scalars import fmt_scalar, is_scalar
from graphrepr.text import ELLIPSIS
from graphrepr.utils import class_members, class_name, instance_members

__all__ = [
    "CompiledFormatter",
    "FORMATTERS",
    "FormatterCache",
    "compile_formatter",
    "fmt_typed",
]

logger = logging.getLogger(__name__)

UNSUPPORTED_PLATFORM = "!<unsupported platform>"
UNSUPPORTED_OPERATION = "!<unsupported operation>"
INVALID_OPERATION = "!<invalid operation>"


# Classes --------------------------------------------------------------------------------------------------------------

class CompiledFormatter(Protocol):
    def __call__(self, value: Any, depth: int, *, max_items: int = 32) -> str: ...


class FormatterCache:
    """
    Map of runtime type to its compiled formatter.

    Entries are created on first use and never invalidated. Compilation runs under
    a lock, so each type is compiled once even when first used from several threads.

    Args:
        compiler: Builds the formatter for a type, defaults to compile_formatter().

    Examples:
        >>> cache = FormatterCache()
        >>> class Point:
        ...     def __init__(self):
        ...         self.X, self.Y = 1, 2
        >>> cache.get(Point)(Point(), depth=1)
        'Point { X: 1, Y: 2 }'
        >>> Point in cache
        True
    """

    def __init__(self, compiler: Callable[[type], CompiledFormatter] | None = None):
        self._compiler = compiler or compile_formatter
        self._formatters: dict[type, CompiledFormatter] = {}
        self._lock = threading.Lock()

    def __contains__(self, tp: type) -> bool:
        return tp in self._formatters

    def __len__(self) -> int:
        return len(self._formatters)

    def get(self, tp: type) -> CompiledFormatter:
        """Return the formatter for a type, compiling it if absent."""
        formatter = self._formatters.get(tp)
        if formatter is not None:
            return formatter

        with self._lock:
            formatter = self._formatters.get(tp)
            if formatter is None:
                formatter = self._compiler(tp)
                self._formatters[tp] = formatter
                logger.debug("Compiled formatter for %s", class_name(tp, fully_qualified=True))
        return formatter

    def clear(self) -> None:
        with self._lock:
            self._formatters.clear()


# Methods --------------------------------------------------------------------------------------------------------------

def compile_formatter(tp: type) -> CompiledFormatter:
    """
    Build the member formatter of a type.

    Resolves the public readable members declared by the type once (slots, dataclass
    fields, class annotations and properties, without deprecated ones). Names from the
    instance __dict__ are merged per call. Members render as ``Name: value`` in name
    order, wrapped as ``TypeName { ... }``.

    A member whose access or formatting fails renders as a marker and the other members
    still render:
        - ``!<unsupported platform>`` for UnsupportedPlatformError
        - ``!<unsupported operation>`` for NotImplementedError and io.UnsupportedOperation
        - ``!<invalid operation>`` for any other exception
    """
    type_name = class_name(tp)
    declared = class_members(tp)

    def formatter(value: Any, depth: int, *, max_items: int = 32) -> str:
        extra = instance_members(value)
        names = sorted(set(declared).union(extra)) if extra else declared
        parts = [f"{name}: {_fmt_member(value, name, depth, max_items)}" for name in names]
        return f"{type_name} {{ {', '.join(parts)} }}" if parts else f"{type_name} {{}}"

    return formatter


def fmt_typed(value: Any, depth: int = 3, *, use_quotes: bool = False, max_items: int = 32) -> str:
    """
    Format a value by its public members, descending at most depth levels.

    None and booleans are literal tokens, other atomic values render via fmt_scalar().
    Mappings, sets, tuples and other iterables render element-wise with at most
    max_items elements followed by ``…N more``; mapping entries and set elements are
    sorted by their rendered text. Everything else renders through the compiled
    formatter of its type, as do collections whose enumeration raises. Nested
    elements and members always render text quoted.
    At depth 0, composite values render as their type name only.

    Args:
        value: Any object.
        depth: Levels of members and elements to descend into.
        use_quotes: If True, a top-level str or bytes value is quoted.
        max_items: Elements per collection; negative is unbounded.

    Returns:
        str: The formatted value.

    Raises:
        ValueError: If depth is negative.
        TypeError: If depth or max_items is not an int.

    Examples:
        >>> fmt_typed({"b": 2, "a": [1, 2]})
        "{'a': [1, 2], 'b': 2}"
        >>> fmt_typed(list(range(40)), max_items=3)
        '[0, 1, 2, …37 more]'
        >>> fmt_typed([[1]], depth=1)
        '[list]'
    """
    if not isinstance(depth, int) or isinstance(depth, bool):
        raise TypeError(f"depth must be int, but got {type(depth).__name__}")
    if not isinstance(max_items, int) or isinstance(max_items, bool):
        raise TypeError(f"max_items must be int, but got {type(max_items).__name__}")
    if depth < 0:
        raise ValueError(f"depth must be non-negative, but got {depth}")

    if is_scalar(value):
        return fmt_scalar(value, use_quotes=use_quotes)

    if depth == 0:
        return class_name(value)

    if isinstance(value, abc.Mapping):
        try:
            return _fmt_items(value, depth, max_items)
        except Exception as exc:
            logger.debug("%s failed on %s, falling back: %r", "_fmt_items", class_name(value), exc)

    if isinstance(value, abc.Iterable):
        try:
            return _fmt_iterable(value, depth, max_items)
        except Exception as exc:
            logger.debug("%s failed on %s, falling back: %r", "_fmt_iterable", class_name(value), exc)

    return FORMATTERS.get(type(value))(value, depth, max_items=max_items)


# Private Methods ------------------------------------------------------------------------------------------------------

def _fmt_items(value: abc.Mapping, depth: int, max_items: int) -> str:
    entries, more = _head(value.items(), max_items)
    parts = [f"{fmt_typed(k, depth - 1, use_quotes=True, max_items=max_items)}: "
             f"{fmt_typed(v, depth - 1, use_quotes=True, max_items=max_items)}"
             for k, v in entries]
    return "{" + _join(sorted(parts), more, value) + "}"


def _fmt_iterable(value: Iterable[Any], depth: int, max_items: int) -> str:
    items, more = _head(value, max_items)
    parts = [fmt_typed(item, depth - 1, use_quotes=True, max_items=max_items) for item in items]
    if isinstance(value, abc.Set):
        return "{" + _join(sorted(parts), more, value) + "}"
    if isinstance(value, tuple):
        body = _join(parts, more, value)
        return f"({body},)" if len(parts) == 1 and not more else f"({body})"
    return "[" + _join(parts, more, value) + "]"


def _fmt_member(value: Any, name: str, depth: int, max_items: int) -> str:
    try:
        return fmt_typed(getattr(value, name), depth - 1, use_quotes=True, max_items=max_items)
    except UnsupportedPlatformError:
        return UNSUPPORTED_PLATFORM
    except (NotImplementedError, io.UnsupportedOperation):
        return UNSUPPORTED_OPERATION
    except Exception:
        return INVALID_OPERATION


def _head(iterable: Iterable[Any], n: int) -> tuple[list[Any], bool]:
    """Take up to n items and indicate whether there were more items; all items when n is negative."""
    if n < 0:
        return list(iterable), False
    buf = list(islice(iter(iterable), n + 1))
    if len(buf) <= n:
        return buf, False
    return buf[:n], True


def _join(parts: list[str], more: bool, source: Any) -> str:
    """Join rendered elements, appending the count of elements left out when known."""
    if more:
        try:
            parts = [*parts, f"{ELLIPSIS}{len(source) - len(parts)} more"]
        except TypeError:
            parts = [*parts, ELLIPSIS]
    return ", ".join(parts)


FORMATTERS = FormatterCache()
