"""
Graphrepr Graph Walker

Flattens an arbitrary, possibly cyclic object graph into a bounded acyclic
node tree. The walk is breadth-first and iterative: the root is collected one
layer deep, then its composite children are expanded layer by layer, every
layer drawing from the same visit quota.
"""

# Standard library -----------------------------------------------------------------------------------------------------

import collections.abc as abc
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, NamedTuple

# Local ----------------------------------------------------------------------------------------------------------------

from graphrepr.nodes import GraphNode, MappingNode, ScalarNode, SequenceNode, Truncated
from graphrepr.scalars import fmt_scalar, is_scalar, text_form
from graphrepr.text import truncate
from graphrepr.utils import class_name, public_members

__all__ = [
    "Quota",
    "SeenSet",
    "flatten",
    "to_graph",
]

logger = logging.getLogger(__name__)

SeenSet = dict[int, Any]


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass
class Quota:
    """
    Mutable budget counters shared by one top-level call.

    Negative values are unbounded. Running out truncates the output, it never raises.

    Attributes:
        visits: Elements and members that may still be collected.
        str_length: Maximum characters per rendered scalar.
        layers: Layers that may still be expanded below the root.
    """
    visits: int = 80
    str_length: int = 400
    layers: int = 20

    def __post_init__(self):
        for name in ("visits", "str_length", "layers"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"Quota {name} must be int, but got {type(value).__name__}")

    def take(self) -> bool:
        """Consume one visit, return False if the quota is exhausted."""
        if self.visits == 0:
            return False
        if self.visits > 0:
            self.visits -= 1
        return True


class _Raw(NamedTuple):
    kind: str
    children: list
    tail: Truncated | None
    type_name: str | None = None


class _Slot(NamedTuple):
    """Composite child waiting for its layer; position is None for items, 0 or 1 for entry key or value."""
    value: Any
    holder: list
    index: int
    position: int | None = None

    def fill(self, node: GraphNode) -> None:
        if self.position is None:
            self.holder[self.index] = node
        else:
            entry = list(self.holder[self.index])
            entry[self.position] = node
            self.holder[self.index] = tuple(entry)


# Methods --------------------------------------------------------------------------------------------------------------

def flatten(value: Any, quota: Quota, seen: SeenSet | None = None, *, use_quotes: bool = False) -> GraphNode:
    """
    Flatten a value into an acyclic node tree bounded by the quota.

    Atomic values become ScalarNode, truncated to ``quota.str_length``. Composite
    values are tried against handlers in priority order:

        1. dictionary-like (Mapping or callable ``items()``) → MappingNode
        2. iterable → SequenceNode, keeping tuple and set kinds
        3. fixed-arity positional (``__len__`` and ``__getitem__``) → SequenceNode of tuple kind
        4. public instance members → MappingNode keyed by member name, with the type name

    A handler that raises while producing elements hands over to the next one.
    Each collected element consumes one visit; when the visits run out while
    elements remain, the collection gets a Truncated tail carrying the remaining
    count for sized sources.

    Composite children already in ``seen`` become Truncated, so cycles and shared
    references appear once. Children left pending after ``quota.layers`` layers
    are rendered as their truncated text form.

    Args:
        value: Any object.
        quota: Budget counters, consumed by the call.
        seen: Identity map of composites already placed in the tree. Created if None.
        use_quotes: If True, str and bytes scalars are rendered quoted.

    Returns:
        GraphNode: Root of the node tree.

    Raises:
        UnsupportedShapeError: For values with no text form, such as ctypes pointers to pointers.

    Examples:
        >>> flatten([1, 2], Quota())
        SequenceNode(items=[ScalarNode(text='1'), ScalarNode(text='2')], kind='list', tail=None)
        >>> flatten(list(range(5)), Quota(visits=3)).tail
        Truncated(remaining=2)
    """
    seen = {} if seen is None else seen

    if is_scalar(value):
        return _scalar_node(value, quota, use_quotes)
    if id(value) in seen:
        return Truncated()
    seen[id(value)] = value

    root, frontier = _expand(value, quota, seen, use_quotes)

    while frontier and quota.layers != 0:
        if quota.layers > 0:
            quota.layers -= 1
        pending = []
        for slot in frontier:
            node, children = _expand(slot.value, quota, seen, use_quotes)
            slot.fill(node)
            pending.extend(children)
        frontier = pending

    for slot in frontier:
        slot.fill(ScalarNode(truncate(text_form(slot.value), quota.str_length)))

    return root


def to_graph(
    value: Any,
    *,
    max_visits: int = 80,
    max_str: int = 400,
    max_layers: int = 20,
    use_quotes: bool = False,
) -> GraphNode:
    """
    Flatten a value with a fresh quota and seen set.

    Args:
        value: Any object.
        max_visits: Elements and members collected in total; negative is unbounded.
        max_str: Characters per scalar before truncation; negative is unbounded.
        max_layers: Layers expanded below the root; negative is unbounded.
        use_quotes: If True, str and bytes scalars are rendered quoted.

    Returns:
        GraphNode: Root of the node tree, see flatten().
    """
    quota = Quota(visits=max_visits, str_length=max_str, layers=max_layers)
    return flatten(value, quota, {}, use_quotes=use_quotes)


# Private Methods ------------------------------------------------------------------------------------------------------

def _expand(value: Any, quota: Quota, seen: SeenSet, use_quotes: bool) -> tuple[GraphNode, list[_Slot]]:
    """Collect one layer of a composite; composite children are returned as pending slots."""
    raw = _collect(value, quota)
    slots: list[_Slot] = []

    if raw.kind == "mapping":
        node = MappingNode(type_name=raw.type_name, tail=raw.tail)
        for i, (key, item) in enumerate(raw.children):
            if raw.type_name is not None:
                key_node = ScalarNode(truncate(key, quota.str_length))  # Member names stay bare
            else:
                key_node = _child(key, quota, seen, _Slot(key, node.entries, i, 0), slots, use_quotes)
            node.entries.append((
                key_node,
                _child(item, quota, seen, _Slot(item, node.entries, i, 1), slots, use_quotes),
            ))
        return node, slots

    node = SequenceNode(kind=raw.kind, tail=raw.tail)
    for i, item in enumerate(raw.children):
        node.items.append(_child(item, quota, seen, _Slot(item, node.items, i), slots, use_quotes))
    return node, slots


def _child(
    value: Any, quota: Quota, seen: SeenSet, slot: _Slot, slots: list[_Slot], use_quotes: bool
) -> GraphNode | None:
    if is_scalar(value):
        return _scalar_node(value, quota, use_quotes)
    if id(value) in seen:
        return Truncated()
    seen[id(value)] = value
    slots.append(slot)
    return None  # Placeholder until the slot is filled


def _collect(value: Any, quota: Quota) -> _Raw:
    start = quota.visits
    for handler in _HANDLERS:
        try:
            raw = handler(value, quota)
        except Exception as exc:
            quota.visits = start
            logger.debug("%s failed on %s, falling back: %r", handler.__name__, class_name(value), exc)
            continue
        if raw is not None:
            return raw
    return _collect_members(value, quota)


def _collect_items(value: Any, quota: Quota) -> _Raw | None:
    if not isinstance(value, abc.Mapping) and not callable(getattr(type(value), "items", None)):
        return None
    children, tail = _take(((k, v) for k, v in value.items()), quota, _size(value))
    return _Raw("mapping", children, tail)


def _collect_iterable(value: Any, quota: Quota) -> _Raw | None:
    if not isinstance(value, abc.Iterable):
        return None
    if isinstance(value, tuple):
        kind = "tuple"
    elif isinstance(value, abc.Set):
        kind = "set"
    else:
        kind = "list"
    children, tail = _take(iter(value), quota, _size(value))
    return _Raw(kind, children, tail)


def _collect_indexed(value: Any, quota: Quota) -> _Raw | None:
    tp = type(value)
    if not (hasattr(tp, "__len__") and hasattr(tp, "__getitem__")):
        return None
    size = len(value)
    children, tail = _take((value[i] for i in range(size)), quota, size)
    return _Raw("tuple", children, tail)


def _collect_members(value: Any, quota: Quota) -> _Raw:
    names = public_members(value)
    members = ((name, _member_value(value, name)) for name in names)
    children, tail = _take(members, quota, len(names))
    return _Raw("mapping", children, tail, type_name=class_name(value))


def _member_value(obj: Any, name: str) -> Any:
    """Member value, or the exception its getter raised; text form of it when obj is an exception itself."""
    try:
        return getattr(obj, name)
    except Exception as exc:
        if isinstance(obj, BaseException):
            return text_form(exc)
        return exc


def _scalar_node(value: Any, quota: Quota, use_quotes: bool = False) -> ScalarNode:
    return ScalarNode(truncate(fmt_scalar(value, use_quotes=use_quotes), quota.str_length))


def _size(value: Any) -> int | None:
    try:
        return len(value)
    except Exception:
        return None


def _take(items: Iterable[Any], quota: Quota, size: int | None) -> tuple[list, Truncated | None]:
    """Take items while visits last; Truncated tail if any item was left over."""
    taken = []
    for item in items:
        if not quota.take():
            remaining = size - len(taken) if size is not None else None
            return taken, Truncated(remaining if remaining and remaining > 0 else None)
        taken.append(item)
    return taken, None


_HANDLERS: tuple[Callable[[Any, Quota], _Raw | None], ...] = (
    _collect_items,
    _collect_iterable,
    _collect_indexed,
)
