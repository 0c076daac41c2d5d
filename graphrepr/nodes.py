"""
Graphrepr Node Model

Acyclic node tree produced by the walker and consumed by the renderer.
"""

# Standard library -----------------------------------------------------------------------------------------------------

from dataclasses import dataclass, field
from typing import Literal, Union

__all__ = [
    "GraphNode",
    "MappingNode",
    "ScalarNode",
    "SequenceNode",
    "Truncated",
]

# Classes --------------------------------------------------------------------------------------------------------------

SequenceKind = Literal["list", "tuple", "set"]


@dataclass(frozen=True)
class Truncated:
    """
    Marker for content left out.

    Stands for a cycle or shared reference, or for the tail of a collection
    cut short by the visit quota. The remaining count is known only for sized sources.
    """
    remaining: int | None = None


@dataclass(frozen=True)
class ScalarNode:
    """Already rendered atomic value."""
    text: str


@dataclass
class SequenceNode:
    """Positional collection; kind selects the brackets."""
    items: list["GraphNode"] = field(default_factory=list)
    kind: SequenceKind = "list"
    tail: Truncated | None = None


@dataclass
class MappingNode:
    """
    Keyed collection.

    Dictionaries have no type_name. Objects decomposed by their members carry
    the type name and use member names as keys.
    """
    entries: list[tuple["GraphNode", "GraphNode"]] = field(default_factory=list)
    type_name: str | None = None
    tail: Truncated | None = None


GraphNode = Union[ScalarNode, SequenceNode, MappingNode, Truncated]
