"""
Graphrepr Renderer

Turns the node tree built by the walker into one line of text.
"""

# Local ----------------------------------------------------------------------------------------------------------------

from graphrepr.nodes import GraphNode, MappingNode, ScalarNode, SequenceNode, Truncated
from graphrepr.text import ELLIPSIS

__all__ = ["render"]

SEPARATOR = ", "
KEY_SEPARATOR = ": "

_NODE_TYPES = (ScalarNode, Truncated, SequenceNode, MappingNode)


# Methods --------------------------------------------------------------------------------------------------------------

def render(node: GraphNode) -> str:
    """
    Render a node tree to text.

    Brackets follow the node kind: ``[...]`` for lists, ``(...)`` for tuples with
    a single element keeping its trailing comma, ``{...}`` for sets and mappings,
    and ``TypeName { a: 1 }`` for objects decomposed by their members. Mapping
    entries and set elements are sorted by their rendered text; a truncation tail
    always comes last and renders as ``…`` or ``…N more``. The tree is walked with
    an explicit stack, so deep nesting does not hit the recursion limit.

    Args:
        node: Root of a node tree, see graphrepr.walker.flatten().

    Returns:
        str: Single line rendering.

    Raises:
        TypeError: If node is not a graph node.

    Examples:
        >>> render(SequenceNode([ScalarNode("1"), ScalarNode("2"), Truncated()]))
        '[1, 2, …]'
        >>> render(MappingNode([(ScalarNode("Y"), ScalarNode("2")), (ScalarNode("X"), ScalarNode("1"))], "Point"))
        'Point { X: 1, Y: 2 }'
        >>> render(SequenceNode([ScalarNode("1")], kind="tuple"))
        '(1,)'
    """
    if not isinstance(node, _NODE_TYPES):
        raise TypeError(f"node must be a graph node, but got {type(node).__name__}")

    # Post-order walk: children texts are pushed onto done before their parent is joined
    done: list[str] = []
    stack: list[tuple[GraphNode, bool]] = [(node, False)]
    while stack:
        current, joined = stack.pop()
        if isinstance(current, ScalarNode):
            done.append(current.text)
        elif isinstance(current, Truncated):
            done.append(_fmt_truncated(current))
        elif not isinstance(current, _NODE_TYPES):
            raise TypeError(f"node must be a graph node, but got {type(current).__name__}")
        elif joined:
            count = len(_children(current))
            texts = done[len(done) - count:]
            del done[len(done) - count:]
            if isinstance(current, SequenceNode):
                done.append(_fmt_sequence(current, texts))
            else:
                done.append(_fmt_mapping(current, texts))
        else:
            stack.append((current, True))
            stack.extend((child, False) for child in reversed(_children(current)))
    return done[0]


# Private Methods ------------------------------------------------------------------------------------------------------

def _children(node: SequenceNode | MappingNode) -> list[GraphNode]:
    if isinstance(node, SequenceNode):
        return node.items
    return [part for entry in node.entries for part in entry]


def _fmt_mapping(node: MappingNode, texts: list[str]) -> str:
    entries = sorted(zip(texts[0::2], texts[1::2]))
    parts = [f"{key}{KEY_SEPARATOR}{value}" for key, value in entries]
    body = _join(parts, node.tail)

    if node.type_name is None:
        return f"{{{body}}}"
    return f"{node.type_name} {{ {body} }}" if body else f"{node.type_name} {{}}"


def _fmt_sequence(node: SequenceNode, texts: list[str]) -> str:
    parts = sorted(texts) if node.kind == "set" else texts
    body = _join(parts, node.tail)

    if node.kind == "tuple":
        if len(node.items) == 1 and node.tail is None:
            body += ","
        return f"({body})"
    if node.kind == "set":
        return f"{{{body}}}"
    return f"[{body}]"


def _fmt_truncated(node: Truncated) -> str:
    return ELLIPSIS if node.remaining is None else f"{ELLIPSIS}{node.remaining} more"


def _join(parts: list[str], tail: Truncated | None) -> str:
    if tail is not None:
        parts = [*parts, _fmt_truncated(tail)]
    return SEPARATOR.join(parts)
