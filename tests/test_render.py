#
# Graphrepr - Renderer Tests
#

# Third party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from graphrepr.nodes import MappingNode, ScalarNode, SequenceNode, Truncated
from graphrepr.render import render
from graphrepr.walker import to_graph


# Helpers --------------------------------------------------------------------------------------------------------------

class Point:
    def __init__(self):
        self.Y = 2
        self.X = 1


class Empty:
    pass


def _scalars(*texts):
    return [ScalarNode(t) for t in texts]


# Tests ----------------------------------------------------------------------------------------------------------------

class TestRenderNodes:
    @pytest.mark.parametrize(
        "node, expected",
        [
            pytest.param(ScalarNode("x"), "x", id="scalar"),
            pytest.param(Truncated(), "…", id="truncated"),
            pytest.param(Truncated(5), "…5 more", id="truncated-count"),
            pytest.param(SequenceNode([]), "[]", id="list-empty"),
            pytest.param(SequenceNode(_scalars("1", "2")), "[1, 2]", id="list"),
            pytest.param(SequenceNode(_scalars("1"), kind="tuple"), "(1,)", id="tuple-single"),
            pytest.param(SequenceNode([], kind="tuple"), "()", id="tuple-empty"),
            pytest.param(SequenceNode(_scalars("1", "2"), kind="tuple"), "(1, 2)", id="tuple"),
            pytest.param(SequenceNode(_scalars("3", "1", "2"), kind="set"), "{1, 2, 3}", id="set-sorted"),
            pytest.param(MappingNode([]), "{}", id="dict-empty"),
            pytest.param(MappingNode([], type_name="Empty"), "Empty {}", id="object-empty"),
        ],
    )
    def test_render(self, node, expected):
        assert render(node) == expected

    def test_mapping_sorted(self):
        """Sort entries by rendered key."""
        node = MappingNode([(ScalarNode("b"), ScalarNode("1")), (ScalarNode("a"), ScalarNode("2"))])
        assert render(node) == "{a: 2, b: 1}"

    def test_tail_last(self):
        """Keep the tail marker after sorted elements."""
        node = SequenceNode(_scalars("z", "a"), kind="set", tail=Truncated(3))
        assert render(node) == "{a, z, …3 more}"

    def test_tuple_single_with_tail(self):
        node = SequenceNode(_scalars("1"), kind="tuple", tail=Truncated(1))
        assert render(node) == "(1, …1 more)"

    def test_object_tail(self):
        node = MappingNode([(ScalarNode("X"), ScalarNode("1"))], type_name="Point", tail=Truncated(1))
        assert render(node) == "Point { X: 1, …1 more }"

    def test_invalid_node(self):
        with pytest.raises(TypeError, match=r"(?i)must be a graph node"):
            render("text")

    def test_deep_tree(self):
        """Render trees deeper than the recursion limit."""
        node = MappingNode([])
        for _ in range(5000):
            node = SequenceNode([MappingNode([(ScalarNode("k"), node)])], kind="tuple")
        assert render(node) == "({k: " * 5000 + "{}" + "},)" * 5000

    def test_invalid_child(self):
        with pytest.raises(TypeError, match=r"(?i)must be a graph node"):
            render(SequenceNode(["text"]))


class TestRenderGraphs:
    def test_cycle(self):
        items = [1, 2]
        items.append(items)
        assert render(to_graph(items)) == "[1, 2, …]"

    def test_object(self):
        assert render(to_graph(Point())) == "Point { X: 1, Y: 2 }"

    def test_empty_object(self):
        assert render(to_graph(Empty())) == "Empty {}"

    def test_visits_exhausted(self):
        text = render(to_graph(list(range(85)), max_visits=80))
        assert text.endswith(", 79, …5 more]")

    def test_visits_equal_to_size(self):
        text = render(to_graph(list(range(80)), max_visits=80))
        assert text.endswith(", 79]")
        assert "…" not in text

    def test_nested(self):
        value = {"b": [1, (2,)], "a": {3}}
        assert render(to_graph(value)) == "{a: {3}, b: [1, (2,)]}"

    def test_deterministic(self):
        value = {"k": [Point(), {"z", "y"}], "j": None}
        assert render(to_graph(value)) == render(to_graph(value))
        assert render(to_graph(value)) == "{j: None, k: [Point { X: 1, Y: 2 }, {y, z}]}"
