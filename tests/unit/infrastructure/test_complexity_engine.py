"""Tests for file complexity and the degree boost."""

from archscope.domain.entities.code import CodeComponent, ComponentKind
from archscope.domain.entities.graph import ComponentEdge, ComponentNode, ComponentType
from archscope.infrastructure.analyzer.complexity_engine import (
    apply_degree_boost,
    degree_map,
    file_complexity,
)


def _node(node_id: str, complexity: int = 10) -> ComponentNode:
    return ComponentNode(id=node_id, label=node_id, path=node_id, type=ComponentType.UTILITY, complexity=complexity)


def _component(kind: ComponentKind) -> CodeComponent:
    return CodeComponent(name="x", kind=kind, file_path="a.ts", start_line=1, end_line=1)


class TestFileComplexity:
    """Tests for file_complexity."""

    def test_without_content_uses_size_and_type(self):
        """Size and type points only, no content points."""
        assert file_complexity(None, 5000, ComponentType.COMPONENT) == 20

    def test_size_points_capped(self):
        assert file_complexity(None, 10_000_000, ComponentType.AUTH) == 85

    def test_branches_add_points(self):
        plain = file_complexity("return a", 8, ComponentType.UTILITY, parsed=True)
        branchy = file_complexity("if (a) {}", 9, ComponentType.UTILITY, parsed=True)
        assert plain == 5
        assert branchy == 7

    def test_extracted_constructs_weighted_by_kind(self):
        content = "x"
        base = file_complexity(content, 1, ComponentType.UTILITY, [], parsed=True)
        with_class = file_complexity(content, 1, ComponentType.UTILITY, [_component(ComponentKind.CLASS)], parsed=True)
        with_hook = file_complexity(content, 1, ComponentType.UTILITY, [_component(ComponentKind.HOOK)], parsed=True)
        assert with_class - base == 8
        assert with_hook - base == 4

    def test_regex_fallback_when_unparsed(self):
        """Unparsed content falls back to regex construct counting."""
        content = "function a() {}\nclass B {}"
        assert file_complexity(content, len(content), ComponentType.UTILITY, parsed=False) == 18

    def test_structure_patterns(self):
        content = "interface P {}\ntype Q = string"
        assert file_complexity(content, len(content), ComponentType.UTILITY, parsed=True) == 10

    def test_clamped_to_hundred(self):
        content = "if (a) {}\n" * 200
        assert file_complexity(content, len(content), ComponentType.AUTH, parsed=True) == 100


class TestDegreeBoost:
    """Tests for degree_map and apply_degree_boost."""

    def test_degree_counts_both_ends(self):
        """An edge adds degree to its source and its target."""
        nodes = [_node("a"), _node("b"), _node("c")]
        edges = [ComponentEdge("a", "b"), ComponentEdge("a", "c")]
        assert degree_map(nodes, edges) == {"a": 2, "b": 1, "c": 1}

    def test_boost_two_per_edge(self):
        nodes = [_node("a"), _node("b"), _node("c"), _node("d")]
        edges = [ComponentEdge("a", "b"), ComponentEdge("a", "c")]
        boosted = apply_degree_boost(nodes, edges)
        assert [n.complexity for n in boosted] == [14, 12, 12, 10]

    def test_boost_capped(self):
        """The degree boost stops at its cap for hub nodes."""
        hub = _node("hub")
        leaves = [_node(f"n{i}") for i in range(15)]
        edges = [ComponentEdge(leaf.id, "hub") for leaf in leaves]
        boosted = apply_degree_boost([hub, *leaves], edges)
        assert boosted[0].complexity == 30

    def test_boost_clamped_to_hundred(self):
        boosted = apply_degree_boost([_node("a", 95), _node("b", 95)], [ComponentEdge("a", "b")] * 3)
        assert [n.complexity for n in boosted] == [100, 100]

    def test_original_nodes_unchanged(self):
        """Boosting returns new nodes and leaves the input untouched."""
        nodes = [_node("a"), _node("b")]
        apply_degree_boost(nodes, [ComponentEdge("a", "b")])
        assert nodes[0].complexity == 10
