"""Insight generator and graph statistics.

Pure functions over the final (boosted) nodes and edges. The pattern labels are
coarse count thresholds, not proofs of an architecture.
"""

from collections import Counter

from archscope.domain.entities.graph import (
    ComponentEdge,
    ComponentNode,
    ComponentType,
    GraphInsights,
    GraphStats,
)
from archscope.infrastructure.analyzer.complexity_engine import degree_map

HIGH_COMPLEXITY_THRESHOLD = 50
CRITICAL_DEGREE_THRESHOLD = 5
TOP_N = 5
LAYERED_MIN_TYPES = 3
MICROSERVICES_MIN_SERVICES = 3
MAX_FRAMEWORKS = 3


def _average_connections(nodes: list[ComponentNode], edges: list[ComponentEdge]) -> float:
    if not nodes:
        return 0.0
    return len(edges) / len(nodes)


def high_complexity_nodes(nodes: list[ComponentNode]) -> list[ComponentNode]:
    ranked = sorted(
        (n for n in nodes if n.complexity > HIGH_COMPLEXITY_THRESHOLD),
        key=lambda n: n.complexity,
        reverse=True,
    )
    return ranked[:TOP_N]


def isolated_nodes(nodes: list[ComponentNode], degrees: dict[str, int]) -> list[ComponentNode]:
    return [n for n in nodes if degrees.get(n.id, 0) == 0]


def critical_nodes(nodes: list[ComponentNode], degrees: dict[str, int]) -> list[ComponentNode]:
    ranked = sorted(
        (n for n in nodes if degrees.get(n.id, 0) > CRITICAL_DEGREE_THRESHOLD),
        key=lambda n: degrees[n.id],
        reverse=True,
    )
    return ranked[:TOP_N]


def detect_patterns(nodes: list[ComponentNode]) -> list[str]:
    types = Counter(n.type for n in nodes)
    patterns = []
    if len(types) >= LAYERED_MIN_TYPES:
        patterns.append("Layered Architecture")
    if types[ComponentType.COMPONENT] > 0:
        patterns.append("Component-Based Architecture")
    if types[ComponentType.API] > 0:
        patterns.append("API-First Architecture")
    if types[ComponentType.SERVICE] > MICROSERVICES_MIN_SERVICES:
        patterns.append("Microservices Pattern")
    return patterns


def generate_recommendations(
    nodes: list[ComponentNode],
    edges: list[ComponentEdge],
    high_complexity: list[ComponentNode],
    isolated: list[ComponentNode],
) -> list[str]:
    recs = []
    if high_complexity:
        recs.append(f"Consider refactoring {len(high_complexity)} high-complexity components")
    if isolated:
        recs.append(f"Review {len(isolated)} isolated components for potential integration")

    avg = _average_connections(nodes, edges)
    if nodes and avg < 1:
        recs.append("Consider adding more component interactions for better architecture")
    elif avg > 5:
        recs.append("Consider reducing component coupling for better maintainability")

    frameworks = {n.framework for n in nodes if n.framework}
    if len(frameworks) > MAX_FRAMEWORKS:
        recs.append("Consider consolidating frameworks for better consistency")
    return recs


def generate_insights(nodes: list[ComponentNode], edges: list[ComponentEdge]) -> GraphInsights:
    degrees = degree_map(nodes, edges)
    high = high_complexity_nodes(nodes)
    isolated = isolated_nodes(nodes, degrees)
    return GraphInsights(
        high_complexity=high,
        isolated=isolated,
        critical=critical_nodes(nodes, degrees),
        patterns=detect_patterns(nodes),
        recommendations=generate_recommendations(nodes, edges, high, isolated),
    )


def compute_stats(nodes: list[ComponentNode], edges: list[ComponentEdge]) -> GraphStats:
    """Counts per type, framework and language; average edges per node."""
    layers: Counter[str] = Counter()
    frameworks: Counter[str] = Counter()
    languages: Counter[str] = Counter()
    for node in nodes:
        layers[node.type.value] += 1
        if node.framework:
            frameworks[node.framework] += 1
        if node.language:
            languages[node.language] += 1

    return GraphStats(
        total_nodes=len(nodes),
        total_edges=len(edges),
        average_connections=round(_average_connections(nodes, edges), 1),
        layers=dict(layers),
        frameworks=dict(frameworks),
        languages=dict(languages),
    )
