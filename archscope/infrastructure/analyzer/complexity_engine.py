"""Complexity engine: per-file baseline and graph-degree boost.

The boost needs the final edge set, so ``apply_degree_boost`` runs strictly
after the graph is built.
"""

import re
from collections import Counter
from dataclasses import replace

from archscope.domain.entities.code import CodeComponent, ComponentKind
from archscope.domain.entities.graph import ComponentEdge, ComponentNode, ComponentType
from archscope.domain.services.complexity import calculate_complexity

MAX_COMPLEXITY = 100
MAX_SIZE_POINTS = 50
MAX_DEGREE_BOOST = 20

TYPE_WEIGHTS: dict[ComponentType, int] = {
    ComponentType.PAGE: 10,
    ComponentType.COMPONENT: 15,
    ComponentType.API: 20,
    ComponentType.SERVICE: 25,
    ComponentType.DATABASE: 30,
    ComponentType.AUTH: 35,
    ComponentType.UTILITY: 5,
    ComponentType.CONFIG: 2,
}

KIND_WEIGHTS: dict[ComponentKind, int] = {
    ComponentKind.COMPONENT: 5,
    ComponentKind.FUNCTION: 5,
    ComponentKind.HOOK: 4,
    ComponentKind.CLASS: 8,
    ComponentKind.UTIL: 3,
}

BRANCH_WEIGHT = 2

# Structural patterns not covered by branch counting or extracted constructs.
STRUCTURE_PATTERNS: list[tuple[re.Pattern[str], int]] = [
    (re.compile(r"interface\s+\w+"), 3),
    (re.compile(r"type\s+\w+\s*="), 2),
    (re.compile(r"useState|useEffect|useContext"), 2),
    (re.compile(r"async\s+function"), 3),
    (re.compile(r"await\s+"), 2),
    (re.compile(r"Promise\."), 3),
    (re.compile(r"try\s*\{"), 3),
]

# Used when the extractor could not parse the file.
FALLBACK_CONSTRUCT_PATTERNS: list[tuple[re.Pattern[str], int]] = [
    (re.compile(r"function\s+\w+"), 5),
    (re.compile(r"class\s+\w+"), 8),
]


def clamp_complexity(value: float) -> int:
    return max(0, min(MAX_COMPLEXITY, round(value)))


def file_complexity(
    content: str | None,
    size: int,
    component_type: ComponentType,
    components: list[CodeComponent] | None = None,
    parsed: bool = False,
) -> int:
    """Baseline complexity of one file, in [0, 100].

    Without content only size and type weight count.
    """
    measured = len(content) if content else size
    score: float = min(measured / 1000, MAX_SIZE_POINTS)
    score += TYPE_WEIGHTS.get(component_type, 5)
    if not content:
        return clamp_complexity(score)

    score += (calculate_complexity(content) - 1) * BRANCH_WEIGHT

    if parsed:
        score += sum(KIND_WEIGHTS[c.kind] for c in components or [])
    else:
        for pattern, weight in FALLBACK_CONSTRUCT_PATTERNS:
            score += len(pattern.findall(content)) * weight

    for pattern, weight in STRUCTURE_PATTERNS:
        score += len(pattern.findall(content)) * weight

    return clamp_complexity(score)


def degree_map(nodes: list[ComponentNode], edges: list[ComponentEdge]) -> dict[str, int]:
    """Edges touching each node (as source or target)."""
    degrees: Counter[str] = Counter()
    for edge in edges:
        degrees[edge.source] += 1
        if edge.target != edge.source:
            degrees[edge.target] += 1
    return {node.id: degrees.get(node.id, 0) for node in nodes}


def apply_degree_boost(nodes: list[ComponentNode], edges: list[ComponentEdge]) -> list[ComponentNode]:
    """New node list with ``complexity += min(degree * 2, 20)``, clamped."""
    degrees = degree_map(nodes, edges)
    boosted = []
    for node in nodes:
        boost = min(degrees[node.id] * 2, MAX_DEGREE_BOOST)
        boosted.append(replace(node, complexity=clamp_complexity(node.complexity + boost)))
    return boosted
