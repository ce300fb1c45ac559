"""Architecture graph entities.

The graph is produced in one pass per analysis and handed to renderers as an
immutable value. ``to_dict()`` emits the camelCase field names renderers rely on.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ComponentType(str, Enum):
    """Architectural role of a file."""

    PAGE = "page"
    COMPONENT = "component"
    API = "api"
    SERVICE = "service"
    DATABASE = "database"
    AUTH = "auth"
    UTILITY = "utility"
    CONFIG = "config"


class EdgeRelation(str, Enum):
    """Relation carried by an edge."""

    RENDERS = "renders"
    CALLS = "calls"
    USES = "uses"
    IMPORTS = "imports"
    EXPORTS = "exports"
    DEPENDS = "depends"


# Layer bucket per type; utility and config files have no layer.
LAYER_BY_TYPE: dict[ComponentType, str] = {
    ComponentType.PAGE: "pages",
    ComponentType.COMPONENT: "components",
    ComponentType.API: "api",
    ComponentType.SERVICE: "services",
    ComponentType.DATABASE: "database",
    ComponentType.AUTH: "auth",
}


@dataclass(frozen=True)
class ComponentNode:
    """Graph vertex: a source file or an external package."""

    id: str
    label: str
    path: str
    type: ComponentType
    size: int = 0
    complexity: int = 0
    layer: str | None = None
    framework: str | None = None
    language: str | None = None
    is_directory: bool = False
    clean_name: str | None = None
    imports: list[str] = field(default_factory=list)
    exports: list[str] = field(default_factory=list)

    @property
    def is_external(self) -> bool:
        return self.framework == "external"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "path": self.path,
            "type": self.type.value,
            "size": self.size,
            "complexity": self.complexity,
            "layer": self.layer,
            "framework": self.framework,
            "language": self.language,
            "isDirectory": self.is_directory,
            "cleanName": self.clean_name,
            "imports": list(self.imports),
            "exports": list(self.exports),
        }


@dataclass(frozen=True)
class ComponentEdge:
    """Graph arc between two existing node ids."""

    source: str
    target: str
    relation: EdgeRelation = EdgeRelation.IMPORTS
    label: str = "imports"
    strength: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "relation": self.relation.value,
            "label": self.label,
            "strength": self.strength,
        }


@dataclass(frozen=True)
class GraphStats:
    """Derived counters; never maintained by hand."""

    total_nodes: int = 0
    total_edges: int = 0
    average_connections: float = 0.0
    layers: dict[str, int] = field(default_factory=dict)
    frameworks: dict[str, int] = field(default_factory=dict)
    languages: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalNodes": self.total_nodes,
            "totalEdges": self.total_edges,
            "averageConnections": self.average_connections,
            "layers": dict(self.layers),
            "frameworks": dict(self.frameworks),
            "languages": dict(self.languages),
        }


@dataclass(frozen=True)
class GraphInsights:
    """Structural findings over the final graph."""

    high_complexity: list[ComponentNode] = field(default_factory=list)
    isolated: list[ComponentNode] = field(default_factory=list)
    critical: list[ComponentNode] = field(default_factory=list)
    patterns: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "highComplexity": [n.to_dict() for n in self.high_complexity],
            "isolated": [n.to_dict() for n in self.isolated],
            "critical": [n.to_dict() for n in self.critical],
            "patterns": list(self.patterns),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class ArchitectureGraph:
    """Nodes, edges, stats and insights of one repository snapshot."""

    nodes: list[ComponentNode] = field(default_factory=list)
    edges: list[ComponentEdge] = field(default_factory=list)
    stats: GraphStats = field(default_factory=GraphStats)
    insights: GraphInsights = field(default_factory=GraphInsights)

    def node_by_id(self, node_id: str) -> ComponentNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "stats": self.stats.to_dict(),
            "insights": self.insights.to_dict(),
        }
