"""Architecture analyzer: extraction, classification, graph, complexity, insights,
technology detection."""

from archscope.infrastructure.analyzer.complexity_engine import apply_degree_boost, file_complexity
from archscope.infrastructure.analyzer.component_extractor import ComponentExtractor
from archscope.infrastructure.analyzer.graph_builder import (
    FileAnalysis,
    GraphBuilder,
    analyze_file,
    generate_node_id,
)
from archscope.infrastructure.analyzer.insights import compute_stats, generate_insights
from archscope.infrastructure.analyzer.report import (
    format_architecture_markdown,
    format_quality_markdown,
    format_report_markdown,
    format_technology_markdown,
)
from archscope.infrastructure.analyzer.technology_detector import TechnologyDetector
from archscope.infrastructure.analyzer.type_classifier import Classification, TypeClassifier

__all__ = [
    "Classification",
    "ComponentExtractor",
    "FileAnalysis",
    "GraphBuilder",
    "TechnologyDetector",
    "TypeClassifier",
    "analyze_file",
    "apply_degree_boost",
    "compute_stats",
    "file_complexity",
    "format_architecture_markdown",
    "format_quality_markdown",
    "format_report_markdown",
    "format_technology_markdown",
    "generate_insights",
    "generate_node_id",
]
