"""Analysis application layer - architecture graph, quality score, technology stack."""

from archscope.application.analysis.dto import AnalyzeRequest, AnalyzeResponse
from archscope.application.analysis.use_case import (
    AnalyzeRepositoryUseCase,
    analyze_architecture,
    analyze_repository,
    analyze_technology_stack,
    calculate_quality_score,
)

__all__ = [
    "AnalyzeRequest",
    "AnalyzeResponse",
    "AnalyzeRepositoryUseCase",
    "analyze_architecture",
    "analyze_repository",
    "analyze_technology_stack",
    "calculate_quality_score",
]
