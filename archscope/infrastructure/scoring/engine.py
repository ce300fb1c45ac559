"""Scoring engine: nine category analyzers and the weighted overall score.

Analyzers share no state and may run in any order. ``performance`` is computed
but stays out of ``overall`` unless the weights include it.
"""

import logging
import math
from collections.abc import Callable, Mapping

from archscope.domain.entities.quality import CATEGORY_NAMES, CategoryScore, QualityScore
from archscope.domain.ports.config import DEFAULT_WEIGHTS
from archscope.infrastructure.scoring.code_analyzers import (
    analyze_code_duplication,
    analyze_code_quality,
    analyze_maintainability,
    analyze_naming_conventions,
)
from archscope.infrastructure.scoring.project_analyzers import (
    analyze_documentation,
    analyze_performance,
    analyze_pr_quality,
    analyze_security,
    analyze_testing,
)
from archscope.infrastructure.scoring.signals import ScoringInput, clamp

logger = logging.getLogger(__name__)

Analyzer = Callable[[ScoringInput], dict[str, float]]

CATEGORY_ANALYZERS: dict[str, Analyzer] = {
    "code_quality": analyze_code_quality,
    "naming_conventions": analyze_naming_conventions,
    "pr_quality": analyze_pr_quality,
    "maintainability": analyze_maintainability,
    "code_duplication": analyze_code_duplication,
    "documentation": analyze_documentation,
    "testing": analyze_testing,
    "security": analyze_security,
    "performance": analyze_performance,
}


def category_score(name: str, factors: Mapping[str, float]) -> CategoryScore:
    """Mean of the sub-factors, rounded to one decimal; 0 for no factors."""
    values = [clamp(v) for v in factors.values()]
    mean = math.fsum(values) / len(values) if values else 0.0
    return CategoryScore(
        name=name,
        factors={k: round(clamp(v), 1) for k, v in factors.items()},
        score=round(clamp(mean), 1),
    )


def compute_overall(categories: Mapping[str, float], weights: Mapping[str, float]) -> int:
    """Weighted mean over the categories named in ``weights``.

    Independent of iteration order; 0 when no weighted category is present.
    """
    pairs = [(categories[name], w) for name, w in weights.items() if name in categories and w > 0]
    total_weight = math.fsum(w for _, w in pairs)
    if not total_weight:
        return 0
    total = math.fsum(score * w for score, w in pairs)
    return int(round(clamp(total / total_weight)))


class ScoringEngine:
    """Computes a ``QualityScore`` for one corpus.

    Create one per analysis; it holds only its weights.
    """

    def __init__(self, weights: Mapping[str, float] | None = None):
        self.weights = dict(weights) if weights is not None else dict(DEFAULT_WEIGHTS)
        unknown = set(self.weights) - set(CATEGORY_NAMES)
        if unknown:
            logger.warning("Ignoring weights for unknown categories: %s", sorted(unknown))

    def score_categories(self, data: ScoringInput) -> dict[str, CategoryScore]:
        return {name: category_score(name, analyzer(data)) for name, analyzer in CATEGORY_ANALYZERS.items()}

    def score(self, data: ScoringInput) -> QualityScore:
        categories = self.score_categories(data)
        values = {name: c.score for name, c in categories.items()}
        overall = compute_overall(values, self.weights)
        logger.info("Quality scoring complete: overall %d/100", overall)
        return QualityScore(
            overall=overall,
            factors={name: c.factors for name, c in categories.items()},
            **values,
        )
