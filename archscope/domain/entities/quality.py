"""Quality score entities."""

from dataclasses import dataclass, field
from typing import Any

CATEGORY_NAMES: tuple[str, ...] = (
    "code_quality",
    "naming_conventions",
    "pr_quality",
    "maintainability",
    "code_duplication",
    "documentation",
    "testing",
    "security",
    "performance",
)

# snake_case attribute -> contract name
CONTRACT_NAMES: dict[str, str] = {
    "code_quality": "codeQuality",
    "naming_conventions": "namingConventions",
    "pr_quality": "prQuality",
    "maintainability": "maintainability",
    "code_duplication": "codeDuplication",
    "documentation": "documentation",
    "testing": "testing",
    "security": "security",
    "performance": "performance",
}


@dataclass(frozen=True)
class CategoryScore:
    """Named sub-factors of one category and their mean."""

    name: str
    factors: dict[str, float] = field(default_factory=dict)
    score: float = 0.0


@dataclass(frozen=True)
class QualityScore:
    """Overall score plus nine categories, each in [0, 100]."""

    overall: int = 0
    code_quality: float = 0.0
    naming_conventions: float = 0.0
    pr_quality: float = 0.0
    maintainability: float = 0.0
    code_duplication: float = 0.0
    documentation: float = 0.0
    testing: float = 0.0
    security: float = 0.0
    performance: float = 0.0
    # category -> sub-factor breakdown
    factors: dict[str, dict[str, float]] = field(default_factory=dict)

    def categories(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in CATEGORY_NAMES}

    def to_dict(self, include_factors: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {"overall": self.overall}
        for name, value in self.categories().items():
            data[CONTRACT_NAMES[name]] = value
        if include_factors:
            data["factors"] = {CONTRACT_NAMES[k]: dict(v) for k, v in self.factors.items()}
        return data
