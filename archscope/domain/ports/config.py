"""Config Port - analysis configuration models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from archscope.domain.entities.quality import CATEGORY_NAMES

DEFAULT_WEIGHTS: dict[str, float] = {
    "code_quality": 0.20,
    "naming_conventions": 0.10,
    "pr_quality": 0.15,
    "maintainability": 0.20,
    "code_duplication": 0.10,
    "documentation": 0.10,
    "testing": 0.10,
    "security": 0.05,
}


class AnalysisConfig(BaseModel):
    """Corpus bounds and per-file fan-out."""

    max_workers: int = Field(default=8, ge=1)
    max_files: int = Field(default=5000, ge=0)  # 0 = no limit
    max_file_bytes: int = Field(default=1024 * 1024, ge=0)  # larger content is dropped, file stays a node


class GraphConfig(BaseModel):
    """Graph building settings."""

    # Relative imports ("./x", "../y") are not resolved unless enabled.
    resolve_relative_imports: bool = False
    # Optional TOML file replacing the built-in classification tables.
    rules_file: str = ""


class ScoringConfig(BaseModel):
    """Overall score weights."""

    weights: dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    # performance is computed but left out of overall unless enabled
    include_performance: bool = False
    performance_weight: float = 0.10

    model_config = ConfigDict(extra="ignore")

    @field_validator("weights")
    @classmethod
    def _non_negative(cls, value: dict[str, float]) -> dict[str, float]:
        if any(w < 0 for w in value.values()):
            raise ValueError("scoring weights must be non-negative")
        unknown = set(value) - set(CATEGORY_NAMES)
        if unknown:
            raise ValueError(f"unknown scoring categories: {sorted(unknown)}")
        return value

    def effective_weights(self) -> dict[str, float]:
        weights = dict(self.weights)
        if self.include_performance:
            weights["performance"] = self.performance_weight
        else:
            weights.pop("performance", None)
        return weights


class AppConfig(BaseModel):
    """Full application configuration."""

    analysis: AnalysisConfig = AnalysisConfig()
    graph: GraphConfig = GraphConfig()
    scoring: ScoringConfig = ScoringConfig()
    log_level: str = "INFO"
    # Log file: path relative to cwd or absolute. Empty = only stdout.
    log_file: str = ""
    log_rotation_max_mb: int = 5
    log_rotation_backups: int = 3
