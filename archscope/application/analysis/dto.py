"""DTOs for the repository analysis use case."""

from dataclasses import dataclass, field
from typing import Any

from archscope.domain.entities.graph import ArchitectureGraph
from archscope.domain.entities.quality import QualityScore
from archscope.domain.entities.source import SourceCorpus
from archscope.domain.entities.technology import TechnologyStack


@dataclass
class AnalyzeRequest:
    """Request to analyze one repository snapshot."""

    corpus: SourceCorpus
    include_graph: bool = True
    include_score: bool = True
    include_technologies: bool = True

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "AnalyzeRequest":
        """Ingestor JSON shape plus optional includeGraph/includeScore/includeTechnologies flags."""
        return cls(
            corpus=SourceCorpus.from_dict(raw),
            include_graph=bool(raw.get("includeGraph", True)),
            include_score=bool(raw.get("includeScore", True)),
            include_technologies=bool(raw.get("includeTechnologies", True)),
        )


@dataclass
class AnalyzeResponse:
    """Architecture graph, quality score and technology stack of one snapshot."""

    graph: ArchitectureGraph | None = None
    score: QualityScore | None = None
    technologies: TechnologyStack | None = None
    # files left out by the corpus bounds
    skipped_files: list[str] = field(default_factory=list)
    # files whose content was dropped for size; they remain graph nodes
    truncated_files: list[str] = field(default_factory=list)

    def to_dict(self, include_factors: bool = False) -> dict[str, Any]:
        return {
            "graph": self.graph.to_dict() if self.graph else None,
            "score": self.score.to_dict(include_factors=include_factors) if self.score else None,
            "technologies": self.technologies.to_dict() if self.technologies else None,
            "skippedFiles": list(self.skipped_files),
            "truncatedFiles": list(self.truncated_files),
        }
