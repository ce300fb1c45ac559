"""Repository analysis use case - orchestrates graph building, scoring and
technology detection.

Per-file extraction/classification fans out to a thread pool and is joined
before the graph is built: edges can only be resolved once every node exists.
Scoring and technology detection do not depend on the graph and run on the
same pool meanwhile.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace
from typing import Any

import structlog

from archscope.application.analysis.dto import AnalyzeRequest, AnalyzeResponse
from archscope.domain.entities.code import ExtractionResult
from archscope.domain.entities.graph import ArchitectureGraph
from archscope.domain.entities.quality import QualityScore
from archscope.domain.entities.source import SourceCorpus, SourceFile, utf8_length
from archscope.domain.entities.technology import TechnologyStack
from archscope.domain.ports.config import AppConfig
from archscope.infrastructure.analyzer.classification_rules import default_rule_tables, load_rule_tables
from archscope.infrastructure.analyzer.complexity_engine import apply_degree_boost
from archscope.infrastructure.analyzer.component_extractor import ComponentExtractor
from archscope.infrastructure.analyzer.graph_builder import FileAnalysis, GraphBuilder, analyze_file
from archscope.infrastructure.analyzer.insights import compute_stats, generate_insights
from archscope.infrastructure.analyzer.technology_detector import TechnologyDetector
from archscope.infrastructure.analyzer.technology_rules import default_technology_rules, load_technology_rules
from archscope.infrastructure.analyzer.type_classifier import TypeClassifier
from archscope.infrastructure.scoring.engine import ScoringEngine
from archscope.infrastructure.scoring.signals import ScoringInput

log = structlog.get_logger()


class AnalyzeRepositoryUseCase:
    """Builds the architecture graph, quality score and technology stack of one snapshot.

    Holds configuration only; extractor, classifier and engines are created
    per call, so one instance may serve concurrent requests.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or AppConfig()
        # Rules are loaded once; a bad rules file fails here, not mid-analysis.
        rules_file = self._config.graph.rules_file
        self._rule_tables = load_rule_tables(rules_file) if rules_file else default_rule_tables()
        self._technology_rules = load_technology_rules(rules_file) if rules_file else default_technology_rules()

    def execute(self, request: AnalyzeRequest) -> AnalyzeResponse:
        corpus, skipped, truncated = self._bound_corpus(request.corpus)
        log.info(
            "analysis_started",
            files=len(corpus.files),
            skipped=len(skipped),
            truncated=len(truncated),
        )

        response = AnalyzeResponse(skipped_files=skipped, truncated_files=truncated)
        workers = self._config.analysis.max_workers
        with ThreadPoolExecutor(max_workers=workers) as executor:
            score_future: Future[QualityScore] | None = None
            if request.include_score:
                score_future = executor.submit(self._score, corpus)
            technology_future: Future[TechnologyStack] | None = None
            if request.include_technologies:
                technology_future = executor.submit(self._detect_technologies, corpus)
            if request.include_graph:
                response.graph = self._build_graph(corpus, executor)
            if score_future is not None:
                response.score = score_future.result()
            if technology_future is not None:
                response.technologies = technology_future.result()

        log.info(
            "analysis_completed",
            nodes=response.graph.stats.total_nodes if response.graph else None,
            edges=response.graph.stats.total_edges if response.graph else None,
            overall=response.score.overall if response.score else None,
            technologies=response.technologies.names() if response.technologies else None,
        )
        return response

    def build_graph(self, corpus: SourceCorpus) -> ArchitectureGraph:
        """Graph only, bounded the same way as ``execute``."""
        return self.execute(AnalyzeRequest(corpus=corpus, include_score=False, include_technologies=False)).graph

    def score(self, corpus: SourceCorpus) -> QualityScore:
        """Quality score only, bounded the same way as ``execute``."""
        return self.execute(AnalyzeRequest(corpus=corpus, include_graph=False, include_technologies=False)).score

    def detect_technologies(self, corpus: SourceCorpus) -> TechnologyStack:
        """Technology stack only, bounded the same way as ``execute``."""
        return self.execute(AnalyzeRequest(corpus=corpus, include_graph=False, include_score=False)).technologies

    def _bound_corpus(self, corpus: SourceCorpus) -> tuple[SourceCorpus, list[str], list[str]]:
        limits = self._config.analysis
        files = list(corpus.files)
        skipped: list[str] = []
        if limits.max_files and len(files) > limits.max_files:
            skipped = [f.path for f in files[limits.max_files:]]
            files = files[: limits.max_files]
            log.warning("corpus_truncated", limit=limits.max_files, skipped=len(skipped))

        truncated: list[str] = []
        if limits.max_file_bytes:
            bounded = []
            for file in files:
                if utf8_length(file.content) > limits.max_file_bytes:
                    truncated.append(file.path)
                    size = file.size or utf8_length(file.content)
                    file = replace(file, content=None, size=size)
                bounded.append(file)
            files = bounded
            if truncated:
                log.warning("content_dropped", limit=limits.max_file_bytes, files=truncated)

        return replace(corpus, files=tuple(files)), skipped, truncated

    def _build_graph(self, corpus: SourceCorpus, executor: ThreadPoolExecutor) -> ArchitectureGraph:
        extractor = ComponentExtractor()
        classifier = TypeClassifier(self._rule_tables)
        files = [f for f in corpus.files if not f.is_directory]

        futures = [executor.submit(analyze_file, f, extractor, classifier) for f in files]
        # Barrier: results are collected in input order so node order is stable.
        analyses = [self._collect(future, file, classifier) for future, file in zip(futures, files)]

        builder = GraphBuilder(resolve_relative_imports=self._config.graph.resolve_relative_imports)
        nodes, edges = builder.build(analyses, corpus.package_json)
        nodes = apply_degree_boost(nodes, edges)
        return ArchitectureGraph(
            nodes=nodes,
            edges=edges,
            stats=compute_stats(nodes, edges),
            insights=generate_insights(nodes, edges),
        )

    @staticmethod
    def _collect(future: Future[FileAnalysis], file: SourceFile, classifier: TypeClassifier) -> FileAnalysis:
        try:
            return future.result()
        except Exception as e:
            log.warning("file_analysis_failed", path=file.path, error=str(e))
            # Файл всё равно становится узлом: только классификация по пути
            return FileAnalysis(
                file=file,
                classification=classifier.classify(file.path, None),
                extraction=ExtractionResult(),
            )

    def _score(self, corpus: SourceCorpus) -> QualityScore:
        engine = ScoringEngine(self._config.scoring.effective_weights())
        return engine.score(ScoringInput.from_corpus(corpus))

    def _detect_technologies(self, corpus: SourceCorpus) -> TechnologyStack:
        return TechnologyDetector(self._technology_rules).detect(corpus)


def analyze_architecture(
    files: list[SourceFile] | list[dict[str, Any]],
    package_json: dict[str, Any] | None = None,
    config: AppConfig | None = None,
) -> ArchitectureGraph:
    """Convenience wrapper: graph of ``files`` with default configuration."""
    source_files = tuple(f if isinstance(f, SourceFile) else SourceFile.from_dict(f) for f in files)
    corpus = SourceCorpus(files=source_files, package_json=package_json)
    return AnalyzeRepositoryUseCase(config).build_graph(corpus)


def calculate_quality_score(corpus: SourceCorpus | dict[str, Any], config: AppConfig | None = None) -> QualityScore:
    """Convenience wrapper: quality score of ``corpus`` with default configuration."""
    if isinstance(corpus, dict):
        corpus = SourceCorpus.from_dict(corpus)
    return AnalyzeRepositoryUseCase(config).score(corpus)


def analyze_technology_stack(
    corpus: SourceCorpus | dict[str, Any],
    config: AppConfig | None = None,
) -> TechnologyStack:
    """Convenience wrapper: technology stack of ``corpus`` with default configuration."""
    if isinstance(corpus, dict):
        corpus = SourceCorpus.from_dict(corpus)
    return AnalyzeRepositoryUseCase(config).detect_technologies(corpus)


def analyze_repository(raw: dict[str, Any], config: AppConfig | None = None) -> AnalyzeResponse:
    """Full analysis of an ingestor JSON payload (see ``AnalyzeRequest.from_dict``)."""
    return AnalyzeRepositoryUseCase(config).execute(AnalyzeRequest.from_dict(raw))
