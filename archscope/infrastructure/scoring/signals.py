"""Shared inputs and helpers for quality analyzers.

Every analyzer is a pure function of one ``ScoringInput``; nothing here keeps
state between calls.
"""

import re
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any

from archscope.domain.entities.source import ActivityMetadata, DependencyInfo, SourceCorpus, SourceFile

CODE_EXTENSIONS = {"ts", "tsx", "js", "jsx", "mjs", "cjs", "vue", "svelte", "py", "php", "java", "go", "rs", "rb", "cs"}
TS_EXTENSIONS = ("ts", "tsx")
# Imports that point inside the repository (relative or common path aliases).
LOCAL_IMPORT_PREFIXES = (".", "@/", "~/", "src/")

IMPORT_FROM_RE = re.compile(r"import.*from")
IMPORT_SOURCE_RE = re.compile(r"""(?:import\s[^'"]*?from\s*|import\s*\(\s*|require\s*\(\s*)['"]([^'"]+)['"]""")
EXPORT_RE = re.compile(r"export")
FUNCTION_LIKE_RE = re.compile(r"function|const.*=.*\(")
BLOCK_OR_LINE_COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/|//.*$", re.MULTILINE)


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, 0 when the denominator is 0."""
    if not denominator:
        return 0.0
    return numerator / denominator


def is_test_file(file: SourceFile) -> bool:
    return (
        ".test." in file.name
        or ".spec." in file.name
        or "/test/" in f"/{file.path}"
        or "/tests/" in f"/{file.path}"
        or file.name.startswith("test_")
    )


@dataclass(frozen=True)
class ScoringInput:
    """Corpus view shared by all nine analyzers."""

    files: tuple[SourceFile, ...] = ()
    package_json: dict[str, Any] | None = None
    activity: ActivityMetadata = field(default_factory=ActivityMetadata)

    @classmethod
    def from_corpus(cls, corpus: SourceCorpus) -> "ScoringInput":
        return cls(
            files=tuple(f for f in corpus.files if not f.is_directory),
            package_json=corpus.package_json,
            activity=corpus.activity,
        )

    @cached_property
    def with_content(self) -> tuple[SourceFile, ...]:
        return tuple(f for f in self.files if f.content)

    @cached_property
    def code_files(self) -> tuple[SourceFile, ...]:
        return tuple(f for f in self.with_content if f.extension in CODE_EXTENSIONS)

    @cached_property
    def test_files(self) -> tuple[SourceFile, ...]:
        return tuple(f for f in self.files if is_test_file(f))

    @cached_property
    def dependencies(self) -> dict[str, tuple[DependencyInfo, ...]]:
        """Activity dependency lists, else derived from package.json."""
        if self.activity.dependencies:
            return self.activity.dependencies
        return ActivityMetadata.dependencies_from_package_json(self.package_json)

    @cached_property
    def dependency_names(self) -> list[str]:
        names = []
        for category in ("production", "development"):
            names.extend(d.name.lower() for d in self.dependencies.get(category, ()))
        return names

    @cached_property
    def readme(self) -> str:
        """Root README content, else the first README anywhere."""
        readmes = [f for f in self.with_content if f.name.lower().startswith("readme")]
        root = [f for f in readmes if "/" not in f.path]
        chosen = (root or readmes or [None])[0]
        return chosen.content if chosen is not None and chosen.content else ""

    def count_keyword_hits(self, rules: list[tuple[tuple[str, ...], int]], lower: bool = True) -> int:
        """Per file with content: add ``points`` for every rule with any keyword present."""
        score = 0
        for file in self.with_content:
            content = file.content.lower() if lower else file.content
            for keywords, points in rules:
                if any(k in content for k in keywords):
                    score += points
        return score


def local_import_count(content: str) -> int:
    return sum(1 for m in IMPORT_SOURCE_RE.finditer(content) if m.group(1).startswith(LOCAL_IMPORT_PREFIXES))
