"""Code-level quality analyzers: code quality, naming, maintainability, duplication.

Each returns named sub-factors in [0, 100].
"""

import re
from collections import Counter

from archscope.domain.entities.source import SourceFile
from archscope.infrastructure.scoring.signals import (
    BLOCK_OR_LINE_COMMENT_RE,
    EXPORT_RE,
    FUNCTION_LIKE_RE,
    IMPORT_FROM_RE,
    TS_EXTENSIONS,
    ScoringInput,
    clamp,
    local_import_count,
    ratio,
)

CONFIG_FILE_NAMES = ("package.json", "tsconfig.json", "next.config.js", "tailwind.config.js", "pyproject.toml")
DESIGN_PATTERN_WORDS = ("factory", "singleton", "observer", "strategy", "decorator")
MIN_COMMIT_MESSAGE = 10
MIN_DUPLICATE_LINE = 20

FUNCTION_NAME_RE = re.compile(r"function\s+(\w+)")
CONST_NAME_RE = re.compile(r"const\s+(\w+)")
CAMEL_RE = re.compile(r"^[a-z][a-zA-Z0-9]*$")
PASCAL_RE = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
SNAKE_RE = re.compile(r"^[a-z][a-z0-9_]*$")


def has_proper_structure(files: tuple[SourceFile, ...]) -> bool:
    has_src = any("/src/" in f"/{f.path}" for f in files)
    has_config = any("config" in f.name for f in files)
    has_package = any(f.name in ("package.json", "pyproject.toml") for f in files)
    return has_src and has_config and has_package


def has_config_files(files: tuple[SourceFile, ...]) -> bool:
    names = {f.name for f in files}
    return any(name in names for name in CONFIG_FILE_NAMES)


def analyze_code_quality(data: ScoringInput) -> dict[str, float]:
    files = data.files
    avg_file_size = ratio(sum(f.size for f in files), len(files))
    complexity = max(0.0, 100 - avg_file_size / 100)

    proper = has_proper_structure(files)
    configs = has_config_files(files)
    structure = (50 if proper else 0) + (50 if configs else 0)

    patterns = data.count_keyword_hits([((word,), 10) for word in DESIGN_PATTERN_WORDS])

    best_practices = 0.0
    if any(f.extension in TS_EXTENSIONS for f in files):
        best_practices += 20
    commits = data.activity.commits
    if commits:
        good = sum(1 for c in commits if len(c.message) > MIN_COMMIT_MESSAGE)
        best_practices += good / len(commits) * 30
    if proper:
        best_practices += 25
    if configs:
        best_practices += 25

    return {
        "complexity": clamp(complexity),
        "structure": clamp(structure),
        "patterns": clamp(patterns),
        "bestPractices": clamp(best_practices),
    }


def extract_identifiers(files: tuple[SourceFile, ...]) -> list[str]:
    names: list[str] = []
    for file in files:
        names.extend(FUNCTION_NAME_RE.findall(file.content or ""))
        names.extend(CONST_NAME_RE.findall(file.content or ""))
    return names


def naming_consistency(names: list[str]) -> float:
    """Share of the dominant casing style, 50 when nothing was found."""
    if not names:
        return 50.0
    camel = sum(1 for n in names if CAMEL_RE.match(n))
    pascal = sum(1 for n in names if PASCAL_RE.match(n))
    snake = sum(1 for n in names if SNAKE_RE.match(n))
    return max(camel, pascal, snake) / len(names) * 100


def analyze_naming_conventions(data: ScoringInput) -> dict[str, float]:
    consistency = naming_consistency(extract_identifiers(data.with_content))

    clarity = data.count_keyword_hits([
        (("handle", "process", "calculate"), 10),
        (("user", "data", "result"), 5),
    ])

    conventions = 0
    for file in data.with_content:
        if "-" in file.name or "_" in file.name:
            conventions += 5
        if "export default" in file.content and "." in file.name:
            conventions += 10

    return {
        "consistency": clamp(consistency),
        "clarity": clamp(clarity),
        "conventions": clamp(conventions),
    }


def coupling_score(files: tuple[SourceFile, ...]) -> float:
    """50 +/-10 per file depending on the import/export ratio."""
    score = 50
    for file in files:
        imports = len(IMPORT_FROM_RE.findall(file.content))
        exports = len(EXPORT_RE.findall(file.content))
        if imports > 0 and exports > 0:
            score += -10 if imports / exports > 2 else 10
    return clamp(score)


def cohesion_score(files: tuple[SourceFile, ...]) -> float:
    """50 +/-10 per file depending on lines per function."""
    score = 50
    for file in files:
        lines = len(file.content.split("\n"))
        functions = len(FUNCTION_LIKE_RE.findall(file.content))
        if functions > 0:
            score += -10 if lines / functions > 20 else 10
    return clamp(score)


def comment_density_per_file(files: tuple[SourceFile, ...]) -> float:
    """Mean of per-file comment ratios, as a percentage."""
    total = 0.0
    for file in files:
        lines = len(file.content.split("\n"))
        comments = len(BLOCK_OR_LINE_COMMENT_RE.findall(file.content))
        total += ratio(comments, lines) * 100
    return clamp(ratio(total, len(files)))


def analyze_maintainability(data: ScoringInput) -> dict[str, float]:
    # Граф не используется: модульность по локальным импортам на файл
    avg_local_imports = ratio(sum(local_import_count(f.content) for f in data.code_files), len(data.code_files))
    return {
        "modularity": clamp(100 - avg_local_imports * 10),
        "coupling": coupling_score(data.with_content),
        "cohesion": cohesion_score(data.with_content),
        "documentation": comment_density_per_file(data.with_content),
    }


def duplication_score(files: tuple[SourceFile, ...]) -> float:
    """100 minus the share of long lines seen more than once; 50 without data."""
    lines: Counter[str] = Counter()
    for file in files:
        for line in file.content.split("\n"):
            trimmed = line.strip()
            if len(trimmed) > MIN_DUPLICATE_LINE:
                lines[trimmed] += 1
    if not lines:
        return 50.0
    duplicates = sum(1 for count in lines.values() if count > 1)
    return clamp(100 - duplicates / len(lines) * 100)


def analyze_code_duplication(data: ScoringInput) -> dict[str, float]:
    reusability = 0
    abstraction = 0
    for file in data.with_content:
        content = file.content
        if "export" in content:
            if "function" in content:
                reusability += 20
            if "const" in content:
                reusability += 15
            if "class" in content:
                reusability += 25
        if "interface" in content or "type" in content:
            abstraction += 20
        if "abstract" in content or "extends" in content:
            abstraction += 25
        if "implements" in content:
            abstraction += 15

    return {
        "duplication": duplication_score(data.with_content),
        "reusability": clamp(reusability),
        "abstraction": clamp(abstraction),
    }
