"""Security scanner over in-memory source files.

Line-oriented pattern scan (eval, shell execution, hard-coded secrets, ...)
for JS/TS and Python sources. Feeds the ``vulnerabilities`` factor.
"""

import logging
import re
from dataclasses import dataclass

from archscope.domain.entities.source import SourceFile

logger = logging.getLogger(__name__)

SCANNED_EXTENSIONS = {"ts", "tsx", "js", "jsx", "mjs", "cjs", "py", "php", "vue", "svelte"}
TEST_MARKERS = (".test.", ".spec.", "/test/", "/tests/", "__tests__")


@dataclass(frozen=True)
class SecurityIssue:
    """Проблема безопасности."""

    severity: str  # critical, high, medium, low
    file: str
    line: int
    issue: str
    recommendation: str


# (pattern, severity, issue, recommendation)
SECURITY_PATTERNS: list[tuple[str, str, str, str]] = [
    # Critical
    (r"(?<![\w.'\"])eval\s*\([^)]+\)", "critical", "eval() call", "Parse data explicitly instead of evaluating it"),
    (r"new\s+Function\s*\(", "critical", "Function constructor", "Avoid compiling code from strings"),
    (r"child_process|subprocess\.(call|run|Popen).*shell\s*=\s*True", "critical", "Shell execution", "Pass argument lists, never a shell string"),
    (r"os\.system\s*\(", "critical", "OS command execution", "Use subprocess without a shell"),
    # High
    (r"dangerouslySetInnerHTML", "high", "Raw HTML injection", "Sanitize HTML before rendering"),
    (r"\.innerHTML\s*=", "high", "innerHTML assignment", "Use textContent or a sanitizer"),
    (r"pickle\.loads?\s*\(", "high", "pickle deserialization", "Use JSON or another safe format"),
    (r"password\s*[:=]\s*['\"][a-zA-Z0-9]{8,}['\"]", "high", "Hard-coded password", "Read secrets from the environment"),
    (r"api[_-]?key\s*[:=]\s*['\"][a-zA-Z0-9]{16,}['\"]", "high", "Hard-coded API key", "Read secrets from the environment"),
    # Medium
    (r"verify\s*=\s*False|rejectUnauthorized\s*:\s*false", "medium", "TLS verification disabled", "Keep certificate verification on"),
    (r"http://(?!localhost|127\.0\.0\.1)", "medium", "Plain HTTP URL", "Use HTTPS"),
    # Low
    (r"\b(TODO|FIXME|HACK|XXX)\b:", "low", "TODO/FIXME marker", "Resolve deferred work"),
]

_COMPILED_PATTERNS: list[tuple[re.Pattern[str], str, str, str]] = [
    (re.compile(pattern, re.IGNORECASE), severity, issue, rec)
    for pattern, severity, issue, rec in SECURITY_PATTERNS
]


def check_file_security(file: SourceFile) -> list[SecurityIssue]:
    """Scans one file. Test files, non-code files and files without content give []."""
    if not file.content or file.extension not in SCANNED_EXTENSIONS:
        return []
    path_lower = f"/{file.path.lower()}"
    if any(marker in path_lower for marker in TEST_MARKERS) or file.name.startswith("test_"):
        return []

    issues: list[SecurityIssue] = []
    for i, line in enumerate(file.content.split("\n"), 1):
        stripped = line.strip()
        if stripped.startswith(("#", "//", "*", "/*")):
            continue
        for compiled_pattern, severity, issue, recommendation in _COMPILED_PATTERNS:
            if compiled_pattern.search(line):
                issues.append(SecurityIssue(
                    severity=severity,
                    file=file.path,
                    line=i,
                    issue=issue,
                    recommendation=recommendation,
                ))
    return issues


def scan_files(files: list[SourceFile] | tuple[SourceFile, ...]) -> list[SecurityIssue]:
    issues: list[SecurityIssue] = []
    for file in files:
        issues.extend(check_file_security(file))
    if issues:
        logger.debug("Security scan: %d issues in %d files", len(issues), len({i.file for i in issues}))
    return issues


def vulnerability_score(issues: list[SecurityIssue]) -> float:
    """100 minus severity penalties, each severity capped."""
    counts = {s: 0 for s in ("critical", "high", "medium", "low")}
    for issue in issues:
        counts[issue.severity] = counts.get(issue.severity, 0) + 1

    score = 100.0
    score -= min(counts["critical"] * 10, 50)
    score -= min(counts["high"] * 5, 25)
    score -= min(counts["medium"] * 0.5, 15)
    score -= min(counts["low"] * 0.1, 5)
    return max(0.0, score)
