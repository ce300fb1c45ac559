"""Branch counting shared by every complexity computation.

Extractor constructs, file baselines and scoring all call ``calculate_complexity``
so the same text always yields the same number.
"""

import re

# Keyword and operator patterns counted once per occurrence.
BRANCH_PATTERNS: tuple[str, ...] = (
    r"\bif\b",
    r"\belse\b",
    r"\bwhile\b",
    r"\bfor\b",
    r"\bswitch\b",
    r"\bcase\b",
    r"\bcatch\b",
    # ternary "?" but not "?.", "??" or an optional "x?:" annotation
    r"(?<![?.])\?(?![?.:])",
    r"&&",
    r"\|\|",
)

_BRANCH_RE = re.compile("|".join(f"(?:{p})" for p in BRANCH_PATTERNS))


def count_branches(content: str) -> int:
    """Количество ветвлений в тексте."""
    if not content:
        return 0
    return sum(1 for _ in _BRANCH_RE.finditer(content))


def calculate_complexity(content: str) -> int:
    """Cyclomatic estimate: 1 + number of branching tokens.

    Empty content counts as a single path (1).
    """
    return 1 + count_branches(content)
