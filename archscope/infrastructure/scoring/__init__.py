"""Quality scoring: nine category analyzers and the overall score."""

from archscope.infrastructure.scoring.engine import ScoringEngine, compute_overall
from archscope.infrastructure.scoring.security_scanner import SecurityIssue, scan_files
from archscope.infrastructure.scoring.signals import ScoringInput

__all__ = [
    "ScoringEngine",
    "ScoringInput",
    "SecurityIssue",
    "compute_overall",
    "scan_files",
]
