"""Technology Detector - technology stack of a repository snapshot.

Two passes over the same corpus:
1. declared packages (``dependencies``, ``devDependencies``, ``peerDependencies``);
2. file content and paths, for technologies not found in pass 1.

Config files (Dockerfile, workflows, vercel.json...) need no separate pass:
path patterns are matched against the full path of every file.
"""

import logging
import re
from collections.abc import Iterable
from typing import Any

from archscope.domain.entities.source import SourceCorpus, SourceFile
from archscope.domain.entities.technology import TechnologyInfo, TechnologyStack, TechnologyUsage
from archscope.infrastructure.analyzer.technology_rules import TechnologyRule, default_technology_rules

logger = logging.getLogger(__name__)

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "peerDependencies")

PACKAGE_BASE_CONFIDENCE = 50
EXACT_PACKAGE_BONUS = 30
STABLE_VERSION_BONUS = 10
FILE_BASE_CONFIDENCE = 30
PER_PATTERN_CONFIDENCE = 15
MULTI_PATTERN_BONUS = 20  # more than two patterns in one file

_PRERELEASE_RE = re.compile(r"alpha|beta|rc", re.IGNORECASE)
_VERSION_RE = re.compile(r"\d+(?:\.\d+)*(?:-[\w.]+)?")


def normalize_version(declared: str | None) -> str | None:
    """"^18.2.0" -> "18.2.0"; ranges without a number are kept as declared."""
    if not declared:
        return None
    match = _VERSION_RE.search(declared)
    return match.group(0) if match else declared


def package_confidence(match: str, declared: str | None) -> int:
    confidence = PACKAGE_BASE_CONFIDENCE
    if match == "exact":
        confidence += EXACT_PACKAGE_BONUS
    if declared and not _PRERELEASE_RE.search(declared):
        confidence += STABLE_VERSION_BONUS
    return min(confidence, 100)


def file_confidence(matches: int) -> int:
    confidence = FILE_BASE_CONFIDENCE + matches * PER_PATTERN_CONFIDENCE
    if matches > 2:
        confidence += MULTI_PATTERN_BONUS
    return min(confidence, 100)


def declared_packages(package_json: dict[str, Any] | None) -> dict[str, str]:
    """Merged dependency sections; later sections override the version only."""
    packages: dict[str, str] = {}
    if not package_json:
        return packages
    for section in DEPENDENCY_SECTIONS:
        for name, version in (package_json.get(section) or {}).items():
            packages[name] = str(version) if version is not None else ""
    return packages


class TechnologyDetector:
    """Detects frontend, backend, database, devops and testing technologies.

    Holds only its rule table; one instance may serve concurrent requests.
    """

    def __init__(self, rules: Iterable[TechnologyRule] | None = None):
        self.rules = tuple(rules) if rules is not None else default_technology_rules()

    def detect(self, corpus: SourceCorpus) -> TechnologyStack:
        found: dict[tuple[str, str], TechnologyInfo] = {}
        self._from_packages(declared_packages(corpus.package_json), found)
        self._from_files(corpus.files, found)
        logger.info("Technology stack detected: %d technologies", len(found))
        return TechnologyStack(technologies=list(found.values()))

    def _from_packages(self, packages: dict[str, str], found: dict[tuple[str, str], TechnologyInfo]) -> None:
        for package, declared in packages.items():
            for rule in self.rules:
                match = rule.package_match(package)
                if match is None:
                    continue
                info = TechnologyInfo(
                    name=rule.name,
                    category=rule.category,
                    confidence=package_confidence(match, declared),
                    usage=rule.usage,
                    description=rule.description,
                    version=normalize_version(declared),
                )
                key = (rule.category.value, rule.name)
                # react + react-dom: one entry, the most confident declaration wins
                current = found.get(key)
                if current is None or info.confidence > current.confidence:
                    found[key] = info

    def _from_files(self, files: Iterable[SourceFile], found: dict[tuple[str, str], TechnologyInfo]) -> None:
        for file in files:
            if file.is_directory or not file.content:
                continue
            for rule in self.rules:
                key = (rule.category.value, rule.name)
                if key in found:
                    continue
                matches = rule.count_matches(file.content, file.path)
                if not matches:
                    continue
                found[key] = TechnologyInfo(
                    name=rule.name,
                    category=rule.category,
                    confidence=file_confidence(matches),
                    usage=TechnologyUsage.PRIMARY,
                    description=rule.description,
                    version=rule.find_version(file.content),
                )
