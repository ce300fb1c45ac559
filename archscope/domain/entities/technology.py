"""Technology stack entities."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TechnologyCategory(str, Enum):
    """Bucket a detected technology is reported under."""

    FRONTEND = "frontend"
    BACKEND = "backend"
    DATABASE = "database"
    DEVOPS = "devops"
    TESTING = "testing"


class TechnologyUsage(str, Enum):
    """How central a technology is to the project."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    DEPENDENCY = "dependency"


@dataclass(frozen=True)
class TechnologyInfo:
    """One detected technology."""

    name: str
    category: TechnologyCategory
    confidence: int
    usage: TechnologyUsage = TechnologyUsage.DEPENDENCY
    description: str = ""
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "confidence": self.confidence,
            "usage": self.usage.value,
            "description": self.description,
        }


@dataclass(frozen=True)
class TechnologyStack:
    """Detected technologies in detection order."""

    technologies: list[TechnologyInfo] = field(default_factory=list)

    def by_category(self, category: TechnologyCategory) -> list[TechnologyInfo]:
        return [t for t in self.technologies if t.category == category]

    def names(self) -> list[str]:
        return [t.name for t in self.technologies]

    def to_dict(self) -> dict[str, Any]:
        return {
            category.value: [t.to_dict() for t in self.by_category(category)]
            for category in TechnologyCategory
        }
