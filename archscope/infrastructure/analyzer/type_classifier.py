"""Type classifier: component type, framework and language of a file."""

from dataclasses import dataclass

from archscope.domain.entities.graph import LAYER_BY_TYPE, ComponentType
from archscope.infrastructure.analyzer.classification_rules import RuleTables, default_rule_tables


@dataclass(frozen=True)
class Classification:
    """Classifier verdict for one file."""

    type: ComponentType
    framework: str | None
    language: str

    @property
    def layer(self) -> str | None:
        return LAYER_BY_TYPE.get(self.type)


class TypeClassifier:
    """Walks ordered rule tables; first match wins.

    Tables are injected, so tests and callers can swap them without touching
    this class.
    """

    def __init__(self, tables: RuleTables | None = None):
        self.tables = tables or default_rule_tables()

    def classify(self, path: str, content: str | None = None) -> Classification:
        content = content or ""
        return Classification(
            type=self.detect_type(path, content),
            framework=self.detect_framework(content, path),
            language=self.detect_language(path),
        )

    def detect_type(self, path: str, content: str = "") -> ComponentType:
        for rule in self.tables.type_rules:
            if rule.matches(path):
                return rule.type

        # Экспортирующие файлы: тип по ключевому слову в пути
        if any(marker in content for marker in self.tables.export_markers):
            path_lower = path.lower()
            for fallback in self.tables.content_fallback:
                if any(keyword in path_lower for keyword in fallback.keywords):
                    return fallback.type

        return self.tables.default_type

    def detect_framework(self, content: str, path: str) -> str | None:
        for rule in self.tables.framework_rules:
            if rule.matches(content, path):
                return rule.name
        return None

    def detect_language(self, path: str) -> str:
        ext = path.rsplit(".", 1)[-1].lower()
        return self.tables.languages.get(ext, "Unknown")
