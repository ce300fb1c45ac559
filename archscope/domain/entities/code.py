"""Per-file extraction results: code constructs and raw imports."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ComponentKind(str, Enum):
    """Kind of extracted construct."""

    COMPONENT = "component"
    FUNCTION = "function"
    CLASS = "class"
    HOOK = "hook"
    UTIL = "util"


class ImportKind(str, Enum):
    """How a module is imported."""

    DEFAULT = "default"
    NAMED = "named"
    NAMESPACE = "namespace"
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class CodeComponent:
    """A function, class, hook or UI component found in one file.

    Lines are 1-indexed and inclusive.
    """

    name: str
    kind: ComponentKind
    file_path: str
    start_line: int
    end_line: int
    complexity: int = 1
    props: dict[str, Any] | None = None
    exports: list[str] | None = None
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "kind": self.kind.value,
            "filePath": self.file_path,
            "startLine": self.start_line,
            "endLine": self.end_line,
            "complexity": self.complexity,
        }
        if self.props is not None:
            data["props"] = self.props
        if self.exports is not None:
            data["exports"] = self.exports
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class ImportInfo:
    """An import statement, unresolved."""

    raw_source: str
    kind: ImportKind
    imported_names: list[str] = field(default_factory=list)

    @property
    def is_relative(self) -> bool:
        return self.raw_source.startswith(".")

    def to_dict(self) -> dict[str, Any]:
        return {
            "rawSource": self.raw_source,
            "kind": self.kind.value,
            "importedNames": list(self.imported_names),
        }


@dataclass(frozen=True)
class ExtractionResult:
    """Extractor output for one file."""

    components: list[CodeComponent] = field(default_factory=list)
    imports: list[ImportInfo] = field(default_factory=list)
    exports: list[str] = field(default_factory=list)
    parsed: bool = False  # False when the language is unsupported or parsing failed
