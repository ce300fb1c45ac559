"""Graph builder: one node per file, virtual nodes per package, import edges.

Import resolution, in order:
1. exact path match (Python dotted modules also tried as ``a/b.py``);
2. relative imports ("./x", "../y", ".mod") are skipped unless
   ``resolve_relative_imports`` is on; the resolver then only tries extension
   and index-file candidates, it knows nothing about tsconfig paths or bundlers;
3. bare specifiers naming a declared package -> that package's external node;
4. substring match of the leading path segment against node labels/paths.
Anything else is dropped silently.
"""

import logging
import posixpath
import re
from dataclasses import dataclass
from typing import Any

from archscope.domain.entities.code import ExtractionResult, ImportInfo
from archscope.domain.entities.graph import (
    ComponentEdge,
    ComponentNode,
    ComponentType,
    EdgeRelation,
)
from archscope.domain.entities.source import SourceFile, utf8_length
from archscope.infrastructure.analyzer.complexity_engine import file_complexity
from archscope.infrastructure.analyzer.component_extractor import ComponentExtractor, dialect_for_path
from archscope.infrastructure.analyzer.type_classifier import Classification, TypeClassifier

logger = logging.getLogger(__name__)

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "peerDependencies")
EXTERNAL_PREFIX = "external_"
EXTERNAL_FRAMEWORK = "external"

RESOLVE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".vue", ".svelte", ".py")
INDEX_FILES = ("index.ts", "index.tsx", "index.js", "index.jsx", "__init__.py")

_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]+")
_CLEAN_EXT_RE = re.compile(r"\.(tsx?|jsx?|vue|svelte|py|php|java|cs)$", re.IGNORECASE)


def generate_node_id(path: str) -> str:
    """Deterministic id: non-alphanumeric runs -> "_", trimmed, lower-cased.

    Paths differing only in stripped characters collide ("a-b.ts" / "a_b.ts").
    """
    return _NON_ALNUM_RE.sub("_", path).strip("_").lower()


def clean_node_name(name: str) -> str:
    """"user-profile.tsx" -> "User Profile", at most 20 chars."""
    base = _CLEAN_EXT_RE.sub("", name)
    words = re.sub(r"[-_]", " ", base).split(" ")
    return " ".join(w[:1].upper() + w[1:] for w in words)[:20]


def package_name(spec: str) -> str:
    """"@scope/pkg/sub" -> "@scope/pkg", "lodash/fp" -> "lodash"."""
    parts = spec.split("/")
    if spec.startswith("@") and len(parts) > 1:
        return "/".join(parts[:2])
    return parts[0]


@dataclass(frozen=True)
class FileAnalysis:
    """Per-file output of the parallel stage."""

    file: SourceFile
    classification: Classification
    extraction: ExtractionResult


def analyze_file(file: SourceFile, extractor: ComponentExtractor, classifier: TypeClassifier) -> FileAnalysis:
    """Extraction and classification of a single file. Independent of other files."""
    dialect = dialect_for_path(file.path)
    extraction = extractor.extract(file.content, dialect, file.path)
    return FileAnalysis(
        file=file,
        classification=classifier.classify(file.path, file.content),
        extraction=extraction,
    )


def find_dangling_edges(nodes: list[ComponentNode], edges: list[ComponentEdge]) -> list[ComponentEdge]:
    """Edges whose source or target is not a node id."""
    ids = {node.id for node in nodes}
    return [e for e in edges if e.source not in ids or e.target not in ids]


class GraphBuilder:
    """Materializes nodes and resolves edges for one corpus.

    Requires the complete set of file analyses: edges can only be resolved
    once every node exists.
    """

    def __init__(self, resolve_relative_imports: bool = False):
        self.resolve_relative_imports = resolve_relative_imports

    def build(
        self,
        analyses: list[FileAnalysis],
        package_json: dict[str, Any] | None = None,
    ) -> tuple[list[ComponentNode], list[ComponentEdge]]:
        file_nodes = [self._file_node(a) for a in analyses if not a.file.is_directory]
        external_nodes = self._external_nodes(package_json)
        nodes = file_nodes + external_nodes
        self._warn_collisions(nodes)
        edges = self._resolve_edges(
            [a for a in analyses if not a.file.is_directory],
            file_nodes,
            {n.label: n for n in external_nodes},
        )

        dangling = find_dangling_edges(nodes, edges)
        if dangling:
            logger.error("Dropping %d dangling edges", len(dangling))
            edges = [e for e in edges if e not in dangling]

        logger.debug("Graph built: %d nodes, %d edges", len(nodes), len(edges))
        return nodes, edges

    # -- nodes --------------------------------------------------------------

    @staticmethod
    def _file_node(analysis: FileAnalysis) -> ComponentNode:
        file = analysis.file
        cls = analysis.classification
        extraction = analysis.extraction
        size = file.size or utf8_length(file.content)
        return ComponentNode(
            id=generate_node_id(file.path),
            label=file.name,
            path=file.path,
            type=cls.type,
            size=size,
            complexity=file_complexity(
                file.content,
                size,
                cls.type,
                extraction.components,
                parsed=extraction.parsed,
            ),
            layer=cls.layer,
            framework=cls.framework,
            language=cls.language,
            is_directory=False,
            clean_name=clean_node_name(file.name),
            imports=list(dict.fromkeys(i.raw_source for i in extraction.imports)),
            exports=list(extraction.exports),
        )

    @staticmethod
    def _warn_collisions(nodes: list[ComponentNode]) -> None:
        seen: dict[str, str] = {}
        for node in nodes:
            other = seen.setdefault(node.id, node.path)
            if other != node.path:
                logger.warning("Node id collision: %s and %s -> %s", other, node.path, node.id)

    @staticmethod
    def _external_nodes(package_json: dict[str, Any] | None) -> list[ComponentNode]:
        if not package_json:
            return []
        names: dict[str, None] = {}
        for section in DEPENDENCY_SECTIONS:
            for name in package_json.get(section) or {}:
                names.setdefault(name, None)
        return [
            ComponentNode(
                id=f"{EXTERNAL_PREFIX}{name}",
                label=name,
                path=f"node_modules/{name}",
                type=ComponentType.UTILITY,
                size=0,
                complexity=0,
                framework=EXTERNAL_FRAMEWORK,
                language="Unknown",
                clean_name=name,
            )
            for name in names
        ]

    # -- edges --------------------------------------------------------------

    def _resolve_edges(
        self,
        analyses: list[FileAnalysis],
        file_nodes: list[ComponentNode],
        externals: dict[str, ComponentNode],
    ) -> list[ComponentEdge]:
        by_path: dict[str, ComponentNode] = {}
        for node in file_nodes:
            by_path.setdefault(node.path, node)

        # (source, target, relation) -> number of import records
        strengths: dict[tuple[str, str, EdgeRelation], int] = {}
        for analysis, source in zip(analyses, file_nodes):
            for imp in analysis.extraction.imports:
                target, relation = self._resolve(imp, source, by_path, file_nodes, externals)
                if target is None or target.id == source.id:
                    continue
                key = (source.id, target.id, relation)
                strengths[key] = strengths.get(key, 0) + 1

        return [
            ComponentEdge(source=s, target=t, relation=r, label=r.value, strength=count)
            for (s, t, r), count in strengths.items()
        ]

    def _resolve(
        self,
        imp: ImportInfo,
        source: ComponentNode,
        by_path: dict[str, ComponentNode],
        file_nodes: list[ComponentNode],
        externals: dict[str, ComponentNode],
    ) -> tuple[ComponentNode | None, EdgeRelation]:
        spec = imp.raw_source
        if not spec:
            return None, EdgeRelation.IMPORTS

        exact = by_path.get(spec)
        if exact is None and source.language == "Python" and not imp.is_relative:
            module_path = spec.replace(".", "/")
            exact = by_path.get(f"{module_path}.py") or by_path.get(f"{module_path}/__init__.py")
        if exact is not None:
            return exact, EdgeRelation.IMPORTS

        if imp.is_relative:
            if not self.resolve_relative_imports:
                return None, EdgeRelation.IMPORTS
            return self._resolve_relative(spec, source, by_path), EdgeRelation.IMPORTS

        external = externals.get(package_name(spec))
        if external is not None:
            return external, EdgeRelation.DEPENDS

        leading = spec.split("/")[0].lower()
        if not leading:
            return None, EdgeRelation.IMPORTS
        for node in file_nodes:
            if leading in node.label.lower() or leading in node.path.lower():
                return node, EdgeRelation.IMPORTS
        return None, EdgeRelation.IMPORTS

    @staticmethod
    def _resolve_relative(
        spec: str,
        source: ComponentNode,
        by_path: dict[str, ComponentNode],
    ) -> ComponentNode | None:
        base_dir = posixpath.dirname(source.path)
        if source.language == "Python":
            # ".models" / "..pkg.mod": one dot = current package
            level = len(spec) - len(spec.lstrip("."))
            module = spec.lstrip(".").replace(".", "/")
            for _ in range(level - 1):
                base_dir = posixpath.dirname(base_dir)
            target = posixpath.join(base_dir, module) if module else base_dir
        else:
            target = posixpath.normpath(posixpath.join(base_dir, spec))
        target = target.lstrip("/")
        if target.startswith(".."):
            return None

        candidates = [target]
        candidates += [f"{target}{ext}" for ext in RESOLVE_EXTENSIONS]
        candidates += [posixpath.join(target, index) for index in INDEX_FILES]
        for candidate in candidates:
            node = by_path.get(candidate)
            if node is not None:
                return node
        return None
