"""Component extractor: code constructs and imports of a single file.

TypeScript/JavaScript are parsed with tree-sitter, Python with ``ast``.
A file that cannot be parsed yields empty lists; it is still turned into a
graph node later, only without component-level detail.
"""

import ast
import logging
import re

import tree_sitter_javascript as ts_javascript
import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Node, Parser

from archscope.domain.entities.code import (
    CodeComponent,
    ComponentKind,
    ExtractionResult,
    ImportInfo,
    ImportKind,
)
from archscope.domain.services.complexity import calculate_complexity

logger = logging.getLogger(__name__)

TYPESCRIPT = "typescript"
TSX = "tsx"
JAVASCRIPT = "javascript"
PYTHON = "python"

# Language objects are immutable and safe to share; parsers are not.
_GRAMMARS: dict[str, Language] = {
    TYPESCRIPT: Language(ts_typescript.language_typescript()),
    TSX: Language(ts_typescript.language_tsx()),
    JAVASCRIPT: Language(ts_javascript.language()),
}

_DIALECT_ALIASES: dict[str, str] = {
    "typescript": TYPESCRIPT,
    "ts": TYPESCRIPT,
    "mts": TYPESCRIPT,
    "cts": TYPESCRIPT,
    "tsx": TSX,
    "javascript": JAVASCRIPT,
    "js": JAVASCRIPT,
    "jsx": JAVASCRIPT,  # the JavaScript grammar includes JSX
    "mjs": JAVASCRIPT,
    "cjs": JAVASCRIPT,
    "python": PYTHON,
    "py": PYTHON,
}

HOOK_NAME_RE = re.compile(r"^use[A-Z]")

_FUNCTION_DECLARATIONS = {"function_declaration", "generator_function_declaration"}
_CLASS_DECLARATIONS = {"class_declaration", "abstract_class_declaration"}
_FUNCTION_VALUES = {"arrow_function", "function_expression", "function", "generator_function"}
_JSX_NODES = {"jsx_element", "jsx_self_closing_element", "jsx_fragment"}


def dialect_for_path(path: str) -> str | None:
    """Dialect for a file extension, None when the extractor has no parser for it."""
    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return None
    return _DIALECT_ALIASES.get(name.rsplit(".", 1)[-1].lower())


def _strip_quotes(text: str) -> str:
    if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
        return text[1:-1]
    return text


def _jsdoc_summary(comment: str) -> str | None:
    """First meaningful line of a /** */ or // comment."""
    body = comment.strip()
    if body.startswith("/*"):
        body = body[2:]
        if body.endswith("*/"):
            body = body[:-2]
    elif body.startswith("//"):
        body = body[2:]
    for line in body.splitlines():
        line = line.strip().lstrip("*").strip()
        if line and not line.startswith("@"):
            return line
    return None


class _TreeSitterVisitor:
    """Collects constructs and imports from a tree-sitter tree.

    JSX containment is accumulated bottom-up in one pass: ``_jsx_ids`` holds the
    ids of every node whose subtree contains a JSX element.
    """

    def __init__(self, source: bytes, file_path: str) -> None:
        self.source = source
        self.file_path = file_path
        self.components: list[CodeComponent] = []
        self.imports: list[ImportInfo] = []
        self.exports: list[str] = []
        self._jsx_ids: set[int] = set()

    def text(self, node: Node | None) -> str:
        if node is None:
            return ""
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def run(self, root: Node) -> None:
        self._mark_jsx(root)
        stack = [root]
        while stack:
            node = stack.pop()
            self._visit(node)
            stack.extend(reversed(node.children))
        # document order
        self.components.sort(key=lambda c: (c.start_line, c.end_line))

    def _mark_jsx(self, root: Node) -> None:
        stack: list[tuple[Node, bool]] = [(root, False)]
        while stack:
            node, children_done = stack.pop()
            if not children_done:
                stack.append((node, True))
                stack.extend((child, False) for child in node.children)
                continue
            if node.type in _JSX_NODES or any(c.id in self._jsx_ids for c in node.children):
                self._jsx_ids.add(node.id)

    def contains_jsx(self, node: Node) -> bool:
        return node.id in self._jsx_ids

    def _visit(self, node: Node) -> None:
        node_type = node.type
        if node_type in _FUNCTION_DECLARATIONS:
            self._add_declaration(node, ComponentKind.FUNCTION)
        elif node_type in _CLASS_DECLARATIONS:
            self._add_declaration(node, ComponentKind.CLASS)
        elif node_type == "variable_declarator":
            self._add_declarator(node)
        elif node_type == "import_statement":
            self._add_import_statement(node)
        elif node_type == "export_statement":
            self._add_export_statement(node)
        elif node_type == "call_expression":
            self._add_call_import(node)

    # -- constructs ---------------------------------------------------------

    def _add_declaration(self, node: Node, default_kind: ComponentKind) -> None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return
        kind = ComponentKind.COMPONENT if self.contains_jsx(node) else default_kind
        props = None
        if default_kind is ComponentKind.FUNCTION:
            props = self._first_param_type(node)
        self._append(node, node, self.text(name_node), kind, props)

    def _add_declarator(self, node: Node) -> None:
        name_node = node.child_by_field_name("name")
        value = node.child_by_field_name("value")
        if name_node is None or name_node.type != "identifier" or value is None:
            return
        if value.type not in _FUNCTION_VALUES:
            return
        name = self.text(name_node)
        if HOOK_NAME_RE.match(name):
            kind = ComponentKind.HOOK
        elif self.contains_jsx(value):
            kind = ComponentKind.COMPONENT
        else:
            kind = ComponentKind.FUNCTION
        self._append(node, value, name, kind, self._first_param_type(value))

    def _append(
        self,
        span_node: Node,
        slice_node: Node,
        name: str,
        kind: ComponentKind,
        props: dict | None,
    ) -> None:
        owner = self._statement_owner(span_node)
        exported = owner.parent is not None and owner.parent.type == "export_statement"
        exports = None
        if exported:
            is_default = any(c.type == "default" for c in owner.parent.children)
            exports = ["default" if is_default else name]
        self.components.append(
            CodeComponent(
                name=name,
                kind=kind,
                file_path=self.file_path,
                start_line=span_node.start_point[0] + 1,
                end_line=span_node.end_point[0] + 1,
                complexity=calculate_complexity(self.text(slice_node)),
                props=props,
                exports=exports,
                description=self._leading_comment(owner),
            )
        )

    @staticmethod
    def _statement_owner(node: Node) -> Node:
        """Declarator -> its lexical/variable declaration; other nodes unchanged."""
        if node.type == "variable_declarator" and node.parent is not None:
            return node.parent
        return node

    def _leading_comment(self, owner: Node) -> str | None:
        anchor = owner
        if owner.parent is not None and owner.parent.type == "export_statement":
            anchor = owner.parent
        prev = anchor.prev_sibling
        if prev is None or prev.type != "comment":
            return None
        if anchor.start_point[0] - prev.end_point[0] > 1:
            return None
        return _jsdoc_summary(self.text(prev))

    def _first_param_type(self, node: Node) -> dict | None:
        params = node.child_by_field_name("parameters")
        if params is None:
            return None
        for param in params.named_children:
            annotation = param.child_by_field_name("type")
            if annotation is None:
                return None
            return {"type": self.text(annotation).lstrip(":").strip()}
        return None

    # -- imports / exports --------------------------------------------------

    def _add_import_statement(self, node: Node) -> None:
        source_node = node.child_by_field_name("source")
        if source_node is None:
            return
        source = _strip_quotes(self.text(source_node))
        clause = next((c for c in node.named_children if c.type == "import_clause"), None)
        if clause is None:
            return  # side-effect import
        for child in clause.named_children:
            if child.type == "identifier":
                self.imports.append(ImportInfo(source, ImportKind.DEFAULT, [self.text(child)]))
            elif child.type == "named_imports":
                names = []
                for spec in child.named_children:
                    if spec.type != "import_specifier":
                        continue
                    imported = spec.child_by_field_name("name")
                    if imported is not None:
                        names.append(self.text(imported))
                self.imports.append(ImportInfo(source, ImportKind.NAMED, names))
            elif child.type == "namespace_import":
                ident = next((c for c in child.named_children if c.type == "identifier"), None)
                self.imports.append(
                    ImportInfo(source, ImportKind.NAMESPACE, [self.text(ident)] if ident else [])
                )

    def _add_export_statement(self, node: Node) -> None:
        if any(c.type == "default" for c in node.children):
            self.exports.append("default")
        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            name_node = declaration.child_by_field_name("name")
            if name_node is not None:
                self.exports.append(self.text(name_node))
            for declarator in declaration.named_children:
                if declarator.type == "variable_declarator":
                    ident = declarator.child_by_field_name("name")
                    if ident is not None and ident.type == "identifier":
                        self.exports.append(self.text(ident))
        clause = next((c for c in node.named_children if c.type == "export_clause"), None)
        names: list[str] = []
        if clause is not None:
            for spec in clause.named_children:
                if spec.type != "export_specifier":
                    continue
                local = spec.child_by_field_name("name")
                alias = spec.child_by_field_name("alias")
                if local is not None:
                    names.append(self.text(local))
                exported = alias if alias is not None else local
                if exported is not None:
                    self.exports.append(self.text(exported))
        # re-export: export { a } from "./a"
        source_node = node.child_by_field_name("source")
        if source_node is not None:
            self.imports.append(ImportInfo(_strip_quotes(self.text(source_node)), ImportKind.NAMED, names))

    def _add_call_import(self, node: Node) -> None:
        function = node.child_by_field_name("function")
        arguments = node.child_by_field_name("arguments")
        if function is None or arguments is None:
            return
        first = next(iter(arguments.named_children), None)
        if first is None or first.type != "string":
            return
        source = _strip_quotes(self.text(first))
        if function.type == "import":
            self.imports.append(ImportInfo(source, ImportKind.DYNAMIC, []))
        elif function.type == "identifier" and self.text(function) == "require":
            names: list[str] = []
            parent = node.parent
            if parent is not None and parent.type == "variable_declarator":
                ident = parent.child_by_field_name("name")
                if ident is not None and ident.type == "identifier":
                    names.append(self.text(ident))
            self.imports.append(ImportInfo(source, ImportKind.DEFAULT, names))


class ComponentExtractor:
    """Extracts ``CodeComponent`` and ``ImportInfo`` lists from file content.

    Never raises for bad input: unsupported languages and parse failures give an
    empty ``ExtractionResult`` with ``parsed=False``.
    """

    def extract(self, content: str | None, language: str | None, file_path: str = "") -> ExtractionResult:
        if not content or not language:
            return ExtractionResult()
        dialect = _DIALECT_ALIASES.get(language.lower())
        if dialect is None:
            return ExtractionResult()
        try:
            if dialect == PYTHON:
                return self._extract_python(content, file_path)
            return self._extract_tree_sitter(content, dialect, file_path)
        except Exception as e:
            logger.warning("Failed to analyze %s (%s): %s", file_path or "<content>", dialect, e)
            return ExtractionResult()

    def analyze_code(self, content: str | None, language: str | None) -> list[CodeComponent]:
        return self.extract(content, language).components

    def parse_imports(self, content: str | None, language: str | None) -> list[ImportInfo]:
        return self.extract(content, language).imports

    def _extract_tree_sitter(self, content: str, dialect: str, file_path: str) -> ExtractionResult:
        source = content.encode("utf-8", errors="surrogatepass")
        parser = Parser(_GRAMMARS[dialect])
        tree = parser.parse(source)
        if tree.root_node.has_error:
            logger.debug("Parse errors in %s (%s), skipping component extraction", file_path, dialect)
            return ExtractionResult()
        visitor = _TreeSitterVisitor(source, file_path)
        visitor.run(tree.root_node)
        return ExtractionResult(
            components=visitor.components,
            imports=visitor.imports,
            exports=list(dict.fromkeys(visitor.exports)),
            parsed=True,
        )

    def _extract_python(self, content: str, file_path: str) -> ExtractionResult:
        try:
            tree = ast.parse(content)
        except SyntaxError as e:
            logger.debug("Syntax error in %s: %s", file_path, e)
            return ExtractionResult()

        components: list[CodeComponent] = []
        imports: list[ImportInfo] = []
        for node in ast.walk(tree):
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
                kind = ComponentKind.CLASS if isinstance(node, ast.ClassDef) else ComponentKind.FUNCTION
                segment = ast.get_source_segment(content, node) or ""
                docstring = ast.get_docstring(node)
                components.append(
                    CodeComponent(
                        name=node.name,
                        kind=kind,
                        file_path=file_path,
                        start_line=node.lineno,
                        end_line=node.end_lineno or node.lineno,
                        complexity=calculate_complexity(segment),
                        description=docstring.strip().splitlines()[0] if docstring else None,
                    )
                )
            elif isinstance(node, ast.Import):
                for alias in node.names:
                    imports.append(ImportInfo(alias.name, ImportKind.NAMESPACE, [alias.asname or alias.name]))
            elif isinstance(node, ast.ImportFrom):
                module = "." * node.level + (node.module or "")
                imports.append(ImportInfo(module, ImportKind.NAMED, [a.name for a in node.names]))

        exports = [
            node.name
            for node in tree.body
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef))
            and not node.name.startswith("_")
        ]
        components.sort(key=lambda c: (c.start_line, c.end_line))
        return ExtractionResult(components=components, imports=imports, exports=exports, parsed=True)
