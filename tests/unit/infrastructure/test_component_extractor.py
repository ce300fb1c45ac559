"""Tests for the component extractor (tree-sitter and ast)."""

import pytest

from archscope.domain.entities.code import ComponentKind, ImportKind
from archscope.infrastructure.analyzer.component_extractor import ComponentExtractor, dialect_for_path

BUTTON = "export function Button(props){ if (props.disabled) return null; return <button/> }"

IMPORTS = """import React from "react";
import { useState, useEffect } from "react";
import * as utils from "./utils";
import "./styles.css";
const Lazy = import("./Lazy");
const fs = require("fs");
export { helper } from "./helper";
"""

PYTHON_MODULE = '''"""Module."""
import os
from .models import User
from ..core import base


class Service:
    """Handles users.

    More text.
    """

    def run(self, x):
        if x:
            return 1
        return 0


def _private():
    pass
'''


@pytest.fixture
def extractor():
    return ComponentExtractor()


class TestDialectForPath:
    """Tests for dialect_for_path."""

    def test_known_extensions(self):
        assert dialect_for_path("src/a.ts") == "typescript"
        assert dialect_for_path("src/a.tsx") == "tsx"
        assert dialect_for_path("src/a.jsx") == "javascript"
        assert dialect_for_path("pkg/mod.py") == "python"

    def test_unknown(self):
        assert dialect_for_path("README.md") is None
        assert dialect_for_path("Makefile") is None


class TestComponents:
    """Construct extraction for TS/JS."""

    def test_button_component(self, extractor):
        """Function returning JSX is a component with one branch."""
        result = extractor.extract(BUTTON, "tsx", "src/components/Button.tsx")

        assert result.parsed
        assert len(result.components) == 1
        button = result.components[0]
        assert button.name == "Button"
        assert button.kind == ComponentKind.COMPONENT
        assert button.complexity == 2
        assert button.start_line == 1
        assert button.file_path == "src/components/Button.tsx"
        assert button.exports == ["Button"]
        assert result.exports == ["Button"]

    def test_plain_function(self, extractor):
        code = "function add(a: number, b: number) { return a + b }"
        result = extractor.extract(code, "typescript")
        assert [(c.name, c.kind) for c in result.components] == [("add", ComponentKind.FUNCTION)]
        assert result.components[0].props == {"type": "number"}
        assert result.components[0].exports is None

    def test_hook_by_name(self, extractor):
        """Arrow function named use<Upper> is a hook."""
        code = "export const useCounter = () => { const [n, setN] = useState(0); return n; }"
        result = extractor.extract(code, "ts")
        assert [(c.name, c.kind) for c in result.components] == [("useCounter", ComponentKind.HOOK)]

    def test_arrow_component_with_props_and_description(self, extractor):
        """JSDoc summary and the props type are taken from the arrow component."""
        code = (
            "/**\n"
            " * Primary action button.\n"
            " * @param label text\n"
            " */\n"
            "export const Button = ({ label }: ButtonProps) => <button>{label}</button>;\n"
        )
        result = extractor.extract(code, "tsx")
        button = result.components[0]
        assert button.kind == ComponentKind.COMPONENT
        assert button.description == "Primary action button."
        assert button.props == {"type": "ButtonProps"}
        assert button.start_line == 5

    def test_class(self, extractor):
        """Classes are extracted; the default export names them."""
        code = "class Store { get(key) { return this.items[key] } }\nexport default Store;\n"
        result = extractor.extract(code, "javascript")
        assert [(c.name, c.kind) for c in result.components] == [("Store", ComponentKind.CLASS)]
        assert result.components[0].exports is None
        assert result.exports == ["default"]

    def test_jsx_is_per_construct(self, extractor):
        """A helper next to a component stays a function."""
        code = (
            "function format(s) { return s.trim() }\n"
            "function Label(props) { return <span>{format(props.text)}</span> }\n"
        )
        result = extractor.extract(code, "jsx")
        kinds = {c.name: c.kind for c in result.components}
        assert kinds == {"format": ComponentKind.FUNCTION, "Label": ComponentKind.COMPONENT}

    def test_components_in_document_order(self, extractor):
        code = "function b() {}\nfunction a() {}\nconst c = () => 1\n"
        result = extractor.extract(code, "js")
        assert [c.name for c in result.components] == ["b", "a", "c"]

    def test_analyze_code_shortcut(self, extractor):
        assert [c.name for c in extractor.analyze_code(BUTTON, "tsx")] == ["Button"]


class TestImports:
    """Import extraction for TS/JS."""

    def test_import_kinds(self, extractor):
        """Default, named, namespace, dynamic and require imports."""
        imports = extractor.parse_imports(IMPORTS, "typescript")
        found = [(i.raw_source, i.kind) for i in imports]

        assert ("react", ImportKind.DEFAULT) in found
        assert ("react", ImportKind.NAMED) in found
        assert ("./utils", ImportKind.NAMESPACE) in found
        assert ("./Lazy", ImportKind.DYNAMIC) in found
        assert ("fs", ImportKind.DEFAULT) in found
        assert ("./helper", ImportKind.NAMED) in found

    def test_side_effect_import_skipped(self, extractor):
        """import "./styles.css" has no binding and is not recorded."""
        imports = extractor.parse_imports(IMPORTS, "typescript")
        assert "./styles.css" not in {i.raw_source for i in imports}

    def test_imported_names(self, extractor):
        imports = extractor.parse_imports(IMPORTS, "typescript")
        by_key = {(i.raw_source, i.kind): i.imported_names for i in imports}
        assert by_key[("react", ImportKind.DEFAULT)] == ["React"]
        assert by_key[("react", ImportKind.NAMED)] == ["useState", "useEffect"]
        assert by_key[("./utils", ImportKind.NAMESPACE)] == ["utils"]
        assert by_key[("fs", ImportKind.DEFAULT)] == ["fs"]
        assert by_key[("./helper", ImportKind.NAMED)] == ["helper"]

    def test_reexport_names_are_exports(self, extractor):
        """export { helper } from "./helpers" exports helper."""
        result = extractor.extract(IMPORTS, "typescript")
        assert "helper" in result.exports


class TestFailures:
    """Unparseable or unsupported input yields empty results, never raises."""

    def test_syntax_error(self, extractor):
        """Broken source yields empty lists instead of raising."""
        result = extractor.extract("function (((", "typescript")
        assert result.components == []
        assert result.imports == []
        assert not result.parsed

    def test_unsupported_language(self, extractor):
        result = extractor.extract("fn main() {}", "rust")
        assert result.components == []
        assert not result.parsed

    def test_missing_content(self, extractor):
        assert extractor.extract(None, "typescript").components == []
        assert extractor.extract("", "typescript").imports == []

    def test_missing_language(self, extractor):
        assert extractor.extract(BUTTON, None).components == []


class TestPython:
    """Python extraction with ast."""

    def test_constructs(self, extractor):
        result = extractor.extract(PYTHON_MODULE, "python", "pkg/service.py")

        assert result.parsed
        assert [(c.name, c.kind) for c in result.components] == [
            ("Service", ComponentKind.CLASS),
            ("run", ComponentKind.FUNCTION),
            ("_private", ComponentKind.FUNCTION),
        ]
        service = result.components[0]
        assert service.description == "Handles users."
        run = result.components[1]
        assert run.complexity == 2

    def test_imports(self, extractor):
        imports = extractor.parse_imports(PYTHON_MODULE, "py")
        assert [(i.raw_source, i.kind) for i in imports] == [
            ("os", ImportKind.NAMESPACE),
            (".models", ImportKind.NAMED),
            ("..core", ImportKind.NAMED),
        ]
        assert imports[1].imported_names == ["User"]

    def test_public_top_level_exports(self, extractor):
        """Only public top-level names count as Python exports."""
        result = extractor.extract(PYTHON_MODULE, "python")
        assert result.exports == ["Service"]

    def test_syntax_error(self, extractor):
        result = extractor.extract("def broken(:\n", "python")
        assert result.components == []
        assert not result.parsed
