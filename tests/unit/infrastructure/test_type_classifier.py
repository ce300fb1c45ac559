"""Tests for the type classifier and its rule tables."""

import re
from pathlib import Path

import pytest

from archscope.domain.entities.graph import ComponentType
from archscope.infrastructure.analyzer.classification_rules import (
    ContentFallbackRule,
    RuleTables,
    TypeRule,
    default_rule_tables,
    load_rule_tables,
)
from archscope.infrastructure.analyzer.type_classifier import TypeClassifier
from archscope.infrastructure.config.toml_loader import ConfigError

EXAMPLE_RULES = Path(__file__).resolve().parents[3] / "config" / "rules.example.toml"


@pytest.fixture
def classifier():
    return TypeClassifier()


class TestDetectType:
    """Path-based type rules, first match wins."""

    def test_component(self, classifier):
        result = classifier.classify(
            "src/components/Button.tsx",
            "export function Button(props){ if (props.disabled) return null; return <button/> }",
        )
        assert result.type == ComponentType.COMPONENT
        assert result.layer == "components"
        assert result.framework == "react"
        assert result.language == "TypeScript"

    def test_api_route(self, classifier):
        result = classifier.classify("src/api/users/route.ts", "export async function GET(req){ return req }")
        assert result.type == ComponentType.API
        assert result.layer == "api"

    def test_page_before_component(self, classifier):
        """pages/ rule precedes components/."""
        assert classifier.detect_type("src/pages/components/Home.tsx") == ComponentType.PAGE

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("src/services/billing.ts", ComponentType.SERVICE),
            ("src/models/user.py", ComponentType.DATABASE),
            ("db/001_init.sql", ComponentType.DATABASE),
            ("src/auth/session.ts", ComponentType.AUTH),
            ("src/middleware/jwtCheck.ts", ComponentType.AUTH),
            ("package.json", ComponentType.CONFIG),
            ("vite.config.ts", ComponentType.CONFIG),
        ],
    )
    def test_rule_table(self, classifier, path, expected):
        assert classifier.detect_type(path) == expected

    def test_no_layer_for_utility_and_config(self, classifier):
        """utility and config nodes are not assigned a layer."""
        assert classifier.classify("README.md").layer is None
        assert classifier.classify("package.json").layer is None

    def test_default_is_utility(self, classifier):
        assert classifier.detect_type("src/index.ts") == ComponentType.UTILITY

    def test_content_fallback_for_exporting_files(self, classifier):
        """Exporting files get a type from path keywords when no rule matched."""
        assert classifier.detect_type("src/shared/ButtonComponent.ts", "export default {}") == ComponentType.COMPONENT
        assert classifier.detect_type("src/shared/ButtonComponent.ts", "const x = 1") == ComponentType.UTILITY


class TestDetectFramework:
    """Framework rules over content and path."""

    def test_vue(self, classifier):
        assert classifier.detect_framework("<template><div/></template>", "src/App.vue") == "vue"

    def test_fastapi(self, classifier):
        content = "from fastapi import FastAPI\napp = FastAPI()\n"
        assert classifier.detect_framework(content, "service/main.py") == "fastapi"

    def test_none(self, classifier):
        assert classifier.detect_framework("x = 1", "scripts/tool.py") is None


class TestDetectLanguage:
    """Extension lookup."""

    def test_known(self, classifier):
        assert classifier.detect_language("src/a.tsx") == "TypeScript"
        assert classifier.detect_language("pkg/a.py") == "Python"

    def test_unknown(self, classifier):
        assert classifier.detect_language("src/Main.kt") == "Unknown"
        assert classifier.detect_language("Makefile") == "Unknown"


class TestSwappableTables:
    """Tables are data; the classifier only walks them."""

    def test_custom_tables(self):
        tables = RuleTables(
            type_rules=(TypeRule(ComponentType.SERVICE, (re.compile(r"\.go$"),)),),
            framework_rules=(),
            content_fallback=(ContentFallbackRule(ComponentType.API, ("handler",)),),
            languages={"go": "Go"},
        )
        classifier = TypeClassifier(tables)
        result = classifier.classify("cmd/server/main.go", "package main")

        assert result.type == ComponentType.SERVICE
        assert result.framework is None
        assert result.language == "Go"
        assert classifier.detect_type("src/components/Button.tsx") == ComponentType.UTILITY

    def test_defaults_are_fresh(self):
        """Mutating one table copy does not leak into the next."""
        tables = default_rule_tables()
        tables.languages["zz"] = "Zed"
        assert "zz" not in default_rule_tables().languages


class TestLoadRuleTables:
    """TOML rule files."""

    def test_example_file(self):
        """config/rules.example.toml loads and drives classification."""
        tables = load_rule_tables(EXAMPLE_RULES)
        classifier = TypeClassifier(tables)

        assert classifier.detect_type("src/routes/index.svelte") == ComponentType.PAGE
        assert classifier.detect_type("internal/handlers/users.go") == ComponentType.API
        assert classifier.detect_type("pyproject.toml") == ComponentType.CONFIG
        assert classifier.detect_framework('import "github.com/gin-gonic/gin"', "main.go") == "gin"
        assert classifier.detect_language("main.kt") == "Kotlin"
        # languages extend the defaults unless replace_languages is set
        assert classifier.detect_language("a.ts") == "TypeScript"

    def test_replace_languages(self, tmp_path):
        """replace_languages drops the built-in extension map."""
        rules = tmp_path / "rules.toml"
        rules.write_text('replace_languages = true\n\n[languages]\ngo = "Go"\n')
        tables = load_rule_tables(rules)
        assert tables.languages == {"go": "Go"}
        # absent sections keep the defaults
        assert tables.type_rules == default_rule_tables().type_rules

    def test_unknown_type(self, tmp_path):
        rules = tmp_path / "rules.toml"
        rules.write_text('[[type_rules]]\ntype = "widget"\npatterns = ["x"]\n')
        with pytest.raises(ConfigError):
            load_rule_tables(rules)

    def test_bad_regex(self, tmp_path):
        rules = tmp_path / "rules.toml"
        rules.write_text("[[framework_rules]]\nname = \"x\"\npatterns = ['(unclosed']\n")
        with pytest.raises(ConfigError):
            load_rule_tables(rules)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_rule_tables(tmp_path / "missing.toml")
