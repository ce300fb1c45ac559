"""Tests for Markdown report formatting."""

from archscope.domain.entities.graph import (
    ArchitectureGraph,
    ComponentEdge,
    ComponentNode,
    ComponentType,
    GraphInsights,
    GraphStats,
)
from archscope.domain.entities.quality import QualityScore
from archscope.domain.entities.technology import (
    TechnologyCategory,
    TechnologyInfo,
    TechnologyStack,
    TechnologyUsage,
)
from archscope.infrastructure.analyzer.report import (
    escape_markdown,
    format_architecture_markdown,
    format_quality_markdown,
    format_report_markdown,
    format_technology_markdown,
    progress_bar,
)


def _graph() -> ArchitectureGraph:
    heavy = ComponentNode(
        id="src_services_billing_ts",
        label="billing.ts",
        path="src/services/billing.ts",
        type=ComponentType.SERVICE,
        complexity=88,
    )
    return ArchitectureGraph(
        nodes=[heavy],
        edges=[],
        stats=GraphStats(
            total_nodes=1,
            total_edges=0,
            average_connections=0.0,
            layers={"service": 1},
            languages={"TypeScript": 1},
        ),
        insights=GraphInsights(
            high_complexity=[heavy],
            isolated=[heavy],
            patterns=["API-First Architecture"],
            recommendations=["Consider refactoring 1 high-complexity components"],
        ),
    )


class TestFormatArchitectureMarkdown:
    """Tests for format_architecture_markdown."""

    def test_sections(self):
        text = format_architecture_markdown(_graph())

        assert "Nodes: 1, edges: 0" in text
        assert "| service | 1 |" in text
        assert "| TypeScript | 1 |" in text
        assert "- API-First Architecture" in text
        assert "`src/services/billing.ts` (complexity: 88)" in text
        assert "### Isolated nodes" in text
        assert "- Consider refactoring 1 high-complexity components" in text
        # no frameworks counted
        assert "### Frameworks" not in text

    def test_empty_graph(self):
        text = format_architecture_markdown(ArchitectureGraph())
        assert "Nodes: 0, edges: 0" in text
        assert "### Recommendations\n\nNone." in text

    def test_none(self):
        assert "No graph data." in format_architecture_markdown(None)

    def test_most_depended_on(self):
        """External targets are listed by package name, ranked by incoming edges."""
        nodes = [
            ComponentNode(id="src_a_ts", label="a.ts", path="src/a.ts", type=ComponentType.UTILITY),
            ComponentNode(id="src_b_ts", label="b.ts", path="src/b.ts", type=ComponentType.UTILITY),
            ComponentNode(
                id="external_react",
                label="react",
                path="node_modules/react",
                type=ComponentType.UTILITY,
                framework="external",
            ),
        ]
        edges = [
            ComponentEdge(source="src_a_ts", target="external_react"),
            ComponentEdge(source="src_b_ts", target="external_react"),
            ComponentEdge(source="src_a_ts", target="src_b_ts"),
        ]
        text = format_architecture_markdown(ArchitectureGraph(nodes=nodes, edges=edges))

        assert "- External packages: 1" in text
        section = text.split("### Most depended-on\n\n")[1]
        assert section.startswith("- `react` (incoming: 2)\n- `src/b.ts` (incoming: 1)")


class TestFormatQualityMarkdown:
    """Tests for format_quality_markdown."""

    def test_scores_table(self):
        score = QualityScore(overall=75, code_quality=80.0, security=35.5)
        text = format_quality_markdown(score)

        assert "**Overall:** 75/100 🟡 Fair" in text
        assert "| Code quality | 80.0 | 🟢 Good |" in text
        assert "| Security | 35.5 | 🔴 Critical |" in text
        assert "| Performance | 0.0 |" in text

    def test_factors_optional(self):
        score = QualityScore(overall=50, factors={"testing": {"coverage": 40.0}})
        assert "coverage" not in format_quality_markdown(score)
        assert "- coverage: 40.0" in format_quality_markdown(score, include_factors=True)

    def test_none(self):
        assert "No score data." in format_quality_markdown(None)


class TestFormatTechnologyMarkdown:
    """Tests for format_technology_markdown."""

    def test_grouped_by_category(self):
        stack = TechnologyStack(technologies=[
            TechnologyInfo(
                name="React",
                category=TechnologyCategory.FRONTEND,
                confidence=90,
                usage=TechnologyUsage.PRIMARY,
                version="18.2.0",
            ),
            TechnologyInfo(name="Docker", category=TechnologyCategory.DEVOPS, confidence=45),
        ])
        text = format_technology_markdown(stack)

        assert "### Frontend" in text
        assert "| React | 18.2.0 | primary | 90% |" in text
        assert "| Docker | - | dependency | 45% |" in text
        assert "### Backend" not in text
        assert text.index("### Frontend") < text.index("### Devops")

    def test_empty_and_none(self):
        assert "Nothing detected." in format_technology_markdown(TechnologyStack())
        assert "No technology data." in format_technology_markdown(None)


class TestHelpers:
    """Tests for report helpers."""

    def test_full_report(self):
        text = format_report_markdown(_graph(), QualityScore(overall=90), title="demo")
        assert text.startswith("# 📊 demo")
        assert text.index("## 📈 Quality") < text.index("## 🏗️ Architecture")
        assert "Technology stack" not in text

    def test_full_report_with_technologies(self):
        text = format_report_markdown(_graph(), QualityScore(overall=90), technologies=TechnologyStack())
        assert text.index("## 🏗️ Architecture") < text.index("## 🧰 Technology stack")

    def test_progress_bar(self):
        assert progress_bar(50, width=10) == "[█████░░░░░]"
        assert progress_bar(150, width=4) == "[████]"

    def test_escape(self):
        assert escape_markdown("a|b`c") == "a\\|b\\`c"
        assert escape_markdown(None) == ""
