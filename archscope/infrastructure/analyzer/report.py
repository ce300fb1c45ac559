"""Report Generator - Markdown rendering of the graph, the quality score and the technology stack.

Output is meant for logs and terminals; charts are left to dashboards.
"""

from archscope.domain.entities.graph import ArchitectureGraph, ComponentNode
from archscope.domain.entities.quality import CATEGORY_NAMES, QualityScore
from archscope.domain.entities.technology import TechnologyCategory, TechnologyStack

MAX_LISTED_NODES = 10
MAX_DEPENDED_ON = 5

CATEGORY_TITLES = {
    "code_quality": "Code quality",
    "naming_conventions": "Naming conventions",
    "pr_quality": "PR quality",
    "maintainability": "Maintainability",
    "code_duplication": "Code duplication",
    "documentation": "Documentation",
    "testing": "Testing",
    "security": "Security",
    "performance": "Performance",
}


def escape_markdown(text: str | None) -> str:
    """Escape characters that break tables and inline code."""
    if not text:
        return ""
    return text.replace("|", "\\|").replace("`", "\\`")


def progress_bar(score: float, width: int = 20) -> str:
    filled = int(width * max(0.0, min(100.0, score)) / 100)
    return f"[{'█' * filled}{'░' * (width - filled)}]"


def score_status(score: float) -> str:
    """Статус по шкале 0-100."""
    if score >= 80:
        return "🟢 Good"
    elif score >= 60:
        return "🟡 Fair"
    elif score >= 40:
        return "🟠 Poor"
    return "🔴 Critical"


def _node_lines(nodes: list[ComponentNode], detail: str) -> list[str]:
    lines = []
    for node in nodes[:MAX_LISTED_NODES]:
        value = node.complexity if detail == "complexity" else node.type.value
        lines.append(f"- `{escape_markdown(node.path)}` ({detail}: {value})")
    if len(nodes) > MAX_LISTED_NODES:
        lines.append(f"*... and {len(nodes) - MAX_LISTED_NODES} more*")
    return lines


def _count_table(title: str, counts: dict[str, int]) -> str:
    if not counts:
        return ""
    rows = [
        f"| {escape_markdown(name)} | {count} |"
        for name, count in sorted(counts.items(), key=lambda x: (-x[1], x[0]))
    ]
    return f"### {title}\n\n| Name | Nodes |\n|------|-------|\n" + "\n".join(rows)


def _display_path(node: ComponentNode) -> str:
    return node.label if node.is_external else node.path


def _most_depended_on(graph: ArchitectureGraph) -> list[str]:
    incoming: dict[str, int] = {}
    for edge in graph.edges:
        incoming[edge.target] = incoming.get(edge.target, 0) + 1
    ranked = sorted(incoming.items(), key=lambda x: (-x[1], x[0]))[:MAX_DEPENDED_ON]
    lines = []
    for node_id, count in ranked:
        node = graph.node_by_id(node_id)
        if node is not None:
            lines.append(f"- `{escape_markdown(_display_path(node))}` (incoming: {count})")
    return lines


def format_architecture_markdown(graph: ArchitectureGraph | None) -> str:
    """Форматирует граф архитектуры в Markdown для отчёта."""
    if graph is None:
        return "## 🏗️ Architecture\n\nNo graph data."

    stats = graph.stats
    insights = graph.insights
    parts = [
        "## 🏗️ Architecture",
        f"- Nodes: {stats.total_nodes}, edges: {stats.total_edges}, "
        f"average connections: {stats.average_connections}\n"
        f"- External packages: {sum(1 for n in graph.nodes if n.is_external)}",
    ]
    for title, counts in (("Layers", stats.layers), ("Frameworks", stats.frameworks), ("Languages", stats.languages)):
        table = _count_table(title, counts)
        if table:
            parts.append(table)

    if insights.patterns:
        parts.append("### Patterns\n\n" + "\n".join(f"- {p}" for p in insights.patterns))

    depended_on = _most_depended_on(graph)
    if depended_on:
        parts.append("### Most depended-on\n\n" + "\n".join(depended_on))

    if insights.high_complexity:
        parts.append("### High complexity\n\n" + "\n".join(_node_lines(insights.high_complexity, "complexity")))
    if insights.critical:
        parts.append("### Critical nodes\n\n" + "\n".join(_node_lines(insights.critical, "type")))
    if insights.isolated:
        parts.append("### Isolated nodes\n\n" + "\n".join(_node_lines(insights.isolated, "type")))

    if insights.recommendations:
        parts.append("### Recommendations\n\n" + "\n".join(f"- {r}" for r in insights.recommendations))
    else:
        parts.append("### Recommendations\n\nNone.")

    return "\n\n".join(parts)


def format_quality_markdown(score: QualityScore | None, include_factors: bool = False) -> str:
    if score is None:
        return "## 📈 Quality\n\nNo score data."

    rows = []
    for name in CATEGORY_NAMES:
        value = getattr(score, name)
        rows.append(f"| {CATEGORY_TITLES[name]} | {value} | {score_status(value)} |")

    parts = [
        "## 📈 Quality",
        f"**Overall:** {score.overall}/100 {score_status(score.overall)}\n\n```\n"
        f"{progress_bar(score.overall)} {score.overall}%\n```",
        "| Category | Score | Status |\n|----------|-------|--------|\n" + "\n".join(rows),
    ]

    if include_factors and score.factors:
        for name in CATEGORY_NAMES:
            factors = score.factors.get(name)
            if not factors:
                continue
            lines = "\n".join(f"- {factor}: {value}" for factor, value in factors.items())
            parts.append(f"### {CATEGORY_TITLES[name]}\n\n{lines}")

    return "\n\n".join(parts)


def format_technology_markdown(stack: TechnologyStack | None) -> str:
    if stack is None:
        return "## 🧰 Technology stack\n\nNo technology data."
    if not stack.technologies:
        return "## 🧰 Technology stack\n\nNothing detected."

    parts = ["## 🧰 Technology stack"]
    for category in TechnologyCategory:
        technologies = stack.by_category(category)
        if not technologies:
            continue
        rows = [
            f"| {escape_markdown(t.name)} | {escape_markdown(t.version) or '-'} | {t.usage.value} | {t.confidence}% |"
            for t in technologies
        ]
        parts.append(
            f"### {category.value.capitalize()}\n\n"
            "| Technology | Version | Usage | Confidence |\n|------------|---------|-------|------------|\n"
            + "\n".join(rows)
        )
    return "\n\n".join(parts)


def format_report_markdown(
    graph: ArchitectureGraph | None,
    score: QualityScore | None,
    title: str = "Repository analysis",
    technologies: TechnologyStack | None = None,
) -> str:
    """Full report: header, quality, architecture, then technologies when given."""
    sections = [
        f"# 📊 {escape_markdown(title)}",
        format_quality_markdown(score, include_factors=True),
        format_architecture_markdown(graph),
    ]
    if technologies is not None:
        sections.append(format_technology_markdown(technologies))
    return "\n\n".join(s for s in sections if s.strip())
