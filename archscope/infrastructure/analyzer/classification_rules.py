"""Classification rule tables (data, not code).

Ordered first-match tables for component type and framework, plus the
extension -> language lookup. ``TypeClassifier`` only walks these tables, so a
new ecosystem is added by editing data here or by pointing ``graph.rules_file``
at a TOML file with the same shape:

    [[type_rules]]
    type = "page"
    patterns = ['pages/.*\\.(tsx?|jsx?)$']

    [[framework_rules]]
    name = "react"
    patterns = ['(?i)import.*from\\s+[\\'"]react[\\'"]']

    [[content_fallback]]
    type = "component"
    keywords = ["component", "ui"]

    [languages]
    ts = "TypeScript"
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

from archscope.domain.entities.graph import ComponentType
from archscope.infrastructure.config.toml_loader import ConfigError, load_toml


@dataclass(frozen=True)
class TypeRule:
    """Component type assigned when any path pattern matches."""

    type: ComponentType
    patterns: tuple[re.Pattern[str], ...]

    def matches(self, path: str) -> bool:
        return any(p.search(path) for p in self.patterns)


@dataclass(frozen=True)
class FrameworkRule:
    """Framework assigned when any pattern matches content or path."""

    name: str
    patterns: tuple[re.Pattern[str], ...]

    def matches(self, content: str, path: str) -> bool:
        return any(p.search(content) or p.search(path) for p in self.patterns)


@dataclass(frozen=True)
class ContentFallbackRule:
    """Type assigned to exporting files whose lower-cased path has a keyword."""

    type: ComponentType
    keywords: tuple[str, ...]


@dataclass(frozen=True)
class RuleTables:
    """Everything the classifier needs, in evaluation order."""

    type_rules: tuple[TypeRule, ...]
    framework_rules: tuple[FrameworkRule, ...]
    content_fallback: tuple[ContentFallbackRule, ...]
    export_markers: tuple[str, ...] = ("export default", "export {")
    languages: dict[str, str] = field(default_factory=dict)
    default_type: ComponentType = ComponentType.UTILITY


def _compile(patterns: list[str] | tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p) for p in patterns)


DEFAULT_TYPE_PATTERNS: list[tuple[ComponentType, list[str]]] = [
    (ComponentType.PAGE, [
        r"pages/.*\.(tsx?|jsx?|vue|svelte)$",
        r"app/.*page\.(tsx?|jsx?)$",
        r"routes/.*\.(tsx?|jsx?)$",
        r"views/.*\.(tsx?|jsx?|vue)$",
    ]),
    (ComponentType.COMPONENT, [
        r"components/.*\.(tsx?|jsx?|vue|svelte)$",
        r"ui/.*\.(tsx?|jsx?)$",
        r"widgets/.*\.(tsx?|jsx?)$",
        r"blocks/.*\.(tsx?|jsx?)$",
    ]),
    (ComponentType.API, [
        r"api/.*\.(ts|js|py|php|java)$",
        r"routes/.*\.(ts|js)$",
        r"controllers/.*\.(ts|js|py|php)$",
        r"handlers/.*\.(ts|js)$",
    ]),
    (ComponentType.SERVICE, [
        r"services/.*\.(ts|js|py|php|java)$",
        r"lib/.*\.(ts|js|py)$",
        r"utils/.*\.(ts|js|py)$",
        r"helpers/.*\.(ts|js|py)$",
    ]),
    (ComponentType.DATABASE, [
        r"models/.*\.(ts|js|py|php|java)$",
        r"schemas/.*\.(ts|js|py)$",
        r"migrations/.*\.(ts|js|py|sql)$",
        r"prisma/.*\.(ts|js)$",
        r"\.sql$",
    ]),
    (ComponentType.AUTH, [
        r"auth/.*\.(ts|js|py|php)$",
        r"middleware/.*auth.*\.(ts|js|py|php)$",
        r"guards/.*\.(ts|js|py|php)$",
        r"(?i)jwt|oauth|passport",
    ]),
    (ComponentType.CONFIG, [
        r"config/.*\.(ts|js|py|php|yaml|yml|json)$",
        r"\.config\.(ts|js|py|php)$",
        r"\.env",
        r"package\.json$",
        r"tsconfig\.json$",
        r"webpack\.config\.",
        r"vite\.config\.",
    ]),
]

DEFAULT_FRAMEWORK_PATTERNS: list[tuple[str, list[str]]] = [
    ("react", [
        r"(?i)import.*from\s+['\"]react['\"]",
        r"import.*from\s+['\"]@?react",
        r"\.tsx?$",
        r"\.jsx$",
        r"(?i)useState|useEffect|useContext",
        r"<[A-Z][a-zA-Z]*\s*/?>",
        r"export\s+(default\s+)?function\s+[A-Z]",
        r"export\s+(default\s+)?const\s+[A-Z]",
    ]),
    ("nextjs", [
        r"import.*from\s+['\"]next",
        r"pages/|app/",
        r"(?i)getServerSideProps|getStaticProps|getStaticPaths",
        r"(?i)useRouter|usePathname|useSearchParams",
        r"middleware\.ts$",
        r"next\.config\.",
    ]),
    ("vue", [
        r"(?i)import.*from\s+['\"]vue['\"]",
        r"import.*from\s+['\"]@vue",
        r"\.vue$",
        r"<template>|<script>|<style>",
        r"export\s+default\s*\{",
        r"(?i)defineComponent|createApp",
    ]),
    ("angular", [
        r"import.*from\s+['\"]@angular",
        r"\.component\.ts$",
        r"(?i)@Component|@Injectable|@NgModule",
        r"selector:|templateUrl:|styleUrls:",
        r"(?i)ngOnInit|ngOnDestroy",
    ]),
    ("svelte", [
        r"\.svelte$",
        r"<script>|<style>|<svelte:",
        r"export\s+let\s+",
        r"(?i)onMount|onDestroy",
    ]),
    ("express", [
        r"(?i)import.*from\s+['\"]express['\"]",
        r"(?i)app\.get|app\.post|app\.put|app\.delete",
        r"(?i)router\.|express\.Router",
        r"middleware|req\.|res\.",
    ]),
    ("fastapi", [
        r"(?i)from\s+fastapi\s+import",
        r"@app\.|@router\.",
        r"FastAPI\(",
        r"APIRouter",
        r"Depends\(",
    ]),
    ("django", [
        r"from\s+django",
        r"class\s+\w+View",
        r"urlpatterns\s*=",
        r"models\.Model",
        r"def\s+\w+\(request\)",
    ]),
    ("laravel", [
        r"use\s+Illuminate",
        r"Route::",
        r"class\s+\w+\s+extends\s+Controller",
        r"Eloquent",
        r"Artisan",
    ]),
]

DEFAULT_CONTENT_FALLBACK: list[tuple[ComponentType, tuple[str, ...]]] = [
    (ComponentType.COMPONENT, ("component", "ui")),
    (ComponentType.API, ("api", "route")),
    (ComponentType.SERVICE, ("service", "lib", "util")),
]

DEFAULT_LANGUAGES: dict[str, str] = {
    "ts": "TypeScript",
    "tsx": "TypeScript",
    "js": "JavaScript",
    "jsx": "JavaScript",
    "mjs": "JavaScript",
    "cjs": "JavaScript",
    "vue": "Vue",
    "svelte": "Svelte",
    "py": "Python",
    "php": "PHP",
    "java": "Java",
    "cs": "C#",
    "go": "Go",
    "rs": "Rust",
    "rb": "Ruby",
    "sql": "SQL",
    "yaml": "YAML",
    "yml": "YAML",
    "json": "JSON",
    "md": "Markdown",
    "css": "CSS",
    "scss": "SCSS",
    "sass": "Sass",
    "html": "HTML",
    "xml": "XML",
}


def default_rule_tables() -> RuleTables:
    """Built-in tables covering the JS/TS, Python and PHP ecosystems."""
    return RuleTables(
        type_rules=tuple(TypeRule(t, _compile(p)) for t, p in DEFAULT_TYPE_PATTERNS),
        framework_rules=tuple(FrameworkRule(n, _compile(p)) for n, p in DEFAULT_FRAMEWORK_PATTERNS),
        content_fallback=tuple(ContentFallbackRule(t, k) for t, k in DEFAULT_CONTENT_FALLBACK),
        languages=dict(DEFAULT_LANGUAGES),
    )


def load_rule_tables(path: str | Path) -> RuleTables:
    """Load tables from TOML. Sections that are absent keep the defaults.

    Raises:
        ConfigError: file unreadable, unknown component type, or bad regex.
    """
    raw = load_toml(Path(path))
    defaults = default_rule_tables()
    try:
        type_rules = defaults.type_rules
        if "type_rules" in raw:
            type_rules = tuple(
                TypeRule(ComponentType(r["type"]), _compile(r.get("patterns", [])))
                for r in raw["type_rules"]
            )
        framework_rules = defaults.framework_rules
        if "framework_rules" in raw:
            framework_rules = tuple(
                FrameworkRule(str(r["name"]), _compile(r.get("patterns", [])))
                for r in raw["framework_rules"]
            )
        content_fallback = defaults.content_fallback
        if "content_fallback" in raw:
            content_fallback = tuple(
                ContentFallbackRule(ComponentType(r["type"]), tuple(k.lower() for k in r.get("keywords", [])))
                for r in raw["content_fallback"]
            )
    except (KeyError, ValueError, re.error) as e:
        raise ConfigError(f"Invalid rules file {path}: {e}") from e

    languages = dict(defaults.languages)
    if "languages" in raw:
        if raw.get("replace_languages"):
            languages = {}
        languages.update({str(k).lower(): str(v) for k, v in raw["languages"].items()})

    return RuleTables(
        type_rules=type_rules,
        framework_rules=framework_rules,
        content_fallback=content_fallback,
        export_markers=tuple(raw.get("export_markers", defaults.export_markers)),
        languages=languages,
    )
