"""Technology detection rules (data, not code).

Each rule names the packages that declare a technology and the patterns that
reveal it in file content or paths. ``TechnologyDetector`` only walks this
table. A rules file (``graph.rules_file``) may replace it with entries of the
same shape:

    [[technology_rules]]
    name = "Gin"
    category = "backend"
    usage = "primary"
    description = "HTTP web framework for Go"
    packages = []
    patterns = ['github\\.com/gin-gonic/gin']
    version_patterns = ['gin-gonic/gin v([\\d.]+)']

A package entry ending in "/" matches every package of that scope.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from archscope.domain.entities.technology import TechnologyCategory, TechnologyUsage
from archscope.infrastructure.config.toml_loader import ConfigError, load_toml


@dataclass(frozen=True)
class TechnologyRule:
    """How one technology is recognized."""

    name: str
    category: TechnologyCategory
    description: str = ""
    usage: TechnologyUsage = TechnologyUsage.DEPENDENCY
    packages: tuple[str, ...] = ()
    patterns: tuple[re.Pattern[str], ...] = ()
    version_patterns: tuple[re.Pattern[str], ...] = ()

    def package_match(self, package: str) -> str | None:
        """"exact", "scope" or None."""
        name = package.lower()
        for candidate in self.packages:
            if name == candidate:
                return "exact"
            if candidate.endswith("/") and name.startswith(candidate):
                return "scope"
        return None

    def count_matches(self, content: str, path: str) -> int:
        """Number of patterns found in the content or the path."""
        return sum(1 for p in self.patterns if p.search(content) or p.search(path))

    def find_version(self, content: str) -> str | None:
        for pattern in self.version_patterns:
            match = pattern.search(content)
            if match:
                return match.group(1)
        return None


DEFAULT_TECHNOLOGIES: list[dict[str, Any]] = [
    # frontend
    {
        "name": "React",
        "category": "frontend",
        "usage": "primary",
        "description": "A JavaScript library for building user interfaces",
        "packages": ["react", "react-dom"],
        "patterns": [
            r"(?i)import.*from\s+['\"]react['\"]",
            r"\buse(State|Effect|Context)\(",
            r"\.[jt]sx$",
        ],
        "version_patterns": [r"\"react\":\s*\"([^\"]+)\"", r"react@([^\s]+)"],
    },
    {
        "name": "Next.js",
        "category": "frontend",
        "usage": "primary",
        "description": "The React framework for production",
        "packages": ["next"],
        "patterns": [
            r"import.*from\s+['\"]next[/'\"]",
            r"getServerSideProps|getStaticProps|getStaticPaths",
            r"(^|/)middleware\.ts$",
            r"(^|/)next\.config\.",
        ],
        "version_patterns": [r"\"next\":\s*\"([^\"]+)\"", r"next@([^\s]+)"],
    },
    {
        "name": "Vue.js",
        "category": "frontend",
        "usage": "primary",
        "description": "Progressive JavaScript framework",
        "packages": ["vue", "@vue/"],
        "patterns": [
            r"(?i)import.*from\s+['\"]vue['\"]",
            r"import.*from\s+['\"]@vue/",
            r"\.vue$",
            r"defineComponent|createApp",
        ],
        "version_patterns": [r"\"vue\":\s*\"([^\"]+)\"", r"vue@([^\s]+)"],
    },
    {
        "name": "Angular",
        "category": "frontend",
        "usage": "primary",
        "description": "Platform for building mobile and desktop web applications",
        "packages": ["@angular/"],
        "patterns": [
            r"import.*from\s+['\"]@angular/",
            r"\.component\.ts$",
            r"@(Component|Injectable|NgModule)\(",
            r"ngOnInit|ngOnDestroy",
        ],
        "version_patterns": [r"\"@angular/core\":\s*\"([^\"]+)\""],
    },
    {
        "name": "Svelte",
        "category": "frontend",
        "description": "Cybernetically enhanced web apps",
        "packages": ["svelte", "@sveltejs/"],
        "patterns": [r"\.svelte$", r"<svelte:", r"import.*from\s+['\"]svelte"],
        "version_patterns": [r"\"svelte\":\s*\"([^\"]+)\""],
    },
    {
        "name": "TypeScript",
        "category": "frontend",
        "usage": "secondary",
        "description": "Typed superset of JavaScript",
        "packages": ["typescript"],
        "patterns": [r"\.tsx?$", r"(^|/)tsconfig\.json$"],
        "version_patterns": [r"\"typescript\":\s*\"([^\"]+)\""],
    },
    {
        "name": "Tailwind CSS",
        "category": "frontend",
        "usage": "secondary",
        "description": "Utility-first CSS framework",
        "packages": ["tailwindcss"],
        "patterns": [r"@tailwind\b", r"tailwind\.config"],
        "version_patterns": [r"\"tailwindcss\":\s*\"([^\"]+)\""],
    },
    {
        "name": "Material-UI",
        "category": "frontend",
        "usage": "secondary",
        "description": "React components implementing Material Design",
        "packages": ["@mui/", "@material-ui/"],
        "patterns": [
            r"import.*from\s+['\"]@mui/",
            r"import.*from\s+['\"]@material-ui/",
            r"\b(makeStyles|withStyles)\(",
        ],
        "version_patterns": [r"\"@mui/material\":\s*\"([^\"]+)\"", r"\"@material-ui/core\":\s*\"([^\"]+)\""],
    },
    # backend
    {
        "name": "Node.js",
        "category": "backend",
        "description": "JavaScript runtime built on Chrome V8 engine",
        "packages": ["@types/node"],
        "patterns": [
            r"from\s+['\"]node:",
            r"require\(['\"](fs|path|http)['\"]\)",
        ],
        "version_patterns": [r"\"node\":\s*\"([^\"]+)\""],
    },
    {
        "name": "Next.js API Routes",
        "category": "backend",
        "description": "API route handlers implemented with Next.js (App/Pages router)",
        "patterns": [
            r"(^|/)pages/api/",
            r"(^|/)app/(.+/)?api/(.+/)?route\.(ts|js)$",
            r"export\s+async\s+function\s+(GET|POST|PUT|DELETE|PATCH)\s*\(",
            r"\bNext(Request|Response)\b",
        ],
        "version_patterns": [r"\"next\":\s*\"([^\"]+)\""],
    },
    {
        "name": "NextAuth.js",
        "category": "backend",
        "description": "Authentication for Next.js applications",
        "packages": ["next-auth", "@auth/"],
        "patterns": [r"import\s+.*from\s+['\"]next-auth", r"NextAuth\(", r"\[\.\.\.nextauth\]"],
        "version_patterns": [r"\"next-auth\":\s*\"([^\"]+)\""],
    },
    {
        "name": "Express.js",
        "category": "backend",
        "usage": "primary",
        "description": "Fast, unopinionated web framework for Node.js",
        "packages": ["express"],
        "patterns": [
            r"(?i)import.*from\s+['\"]express['\"]",
            r"require\(['\"]express['\"]\)",
            r"express\.Router\(",
        ],
        "version_patterns": [r"\"express\":\s*\"([^\"]+)\"", r"express@([^\s]+)"],
    },
    {
        "name": "FastAPI",
        "category": "backend",
        "description": "Modern, fast web framework for building APIs with Python",
        "packages": ["fastapi"],
        "patterns": [r"from\s+fastapi\s+import", r"\bFastAPI\(", r"\bAPIRouter\("],
        "version_patterns": [r"(?i)fastapi==([^\s]+)"],
    },
    {
        "name": "Django",
        "category": "backend",
        "usage": "primary",
        "description": "High-level Python web framework",
        "packages": ["django"],
        "patterns": [r"from\s+django", r"urlpatterns\s*=", r"models\.Model\b"],
        "version_patterns": [r"(?i)django==([^\s]+)"],
    },
    {
        "name": "Laravel",
        "category": "backend",
        "usage": "primary",
        "description": "PHP web application framework",
        "patterns": [r"use\s+Illuminate\\", r"Route::", r"class\s+\w+\s+extends\s+Controller\b"],
        "version_patterns": [r"\"laravel/framework\":\s*\"([^\"]+)\""],
    },
    {
        "name": "Spring Boot",
        "category": "backend",
        "description": "Java framework for building microservices",
        "patterns": [r"@SpringBootApplication", r"@RestController", r"spring-boot-starter"],
        "version_patterns": [r"spring-boot-starter-parent</artifactId>\s*<version>([^<]+)</version>"],
    },
    {
        "name": "Go",
        "category": "backend",
        "description": "Open source programming language",
        "patterns": [r"\.go$", r"(^|/)go\.mod$"],
        "version_patterns": [r"(?m)^go\s+([0-9.]+)"],
    },
    {
        "name": "Rust",
        "category": "backend",
        "description": "Systems programming language",
        "patterns": [r"\.rs$", r"(^|/)Cargo\.toml$"],
        "version_patterns": [r"edition\s*=\s*\"([^\"]+)\""],
    },
    # database
    {
        "name": "PostgreSQL",
        "category": "database",
        "description": "Advanced open source relational database",
        "packages": ["pg", "postgres", "psycopg2"],
        "patterns": [r"postgres(ql)?://", r"provider\s*=\s*\"postgresql\"", r"\bpsycopg2\b"],
        "version_patterns": [r"\"pg\":\s*\"([^\"]+)\""],
    },
    {
        "name": "MySQL",
        "category": "database",
        "description": "Popular open source database",
        "packages": ["mysql", "mysql2"],
        "patterns": [r"mysql://", r"provider\s*=\s*\"mysql\"", r"['\"]mysql2?['\"]"],
        "version_patterns": [r"\"mysql2\":\s*\"([^\"]+)\""],
    },
    {
        "name": "MongoDB",
        "category": "database",
        "description": "Document-oriented NoSQL database",
        "packages": ["mongodb", "mongoose"],
        "patterns": [r"mongodb(\+srv)?://", r"provider\s*=\s*\"mongodb\"", r"['\"]mongoose['\"]"],
        "version_patterns": [r"\"mongodb\":\s*\"([^\"]+)\"", r"\"mongoose\":\s*\"([^\"]+)\""],
    },
    {
        "name": "Redis",
        "category": "database",
        "description": "In-memory data structure store",
        "packages": ["redis", "ioredis", "@redis/"],
        "patterns": [r"rediss?://", r"['\"]i?oredis['\"]", r"['\"]redis['\"]"],
        "version_patterns": [r"\"redis\":\s*\"([^\"]+)\"", r"\"ioredis\":\s*\"([^\"]+)\""],
    },
    {
        "name": "SQLite",
        "category": "database",
        "description": "Lightweight SQL database engine",
        "packages": ["sqlite3", "better-sqlite3"],
        "patterns": [r"(?i)\bsqlite3?\b", r"provider\s*=\s*\"sqlite\""],
        "version_patterns": [r"\"sqlite3\":\s*\"([^\"]+)\"", r"\"better-sqlite3\":\s*\"([^\"]+)\""],
    },
    {
        "name": "Prisma",
        "category": "database",
        "description": "Next-generation ORM for Node.js and TypeScript",
        "packages": ["prisma", "@prisma/"],
        "patterns": [r"(^|/)schema\.prisma$", r"@prisma/client"],
        "version_patterns": [r"\"prisma\":\s*\"([^\"]+)\"", r"\"@prisma/client\":\s*\"([^\"]+)\""],
    },
    # devops
    {
        "name": "Docker",
        "category": "devops",
        "description": "Containerization platform",
        "patterns": [r"(^|/)Dockerfile", r"(^|/)docker-compose\.ya?ml$", r"(^|/)\.dockerignore$"],
        "version_patterns": [r"(?m)^FROM\s+[\w./-]+:([0-9][\w.]*)"],
    },
    {
        "name": "Kubernetes",
        "category": "devops",
        "description": "Container orchestration platform",
        "patterns": [r"(?m)^kind:\s*(Deployment|StatefulSet|DaemonSet|Ingress)\b", r"\bkubectl\s"],
    },
    {
        "name": "GitHub Actions",
        "category": "devops",
        "description": "CI/CD platform integrated with GitHub",
        "patterns": [r"(^|/)\.github/workflows/", r"uses:\s*actions/"],
        "version_patterns": [r"uses:\s*actions/[^@\s]+@([^\s]+)"],
    },
    {
        "name": "Jenkins",
        "category": "devops",
        "description": "Open source automation server",
        "patterns": [r"(^|/)Jenkinsfile$", r"(?m)^pipeline\s*\{"],
    },
    {
        "name": "AWS",
        "category": "devops",
        "description": "Amazon Web Services cloud platform",
        "packages": ["aws-sdk", "@aws-sdk/"],
        "patterns": [r"amazonaws\.com", r"['\"]@?aws-sdk"],
        "version_patterns": [r"\"aws-sdk\":\s*\"([^\"]+)\""],
    },
    {
        "name": "Vercel",
        "category": "devops",
        "description": "Cloud platform for frontend developers",
        "packages": ["vercel", "@vercel/"],
        "patterns": [r"(^|/)vercel\.json$", r"['\"]@vercel/"],
        "version_patterns": [r"\"vercel\":\s*\"([^\"]+)\""],
    },
    {
        "name": "Netlify",
        "category": "devops",
        "description": "Web development platform",
        "packages": ["netlify-cli", "@netlify/"],
        "patterns": [r"(^|/)netlify\.toml$", r"(^|/)_redirects$"],
    },
    # testing
    {
        "name": "Jest",
        "category": "testing",
        "usage": "secondary",
        "description": "JavaScript testing framework",
        "packages": ["jest", "ts-jest", "@jest/", "@types/jest"],
        "patterns": [r"\bjest\.(fn|mock|spyOn)\(", r"(^|/)jest\.config\."],
        "version_patterns": [r"\"jest\":\s*\"([^\"]+)\"", r"jest@([^\s]+)"],
    },
    {
        "name": "Cypress",
        "category": "testing",
        "usage": "secondary",
        "description": "End-to-end testing framework",
        "packages": ["cypress"],
        "patterns": [r"\bcy\.\w+\(", r"(^|/)cypress(\.config\.|\.json$|/)"],
        "version_patterns": [r"\"cypress\":\s*\"([^\"]+)\""],
    },
    {
        "name": "Playwright",
        "category": "testing",
        "description": "End-to-end testing framework",
        "packages": ["playwright", "@playwright/"],
        "patterns": [r"['\"]@playwright/test['\"]", r"(^|/)playwright\.config\."],
        "version_patterns": [r"\"@playwright/test\":\s*\"([^\"]+)\""],
    },
    {
        "name": "Vitest",
        "category": "testing",
        "description": "Fast unit testing framework",
        "packages": ["vitest", "@vitest/"],
        "patterns": [r"['\"]vitest['\"]", r"\bvi\.(fn|mock|spyOn)\(", r"(^|/)vitest\.config\."],
        "version_patterns": [r"\"vitest\":\s*\"([^\"]+)\""],
    },
    {
        "name": "Pytest",
        "category": "testing",
        "description": "Python testing framework",
        "patterns": [r"(?m)^\s*import\s+pytest\b", r"@pytest\.", r"(^|/)conftest\.py$"],
        "version_patterns": [r"(?i)pytest==([^\s]+)"],
    },
    {
        "name": "Mocha",
        "category": "testing",
        "description": "JavaScript test framework",
        "packages": ["mocha"],
        "patterns": [r"['\"]mocha['\"]", r"(^|/)\.mocharc"],
        "version_patterns": [r"\"mocha\":\s*\"([^\"]+)\""],
    },
    {
        "name": "Testing Library",
        "category": "testing",
        "description": "Simple and complete testing utilities",
        "packages": ["@testing-library/"],
        "patterns": [r"['\"]@testing-library/", r"\bfireEvent\.", r"\buserEvent\."],
    },
]


def technology_rule(raw: dict[str, Any]) -> TechnologyRule:
    """Build one rule from its table shape.

    Raises KeyError, ValueError or re.error on a malformed entry.
    """
    return TechnologyRule(
        name=str(raw["name"]),
        category=TechnologyCategory(raw["category"]),
        description=str(raw.get("description", "")),
        usage=TechnologyUsage(raw.get("usage", TechnologyUsage.DEPENDENCY.value)),
        packages=tuple(str(p).lower() for p in raw.get("packages", [])),
        patterns=tuple(re.compile(p) for p in raw.get("patterns", [])),
        version_patterns=tuple(re.compile(p) for p in raw.get("version_patterns", [])),
    )


def default_technology_rules() -> tuple[TechnologyRule, ...]:
    return tuple(technology_rule(raw) for raw in DEFAULT_TECHNOLOGIES)


def load_technology_rules(path: str | Path) -> tuple[TechnologyRule, ...]:
    """Load ``[[technology_rules]]`` from TOML; defaults when the section is absent.

    Raises:
        ConfigError: file unreadable, unknown category/usage, or bad regex.
    """
    raw = load_toml(Path(path))
    if "technology_rules" not in raw:
        return default_technology_rules()
    try:
        rules = tuple(technology_rule(r) for r in raw["technology_rules"])
    except (KeyError, ValueError, re.error) as e:
        raise ConfigError(f"Invalid technology rules in {path}: {e}") from e
    for rule in rules:
        if any(p.groups < 1 for p in rule.version_patterns):
            raise ConfigError(f"Version pattern without a capture group in {path}: {rule.name}")
    return rules
