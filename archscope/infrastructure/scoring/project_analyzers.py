"""Project-level quality analyzers: PRs, documentation, testing, security, performance."""

from archscope.infrastructure.scoring.security_scanner import scan_files, vulnerability_score
from archscope.infrastructure.scoring.signals import ScoringInput, clamp, ratio

NEUTRAL = 50.0
ASSUMED_REVIEW = 70.0
README_FULL_LENGTH = 5000
PR_DESCRIPTION_FULL_LENGTH = 1000
PR_SIZE_DIVISOR = 50

TEST_TOOLS = ("jest", "mocha", "cypress", "playwright", "vitest", "pytest")
SECURITY_DEPENDENCIES = ("helmet", "cors", "bcrypt", "jsonwebtoken", "express-rate-limit")


def analyze_pr_quality(data: ScoringInput) -> dict[str, float]:
    prs = data.activity.pull_requests
    if not prs:
        return {"description": NEUTRAL, "size": NEUTRAL, "review": NEUTRAL, "testing": NEUTRAL}

    avg_description = sum(len(pr.body or "") for pr in prs) / len(prs)
    avg_size = sum(pr.additions + pr.deletions for pr in prs) / len(prs)
    with_tests = sum(
        1 for pr in prs
        if "test" in (pr.body or "").lower() or "test" in pr.title.lower()
    )
    return {
        "description": clamp(avg_description / (PR_DESCRIPTION_FULL_LENGTH / 100)),
        "size": clamp(100 - avg_size / PR_SIZE_DIVISOR),
        # review data is not collected
        "review": ASSUMED_REVIEW,
        "testing": clamp(with_tests / len(prs) * 100),
    }


def analyze_documentation(data: ScoringInput) -> dict[str, float]:
    total_lines = 0
    comment_lines = 0
    for file in data.with_content:
        lines = file.content.split("\n")
        total_lines += len(lines)
        comment_lines += sum(1 for line in lines if line.strip().startswith(("//", "/*", "*")))

    api_docs = data.count_keyword_hits([
        (("@api", "@param", "@return"), 30),
        (("swagger", "openapi"), 40),
        (("jsdoc", "tsdoc"), 20),
    ])
    examples = data.count_keyword_hits([
        (("example", "usage"), 25),
        (("demo", "sample"), 20),
    ])
    return {
        "readme": clamp(len(data.readme) / (README_FULL_LENGTH / 100)),
        "comments": clamp(ratio(comment_lines, total_lines) * 100),
        "apiDocs": clamp(api_docs),
        "examples": clamp(examples),
    }


def score_test_quality(data: ScoringInput) -> float:
    score = 0
    for file in data.test_files:
        if not file.content:
            continue
        content = file.content
        if ("describe" in content and "it" in content) or "def test_" in content:
            score += 30
        if "expect" in content or "assert" in content:
            score += 25
        if "beforeEach" in content or "afterEach" in content or "@pytest.fixture" in content:
            score += 20
        if "mock" in content or "stub" in content:
            score += 25
    return clamp(score)


def analyze_testing(data: ScoringInput) -> dict[str, float]:
    coverage = ratio(len(data.test_files), len(data.files)) * 200  # half the files being tests = 100
    automation = sum(20 for name in data.dependency_names if any(tool in name for tool in TEST_TOOLS))
    return {
        "coverage": clamp(coverage),
        "quality": score_test_quality(data),
        "automation": clamp(automation),
    }


def analyze_security(data: ScoringInput) -> dict[str, float]:
    practices = data.count_keyword_hits([
        (("helmet", "cors"), 20),
        (("bcrypt", "hash"), 25),
        (("jwt", "token"), 15),
        (("validate", "sanitize"), 20),
    ])
    dependencies = NEUTRAL + sum(
        10 for name in data.dependency_names if any(dep in name for dep in SECURITY_DEPENDENCIES)
    )
    return {
        "vulnerabilities": vulnerability_score(scan_files(data.with_content)),
        "practices": clamp(practices),
        "dependencies": clamp(dependencies),
    }


def analyze_performance(data: ScoringInput) -> dict[str, float]:
    optimization = data.count_keyword_hits([
        (("memo",), 20),
        (("lazy", "suspense"), 25),
        (("debounce", "throttle"), 15),
        (("webpack", "bundle"), 10),
    ])
    efficiency = NEUTRAL + data.count_keyword_hits(
        [
            (("map", "filter", "reduce"), 5),
            (("async", "await"), 10),
        ],
        lower=False,
    )
    efficiency += sum(5 for f in data.with_content if "try" in f.content and "catch" in f.content)
    monitoring = data.count_keyword_hits([
        (("log", "console"), 10),
        (("metric", "analytics"), 20),
        (("monitor", "track"), 15),
    ])
    return {
        "optimization": clamp(optimization),
        "efficiency": clamp(efficiency),
        "monitoring": clamp(monitoring),
    }
