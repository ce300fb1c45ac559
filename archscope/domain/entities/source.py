"""Source corpus entities: the repository snapshot handed in by the ingestor.

Content is already materialized; nothing here reads from disk or network.
"""

from dataclasses import dataclass, field
from typing import Any


def utf8_length(text: str | None) -> int:
    """Byte length of ``text`` as UTF-8.

    Lone surrogates (content decoded with ``surrogateescape``) are counted as
    their 3-byte encoding instead of raising.
    """
    if not text:
        return 0
    return len(text.encode("utf-8", errors="surrogatepass"))


@dataclass(frozen=True)
class SourceFile:
    """One entry of the repository snapshot."""

    path: str
    name: str = ""
    type: str = "file"  # file | dir
    size: int = 0
    content: str | None = None
    sha: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", self.path.rsplit("/", 1)[-1])

    @property
    def is_directory(self) -> bool:
        return self.type == "dir"

    @property
    def extension(self) -> str:
        """Lower-cased extension without the dot ("" if none)."""
        if "." not in self.name:
            return ""
        return self.name.rsplit(".", 1)[-1].lower()

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "SourceFile":
        return cls(
            path=str(raw.get("path", "")),
            name=str(raw.get("name") or ""),
            type=str(raw.get("type") or "file"),
            size=int(raw.get("size") or 0),
            content=raw.get("content"),
            sha=raw.get("sha"),
        )


@dataclass(frozen=True)
class CommitInfo:
    """Commit summary from the activity aggregator."""

    message: str = ""


@dataclass(frozen=True)
class PullRequestInfo:
    """Pull request summary from the activity aggregator."""

    title: str = ""
    body: str | None = None
    additions: int = 0
    deletions: int = 0


@dataclass(frozen=True)
class DependencyInfo:
    """Declared package dependency."""

    name: str
    version: str | None = None


@dataclass(frozen=True)
class ActivityMetadata:
    """Commit/PR/dependency summaries. Used by scoring only."""

    commits: tuple[CommitInfo, ...] = ()
    pull_requests: tuple[PullRequestInfo, ...] = ()
    # "production" / "development" -> dependencies
    dependencies: dict[str, tuple[DependencyInfo, ...]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> "ActivityMetadata":
        if not raw:
            return cls()
        commits = tuple(
            CommitInfo(message=str(c.get("message") or "")) for c in raw.get("commits") or []
        )
        pull_requests = tuple(
            PullRequestInfo(
                title=str(pr.get("title") or ""),
                body=pr.get("body"),
                additions=int(pr.get("additions") or 0),
                deletions=int(pr.get("deletions") or 0),
            )
            for pr in raw.get("pullRequests") or raw.get("pull_requests") or []
        )
        dependencies = {
            category: tuple(
                DependencyInfo(name=str(d.get("name", "")), version=d.get("version")) for d in deps or []
            )
            for category, deps in (raw.get("dependencies") or {}).items()
        }
        return cls(commits=commits, pull_requests=pull_requests, dependencies=dependencies)

    @classmethod
    def dependencies_from_package_json(cls, package_json: dict[str, Any] | None) -> dict[str, tuple[DependencyInfo, ...]]:
        """Builds production/development dependency lists from package.json."""
        if not package_json:
            return {}
        production = {
            **(package_json.get("dependencies") or {}),
            **(package_json.get("peerDependencies") or {}),
        }
        development = package_json.get("devDependencies") or {}
        return {
            "production": tuple(DependencyInfo(name=n, version=str(v)) for n, v in production.items()),
            "development": tuple(DependencyInfo(name=n, version=str(v)) for n, v in development.items()),
        }


@dataclass(frozen=True)
class SourceCorpus:
    """Full input of one analysis request."""

    files: tuple[SourceFile, ...] = ()
    package_json: dict[str, Any] | None = None
    activity: ActivityMetadata = field(default_factory=ActivityMetadata)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "SourceCorpus":
        """Accepts the ingestor JSON shape: files, packageJson, activity."""
        files = tuple(SourceFile.from_dict(f) for f in raw.get("files") or [])
        package_json = raw.get("packageJson") or raw.get("package_json")
        return cls(
            files=files,
            package_json=package_json,
            activity=ActivityMetadata.from_dict(raw.get("activity")),
        )
