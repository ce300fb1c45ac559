"""Tests for domain entities and their dict contracts."""

from archscope.domain.entities.code import CodeComponent, ComponentKind, ImportInfo, ImportKind
from archscope.domain.entities.graph import (
    ArchitectureGraph,
    ComponentEdge,
    ComponentNode,
    ComponentType,
    GraphStats,
)
from archscope.domain.entities.quality import CATEGORY_NAMES, QualityScore
from archscope.domain.entities.source import ActivityMetadata, SourceCorpus, SourceFile, utf8_length
from archscope.domain.entities.technology import (
    TechnologyCategory,
    TechnologyInfo,
    TechnologyStack,
    TechnologyUsage,
)


class TestSourceFile:
    """Tests for SourceFile."""

    def test_name_defaults_to_basename(self):
        assert SourceFile(path="src/components/Button.tsx").name == "Button.tsx"

    def test_extension_lowercase_without_dot(self):
        assert SourceFile(path="src/App.TSX").extension == "tsx"
        assert SourceFile(path="Makefile").extension == ""

    def test_directory(self):
        assert SourceFile(path="src", type="dir").is_directory
        assert not SourceFile(path="src/a.ts").is_directory

    def test_utf8_length_counts_lone_surrogates(self):
        """Content decoded with surrogateescape is measured, not rejected."""
        assert utf8_length("ab\ud800") == 5
        assert utf8_length("é") == 2
        assert utf8_length(None) == 0


class TestSourceCorpusFromDict:
    """Tests for SourceCorpus.from_dict (ingestor JSON shape)."""

    def test_full_shape(self):
        """Ingestor JSON with camelCase keys maps onto the frozen entities."""
        raw = {
            "files": [
                {"path": "src/index.ts", "name": "index.ts", "type": "file", "size": 12, "content": "export {}"},
                {"path": "src", "type": "dir"},
            ],
            "packageJson": {"dependencies": {"react": "^18.0.0"}},
            "activity": {
                "commits": [{"message": "Add button component"}],
                "pullRequests": [{"title": "Button", "body": "adds tests", "additions": 10, "deletions": 2}],
                "dependencies": {"production": [{"name": "react", "version": "18"}]},
            },
        }
        corpus = SourceCorpus.from_dict(raw)

        assert len(corpus.files) == 2
        assert corpus.files[0].content == "export {}"
        assert corpus.files[1].is_directory
        assert corpus.package_json == {"dependencies": {"react": "^18.0.0"}}
        assert corpus.activity.commits[0].message == "Add button component"
        assert corpus.activity.pull_requests[0].additions == 10
        assert corpus.activity.dependencies["production"][0].name == "react"

    def test_empty_dict(self):
        corpus = SourceCorpus.from_dict({})
        assert corpus.files == ()
        assert corpus.package_json is None
        assert corpus.activity.commits == ()


class TestDependenciesFromPackageJson:
    """Tests for ActivityMetadata.dependencies_from_package_json."""

    def test_peer_dependencies_count_as_production(self):
        """peerDependencies are merged into the production list."""
        deps = ActivityMetadata.dependencies_from_package_json({
            "dependencies": {"react": "18"},
            "peerDependencies": {"react-dom": "18"},
            "devDependencies": {"jest": "29"},
        })
        assert [d.name for d in deps["production"]] == ["react", "react-dom"]
        assert [d.name for d in deps["development"]] == ["jest"]

    def test_none(self):
        assert ActivityMetadata.dependencies_from_package_json(None) == {}


class TestImportInfo:
    """Tests for ImportInfo."""

    def test_relative(self):
        assert ImportInfo("./utils", ImportKind.NAMED).is_relative
        assert ImportInfo("../lib/db", ImportKind.DEFAULT).is_relative
        assert ImportInfo(".models", ImportKind.NAMED).is_relative
        assert not ImportInfo("react", ImportKind.DEFAULT).is_relative
        assert not ImportInfo("@/lib/db", ImportKind.NAMED).is_relative

    def test_to_dict(self):
        data = ImportInfo("react", ImportKind.NAMED, ["useState"]).to_dict()
        assert data == {"rawSource": "react", "kind": "named", "importedNames": ["useState"]}


class TestDictContracts:
    """camelCase names expected by renderers."""

    def test_component_to_dict(self):
        component = CodeComponent(
            name="Button",
            kind=ComponentKind.COMPONENT,
            file_path="src/Button.tsx",
            start_line=1,
            end_line=3,
            complexity=2,
        )
        data = component.to_dict()
        assert data["kind"] == "component"
        assert data["filePath"] == "src/Button.tsx"
        assert data["startLine"] == 1
        assert "props" not in data

    def test_node_to_dict(self):
        node = ComponentNode(
            id="src_a_ts",
            label="a.ts",
            path="src/a.ts",
            type=ComponentType.SERVICE,
            layer="services",
            clean_name="A",
        )
        data = node.to_dict()
        assert data["type"] == "service"
        assert data["isDirectory"] is False
        assert data["cleanName"] == "A"

    def test_graph_to_dict(self):
        """Edges and stats use the camelCase field names."""
        graph = ArchitectureGraph(
            nodes=[],
            edges=[ComponentEdge(source="a", target="b", strength=2)],
            stats=GraphStats(total_nodes=2, total_edges=1, average_connections=0.5),
        )
        data = graph.to_dict()
        assert data["stats"]["totalNodes"] == 2
        assert data["stats"]["averageConnections"] == 0.5
        assert data["edges"][0] == {
            "source": "a",
            "target": "b",
            "relation": "imports",
            "label": "imports",
            "strength": 2,
        }
        assert set(data["insights"]) == {"highComplexity", "isolated", "critical", "patterns", "recommendations"}

    def test_quality_to_dict(self):
        """factors are emitted only on request."""
        score = QualityScore(overall=70, code_quality=80.0, factors={"code_quality": {"complexity": 90.0}})
        data = score.to_dict()
        assert data["overall"] == 70
        assert data["codeQuality"] == 80.0
        assert "namingConventions" in data
        assert "factors" not in data
        assert score.to_dict(include_factors=True)["factors"]["codeQuality"] == {"complexity": 90.0}

    def test_quality_categories_order(self):
        assert tuple(QualityScore().categories()) == CATEGORY_NAMES

    def test_technology_stack_to_dict(self):
        stack = TechnologyStack(technologies=[
            TechnologyInfo(
                name="React",
                category=TechnologyCategory.FRONTEND,
                confidence=90,
                usage=TechnologyUsage.PRIMARY,
                description="UI library",
                version="18.2.0",
            ),
            TechnologyInfo(name="Redis", category=TechnologyCategory.DATABASE, confidence=45),
        ])
        data = stack.to_dict()

        assert list(data) == ["frontend", "backend", "database", "devops", "testing"]
        assert data["frontend"] == [{
            "name": "React",
            "version": "18.2.0",
            "confidence": 90,
            "usage": "primary",
            "description": "UI library",
        }]
        assert data["database"][0]["usage"] == "dependency"
        assert data["backend"] == []
        assert stack.names() == ["React", "Redis"]
