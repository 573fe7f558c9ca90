"""報告圖建構器的測試：情境、不變量、容錯與輸入格式變體。"""

import copy

import pytest

from reportgraph import MalformedReportError, build_graph_from_report
from reportgraph.core.report_loader import load_report
from reportgraph.models import ReportGraph


def edge_set(graph: ReportGraph) -> set[tuple[frozenset[str], str]]:
    return {edge.key for edge in graph.edges}


def assert_graph_invariants(graph: ReportGraph):
    node_ids = [node.id for node in graph.nodes]
    assert len(node_ids) == len(set(node_ids))
    for edge in graph.edges:
        assert edge.source in graph.node_ids
        assert edge.target in graph.node_ids
        assert edge.source != edge.target
        assert edge.kind in {"dependency", "similarity", "related"}
    assert len(graph.edges) == len(edge_set(graph))


class TestScenarios:
    def test_single_file_without_relations(self):
        report = {"files": [{"file": "a.ts", "tokens": 120, "imports": []}], "duplicates": [], "patterns": []}

        graph = build_graph_from_report(report)

        assert [node.id for node in graph.nodes] == ["a.ts"]
        assert graph.nodes[0].size == 120
        assert graph.nodes[0].label == "a.ts"
        assert graph.edges == []

    def test_relative_import_creates_dependency_edge(self):
        report = {
            "files": [
                {"file": "a.ts", "tokens": 10, "imports": ["./b"]},
                {"file": "b.ts", "tokens": 20, "imports": []},
            ],
            "duplicates": [],
        }

        graph = build_graph_from_report(report)

        assert len(graph.nodes) == 2
        assert [edge.to_dict() for edge in graph.edges] == [
            {"source": "a.ts", "target": "b.ts", "kind": "dependency"}
        ]

    @pytest.mark.parametrize("pair", [("a.ts", "b.ts"), ("b.ts", "a.ts")])
    def test_duplicate_pair_creates_one_similarity_edge(self, pair):
        report = {
            "files": [{"file": "a.ts"}, {"file": "b.ts"}],
            "duplicates": [{"file1": pair[0], "file2": pair[1]}],
        }

        graph = build_graph_from_report(report)

        assert edge_set(graph) == {(frozenset({"a.ts", "b.ts"}), "similarity")}

    def test_duplicate_pair_with_unknown_file_is_skipped(self):
        report = {
            "files": [{"file": "a.ts"}, {"file": "b.ts"}],
            "duplicates": [{"file1": "a.ts", "file2": "ghost.ts"}],
        }

        graph = build_graph_from_report(report)

        assert graph.edges == []

    @pytest.mark.parametrize("specifier", ["./a", "./a.ts", "../x/../a"])
    def test_self_import_creates_no_edge(self, specifier):
        report = {"files": [{"file": "a.ts", "imports": [specifier]}]}

        graph = build_graph_from_report(report)

        assert graph.edges == []


class TestInvariants:
    @pytest.mark.parametrize("files", [[], ()])
    def test_empty_file_list_gives_empty_graph(self, files):
        graph = build_graph_from_report({"files": files, "duplicates": [{"file1": "a", "file2": "b"}]})

        assert graph.nodes == []
        assert graph.edges == []

    def test_sample_report_keeps_invariants(self, sample_report):
        graph = build_graph_from_report(sample_report)

        assert_graph_invariants(graph)

    def test_sample_report_edges(self, sample_report):
        graph = build_graph_from_report(sample_report)

        assert edge_set(graph) == {
            (frozenset({"src/index.ts", "src/components/App.tsx"}), "dependency"),
            (frozenset({"src/index.ts", "src/utils/helper.ts"}), "dependency"),
            (frozenset({"src/components/App.tsx", "src/utils/helper.ts"}), "dependency"),
            (frozenset({"src/utils/format.ts", "src/utils/helper.ts"}), "dependency"),
            (frozenset({"test/helper.test.ts", "src/utils/helper.ts"}), "dependency"),
            (frozenset({"src/utils/format.ts", "src/utils/helper.ts"}), "similarity"),
            (frozenset({"src/index.ts", "src/components/App.tsx"}), "related"),
        }

    def test_dependency_edges_point_from_importer(self, sample_report):
        graph = build_graph_from_report(sample_report)

        dependency_pairs = {(e.source, e.target) for e in graph.edges_of_kind("dependency")}
        assert ("src/index.ts", "src/components/App.tsx") in dependency_pairs
        assert ("test/helper.test.ts", "src/utils/helper.ts") in dependency_pairs

    def test_node_set_equals_file_list(self, sample_report):
        graph = build_graph_from_report(sample_report)

        assert graph.node_ids == {record["file"] for record in sample_report["files"]}

    def test_build_is_idempotent(self, sample_report):
        first = build_graph_from_report(sample_report)
        second = build_graph_from_report(sample_report)

        assert first.node_ids == second.node_ids
        assert edge_set(first) == edge_set(second)
        assert first.to_dict() == second.to_dict()

    def test_input_report_is_not_mutated(self, sample_report):
        snapshot = copy.deepcopy(sample_report)

        graph = build_graph_from_report(sample_report)
        graph.nodes[0].size = 999

        assert sample_report == snapshot

    def test_reverse_imports_collapse_to_one_dependency_edge(self):
        report = {"files": [{"file": "a.ts", "imports": ["./b"]}, {"file": "b.ts", "imports": ["./a"]}]}

        graph = build_graph_from_report(report)

        assert len(graph.edges) == 1
        assert graph.edges[0].to_dict() == {"source": "a.ts", "target": "b.ts", "kind": "dependency"}

    def test_same_pair_may_carry_different_kinds(self):
        report = {
            "files": [{"file": "a.ts", "imports": ["./b"], "relatedFiles": ["b.ts"]}, {"file": "b.ts"}],
            "duplicates": [{"file1": "b.ts", "file2": "a.ts"}],
        }

        graph = build_graph_from_report(report)

        assert sorted(edge.kind for edge in graph.edges) == ["dependency", "related", "similarity"]


class TestNodeAttributes:
    def test_last_record_wins_for_repeated_path(self):
        report = {
            "files": [
                {"file": "a.ts", "tokens": 10, "imports": ["./b"]},
                {"file": "b.ts", "tokens": 5},
                {"file": "a.ts", "tokens": 70, "imports": [], "category": "service"},
            ]
        }

        graph = build_graph_from_report(report)

        assert [node.id for node in graph.nodes] == ["a.ts", "b.ts"]
        node = graph.get_node("a.ts")
        assert node.size == 70
        assert node.category == "service"
        assert graph.edges == []

    @pytest.mark.parametrize("tokens", [None, 0, -40, "many", True, float("nan"), float("inf"), -float("inf")])
    def test_degenerate_token_count_normalized_to_minimum(self, tokens):
        graph = build_graph_from_report({"files": [{"file": "a.ts", "tokens": tokens}]})

        assert graph.nodes[0].size == 1

    def test_non_finite_tokens_from_json_file(self, tmp_path):
        report_path = tmp_path / "report.json"
        report_path.write_text(
            '{"files": [{"file": "a.ts", "tokens": NaN}, {"file": "b.ts", "tokens": Infinity}, '
            '{"file": "c.ts", "tokens": 1e400}]}',
            encoding="utf-8",
        )

        graph = build_graph_from_report(load_report(report_path))

        assert [node.size for node in graph.nodes] == [1, 1, 1]
        assert [node.tokens for node in graph.nodes] == [0, 0, 0]

    def test_path_with_surrounding_whitespace_keeps_identity(self):
        report = {
            "files": [{"file": "src/a.ts "}, {"file": "src/b.ts"}],
            "duplicates": [{"file1": "src/a.ts ", "file2": "src/b.ts"}],
        }

        graph = build_graph_from_report(report)

        assert graph.node_ids == {"src/a.ts ", "src/b.ts"}
        assert edge_set(graph) == {(frozenset({"src/a.ts ", "src/b.ts"}), "similarity")}

    def test_record_severity_used_without_pattern_issues(self):
        report = {
            "files": [{"file": "a.ts", "severity": "Critical"}, {"file": "b.ts"}, {"file": "c.ts"}],
            "context": [{"file": "b.ts", "severity": "minor"}, {"file": "c.ts", "severity": "minor"}],
            "patterns": [{"fileName": "c.ts", "issues": [{"severity": "major"}]}],
        }

        graph = build_graph_from_report(report)

        assert graph.get_node("a.ts").issues.to_dict() == {"count": 0, "severity": "critical"}
        assert graph.get_node("b.ts").issues.to_dict() == {"count": 0, "severity": "minor"}
        assert graph.get_node("c.ts").issues.to_dict() == {"count": 1, "severity": "major"}

    def test_category_inferred_from_path(self, sample_report):
        graph = build_graph_from_report(sample_report)

        categories = {node.id: node.category for node in graph.nodes}
        assert categories["src/components/App.tsx"] == "component"
        assert categories["src/utils/helper.ts"] == "utility"
        assert categories["test/helper.test.ts"] == "test"
        assert categories["src/index.ts"] == "module"

    def test_label_is_basename(self, sample_report):
        graph = build_graph_from_report(sample_report)

        assert graph.get_node("src/components/App.tsx").label == "App.tsx"

    def test_issue_overlay_from_patterns(self, sample_report):
        graph = build_graph_from_report(sample_report)

        helper = graph.get_node("src/utils/helper.ts")
        assert helper.issues.count == 2
        assert helper.issues.severity == "major"
        assert graph.get_node("src/index.ts").issues.count == 0

    def test_clusters_from_groups_and_patterns(self, sample_report):
        graph = build_graph_from_report(sample_report)

        clusters = {cluster.id: cluster.nodes for cluster in graph.clusters}
        assert set(clusters) == {"group:src", "group:test", "pattern:utils"}
        assert clusters["pattern:utils"] == ["src/utils/helper.ts", "src/utils/format.ts"]
        assert clusters["group:test"] == ["test/helper.test.ts"]


class TestMalformedInput:
    @pytest.mark.parametrize("report", [None, [], "files", 42])
    def test_non_mapping_report_fails_fast(self, report):
        with pytest.raises(MalformedReportError):
            build_graph_from_report(report)

    @pytest.mark.parametrize("files", [None, "a.ts", {"file": "a.ts"}, 3])
    def test_non_list_file_list_fails_fast(self, files):
        with pytest.raises(MalformedReportError, match="files"):
            build_graph_from_report({"files": files})

    def test_missing_file_list_fails_fast(self):
        with pytest.raises(MalformedReportError):
            build_graph_from_report({"duplicates": []})

    def test_malformed_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            build_graph_from_report({"files": None})

    def test_malformed_optional_fields_are_ignored(self):
        report = {
            "files": [
                {"file": "a.ts", "tokens": "x", "imports": "./b", "relatedFiles": 7},
                {"file": "b.ts", "imports": [None, 12, "./a"]},
                {"tokens": 30},
                "not-a-record",
                {"file": ""},
            ],
            "duplicates": None,
            "patterns": {"oops": True},
            "context": "nope",
        }

        graph = build_graph_from_report(report)

        assert graph.node_ids == {"a.ts", "b.ts"}
        assert [edge.to_dict() for edge in graph.edges] == [
            {"source": "b.ts", "target": "a.ts", "kind": "dependency"}
        ]


class TestReportShapes:
    def test_context_list_serves_as_file_list(self):
        report = {
            "context": [
                {"file": "src/a.ts", "tokenCost": 300, "dependencyList": ["./b"], "relatedFiles": ["src/c.ts"]},
                {"file": "src/b.ts", "tokenCost": 50, "dependencyList": []},
                {"file": "src/c.ts"},
            ],
            "duplicates": [],
        }

        graph = build_graph_from_report(report)

        assert graph.node_ids == {"src/a.ts", "src/b.ts", "src/c.ts"}
        assert graph.get_node("src/a.ts").size == 300
        assert edge_set(graph) == {
            (frozenset({"src/a.ts", "src/b.ts"}), "dependency"),
            (frozenset({"src/a.ts", "src/c.ts"}), "related"),
        }

    def test_context_does_not_add_nodes_when_files_present(self, sample_report):
        graph = build_graph_from_report(sample_report)

        assert "not/in/files.ts" not in graph.node_ids

    def test_file_name_alias(self):
        graph = build_graph_from_report({"files": [{"fileName": "x/y.py", "tokenCost": 12}]})

        assert graph.nodes[0].id == "x/y.py"
        assert graph.nodes[0].size == 12

    def test_to_dict_output_format(self):
        graph = build_graph_from_report({"files": [{"file": "a.ts", "imports": ["./b"]}, {"file": "b.ts"}]})

        document = graph.to_dict()

        assert set(document) == {"nodes", "edges", "clusters", "metadata"}
        assert {"id", "label", "size", "category"} <= set(document["nodes"][0])
        assert document["edges"] == [{"source": "a.ts", "target": "b.ts", "kind": "dependency"}]
