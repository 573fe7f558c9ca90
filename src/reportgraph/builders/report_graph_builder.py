# src/reportgraph/builders/report_graph_builder.py
"""
將程式碼分析報告轉換為去重後的節點/邊圖，供力導向佈局使用。

此轉換為純函式：不做任何 I/O、不持有模組層級狀態、不修改輸入報告，
輸出的圖也不會與輸入共享任何可變物件。同一檔案路徑在檔案列表中出現
多次時，以最後一筆紀錄為準。
"""

# 1. 標準庫導入
import logging
import math
import posixpath
from collections import defaultdict
from collections.abc import Mapping
from pathlib import Path
from typing import Any

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from reportgraph.builders.import_resolver import ImportResolver
from reportgraph.exceptions import MalformedReportError
from reportgraph.models import MIN_NODE_SIZE, Cluster, Edge, Node, NodeIssues, ReportGraph
from reportgraph.utils.category_utils import get_package_group, infer_category
from reportgraph.utils.color_utils import SEVERITY_ORDER, normalize_severity

PATH_FIELDS = ("file", "fileName", "path")
TOKEN_FIELDS = ("tokens", "tokenCost")
IMPORT_FIELDS = ("imports", "dependencyList")
CATEGORY_FIELDS = ("category", "kind")
CLUSTER_NAME_FIELDS = ("name", "pattern", "patternType")


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _string_items(value: Any) -> list[str]:
    return [item for item in _as_list(value) if isinstance(item, str) and item]


def _first_str(record: Mapping[str, Any], fields: tuple[str, ...]) -> str | None:
    for name in fields:
        value = record.get(name)
        if isinstance(value, str) and value.strip():
            return value
    return None


def _token_count(record: Mapping[str, Any]) -> int:
    for name in TOKEN_FIELDS:
        value = record.get(name)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return int(value) if math.isfinite(value) else 0
    return 0


def _normalize_file_record(record: Any) -> dict[str, Any] | None:
    """把一筆檔案紀錄整理成內部格式；缺少有效路徑的紀錄回傳 None。"""
    if not isinstance(record, Mapping):
        return None
    file_path = _first_str(record, PATH_FIELDS)
    if not file_path:
        return None

    imports: list[str] = []
    for name in IMPORT_FIELDS:
        imports.extend(_string_items(record.get(name)))

    return {
        "path": file_path,
        "tokens": _token_count(record),
        "imports": imports,
        "related": _string_items(record.get("relatedFiles")),
        "category": (_first_str(record, CATEGORY_FIELDS) or "").strip() or None,
        "severity": normalize_severity(record.get("severity")),
    }


def _extract_record_lists(report: Any) -> tuple[list[Any], list[Any]]:
    """
    取出檔案列表與補充提示列表。

    `files` 存在時即為檔案列表，`context` 僅補充已知檔案的 import 與相關檔案提示；
    `files` 不存在時，`context` 本身作為檔案列表。
    """
    if not isinstance(report, Mapping):
        raise MalformedReportError(f"報告格式錯誤：報告必須是物件，實際為 {type(report).__name__}。")

    if "files" in report:
        files, hints = report["files"], _as_list(report.get("context"))
        list_name = "files"
    elif "context" in report:
        files, hints = report["context"], []
        list_name = "context"
    else:
        raise MalformedReportError("報告格式錯誤：缺少檔案列表 ('files' 或 'context')。")

    if not isinstance(files, (list, tuple)):
        raise MalformedReportError(
            f"報告格式錯誤：'{list_name}' 必須是列表，實際為 {type(files).__name__}。"
        )
    return list(files), hints


class _EdgeCollector:
    """收集邊並維持不變量：端點必須已知、無自環、每個無序端點對每種類型只保留一條。"""

    def __init__(self, node_ids: set[str]):
        self.node_ids = node_ids
        self.edges: list[Edge] = []
        self._seen: set[tuple[frozenset[str], str]] = set()

    def add(self, source: str, target: str, kind: str) -> bool:
        if source == target or source not in self.node_ids or target not in self.node_ids:
            return False
        edge = Edge(source, target, kind)
        if edge.key in self._seen:
            return False
        self._seen.add(edge.key)
        self.edges.append(edge)
        return True


def _collect_issue_overlay(patterns: list[Any], node_ids: set[str]) -> dict[str, NodeIssues]:
    """從 pattern 議題紀錄統計每個檔案的議題數與最高嚴重度。"""
    overlay: dict[str, NodeIssues] = {}
    for entry in patterns:
        if not isinstance(entry, Mapping) or "files" in entry:
            continue
        file_path = _first_str(entry, PATH_FIELDS)
        if not file_path or file_path not in node_ids:
            continue
        issues = overlay.setdefault(file_path, NodeIssues())
        for issue in _as_list(entry.get("issues")):
            if not isinstance(issue, Mapping):
                continue
            issues.count += 1
            severity = normalize_severity(issue.get("severity"))
            if severity and SEVERITY_ORDER[severity] > SEVERITY_ORDER.get(issues.severity or "", 0):
                issues.severity = severity
    return overlay


def _collect_clusters(nodes: list[Node], patterns: list[Any], node_ids: set[str]) -> list[Cluster]:
    clusters: list[Cluster] = []

    members_by_group: dict[str, list[str]] = defaultdict(list)
    for node in nodes:
        members_by_group[node.group].append(node.id)
    for group in sorted(members_by_group):
        clusters.append(Cluster(id=f"group:{group}", kind="group", name=group, nodes=members_by_group[group]))

    for index, entry in enumerate(patterns):
        if not isinstance(entry, Mapping) or "files" not in entry:
            continue
        members = [f for f in dict.fromkeys(_string_items(entry.get("files"))) if f in node_ids]
        if not members:
            continue
        name = _first_str(entry, CLUSTER_NAME_FIELDS) or f"pattern-{index + 1}"
        clusters.append(Cluster(id=f"pattern:{name}", kind="pattern", name=name, nodes=members))
    return clusters


def build_graph_from_report(report: Any, base_path: str | Path | None = None) -> ReportGraph:
    """
    將分析報告轉換為報告圖。

    Args:
        report: 已載入的報告物件（通常來自 JSON）。
        base_path: 選用的根目錄，用於解析絕對路徑形式的 import。

    Returns:
        一張全新的 ReportGraph；metadata 留空，交由 GraphAnalyzer 填入。

    Raises:
        MalformedReportError: 報告不是物件，或檔案列表缺失、不是列表。
    """
    file_records, hint_records = _extract_record_lists(report)

    records: dict[str, dict[str, Any]] = {}
    skipped = 0
    for raw_record in file_records:
        record = _normalize_file_record(raw_record)
        if record is None:
            skipped += 1
            continue
        records[record["path"]] = record
    if skipped:
        logging.debug(f"略過 {skipped} 筆缺少有效路徑的檔案紀錄。")

    node_ids = set(records)
    patterns = _as_list(report.get("patterns"))
    issue_overlay = _collect_issue_overlay(patterns, node_ids)

    extra_imports: dict[str, list[str]] = defaultdict(list)
    extra_related: dict[str, list[str]] = defaultdict(list)
    hint_severity: dict[str, str] = {}
    for raw_hint in hint_records:
        hint = _normalize_file_record(raw_hint)
        if hint is None or hint["path"] not in node_ids:
            continue
        extra_imports[hint["path"]].extend(hint["imports"])
        extra_related[hint["path"]].extend(hint["related"])
        if hint["severity"]:
            hint_severity[hint["path"]] = hint["severity"]

    nodes: list[Node] = []
    for file_path, record in records.items():
        tokens = record["tokens"]
        overlay = issue_overlay.get(file_path, NodeIssues())
        # pattern 議題的最高嚴重度優先，其次才是紀錄本身的 severity 欄位
        severity = overlay.severity or record["severity"] or hint_severity.get(file_path)
        nodes.append(
            Node(
                id=file_path,
                label=posixpath.basename(file_path.replace("\\", "/").rstrip("/")) or file_path,
                size=tokens if tokens > 0 else MIN_NODE_SIZE,
                category=record["category"] or infer_category(file_path),
                group=get_package_group(file_path) or "(root)",
                tokens=max(tokens, 0),
                issues=NodeIssues(count=overlay.count, severity=severity),
            )
        )

    collector = _EdgeCollector(node_ids)

    resolver = ImportResolver(node_ids, base_path)
    for file_path, record in records.items():
        for specifier in record["imports"] + extra_imports.get(file_path, []):
            target = resolver.resolve(file_path, specifier)
            if target is not None:
                collector.add(file_path, target, "dependency")

    for duplicate in _as_list(report.get("duplicates")):
        if not isinstance(duplicate, Mapping):
            continue
        file1, file2 = duplicate.get("file1"), duplicate.get("file2")
        if isinstance(file1, str) and isinstance(file2, str):
            collector.add(file1, file2, "similarity")

    for file_path, record in records.items():
        for related in record["related"] + extra_related.get(file_path, []):
            collector.add(file_path, related, "related")

    graph = ReportGraph(
        nodes=nodes,
        edges=collector.edges,
        clusters=_collect_clusters(nodes, patterns, node_ids),
    )
    logging.info(f"報告圖建構完成：共 {len(graph.nodes)} 個檔案節點，{len(graph.edges)} 條邊。")
    return graph
