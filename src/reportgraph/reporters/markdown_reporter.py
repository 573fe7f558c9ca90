# src/reportgraph/reporters/markdown_reporter.py
"""
提供將報告圖與分析結果匯總為單一 Markdown 報告的功能。
"""

# 1. 標準庫導入
import datetime
import logging
from collections import defaultdict
from pathlib import Path
from typing import Any

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from reportgraph.models import EDGE_KINDS, ReportGraph


def _write_debug_log(output_path: Path, report_name: str, filtered_nodes: list[str]):
    """將被過濾掉的節點寫入一個單獨的除錯日誌檔案。"""
    debug_log_path = output_path.with_name(f"{report_name}_GraphDebug.log")
    log_parts = [
        f"# ReportGraph 除錯日誌: {report_name}",
        f"生成時間: {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "\n" + "=" * 50,
        "附錄 A: 被過濾掉的節點",
        "=" * 50,
        "說明: 以下節點因符合排除模式或超出節點上限，未出現在輸出的圖中。",
        "\n",
    ]
    log_parts.extend(f"- {node_id}" for node_id in filtered_nodes)

    try:
        debug_log_path.write_text("\n".join(log_parts), encoding="utf-8")
        logging.info(f"除錯日誌已成功儲存至: {debug_log_path}")
    except OSError as e:
        logging.error(f"寫入除錯日誌時發生錯誤: {e}")


def _generate_summary_table(metadata: dict[str, Any]) -> list[str]:
    edges_by_kind = metadata.get("edgesByKind", {})
    rows = [
        "| 指標 | 數值 |",
        "| --- | --- |",
        f"| 檔案節點 | {metadata.get('totalNodes', 0)} |",
        f"| 關係邊 | {metadata.get('totalEdges', 0)} |",
    ]
    for kind in EDGE_KINDS:
        rows.append(f"| └ {kind} | {edges_by_kind.get(kind, 0)} |")
    rows.extend(
        [
            f"| 平均度數 | {metadata.get('avgDegree', 0)} |",
            f"| 密度 | {metadata.get('density', 0)} |",
            f"| 連通分量 | {metadata.get('connectedComponents', 0)} |",
            f"| 孤立節點 | {metadata.get('isolatedNodes', 0)} |",
        ]
    )
    return rows


def _generate_core_files_text(core_files: dict[str, list[tuple[str, float]]]) -> list[str]:
    authorities = core_files.get("authorities") or []
    hubs = core_files.get("hubs") or []
    if not authorities and not hubs:
        return ["(無依賴邊，無法計算 HITS 分數)"]

    lines = ["**被廣泛依賴的底層檔案 (Authority)**"]
    lines.extend(f"- `{node_id}`: {score:.4f}" for node_id, score in authorities)
    lines.append("\n**協調多個模組的入口檔案 (Hub)**")
    lines.extend(f"- `{node_id}`: {score:.4f}" for node_id, score in hubs)
    return lines


def _generate_adjacency_list_text(graph: ReportGraph) -> list[str]:
    """將圖轉換為帶有關係類型標籤的鄰接串列 Markdown 格式。"""
    if not graph.nodes:
        return []

    adjacency_list: dict[str, list[str]] = defaultdict(list)
    for edge in graph.edges:
        if edge.kind == "dependency":
            adjacency_list[edge.source].append(f"- IMPORTS: {edge.target}")
        else:
            adjacency_list[edge.source].append(f"- {edge.kind.upper()}: {edge.target}")
            adjacency_list[edge.target].append(f"- {edge.kind.upper()}: {edge.source}")

    text_parts = ["<details>\n<summary>點擊展開/摺疊鄰接串列</summary>\n"]
    text_parts.append("```markdown")
    for node in sorted(graph.nodes, key=lambda n: n.id):
        text_parts.append(f"- **{node.id}** ({node.category}, {node.tokens} tokens):")
        for edge_str in sorted(adjacency_list.get(node.id, [])):
            text_parts.append(f"  {edge_str}")
    text_parts.append("```\n</details>\n")
    return text_parts


def generate_markdown_report(
    report_name: str,
    report_path: Path,
    output_path: Path,
    graph: ReportGraph,
    analysis_results: dict[str, Any],
    report_settings: dict[str, Any],
):
    """
    生成一份報告圖的 Markdown 摘要，並將被過濾掉的節點寫入單獨的除錯日誌。
    """
    report_parts = []
    analysis_time = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    report_parts.append(f"# ReportGraph 分析報告: {report_name}")
    report_parts.append(f"**分析時間**: {analysis_time}")
    report_parts.append(f"**來源報告**: `{report_path.name}`")

    report_parts.append("\n## 1. 圖摘要")
    report_parts.extend(_generate_summary_table(graph.metadata))

    top_dependents = analysis_results.get("top_dependents") or []
    report_parts.append("\n## 2. 被依賴最多的檔案")
    if top_dependents:
        for rank, (node_id, count) in enumerate(top_dependents, start=1):
            report_parts.append(f"{rank}. `{node_id}`: 被 {count} 個檔案匯入")
    else:
        report_parts.append("(無已解析的依賴關係)")

    core_files = analysis_results.get("core_files") or {}
    report_parts.append("\n## 3. 核心檔案 (HITS)")
    report_parts.extend(_generate_core_files_text(core_files))

    report_parts.append("\n## 4. 叢集")
    if graph.clusters:
        for cluster in graph.clusters:
            report_parts.append(f"- **{cluster.name}** ({cluster.kind}): {len(cluster.nodes)} 個檔案")
    else:
        report_parts.append("(無)")

    if report_settings.get("include_adjacency_list", True) and graph.nodes:
        report_parts.append("\n## 5. 檔案關係 (鄰接串列)")
        report_parts.extend(_generate_adjacency_list_text(graph))

    dot_source = analysis_results.get("dot_source")
    if dot_source and report_settings.get("include_dot_source", False):
        report_parts.append("\n## 6. 力導向圖 DOT 原始碼")
        report_parts.append("<details>\n<summary>點擊展開/摺疊 DOT 原始碼</summary>\n")
        report_parts.append("```dot")
        report_parts.append(dot_source)
        report_parts.append("```\n</details>\n")

    try:
        output_path.write_text("\n".join(report_parts), encoding="utf-8")
        logging.info(f"Markdown 報告已成功儲存至: {output_path}")
    except OSError as e:
        logging.error(f"寫入 Markdown 報告時發生錯誤: {e}")

    filtered_nodes = analysis_results.get("filtered_nodes")
    if filtered_nodes:
        _write_debug_log(output_path, report_name, filtered_nodes)
