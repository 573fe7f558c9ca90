# src/reportgraph/builders/graph_filter.py
"""
依據過濾設定縮小報告圖的規模，避免渲染時產生過多視覺雜訊。
"""

# 1. 標準庫導入
import fnmatch
import logging
from collections.abc import Iterable

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from reportgraph.models import Cluster, ReportGraph

# 邊數超過上限時，依此順序保留。
EDGE_KIND_PRIORITY: dict[str, int] = {"similarity": 0, "dependency": 1, "related": 2}


def filter_graph(
    graph: ReportGraph,
    exclude_patterns: Iterable[str] | None = None,
    max_nodes: int | None = None,
    max_edges: int | None = None,
) -> tuple[ReportGraph, list[str]]:
    """
    回傳過濾後的新圖以及被移除的節點 id 列表（已排序）。

    - 節點 id 符合任一 fnmatch 模式者移除。
    - 節點數超過 max_nodes 時，保留 size 最大者（同 size 依 id 排序）。
    - 移除所有觸及被刪節點的邊；邊數超過 max_edges 時依種類優先度截斷。
    """
    patterns = [p for p in (exclude_patterns or []) if p]

    kept_nodes = [
        node for node in graph.nodes
        if not any(fnmatch.fnmatch(node.id, pattern) for pattern in patterns)
    ]

    if max_nodes is not None and max_nodes >= 0 and len(kept_nodes) > max_nodes:
        ranked = sorted(kept_nodes, key=lambda n: (-n.size, n.id))
        allowed = {node.id for node in ranked[:max_nodes]}
        kept_nodes = [node for node in kept_nodes if node.id in allowed]

    kept_ids = {node.id for node in kept_nodes}
    removed = sorted(graph.node_ids - kept_ids)

    kept_edges = [edge for edge in graph.edges if edge.source in kept_ids and edge.target in kept_ids]
    if max_edges is not None and max_edges >= 0 and len(kept_edges) > max_edges:
        ordered = sorted(
            enumerate(kept_edges), key=lambda item: (EDGE_KIND_PRIORITY.get(item[1].kind, 99), item[0])
        )
        allowed_positions = {position for position, _ in ordered[:max_edges]}
        kept_edges = [edge for position, edge in enumerate(kept_edges) if position in allowed_positions]

    kept_clusters = []
    for cluster in graph.clusters:
        members = [node_id for node_id in cluster.nodes if node_id in kept_ids]
        if members:
            kept_clusters.append(Cluster(id=cluster.id, kind=cluster.kind, name=cluster.name, nodes=members))

    if removed or len(kept_edges) < len(graph.edges):
        logging.info(
            f"過濾後保留 {len(kept_nodes)} 個節點（移除 {len(removed)} 個），"
            f"{len(kept_edges)} 條邊（移除 {len(graph.edges) - len(kept_edges)} 條）。"
        )

    filtered = ReportGraph(
        nodes=kept_nodes,
        edges=kept_edges,
        clusters=kept_clusters,
        metadata=dict(graph.metadata),
    )
    return filtered, removed
