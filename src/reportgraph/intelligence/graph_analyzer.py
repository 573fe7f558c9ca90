# src/reportgraph/intelligence/graph_analyzer.py
"""
基於圖論的報告圖分析器：計算摘要統計與依賴中心性。
"""

# 1. 標準庫導入
import datetime
import logging
from collections import Counter
from typing import Any

# 2. 第三方庫導入
import networkx as nx

# 3. 本專案導入
from reportgraph.models import EDGE_KINDS, ReportGraph

# 低於此值的 HITS 分數視為數值誤差
MIN_HITS_SCORE = 1e-9


class GraphAnalyzer:
    """
    將 ReportGraph 轉換為 NetworkX 圖以計算圖論指標。

    無向圖（所有邊種類）用於連通分量、密度與平均度數；
    有向圖（僅 dependency 邊）用於 HITS 與被依賴次數。
    """

    def __init__(self, graph: ReportGraph):
        self.report_graph = graph
        self.graph = self._build_graph(graph)
        self.dependency_graph = self._build_dependency_graph(graph)

    @staticmethod
    def _build_graph(graph: ReportGraph) -> nx.Graph:
        undirected = nx.Graph()
        undirected.add_nodes_from(node.id for node in graph.nodes)
        for edge in graph.edges:
            undirected.add_edge(edge.source, edge.target)
        return undirected

    @staticmethod
    def _build_dependency_graph(graph: ReportGraph) -> nx.DiGraph:
        directed = nx.DiGraph()
        directed.add_nodes_from(node.id for node in graph.nodes)
        for edge in graph.edges_of_kind("dependency"):
            directed.add_edge(edge.source, edge.target)
        return directed

    def summarize(self, root_dir: str = "") -> dict[str, Any]:
        """
        計算圖的摘要統計，鍵名沿用視覺化前端使用的 camelCase 格式。
        """
        total_nodes = len(self.report_graph.nodes)
        total_edges = len(self.report_graph.edges)
        kind_counts = Counter(edge.kind for edge in self.report_graph.edges)

        return {
            "totalNodes": total_nodes,
            "totalEdges": total_edges,
            "edgesByKind": {kind: kind_counts.get(kind, 0) for kind in EDGE_KINDS},
            "avgDegree": round(2 * self.graph.number_of_edges() / total_nodes, 4) if total_nodes else 0.0,
            "density": round(nx.density(self.graph), 4) if total_nodes > 1 else 0.0,
            "connectedComponents": nx.number_connected_components(self.graph) if total_nodes else 0,
            "isolatedNodes": nx.number_of_isolates(self.graph),
            "generatedAt": datetime.datetime.now().isoformat(timespec="seconds"),
            "rootDir": root_dir,
        }

    def calculate_hits(self) -> dict[str, dict[str, float]]:
        """
        計算 dependency 圖中每個節點的 HITS 分數。

        - 高 Hub 分數的檔案：匯入許多被廣泛使用檔案的協調者（例如入口點）。
        - 高 Authority 分數的檔案：被許多檔案匯入的底層工具或核心模組。

        Returns:
            鍵為檔案路徑、值為包含 'hub' 與 'authority' 分數的字典。
        """
        if self.dependency_graph.number_of_edges() == 0:
            logging.warning("無法計算 HITS 分數：圖中沒有任何依賴邊。")
            return {}

        try:
            hubs, authorities = nx.hits(self.dependency_graph, max_iter=1000, tol=1e-06)
        except nx.PowerIterationFailedConvergence:
            logging.error("HITS 演算法未能收斂。將回傳空分數。")
            return {}

        logging.info(f"HITS 中心性計算完成，分析了 {self.dependency_graph.number_of_nodes()} 個檔案節點。")
        return {
            node: {"hub": hubs.get(node, 0.0), "authority": authorities.get(node, 0.0)}
            for node in self.dependency_graph.nodes
        }

    def top_dependents(self, limit: int = 10) -> list[tuple[str, int]]:
        """回傳被最多檔案匯入的檔案與其被匯入次數，依次數遞減、路徑遞增排序。"""
        in_degrees = [(node, degree) for node, degree in self.dependency_graph.in_degree() if degree > 0]
        in_degrees.sort(key=lambda item: (-item[1], item[0]))
        return in_degrees[:limit]

    def degree_ranking(self) -> list[tuple[str, float]]:
        """依度數中心性（所有邊種類）排序的節點列表。"""
        if self.graph.number_of_nodes() == 0:
            return []
        centrality = nx.degree_centrality(self.graph)
        return sorted(centrality.items(), key=lambda item: (-item[1], item[0]))

    def top_hits(self, limit: int = 5) -> dict[str, list[tuple[str, float]]]:
        """
        取出 HITS 分數最高的檔案。

        Returns:
            {'authorities': [...], 'hubs': [...]}，每項為 (檔案路徑, 分數)，
            只包含分數大於 MIN_HITS_SCORE 的檔案；沒有依賴邊時兩者皆為空列表。
        """
        scores = self.calculate_hits()

        def _ranked(key: str) -> list[tuple[str, float]]:
            ranked = [(node, values[key]) for node, values in scores.items() if values[key] > MIN_HITS_SCORE]
            ranked.sort(key=lambda item: (-item[1], item[0]))
            return ranked[:limit]

        return {"authorities": _ranked("authority"), "hubs": _ranked("hub")}
