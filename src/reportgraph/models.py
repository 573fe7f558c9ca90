# src/reportgraph/models.py
"""
定義報告圖的資料結構：節點、邊、叢集與整張圖。
"""

# 1. 標準庫導入
from dataclasses import dataclass, field
from typing import Any

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
# (無)

EDGE_KINDS: tuple[str, ...] = ("dependency", "similarity", "related")
MIN_NODE_SIZE = 1


@dataclass
class NodeIssues:
    count: int = 0
    severity: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"count": self.count, "severity": self.severity}


@dataclass
class Node:
    """代表報告中的一個原始碼檔案。節點 id 即為檔案路徑。"""

    id: str
    label: str
    size: int = MIN_NODE_SIZE
    category: str = "module"
    group: str = ""
    tokens: int = 0
    issues: NodeIssues = field(default_factory=NodeIssues)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "size": self.size,
            "category": self.category,
            "group": self.group,
            "tokens": self.tokens,
            "issues": self.issues.to_dict(),
        }


@dataclass(frozen=True)
class Edge:
    """
    兩個節點之間的關係。

    dependency 邊的方向為 importer -> imported；similarity 與 related 邊
    視為無向，但仍以 (source, target, kind) 的形式儲存。
    """

    source: str
    target: str
    kind: str

    @property
    def key(self) -> tuple[frozenset[str], str]:
        """以無序端點對加上種類作為去重鍵。"""
        return frozenset((self.source, self.target)), self.kind

    def to_dict(self) -> dict[str, str]:
        return {"source": self.source, "target": self.target, "kind": self.kind}


@dataclass
class Cluster:
    id: str
    kind: str
    name: str
    nodes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "kind": self.kind, "name": self.name, "nodes": list(self.nodes)}


@dataclass
class ReportGraph:
    """由單一份報告建構出的完整圖，交由力導向佈局渲染器使用。"""

    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    clusters: list[Cluster] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def node_ids(self) -> set[str]:
        return {node.id for node in self.nodes}

    def get_node(self, node_id: str) -> Node | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def edge_keys(self) -> set[tuple[frozenset[str], str]]:
        return {edge.key for edge in self.edges}

    def edges_of_kind(self, kind: str) -> list[Edge]:
        return [edge for edge in self.edges if edge.kind == kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
            "clusters": [cluster.to_dict() for cluster in self.clusters],
            "metadata": dict(self.metadata),
        }
