# src/reportgraph/__init__.py
"""
ReportGraph：將程式碼分析報告轉換為力導向視覺化所需的檔案關係圖。
"""

from reportgraph.builders.report_graph_builder import build_graph_from_report
from reportgraph.exceptions import MalformedReportError, ReportGraphError, ReportNotFoundError
from reportgraph.models import Cluster, Edge, Node, NodeIssues, ReportGraph

__version__ = "0.1.0"

__all__ = [
    "Cluster",
    "Edge",
    "MalformedReportError",
    "Node",
    "NodeIssues",
    "ReportGraph",
    "ReportGraphError",
    "ReportNotFoundError",
    "build_graph_from_report",
]
