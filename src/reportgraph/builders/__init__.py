# src/reportgraph/builders/__init__.py
"""
建構器套件，負責將分析報告轉換為圖形資料結構。
"""

from .graph_filter import filter_graph
from .import_resolver import ImportResolver
from .report_graph_builder import build_graph_from_report

__all__ = [
    "ImportResolver",
    "build_graph_from_report",
    "filter_graph",
]
