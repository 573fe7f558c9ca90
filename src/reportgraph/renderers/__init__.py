# src/reportgraph/renderers/__init__.py
"""
渲染器套件，負責將報告圖輸出為 JSON 圖文件或 Graphviz 圖檔。
"""

from .graph_renderer import generate_graph_dot_source, render_graph
from .json_exporter import export_graph_json

__all__ = [
    "export_graph_json",
    "generate_graph_dot_source",
    "render_graph",
]
