# src/reportgraph/reporters/__init__.py
"""
報告生成器套件，負責將報告圖與分析結果匯總為易讀的報告。
"""

from .markdown_reporter import generate_markdown_report

__all__ = ["generate_markdown_report"]
