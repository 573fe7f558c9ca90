# src/reportgraph/core/__init__.py
"""
ReportGraph 的核心協調器套件。

此套件負責將報告載入、圖建構、過濾、渲染和報告等子系統串連起來，
執行完整的報告處理流程。
"""

from .config_loader import ConfigLoader
from .interactive_wizard import InteractiveWizard
from .report_loader import ReportSession, load_report
from .report_processor import ReportProcessor
from .workspace import load_active_reports, run_report_jobs

__all__ = [
    "ConfigLoader",
    "InteractiveWizard",
    "ReportProcessor",
    "ReportSession",
    "load_active_reports",
    "load_report",
    "run_report_jobs",
]
