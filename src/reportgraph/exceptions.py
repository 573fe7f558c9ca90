# src/reportgraph/exceptions.py
"""
ReportGraph 的例外類別。
"""


class ReportGraphError(Exception):
    """所有 ReportGraph 例外的基底類別。"""


class MalformedReportError(ReportGraphError, ValueError):
    """報告的結構無效（例如檔案列表不存在或不是列表），無法建構任何圖。"""


class ReportNotFoundError(ReportGraphError, FileNotFoundError):
    """找不到指定的分析報告檔案。"""
