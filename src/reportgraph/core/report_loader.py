# src/reportgraph/core/report_loader.py
"""
讀取分析報告，並以不可變的 ReportSession 表示「目前載入的報告」。

每次載入都產生新的 session；舊的 session 不會被修改，呼叫端需自行以新值
整體替換舊值。
"""

# 1. 標準庫導入
import datetime
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from reportgraph.builders.report_graph_builder import build_graph_from_report
from reportgraph.exceptions import MalformedReportError, ReportNotFoundError
from reportgraph.models import ReportGraph


def load_report(report_path: Path) -> Any:
    """
    以 UTF-8 讀取 JSON 報告。

    Raises:
        ReportNotFoundError: 檔案不存在。
        MalformedReportError: 檔案內容不是有效的 JSON。
    """
    if not report_path.is_file():
        raise ReportNotFoundError(f"找不到分析報告: {report_path}")
    try:
        with open(report_path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise MalformedReportError(f"報告 '{report_path.name}' 不是有效的 JSON: {e}") from e


@dataclass(frozen=True)
class ReportSession:
    """一次報告載入的結果：原始報告、建構出的圖與載入時間。"""

    report_path: Path
    report: Any
    graph: ReportGraph
    loaded_at: datetime.datetime

    @classmethod
    def load(cls, report_path: Path, base_path: str | Path | None = None) -> "ReportSession":
        """讀取報告並建構圖，回傳新的 session。"""
        report = load_report(report_path)
        graph = build_graph_from_report(report, base_path)
        logging.info(f"已載入報告 '{report_path.name}'。")
        return cls(
            report_path=report_path,
            report=report,
            graph=graph,
            loaded_at=datetime.datetime.now(),
        )

    def reload(self, base_path: str | Path | None = None) -> "ReportSession":
        """重新讀取同一路徑的報告，回傳取代目前 session 的新物件。"""
        return ReportSession.load(self.report_path, base_path)
