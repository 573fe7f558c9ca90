# src/reportgraph/renderers/json_exporter.py
"""
將報告圖匯出為力導向前端可直接讀取的 JSON 圖文件。
"""

# 1. 標準庫導入
import json
import logging
from pathlib import Path

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from reportgraph.models import ReportGraph


def export_graph_json(graph: ReportGraph, output_path: Path) -> bool:
    """以縮排 JSON 寫出 `graph.to_dict()`；寫入失敗時記錄錯誤並回傳 False。"""
    try:
        output_path.write_text(json.dumps(graph.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        logging.info(f"圖文件已成功儲存至: {output_path}")
        return True
    except OSError as e:
        logging.error(f"寫入圖文件時發生錯誤: {e}")
        return False
