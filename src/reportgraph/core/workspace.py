# src/reportgraph/core/workspace.py
"""
讀取工作區設定 (workspace.yaml)，並依序執行其中啟用的報告任務。
"""

# 1. 標準庫導入
import logging
from collections.abc import Iterable
from pathlib import Path

# 2. 第三方庫導入
import yaml

# 3. 本專案導入
from reportgraph.core.report_processor import ReportProcessor
from reportgraph.models import ReportGraph

WORKSPACE_FILE_NAME = "workspace.yaml"
REPORTS_DIR_NAME = "reports"


def load_active_reports(configs_dir: Path) -> list[Path]:
    """
    解析 `<configs_dir>/workspace.yaml` 的 `active_reports`，回傳各任務設定檔的路徑。

    工作區設定不存在、無法解析或沒有任何任務時，記錄原因並回傳空列表。
    """
    workspace_path = configs_dir / WORKSPACE_FILE_NAME
    if not workspace_path.is_file():
        logging.error(f"工作區設定檔 '{workspace_path}' 不存在。")
        logging.info("請從 'workspace.template.yaml' 複製一份並進行設定。")
        return []

    try:
        with open(workspace_path, encoding="utf-8") as f:
            workspace_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logging.error(f"解析工作區設定檔時發生錯誤: {e}")
        return []

    active_reports = workspace_config.get("active_reports") if isinstance(workspace_config, dict) else None
    if not isinstance(active_reports, list) or not active_reports:
        logging.warning("工作區設定檔中沒有指定任何 'active_reports'。")
        return []

    reports_dir = configs_dir / REPORTS_DIR_NAME
    return [reports_dir / str(name) for name in active_reports if name]


def run_report_jobs(config_paths: Iterable[Path]) -> dict[str, ReportGraph | None]:
    """
    依序執行每個報告任務，回傳 {設定檔名稱: 輸出的圖或 None}。

    單一任務的未預期錯誤只會被記錄，不會中斷其餘任務。
    """
    results: dict[str, ReportGraph | None] = {}
    for config_path in config_paths:
        try:
            results[config_path.name] = ReportProcessor(config_path).run()
        except Exception as e:
            logging.error(f"處理報告任務 '{config_path.name}' 時發生未預期的嚴重錯誤: {e}", exc_info=True)
            results[config_path.name] = None
    return results
