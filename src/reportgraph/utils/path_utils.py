# src/reportgraph/utils/path_utils.py
"""
提供與專案路徑、報告檔案定位相關的通用工具函式。
"""

# 1. 標準庫導入
import importlib.resources
import logging
import posixpath
from pathlib import Path

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
# (無)

REPORT_DIR_NAME = ".aiready"
REPORT_FILE_PREFIX = "aiready-report-"


def find_project_root(marker: str = "pyproject.toml") -> Path:
    """
    使用 importlib.resources 定位套件位置，然後向上遍歷尋找標記檔案。
    找不到時改從當前工作目錄向上尋找。
    """
    try:
        anchor = importlib.resources.files("reportgraph")
    except ModuleNotFoundError:
        anchor = Path(__file__).resolve().parent

    current_path = Path(str(anchor))
    while current_path != current_path.parent:
        if (current_path / marker).exists():
            return current_path
        current_path = current_path.parent

    current_path = Path.cwd()
    while current_path != current_path.parent:
        if (current_path / marker).exists():
            return current_path
        current_path = current_path.parent

    raise FileNotFoundError(f"無法從 '{anchor}' 或當前工作目錄向上找到專案根目錄標記檔案: {marker}")


def normalize_path(file_path: str) -> str:
    """將路徑統一為 `/` 分隔並消除 `.`、`..` 片段。空字串保持為空。"""
    if not file_path:
        return ""
    normalized = posixpath.normpath(file_path.replace("\\", "/"))
    return "" if normalized == "." else normalized


def find_latest_report(base_path: Path) -> Path | None:
    """
    在 `<base_path>/.aiready/` 中尋找最新（依修改時間）的
    `aiready-report-*.json` 報告。

    Returns:
        最新報告的路徑；目錄不存在或沒有報告時回傳 None。
    """
    report_dir = base_path / REPORT_DIR_NAME
    if not report_dir.is_dir():
        logging.debug(f"報告目錄不存在: {report_dir}")
        return None

    candidates = [
        p for p in report_dir.iterdir()
        if p.is_file() and p.name.startswith(REPORT_FILE_PREFIX) and p.suffix == ".json"
    ]
    if not candidates:
        return None

    latest = max(candidates, key=lambda p: (p.stat().st_mtime, p.name))
    logging.info(f"自動選用最新的分析報告: {latest.name}")
    return latest
