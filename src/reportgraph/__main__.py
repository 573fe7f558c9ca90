# src/reportgraph/__main__.py
"""
ReportGraph 命令列入口。

不帶參數時執行 `configs/workspace.yaml` 中啟用的所有報告任務；
也可以直接指定一或多個任務設定檔。
"""

# 1. 標準庫導入
import argparse
import logging
from pathlib import Path

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from reportgraph.core.workspace import load_active_reports, run_report_jobs
from reportgraph.utils.logging_utils import setup_logging
from reportgraph.utils.path_utils import find_project_root


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reportgraph",
        description="將程式碼分析報告轉換為力導向檔案關係圖。",
    )
    parser.add_argument("configs", nargs="*", type=Path, help="要執行的報告任務設定檔；省略時讀取工作區設定。")
    parser.add_argument("--configs-dir", type=Path, help="包含 workspace.yaml 與 reports/ 的目錄。")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="DEBUG",
        help="日誌等級 (預設: DEBUG)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """執行指定的報告任務；任何任務失敗時回傳 1。"""
    args = _build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level))

    config_paths: list[Path] = list(args.configs)
    if not config_paths:
        configs_dir = args.configs_dir
        if configs_dir is None:
            try:
                configs_dir = find_project_root() / "configs"
            except FileNotFoundError as e:
                logging.error(f"初始化失敗: {e}")
                return 1
        config_paths = load_active_reports(configs_dir)
        if not config_paths:
            return 1

    logging.info(f"ReportGraph 工具啟動，共 {len(config_paths)} 個報告任務。")
    results = run_report_jobs(config_paths)
    return 0 if all(graph is not None for graph in results.values()) else 1


if __name__ == "__main__":
    raise SystemExit(main())
