# src/reportgraph/core/report_processor.py
"""
ReportGraph 的核心處理引擎：載入報告、建構並過濾圖、輸出各種成品。
"""

# 1. 標準庫導入
import logging
import os
import sys
from pathlib import Path
from typing import Any

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from reportgraph.builders.graph_filter import filter_graph
from reportgraph.core.config_loader import ConfigLoader
from reportgraph.core.interactive_wizard import InteractiveWizard
from reportgraph.core.report_loader import ReportSession
from reportgraph.exceptions import ReportGraphError
from reportgraph.intelligence.graph_analyzer import GraphAnalyzer
from reportgraph.models import ReportGraph
from reportgraph.renderers.graph_renderer import generate_graph_dot_source, render_graph
from reportgraph.renderers.json_exporter import export_graph_json
from reportgraph.reporters.markdown_reporter import generate_markdown_report
from reportgraph.utils.path_utils import find_latest_report


class ReportProcessor:
    """一個處理單一報告任務完整流程的類別。"""

    def __init__(self, config_path: Path):
        self.config_path = config_path
        self.report_name = config_path.stem
        self.config_loader = ConfigLoader(config_path)
        self.config = self.config_loader.config

    def _reload_config(self):
        self.config_loader = ConfigLoader(self.config_path)
        self.config = self.config_loader.config

    def _prepare_paths(self) -> tuple[Path, Path | None, Path]:
        """
        根據設定準備 base_path、報告路徑與輸出目錄。
        相對路徑一律相對於設定檔所在目錄；report_path 為 'auto' 時自動尋找最新報告。
        """
        config_dir = self.config_path.parent
        base_path = (config_dir / (self.config.get("base_path") or ".")).resolve()
        output_dir = (config_dir / (self.config.get("output_dir") or "output")).resolve()
        os.makedirs(output_dir, exist_ok=True)

        report_path_str = self.config.get("report_path", "auto")
        if not report_path_str or report_path_str == "auto":
            report_path = find_latest_report(base_path)
        else:
            report_path = (config_dir / report_path_str).resolve()
        return base_path, report_path, output_dir

    def _needs_wizard(self, node_count: int) -> bool:
        """判斷是否需要啟動互動式精靈。"""
        graph_config = self.config_loader.graph_config
        max_nodes = graph_config.get("limits", {}).get("max_nodes")
        has_filter = graph_config.get("filtering", {}).get("exclude_nodes")

        return (
            max_nodes is not None
            and node_count > max_nodes
            and not has_filter
            and not self.config.get("force_analysis", False)
            and not self.config.get("auto_truncate", False)
            and sys.stdout.isatty()
        )

    def run(self) -> ReportGraph | None:
        """執行完整的報告處理流程，回傳最終輸出的圖。"""
        if self.config is None:
            logging.error(f"因設定檔 '{self.config_path.name}' 載入失敗，終止處理。")
            return None

        logging.info(f"========== 開始處理報告任務: {self.report_name} ==========")

        base_path, report_path, output_dir = self._prepare_paths()
        if report_path is None:
            logging.error(f"在 '{base_path}' 中找不到任何分析報告，請在設定檔中指定 'report_path'。")
            return None

        try:
            session = ReportSession.load(report_path, base_path)
        except ReportGraphError as e:
            logging.error(f"載入報告失敗: {e}")
            return None

        logging.info(f"--- [評估] 報告圖包含 {len(session.graph.nodes)} 個檔案節點。 ---")

        if self._needs_wizard(len(session.graph.nodes)):
            max_nodes = self.config_loader.graph_config["limits"]["max_nodes"]
            wizard = InteractiveWizard(self.config_path, max_nodes)
            if wizard.run(session.graph) == "exit":
                logging.info("使用者選擇退出。")
                return None
            self._reload_config()

        graph, filtered_nodes = self._apply_filters(session.graph)
        analyzer = GraphAnalyzer(graph)
        graph.metadata = analyzer.summarize(root_dir=str(base_path))

        report_settings = self.config["report_settings"]
        analysis_results: dict[str, Any] = {
            "top_dependents": analyzer.top_dependents(report_settings.get("top_dependents", 10)),
            "core_files": analyzer.top_hits(report_settings.get("top_hits", 5)),
            "filtered_nodes": filtered_nodes,
        }
        self._write_outputs(graph, report_path, output_dir, analysis_results)

        logging.info(f"========== 報告任務 '{self.report_name}' 處理完成 ==========\n")
        return graph

    def _apply_filters(self, graph: ReportGraph) -> tuple[ReportGraph, list[str]]:
        graph_config = self.config_loader.graph_config
        limits = graph_config.get("limits", {})
        exclude_patterns = graph_config.get("filtering", {}).get("exclude_nodes", [])

        if self.config.get("force_analysis", False):
            logging.warning("已啟用 'force_analysis'，忽略節點與邊數上限。")
            return filter_graph(graph, exclude_patterns)

        return filter_graph(
            graph,
            exclude_patterns,
            max_nodes=limits.get("max_nodes"),
            max_edges=limits.get("max_edges"),
        )

    def _write_outputs(
        self,
        graph: ReportGraph,
        report_path: Path,
        output_dir: Path,
        analysis_results: dict[str, Any],
    ):
        """依設定中的 outputs 列表輸出各種成品。"""
        outputs = self.config.get("outputs", [])
        graph_config = self.config_loader.graph_config

        if "json" in outputs:
            export_graph_json(graph, output_dir / f"{self.report_name}_graph.json")

        if "graph" in outputs:
            layout_engine = graph_config.get("layout_engine", "sfdp")
            output_format = graph_config.get("output_format", "png")
            render_graph(
                graph,
                output_dir / f"{self.report_name}_graph_{layout_engine}.{output_format}",
                self.report_name,
                graph_config,
            )

        if "markdown" in outputs:
            report_settings = self.config.get("report_settings", {})
            if report_settings.get("include_dot_source", False):
                analysis_results["dot_source"] = generate_graph_dot_source(graph, self.report_name, graph_config)
            generate_markdown_report(
                report_name=self.report_name,
                report_path=report_path,
                output_path=output_dir / f"{self.report_name}_GraphReport.md",
                graph=graph,
                analysis_results=analysis_results,
                report_settings=report_settings,
            )
