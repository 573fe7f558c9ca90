# src/reportgraph/core/interactive_wizard.py
"""
負責處理大型報告圖在渲染前的使用者互動與過濾建議。
"""

# 1. 標準庫導入
import logging
from collections import defaultdict
from pathlib import Path
from typing import Any

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from reportgraph.core.config_loader import ConfigLoader
from reportgraph.intelligence.graph_analyzer import GraphAnalyzer
from reportgraph.models import ReportGraph

MAX_RECOMMENDATIONS = 5


class InteractiveWizard:
    """
    一個基於圖論事實的互動式配置精靈。
    它找出「節點多但彼此連結稀疏」的群組，建議將其排除以縮小圖的規模。
    """

    def __init__(self, config_path: Path, max_nodes: int):
        self.config_path = config_path
        self.max_nodes = max_nodes
        self.recommendations: list[tuple[str, int]] = []

    def analyze_graph_and_recommend(self, graph: ReportGraph) -> list[tuple[str, int]]:
        """
        依群組彙總度數中心性，回傳 (排除模式, 可移除節點數) 的建議列表。
        """
        if not graph.nodes:
            logging.warning("[Wizard] 圖資料為空，無法進行推薦。")
            self.recommendations = []
            return []

        centrality = dict(GraphAnalyzer(graph).degree_ranking())
        max_centrality = max(centrality.values()) or 1.0

        members_by_group: dict[str, list[str]] = defaultdict(list)
        for node in graph.nodes:
            members_by_group[node.group].append(node.id)

        scored: list[tuple[str, int, float]] = []
        for group, members in members_by_group.items():
            if group == "(root)" or len(members) < 2:
                continue
            mean_norm = sum(centrality.get(m, 0.0) for m in members) / len(members) / max_centrality
            scored.append((f"*{group}/*", len(members), len(members) * (1.0 - mean_norm)))

        test_count = sum(1 for node in graph.nodes if node.category == "test")
        if test_count:
            scored.append(("*test*", test_count, float(test_count) * 2))

        scored.sort(key=lambda item: (-item[2], item[0]))
        self.recommendations = [(pattern, count) for pattern, count, _ in scored[:MAX_RECOMMENDATIONS]]

        logging.debug("--- [Wizard] 推薦的排除模式 ---")
        for pattern, count in self.recommendations:
            logging.debug(f"  {pattern} (可移除 {count} 個節點)")
        return self.recommendations

    def run(self, graph: ReportGraph) -> str:
        """執行互動式精靈，回傳 'proceed' 或 'exit'。"""
        self.analyze_graph_and_recommend(graph)
        self._display_menu(len(graph.nodes), self.max_nodes, self.recommendations)

        updates, action = self._get_user_choice(self.recommendations, self.max_nodes)
        if updates:
            ConfigLoader.update_config_file(self.config_path, updates)
        return action

    @staticmethod
    def _display_menu(node_count: int, max_nodes: int, recommendations: list[tuple[str, int]]):
        """顯示互動式選單給使用者。"""
        print("\n" + "=" * 60)
        logging.info(f"ReportGraph 構建了一個包含 {node_count} 個節點的報告圖 (上限 {max_nodes})。")
        logging.warning("圖表過於龐大，直接渲染將導致視覺雜訊。")
        print("-" * 60)
        print("基於群組連結密度分析，我們建議排除以下模式：")

        if not recommendations:
            print("  (無強烈推薦的排除模式，請嘗試手動輸入)")

        for i, (pattern, count) in enumerate(recommendations):
            print(f"  {i + 1}. 排除 {pattern} (移除 {count} 個節點)")

        print("\n您可以選擇一個推薦的模式，或選擇其他選項：")
        base_idx = len(recommendations)
        print(f"  {base_idx + 1}. [過濾分析] 手動指定您想排除的檔案模式。")
        print(f"  {base_idx + 2}. [截斷] 只保留最大的 {max_nodes} 個檔案。")
        print(f"  {base_idx + 3}. [強制執行] 忽略上限，渲染完整的圖 (不推薦)。")
        print(f"  {base_idx + 4}. [退出] 終止處理。")
        print("=" * 60)

    @staticmethod
    def _get_user_choice(recommendations: list[tuple[str, int]], max_nodes: int) -> tuple[dict[str, Any], str]:
        """獲取並處理使用者的選擇。"""
        updates: dict[str, Any] = {}
        action = "proceed"
        max_choice = len(recommendations) + 4

        while True:
            try:
                choice = int(input(f"請輸入您的選擇 (1-{max_choice}): ").strip())
                if 1 <= choice <= max_choice:
                    break
                print("無效的選擇，請重新輸入。")
            except ValueError:
                print("無效的輸入，請輸入數字。")

        if 1 <= choice <= len(recommendations):
            pattern = recommendations[choice - 1][0]
            updates = {"visualization.report_graph.filtering.exclude_nodes": [pattern]}
            logging.info(f"將啟用「過濾分析」模式，排除: {pattern}")
        else:
            option_choice = choice - len(recommendations)
            if option_choice == 1:
                print("\n請輸入您想排除的一個或多個檔案模式 (支援 * 萬用字元)，用逗號分隔。")
                patterns = [p.strip() for p in input("> ").strip().split(",") if p.strip()]
                if patterns:
                    updates = {"visualization.report_graph.filtering.exclude_nodes": patterns}
                    logging.info("將啟用「過濾分析」模式。")
            elif option_choice == 2:
                updates = {"auto_truncate": True}
                logging.info(f"將只保留最大的 {max_nodes} 個檔案。")
            elif option_choice == 3:
                updates = {"force_analysis": True}
                logging.warning("將強制渲染完整的圖。")
            elif option_choice == 4:
                action = "exit"
        return updates, action
