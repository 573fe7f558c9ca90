# src/reportgraph/core/config_loader.py
"""
負責載入、合併與更新報告圖任務的設定。
"""

# 1. 標準庫導入
import copy
import logging
from pathlib import Path
from typing import Any

# 2. 第三方庫導入
import yaml
from ruamel.yaml import YAML

# 3. 本專案導入
# (無)

DEFAULT_OUTPUTS: list[str] = ["json", "graph", "markdown"]

DEFAULT_VIS_CONFIG: dict[str, Any] = {
    "report_graph": {
        "layout_engine": "sfdp",
        "output_format": "png",
        "dpi": 150,
        "render_timeout": 120,
        "limits": {
            "max_nodes": 200,
            "max_edges": 300,
        },
        "filtering": {
            "exclude_nodes": [],
        },
        "node_styles": {
            "color_by": "severity",
            "base_width": 0.3,
            "size_scale": 0.02,
            "font_size": 10,
            "show_labels": True,
        },
        "edge_styles": {
            "similarity": {"color": "#fb7e81", "style": "bold", "distance": 80, "strength": 0.5, "penwidth": 2},
            "dependency": {"color": "#84c1ff", "style": "solid", "distance": 100, "strength": 0.3, "penwidth": 1},
            "related": {"color": "#6b7280", "style": "dashed", "distance": 150, "strength": 0.1, "penwidth": 1},
        },
    },
}

DEFAULT_REPORT_SETTINGS: dict[str, Any] = {
    "top_dependents": 10,
    "top_hits": 5,
    "include_dot_source": False,
    "include_adjacency_list": True,
}


class ConfigLoader:
    """一個處理報告任務設定檔載入與預設值合併的類別。"""

    def __init__(self, config_path: Path):
        self.config_path = config_path
        self.config = self._load_yaml(config_path)
        if self.config is not None:
            self._process_config()

    @staticmethod
    def _load_yaml(path: Path) -> dict[str, Any] | None:
        """安全地載入一個 YAML 檔案；空檔案視為空設定。"""
        if not path.is_file():
            logging.error(f"指定的設定檔不存在: {path}")
            return None
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logging.error(f"解析設定檔 '{path.name}' 時發生錯誤: {e}")
            return None

        if data is None:
            return {}
        if not isinstance(data, dict):
            logging.error(f"設定檔 '{path.name}' 的頂層必須是映射 (mapping)。")
            return None
        return data

    def _process_config(self):
        """將使用者設定合併到預設設定上。"""
        user_vis_config = self.config.get("visualization") or {}
        self.config["visualization"] = self._merge_configs(copy.deepcopy(DEFAULT_VIS_CONFIG), user_vis_config)

        user_report_settings = self.config.get("report_settings") or {}
        self.config["report_settings"] = self._merge_configs(
            copy.deepcopy(DEFAULT_REPORT_SETTINGS), user_report_settings
        )

        outputs = self.config.get("outputs")
        if not isinstance(outputs, list) or not outputs:
            self.config["outputs"] = list(DEFAULT_OUTPUTS)

    @property
    def graph_config(self) -> dict[str, Any]:
        return (self.config or {}).get("visualization", {}).get("report_graph", {})

    @staticmethod
    def _merge_configs(default: dict, user: dict) -> dict:
        """遞迴地合併使用者設定到預設設定中。"""
        for key, value in user.items():
            if isinstance(value, dict) and isinstance(default.get(key), dict):
                default[key] = ConfigLoader._merge_configs(default[key], value)
            else:
                default[key] = value
        return default

    @staticmethod
    def update_config_file(config_path: Path, updates: dict[str, Any]):
        """使用 ruamel.yaml 安全地更新設定檔，保留註解和格式。鍵以 '.' 表示巢狀層級。"""
        yaml_loader = YAML()
        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = yaml_loader.load(f)
            if config_data is None:
                config_data = {}

            for key, value in updates.items():
                keys = key.split(".")
                d = config_data
                for k in keys[:-1]:
                    d = d.setdefault(k, {})
                d[keys[-1]] = value

            with open(config_path, "w", encoding="utf-8") as f:
                yaml_loader.dump(config_data, f)
            logging.info(f"已自動更新設定檔: {config_path.name}")
        except Exception as e:
            logging.error(f"自動更新設定檔 '{config_path.name}' 時失敗: {e}")
