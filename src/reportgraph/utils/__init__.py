# src/reportgraph/utils/__init__.py
"""
通用工具函式套件。
"""

from .category_utils import get_package_group, infer_category
from .color_utils import get_analogous_dark_color, get_severity_color, normalize_severity
from .logging_utils import UnresolvedReferenceFilter, setup_logging
from .path_utils import find_latest_report, find_project_root, normalize_path

__all__ = [
    "UnresolvedReferenceFilter",
    "find_latest_report",
    "find_project_root",
    "get_analogous_dark_color",
    "get_package_group",
    "get_severity_color",
    "infer_category",
    "normalize_path",
    "normalize_severity",
    "setup_logging",
]
