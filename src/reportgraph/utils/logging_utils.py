# src/reportgraph/utils/logging_utils.py
"""
提供與日誌記錄相關的通用工具和過濾器。
"""

# 1. 標準庫導入
import logging
import os

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
# (無)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
SHOW_UNRESOLVED_ENV = "REPORTGRAPH_SHOW_UNRESOLVED"
UNRESOLVED_MARKER = "無法解析的參照"


class UnresolvedReferenceFilter(logging.Filter):
    """
    一個自訂的日誌過濾器，用於攔截大量出現的「無法解析的參照」除錯訊息。
    設定環境變數 REPORTGRAPH_SHOW_UNRESOLVED=1 可保留這些訊息。
    """

    def __init__(self, show_unresolved: bool | None = None):
        super().__init__()
        if show_unresolved is None:
            show_unresolved = os.environ.get(SHOW_UNRESOLVED_ENV, "") == "1"
        self.show_unresolved = show_unresolved

    def filter(self, record: logging.LogRecord) -> bool:
        if self.show_unresolved:
            return True
        return UNRESOLVED_MARKER not in record.getMessage()


def setup_logging(level: int = logging.DEBUG):
    """設定根日誌記錄器；若已存在 handler 則不重複加入。"""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if not root_logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        console_handler.addFilter(UnresolvedReferenceFilter())
        root_logger.addHandler(console_handler)
