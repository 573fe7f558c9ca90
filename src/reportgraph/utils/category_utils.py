# src/reportgraph/utils/category_utils.py
"""
根據檔案路徑推斷節點的類別 (category) 與所屬的套件群組 (group)。
"""

# 1. 標準庫導入
import posixpath

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
# (無)

DEFAULT_CATEGORY = "module"

# 依序比對，第一個命中的規則勝出。
CATEGORY_RULES: tuple[tuple[str, frozenset[str]], ...] = (
    ("test", frozenset({"test", "tests", "__tests__", "spec", "specs"})),
    ("hook", frozenset({"hooks"})),
    ("component", frozenset({"components", "component", "charts", "ui", "widgets"})),
    ("service", frozenset({"services", "service", "api"})),
    ("utility", frozenset({"utils", "util", "lib", "helpers", "helper", "common"})),
    ("page", frozenset({"pages", "app", "routes", "views"})),
    ("script", frozenset({"scripts", "tools", "bin"})),
)

STYLE_EXTENSIONS = frozenset({".css", ".scss", ".sass", ".less"})
CONFIG_MARKERS = (".config.", "tsconfig", "package.json", "pyproject.toml", "setup.cfg")


def _is_test_file(filename: str) -> bool:
    return ".test." in filename or ".spec." in filename or filename.startswith("test_")


def _is_hook_file(filename: str) -> bool:
    stem = filename.split(".", 1)[0]
    return len(stem) > 3 and stem.startswith("use") and stem[3].isupper()


def infer_category(file_path: str) -> str:
    """
    從路徑片段推斷檔案類別，例如 `src/components/Button.tsx` -> `component`。

    Args:
        file_path: 以 `/` 分隔的檔案路徑。

    Returns:
        類別名稱；無法判斷時回傳 `module`。
    """
    normalized = file_path.replace("\\", "/")
    filename = posixpath.basename(normalized).lower()
    directories = {part.lower() for part in posixpath.dirname(normalized).split("/") if part}

    if _is_test_file(filename):
        return "test"
    if _is_hook_file(posixpath.basename(normalized)):
        return "hook"
    for category, segments in CATEGORY_RULES:
        if directories & segments:
            return category
    if posixpath.splitext(filename)[1] in STYLE_EXTENSIONS:
        return "style"
    if any(marker in filename for marker in CONFIG_MARKERS):
        return "config"
    return DEFAULT_CATEGORY


def get_package_group(file_path: str | None) -> str | None:
    """
    回傳檔案所屬的套件群組：`packages/<name>`、`landing`、`scripts`，
    否則為路徑中的第一個目錄；沒有目錄的單層路徑歸入 `(root)`。
    """
    if not file_path:
        return None
    parts = [part for part in file_path.replace("\\", "/").split("/") if part]
    if not parts:
        return None
    if "packages" in parts:
        pkg_idx = parts.index("packages")
        if len(parts) > pkg_idx + 1:
            return f"packages/{parts[pkg_idx + 1]}"
    if "landing" in parts:
        return "landing"
    if "scripts" in parts:
        return "scripts"
    return parts[0] if len(parts) > 1 else "(root)"
