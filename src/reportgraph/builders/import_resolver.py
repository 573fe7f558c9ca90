# src/reportgraph/builders/import_resolver.py
"""
將 import 指定字串解析為已知的檔案節點。

解析策略分為兩段：
1. 精確解析：把相對指定字串接到 importer 所在目錄（絕對指定字串則相對於
   base_path），正規化後依序嘗試原樣、補上副檔名、以及目錄下的 index 檔。
2. 後綴啟發式：去除開頭的 `./`、`../`、`/` 之後，在已知檔案中尋找以該後綴
   （以路徑片段為界）結尾的檔案。當多個檔案共享同一後綴時可能誤判，
   因此只有唯一命中才會被採用。

零個或多個命中、或解析結果為 importer 自身時，一律回傳 None。
"""

# 1. 標準庫導入
import logging
import posixpath
from collections import defaultdict
from collections.abc import Iterable
from pathlib import Path

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from reportgraph.utils.path_utils import normalize_path

SOURCE_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".py")
INDEX_BASENAMES: tuple[str, ...] = ("index", "__init__")


def is_local_specifier(specifier: object) -> bool:
    """只有相對 (`.`) 或絕對 (`/`) 路徑才是解析候選；套件名稱不是。"""
    return isinstance(specifier, str) and specifier.startswith((".", "/"))


def _strip_extension(path: str) -> str:
    root, ext = posixpath.splitext(path)
    return root if ext in SOURCE_EXTENSIONS else path


def _strip_leading_navigation(specifier: str) -> str:
    suffix = specifier.replace("\\", "/")
    while True:
        if suffix.startswith("../"):
            suffix = suffix[3:]
        elif suffix.startswith("./"):
            suffix = suffix[2:]
        elif suffix.startswith("/"):
            suffix = suffix[1:]
        else:
            break
    return "" if suffix in (".", "..") else suffix.rstrip("/")


class ImportResolver:
    """針對一組已知檔案路徑，解析 import 指定字串的策略物件。"""

    def __init__(self, known_files: Iterable[str], base_path: str | Path | None = None):
        self.base_path = normalize_path(str(base_path)) if base_path else ""
        self._known: set[str] = set()
        self._exact_index: dict[str, set[str]] = defaultdict(set)
        self._suffix_keys: dict[str, set[str]] = defaultdict(set)

        for file_id in known_files:
            self._known.add(file_id)
            for key in self._keys_for(file_id):
                self._exact_index[key].add(file_id)
                self._suffix_keys[file_id].add(key)
                self._suffix_keys[file_id].add(_strip_extension(key))
                stem = _strip_extension(key)
                if posixpath.basename(stem) in INDEX_BASENAMES and posixpath.dirname(stem):
                    self._suffix_keys[file_id].add(posixpath.dirname(stem))

    def _relative_to_base(self, path: str) -> str | None:
        if not self.base_path or not path.startswith("/"):
            return None
        prefix = self.base_path.rstrip("/") + "/"
        if path.startswith(prefix):
            return path[len(prefix):]
        return None

    def _keys_for(self, file_id: str) -> set[str]:
        """一個檔案在精確索引中的所有鍵：正規化路徑，以及相對於 base_path 的路徑。"""
        normalized = normalize_path(file_id)
        keys = {normalized} if normalized else set()
        relative = self._relative_to_base(normalized)
        if relative:
            keys.add(relative)
        return keys

    def _exact_bases(self, importer: str, specifier: str) -> list[str]:
        spec = specifier.replace("\\", "/")
        bases: list[str] = []
        if spec.startswith("/"):
            bases.append(normalize_path(spec))
            bases.append(normalize_path(spec.lstrip("/")))
            if self.base_path:
                bases.append(normalize_path(posixpath.join(self.base_path, spec.lstrip("/"))))
        else:
            for importer_key in sorted(self._keys_for(importer)):
                bases.append(normalize_path(posixpath.join(posixpath.dirname(importer_key), spec)))
        return [base for base in dict.fromkeys(bases) if base and not base.startswith("..")]

    def _lookup_exact(self, base: str) -> set[str]:
        candidates = [base]
        candidates.extend(base + ext for ext in SOURCE_EXTENSIONS)
        for index_name in INDEX_BASENAMES:
            candidates.extend(posixpath.join(base, index_name + ext) for ext in SOURCE_EXTENSIONS)

        for candidate in candidates:
            matches = self._exact_index.get(candidate)
            if matches:
                return set(matches)
        return set()

    def _lookup_suffix(self, specifier: str) -> set[str]:
        suffix = _strip_leading_navigation(specifier)
        if not suffix:
            return set()
        suffix_stem = _strip_extension(suffix)
        matches = set()
        for file_id, keys in self._suffix_keys.items():
            for key in keys:
                if key in (suffix, suffix_stem) or key.endswith(("/" + suffix, "/" + suffix_stem)):
                    matches.add(file_id)
                    break
        return matches

    def resolve(self, importer: str, specifier: object) -> str | None:
        """
        將 importer 中的一個 import 指定字串解析為唯一的已知檔案。

        Returns:
            目標檔案的節點 id；無法唯一解析或解析到自身時回傳 None。
        """
        if not isinstance(specifier, str) or not is_local_specifier(specifier):
            return None

        matches: set[str] = set()
        for base in self._exact_bases(importer, specifier):
            matches = self._lookup_exact(base)
            if matches:
                break

        if not matches:
            matches = self._lookup_suffix(specifier)

        if len(matches) != 1:
            if matches:
                logging.debug(f"無法解析的參照 (多個候選 {len(matches)} 個): {importer} -> {specifier}")
            else:
                logging.debug(f"無法解析的參照: {importer} -> {specifier}")
            return None

        target = matches.pop()
        if target == importer:
            return None
        return target
