import json
from pathlib import Path

import pytest


@pytest.fixture
def sample_report() -> dict:
    """一份貼近上游分析器輸出的報告，涵蓋三種邊與各種可被略過的參照。"""
    return {
        "files": [
            {"file": "src/index.ts", "tokens": 2000, "imports": ["./components/App", "./utils/helper", "react"]},
            {"file": "src/components/App.tsx", "tokens": 3000, "imports": ["../utils/helper", "../missing"]},
            {"file": "src/utils/helper.ts", "tokens": 1000, "imports": []},
            {"file": "src/utils/format.ts", "tokens": 0, "imports": ["./helper"]},
            {"file": "test/helper.test.ts", "tokens": 150, "imports": ["../src/utils/helper"]},
        ],
        "duplicates": [
            {"file1": "src/utils/helper.ts", "file2": "src/utils/format.ts", "similarity": 0.91},
            {"file1": "src/utils/format.ts", "file2": "src/utils/helper.ts", "similarity": 0.91},
            {"file1": "src/utils/helper.ts", "file2": "lib/gone.ts"},
        ],
        "context": [
            {"file": "src/index.ts", "relatedFiles": ["src/components/App.tsx", "src/index.ts"]},
            {"file": "src/components/App.tsx", "relatedFiles": ["src/index.ts"], "dependencyList": ["./App"]},
            {"file": "not/in/files.ts", "relatedFiles": ["src/index.ts"]},
        ],
        "patterns": [
            {
                "fileName": "src/utils/helper.ts",
                "issues": [
                    {"type": "duplicate-pattern", "severity": "minor", "message": "similar to format.ts"},
                    {"type": "duplicate-pattern", "severity": "major", "message": "87% similar"},
                ],
                "metrics": {"tokenCost": 1000},
            },
            {"name": "utils", "files": ["src/utils/helper.ts", "src/utils/format.ts", "lib/gone.ts"]},
        ],
    }


@pytest.fixture
def write_report(tmp_path: Path):
    def _write(report: dict, name: str = "report.json") -> Path:
        report_path = tmp_path / name
        report_path.write_text(json.dumps(report), encoding="utf-8")
        return report_path

    return _write
