import pytest

from reportgraph.core.report_loader import ReportSession, load_report
from reportgraph.exceptions import MalformedReportError, ReportGraphError, ReportNotFoundError


class TestLoadReport:
    def test_reads_json(self, sample_report, write_report):
        assert load_report(write_report(sample_report)) == sample_report

    def test_missing_file(self, tmp_path):
        with pytest.raises(ReportNotFoundError):
            load_report(tmp_path / "missing.json")

    def test_missing_file_is_also_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_report(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        report_path = tmp_path / "broken.json"
        report_path.write_text("{not json", encoding="utf-8")

        with pytest.raises(MalformedReportError):
            load_report(report_path)


class TestReportSession:
    def test_load_builds_graph(self, sample_report, write_report):
        session = ReportSession.load(write_report(sample_report))

        assert len(session.graph.nodes) == 5
        assert session.report == sample_report

    def test_session_is_immutable(self, sample_report, write_report):
        session = ReportSession.load(write_report(sample_report))

        with pytest.raises(AttributeError):
            session.graph = None

    def test_reload_returns_new_session(self, sample_report, write_report):
        report_path = write_report(sample_report)
        session = ReportSession.load(report_path)

        sample_report["files"].append({"file": "src/extra.ts", "tokens": 10})
        write_report(sample_report)
        reloaded = session.reload()

        assert reloaded is not session
        assert len(session.graph.nodes) == 5
        assert len(reloaded.graph.nodes) == 6

    def test_malformed_report_raises(self, write_report):
        with pytest.raises(ReportGraphError):
            ReportSession.load(write_report({"files": "nope"}))
