#!/usr/bin/env python3
"""
Unit tests for maintenance reports, report identifiers and the report log.
"""

import pytest
import sys
import tempfile
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.config import REPORT_ID_STRATEGIES
from workflow.report import MaintenanceReport, ReportIdGenerator, ReportLog


@pytest.fixture
def report():
    return MaintenanceReport(
        report_id="RPT-1001",
        date="2026-10-18",
        task_name="Hydraulic Leak Repair",
        system="Hydraulic",
        used_parts=["O-Ring", "HydraulicFluid", "WrenchSet"],
        aircraft="Boeing 737",
    )


class TestMaintenanceReport:
    """Test report serialization."""

    def test_text_block(self, report):
        assert report.to_text() == (
            "=== Maintenance Report ===\n"
            "Report ID: RPT-1001\n"
            "Date: 2026-10-18\n"
            "Aircraft: Boeing 737\n"
            "System: Hydraulic\n"
            "Completed Task: Hydraulic Leak Repair\n"
            "Used Parts:\n"
            "  - O-Ring\n"
            "  - HydraulicFluid\n"
            "  - WrenchSet\n"
            "==========================\n"
            "\n"
        )

    def test_text_block_without_aircraft(self):
        report = MaintenanceReport("RPT-1002", "2026-10-18", "Landing Gear Lubrication", "Mechanical", ["RagSet"])

        text = report.to_text()

        assert "Aircraft:" not in text
        assert "System: Mechanical\n" in text

    def test_immutable(self, report):
        with pytest.raises(AttributeError):
            report.report_id = "RPT-9999"

        assert isinstance(report.used_parts, tuple)


class TestReportIdGenerator:
    """Test report identifier strategies."""

    def test_counter_sequence(self):
        ids = ReportIdGenerator()

        assert [ids.next_id() for _ in range(3)] == ["RPT-1001", "RPT-1002", "RPT-1003"]
        assert ids.issued_count == 3

    def test_counter_custom_prefix_and_base(self):
        ids = ReportIdGenerator(prefix="WO-", base=0)

        assert ids.next_id() == "WO-1"

    def test_random_ids_unique(self):
        ids = ReportIdGenerator(strategy="random", seed=42)

        issued = [ids.next_id() for _ in range(500)]

        assert len(set(issued)) == 500
        for report_id in issued:
            number = int(report_id[len("RPT-"):])
            assert 1000 <= number < 11000

    def test_random_ids_reproducible_with_seed(self):
        first = ReportIdGenerator(strategy="random", seed=7)
        second = ReportIdGenerator(strategy="random", seed=7)

        assert [first.next_id() for _ in range(10)] == [second.next_id() for _ in range(10)]

    def test_release_reissues_last_counter_id(self):
        ids = ReportIdGenerator()
        ids.next_id()
        unused = ids.next_id()

        ids.release(unused)

        assert ids.next_id() == "RPT-1002"
        assert ids.issued_count == 2

    def test_release_unknown_id_is_ignored(self):
        ids = ReportIdGenerator()

        ids.release("RPT-1005")

        assert ids.next_id() == "RPT-1001"

    def test_resume_after_existing_counter_ids(self):
        ids = ReportIdGenerator()

        ids.resume_after(["RPT-1001", "RPT-1004", "WO-9000", "RPT-abc"])

        assert ids.next_id() == "RPT-1005"
        assert ids.issued_count == 1

    def test_resume_after_below_base_keeps_base(self):
        ids = ReportIdGenerator(base=2000)

        ids.resume_after(["RPT-1003"])

        assert ids.next_id() == "RPT-2001"

    def test_resume_after_random_never_repeats(self):
        first = ReportIdGenerator(strategy="random", seed=11)
        earlier = [first.next_id() for _ in range(50)]

        second = ReportIdGenerator(strategy="random", seed=11)
        second.resume_after(earlier)
        issued = [second.next_id() for _ in range(50)]

        assert set(issued).isdisjoint(earlier)

    @pytest.mark.parametrize("strategy", REPORT_ID_STRATEGIES)
    def test_accepts_every_configurable_strategy(self, strategy):
        ids = ReportIdGenerator(strategy=strategy, seed=0)

        assert ids.next_id().startswith("RPT-")

    def test_invalid_strategy(self):
        with pytest.raises(ValueError, match="Unknown report id strategy"):
            ReportIdGenerator(strategy="uuid")

    def test_negative_base(self):
        with pytest.raises(ValueError, match="non-negative"):
            ReportIdGenerator(base=-1)


class TestReportLog:
    """Test the append-only report log."""

    def test_append_creates_and_appends(self, report):
        with tempfile.TemporaryDirectory() as tmpdir:
            log = ReportLog(Path(tmpdir) / "logs" / "maintenance_reports.txt")

            log.append(report)
            log.append(MaintenanceReport("RPT-1002", "2026-10-18", "Landing Gear Lubrication", "Mechanical", []))

            text = log.path.read_text(encoding="utf-8")
            assert text.count("=== Maintenance Report ===") == 2
            assert text.startswith(report.to_text())
            assert log.read_report_ids() == ["RPT-1001", "RPT-1002"]

    def test_existing_content_never_truncated(self, report):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "maintenance_reports.txt"
            path.write_text("previous run\n", encoding="utf-8")

            ReportLog(path).append(report)

            assert path.read_text(encoding="utf-8").startswith("previous run\n")

    def test_disabled_log(self, report):
        with tempfile.TemporaryDirectory() as tmpdir:
            log = ReportLog(Path(tmpdir) / "maintenance_reports.txt", enabled=False)

            assert log.append(report) is None
            assert not log.path.exists()
            assert log.read_report_ids() == []

    def test_repr(self):
        repr_str = repr(ReportLog("reports.txt"))

        assert "ReportLog" in repr_str
        assert "reports.txt" in repr_str
