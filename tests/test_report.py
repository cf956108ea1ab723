"""Tests for the report emitter."""

from pathlib import Path

from dirmail.models import BatchReport, DispatchResult, SendStatus
from dirmail.report import ReportEmitter


def _report(cancelled=False):
    report = BatchReport(root=Path("/data"), cancelled=cancelled)
    report.add(DispatchResult("a@example.com", SendStatus.SUCCESS, attachment=Path("/data/a@example.com/x.pdf")))
    report.add(DispatchResult("b@example.com", SendStatus.FAILED, reason="client unreachable"))
    report.add(DispatchResult("c@example.com", SendStatus.SUCCESS, attachment=Path("/data/c@example.com/y.txt")))
    return report


class TestReportEmitter:
    """Tests for ReportEmitter."""

    def test_render_only_failures_by_default(self):
        """Test that successes are silent by default."""
        lines = ReportEmitter().render(_report())

        assert lines == ["b@example.com: error: client unreachable"]

    def test_render_verbose_keeps_order(self):
        """Test that verbose output includes successes in discovery order."""
        lines = ReportEmitter(verbose=True).render(_report())

        assert lines == [
            "a@example.com: sent x.pdf",
            "b@example.com: error: client unreachable",
            "c@example.com: sent y.txt",
        ]

    def test_render_empty_report(self):
        """Test rendering a report with no results."""
        assert ReportEmitter(verbose=True).render(BatchReport()) == []

    def test_summary(self):
        """Test the totals line."""
        assert ReportEmitter().summary(_report()) == "Total: 3, sent: 2, failed: 1"

    def test_summary_cancelled(self):
        """Test the totals line for a cancelled run."""
        assert ReportEmitter().summary(_report(cancelled=True)).endswith("(cancelled)")
