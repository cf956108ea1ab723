"""Human-readable rendering of a batch report."""

from typing import List

from .models import BatchReport


class ReportEmitter:
    """Renders one display line per recipient outcome.

    Failures are always rendered. Successes only when ``verbose`` is set.
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def render(self, report: BatchReport) -> List[str]:
        """Render report lines in discovery order."""
        lines = []
        for result in report:
            if result.succeeded:
                if self.verbose:
                    name = result.attachment.name if result.attachment else "attachment"
                    lines.append(f"{result.recipient}: sent {name}")
            else:
                lines.append(f"{result.recipient}: error: {result.reason}")
        return lines

    def summary(self, report: BatchReport) -> str:
        """One-line totals for a report."""
        line = f"Total: {report.total}, sent: {len(report.successes)}, failed: {len(report.failures)}"
        if report.cancelled:
            line += " (cancelled)"
        return line
