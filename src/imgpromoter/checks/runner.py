"""Run promotion checks over edge sets and collect their verdicts.

Each check is evaluated on its own; a violation from one check never stops
or influences the others. Violations are collected, not logged or raised,
so the caller decides whether to abort the promotion.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal, TextIO

from imgpromoter.checks.base import BaselineCheck, EdgeSet, StandaloneCheck
from imgpromoter.registry.errors import CheckError


@dataclass
class CheckResult:
    """Outcome of a single check."""

    check_id: str
    status: Literal["pass", "fail", "skip"]
    message: str
    error: CheckError | None = None


@dataclass
class CheckReport:
    """Outcome of every check in one run."""

    results: list[CheckResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.status != "fail" for r in self.results)

    @property
    def status(self) -> Literal["passed", "failed"]:
        return "passed" if self.passed else "failed"

    @property
    def errors(self) -> list[CheckError]:
        return [r.error for r in self.results if r.error is not None]

    def counts(self) -> dict[str, int]:
        return {
            "passed": sum(1 for r in self.results if r.status == "pass"),
            "failed": sum(1 for r in self.results if r.status == "fail"),
            "skipped": sum(1 for r in self.results if r.status == "skip"),
        }


def _check_id(check: object) -> str:
    return getattr(check, "check_id", type(check).__name__)


def _result(check_id: str, error: CheckError | None) -> CheckResult:
    if error is None:
        return CheckResult(check_id=check_id, status="pass", message="passed")
    return CheckResult(check_id=check_id, status="fail", message=str(error), error=error)


def run_checks(
    proposed: EdgeSet,
    *,
    baseline: EdgeSet | None = None,
    comparisons: Sequence[BaselineCheck] = (),
    standalone: Sequence[StandaloneCheck] = (),
) -> CheckReport:
    """Evaluate checks against a proposed edge set.

    Args:
        proposed: Edge set derived from the proposed manifests
        baseline: Edge set derived from the trusted manifests, if any
        comparisons: Checks comparing baseline and proposed edges
        standalone: Checks whose edges and side data are already populated

    Returns:
        CheckReport with one result per check, in the order given
    """
    report = CheckReport()

    for check in comparisons:
        check_id = _check_id(check)
        if baseline is None:
            report.results.append(
                CheckResult(check_id=check_id, status="skip", message="no baseline supplied")
            )
            continue
        report.results.append(_result(check_id, check.compare(baseline, proposed)))

    for check in standalone:
        report.results.append(_result(_check_id(check), check.run()))

    return report


def write_markdown_report(f: TextIO, report: CheckReport) -> None:
    """Write a human-readable markdown report."""
    f.write("# Promotion Check Report\n\n")

    status_emoji = "✅" if report.passed else "❌"
    f.write(f"**Status**: {status_emoji} {report.status.upper()}\n\n")

    counts = report.counts()
    f.write("## Summary\n\n")
    f.write(f"- Passed: {counts['passed']}\n")
    f.write(f"- Failed: {counts['failed']}\n")
    f.write(f"- Skipped: {counts['skipped']}\n\n")

    f.write("## Detailed Checks\n\n")
    for result in report.results:
        status_symbol = {"pass": "✅", "fail": "❌", "skip": "⏭️"}[result.status]
        f.write(f"### {status_symbol} {result.check_id}\n\n")
        f.write(f"{result.message}\n\n")
