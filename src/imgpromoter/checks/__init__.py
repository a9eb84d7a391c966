"""Safety checks evaluated against promotion edge sets."""

from imgpromoter.checks.base import BaselineCheck, EdgeSet, StandaloneCheck
from imgpromoter.checks.removal import ImageRemovalCheck
from imgpromoter.checks.runner import CheckReport, CheckResult, run_checks, write_markdown_report
from imgpromoter.checks.size import ImageSizeCheck

__all__ = [
    "BaselineCheck",
    "CheckReport",
    "CheckResult",
    "EdgeSet",
    "ImageRemovalCheck",
    "ImageSizeCheck",
    "StandaloneCheck",
    "run_checks",
    "write_markdown_report",
]
