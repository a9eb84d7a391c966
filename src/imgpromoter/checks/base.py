"""Check capabilities evaluated against promotion edge sets."""

from __future__ import annotations

from collections.abc import Set
from typing import Protocol, runtime_checkable

from imgpromoter.registry.errors import CheckError
from imgpromoter.registry.types import PromotionEdge

EdgeSet = Set[PromotionEdge]


@runtime_checkable
class BaselineCheck(Protocol):
    """Detects regressions between a trusted baseline and a proposed edge set."""

    def compare(self, baseline: EdgeSet, proposed: EdgeSet) -> CheckError | None: ...


@runtime_checkable
class StandaloneCheck(Protocol):
    """Validates edges and side data already populated on the check instance."""

    def run(self) -> CheckError | None: ...
