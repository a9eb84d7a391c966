"""Image removal check."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

from imgpromoter.checks.base import EdgeSet
from imgpromoter.registry.errors import ImageRemovalError
from imgpromoter.registry.types import Digest


def _digests_by_image(edges: EdgeSet) -> dict[str, set[Digest]]:
    index: dict[str, set[Digest]] = defaultdict(set)
    for edge in edges:
        index[edge.image_name].add(edge.digest)
    return index


@dataclass(frozen=True)
class ImageRemovalCheck:
    """Flags images whose every baseline digest vanished from the proposal.

    An image still counts as present if at least one of its baseline digests
    is proposed again, whatever the registries or tags involved.
    """

    check_id: str = "image-removal"

    def compare(self, baseline: EdgeSet, proposed: EdgeSet) -> ImageRemovalError | None:
        baseline_index = _digests_by_image(baseline)
        proposed_index = _digests_by_image(proposed)

        removed = [
            name
            for name, digests in baseline_index.items()
            if not digests & proposed_index.get(name, set())
        ]
        if removed:
            return ImageRemovalError(removed)
        return None
