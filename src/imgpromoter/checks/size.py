"""Image size check."""

from __future__ import annotations

from dataclasses import dataclass, field

from imgpromoter.checks.base import EdgeSet
from imgpromoter.registry.errors import ImageSizeError
from imgpromoter.registry.types import Digest, mb_to_bytes


@dataclass
class ImageSizeCheck:
    """Rejects images larger than ``max_image_size`` megabytes.

    ``digest_size_bytes`` and ``edges`` are filled in by the caller before
    ``run()``. A digest without size data counts as size 0, which is reported
    as invalid rather than acceptably small.

    Attributes:
        max_image_size: Ceiling in decimal megabytes (1 MB = 1,000,000 bytes)
        digest_size_bytes: Size in bytes per digest, fetched externally
        edges: Proposed promotion edges to validate
    """

    max_image_size: int
    digest_size_bytes: dict[Digest, int] = field(default_factory=dict)
    edges: EdgeSet = field(default_factory=frozenset)
    check_id: str = "image-size"

    def run(self) -> ImageSizeError | None:
        threshold = mb_to_bytes(self.max_image_size)
        oversized: dict[str, int] = {}
        invalid: dict[str, int] = {}

        # Sorted so an image name with several digests resolves the same way
        # on every run: the last violating digest in sort order is reported.
        for edge in sorted(self.edges):
            size = self.digest_size_bytes.get(edge.digest, 0)
            if size > threshold:
                oversized[edge.image_name] = size
            elif size <= 0:
                invalid[edge.image_name] = size

        if oversized or invalid:
            return ImageSizeError(self.max_image_size, oversized, invalid)
        return None
