"""Error types raised by edge derivation and returned by promotion checks."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from imgpromoter.registry.types import bytes_to_mb

if TYPE_CHECKING:
    from imgpromoter.registry.types import PromotionEdge


class PromotionError(Exception):
    """Base class for every imgpromoter error."""


class MalformedManifestError(PromotionError):
    """A manifest cannot be turned into promotion edges."""

    def __init__(self, message: str, filepath: str | None = None) -> None:
        if filepath:
            message = f"{filepath}: {message}"
        super().__init__(message)
        self.filepath = filepath


class OverlappingEdgesError(PromotionError):
    """Several digests would be written to the same destination tag."""

    def __init__(self, overlaps: Mapping[tuple[str, str, str], Iterable[PromotionEdge]]) -> None:
        self.overlaps = {key: tuple(sorted(edges)) for key, edges in overlaps.items()}
        lines = ["overlapping edges detected:"]
        for (dst, image, tag), edges in sorted(self.overlaps.items()):
            digests = ", ".join(sorted({e.digest for e in edges}))
            lines.append(f"  {dst}/{image}:{tag} <- {digests}")
        super().__init__("\n".join(lines))


class CheckError(PromotionError):
    """Base class for violations reported by promotion checks.

    Subclasses compare by value so callers can assert on the exact violation.
    """

    def _key(self) -> tuple:
        return (str(self),)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._key() == other._key()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self._key()))


class ImageRemovalError(CheckError):
    """Images present in the baseline lost every digest in the proposal."""

    def __init__(self, removed_images: Iterable[str]) -> None:
        self.removed_images = tuple(sorted(removed_images))
        super().__init__(
            "The following images were removed in this pull request: "
            + ", ".join(self.removed_images)
        )

    def _key(self) -> tuple:
        return self.removed_images


class ImageSizeError(CheckError):
    """Images over the size ceiling, or with missing/invalid size data."""

    def __init__(
        self,
        max_image_size: int,
        oversized_images: Mapping[str, int],
        invalid_images: Mapping[str, int],
    ) -> None:
        self.max_image_size = max_image_size
        self.oversized_images = dict(oversized_images)
        self.invalid_images = dict(invalid_images)
        super().__init__(self._render())

    def _render(self) -> str:
        lines = []
        if self.oversized_images:
            lines.append(
                f"The following images were over the max file size of {self.max_image_size}MB:"
            )
            for name, size in sorted(self.oversized_images.items()):
                lines.append(f"{name} ({bytes_to_mb(size)}MB)")
        if self.invalid_images:
            lines.append("The following images had an invalid file size:")
            for name, size in sorted(self.invalid_images.items()):
                lines.append(f"{name} ({size} bytes)")
        return "\n".join(lines)

    def _key(self) -> tuple:
        return (
            self.max_image_size,
            tuple(sorted(self.oversized_images.items())),
            tuple(sorted(self.invalid_images.items())),
        )
