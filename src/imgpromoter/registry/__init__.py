"""Registry manifest model and promotion edge derivation."""

from imgpromoter.registry.edges import (
    check_overlapping_edges,
    to_promotion_edges,
    validate_manifest,
)
from imgpromoter.registry.errors import (
    CheckError,
    ImageRemovalError,
    ImageSizeError,
    MalformedManifestError,
    OverlappingEdgesError,
    PromotionError,
)
from imgpromoter.registry.types import (
    UNTAGGED,
    Digest,
    DigestTags,
    Image,
    Manifest,
    PromotionEdge,
    RegistryContext,
    RegistryName,
    Tag,
    bytes_to_mb,
    mb_to_bytes,
)

__all__ = [
    "UNTAGGED",
    "CheckError",
    "Digest",
    "DigestTags",
    "Image",
    "ImageRemovalError",
    "ImageSizeError",
    "MalformedManifestError",
    "Manifest",
    "OverlappingEdgesError",
    "PromotionEdge",
    "PromotionError",
    "RegistryContext",
    "RegistryName",
    "Tag",
    "bytes_to_mb",
    "check_overlapping_edges",
    "mb_to_bytes",
    "to_promotion_edges",
    "validate_manifest",
]
