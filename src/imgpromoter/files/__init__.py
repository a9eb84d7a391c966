"""File promotion manifests: content hashing and reading."""

from imgpromoter.files.hashing import (
    FileEntry,
    FileManifest,
    GenerateManifestOptions,
    generate_file_manifest,
)
from imgpromoter.files.manifest import (
    FilePromotionManifest,
    Filestore,
    PromoteFilesOptions,
    read_file_manifest,
)

__all__ = [
    "FileEntry",
    "FileManifest",
    "FilePromotionManifest",
    "Filestore",
    "GenerateManifestOptions",
    "PromoteFilesOptions",
    "generate_file_manifest",
    "read_file_manifest",
]
