"""File manifest generation for non-image artifact promotion."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from pathlib import Path

CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class FileEntry:
    """A file to promote, addressed by its path relative to the base dir."""

    name: str
    sha256: str


@dataclass
class FileManifest:
    """Every file below a base directory with its content hash."""

    files: list[FileEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        return {"files": [{"name": f.name, "sha256": f.sha256} for f in self.files]}


@dataclass
class GenerateManifestOptions:
    """Parameters for a hash-files operation."""

    # Directory containing the files to hash
    base_dir: Path | None = None


def compute_sha256_for_file(path: Path) -> str:
    """Hex SHA-256 of a file's contents."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def generate_file_manifest(options: GenerateManifestOptions) -> FileManifest:
    """Hash every regular file below ``options.base_dir``.

    Returns:
        FileManifest sorted by relative POSIX path

    Raises:
        ValueError: If base_dir is not set
        RuntimeError: If the tree cannot be walked or a file cannot be hashed
    """
    if options.base_dir is None or str(options.base_dir) == "":
        raise ValueError("must specify base_dir")

    base_dir = Path(options.base_dir)
    if not base_dir.is_dir():
        raise RuntimeError(f"error walking path {str(base_dir)!r}: not a directory")

    manifest = FileManifest()
    for path in sorted(base_dir.rglob("*")):
        if not path.is_file():
            continue
        try:
            sha256 = compute_sha256_for_file(path)
        except OSError as e:
            raise RuntimeError(f"error hashing file {str(path)!r}: {e}") from e
        manifest.files.append(
            FileEntry(name=path.relative_to(base_dir).as_posix(), sha256=sha256)
        )

    manifest.files.sort(key=lambda f: f.name)
    return manifest
