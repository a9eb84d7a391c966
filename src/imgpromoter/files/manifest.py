"""Read file promotion manifests: the stores to copy between and the files to copy."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from imgpromoter.files.hashing import FileEntry
from imgpromoter.manifests.loader import ManifestLoadError, find_manifest_files
from imgpromoter.schemas.validator import validate_data

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Filestore:
    """A bucket prefix files are promoted from (src) or to."""

    base: str
    service_account: str = ""
    src: bool = False


@dataclass(frozen=True)
class FilePromotionManifest:
    """Filestores plus every file that must exist in each destination store."""

    filestores: tuple[Filestore, ...]
    files: tuple[FileEntry, ...]

    def source_filestore(self) -> Filestore:
        return next(fs for fs in self.filestores if fs.src)

    def to_dict(self) -> dict[str, Any]:
        stores = []
        for fs in self.filestores:
            store: dict[str, Any] = {"base": fs.base}
            if fs.service_account:
                store["service-account"] = fs.service_account
            if fs.src:
                store["src"] = True
            stores.append(store)
        return {
            "filestores": stores,
            "files": [{"name": f.name, "sha256": f.sha256} for f in self.files],
        }


@dataclass
class PromoteFilesOptions:
    """Where to find the two halves of a file promotion manifest."""

    # YAML file listing the filestores
    filestores_path: Path | None = None
    # YAML file, or directory of YAML files, listing the files
    files_path: Path | None = None


def _load_document(path: Path, schema_name: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ManifestLoadError(f"Failed to read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ManifestLoadError(f"{path}: YAML parse error: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestLoadError(f"{path}: expected mapping at top level")

    ok, errors = validate_data(data, schema_name, strict=False)
    if not ok:
        raise ManifestLoadError(
            f"{path}: {schema_name} schema validation failed:\n"
            + "\n".join(f"  - {msg}" for msg in errors)
        )
    return data


def read_filestores(path: Path) -> tuple[Filestore, ...]:
    """Load the filestores file; exactly one store must be flagged src."""
    data = _load_document(path, "filestores")
    stores = tuple(
        Filestore(
            base=fs["base"],
            service_account=fs.get("service-account", ""),
            src=fs.get("src", False),
        )
        for fs in data["filestores"]
    )
    sources = [fs.base for fs in stores if fs.src]
    if len(sources) != 1:
        raise ManifestLoadError(
            f"{path}: expected exactly one source filestore, found {len(sources)}"
        )
    return stores


def read_files(path: Path) -> tuple[FileEntry, ...]:
    """Load one files document, or concatenate every document below a directory."""
    files: list[FileEntry] = []
    for doc in find_manifest_files(path):
        data = _load_document(doc, "files")
        files.extend(FileEntry(name=f["name"], sha256=f["sha256"]) for f in data["files"])
    return tuple(files)


def read_file_manifest(options: PromoteFilesOptions) -> FilePromotionManifest:
    """Combine the filestores and files documents into one manifest.

    Raises:
        ValueError: If either path is not set
        ManifestLoadError: If a document is unreadable, invalid, or a file
            name is listed twice with different hashes
    """
    if options.filestores_path is None:
        raise ValueError("must specify filestores_path")
    if options.files_path is None:
        raise ValueError("must specify files_path")

    filestores = read_filestores(Path(options.filestores_path))
    files = read_files(Path(options.files_path))

    seen: dict[str, str] = {}
    for entry in files:
        previous = seen.setdefault(entry.name, entry.sha256)
        if previous != entry.sha256:
            raise ManifestLoadError(
                f"file {entry.name!r} listed with conflicting hashes {previous} and {entry.sha256}"
            )

    logger.debug(
        "file manifest: %d filestore(s), %d file(s)", len(filestores), len(files)
    )
    return FilePromotionManifest(filestores=filestores, files=files)
