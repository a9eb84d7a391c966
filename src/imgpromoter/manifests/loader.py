"""Load promoter manifests from YAML files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from imgpromoter.registry.errors import PromotionError
from imgpromoter.registry.types import Image, Manifest, RegistryContext
from imgpromoter.schemas.validator import validate_data

logger = logging.getLogger(__name__)

MANIFEST_SCHEMA = "manifest"
MANIFEST_SUFFIXES = (".yaml", ".yml")


class ManifestLoadError(PromotionError):
    """A manifest file cannot be read, parsed, or fails schema validation."""


def manifest_from_dict(data: dict[str, Any], filepath: str | None = None) -> Manifest:
    """Build a Manifest from a decoded document.

    Raises:
        ManifestLoadError: If the document does not match the manifest schema
    """
    ok, errors = validate_data(data, MANIFEST_SCHEMA, strict=False)
    if not ok:
        where = f"{filepath}: " if filepath else ""
        raise ManifestLoadError(
            f"{where}manifest schema validation failed:\n"
            + "\n".join(f"  - {msg}" for msg in errors)
        )

    registries = tuple(
        RegistryContext(
            name=r["name"],
            service_account=r.get("service-account", ""),
            src=r.get("src", False),
        )
        for r in data["registries"]
    )
    images = tuple(
        Image(
            name=i["name"],
            dmap={digest: tuple(tags) for digest, tags in i["dmap"].items()},
        )
        for i in data["images"]
    )
    return Manifest(registries=registries, images=images, filepath=filepath)


def parse_manifest(text: str, filepath: str | None = None) -> Manifest:
    """Parse manifest YAML text.

    Raises:
        ManifestLoadError: On YAML syntax errors or schema violations
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ManifestLoadError(f"{filepath or '<string>'}: YAML parse error: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestLoadError(f"{filepath or '<string>'}: expected mapping at top level")
    return manifest_from_dict(data, filepath)


def load_manifest(path: Path) -> Manifest:
    """Load a single manifest file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestLoadError(f"Failed to read manifest {path}: {exc}") from exc
    return parse_manifest(text, str(path))


def find_manifest_files(root: Path) -> list[Path]:
    """Return manifest files under root in deterministic order."""
    if root.is_file():
        return [root]
    if not root.is_dir():
        raise ManifestLoadError(f"Manifest path not found: {root}")
    return sorted(
        p for p in root.rglob("*") if p.is_file() and p.suffix in MANIFEST_SUFFIXES
    )


def load_manifests(root: Path) -> list[Manifest]:
    """Load a manifest file, or every manifest below a directory."""
    paths = find_manifest_files(root)
    logger.debug("loading %d manifest(s) from %s", len(paths), root)
    return [load_manifest(p) for p in paths]
