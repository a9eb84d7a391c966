"""Manifest loading from files and git revisions."""

from imgpromoter.manifests.baseline import (
    baseline_edges_at,
    load_manifests_at,
    repo_relative_path,
)
from imgpromoter.manifests.loader import (
    ManifestLoadError,
    load_manifest,
    load_manifests,
    manifest_from_dict,
    parse_manifest,
)

__all__ = [
    "ManifestLoadError",
    "baseline_edges_at",
    "load_manifest",
    "load_manifests",
    "load_manifests_at",
    "manifest_from_dict",
    "parse_manifest",
    "repo_relative_path",
]
