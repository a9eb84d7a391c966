"""Baseline edges from the manifests committed at a git revision."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from imgpromoter.manifests.loader import MANIFEST_SUFFIXES, ManifestLoadError, parse_manifest
from imgpromoter.registry.edges import to_promotion_edges
from imgpromoter.registry.types import Manifest, PromotionEdge
from imgpromoter.utils.exec import ExecError, run_git

logger = logging.getLogger(__name__)


def repo_relative_path(path: Path, repo_root: Path) -> str:
    """POSIX form of path relative to repo_root, as git pathspecs expect.

    Raises:
        ManifestLoadError: If path lies outside repo_root
    """
    try:
        relative = path.resolve().relative_to(repo_root.resolve())
    except ValueError as exc:
        raise ManifestLoadError(
            f"Manifest path {path} is not inside repository {repo_root}"
        ) from exc
    return relative.as_posix()


def list_manifest_files_at(repo_root: Path, revision: str, manifest_path: str) -> list[str]:
    """List manifest files at or under manifest_path as committed at revision."""
    result = run_git(
        ["ls-tree", "-r", "--name-only", revision, "--", manifest_path],
        repo_root=repo_root,
    )
    return sorted(
        line
        for line in result.stdout.splitlines()
        if PurePosixPath(line).suffix in MANIFEST_SUFFIXES
    )


def load_manifests_at(repo_root: Path, revision: str, manifest_path: str) -> list[Manifest]:
    """Load every manifest at or under manifest_path at revision without a checkout.

    An empty result is an error rather than an empty baseline.

    Raises:
        ManifestLoadError: If git cannot read the revision, no manifest exists
            there, or a manifest is invalid
    """
    try:
        paths = list_manifest_files_at(repo_root, revision, manifest_path)
        logger.debug("baseline %s: %d manifest(s) under %s", revision, len(paths), manifest_path)
        if not paths:
            raise ManifestLoadError(f"No manifest files under {manifest_path!r} at {revision}")
        manifests = []
        for path in paths:
            text = run_git(["show", f"{revision}:{path}"], repo_root=repo_root).stdout
            manifests.append(parse_manifest(text, f"{revision}:{path}"))
    except ExecError as exc:
        raise ManifestLoadError(f"Failed to read manifests at {revision}: {exc}") from exc
    return manifests


def baseline_edges_at(
    repo_root: Path, revision: str, manifest_path: str
) -> frozenset[PromotionEdge]:
    """Derive the trusted baseline edge set from manifests at revision."""
    return to_promotion_edges(load_manifests_at(repo_root, revision, manifest_path))
