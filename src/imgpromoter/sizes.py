"""Collect image sizes for the size check.

Lookups are I/O bound and independent per digest, so they run on a bounded
thread pool. The first failure cancels lookups that have not started yet;
lookups already running are allowed to finish before the error is raised.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path

import yaml  # type: ignore[import-untyped]

from imgpromoter.registry.errors import PromotionError
from imgpromoter.registry.types import Digest, PromotionEdge
from imgpromoter.schemas.validator import validate_data
from imgpromoter.utils.exec import ExecError, run_command

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8

SizeFetcher = Callable[[PromotionEdge], int]


class SizeLookupError(PromotionError):
    """An image size could not be determined."""

    def __init__(self, digest: Digest, reason: str) -> None:
        super().__init__(f"size lookup failed for {digest}: {reason}")
        self.digest = digest


def _one_edge_per_digest(edges: Iterable[PromotionEdge]) -> dict[Digest, PromotionEdge]:
    chosen: dict[Digest, PromotionEdge] = {}
    for edge in sorted(edges):
        chosen.setdefault(edge.digest, edge)
    return chosen


def collect_digest_sizes(
    edges: Iterable[PromotionEdge],
    fetch: SizeFetcher,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> dict[Digest, int]:
    """Look up the size in bytes of every digest referenced by edges.

    Args:
        edges: Edges whose digests need sizes; each digest is fetched once
        fetch: Returns the size in bytes of the image an edge points at
        max_workers: Upper bound on concurrent lookups

    Returns:
        Mapping of digest to size in bytes

    Raises:
        SizeLookupError: For the first lookup that fails
    """
    if max_workers < 1:
        raise ValueError("max_workers must be at least 1")

    targets = _one_edge_per_digest(edges)
    sizes: dict[Digest, int] = {}
    first_error: SizeLookupError | None = None

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures: dict[Future[int], Digest] = {
            executor.submit(fetch, edge): digest for digest, edge in targets.items()
        }
        for future in as_completed(futures):
            if future.cancelled():
                continue
            digest = futures[future]
            try:
                sizes[digest] = future.result()
            except Exception as exc:
                if first_error is not None:
                    logger.debug("size lookup for %s also failed: %s", digest, exc)
                    continue
                if isinstance(exc, SizeLookupError):
                    first_error = exc
                else:
                    first_error = SizeLookupError(digest, str(exc))
                    first_error.__cause__ = exc
                for pending in futures:
                    pending.cancel()

    if first_error is not None:
        raise first_error

    logger.debug("collected sizes for %d digest(s)", len(sizes))
    return sizes


def _crane_manifest(reference: str) -> dict:
    result = run_command(["crane", "manifest", reference], cwd=Path.cwd())
    return json.loads(result.stdout)


def _manifest_size(repository: str, document: dict) -> int:
    if "manifests" in document:
        # Image index: the size is the sum of every platform image.
        return sum(
            _manifest_size(repository, _crane_manifest(f"{repository}@{child['digest']}"))
            for child in document["manifests"]
        )
    layers = document.get("layers", [])
    return document.get("config", {}).get("size", 0) + sum(layer["size"] for layer in layers)


def crane_size_fetcher(edge: PromotionEdge) -> int:
    """Size of the source image of an edge, as reported by ``crane manifest``.

    Raises:
        SizeLookupError: If crane fails or prints an unreadable manifest
    """
    repository = f"{edge.src_registry.name}/{edge.image_name}"
    try:
        return _manifest_size(repository, _crane_manifest(f"{repository}@{edge.digest}"))
    except ExecError as exc:
        raise SizeLookupError(edge.digest, str(exc)) from exc
    except (json.JSONDecodeError, KeyError, TypeError) as exc:
        raise SizeLookupError(edge.digest, f"unreadable manifest: {exc}") from exc


def load_size_file(path: Path) -> dict[Digest, int]:
    """Load a digest -> size-in-bytes mapping from a YAML or JSON file.

    Raises:
        SizeLookupError: If the file cannot be read or fails validation
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise SizeLookupError(str(path), f"cannot read size file: {exc}") from exc

    ok, errors = validate_data(data, "digest_sizes", strict=False)
    if not ok:
        raise SizeLookupError(str(path), "; ".join(errors))
    return {str(digest): int(size) for digest, size in data.items()}
