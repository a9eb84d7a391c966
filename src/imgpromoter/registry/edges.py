"""Derive promotion edges from manifests."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from imgpromoter.registry.errors import MalformedManifestError, OverlappingEdgesError
from imgpromoter.registry.types import UNTAGGED, Manifest, PromotionEdge


def validate_manifest(manifest: Manifest) -> None:
    """Reject manifests whose sourcing cannot be decided unambiguously.

    Raises:
        MalformedManifestError: If the registry list is empty, no registry is
            flagged as source, the pinned source is not a flagged source of
            this manifest, or a registry name is both a source and a destination.
    """
    where = manifest.filepath
    if not manifest.registries:
        raise MalformedManifestError("manifest has no registries", where)

    flagged = [rc for rc in manifest.registries if rc.src]
    if not flagged:
        raise MalformedManifestError("no registry is flagged as source", where)

    if manifest.src_registry is not None and manifest.src_registry not in flagged:
        raise MalformedManifestError(
            f"source registry {manifest.src_registry.name!r} is not a source "
            "registry of this manifest",
            where,
        )

    src_names = {rc.name for rc in flagged}
    both = sorted(src_names & {rc.name for rc in manifest.destination_registries()})
    if both:
        raise MalformedManifestError(
            f"registry listed as both source and destination: {', '.join(both)}",
            where,
        )


def _manifest_edges(manifest: Manifest) -> Iterable[PromotionEdge]:
    sources = manifest.source_registries()
    destinations = manifest.destination_registries()
    for image in manifest.images:
        for digest, tags in image.dmap.items():
            for tag in tags or (UNTAGGED,):
                for src in sources:
                    for dst in destinations:
                        yield PromotionEdge(
                            image_name=image.name,
                            digest=digest,
                            tag=tag,
                            src_registry=src,
                            dst_registry=dst,
                        )


def check_overlapping_edges(edges: frozenset[PromotionEdge]) -> frozenset[PromotionEdge]:
    """Ensure no destination tag is claimed by more than one digest.

    Untagged edges never overlap since they are addressed by digest alone.
    """
    by_dst_tag: dict[tuple[str, str, str], set[PromotionEdge]] = defaultdict(set)
    for edge in edges:
        if edge.tag == UNTAGGED:
            continue
        by_dst_tag[(edge.dst_registry.name, edge.image_name, edge.tag)].add(edge)

    overlaps = {
        key: group
        for key, group in by_dst_tag.items()
        if len({e.digest for e in group}) > 1
    }
    if overlaps:
        raise OverlappingEdgesError(overlaps)
    return edges


def to_promotion_edges(manifests: Iterable[Manifest]) -> frozenset[PromotionEdge]:
    """Expand manifests into the deduplicated set of promotion edges.

    Args:
        manifests: Manifests to expand; order and repetition do not matter

    Returns:
        Frozen set of every (image, digest, tag, source, destination) edge

    Raises:
        MalformedManifestError: If any manifest has ambiguous or missing sourcing
        OverlappingEdgesError: If one destination tag would receive two digests
    """
    edges: set[PromotionEdge] = set()
    for manifest in manifests:
        validate_manifest(manifest)
        edges.update(_manifest_edges(manifest))
    return check_overlapping_edges(frozenset(edges))
