"""Unit tests for promotion edge derivation."""

from __future__ import annotations

import pytest

from imgpromoter.registry import (
    UNTAGGED,
    Image,
    MalformedManifestError,
    Manifest,
    OverlappingEdgesError,
    PromotionEdge,
    RegistryContext,
    to_promotion_edges,
)


def test_empty_manifest_list_yields_no_edges() -> None:
    assert to_promotion_edges([]) == frozenset()


def test_one_edge_per_tag_and_destination(make_manifest, src_rc, dest_rc) -> None:
    image = Image(name="a", dmap={"sha256:000": ("0.9", "latest")})
    edges = to_promotion_edges([make_manifest(image)])

    assert edges == {
        PromotionEdge("a", "sha256:000", "0.9", src_rc, dest_rc),
        PromotionEdge("a", "sha256:000", "latest", src_rc, dest_rc),
    }


def test_untagged_digest_yields_untagged_edge(make_manifest, src_rc, dest_rc) -> None:
    edges = to_promotion_edges([make_manifest(Image(name="a", dmap={"sha256:000": ()}))])

    assert edges == {PromotionEdge("a", "sha256:000", UNTAGGED, src_rc, dest_rc)}


def test_every_source_feeds_every_destination(src_rc, src_rc2, dest_rc) -> None:
    dest2 = RegistryContext(name="eu.gcr.io/bar", service_account="robot")
    manifest = Manifest(
        registries=(dest_rc, src_rc, src_rc2, dest2),
        images=(Image(name="a", dmap={"sha256:000": ("0.9",)}),),
    )

    edges = to_promotion_edges([manifest])

    assert {(e.src_registry.name, e.dst_registry.name) for e in edges} == {
        ("gcr.io/foo", "gcr.io/bar"),
        ("gcr.io/foo", "eu.gcr.io/bar"),
        ("gcr.io/foo2", "gcr.io/bar"),
        ("gcr.io/foo2", "eu.gcr.io/bar"),
    }


def test_pinned_source_restricts_edges(src_rc, src_rc2, dest_rc) -> None:
    manifest = Manifest(
        registries=(dest_rc, src_rc, src_rc2),
        images=(Image(name="a", dmap={"sha256:000": ("0.9",)}),),
        src_registry=src_rc2,
    )

    edges = to_promotion_edges([manifest])

    assert edges == {PromotionEdge("a", "sha256:000", "0.9", src_rc2, dest_rc)}


def test_derivation_is_deterministic_and_idempotent(make_manifest) -> None:
    first = make_manifest(
        Image(name="a", dmap={"sha256:000": ("0.9",), "sha256:111": ()}),
        Image(name="b", dmap={"sha256:222": ("1.0",)}),
    )
    second = make_manifest(Image(name="c", dmap={"sha256:333": ("2.0",)}))

    edges = to_promotion_edges([first, second])

    assert to_promotion_edges([first, second]) == edges
    assert to_promotion_edges([second, first]) == edges
    assert to_promotion_edges([first, second, first]) == edges
    assert len(edges) == 4


def test_derivation_does_not_mutate_manifest(make_manifest) -> None:
    dmap = {"sha256:000": ("0.9",)}
    manifest = make_manifest(Image(name="a", dmap=dmap))

    to_promotion_edges([manifest])

    assert dmap == {"sha256:000": ("0.9",)}


def test_rejects_empty_registry_list() -> None:
    manifest = Manifest(registries=(), images=())

    with pytest.raises(MalformedManifestError, match="no registries"):
        to_promotion_edges([manifest])


def test_rejects_manifest_without_source(dest_rc) -> None:
    manifest = Manifest(registries=(dest_rc,), images=())

    with pytest.raises(MalformedManifestError, match="flagged as source"):
        to_promotion_edges([manifest])


def test_rejects_pinned_source_outside_manifest(make_manifest, src_rc2) -> None:
    manifest = make_manifest(src_registry=src_rc2)

    with pytest.raises(MalformedManifestError, match="gcr.io/foo2"):
        to_promotion_edges([manifest])


def test_rejects_registry_both_source_and_destination(src_rc) -> None:
    manifest = Manifest(
        registries=(src_rc, RegistryContext(name=src_rc.name, service_account="robot")),
        images=(),
    )

    with pytest.raises(MalformedManifestError, match="both source and destination"):
        to_promotion_edges([manifest])


def test_bad_manifest_fails_whole_derivation(make_manifest, dest_rc) -> None:
    good = make_manifest(Image(name="a", dmap={"sha256:000": ("0.9",)}))
    bad = Manifest(registries=(dest_rc,), images=(), filepath="bad.yaml")

    with pytest.raises(MalformedManifestError, match="^bad.yaml: "):
        to_promotion_edges([good, bad])


def test_rejects_tag_claimed_by_two_digests(make_manifest) -> None:
    first = make_manifest(Image(name="a", dmap={"sha256:000": ("0.9",)}))
    second = make_manifest(Image(name="a", dmap={"sha256:111": ("0.9",)}))

    with pytest.raises(OverlappingEdgesError) as exc_info:
        to_promotion_edges([first, second])

    assert list(exc_info.value.overlaps) == [("gcr.io/bar", "a", "0.9")]
    assert "sha256:000, sha256:111" in str(exc_info.value)


def test_untagged_digests_never_overlap(make_manifest) -> None:
    manifest = make_manifest(Image(name="a", dmap={"sha256:000": (), "sha256:111": ()}))

    assert len(to_promotion_edges([manifest])) == 2
