"""Unit tests for the image size check."""

from __future__ import annotations

import pytest

from imgpromoter.checks import ImageSizeCheck, StandaloneCheck
from imgpromoter.registry import Image, ImageSizeError, mb_to_bytes, to_promotion_edges

IMAGE_FOO = Image(name="foo", dmap={"sha256:000": ("0.9",)})
IMAGE_BAR = Image(name="bar", dmap={"sha256:111": ("0.9",)})


def _check(make_manifest, images, sizes, max_image_size=1) -> ImageSizeCheck:
    check = ImageSizeCheck(max_image_size=max_image_size)
    check.edges = to_promotion_edges([make_manifest(*images)])
    assert len(check.edges) == len(sizes)
    for edge in check.edges:
        check.digest_size_bytes[edge.digest] = sizes[edge.digest]
    return check


@pytest.mark.parametrize(
    ("images", "sizes", "expected"),
    [
        pytest.param(
            (IMAGE_FOO,),
            {"sha256:000": mb_to_bytes(1)},
            None,
            id="size equal to the max size",
        ),
        pytest.param(
            (IMAGE_FOO,),
            {"sha256:000": mb_to_bytes(5)},
            ImageSizeError(1, {"foo": mb_to_bytes(5)}, {}),
            id="size over the max size",
        ),
        pytest.param(
            (IMAGE_FOO, IMAGE_BAR),
            {"sha256:000": mb_to_bytes(5), "sha256:111": mb_to_bytes(10)},
            ImageSizeError(1, {"foo": mb_to_bytes(5), "bar": mb_to_bytes(10)}, {}),
            id="multiple images over the max size",
        ),
        pytest.param(
            (IMAGE_FOO, IMAGE_BAR),
            {"sha256:000": 0, "sha256:111": mb_to_bytes(-5)},
            ImageSizeError(1, {}, {"foo": 0, "bar": mb_to_bytes(-5)}),
            id="sizes not positive",
        ),
    ],
)
def test_run(make_manifest, images, sizes, expected) -> None:
    assert _check(make_manifest, images, sizes).run() == expected


def test_oversized_error_exposes_violations(make_manifest) -> None:
    err = _check(make_manifest, (IMAGE_FOO,), {"sha256:000": 5_000_000}).run()

    assert isinstance(err, ImageSizeError)
    assert err.max_image_size == 1
    assert err.oversized_images == {"foo": 5_000_000}
    assert err.invalid_images == {}


def test_one_byte_over_threshold_fails(make_manifest) -> None:
    err = _check(make_manifest, (IMAGE_FOO,), {"sha256:000": 1_000_001}).run()

    assert err == ImageSizeError(1, {"foo": 1_000_001}, {})


def test_one_byte_passes(make_manifest) -> None:
    assert _check(make_manifest, (IMAGE_FOO,), {"sha256:000": 1}).run() is None


def test_large_negative_size_is_invalid_not_oversized(make_manifest) -> None:
    err = _check(make_manifest, (IMAGE_FOO,), {"sha256:000": -10**12}).run()

    assert err == ImageSizeError(1, {}, {"foo": -10**12})


def test_mixed_oversized_and_invalid(make_manifest) -> None:
    err = _check(
        make_manifest, (IMAGE_FOO, IMAGE_BAR), {"sha256:000": 2_000_000, "sha256:111": 0}
    ).run()

    assert err == ImageSizeError(1, {"foo": 2_000_000}, {"bar": 0})


def test_missing_size_data_is_invalid(make_manifest) -> None:
    check = ImageSizeCheck(
        max_image_size=1,
        edges=to_promotion_edges([make_manifest(IMAGE_FOO)]),
    )

    assert check.run() == ImageSizeError(1, {}, {"foo": 0})


def test_no_edges_passes() -> None:
    assert ImageSizeCheck(max_image_size=1).run() is None


def test_image_with_several_digests_reports_last_violating_digest(make_manifest) -> None:
    image = Image(name="foo", dmap={"sha256:000": (), "sha256:111": (), "sha256:222": ()})
    check = ImageSizeCheck(
        max_image_size=1,
        digest_size_bytes={"sha256:000": 3_000_000, "sha256:111": 2_000_000, "sha256:222": 10},
        edges=to_promotion_edges([make_manifest(image)]),
    )

    assert check.run() == ImageSizeError(1, {"foo": 2_000_000}, {})


def test_check_instances_do_not_share_side_data() -> None:
    first = ImageSizeCheck(max_image_size=1)
    second = ImageSizeCheck(max_image_size=1)
    first.digest_size_bytes["sha256:000"] = 1

    assert second.digest_size_bytes == {}


def test_is_a_standalone_check() -> None:
    assert isinstance(ImageSizeCheck(max_image_size=1), StandaloneCheck)
