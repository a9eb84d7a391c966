"""Pytest configuration and fixtures for imgpromoter tests."""
import pytest

from imgpromoter.registry import Image, Manifest, RegistryContext


@pytest.fixture
def dest_rc() -> RegistryContext:
    return RegistryContext(name="gcr.io/bar", service_account="robot")


@pytest.fixture
def src_rc() -> RegistryContext:
    return RegistryContext(name="gcr.io/foo", service_account="robot", src=True)


@pytest.fixture
def src_rc2() -> RegistryContext:
    return RegistryContext(name="gcr.io/foo2", service_account="robot", src=True)


@pytest.fixture
def make_manifest(dest_rc, src_rc):
    """Build a manifest over [dest, src] unless registries are given."""

    def _make(
        *images: Image,
        registries: tuple[RegistryContext, ...] | None = None,
        src_registry: RegistryContext | None = None,
    ) -> Manifest:
        return Manifest(
            registries=registries if registries is not None else (dest_rc, src_rc),
            images=images,
            src_registry=src_registry,
        )

    return _make


MANIFEST_YAML = """\
registries:
- name: gcr.io/foo
  service-account: robot
  src: true
- name: gcr.io/bar
  service-account: robot
images:
- name: a
  dmap:
    "sha256:000": ["0.9"]
"""


@pytest.fixture
def manifest_yaml() -> str:
    return MANIFEST_YAML
