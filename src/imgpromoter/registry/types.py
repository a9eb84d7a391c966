"""Registry domain types for image promotion."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

RegistryName = str
Digest = str
Tag = str

# Mapping from a digest to every tag bound to it; an empty tuple means untagged.
DigestTags = Mapping[Digest, tuple[Tag, ...]]

UNTAGGED: Tag = ""

BYTES_PER_MB = 1_000_000


def mb_to_bytes(mb: int) -> int:
    """Convert decimal megabytes to bytes."""
    return mb * BYTES_PER_MB


def bytes_to_mb(size: int) -> int:
    """Convert bytes to whole decimal megabytes (truncating)."""
    return size // BYTES_PER_MB


@dataclass(frozen=True, order=True)
class RegistryContext:
    """A registry location (host + path prefix) taking part in a promotion."""

    name: RegistryName
    service_account: str = ""
    src: bool = False


@dataclass(frozen=True)
class Image:
    """All digests and tags declared for one image name."""

    name: str
    dmap: DigestTags = field(default_factory=dict)


@dataclass(frozen=True)
class Manifest:
    """Desired promotion state for one promotion unit.

    Every image must exist in every destination registry, copied from the
    source registry. ``src_registry`` pins one of the registries flagged as
    source; when it is None all flagged sources are used.
    """

    registries: tuple[RegistryContext, ...]
    images: tuple[Image, ...]
    src_registry: RegistryContext | None = None
    filepath: str | None = None

    def source_registries(self) -> tuple[RegistryContext, ...]:
        if self.src_registry is not None:
            return (self.src_registry,)
        return tuple(rc for rc in self.registries if rc.src)

    def destination_registries(self) -> tuple[RegistryContext, ...]:
        return tuple(rc for rc in self.registries if not rc.src)


@dataclass(frozen=True, order=True)
class PromotionEdge:
    """One copy obligation: image@digest:tag from a source to a destination."""

    image_name: str
    digest: Digest
    tag: Tag
    src_registry: RegistryContext
    dst_registry: RegistryContext

    @property
    def src_reference(self) -> str:
        return f"{self.src_registry.name}/{self.image_name}@{self.digest}"

    @property
    def dst_reference(self) -> str:
        ref = f"{self.dst_registry.name}/{self.image_name}"
        if self.tag:
            ref += f":{self.tag}"
        return f"{ref}@{self.digest}"
