"""Repository configuration loader.

Supports .imgpromoter/config.toml or .imgpromoter/config.json in the
repository holding the manifests.
"""

import json
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

CONFIG_DIR = ".imgpromoter"


@dataclass(frozen=True)
class PromoterConfig:
    """Check thresholds and lookup settings for a manifest repository."""

    max_image_size_mb: int = 2048
    size_lookup_workers: int = 8
    manifest_dir: str = "manifests"

    @classmethod
    def from_dict(cls, data: dict) -> "PromoterConfig":
        """Parse and validate config dict into PromoterConfig."""
        checks = data.get("checks", {})
        config = cls(
            max_image_size_mb=int(checks.get("max_image_size_mb", cls.max_image_size_mb)),
            size_lookup_workers=int(checks.get("size_lookup_workers", cls.size_lookup_workers)),
            manifest_dir=str(data.get("manifest_dir", cls.manifest_dir)),
        )
        if config.max_image_size_mb <= 0:
            raise ValueError("checks.max_image_size_mb must be positive")
        if config.size_lookup_workers <= 0:
            raise ValueError("checks.size_lookup_workers must be positive")
        return config

    def with_overrides(self, **overrides: object) -> "PromoterConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(repo_root: Path) -> PromoterConfig:
    """Load configuration from .imgpromoter/config.toml or config.json.

    Priority order:
    1. .imgpromoter/config.toml (preferred)
    2. .imgpromoter/config.json (fallback)
    3. defaults

    Raises:
        RuntimeError: If config file is malformed or invalid
    """
    config_dir = repo_root / CONFIG_DIR

    toml_path = config_dir / "config.toml"
    if toml_path.exists():
        try:
            with open(toml_path, "rb") as f:
                data = tomllib.load(f)
            return PromoterConfig.from_dict(data)
        except tomllib.TOMLDecodeError as e:
            raise RuntimeError(
                f"Malformed TOML config at {toml_path}: {e}"
            ) from e
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RuntimeError(
                f"Invalid config structure in {toml_path}: {e}"
            ) from e

    json_path = config_dir / "config.json"
    if json_path.exists():
        try:
            with open(json_path, encoding="utf-8") as f:
                data = json.load(f)
            return PromoterConfig.from_dict(data)
        except json.JSONDecodeError as e:
            raise RuntimeError(
                f"Malformed JSON config at {json_path}: {e}"
            ) from e
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RuntimeError(
                f"Invalid config structure in {json_path}: {e}"
            ) from e

    return PromoterConfig()
