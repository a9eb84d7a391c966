"""Unit tests for repository configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from imgpromoter.config import PromoterConfig, load_config


def test_defaults_when_no_config(tmp_path: Path) -> None:
    assert load_config(tmp_path) == PromoterConfig()


def test_toml_config(tmp_path: Path) -> None:
    (tmp_path / ".imgpromoter").mkdir()
    (tmp_path / ".imgpromoter" / "config.toml").write_text(
        'manifest_dir = "k8s.gcr.io"\n\n[checks]\nmax_image_size_mb = 500\n',
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config == PromoterConfig(max_image_size_mb=500, size_lookup_workers=8, manifest_dir="k8s.gcr.io")


def test_toml_preferred_over_json(tmp_path: Path) -> None:
    config_dir = tmp_path / ".imgpromoter"
    config_dir.mkdir()
    (config_dir / "config.toml").write_text("[checks]\nsize_lookup_workers = 2\n", encoding="utf-8")
    (config_dir / "config.json").write_text('{"checks": {"size_lookup_workers": 4}}', encoding="utf-8")

    assert load_config(tmp_path).size_lookup_workers == 2


def test_json_config(tmp_path: Path) -> None:
    (tmp_path / ".imgpromoter").mkdir()
    (tmp_path / ".imgpromoter" / "config.json").write_text(
        '{"checks": {"max_image_size_mb": 10}}', encoding="utf-8"
    )

    assert load_config(tmp_path).max_image_size_mb == 10


def test_malformed_toml(tmp_path: Path) -> None:
    (tmp_path / ".imgpromoter").mkdir()
    (tmp_path / ".imgpromoter" / "config.toml").write_text("[checks\n", encoding="utf-8")

    with pytest.raises(RuntimeError, match="Malformed TOML"):
        load_config(tmp_path)


def test_non_positive_size_is_invalid(tmp_path: Path) -> None:
    (tmp_path / ".imgpromoter").mkdir()
    (tmp_path / ".imgpromoter" / "config.json").write_text(
        '{"checks": {"max_image_size_mb": 0}}', encoding="utf-8"
    )

    with pytest.raises(RuntimeError, match="Invalid config structure"):
        load_config(tmp_path)


def test_overrides_skip_none() -> None:
    config = PromoterConfig().with_overrides(max_image_size_mb=None, size_lookup_workers=3)

    assert config == PromoterConfig(size_lookup_workers=3)
