"""Tests for feature flags and their file-based configuration."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from fibext.config import (
    DEFAULT_FEATURES,
    ConfigError,
    FeatureDisabledError,
    FeatureFlags,
    OverflowPolicy,
    load_features,
    resolve_policy,
)


def test_defaults_match_published_feature_set() -> None:
    assert DEFAULT_FEATURES.names() == ("std", "checked-overflow", "iterator")
    assert DEFAULT_FEATURES.default_policy is OverflowPolicy.CHECKED
    assert not DEFAULT_FEATURES.large_numbers


def test_from_names_adds_to_defaults() -> None:
    flags = FeatureFlags.from_names(["large_numbers"])
    assert flags.names() == ("std", "checked-overflow", "iterator", "large-numbers")


def test_from_names_without_defaults_selects_wrapping() -> None:
    flags = FeatureFlags.from_names(["std", "iterator"], default_features=False)
    assert flags == FeatureFlags(checked_overflow=False)
    assert flags.default_policy is OverflowPolicy.WRAPPING


def test_from_names_rejects_unknown_feature() -> None:
    with pytest.raises(ConfigError, match="Unknown feature"):
        FeatureFlags.from_names(["simd"])


def test_require_reports_missing_feature() -> None:
    with pytest.raises(FeatureDisabledError) as excinfo:
        FeatureFlags().require("large-numbers", "biguint element type")
    assert str(excinfo.value) == "biguint element type requires the 'large-numbers' feature"
    with pytest.raises(ConfigError):
        FeatureFlags().require("unknown", "anything")


def test_resolve_policy() -> None:
    assert resolve_policy("Wrapping") is OverflowPolicy.WRAPPING
    assert resolve_policy(OverflowPolicy.CHECKED) is OverflowPolicy.CHECKED
    with pytest.raises(ConfigError):
        resolve_policy("saturating")


def test_load_features_defaults_without_path() -> None:
    assert load_features(None) is DEFAULT_FEATURES


def test_load_features_from_yaml(tmp_path: Path) -> None:
    config_path = tmp_path / "features.yaml"
    config_path.write_text(
        """
        default-features: false
        features:
          - std
          - iterator
          - large-numbers
        """,
        encoding="utf-8",
    )
    flags = load_features(config_path)
    assert flags == FeatureFlags(checked_overflow=False, large_numbers=True)


def test_load_features_from_json(tmp_path: Path) -> None:
    config_path = tmp_path / "features.json"
    config_path.write_text(json.dumps({"features": "large-numbers"}), encoding="utf-8")
    assert load_features(str(config_path)).large_numbers


def test_load_features_empty_document_means_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("", encoding="utf-8")
    assert load_features(config_path) == DEFAULT_FEATURES


@pytest.mark.parametrize(
    "config_text, expected_message",
    [
        ("- std", "must be a mapping"),
        ("features: 3", "must be a list"),
        ("default-features: maybe", "must be a boolean"),
        ("features: [bogus]", "Unknown feature"),
        ("features: [unclosed", "not valid YAML"),
    ],
)
def test_load_features_rejects_invalid_documents(
    tmp_path: Path, config_text: str, expected_message: str
) -> None:
    config_path = tmp_path / "invalid.yaml"
    config_path.write_text(config_text, encoding="utf-8")
    with pytest.raises(ConfigError, match=expected_message):
        load_features(config_path)


def test_load_features_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="does not exist"):
        load_features(tmp_path / "absent.yaml")


def test_load_features_invalid_json(tmp_path: Path) -> None:
    config_path = tmp_path / "broken.json"
    config_path.write_text("{", encoding="utf-8")
    with pytest.raises(ConfigError, match="not valid JSON"):
        load_features(config_path)
