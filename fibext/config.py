"""Feature flags and overflow policy configuration.

The feature names match the switches the library has always exposed:

``std``
    numpy-backed helpers such as :func:`fibext.buffer.fibonacci_array`.
``checked-overflow``
    generators stop at the first overflow instead of wrapping around.  Only
    the *default* policy is affected; callers may still pick a policy per
    generator.
``iterator``
    the pull-one-at-a-time interface (``pull``/``next``/``for`` loops).
``large-numbers``
    the arbitrary-precision ``biguint`` element type.

Flags can be assembled from a list of names or loaded from a JSON/YAML
document of the form::

    default-features: true
    features:
      - large-numbers
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from enum import Enum
import json
import logging
from pathlib import Path
from typing import Iterable, Mapping, Optional, Tuple, Union

import yaml

logger = logging.getLogger(__name__)

__all__ = [
    "ConfigError",
    "DEFAULT_FEATURES",
    "DEFAULT_FEATURE_NAMES",
    "FEATURE_NAMES",
    "FeatureDisabledError",
    "FeatureFlags",
    "OverflowPolicy",
    "add_feature_arguments",
    "features_from_arguments",
    "load_features",
    "resolve_policy",
]

FEATURE_NAMES: Tuple[str, ...] = ("std", "checked-overflow", "iterator", "large-numbers")
DEFAULT_FEATURE_NAMES: Tuple[str, ...] = ("std", "checked-overflow", "iterator")


class ConfigError(ValueError):
    """Raised when a feature configuration cannot be understood."""


class FeatureDisabledError(RuntimeError):
    """Raised when an operation needs a feature that is switched off."""

    def __init__(self, feature: str, operation: str) -> None:
        super().__init__(f"{operation} requires the '{feature}' feature")
        self.feature = feature
        self.operation = operation


class OverflowPolicy(str, Enum):
    """How a generator reacts when the next term does not fit."""

    CHECKED = "checked"
    WRAPPING = "wrapping"


def resolve_policy(policy: Union[str, OverflowPolicy]) -> OverflowPolicy:
    if isinstance(policy, OverflowPolicy):
        return policy
    try:
        return OverflowPolicy(str(policy).strip().lower())
    except ValueError:
        choices = ", ".join(member.value for member in OverflowPolicy)
        raise ConfigError(
            f"Unknown overflow policy {policy!r}; expected one of: {choices}"
        ) from None


@dataclass(frozen=True)
class FeatureFlags:
    """Immutable set of enabled library features."""

    std: bool = True
    checked_overflow: bool = True
    iterator: bool = True
    large_numbers: bool = False

    @classmethod
    def from_names(
        cls, names: Iterable[str], *, default_features: bool = True
    ) -> "FeatureFlags":
        """Build flags from cargo-style feature *names*.

        ``default_features`` controls whether the default set is enabled before
        *names* are added, mirroring ``--no-default-features``.
        """

        enabled = set(DEFAULT_FEATURE_NAMES) if default_features else set()
        for raw in names:
            if not isinstance(raw, str):
                raise ConfigError("Feature names must be strings")
            name = raw.strip().lower().replace("_", "-")
            if not name:
                continue
            if name not in FEATURE_NAMES:
                raise ConfigError(
                    f"Unknown feature {raw!r}; expected one of: {', '.join(FEATURE_NAMES)}"
                )
            enabled.add(name)
        return cls(
            std="std" in enabled,
            checked_overflow="checked-overflow" in enabled,
            iterator="iterator" in enabled,
            large_numbers="large-numbers" in enabled,
        )

    def names(self) -> Tuple[str, ...]:
        """Return the enabled feature names in canonical order."""

        flags = {
            "std": self.std,
            "checked-overflow": self.checked_overflow,
            "iterator": self.iterator,
            "large-numbers": self.large_numbers,
        }
        return tuple(name for name in FEATURE_NAMES if flags[name])

    @property
    def default_policy(self) -> OverflowPolicy:
        if self.checked_overflow:
            return OverflowPolicy.CHECKED
        return OverflowPolicy.WRAPPING

    def require(self, feature: str, operation: str) -> None:
        """Raise :class:`FeatureDisabledError` unless *feature* is enabled."""

        if feature not in FEATURE_NAMES:
            raise ConfigError(f"Unknown feature {feature!r}")
        if feature not in self.names():
            raise FeatureDisabledError(feature, operation)


DEFAULT_FEATURES = FeatureFlags()


def _parse_document(path: Path) -> object:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{path} is not valid JSON: {exc}") from exc
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path} is not valid YAML: {exc}") from exc


def load_features(path: Optional[Union[str, Path]] = None) -> FeatureFlags:
    """Load feature flags from a JSON or YAML file.

    ``None`` returns :data:`DEFAULT_FEATURES`.  An empty document is treated as
    "defaults only".
    """

    if path is None:
        return DEFAULT_FEATURES

    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigError(f"Feature configuration {config_path} does not exist")

    document = _parse_document(config_path)
    if document is None:
        document = {}
    if not isinstance(document, Mapping):
        raise ConfigError("Feature configuration must be a mapping")

    features = document.get("features", [])
    if isinstance(features, str):
        features = features.split(",")
    if not isinstance(features, list):
        raise ConfigError("'features' must be a list of feature names")

    default_features = document.get("default-features", True)
    if not isinstance(default_features, bool):
        raise ConfigError("'default-features' must be a boolean")

    flags = FeatureFlags.from_names(features, default_features=default_features)
    logger.debug("Loaded features %s from %s", ", ".join(flags.names()), config_path)
    return flags


def add_feature_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the ``--features``/``--no-default-features``/``--config`` options."""

    parser.add_argument(
        "--features",
        default="",
        help="Comma separated list of extra features, e.g. large-numbers",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--no-default-features",
        action="store_true",
        help="Start from an empty feature set instead of the defaults",
    )
    source.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON or YAML file describing the base feature set",
    )


def features_from_arguments(args: argparse.Namespace) -> FeatureFlags:
    """Build flags from options registered by :func:`add_feature_arguments`."""

    extra = [name for name in args.features.split(",") if name.strip()]
    if args.config is not None:
        base = load_features(args.config)
        return FeatureFlags.from_names(base.names() + tuple(extra), default_features=False)
    return FeatureFlags.from_names(extra, default_features=not args.no_default_features)
