# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the loader configuration file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from socgraph.model.types import ReportVersion

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".socgraph.yaml"


class LoaderConfigError(Exception):
    """Raised when a loader configuration file is invalid or cannot be loaded."""


@dataclass
class LoaderConfig:
    """Settings for loading report documents.

    Attributes:
        min_supported_version: Oldest report version accepted; older documents
            are rejected.
        max_supported_version: Newest report version known to work; newer
            documents load with a warning.
        chunk_size: Number of bytes fed to the XML tokenizer at a time.
        catalog_path: Optional component catalog file, resolved relative to
            the configuration file.
    """

    min_supported_version: ReportVersion = ReportVersion(8, 1)
    max_supported_version: ReportVersion = ReportVersion(12, 0)
    chunk_size: int = 64 * 1024
    catalog_path: Path | None = None


def load_loader_config(path: Path) -> LoaderConfig:
    """Load and parse a loader configuration file.

    Args:
        path: Path to the `.socgraph.yaml` file.

    Returns:
        A LoaderConfig instance populated from the file.

    Raises:
        LoaderConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise LoaderConfigError(f"Loader config file not found: {path}") from None
    except OSError as exc:
        raise LoaderConfigError(f"Cannot read loader config file: {exc}") from exc

    return _parse_loader_config(text, source_label=str(path), base_dir=path.parent)


# ################
# Implementation
# ################

_KNOWN_KEYS = frozenset({"min-supported-version", "max-supported-version", "chunk-size", "catalog"})


def _parse_loader_config(text: str, source_label: str = "<string>", base_dir: Path | None = None) -> LoaderConfig:
    """Parse loader config YAML text into a LoaderConfig.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).
        base_dir: Directory that a relative ``catalog`` path is resolved against.

    Returns:
        A LoaderConfig instance.

    Raises:
        LoaderConfigError: If the YAML is invalid or a field has the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise LoaderConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise LoaderConfigError(f"{source_label}: loader config must be a YAML mapping")

    unknown = sorted(str(key) for key in data if key not in _KNOWN_KEYS)
    if unknown:
        raise LoaderConfigError(f"{source_label}: unknown field(s): {', '.join(unknown)}")

    config = LoaderConfig()
    if "min-supported-version" in data:
        config.min_supported_version = _require_version(data, "min-supported-version", source_label)
    if "max-supported-version" in data:
        config.max_supported_version = _require_version(data, "max-supported-version", source_label)
    if config.max_supported_version < config.min_supported_version:
        raise LoaderConfigError(
            f"{source_label}: 'max-supported-version' {config.max_supported_version} is below "
            f"'min-supported-version' {config.min_supported_version}"
        )

    if "chunk-size" in data:
        chunk_size = data["chunk-size"]
        if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
            raise LoaderConfigError(f"{source_label}: 'chunk-size' must be a positive integer")
        config.chunk_size = chunk_size

    if "catalog" in data:
        catalog = _require_string(data, "catalog", source_label)
        config.catalog_path = (base_dir / catalog) if base_dir is not None else Path(catalog)

    return config


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a string field from a mapping, raising LoaderConfigError on a wrong type."""
    value = mapping[key]
    if not isinstance(value, str):
        raise LoaderConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _require_version(mapping: dict[str, object], key: str, source_label: str) -> ReportVersion:
    """Extract a quoted version field; unquoted floats would lose trailing zeros."""
    value = mapping[key]
    if not isinstance(value, str):
        raise LoaderConfigError(f"{source_label}: '{key}' must be a quoted string such as \"8.1\"")
    try:
        return ReportVersion.parse(value)
    except ValueError as exc:
        raise LoaderConfigError(f"{source_label}: '{key}': {exc}") from exc
