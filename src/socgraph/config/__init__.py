# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loader configuration for socgraph."""

from socgraph.config.settings import (
    CONFIG_FILE_NAME,
    LoaderConfig,
    LoaderConfigError,
    load_loader_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "LoaderConfig",
    "LoaderConfigError",
    "load_loader_config",
]
