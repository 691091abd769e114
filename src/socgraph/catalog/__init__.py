# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Component catalog used to instantiate modules found in a report."""

from socgraph.catalog.library import (
    CatalogError,
    ComponentCatalog,
    ComponentLibrary,
    load_component_library,
)

__all__ = [
    "CatalogError",
    "ComponentCatalog",
    "ComponentLibrary",
    "load_component_library",
]
