# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""System graph model (systems, components, interfaces, connections)."""

from socgraph.model.entities import (
    Component,
    Connection,
    Interface,
    System,
)
from socgraph.model.types import (
    ComponentDescriptor,
    ReportVersion,
)

__all__ = [
    # Value types
    "ComponentDescriptor",
    "ReportVersion",
    # Entities
    "Interface",
    "Connection",
    "Component",
    "System",
]
