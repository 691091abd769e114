# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Component catalog: maps module kinds found in a report to components."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from socgraph.model.entities import Component
from socgraph.model.types import ComponentDescriptor

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class CatalogError(Exception):
    """Raised when a component catalog file cannot be read or is invalid."""


class ComponentCatalog(Protocol):
    """Anything able to turn a module's kind/name/version into a Component.

    Implementations must always return a usable component; unknown kinds get
    a stand-in with no descriptor instead of an error.
    """

    def resolve_component(self, kind: str, name: str, version: str) -> Component: ...


class ComponentLibrary:
    """Catalog backed by a table of component descriptors.

    Kinds are matched case-insensitively.
    """

    def __init__(self, descriptors: Iterable[ComponentDescriptor] = ()) -> None:
        self._descriptors: dict[str, ComponentDescriptor] = {}
        for descriptor in descriptors:
            self.register(descriptor)

    @classmethod
    def default(cls) -> ComponentLibrary:
        """Return a library pre-loaded with the common Altera component kinds."""
        return cls(_BUILTIN_DESCRIPTORS)

    def __len__(self) -> int:
        return len(self._descriptors)

    def register(self, descriptor: ComponentDescriptor) -> None:
        """Add *descriptor*, replacing any earlier one for the same kind."""
        self._descriptors[descriptor.kind.casefold()] = descriptor

    def descriptors(self) -> list[ComponentDescriptor]:
        """Return all registered descriptors in registration order."""
        return list(self._descriptors.values())

    def descriptor_for(self, kind: str) -> ComponentDescriptor | None:
        return self._descriptors.get(kind.casefold())

    def resolve_component(self, kind: str, name: str, version: str) -> Component:
        descriptor = self.descriptor_for(kind)
        if descriptor is None:
            logger.warning("Unknown component kind %r for %s, using a generic component", kind, name)
        return Component(name=name, kind=kind, version=version, descriptor=descriptor)


def load_component_library(path: Path) -> ComponentLibrary:
    """Load a component library from a YAML file.

    The file holds a ``components`` list; each entry is a mapping with
    ``kind`` and optionally ``group``, ``vendor`` and ``compatible``.

    Args:
        path: Path to the catalog YAML file.

    Returns:
        A ComponentLibrary holding the listed descriptors.

    Raises:
        CatalogError: If the file cannot be read, contains invalid YAML,
            or does not conform to the expected schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogError(f"Cannot read component catalog '{path}': {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise CatalogError(f"Invalid YAML in component catalog '{path}': {exc}") from exc

    if data is None:
        data = {}

    try:
        catalog_file = _CatalogFile.model_validate(data)
    except ValidationError as exc:
        raise CatalogError(f"Invalid component catalog '{path}': {exc}") from exc

    return ComponentLibrary(catalog_file.components)


# ################
# Implementation
# ################


class _CatalogFile(BaseModel):
    """Top-level layout of a component catalog YAML file."""

    model_config = ConfigDict(extra="forbid")

    components: list[ComponentDescriptor] = Field(default_factory=list)


_BUILTIN_DESCRIPTORS: tuple[ComponentDescriptor, ...] = (
    ComponentDescriptor(kind="altera_nios2", group="cpu", compatible=["altr,nios2-1.0"]),
    ComponentDescriptor(kind="altera_nios2_qsys", group="cpu", compatible=["altr,nios2-1.1"]),
    ComponentDescriptor(kind="altera_nios2_gen2", group="cpu", compatible=["altr,nios2-1.1"]),
    ComponentDescriptor(kind="altera_avalon_jtag_uart", compatible=["altr,juart-1.0"]),
    ComponentDescriptor(kind="altera_avalon_uart", compatible=["altr,uart-1.0"]),
    ComponentDescriptor(kind="altera_avalon_pio", compatible=["altr,pio-1.0"]),
    ComponentDescriptor(kind="altera_avalon_timer", compatible=["altr,timer-1.0"]),
    ComponentDescriptor(kind="altera_avalon_sysid", compatible=["altr,sysid-1.0"]),
    ComponentDescriptor(kind="altera_avalon_sysid_qsys", compatible=["altr,sysid-1.0"]),
    ComponentDescriptor(kind="altera_avalon_onchip_memory2", group="memory"),
    ComponentDescriptor(kind="altera_avalon_new_sdram_controller", group="memory"),
    ComponentDescriptor(kind="altera_avalon_mm_bridge", group="bridge", compatible=["simple-bus"]),
    ComponentDescriptor(kind="altera_avalon_mm_clock_crossing_bridge", group="bridge", compatible=["simple-bus"]),
    ComponentDescriptor(kind="clock_source", group="clock", compatible=["fixed-clock"]),
)
