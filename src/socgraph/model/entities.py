# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Core entities of the in-memory system graph.

Entities compare by identity: an interface may be referenced by many
connections, and two connections are the same link only when they join the
very same interface objects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from socgraph.model.types import ComponentDescriptor

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass(eq=False)
class Interface:
    """A named connection point on a component (e.g. a bus port)."""

    name: str
    kind: str = ""
    is_master: bool = False
    component: Component | None = field(default=None, repr=False)
    parameters: dict[str, str] = field(default_factory=dict)
    connections: list[Connection] = field(default_factory=list, repr=False)

    @property
    def qualified_name(self) -> str:
        """Return ``component.interface``, or the bare name for a detached interface."""
        if self.component is None:
            return self.name
        return f"{self.component.name}.{self.name}"


@dataclass(eq=False)
class Connection:
    """A directed link between a master interface and a slave interface.

    Either end may be ``None`` when the document names an end-point that was
    never declared by any module.
    """

    kind: str
    master: Interface | None
    slave: Interface | None
    name: str = ""
    parameters: dict[str, str] = field(default_factory=dict)

    def joins(self, master: Interface | None, slave: Interface | None) -> bool:
        """Return True if this connection links exactly *master* to *slave*."""
        return self.master is master and self.slave is slave

    def __repr__(self) -> str:
        master = self.master.qualified_name if self.master is not None else None
        slave = self.slave.qualified_name if self.slave is not None else None
        return f"Connection(kind={self.kind!r}, master={master!r}, slave={slave!r})"


@dataclass(eq=False)
class Component:
    """A hardware module instance declared in the source document."""

    name: str
    kind: str
    version: str = ""
    descriptor: ComponentDescriptor | None = None
    interfaces: list[Interface] = field(default_factory=list)
    parameters: dict[str, str] = field(default_factory=dict)

    @property
    def is_resolved(self) -> bool:
        """Return True if the catalog knew this component's kind."""
        return self.descriptor is not None

    def add_interface(self, interface: Interface) -> Interface:
        """Attach *interface* to this component and return it."""
        interface.component = self
        self.interfaces.append(interface)
        return interface

    def get_interface(self, name: str) -> Interface | None:
        for interface in self.interfaces:
            if interface.name == name:
                return interface
        return None


@dataclass(eq=False)
class System:
    """The system-on-chip described by one report document.

    Attributes:
        name: Name of the system (the root element's ``name`` attribute).
        version: Report version text; set after construction from the
            document's ``reportVersion`` element.
        source: Path of the document the system was loaded from, if any.
        unique_identifier: Generator-assigned identifier of the build.
        components: Components in document order.
    """

    name: str
    version: str = ""
    source: Path | None = None
    unique_identifier: str = ""
    components: list[Component] = field(default_factory=list)

    def add_component(self, component: Component) -> None:
        self.components.append(component)

    def get_component(self, name: str) -> Component | None:
        for component in self.components:
            if component.name == name:
                return component
        return None

    def get_interface(self, component_name: str, interface_name: str) -> Interface | None:
        """Look up ``component_name.interface_name``; None if either part is unknown."""
        component = self.get_component(component_name)
        if component is None:
            return None
        return component.get_interface(interface_name)

    @property
    def connections(self) -> list[Connection]:
        """Return every linked connection once, in first-seen order."""
        seen: set[int] = set()
        result: list[Connection] = []
        for component in self.components:
            for interface in component.interfaces:
                for connection in interface.connections:
                    if id(connection) not in seen:
                        seen.add(id(connection))
                        result.append(connection)
        return result

    def recheck_components(self) -> list[Component]:
        """Run the post-link integrity pass over all components.

        Re-binds every interface to its owning component and reports the
        components left without any linked connection.

        Returns:
            The isolated components, in document order.
        """
        isolated: list[Component] = []
        for component in self.components:
            linked = False
            for interface in component.interfaces:
                interface.component = component
                linked = linked or bool(interface.connections)
            if not linked:
                logger.debug("Component %s has no linked connections", component.name)
                isolated.append(component)
        return isolated
