# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Consistency checks for loaded systems.

These checks operate on fully resolved systems (after connection
resolution) and flag problems that a downstream generator would trip over.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from socgraph.model.entities import Component, System

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ValidationWarning:
    """A non-fatal problem in a loaded system.

    Attributes:
        message: Human-readable description of the warning.
    """

    message: str


@dataclass(frozen=True)
class ValidationError:
    """A problem that makes the system unusable for code generation.

    Attributes:
        message: Human-readable description of the error.
    """

    message: str


@dataclass
class ValidationResult:
    """Result of running consistency checks.

    Attributes:
        warnings: Non-fatal issues found during validation.
        errors: Fatal errors that indicate an inconsistent system.
    """

    warnings: list[ValidationWarning] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Return True if any fatal validation errors were found."""
        return len(self.errors) > 0


def validate(system: System) -> ValidationResult:
    """Run all consistency checks on a resolved System.

    Checks performed:

    1. **Duplicate names** (error): two components with the same name, or
       two interfaces with the same name on one component, make end-point
       lookups ambiguous.

    2. **Memory-mapped loops** (error): following ``avalon`` connections
       from master interface to slave interface, and through bridges from
       slave port to master port, must never lead back to the starting
       interface.

    3. **Unresolved components** (warning): components whose kind the
       catalog did not know.

    4. **Isolated components** (warning): components without any linked
       connection.

    5. **Missing slaves** (warning): linked connections whose slave end
       did not resolve to an interface.

    Args:
        system: The System to validate.

    Returns:
        A :class:`ValidationResult` containing any warnings and errors found.
    """
    warnings: list[ValidationWarning] = []
    errors: list[ValidationError] = []

    errors.extend(_check_duplicate_names(system))
    errors.extend(_check_memory_mapped_loops(system))
    warnings.extend(_check_unresolved_components(system))
    warnings.extend(_check_isolated_components(system))
    warnings.extend(_check_missing_slaves(system))

    return ValidationResult(warnings=warnings, errors=errors)


# ################
# Implementation
# ################

_MEMORY_MAPPED_KIND = "avalon"


def _detect_cycle(graph: dict[str, list[str]]) -> list[str] | None:
    """Detect a cycle in a directed graph using DFS.

    Uses a three-colour marking scheme (white/grey/black) to distinguish
    unvisited, in-progress, and fully-explored nodes.

    Args:
        graph: Adjacency list mapping each node to its direct neighbours.
            Nodes that appear only as neighbours (not as keys) are treated
            as having no outgoing edges.

    Returns:
        A list of node names forming the cycle with the start node repeated
        at the end (e.g. ``["A", "B", "C", "A"]``), or ``None`` if the
        graph is acyclic.
    """
    WHITE, GREY, BLACK = 0, 1, 2
    color: dict[str, int] = {}
    path: list[str] = []

    def _dfs(node: str) -> list[str] | None:
        color[node] = GREY
        path.append(node)
        for neighbor in graph.get(node, []):
            state = color.get(neighbor, WHITE)
            if state == GREY:
                cycle_start = path.index(neighbor)
                return path[cycle_start:] + [neighbor]
            if state == WHITE:
                result = _dfs(neighbor)
                if result is not None:
                    return result
        path.pop()
        color[node] = BLACK
        return None

    for node in graph:
        if color.get(node, WHITE) == WHITE:
            result = _dfs(node)
            if result is not None:
                return result
    return None


def _check_duplicate_names(system: System) -> list[ValidationError]:
    """Return errors for duplicated component names and per-component interface names."""
    errors: list[ValidationError] = []
    seen_components: set[str] = set()
    for component in system.components:
        if component.name in seen_components:
            errors.append(ValidationError(message=f"Duplicate component name '{component.name}'."))
        seen_components.add(component.name)

        seen_interfaces: set[str] = set()
        for interface in component.interfaces:
            if interface.name in seen_interfaces:
                errors.append(
                    ValidationError(message=f"Component '{component.name}' declares interface '{interface.name}' twice.")
                )
            seen_interfaces.add(interface.name)
    return errors


def _check_memory_mapped_loops(system: System) -> list[ValidationError]:
    """Return an error if memory-mapped transactions can loop back to their origin.

    Nodes are interfaces. Each ``avalon`` connection is an edge from its
    master to its slave interface, and every bridge component forwards
    from each of its slave interfaces to each of its master interfaces.
    Other components terminate transactions, so a CPU reaching its own
    debug slave, directly or through a bridge, is not a loop.
    """
    graph: dict[str, list[str]] = {}
    for connection in system.connections:
        if connection.kind.lower() != _MEMORY_MAPPED_KIND:
            continue
        master = connection.master
        slave = connection.slave
        if master is None or slave is None:
            continue
        graph.setdefault(master.qualified_name, []).append(slave.qualified_name)

    for component in system.components:
        if not _is_bridge(component):
            continue
        masters = [i.qualified_name for i in component.interfaces if i.is_master]
        for interface in component.interfaces:
            if not interface.is_master:
                graph.setdefault(interface.qualified_name, []).extend(masters)

    cycle = _detect_cycle(graph)
    if cycle is None:
        return []
    return [ValidationError(message=f"Memory-mapped connection loop: {' -> '.join(cycle)}.")]


def _is_bridge(component: Component) -> bool:
    return component.descriptor is not None and component.descriptor.group == "bridge"


def _check_unresolved_components(system: System) -> list[ValidationWarning]:
    """Return warnings for components the catalog did not recognise."""
    return [
        ValidationWarning(message=f"Component '{component.name}' has unknown kind '{component.kind}'.")
        for component in system.components
        if not component.is_resolved
    ]


def _check_isolated_components(system: System) -> list[ValidationWarning]:
    """Return warnings for components with no linked connections."""
    warnings: list[ValidationWarning] = []
    for component in system.components:
        if not _has_connections(component):
            warnings.append(ValidationWarning(message=f"Component '{component.name}' has no connections (isolated)."))
    return warnings


def _has_connections(component: Component) -> bool:
    return any(interface.connections for interface in component.interfaces)


def _check_missing_slaves(system: System) -> list[ValidationWarning]:
    """Return warnings for linked connections whose slave end is unknown."""
    warnings: list[ValidationWarning] = []
    for connection in system.connections:
        if connection.slave is None and connection.master is not None:
            warnings.append(
                ValidationWarning(
                    message=f"Connection from '{connection.master.qualified_name}' has no slave interface."
                )
            )
    return warnings
