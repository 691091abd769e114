# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sub-parsers that take over event dispatch for one element subtree.

A handler is pushed onto the root parser's handler stack right after the
start tag of the element it owns. From then on it sees every event of the
subtree, including nested elements with the same name as its own, and
gives control back only when the end tag matching its own start arrives.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from socgraph.model.entities import Component, Connection, Interface
from socgraph.parser.errors import ParseError, WarningKind

if TYPE_CHECKING:
    from socgraph.parser.sopcinfo import SopcInfoParser

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class ElementHandler:
    """Receives parse events while it is on top of the handler stack."""

    def start_element(self, name: str, attrs: dict[str, str]) -> None:
        raise NotImplementedError

    def end_element(self, name: str) -> None:
        raise NotImplementedError

    def characters(self, chars: str) -> None:
        raise NotImplementedError


class SubtreeHandler(ElementHandler):
    """Base for handlers owning the subtree of a single element.

    Tracks the names of the currently open descendants, so the handler
    knows its nesting depth and can tell its own end tag from the end tag of
    a same-named child. Text is buffered per innermost element.

    Subclasses override the hooks ``delegate_child``, ``child_started``,
    ``child_ended``, ``store_parameter`` and ``complete``.
    """

    def __init__(self, parser: SopcInfoParser, element_name: str) -> None:
        self._parser = parser
        self.element_name = element_name
        self._open: list[str] = []
        self._text: list[str] = []
        self._parameter_name: str | None = None

    @property
    def depth(self) -> int:
        """Nesting depth inside the owned element; 1 while no descendant is open."""
        return len(self._open) + 1

    def start_element(self, name: str, attrs: dict[str, str]) -> None:
        if not self._open:
            child = self.delegate_child(name, attrs)
            if child is not None:
                self._parser.delegate(child)
                return
            if name.lower() == "parameter":
                self._parameter_name = attrs.get("name")
        self._open.append(name)
        self._text = []
        self.child_started(name, attrs)

    def end_element(self, name: str) -> None:
        if not self._open:
            if name != self.element_name:
                raise ParseError(f"Expected </{self.element_name}>, got </{name}>")
            self.complete()
            self._parser.relinquish(self)
            return

        expected = self._open.pop()
        if name != expected:
            raise ParseError(f"Expected </{expected}>, got </{name}>")
        text = "".join(self._text)
        self._text = []

        lowered = name.lower()
        if lowered == "value" and [n.lower() for n in self._open] == ["parameter"]:
            if self._parameter_name is not None:
                self.store_parameter(self._parameter_name, text)
        elif lowered == "parameter" and not self._open:
            self._parameter_name = None
        self.child_ended(name, text)

    def characters(self, chars: str) -> None:
        self._text.append(chars)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def delegate_child(self, name: str, attrs: dict[str, str]) -> ElementHandler | None:
        """Return a handler to take over a direct child's subtree, or None."""
        return None

    def child_started(self, name: str, attrs: dict[str, str]) -> None:
        pass

    def child_ended(self, name: str, text: str) -> None:
        pass

    def store_parameter(self, name: str, value: str) -> None:
        pass

    def complete(self) -> None:
        """Called exactly once, when the owned element closes."""


class IgnoreAllHandler(SubtreeHandler):
    """Swallows a whole subtree without touching the model."""


class InterfaceHandler(SubtreeHandler):
    """Collects the parameters of one interface of a module."""

    def __init__(self, parser: SopcInfoParser, element_name: str, interface: Interface) -> None:
        super().__init__(parser, element_name)
        self.interface = interface

    def store_parameter(self, name: str, value: str) -> None:
        self.interface.parameters[name] = value


class ModuleHandler(SubtreeHandler):
    """Configures a component from the contents of its ``module`` element."""

    def __init__(self, parser: SopcInfoParser, element_name: str, component: Component) -> None:
        super().__init__(parser, element_name)
        self.component = component

    def delegate_child(self, name: str, attrs: dict[str, str]) -> ElementHandler | None:
        if name.lower() != "interface":
            return None
        kind = attrs.get("kind", "")
        interface = Interface(
            name=attrs.get("name", ""),
            kind=kind,
            is_master=_is_master(kind, attrs.get("isStart")),
        )
        self.component.add_interface(interface)
        return InterfaceHandler(self._parser, name, interface)

    def store_parameter(self, name: str, value: str) -> None:
        self.component.parameters[name] = value

    def complete(self) -> None:
        logger.debug(
            "Module %s: %d interface(s), %d parameter(s)",
            self.component.name,
            len(self.component.interfaces),
            len(self.component.parameters),
        )


class ConnectionHandler(SubtreeHandler):
    """Builds a pending connection from a ``connection`` element.

    End-points are given either as ``start``/``end`` attributes of the form
    ``module.interface`` or as ``startModule``/``startConnectionPoint`` and
    ``endModule``/``endConnectionPoint`` children; the children win.
    """

    def __init__(self, parser: SopcInfoParser, element_name: str, kind: str, attrs: dict[str, str]) -> None:
        super().__init__(parser, element_name)
        self.kind = kind
        self.name = attrs.get("name", "")
        self._endpoints: dict[str, str] = {}
        for side in ("start", "end"):
            module, _, point = attrs.get(side, "").partition(".")
            self._endpoints[f"{side}module"] = module
            self._endpoints[f"{side}connectionpoint"] = point
        self._parameters: dict[str, str] = {}

    def child_ended(self, name: str, text: str) -> None:
        key = name.lower()
        if not self._open and key in self._endpoints:
            self._endpoints[key] = text.strip()

    def store_parameter(self, name: str, value: str) -> None:
        self._parameters[name] = value

    def complete(self) -> None:
        master = self._resolve("start")
        slave = self._resolve("end")
        connection = Connection(
            kind=self.kind,
            master=master,
            slave=slave,
            name=self.name,
            parameters=self._parameters,
        )
        self._parser.add_pending(connection)

    def _resolve(self, side: str) -> Interface | None:
        module = self._endpoints[f"{side}module"]
        point = self._endpoints[f"{side}connectionpoint"]
        interface = self._parser.find_interface(module, point)
        if interface is None:
            self._parser.warn(
                WarningKind.DANGLING_CONNECTION_ENDPOINT,
                f"Connection {self.name or self.kind!r}: {side} end-point '{module}.{point}' is not a known interface",
            )
        return interface


# ################
# Implementation
# ################

# Interrupt connections start at the receiver.
_MASTER_KIND_SUFFIXES = ("_master", "_start", "_source", "_receiver")


def _is_master(kind: str, is_start: str | None) -> bool:
    """Decide whether an interface is the master end of its connections."""
    if is_start is not None:
        return is_start.strip().lower() == "true"
    return kind.lower().endswith(_MASTER_KIND_SUFFIXES)
