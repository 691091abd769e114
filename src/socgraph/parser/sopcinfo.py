# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Root parser for ``.sopcinfo`` report documents.

Consumes start/end/text events one at a time. Structurally distinct
subtrees (modules, connections, plugin and parameter blocks) are handed to
sub-parsers from :mod:`socgraph.parser.handlers` by pushing them onto a
handler stack; the root parser itself sits at the bottom of that stack.
"""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from pathlib import Path

from socgraph.catalog.library import ComponentCatalog
from socgraph.config.settings import LoaderConfig
from socgraph.model.entities import Component, Connection, Interface, System
from socgraph.model.types import ReportVersion
from socgraph.parser.errors import (
    DuplicateRootError,
    LoadWarning,
    MissingRootError,
    ParseError,
    TruncatedDocumentError,
    UnsupportedVersionError,
    WarningKind,
)
from socgraph.parser.events import EndElement, Event, StartElement, Text
from socgraph.parser.handlers import (
    ConnectionHandler,
    ElementHandler,
    IgnoreAllHandler,
    ModuleHandler,
)

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

ROOT_ELEMENT = "EnsembleReport"


class TextTarget(Enum):
    """Which field the text currently being read belongs to."""

    NONE = "none"
    REPORT_VERSION = "reportVersion"
    UNIQUE_IDENTIFIER = "uniqueIdentifier"


class SopcInfoParser(ElementHandler):
    """Event-driven parser building a :class:`System` from one document.

    An instance holds the state of exactly one load and must not be reused.

    Attributes:
        system: The system under construction; None until the root element.
        pending: Connections collected so far, not yet linked into interfaces.
        unique_identifier: Text of the ``uniqueIdentifier`` element.
        warnings: Non-fatal problems found so far.
    """

    def __init__(
        self,
        catalog: ComponentCatalog,
        config: LoaderConfig | None = None,
        source: Path | None = None,
    ) -> None:
        self._catalog = catalog
        self._config = config if config is not None else LoaderConfig()
        self._source = source
        self._handlers: list[ElementHandler] = [self]
        self._text_target = TextTarget.NONE
        self._text: list[str] = []
        self._root_closed = False
        self.current_component: Component | None = None
        self.system: System | None = None
        self.pending: deque[Connection] = deque()
        self.unique_identifier = ""
        self.warnings: list[LoadWarning] = []

    @property
    def depth(self) -> int:
        """Number of handlers on the stack, including the root parser."""
        return len(self._handlers)

    @property
    def active_handler(self) -> ElementHandler:
        return self._handlers[-1]

    def feed(self, event: Event) -> None:
        """Dispatch one event to whichever handler is currently active."""
        handler = self._handlers[-1]
        if isinstance(event, StartElement):
            handler.start_element(event.name, event.attrs)
        elif isinstance(event, EndElement):
            handler.end_element(event.name)
        elif isinstance(event, Text):
            handler.characters(event.chars)

    def finish(self) -> System:
        """Signal end of document and return the parsed (unresolved) system.

        Raises:
            TruncatedDocumentError: If an element is still open.
            MissingRootError: If the document had no root element.
        """
        if len(self._handlers) > 1:
            handler = self._handlers[-1]
            name = getattr(handler, "element_name", "?")
            raise TruncatedDocumentError(f"Document ended inside <{name}>")
        if self.system is None:
            raise MissingRootError(f"Document has no <{ROOT_ELEMENT}> element")
        if not self._root_closed:
            raise TruncatedDocumentError(f"Document ended before </{ROOT_ELEMENT}>")
        if self.unique_identifier and not self.system.unique_identifier:
            self.system.unique_identifier = self.unique_identifier
        return self.system

    # ------------------------------------------------------------------
    # Delegation
    # ------------------------------------------------------------------

    def delegate(self, handler: ElementHandler) -> None:
        """Make *handler* receive all events until it relinquishes control."""
        self._handlers.append(handler)

    def relinquish(self, handler: ElementHandler) -> None:
        """Pop *handler* off the stack, restoring the handler below it."""
        if len(self._handlers) < 2 or self._handlers[-1] is not handler:
            raise ParseError("Handler relinquished control out of order")
        self._handlers.pop()
        if isinstance(handler, ModuleHandler):
            self.current_component = None

    # ------------------------------------------------------------------
    # Services for sub-parsers
    # ------------------------------------------------------------------

    def add_pending(self, connection: Connection) -> None:
        self.pending.append(connection)

    def find_interface(self, module: str, point: str) -> Interface | None:
        if self.system is None:
            return None
        return self.system.get_interface(module, point)

    def warn(self, kind: WarningKind, message: str) -> None:
        logger.warning("%s", message)
        self.warnings.append(LoadWarning(kind=kind, message=message))

    # ------------------------------------------------------------------
    # Root element handling
    # ------------------------------------------------------------------

    def start_element(self, name: str, attrs: dict[str, str]) -> None:
        tag = name.lower()
        # A second root is reported as such even after the first one closed.
        if tag == "ensemblereport":
            self._start_root(attrs)
        elif self._root_closed:
            raise ParseError(f"Unexpected <{name}> after </{ROOT_ELEMENT}>")
        elif tag == "module":
            self._start_module(name, attrs)
        elif tag == "connection":
            self._require_system(name)
            self.delegate(ConnectionHandler(self, name, attrs.get("kind", ""), attrs))
        elif tag in ("plugin", "parameter"):
            self.delegate(IgnoreAllHandler(self, name))
        elif tag == "reportversion":
            self._require_system(name)
            self._set_text_target(TextTarget.REPORT_VERSION)
        elif tag == "uniqueidentifier":
            self._set_text_target(TextTarget.UNIQUE_IDENTIFIER)
        else:
            logger.debug("New element %s", name)

    def end_element(self, name: str) -> None:
        tag = name.lower()
        if self._text_target is not TextTarget.NONE and tag == self._text_target.value.lower():
            self._commit_text()
        elif tag == "ensemblereport":
            self._root_closed = True
            logger.debug("sopcinfo: loading done")
        else:
            logger.debug("sopcinfo: unexpected end tag %s", name)

    def characters(self, chars: str) -> None:
        if self._text_target is not TextTarget.NONE:
            self._text.append(chars)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _start_root(self, attrs: dict[str, str]) -> None:
        if self.system is not None:
            raise DuplicateRootError(f"Second <{ROOT_ELEMENT}> element in document")
        self.system = System(
            name=attrs.get("name", ""),
            version=attrs.get("version", ""),
            source=self._source,
        )
        logger.debug("Loading system %s", self.system.name)

    def _start_module(self, name: str, attrs: dict[str, str]) -> None:
        system = self._require_system(name)
        component = self._catalog.resolve_component(
            attrs.get("kind", ""),
            attrs.get("name", ""),
            attrs.get("version", ""),
        )
        if not component.is_resolved:
            self.warn(
                WarningKind.UNRESOLVED_COMPONENT,
                f"Module {component.name!r}: unknown kind {component.kind!r}, using a generic component",
            )
        system.add_component(component)
        self.current_component = component
        self.delegate(ModuleHandler(self, name, component))

    def _require_system(self, name: str) -> System:
        if self.system is None:
            raise MissingRootError(f"<{name}> found before <{ROOT_ELEMENT}>")
        return self.system

    def _set_text_target(self, target: TextTarget) -> None:
        self._text_target = target
        self._text = []

    def _commit_text(self) -> None:
        text = "".join(self._text)
        target = self._text_target
        self._text_target = TextTarget.NONE
        self._text = []
        if target is TextTarget.REPORT_VERSION:
            self._check_version(text)
            if self.system is not None:
                self.system.version = text
        elif target is TextTarget.UNIQUE_IDENTIFIER:
            self.unique_identifier = text
            if self.system is not None:
                self.system.unique_identifier = text

    def _check_version(self, text: str) -> None:
        """Apply the supported-version range to a report version string.

        Raises:
            UnsupportedVersionError: If the version is below the supported minimum.
        """
        try:
            version = ReportVersion.parse(text)
        except ValueError:
            self.warn(WarningKind.UNPARSABLE_VERSION, f"Cannot parse report version {text!r}")
            return
        if version < self._config.min_supported_version:
            raise UnsupportedVersionError(text, str(self._config.min_supported_version))
        if version > self._config.max_supported_version:
            self.warn(
                WarningKind.UNTESTED_VERSION,
                f"Report version {version} is newer than the latest tested version "
                f"{self._config.max_supported_version}; continuing",
            )
