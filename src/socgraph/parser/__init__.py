# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Streaming parser and loader for .sopcinfo report documents."""

from socgraph.parser.errors import (
    DuplicateRootError,
    LoadError,
    LoadWarning,
    MalformedDocumentError,
    MissingRootError,
    ParseError,
    TruncatedDocumentError,
    UnsupportedVersionError,
    WarningKind,
)
from socgraph.parser.events import EndElement, Event, StartElement, Text, iter_events
from socgraph.parser.loader import LoadResult, SopcInfoLoader, load_system
from socgraph.parser.resolver import connect_components
from socgraph.parser.sopcinfo import SopcInfoParser

__all__ = [
    # Events
    "StartElement",
    "EndElement",
    "Text",
    "Event",
    "iter_events",
    # Errors
    "LoadError",
    "ParseError",
    "MalformedDocumentError",
    "MissingRootError",
    "DuplicateRootError",
    "TruncatedDocumentError",
    "UnsupportedVersionError",
    "WarningKind",
    "LoadWarning",
    # Parsing
    "SopcInfoParser",
    "connect_components",
    "SopcInfoLoader",
    "LoadResult",
    "load_system",
]
