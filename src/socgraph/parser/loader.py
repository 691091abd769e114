# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry points for loading a ``.sopcinfo`` document into a System.

A load either produces a fully resolved System or fails as a whole; no
partially built model is handed out.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import BinaryIO

from socgraph.catalog.library import ComponentCatalog, ComponentLibrary
from socgraph.config.settings import LoaderConfig
from socgraph.model.entities import System
from socgraph.parser.errors import LoadError, LoadWarning
from socgraph.parser.events import Event, iter_events
from socgraph.parser.resolver import connect_components
from socgraph.parser.sopcinfo import SopcInfoParser

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass
class LoadResult:
    """Outcome of a successful load.

    Attributes:
        system: The fully resolved system.
        warnings: Non-fatal problems encountered while loading.
        linked_connections: Number of connections linked into interfaces.
    """

    system: System
    warnings: list[LoadWarning] = field(default_factory=list)
    linked_connections: int = 0


class SopcInfoLoader:
    """Loads report documents using a given catalog and configuration.

    The loader keeps no per-document state; every call builds a fresh
    :class:`SopcInfoParser`, so one loader may serve any number of loads.
    """

    def __init__(self, catalog: ComponentCatalog | None = None, config: LoaderConfig | None = None) -> None:
        self.catalog = catalog if catalog is not None else ComponentLibrary.default()
        self.config = config if config is not None else LoaderConfig()

    def load(self, path: Path) -> LoadResult:
        """Load the document at *path*.

        Raises:
            OSError: If the file cannot be opened.
            LoadError: If the document cannot be turned into a system.
        """
        with path.open("rb") as stream:
            return self.load_stream(stream, source=path)

    def load_stream(self, stream: BinaryIO, source: Path | None = None) -> LoadResult:
        """Load a document from an open binary stream."""
        return self.load_events(iter_events(stream, self.config.chunk_size), source=source)

    def load_events(self, events: Iterable[Event], source: Path | None = None) -> LoadResult:
        """Run the parser over *events*, then resolve connections.

        Raises:
            LoadError: If the events do not describe a valid system.
        """
        parser = SopcInfoParser(self.catalog, self.config, source)
        for event in events:
            parser.feed(event)
        system = parser.finish()
        linked = connect_components(parser.pending)
        system.recheck_components()
        logger.info(
            "Loaded system %s: %d component(s), %d connection(s)",
            system.name,
            len(system.components),
            linked,
        )
        return LoadResult(system=system, warnings=list(parser.warnings), linked_connections=linked)


def load_system(
    source: str | PathLike[str],
    catalog: ComponentCatalog | None = None,
    config: LoaderConfig | None = None,
) -> System | None:
    """Load a report document, returning None if it cannot be loaded.

    Failures are logged rather than raised.

    Args:
        source: Path of the ``.sopcinfo`` file.
        catalog: Component catalog; defaults to the built-in library.
        config: Loader configuration; defaults to :class:`LoaderConfig`.

    Returns:
        The resolved System, or None on any fatal error.
    """
    loader = SopcInfoLoader(catalog=catalog, config=config)
    try:
        return loader.load(Path(source)).system
    except LoadError as exc:
        logger.error("Cannot load %s: %s", source, exc)
    except OSError as exc:
        logger.error("Cannot read %s: %s", source, exc)
    return None
