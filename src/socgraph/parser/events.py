# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Streaming XML event source.

The document is pushed through an lxml target parser chunk by chunk; no
element tree is ever built. Every chunk's events are handed out before the
next chunk is read.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import BinaryIO

from lxml import etree

from socgraph.parser.errors import MalformedDocumentError

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class StartElement:
    """An element was opened."""

    name: str
    attrs: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class EndElement:
    """An element was closed."""

    name: str


@dataclass(frozen=True)
class Text:
    """Character data. A single text node may arrive as several fragments."""

    chars: str


Event = StartElement | EndElement | Text


def iter_events(stream: BinaryIO, chunk_size: int = 64 * 1024) -> Iterator[Event]:
    """Tokenize an XML byte stream into start, end and text events.

    Namespace prefixes are stripped from element and attribute names.
    Exhausting the iterator means the document ended.

    Args:
        stream: Binary stream positioned at the start of the document.
        chunk_size: Number of bytes read and fed per step.

    Yields:
        Events in document order.

    Raises:
        MalformedDocumentError: If the document is not well-formed XML.
    """
    collector = _EventCollector()
    parser = etree.XMLParser(target=collector, resolve_entities=False, no_network=True)
    try:
        while True:
            chunk = stream.read(chunk_size)
            if not chunk:
                break
            parser.feed(chunk)
            yield from collector.drain()
        parser.close()
    except etree.XMLSyntaxError as exc:
        raise MalformedDocumentError(str(exc), line=exc.lineno) from exc
    yield from collector.drain()


# ################
# Implementation
# ################


def _local_name(name: str) -> str:
    """Strip a ``{namespace}`` prefix."""
    return name.rsplit("}", 1)[-1]


class _EventCollector:
    """lxml parser target buffering events until the next drain."""

    def __init__(self) -> None:
        self._events: list[Event] = []

    def start(self, tag: str, attrib: dict[str, str]) -> None:
        attrs = {_local_name(key): value for key, value in attrib.items()}
        self._events.append(StartElement(_local_name(tag), attrs))

    def end(self, tag: str) -> None:
        self._events.append(EndElement(_local_name(tag)))

    def data(self, data: str) -> None:
        self._events.append(Text(data))

    def close(self) -> None:
        return None

    def drain(self) -> list[Event]:
        events, self._events = self._events, []
        return events
