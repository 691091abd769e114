# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Errors and warnings raised while loading a report document."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# ###############
# Public Interface
# ###############


class LoadError(Exception):
    """Base class for every error that aborts a load."""


class ParseError(LoadError):
    """Raised when the document's structure cannot be turned into a system.

    Attributes:
        line: 1-based line number of the error, when the tokenizer knows it.
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(f"Line {line}: {message}" if line is not None else message)
        self.line = line


class MalformedDocumentError(ParseError):
    """Raised when the XML tokenizer rejects the document."""


class MissingRootError(ParseError):
    """Raised when content appears outside an ``EnsembleReport`` element, or none exists."""


class DuplicateRootError(ParseError):
    """Raised when a second ``EnsembleReport`` element is found."""


class TruncatedDocumentError(ParseError):
    """Raised when the document ends before an open element is closed."""


class UnsupportedVersionError(LoadError):
    """Raised when the report was written by a tool older than the supported minimum.

    Attributes:
        version: The version text found in the document.
        minimum: The oldest supported version, as text.
    """

    def __init__(self, version: str, minimum: str) -> None:
        super().__init__(f"Report version {version.strip()!r} is older than the minimum supported version {minimum}")
        self.version = version
        self.minimum = minimum


class WarningKind(Enum):
    """Categories of non-fatal problems found during a load."""

    UNRESOLVED_COMPONENT = "unresolved-component"
    DANGLING_CONNECTION_ENDPOINT = "dangling-connection-endpoint"
    UNTESTED_VERSION = "untested-version"
    UNPARSABLE_VERSION = "unparsable-version"


@dataclass(frozen=True)
class LoadWarning:
    """A non-fatal problem; the load continues with a best-effort model.

    Attributes:
        kind: Category of the problem.
        message: Human-readable description.
    """

    kind: WarningKind
    message: str
