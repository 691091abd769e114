# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Value types shared by the socgraph system model."""

from __future__ import annotations

import re
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


@dataclass(frozen=True, order=True)
class ReportVersion:
    """A Quartus II report version as an ordered ``major.minor`` pair.

    Report versions are compared numerically, so ``10.10`` sorts after
    ``10.9`` and ``12.0`` equals ``12``.
    """

    major: int
    minor: int = 0

    @classmethod
    def parse(cls, text: str) -> ReportVersion:
        """Parse the leading ``major[.minor]`` of a version string.

        Trailing build information is ignored, so ``"11.0 157"`` and
        ``"11.0sp1"`` both parse as ``11.0``.

        Raises:
            ValueError: If *text* does not start with a version number.
        """
        match = _VERSION_RE.match(text)
        if match is None:
            raise ValueError(f"Not a report version: {text!r}")
        minor = match.group("minor")
        return cls(int(match.group("major")), int(minor) if minor else 0)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


class ComponentDescriptor(BaseModel):
    """What the component catalog knows about one module kind."""

    model_config = ConfigDict(extra="forbid")

    kind: str
    group: str = "peripheral"
    vendor: str = "altr"
    compatible: list[str] = _Field(default_factory=list)


# ################
# Implementation
# ################

_VERSION_RE = re.compile(r"\s*(?P<major>\d+)(?:\.(?P<minor>\d+))?")
