# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Consistency checks for loaded systems (duplicate names, loops, isolated modules, etc.)."""

from socgraph.validation.checks import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    validate,
)

__all__ = [
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "validate",
]
