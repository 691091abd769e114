# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Command-line interface for socgraph."""
