# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Load .sopcinfo system-on-chip reports into an in-memory system graph."""
