# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Links pending connections into the interfaces they join."""

from __future__ import annotations

import logging
from collections import deque

from socgraph.model.entities import Connection

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def connect_components(pending: deque[Connection]) -> int:
    """Drain *pending* front to back, linking each connection into its interfaces.

    A connection without a master interface is dropped. A connection whose
    master already holds a connection to the same slave is a duplicate and
    is dropped as well; the first one seen wins. Every other connection is
    appended to its master's list and, if it has one, its slave's list.

    The queue is always empty afterwards, so calling this again is a no-op.

    Args:
        pending: Connections in document order; consumed in place.

    Returns:
        The number of connections that were linked.
    """
    linked = 0
    while pending:
        connection = pending.popleft()
        master = connection.master
        slave = connection.slave
        if master is None:
            logger.debug("Dropping %r: no master interface", connection)
            continue
        if any(existing.joins(master, slave) for existing in master.connections):
            logger.debug("Dropping duplicate %r", connection)
            continue
        master.connections.append(connection)
        if slave is not None:
            slave.connections.append(connection)
        linked += 1
    return linked
