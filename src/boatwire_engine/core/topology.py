"""Graph helpers over nodes and connections.

Connections are treated as undirected edges. Maps are rebuilt on every call;
the engine keeps no index between calls.
"""

import logging
from collections import deque
from collections.abc import Iterable, Sequence

from boatwire_engine.core.constants import SOURCE_NODE_TYPES
from boatwire_engine.core.schemas import Connection, ConsumerNode, ElectricalNode

logger = logging.getLogger(__name__)


def node_map(nodes: Iterable[ElectricalNode]) -> dict[str, ElectricalNode]:
    """Index nodes by id. On duplicate ids the first node wins."""
    index: dict[str, ElectricalNode] = {}
    for node in nodes:
        if node.id in index:
            logger.warning("Duplicate node id %r ignored", node.id)
            continue
        index[node.id] = node
    return index


def endpoints(
    connection: Connection, nodes_by_id: dict[str, ElectricalNode]
) -> tuple[ElectricalNode, ElectricalNode] | None:
    """Return both endpoint nodes, or None if either id is unknown."""
    from_node = nodes_by_id.get(connection.from_node_id)
    to_node = nodes_by_id.get(connection.to_node_id)
    if from_node is None or to_node is None:
        return None
    return from_node, to_node


def dangling_connections(
    nodes: Iterable[ElectricalNode], connections: Iterable[Connection]
) -> list[str]:
    """Ids of connections that reference a missing node."""
    known = {n.id for n in nodes}
    return [
        c.id for c in connections if c.from_node_id not in known or c.to_node_id not in known
    ]


def connected_node_ids(connections: Iterable[Connection]) -> set[str]:
    """Ids referenced by at least one connection."""
    ids: set[str] = set()
    for connection in connections:
        ids.add(connection.from_node_id)
        ids.add(connection.to_node_id)
    return ids


def adjacency(connections: Iterable[Connection]) -> dict[str, set[str]]:
    """Undirected adjacency list keyed by node id."""
    neighbours: dict[str, set[str]] = {}
    for connection in connections:
        neighbours.setdefault(connection.from_node_id, set()).add(connection.to_node_id)
        neighbours.setdefault(connection.to_node_id, set()).add(connection.from_node_id)
    return neighbours


def _reaches_source(
    start_id: str,
    nodes_by_id: dict[str, ElectricalNode],
    neighbours: dict[str, set[str]],
) -> bool:
    # Breadth-first search; visited set keeps it finite on cyclic wiring
    visited = {start_id}
    queue = deque([start_id])

    while queue:
        current_id = queue.popleft()
        node = nodes_by_id.get(current_id)
        if node is None:
            continue
        if node.type in SOURCE_NODE_TYPES:
            return True
        for neighbour_id in neighbours.get(current_id, ()):
            if neighbour_id not in visited:
                visited.add(neighbour_id)
                queue.append(neighbour_id)

    return False


def is_connected_to_source(
    node_id: str,
    nodes: Sequence[ElectricalNode],
    connections: Sequence[Connection],
) -> bool:
    """True if a battery, solar, alternator, or charger node is reachable.

    Cable ratings are irrelevant here; any chain of connections counts.
    Unknown ids in the chain are skipped.
    """
    return _reaches_source(node_id, node_map(nodes), adjacency(connections))


def find_unpowered_consumers(
    nodes: Sequence[ElectricalNode],
    connections: Sequence[Connection],
) -> list[ConsumerNode]:
    """Consumers with no path to any source node, in input order."""
    nodes_by_id = node_map(nodes)
    neighbours = adjacency(connections)
    return [
        n
        for n in nodes
        if isinstance(n, ConsumerNode) and not _reaches_source(n.id, nodes_by_id, neighbours)
    ]
