import logging
from typing import Dict, List, Tuple

from .errors import (
    DuplicateEdgeError,
    DuplicateNodeError,
    UnknownEdgeError,
    UnknownEndpointError,
    UnknownNodeError,
)
from .types import Edge, Node

logger = logging.getLogger(__name__)


class GraphStore:
    """
    Nodes keyed by id (insertion order kept) and an ordered edge sequence.

    Pure data: no acyclicity or dependency-group checks happen here.
    """

    def __init__(self):
        self._nodes: Dict[str, Node] = {}
        self._edges: Dict[str, Edge] = {}  # dicts keep insertion order

    # ---- nodes ----

    def add_node(self, node: Node) -> Node:
        if node.id in self._nodes:
            raise DuplicateNodeError(node.id)
        self._nodes[node.id] = node
        logger.debug(f"[Store] Node added: {node.id}")
        return node

    def remove_node(self, node_id: str) -> Tuple[Node, List[Edge]]:
        """Remove a node and every edge touching it; the removed edges are returned."""
        if node_id not in self._nodes:
            raise UnknownNodeError(node_id)

        cascaded = self.edges_touching(node_id)
        for edge in cascaded:
            del self._edges[edge.id]
        node = self._nodes.pop(node_id)

        logger.debug(f"[Store] Node removed: {node_id} (cascaded {len(cascaded)} edges)")
        return node, cascaded

    def get_node(self, node_id: str) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    @property
    def node_ids(self) -> List[str]:
        return list(self._nodes)

    # ---- edges ----

    def add_edge(self, edge: Edge) -> Edge:
        if edge.source not in self._nodes:
            raise UnknownEndpointError(edge.source, role="source")
        if edge.target not in self._nodes:
            raise UnknownEndpointError(edge.target, role="target")
        if edge.id in self._edges:
            raise DuplicateEdgeError(edge.id)
        self._edges[edge.id] = edge
        logger.debug(f"[Store] Edge added: {edge.id}")
        return edge

    def remove_edge(self, edge_id: str) -> Edge:
        try:
            edge = self._edges.pop(edge_id)
        except KeyError:
            raise UnknownEdgeError(edge_id) from None
        logger.debug(f"[Store] Edge removed: {edge_id}")
        return edge

    def get_edge(self, edge_id: str) -> Edge:
        try:
            return self._edges[edge_id]
        except KeyError:
            raise UnknownEdgeError(edge_id) from None

    def has_edge(self, edge_id: str) -> bool:
        return edge_id in self._edges

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges.values())

    @property
    def edge_ids(self) -> List[str]:
        return list(self._edges)

    def incoming(self, node_id: str) -> List[Edge]:
        return [e for e in self._edges.values() if e.target == node_id]

    def outgoing(self, node_id: str) -> List[Edge]:
        return [e for e in self._edges.values() if e.source == node_id]

    def edges_touching(self, node_id: str) -> List[Edge]:
        return [
            e for e in self._edges.values()
            if e.source == node_id or e.target == node_id
        ]

    def __len__(self) -> int:
        return len(self._nodes)
