"""Validated, indexed view of a raw topology."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

import numpy as np
import structlog
from pydantic import ValidationError

from .errors import TopologyInputError
from .models import TopologyEdge, TopologyNode

logger = structlog.get_logger()

NodeLike = Union[TopologyNode, Mapping]
EdgeLike = Union[TopologyEdge, Mapping]


@dataclass
class Graph:
    """Nodes plus the edges that resolve against them.

    Every integer in here is a row into ``nodes``: ``index`` maps a node id
    to its row, ``edge_index`` holds one ``(source_row, target_row)`` pair
    per entry of ``edges``, and ``first_targets`` maps a source row to the
    target row of its first valid outgoing edge.
    """

    nodes: List[TopologyNode]
    index: Dict[str, int]
    edges: List[TopologyEdge]
    edge_index: np.ndarray
    servers: List[int] = field(default_factory=list)
    projects: List[int] = field(default_factory=list)
    first_targets: Dict[int, int] = field(default_factory=dict)
    dropped_edges: int = 0

    @property
    def n_nodes(self) -> int:
        return len(self.nodes)

    @property
    def n_edges(self) -> int:
        return len(self.edges)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def row(self, node_id: str) -> Optional[int]:
        return self.index.get(node_id)

    def anchor_row(self, row: int) -> Optional[int]:
        """Target row of the first valid edge leaving ``row``, if any."""
        return self.first_targets.get(row)


def _coerce_node(record: Any) -> Optional[TopologyNode]:
    if isinstance(record, TopologyNode):
        return record
    if not isinstance(record, Mapping):
        raise TopologyInputError(
            f"Node records must be mappings or TopologyNode, got {type(record).__name__}"
        )
    try:
        return TopologyNode.model_validate(dict(record))
    except ValidationError as e:
        logger.warning("Skipping unusable node record", error=str(e))
        return None


def _coerce_edge(record: Any) -> Optional[TopologyEdge]:
    if isinstance(record, TopologyEdge):
        return record
    if not isinstance(record, Mapping):
        raise TopologyInputError(
            f"Edge records must be mappings or TopologyEdge, got {type(record).__name__}"
        )
    try:
        return TopologyEdge.model_validate(dict(record))
    except ValidationError:
        return None


def build_graph(nodes: Iterable[NodeLike], edges: Iterable[EdgeLike]) -> Graph:
    """
    Validate and index a raw topology.

    Duplicate node ids keep the row of their first occurrence and the data
    of their last. Edges naming an unknown node, self-loops and edge records
    without both endpoints are dropped and counted, never raised.

    Args:
        nodes: Node records (TopologyNode or mappings with id/type/label/...)
        edges: Edge records (TopologyEdge or mappings with source/target)

    Returns:
        Graph ready for seeding and simulation

    Raises:
        TopologyInputError: if either list is absent or holds non-records
    """
    if nodes is None or edges is None:
        raise TopologyInputError("Both node and edge lists are required")

    graph_nodes: List[TopologyNode] = []
    index: Dict[str, int] = {}

    for record in nodes:
        node = _coerce_node(record)
        if node is None:
            continue
        row = index.get(node.id)
        if row is None:
            index[node.id] = len(graph_nodes)
            graph_nodes.append(node)
        else:
            logger.debug("Duplicate node id, keeping last record", node_id=node.id)
            graph_nodes[row] = node

    servers = [row for row, node in enumerate(graph_nodes) if node.is_server]
    projects = [row for row, node in enumerate(graph_nodes) if not node.is_server]

    graph_edges: List[TopologyEdge] = []
    pairs: List[tuple] = []
    first_targets: Dict[int, int] = {}
    dropped = 0

    for record in edges:
        edge = _coerce_edge(record)
        if edge is None:
            dropped += 1
            continue
        source = index.get(edge.source)
        target = index.get(edge.target)
        if source is None or target is None or source == target:
            dropped += 1
            continue
        graph_edges.append(edge)
        pairs.append((source, target))
        first_targets.setdefault(source, target)

    if dropped:
        logger.debug("Dropped unresolvable edges", dropped=dropped, kept=len(graph_edges))

    edge_index = np.array(pairs, dtype=np.intp).reshape(-1, 2)

    return Graph(
        nodes=graph_nodes,
        index=index,
        edges=graph_edges,
        edge_index=edge_index,
        servers=servers,
        projects=projects,
        first_targets=first_targets,
        dropped_edges=dropped,
    )
