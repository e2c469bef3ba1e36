"""Starting coordinates for the force simulation."""

from typing import Optional, Tuple

import numpy as np

from ..utils.random import make_rng
from .graph_model import Graph

DEFAULT_SERVER_RADIUS = 150.0
DEFAULT_JITTER_RANGE = 60.0


def server_ring(count: int, center: np.ndarray, radius: float) -> np.ndarray:
    """
    Evenly spaced points on a circle around ``center``.

    Point ``i`` sits at angle ``2*pi*i / max(count, 1)``, so a single server
    lands at ``center + (radius, 0)``.
    """
    angles = 2 * np.pi * np.arange(count) / max(count, 1)
    ring = np.empty((count, 2), dtype=np.float64)
    ring[:, 0] = center[0] + radius * np.cos(angles)
    ring[:, 1] = center[1] + radius * np.sin(angles)
    return ring


def seed_positions(
    graph: Graph,
    canvas_width: float,
    canvas_height: float,
    server_radius: float = DEFAULT_SERVER_RADIUS,
    jitter_range: float = DEFAULT_JITTER_RANGE,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Seed positions and zero velocities for every node in ``graph``.

    Servers go on a ring around the canvas centre. Each project is then
    dropped near its anchor: the target of its first valid outgoing edge if
    that node already has a position (every server does, as do projects
    seeded earlier in input order), otherwise the canvas centre. The offset
    is drawn uniformly from ``[-jitter_range, jitter_range]``, x then y.

    Args:
        graph: Indexed topology
        canvas_width: Canvas width
        canvas_height: Canvas height
        server_radius: Radius of the server ring
        jitter_range: Maximum per-axis offset of a project from its anchor
        rng: Generator used for jitter; a fresh unseeded one if omitted

    Returns:
        Tuple of (positions, velocities), both float64 arrays of shape (n, 2)
    """
    n = graph.n_nodes
    positions = np.zeros((n, 2), dtype=np.float64)
    velocities = np.zeros((n, 2), dtype=np.float64)
    if n == 0:
        return positions, velocities

    if rng is None:
        rng = make_rng()

    center = np.array([canvas_width / 2, canvas_height / 2], dtype=np.float64)
    seeded = np.zeros(n, dtype=bool)

    if graph.servers:
        positions[graph.servers] = server_ring(len(graph.servers), center, server_radius)
        seeded[graph.servers] = True

    for row in graph.projects:
        target = graph.anchor_row(row)
        if target is not None and seeded[target]:
            anchor = positions[target].copy()
        else:
            anchor = center
        jitter_x = rng.uniform(-jitter_range, jitter_range)
        jitter_y = rng.uniform(-jitter_range, jitter_range)
        positions[row, 0] = anchor[0] + jitter_x
        positions[row, 1] = anchor[1] + jitter_y
        seeded[row] = True

    return positions, velocities
