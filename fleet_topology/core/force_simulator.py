"""
Force-directed simulation for topology layout.

Every node repels every other node, each edge acts as a spring pulling its
endpoints toward an ideal separation, and velocities are damped each step.
Forces are accumulated with NumPy over the whole node set at once; the
pairwise repulsion pass is O(n^2) per iteration, which is fine for the few
hundred nodes a fleet topology holds.
"""

import time
from typing import Optional

import numpy as np
import structlog
from pydantic import BaseModel, ConfigDict, Field

from .bounds import DEFAULT_MARGIN, check_canvas, clamp_positions
from .errors import TopologyInputError
from .graph_model import Graph

logger = structlog.get_logger()

# Distances are clamped to this before dividing so coincident nodes stay finite
MIN_DISTANCE = 1.0


class ForceConfig(BaseModel):
    """Tunable constants of the simulation."""

    model_config = ConfigDict(extra="forbid")

    iterations: int = Field(default=200, ge=0, description="Number of simulation steps")
    damping: float = Field(
        default=0.85, ge=0.0, le=1.0, allow_inf_nan=False, description="Velocity decay per step"
    )
    repulsion_constant: float = Field(
        default=2000.0, ge=0.0, allow_inf_nan=False, description="Node-node repulsion strength"
    )
    attraction_constant: float = Field(
        default=0.01, ge=0.0, allow_inf_nan=False, description="Edge spring stiffness"
    )
    ideal_edge_length: float = Field(
        default=150.0, gt=0.0, allow_inf_nan=False, description="Rest length of an edge spring"
    )


class ForceSimulator:
    """
    Runs a fixed number of repulsion/attraction/damping steps.

    The simulator holds no per-graph state: ``run`` copies the arrays it is
    given, so one instance can lay out any number of graphs.
    """

    def __init__(
        self,
        config: Optional[ForceConfig] = None,
        canvas_width: float = 1200.0,
        canvas_height: float = 1200.0,
        margin: float = DEFAULT_MARGIN,
    ):
        check_canvas(canvas_width, canvas_height, margin)
        self.config = config or ForceConfig()
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.margin = margin

    def _apply_repulsion(self, positions: np.ndarray, velocities: np.ndarray) -> None:
        # delta[i, j] = p_j - p_i; the diagonal is zero and contributes nothing
        delta = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
        dist = np.maximum(np.sqrt(np.einsum("ijk,ijk->ij", delta, delta)), MIN_DISTANCE)
        magnitude = self.config.repulsion_constant / (dist * dist)
        push = delta * (magnitude / dist)[:, :, np.newaxis]
        # Row i collects -f(i, j) from every pair, which covers both ends of each pair
        velocities -= push.sum(axis=1)

    def _apply_attraction(
        self, positions: np.ndarray, velocities: np.ndarray, edge_index: np.ndarray
    ) -> None:
        if len(edge_index) == 0:
            return
        sources = edge_index[:, 0]
        targets = edge_index[:, 1]
        delta = positions[targets] - positions[sources]
        dist = np.hypot(delta[:, 0], delta[:, 1])
        magnitude = self.config.attraction_constant * (dist - self.config.ideal_edge_length)
        pull = delta * (magnitude / np.maximum(dist, MIN_DISTANCE))[:, np.newaxis]
        np.add.at(velocities, sources, pull)
        np.subtract.at(velocities, targets, pull)

    def step(self, positions: np.ndarray, velocities: np.ndarray, edge_index: np.ndarray) -> None:
        """Advance one iteration, updating ``positions`` and ``velocities`` in place."""
        self._apply_repulsion(positions, velocities)
        self._apply_attraction(positions, velocities, edge_index)
        velocities *= self.config.damping
        positions += velocities
        clamp_positions(positions, self.canvas_width, self.canvas_height, self.margin, out=positions)

    def run(self, graph: Graph, positions: np.ndarray, velocities: np.ndarray) -> np.ndarray:
        """
        Simulate ``config.iterations`` steps from the seeded state.

        Seeded positions are clamped once on entry so the bounds hold even
        when no iteration runs.

        Args:
            graph: Indexed topology the arrays belong to
            positions: Seeded positions, shape (n, 2)
            velocities: Seeded velocities, shape (n, 2)

        Returns:
            Final positions as a new (n, 2) array
        """
        positions = np.array(positions, dtype=np.float64)
        velocities = np.array(velocities, dtype=np.float64)
        expected = (graph.n_nodes, 2)
        if positions.shape != expected or velocities.shape != expected:
            raise TopologyInputError(
                f"State arrays must have shape {expected}, got {positions.shape} and {velocities.shape}"
            )
        if graph.is_empty:
            return positions

        clamp_positions(positions, self.canvas_width, self.canvas_height, self.margin, out=positions)

        start = time.perf_counter()
        for _ in range(self.config.iterations):
            self.step(positions, velocities, graph.edge_index)

        logger.debug(
            "Force simulation complete",
            iterations=self.config.iterations,
            nodes=graph.n_nodes,
            edges=graph.n_edges,
            elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return positions


def simulate(
    graph: Graph,
    positions: np.ndarray,
    velocities: np.ndarray,
    config: Optional[ForceConfig] = None,
    canvas_width: float = 1200.0,
    canvas_height: float = 1200.0,
    margin: float = DEFAULT_MARGIN,
) -> np.ndarray:
    """Run a one-off simulation; see ``ForceSimulator.run``."""
    simulator = ForceSimulator(config, canvas_width, canvas_height, margin)
    return simulator.run(graph, positions, velocities)
