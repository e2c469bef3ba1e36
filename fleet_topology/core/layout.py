"""
Topology layout pipeline.

Raw nodes and edges go through GraphModel, InitialPlacement and the
ForceSimulator, and come out as a snapshot of final positions for the
renderer. Nothing is kept between calls.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterable, Optional, Tuple, Union

import numpy as np
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..config.config import Settings, settings as default_settings
from ..utils.random import make_rng
from .bounds import DEFAULT_MARGIN
from .errors import LayoutConfigError, TopologyInputError
from .force_simulator import ForceConfig, ForceSimulator
from .graph_model import EdgeLike, Graph, NodeLike, build_graph
from .initial_placement import DEFAULT_JITTER_RANGE, DEFAULT_SERVER_RADIUS, seed_positions
from .models import LayoutResult, PositionedNode

logger = structlog.get_logger()


class LayoutOptions(BaseModel):
    """Everything a single layout request can tune."""

    model_config = ConfigDict(extra="forbid")

    canvas_width: float = Field(default=1200.0, gt=0, allow_inf_nan=False)
    canvas_height: float = Field(default=1200.0, gt=0, allow_inf_nan=False)
    margin: float = Field(default=DEFAULT_MARGIN, ge=0, allow_inf_nan=False)
    server_radius: float = Field(default=DEFAULT_SERVER_RADIUS, ge=0, allow_inf_nan=False)
    jitter_range: float = Field(default=DEFAULT_JITTER_RANGE, ge=0, allow_inf_nan=False)
    forces: ForceConfig = Field(default_factory=ForceConfig)
    seed: Optional[Union[int, str]] = Field(default=None, description="Seed for reproducible jitter")

    @model_validator(mode="after")
    def _check_drawable_area(self) -> "LayoutOptions":
        if self.canvas_width < 2 * self.margin or self.canvas_height < 2 * self.margin:
            raise ValueError(
                f"canvas {self.canvas_width}x{self.canvas_height} leaves no room inside margin {self.margin}"
            )
        return self

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **overrides: Any) -> "LayoutOptions":
        """
        Build options from settings, with per-request overrides on top.

        ``forces`` may be given as a partial mapping; only the keys it names
        replace the configured values.
        """
        s = settings or default_settings
        values: Dict[str, Any] = {
            "canvas_width": s.canvas_width,
            "canvas_height": s.canvas_height,
            "margin": s.margin,
            "server_radius": s.server_radius,
            "jitter_range": s.jitter_range,
            "forces": {
                "iterations": s.iterations,
                "damping": s.damping,
                "repulsion_constant": s.repulsion_constant,
                "attraction_constant": s.attraction_constant,
                "ideal_edge_length": s.ideal_edge_length,
            },
        }
        forces = overrides.pop("forces", None)
        if isinstance(forces, ForceConfig):
            forces = forces.model_dump()
        elif forces is not None and not isinstance(forces, Mapping):
            raise LayoutConfigError(f"forces must be a mapping, got {type(forces).__name__}")
        if forces:
            values["forces"].update(forces)
        values.update(overrides)
        return cls.model_validate(values)


def resolve_options(options: Union[LayoutOptions, Mapping, None]) -> LayoutOptions:
    """Turn None, a mapping or a LayoutOptions into validated options."""
    if isinstance(options, LayoutOptions):
        return options
    if options is not None and not isinstance(options, Mapping):
        raise LayoutConfigError(f"Unsupported options type: {type(options).__name__}")
    try:
        return LayoutOptions.from_settings(**dict(options or {}))
    except ValidationError as e:
        raise LayoutConfigError(str(e)) from e


def _snapshot(graph: Graph, positions: np.ndarray, options: LayoutOptions) -> LayoutResult:
    nodes = []
    snapshot: Dict[str, Tuple[float, float]] = {}
    for row, node in enumerate(graph.nodes):
        x, y = float(positions[row, 0]), float(positions[row, 1])
        snapshot[node.id] = (x, y)
        nodes.append(PositionedNode(**node.model_dump(), x=x, y=y))

    return LayoutResult(
        nodes=nodes,
        edges=list(graph.edges),
        positions=snapshot,
        canvas_width=options.canvas_width,
        canvas_height=options.canvas_height,
        iterations=options.forces.iterations,
        dropped_edges=graph.dropped_edges,
    )


def compute_layout(
    nodes: Iterable[NodeLike],
    edges: Iterable[EdgeLike],
    options: Union[LayoutOptions, Mapping, None] = None,
    rng: Optional[np.random.Generator] = None,
) -> LayoutResult:
    """
    Lay out a topology graph on the canvas.

    Args:
        nodes: Node records from the topology endpoint
        edges: Edge records from the topology endpoint
        options: LayoutOptions, a mapping of overrides, or None for settings defaults
        rng: Generator for seeding jitter; takes precedence over ``options.seed``

    Returns:
        LayoutResult with one positioned node per distinct input id

    Raises:
        TopologyInputError: if nodes or edges is None
        LayoutConfigError: if the options are invalid
    """
    if nodes is None or edges is None:
        raise TopologyInputError("Both node and edge lists are required")

    options = resolve_options(options)
    graph = build_graph(nodes, edges)

    if graph.is_empty:
        logger.info("Empty topology, nothing to lay out", dropped_edges=graph.dropped_edges)
        return LayoutResult(
            canvas_width=options.canvas_width,
            canvas_height=options.canvas_height,
            iterations=0,
            dropped_edges=graph.dropped_edges,
        )

    if rng is None:
        rng = make_rng(options.seed)

    positions, velocities = seed_positions(
        graph,
        options.canvas_width,
        options.canvas_height,
        server_radius=options.server_radius,
        jitter_range=options.jitter_range,
        rng=rng,
    )

    simulator = ForceSimulator(
        options.forces, options.canvas_width, options.canvas_height, options.margin
    )
    positions = simulator.run(graph, positions, velocities)

    logger.info(
        "Topology layout computed",
        nodes=graph.n_nodes,
        servers=len(graph.servers),
        projects=len(graph.projects),
        edges=graph.n_edges,
        dropped_edges=graph.dropped_edges,
        iterations=options.forces.iterations,
    )

    return _snapshot(graph, positions, options)


def layout_positions(
    nodes: Iterable[NodeLike],
    edges: Iterable[EdgeLike],
    options: Union[LayoutOptions, Mapping, None] = None,
    rng: Optional[np.random.Generator] = None,
) -> Dict[str, Tuple[float, float]]:
    """Compute a layout and return only the ``{id: (x, y)}`` snapshot."""
    return compute_layout(nodes, edges, options, rng).positions
