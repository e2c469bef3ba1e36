"""
Core topology layout functionality.
"""

from .errors import TopologyError, TopologyInputError, LayoutConfigError
from .models import NodeKind, TopologyNode, TopologyEdge, PositionedNode, LayoutResult
from .graph_model import Graph, build_graph
from .initial_placement import seed_positions, server_ring
from .force_simulator import ForceConfig, ForceSimulator, simulate
from .bounds import check_canvas, clamp_position, clamp_positions
from .layout import LayoutOptions, compute_layout, layout_positions

__all__ = ['TopologyError', 'TopologyInputError', 'LayoutConfigError',
           'NodeKind', 'TopologyNode', 'TopologyEdge', 'PositionedNode', 'LayoutResult',
           'Graph', 'build_graph', 'seed_positions', 'server_ring',
           'ForceConfig', 'ForceSimulator', 'simulate',
           'check_canvas', 'clamp_position', 'clamp_positions',
           'LayoutOptions', 'compute_layout', 'layout_positions']
