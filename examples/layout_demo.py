#!/usr/bin/env python3
"""
Demo script laying out a small server/project fleet.
"""

import numpy as np
from fleet_topology.core import compute_layout


def main():
    """Demonstrate topology layout."""
    print("Fleet Topology Layout Demo")
    print("=" * 40)

    nodes = [{"id": f"srv-{s}", "type": "server", "label": f"node-{s:02d}"} for s in range(3)]
    edges = []
    for s in range(3):
        for p in range(s + 2):
            project_id = f"prj-{s}-{p}"
            nodes.append({"id": project_id, "type": "project", "label": f"app-{s}{p}"})
            edges.append({"source": project_id, "target": f"srv-{s}"})
    edges.append({"source": "prj-0-0", "target": "srv-retired"})

    print(f"\nLaying out {len(nodes)} nodes and {len(edges)} edges...")
    result = compute_layout(nodes, edges, {"seed": "demo123"})
    print(f"Dropped {result.dropped_edges} unresolvable edge(s)")

    print("\nFinal positions:")
    print("-" * 30)
    for node in result.nodes:
        print(f"  {node.id:<10} {node.kind:<8} ({node.x:7.1f}, {node.y:7.1f})")

    # Edge length statistics
    lengths = [
        np.hypot(
            result.positions[e.source][0] - result.positions[e.target][0],
            result.positions[e.source][1] - result.positions[e.target][1],
        )
        for e in result.edges
    ]
    print(f"\nEdge length: mean {np.mean(lengths):.1f}, min {np.min(lengths):.1f}, max {np.max(lengths):.1f}")


if __name__ == "__main__":
    main()
