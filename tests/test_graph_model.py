"""Tests for topology validation and indexing."""

import pytest
import numpy as np
from fleet_topology.core import (
    build_graph, NodeKind, TopologyNode, TopologyEdge, TopologyInputError
)


@pytest.fixture
def raw_nodes():
    return [
        {"id": "srv-1", "type": "server", "label": "web-01", "status": "online"},
        {"id": "srv-2", "type": "server", "label": "db-01", "status": "offline"},
        {"id": "prj-1", "type": "project", "label": "shop", "status": "running"},
        {"id": "prj-2", "type": "project", "label": "blog", "status": "stopped"},
    ]


@pytest.fixture
def raw_edges():
    return [
        {"source": "prj-1", "target": "srv-1", "label": "deployed on"},
        {"source": "prj-2", "target": "srv-2"},
    ]


class TestBuildGraph:
    """Test graph construction from raw records."""

    def test_index_maps_ids_to_rows(self, raw_nodes, raw_edges):
        graph = build_graph(raw_nodes, raw_edges)

        assert graph.n_nodes == 4
        for row, node in enumerate(graph.nodes):
            assert graph.index[node.id] == row
        assert graph.row("prj-2") == 3
        assert graph.row("missing") is None

    def test_partition_by_kind(self, raw_nodes, raw_edges):
        graph = build_graph(raw_nodes, raw_edges)

        assert graph.servers == [0, 1]
        assert graph.projects == [2, 3]

    def test_edge_index_rows(self, raw_nodes, raw_edges):
        graph = build_graph(raw_nodes, raw_edges)

        assert graph.edge_index.shape == (2, 2)
        np.testing.assert_array_equal(graph.edge_index, [[2, 0], [3, 1]])
        assert graph.edges[0].label == "deployed on"
        assert graph.edges[1].label is None

    def test_accepts_models(self):
        nodes = [TopologyNode(id="a", kind="server"), TopologyNode(id="b", kind="project")]
        edges = [TopologyEdge(source="b", target="a")]
        graph = build_graph(nodes, edges)

        assert graph.servers == [0]
        assert graph.anchor_row(1) == 0

    def test_kind_key_and_case(self):
        graph = build_graph([{"id": "a", "kind": "SERVER"}, {"id": "b", "type": "Project"}], [])

        assert graph.nodes[0].node_kind is NodeKind.SERVER
        assert graph.nodes[1].node_kind is NodeKind.PROJECT

    def test_unknown_kind_seeded_as_project(self):
        graph = build_graph([{"id": "a", "type": "server"}, {"id": "lb", "type": "loadbalancer"}], [])

        assert graph.projects == [1]
        assert graph.nodes[1].kind == "loadbalancer"
        assert graph.nodes[1].node_kind is None

    def test_integer_ids_are_stringified(self):
        graph = build_graph([{"id": 1, "type": "server"}, {"id": 2}], [{"source": 2, "target": 1}])

        assert graph.index == {"1": 0, "2": 1}
        assert graph.n_edges == 1

    def test_input_not_mutated(self, raw_nodes, raw_edges):
        before = [dict(n) for n in raw_nodes]
        build_graph(raw_nodes, raw_edges)
        assert raw_nodes == before


class TestEdgeFiltering:
    """Test that unresolvable edges are dropped silently."""

    def test_dangling_edges_dropped(self, raw_nodes, raw_edges):
        edges = raw_edges + [
            {"source": "prj-1", "target": "ghost"},
            {"source": "ghost", "target": "srv-1"},
        ]
        graph = build_graph(raw_nodes, edges)

        assert graph.n_edges == 2
        assert graph.dropped_edges == 2
        assert all(e.source != "ghost" and e.target != "ghost" for e in graph.edges)

    def test_self_loops_dropped(self, raw_nodes):
        graph = build_graph(raw_nodes, [{"source": "srv-1", "target": "srv-1"}])

        assert graph.n_edges == 0
        assert graph.dropped_edges == 1
        assert graph.edge_index.shape == (0, 2)

    def test_incomplete_edge_records_dropped(self, raw_nodes):
        graph = build_graph(raw_nodes, [{"source": "prj-1"}, {"target": "srv-1"}])

        assert graph.n_edges == 0
        assert graph.dropped_edges == 2

    def test_first_valid_edge_is_anchor(self, raw_nodes):
        edges = [
            {"source": "prj-1", "target": "nowhere"},
            {"source": "prj-1", "target": "srv-2"},
            {"source": "prj-1", "target": "srv-1"},
        ]
        graph = build_graph(raw_nodes, edges)

        assert graph.anchor_row(2) == 1
        assert graph.anchor_row(3) is None


class TestMalformedInput:
    """Test contract violations and tolerated oddities."""

    def test_none_lists_raise(self):
        with pytest.raises(TopologyInputError):
            build_graph(None, [])
        with pytest.raises(TopologyInputError):
            build_graph([], None)

    def test_non_mapping_record_raises(self):
        with pytest.raises(TopologyInputError):
            build_graph(["srv-1"], [])
        with pytest.raises(TopologyInputError):
            build_graph([{"id": "a"}], [("a", "a")])

    def test_duplicate_ids_last_write_wins(self):
        nodes = [
            {"id": "a", "type": "server", "label": "first"},
            {"id": "b", "type": "project"},
            {"id": "a", "type": "server", "label": "second"},
        ]
        graph = build_graph(nodes, [])

        assert graph.n_nodes == 2
        assert graph.index["a"] == 0
        assert graph.nodes[0].label == "second"

    def test_records_without_id_skipped(self):
        graph = build_graph([{"type": "server", "label": "anonymous"}, {"id": "a"}], [])

        assert graph.n_nodes == 1
        assert graph.nodes[0].id == "a"

    def test_empty_graph(self):
        graph = build_graph([], [])

        assert graph.is_empty
        assert graph.edge_index.shape == (0, 2)


class TestDisplayFields:
    """Test that display-only fields never cost a node or edge its place."""

    def test_null_and_scalar_display_fields_kept(self):
        nodes = [
            {"id": "srv", "type": "server", "label": None, "meta": None},
            {"id": "prj", "type": "project", "status": 3, "meta": "legacy"},
        ]
        graph = build_graph(nodes, [{"source": "prj", "target": "srv"}])

        assert graph.n_nodes == 2
        assert graph.n_edges == 1
        assert graph.dropped_edges == 0
        srv, prj = graph.nodes
        assert srv.label == ""
        assert srv.meta == {}
        assert prj.status == "3"
        assert prj.meta == {"value": "legacy"}

    def test_null_kind_defaults_to_project(self):
        graph = build_graph([{"id": "a", "type": None}, {"id": "b", "type": "server"}], [])

        assert graph.nodes[0].kind == "project"
        assert graph.projects == [0]
        assert graph.servers == [1]

    def test_enum_kind_accepted(self):
        node = TopologyNode(id="a", kind=NodeKind.SERVER)

        assert node.kind == "server"
        assert node.is_server

    def test_non_string_edge_label_kept(self):
        graph = build_graph(
            [{"id": "srv", "type": "server"}, {"id": "prj", "type": "project"}],
            [{"source": "prj", "target": "srv", "label": 8080}],
        )

        assert graph.n_edges == 1
        assert graph.dropped_edges == 0
        assert graph.edges[0].label == "8080"
        assert graph.anchor_row(1) == 0
