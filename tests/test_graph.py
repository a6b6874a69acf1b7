"""
Tests for graph module.

Covers graph construction and validation, attribute records,
NetworkX interchange and the partition helpers.
"""

import pytest
import networkx as nx

from netcommunity.errors import DuplicateEdge, InvalidArgument, InvalidEdge
from netcommunity.graph import (
    Graph,
    build_graph,
    parse_communities,
    canonicalize_partition,
    partition_to_communities,
    validate_partition,
    community_sizes,
    crossing_edges,
)


class TestBuildGraph:
    """Tests for graph construction."""

    def test_build_from_vertex_count(self):
        """Test that an integer n creates vertices 1..n."""
        G = build_graph(4, [(1, 2), (3, 4)])
        assert G.vertices == (1, 2, 3, 4)
        assert G.number_of_edges() == 2

    def test_build_from_vertex_list(self):
        """Test explicit vertex identifiers."""
        G = build_graph([10, 20, 30], [(10, 30)])
        assert G.vertices == (10, 20, 30)
        assert G.has_edge(30, 10)
        assert not G.has_edge(10, 20)

    def test_edges_normalized_in_insertion_order(self):
        """Test that edges are stored as (smaller, larger) in given order."""
        G = build_graph(3, [(3, 2), (1, 2)])
        assert G.edges == ((2, 3), (1, 2))
        assert G.edge_index(2, 3) == 0
        assert G.edge_index(2, 1) == 1

    def test_unknown_vertex_rejected(self):
        """Test that an edge to an unknown vertex raises InvalidEdge."""
        with pytest.raises(InvalidEdge):
            build_graph(3, [(1, 4)])

    def test_self_loop_rejected(self):
        """Test that a self-loop raises InvalidEdge."""
        with pytest.raises(InvalidEdge):
            build_graph(3, [(2, 2)])

    def test_duplicate_edge_rejected(self):
        """Test that the same unordered pair twice raises DuplicateEdge."""
        with pytest.raises(DuplicateEdge):
            build_graph(3, [(1, 2), (2, 1)])

    def test_errors_are_value_errors(self):
        """Test that construction errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            build_graph(2, [(1, 1)])

    def test_duplicate_vertex_rejected(self):
        """Test that listing a vertex twice raises InvalidArgument."""
        with pytest.raises(InvalidArgument):
            Graph([1, 2, 2], [])

    def test_attributes_for_unknown_vertex_rejected(self):
        """Test that attributes must refer to known vertices."""
        with pytest.raises(InvalidArgument):
            build_graph(2, [(1, 2)], {3: {"group": "a"}})


class TestStructure:
    """Tests for degree, neighbors and components."""

    def test_degree_and_neighbors(self, barbell):
        """Test degree and neighbor sets on the barbell graph."""
        assert barbell.degree(1) == 3
        assert barbell.degree(4) == 4
        assert barbell.neighbors(4) == {1, 2, 3, 5}
        assert barbell.degrees() == {1: 3, 2: 3, 3: 3, 4: 4, 5: 4, 6: 3, 7: 3, 8: 3}

    def test_unknown_vertex_lookup(self, barbell):
        """Test that looking up an unknown vertex raises KeyError."""
        with pytest.raises(KeyError):
            barbell.degree(99)
        with pytest.raises(KeyError):
            barbell.neighbors(99)

    def test_connected_components(self, two_triangles):
        """Test components are ordered by their smallest vertex."""
        assert two_triangles.connected_components() == [{1, 2, 3}, {4, 5, 6}, {7}]
        assert not two_triangles.is_connected()

    def test_barbell_is_connected(self, barbell):
        """Test a connected graph has a single component."""
        assert barbell.is_connected()

    def test_subgraph(self, barbell):
        """Test induced subgraph keeps edges and attributes."""
        H = barbell.subgraph([3, 4, 5])
        assert H.vertices == (3, 4, 5)
        assert set(H.edges) == {(3, 4), (4, 5)}
        assert H.get_attribute(5, "side") == "right"


class TestAttributes:
    """Tests for vertex attribute records."""

    def test_set_and_get(self, barbell):
        """Test additive attribute writes."""
        barbell.set_attribute(1, "coreness", 3)
        assert barbell.get_attribute(1, "coreness") == 3
        assert barbell.get_attribute(1, "side") == "left"

    def test_get_missing_returns_default(self, barbell):
        """Test that an unset attribute returns the default."""
        assert barbell.get_attribute(2, "missing") is None
        assert barbell.get_attribute(2, "missing", default=0) == 0

    def test_attribute_write_keeps_structure(self, barbell):
        """Test that attribute writes do not alter vertices or edges."""
        edges_before = barbell.edges
        barbell.set_attributes("community", {v: 0 for v in barbell.vertices})
        assert barbell.edges == edges_before
        assert barbell.number_of_vertices() == 8

    def test_set_attributes_unknown_vertex(self, barbell):
        """Test that a bulk write naming an unknown vertex writes nothing."""
        with pytest.raises(KeyError):
            barbell.set_attributes("flag", {1: True, 99: True})
        assert barbell.get_attribute(1, "flag") is None

    def test_attribute_map(self, barbell):
        """Test the vertex -> value map of one attribute."""
        sides = barbell.attribute_map("side")
        assert sides[1] == "left"
        assert sides[8] == "right"


class TestNetworkXInterchange:
    """Tests for conversion to and from NetworkX."""

    def test_to_networkx(self, barbell):
        """Test export keeps vertices, edges and node data."""
        G = barbell.to_networkx()
        assert G.number_of_nodes() == 8
        assert G.number_of_edges() == 13
        assert G.nodes[1]["side"] == "left"

    def test_from_networkx_karate(self, karate):
        """Test import of the karate club graph."""
        assert karate.number_of_vertices() == 34
        assert karate.number_of_edges() == 78
        assert karate.get_attribute(0, "club") == "Mr. Hi"

    def test_from_networkx_self_loop(self):
        """Test that a NetworkX self-loop is rejected."""
        G = nx.Graph([(0, 1), (1, 1)])
        with pytest.raises(InvalidEdge):
            Graph.from_networkx(G)

    def test_from_networkx_directed(self):
        """Test that directed graphs are rejected."""
        with pytest.raises(InvalidArgument):
            Graph.from_networkx(nx.DiGraph([(0, 1)]))


class TestPartitions:
    """Tests for partition helpers."""

    def test_parse_communities_list_of_sets(self):
        """Test parsing list of sets format."""
        assert parse_communities([{0, 1, 2}, {3, 4}]) == {0: 0, 1: 0, 2: 0, 3: 1, 4: 1}

    def test_parse_communities_dict(self):
        """Test that dict format is preserved, string labels included."""
        assert parse_communities({0: "A", 1: "B"}) == {0: "A", 1: "B"}

    def test_parse_communities_overlap(self):
        """Test that a vertex in two communities is rejected."""
        with pytest.raises(InvalidArgument):
            parse_communities([{0, 1}, {1, 2}])

    def test_canonicalize_partition(self):
        """Test relabelling in order of smallest vertex."""
        assert canonicalize_partition({3: "x", 1: "y", 2: "x"}) == {1: 0, 2: 1, 3: 1}
        assert canonicalize_partition({1: 5, 2: 5, 3: 9}) == canonicalize_partition({1: 0, 2: 0, 3: 1})

    def test_partition_to_communities(self):
        """Test conversion to vertex sets."""
        assert partition_to_communities({1: "b", 2: "a", 3: "b"}) == [{1, 3}, {2}]

    def test_validate_partition_missing_vertex(self, barbell):
        """Test that a partition must cover every vertex."""
        with pytest.raises(InvalidArgument):
            validate_partition(barbell, {v: 0 for v in range(1, 8)})

    def test_validate_partition_unknown_vertex(self, barbell):
        """Test that a partition may not name unknown vertices."""
        partition = {v: 0 for v in range(1, 10)}
        with pytest.raises(InvalidArgument):
            validate_partition(barbell, partition)

    def test_community_sizes(self):
        """Test community size counting."""
        assert community_sizes([{1, 2, 3}, {4}]) == {0: 3, 1: 1}

    def test_crossing_edges(self, barbell):
        """Test that only the bridge crosses between the cliques."""
        flags = crossing_edges(barbell, barbell.attribute_map("side"))
        assert [edge for edge, crossing in flags.items() if crossing] == [(4, 5)]
        assert len(flags) == 13
