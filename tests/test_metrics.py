"""
Tests for metrics module.

Clique enumeration, core decomposition and modularity, checked on
small hand-built graphs and against NetworkX on the karate club.
"""

import itertools

import pytest
import networkx as nx

from netcommunity.errors import EmptyGraph, InvalidArgument
from netcommunity.graph import build_graph
from netcommunity.metrics.cliques import (
    find_maximal_cliques,
    largest_cliques,
    clique_number,
    clique_membership,
)
from netcommunity.metrics.coreness import compute_coreness, degeneracy, k_core
from netcommunity.metrics.modularity import (
    modularity,
    weighted_modularity,
    modularity_by_attribute,
)


class TestMaximalCliques:
    """Tests for maximal clique enumeration."""

    def test_barbell_cliques(self, barbell):
        """Test the two 4-cliques are found and the bridge is filtered."""
        assert find_maximal_cliques(barbell) == [(1, 2, 3, 4), (5, 6, 7, 8)]

    def test_min_size_filter(self, barbell):
        """Test that no clique reaches size 5."""
        assert find_maximal_cliques(barbell, min_size=5) == []

    def test_max_size_filter(self, barbell):
        """Test the upper size bound."""
        assert find_maximal_cliques(barbell, min_size=3, max_size=3) == []

    def test_min_size_below_three(self, barbell):
        """Test that min_size < 3 raises InvalidArgument."""
        with pytest.raises(InvalidArgument):
            find_maximal_cliques(barbell, min_size=2)

    def test_max_size_below_min_size(self, barbell):
        """Test that max_size < min_size raises InvalidArgument."""
        with pytest.raises(InvalidArgument):
            find_maximal_cliques(barbell, min_size=4, max_size=3)

    def test_cliques_complete_and_maximal(self, karate):
        """Test every reported clique is complete and cannot be extended."""
        cliques = find_maximal_cliques(karate)
        assert cliques
        for clique in cliques:
            for u, v in itertools.combinations(clique, 2):
                assert karate.has_edge(u, v)
            outside = set(karate.vertices) - set(clique)
            for w in outside:
                assert not all(karate.has_edge(w, v) for v in clique)

    def test_matches_networkx(self, karate):
        """Test against nx.find_cliques."""
        expected = {
            frozenset(c) for c in nx.find_cliques(karate.to_networkx()) if len(c) >= 3
        }
        found = {frozenset(c) for c in find_maximal_cliques(karate)}
        assert found == expected

    def test_no_duplicates_and_deterministic(self, karate):
        """Test repeated runs return the same list without duplicates."""
        first = find_maximal_cliques(karate)
        assert first == find_maximal_cliques(karate)
        assert len(first) == len(set(first))

    def test_sorted_largest_first(self, karate):
        """Test ordering by decreasing size."""
        sizes = [len(c) for c in find_maximal_cliques(karate)]
        assert sizes == sorted(sizes, reverse=True)

    def test_largest_cliques(self, barbell):
        """Test maximum cliques and the clique number."""
        assert largest_cliques(barbell) == [(1, 2, 3, 4), (5, 6, 7, 8)]
        assert clique_number(barbell) == 4

    def test_clique_number_without_triangles(self):
        """Test a path has clique number 2."""
        G = build_graph(3, [(1, 2), (2, 3)])
        assert clique_number(G) == 2
        assert largest_cliques(G) == [(1, 2), (2, 3)]

    def test_clique_number_empty(self):
        """Test a graph without vertices has clique number 0."""
        assert clique_number(build_graph(0, [])) == 0

    def test_clique_membership(self, barbell):
        """Test membership flags for the left clique only."""
        flags = clique_membership(barbell, [(1, 2, 3, 4)])
        assert [v for v, flag in flags.items() if flag] == [1, 2, 3, 4]
        assert len(flags) == 8


class TestCoreness:
    """Tests for k-core decomposition."""

    def test_barbell_coreness(self, barbell):
        """Test every barbell vertex is in the 3-core."""
        assert compute_coreness(barbell) == {v: 3 for v in range(1, 9)}

    def test_pendant_vertex(self):
        """Test a triangle with a pendant vertex."""
        G = build_graph(4, [(1, 2), (1, 3), (2, 3), (3, 4)])
        assert compute_coreness(G) == {1: 2, 2: 2, 3: 2, 4: 1}

    def test_isolated_vertex(self, two_triangles):
        """Test isolated vertices have coreness 0."""
        coreness = compute_coreness(two_triangles)
        assert coreness[7] == 0
        assert coreness[1] == 2

    def test_matches_networkx(self, karate):
        """Test against nx.core_number."""
        assert compute_coreness(karate) == nx.core_number(karate.to_networkx())

    def test_complete_mapping(self, karate):
        """Test every vertex receives a coreness."""
        assert set(compute_coreness(karate)) == set(karate.vertices)

    def test_degeneracy(self, karate):
        """Test the karate club is 4-degenerate."""
        assert degeneracy(karate) == 4

    def test_k_core(self):
        """Test the 2-core drops the pendant vertex."""
        G = build_graph(4, [(1, 2), (1, 3), (2, 3), (3, 4)])
        core = k_core(G, 2)
        assert core.vertices == (1, 2, 3)
        assert core.number_of_edges() == 3

    def test_k_core_negative(self, barbell):
        """Test that a negative k raises InvalidArgument."""
        with pytest.raises(InvalidArgument):
            k_core(barbell, -1)

    def test_coreness_merged_as_attribute(self, barbell):
        """Test writing coreness back onto the graph."""
        barbell.set_attributes("coreness", compute_coreness(barbell))
        assert barbell.get_attribute(5, "coreness") == 3


class TestModularity:
    """Tests for modularity scoring."""

    def test_barbell_split(self, barbell):
        """Test the two-clique split: 2 * (6/13 - (13/26)^2)."""
        Q = modularity(barbell, [{1, 2, 3, 4}, {5, 6, 7, 8}])
        assert Q == pytest.approx(12 / 13 - 0.5)

    def test_single_community_is_zero(self, barbell):
        """Test an all-identical-label partition scores 0."""
        assert modularity(barbell, {v: "same" for v in barbell.vertices}) == pytest.approx(0.0)

    def test_singletons_negative(self, barbell):
        """Test singleton communities score below zero."""
        Q = modularity(barbell, {v: v for v in barbell.vertices})
        assert -1.0 <= Q < 0.0

    def test_disconnected_triangles(self, two_triangles):
        """Test two disjoint triangles and an isolated vertex."""
        Q = modularity(two_triangles, [{1, 2, 3}, {4, 5, 6}, {7}])
        assert Q == pytest.approx(0.5)

    def test_empty_graph(self):
        """Test that modularity of an edgeless graph raises EmptyGraph."""
        with pytest.raises(EmptyGraph):
            modularity(build_graph(3, []), {1: 0, 2: 0, 3: 0})

    def test_partition_must_cover_graph(self, barbell):
        """Test a partial partition raises InvalidArgument."""
        with pytest.raises(InvalidArgument):
            modularity(barbell, [{1, 2, 3, 4}])

    def test_matches_networkx(self, karate):
        """Test against nx.community.modularity on the club split."""
        clubs = karate.attribute_map("club")
        communities = [
            {v for v, c in clubs.items() if c == label} for label in sorted(set(clubs.values()))
        ]
        expected = nx.community.modularity(karate.to_networkx(), communities, weight=None)
        assert modularity(karate, clubs) == pytest.approx(expected)

    def test_resolution(self, barbell):
        """Test resolution zero leaves only the internal edge fraction."""
        Q = modularity(barbell, [{1, 2, 3, 4}, {5, 6, 7, 8}], resolution=0.0)
        assert Q == pytest.approx(12 / 13)

    def test_by_attribute(self, barbell):
        """Test modularity of an attribute-induced partition."""
        assert modularity_by_attribute(barbell, "side") == pytest.approx(12 / 13 - 0.5)

    def test_weighted_matches_unweighted(self, barbell):
        """Test the weighted form on a contracted barbell."""
        # Each clique collapsed to one node: 6 internal edges, 1 bridge
        adjacency = {0: {0: 6.0, 1: 1.0}, 1: {1: 6.0, 0: 1.0}}
        assert weighted_modularity(adjacency, {0: 0, 1: 1}) == pytest.approx(12 / 13 - 0.5)

    def test_weighted_empty(self):
        """Test the weighted form rejects zero total weight."""
        with pytest.raises(EmptyGraph):
            weighted_modularity({0: {}}, {0: 0})
