"""Shared graph fixtures."""

import sys
from pathlib import Path

import networkx as nx
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from netcommunity.graph import Graph, build_graph


@pytest.fixture
def barbell():
    """Two 4-cliques {1..4} and {5..8} joined by the bridge (4, 5)."""
    edges = [(u, v) for u in range(1, 5) for v in range(u + 1, 5)]
    edges += [(u, v) for u in range(5, 9) for v in range(u + 1, 9)]
    edges.append((4, 5))
    attributes = {v: {"side": "left" if v <= 4 else "right", "cloisterville": v % 2 == 0} for v in range(1, 9)}
    return build_graph(8, edges, attributes)


@pytest.fixture
def two_triangles():
    """Two disjoint triangles plus the isolated vertex 7."""
    return build_graph(7, [(1, 2), (2, 3), (1, 3), (4, 5), (5, 6), (4, 6)])


@pytest.fixture
def karate():
    """Zachary's karate club with the 'club' node attribute."""
    return Graph.from_networkx(nx.karate_club_graph())
