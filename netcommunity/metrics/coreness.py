"""
Coreness Module
===============

k-core decomposition by iterative degree peeling.

The k-core of a graph is its maximal subgraph in which every vertex has
degree at least k. The coreness of a vertex is the largest k for which
it belongs to the k-core.

References
----------
.. [1] Batagelj, V. & Zaversnik, M. An O(m) algorithm for cores
   decomposition of networks. arXiv:cs/0310049 (2003).
"""

import heapq
import logging
from typing import Dict, Hashable, List, Optional, Tuple

from ..errors import InvalidArgument
from ..graph.store import Graph

logger = logging.getLogger(__name__)

CorenessMap = Dict[Hashable, int]


def compute_coreness(graph: Graph) -> CorenessMap:
    """
    Compute the coreness of every vertex.

    Vertices are peeled in order of current degree. A removed vertex
    gets coreness ``max(d, k)`` where ``d`` is its degree at removal and
    ``k`` the largest coreness assigned so far; its remaining neighbours
    then lose one degree each. Ties between vertices of equal degree are
    resolved by vertex order, which does not change the result.

    Parameters
    ----------
    graph : Graph
        Input graph

    Returns
    -------
    Dict[Hashable, int]
        Coreness of every vertex

    Examples
    --------
    >>> from netcommunity.graph import build_graph
    >>> G = build_graph(4, [(1, 2), (1, 3), (2, 3), (3, 4)])
    >>> compute_coreness(G)
    {1: 2, 2: 2, 3: 2, 4: 1}
    """
    degree = graph.degrees()
    heap: List[Tuple[int, Hashable]] = [(d, v) for v, d in degree.items()]
    heapq.heapify(heap)

    coreness: CorenessMap = {}
    k = 0
    while heap:
        d, v = heapq.heappop(heap)
        # Stale entry left behind by a degree decrement
        if v in coreness or d != degree[v]:
            continue
        k = max(k, d)
        coreness[v] = k
        for w in graph.neighbors(v):
            if w not in coreness:
                degree[w] -= 1
                heapq.heappush(heap, (degree[w], w))

    logger.debug(f"Core decomposition finished, degeneracy {k}")
    return {v: coreness[v] for v in graph.vertices}


def degeneracy(graph: Graph) -> int:
    """Largest coreness over all vertices (0 for an edgeless graph)."""
    coreness = compute_coreness(graph)
    return max(coreness.values(), default=0)


def k_core(graph: Graph, k: int, coreness: Optional[CorenessMap] = None) -> Graph:
    """
    Induced subgraph of the vertices with coreness at least ``k``.

    Parameters
    ----------
    graph : Graph
        Input graph
    k : int
        Core order, non-negative
    coreness : dict, optional
        Precomputed coreness; computed when omitted

    Returns
    -------
    Graph
        The k-core (possibly without vertices)
    """
    if k < 0:
        raise InvalidArgument(f"k must be non-negative, got {k}")
    if coreness is None:
        coreness = compute_coreness(graph)
    return graph.subgraph(v for v, c in coreness.items() if c >= k)
