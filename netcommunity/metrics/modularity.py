"""
Modularity Module
=================

Newman-Girvan modularity of a vertex partition.

    Q = 1/(2m) * sum_ij [A_ij - gamma * k_i k_j / (2m)] * delta(c_i, c_j)

which is computed per community as

    Q = sum_c [ L_c / m - gamma * (D_c / (2m))^2 ]

where L_c is the number of edges inside community c and D_c the sum of
the degrees of its vertices. With ``gamma = 1`` the value lies in
[-1/2, 1]; a partition that puts every vertex in one community scores 0.

References
----------
.. [1] Newman, M. E. J. & Girvan, M. Finding and evaluating community
   structure in networks. Phys. Rev. E 69, 026113 (2004).
"""

import logging
from collections import defaultdict
from typing import Any, Dict, Hashable, Mapping

from ..config import LOUVAIN_RESOLUTION
from ..errors import EmptyGraph
from ..graph.partition import Communities, validate_partition
from ..graph.store import Graph

logger = logging.getLogger(__name__)

# {node: {neighbor: weight}}; a self-loop of weight w is stored once as adj[i][i] = w
WeightedAdjacency = Mapping[Hashable, Mapping[Hashable, float]]


def modularity(
    graph: Graph,
    partition: Communities,
    resolution: float = LOUVAIN_RESOLUTION,
) -> float:
    """
    Compute the modularity of ``partition`` on ``graph``.

    Parameters
    ----------
    graph : Graph
        Input graph
    partition : dict or list of sets
        Community of every vertex, as ``{vertex: label}`` or a list of
        vertex sets
    resolution : float, optional
        Resolution parameter gamma (default: 1.0)

    Returns
    -------
    float
        Modularity Q

    Raises
    ------
    EmptyGraph
        If the graph has no edges
    InvalidArgument
        If the partition does not assign every vertex exactly once

    Examples
    --------
    >>> from netcommunity.graph import build_graph
    >>> G = build_graph(6, [(1, 2), (2, 3), (1, 3), (4, 5), (5, 6), (4, 6)])
    >>> modularity(G, [{1, 2, 3}, {4, 5, 6}])
    0.5
    """
    m = graph.number_of_edges()
    if m == 0:
        raise EmptyGraph("Modularity is undefined for a graph without edges")

    partition = validate_partition(graph, partition)

    internal: Dict[Any, int] = defaultdict(int)
    degree_sum: Dict[Any, int] = defaultdict(int)
    for u, v in graph.edges:
        if partition[u] == partition[v]:
            internal[partition[u]] += 1
    for v in graph.vertices:
        degree_sum[partition[v]] += graph.degree(v)

    return sum(
        internal[c] / m - resolution * (degree_sum[c] / (2.0 * m)) ** 2
        for c in degree_sum
    )


def weighted_modularity(
    adjacency: WeightedAdjacency,
    partition: Mapping[Hashable, Any],
    resolution: float = LOUVAIN_RESOLUTION,
) -> float:
    """
    Modularity over a weighted adjacency with self-loops.

    Used on the contracted graphs built by the Louvain levels, where a
    community collapses into one node whose internal edges become a
    self-loop.

    Parameters
    ----------
    adjacency : mapping
        ``{node: {neighbor: weight}}``, symmetric; self-loop weight
        stored once under ``adjacency[i][i]``
    partition : mapping
        Community of every node
    resolution : float, optional
        Resolution parameter gamma (default: 1.0)

    Returns
    -------
    float
        Modularity Q

    Raises
    ------
    EmptyGraph
        If the total edge weight is zero
    """
    internal: Dict[Any, float] = defaultdict(float)
    degree_sum: Dict[Any, float] = defaultdict(float)
    twice_m = 0.0

    for i, neighbors in adjacency.items():
        c = partition[i]
        for j, w in neighbors.items():
            k = 2.0 * w if i == j else w
            degree_sum[c] += k
            twice_m += k
            if partition[j] == c:
                internal[c] += k

    if twice_m == 0:
        raise EmptyGraph("Modularity is undefined for a graph without edges")

    # internal[c] counts every edge from both endpoints, i.e. 2 * L_c
    return sum(
        internal[c] / twice_m - resolution * (degree_sum[c] / twice_m) ** 2
        for c in degree_sum
    )


def modularity_by_attribute(graph: Graph, key: str, resolution: float = LOUVAIN_RESOLUTION) -> float:
    """
    Modularity of the partition induced by a vertex attribute.

    Vertices sharing the same value of ``key`` form one community;
    vertices without the attribute share the ``None`` community.

    Examples
    --------
    >>> from netcommunity.graph import build_graph
    >>> G = build_graph(2, [(1, 2)], {1: {"group": "a"}, 2: {"group": "a"}})
    >>> modularity_by_attribute(G, "group")
    0.0
    """
    return modularity(graph, graph.attribute_map(key), resolution=resolution)
