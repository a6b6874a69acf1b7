"""
Louvain Module
==============

Greedy modularity optimisation with the two-phase Louvain procedure.

Phase 1 starts from singleton communities and repeatedly moves each
node to the neighbouring community with the largest modularity gain
until a full pass makes no move. Phase 2 contracts every community into
a single node (internal edges become a self-loop, parallel edges are
summed) and the procedure restarts on the contracted graph. Levels stop
when phase 1 can no longer move any node.

Nodes are visited in vertex order and ties between equally good
communities go to the lowest community id, so the result is fully
deterministic.

References
----------
.. [1] Blondel, V. D., Guillaume, J.-L., Lambiotte, R. & Lefebvre, E.
   Fast unfolding of communities in large networks. J. Stat. Mech.
   P10008 (2008).
"""

import logging
from collections import defaultdict
from typing import Dict, Hashable, List, Tuple

from ..config import LOUVAIN_RESOLUTION, MODULARITY_TOLERANCE
from ..graph.partition import canonicalize_partition
from ..graph.store import Graph
from ..metrics.modularity import weighted_modularity
from .base import CommunityDetector

logger = logging.getLogger(__name__)

# Node i -> {neighbor: weight}; self-loop weight stored once under adj[i][i]
Adjacency = List[Dict[int, float]]


def _node_strengths(adj: Adjacency) -> List[float]:
    return [
        sum(w for j, w in neighbors.items() if j != i) + 2.0 * neighbors.get(i, 0.0)
        for i, neighbors in enumerate(adj)
    ]


def _one_level(adj: Adjacency, resolution: float) -> Tuple[List[int], bool]:
    """
    Phase 1: local moving of nodes between communities.

    Returns
    -------
    communities : list of int
        Community of every node
    improved : bool
        True if at least one node moved
    """
    n = len(adj)
    k = _node_strengths(adj)
    twice_m = sum(k)
    community = list(range(n))
    total = list(k)
    improved = False

    n_pass = 0
    while True:
        n_pass += 1
        moves = 0
        for i in range(n):
            own = community[i]
            links: Dict[int, float] = defaultdict(float)
            for j, w in adj[i].items():
                if j != i:
                    links[community[j]] += w

            total[own] -= k[i]

            def gain(c: int) -> float:
                return links.get(c, 0.0) - resolution * total[c] * k[i] / twice_m

            best, best_gain = own, gain(own)
            candidate, candidate_gain = None, 0.0
            for c in sorted(links):
                if c == own:
                    continue
                g = gain(c)
                if candidate is None or g > candidate_gain + MODULARITY_TOLERANCE:
                    candidate, candidate_gain = c, g
            if candidate is not None and candidate_gain > best_gain + MODULARITY_TOLERANCE:
                best = candidate

            total[best] += k[i]
            community[i] = best
            if best != own:
                moves += 1

        logger.debug(f"Louvain pass {n_pass}: {moves} moves")
        if moves == 0:
            break
        improved = True

    return community, improved


def _renumber(community: List[int]) -> List[int]:
    """Relabel communities ``0..K-1`` in order of first appearance."""
    relabel: Dict[int, int] = {}
    return [relabel.setdefault(c, len(relabel)) for c in community]


def _contract(adj: Adjacency, community: List[int]) -> Adjacency:
    """Phase 2: collapse each community into one node."""
    n_communities = max(community) + 1
    contracted: List[Dict[int, float]] = [defaultdict(float) for _ in range(n_communities)]
    for i, neighbors in enumerate(adj):
        for j, w in neighbors.items():
            # Each undirected edge once; self-loops have j == i
            if j < i:
                continue
            ci, cj = community[i], community[j]
            if ci == cj:
                contracted[ci][ci] += w
            else:
                contracted[ci][cj] += w
                contracted[cj][ci] += w
    return [dict(neighbors) for neighbors in contracted]


class GreedyModularity(CommunityDetector):
    """
    Louvain community detection.

    Parameters
    ----------
    resolution : float, optional
        Resolution parameter gamma (default: 1.0)
    require_connected : bool, optional
        Reject disconnected graphs (default: False)

    Attributes
    ----------
    levels : list of dict
        Partition of the original vertices after each contraction level
        of the last :meth:`detect` call
    modularity_ : float
        Modularity of the last returned partition

    Examples
    --------
    >>> from netcommunity.graph import build_graph
    >>> G = build_graph(6, [(1, 2), (2, 3), (1, 3), (3, 4), (4, 5), (5, 6), (4, 6)])
    >>> GreedyModularity().detect(G)
    {1: 0, 2: 0, 3: 0, 4: 1, 5: 1, 6: 1}
    """

    name = "louvain"

    def __init__(self, resolution: float = LOUVAIN_RESOLUTION, require_connected: bool = False) -> None:
        super().__init__(require_connected=require_connected)
        self.resolution = resolution
        self.levels: List[Dict[Hashable, int]] = []

    def _detect(self, graph: Graph) -> Dict[Hashable, int]:
        vertices = graph.vertices
        index = {v: i for i, v in enumerate(vertices)}
        adj: Adjacency = [
            {index[u]: 1.0 for u in graph.neighbors(v)} for v in vertices
        ]

        # Original vertex index -> node of the current level
        membership = list(range(len(vertices)))
        self.levels = []

        while True:
            community, improved = _one_level(adj, self.resolution)
            if not improved:
                break
            community = _renumber(community)
            membership = [community[node] for node in membership]
            self.levels.append(
                canonicalize_partition({v: membership[i] for i, v in enumerate(vertices)})
            )
            adj = _contract(adj, community)
            level_q = weighted_modularity(dict(enumerate(adj)), {c: c for c in range(len(adj))}, self.resolution)
            logger.debug(f"Louvain level {len(self.levels)}: {len(adj)} communities, Q={level_q:.4f}")

        return {v: membership[i] for i, v in enumerate(vertices)}

    def __repr__(self) -> str:
        return f"GreedyModularity(resolution={self.resolution}, require_connected={self.require_connected})"
