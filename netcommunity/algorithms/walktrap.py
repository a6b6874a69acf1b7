"""
Walktrap Module
===============

Random-walk based agglomerative community detection (Walktrap).

Every vertex gets a self-loop and the walk transition matrix
``P = D^-1 A`` is built. The row ``P^t[i]`` is the distribution of a
``t``-step walk started at ``i``; it is either computed exactly or
estimated from seeded simulated walks. Two communities are close when
the walk distributions of their members look alike:

    r(C1, C2)^2 = sum_k (P^t[C1, k] - P^t[C2, k])^2 / d(k)

Adjacent communities are merged greedily in order of the smallest
increase

    dsigma(C1, C2) = (1/n) * |C1||C2| / (|C1| + |C2|) * r(C1, C2)^2

which yields a dendrogram. The dendrogram is cut at the merge step with
the highest modularity.

References
----------
.. [1] Pons, P. & Latapy, M. Computing communities in large networks
   using random walks. J. Graph Algorithms Appl. 10, 191-218 (2006).
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Set, Tuple

import numpy as np
from numpy.typing import NDArray

from ..config import COMMUNITY_DETECTION_SEED, MODULARITY_TOLERANCE, WALKTRAP_STEPS
from ..errors import InvalidArgument
from ..graph.partition import canonicalize_partition
from ..graph.store import Graph
from ..metrics.modularity import modularity
from .base import CommunityDetector

logger = logging.getLogger(__name__)


@dataclass
class Dendrogram:
    """
    Merge history of the agglomeration.

    Communities are numbered like a SciPy linkage: the vertex at
    position ``i`` of ``graph.vertices`` starts as community ``i`` and
    the community formed by merge ``s`` (counting from 0) gets id
    ``n + s``.

    Attributes
    ----------
    merges : list of tuple
        ``(a, b)`` community ids joined at each step
    modularity : list of float
        ``modularity[0]`` scores the singleton partition,
        ``modularity[s]`` the partition after ``s`` merges
    best_step : int
        Number of merges at the best cut
    partition : dict
        Canonical partition at ``best_step``
    """

    merges: List[Tuple[int, int]] = field(default_factory=list)
    modularity: List[float] = field(default_factory=list)
    best_step: int = 0
    partition: Dict[Hashable, int] = field(default_factory=dict)

    @property
    def best_modularity(self) -> float:
        return self.modularity[self.best_step]


def transition_matrix(graph: Graph) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Walk transition matrix with one self-loop per vertex.

    Returns
    -------
    P : NDArray
        Row-stochastic ``n x n`` matrix, rows ordered as ``graph.vertices``
    degrees : NDArray
        Vertex degrees including the self-loop
    """
    vertices = graph.vertices
    index = {v: i for i, v in enumerate(vertices)}
    A = np.eye(len(vertices))
    for u, v in graph.edges:
        A[index[u], index[v]] = 1.0
        A[index[v], index[u]] = 1.0
    degrees = A.sum(axis=1)
    return A / degrees[:, None], degrees


def walk_distributions(
    P: NDArray[np.float64],
    steps: int,
    n_walks: Optional[int] = None,
    seed: Optional[int] = None,
) -> NDArray[np.float64]:
    """
    Distribution of the end point of ``steps``-step walks from each vertex.

    Parameters
    ----------
    P : NDArray
        Row-stochastic transition matrix
    steps : int
        Walk length
    n_walks : int, optional
        If given, estimate each row from this many simulated walks
        instead of computing ``P^steps`` exactly
    seed : int, optional
        Random seed for the simulated walks

    Returns
    -------
    NDArray
        ``n x n`` matrix whose row ``i`` is the end-point distribution of
        walks started at vertex ``i``
    """
    if n_walks is None:
        return np.linalg.matrix_power(P, steps)

    rng = np.random.default_rng(seed)
    n = P.shape[0]
    cumulative = np.cumsum(P, axis=1)
    cumulative[:, -1] = 1.0

    distributions = np.zeros((n, n))
    for start in range(n):
        position = np.full(n_walks, start)
        for _ in range(steps):
            r = rng.random(n_walks)
            position = np.argmax(cumulative[position] > r[:, None], axis=1)
        distributions[start] = np.bincount(position, minlength=n) / n_walks
    return distributions


class RandomWalk(CommunityDetector):
    """
    Walktrap community detection.

    Parameters
    ----------
    steps : int, optional
        Length of the random walks (default: 4)
    seed : int, optional
        Random seed for simulated walks (default: 42, from
        ``config.COMMUNITY_DETECTION_SEED``)
    n_walks : int, optional
        Number of simulated walks per vertex. If None (default) the walk
        distributions are computed exactly and ``seed`` is not consulted.
    require_connected : bool, optional
        Reject disconnected graphs (default: False)

    Attributes
    ----------
    dendrogram_ : Dendrogram
        Merge history of the last :meth:`detect` call
    modularity_ : float
        Modularity of the last returned partition

    Examples
    --------
    >>> from netcommunity.graph import build_graph
    >>> G = build_graph(6, [(1, 2), (2, 3), (1, 3), (3, 4), (4, 5), (5, 6), (4, 6)])
    >>> RandomWalk(steps=4).detect(G)
    {1: 0, 2: 0, 3: 0, 4: 1, 5: 1, 6: 1}
    """

    name = "walktrap"

    def __init__(
        self,
        steps: int = WALKTRAP_STEPS,
        seed: Optional[int] = COMMUNITY_DETECTION_SEED,
        n_walks: Optional[int] = None,
        require_connected: bool = False,
    ) -> None:
        super().__init__(require_connected=require_connected)
        if steps < 1:
            raise InvalidArgument(f"steps must be at least 1, got {steps}")
        if n_walks is not None and n_walks < 1:
            raise InvalidArgument(f"n_walks must be at least 1, got {n_walks}")
        self.steps = steps
        self.seed = seed
        self.n_walks = n_walks
        self.dendrogram_: Optional[Dendrogram] = None

    def dendrogram(self, graph: Graph) -> Dendrogram:
        """
        Agglomerate the vertices of ``graph`` and cut at the best level.

        Only communities joined by at least one edge are merged, so
        each connected component is agglomerated on its own.

        Parameters
        ----------
        graph : Graph
            Input graph with at least one edge

        Returns
        -------
        Dendrogram
            Merge history, modularity per level and the best partition
        """
        self._check_input(graph)
        vertices = graph.vertices
        n = len(vertices)
        index = {v: i for i, v in enumerate(vertices)}

        if self.n_walks is None and self.seed is not None:
            logger.debug(f"Exact walk distributions, seed={self.seed} not used")
        P, degrees = transition_matrix(graph)
        Pt = walk_distributions(P, self.steps, n_walks=self.n_walks, seed=self.seed)
        # Rows scaled by D^-1/2 so that r is a plain Euclidean distance
        scaled = Pt / np.sqrt(degrees)[None, :]

        vectors: Dict[int, NDArray[np.float64]] = {i: scaled[i] for i in range(n)}
        sizes: Dict[int, int] = {i: 1 for i in range(n)}
        members: Dict[int, List[int]] = {i: [i] for i in range(n)}
        neighbors: Dict[int, Set[int]] = {
            i: {index[u] for u in graph.neighbors(v)} for i, v in enumerate(vertices)
        }

        def delta_sigma(a: int, b: int) -> float:
            diff = vectors[a] - vectors[b]
            return float(sizes[a] * sizes[b] / (sizes[a] + sizes[b]) * np.dot(diff, diff) / n)

        costs: Dict[Tuple[int, int], float] = {
            (a, b): delta_sigma(a, b) for a in neighbors for b in neighbors[a] if a < b
        }

        membership = list(range(n))
        result = Dendrogram()
        best_q = modularity(graph, dict(zip(vertices, membership)))
        result.modularity.append(best_q)
        result.partition = dict(zip(vertices, membership))

        step = 0
        while costs:
            (a, b), cost = min(costs.items(), key=lambda item: (item[1], item[0]))
            new = n + step
            step += 1

            sizes[new] = sizes[a] + sizes[b]
            vectors[new] = (sizes[a] * vectors[a] + sizes[b] * vectors[b]) / sizes[new]
            members[new] = members.pop(a) + members.pop(b)
            neighbors[new] = (neighbors.pop(a) | neighbors.pop(b)) - {a, b}
            for c in neighbors[new]:
                neighbors[c] -= {a, b}
                neighbors[c].add(new)
            for key in [k for k in costs if a in k or b in k]:
                del costs[key]
            for c in neighbors[new]:
                costs[(c, new)] = delta_sigma(c, new)
            for key in (a, b):
                del sizes[key]
                del vectors[key]

            for i in members[new]:
                membership[i] = new
            result.merges.append((a, b))

            partition = dict(zip(vertices, membership))
            q = modularity(graph, partition)
            result.modularity.append(q)
            logger.debug(f"Walktrap merge {step}: {a} + {b} (dsigma {cost:.5f}), Q={q:.4f}")

            if q > best_q + MODULARITY_TOLERANCE:
                best_q = q
                result.best_step = step
                result.partition = partition

        result.partition = canonicalize_partition(result.partition)
        self.dendrogram_ = result
        return result

    def _detect(self, graph: Graph) -> Dict[Hashable, int]:
        return self.dendrogram(graph).partition

    def __repr__(self) -> str:
        return (
            f"RandomWalk(steps={self.steps}, seed={self.seed}, n_walks={self.n_walks}, "
            f"require_connected={self.require_connected})"
        )
