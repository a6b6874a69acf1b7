"""
Clique Enumeration Module
=========================

This module finds maximal cliques with the Bron-Kerbosch algorithm
using Tomita pivoting.

A clique is a vertex set in which every pair is joined by an edge; it is
maximal when no outside vertex can be added. Candidates are expanded in
sorted vertex order and the result list is sorted, so identical graphs
always produce identical output.

References
----------
.. [1] Bron, C. & Kerbosch, J. Algorithm 457: finding all cliques of an
   undirected graph. Commun. ACM 16, 575-577 (1973).
.. [2] Tomita, E., Tanaka, A. & Takahashi, H. The worst-case time
   complexity for generating all maximal cliques. Theor. Comput. Sci.
   363, 28-42 (2006).
"""

import logging
from typing import Dict, FrozenSet, Hashable, Iterable, List, Optional, Set, Tuple

from ..config import DEFAULT_MIN_CLIQUE_SIZE
from ..errors import InvalidArgument
from ..graph.store import Graph

logger = logging.getLogger(__name__)

Clique = Tuple[Hashable, ...]


def _bron_kerbosch(
    adjacency: Dict[Hashable, FrozenSet[Hashable]],
    min_size: int,
    max_size: Optional[int],
) -> List[Clique]:
    """Enumerate maximal cliques of size in ``[min_size, max_size]``."""
    found: List[Clique] = []

    def expand(R: List[Hashable], P: Set[Hashable], X: Set[Hashable]) -> None:
        if not P and not X:
            if len(R) >= min_size and (max_size is None or len(R) <= max_size):
                found.append(tuple(sorted(R)))
            return
        # No extension of R can reach min_size
        if len(R) + len(P) < min_size:
            return

        pivot = max(sorted(P | X), key=lambda u: len(P & adjacency[u]))
        for v in sorted(P - adjacency[pivot]):
            expand(R + [v], P & adjacency[v], X & adjacency[v])
            P.discard(v)
            X.add(v)

    expand([], set(adjacency), set())
    found.sort(key=lambda c: (-len(c), c))
    return found


def _adjacency(graph: Graph) -> Dict[Hashable, FrozenSet[Hashable]]:
    return {v: graph.neighbors(v) for v in graph.vertices}


def find_maximal_cliques(
    graph: Graph,
    min_size: int = DEFAULT_MIN_CLIQUE_SIZE,
    max_size: Optional[int] = None,
) -> List[Clique]:
    """
    Find all maximal cliques with at least ``min_size`` vertices.

    Parameters
    ----------
    graph : Graph
        Input graph
    min_size : int, optional
        Smallest clique size to report; must be at least 3 (default: 3)
    max_size : int, optional
        Largest clique size to report (default: no limit)

    Returns
    -------
    List[Tuple]
        Cliques as sorted vertex tuples, largest first, then
        lexicographic. No clique is a subset of another.

    Raises
    ------
    InvalidArgument
        If ``min_size < 3`` or ``max_size < min_size``

    Examples
    --------
    >>> from netcommunity.graph import build_graph
    >>> G = build_graph(4, [(1, 2), (1, 3), (2, 3), (3, 4)])
    >>> find_maximal_cliques(G)
    [(1, 2, 3)]
    """
    if min_size < 3:
        raise InvalidArgument(f"min_size must be at least 3, got {min_size}")
    if max_size is not None and max_size < min_size:
        raise InvalidArgument(f"max_size ({max_size}) is smaller than min_size ({min_size})")

    cliques = _bron_kerbosch(_adjacency(graph), min_size, max_size)
    logger.info(f"Found {len(cliques)} maximal cliques with size >= {min_size}")
    return cliques


def largest_cliques(graph: Graph) -> List[Clique]:
    """
    All cliques of maximum size.

    Unlike :func:`find_maximal_cliques` there is no lower size bound, so
    a graph without triangles still reports its edges (or single
    vertices when it has no edges at all).
    """
    cliques = _bron_kerbosch(_adjacency(graph), 1, None)
    if not cliques:
        return []
    largest = len(cliques[0])
    return [c for c in cliques if len(c) == largest]


def clique_number(graph: Graph) -> int:
    """Size of the largest clique (0 for a graph without vertices)."""
    cliques = largest_cliques(graph)
    return len(cliques[0]) if cliques else 0


def clique_membership(graph: Graph, cliques: Iterable[Iterable[Hashable]]) -> Dict[Hashable, bool]:
    """
    Flag the vertices that belong to at least one of ``cliques``.

    The result is ready to be merged back with
    ``graph.set_attributes("in_clique", ...)``.
    """
    members = {v for clique in cliques for v in clique}
    return {v: v in members for v in graph.vertices}
