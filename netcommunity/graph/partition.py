"""
Partition Utilities
===================

Helpers for the partition representation shared by the modularity
scorer and the community detection strategies.

A partition is a ``{vertex: community_label}`` dictionary in which every
vertex of the graph appears exactly once. Detection strategies return
canonical partitions: labels are the integers ``0..k-1`` assigned in
order of each community's smallest vertex.
"""

import logging
from collections import Counter
from typing import Any, Dict, Hashable, List, Set, Tuple, Union

from ..errors import InvalidArgument
from .store import Graph

logger = logging.getLogger(__name__)

Partition = Dict[Hashable, Any]

# Type alias for the accepted community formats
Communities = Union[List[Set[Hashable]], List[List[Hashable]], Dict[Hashable, Any]]


def parse_communities(communities: Communities) -> Partition:
    """
    Parse communities into standard dict format.

    Parameters
    ----------
    communities : list of sets, list of lists, or dict
        Community assignments in various formats:
        - List of sets: [{node1, node2}, {node3, node4}]
        - List of lists: [[node1, node2], [node3, node4]]
        - Dict: {node_id: community_id}

    Returns
    -------
    Dict
        Mapping from node_id to community label

    Raises
    ------
    InvalidArgument
        If a vertex is listed in more than one community

    Examples
    --------
    >>> parse_communities([{0, 1}, {2, 3}])
    {0: 0, 1: 0, 2: 1, 3: 1}

    >>> parse_communities({0: 'A', 1: 'A', 2: 'B'})
    {0: 'A', 1: 'A', 2: 'B'}
    """
    if isinstance(communities, dict):
        return dict(communities)

    node_to_community: Partition = {}
    for comm_id, members in enumerate(communities):
        for node in members:
            if node in node_to_community:
                raise InvalidArgument(f"Vertex {node!r} appears in more than one community")
            node_to_community[node] = comm_id

    logger.debug(
        f"Parsed {len(communities)} communities with {len(node_to_community)} total nodes"
    )
    return node_to_community


def canonicalize_partition(partition: Communities) -> Dict[Hashable, int]:
    """
    Relabel communities as ``0..k-1`` in order of their smallest vertex.

    Two partitions that differ only by a renaming of their labels have
    the same canonical form.

    Examples
    --------
    >>> canonicalize_partition({3: 'x', 1: 'y', 2: 'x'})
    {1: 0, 2: 1, 3: 1}
    """
    partition = parse_communities(partition)
    relabel: Dict[Any, int] = {}
    canonical: Dict[Hashable, int] = {}
    for v in sorted(partition):
        label = partition[v]
        if label not in relabel:
            relabel[label] = len(relabel)
        canonical[v] = relabel[label]
    return canonical


def partition_to_communities(partition: Communities) -> List[Set[Hashable]]:
    """Vertex sets of the canonical partition, in label order."""
    canonical = canonicalize_partition(partition)
    communities: List[Set[Hashable]] = [set() for _ in range(len(set(canonical.values())))]
    for v, label in canonical.items():
        communities[label].add(v)
    return communities


def validate_partition(graph: Graph, partition: Communities) -> Partition:
    """
    Check that ``partition`` assigns every vertex of ``graph`` exactly once.

    Parameters
    ----------
    graph : Graph
        Graph the partition refers to
    partition : dict or list of sets
        Partition to check

    Returns
    -------
    Dict
        The partition in dict format

    Raises
    ------
    InvalidArgument
        If a vertex is missing, unknown, or assigned twice
    """
    partition = parse_communities(partition)

    missing = [v for v in graph.vertices if v not in partition]
    if missing:
        raise InvalidArgument(f"Partition does not cover vertices: {missing}")

    extra = [v for v in partition if v not in graph]
    if extra:
        raise InvalidArgument(f"Partition names unknown vertices: {extra}")

    return partition


def community_sizes(partition: Communities) -> Dict[Any, int]:
    """Number of vertices per community label."""
    return dict(Counter(parse_communities(partition).values()))


def crossing_edges(graph: Graph, partition: Communities) -> Dict[Tuple[Hashable, Hashable], bool]:
    """
    Flag every edge that joins two different communities.

    Parameters
    ----------
    graph : Graph
        Input graph
    partition : dict or list of sets
        Vertex partition covering the graph

    Returns
    -------
    Dict[Tuple, bool]
        ``{(u, v): True}`` for inter-community edges, ``False`` otherwise,
        keyed by the graph's ``(smaller, larger)`` edge pairs
    """
    partition = validate_partition(graph, partition)
    flags = {(u, v): partition[u] != partition[v] for u, v in graph.edges}
    logger.debug(
        f"Partitioned edges: {len(flags) - sum(flags.values())} intra, {sum(flags.values())} inter"
    )
    return flags
