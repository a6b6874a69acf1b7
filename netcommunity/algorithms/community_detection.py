"""
Community Detection Module
==========================

This module dispatches to the community detection strategies and
provides evaluation metrics for comparing detected communities to a
reference grouping (e.g. an observed group label).

Supported algorithms:
- Louvain (greedy modularity)
- Edge betweenness (Girvan-Newman)
- Walktrap (random walks)
"""

import logging
from typing import Any, Dict, Hashable, List, Mapping, Optional

from sklearn.metrics import adjusted_rand_score, normalized_mutual_info_score

from ..config import DEFAULTS
from ..errors import InvalidArgument
from ..graph.partition import Communities, parse_communities, partition_to_communities, validate_partition
from ..graph.store import Graph
from ..metrics.modularity import modularity
from .base import CommunityDetector
from .edge_betweenness import EdgeBetweenness
from .louvain import GreedyModularity
from .walktrap import RandomWalk

logger = logging.getLogger(__name__)

ALGORITHMS = {
    "louvain": GreedyModularity,
    "edge_betweenness": EdgeBetweenness,
    "walktrap": RandomWalk,
}


def make_detector(algorithm: str = "louvain", **kwargs) -> CommunityDetector:
    """
    Instantiate the strategy registered under ``algorithm``.

    Raises
    ------
    ValueError
        If the algorithm name is unknown
    """
    algorithm = algorithm.lower()
    if algorithm not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm: {algorithm}")
    return ALGORITHMS[algorithm](**kwargs)


def detect_communities(
    graph: Graph,
    algorithm: str = "louvain",
    **kwargs,
) -> Dict[Hashable, int]:
    """
    Detect communities using the specified algorithm.

    Parameters
    ----------
    graph : Graph
        Input graph
    algorithm : str, optional
        Algorithm to use: 'louvain', 'edge_betweenness', 'walktrap'
        (default: 'louvain')
    **kwargs
        Additional arguments passed to the strategy constructor

    Returns
    -------
    Dict[Hashable, int]
        Dictionary mapping vertex -> community_id

    Examples
    --------
    >>> import networkx as nx
    >>> G = Graph.from_networkx(nx.karate_club_graph())
    >>> communities = detect_communities(G, algorithm='louvain')
    >>> len(set(communities.values())) > 1
    True
    """
    return make_detector(algorithm, **kwargs).detect(graph)


def detect_communities_from_config(graph: Graph, config: Optional[Mapping[str, Any]] = None) -> Dict[Hashable, int]:
    """
    Detect communities with the settings of a configuration dictionary.

    Parameters
    ----------
    graph : Graph
        Input graph
    config : mapping, optional
        Settings as returned by :func:`netcommunity.config.load_config`;
        missing keys fall back to ``DEFAULTS``

    Returns
    -------
    Dict[Hashable, int]
        Community assignments
    """
    settings = dict(DEFAULTS)
    settings.update(config or {})
    method = settings["method"].lower()

    kwargs: Dict[str, Any] = {"require_connected": settings["require_connected"]}
    if method == "louvain":
        kwargs["resolution"] = settings["resolution"]
    elif method == "walktrap":
        kwargs.update(steps=settings["steps"], seed=settings["seed"], n_walks=settings["n_walks"])

    logger.info(f"Detecting communities with {method} ({kwargs})")
    return detect_communities(graph, algorithm=method, **kwargs)


def _encode_labels(partition: Dict[Hashable, Any], nodes: List[Hashable]) -> List[int]:
    """Integer code per node; labels are compared by type and value, missing nodes get -1."""
    codes: Dict[Any, int] = {}
    encoded = []
    for n in nodes:
        if n not in partition:
            encoded.append(-1)
            continue
        label = partition[n]
        encoded.append(codes.setdefault((type(label), label), len(codes)))
    return encoded


def compute_nmi(
    true_communities: Communities,
    detected_communities: Communities,
    nodes: Optional[List[Hashable]] = None,
) -> float:
    """
    Compute Normalized Mutual Information between two partitions.

    Parameters
    ----------
    true_communities : dict or list of sets
        Reference community assignments
    detected_communities : dict or list of sets
        Detected community assignments
    nodes : List, optional
        Nodes to consider. If None, uses intersection of both partitions.

    Returns
    -------
    float
        NMI score (0 = no mutual information, 1 = perfect match)

    Examples
    --------
    >>> true = {0: 0, 1: 0, 2: 1, 3: 1}
    >>> detected = {0: 1, 1: 1, 2: 0, 3: 0}
    >>> compute_nmi(true, detected)
    1.0
    """
    true_communities = parse_communities(true_communities)
    detected_communities = parse_communities(detected_communities)

    if nodes is None:
        nodes = sorted(set(true_communities) & set(detected_communities))

    if len(nodes) == 0:
        return 0.0

    true_labels = _encode_labels(true_communities, nodes)
    detected_labels = _encode_labels(detected_communities, nodes)

    return float(normalized_mutual_info_score(true_labels, detected_labels))


def compute_ari(
    true_communities: Communities,
    detected_communities: Communities,
    nodes: Optional[List[Hashable]] = None,
) -> float:
    """
    Compute Adjusted Rand Index between two partitions.

    Parameters
    ----------
    true_communities : dict or list of sets
        Reference community assignments
    detected_communities : dict or list of sets
        Detected community assignments
    nodes : List, optional
        Nodes to consider

    Returns
    -------
    float
        ARI score (-1 to 1, with 1 = perfect match, 0 = random)
    """
    true_communities = parse_communities(true_communities)
    detected_communities = parse_communities(detected_communities)

    if nodes is None:
        nodes = sorted(set(true_communities) & set(detected_communities))

    if len(nodes) == 0:
        return 0.0

    true_labels = _encode_labels(true_communities, nodes)
    detected_labels = _encode_labels(detected_communities, nodes)

    return float(adjusted_rand_score(true_labels, detected_labels))


def evaluate_detection(
    graph: Graph,
    true_communities: Communities,
    detected_communities: Communities,
) -> Dict[str, float]:
    """
    Comprehensive evaluation of community detection results.

    Parameters
    ----------
    graph : Graph
        Input graph
    true_communities : dict or list of sets
        Reference grouping, e.g. ``graph.attribute_map("group")``
    detected_communities : dict or list of sets
        Detected partition

    Returns
    -------
    Dict[str, float]
        Evaluation metrics including NMI, ARI, and modularity
    """
    true_communities = validate_partition(graph, true_communities)
    detected_communities = validate_partition(graph, detected_communities)
    nodes = list(graph.vertices)

    nmi = compute_nmi(true_communities, detected_communities, nodes)
    ari = compute_ari(true_communities, detected_communities, nodes)

    Q_detected = modularity(graph, detected_communities)
    Q_true = modularity(graph, true_communities)

    return {
        "nmi": nmi,
        "ari": ari,
        "modularity_detected": Q_detected,
        "modularity_true": Q_true,
        "n_communities_detected": len(partition_to_communities(detected_communities)),
        "n_communities_true": len(partition_to_communities(true_communities)),
    }


def validate_communities(graph: Graph, communities: Communities) -> bool:
    """
    Validate that communities are well-formed.

    Checks:
    - All vertices covered exactly once
    - No empty communities
    - Modularity > 0 (a warning only)

    Parameters
    ----------
    graph : Graph
        Input graph
    communities : list of sets or dict
        Detected communities

    Returns
    -------
    bool
        True if validation passes

    Raises
    ------
    InvalidArgument
        If a vertex is missing, unknown, or assigned twice, or a
        community is empty
    """
    if not isinstance(communities, dict):
        empty_comms = [i for i, c in enumerate(communities) if len(c) == 0]
        if empty_comms:
            raise InvalidArgument(f"Empty communities found at indices: {empty_comms}")

    partition = validate_partition(graph, communities)

    if graph.number_of_edges() > 0:
        Q = modularity(graph, partition)
        if Q <= 0:
            logger.warning(f"Low modularity: Q={Q:.4f} (may indicate poor community structure)")

    return True
