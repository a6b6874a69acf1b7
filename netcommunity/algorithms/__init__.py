"""
Algorithms Module
=================

This module provides the community detection strategies and the
evaluation metrics used to compare their partitions.

Submodules
----------
community_detection
    Strategy dispatch and evaluation metrics
louvain
    Greedy modularity optimisation (Louvain)
edge_betweenness
    Divisive clustering by edge betweenness (Girvan-Newman)
walktrap
    Agglomerative clustering by random-walk distance (Walktrap)
"""

from .base import CommunityDetector
from .louvain import GreedyModularity
from .edge_betweenness import EdgeBetweenness, DivisiveResult
from .walktrap import RandomWalk, Dendrogram
from .community_detection import (
    ALGORITHMS,
    make_detector,
    detect_communities,
    detect_communities_from_config,
    compute_nmi,
    compute_ari,
    evaluate_detection,
    validate_communities,
)

__all__ = [
    # Strategies
    "CommunityDetector",
    "GreedyModularity",
    "EdgeBetweenness",
    "DivisiveResult",
    "RandomWalk",
    "Dendrogram",
    # Community detection
    "ALGORITHMS",
    "make_detector",
    "detect_communities",
    "detect_communities_from_config",
    "compute_nmi",
    "compute_ari",
    "evaluate_detection",
    "validate_communities",
]
