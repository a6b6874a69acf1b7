"""
Graph Module
============

This module provides the in-memory graph store and the partition
representation shared by the analysis modules.

Submodules
----------
store
    Undirected graph with vertex attribute records
partition
    Partition parsing, canonical labelling and validation
"""

from .store import Graph, build_graph
from .partition import (
    Partition,
    parse_communities,
    canonicalize_partition,
    partition_to_communities,
    validate_partition,
    community_sizes,
    crossing_edges,
)

__all__ = [
    # Store
    "Graph",
    "build_graph",
    # Partitions
    "Partition",
    "parse_communities",
    "canonicalize_partition",
    "partition_to_communities",
    "validate_partition",
    "community_sizes",
    "crossing_edges",
]
