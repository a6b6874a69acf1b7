"""
Metrics Module
==============

This module provides structural measurements of a graph and of a
vertex partition.

Submodules
----------
cliques
    Maximal clique enumeration (Bron-Kerbosch)
coreness
    k-core decomposition
modularity
    Newman-Girvan modularity of a partition
"""

from .cliques import (
    find_maximal_cliques,
    largest_cliques,
    clique_number,
    clique_membership,
)
from .coreness import (
    compute_coreness,
    degeneracy,
    k_core,
)
from .modularity import (
    modularity,
    weighted_modularity,
    modularity_by_attribute,
)

__all__ = [
    # Cliques
    "find_maximal_cliques",
    "largest_cliques",
    "clique_number",
    "clique_membership",
    # Coreness
    "compute_coreness",
    "degeneracy",
    "k_core",
    # Modularity
    "modularity",
    "weighted_modularity",
    "modularity_by_attribute",
]
