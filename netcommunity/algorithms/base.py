"""
Strategy Base
=============

Common contract of the community detection strategies:
``detect(graph) -> partition``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Hashable, Optional

from ..errors import DisconnectedInput, EmptyGraph
from ..graph.partition import canonicalize_partition
from ..graph.store import Graph
from ..metrics.modularity import modularity

logger = logging.getLogger(__name__)


class CommunityDetector(ABC):
    """
    Base class for community detection strategies.

    Subclasses implement :meth:`_detect`. :meth:`detect` checks the
    input, canonicalizes the returned partition and scores it, storing
    the score in ``modularity_``.

    Parameters
    ----------
    require_connected : bool, optional
        If True, reject graphs with more than one connected component
        (default: False). Otherwise each component is clustered
        independently.
    """

    name = "base"

    def __init__(self, require_connected: bool = False) -> None:
        self.require_connected = require_connected
        self.modularity_: Optional[float] = None

    def _check_input(self, graph: Graph) -> None:
        if graph.number_of_edges() == 0:
            raise EmptyGraph(f"{self.name}: community detection needs at least one edge")
        if self.require_connected:
            n_components = len(graph.connected_components())
            if n_components > 1:
                raise DisconnectedInput(
                    f"{self.name}: graph has {n_components} connected components"
                )

    @abstractmethod
    def _detect(self, graph: Graph) -> Dict[Hashable, int]:
        """Partition of ``graph`` in any label format accepted by ``canonicalize_partition``."""

    def detect(self, graph: Graph) -> Dict[Hashable, int]:
        """
        Partition the vertices of ``graph`` into communities.

        Parameters
        ----------
        graph : Graph
            Input graph with at least one edge

        Returns
        -------
        Dict[Hashable, int]
            Canonical partition (labels ``0..k-1`` in order of each
            community's smallest vertex)

        Raises
        ------
        EmptyGraph
            If the graph has no edges
        DisconnectedInput
            If ``require_connected`` is set and the graph is disconnected
        """
        self._check_input(graph)
        partition = canonicalize_partition(self._detect(graph))
        self.modularity_ = modularity(graph, partition)
        logger.info(
            f"{self.name} found {len(set(partition.values()))} communities "
            f"(Q={self.modularity_:.4f})"
        )
        return partition

    def __repr__(self) -> str:
        return f"{type(self).__name__}(require_connected={self.require_connected})"
