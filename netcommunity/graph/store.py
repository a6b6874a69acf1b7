"""
Graph Store Module
==================

This module provides the in-memory undirected graph used by every
analysis in the toolkit.

The vertex and edge sets are fixed at construction. Vertex attributes
(booleans, strings, categorical labels, numbers) live in a per-vertex
record that analysis steps may extend, e.g. by writing coreness or
community labels back onto the vertices. Attribute writes never change
vertex or edge identity.

Examples
--------
>>> G = build_graph(4, [(1, 2), (2, 3), (3, 1), (3, 4)])
>>> G.degree(3)
3
>>> sorted(G.neighbors(1))
[2, 3]
"""

import logging
from collections import deque
from typing import Any, Dict, FrozenSet, Hashable, Iterable, Iterator, List, Mapping, Optional, Set, Tuple, Union

import networkx as nx

from ..errors import DuplicateEdge, InvalidArgument, InvalidEdge

logger = logging.getLogger(__name__)

Vertex = Hashable
Edge = Tuple[Vertex, Vertex]


def _edge_key(u: Vertex, v: Vertex) -> Edge:
    """Canonical (smaller, larger) key of an unordered pair."""
    return (u, v) if u <= v else (v, u)


class Graph:
    """
    Undirected simple graph with per-vertex attribute records.

    Parameters
    ----------
    vertices : iterable or int
        Vertex identifiers. An integer ``n`` stands for the vertices
        ``1..n``.
    edges : iterable of pairs
        Unordered vertex pairs. The insertion order is kept and defines
        the edge index used for deterministic tie-breaking.
    attributes : mapping, optional
        ``{vertex: {key: value}}`` initial attribute records

    Raises
    ------
    InvalidEdge
        If an edge references an unknown vertex or is a self-loop
    DuplicateEdge
        If the same unordered pair appears twice
    InvalidArgument
        If a vertex is listed twice or attributes name an unknown vertex
    """

    def __init__(
        self,
        vertices: Union[int, Iterable[Vertex]],
        edges: Iterable[Edge] = (),
        attributes: Optional[Mapping[Vertex, Mapping[str, Any]]] = None,
    ) -> None:
        if isinstance(vertices, int):
            if vertices < 0:
                raise InvalidArgument(f"Vertex count must be non-negative, got {vertices}")
            vertices = range(1, vertices + 1)

        self._adj: Dict[Vertex, Set[Vertex]] = {}
        for v in vertices:
            if v in self._adj:
                raise InvalidArgument(f"Vertex {v!r} listed more than once")
            self._adj[v] = set()

        self._vertices: Tuple[Vertex, ...] = tuple(sorted(self._adj))
        self._edges: List[Edge] = []
        self._edge_index: Dict[Edge, int] = {}

        for edge in edges:
            u, v = edge
            if u not in self._adj or v not in self._adj:
                raise InvalidEdge(f"Edge ({u!r}, {v!r}) references an unknown vertex")
            if u == v:
                raise InvalidEdge(f"Self-loop on vertex {u!r} is not allowed")
            key = _edge_key(u, v)
            if key in self._edge_index:
                raise DuplicateEdge(f"Edge ({u!r}, {v!r}) appears more than once")
            self._edge_index[key] = len(self._edges)
            self._edges.append(key)
            self._adj[u].add(v)
            self._adj[v].add(u)

        self._attributes: Dict[Vertex, Dict[str, Any]] = {v: {} for v in self._vertices}
        if attributes:
            for v, record in attributes.items():
                if v not in self._adj:
                    raise InvalidArgument(f"Attributes given for unknown vertex {v!r}")
                self._attributes[v].update(record)

        logger.debug(
            f"Built graph with {len(self._vertices)} vertices and {len(self._edges)} edges"
        )

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    @property
    def vertices(self) -> Tuple[Vertex, ...]:
        """Vertex identifiers in sorted order."""
        return self._vertices

    @property
    def edges(self) -> Tuple[Edge, ...]:
        """Edges as ``(smaller, larger)`` pairs in insertion order."""
        return tuple(self._edges)

    def number_of_vertices(self) -> int:
        return len(self._vertices)

    def number_of_edges(self) -> int:
        return len(self._edges)

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, v: object) -> bool:
        return v in self._adj

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self._vertices)

    def __repr__(self) -> str:
        return f"Graph(n={len(self._vertices)}, m={len(self._edges)})"

    def _check_vertex(self, v: Vertex) -> None:
        if v not in self._adj:
            raise KeyError(f"Unknown vertex: {v!r}")

    def degree(self, v: Vertex) -> int:
        """Number of edges incident to ``v``."""
        self._check_vertex(v)
        return len(self._adj[v])

    def degrees(self) -> Dict[Vertex, int]:
        """Degree of every vertex."""
        return {v: len(self._adj[v]) for v in self._vertices}

    def neighbors(self, v: Vertex) -> FrozenSet[Vertex]:
        """Vertices adjacent to ``v``."""
        self._check_vertex(v)
        return frozenset(self._adj[v])

    def has_edge(self, u: Vertex, v: Vertex) -> bool:
        return u in self._adj and v in self._adj[u]

    def edge_index(self, u: Vertex, v: Vertex) -> int:
        """
        Position of the edge ``{u, v}`` in insertion order.

        Raises
        ------
        KeyError
            If the edge does not exist
        """
        if not self.has_edge(u, v):
            raise KeyError(f"Unknown edge: ({u!r}, {v!r})")
        return self._edge_index[_edge_key(u, v)]

    def connected_components(self) -> List[Set[Vertex]]:
        """
        Connected components as vertex sets, ordered by smallest vertex.

        Returns
        -------
        List[Set[Vertex]]
            One set per component
        """
        seen: Set[Vertex] = set()
        components: List[Set[Vertex]] = []
        for start in self._vertices:
            if start in seen:
                continue
            component = {start}
            queue = deque([start])
            while queue:
                u = queue.popleft()
                for w in self._adj[u]:
                    if w not in component:
                        component.add(w)
                        queue.append(w)
            seen |= component
            components.append(component)
        return components

    def is_connected(self) -> bool:
        return len(self.connected_components()) <= 1

    def subgraph(self, vertices: Iterable[Vertex]) -> "Graph":
        """
        Induced subgraph on ``vertices``, carrying their attribute records.

        Parameters
        ----------
        vertices : iterable
            Vertices to keep; each must belong to this graph

        Returns
        -------
        Graph
            New graph; edges keep their relative insertion order
        """
        keep = set(vertices)
        for v in keep:
            self._check_vertex(v)
        edges = [(u, v) for u, v in self._edges if u in keep and v in keep]
        attributes = {v: dict(self._attributes[v]) for v in keep}
        return Graph(sorted(keep), edges, attributes)

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def set_attribute(self, v: Vertex, key: str, value: Any) -> None:
        """Add or overwrite attribute ``key`` on vertex ``v``."""
        self._check_vertex(v)
        self._attributes[v][key] = value

    def get_attribute(self, v: Vertex, key: str, default: Any = None) -> Any:
        """Value of attribute ``key`` on ``v``, or ``default`` if unset."""
        self._check_vertex(v)
        return self._attributes[v].get(key, default)

    def attributes(self, v: Vertex) -> Dict[str, Any]:
        """Copy of the attribute record of ``v``."""
        self._check_vertex(v)
        return dict(self._attributes[v])

    def set_attributes(self, key: str, values: Mapping[Vertex, Any]) -> None:
        """
        Write one attribute for many vertices at once.

        Typical use is merging an analysis result back onto the graph,
        e.g. ``G.set_attributes("coreness", compute_coreness(G))``.

        Raises
        ------
        KeyError
            If ``values`` names an unknown vertex. Nothing is written.
        """
        for v in values:
            self._check_vertex(v)
        for v, value in values.items():
            self._attributes[v][key] = value

    def attribute_map(self, key: str, default: Any = None) -> Dict[Vertex, Any]:
        """``{vertex: value}`` of attribute ``key`` over all vertices."""
        return {v: self._attributes[v].get(key, default) for v in self._vertices}

    # ------------------------------------------------------------------
    # NetworkX interchange
    # ------------------------------------------------------------------

    def to_networkx(self) -> nx.Graph:
        """
        Export to a NetworkX graph with vertex attributes as node data.

        This is the hand-off format for the plotting layer.
        """
        G = nx.Graph()
        for v in self._vertices:
            G.add_node(v, **self._attributes[v])
        G.add_edges_from(self._edges)
        return G

    @classmethod
    def from_networkx(cls, G: nx.Graph) -> "Graph":
        """
        Build a graph from a NetworkX graph, copying node data.

        Raises
        ------
        InvalidEdge
            If ``G`` contains a self-loop
        InvalidArgument
            If ``G`` is directed
        """
        if G.is_directed():
            raise InvalidArgument("Directed graphs are not supported; convert with G.to_undirected()")
        attributes = {v: dict(data) for v, data in G.nodes(data=True)}
        return cls(list(G.nodes()), list(G.edges()), attributes)


def build_graph(
    vertices: Union[int, Iterable[Vertex]],
    edges: Iterable[Edge],
    attributes: Optional[Mapping[Vertex, Mapping[str, Any]]] = None,
) -> Graph:
    """
    Build a graph from a vertex set, an edge list and attribute records.

    Parameters
    ----------
    vertices : int or iterable
        Vertex count ``n`` (vertices ``1..n``) or explicit identifiers
    edges : iterable of pairs
        Unordered vertex pairs
    attributes : mapping, optional
        ``{vertex: {key: value}}``

    Returns
    -------
    Graph
        The constructed graph

    Raises
    ------
    InvalidEdge
        If an edge references an unknown vertex or is a self-loop
    DuplicateEdge
        If the same unordered pair appears twice

    Examples
    --------
    >>> G = build_graph(3, [(1, 2), (2, 3)], {1: {"cloisterville": True}})
    >>> G.get_attribute(1, "cloisterville")
    True
    """
    graph = Graph(vertices, edges, attributes)
    logger.info(
        f"Graph built: {graph.number_of_vertices()} vertices, {graph.number_of_edges()} edges"
    )
    return graph
