"""
netcommunity
============

Community structure analysis for small social networks: maximal
cliques, k-cores, modularity and three community detection strategies
(Louvain, edge betweenness, Walktrap).

Modules
-------
graph
    Undirected graph store with vertex attributes, partition helpers
metrics
    Cliques, coreness and modularity
algorithms
    Community detection strategies and partition comparison
config
    Default parameters and YAML configuration loading
errors
    Exception types
"""

__version__ = "0.1.0"

from . import errors
from . import config
from . import graph
from . import metrics
from . import algorithms

from .graph import Graph, build_graph

__all__ = [
    "errors",
    "config",
    "graph",
    "metrics",
    "algorithms",
    "Graph",
    "build_graph",
    "__version__",
]
