"""
Errors Module
=============

Exception types raised by the graph store and the analysis routines.

Every error is raised at the point where a precondition is violated.
A failed operation leaves the graph untouched, so other analyses on the
same graph remain valid.
"""


class NetCommunityError(Exception):
    """Base class for all netcommunity errors."""


class InvalidEdge(NetCommunityError, ValueError):
    """An edge references an unknown vertex or is a self-loop."""


class DuplicateEdge(NetCommunityError, ValueError):
    """The same unordered vertex pair was given more than once."""


class InvalidArgument(NetCommunityError, ValueError):
    """An argument is outside its accepted range (e.g. ``min_size < 3``)."""


class EmptyGraph(NetCommunityError, ValueError):
    """Modularity is undefined because the graph has no edges."""


class DisconnectedInput(NetCommunityError, ValueError):
    """A strategy was asked to require a single connected component."""


__all__ = [
    "NetCommunityError",
    "InvalidEdge",
    "DuplicateEdge",
    "InvalidArgument",
    "EmptyGraph",
    "DisconnectedInput",
]
