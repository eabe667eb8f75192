"""Adapters for external graph libraries."""

from .networkx_adapter import to_networkx_graph, hop_distance

__all__ = [
    "to_networkx_graph",
    "hop_distance",
]
