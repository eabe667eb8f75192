"""Declarative template specifications."""

from .network_spec import NodeDecl, NetworkSpec

__all__ = [
    "NodeDecl",
    "NetworkSpec",
]
