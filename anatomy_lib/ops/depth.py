"""
Depth analysis: per-subsystem depth bounds and the full-circuit bound.
"""

from typing import Dict, Mapping

from ..params.network_types import NetworkType
from .tree import SubsystemTree


def max_depths(trees: Mapping[str, SubsystemTree]) -> Dict[str, int]:
    """
    Maximum depth reached by each subsystem's tree build.

    Roots sit at depth 0, so a single-node forest has depth 0.
    """
    return {name: tree.max_depth for name, tree in trees.items()}


def max_cycle(network_type: NetworkType, depths: Mapping[str, int]) -> int:
    """
    Worst-case edge traversals for one full circuit.

    For a bridged pair this is ``max_depth(source) + max_depth(target)``:
    root to deepest terminus on one side, across a bridge, and on to the
    deepest terminus of the other side. With several pairs the largest pair
    wins. An unbridged network has no circuit, so its bound is the deepest
    single subsystem.
    """
    if network_type.bridge_pairs:
        return max(
            depths.get(pair.source, 0) + depths.get(pair.target, 0)
            for pair in network_type.bridge_pairs
        )
    return max(depths.values(), default=0)
