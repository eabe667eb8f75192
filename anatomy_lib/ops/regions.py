"""
Region indexing: anatomical region tag -> nodes occupying it.
"""

from typing import Dict, FrozenSet, Iterable, List

from ..core.network import Node


def index_regions(nodes: Iterable[Node]) -> Dict[str, FrozenSet[str]]:
    """
    Build the reverse region index.

    Parameters
    ----------
    nodes : iterable of Node
        Finalized node records

    Returns
    -------
    index : dict
        Region tag -> frozenset of node ids, keys in first-seen order
    """
    buckets: Dict[str, List[str]] = {}
    for node in nodes:
        for region in node.regions:
            buckets.setdefault(region, []).append(node.id)

    return {region: frozenset(ids) for region, ids in buckets.items()}
