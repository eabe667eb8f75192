"""
Query and topology analysis functions.
"""

from typing import List, Optional, Sequence
from ..core.network import CompiledGraph


def get_terminal_nodes(
    graph: CompiledGraph,
    kind: Optional[str] = None,
) -> List[str]:
    """
    Get all terminal nodes (no downstream neighbor) in declaration order.

    Parameters
    ----------
    graph : CompiledGraph
        Network to query
    kind : str, optional
        Filter by node kind ("Artery", "Vein", "Nerve", ...)

    Returns
    -------
    node_ids : List[str]
        Terminal node ids
    """
    terminal = graph.terminal_nodes()
    allowed = graph.of_kind(kind) if kind is not None else None

    return [
        node_id for node_id in graph.node_ids()
        if node_id in terminal and (allowed is None or node_id in allowed)
    ]


def get_paths_from_start(
    graph: CompiledGraph,
    start_id: str,
    max_hops: Optional[int] = None,
) -> List[List[str]]:
    """
    Get all downstream paths from a node to terminal nodes.

    Bridges are followed, so a path from an arterial root continues through
    a capillary bed into the venous side. Each path is cut after
    ``max_hops`` edges and never revisits a node. The default budget is
    ``graph.max_cycle() + 1``: the longest circuit plus its bridge edge.

    Parameters
    ----------
    graph : CompiledGraph
        Network to query
    start_id : str
        First node of every path
    max_hops : int, optional
        Edge budget per path

    Returns
    -------
    paths : List[List[str]]
        List of paths, where each path is a list of node ids
    """
    graph.node(start_id)
    budget = graph.max_cycle() + 1 if max_hops is None else max_hops
    node_order = {node_id: i for i, node_id in enumerate(graph.node_ids())}

    paths = []
    path: List[str] = []
    stack = [(start_id, 0)]

    while stack:
        node_id, depth = stack.pop()
        del path[depth:]
        path.append(node_id)

        children = [
            c for c in sorted(graph.downstream(node_id), key=node_order.get)
            if c not in path
        ]
        if not children or len(path) > budget:
            paths.append(path.copy())
        else:
            stack.extend((child_id, depth + 1) for child_id in reversed(children))

    return paths


def validate_path(graph: CompiledGraph, path: Sequence[str]) -> bool:
    """
    Check that every consecutive pair in ``path`` is a downstream edge.

    This is the check a signal route must pass before it can be sent along
    a nerve tree.

    Raises
    ------
    ValueError
        If the path is empty
    UnknownNode
        If the path names a node outside the graph
    """
    if not path:
        raise ValueError("Path cannot be empty")

    for node_id in path:
        graph.node(node_id)

    for current, nxt in zip(path, path[1:]):
        if nxt not in graph.downstream(current):
            return False

    return True


def get_branch_depth(graph: CompiledGraph, node_id: str) -> int:
    """
    Get the depth of a node within its own subsystem.

    Returns
    -------
    depth : int
        Depth (0 for roots), or -1 if the node does not exist
    """
    if node_id not in graph:
        return -1

    return graph.depth(node_id)
