"""Structural analysis functions for transport networks."""

from collections import deque
from typing import Dict, Iterable, List, Mapping, Optional, Sequence
import numpy as np
from ..core.network import CompiledGraph


def find_unreachable(
    start_ids: Iterable[str],
    downstream: Mapping[str, Sequence[str]],
) -> List[str]:
    """
    Breadth-first sweep from every start node along downstream edges.

    Parameters
    ----------
    start_ids : iterable of str
        Nodes with no upstream neighbor
    downstream : mapping
        Node id -> downstream ids, covering every node

    Returns
    -------
    unreachable : list of str
        Ids never visited, in the mapping's order
    """
    seen = set()
    queue = deque()
    for node_id in start_ids:
        if node_id not in seen:
            seen.add(node_id)
            queue.append(node_id)

    while queue:
        node_id = queue.popleft()
        for nxt in downstream.get(node_id, ()):
            if nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)

    return [node_id for node_id in downstream if node_id not in seen]


def audit_reachability(graph: CompiledGraph) -> List[str]:
    """Re-run the no-orphan audit against a finalized graph."""
    return find_unreachable(
        graph.start_nodes(),
        {node_id: graph.downstream(node_id) for node_id in graph.node_ids()},
    )


def compute_depth_stats(
    graph: CompiledGraph,
    subsystem: Optional[str] = None,
) -> Dict[str, float]:
    """
    Depth distribution statistics.

    Parameters
    ----------
    graph : CompiledGraph
        Network to analyze
    subsystem : str, optional
        Restrict to one subsystem

    Returns
    -------
    stats : dict
        Dictionary with keys: mean, std, min, max, count, terminal_mean
    """
    node_ids = graph.subsystem_nodes(subsystem) if subsystem is not None else graph.node_ids()

    if not node_ids:
        return {
            "mean": 0.0,
            "std": 0.0,
            "min": 0.0,
            "max": 0.0,
            "count": 0,
            "terminal_mean": 0.0,
        }

    depths = np.array([graph.depth(n) for n in node_ids], dtype=float)
    terminal = np.array(
        [graph.depth(n) for n in node_ids if n in graph.terminal_nodes()],
        dtype=float,
    )

    return {
        "mean": float(np.mean(depths)),
        "std": float(np.std(depths)),
        "min": float(np.min(depths)),
        "max": float(np.max(depths)),
        "count": len(node_ids),
        "terminal_mean": float(np.mean(terminal)) if terminal.size else 0.0,
    }


def compute_branch_stats(graph: CompiledGraph) -> Dict:
    """
    Out-degree histogram over declared and bridged edges.

    Returns
    -------
    stats : dict
        degree_histogram, num_bifurcations (out-degree 2), max_fan_out
    """
    out_degrees = np.array([len(graph.downstream(n)) for n in graph.node_ids()], dtype=int)
    values, counts = np.unique(out_degrees, return_counts=True)
    histogram = {int(v): int(c) for v, c in zip(values, counts)}

    return {
        'degree_histogram': histogram,
        'num_bifurcations': histogram.get(2, 0),
        'max_fan_out': int(out_degrees.max()) if out_degrees.size else 0,
    }
