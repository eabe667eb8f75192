"""
Adapter for converting a CompiledGraph to a NetworkX directed graph.

This enables ad-hoc graph algorithms (shortest paths, components, drawing)
without adding them to the compiled query surface.
"""

import networkx as nx
from typing import Optional
from ..core.network import CompiledGraph


def to_networkx_graph(graph: CompiledGraph) -> nx.DiGraph:
    """
    Convert CompiledGraph to a NetworkX DiGraph.

    The resulting graph has node attributes:
    - 'kind': str node kind
    - 'subsystem': str subsystem name
    - 'depth': int depth within the subsystem
    - 'regions': list of region tags

    And edge attributes:
    - 'bridge': bool, True for cross-subsystem bridge edges

    Edges follow flow (upstream -> downstream).

    Parameters
    ----------
    graph : CompiledGraph
        The compiled network to convert

    Returns
    -------
    G : nx.DiGraph
        NetworkX graph representation keyed by node id
    """
    G = nx.DiGraph(name=graph.name, network_type=graph.network_type.name)
    bridges = set(graph.bridges())

    for node in graph.nodes():
        G.add_node(
            node.id,
            kind=node.kind,
            subsystem=node.subsystem,
            depth=node.depth,
            regions=list(node.regions),
        )

    for node in graph.nodes():
        for target in node.downstream:
            G.add_edge(node.id, target, bridge=(node.id, target) in bridges)

    return G


def hop_distance(graph: CompiledGraph, source: str, target: str) -> Optional[int]:
    """
    Shortest downstream hop count from ``source`` to ``target``.

    Parameters
    ----------
    graph : CompiledGraph
        Network to query
    source, target : str
        Node ids

    Returns
    -------
    hops : int or None
        Number of edges, or None if ``target`` is not downstream of ``source``

    Raises
    ------
    UnknownNode
        If either id is not part of the graph
    """
    graph.node(source)
    graph.node(target)

    G = to_networkx_graph(graph)
    try:
        return nx.shortest_path_length(G, source, target)
    except nx.NetworkXNoPath:
        return None
