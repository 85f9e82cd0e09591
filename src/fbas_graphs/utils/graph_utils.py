"""
Graph utility functions for fbas-graphs
"""

import numpy as np
import networkx as nx
from typing import Dict, Any


def fbas_to_digraph(fbas) -> nx.DiGraph:
    """
    Convert an FBAS to its trust graph

    Every node id becomes a graph node; an edge source -> target exists
    when target is referenced by the quorum set of source.

    Args:
        fbas: FBAS model

    Returns:
        NetworkX directed graph over node ids
    """
    graph = nx.DiGraph()
    graph.add_nodes_from(fbas.all_nodes())
    for source in fbas.all_nodes():
        graph.add_edges_from(
            (source, target) for target in fbas.quorum_set_members(source)
        )
    return graph


def compute_graph_statistics(graph: nx.DiGraph) -> Dict[str, Any]:
    """
    Compute various statistics for a trust graph

    Args:
        graph: NetworkX directed graph

    Returns:
        Dictionary of graph statistics
    """
    stats = {
        'num_nodes': graph.number_of_nodes(),
        'num_edges': graph.number_of_edges(),
        'self_loops': nx.number_of_selfloops(graph),
    }

    if stats['num_nodes'] > 0:
        stats['density'] = nx.density(graph)
        stats['is_strongly_connected'] = nx.is_strongly_connected(graph)
        stats['num_strong_components'] = nx.number_strongly_connected_components(graph)

        in_degrees = [d for _, d in graph.in_degree()]
        stats['avg_in_degree'] = float(np.mean(in_degrees))
        stats['max_in_degree'] = int(np.max(in_degrees))
        stats['min_in_degree'] = int(np.min(in_degrees))

    return stats
