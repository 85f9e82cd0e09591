"""Trust graph and node report construction"""

from .builder import GraphFormat, generate_adjacency_list, generate_adjacency_matrix, build_graph
from .report import NodeRanking, assemble_report, generate_node_list_with_weight, NODE_LIST_HEADER

__all__ = [
    'GraphFormat',
    'generate_adjacency_list',
    'generate_adjacency_matrix',
    'build_graph',
    'NodeRanking',
    'assemble_report',
    'generate_node_list_with_weight',
    'NODE_LIST_HEADER'
]
