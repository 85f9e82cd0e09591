"""Influence ranking algorithms for fbas-graphs"""

from .algorithms import (
    Unweighted,
    NodeRank,
    PowerIndexEnum,
    PowerIndexApprox,
    RankingAlg,
    alg_name,
    alg_from_config,
    rank_nodes,
    normalize_node_rank
)

__all__ = [
    'Unweighted',
    'NodeRank',
    'PowerIndexEnum',
    'PowerIndexApprox',
    'RankingAlg',
    'alg_name',
    'alg_from_config',
    'rank_nodes',
    'normalize_node_rank'
]
