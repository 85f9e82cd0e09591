"""Quorum analysis for fbas-graphs"""

from .quorums import (
    is_quorum,
    max_quorum_within,
    is_minimal_quorum,
    find_minimal_quorums,
    find_disjoint_quorums,
    has_quorum_intersection
)

__all__ = [
    'is_quorum',
    'max_quorum_within',
    'is_minimal_quorum',
    'find_minimal_quorums',
    'find_disjoint_quorums',
    'has_quorum_intersection'
]
