"""
Node report assembly
"""

from typing import List, NamedTuple, Sequence

import numpy as np

NODE_LIST_HEADER = "Id,Label,weight\n"


class NodeRanking(NamedTuple):
    """One row of the node report"""
    id: int
    label: str
    score: float


def assemble_report(
    scores: Sequence[float],
    fbas,
    use_public_keys: bool = False
) -> List[NodeRanking]:
    """
    Combine scores with node identities

    Position i of the result always describes node i; the report is never
    sorted by score.

    Args:
        scores: One score per node, aligned to node ids
        fbas: FBAS model the scores were computed on
        use_public_keys: Label nodes with their public keys

    Returns:
        Report ordered by node id
    """
    if len(scores) != fbas.number_of_nodes():
        raise ValueError(
            f"Got {len(scores)} scores for an FBAS with {fbas.number_of_nodes()} nodes"
        )

    return [
        NodeRanking(
            id=node,
            label=fbas.public_key(node) if use_public_keys else '',
            score=score
        )
        for node, score in zip(fbas.all_nodes(), scores)
    ]


def format_score(score: float) -> str:
    """Shortest positional form of a score, without a trailing '.0'"""
    return np.format_float_positional(float(score), trim='-')


def generate_node_list_with_weight(report: Sequence[NodeRanking]) -> List[str]:
    """Render every record as `id,label,score` with a trailing newline"""
    return [
        f"{ranking.id},{ranking.label},{format_score(ranking.score)}\n"
        for ranking in report
    ]
