"""
Influence ranking of FBAS nodes

Implements the ranking engine used by the report: uniform weights, NodeRank
(PageRank over the trust graph) and Shapley-Shubik power indices of the
simple game whose winning coalitions are the node sets containing a quorum.
Scores are always returned as a list aligned to node ids 0..N-1.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Union

import numpy as np
import networkx as nx

from ..analysis.quorums import find_disjoint_quorums, find_minimal_quorums
from ..errors import PowerIndexSizeError, QuorumIntersectionError
from ..utils.graph_utils import fbas_to_digraph

logger = logging.getLogger(__name__)

Score = float


@dataclass(frozen=True)
class Unweighted:
    """Every node scores 1"""


@dataclass(frozen=True)
class NodeRank:
    """PageRank over the trust graph"""
    damping: float = 0.85
    max_iter: int = 100
    tolerance: float = 1.0e-6


@dataclass(frozen=True)
class PowerIndexEnum:
    """Exact Shapley-Shubik power index"""
    warning_threshold: int = 20
    max_players: int = 25


@dataclass(frozen=True)
class PowerIndexApprox:
    """Shapley-Shubik power index estimated from random permutations"""
    samples: int
    seed: Optional[int] = None

    def __post_init__(self):
        if self.samples <= 0:
            raise ValueError(f"Number of samples must be positive, got {self.samples}")


RankingAlg = Union[Unweighted, NodeRank, PowerIndexEnum, PowerIndexApprox]


def alg_name(alg: RankingAlg) -> str:
    """Name used for the algorithm in output file names"""
    if isinstance(alg, Unweighted):
        return 'unweighted'
    elif isinstance(alg, NodeRank):
        return 'node_rank'
    elif isinstance(alg, PowerIndexEnum):
        return 'power_index_enum'
    elif isinstance(alg, PowerIndexApprox):
        return 'power_index_approx'
    raise TypeError(f"Unknown ranking algorithm: {alg!r}")


def alg_from_config(ranking: Dict[str, Any]) -> RankingAlg:
    """Build the ranking algorithm described by the `ranking` config section"""
    name = ranking.get('algorithm', 'unweighted')
    node_rank = ranking.get('node_rank', {})
    power_index = ranking.get('power_index', {})

    if name == 'unweighted':
        return Unweighted()
    elif name == 'node_rank':
        return NodeRank(
            damping=float(node_rank.get('damping', 0.85)),
            max_iter=int(node_rank.get('max_iter', 100)),
            tolerance=float(node_rank.get('tolerance', 1.0e-6))
        )
    elif name == 'power_index_enum':
        return PowerIndexEnum(
            warning_threshold=int(power_index.get('exact_warning_threshold', 20)),
            max_players=int(power_index.get('exact_max_players', 25))
        )
    elif name == 'power_index_approx':
        seed = power_index.get('seed')
        return PowerIndexApprox(
            samples=int(power_index['samples']),
            seed=int(seed) if seed is not None else None
        )
    raise ValueError(f"Unknown ranking algorithm: {name}")


def rank_nodes(
    fbas,
    alg: RankingAlg,
    check_quorum_intersection: bool = True
) -> List[Score]:
    """
    Compute one influence score per node

    Args:
        fbas: FBAS model
        alg: Ranking algorithm and its parameters
        check_quorum_intersection: Refuse to rank an FBAS with disjoint
            quorums (weighted algorithms only)

    Returns:
        Scores aligned to node ids 0..N-1

    Raises:
        QuorumIntersectionError: If the check is enabled and fails
    """
    if isinstance(alg, Unweighted):
        return [1.0 for _ in fbas.all_nodes()]

    minimal_quorums = None
    if check_quorum_intersection:
        minimal_quorums = find_minimal_quorums(fbas)
        disjoint = find_disjoint_quorums(fbas, minimal_quorums)
        if disjoint is not None:
            raise QuorumIntersectionError(*disjoint)
        logger.info("FBAS enjoys quorum intersection")

    if isinstance(alg, NodeRank):
        return node_rank(fbas, alg)

    if minimal_quorums is None:
        minimal_quorums = find_minimal_quorums(fbas)

    if isinstance(alg, PowerIndexEnum):
        return power_index_enum(fbas, minimal_quorums, alg)
    elif isinstance(alg, PowerIndexApprox):
        return power_index_approx(fbas, minimal_quorums, alg)
    raise TypeError(f"Unknown ranking algorithm: {alg!r}")


def node_rank(fbas, alg: NodeRank) -> List[Score]:
    """PageRank of every node in the trust graph"""
    graph = fbas_to_digraph(fbas)
    if graph.number_of_nodes() == 0:
        return []
    scores = nx.pagerank(graph, alpha=alg.damping, max_iter=alg.max_iter, tol=alg.tolerance)
    return [float(scores[node]) for node in fbas.all_nodes()]


def _to_mask(nodes) -> int:
    mask = 0
    for node in nodes:
        mask |= 1 << node
    return mask


def power_index_enum(
    fbas,
    minimal_quorums: List[FrozenSet[int]],
    alg: PowerIndexEnum
) -> List[Score]:
    """
    Exact Shapley-Shubik index, enumerating coalitions of quorum members

    Nodes outside every minimal quorum are null players: they never turn a
    losing coalition into a winning one and score 0. The game restricted to
    the P members of minimal quorums has the same indices for its players,
    so only its 2^P coalitions are enumerated. A player's index is the sum
    of |S|! (P-|S|-1)! / P! over the coalitions S without it that lose on
    their own and win once it joins.

    Raises:
        PowerIndexSizeError: If P exceeds alg.max_players
    """
    scores = [0.0 for _ in fbas.all_nodes()]
    players = sorted(frozenset().union(*minimal_quorums))
    p = len(players)
    if p == 0:
        return scores
    if p > alg.max_players:
        raise PowerIndexSizeError(p, alg.max_players)
    if p > alg.warning_threshold:
        logger.warning(
            f"Enumerating 2^{p} coalitions; consider power-index-approx for large FBAS"
        )

    # bit i of a coalition stands for players[i]
    position = {node: i for i, node in enumerate(players)}
    coalitions = np.arange(1 << p, dtype=np.int64)
    winning = np.zeros(1 << p, dtype=bool)
    for quorum in minimal_quorums:
        mask = _to_mask(position[node] for node in quorum)
        winning |= (coalitions & mask) == mask

    sizes = np.zeros(1 << p, dtype=np.int64)
    for bit in range(p):
        sizes += (coalitions >> bit) & 1

    weights = np.array([1.0 / (p * math.comb(p - 1, size)) for size in range(p)])

    for i, node in enumerate(players):
        bit = 1 << i
        without = coalitions[(coalitions & bit) == 0]
        pivotal = winning[without | bit] & ~winning[without]
        scores[node] = float(weights[sizes[without[pivotal]]].sum())
    return scores


def power_index_approx(
    fbas,
    minimal_quorums: List[FrozenSet[int]],
    alg: PowerIndexApprox
) -> List[Score]:
    """
    Monte Carlo estimate of the Shapley-Shubik index

    For every sampled permutation the node whose arrival first completes a
    quorum is pivotal; its estimate is the share of samples it was pivotal in.
    """
    n = fbas.number_of_nodes()
    if n == 0:
        return []

    rng = np.random.default_rng(alg.seed)
    masks = [_to_mask(quorum) for quorum in minimal_quorums]
    pivotal_counts = np.zeros(n)

    for _ in range(alg.samples):
        coalition = 0
        for node in rng.permutation(n):
            coalition |= 1 << int(node)
            if any(coalition & mask == mask for mask in masks):
                pivotal_counts[node] += 1
                break

    return [float(count) for count in pivotal_counts / alg.samples]


def normalize_node_rank(scores: List[Score]) -> List[Score]:
    """
    Scale scores to sum to 1, truncated (not rounded) to 3 decimal places

    An all-zero input stays all zero.
    """
    total = sum(scores)
    if total == 0:
        return [0.0 for _ in scores]
    return [math.trunc(score / total * 1000.0) / 1000.0 for score in scores]
