"""
Quorum analysis for FBAS models

A quorum is a non-empty set of nodes that satisfies the quorum set of each
of its members. Minimal quorums are found by a branch and bound search that
grows a selection along quorum set references, so only the nodes a
candidate quorum actually depends on are ever branched on.
"""

import logging
from typing import AbstractSet, FrozenSet, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)


def is_quorum(fbas, nodes: AbstractSet[int]) -> bool:
    """Check whether `nodes` is a quorum of `fbas`"""
    nodes = set(nodes)
    return bool(nodes) and all(
        fbas.get_quorum_set(node).is_satisfied(nodes) for node in nodes
    )


def max_quorum_within(fbas, nodes: AbstractSet[int]) -> Set[int]:
    """
    Largest quorum contained in `nodes`, or the empty set if there is none

    Repeatedly removes members whose quorum set is not satisfied by the
    remaining members until a fixpoint is reached.
    """
    remaining = set(nodes)
    while True:
        unsatisfied = {
            node for node in remaining
            if not fbas.get_quorum_set(node).is_satisfied(remaining)
        }
        if not unsatisfied:
            return remaining
        remaining -= unsatisfied


def is_minimal_quorum(fbas, nodes: AbstractSet[int]) -> bool:
    """Check that `nodes` is a quorum and no proper subset of it is"""
    if not is_quorum(fbas, nodes):
        return False
    return all(not max_quorum_within(fbas, set(nodes) - {node}) for node in nodes)


def find_minimal_quorums(fbas) -> List[FrozenSet[int]]:
    """
    Enumerate all minimal quorums of `fbas`

    Exponential in the worst case. Each search is seeded with the smallest
    member of the quorums it can find, so every minimal quorum is reached
    from exactly one seed.

    Returns:
        Minimal quorums sorted by size, then by member ids
    """
    found: Set[FrozenSet[int]] = set()
    order = sorted(max_quorum_within(fbas, set(fbas.all_nodes())))

    for index, first in enumerate(order):
        available = frozenset(order[index:])
        if first not in max_quorum_within(fbas, available):
            continue

        stack = [(frozenset([first]), available, tuple(fbas.quorum_set_members(first)))]
        while stack:
            selection, available, unprocessed = stack.pop()

            if is_quorum(fbas, selection):
                # no strict superset of a quorum is minimal
                if is_minimal_quorum(fbas, selection):
                    found.add(selection)
                continue

            while unprocessed and (unprocessed[0] in selection or unprocessed[0] not in available):
                unprocessed = unprocessed[1:]
            if not unprocessed:
                continue

            candidate, rest = unprocessed[0], unprocessed[1:]

            reduced = available - {candidate}
            if selection <= max_quorum_within(fbas, reduced):
                stack.append((selection, reduced, rest))

            extended = selection | {candidate}
            if extended <= max_quorum_within(fbas, available):
                references = tuple(
                    node for node in fbas.quorum_set_members(candidate)
                    if node not in extended
                )
                stack.append((extended, available, rest + references))

    logger.debug(f"Found {len(found)} minimal quorums")
    return sorted(found, key=lambda quorum: (len(quorum), sorted(quorum)))


def find_disjoint_quorums(
    fbas,
    minimal_quorums: Optional[List[FrozenSet[int]]] = None
) -> Optional[Tuple[Set[int], Set[int]]]:
    """
    Find two disjoint quorums, if the FBAS has any

    Every quorum contains a minimal quorum, so it suffices to look for a
    quorum in the complement of each minimal quorum.
    """
    if minimal_quorums is None:
        minimal_quorums = find_minimal_quorums(fbas)

    if not minimal_quorums:
        logger.warning("FBAS has no quorums; quorum intersection holds vacuously")
        return None

    all_nodes = set(fbas.all_nodes())
    for quorum in minimal_quorums:
        other = max_quorum_within(fbas, all_nodes - quorum)
        if other:
            return set(quorum), other
    return None


def has_quorum_intersection(fbas) -> bool:
    """Check that every two quorums of `fbas` share at least one node"""
    return find_disjoint_quorums(fbas) is None
