"""
Trust graph construction

Both representations are pure functions of the FBAS and share its node id
space, so row i of either output always describes node i.
"""

from enum import Enum
from itertools import groupby
from typing import List

import numpy as np


class GraphFormat(Enum):
    """Supported trust graph representations"""
    LIST = "list"
    MATRIX = "matrix"

    @property
    def file_suffix(self) -> str:
        return "_adjacency_list.csv" if self is GraphFormat.LIST else "_adjacency_matrix.csv"


def generate_adjacency_list(fbas) -> List[str]:
    """
    Adjacency list seen from the target of each trust edge

    Row i starts with i itself, followed by every node whose quorum set
    references i, in ascending order. Consecutive duplicate referrers are
    collapsed; referrers are appended source by source, so each one ends up
    in a row exactly once.

    Args:
        fbas: FBAS model

    Returns:
        One space separated row per node, ascending by node id
    """
    referrers: List[List[int]] = [[] for _ in fbas.all_nodes()]
    for source in fbas.all_nodes():
        for target in fbas.quorum_set_members(source):
            referrers[target].append(source)

    rows = []
    for node, sources in enumerate(referrers):
        row = [node] + [source for source, _ in groupby(sources)]
        rows.append(" ".join(str(entry) for entry in row))
    return rows


def generate_adjacency_matrix(fbas) -> List[str]:
    """
    Adjacency matrix with cell (source, target) = 1 for each trust edge

    Args:
        fbas: FBAS model

    Returns:
        Header line `;0;1;...` followed by one `id;c0;c1;...` row per node
    """
    n = fbas.number_of_nodes()
    matrix = np.zeros((n, n), dtype=np.int8)
    for source in fbas.all_nodes():
        for target in fbas.quorum_set_members(source):
            matrix[source, target] = 1

    header = "".join(f";{node}" for node in fbas.all_nodes())
    rows = [header]
    for source in fbas.all_nodes():
        cells = ";".join(str(cell) for cell in matrix[source])
        rows.append(f"{source};{cells}")
    return rows


def build_graph(fbas, graph_format: GraphFormat) -> List[str]:
    """Build the trust graph in the requested representation"""
    if graph_format is GraphFormat.LIST:
        return generate_adjacency_list(fbas)
    elif graph_format is GraphFormat.MATRIX:
        return generate_adjacency_matrix(fbas)
    raise ValueError(f"Unknown graph format: {graph_format!r}")
