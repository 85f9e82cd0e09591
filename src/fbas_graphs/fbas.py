"""
FBAS model and loader

Reads an FBAS in the stellarbeat.org "nodes" JSON format and exposes it
through id-indexed accessors over a dense node space 0..N-1. Public keys
from the document are only reachable through public_key(); everything else
works on integer ids.
"""

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple, Union

from .analysis.quorums import max_quorum_within
from .errors import ErrorKind, FbasLoadError

logger = logging.getLogger(__name__)

NodeId = int


@dataclass(frozen=True)
class QuorumSet:
    """Threshold over validators and nested quorum sets, by node id"""
    threshold: int = 0
    validators: Tuple[NodeId, ...] = ()
    inner_quorum_sets: Tuple['QuorumSet', ...] = ()

    def contained_nodes(self) -> Set[NodeId]:
        """All node ids referenced anywhere in this quorum set"""
        nodes = set(self.validators)
        for inner in self.inner_quorum_sets:
            nodes |= inner.contained_nodes()
        return nodes

    def is_satisfied(self, nodes: Set[NodeId]) -> bool:
        """
        Check whether the nodes in `nodes` meet the threshold

        A quorum set with threshold 0 is never satisfied.
        """
        if self.threshold <= 0:
            return False
        count = sum(1 for v in self.validators if v in nodes)
        if count >= self.threshold:
            return True
        for inner in self.inner_quorum_sets:
            if inner.is_satisfied(nodes):
                count += 1
                if count >= self.threshold:
                    return True
        return False

    def remap(self, mapping: Dict[NodeId, NodeId]) -> 'QuorumSet':
        """Rewrite ids through `mapping`, dropping ids it does not contain"""
        return QuorumSet(
            threshold=self.threshold,
            validators=tuple(mapping[v] for v in self.validators if v in mapping),
            inner_quorum_sets=tuple(q.remap(mapping) for q in self.inner_quorum_sets)
        )


class Fbas:
    """
    Immutable FBAS over node ids 0..N-1

    Args:
        quorum_sets: Quorum set of every node, indexed by node id
        public_keys: Public key of every node, indexed by node id
        names: Optional human readable names, indexed by node id
    """

    def __init__(
        self,
        quorum_sets: List[QuorumSet],
        public_keys: List[str],
        names: Optional[List[str]] = None
    ):
        if len(quorum_sets) != len(public_keys):
            raise ValueError("Need exactly one public key per quorum set")
        names = list(names) if names is not None else [''] * len(public_keys)
        if len(names) != len(public_keys):
            raise ValueError("Need exactly one name per node")

        n = len(quorum_sets)
        for node, qset in enumerate(quorum_sets):
            for member in qset.contained_nodes():
                if not 0 <= member < n:
                    raise ValueError(f"Node {node} references unknown node id {member}")

        self._quorum_sets = tuple(quorum_sets)
        self._public_keys = tuple(public_keys)
        self._names = tuple(names)
        self._ids = {pk: node for node, pk in enumerate(self._public_keys)}

    def number_of_nodes(self) -> int:
        return len(self._quorum_sets)

    def all_nodes(self) -> range:
        return range(len(self._quorum_sets))

    def get_quorum_set(self, node: NodeId) -> QuorumSet:
        return self._quorum_sets[node]

    def quorum_set_members(self, node: NodeId) -> List[NodeId]:
        """Ids referenced by the quorum set of `node`, ascending"""
        return sorted(self._quorum_sets[node].contained_nodes())

    def public_key(self, node: NodeId) -> str:
        return self._public_keys[node]

    def name(self, node: NodeId) -> str:
        return self._names[node]

    def node_id(self, public_key: str) -> Optional[NodeId]:
        return self._ids.get(public_key)

    def without_nodes(self, removed: Iterable[NodeId]) -> 'Fbas':
        """
        Return a new FBAS without `removed`

        Survivors are renumbered densely in their original order. Removed
        nodes are dropped from every validator list; thresholds are kept.
        """
        removed = set(removed)
        survivors = [node for node in self.all_nodes() if node not in removed]
        mapping = {old: new for new, old in enumerate(survivors)}

        return Fbas(
            quorum_sets=[self._quorum_sets[old].remap(mapping) for old in survivors],
            public_keys=[self._public_keys[old] for old in survivors],
            names=[self._names[old] for old in survivors]
        )

    def unsatisfiable_nodes(self) -> Set[NodeId]:
        """Nodes that are not part of any quorum"""
        satisfiable = max_quorum_within(self, set(self.all_nodes()))
        return set(self.all_nodes()) - satisfiable

    def __len__(self) -> int:
        return self.number_of_nodes()

    def __repr__(self) -> str:
        return f"Fbas(nodes={self.number_of_nodes()})"

    @classmethod
    def from_json_nodes(cls, nodes: List[Dict[str, Any]]) -> 'Fbas':
        """
        Build an FBAS from parsed stellarbeat "nodes" JSON

        Validators that are referenced but not described become nodes with
        an empty quorum set, numbered after all described nodes.
        """
        if not isinstance(nodes, list):
            raise FbasLoadError("Expected a JSON list of nodes")

        public_keys: List[str] = []
        names: List[str] = []
        raw_quorum_sets: List[Any] = []
        ids: Dict[str, NodeId] = {}

        for position, entry in enumerate(nodes):
            if not isinstance(entry, dict) or not isinstance(entry.get('publicKey'), str):
                raise FbasLoadError(f"Node entry {position} has no publicKey")
            public_key = entry['publicKey']
            if public_key in ids:
                logger.warning(f"Ignoring duplicate entry for node {public_key}")
                continue
            ids[public_key] = len(public_keys)
            public_keys.append(public_key)
            names.append(entry.get('name') or '')
            raw_quorum_sets.append(entry.get('quorumSet'))

        def node_for(public_key: str) -> NodeId:
            if public_key not in ids:
                ids[public_key] = len(public_keys)
                public_keys.append(public_key)
                names.append('')
            return ids[public_key]

        def parse(raw: Any) -> QuorumSet:
            if raw is None:
                return QuorumSet()
            if not isinstance(raw, dict):
                raise FbasLoadError(f"Malformed quorum set: {raw!r}")
            threshold = raw.get('threshold', 0)
            if not isinstance(threshold, int) or threshold < 0:
                raise FbasLoadError(f"Invalid quorum set threshold: {threshold!r}")
            return QuorumSet(
                threshold=threshold,
                validators=tuple(node_for(v) for v in raw.get('validators') or []),
                inner_quorum_sets=tuple(parse(q) for q in raw.get('innerQuorumSets') or [])
            )

        quorum_sets = [parse(raw) for raw in raw_quorum_sets]
        # referenced-only validators
        quorum_sets.extend(QuorumSet() for _ in range(len(public_keys) - len(quorum_sets)))

        return cls(quorum_sets, public_keys, names)


def read_nodes_json(source: Union[str, Path]) -> List[Dict[str, Any]]:
    """Read the raw node list from a file, or from stdin when source is '-'"""
    try:
        if str(source) == '-':
            text = sys.stdin.read()
        else:
            text = Path(source).read_text()
    except OSError as e:
        raise FbasLoadError(
            f"Cannot read FBAS from {source}: {e}", source, ErrorKind.CONFIGURATION
        ) from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise FbasLoadError(f"Invalid JSON in {source}: {e}", source) from e


def load_fbas(source: Union[str, Path], ignore_inactive_nodes: bool = False) -> Fbas:
    """
    Load an FBAS and prune it down to the nodes that can take part in quorums

    Args:
        source: Path to a stellarbeat "nodes" JSON file, or '-' for stdin
        ignore_inactive_nodes: Drop nodes marked `"active": false`

    Returns:
        The filtered, densely renumbered FBAS
    """
    logger.info("Reading FBAS JSON from file...")
    raw_nodes = read_nodes_json(source)
    fbas = Fbas.from_json_nodes(raw_nodes)

    if ignore_inactive_nodes:
        # the first entry of a duplicated public key is authoritative
        first_entries = {}
        for entry in raw_nodes:
            first_entries.setdefault(entry['publicKey'], entry)
        inactive = {
            fbas.node_id(public_key)
            for public_key, entry in first_entries.items()
            if entry.get('active') is False
        }
        logger.info(f"Ignoring {len(inactive)} inactive nodes")
        fbas = fbas.without_nodes(inactive)

    unsatisfiable = fbas.unsatisfiable_nodes()
    if unsatisfiable:
        logger.info(f"Removing {len(unsatisfiable)} unsatisfiable nodes")
        fbas = fbas.without_nodes(unsatisfiable)

    logger.info(f"Loaded FBAS with {fbas.number_of_nodes()} nodes.")
    return fbas
