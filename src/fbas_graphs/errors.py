"""
Error types for fbas-graphs

Every failure the tool reports carries an ErrorKind so that callers can
decide whether to abort the run or continue.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Union


class ErrorKind(Enum):
    """Kinds of failures reported by fbas-graphs"""
    CONFIGURATION = "configuration"
    INVALID_INPUT = "invalid_input"
    PATH_EXISTS = "path_exists"
    IO_FAILURE = "io_failure"
    QUORUM_INTERSECTION = "quorum_intersection"
    TOO_LARGE = "too_large"


class FbasGraphsError(Exception):
    """Base class for all fbas-graphs errors"""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class FbasLoadError(FbasGraphsError):
    """The FBAS description could not be read or parsed"""

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        kind: ErrorKind = ErrorKind.INVALID_INPUT
    ):
        super().__init__(message, path)
        self.kind = kind


class OutputDirectoryError(FbasGraphsError):
    """The output directory could not be created"""

    kind = ErrorKind.CONFIGURATION


class PathExistsError(FbasGraphsError):
    """An output file exists and overwriting is disabled"""

    kind = ErrorKind.PATH_EXISTS

    def __init__(self, path: Union[str, Path]):
        super().__init__(
            f"Output file {path} already exists. "
            f"Use --overwrite to replace it.",
            path
        )


class IoFailureError(FbasGraphsError):
    """Writing an output file failed"""

    kind = ErrorKind.IO_FAILURE

    def __init__(self, path: Union[str, Path], cause: OSError):
        super().__init__(f"Error writing {path}: {cause}", path)
        self.cause = cause


class QuorumIntersectionError(FbasGraphsError):
    """The FBAS has two disjoint quorums"""

    kind = ErrorKind.QUORUM_INTERSECTION

    def __init__(self, quorum_a, quorum_b):
        super().__init__(
            f"FBAS lacks quorum intersection: found disjoint quorums "
            f"{sorted(quorum_a)} and {sorted(quorum_b)}"
        )
        self.quorum_a = quorum_a
        self.quorum_b = quorum_b


class PowerIndexSizeError(FbasGraphsError):
    """Too many quorum members for exact power index enumeration"""

    kind = ErrorKind.TOO_LARGE

    def __init__(self, players: int, max_players: int):
        super().__init__(
            f"Exact power index needs 2^{players} coalitions over {players} quorum "
            f"members (limit {max_players}). Use power-index-approx instead."
        )
        self.players = players
        self.max_players = max_players
