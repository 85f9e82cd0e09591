"""
Output writer for node reports and trust graphs

Both files of a run are written as a unit: targets are checked for
overwrite safety before anything is written, contents are staged next to
their targets and only moved into place once both staged files are
complete.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..errors import IoFailureError, OutputDirectoryError, PathExistsError
from ..graph.builder import GraphFormat
from ..graph.report import NODE_LIST_HEADER

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "graphs"
NODE_LIST_SUFFIX = "_nodelist.csv"


@dataclass(frozen=True)
class WrittenArtifacts:
    """Resolved locations of the files written by a run"""
    directory: Path
    nodelist_path: Path
    graph_path: Path


def create_output_dir(path: Optional[Union[str, Path]] = None) -> Path:
    """
    Create the output directory, including missing parents

    Args:
        path: Target directory; defaults to ./graphs

    Raises:
        OutputDirectoryError: If the directory cannot be created
    """
    directory = Path(path) if path is not None else Path(DEFAULT_OUTPUT_DIR)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputDirectoryError(
            f"Error creating output directory {directory}: {e}. "
            f"Will not create output files.",
            directory
        ) from e
    return directory


def output_paths(directory: Path, basename: str, graph_format: GraphFormat) -> Tuple[Path, Path]:
    """Node list and graph file locations for a run"""
    return (
        directory / f"{basename}{NODE_LIST_SUFFIX}",
        directory / f"{basename}{graph_format.file_suffix}"
    )


def check_overwrite(paths: Sequence[Path], overwrite: bool):
    """
    Refuse to clobber existing files unless overwriting is enabled

    Raises:
        PathExistsError: For the first existing path
    """
    if overwrite:
        return
    for path in paths:
        if path.exists():
            raise PathExistsError(path)


def _stage(path: Path, lines: Sequence[str]) -> Path:
    """Write `lines` to a temporary sibling of `path` and return its location"""
    fd, staged = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, 'w', buffering=1) as f:
            for line in lines:
                f.write(line)
    except OSError:
        Path(staged).unlink(missing_ok=True)
        raise
    return Path(staged)


def write_files(contents: Dict[Path, Sequence[str]], overwrite: bool = False):
    """
    Write several files so that either all of them or none appear

    Raises:
        PathExistsError: If a target exists and overwrite is disabled
        IoFailureError: If staging or moving a file fails
    """
    check_overwrite(list(contents), overwrite)

    staged: Dict[Path, Path] = {}
    created: List[Path] = []
    current = None
    try:
        for current, lines in contents.items():
            staged[current] = _stage(current, lines)
        for current, staged_path in list(staged.items()):
            existed = current.exists()
            os.replace(staged_path, current)
            del staged[current]
            if not existed:
                created.append(current)
    except OSError as e:
        for staged_path in staged.values():
            staged_path.unlink(missing_ok=True)
        for path in created:
            path.unlink(missing_ok=True)
        raise IoFailureError(current, e) from e


def write_outputs(
    output_dir: Optional[Union[str, Path]],
    basename: str,
    node_list: Sequence[str],
    graph: Sequence[str],
    graph_format: GraphFormat,
    overwrite: bool = False
) -> WrittenArtifacts:
    """
    Persist the node report and the trust graph of a run

    Args:
        output_dir: Target directory; defaults to ./graphs
        basename: Common file name prefix
        node_list: Rendered report records, each ending in a newline
        graph: Rendered graph rows, without newlines
        graph_format: Representation of `graph`, selects the file suffix
        overwrite: Replace existing files

    Returns:
        Resolved paths of both files
    """
    directory = create_output_dir(output_dir)
    nodelist_path, graph_path = output_paths(directory, basename, graph_format)

    write_files(
        {
            nodelist_path: [NODE_LIST_HEADER, *node_list],
            graph_path: [f"{row}\n" for row in graph],
        },
        overwrite=overwrite
    )

    for path in (nodelist_path, graph_path):
        logger.info(f"Wrote report to file {path}")

    return WrittenArtifacts(
        directory=directory.resolve(),
        nodelist_path=nodelist_path.resolve(),
        graph_path=graph_path.resolve()
    )
