"""
Unit tests for the output writer

Covers directory creation, file naming, overwrite refusal and the
all-or-nothing guarantee for the two files of a run.
"""

import os
import pytest

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from fbas_graphs.errors import ErrorKind, IoFailureError, OutputDirectoryError, PathExistsError
from fbas_graphs.graph.builder import GraphFormat
from fbas_graphs.io import writer
from fbas_graphs.io.writer import create_output_dir, output_paths, write_outputs

NODE_LIST = ["0,,1\n", "1,,1\n", "2,,1\n"]
MATRIX = [";0;1;2", "0;1;1;1", "1;1;1;1", "2;1;1;1"]


class TestOutputDirectory:
    """Test suite for output directory handling"""

    def test_default_directory(self, tmp_path, monkeypatch):
        """Without a path, ./graphs is used"""
        monkeypatch.chdir(tmp_path)

        directory = create_output_dir()

        assert directory == Path("graphs")
        assert (tmp_path / "graphs").is_dir()

    def test_nested_directory(self, tmp_path):
        """Missing parents are created"""
        target = tmp_path / "a" / "b" / "c"

        assert create_output_dir(target) == target
        assert target.is_dir()

    def test_existing_directory(self, tmp_path):
        assert create_output_dir(tmp_path) == tmp_path

    def test_directory_creation_failure(self, tmp_path):
        """A file in the way is reported as a configuration error"""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(OutputDirectoryError) as excinfo:
            create_output_dir(blocker / "graphs")

        assert excinfo.value.kind is ErrorKind.CONFIGURATION


class TestWriteOutputs:
    """Test suite for writing run artifacts"""

    def test_file_names(self, tmp_path):
        nodelist, graph = output_paths(tmp_path, "nodes_unweighted", GraphFormat.LIST)

        assert nodelist == tmp_path / "nodes_unweighted_nodelist.csv"
        assert graph == tmp_path / "nodes_unweighted_adjacency_list.csv"

    def test_writes_both_files(self, tmp_path):
        """Node list gets a header, graph rows end with newlines"""
        artifacts = write_outputs(tmp_path, "nodes_unweighted", NODE_LIST, MATRIX, GraphFormat.MATRIX)

        assert artifacts.nodelist_path == (tmp_path / "nodes_unweighted_nodelist.csv").resolve()
        assert artifacts.graph_path == (tmp_path / "nodes_unweighted_adjacency_matrix.csv").resolve()
        assert artifacts.nodelist_path.read_text() == "Id,Label,weight\n0,,1\n1,,1\n2,,1\n"
        assert artifacts.graph_path.read_text() == ";0;1;2\n0;1;1;1\n1;1;1;1\n2;1;1;1\n"

    def test_no_staging_leftovers(self, tmp_path):
        write_outputs(tmp_path, "run", NODE_LIST, MATRIX, GraphFormat.MATRIX)

        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "run_adjacency_matrix.csv",
            "run_nodelist.csv",
        ]

    def test_overwrite_refused(self, tmp_path):
        """Existing files keep their content when overwrite is disabled"""
        existing = tmp_path / "run_nodelist.csv"
        existing.write_text("precious")

        with pytest.raises(PathExistsError) as excinfo:
            write_outputs(tmp_path, "run", NODE_LIST, MATRIX, GraphFormat.MATRIX)

        assert excinfo.value.kind is ErrorKind.PATH_EXISTS
        assert excinfo.value.path == existing
        assert "--overwrite" in str(excinfo.value)
        assert existing.read_text() == "precious"

    def test_refusal_writes_neither_file(self, tmp_path):
        """An existing graph file also blocks the node list"""
        (tmp_path / "run_adjacency_matrix.csv").write_text("old graph")

        with pytest.raises(PathExistsError):
            write_outputs(tmp_path, "run", NODE_LIST, MATRIX, GraphFormat.MATRIX)

        assert not (tmp_path / "run_nodelist.csv").exists()
        assert (tmp_path / "run_adjacency_matrix.csv").read_text() == "old graph"

    def test_overwrite_replaces(self, tmp_path):
        existing = tmp_path / "run_nodelist.csv"
        existing.write_text("stale")

        write_outputs(tmp_path, "run", NODE_LIST, MATRIX, GraphFormat.MATRIX, overwrite=True)

        assert existing.read_text() == "Id,Label,weight\n0,,1\n1,,1\n2,,1\n"

    def test_other_format_does_not_conflict(self, tmp_path):
        """A matrix file does not block writing a list file"""
        write_outputs(tmp_path, "run", NODE_LIST, MATRIX, GraphFormat.MATRIX)
        (tmp_path / "run_nodelist.csv").unlink()

        artifacts = write_outputs(tmp_path, "run", NODE_LIST, ["0 0 1 2"], GraphFormat.LIST)

        assert artifacts.graph_path.read_text() == "0 0 1 2\n"

    def test_io_failure_leaves_nothing(self, tmp_path, monkeypatch):
        """A failure while moving files into place removes what was written"""
        real_replace = os.replace
        calls = []

        def failing_replace(src, dst):
            calls.append(dst)
            if len(calls) == 2:
                raise OSError("disk full")
            real_replace(src, dst)

        monkeypatch.setattr(writer.os, "replace", failing_replace)

        with pytest.raises(IoFailureError) as excinfo:
            write_outputs(tmp_path, "run", NODE_LIST, MATRIX, GraphFormat.MATRIX)

        assert excinfo.value.kind is ErrorKind.IO_FAILURE
        assert excinfo.value.path == tmp_path / "run_adjacency_matrix.csv"
        assert list(tmp_path.iterdir()) == []
