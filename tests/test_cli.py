"""
Integration tests for the fbas-graphs command line interface and pipeline
"""

import json
import pytest
import yaml

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from fbas_graphs.cli import build_parser, main
from fbas_graphs.errors import PathExistsError
from fbas_graphs.pipeline import output_basename, run
from fbas_graphs.ranking.algorithms import NodeRank, Unweighted
from fbas_graphs.utils.config import create_default_config, merge_configs
from fbas_graphs.utils.metrics import PerformanceTracker


@pytest.fixture
def nodes_file(tmp_path) -> Path:
    keys = ["GA", "GB", "GC"]
    entries = [
        {"publicKey": key, "active": True,
         "quorumSet": {"threshold": 2, "validators": keys, "innerQuorumSets": []}}
        for key in keys
    ]
    path = tmp_path / "nodes.json"
    path.write_text(json.dumps(entries))
    return path


class TestPipeline:
    """Integration tests for a full run"""

    def test_output_basename(self):
        assert output_basename("data/nodes.json", Unweighted()) == "nodes_unweighted"
        assert output_basename("-", NodeRank()) == "stdin_node_rank"

    def test_run_integration(self, nodes_file, tmp_path):
        config = merge_configs(create_default_config(), {
            'input': {'nodes_path': str(nodes_file)},
            'output': {'directory': str(tmp_path / "out")}
        })
        tracker = PerformanceTracker()

        artifacts = run(config, tracker)

        assert artifacts.nodelist_path.read_text() == "Id,Label,weight\n0,,1\n1,,1\n2,,1\n"
        assert artifacts.graph_path.name == "nodes_unweighted_adjacency_matrix.csv"
        assert artifacts.graph_path.read_text() == ";0;1;2\n0;1;1;1\n1;1;1;1\n2;1;1;1\n"
        assert tracker.gauges['nodes'] == 3
        assert set(tracker.get_summary()['timers']) == {'load', 'graph', 'ranking', 'report', 'write'}
        assert tracker.counters['trust_edges'] == 9
        assert tracker.counters['files_written'] == 2

    def test_run_refuses_before_computing(self, nodes_file, tmp_path):
        out = tmp_path / "out"
        out.mkdir()
        (out / "nodes_unweighted_nodelist.csv").write_text("keep")
        config = merge_configs(create_default_config(), {
            'input': {'nodes_path': str(nodes_file)},
            'output': {'directory': str(out)}
        })
        tracker = PerformanceTracker()

        with pytest.raises(PathExistsError):
            run(config, tracker)

        assert 'load' not in tracker.timers
        assert (out / "nodes_unweighted_nodelist.csv").read_text() == "keep"


class TestCommandLine:
    """Integration tests for the CLI entry point"""

    def test_parser_requires_algorithm(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["nodes.json"])

    def test_parser_approx_samples(self):
        args = build_parser().parse_args(["nodes.json", "power-index-approx", "-s", "10"])

        assert args.algorithm == "power_index_approx"
        assert args.samples == 10
        assert args.overwrite is None

    def test_unweighted_run(self, nodes_file, tmp_path):
        out = tmp_path / "graphs"

        assert main(["-o", str(out), str(nodes_file), "unweighted"]) == 0

        assert (out / "nodes_unweighted_nodelist.csv").read_text() == \
            "Id,Label,weight\n0,,1\n1,,1\n2,,1\n"
        assert (out / "nodes_unweighted_adjacency_matrix.csv").exists()

    def test_second_run_needs_overwrite(self, nodes_file, tmp_path):
        out = tmp_path / "graphs"
        argv = ["-o", str(out), "-f", "list", str(nodes_file), "unweighted"]

        assert main(argv) == 0
        assert main(argv) == 1
        assert main(["--overwrite"] + argv) == 0
        assert (out / "nodes_unweighted_adjacency_list.csv").read_text() == \
            "0 0 1 2\n1 0 1 2\n2 0 1 2\n"

    def test_node_rank_with_public_keys(self, nodes_file, tmp_path):
        out = tmp_path / "graphs"

        assert main(["-o", str(out), "-p", str(nodes_file), "node-rank"]) == 0

        assert (out / "nodes_node_rank_nodelist.csv").read_text() == \
            "Id,Label,weight\n0,GA,0.333\n1,GB,0.333\n2,GC,0.333\n"

    def test_power_index_approx_run(self, nodes_file, tmp_path):
        out = tmp_path / "graphs"

        assert main(["-o", str(out), str(nodes_file), "power-index-approx", "-s", "30", "--seed", "5"]) == 0

        lines = (out / "nodes_power_index_approx_nodelist.csv").read_text().splitlines()
        assert lines[0] == "Id,Label,weight"
        assert [line.split(",")[0] for line in lines[1:]] == ["0", "1", "2"]

    def test_config_file(self, nodes_file, tmp_path):
        out = tmp_path / "configured"
        config_path = tmp_path / "settings.yaml"
        config_path.write_text(yaml.safe_dump({
            'output': {'directory': str(out), 'graph_format': 'list'},
            'logging': {'structured': False}
        }))

        assert main(["-c", str(config_path), str(nodes_file), "unweighted"]) == 0
        assert (out / "nodes_unweighted_adjacency_list.csv").exists()

    def test_missing_input(self, tmp_path):
        assert main(["-o", str(tmp_path), str(tmp_path / "missing.json"), "unweighted"]) == 1

    def test_missing_config(self, nodes_file, tmp_path):
        assert main(["-c", str(tmp_path / "nope.yaml"), str(nodes_file), "unweighted"]) == 1

    def test_exact_power_index_limit(self, nodes_file, tmp_path):
        """Too many quorum members end the run with a diagnostic, not a crash"""
        out = tmp_path / "graphs"
        config_path = tmp_path / "limits.yaml"
        config_path.write_text(yaml.safe_dump({
            'ranking': {'power_index': {'exact_max_players': 2}}
        }))

        assert main(["-c", str(config_path), "-o", str(out), str(nodes_file), "power-index-enum"]) == 1
        assert not (out / "nodes_power_index_enum_nodelist.csv").exists()

    def test_quorum_intersection_failure(self, tmp_path):
        entries = [
            {"publicKey": key, "quorumSet": {"threshold": 2, "validators": group}}
            for group in (["GA", "GB"], ["GC", "GD"]) for key in group
        ]
        path = tmp_path / "split.json"
        path.write_text(json.dumps(entries))
        out = tmp_path / "graphs"

        assert main(["-o", str(out), str(path), "power-index-enum"]) == 1
        assert not (out / "split_power_index_enum_nodelist.csv").exists()
        assert main(["-o", str(out), "--no-quorum-intersection", str(path), "power-index-enum"]) == 0
