"""
Unit tests for node report assembly and score normalization
"""

import pytest

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from fbas_graphs.fbas import Fbas
from fbas_graphs.graph.report import (
    NodeRanking,
    assemble_report,
    format_score,
    generate_node_list_with_weight
)
from fbas_graphs.ranking.algorithms import normalize_node_rank


class TestReportAssembler:
    """Test suite for the report assembler"""

    @pytest.fixture
    def fbas(self) -> Fbas:
        keys = ["GA", "GB", "GC"]
        return Fbas.from_json_nodes([
            {"publicKey": key, "quorumSet": {"threshold": 2, "validators": keys}}
            for key in keys
        ])

    def test_unweighted_scenario(self, fbas):
        """Uniform weights render as integers with empty labels"""
        report = assemble_report([1.0, 1.0, 1.0], fbas)

        assert generate_node_list_with_weight(report) == ["0,,1\n", "1,,1\n", "2,,1\n"]

    def test_index_alignment(self, fbas):
        """Record i describes node i, regardless of scores"""
        report = assemble_report([0.1, 0.7, 0.2], fbas)

        assert [ranking.id for ranking in report] == [0, 1, 2]
        assert [ranking.score for ranking in report] == [0.1, 0.7, 0.2]

    def test_never_sorted_by_score(self, fbas):
        """Higher scores do not move records forward"""
        report = assemble_report([0.0, 0.5, 0.9], fbas)

        assert generate_node_list_with_weight(report) == ["0,,0\n", "1,,0.5\n", "2,,0.9\n"]

    def test_public_key_labels(self, fbas):
        """Labels carry public keys when requested"""
        report = assemble_report([1.0, 1.0, 1.0], fbas, use_public_keys=True)

        assert report[0] == NodeRanking(id=0, label="GA", score=1.0)
        assert generate_node_list_with_weight(report)[2] == "2,GC,1\n"

    def test_score_count_mismatch(self, fbas):
        """Scores must cover exactly the FBAS' nodes"""
        with pytest.raises(ValueError):
            assemble_report([1.0, 1.0], fbas)

    def test_format_score(self):
        """Scores use their shortest positional form"""
        assert format_score(1.0) == "1"
        assert format_score(0.333) == "0.333"
        assert format_score(0.0) == "0"
        assert format_score(0.0000001) == "0.0000001"


class TestNodeRankNormalization:
    """Test suite for NodeRank score normalization"""

    def test_truncates_instead_of_rounding(self):
        """2/3 becomes 0.666, not 0.667"""
        assert normalize_node_rank([2.0, 1.0]) == [0.666, 0.333]

    def test_equal_scores(self):
        """Equal scores share the unit mass"""
        assert normalize_node_rank([5.0, 5.0, 5.0, 5.0]) == [0.25, 0.25, 0.25, 0.25]

    def test_sum_close_to_one(self):
        """Truncation loses less than 0.001 per node"""
        scores = [0.13, 0.27, 0.05, 0.31, 0.11, 0.09, 0.04]
        normalized = normalize_node_rank(scores)

        assert abs(sum(normalized) - 1.0) <= 0.001 * len(scores)
        assert all(value >= 0 for value in normalized)

    def test_zero_sum(self):
        """All-zero input stays zero"""
        assert normalize_node_rank([0.0, 0.0]) == [0.0, 0.0]

    def test_empty(self):
        assert normalize_node_rank([]) == []
