"""
One run of fbas-graphs: load an FBAS, build its trust graph, rank its nodes
and write both artifacts.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import ErrorKind, FbasLoadError
from .fbas import load_fbas
from .graph.builder import GraphFormat, build_graph
from .graph.report import assemble_report, generate_node_list_with_weight
from .io.writer import WrittenArtifacts, check_overwrite, create_output_dir, output_paths, write_outputs
from .ranking.algorithms import NodeRank, RankingAlg, alg_from_config, alg_name, normalize_node_rank, rank_nodes
from .utils.config import ConfigValidator
from .utils.graph_utils import compute_graph_statistics, fbas_to_digraph
from .utils.logger import get_logger
from .utils.metrics import PerformanceTracker

logger = get_logger(__name__)


def output_basename(source: Union[str, Path], alg: RankingAlg) -> str:
    """
    Common prefix of the output files: input stem plus algorithm name

    Input read from stdin ('-') is named `stdin`.
    """
    stem = 'stdin' if str(source) == '-' else Path(source).stem
    if not stem:
        raise FbasLoadError(
            f"Cannot derive an output name from {source!r}", source, ErrorKind.CONFIGURATION
        )
    return f"{stem}_{alg_name(alg)}"


def run(config: Dict[str, Any], tracker: Optional[PerformanceTracker] = None) -> WrittenArtifacts:
    """
    Execute a full run described by a merged configuration

    Output locations are validated before any computation, so a bad output
    directory or an existing file aborts the run early.

    Args:
        config: Merged configuration (see create_default_config)
        tracker: Optional tracker collecting stage timings

    Returns:
        Locations of the written files
    """
    ConfigValidator.validate_run_config(config)
    tracker = tracker or PerformanceTracker()

    input_config = config['input']
    output_config = config['output']
    ranking_config = config['ranking']

    alg = alg_from_config(ranking_config)
    graph_format = GraphFormat(output_config['graph_format'])
    source = input_config['nodes_path']
    basename = output_basename(source, alg)
    overwrite = bool(output_config.get('overwrite', False))

    output_dir = create_output_dir(output_config.get('directory'))
    check_overwrite(output_paths(output_dir, basename, graph_format), overwrite)

    with tracker.start_timer('load'):
        fbas = load_fbas(source, bool(input_config.get('ignore_inactive_nodes', False)))
    tracker.set_gauge('nodes', fbas.number_of_nodes())

    with tracker.start_timer('graph'):
        graph = build_graph(fbas, graph_format)

    with tracker.start_timer('ranking'):
        scores = rank_nodes(
            fbas, alg,
            check_quorum_intersection=bool(ranking_config.get('check_quorum_intersection', True))
        )
        if isinstance(alg, NodeRank):
            scores = normalize_node_rank(scores)

    with tracker.start_timer('report'):
        report = assemble_report(scores, fbas, bool(output_config.get('public_keys', False)))
        node_list = generate_node_list_with_weight(report)

    stats = compute_graph_statistics(fbas_to_digraph(fbas))
    tracker.increment_counter('trust_edges', stats['num_edges'])
    logger.info("trust_graph_statistics", **stats)

    with tracker.start_timer('write'):
        artifacts = write_outputs(
            output_dir, basename, node_list, graph, graph_format, overwrite=overwrite
        )
    tracker.increment_counter('files_written', 2)

    summary = tracker.get_summary()
    logger.info(
        "run_complete",
        algorithm=alg_name(alg),
        nodelist=str(artifacts.nodelist_path),
        graph=str(artifacts.graph_path),
        timers=summary['timers'],
        counters=summary['counters']
    )

    metrics_file = output_config.get('metrics_file')
    if metrics_file:
        tracker.export_json(metrics_file)

    return artifacts
