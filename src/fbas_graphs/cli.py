#!/usr/bin/env python3
"""
Command line interface for fbas-graphs

Rank nodes of an FBAS and write the results as a graph in a CSV. Output
files are named after the input with the ranking algorithm and the type of
data stored in the file appended.

Usage:
    fbas-graphs nodes.json node-rank
    fbas-graphs -o out --overwrite -f list nodes.json power-index-approx -s 1000
"""

import argparse
import sys
from typing import Any, Dict, List, Optional

from .errors import FbasGraphsError
from .pipeline import run
from .utils.config import GRAPH_FORMATS, ConfigValidator, create_default_config, load_config, merge_configs
from .utils.logger import get_logger, setup_logger
from .utils.metrics import PerformanceTracker


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fbas-graphs',
        description='Generate the trust graph of an FBAS and output in common graph IO formats.'
    )
    parser.add_argument('-o', '--output', type=str, default=None,
                        help='Directory where files are saved (default: ./graphs)')
    parser.add_argument('--overwrite', action='store_true', default=None,
                        help='Overwrite output files that already exist')
    parser.add_argument('-p', '--pretty', action='store_true', default=None,
                        help='Label nodes with their public keys')
    parser.add_argument('-i', '--ignore-inactive-nodes', action='store_true', default=None,
                        help='Filter out nodes marked "active": false before any analysis')
    parser.add_argument('--no-quorum-intersection', action='store_true', default=None,
                        help='Do not check for quorum intersection before ranking')
    parser.add_argument('-f', '--graph-format', choices=GRAPH_FORMATS, default=None,
                        help='Trust graph representation (default: matrix)')
    parser.add_argument('-c', '--config', type=str, default=None,
                        help='YAML or JSON configuration file')
    parser.add_argument('--log-level', type=str, default=None, help='Logging level')
    parser.add_argument('--metrics-file', type=str, default=None,
                        help='Export stage timings as JSON')
    parser.add_argument('nodes_path', type=str,
                        help='FBAS in stellarbeat.org "nodes" JSON format, or - for stdin')

    subparsers = parser.add_subparsers(dest='command', required=True,
                                       help='Ranking algorithm')
    subparsers.add_parser(
        'unweighted', help='Give every node the same weight'
    ).set_defaults(algorithm='unweighted')
    subparsers.add_parser(
        'node-rank', help="Use NodeRank, an extension of PageRank, to measure nodes' weight"
    ).set_defaults(algorithm='node_rank')
    subparsers.add_parser(
        'power-index-enum', help='Exact Shapley-Shubik power indices (small FBAS only)'
    ).set_defaults(algorithm='power_index_enum')
    approx = subparsers.add_parser(
        'power-index-approx', help='Approximate Shapley-Shubik power indices by sampling'
    )
    approx.add_argument('-s', '--samples', type=int, required=True, help='Number of samples')
    approx.add_argument('--seed', type=int, default=None, help='Random seed')
    approx.set_defaults(algorithm='power_index_approx')

    return parser


def args_to_config(args: argparse.Namespace) -> Dict[str, Any]:
    """Configuration overrides from parsed arguments; unset flags are None"""
    return {
        'input': {
            'nodes_path': args.nodes_path,
            'ignore_inactive_nodes': args.ignore_inactive_nodes
        },
        'output': {
            'directory': args.output,
            'overwrite': args.overwrite,
            'graph_format': args.graph_format,
            'public_keys': args.pretty,
            'metrics_file': args.metrics_file
        },
        'ranking': {
            'algorithm': args.algorithm,
            'check_quorum_intersection': False if args.no_quorum_intersection else None,
            'power_index': {
                'samples': getattr(args, 'samples', None),
                'seed': getattr(args, 'seed', None)
            }
        },
        'logging': {
            'level': args.log_level
        }
    }


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        file_config = load_config(args.config) if args.config else {}
        config = merge_configs(create_default_config(), file_config, args_to_config(args))
        ConfigValidator.validate_run_config(config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    log_config = config.get('logging', {})
    setup_logger(
        level=log_config.get('level', 'INFO'),
        log_file=log_config.get('log_file'),
        structured=log_config.get('structured', True)
    )
    logger = get_logger(__name__)

    try:
        run(config, PerformanceTracker())
    except FbasGraphsError as e:
        logger.error(
            "run_failed",
            kind=e.kind.value,
            path=str(e.path) if e.path else None,
            error=str(e)
        )
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
