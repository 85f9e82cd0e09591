"""
Utility functions for fbas-graphs
"""

from .logger import setup_logger, get_logger
from .metrics import PerformanceTracker
from .config import load_config, merge_configs, create_default_config, ConfigValidator
from .graph_utils import fbas_to_digraph, compute_graph_statistics

__all__ = [
    'setup_logger',
    'get_logger',
    'PerformanceTracker',
    'load_config',
    'merge_configs',
    'create_default_config',
    'ConfigValidator',
    'fbas_to_digraph',
    'compute_graph_statistics'
]
