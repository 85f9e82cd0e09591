"""
Configuration utilities for fbas-graphs
"""

import yaml
import json
from pathlib import Path
from typing import Dict, Any, Union
from omegaconf import OmegaConf
import os

GRAPH_FORMATS = ('list', 'matrix')


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    if config_path.suffix in ['.yaml', '.yml']:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
    elif config_path.suffix == '.json':
        with open(config_path, 'r') as f:
            config = json.load(f)
    else:
        raise ValueError(f"Unsupported config format: {config_path.suffix}")

    # Resolve environment variables
    config = resolve_env_vars(config)

    return config


def merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge multiple configuration dictionaries

    Later configs override earlier ones. Keys that are None in a later
    config are ignored, so unset CLI flags never mask file values.
    """
    layers = [OmegaConf.create(drop_none(config)) for config in configs]
    merged = OmegaConf.merge(*layers) if layers else OmegaConf.create({})
    return OmegaConf.to_container(merged, resolve=True)


def drop_none(config: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively remove keys whose value is None"""
    result = {}
    for key, value in config.items():
        if isinstance(value, dict):
            result[key] = drop_none(value)
        elif value is not None:
            result[key] = value
    return result


def resolve_env_vars(config: Any) -> Any:
    """
    Resolve environment variables in configuration

    Supports ${ENV_VAR} and ${ENV_VAR:default} syntax
    """
    if isinstance(config, str):
        # Check for environment variable pattern
        if config.startswith('${') and config.endswith('}'):
            env_var = config[2:-1]

            # Check for default value
            if ':' in env_var:
                var_name, default = env_var.split(':', 1)
                return os.environ.get(var_name, default)
            else:
                return os.environ.get(env_var, config)
        return config

    elif isinstance(config, dict):
        return {k: resolve_env_vars(v) for k, v in config.items()}

    elif isinstance(config, list):
        return [resolve_env_vars(item) for item in config]

    return config


def create_default_config() -> Dict[str, Any]:
    """Create default fbas-graphs configuration"""
    return {
        'input': {
            'nodes_path': '-',
            'ignore_inactive_nodes': False
        },
        'output': {
            'directory': None,
            'overwrite': False,
            'graph_format': 'matrix',
            'public_keys': False,
            'metrics_file': None
        },
        'ranking': {
            'algorithm': 'unweighted',
            'check_quorum_intersection': True,
            'node_rank': {
                'damping': 0.85,
                'max_iter': 100,
                'tolerance': 1.0e-6
            },
            'power_index': {
                'samples': None,
                'seed': None,
                'exact_warning_threshold': 20,
                'exact_max_players': 25
            }
        },
        'logging': {
            'level': 'INFO',
            'structured': True,
            'log_file': None
        }
    }


class ConfigValidator:
    """Validate configuration against schema"""

    ALGORITHMS = ('unweighted', 'node_rank', 'power_index_enum', 'power_index_approx')

    @staticmethod
    def validate_run_config(config: Dict[str, Any]) -> bool:
        """Validate a merged run configuration"""
        required_keys = ['input', 'output', 'ranking']

        for key in required_keys:
            if key not in config:
                raise ValueError(f"Missing required config key: {key}")

        if config['output'].get('graph_format') not in GRAPH_FORMATS:
            raise ValueError(f"Invalid graph format: {config['output'].get('graph_format')}")

        ranking = config['ranking']
        if ranking.get('algorithm') not in ConfigValidator.ALGORITHMS:
            raise ValueError(f"Invalid ranking algorithm: {ranking.get('algorithm')}")

        if ranking['algorithm'] == 'power_index_approx':
            samples = ranking.get('power_index', {}).get('samples')
            if not isinstance(samples, int) or samples <= 0:
                raise ValueError("power_index_approx needs a positive number of samples")

        damping = ranking.get('node_rank', {}).get('damping', 0.85)
        if not 0.0 < damping < 1.0:
            raise ValueError("node_rank damping must lie in (0, 1)")

        return True
