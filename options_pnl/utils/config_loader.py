"""
Configuration loader utility.
"""
import copy
import logging
from typing import Dict

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'logging': {
        'level': 'INFO',
        'file': None
    },
    'risk_levels': {
        'high_days': 14,
        'high_value': 5000,
        'medium_days': 30,
        'medium_value': 2000
    },
    'alerts': {
        'enabled': True,
        'expiring_days': 7,
        'risk_score_threshold': 0.8,
        'log_file': None,
        'console': True
    },
    'payoff': {
        'range_factor': 0.5,
        'steps': 20
    },
    'reporting': {
        'export_path': 'data/reports/'
    }
}


def merge_config(base: Dict, overrides: Dict) -> Dict:
    """Recursively merge ``overrides`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in (overrides or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_yaml(path: str) -> Dict:
    """Read a YAML mapping from disk. An empty file yields an empty dict."""
    with open(path, 'r') as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: str = 'config/config.yaml') -> Dict:
    """
    Load configuration from YAML file over the defaults.

    Args:
        config_path: Path to config file

    Returns:
        Configuration dictionary; the defaults when the file can't be read
    """
    try:
        config = merge_config(DEFAULT_CONFIG, load_yaml(config_path))
        logger.info(f"Loaded configuration from {config_path}")
        return config
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error loading config: {e}")
        return copy.deepcopy(DEFAULT_CONFIG)


def setup_logging(log_level: str = 'INFO', log_file: str = None):
    """
    Setup logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
    """
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    handlers = [logging.StreamHandler()]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=log_format,
        handlers=handlers
    )

    logger.info(f"Logging configured at {log_level} level")
