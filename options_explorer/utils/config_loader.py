"""
Configuration loader utility.
"""
import copy
import os
import yaml
import logging
from typing import Dict

from ..valuation.models import OptionParameters, OptionType

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'defaults': {
        'spot': 100.0,
        'strike': 100.0,
        'risk_free_rate': 0.05,
        'volatility': 0.20,
        'time_to_expiry': 1.0,
        'option_type': 'C'
    },
    'sweep': {
        'range_fraction': 0.6,
        'min_range': 30.0,
        'points': 100,
        'floor': 0.01
    },
    'price_curve': {
        'range_fraction': 0.5,
        'points': 50
    },
    'volatility_comparison': {
        'low': 0.10,
        'high': 0.50
    },
    'reporting': {
        'export_path': 'data/reports/',
        'decimals': 4
    },
    'logging': {
        'level': 'INFO',
        'file': None
    }
}


def _deep_merge(base: Dict, overrides: Dict) -> Dict:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: str = 'config/config.yaml') -> Dict:
    """
    Load configuration from YAML file, merged over the defaults.

    Args:
        config_path: Path to config file

    Returns:
        Configuration dictionary (defaults if the file cannot be read)
    """
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
        if not isinstance(config, dict):
            raise ValueError(f"expected a mapping, got {type(config).__name__}")
        logger.info(f"Loaded configuration from {config_path}")
        return _deep_merge(DEFAULT_CONFIG, config)
    except Exception as e:
        logger.error(f"Error loading config: {e}")
        return copy.deepcopy(DEFAULT_CONFIG)


def parameters_from_config(config: Dict, **overrides) -> OptionParameters:
    """
    Build option parameters from the config 'defaults' section.

    Args:
        config: Configuration dictionary
        **overrides: Field values that take precedence (None values ignored)

    Returns:
        OptionParameters
    """
    values = dict(DEFAULT_CONFIG['defaults'])
    values.update(config.get('defaults', {}))
    values.update({k: v for k, v in overrides.items() if v is not None})

    return OptionParameters(
        spot=float(values['spot']),
        strike=float(values['strike']),
        risk_free_rate=float(values['risk_free_rate']),
        volatility=float(values['volatility']),
        time_to_expiry=float(values['time_to_expiry']),
        option_type=OptionType.from_value(values['option_type'])
    )


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
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    level = getattr(logging, str(log_level).upper(), None)
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format=log_format,
        handlers=handlers,
        force=True
    )

    if level == logging.INFO and str(log_level).upper() != 'INFO':
        logger.warning(f"Unknown log level {log_level!r}, using INFO")
    logger.info(f"Logging configured at {logging.getLevelName(level)} level")
