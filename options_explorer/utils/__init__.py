"""Configuration and logging helpers."""
from .config_loader import DEFAULT_CONFIG, load_config, parameters_from_config, setup_logging

__all__ = ['DEFAULT_CONFIG', 'load_config', 'parameters_from_config', 'setup_logging']
