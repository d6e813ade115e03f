"""Configuration, logging and clock helpers."""
from .clock import days_to_expiration, days_until
from .config_loader import DEFAULT_CONFIG, load_config, setup_logging

__all__ = ['days_to_expiration', 'days_until', 'DEFAULT_CONFIG', 'load_config', 'setup_logging']
