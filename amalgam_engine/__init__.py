"""Rules and legality engine for the Amalgam board game."""

from .config import RulesConfig, get_config, load_config, set_config
from .exceptions import AmalgamError, ConfigError, CoordinateError, TopologyError

__version__ = "0.1.0"

__all__ = [
    'RulesConfig',
    'get_config',
    'load_config',
    'set_config',
    'AmalgamError',
    'ConfigError',
    'CoordinateError',
    'TopologyError',
]
