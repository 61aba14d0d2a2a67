"""
Configuration for the Amalgam rules engine.

Values come from the dataclass defaults, then an optional JSON file, then
AMALGAM_* environment variables.
"""

import os
import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = 'AMALGAM_CONFIG'


@dataclass
class RulesConfig:
    """Tunable rule parameters.

    Args:
        fireball_range: cells a Fireball ray travels
        fireball_amplified_range: ray length with a Void beyond the formation
        tidal_depth: rows a Tidal Wave floods
        tidal_amplified_depth: rows when amplified
        tidal_half_width: widest row reaches this many cells either side of centre
        tidal_amplified_half_width: the same when amplified
        launch_range: furthest a thrown piece can fly
        launch_amplified_range: the same with a Void behind the formation
        require_moved_piece_in_formation: only offer abilities whose formation
            contains the piece that just moved
        reject_moves_after_win: refuse every move once a side has won
    """
    fireball_range: int = 6
    fireball_amplified_range: int = 9
    tidal_depth: int = 4
    tidal_amplified_depth: int = 5
    tidal_half_width: int = 2
    tidal_amplified_half_width: int = 3
    launch_range: int = 4
    launch_amplified_range: int = 6
    require_moved_piece_in_formation: bool = False
    reject_moves_after_win: bool = False

    def __post_init__(self):
        """Validate configuration parameters."""
        for name in ('fireball_range', 'tidal_depth', 'launch_range'):
            if getattr(self, name) < 1:
                raise ConfigError(f"{name} must be at least 1")

        if self.tidal_half_width < 0:
            raise ConfigError("tidal_half_width must be non-negative")

        if self.fireball_amplified_range < self.fireball_range:
            raise ConfigError("fireball_amplified_range must be >= fireball_range")
        if self.tidal_amplified_depth < self.tidal_depth:
            raise ConfigError("tidal_amplified_depth must be >= tidal_depth")
        if self.tidal_amplified_half_width < self.tidal_half_width:
            raise ConfigError("tidal_amplified_half_width must be >= tidal_half_width")
        if self.launch_amplified_range < self.launch_range:
            raise ConfigError("launch_amplified_range must be >= launch_range")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'RulesConfig':
        """Build from a dict, ignoring unknown keys with a warning."""
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")
        return cls(**{k: v for k, v in values.items() if k in known})


def _env_overrides() -> Dict[str, Any]:
    """Read AMALGAM_<FIELD> environment variables."""
    overrides: Dict[str, Any] = {}
    for f in fields(RulesConfig):
        env_value = os.environ.get(f"AMALGAM_{f.name.upper()}")
        if env_value is None:
            continue
        if f.type in (bool, 'bool'):
            overrides[f.name] = env_value.lower() in ('true', '1', 'yes', 'on')
        else:
            try:
                overrides[f.name] = int(env_value)
            except ValueError:
                logger.warning(f"Invalid integer value for {f.name}: {env_value}")
    return overrides


def load_config(config_file: Optional[str] = None) -> RulesConfig:
    """
    Load configuration.

    Args:
        config_file: JSON file to read. Falls back to $AMALGAM_CONFIG.

    Raises:
        ConfigError: when the merged values are out of range
    """
    values = RulesConfig().to_dict()
    path = config_file or os.environ.get(CONFIG_FILE_ENV)
    if path:
        if Path(path).is_file():
            try:
                with open(path, 'r') as f:
                    values.update(json.load(f))
                logger.debug(f"Loaded config from {path}")
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Failed to load config file {path}: {e}")
        else:
            logger.warning(f"Config file {path} not found, using defaults")

    values.update(_env_overrides())
    return RulesConfig.from_dict(values)


# Global configuration instance
_config = None

def get_config() -> RulesConfig:
    """Get global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config

def set_config(config: Optional[RulesConfig]):
    """Set global configuration instance; None makes the next get_config() reload."""
    global _config
    _config = config
