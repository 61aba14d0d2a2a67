"""Game logic package for Amalgam."""

from .constants import Side, PieceKind, Coordinate, DIRECTIONS
from .types import (
    AbilityKind,
    AbilityOption,
    ErrorKind,
    Formation,
    LegalityResult,
    Move,
    MoveKind,
    MoveResult,
    Piece,
    VictoryType,
    WinResult,
)
from .topology import BoardTopology, default_topology, load_topology
from .board import BoardState, initial_state
from .moves import MoveGenerator
from .attacks import AttackResolver
from .abilities import AbilityResolver
from .legality import LegalityChecker
from .victory import WinEvaluator
from .engine import RulesEngine

__all__ = [
    'Side',
    'PieceKind',
    'Coordinate',
    'DIRECTIONS',
    'AbilityKind',
    'AbilityOption',
    'ErrorKind',
    'Formation',
    'LegalityResult',
    'Move',
    'MoveKind',
    'MoveResult',
    'Piece',
    'VictoryType',
    'WinResult',
    'BoardTopology',
    'default_topology',
    'load_topology',
    'BoardState',
    'initial_state',
    'MoveGenerator',
    'AttackResolver',
    'AbilityResolver',
    'LegalityChecker',
    'WinEvaluator',
    'RulesEngine',
]
