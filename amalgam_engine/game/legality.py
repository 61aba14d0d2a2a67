"""Move validation."""

import logging
from typing import Optional

from .abilities import AbilityResolver
from .board import BoardState
from .moves import MoveGenerator
from .types import ErrorKind, LegalityResult, Move, MoveKind
from .victory import WinEvaluator

# Setup logger
logger = logging.getLogger(__name__)


class LegalityChecker:
    """Decides whether a move request may be applied. Never mutates, never raises for rule violations."""

    def __init__(self, abilities: Optional[AbilityResolver] = None):
        self.abilities = abilities if abilities is not None else AbilityResolver()

    def _reject(self, move: Move, reason: ErrorKind) -> LegalityResult:
        logger.debug(f"Rejected {move}: {reason.value}")
        return LegalityResult(False, reason)

    def is_legal(self, state: BoardState, move: Move) -> LegalityResult:
        # Without reject_moves_after_win the caller stops play once a side has won
        if self.abilities.config.reject_moves_after_win and WinEvaluator.evaluate(state).is_terminal:
            return self._reject(move, ErrorKind.GAME_OVER)

        if move.side != state.current_side:
            return self._reject(move, ErrorKind.NOT_PLAYERS_TURN)

        # Coordinates outside the board fail closed
        if not state.topology.is_on_board(move.from_coord):
            return self._reject(move, ErrorKind.WRONG_PIECE_OWNER)
        piece = state.get_piece(move.from_coord)
        if piece is None or piece.is_enemy_of(move.side):
            return self._reject(move, ErrorKind.WRONG_PIECE_OWNER)

        if move.kind == MoveKind.ABILITY:
            reason = self.abilities.check(state, move)
            if reason is not None:
                return self._reject(move, reason)
            return LegalityResult(True)

        if move.to_coord == move.from_coord or not state.topology.is_on_board(move.to_coord):
            return self._reject(move, ErrorKind.ILLEGAL_DESTINATION)

        destinations = MoveGenerator.destinations_by_mode(state, move.from_coord)[move.kind]
        if move.to_coord not in destinations:
            occupant = state.get_piece(move.to_coord)
            if (occupant is not None and occupant.owner == move.side
                    and move.kind != MoveKind.PORTAL_SWAP):
                return self._reject(move, ErrorKind.TARGET_OCCUPIED_BY_OWN_SIDE)
            return self._reject(move, ErrorKind.ILLEGAL_DESTINATION)

        return LegalityResult(True)
