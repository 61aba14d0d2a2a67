"""Rules engine facade: the operations turn-management, UI and AI collaborators call."""

import logging
from typing import List, Optional, Set

from ..config import RulesConfig, get_config
from .abilities import AbilityResolver
from .attacks import AttackResolver
from .board import BoardState
from .constants import Coordinate, Side
from .legality import LegalityChecker
from .moves import MoveGenerator
from .types import AbilityOption, LegalityResult, Move, MoveKind, MoveResult, WinResult
from .victory import WinEvaluator

# Setup logger
logger = logging.getLogger(__name__)


class RulesEngine:
    """Pure queries plus one atomic ``apply_move``.

    The engine never hands the turn over; collaborators call
    ``BoardState.switch_side`` when their turn structure says so.
    """

    def __init__(self, config: Optional[RulesConfig] = None):
        self.config = config if config is not None else get_config()
        self.abilities = AbilityResolver(self.config)
        self.legality = LegalityChecker(self.abilities)

    def legal_destinations(self, state: BoardState, coord) -> Set[Coordinate]:
        return MoveGenerator.legal_destinations(state, coord)

    def is_legal(self, state: BoardState, move: Move) -> LegalityResult:
        return self.legality.is_legal(state, move)

    def available_abilities(self, state: BoardState, side: Optional[Side] = None,
                            moved_coord=None) -> List[AbilityOption]:
        """Without moved_coord the configured moved-piece restriction applies."""
        side = side if side is not None else state.current_side
        if moved_coord is None:
            moved_coord = self.abilities.moved_piece_filter(state, side)
        return self.abilities.available_abilities(state, side, moved_coord)

    def evaluate_win(self, state: BoardState) -> WinResult:
        return WinEvaluator.evaluate(state)

    def apply_move(self, state: BoardState, move: Move) -> MoveResult:
        """Validate and apply a move to a copy of state.

        The input state is left untouched; on success the result carries the
        new state with relocation, captures and ability effects all applied.
        """
        legality = self.is_legal(state, move)
        if not legality.ok:
            return MoveResult(ok=False, reason=legality.reason)

        next_state = state.copy()
        if move.kind == MoveKind.ABILITY:
            captured = self.abilities.execute(next_state, move)
        else:
            captured = self._relocate(next_state, move)
        next_state.move_history.append(move)

        moved_coord = self.abilities.moved_piece_filter(next_state, move.side)
        abilities = self.abilities.available_abilities(next_state, move.side, moved_coord)
        win = WinEvaluator.evaluate(next_state)

        logger.info(f"Applied {move}; captured {len(captured)}")
        return MoveResult(
            ok=True,
            next_state=next_state,
            captured=tuple(captured),
            abilities=tuple(abilities),
            win=win,
        )

    @staticmethod
    def _relocate(state: BoardState, move: Move):
        """Move the piece, then let it attack from where it stands."""
        if move.kind == MoveKind.PORTAL_SWAP:
            state.swap_pieces(move.from_coord, move.to_coord)
        else:
            state.move_piece(move.from_coord, move.to_coord)
        return AttackResolver.resolve(state, move.to_coord)
