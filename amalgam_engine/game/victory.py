"""Terminal condition checks."""

from typing import Optional
import logging

from .board import BoardState
from .constants import PieceKind, Side
from .types import VictoryType, WinResult

# Setup logger
logger = logging.getLogger(__name__)


class WinEvaluator:
    """Objective and elimination victory.

    Objective: a side's Void stands on the opponent's home anchor.
    Elimination: the opponent has no pieces left apart from Portals.
    When both sides qualify at once the side to move is reported.
    """

    @staticmethod
    def objective_reached(state: BoardState, side: Side) -> bool:
        target = state.topology.home_anchors.get(side.opponent)
        if target is None:
            return False
        piece = state.get_piece(target)
        return piece is not None and piece.owner == side and piece.kind == PieceKind.VOID

    @staticmethod
    def is_eliminated(state: BoardState, side: Side) -> bool:
        return state.combatant_count(side) == 0

    @staticmethod
    def _pick(state: BoardState, winners) -> Optional[Side]:
        if not winners:
            return None
        if len(winners) == 1:
            return winners[0]
        return state.current_side

    @staticmethod
    def evaluate(state: BoardState) -> WinResult:
        """Check objective victory first, then elimination."""
        sides = (state.current_side, state.current_side.opponent)

        winner = WinEvaluator._pick(state, [s for s in sides if WinEvaluator.objective_reached(state, s)])
        if winner is not None:
            logger.info(f"{winner.value} wins by objective")
            return WinResult(winner, VictoryType.OBJECTIVE)

        winner = WinEvaluator._pick(state, [s for s in sides if WinEvaluator.is_eliminated(state, s.opponent)])
        if winner is not None:
            logger.info(f"{winner.value} wins by elimination")
            return WinResult(winner, VictoryType.ELIMINATION)

        return WinResult()
