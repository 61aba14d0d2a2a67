"""Captures that follow a piece's relocation."""

from typing import List
import logging

from .board import BoardState
from .constants import PieceKind
from .types import Piece

# Setup logger
logger = logging.getLogger(__name__)


class AttackResolver:
    """Kind-specific capture rules.

    Void captures every adjacent enemy, Portals included. A Portal captures
    only enemy Portals: adjacent ones and those at the far end of its rails.
    Every other kind captures adjacent enemies except Portals.
    """

    @staticmethod
    def can_capture(attacker: Piece, defender: Piece) -> bool:
        if defender.owner == attacker.owner:
            return False
        if attacker.kind == PieceKind.VOID:
            return True
        if attacker.kind == PieceKind.PORTAL:
            return defender.kind == PieceKind.PORTAL
        return defender.kind != PieceKind.PORTAL

    @staticmethod
    def targets(state: BoardState, coord) -> List[Piece]:
        """Pieces the piece at coord would capture, without removing them."""
        attacker = state.get_piece(coord)
        if attacker is None:
            return []

        cells = list(state.topology.neighbors(attacker.coordinate))
        if attacker.kind == PieceKind.PORTAL:
            cells.extend(c for c in state.topology.rail_connections(attacker.coordinate) if c not in cells)

        captured = []
        for cell in cells:
            defender = state.get_piece(cell)
            if defender is not None and AttackResolver.can_capture(attacker, defender):
                captured.append(defender)
        return captured

    @staticmethod
    def resolve(state: BoardState, coord) -> List[Piece]:
        """Remove and return everything the piece at coord captures."""
        captured = AttackResolver.targets(state, coord)
        for piece in captured:
            state.remove_piece(piece.coordinate)
        if captured:
            logger.debug(f"Piece at {coord} captured: " + ", ".join(str(p) for p in captured))
        return captured
