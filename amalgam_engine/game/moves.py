"""Movement generation for Amalgam."""

from typing import Dict, List, Optional, Set, Tuple
import logging

from .board import BoardState
from .constants import DIRECTIONS, Coordinate, PieceKind, to_coordinate
from .types import MoveKind, Piece

# Setup logger
logger = logging.getLogger(__name__)

MOVEMENT_KINDS = (
    MoveKind.STANDARD,
    MoveKind.NEXUS,
    MoveKind.PHASING,
    MoveKind.PORTAL_RAIL,
    MoveKind.PORTAL_SWAP,
)


class MoveGenerator:
    """Computes where a piece may move. Every method is pure."""

    @staticmethod
    def legal_destinations(state: BoardState, coord) -> Set[Coordinate]:
        """Union of the destinations of every movement mode."""
        destinations: Set[Coordinate] = set()
        for cells in MoveGenerator.destinations_by_mode(state, coord).values():
            destinations |= cells
        return destinations

    @staticmethod
    def destinations_by_mode(state: BoardState, coord) -> Dict[MoveKind, Set[Coordinate]]:
        """Destinations keyed by the movement mode that reaches them.

        Raises CoordinateError when coord is not on the board. An empty
        origin has no destinations.
        """
        origin = state.topology.require(coord)
        piece = state.get_piece(origin)
        if piece is None:
            logger.debug(f"No piece at {origin}")
            return {kind: set() for kind in MOVEMENT_KINDS}

        by_mode = {
            MoveKind.STANDARD: MoveGenerator.standard_moves(state, piece),
            MoveKind.NEXUS: MoveGenerator.nexus_moves(state, piece),
            MoveKind.PHASING: MoveGenerator.phasing_moves(state, piece),
            MoveKind.PORTAL_RAIL: MoveGenerator.portal_rail_moves(state, piece),
            MoveKind.PORTAL_SWAP: MoveGenerator.portal_swap_moves(state, piece),
        }
        logger.debug(f"Destinations for {piece}: " +
                     ", ".join(f"{k.value}={len(v)}" for k, v in by_mode.items()))
        return by_mode

    @staticmethod
    def classify(state: BoardState, origin, destination) -> Optional[MoveKind]:
        """First movement mode that reaches destination, or None."""
        destination = to_coordinate(destination)
        by_mode = MoveGenerator.destinations_by_mode(state, origin)
        for kind in MOVEMENT_KINDS:
            if destination in by_mode[kind]:
                return kind
        return None

    @staticmethod
    def _can_stand_on(state: BoardState, piece: Piece, coord: Coordinate) -> bool:
        """Empty on-board cell, and golden when the mover is a Portal."""
        if not state.is_empty_cell(coord):
            return False
        return not piece.kind.is_portal() or state.topology.is_golden(coord)

    @staticmethod
    def standard_moves(state: BoardState, piece: Piece) -> Set[Coordinate]:
        """One step in any of the 8 directions."""
        return {
            piece.coordinate.offset(d) for d in DIRECTIONS
            if MoveGenerator._can_stand_on(state, piece, piece.coordinate.offset(d))
        }

    @staticmethod
    def phasing_moves(state: BoardState, piece: Piece) -> Set[Coordinate]:
        """Straight walk through a contiguous run of pieces to the first empty cell beyond.

        Non-Portal movers may only pass through Portals. Portal movers pass
        through anything but must land on a golden cell.
        """
        destinations = set()
        limit = state.topology.max_extent
        for d in DIRECTIONS:
            current = piece.coordinate.offset(d)
            run_length = 0
            blocked = False
            while run_length < limit:
                occupant = state.get_piece(current)
                if occupant is None:
                    break
                if not piece.kind.is_portal() and not occupant.kind.is_portal():
                    blocked = True
                    break
                run_length += 1
                current = current.offset(d)

            if blocked or run_length == 0:
                continue
            if MoveGenerator._can_stand_on(state, piece, current):
                destinations.add(current)
        return destinations

    @staticmethod
    def nexus_pairs(state: BoardState, piece: Piece) -> List[Tuple[Coordinate, Coordinate]]:
        """Anchor pairs next to the mover.

        An anchor is a friendly elemental piece adjacent to the mover that has
        its own adjacent friendly elemental of a different kind (never the
        mover itself).
        """
        pairs = []
        origin = piece.coordinate
        for anchor_coord in state.topology.neighbors(origin):
            anchor = state.get_piece(anchor_coord)
            if anchor is None or anchor.owner != piece.owner or not anchor.kind.is_elemental():
                continue
            for partner_coord in state.topology.neighbors(anchor_coord):
                if partner_coord == origin:
                    continue
                partner = state.get_piece(partner_coord)
                if (partner is not None and partner.owner == piece.owner
                        and partner.kind.is_elemental() and partner.kind != anchor.kind):
                    pairs.append((anchor_coord, partner_coord))
        return pairs

    @staticmethod
    def nexus_moves(state: BoardState, piece: Piece) -> Set[Coordinate]:
        """Empty cells around either member of a nexus pair."""
        destinations = set()
        for anchor_coord, partner_coord in MoveGenerator.nexus_pairs(state, piece):
            for member in (anchor_coord, partner_coord):
                for cell in state.topology.neighbors(member):
                    if cell != piece.coordinate and MoveGenerator._can_stand_on(state, piece, cell):
                        destinations.add(cell)
        return destinations

    @staticmethod
    def portal_rail_moves(state: BoardState, piece: Piece) -> Set[Coordinate]:
        """A Portal on a golden cell may teleport along any of its rails."""
        if not piece.kind.is_portal() or not state.topology.is_golden(piece.coordinate):
            return set()
        return {
            cell for cell in state.topology.rail_connections(piece.coordinate)
            if state.is_empty_cell(cell)
        }

    @staticmethod
    def portal_swap_moves(state: BoardState, piece: Piece) -> Set[Coordinate]:
        """A non-Portal on a golden cell may trade places with a friendly Portal on a golden cell."""
        if piece.kind.is_portal() or not state.topology.is_golden(piece.coordinate):
            return set()
        return {
            portal.coordinate for portal in state.pieces_of(piece.owner, PieceKind.PORTAL)
            if state.topology.is_golden(portal.coordinate)
        }
