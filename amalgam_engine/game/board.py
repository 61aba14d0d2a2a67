"""Board state for Amalgam."""

from typing import Dict, List, Optional
import logging

from .constants import (
    COMBATANT_KINDS,
    FIRST_SIDE,
    PRE_PLACED_PIECES,
    Coordinate,
    PieceKind,
    Side,
    to_coordinate,
)
from .topology import BoardTopology, default_topology
from .types import Move, Piece

# Setup logger
logger = logging.getLogger(__name__)


class BoardState:
    """Pieces on the board, the side to move and the moves applied so far.

    A state is owned by one caller at a time. Use ``copy()`` before handing
    it to speculative search.
    """

    def __init__(self, topology: Optional[BoardTopology] = None, current_side: Side = FIRST_SIDE):
        self.topology = topology if topology is not None else default_topology()
        self.pieces: Dict[Coordinate, Piece] = {}
        self.current_side = current_side
        self.move_history: List[Move] = []

    def copy(self) -> 'BoardState':
        """Create an independent copy; the topology is shared since it never changes."""
        new_state = BoardState(self.topology, self.current_side)
        new_state.pieces = self.pieces.copy()
        new_state.move_history = self.move_history.copy()
        return new_state

    def place(self, owner: Side, kind: PieceKind, coordinate) -> Piece:
        """Put a new piece on an empty cell."""
        coordinate = self.topology.require(coordinate)
        if coordinate in self.pieces:
            raise ValueError(f"Cell {coordinate} is already occupied by {self.pieces[coordinate]}")
        piece = Piece(owner, kind, coordinate)
        self.pieces[coordinate] = piece
        return piece

    def get_piece(self, coordinate) -> Optional[Piece]:
        return self.pieces.get(to_coordinate(coordinate))

    def is_empty(self, coordinate) -> bool:
        return to_coordinate(coordinate) not in self.pieces

    def is_empty_cell(self, coordinate) -> bool:
        """True for an on-board cell with nothing on it."""
        coordinate = to_coordinate(coordinate)
        return self.topology.is_on_board(coordinate) and coordinate not in self.pieces

    def remove_piece(self, coordinate) -> Optional[Piece]:
        """Remove and return the piece at a coordinate."""
        return self.pieces.pop(to_coordinate(coordinate), None)

    def move_piece(self, source, destination) -> Piece:
        """Relocate a piece to an empty cell and return it at its new coordinate."""
        source, destination = to_coordinate(source), self.topology.require(destination)
        if destination in self.pieces:
            raise ValueError(f"Cannot move onto occupied cell {destination}")
        piece = self.pieces.pop(source)
        moved = piece.moved_to(destination)
        self.pieces[destination] = moved
        logger.debug(f"Moved {piece.kind.value} {source}->{destination}")
        return moved

    def swap_pieces(self, first, second):
        """Exchange the pieces on two occupied cells."""
        first, second = to_coordinate(first), to_coordinate(second)
        a, b = self.pieces[first], self.pieces[second]
        self.pieces[first] = b.moved_to(first)
        self.pieces[second] = a.moved_to(second)
        logger.debug(f"Swapped {a.kind.value}@{first} with {b.kind.value}@{second}")

    def pieces_of(self, side: Side, kind: Optional[PieceKind] = None) -> List[Piece]:
        return [
            p for p in self.pieces.values()
            if p.owner == side and (kind is None or p.kind == kind)
        ]

    def combatant_count(self, side: Side) -> int:
        """Pieces that keep a side alive (everything except Portals)."""
        return sum(1 for p in self.pieces.values() if p.owner == side and p.kind in COMBATANT_KINDS)

    def switch_side(self):
        """Hand the move to the other side."""
        self.current_side = self.current_side.opponent

    def __str__(self) -> str:
        """Grid view; Circles upper case, Squares lower case, '+' for empty golden cells."""
        topo = self.topology
        result = []
        for y in range(topo.max_y, topo.min_y - 1, -1):
            row_str = f"{y:3d} "
            for x in range(topo.min_x, topo.max_x + 1):
                coord = Coordinate(x, y)
                if not topo.is_on_board(coord):
                    row_str += "  "
                    continue
                piece = self.pieces.get(coord)
                if piece is None:
                    row_str += ("+" if topo.is_golden(coord) else ".") + " "
                else:
                    symbol = piece.kind.symbol
                    row_str += (symbol if piece.owner == Side.CIRCLES else symbol.lower()) + " "
            result.append(row_str.rstrip())
        return "\n".join(result)


def initial_state(topology: Optional[BoardTopology] = None) -> BoardState:
    """Board with only the fixed pre-placed pieces, Squares to move."""
    state = BoardState(topology)
    for side, placements in PRE_PLACED_PIECES.items():
        for kind, coordinate in placements:
            state.place(side, kind, coordinate)
    return state
