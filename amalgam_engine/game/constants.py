"""Constants for Amalgam game logic."""

from enum import Enum
from typing import List, NamedTuple, Tuple
import logging

# Setup logger
logger = logging.getLogger(__name__)


class Side(Enum):
    CIRCLES = "circles"
    SQUARES = "squares"

    @property
    def opponent(self) -> 'Side':
        """Get the opposing side."""
        return Side.SQUARES if self == Side.CIRCLES else Side.CIRCLES


class PieceKind(Enum):
    RUBY = "ruby"
    PEARL = "pearl"
    AMBER = "amber"
    JADE = "jade"
    AMALGAM = "amalgam"
    VOID = "void"
    PORTAL = "portal"

    def is_elemental(self) -> bool:
        return self in ELEMENTAL_KINDS

    def is_portal(self) -> bool:
        return self == PieceKind.PORTAL

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


ELEMENTAL_KINDS = frozenset({
    PieceKind.RUBY,
    PieceKind.PEARL,
    PieceKind.AMBER,
    PieceKind.JADE,
    PieceKind.AMALGAM,
})

# Pieces that count toward elimination; Portals never do
COMBATANT_KINDS = ELEMENTAL_KINDS | {PieceKind.VOID}

_SYMBOLS = {
    PieceKind.RUBY: "R",
    PieceKind.PEARL: "P",
    PieceKind.AMBER: "A",
    PieceKind.JADE: "J",
    PieceKind.AMALGAM: "M",
    PieceKind.VOID: "V",
    PieceKind.PORTAL: "O",
}


class Coordinate(NamedTuple):
    """Integer lattice point. Compares equal to a plain (x, y) tuple."""
    x: int
    y: int

    def __str__(self) -> str:
        return f"{self.x},{self.y}"

    def offset(self, direction: Tuple[int, int], steps: int = 1) -> 'Coordinate':
        return Coordinate(self.x + direction[0] * steps, self.y + direction[1] * steps)

    @staticmethod
    def from_string(coord_str: str) -> 'Coordinate':
        """Create a Coordinate from a string like '3,-4'."""
        x_str, y_str = coord_str.split(",")
        return Coordinate(int(x_str), int(y_str))


def to_coordinate(value) -> Coordinate:
    """Accept a Coordinate, an (x, y) pair, an {'x','y'} mapping or an 'x,y' string."""
    if isinstance(value, Coordinate):
        return value
    if isinstance(value, str):
        return Coordinate.from_string(value)
    if isinstance(value, dict):
        return Coordinate(int(value["x"]), int(value["y"]))
    x, y = value
    return Coordinate(int(x), int(y))


# 8-neighbourhood: orthogonals first, then diagonals
ORTHOGONAL_DIRECTIONS: List[Tuple[int, int]] = [
    (1, 0),
    (-1, 0),
    (0, 1),
    (0, -1),
]
DIAGONAL_DIRECTIONS: List[Tuple[int, int]] = [
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
]
DIRECTIONS: List[Tuple[int, int]] = ORTHOGONAL_DIRECTIONS + DIAGONAL_DIRECTIONS


def is_diagonal(direction: Tuple[int, int]) -> bool:
    return direction[0] != 0 and direction[1] != 0


def unit_direction(origin: Tuple[int, int], target: Tuple[int, int]):
    """Unit step from origin toward target, or None if they are not on a common 8-line."""
    dx, dy = target[0] - origin[0], target[1] - origin[1]
    if dx == 0 and dy == 0:
        return None
    if dx != 0 and dy != 0 and abs(dx) != abs(dy):
        return None
    step_x = (dx > 0) - (dx < 0)
    step_y = (dy > 0) - (dy < 0)
    return step_x, step_y


# Board geometry
BOARD_RADIUS = 12
HOME_ANCHORS = {
    Side.CIRCLES: Coordinate(0, 6),
    Side.SQUARES: Coordinate(0, -6),
}

# Fixed pieces placed before any allocation
PRE_PLACED_PIECES = {
    Side.CIRCLES: [
        (PieceKind.VOID, Coordinate(0, 12)),
        (PieceKind.AMALGAM, Coordinate(0, 6)),
        (PieceKind.PORTAL, Coordinate(6, 6)),
        (PieceKind.PORTAL, Coordinate(-6, 6)),
    ],
    Side.SQUARES: [
        (PieceKind.VOID, Coordinate(0, -12)),
        (PieceKind.AMALGAM, Coordinate(0, -6)),
        (PieceKind.PORTAL, Coordinate(6, -6)),
        (PieceKind.PORTAL, Coordinate(-6, -6)),
    ],
}

# Side that opens the gameplay phase
FIRST_SIDE = Side.SQUARES
