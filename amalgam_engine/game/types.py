"""Basic type definitions for Amalgam."""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Tuple, TYPE_CHECKING

from .constants import Coordinate, PieceKind, Side, to_coordinate

if TYPE_CHECKING:
    from .board import BoardState


class MoveKind(Enum):
    STANDARD = "STANDARD"
    PHASING = "PHASING"
    NEXUS = "NEXUS"
    PORTAL_RAIL = "PORTAL_RAIL"
    PORTAL_SWAP = "PORTAL_SWAP"
    ABILITY = "ABILITY"

    @property
    def is_movement(self) -> bool:
        return self != MoveKind.ABILITY


class AbilityKind(Enum):
    FIREBALL = "FIREBALL"
    TIDAL_WAVE = "TIDAL_WAVE"
    SAP = "SAP"
    LAUNCH = "LAUNCH"


class ErrorKind(Enum):
    ILLEGAL_DESTINATION = "IllegalDestination"
    NOT_PLAYERS_TURN = "NotPlayersTurn"
    WRONG_PIECE_OWNER = "WrongPieceOwner"
    FORMATION_NOT_FOUND = "FormationNotFound"
    DIRECTION_UNAVAILABLE = "DirectionUnavailable"
    TARGET_OCCUPIED_BY_OWN_SIDE = "TargetOccupiedByOwnSide"
    GAME_OVER = "GameOver"


class VictoryType(Enum):
    OBJECTIVE = "objective"
    ELIMINATION = "elimination"


@dataclass(frozen=True)
class Piece:
    """A piece on the board."""
    owner: Side
    kind: PieceKind
    coordinate: Coordinate

    def __post_init__(self):
        object.__setattr__(self, 'coordinate', to_coordinate(self.coordinate))

    def moved_to(self, coordinate) -> 'Piece':
        return Piece(self.owner, self.kind, to_coordinate(coordinate))

    def is_enemy_of(self, side: Side) -> bool:
        return self.owner != side

    def __str__(self) -> str:
        return f"{self.owner.value} {self.kind.value} at {self.coordinate}"


@dataclass(frozen=True)
class Move:
    """A move request from a collaborator.

    For ability moves ``from_coord`` is the formation endpoint the ability
    fires from and ``direction`` the outward unit step. Sap uses the step
    toward the partner Amber; Launch also names its landing cell in
    ``to_coord``.
    """
    kind: MoveKind
    side: Side
    from_coord: Coordinate
    to_coord: Optional[Coordinate] = None
    ability_kind: Optional[AbilityKind] = None
    direction: Optional[Tuple[int, int]] = None

    def __post_init__(self):
        """Normalise coordinates and check the fields each kind needs."""
        object.__setattr__(self, 'from_coord', to_coordinate(self.from_coord))
        if self.to_coord is not None:
            object.__setattr__(self, 'to_coord', to_coordinate(self.to_coord))
        if self.direction is not None:
            object.__setattr__(self, 'direction', tuple(self.direction))

        if self.kind.is_movement:
            if self.to_coord is None:
                raise ValueError(f"{self.kind.value} move requires a destination")
        else:
            if self.ability_kind is None or self.direction is None:
                raise ValueError("Ability move requires ability_kind and direction")
            if self.ability_kind == AbilityKind.LAUNCH and self.to_coord is None:
                raise ValueError("Launch requires a landing coordinate")

    def __str__(self) -> str:
        if self.kind == MoveKind.ABILITY:
            text = f"{self.side.name} {self.ability_kind.value} from {self.from_coord} toward {self.direction}"
            if self.to_coord is not None:
                text += f" landing {self.to_coord}"
            return text
        return f"{self.side.name} {self.kind.value} {self.from_coord}->{self.to_coord}"


@dataclass(frozen=True)
class Formation:
    """Two same-owner pieces that can trigger an ability together."""
    ability: AbilityKind
    owner: Side
    members: Tuple[Coordinate, Coordinate]

    def __post_init__(self):
        members = tuple(sorted(to_coordinate(m) for m in self.members))
        object.__setattr__(self, 'members', members)

    def contains(self, coordinate) -> bool:
        return to_coordinate(coordinate) in self.members

    def partner_of(self, coordinate) -> Coordinate:
        first, second = self.members
        return second if to_coordinate(coordinate) == first else first


@dataclass(frozen=True)
class AbilityOption:
    """An available ability: the directions it can fire in, and per direction
    whether it is amplified and what it would hit (or where it could land)."""
    kind: AbilityKind
    formation: Formation
    directions: Tuple[Tuple[Coordinate, Tuple[int, int]], ...]
    amplified: Tuple[bool, ...]
    targets: Tuple[Tuple[Coordinate, ...], ...] = ()

    def has_direction(self, endpoint, direction) -> bool:
        return (to_coordinate(endpoint), tuple(direction)) in self.directions


@dataclass(frozen=True)
class LegalityResult:
    ok: bool
    reason: Optional[ErrorKind] = None

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class WinResult:
    winner: Optional[Side] = None
    victory_type: Optional[VictoryType] = None

    @property
    def is_terminal(self) -> bool:
        return self.winner is not None


@dataclass
class MoveResult:
    """Outcome of applying a move."""
    ok: bool
    next_state: Optional['BoardState'] = None
    reason: Optional[ErrorKind] = None
    captured: Tuple[Piece, ...] = ()
    abilities: Tuple[AbilityOption, ...] = ()
    win: WinResult = field(default_factory=WinResult)
