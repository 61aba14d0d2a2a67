"""Elemental abilities: formation detection, targeting and execution."""

from typing import Dict, List, Optional, Tuple
import logging

from ..config import RulesConfig, get_config
from .attacks import AttackResolver
from .board import BoardState
from .constants import (
    DIRECTIONS,
    Coordinate,
    PieceKind,
    Side,
    is_diagonal,
    to_coordinate,
    unit_direction,
)
from .types import AbilityKind, AbilityOption, ErrorKind, Formation, Move, Piece

# Setup logger
logger = logging.getLogger(__name__)

Direction = Tuple[int, int]

ABILITY_ELEMENTS: Dict[AbilityKind, PieceKind] = {
    AbilityKind.FIREBALL: PieceKind.RUBY,
    AbilityKind.TIDAL_WAVE: PieceKind.PEARL,
    AbilityKind.SAP: PieceKind.AMBER,
    AbilityKind.LAUNCH: PieceKind.JADE,
}


def _negate(direction: Direction) -> Direction:
    return -direction[0], -direction[1]


class AbilityResolver:
    """Finds formations and computes what their abilities would hit.

    Detection and targeting never touch the state; ``execute`` is the only
    method that mutates.
    """

    def __init__(self, config: Optional[RulesConfig] = None):
        self.config = config if config is not None else get_config()

    # ------------------------------------------------------------------
    # Formations
    # ------------------------------------------------------------------

    @staticmethod
    def is_member_kind(ability: AbilityKind, kind: PieceKind) -> bool:
        """The element's own kind, or an Amalgam standing in for it."""
        return kind == ABILITY_ELEMENTS[ability] or kind == PieceKind.AMALGAM

    @staticmethod
    def _pairs_with(ability: AbilityKind, first: Piece, second: Optional[Piece]) -> bool:
        if second is None or second.owner != first.owner:
            return False
        if not (AbilityResolver.is_member_kind(ability, first.kind)
                and AbilityResolver.is_member_kind(ability, second.kind)):
            return False
        # Two Amalgams are not a formation of any element
        element = ABILITY_ELEMENTS[ability]
        return first.kind == element or second.kind == element

    def _sap_partner(self, state: BoardState, piece: Piece, direction: Direction) -> Optional[Piece]:
        """Nearest friendly Amber/Amalgam along a line; anything may lie between."""
        current = piece.coordinate
        for _ in range(state.topology.max_extent):
            current = current.offset(direction)
            if not state.topology.is_on_board(current):
                return None
            occupant = state.get_piece(current)
            if (occupant is not None and occupant.owner == piece.owner
                    and self.is_member_kind(AbilityKind.SAP, occupant.kind)):
                return occupant
        return None

    def formations(self, state: BoardState, side: Side, ability: AbilityKind) -> List[Formation]:
        """Every formation of one ability that a side currently has."""
        found: List[Formation] = []
        for piece in state.pieces_of(side):
            if not self.is_member_kind(ability, piece.kind):
                continue
            for d in DIRECTIONS:
                if ability == AbilityKind.SAP:
                    partner = self._sap_partner(state, piece, d)
                else:
                    partner = state.get_piece(piece.coordinate.offset(d))
                if self._pairs_with(ability, piece, partner):
                    formation = Formation(ability, side, (piece.coordinate, partner.coordinate))
                    if formation not in found:
                        found.append(formation)
        return found

    def formation_for(self, state: BoardState, move: Move) -> Optional[Formation]:
        """The formation an ability request refers to, if it still exists."""
        piece = state.get_piece(move.from_coord)
        direction = move.direction
        if piece is None or direction not in DIRECTIONS:
            return None
        if move.ability_kind == AbilityKind.SAP:
            partner = self._sap_partner(state, piece, direction)
        else:
            partner = state.get_piece(piece.coordinate.offset(_negate(direction)))
        if not self._pairs_with(move.ability_kind, piece, partner):
            return None
        return Formation(move.ability_kind, piece.owner, (piece.coordinate, partner.coordinate))

    @staticmethod
    def firing_directions(formation: Formation) -> List[Tuple[Coordinate, Direction]]:
        """(endpoint, outward step) pairs. Sap has a single entry along its line."""
        first, second = formation.members
        step = unit_direction(first, second)
        if formation.ability == AbilityKind.SAP:
            return [(first, step)]
        return [(second, step), (first, _negate(step))]

    @staticmethod
    def _canonical(formation: Formation, endpoint, direction) -> Tuple[Coordinate, Direction]:
        """Sap may be named from either Amber; map it onto the stored entry."""
        endpoint = to_coordinate(endpoint)
        if formation.ability == AbilityKind.SAP:
            first, second = formation.members
            return first, unit_direction(first, second)
        return endpoint, tuple(direction)

    # ------------------------------------------------------------------
    # Amplification and targets
    # ------------------------------------------------------------------

    @staticmethod
    def _has_friendly_void(state: BoardState, side: Side, coord) -> bool:
        piece = state.get_piece(coord)
        return piece is not None and piece.owner == side and piece.kind == PieceKind.VOID

    def is_amplified(self, state: BoardState, formation: Formation,
                     endpoint: Coordinate, direction: Direction) -> bool:
        owner = formation.owner
        if formation.ability == AbilityKind.SAP:
            return any(self._has_friendly_void(state, owner, c) for c in self.sap_main_line(formation))
        if formation.ability == AbilityKind.LAUNCH:
            # The Void stands behind the opposite endpoint
            behind = formation.partner_of(endpoint).offset(_negate(direction))
            return self._has_friendly_void(state, owner, behind)
        return self._has_friendly_void(state, owner, endpoint.offset(direction))

    def fireball_targets(self, state: BoardState, formation: Formation,
                         endpoint: Coordinate, direction: Direction, amplified: bool) -> List[Coordinate]:
        """First enemy along the ray. A Portal stops a plain fireball dead."""
        reach = self.config.fireball_amplified_range if amplified else self.config.fireball_range
        for step in range(1, reach + 1):
            cell = endpoint.offset(direction, step)
            if not state.topology.is_on_board(cell):
                break
            occupant = state.get_piece(cell)
            if occupant is None:
                continue
            if occupant.kind.is_portal() and not amplified:
                logger.debug(f"Fireball from {endpoint} blocked by Portal at {cell}")
                return []
            if occupant.is_enemy_of(formation.owner):
                return [cell]
        return []

    def tidal_wave_area(self, state: BoardState, endpoint: Coordinate,
                        direction: Direction, amplified: bool) -> List[Coordinate]:
        """Cells flooded in front of an endpoint.

        Row i spans min(i, half_width) cells either side of its centre. On a
        diagonal the gaps between rows are filled by half-offset rows.
        """
        if amplified:
            depth, max_half = self.config.tidal_amplified_depth, self.config.tidal_amplified_half_width
        else:
            depth, max_half = self.config.tidal_depth, self.config.tidal_half_width
        dx, dy = direction
        perp = (-dy, dx)
        diagonal = is_diagonal(direction)

        area: List[Coordinate] = []
        for row in range(1, depth + 1):
            half = min(row, max_half)
            centre = endpoint.offset(direction, row)
            cells = [centre.offset(perp, k) for k in range(-half, half + 1)]
            if diagonal:
                base = centre.offset((-dx, 0))
                cells.extend(base.offset(perp, k) for k in range(-half, half))
            for cell in cells:
                if state.topology.is_on_board(cell) and cell not in area:
                    area.append(cell)
        return area

    def tidal_wave_targets(self, state: BoardState, formation: Formation,
                           endpoint: Coordinate, direction: Direction, amplified: bool) -> List[Coordinate]:
        targets = []
        for cell in self.tidal_wave_area(state, endpoint, direction, amplified):
            occupant = state.get_piece(cell)
            if occupant is None or not occupant.is_enemy_of(formation.owner):
                continue
            if occupant.kind.is_portal() and not amplified:
                continue
            targets.append(cell)
        return targets

    @staticmethod
    def sap_main_line(formation: Formation) -> List[Coordinate]:
        """Cells strictly between the two Ambers."""
        first, second = formation.members
        step = unit_direction(first, second)
        cells = []
        current = first.offset(step)
        while current != second:
            cells.append(current)
            current = current.offset(step)
        return cells

    @staticmethod
    def sap_parallel_lines(formation: Formation) -> List[List[Coordinate]]:
        """The lines one cell to each side of the main line."""
        first, second = formation.members
        dx, dy = unit_direction(first, second)
        if is_diagonal((dx, dy)):
            offsets = [(dx, 0), (0, dy)]
        else:
            offsets = [(-dy, dx), (dy, -dx)]
        main = AbilityResolver.sap_main_line(formation)
        return [[cell.offset(offset) for cell in main] for offset in offsets]

    def sap_targets(self, state: BoardState, formation: Formation, amplified: bool) -> List[Coordinate]:
        lines = [self.sap_main_line(formation)]
        if amplified:
            lines.extend(self.sap_parallel_lines(formation))
        targets = []
        for line in lines:
            for cell in line:
                occupant = state.get_piece(cell)
                if occupant is None or not occupant.is_enemy_of(formation.owner):
                    continue
                if occupant.kind.is_portal() and not amplified:
                    continue
                if cell not in targets:
                    targets.append(cell)
        return targets

    @staticmethod
    def can_land(thrown: Piece, occupant: Optional[Piece]) -> bool:
        """Landing rules for a thrown piece."""
        if thrown.kind.is_portal():
            return (occupant is not None and occupant.is_enemy_of(thrown.owner)
                    and occupant.kind.is_portal())
        if occupant is None:
            return True
        if not occupant.is_enemy_of(thrown.owner):
            return False
        if occupant.kind.is_portal():
            return thrown.kind == PieceKind.VOID
        return True

    def launch_landings(self, state: BoardState, formation: Formation,
                        endpoint: Coordinate, direction: Direction, amplified: bool) -> List[Coordinate]:
        """Cells the piece just beyond the endpoint could be thrown to."""
        thrown = state.get_piece(endpoint.offset(direction))
        if thrown is None:
            return []
        reach = self.config.launch_amplified_range if amplified else self.config.launch_range
        landings = []
        for step in range(1, reach + 1):
            cell = thrown.coordinate.offset(direction, step)
            if not state.topology.is_on_board(cell):
                break
            if self.can_land(thrown, state.get_piece(cell)):
                landings.append(cell)
        return landings

    def targets_for(self, state: BoardState, formation: Formation,
                    endpoint: Coordinate, direction: Direction) -> Tuple[bool, List[Coordinate]]:
        """(amplified, cells hit) for one firing direction; Launch gives landing cells."""
        endpoint, direction = self._canonical(formation, endpoint, direction)
        amplified = self.is_amplified(state, formation, endpoint, direction)
        ability = formation.ability
        if ability == AbilityKind.FIREBALL:
            cells = self.fireball_targets(state, formation, endpoint, direction, amplified)
        elif ability == AbilityKind.TIDAL_WAVE:
            cells = self.tidal_wave_targets(state, formation, endpoint, direction, amplified)
        elif ability == AbilityKind.SAP:
            cells = self.sap_targets(state, formation, amplified)
        else:
            cells = self.launch_landings(state, formation, endpoint, direction, amplified)
        return amplified, cells

    # ------------------------------------------------------------------
    # Queries used by the engine
    # ------------------------------------------------------------------

    def option_for(self, state: BoardState, formation: Formation) -> Optional[AbilityOption]:
        """Every direction of a formation recomputed from scratch; None when none is usable."""
        directions, amplified, targets = [], [], []
        for endpoint, direction in self.firing_directions(formation):
            is_amped, cells = self.targets_for(state, formation, endpoint, direction)
            if cells:
                directions.append((endpoint, direction))
                amplified.append(is_amped)
                targets.append(tuple(cells))
        if not directions:
            return None
        return AbilityOption(
            kind=formation.ability,
            formation=formation,
            directions=tuple(directions),
            amplified=tuple(amplified),
            targets=tuple(targets),
        )

    def available_abilities(self, state: BoardState, side: Optional[Side] = None,
                            moved_coord=None) -> List[AbilityOption]:
        """Abilities a side can trigger now.

        Args:
            state: board to inspect
            side: defaults to the side to move
            moved_coord: when given, only formations containing this cell
        """
        side = side if side is not None else state.current_side
        options = []
        for ability in AbilityKind:
            for formation in self.formations(state, side, ability):
                if moved_coord is not None and not formation.contains(moved_coord):
                    continue
                option = self.option_for(state, formation)
                if option is not None:
                    options.append(option)
        logger.debug(f"{side.value} has {len(options)} ability options")
        return options

    def moved_piece_filter(self, state: BoardState, side: Side) -> Optional[Coordinate]:
        """Cell every formation must include, or None when any formation may act.

        Only set with ``require_moved_piece_in_formation`` and when the last
        recorded move was a movement by ``side``.
        """
        if not self.config.require_moved_piece_in_formation or not state.move_history:
            return None
        last = state.move_history[-1]
        if last.side != side or not last.kind.is_movement:
            return None
        return last.to_coord

    def check(self, state: BoardState, move: Move) -> Optional[ErrorKind]:
        """Why an ability request cannot run now, or None if it can."""
        formation = self.formation_for(state, move)
        if formation is None:
            return ErrorKind.FORMATION_NOT_FOUND
        moved_coord = self.moved_piece_filter(state, move.side)
        if moved_coord is not None and not formation.contains(moved_coord):
            logger.debug(f"{formation.ability.value} formation does not include moved piece at {moved_coord}")
            return ErrorKind.FORMATION_NOT_FOUND
        _, cells = self.targets_for(state, formation, move.from_coord, move.direction)
        if not cells:
            return ErrorKind.DIRECTION_UNAVAILABLE
        if move.ability_kind == AbilityKind.LAUNCH and move.to_coord not in cells:
            thrown = state.get_piece(move.from_coord.offset(move.direction))
            occupant = state.get_piece(move.to_coord)
            if occupant is not None and not occupant.is_enemy_of(thrown.owner):
                return ErrorKind.TARGET_OCCUPIED_BY_OWN_SIDE
            return ErrorKind.ILLEGAL_DESTINATION
        return None

    def execute(self, state: BoardState, move: Move) -> List[Piece]:
        """Carry out a checked ability request on state and return what was removed."""
        formation = self.formation_for(state, move)
        if formation is None:
            raise ValueError(f"No formation for {move}")
        _, cells = self.targets_for(state, formation, move.from_coord, move.direction)

        removed: List[Piece] = []
        if move.ability_kind != AbilityKind.LAUNCH:
            for cell in cells:
                removed.append(state.remove_piece(cell))
            logger.debug(f"{move.ability_kind.value} removed {len(removed)} pieces")
            return removed

        thrown_from = move.from_coord.offset(move.direction)
        displaced = state.remove_piece(move.to_coord)
        if displaced is not None:
            removed.append(displaced)
        state.move_piece(thrown_from, move.to_coord)
        # The thrown piece fights where it lands
        removed.extend(AttackResolver.resolve(state, move.to_coord))
        logger.debug(f"Launched piece {thrown_from}->{move.to_coord}, removed {len(removed)}")
        return removed
