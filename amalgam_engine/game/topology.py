"""Board topology: which cells exist, which are golden, and how the golden rails connect."""

import json
import logging
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple, Union

from .constants import (
    BOARD_RADIUS,
    DIRECTIONS,
    HOME_ANCHORS,
    Coordinate,
    Side,
    to_coordinate,
)
from ..exceptions import CoordinateError, TopologyError

# Setup logger
logger = logging.getLogger(__name__)


class BoardTopology:
    """Immutable description of the lattice.

    Args:
        cells: every coordinate that exists on the board
        golden: coordinates that are golden intersections
        rails: golden-line connections as (a, b) pairs; stored symmetrically
        home_anchors: per-side home cell used by objective victory
    """

    def __init__(self,
                 cells: Iterable,
                 golden: Iterable = (),
                 rails: Iterable[Tuple] = (),
                 home_anchors: Optional[Mapping[Side, Tuple[int, int]]] = None):
        self._cells: FrozenSet[Coordinate] = frozenset(to_coordinate(c) for c in cells)
        if not self._cells:
            raise TopologyError("Topology needs at least one cell")

        golden_cells = {to_coordinate(c) for c in golden}
        adjacency: Dict[Coordinate, Set[Coordinate]] = {}
        for a, b in rails:
            a, b = to_coordinate(a), to_coordinate(b)
            if a == b:
                continue
            for end in (a, b):
                if end not in self._cells:
                    raise TopologyError(f"Golden line endpoint {end} is not on the board")
            # A rail endpoint is golden by definition
            golden_cells.update((a, b))
            adjacency.setdefault(a, set()).add(b)
            adjacency.setdefault(b, set()).add(a)

        stray = golden_cells - self._cells
        if stray:
            raise TopologyError(f"Golden cells off the board: {sorted(stray)}")

        self._golden: FrozenSet[Coordinate] = frozenset(golden_cells)
        self._rails: Dict[Coordinate, FrozenSet[Coordinate]] = {
            coord: frozenset(linked) for coord, linked in adjacency.items()
        }

        anchors = home_anchors if home_anchors is not None else HOME_ANCHORS
        self._home_anchors: Dict[Side, Coordinate] = {
            side: to_coordinate(coord) for side, coord in anchors.items()
        }
        for side, anchor in self._home_anchors.items():
            if anchor not in self._cells:
                raise TopologyError(f"Home anchor for {side.value} at {anchor} is not on the board")

        xs = [c.x for c in self._cells]
        ys = [c.y for c in self._cells]
        self.min_x, self.max_x = min(xs), max(xs)
        self.min_y, self.max_y = min(ys), max(ys)
        # Longest straight walk that can stay on the board
        self.max_extent = max(self.max_x - self.min_x, self.max_y - self.min_y) + 1

        logger.debug(f"Topology built: {len(self._cells)} cells, {len(self._golden)} golden, "
                     f"{sum(len(v) for v in self._rails.values()) // 2} rails")

    @property
    def cells(self) -> FrozenSet[Coordinate]:
        return self._cells

    @property
    def golden_cells(self) -> FrozenSet[Coordinate]:
        return self._golden

    @property
    def home_anchors(self) -> Dict[Side, Coordinate]:
        return dict(self._home_anchors)

    def home_anchor(self, side: Side) -> Coordinate:
        return self._home_anchors[side]

    def is_on_board(self, coord) -> bool:
        return to_coordinate(coord) in self._cells

    def is_golden(self, coord) -> bool:
        return to_coordinate(coord) in self._golden

    def require(self, coord) -> Coordinate:
        """Return coord as a Coordinate, raising CoordinateError if it is off the board."""
        coord = to_coordinate(coord)
        if coord not in self._cells:
            raise CoordinateError(coord)
        return coord

    def neighbors(self, coord) -> List[Coordinate]:
        """On-board 8-neighbours of a cell."""
        coord = to_coordinate(coord)
        return [n for n in (coord.offset(d) for d in DIRECTIONS) if n in self._cells]

    def rail_connections(self, coord) -> FrozenSet[Coordinate]:
        """Golden cells directly connected to coord by a golden line."""
        return self._rails.get(to_coordinate(coord), frozenset())

    def __contains__(self, coord) -> bool:
        return self.is_on_board(coord)

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"BoardTopology(cells={len(self._cells)}, golden={len(self._golden)})"


def _line(start: Tuple[int, int], end: Tuple[int, int]) -> List[Coordinate]:
    """Every lattice point from start to end along an 8-direction."""
    dx = (end[0] > start[0]) - (end[0] < start[0])
    dy = (end[1] > start[1]) - (end[1] < start[1])
    points = [Coordinate(*start)]
    while points[-1] != end:
        points.append(points[-1].offset((dx, dy)))
    return points


def _mirrored(points: List[Tuple[int, int]]) -> List[List[Coordinate]]:
    """A segment and its reflections across both axes."""
    variants = []
    for sx, sy in ((1, 1), (-1, 1), (1, -1), (-1, -1)):
        variant = [Coordinate(x * sx, y * sy) for x, y in points]
        if variant not in variants:
            variants.append(variant)
    return variants


def default_segments() -> List[List[Coordinate]]:
    """Golden line segments of the standard board; consecutive points are connected."""
    segments: List[List[Coordinate]] = []

    # Large square perimeter
    segments.append(_line((-6, 6), (6, 6)))
    segments.append(_line((-6, -6), (6, -6)))
    segments.append(_line((-6, -6), (-6, 6)))
    segments.append(_line((6, -6), (6, 6)))

    # Inner rotated square
    segments.append(_line((0, 6), (6, 0)))
    segments.append(_line((0, 6), (-6, 0)))
    segments.append(_line((0, -6), (6, 0)))
    segments.append(_line((0, -6), (-6, 0)))

    # Centre cross and X
    segments.append(_line((-6, 0), (6, 0)))
    segments.append(_line((0, -6), (0, 6)))
    segments.append(_line((-6, -6), (6, 6)))
    segments.append(_line((-6, 6), (6, -6)))

    # Triangular extensions out of each home anchor toward the terminal
    segments.extend(_mirrored(_line((0, 6), (4, 10))))

    # Outer terminals
    segments.extend(_mirrored([(4, 10), (0, 12)]))

    return segments


def default_topology(radius: int = BOARD_RADIUS) -> BoardTopology:
    """The standard board: a disc of lattice points with the golden network."""
    cells = [
        Coordinate(x, y)
        for x in range(-radius, radius + 1)
        for y in range(-radius, radius + 1)
        if x * x + y * y <= radius * radius
    ]
    rails = []
    for segment in default_segments():
        rails.extend(zip(segment, segment[1:]))
    return BoardTopology(cells, rails=rails)


def _parse_point(value) -> Coordinate:
    try:
        return to_coordinate(value)
    except (KeyError, TypeError, ValueError) as e:
        raise TopologyError(f"Unreadable coordinate {value!r}: {e}") from e


def topology_from_dict(data: Mapping) -> BoardTopology:
    """Build a topology from board-data in the published JSON layout.

    Recognised keys: ``board_positions.coordinates``, ``golden_coordinates``,
    ``standard_coordinates``, ``golden_lines.golden_lines_dict``,
    ``golden_lines.connections`` and ``home_anchors``. Missing cell data
    falls back to the standard disc.
    """
    cells: Set[Coordinate] = set()
    positions = data.get("board_positions") or {}
    for point in positions.get("coordinates", []):
        cells.add(_parse_point(point))

    golden = {_parse_point(p) for p in data.get("golden_coordinates", [])}
    standard = {_parse_point(p) for p in data.get("standard_coordinates", [])}
    cells |= golden | standard

    rails = []
    lines = data.get("golden_lines") or {}
    for origin, linked in (lines.get("golden_lines_dict") or {}).items():
        start = _parse_point(origin)
        for point in linked:
            rails.append((start, _parse_point(point)))
    for connection in lines.get("connections") or []:
        rails.append((_parse_point(connection["from"]), _parse_point(connection["to"])))

    if not cells:
        logger.debug("Board data has no cell list, using the standard disc")
        cells = set(default_topology().cells)

    anchors = None
    if "home_anchors" in data:
        try:
            anchors = {Side(name): _parse_point(point) for name, point in data["home_anchors"].items()}
        except ValueError as e:
            raise TopologyError(f"Bad home_anchors entry: {e}") from e

    return BoardTopology(cells, golden=golden, rails=rails, home_anchors=anchors)


def load_topology(source: Union[str, Path, Mapping]) -> BoardTopology:
    """Load a topology from a board-data JSON file or an already parsed dict."""
    if isinstance(source, Mapping):
        return topology_from_dict(source)
    path = Path(source)
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        raise TopologyError(f"Failed to read board data {path}: {e}") from e
    logger.debug(f"Loaded board data from {path}")
    return topology_from_dict(data)
