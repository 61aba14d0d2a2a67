import numpy as np
from typing import Dict, List, Optional, Tuple
import logging

from ..game.board import BoardState
from ..game.constants import Coordinate, PieceKind, Side, to_coordinate
from ..game.moves import MoveGenerator
from ..game.topology import BoardTopology, default_topology

logger = logging.getLogger(__name__)

SIDE_ORDER = (Side.CIRCLES, Side.SQUARES)
KIND_ORDER = tuple(PieceKind)


class StateEncoder:
    """
    Encodes Amalgam board states as dense tensors for search and learning code.

    Layout is (channels, rows, cols) with row 0 at the top of the board
    (highest y). Channels:
        0-13: one plane per (side, kind), Circles first
        14: cells that exist on the board
        15: golden cells
        16: side to move (1.0 Circles, -1.0 Squares)
    """

    def __init__(self, topology: Optional[BoardTopology] = None):
        self.topology = topology if topology is not None else default_topology()
        self.height = self.topology.max_y - self.topology.min_y + 1
        self.width = self.topology.max_x - self.topology.min_x + 1

        self.piece_channels: Dict[Tuple[Side, PieceKind], int] = {}
        for side in SIDE_ORDER:
            for kind in KIND_ORDER:
                self.piece_channels[(side, kind)] = len(self.piece_channels)
        self.board_channel = len(self.piece_channels)
        self.golden_channel = self.board_channel + 1
        self.side_channel = self.golden_channel + 1
        self.num_channels = self.side_channel + 1

        # Index over the sorted cell list, for flat policy vectors
        self.index_to_coordinate: List[Coordinate] = sorted(self.topology.cells)
        self.coordinate_to_index: Dict[Coordinate, int] = {
            coord: i for i, coord in enumerate(self.index_to_coordinate)
        }
        self.num_positions = len(self.index_to_coordinate)

        self._static_planes = np.zeros((2, self.height, self.width), dtype=np.float32)
        for coord in self.topology.cells:
            row, col = self.grid_position(coord)
            self._static_planes[0, row, col] = 1.0
            if self.topology.is_golden(coord):
                self._static_planes[1, row, col] = 1.0

    def grid_position(self, coord) -> Tuple[int, int]:
        """(row, col) of a coordinate in the tensor."""
        coord = to_coordinate(coord)
        return self.topology.max_y - coord.y, coord.x - self.topology.min_x

    def grid_to_coordinate(self, row: int, col: int) -> Coordinate:
        return Coordinate(col + self.topology.min_x, self.topology.max_y - row)

    def encode_state(self, state: BoardState) -> np.ndarray:
        """Encode a board state into a (channels, rows, cols) float32 tensor."""
        tensor = np.zeros((self.num_channels, self.height, self.width), dtype=np.float32)
        for coord, piece in state.pieces.items():
            row, col = self.grid_position(coord)
            tensor[self.piece_channels[(piece.owner, piece.kind)], row, col] = 1.0

        tensor[self.board_channel:self.golden_channel + 1] = self._static_planes
        tensor[self.side_channel] = 1.0 if state.current_side == Side.CIRCLES else -1.0
        return tensor

    def decode_state(self, tensor: np.ndarray) -> BoardState:
        """Rebuild a board state from an encoded tensor."""
        if tensor.shape != (self.num_channels, self.height, self.width):
            raise ValueError(f"Expected shape {(self.num_channels, self.height, self.width)}, got {tensor.shape}")

        side = Side.CIRCLES if tensor[self.side_channel].mean() >= 0 else Side.SQUARES
        state = BoardState(self.topology, side)
        for (owner, kind), channel in self.piece_channels.items():
            rows, cols = np.nonzero(tensor[channel] > 0.5)
            for row, col in zip(rows, cols):
                state.place(owner, kind, self.grid_to_coordinate(int(row), int(col)))
        return state

    def destination_mask(self, state: BoardState, coord) -> np.ndarray:
        """Flat 0/1 vector over ``index_to_coordinate`` marking legal destinations of one piece."""
        mask = np.zeros(self.num_positions, dtype=np.float32)
        for destination in MoveGenerator.legal_destinations(state, coord):
            mask[self.coordinate_to_index[destination]] = 1.0
        return mask

    def decode_destination(self, probabilities: np.ndarray, state: BoardState, coord) -> Optional[Coordinate]:
        """Most probable legal destination, or None if the piece cannot move."""
        masked = probabilities * self.destination_mask(state, coord)
        if not masked.any():
            logger.debug(f"No legal destinations for {coord}")
            return None
        return self.index_to_coordinate[int(np.argmax(masked))]
