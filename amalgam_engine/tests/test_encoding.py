import unittest

import numpy as np

from amalgam_engine.game.board import BoardState, initial_state
from amalgam_engine.game.constants import Coordinate, PieceKind, Side
from amalgam_engine.game.moves import MoveGenerator
from amalgam_engine.game.topology import default_topology
from amalgam_engine.utils.encoding import StateEncoder

TOPOLOGY = default_topology()


class TestStateEncoder(unittest.TestCase):
    def setUp(self):
        self.encoder = StateEncoder(TOPOLOGY)
        self.state = initial_state(TOPOLOGY)

    def test_shape(self):
        tensor = self.encoder.encode_state(self.state)
        self.assertEqual(tensor.shape, (17, 25, 25))
        self.assertEqual(tensor.dtype, np.float32)
        self.assertEqual(self.encoder.num_positions, len(TOPOLOGY.cells))

    def test_piece_planes(self):
        tensor = self.encoder.encode_state(self.state)
        # One mark per piece across the piece channels
        self.assertEqual(int(tensor[:14].sum()), len(self.state.pieces))

        channel = self.encoder.piece_channels[(Side.SQUARES, PieceKind.VOID)]
        row, col = self.encoder.grid_position((0, -12))
        self.assertEqual((row, col), (24, 12))
        self.assertEqual(tensor[channel, row, col], 1.0)

    def test_static_planes(self):
        tensor = self.encoder.encode_state(self.state)
        self.assertEqual(int(tensor[self.encoder.board_channel].sum()), len(TOPOLOGY.cells))
        self.assertEqual(int(tensor[self.encoder.golden_channel].sum()), len(TOPOLOGY.golden_cells))
        # Squares to move
        self.assertTrue(np.all(tensor[self.encoder.side_channel] == -1.0))

    def test_decode_restores_pieces(self):
        self.state.place(Side.CIRCLES, PieceKind.RUBY, (3, -2))
        decoded = self.encoder.decode_state(self.encoder.encode_state(self.state))
        self.assertEqual(decoded.pieces, self.state.pieces)
        self.assertEqual(decoded.current_side, Side.SQUARES)

    def test_decode_rejects_wrong_shape(self):
        with self.assertRaises(ValueError):
            self.encoder.decode_state(np.zeros((3, 5, 5), dtype=np.float32))

    def test_destination_mask(self):
        mask = self.encoder.destination_mask(self.state, (0, -12))
        destinations = MoveGenerator.legal_destinations(self.state, (0, -12))
        self.assertEqual(int(mask.sum()), len(destinations))
        for coord in destinations:
            self.assertEqual(mask[self.encoder.coordinate_to_index[coord]], 1.0)

    def test_decode_destination(self):
        probabilities = np.zeros(self.encoder.num_positions, dtype=np.float32)
        probabilities[self.encoder.coordinate_to_index[Coordinate(5, 5)]] = 0.9
        probabilities[self.encoder.coordinate_to_index[Coordinate(1, -11)]] = 0.1
        self.assertEqual(self.encoder.decode_destination(probabilities, self.state, (0, -12)),
                         Coordinate(1, -11))

        lone = BoardState(TOPOLOGY)
        lone.place(Side.SQUARES, PieceKind.RUBY, (0, 0))
        self.assertIsNone(self.encoder.decode_destination(np.zeros_like(probabilities), lone, (0, 0)))


if __name__ == '__main__':
    unittest.main()
