import unittest

from amalgam_engine.game.board import BoardState, initial_state
from amalgam_engine.game.constants import PieceKind, Side
from amalgam_engine.game.topology import default_topology
from amalgam_engine.game.types import VictoryType
from amalgam_engine.game.victory import WinEvaluator

TOPOLOGY = default_topology()


class TestWinEvaluator(unittest.TestCase):
    def setUp(self):
        self.state = BoardState(TOPOLOGY, current_side=Side.CIRCLES)
        self.state.place(Side.CIRCLES, PieceKind.RUBY, (3, 3))
        self.state.place(Side.SQUARES, PieceKind.RUBY, (-3, -3))

    def test_no_winner(self):
        result = WinEvaluator.evaluate(self.state)
        self.assertIsNone(result.winner)
        self.assertIsNone(result.victory_type)
        self.assertFalse(result.is_terminal)

    def test_initial_state_not_terminal(self):
        self.assertFalse(WinEvaluator.evaluate(initial_state(TOPOLOGY)).is_terminal)

    def test_circles_void_on_squares_anchor(self):
        self.state.place(Side.CIRCLES, PieceKind.VOID, (0, -6))
        result = WinEvaluator.evaluate(self.state)
        self.assertEqual(result.winner, Side.CIRCLES)
        self.assertEqual(result.victory_type, VictoryType.OBJECTIVE)

    def test_squares_void_on_circles_anchor(self):
        self.state.place(Side.SQUARES, PieceKind.VOID, (0, 6))
        result = WinEvaluator.evaluate(self.state)
        self.assertEqual(result.winner, Side.SQUARES)
        self.assertEqual(result.victory_type, VictoryType.OBJECTIVE)

    def test_void_on_own_anchor_is_not_a_win(self):
        self.state.place(Side.CIRCLES, PieceKind.VOID, (0, 6))
        self.assertIsNone(WinEvaluator.evaluate(self.state).winner)

    def test_other_piece_on_anchor_is_not_a_win(self):
        self.state.place(Side.CIRCLES, PieceKind.AMALGAM, (0, -6))
        self.assertIsNone(WinEvaluator.evaluate(self.state).winner)

    def test_elimination_leaves_only_portals(self):
        """A side reduced to Portals has lost."""
        self.state.remove_piece((-3, -3))
        self.state.place(Side.SQUARES, PieceKind.PORTAL, (6, -6))
        result = WinEvaluator.evaluate(self.state)
        self.assertEqual(result.winner, Side.CIRCLES)
        self.assertEqual(result.victory_type, VictoryType.ELIMINATION)

    def test_objective_takes_precedence(self):
        self.state.place(Side.CIRCLES, PieceKind.VOID, (0, -6))
        self.state.remove_piece((-3, -3))
        result = WinEvaluator.evaluate(self.state)
        self.assertEqual((result.winner, result.victory_type), (Side.CIRCLES, VictoryType.OBJECTIVE))

    def test_simultaneous_goes_to_side_to_move(self):
        self.state.place(Side.CIRCLES, PieceKind.VOID, (0, -6))
        self.state.place(Side.SQUARES, PieceKind.VOID, (0, 6))
        self.assertEqual(WinEvaluator.evaluate(self.state).winner, Side.CIRCLES)
        self.state.switch_side()
        self.assertEqual(WinEvaluator.evaluate(self.state).winner, Side.SQUARES)


if __name__ == '__main__':
    unittest.main()
