import unittest

from amalgam_engine.exceptions import CoordinateError
from amalgam_engine.game.board import BoardState
from amalgam_engine.game.constants import Coordinate, PieceKind, Side
from amalgam_engine.game.moves import MoveGenerator
from amalgam_engine.game.topology import default_topology
from amalgam_engine.game.types import MoveKind

TOPOLOGY = default_topology()


def coords(*pairs):
    return {Coordinate(*p) for p in pairs}


class TestMoveGenerator(unittest.TestCase):
    def setUp(self):
        self.state = BoardState(TOPOLOGY, current_side=Side.CIRCLES)

    def _place(self, placements, side=Side.CIRCLES):
        """Helper to put pieces directly on the board."""
        for kind, coord in placements:
            self.state.place(side, kind, coord)

    def _mode(self, coord, kind):
        return MoveGenerator.destinations_by_mode(self.state, coord)[kind]

    def test_standard_step_all_directions(self):
        self._place([(PieceKind.RUBY, (1, 2))])
        self.assertEqual(
            self._mode((1, 2), MoveKind.STANDARD),
            coords((0, 1), (0, 2), (0, 3), (1, 1), (1, 3), (2, 1), (2, 2), (2, 3)),
        )

    def test_standard_skips_occupied(self):
        self._place([(PieceKind.RUBY, (1, 2)), (PieceKind.PEARL, (2, 2))])
        self._place([(PieceKind.JADE, (0, 2))], side=Side.SQUARES)
        standard = self._mode((1, 2), MoveKind.STANDARD)
        self.assertNotIn(Coordinate(2, 2), standard)
        self.assertNotIn(Coordinate(0, 2), standard)
        self.assertEqual(len(standard), 6)

    def test_portal_steps_only_to_golden(self):
        """A Portal at (1,1) only reaches its golden neighbours."""
        self._place([(PieceKind.PORTAL, (1, 1))])
        self.assertEqual(
            self._mode((1, 1), MoveKind.STANDARD),
            coords((0, 0), (0, 1), (0, 2), (1, 0), (2, 0), (2, 2)),
        )

    def test_phasing_through_portals(self):
        self._place([(PieceKind.RUBY, (1, 2))])
        self._place([(PieceKind.PORTAL, (2, 2)), (PieceKind.PORTAL, (3, 2))], side=Side.SQUARES)
        self.assertIn(Coordinate(4, 2), self._mode((1, 2), MoveKind.PHASING))

    def test_phasing_blocked_by_non_portal_run(self):
        self._place([(PieceKind.RUBY, (1, 2))])
        self._place([(PieceKind.PORTAL, (2, 2)), (PieceKind.PEARL, (3, 2))], side=Side.SQUARES)
        self._place([(PieceKind.AMBER, (1, 3))])
        phasing = self._mode((1, 2), MoveKind.PHASING)
        self.assertNotIn(Coordinate(4, 2), phasing)
        self.assertNotIn(Coordinate(1, 4), phasing)
        self.assertEqual(phasing, set())

    def test_portal_phases_through_anything_onto_golden(self):
        self._place([(PieceKind.PORTAL, (0, 0)), (PieceKind.RUBY, (1, 0)), (PieceKind.PEARL, (0, 1))])
        self._place([(PieceKind.JADE, (1, 1))], side=Side.SQUARES)
        self.assertEqual(self._mode((0, 0), MoveKind.PHASING), coords((2, 0), (0, 2), (2, 2)))

    def test_portal_phasing_needs_golden_landing(self):
        self._place([(PieceKind.PORTAL, (1, 1)), (PieceKind.RUBY, (2, 1))])
        self.assertNotIn(Coordinate(3, 1), self._mode((1, 1), MoveKind.PHASING))

    def test_phasing_stops_at_board_edge(self):
        self._place([(PieceKind.RUBY, (11, 0))])
        self._place([(PieceKind.PORTAL, (12, 0))], side=Side.SQUARES)
        self.assertEqual(self._mode((11, 0), MoveKind.PHASING), set())

    def test_nexus_around_adjacent_pair(self):
        """Ruby (0,0) and Pearl (1,0) next to the mover open up their neighbourhoods."""
        self._place([(PieceKind.RUBY, (0, 0)), (PieceKind.PEARL, (1, 0)), (PieceKind.JADE, (1, 1))])
        self.assertEqual(
            self._mode((1, 1), MoveKind.NEXUS),
            coords((-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (2, -1), (2, 0), (2, 1)),
        )

    def test_portal_nexus_keeps_golden_cells(self):
        """A Portal beside Ruby (1,2) and Pearl (2,2) may only land on golden cells."""
        self._place([(PieceKind.PORTAL, (1, 1)), (PieceKind.RUBY, (1, 2)), (PieceKind.PEARL, (2, 2))])
        nexus = self._mode((1, 1), MoveKind.NEXUS)
        self.assertEqual(nexus, coords((0, 1), (0, 2), (0, 3), (3, 3)))
        self.assertTrue(all(TOPOLOGY.is_golden(cell) for cell in nexus))
        self.assertNotIn(Coordinate(1, 3), nexus)
        self.assertNotIn(Coordinate(2, 3), nexus)

    def test_nexus_requires_adjacent_anchor(self):
        self._place([(PieceKind.RUBY, (0, 0)), (PieceKind.PEARL, (1, 0)), (PieceKind.JADE, (5, 5))])
        self.assertEqual(self._mode((5, 5), MoveKind.NEXUS), set())

    def test_nexus_needs_different_kinds(self):
        self._place([(PieceKind.RUBY, (0, 0)), (PieceKind.RUBY, (1, 0)), (PieceKind.JADE, (1, 1))])
        self.assertEqual(self._mode((1, 1), MoveKind.NEXUS), set())

    def test_nexus_ignores_enemy_pieces(self):
        self._place([(PieceKind.JADE, (1, 1))])
        self._place([(PieceKind.RUBY, (0, 0)), (PieceKind.PEARL, (1, 0))], side=Side.SQUARES)
        self.assertEqual(self._mode((1, 1), MoveKind.NEXUS), set())

    def test_nexus_partner_is_not_the_mover(self):
        """A Ruby next to a Pearl mover does not make the mover its own anchor partner."""
        self._place([(PieceKind.PEARL, (1, 1)), (PieceKind.RUBY, (0, 0))])
        self.assertEqual(self._mode((1, 1), MoveKind.NEXUS), set())

    def test_portal_rail_teleport(self):
        self._place([(PieceKind.PORTAL, (0, 12))])
        self.assertEqual(self.state.topology.rail_connections((0, 12)), coords((4, 10), (-4, 10)))
        self.assertEqual(MoveGenerator.legal_destinations(self.state, (0, 12)), coords((4, 10), (-4, 10)))

    def test_portal_rail_skips_occupied(self):
        self._place([(PieceKind.PORTAL, (0, 12))])
        self._place([(PieceKind.RUBY, (4, 10))], side=Side.SQUARES)
        self.assertEqual(self._mode((0, 12), MoveKind.PORTAL_RAIL), coords((-4, 10)))

    def test_portal_swap_with_friendly_golden_portals(self):
        self._place([(PieceKind.RUBY, (2, 0)), (PieceKind.PORTAL, (6, 6)), (PieceKind.PORTAL, (-6, 6))])
        self._place([(PieceKind.PORTAL, (6, -6))], side=Side.SQUARES)
        self.assertEqual(self._mode((2, 0), MoveKind.PORTAL_SWAP), coords((6, 6), (-6, 6)))

    def test_no_swap_from_standard_cell(self):
        self._place([(PieceKind.RUBY, (1, 2)), (PieceKind.PORTAL, (6, 6))])
        self.assertEqual(self._mode((1, 2), MoveKind.PORTAL_SWAP), set())

    def test_portal_cannot_swap(self):
        self._place([(PieceKind.PORTAL, (0, 0)), (PieceKind.PORTAL, (6, 6))])
        self.assertEqual(self._mode((0, 0), MoveKind.PORTAL_SWAP), set())

    def test_legal_destinations_is_union(self):
        self._place([(PieceKind.RUBY, (2, 0)), (PieceKind.PORTAL, (6, 6))])
        destinations = MoveGenerator.legal_destinations(self.state, (2, 0))
        self.assertIn(Coordinate(6, 6), destinations)
        self.assertIn(Coordinate(3, 0), destinations)
        self.assertEqual(len(destinations), 9)

    def test_empty_origin(self):
        self.assertEqual(MoveGenerator.legal_destinations(self.state, (0, 0)), set())

    def test_off_board_origin_raises(self):
        with self.assertRaises(CoordinateError):
            MoveGenerator.legal_destinations(self.state, (30, 30))

    def test_classify(self):
        self._place([(PieceKind.RUBY, (2, 0)), (PieceKind.PORTAL, (6, 6))])
        self.assertEqual(MoveGenerator.classify(self.state, (2, 0), (3, 0)), MoveKind.STANDARD)
        self.assertEqual(MoveGenerator.classify(self.state, (2, 0), (6, 6)), MoveKind.PORTAL_SWAP)
        self.assertIsNone(MoveGenerator.classify(self.state, (2, 0), (5, 0)))

    def test_phasing_lands_beyond_portal_run(self):
        """Portals at (1,0) and (2,0): a Ruby at (0,0) phases to (3,0) and nowhere inside the run."""
        self._place([(PieceKind.RUBY, (0, 0))])
        self._place([(PieceKind.PORTAL, (1, 0)), (PieceKind.PORTAL, (2, 0))], side=Side.SQUARES)
        self.assertEqual(self._mode((0, 0), MoveKind.PHASING), coords((3, 0)))
        destinations = MoveGenerator.legal_destinations(self.state, (0, 0))
        self.assertNotIn(Coordinate(1, 0), destinations)
        self.assertNotIn(Coordinate(2, 0), destinations)

    def test_standard_destinations_are_empty_cells(self):
        self._place([(PieceKind.RUBY, (0, 0)), (PieceKind.PORTAL, (1, 1)),
                     (PieceKind.VOID, (11, 0)), (PieceKind.PORTAL, (0, 12))])
        self._place([(PieceKind.JADE, (1, 0)), (PieceKind.PORTAL, (0, 1))], side=Side.SQUARES)
        for coord, piece in list(self.state.pieces.items()):
            for destination in self._mode(coord, MoveKind.STANDARD):
                self.assertTrue(self.state.is_empty_cell(destination))
                if piece.kind == PieceKind.PORTAL:
                    self.assertTrue(TOPOLOGY.is_golden(destination))

    def test_idempotent(self):
        self._place([(PieceKind.RUBY, (0, 0)), (PieceKind.PEARL, (1, 0)), (PieceKind.JADE, (1, 1)),
                     (PieceKind.PORTAL, (2, 2))])
        first = MoveGenerator.legal_destinations(self.state, (1, 1))
        second = MoveGenerator.legal_destinations(self.state, (1, 1))
        self.assertEqual(first, second)

    def test_queries_do_not_mutate(self):
        self._place([(PieceKind.RUBY, (0, 0)), (PieceKind.PEARL, (1, 0)), (PieceKind.JADE, (1, 1))])
        before = dict(self.state.pieces)
        MoveGenerator.legal_destinations(self.state, (1, 1))
        self.assertEqual(self.state.pieces, before)


if __name__ == '__main__':
    unittest.main()
