import unittest

from PIL import Image

from puzzle_engine import Piece, PieceRegistry
from puzzle_engine.completion import COMPLETION_TOLERANCE, evaluate_completion


def make_piece(piece_id: str, original, current=None, size=(40, 30)) -> Piece:
    return Piece(
        id=piece_id,
        visual=Image.new("RGB", size),
        original_position=original,
        current_position=current if current is not None else original,
    )


class PieceRegistryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = PieceRegistry()
        self.registry.set_pieces(
            [
                make_piece("a", (0, 0), current=(300, 300)),
                make_piece("b", (100, 100), current=(400, 50)),
            ]
        )

    def test_find_by_id_returns_single_match_per_id(self) -> None:
        ids = [piece.id for piece in self.registry.pieces]
        self.assertEqual(len(ids), len(set(ids)))
        for piece_id in ids:
            matches = [piece for piece in self.registry.pieces if piece.id == piece_id]
            self.assertEqual(len(matches), 1)
            self.assertIs(self.registry.find_by_id(piece_id), matches[0])
        self.assertIsNone(self.registry.find_by_id("missing"))

    def test_set_pieces_replaces_previous_collection(self) -> None:
        self.registry.update_status("a", True)
        self.registry.set_pieces([make_piece("c", (10, 10))])
        self.assertEqual([piece.id for piece in self.registry.pieces], ["c"])
        self.assertIsNone(self.registry.find_by_id("a"))

    def test_pieces_view_is_read_only_sequence(self) -> None:
        self.assertIsInstance(self.registry.pieces, tuple)
        self.assertEqual(len(self.registry), 2)

    def test_update_position_is_idempotent(self) -> None:
        self.registry.update_position("a", 12.5, 7.0)
        once = [piece.to_dict() for piece in self.registry.pieces]
        self.registry.update_position("a", 12.5, 7.0)
        twice = [piece.to_dict() for piece in self.registry.pieces]
        self.assertEqual(once, twice)
        self.assertEqual(self.registry.find_by_id("a").current_position, (12.5, 7.0))

    def test_unknown_id_updates_are_ignored(self) -> None:
        before = [piece.to_dict() for piece in self.registry.pieces]
        self.registry.update_position("does-not-exist", 1, 1)
        self.registry.update_status("does-not-exist", True)
        self.assertEqual(before, [piece.to_dict() for piece in self.registry.pieces])

    def test_update_position_leaves_original_position(self) -> None:
        self.registry.update_position("b", 1, 2)
        piece = self.registry.find_by_id("b")
        self.assertEqual(piece.original_position, (100, 100))
        self.assertEqual((piece.current_x, piece.current_y), (1, 2))


class CompletionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = PieceRegistry()
        self.registry.set_pieces(
            [
                make_piece("a", (0, 0), current=(500, 500)),
                make_piece("b", (100, 100), current=(600, 20)),
            ]
        )

    def test_pieces_within_tolerance_complete_the_puzzle(self) -> None:
        self.assertFalse(self.registry.is_complete())
        self.registry.update_position("a", 5, 5)
        self.registry.update_position("b", 108, 108)
        self.assertTrue(self.registry.is_complete())

    def test_piece_outside_tolerance_blocks_completion(self) -> None:
        self.registry.update_position("a", 5, 5)
        self.registry.update_position("b", 120, 120)
        self.assertFalse(self.registry.is_complete())

    def test_tolerance_is_strict_per_axis(self) -> None:
        self.registry.update_position("a", 0, 0)
        self.registry.update_position("b", 100 + COMPLETION_TOLERANCE, 100)
        self.assertFalse(self.registry.is_complete())
        self.registry.update_position("b", 100 - 14.9, 100 + 14.9)
        self.assertTrue(self.registry.is_complete())

    def test_empty_registry_is_vacuously_complete(self) -> None:
        self.assertTrue(PieceRegistry().is_complete())
        result = PieceRegistry().evaluate()
        self.assertTrue(result.is_complete)
        self.assertEqual(result.total_pieces, 0)

    def test_fixed_flag_does_not_affect_completion(self) -> None:
        self.registry.update_status("a", True)
        self.registry.update_status("b", True)
        self.assertFalse(self.registry.is_complete())

        self.registry.update_position("a", 3, -3)
        self.registry.update_position("b", 95, 110)
        self.registry.update_status("a", False)
        self.registry.update_status("b", False)
        self.assertTrue(self.registry.is_complete())

    def test_evaluation_reports_per_piece_offsets(self) -> None:
        self.registry.update_position("a", 5, 5)
        self.registry.update_position("b", 120, 100)
        result = evaluate_completion(self.registry.pieces)
        self.assertEqual(result.correct_pieces, 1)
        self.assertEqual(result.total_pieces, 2)
        self.assertAlmostEqual(result.accuracy, 0.5)
        self.assertFalse(result.is_complete)
        by_id = {piece.piece_id: piece for piece in result.per_piece}
        self.assertTrue(by_id["a"].is_correct)
        self.assertFalse(by_id["b"].is_correct)
        self.assertAlmostEqual(by_id["b"].offset_x, 20.0)
        self.assertAlmostEqual(by_id["b"].offset_y, 0.0)

    def test_custom_tolerance(self) -> None:
        registry = PieceRegistry([make_piece("a", (0, 0), current=(20, 0))], tolerance=25)
        self.assertTrue(registry.is_complete())


if __name__ == "__main__":
    unittest.main()
