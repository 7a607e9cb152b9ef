import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_braid.core.flags import MazeFlags
from maze_braid.core.grid import CellGrid, MazeInvariantError
from maze_braid.core.rng import XorShift32
from maze_braid.core.complexity import MazePostProcessor
from maze_braid.algo.growing_tree import GrowingTree

def advance(rng, draws):
    for _ in range(draws):
        _, rng = rng.next_uint()
    return rng

class TestComplexity(unittest.TestCase):
    def test_stats_two_cells(self):
        grid = CellGrid(2, 1)
        grid.open_passage(0, MazeFlags.PASSAGE_E)
        stats = MazePostProcessor.calculate_stats(grid)
        self.assertEqual(stats["dead_ends"], 2)
        self.assertEqual(stats["passages"], 1)
        self.assertEqual(stats["loops"], 0)
        self.assertEqual(stats["reachable"], 2)
        self.assertEqual(stats["dead_end_percent"], 100.0)

    def test_stats_loop(self):
        grid = CellGrid(2, 2)
        grid.open_passage(0, MazeFlags.PASSAGE_E)
        grid.open_passage(0, MazeFlags.PASSAGE_N)
        grid.open_passage(1, MazeFlags.PASSAGE_N)
        grid.open_passage(2, MazeFlags.PASSAGE_E)
        stats = MazePostProcessor.calculate_stats(grid)
        self.assertEqual(stats["corridors"], 4)
        self.assertEqual(stats["loops"], 1)

    def test_open_dead_ends(self):
        grid = CellGrid(20, 20)
        GrowingTree(grid, seed=42, open_dead_end=0.0, open_optional=0.0).run_all()
        before = MazePostProcessor.calculate_stats(grid)
        self.assertGreater(before["dead_ends"], 0)

        rng, opened = MazePostProcessor.open_dead_ends(grid, 1.0, XorShift32.from_seed(42))
        after = MazePostProcessor.calculate_stats(grid)
        self.assertEqual(after["dead_ends"], 0, "Probability 1.0 should remove all dead ends")
        self.assertGreater(opened, 0)
        self.assertEqual(after["passages"], before["passages"] + opened)

    def test_partial_dead_ends(self):
        grid = CellGrid(30, 30)
        GrowingTree(grid, seed=99, pick_last=0.0, open_dead_end=0.0, open_optional=0.0).run_all()
        initial = MazePostProcessor.calculate_stats(grid)["dead_ends"]

        MazePostProcessor.open_dead_ends(grid, 0.5, XorShift32.from_seed(99))

        remaining = MazePostProcessor.calculate_stats(grid)["dead_ends"]
        self.assertLess(remaining, initial)
        self.assertGreater(remaining, 0)

    def test_dead_end_draws(self):
        # Probability 0 still rolls once per dead end and never picks a direction
        grid = CellGrid(3, 1)
        grid.open_passage(0, MazeFlags.PASSAGE_E)
        grid.open_passage(1, MazeFlags.PASSAGE_E)
        rng = XorShift32.from_seed(5)
        out, opened = MazePostProcessor.open_dead_ends(grid, 0.0, rng)
        self.assertEqual(opened, 0)
        self.assertEqual(out, advance(rng, 2))

    def test_optional_passage_draws(self):
        grid = CellGrid(3, 3)
        rng = XorShift32.from_seed(8)
        out, opened = MazePostProcessor.open_optional_passages(grid, 1.0, rng)
        # 6 cells with x > 0 and 6 with y > 0
        self.assertEqual(out, advance(rng, 12))
        self.assertEqual(opened, 12)
        self.assertEqual(MazePostProcessor.count_passages(grid), 12)
        self.assertEqual(MazePostProcessor.find_asymmetric_passages(grid), [])

    def test_optional_passages_only_west_south(self):
        grid = CellGrid(1, 1)
        rng = XorShift32.from_seed(8)
        out, opened = MazePostProcessor.open_optional_passages(grid, 1.0, rng)
        self.assertEqual(out, rng)
        self.assertEqual(opened, 0)

    def test_asymmetry_detected(self):
        grid = CellGrid(3, 3)
        grid.set(4, MazeFlags.PASSAGE_N)
        self.assertEqual(MazePostProcessor.find_asymmetric_passages(grid), [(4, MazeFlags.PASSAGE_N), (7, MazeFlags.PASSAGE_S)])
        with self.assertRaises(MazeInvariantError):
            MazePostProcessor.verify_symmetry(grid)

        border = CellGrid(2, 2)
        border.set(0, MazeFlags.PASSAGE_W)
        self.assertEqual(MazePostProcessor.find_asymmetric_passages(border), [(0, MazeFlags.PASSAGE_W)])

    def test_reachable(self):
        grid = CellGrid(3, 1)
        grid.open_passage(0, MazeFlags.PASSAGE_E)
        self.assertEqual(MazePostProcessor.reachable_cells(grid, 0), {0, 1})
        self.assertEqual(MazePostProcessor.reachable_cells(grid, 2), {2})

if __name__ == '__main__':
    unittest.main()
