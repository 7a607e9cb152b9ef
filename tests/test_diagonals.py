import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_braid.core.flags import MazeFlags, CORNERS, CORNER_SIDES
from maze_braid.core.grid import CellGrid
from maze_braid.algo.growing_tree import GrowingTree
from maze_braid.algo.diagonals import DiagonalResolver

N, E, S, W = MazeFlags.PASSAGE_N, MazeFlags.PASSAGE_E, MazeFlags.PASSAGE_S, MazeFlags.PASSAGE_W

# (dx, dy) to the diagonal neighbor of each corner
CORNER_OFFSETS = {
    MazeFlags.PASSAGE_NE: (1, 1),
    MazeFlags.PASSAGE_SE: (1, -1),
    MazeFlags.PASSAGE_SW: (-1, -1),
    MazeFlags.PASSAGE_NW: (-1, 1),
}
RECIPROCAL = {
    MazeFlags.PASSAGE_NE: S | W,
    MazeFlags.PASSAGE_SE: N | W,
    MazeFlags.PASSAGE_SW: N | E,
    MazeFlags.PASSAGE_NW: S | E,
}


def ring():
    # 2x2 loop, every corner meets in the middle
    grid = CellGrid(2, 2)
    grid.open_passage(0, E)
    grid.open_passage(0, N)
    grid.open_passage(1, N)
    grid.open_passage(2, E)
    return grid


def generated(w, h, seed):
    grid = CellGrid(w, h)
    GrowingTree(grid, seed=seed, pick_last=0.5, open_dead_end=0.6, open_optional=0.5).run_all()
    return grid


class TestDiagonalResolver(unittest.TestCase):
    def test_ring_all_backends(self):
        for backend in ("serial", "numpy"):
            grid = ring()
            DiagonalResolver(grid, backend=backend).resolve()
            self.assertEqual(grid.get(0), N | E | MazeFlags.PASSAGE_NE, backend)
            self.assertEqual(grid.get(1), N | W | MazeFlags.PASSAGE_NW, backend)
            self.assertEqual(grid.get(2), S | E | MazeFlags.PASSAGE_SE, backend)
            self.assertEqual(grid.get(3), S | W | MazeFlags.PASSAGE_SW, backend)

    def test_broken_ring(self):
        # U shape: the top cells are not joined, so no corner is cut
        for backend in ("serial", "numpy"):
            grid = CellGrid(2, 2)
            grid.open_passage(0, E)
            grid.open_passage(0, N)
            grid.open_passage(1, N)
            before = grid.tobytes()
            DiagonalResolver(grid, backend=backend).resolve()
            self.assertEqual(grid.tobytes(), before, backend)

    def test_resolve_cell_does_not_write(self):
        grid = ring()
        self.assertEqual(DiagonalResolver(grid).resolve_cell(0), N | E | MazeFlags.PASSAGE_NE)
        self.assertEqual(grid.get(0), N | E)

    def test_consistency(self):
        for w, h, seed in [(1, 1, 1), (1, 5, 2), (7, 3, 3), (20, 20, 4), (33, 17, 5)]:
            grid = generated(w, h, seed)
            orthogonal = grid.tobytes()
            DiagonalResolver(grid).resolve()

            for i in range(grid.length):
                cell = grid.get(i)
                # Orthogonal bits untouched
                self.assertEqual(int(cell.straight()), orthogonal[i])
                x, y = grid.index_to_coordinates(i)
                for corner in CORNERS:
                    dx, dy = CORNER_OFFSETS[corner]
                    expected = (
                        cell.has_all(CORNER_SIDES[corner])
                        and grid.coordinates_valid(x + dx, y + dy)
                        and grid.get(grid.coordinates_to_index(x + dx, y + dy)).has_all(RECIPROCAL[corner])
                    )
                    self.assertEqual(cell.has_all(corner), expected, f"cell {i} corner {corner!r}")

    def test_backends_agree(self):
        for w, h, seed in [(2, 2, 7), (9, 4, 8), (25, 31, 9)]:
            serial = generated(w, h, seed)
            vectorised = generated(w, h, seed)
            DiagonalResolver(serial, backend="serial").resolve()
            DiagonalResolver(vectorised, backend="numpy").resolve()
            self.assertEqual(serial.tobytes(), vectorised.tobytes())

    def test_idempotent(self):
        grid = generated(12, 12, 10)
        DiagonalResolver(grid).resolve()
        once = grid.tobytes()
        DiagonalResolver(grid).resolve()
        self.assertEqual(grid.tobytes(), once)

    def test_unknown_backend(self):
        with self.assertRaises(ValueError):
            DiagonalResolver(CellGrid(2, 2), backend="cuda")

    def test_one_sided_passage_fails(self):
        # A passage leading off the grid is a broken invariant, not something to clamp
        grid = CellGrid(2, 2)
        grid.set(3, N | E)
        with self.assertRaises(IndexError):
            DiagonalResolver(grid, backend="serial").resolve()

if __name__ == '__main__':
    unittest.main()
