import logging
from array import array

import numpy as np

from maze_braid.core.flags import MazeFlags
from maze_braid.core.grid import CellGrid

logger = logging.getLogger(__name__)

N = int(MazeFlags.PASSAGE_N)
E = int(MazeFlags.PASSAGE_E)
S = int(MazeFlags.PASSAGE_S)
W = int(MazeFlags.PASSAGE_W)

# corner bit, passages needed on the cell, (dx, dy) to the diagonal neighbor,
# passages needed on that neighbor
CORNER_RULES = (
    (int(MazeFlags.PASSAGE_NE), N | E, (1, 1), S | W),
    (int(MazeFlags.PASSAGE_NW), N | W, (-1, 1), S | E),
    (int(MazeFlags.PASSAGE_SE), S | E, (1, -1), N | W),
    (int(MazeFlags.PASSAGE_SW), S | W, (-1, -1), N | E),
)

BACKENDS = ("serial", "numpy", "taichi")


class DiagonalResolver:
    """
    Marks corners where two passages of a cell and the two reciprocal
    passages of the diagonal neighbor meet, so the corner can be drawn cut.

    Only reads orthogonal bits and only writes diagonal bits of the cell being
    resolved, so cells can be processed in any order or all at once.
    Must run after generation has finished.
    """

    def __init__(self, grid: CellGrid, backend: str = "numpy"):
        if backend not in BACKENDS:
            raise ValueError(f"Unknown diagonal backend '{backend}', expected one of {BACKENDS}")
        self.grid = grid
        self.backend = backend

    def resolve_cell(self, index: int) -> MazeFlags:
        """Flags of `index` with its diagonal bits added. Does not write."""
        grid = self.grid
        value = grid.cells[index]
        x, y = grid.index_to_coordinates(index)
        for corner, needed, (dx, dy), reciprocal in CORNER_RULES:
            if (value & needed) != needed:
                continue
            # Both passages are open, so by symmetry the diagonal cell exists
            other = grid.cells[grid.coordinates_to_index(x + dx, y + dy)]
            if (other & reciprocal) == reciprocal:
                value |= corner
        return MazeFlags(value)

    def resolve_serial(self):
        for i in range(self.grid.length):
            self.grid.cells[i] = int(self.resolve_cell(i))

    def resolve_numpy(self):
        grid = self.grid
        cells = np.frombuffer(grid.cells.tobytes(), dtype=np.uint8).reshape(grid.height, grid.width)
        diagonal = np.zeros_like(cells)

        def has(block, mask):
            return (block & mask) == mask

        # Row y+1 is North. Each slice pair lines a cell up with its diagonal neighbor.
        ne = has(cells[:-1, :-1], N | E) & has(cells[1:, 1:], S | W)
        nw = has(cells[:-1, 1:], N | W) & has(cells[1:, :-1], S | E)
        se = has(cells[1:, :-1], S | E) & has(cells[:-1, 1:], N | W)
        sw = has(cells[1:, 1:], S | W) & has(cells[:-1, :-1], N | E)

        diagonal[:-1, :-1] |= np.where(ne, np.uint8(int(MazeFlags.PASSAGE_NE)), np.uint8(0))
        diagonal[:-1, 1:] |= np.where(nw, np.uint8(int(MazeFlags.PASSAGE_NW)), np.uint8(0))
        diagonal[1:, :-1] |= np.where(se, np.uint8(int(MazeFlags.PASSAGE_SE)), np.uint8(0))
        diagonal[1:, 1:] |= np.where(sw, np.uint8(int(MazeFlags.PASSAGE_SW)), np.uint8(0))

        grid.cells = array('B', (cells | diagonal).tobytes())

    def resolve_taichi(self):
        from maze_braid.algo.taichi_diagonals import TaichiDiagonalResolver
        TaichiDiagonalResolver(self.grid).resolve()

    def resolve(self) -> CellGrid:
        logger.debug("Resolving diagonals on %dx%d (%s)", self.grid.width, self.grid.height, self.backend)
        getattr(self, f"resolve_{self.backend}")()
        return self.grid
