import logging
from array import array

import numpy as np
import taichi as ti

from maze_braid.core.grid import CellGrid

logger = logging.getLogger(__name__)

_initialized = False


def ensure_taichi(arch=None):
    """Initialise taichi once per process. Defaults to the CPU backend."""
    global _initialized
    if not _initialized:
        ti.init(arch=arch if arch is not None else ti.cpu, offline_cache=True)
        _initialized = True


@ti.data_oriented
class TaichiDiagonalResolver:
    """
    Same rules as DiagonalResolver, one kernel thread per cell.
    Reads from `src` and writes to `dst`, so no thread sees another's write.
    """

    def __init__(self, grid: CellGrid, arch=None):
        ensure_taichi(arch)
        self.grid = grid
        self.width = grid.width
        self.height = grid.height
        self.length = grid.length

        self.src = ti.field(dtype=ti.i32, shape=self.length)
        self.dst = ti.field(dtype=ti.i32, shape=self.length)

    @ti.kernel
    def resolve_kernel(self):
        for i in range(self.length):
            cell = self.src[i]
            x = i % self.width
            y = i // self.width
            out = cell

            # 1=N 2=E 4=S 8=W | 16=NE 32=SE 64=SW 128=NW
            if (cell & 3) == 3 and x + 1 < self.width and y + 1 < self.height:
                if (self.src[i + self.width + 1] & 12) == 12:
                    out = out | 16
            if (cell & 9) == 9 and x > 0 and y + 1 < self.height:
                if (self.src[i + self.width - 1] & 6) == 6:
                    out = out | 128
            if (cell & 6) == 6 and x + 1 < self.width and y > 0:
                if (self.src[i - self.width + 1] & 9) == 9:
                    out = out | 32
            if (cell & 12) == 12 and x > 0 and y > 0:
                if (self.src[i - self.width - 1] & 3) == 3:
                    out = out | 64

            self.dst[i] = out

    def resolve(self) -> CellGrid:
        self.src.from_numpy(np.frombuffer(self.grid.tobytes(), dtype=np.uint8).astype(np.int32))
        self.resolve_kernel()
        ti.sync()
        result = self.dst.to_numpy().astype(np.uint8)
        self.grid.cells = array('B', result.tobytes())
        logger.debug("Taichi resolved %d cells", self.length)
        return self.grid
