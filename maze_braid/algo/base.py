from abc import ABC, abstractmethod
from typing import Iterator
from maze_braid.core.grid import CellGrid

class Generator(ABC):
    def __init__(self, grid: CellGrid, seed: int):
        self.grid = grid
        self.seed = seed
        self.step_count = 0

    @abstractmethod
    def run(self) -> Iterator[str]:
        """
        Yields status strings or progress updates.
        The actual grid modifications happen in-place on self.grid.
        """
        pass

    def run_all(self):
        """Helper to run the generator to completion."""
        for _ in self.run():
            pass
        return self.grid
