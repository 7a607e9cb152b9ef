import logging
from typing import Iterator, List, Tuple

from maze_braid.core.flags import MazeFlags
from maze_braid.core.grid import CellGrid, MazeInvariantError
from maze_braid.core.complexity import MazePostProcessor
from maze_braid.core.rng import XorShift32
from maze_braid.algo.base import Generator

logger = logging.getLogger(__name__)


class Frontier:
    """
    Active cells of the growing tree.

    A growable list with a live range [first, last]. The high end behaves
    like a stack (push / pop at `last`), the rest is an unordered pool where
    a slot is removed by moving the element at `first` into it.
    """
    __slots__ = ('items', 'first', 'last')

    def __init__(self):
        self.items: List[int] = []
        self.first = 0
        self.last = -1

    def __len__(self) -> int:
        return self.last - self.first + 1

    def __bool__(self) -> bool:
        return self.first <= self.last

    def __getitem__(self, slot: int) -> int:
        if not (self.first <= slot <= self.last):
            raise IndexError(f"Slot {slot} outside active range [{self.first}, {self.last}]")
        return self.items[slot]

    def push(self, index: int):
        self.last += 1
        if self.last == len(self.items):
            self.items.append(index)
        else:
            self.items[self.last] = index

    def pop_last(self):
        self.last -= 1

    def retire(self, slot: int):
        # O(1), order not preserved
        self.items[slot] = self.items[self.first]
        self.first += 1


class GrowingTree(Generator):
    """
    Growing-tree maze generator.

    pick_last: chance of expanding the newest active cell (depth-first,
               long corridors) instead of a random one (more branching).
    open_dead_end: chance per dead end of knocking it through (braid pass A).
    open_optional: chance per West/South wall of forcing it open (braid pass B).
    """

    PROGRESS_EVERY = 100

    def __init__(self, grid: CellGrid, seed: int, pick_last: float = 0.5,
                 open_dead_end: float = 0.5, open_optional: float = 0.5):
        super().__init__(grid, seed)
        for name, value in (("pick_last", pick_last),
                            ("open_dead_end", open_dead_end),
                            ("open_optional", open_optional)):
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if any(grid.cells):
            raise ValueError("Growing tree needs an empty grid")

        self.pick_last = pick_last
        self.open_dead_end = open_dead_end
        self.open_optional = open_optional
        self.rng = XorShift32.from_seed(seed)

        self.carved = 0
        self.opened_dead_ends = 0
        self.opened_optional = 0

    def find_available_passages(self, index: int) -> List[Tuple[int, MazeFlags]]:
        """Neighbors that were never visited (no passage bits at all), in E, W, N, S order."""
        return [
            (neighbor, direction)
            for neighbor, direction in self.grid.neighbors(index)
            if self.grid.is_empty(neighbor)
        ]

    def run(self) -> Iterator[str]:
        grid = self.grid
        rng = self.rng

        start, rng = rng.next_int(0, grid.length)
        frontier = Frontier()
        frontier.push(start)
        visited = 1
        logger.debug("Growing tree from cell %d on %dx%d", start, grid.width, grid.height)

        while frontier:
            roll, rng = rng.next_float()
            pick_last = roll < self.pick_last
            if pick_last:
                slot = frontier.last
            else:
                slot, rng = rng.next_int(frontier.first, frontier.last + 1)
            index = frontier[slot]

            available = self.find_available_passages(index)

            # A cell with a single way out is retired and carved in the same step
            if len(available) <= 1:
                if pick_last:
                    frontier.pop_last()
                else:
                    frontier.retire(slot)

            if available:
                pick, rng = rng.next_int(0, len(available))
                neighbor, direction = available[pick]
                grid.open_passage(index, direction)
                frontier.push(neighbor)
                visited += 1
                self.carved += 1
                self.step_count += 1

                if self.step_count % self.PROGRESS_EVERY == 0:
                    yield f"Carving... Frontier: {len(frontier)}"

        if visited != grid.length:
            raise MazeInvariantError(
                f"Frontier emptied after visiting {visited} of {grid.length} cells"
            )

        if self.open_dead_end > 0:
            yield "Opening dead ends..."
            rng, self.opened_dead_ends = MazePostProcessor.open_dead_ends(grid, self.open_dead_end, rng)

        if self.open_optional > 0:
            yield "Opening optional passages..."
            rng, self.opened_optional = MazePostProcessor.open_optional_passages(grid, self.open_optional, rng)

        self.rng = rng
        logger.info(
            "Generated %dx%d maze: %d carved, %d dead ends opened, %d optional passages",
            grid.width, grid.height, self.carved, self.opened_dead_ends, self.opened_optional
        )
        yield "Done"
