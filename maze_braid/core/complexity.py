import logging
from collections import deque
from typing import List, Set, Tuple

from maze_braid.core.flags import MazeFlags, OPPOSITE
from maze_braid.core.grid import CellGrid, MazeInvariantError
from maze_braid.core.rng import XorShift32

logger = logging.getLogger(__name__)


class MazePostProcessor:
    @staticmethod
    def open_dead_ends(grid: CellGrid, probability: float, rng: XorShift32) -> Tuple[XorShift32, int]:
        """
        Braid pass A. Every cell with exactly one passage is opened towards a
        random closed neighbor with the given probability, which removes the
        dead end and creates a loop.
        Cells are visited in index order; earlier openings can turn later
        cells into non-dead-ends.
        Returns (rng, opened_count).
        """
        opened = 0
        for i in range(grid.length):
            cell = grid.get(i)
            if not cell.has_exactly_one():
                continue
            roll, rng = rng.next_float()
            if not roll < probability:
                continue

            closed = [direction for _, direction in grid.neighbors(i) if direction != cell]
            if not closed:
                # 1-wide corridor end, nothing else to open
                continue
            pick, rng = rng.next_int(0, len(closed))
            grid.open_passage(i, closed[pick])
            opened += 1

        logger.debug("Opened %d dead ends (p=%.2f)", opened, probability)
        return rng, opened

    @staticmethod
    def open_optional_passages(grid: CellGrid, probability: float, rng: XorShift32) -> Tuple[XorShift32, int]:
        """
        Braid pass B. Each cell rolls once for its West passage and once for
        its South passage and forces them open on success. Only West/South
        are rolled so every interior edge is sampled exactly once.
        Returns (rng, opened_count); already open passages still count.
        """
        opened = 0
        for i in range(grid.length):
            x, y = grid.index_to_coordinates(i)
            if x > 0:
                roll, rng = rng.next_float()
                if roll < probability:
                    grid.open_passage(i, MazeFlags.PASSAGE_W)
                    opened += 1
            if y > 0:
                roll, rng = rng.next_float()
                if roll < probability:
                    grid.open_passage(i, MazeFlags.PASSAGE_S)
                    opened += 1

        logger.debug("Forced %d optional passages (p=%.2f)", opened, probability)
        return rng, opened

    @staticmethod
    def find_asymmetric_passages(grid: CellGrid) -> List[Tuple[int, MazeFlags]]:
        """(index, direction) pairs whose reciprocal bit is missing, or that lead off the grid."""
        broken = []
        for i in range(grid.length):
            cell = grid.get(i)
            valid = 0
            for neighbor, direction in grid.neighbors(i):
                valid |= direction
                if bool(cell & direction) != bool(grid.get(neighbor) & OPPOSITE[direction]):
                    broken.append((i, direction))
            for direction in (MazeFlags.PASSAGE_N, MazeFlags.PASSAGE_E, MazeFlags.PASSAGE_S, MazeFlags.PASSAGE_W):
                if cell & direction and not valid & direction:
                    broken.append((i, direction))
        return broken

    @staticmethod
    def verify_symmetry(grid: CellGrid):
        broken = MazePostProcessor.find_asymmetric_passages(grid)
        if broken:
            i, direction = broken[0]
            raise MazeInvariantError(
                f"{len(broken)} one-sided passages, first at cell {i} towards {direction!r}"
            )

    @staticmethod
    def reachable_cells(grid: CellGrid, start: int = 0) -> Set[int]:
        """Flood fill over open orthogonal passages."""
        seen = {start}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for neighbor in grid.open_neighbors(current):
                if neighbor not in seen:
                    seen.add(neighbor)
                    queue.append(neighbor)
        return seen

    @staticmethod
    def count_passages(grid: CellGrid) -> int:
        """Undirected orthogonal edges. Counted from the East/North side only."""
        count = 0
        for value in grid.cells:
            if value & MazeFlags.PASSAGE_E:
                count += 1
            if value & MazeFlags.PASSAGE_N:
                count += 1
        return count

    @staticmethod
    def calculate_stats(grid: CellGrid):
        dead_ends = 0
        corridors = 0  # 2 passages
        junctions = 0  # 3 or 4 passages
        isolated = 0

        for value in grid.cells:
            exits = bin(value & MazeFlags.PASSAGES_STRAIGHT).count("1")
            if exits == 1: dead_ends += 1
            elif exits == 2: corridors += 1
            elif exits >= 3: junctions += 1
            else: isolated += 1

        total = grid.length
        passages = MazePostProcessor.count_passages(grid)
        reachable = len(MazePostProcessor.reachable_cells(grid))
        return {
            "dead_ends": dead_ends,
            "corridors": corridors,
            "junctions": junctions,
            "isolated": isolated,
            "passages": passages,
            # Edges beyond a spanning tree; only meaningful when fully connected
            "loops": passages - (total - 1),
            "reachable": reachable,
            "dead_end_percent": (dead_ends / total) * 100 if total > 0 else 0
        }
