import logging
import random
import time
from typing import Iterator, Optional, Tuple

from maze_braid.core.grid import CellGrid
from maze_braid.core.settings import MazeSettings
from maze_braid.algo.growing_tree import GrowingTree
from maze_braid.algo.diagonals import DiagonalResolver
from maze_braid.core.complexity import MazePostProcessor

logger = logging.getLogger(__name__)


def create_generator(settings: MazeSettings) -> GrowingTree:
    """Grid + generator for already resolved settings."""
    settings.validate()
    if settings.uses_random_seed:
        raise ValueError("Settings need an explicit seed, call resolve_seed() first")
    grid = CellGrid(settings.width, settings.height)
    return GrowingTree(
        grid,
        seed=settings.seed,
        pick_last=settings.pick_last,
        open_dead_end=settings.open_dead_end,
        open_optional=settings.open_optional,
    )


def build_steps(generator: GrowingTree, diagonal_backend: str = "numpy") -> Iterator[str]:
    """
    Runs `generator` then resolves diagonals, yielding progress strings.
    generator.grid is finished once the iterator is exhausted.
    """
    yield from generator.run()
    MazePostProcessor.verify_symmetry(generator.grid)
    # Generation must be complete before any diagonal is derived
    DiagonalResolver(generator.grid, backend=diagonal_backend).resolve()
    yield "Resolved"


def build_maze(settings: MazeSettings, diagonal_backend: str = "numpy",
               entropy: Optional[random.Random] = None) -> Tuple[CellGrid, MazeSettings]:
    """
    Generates a maze and resolves its diagonal passages.
    Returns the finished grid and the settings with the seed actually used.
    """
    settings = settings.validate().resolve_seed(entropy)
    logger.info(
        "Building %dx%d maze (seed=%d, pick_last=%.2f, open_dead_end=%.2f, open_optional=%.2f)",
        settings.width, settings.height, settings.seed,
        settings.pick_last, settings.open_dead_end, settings.open_optional
    )

    t0 = time.time()
    generator = create_generator(settings)
    generator.run_all()
    MazePostProcessor.verify_symmetry(generator.grid)
    t1 = time.time()
    DiagonalResolver(generator.grid, backend=diagonal_backend).resolve()
    t2 = time.time()

    logger.debug("Generation %.4fs, diagonals %.4fs (%s)", t1 - t0, t2 - t1, diagonal_backend)
    return generator.grid, settings
