import sys
import os
import time

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_braid.core.grid import CellGrid
from maze_braid.algo.growing_tree import GrowingTree
from maze_braid.algo.diagonals import DiagonalResolver
from maze_braid.core.complexity import MazePostProcessor

def benchmark_size(width: int, height: int, pick_last: float):
    print(f"\n--- Benchmarking {width}x{height} ({width*height/1e6:.2f}M cells), pick_last={pick_last} ---")

    # 1. Memory
    start_time = time.time()
    grid = CellGrid(width, height)
    mem_mb = (width * height) / (1024 * 1024) # 1 byte per cell
    print(f"Grid Init: {time.time() - start_time:.4f}s")
    print(f"Memory (Grid Data): ~{mem_mb:.2f} MB")

    # 2. Generation (growing tree + braiding)
    gen = GrowingTree(grid, seed=42, pick_last=pick_last, open_dead_end=0.5, open_optional=0.05)
    gen_start = time.time()
    gen.run_all()
    gen_time = time.time() - gen_start
    print(f"Generation Time: {gen_time:.4f}s")
    print(f"Speed: {(width*height)/gen_time:,.0f} cells/sec")
    print(f"Dead ends opened: {gen.opened_dead_ends}, optional passages: {gen.opened_optional}")

    # 3. Diagonals, one copy per backend
    baseline = grid.tobytes()
    for backend in ("serial", "numpy"):
        copy = CellGrid(width, height)
        copy.cells[:] = grid.cells
        t0 = time.time()
        DiagonalResolver(copy, backend=backend).resolve()
        print(f"Diagonals ({backend}): {time.time() - t0:.4f}s")
    assert grid.tobytes() == baseline

    stats = MazePostProcessor.calculate_stats(copy)
    print(f"Stats: {stats}")

def run_suite():
    sizes = [
        (100, 100),
        (500, 500),
        (1000, 1000),  # 1M, slow in pure Python
    ]

    for w, h in sizes:
        for pick_last in (0.0, 0.5, 1.0):
            benchmark_size(w, h, pick_last)

if __name__ == "__main__":
    run_suite()
