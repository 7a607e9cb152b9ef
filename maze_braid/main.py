import argparse
import json
import logging
import os
import sys
import time
from collections import Counter

# Ensure project root is in path so we can import 'maze_braid' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_braid.core.settings import MazeSettings

logger = logging.getLogger("maze_braid")


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def probability(text: str) -> float:
    value = float(text)
    if not (0.0 <= value <= 1.0):
        raise argparse.ArgumentTypeError(f"{text} is not within [0, 1]")
    return value


def positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"{text} must be >= 1")
    return value


def non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"{text} must be >= 0")
    return value


def add_maze_arguments(parser: argparse.ArgumentParser):
    defaults = MazeSettings()
    parser.add_argument("--width", type=positive_int, default=defaults.width, help="Maze Width")
    parser.add_argument("--height", type=positive_int, default=defaults.height, help="Maze Height")
    parser.add_argument("--seed", type=int, default=None, help="Random Seed (omit or 0 for a random one)")
    parser.add_argument("--pick-last", type=probability, default=defaults.pick_last,
                        help="Chance to grow from the newest cell (0 = random frontier, 1 = depth-first)")
    parser.add_argument("--open-dead-end", type=probability, default=defaults.open_dead_end,
                        help="Chance to knock through each dead end")
    parser.add_argument("--open-optional", type=probability, default=defaults.open_optional,
                        help="Chance to force open each West/South wall")
    parser.add_argument("--diagonals", type=str, default="numpy", choices=["serial", "numpy", "taichi"],
                        help="Diagonal passage backend")


def settings_from_args(args) -> MazeSettings:
    return MazeSettings(
        width=args.width,
        height=args.height,
        seed=args.seed,
        pick_last=args.pick_last,
        open_dead_end=args.open_dead_end,
        open_optional=args.open_optional,
    )


def ascii_maze(grid) -> str:
    """Box drawing of the passages, north at the top."""
    from maze_braid.core.flags import MazeFlags
    lines = ["+" + "---+" * grid.width]
    for y in range(grid.height - 1, -1, -1):
        row, floor = "|", "+"
        for x in range(grid.width):
            cell = grid.get(grid.coordinates_to_index(x, y))
            row += "   " + (" " if cell & MazeFlags.PASSAGE_E else "|")
            floor += ("   " if cell & MazeFlags.PASSAGE_S else "---") + "+"
        lines.append(row)
        lines.append(floor)
    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(description="Maze Braid: growing-tree maze generator with braiding")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate Command
    gen_parser = subparsers.add_parser("generate", help="Generate a new maze")
    add_maze_arguments(gen_parser)
    gen_parser.add_argument("--visual", action="store_true", help="Show visualization")
    gen_parser.add_argument("--out", type=str, help="Save a PNG preview to this path")
    gen_parser.add_argument("--cell-size", type=positive_int, default=16, help="Preview pixels per cell")
    gen_parser.add_argument("--stats", action="store_true", help="Print maze statistics")
    gen_parser.add_argument("--ascii", action="store_true", help="Print the maze as text")
    gen_parser.add_argument("--agents", type=non_negative_int, default=None, help="Print spawn positions for this many agents")

    # Tiles Command
    tiles_parser = subparsers.add_parser("tiles", help="Count the tile pieces a maze needs")
    add_maze_arguments(tiles_parser)

    # Benchmark Command
    bench_parser = subparsers.add_parser("benchmark", help="Run performance suite")
    bench_parser.add_argument("--size", type=positive_int, default=500, help="Largest benchmark size")
    bench_parser.add_argument("--diagonals", type=str, default="numpy", choices=["serial", "numpy", "taichi"])

    args = parser.parse_args()

    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return

    logger.info(f"Running command: {args.command}")

    if args.command == "generate":
        try:
            settings = settings_from_args(args).validate().resolve_seed()
        except ValueError as e:
            parser.error(str(e))
        # Print the resolved settings so the run can be repeated
        print(json.dumps(settings.as_dict()))

        if args.visual:
            from maze_braid.core.builder import create_generator, build_steps
            from maze_braid.viz.renderer import TileRenderer
            logger.info("Visual mode enabled - Opening window...")
            generator = create_generator(settings)
            renderer = TileRenderer(generator.grid, steps=build_steps(generator, args.diagonals))
            renderer.init_window()
            renderer.run_loop()
            grid = generator.grid
            if not renderer.finished:
                logger.warning("Window closed before generation finished")
                return
        else:
            from maze_braid.core.builder import build_maze
            logger.info("Headless generation...")
            grid, settings = build_maze(settings, diagonal_backend=args.diagonals)

        if args.stats:
            from maze_braid.core.complexity import MazePostProcessor
            stats = MazePostProcessor.calculate_stats(grid)
            logger.info(f"Stats: {stats}")
            print(json.dumps(stats))

        if args.ascii:
            print(ascii_maze(grid))

        if args.agents is not None:
            from maze_braid.game.spawn import choose_spawn_points, spawn_world_positions
            points = choose_spawn_points(grid, args.agents, seed=settings.seed)
            player, agents = spawn_world_positions(grid, points)
            print(json.dumps({"player": player, "agents": agents}))

        if args.out:
            from maze_braid.viz.renderer import TileRenderer
            logger.info(f"Saving preview to {args.out}...")
            TileRenderer(grid).render_to_file(args.out, cell_size=args.cell_size)

    elif args.command == "tiles":
        from maze_braid.core.builder import build_maze
        from maze_braid.tiles.selector import select_tile

        try:
            settings = settings_from_args(args).validate()
        except ValueError as e:
            parser.error(str(e))
        grid, settings = build_maze(settings, diagonal_backend=args.diagonals)
        logger.info(f"Seed: {settings.seed}")
        counts = Counter(select_tile(value).archetype.value for value in grid.cells)

        print(f"\n{'ARCHETYPE':<28} | {'COUNT':<6}")
        print("-" * 37)
        for name, count in sorted(counts.items(), key=lambda item: (-item[1], item[0])):
            print(f"{name:<28} | {count:<6}")

    elif args.command == "benchmark":
        from maze_braid.core.grid import CellGrid
        from maze_braid.algo.growing_tree import GrowingTree
        from maze_braid.algo.diagonals import DiagonalResolver

        logger.info(f"Running Benchmark Suite (up to {args.size}x{args.size})...")
        sizes = sorted({s for s in (50, 100, 250, args.size) if s <= args.size})

        print(f"\n{'SIZE':<12} | {'GENERATE (s)':<12} | {'DIAGONALS (s)':<13} | {'CELLS/SEC':<12}")
        print("-" * 58)
        for size in sizes:
            grid = CellGrid(size, size)
            t0 = time.time()
            GrowingTree(grid, seed=123).run_all()
            t1 = time.time()
            DiagonalResolver(grid, backend=args.diagonals).resolve()
            t2 = time.time()
            rate = (size * size) / max(t2 - t0, 1e-9)
            print(f"{f'{size}x{size}':<12} | {t1 - t0:<12.4f} | {t2 - t1:<13.4f} | {rate:<12,.0f}")


if __name__ == "__main__":
    main()
