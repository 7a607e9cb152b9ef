import unittest
import sys
import os
import random

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_braid.core.settings import MazeSettings, SEED_RANGE
from maze_braid.core.builder import build_maze, build_steps, create_generator
from maze_braid.core.complexity import MazePostProcessor
from maze_braid.main import ascii_maze

class TestSettings(unittest.TestCase):
    def test_defaults(self):
        settings = MazeSettings()
        self.assertEqual((settings.width, settings.height), (20, 20))
        self.assertEqual((settings.pick_last, settings.open_dead_end, settings.open_optional), (0.5, 0.5, 0.5))
        self.assertTrue(settings.uses_random_seed)
        self.assertIs(settings.validate(), settings)

    def test_validation(self):
        bad = [
            MazeSettings(width=0),
            MazeSettings(height=-2),
            MazeSettings(width=True),
            MazeSettings(seed=2**32),
            MazeSettings(seed=-1),
            MazeSettings(pick_last=1.01),
            MazeSettings(open_dead_end=-0.5),
            MazeSettings(open_optional=2.0),
        ]
        for settings in bad:
            with self.assertRaises(ValueError, msg=repr(settings)):
                settings.validate()

    def test_resolve_seed(self):
        explicit = MazeSettings(seed=77)
        self.assertIs(explicit.resolve_seed(), explicit)

        a = MazeSettings().resolve_seed(random.Random(5))
        b = MazeSettings(seed=0).resolve_seed(random.Random(5))
        self.assertEqual(a.seed, b.seed)
        self.assertTrue(SEED_RANGE[0] <= a.seed < SEED_RANGE[1])
        self.assertFalse(a.uses_random_seed)

    def test_dict_round_trip(self):
        settings = MazeSettings(width=8, height=3, seed=9, pick_last=1.0, open_dead_end=0.0, open_optional=0.25)
        data = settings.as_dict()
        self.assertEqual(set(data), {"width", "height", "seed", "pick_last", "open_dead_end", "open_optional"})
        self.assertEqual(MazeSettings.from_dict(dict(data, extra="ignored")), settings)
        with self.assertRaises(ValueError):
            MazeSettings.from_dict({"width": 0})


class TestBuilder(unittest.TestCase):
    def test_build_maze(self):
        settings = MazeSettings(width=12, height=9, seed=31337)
        grid, used = build_maze(settings)
        self.assertEqual(used, settings)
        self.assertEqual((grid.width, grid.height), (12, 9))
        self.assertEqual(len(MazePostProcessor.reachable_cells(grid)), 12 * 9)
        self.assertEqual(MazePostProcessor.find_asymmetric_passages(grid), [])

    def test_same_settings_same_maze(self):
        settings = MazeSettings(width=15, height=15, seed=4, pick_last=0.2, open_dead_end=0.8, open_optional=0.1)
        first, _ = build_maze(settings)
        second, _ = build_maze(settings, diagonal_backend="serial")
        self.assertEqual(first.tobytes(), second.tobytes())

    def test_random_seed_is_reported(self):
        grid, used = build_maze(MazeSettings(width=10, height=10), entropy=random.Random(1))
        again, _ = build_maze(used)
        self.assertEqual(grid.tobytes(), again.tobytes())

    def test_generator_needs_seed(self):
        with self.assertRaises(ValueError):
            create_generator(MazeSettings())

    def test_build_steps(self):
        generator = create_generator(MazeSettings(width=20, height=20, seed=6))
        statuses = list(build_steps(generator))
        self.assertEqual(statuses[-2:], ["Done", "Resolved"])
        grid, _ = build_maze(MazeSettings(width=20, height=20, seed=6))
        self.assertEqual(generator.grid.tobytes(), grid.tobytes())

    def test_ascii(self):
        grid, _ = build_maze(MazeSettings(width=2, height=1, seed=3))
        self.assertEqual(ascii_maze(grid), "+---+---+\n|       |\n+---+---+")

if __name__ == '__main__':
    unittest.main()
