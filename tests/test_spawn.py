import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_braid.core.grid import CellGrid
from maze_braid.game.spawn import choose_spawn_points, spawn_world_positions

class TestSpawn(unittest.TestCase):
    def test_player_next_to_centre(self):
        grid = CellGrid(20, 12)
        points = choose_spawn_points(grid, agent_count=3, seed=1)
        self.assertEqual(points.player, (10, 6))
        player, _ = spawn_world_positions(grid, points)
        self.assertEqual(player, (1.0, 0.0, 1.0))

    def test_agents_inside_grid(self):
        grid = CellGrid(7, 3)
        for seed in range(20):
            points = choose_spawn_points(grid, agent_count=6, seed=seed)
            self.assertEqual(len(points.agents), 6)
            for x, y in points.agents:
                self.assertTrue(grid.coordinates_valid(x, y))

    def test_tiny_grid(self):
        grid = CellGrid(1, 1)
        points = choose_spawn_points(grid, agent_count=2, seed=1)
        self.assertEqual(points.player, (0, 0))
        self.assertEqual(points.agents, [(0, 0), (0, 0)])

    def test_deterministic(self):
        grid = CellGrid(16, 16)
        self.assertEqual(choose_spawn_points(grid, 4, seed=99), choose_spawn_points(grid, 4, seed=99))

    def test_no_agents(self):
        self.assertEqual(choose_spawn_points(CellGrid(4, 4), 0).agents, [])

    def test_negative_count(self):
        with self.assertRaises(ValueError):
            choose_spawn_points(CellGrid(4, 4), -1)

    def test_world_positions(self):
        grid = CellGrid(4, 4)
        points = choose_spawn_points(grid, 1, seed=3)
        player, agents = spawn_world_positions(grid, points, elevation=0.5)
        self.assertEqual(player, (1.0, 0.5, 1.0))
        self.assertEqual(agents, [grid.coordinates_to_world_position(*points.agents[0], 0.5)])

if __name__ == '__main__':
    unittest.main()
