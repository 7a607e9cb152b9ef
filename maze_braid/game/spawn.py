import random
from typing import List, NamedTuple, Optional, Tuple

from maze_braid.core.grid import CellGrid


class SpawnPoints(NamedTuple):
    player: Tuple[int, int]
    agents: List[Tuple[int, int]]


def player_cell(grid: CellGrid) -> Tuple[int, int]:
    """Cell under world position (1, 0, 1), the one just north-east of the maze centre."""
    return grid.width // 2, grid.height // 2


def choose_spawn_points(grid: CellGrid, agent_count: int, seed: Optional[int] = None) -> SpawnPoints:
    """
    Player starts at the centre cell, each agent on a uniformly random cell.
    Agents may share a cell with each other or with the player.
    """
    if agent_count < 0:
        raise ValueError(f"agent_count must be >= 0, got {agent_count}")
    rng = random.Random(seed)
    agents = [(rng.randrange(grid.width), rng.randrange(grid.height)) for _ in range(agent_count)]
    return SpawnPoints(player_cell(grid), agents)


def spawn_world_positions(grid: CellGrid, points: SpawnPoints, elevation: float = 0.0):
    """World-space centres for the player and each agent."""
    player = grid.coordinates_to_world_position(*points.player, elevation)
    agents = [grid.coordinates_to_world_position(x, y, elevation) for x, y in points.agents]
    return player, agents
