import logging
from typing import Dict, Iterator, Optional, Tuple

import pygame

from maze_braid.core.flags import MazeFlags
from maze_braid.core.grid import CellGrid
from maze_braid.tiles.selector import Archetype, Tile, TILE_SHAPES, select_tile

logger = logging.getLogger(__name__)


class TileRenderer:
    """
    Top-down preview of a maze. Each cell is drawn by stamping the piece the
    tile selector picks for it, rotated like a placed game piece. North is up.
    """
    COLOR_BG = (10, 10, 10)
    COLOR_WALL = (200, 200, 200)
    COLOR_FLOOR = (60, 100, 160)  # Blue tint
    COLOR_UNVISITED = (30, 30, 30)

    def __init__(self, grid: CellGrid, steps: Optional[Iterator[str]] = None, width=1280, height=720):
        self.grid = grid
        self.steps = steps
        self.screen_width = width
        self.screen_height = height

        # Camera
        self.cell_size = 20.0  # Pixels per cell
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.zoom_speed = 1.1

        self._stamps: Dict[Tuple[Archetype, int, int], pygame.Surface] = {}
        self._stamp_size = 0

        self.font = None
        self.running = True
        self.clock = None
        self.surface = None
        self.finished = steps is None
        self.status = "Done" if self.finished else "Running"

    # -- Pieces -------------------------------------------------------------

    @classmethod
    def build_stamp(cls, archetype: Archetype, size: int) -> pygame.Surface:
        """Canonical (rotation 0) piece: floor, walls on closed sides, posts on uncut corners."""
        shape = TILE_SHAPES[archetype]
        t = max(1, size // 5)
        stamp = pygame.Surface((size, size))
        stamp.fill(cls.COLOR_FLOOR)

        walls = {
            MazeFlags.PASSAGE_N: (0, 0, size, t),
            MazeFlags.PASSAGE_S: (0, size - t, size, t),
            MazeFlags.PASSAGE_E: (size - t, 0, t, size),
            MazeFlags.PASSAGE_W: (0, 0, t, size),
        }
        for side, rect in walls.items():
            if not shape.sides & side:
                pygame.draw.rect(stamp, cls.COLOR_WALL, rect)

        posts = {
            MazeFlags.PASSAGE_NE: (size - t, 0, t, t),
            MazeFlags.PASSAGE_SE: (size - t, size - t, t, t),
            MazeFlags.PASSAGE_SW: (0, size - t, t, t),
            MazeFlags.PASSAGE_NW: (0, 0, t, t),
        }
        for corner, rect in posts.items():
            if not shape.corners & corner:
                pygame.draw.rect(stamp, cls.COLOR_WALL, rect)
        return stamp

    def stamp_for(self, tile: Tile, size: int) -> pygame.Surface:
        if size != self._stamp_size:
            self._stamps.clear()
            self._stamp_size = size
        key = (tile.archetype, tile.rotation, size)
        stamp = self._stamps.get(key)
        if stamp is None:
            # pygame rotates counter-clockwise; pieces turn clockwise
            stamp = pygame.transform.rotate(self.build_stamp(tile.archetype, size), -90 * tile.rotation)
            self._stamps[key] = stamp
        return stamp

    # -- Camera -------------------------------------------------------------

    def fit_to_screen(self):
        """Auto-adjust zoom and pan to fit the entire grid on screen with padding."""
        padding = 40
        available_w = self.screen_width - (padding * 2)
        available_h = self.screen_height - (padding * 2)

        self.cell_size = max(1.0, min(available_w / self.grid.width, available_h / self.grid.height))

        total_maze_w = self.grid.width * self.cell_size
        total_maze_h = self.grid.height * self.cell_size
        self.offset_x = (self.screen_width - total_maze_w) / 2
        self.offset_y = (self.screen_height - total_maze_h) / 2

    def cell_to_screen(self, x: int, y: int) -> Tuple[int, int]:
        # Grid y grows northwards, screen y grows downwards
        sx = x * self.cell_size + self.offset_x
        sy = (self.grid.height - 1 - y) * self.cell_size + self.offset_y
        return int(sx), int(sy)

    # -- Drawing ------------------------------------------------------------

    def draw_maze(self, surface: pygame.Surface):
        surface.fill(self.COLOR_BG)
        size = int(self.cell_size) + 1
        screen_w, screen_h = surface.get_size()

        # Culling: visible cell range
        start_x = max(0, int(-self.offset_x / self.cell_size))
        end_x = min(self.grid.width, int((screen_w - self.offset_x) / self.cell_size) + 1)
        top = int(-self.offset_y / self.cell_size)
        bottom = int((screen_h - self.offset_y) / self.cell_size) + 1
        start_y = max(0, self.grid.height - bottom)
        end_y = min(self.grid.height, self.grid.height - top)

        for y in range(start_y, end_y):
            for x in range(start_x, end_x):
                value = self.grid.cells[y * self.grid.width + x]
                px, py = self.cell_to_screen(x, y)
                if value == 0 and self.grid.length > 1:
                    # Not reached yet while generation is still running
                    pygame.draw.rect(surface, self.COLOR_UNVISITED, (px, py, size, size))
                    continue
                surface.blit(self.stamp_for(select_tile(value), size), (px, py))

    def render_to_surface(self, cell_size: int = 16) -> pygame.Surface:
        """Whole maze at a fixed cell size. Works without a display."""
        self.cell_size = float(cell_size)
        self.offset_x = self.offset_y = 0.0
        surface = pygame.Surface((self.grid.width * cell_size, self.grid.height * cell_size))
        self.draw_maze(surface)
        return surface

    def render_to_file(self, path: str, cell_size: int = 16):
        surface = self.render_to_surface(cell_size)
        pygame.image.save(surface, path)
        logger.info("Saved %dx%d preview to %s", surface.get_width(), surface.get_height(), path)

    # -- Window -------------------------------------------------------------

    def init_window(self):
        pygame.init()
        pygame.display.set_caption(f"Maze Braid - {self.grid.width}x{self.grid.height}")
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 16)
        self.fit_to_screen()

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.screen_width, self.screen_height = event.w, event.h

            elif event.type == pygame.KEYDOWN and event.key == pygame.K_f:
                self.fit_to_screen()

            elif event.type == pygame.MOUSEWHEEL:
                # Zoom towards mouse
                mx, my = pygame.mouse.get_pos()
                wx = (mx - self.offset_x) / self.cell_size
                wy = (my - self.offset_y) / self.cell_size

                if event.y > 0:
                    self.cell_size *= self.zoom_speed
                else:
                    self.cell_size /= self.zoom_speed
                # Stamps below 3px lose their walls
                self.cell_size = max(3.0, min(200.0, self.cell_size))

                self.offset_x = mx - wx * self.cell_size
                self.offset_y = my - wy * self.cell_size

            elif event.type == pygame.MOUSEMOTION:
                if pygame.mouse.get_pressed()[0] or pygame.mouse.get_pressed()[2]:
                    self.offset_x += event.rel[0]
                    self.offset_y += event.rel[1]

    def draw_hud(self):
        fps = int(self.clock.get_fps())
        cells = self.grid.width * self.grid.height
        info = [
            f"FPS: {fps}",
            f"Size: {self.grid.width}x{self.grid.height} ({cells:,})",
            f"Zoom: {self.cell_size:.2f}",
            f"Status: {self.status}",
        ]
        for i, text in enumerate(info):
            lbl = self.font.render(text, True, (255, 255, 255))
            self.surface.blit(lbl, (10, 10 + i * 20))

    def run_loop(self, steps_per_frame: int = 50):
        while self.running:
            self.handle_input()

            if not self.finished:
                try:
                    for _ in range(steps_per_frame):
                        self.status = next(self.steps)
                except StopIteration:
                    self.finished = True
                    self.status = "Done"

            self.draw_maze(self.surface)
            self.draw_hud()
            pygame.display.flip()
            self.clock.tick(60)

        pygame.quit()
