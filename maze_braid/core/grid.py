from array import array
from typing import Iterator, Tuple

from maze_braid.core.flags import MazeFlags, OPPOSITE, DX, DY


class MazeInvariantError(RuntimeError):
    """Raised when generation leaves the grid in a state that should be impossible."""


class CellGrid:
    # Neighbor enumeration order. Generation draws depend on it.
    NEIGHBOR_ORDER = (
        MazeFlags.PASSAGE_E,
        MazeFlags.PASSAGE_W,
        MazeFlags.PASSAGE_N,
        MazeFlags.PASSAGE_S,
    )

    __slots__ = ('width', 'height', 'cells')

    def __init__(self, width: int, height: int):
        if not isinstance(width, int) or not isinstance(height, int):
            raise TypeError(f"Grid dimensions must be ints, got {width!r}x{height!r}")
        if width < 1 or height < 1:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        # All passages closed; 'B' (unsigned char) -> 1 byte per cell
        self.cells = array('B', bytes(width * height))

    @property
    def length(self) -> int:
        return len(self.cells)

    # Row steps: North moves one row up (+width)
    @property
    def step_n(self) -> int:
        return self.width

    @property
    def step_e(self) -> int:
        return 1

    @property
    def step_s(self) -> int:
        return -self.width

    @property
    def step_w(self) -> int:
        return -1

    def _check_index(self, index: int):
        if not (0 <= index < len(self.cells)):
            raise IndexError(f"Cell index {index} out of bounds [0, {len(self.cells)})")

    def get(self, index: int) -> MazeFlags:
        self._check_index(index)
        return MazeFlags(self.cells[index])

    def set(self, index: int, mask) -> MazeFlags:
        self._check_index(index)
        self.cells[index] |= int(mask)
        return MazeFlags(self.cells[index])

    def unset(self, index: int, mask) -> MazeFlags:
        self._check_index(index)
        self.cells[index] &= ~int(mask) & 0xFF
        return MazeFlags(self.cells[index])

    def is_empty(self, index: int) -> bool:
        self._check_index(index)
        return self.cells[index] == 0

    def index_to_coordinates(self, index: int) -> Tuple[int, int]:
        self._check_index(index)
        y = index // self.width
        return index - y * self.width, y

    def coordinates_valid(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def coordinates_to_index(self, x: int, y: int) -> int:
        if self.coordinates_valid(x, y):
            return y * self.width + x
        raise IndexError(f"Coordinate ({x}, {y}) out of bounds")

    def coordinates_to_world_position(self, x: int, y: int, elevation: float = 0.0) -> Tuple[float, float, float]:
        """
        Centre of cell (x, y) in world units. Cells are 2 units wide and the
        maze is centred on the origin, so the result is (right, up, forward).
        """
        if not self.coordinates_valid(x, y):
            raise IndexError(f"Coordinate ({x}, {y}) out of bounds")
        return (
            2.0 * x + 1.0 - self.width,
            elevation,
            2.0 * y + 1.0 - self.height,
        )

    def index_to_world_position(self, index: int, elevation: float = 0.0) -> Tuple[float, float, float]:
        return self.coordinates_to_world_position(*self.index_to_coordinates(index), elevation)

    def neighbor_index(self, index: int, direction: MazeFlags) -> int:
        """Index of the orthogonal neighbor in `direction`. Raises IndexError at the border."""
        x, y = self.index_to_coordinates(index)
        try:
            nx, ny = x + DX[direction], y + DY[direction]
        except KeyError:
            raise ValueError(f"Not an orthogonal direction: {direction!r}") from None
        return self.coordinates_to_index(nx, ny)

    def neighbors(self, index: int) -> Iterator[Tuple[int, MazeFlags]]:
        """
        Yields (neighbor_index, direction_to_neighbor) for all valid grid neighbors,
        in NEIGHBOR_ORDER. Does NOT check passages.
        """
        x, y = self.index_to_coordinates(index)
        if x + 1 < self.width:
            yield (index + self.step_e, MazeFlags.PASSAGE_E)
        if x > 0:
            yield (index + self.step_w, MazeFlags.PASSAGE_W)
        if y + 1 < self.height:
            yield (index + self.step_n, MazeFlags.PASSAGE_N)
        if y > 0:
            yield (index + self.step_s, MazeFlags.PASSAGE_S)

    def open_passage(self, index: int, direction: MazeFlags) -> int:
        """
        Opens the passage from `index` towards `direction` and the reciprocal
        passage on the neighbor. Returns the neighbor index.
        """
        neighbor = self.neighbor_index(index, direction)
        self.cells[index] |= int(direction)
        self.cells[neighbor] |= int(OPPOSITE[direction])
        return neighbor

    def has_passage(self, index: int, direction: MazeFlags) -> bool:
        return self.get(index).has_all(direction)

    def open_neighbors(self, index: int) -> Iterator[int]:
        """Yields indices of neighbors reachable through an open orthogonal passage."""
        cell = self.get(index)
        for neighbor, direction in self.neighbors(index):
            if cell & direction:
                yield neighbor

    def tobytes(self) -> bytes:
        return self.cells.tobytes()

    def __len__(self) -> int:
        return len(self.cells)

    def __repr__(self) -> str:
        return f"CellGrid({self.width}x{self.height})"
