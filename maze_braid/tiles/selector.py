"""
Cell flags -> visual piece.

Every piece is authored facing a canonical direction and placed with a
clockwise quarter-turn rotation. The full 8-bit flag space is classified once
at import into TILE_TABLE, so a lookup can never fall through.
"""
from enum import Enum
from typing import Callable, Dict, NamedTuple, Tuple

from maze_braid.core.flags import MazeFlags, DIRECTIONS, CORNERS

N = MazeFlags.PASSAGE_N
E = MazeFlags.PASSAGE_E
S = MazeFlags.PASSAGE_S
W = MazeFlags.PASSAGE_W
NE = MazeFlags.PASSAGE_NE
SE = MazeFlags.PASSAGE_SE
SW = MazeFlags.PASSAGE_SW
NW = MazeFlags.PASSAGE_NW


class Archetype(Enum):
    ISOLATED = "isolated"
    DEAD_END = "dead_end"
    STRAIGHT = "straight"
    CORNER_CLOSED = "corner_closed"
    CORNER_OPEN = "corner_open"
    T_CLOSED = "t_junction_closed"
    T_CLOSED_RIGHT = "t_junction_closed_right"
    T_CLOSED_LEFT = "t_junction_closed_left"
    T_OPEN = "t_junction_open"
    X_CLOSED = "x_junction_closed"
    X_TRIPLE = "x_junction_triple"
    X_DOUBLE_STRAIGHT = "x_junction_double_straight"
    X_DOUBLE_DIAGONAL = "x_junction_double_diagonal"
    X_SINGLE = "x_junction_single"
    X_OPEN = "x_junction_open"


class Tile(NamedTuple):
    archetype: Archetype
    rotation: int


class TileShape(NamedTuple):
    """Open sides and cut corners of a piece at rotation 0."""
    sides: MazeFlags
    corners: MazeFlags


# Canonical frames:
#   dead end opens North, straight runs N-S, corner joins N-E,
#   T junction is closed on the North side, X junction variants start at NE.
TILE_SHAPES: Dict[Archetype, TileShape] = {
    Archetype.ISOLATED: TileShape(MazeFlags.EMPTY, MazeFlags.EMPTY),
    Archetype.DEAD_END: TileShape(N, MazeFlags.EMPTY),
    Archetype.STRAIGHT: TileShape(N | S, MazeFlags.EMPTY),
    Archetype.CORNER_CLOSED: TileShape(N | E, MazeFlags.EMPTY),
    Archetype.CORNER_OPEN: TileShape(N | E, NE),
    Archetype.T_CLOSED: TileShape(E | S | W, MazeFlags.EMPTY),
    Archetype.T_CLOSED_RIGHT: TileShape(E | S | W, SE),
    Archetype.T_CLOSED_LEFT: TileShape(E | S | W, SW),
    Archetype.T_OPEN: TileShape(E | S | W, SE | SW),
    Archetype.X_CLOSED: TileShape(N | E | S | W, MazeFlags.EMPTY),
    Archetype.X_TRIPLE: TileShape(N | E | S | W, NE),
    Archetype.X_DOUBLE_STRAIGHT: TileShape(N | E | S | W, NE | SE),
    Archetype.X_DOUBLE_DIAGONAL: TileShape(N | E | S | W, NE | SW),
    Archetype.X_SINGLE: TileShape(N | E | S | W, SE | SW | NW),
    Archetype.X_OPEN: TileShape(N | E | S | W, NE | SE | SW | NW),
}


def _corner(flags: MazeFlags, rotation: int) -> Tile:
    joining = CORNERS[rotation]
    if flags.has_all(joining):
        return Tile(Archetype.CORNER_OPEN, rotation)
    return Tile(Archetype.CORNER_CLOSED, rotation)


def _t_junction(flags: MazeFlags, rotation: int) -> Tile:
    # Only the two corners away from the closed side can ever be cut
    canonical = flags.rotated_diagonal(rotation) & (SE | SW)
    if canonical == 0:
        return Tile(Archetype.T_CLOSED, rotation)
    if canonical == SE:
        return Tile(Archetype.T_CLOSED_RIGHT, rotation)
    if canonical == SW:
        return Tile(Archetype.T_CLOSED_LEFT, rotation)
    return Tile(Archetype.T_OPEN, rotation)


_X_JUNCTIONS: Dict[int, Tile] = {
    0: Tile(Archetype.X_CLOSED, 0),

    NE: Tile(Archetype.X_TRIPLE, 0),
    SE: Tile(Archetype.X_TRIPLE, 1),
    SW: Tile(Archetype.X_TRIPLE, 2),
    NW: Tile(Archetype.X_TRIPLE, 3),

    NE | SE: Tile(Archetype.X_DOUBLE_STRAIGHT, 0),
    SE | SW: Tile(Archetype.X_DOUBLE_STRAIGHT, 1),
    SW | NW: Tile(Archetype.X_DOUBLE_STRAIGHT, 2),
    NW | NE: Tile(Archetype.X_DOUBLE_STRAIGHT, 3),

    NE | SW: Tile(Archetype.X_DOUBLE_DIAGONAL, 0),
    SE | NW: Tile(Archetype.X_DOUBLE_DIAGONAL, 1),

    SE | SW | NW: Tile(Archetype.X_SINGLE, 0),
    NE | SW | NW: Tile(Archetype.X_SINGLE, 1),
    NE | SE | NW: Tile(Archetype.X_SINGLE, 2),
    NE | SE | SW: Tile(Archetype.X_SINGLE, 3),

    NE | SE | SW | NW: Tile(Archetype.X_OPEN, 0),
}


def _x_junction(flags: MazeFlags) -> Tile:
    return _X_JUNCTIONS[int(flags.diagonal())]


# One entry per orthogonal combination
_DISPATCH: Dict[int, Callable[[MazeFlags], Tile]] = {
    # Stands in for the closed X junction (X_CLOSED, 0) the Unity prefab
    # lookup falls through to when a cell has no orthogonal passage
    0: lambda f: Tile(Archetype.ISOLATED, 0),

    N: lambda f: Tile(Archetype.DEAD_END, 0),
    E: lambda f: Tile(Archetype.DEAD_END, 1),
    S: lambda f: Tile(Archetype.DEAD_END, 2),
    W: lambda f: Tile(Archetype.DEAD_END, 3),

    N | S: lambda f: Tile(Archetype.STRAIGHT, 0),
    E | W: lambda f: Tile(Archetype.STRAIGHT, 1),

    N | E: lambda f: _corner(f, 0),
    E | S: lambda f: _corner(f, 1),
    S | W: lambda f: _corner(f, 2),
    W | N: lambda f: _corner(f, 3),

    # rotation = the missing side
    E | S | W: lambda f: _t_junction(f, 0),
    N | S | W: lambda f: _t_junction(f, 1),
    N | E | W: lambda f: _t_junction(f, 2),
    N | E | S: lambda f: _t_junction(f, 3),

    N | E | S | W: _x_junction,
}


def _classify(value: int) -> Tile:
    flags = MazeFlags(value)
    return _DISPATCH[int(flags.straight())](flags)


def _build_table() -> Tuple[Tile, ...]:
    if len(_DISPATCH) != 16 or len(_X_JUNCTIONS) != 16:
        raise RuntimeError("Tile dispatch does not cover every flag combination")
    return tuple(_classify(value) for value in range(256))


TILE_TABLE: Tuple[Tile, ...] = _build_table()


def select_tile(flags) -> Tile:
    value = int(flags)
    if not (0 <= value <= 0xFF):
        raise ValueError(f"Cell flags must fit in 8 bits, got {value}")
    return TILE_TABLE[value]


def rotate_sides(sides: MazeFlags, rotation: int) -> MazeFlags:
    """Orthogonal bits turned `rotation` quarter turns clockwise (N -> E)."""
    result = MazeFlags.EMPTY
    for i, direction in enumerate(DIRECTIONS):
        if sides & direction:
            result |= DIRECTIONS[(i + rotation) % 4]
    return result


def rotate_corners(corners: MazeFlags, rotation: int) -> MazeFlags:
    """Diagonal bits turned `rotation` quarter turns clockwise (NE -> SE)."""
    result = MazeFlags.EMPTY
    for i, corner in enumerate(CORNERS):
        if corners & corner:
            result |= CORNERS[(i + rotation) % 4]
    return result


def placed_shape(tile: Tile) -> TileShape:
    """The piece's open sides and corners after applying its rotation."""
    shape = TILE_SHAPES[tile.archetype]
    return TileShape(rotate_sides(shape.sides, tile.rotation),
                     rotate_corners(shape.corners, tile.rotation))
