from enum import IntFlag


class MazeFlags(IntFlag):
    """
    Passage bits of a single cell.
    Low nibble = orthogonal passages (carved by the generator).
    High nibble = diagonal passages (derived afterwards, never carved).
    """
    EMPTY = 0

    PASSAGE_N = 0b0000_0001
    PASSAGE_E = 0b0000_0010
    PASSAGE_S = 0b0000_0100
    PASSAGE_W = 0b0000_1000
    PASSAGES_STRAIGHT = 0b0000_1111

    PASSAGE_NE = 0b0001_0000
    PASSAGE_SE = 0b0010_0000
    PASSAGE_SW = 0b0100_0000
    PASSAGE_NW = 0b1000_0000
    PASSAGES_DIAGONAL = 0b1111_0000

    def has_all(self, mask) -> bool:
        return (self & mask) == mask

    def has_any(self, mask) -> bool:
        return (self & mask) != 0

    def has_exactly_one(self) -> bool:
        value = int(self)
        return value != 0 and (value & (value - 1)) == 0

    def with_(self, mask) -> "MazeFlags":
        return MazeFlags(int(self) | int(mask))

    def without(self, mask) -> "MazeFlags":
        return MazeFlags(int(self) & ~int(mask) & 0xFF)

    def straight(self) -> "MazeFlags":
        return MazeFlags(int(self) & 0x0F)

    def diagonal(self) -> "MazeFlags":
        return MazeFlags(int(self) & 0xF0)

    def rotated_diagonal(self, rotation: int) -> "MazeFlags":
        """
        Diagonal bits turned `rotation` quarter turns counter-clockwise,
        i.e. expressed in the frame of a piece that was rotated clockwise
        by `rotation` to reach this cell. NE -> NW -> SW -> SE -> NE.
        """
        bits = (int(self) & 0xF0) >> 4
        rotation &= 3
        bits = ((bits >> rotation) | (bits << (4 - rotation))) & 0x0F
        return MazeFlags(bits << 4)


# Orthogonal directions in rotation order (index = quarter turns from North)
DIRECTIONS = (
    MazeFlags.PASSAGE_N,
    MazeFlags.PASSAGE_E,
    MazeFlags.PASSAGE_S,
    MazeFlags.PASSAGE_W,
)

# Corners in rotation order (index = quarter turns from NE)
CORNERS = (
    MazeFlags.PASSAGE_NE,
    MazeFlags.PASSAGE_SE,
    MazeFlags.PASSAGE_SW,
    MazeFlags.PASSAGE_NW,
)

OPPOSITE = {
    MazeFlags.PASSAGE_N: MazeFlags.PASSAGE_S,
    MazeFlags.PASSAGE_S: MazeFlags.PASSAGE_N,
    MazeFlags.PASSAGE_E: MazeFlags.PASSAGE_W,
    MazeFlags.PASSAGE_W: MazeFlags.PASSAGE_E,
}

# North is +y
DX = {MazeFlags.PASSAGE_N: 0, MazeFlags.PASSAGE_S: 0, MazeFlags.PASSAGE_E: 1, MazeFlags.PASSAGE_W: -1}
DY = {MazeFlags.PASSAGE_N: 1, MazeFlags.PASSAGE_S: -1, MazeFlags.PASSAGE_E: 0, MazeFlags.PASSAGE_W: 0}

# Corner -> the two orthogonal passages it joins
CORNER_SIDES = {
    MazeFlags.PASSAGE_NE: MazeFlags.PASSAGE_N | MazeFlags.PASSAGE_E,
    MazeFlags.PASSAGE_SE: MazeFlags.PASSAGE_S | MazeFlags.PASSAGE_E,
    MazeFlags.PASSAGE_SW: MazeFlags.PASSAGE_S | MazeFlags.PASSAGE_W,
    MazeFlags.PASSAGE_NW: MazeFlags.PASSAGE_N | MazeFlags.PASSAGE_W,
}
