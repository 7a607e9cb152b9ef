from dataclasses import dataclass
from typing import Tuple

MASK32 = 0xFFFFFFFF


def xorshift_next(state: int) -> int:
    state ^= (state << 13) & MASK32
    state ^= state >> 17
    state ^= (state << 5) & MASK32
    return state


@dataclass(frozen=True)
class XorShift32:
    """
    32-bit xorshift generator with value semantics.

    Every draw returns (value, next_generator); the instance itself never
    changes, so the generator state has to be threaded through the caller.
    This keeps the draw order explicit, which is what makes a seed reproduce
    the same maze.
    """
    state: int

    @classmethod
    def from_seed(cls, seed: int) -> "XorShift32":
        if not isinstance(seed, int) or isinstance(seed, bool):
            raise TypeError(f"Seed must be an int, got {type(seed).__name__}")
        if not (0 < seed <= MASK32):
            raise ValueError(f"Seed must be a non-zero unsigned 32-bit value, got {seed}")
        # The constructor discards the first output
        return cls(xorshift_next(seed))

    def next_uint(self) -> Tuple[int, "XorShift32"]:
        # Returns the pre-advance state
        return self.state, XorShift32(xorshift_next(self.state))

    def next_float(self) -> Tuple[float, "XorShift32"]:
        """Uniform float in [0, 1) with 23 bits of precision."""
        value, rng = self.next_uint()
        return (value >> 9) / 8388608.0, rng

    def next_int(self, low: int, high: int = None) -> Tuple[int, "XorShift32"]:
        """
        Uniform int in [low, high). With a single argument the range is [0, low).
        An empty range returns `low` but still consumes a draw.
        """
        if high is None:
            low, high = 0, low
        if high < low:
            raise ValueError(f"Empty range [{low}, {high})")
        value, rng = self.next_uint()
        return ((value * (high - low)) >> 32) + low, rng
