import random
from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, Optional

# Random seeds are drawn from [1, 2**31 - 1)
SEED_RANGE = (1, 2**31 - 1)


@dataclass(frozen=True)
class MazeSettings:
    """
    Everything needed to rebuild a maze. Persisting these six values is
    enough to regenerate an identical grid.
    seed None (or 0) means "pick a random seed" when resolved.
    """
    width: int = 20
    height: int = 20
    seed: Optional[int] = None
    pick_last: float = 0.5
    open_dead_end: float = 0.5
    open_optional: float = 0.5

    def validate(self) -> "MazeSettings":
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive int, got {value!r}")
        if self.seed is not None and not (0 <= self.seed <= 0xFFFFFFFF):
            raise ValueError(f"seed must be an unsigned 32-bit value, got {self.seed}")
        for name in ("pick_last", "open_dead_end", "open_optional"):
            value = getattr(self, name)
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        return self

    @property
    def uses_random_seed(self) -> bool:
        return not self.seed

    def resolve_seed(self, entropy: Optional[random.Random] = None) -> "MazeSettings":
        """Copy with an explicit non-zero seed. Explicit seeds are kept as they are."""
        if not self.uses_random_seed:
            return self
        entropy = entropy or random.Random()
        return replace(self, seed=entropy.randrange(*SEED_RANGE))

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MazeSettings":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known).validate()
