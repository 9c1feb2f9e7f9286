import random
from enum import Enum


class Movement(Enum):
    """How a person may move in one step."""

    FREE = "free"  # both axes at once, diagonals allowed
    AXIS = "axis"  # at most one axis per step

    @classmethod
    def parse(cls, value):
        return value if isinstance(value, cls) else cls(str(value).lower())


class MotionGenerator:
    """Draws motion vectors for one simulation from an owned random source.

    Every component is uniform over {-1, 0, 1}. Under AXIS movement a fair
    coin first picks the axis and the other component is 0.
    """

    def __init__(self, movement=Movement.FREE, rng=None, seed=None):
        self.movement = Movement.parse(movement)
        self.rng = rng if rng is not None else random.Random(seed)

    def next_motion(self):
        rng = self.rng
        if self.movement is Movement.FREE:
            return rng.randint(-1, 1), rng.randint(-1, 1)
        if rng.random() < 0.5:
            return rng.randint(-1, 1), 0
        return 0, rng.randint(-1, 1)
