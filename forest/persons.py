from core.errors import GridError, InvalidMotionError
from forest.motion import Movement
from forest.state import PersonState


class Person:
    """A walker holding an integer cell inside the forest grid."""

    def __init__(self, id, grid, x=0, y=0, movement=Movement.FREE):
        self.id = id
        self.grid = grid
        self.movement = Movement.parse(movement)
        self.place(x, y)

    @property
    def position(self):
        return self.x, self.y

    def place(self, x, y):
        if not self.grid.contains(x, y):
            raise GridError(f"{self.id} placed outside grid at ({x}, {y})",
                            width=self.grid.width, height=self.grid.height)
        self.x = x
        self.y = y

    def attempt_move(self, motion_x, motion_y):
        """Move by the motion vector if the target cell is inside the grid.

        Moves that would leave the grid are dropped and the person stays put.
        Returns True when the move was committed.
        """
        if self.movement is Movement.AXIS and motion_x and motion_y:
            raise InvalidMotionError(motion_x, motion_y, person_id=self.id)

        new_x = self.x + motion_x
        new_y = self.y + motion_y
        if not self.grid.contains(new_x, new_y):
            return False
        self.x = new_x
        self.y = new_y
        return True

    def is_colocated_with(self, other):
        return self.x == other.x and self.y == other.y

    def to_state(self):
        """Immutable copy for snapshots."""
        return PersonState(self.id, self.x, self.y)

    def __str__(self):
        return f"[x: {self.x}, y: {self.y}]"
