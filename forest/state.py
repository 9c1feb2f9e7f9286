from utils.ids import format_timestamp, generate_ksuid


class PersonState:
    __slots__ = ("id", "x", "y")

    def __init__(self, id, x, y):
        self.id, self.x, self.y = id, x, y

    def to_dict(self):
        return {"id": self.id, "x": self.x, "y": self.y}


class StateSnapshot:
    """Committed simulation state between two steps.

    Everything a presenter needs to draw a frame: grid size, both persons
    and whether they share a cell.
    """

    __slots__ = ("id", "timestamp", "tick", "running", "width", "height", "persons")

    def __init__(self, tick, running, width, height, persons, id=None, timestamp=None):
        self.id = id or generate_ksuid()
        self.timestamp = timestamp or format_timestamp()
        self.tick = tick
        self.running = running
        self.width = width
        self.height = height
        self.persons = tuple(persons)

    @property
    def together(self):
        first, second = self.persons
        return first.x == second.x and first.y == second.y

    def to_dict(self):
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "tick": self.tick,
            "running": self.running,
            "width": self.width,
            "height": self.height,
            "together": self.together,
            "persons": [person.to_dict() for person in self.persons],
        }
