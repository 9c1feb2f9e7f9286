"""Grid defines the forest boundaries."""

from core.errors import GridError


class Grid:
    """Forest of width x height cells with the origin at (0, 0). Immutable."""

    __slots__ = ("_width", "_height")

    def __init__(self, width, height):
        if width <= 0 or height <= 0:
            raise GridError(f"grid must be positive, got {width}x{height}", width=width, height=height)
        self._width = width
        self._height = height

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    def contains(self, x, y):
        """True iff (x, y) lies in [0, width) x [0, height)."""
        return 0 <= x < self._width and 0 <= y < self._height

    def __str__(self):
        return f"[width: {self._width}, height: {self._height}]"
