"""Pixel frames for the forest, one per published snapshot."""

import numpy as np

from forest.state import StateSnapshot
from internal.logging import get_logger

STOP_KINDS = ("engine_stopped", "engine_failed")


class FrameRenderer:
    """Colour-codes a snapshot into an RGB image of shape (H*cell, W*cell, 3)."""

    FOREST = (34, 96, 48)
    PERSON_A = (66, 135, 245)
    PERSON_B = (235, 64, 52)
    TOGETHER = (250, 210, 60)

    def __init__(self, cell_size=8):
        self.cell_size = cell_size

    def render(self, snapshot):
        cell = self.cell_size
        frame = np.empty((snapshot.height * cell, snapshot.width * cell, 3), dtype=np.uint8)
        frame[:, :] = self.FOREST

        person_a, person_b = snapshot.persons
        if snapshot.together:
            self._paint(frame, person_a.x, person_a.y, self.TOGETHER)
        else:
            self._paint(frame, person_a.x, person_a.y, self.PERSON_A)
            self._paint(frame, person_b.x, person_b.y, self.PERSON_B)
        return frame

    def _paint(self, frame, x, y, color):
        cell = self.cell_size
        frame[y * cell:(y + 1) * cell, x * cell:(x + 1) * cell] = color


class FramePresenter:
    """Presentation activity: renders every snapshot published on the bus.

    Runs until the stepping side announces that it stopped or failed.
    """

    def __init__(self, renderer=None, name="presenter", queue_size=100):
        self.renderer = renderer or FrameRenderer()
        self.name = name
        self.queue_size = queue_size
        self.frames = 0
        self.last_frame = None
        self.last_snapshot = None
        self._bus = None
        self._sub = None
        self._log = get_logger()

    async def attach(self, bus):
        """Subscribe before the runner starts so no snapshot is missed."""
        self._bus = bus
        self._sub = await bus.subscribe(self.name, max_queue_size=self.queue_size)

    async def run(self):
        try:
            while True:
                item = await self._sub.queue.get()
                if isinstance(item, StateSnapshot):
                    self.last_frame = self.renderer.render(item)
                    self.last_snapshot = item
                    self.frames += 1
                elif item.get("kind") in STOP_KINDS:
                    break
        finally:
            await self._bus.unsubscribe(self.name)
        self._log.debug("presenter done", frames=self.frames)
        return self.last_snapshot
