from config import load_config
from core.errors import SimulationStateError
from forest.grid import Grid
from forest.motion import MotionGenerator, Movement
from forest.persons import Person
from forest.state import StateSnapshot
from internal.logging import get_logger


class EngineState:
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class StopReason:
    COLOCATED = "colocated"
    LIMIT = "limit"
    MANUAL = "manual"
    FAILED = "failed"


class Simulation:
    """Two persons walking randomly in a forest until they meet.

    One step draws a motion for person A, then for person B, applies them
    in that order and counts the step. The simulation stops once both
    persons share a cell or the step count passes ``max_updates``, so a run
    never executes more than ``max_updates + 1`` steps.
    """

    def __init__(self, config=None, motion=None):
        self.config = config or load_config().simulation
        self._log = get_logger()
        self.movement = Movement.parse(self.config.movement)
        self.max_updates = self.config.max_updates
        self.grid = Grid(self.config.width, self.config.height)
        self.person_a = Person("person_a", self.grid, movement=self.movement)
        self.person_b = Person("person_b", self.grid, self.grid.width - 1, self.grid.height - 1,
                               movement=self.movement)
        self._injected_motion = motion
        self.motion = None
        self.step_count = 0
        self.stop_reason = None
        self._state = EngineState.IDLE

    @property
    def state(self):
        return self._state

    @property
    def running(self):
        return self._state == EngineState.RUNNING

    def reset(self, motion=None):
        """Back to Idle with both persons in their starting corners.

        An injected motion source is used up by a run, so it is dropped here;
        pass a fresh one as ``motion`` to replay it, otherwise the next run
        draws from the configured seed.
        """
        self._injected_motion = motion
        self.person_a.place(0, 0)
        self.person_b.place(self.grid.width - 1, self.grid.height - 1)
        self.motion = None
        self.step_count = 0
        self.stop_reason = None
        self._state = EngineState.IDLE
        self._log.info("simulation reset")

    def begin(self):
        """Idle -> Running. Builds the random source from the configured seed."""
        if self._state != EngineState.IDLE:
            raise SimulationStateError("simulation already started", state=self._state)
        self.motion = self._injected_motion or MotionGenerator(self.movement, seed=self.config.seed)
        self._state = EngineState.RUNNING
        self._log.info("simulation start", width=self.grid.width, height=self.grid.height,
                       movement=self.movement.value, seed=self.config.seed)
        # Degenerate 1x1 grid: both corners coincide
        if self.person_a.is_colocated_with(self.person_b):
            self._finish(StopReason.COLOCATED)

    def start(self):
        """Run to completion on the calling thread."""
        self.begin()
        while self.running:
            self.step()
        return self

    def stop(self):
        if self._state == EngineState.RUNNING:
            self._finish(StopReason.MANUAL)

    def step(self):
        """Execute one update. Returns True while the simulation keeps running."""
        if self._state != EngineState.RUNNING:
            raise SimulationStateError("step on a simulation that is not running", state=self._state)

        try:
            motion_a = self.motion.next_motion()
            motion_b = self.motion.next_motion()
            self.person_a.attempt_move(*motion_a)
            self.person_b.attempt_move(*motion_b)
        except Exception:
            self._finish(StopReason.FAILED)
            raise
        self.step_count += 1

        if self.person_a.is_colocated_with(self.person_b):
            self._finish(StopReason.COLOCATED)
        elif self.step_count > self.max_updates:
            self._finish(StopReason.LIMIT)
        return self.running

    def _finish(self, reason):
        self._state = EngineState.STOPPED
        self.stop_reason = reason
        self._log.info("simulation stop", updates=self.step_count, reason=reason,
                       person_a=self.person_a.position, person_b=self.person_b.position)

    def snapshot(self):
        return StateSnapshot(self.step_count, self.running, self.grid.width, self.grid.height,
                             [self.person_a.to_state(), self.person_b.to_state()])

    def status(self):
        return (f"[running: {self.running}, updates: {self.step_count}, "
                f"forest: [width: {self.grid.width}, height: {self.grid.height}, "
                f"person_a: {self.person_a}, person_b: {self.person_b}]]")

    __str__ = status
