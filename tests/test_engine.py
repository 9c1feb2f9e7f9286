"""Unit tests for the synchronous Simulation engine."""

import pytest
from config import SimulationConfig
from core.errors import InvalidMotionError, SimulationStateError
from forest.engine import EngineState, Simulation, StopReason
from forest.state import StateSnapshot


class TestSimulation:
    """Tests for Simulation class."""

    def test_simulation_creation(self, simulation):
        """Simulation starts idle with persons in opposite corners."""
        assert simulation.state == EngineState.IDLE
        assert simulation.running is False
        assert simulation.step_count == 0
        assert simulation.person_a.position == (0, 0)
        assert simulation.person_b.position == (5, 4)

    def test_start_runs_to_completion(self, simulation):
        """start() blocks until the simulation stopped."""
        simulation.start()
        assert simulation.state == EngineState.STOPPED
        assert simulation.running is False
        assert simulation.step_count >= 1

    def test_stops_when_colocated(self, simulation):
        """A normal run ends with both persons on the same cell."""
        simulation.start()
        assert simulation.stop_reason == StopReason.COLOCATED
        assert simulation.person_a.is_colocated_with(simulation.person_b)

    @pytest.mark.parametrize("movement", ["free", "axis"])
    def test_seeded_runs_are_identical(self, movement):
        """Same dimensions and seed give the same result."""
        results = []
        for _ in range(2):
            sim = Simulation(SimulationConfig(width=12, height=9, seed=2024, movement=movement)).start()
            results.append((sim.step_count, sim.person_a.position, sim.person_b.position))
        assert results[0] == results[1]

    def test_axis_movement_runs(self):
        """Axis-constrained simulation never trips the motion precondition."""
        for seed in range(20):
            sim = Simulation(SimulationConfig(width=4, height=4, seed=seed, movement="axis")).start()
            assert sim.state == EngineState.STOPPED

    @pytest.mark.parametrize("limit", [0, 1, 25])
    def test_step_limit(self, limit):
        """A run never executes more than max_updates + 1 steps."""
        sim = Simulation(SimulationConfig(width=50, height=50, seed=1, max_updates=limit)).start()
        assert sim.running is False
        assert sim.step_count <= limit + 1
        if sim.stop_reason == StopReason.LIMIT:
            assert sim.step_count == limit + 1

    def test_scripted_meeting(self, scripted):
        """On 2x2, A moves to (1,0) then B moves to (1,0) and the run stops."""
        motion = scripted([(1, 0), (0, -1)])
        sim = Simulation(SimulationConfig(width=2, height=2), motion=motion)
        sim.begin()
        assert sim.step() is False
        assert sim.person_a.position == (1, 0)
        assert sim.person_b.position == (1, 0)
        assert sim.person_a.is_colocated_with(sim.person_b)
        assert sim.state == EngineState.STOPPED
        assert sim.step_count == 1
        assert sim.stop_reason == StopReason.COLOCATED

    def test_motion_order_a_then_b(self, scripted):
        """The first drawn motion belongs to person A."""
        motion = scripted([(1, 1), (-1, 0)])
        sim = Simulation(SimulationConfig(width=5, height=5), motion=motion)
        sim.begin()
        sim.step()
        assert sim.person_a.position == (1, 1)
        assert sim.person_b.position == (3, 4)
        assert motion.drawn == 2

    def test_blocked_moves_still_count(self, scripted):
        """A step where both moves are blocked is still a step."""
        motion = scripted([(-1, 0), (1, 0)])
        sim = Simulation(SimulationConfig(width=3, height=3, max_updates=10), motion=motion)
        sim.begin()
        sim.step()
        assert sim.step_count == 1
        assert sim.person_a.position == (0, 0)
        assert sim.person_b.position == (2, 2)

    def test_limit_with_standing_persons(self, scripted):
        """Persons that never meet stop at the step ceiling."""
        sim = Simulation(SimulationConfig(width=3, height=3, max_updates=4), motion=scripted([]))
        sim.start()
        assert sim.stop_reason == StopReason.LIMIT
        assert sim.step_count == 5

    def test_invalid_motion_aborts(self, scripted):
        """A diagonal fed to axis-constrained persons propagates."""
        sim = Simulation(SimulationConfig(width=3, height=3, movement="axis"), motion=scripted([(1, 1)]))
        with pytest.raises(InvalidMotionError):
            sim.start()
        assert sim.person_a.position == (0, 0)
        assert sim.state == EngineState.STOPPED
        assert sim.running is False
        assert sim.stop_reason == StopReason.FAILED
        assert sim.step_count == 0

    def test_manual_stop(self, scripted):
        """stop() ends a running simulation and is idempotent."""
        sim = Simulation(SimulationConfig(width=3, height=3), motion=scripted([]))
        sim.begin()
        sim.step()
        sim.stop()
        sim.stop()
        assert sim.state == EngineState.STOPPED
        assert sim.stop_reason == StopReason.MANUAL
        assert sim.step_count == 1

    def test_stop_when_idle_is_noop(self, simulation):
        simulation.stop()
        assert simulation.state == EngineState.IDLE

    def test_start_twice_raises(self, simulation):
        """A stopped simulation cannot be started again without reset."""
        simulation.start()
        with pytest.raises(SimulationStateError):
            simulation.start()

    def test_step_when_idle_raises(self, simulation):
        with pytest.raises(SimulationStateError):
            simulation.step()

    def test_reset(self, simulation):
        """reset() restores the initial state and allows a new run."""
        simulation.start()
        first = (simulation.step_count, simulation.person_a.position)
        simulation.reset()
        assert simulation.state == EngineState.IDLE
        assert simulation.step_count == 0
        assert simulation.stop_reason is None
        assert simulation.person_a.position == (0, 0)
        assert simulation.person_b.position == (5, 4)
        simulation.start()
        assert (simulation.step_count, simulation.person_a.position) == first

    def test_single_cell_grid_stops_immediately(self):
        """On a 1x1 grid the persons start together."""
        sim = Simulation(SimulationConfig(width=1, height=1)).start()
        assert sim.step_count == 0
        assert sim.stop_reason == StopReason.COLOCATED

    def test_snapshot(self, simulation):
        """Snapshot reflects tick, grid and both persons."""
        snap = simulation.snapshot()
        assert isinstance(snap, StateSnapshot)
        assert snap.tick == 0
        assert (snap.width, snap.height) == (6, 5)
        assert [(p.x, p.y) for p in snap.persons] == [(0, 0), (5, 4)]
        assert snap.together is False

    def test_status_text(self, scripted):
        """status() gives the end-of-run line."""
        sim = Simulation(SimulationConfig(width=2, height=2), motion=scripted([(1, 0), (0, -1)]))
        sim.start()
        assert sim.status() == (
            "[running: False, updates: 1, forest: [width: 2, height: 2, "
            "person_a: [x: 1, y: 0], person_b: [x: 1, y: 0]]]"
        )
        assert str(sim) == sim.status()

    def test_reset_drops_used_motion_source(self, scripted):
        """After reset, a run with an injected source falls back to the seed."""
        config = SimulationConfig(width=4, height=4, seed=31, max_updates=10)
        sim = Simulation(config, motion=scripted([(1, 0), (0, -1)]))
        sim.start()
        sim.reset()
        sim.start()
        expected = Simulation(SimulationConfig(width=4, height=4, seed=31, max_updates=10)).start()
        assert sim.step_count == expected.step_count
        assert sim.person_a.position == expected.person_a.position

    def test_reset_with_fresh_motion_replays(self, scripted):
        """reset(motion=...) replays a scripted run."""
        moves = [(1, 0), (0, 0), (1, 1), (-1, -1)]
        sim = Simulation(SimulationConfig(width=3, height=3, max_updates=1), motion=scripted(moves))
        sim.start()
        first = (sim.step_count, sim.person_a.position, sim.person_b.position)
        sim.reset(motion=scripted(moves))
        sim.start()
        assert (sim.step_count, sim.person_a.position, sim.person_b.position) == first
