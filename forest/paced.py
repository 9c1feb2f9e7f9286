import asyncio
import time

from communication.bus import EventBus
from forest.state import StateSnapshot
from internal.logging import AsyncFileLogger, get_logger


class PacedRunner:
    """Steps a Simulation at a fixed logical rate on the event loop.

    Elapsed wall-clock time feeds an accumulator that is spent in whole
    steps of ``1 / update_rate`` seconds. All steps of one iteration and the
    snapshot taken after them happen under one lock, so get_snapshot() and
    bus subscribers only ever see committed post-step state.
    """

    def __init__(self, simulation, bus, update_rate=None, yield_interval=None):
        self.simulation = simulation
        self.bus = bus
        self.update_rate = update_rate or simulation.config.update_rate
        self.yield_interval = simulation.config.yield_interval if yield_interval is None else yield_interval
        self._lock = asyncio.Lock()
        self._log = get_logger()
        self._task = None
        self._stop = asyncio.Event()
        self.iterations = 0
        self.published = 0

    @property
    def running(self):
        return self._task is not None and not self._task.done()

    async def start(self):
        if self._task:
            return
        async with self._lock:
            self.simulation.begin()
        self._stop.clear()
        self._task = asyncio.create_task(self._loop())

    async def stop(self):
        """Cooperative stop; takes effect at the next step boundary."""
        self._stop.set()
        await self.wait()

    async def wait(self):
        """Wait for the run to end. Re-raises a fatal step error.

        Cancelling the caller does not cancel the stepping task; a run whose
        task was cancelled directly counts as ended.
        """
        task = self._task
        if task is None:
            return
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.done():
                raise
        finally:
            if task.done() and self._task is task:
                self._task = None

    async def get_snapshot(self):
        async with self._lock:
            return self.simulation.snapshot()

    async def _publish(self, item, keep=False):
        await self.bus.publish(item, keep=keep)
        self.published += 1

    async def _loop(self):
        simulation = self.simulation
        step_interval = 1.0 / self.update_rate
        accumulator = 0.0
        last = time.perf_counter()
        failure = None
        self._log.info("paced run start", rate=self.update_rate)

        try:
            while simulation.running and not self._stop.is_set():
                now = time.perf_counter()
                accumulator += now - last
                last = now
                self.iterations += 1

                snapshot = None
                async with self._lock:
                    steps = 0
                    while accumulator >= step_interval and simulation.running:
                        simulation.step()
                        accumulator -= step_interval
                        steps += 1
                    if steps:
                        snapshot = simulation.snapshot()
                if snapshot is not None:
                    await self._publish(snapshot, keep=not snapshot.running)
                await asyncio.sleep(self.yield_interval)
        except Exception as exc:
            failure = exc
            self._log.error("paced run aborted", error=exc, tick=simulation.step_count)
            raise
        finally:
            # Also reached on cancellation
            await self._finish(failure)

    async def _finish(self, failure):
        simulation = self.simulation
        async with self._lock:
            simulation.stop()
            final = simulation.snapshot()
        await self._publish(final, keep=True)
        if failure is not None:
            event = {"kind": "engine_failed", "tick": final.tick, "error": str(failure)}
        else:
            event = {"kind": "engine_stopped", "tick": final.tick, "reason": simulation.stop_reason}
        await self._publish(event, keep=True)
        self._log.info("paced run stop", tick=final.tick, reason=simulation.stop_reason,
                       iterations=self.iterations, published=self.published)


async def run_paced(simulation, presenter=None, bus=None, log_file=None):
    """Drive simulation with a PacedRunner while presenter consumes snapshots.

    Returns the final StateSnapshot. When log_file is set, every published
    item is also written to a JSON-lines run log. If the call is cancelled,
    the runner is stopped so consumers still receive the terminal state.
    """
    bus = bus or EventBus(queue_size=100)
    log = get_logger()
    tasks = []

    file_logger = None
    if log_file:
        file_logger = AsyncFileLogger(log_file)
        await file_logger.start()
        log_sub = await bus.subscribe("run-log", max_queue_size=200)

        async def log_worker():
            while True:
                item = await log_sub.queue.get()
                if isinstance(item, StateSnapshot):
                    file_logger.try_log("state", item.to_dict())
                    continue
                file_logger.try_log("event", item)
                if item.get("kind") in ("engine_stopped", "engine_failed"):
                    return

        tasks.append(asyncio.create_task(log_worker()))

    if presenter is not None:
        await presenter.attach(bus)
        tasks.append(asyncio.create_task(presenter.run()))

    runner = PacedRunner(simulation, bus)
    try:
        await runner.start()
        await runner.wait()
        await asyncio.gather(*tasks)
    finally:
        if runner.running:
            await runner.stop()
        if tasks:
            await asyncio.wait(tasks, timeout=1.0)
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        if file_logger is not None:
            await file_logger.stop()
            log.debug("run log closed", **file_logger.get_stats())
    return await runner.get_snapshot()
