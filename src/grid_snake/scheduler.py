"""Asyncio driver that ticks a simulation at a fixed interval."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from grid_snake.engine import Simulation

logger = logging.getLogger(__name__)


class IntervalScheduler:
    """Calls :meth:`Simulation.tick` once every *interval_ms* milliseconds.

    The scheduler registers itself as a game-over listener, so the loop ends
    on its own when the simulation stops. ``on_tick`` is called after every
    tick that left the game running; ``max_ticks`` bounds the run.
    """

    def __init__(
        self,
        simulation: Simulation,
        interval_ms: int | None = None,
        on_tick: Callable[[Simulation], None] | None = None,
        max_ticks: int | None = None,
    ) -> None:
        if interval_ms is None:
            interval_ms = simulation.config.tick_interval_ms
        if interval_ms < 0:
            raise ValueError("interval_ms must be non-negative.")
        if max_ticks is not None and max_ticks < 0:
            raise ValueError("max_ticks must be non-negative.")
        self.simulation = simulation
        self.interval_ms = interval_ms
        self.on_tick = on_tick
        self.max_ticks = max_ticks
        self.ticks_run = 0
        self._stopped = False
        self._task: asyncio.Task | None = None
        simulation.add_game_over_listener(self._on_game_over)

    @property
    def stopped(self) -> bool:
        return self._stopped

    def start(self) -> asyncio.Task:
        """Schedule :meth:`run` on the running event loop."""
        if self._task is not None and not self._task.done():
            raise RuntimeError("Scheduler is already running.")
        self._task = asyncio.create_task(self.run())
        return self._task

    def stop(self) -> None:
        """Cancel any further tick invocations."""
        if self._stopped:
            return
        self._stopped = True
        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
        logger.info("Scheduler stopped after %d ticks.", self.ticks_run)

    def _on_game_over(self, simulation: Simulation) -> None:
        self.stop()

    async def run(self) -> int:
        """Tick until stopped. Returns the number of ticks performed."""
        interval = self.interval_ms / 1000.0
        logger.info("Scheduler started (interval=%dms).", self.interval_ms)
        try:
            while not self._stopped and self.simulation.running:
                if self.max_ticks is not None and self.ticks_run >= self.max_ticks:
                    self.stop()
                    break
                await asyncio.sleep(interval)
                if self._stopped:
                    break
                self.simulation.tick()
                self.ticks_run += 1
                if self.on_tick is not None and self.simulation.running:
                    self.on_tick(self.simulation)
        except asyncio.CancelledError:
            logger.info("Scheduler cancelled.")
        finally:
            self.simulation.remove_game_over_listener(self._on_game_over)
        return self.ticks_run
