"""Tick loop — asyncio-driven simulation step.

Each tick, in order:
1. Step the host simulation
2. Let the mode controller record or replay exactly one tick

Commands from the operator API run on the same event loop between
ticks, so controller state has a single writer.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from matchrecorder.engine.controller import ModeController
    from matchrecorder.sim.world import SimWorld


class GameLoop:
    """Fixed-interval tick loop.

    Args:
        world: Host simulation to step each tick.
        controller: Mode controller updated once per tick.
        tick_ms: Tick interval in milliseconds.
    """

    def __init__(self, world: SimWorld, controller: ModeController, tick_ms: float = 33.0) -> None:
        self._world = world
        self._controller = controller
        self._running = False
        self._step_interval = tick_ms / 1000.0

        # --- Debug / monitoring counters ---
        self.tick_count: int = 0
        self.started_at: float = 0.0
        self.last_tick_duration_ms: float = 0.0
        self.avg_tick_duration_ms: float = 0.0
        self._tick_duration_sum: float = 0.0

    async def run(self) -> None:
        """Start the loop. Runs until stop() is called."""
        self._running = True
        self.started_at = time.monotonic()
        while self._running:
            t0 = time.monotonic()
            self.step()
            elapsed_ms = (time.monotonic() - t0) * 1000

            self.last_tick_duration_ms = elapsed_ms
            self._tick_duration_sum += elapsed_ms
            self.avg_tick_duration_ms = self._tick_duration_sum / self.tick_count

            await asyncio.sleep(max(0.0, self._step_interval - elapsed_ms / 1000))

    @property
    def uptime_seconds(self) -> float:
        """Seconds since the loop started."""
        if self.started_at == 0.0:
            return 0.0
        return time.monotonic() - self.started_at

    @property
    def is_running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """Signal the loop to stop."""
        self._running = False

    def step(self) -> None:
        """One tick."""
        self._world.step()
        self._controller.update()
        self.tick_count += 1
