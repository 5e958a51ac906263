"""
Simulation Clock
================

Converts a stream of wall-clock timestamps into a deterministic
number of fixed-size physics steps.
"""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class SimulationClock:
    """
    Fixed-timestep accumulator.

    Provides:
    - Frame-rate independent stepping
    - Pause without accruing wall time
    - Re-anchoring on first update and on resume
    - Clamping of non-monotonic timestamps
    """

    def __init__(self,
                 fixed_time_step: float = 1.0 / 60.0,
                 on_step: Optional[Callable[[], None]] = None):
        """
        Initialize clock.

        Args:
            fixed_time_step: Physics step in seconds
            on_step: Called once per physics step
        """
        if not fixed_time_step > 0:
            raise ValueError(f"fixed_time_step must be positive, got {fixed_time_step!r}")

        self.fixed_time_step = fixed_time_step
        self.on_step = on_step

        self.accumulator = 0.0  # Leftover wall time [s]
        self.elapsed_seconds = 0.0  # Wall time converted so far [s]
        self.step_count = 0

        self._anchor_ms: Optional[float] = None
        self._paused = False

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def anchor_ms(self) -> Optional[float]:
        """Timestamp of the last accepted update, None when unset."""
        return self._anchor_ms

    def set_paused(self, paused: bool, now_ms: Optional[float] = None):
        """
        Pause or resume stepping.

        Args:
            paused: New pause state
            now_ms: Resume timestamp; if omitted the next update re-anchors
        """
        if self._paused and not paused:
            # Drop the wall time spent paused
            self._anchor_ms = now_ms
            logger.debug("Clock resumed, anchor=%s", now_ms)
        elif paused and not self._paused:
            logger.debug("Clock paused at step %d", self.step_count)
        self._paused = paused

    def reset(self):
        """Clear the accumulator and step bookkeeping."""
        self.accumulator = 0.0
        self.elapsed_seconds = 0.0
        self.step_count = 0

    def update(self, current_time_ms: float) -> int:
        """
        Advance by the wall time elapsed since the last update.

        Args:
            current_time_ms: Monotonic timestamp in milliseconds

        Returns:
            Number of physics steps executed
        """
        if self._paused:
            return 0

        if self._anchor_ms is None:
            self._anchor_ms = current_time_ms
            return 0

        elapsed = (current_time_ms - self._anchor_ms) / 1000.0
        if elapsed < 0:
            logger.debug("Ignoring non-monotonic timestamp %.3f < %.3f",
                         current_time_ms, self._anchor_ms)
            return 0

        self._anchor_ms = current_time_ms
        self.elapsed_seconds += elapsed
        self.accumulator += elapsed

        # Exact floor and remainder of the accumulated time
        steps = int(self.accumulator // self.fixed_time_step)
        self.accumulator %= self.fixed_time_step

        for _ in range(steps):
            if self.on_step is not None:
                self.on_step()
            self.step_count += 1

        return steps

    def __repr__(self) -> str:
        return (f"SimulationClock(steps={self.step_count}, "
                f"leftover={self.accumulator:.6f}s, paused={self._paused})")
