"""Per-frame driver owning the cycle phase."""

from __future__ import annotations

import logging
import time

from garden.config import GardenConfig
from garden.cycle import CycleState, compute_cycle_state, validate_eclipse_window

LOGGER = logging.getLogger(__name__)


class CycleDriver:
    """Advance the phase by a fixed step per tick and recompute cycle state.

    Frame deltas and session time come from :func:`time.perf_counter`; they feed
    timed animations only and never the phase itself.
    """

    def __init__(self, config: GardenConfig, start_phase: float = 0.0) -> None:
        validate_eclipse_window(config.eclipse_start, config.eclipse_end)
        if not 0.0 <= start_phase < 1.0:
            raise ValueError(f"start phase {start_phase} must lie within [0, 1)")

        self.config = config
        self.phase = start_phase
        self.frame_count = 0
        self._cycle_frames = 0
        self.state: CycleState = compute_cycle_state(start_phase, config.eclipse_start, config.eclipse_end)

        now = time.perf_counter()
        self._last_tick = now
        self._session_start = now
        self.delta_time = 0.0
        self.session_time = 0.0

    def _advance_phase(self) -> None:
        self.phase += self.config.cycle_speed
        self._cycle_frames += 1
        if self.phase >= 1.0:
            self.phase = 0.0
            LOGGER.info("Cycle wrapped after %d frames", self._cycle_frames)
            self._cycle_frames = 0

    def tick(self) -> float:
        """Advance one frame and return delta time in seconds."""
        now = time.perf_counter()
        self.delta_time = max(0.0, now - self._last_tick)
        self._last_tick = now
        self.session_time = now - self._session_start

        self._advance_phase()
        self.frame_count += 1

        previous = self.state
        self.state = compute_cycle_state(self.phase, self.config.eclipse_start, self.config.eclipse_end)
        if self.state.eclipse_active != previous.eclipse_active:
            LOGGER.info(
                "Eclipse %s at phase %.4f",
                "begins" if self.state.eclipse_active else "ends",
                self.phase,
            )
        return self.delta_time
