"""Click-to-reveal fortune messages."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from garden.config import GardenConfig
from garden.cycle import CycleState, fortune_window_open
from garden.randomness import RandomSource, pick_index

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fortune:
    text: str
    shown_at: float
    expires_at: float


class FortuneTeller:
    """Pick a fortune when an open tulip is clicked outside the eclipse."""

    def __init__(self, config: GardenConfig, rng: RandomSource) -> None:
        self.config = config
        self.rng = rng
        self.current: Fortune | None = None

    def draw_message(self) -> str:
        return self.config.fortunes[pick_index(self.rng, len(self.config.fortunes))]

    def on_tulip_clicked(self, state: CycleState, session_time: float) -> Fortune | None:
        """Reveal a fortune if the tulips are open; otherwise leave the current one alone."""
        if not fortune_window_open(state, self.config.eclipse_start, self.config.eclipse_end):
            return None

        text = self.config.fortune_prefix + self.draw_message()
        self.current = Fortune(
            text=text,
            shown_at=session_time,
            expires_at=session_time + self.config.fortune_display_seconds,
        )
        LOGGER.info("Fortune revealed at phase %.4f: %s", state.phase, text)
        return self.current

    def active_fortune(self, session_time: float) -> Fortune | None:
        if self.current is not None and session_time >= self.current.expires_at:
            self.current = None
        return self.current
