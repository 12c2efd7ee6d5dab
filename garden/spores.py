"""Spores released by fully open tulips."""

from __future__ import annotations

from dataclasses import dataclass

from garden.config import GardenConfig
from garden.cycle import CycleState, fortune_window_open
from garden.randomness import RandomSource
from garden.tween import power1_out

SPORE_ORIGIN_HEIGHT = 30.0
SPORE_JITTER = 0.02


@dataclass
class Spore:
    """Short-lived marker rising from the top of a tulip stem."""

    tulip_index: int
    born_at: float
    x: float = 0.0
    y: float = SPORE_ORIGIN_HEIGHT
    opacity: float = 1.0


class ParticleSpawner:
    """Spawn, animate, and expire spores for every tulip."""

    def __init__(self, config: GardenConfig, rng: RandomSource) -> None:
        self.config = config
        self.rng = rng
        self.spores: list[Spore] = []
        self.total_spawned = 0

    def should_spawn(self, state: CycleState) -> bool:
        """Guarded chance roll; draws from the random source only when the guard holds."""
        if not fortune_window_open(state, self.config.eclipse_start, self.config.eclipse_end):
            return False
        return self.rng.random() < self.config.spore_spawn_chance

    def spawn(self, tulip_index: int, session_time: float) -> Spore:
        spore = Spore(tulip_index=tulip_index, born_at=session_time)
        self.spores.append(spore)
        self.total_spawned += 1
        return spore

    def _animate(self, spore: Spore, session_time: float) -> bool:
        progress = (session_time - spore.born_at) / self.config.spore_lifetime
        if progress >= 1.0:
            return False
        eased = power1_out(progress)
        spore.y = SPORE_ORIGIN_HEIGHT + self.config.spore_rise * eased
        spore.opacity = 1.0 - eased
        spore.x += (self.rng.random() - 0.5) * SPORE_JITTER
        return True

    def update(self, state: CycleState, session_time: float, tulip_count: int) -> None:
        """Roll a spawn for each tulip, then advance and expire live spores."""
        for tulip_index in range(tulip_count):
            if self.should_spawn(state):
                self.spawn(tulip_index, session_time)

        self.spores = [spore for spore in self.spores if self._animate(spore, session_time)]

    def spores_for(self, tulip_index: int) -> list[Spore]:
        return [spore for spore in self.spores if spore.tulip_index == tulip_index]
