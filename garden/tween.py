"""Easing helpers for short timed animations."""

from __future__ import annotations

from dataclasses import dataclass, field


def power1_out(t: float) -> float:
    """Quadratic ease-out on a clamped progress value."""
    t = max(0.0, min(1.0, t))
    return 1.0 - (1.0 - t) * (1.0 - t)


@dataclass
class ValueTween:
    """Move a value toward a target at a rate that covers the gap in ``duration``.

    Retargeting restarts the transition from the current value; repeating the
    same target keeps the running rate.
    """

    value: float
    duration: float = 1.0
    _target: float | None = field(default=None, init=False)
    _rate: float = field(default=0.0, init=False)

    def retarget(self, target: float) -> None:
        if self._target == target:
            return
        self._target = target
        if self.duration <= 0.0:
            self.value = target
            self._rate = 0.0
            return
        self._rate = abs(target - self.value) / self.duration

    def update(self, delta_time: float) -> float:
        if self._target is None:
            return self.value
        step = self._rate * delta_time
        if abs(self._target - self.value) <= step:
            self.value = self._target
        elif self._target > self.value:
            self.value += step
        else:
            self.value -= step
        return self.value
