"""Day/night cycle state derived from a normalized phase."""

from __future__ import annotations

import math
from dataclasses import dataclass

NIGHT_COLOR = (0x12, 0x06, 0x05)
DAY_COLOR = (0x5C, 0x3B, 0x30)

ECLIPSE_SKY_BLEND = 0.2
STAR_FADE_IN_START = 0.6
STAR_FADE_OUT_START = 0.8
STAR_FADE_RATE = 5.0
BLOOM_OPEN_END = 0.25
BLOOM_CLOSE_END = 0.75
FORTUNE_BLOOM_THRESHOLD = 0.9

DEFAULT_ORBIT_RADIUS = 150.0
ECLIPSE_DISTANCE_RATIO = 1.0 / 3.0


class InvalidCycleConfiguration(ValueError):
    """Raised when eclipse window constants cannot drive the cycle."""


@dataclass(frozen=True)
class CycleState:
    """Visual parameters for a single instant of the cycle."""

    phase: float
    sky_blend: float
    star_opacity: float
    sun_angle: float
    moon_offset: float
    moon_angle: float
    eclipse_active: bool
    bloom_factor: float


def validate_eclipse_window(eclipse_start: float, eclipse_end: float) -> None:
    """Reject eclipse windows the state computer cannot evaluate."""
    if not 0.0 <= eclipse_start < 1.0 or not 0.0 <= eclipse_end < 1.0:
        raise InvalidCycleConfiguration(
            f"eclipse window ({eclipse_start}, {eclipse_end}) must lie within [0, 1)"
        )
    if eclipse_start >= eclipse_end:
        raise InvalidCycleConfiguration(
            f"eclipse start {eclipse_start} must be before eclipse end {eclipse_end}"
        )
    if eclipse_end >= BLOOM_CLOSE_END:
        raise InvalidCycleConfiguration(
            f"eclipse end {eclipse_end} must be before the bloom close at {BLOOM_CLOSE_END}"
        )


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def lerp_color(
    left: tuple[int, int, int],
    right: tuple[int, int, int],
    t: float,
) -> tuple[int, int, int]:
    return tuple(int(round(lerp(left[channel], right[channel], t))) for channel in range(3))


def sky_color(sky_blend: float) -> tuple[int, int, int]:
    """Blend between the night and day sky colors."""
    return lerp_color(NIGHT_COLOR, DAY_COLOR, sky_blend)


def orbit_position(angle: float, radius: float = DEFAULT_ORBIT_RADIUS) -> tuple[float, float]:
    return radius * math.cos(angle), radius * math.sin(angle)


def sky_blend_at(phase: float, eclipse_start: float, eclipse_end: float) -> float:
    if phase < eclipse_start:
        return phase / eclipse_start
    if phase > eclipse_end:
        return (1.0 - phase) / (1.0 - eclipse_end)
    return ECLIPSE_SKY_BLEND


def star_opacity_at(phase: float) -> float:
    opacity = 0.0
    if STAR_FADE_IN_START <= phase < STAR_FADE_OUT_START:
        opacity = (phase - STAR_FADE_IN_START) * STAR_FADE_RATE
    elif phase >= STAR_FADE_OUT_START:
        opacity = 1.0 - (phase - STAR_FADE_OUT_START) * STAR_FADE_RATE
    return max(0.0, min(1.0, opacity))


def moon_offset_at(phase: float, eclipse_start: float, eclipse_end: float) -> float:
    """Angular offset of the moon from the sun: opposite outside the window, joined inside."""
    if phase < eclipse_start:
        return lerp(math.pi, 0.0, phase / eclipse_start)
    if phase > eclipse_end:
        return lerp(0.0, math.pi, (phase - eclipse_end) / (1.0 - eclipse_end))
    return 0.0


def bloom_factor_at(phase: float, eclipse_start: float, eclipse_end: float) -> float:
    """Petal openness for the phase.

    The closing ramp is measured from ``eclipse_end`` while its branch starts at
    ``eclipse_start``; inside the window the ratio is negative and the bloom
    holds at 1 until the eclipse ends.
    """
    if phase < BLOOM_OPEN_END:
        return phase * 4.0
    if phase < eclipse_start:
        return 1.0
    if phase < BLOOM_CLOSE_END:
        ratio = (phase - eclipse_end) / (BLOOM_CLOSE_END - eclipse_end)
        return 1.0 - max(0.0, ratio)
    return 0.0


def is_eclipse(sun_angle: float, moon_angle: float, radius: float = DEFAULT_ORBIT_RADIUS) -> bool:
    """Check whether sun and moon sit close enough on the orbit to overlap."""
    sun_x, sun_y = orbit_position(sun_angle, radius)
    moon_x, moon_y = orbit_position(moon_angle, radius)
    distance = math.hypot(sun_x - moon_x, sun_y - moon_y)
    return distance < radius * ECLIPSE_DISTANCE_RATIO


def compute_cycle_state(phase: float, eclipse_start: float, eclipse_end: float) -> CycleState:
    """Map a phase in [0, 1) to every visual parameter of that instant."""
    sun_angle = phase * 2.0 * math.pi
    moon_offset = moon_offset_at(phase, eclipse_start, eclipse_end)
    moon_angle = sun_angle + moon_offset
    return CycleState(
        phase=phase,
        sky_blend=sky_blend_at(phase, eclipse_start, eclipse_end),
        star_opacity=star_opacity_at(phase),
        sun_angle=sun_angle,
        moon_offset=moon_offset,
        moon_angle=moon_angle,
        eclipse_active=is_eclipse(sun_angle, moon_angle),
        bloom_factor=bloom_factor_at(phase, eclipse_start, eclipse_end),
    )


def fortune_window_open(state: CycleState, eclipse_start: float, eclipse_end: float) -> bool:
    """Tulips are open enough and the sun is out of the eclipse window."""
    outside_eclipse = state.phase < eclipse_start or state.phase > eclipse_end
    return state.bloom_factor > FORTUNE_BLOOM_THRESHOLD and outside_eclipse
