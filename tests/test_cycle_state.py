"""Checks for the phase-to-state mapping of the day/night cycle."""

from __future__ import annotations

import math
import unittest

from garden.cycle import (
    DAY_COLOR,
    NIGHT_COLOR,
    InvalidCycleConfiguration,
    compute_cycle_state,
    fortune_window_open,
    sky_color,
    validate_eclipse_window,
)

START = 0.45
END = 0.55


def state_at(phase: float):
    return compute_cycle_state(phase, START, END)


class SkyBlendTests(unittest.TestCase):
    def test_rises_linearly_before_eclipse(self) -> None:
        previous = -1.0
        for phase in (0.0, 0.05, 0.1, 0.2, 0.3, 0.44, 0.4499):
            blend = state_at(phase).sky_blend
            self.assertAlmostEqual(blend, phase / START)
            self.assertGreater(blend, previous)
            previous = blend

    def test_falls_linearly_after_eclipse(self) -> None:
        for phase in (0.5501, 0.6, 0.75, 0.99):
            self.assertAlmostEqual(state_at(phase).sky_blend, (1.0 - phase) / (1.0 - END))

    def test_pinned_inside_window_including_edges(self) -> None:
        for phase in (START, 0.5, END):
            self.assertEqual(state_at(phase).sky_blend, 0.2)

    def test_sky_color_endpoints(self) -> None:
        self.assertEqual(sky_color(0.0), NIGHT_COLOR)
        self.assertEqual(sky_color(1.0), DAY_COLOR)


class StarOpacityTests(unittest.TestCase):
    def test_hidden_during_day(self) -> None:
        for phase in (0.0, 0.25, 0.5, 0.5999):
            self.assertEqual(state_at(phase).star_opacity, 0.0)

    def test_rising_ramp_starts_at_zero(self) -> None:
        self.assertAlmostEqual(state_at(0.6).star_opacity, 0.0)
        self.assertAlmostEqual(state_at(0.7).star_opacity, 0.5)
        self.assertAlmostEqual(state_at(0.7999).star_opacity, 0.9995)

    def test_falling_ramp_starts_at_one(self) -> None:
        self.assertAlmostEqual(state_at(0.8).star_opacity, 1.0)
        self.assertAlmostEqual(state_at(0.9).star_opacity, 0.5)
        self.assertAlmostEqual(state_at(0.9999).star_opacity, 0.0005)

    def test_wrapped_phase_has_no_stars(self) -> None:
        self.assertEqual(state_at(0.0).star_opacity, 0.0)


class OrbitTests(unittest.TestCase):
    def test_sun_angle_is_full_turn(self) -> None:
        self.assertEqual(state_at(0.0).sun_angle, 0.0)
        self.assertAlmostEqual(state_at(0.25).sun_angle, math.pi / 2.0)

    def test_moon_opposite_sun_at_start(self) -> None:
        self.assertAlmostEqual(state_at(0.0).moon_offset, math.pi)

    def test_moon_joins_sun_inside_window(self) -> None:
        for phase in (START, 0.5, END):
            state = state_at(phase)
            self.assertEqual(state.moon_offset, 0.0)
            self.assertEqual(state.moon_angle, state.sun_angle)

    def test_moon_offset_interpolates_on_both_sides(self) -> None:
        self.assertAlmostEqual(state_at(START / 2.0).moon_offset, math.pi / 2.0)
        self.assertAlmostEqual(state_at(END + (1.0 - END) / 2.0).moon_offset, math.pi / 2.0)


class EclipseTests(unittest.TestCase):
    def test_active_at_window_center(self) -> None:
        self.assertTrue(state_at((START + END) / 2.0).eclipse_active)

    def test_inactive_when_opposite(self) -> None:
        self.assertFalse(state_at(0.0).eclipse_active)
        self.assertFalse(state_at(0.25).eclipse_active)

    def test_active_at_window_edges(self) -> None:
        self.assertTrue(state_at(START).eclipse_active)
        self.assertTrue(state_at(END).eclipse_active)

    def test_follows_orbit_distance_before_window(self) -> None:
        self.assertFalse(state_at(0.39).eclipse_active)
        self.assertTrue(state_at(0.42).eclipse_active)


class BloomTests(unittest.TestCase):
    def test_opening_ramp(self) -> None:
        self.assertEqual(state_at(0.0).bloom_factor, 0.0)
        self.assertAlmostEqual(state_at(0.1).bloom_factor, 0.4)
        self.assertAlmostEqual(state_at(0.2499).bloom_factor, 0.9996)
        self.assertEqual(state_at(0.25).bloom_factor, 1.0)

    def test_holds_open_until_eclipse_ends(self) -> None:
        for phase in (0.3, START, 0.5, END):
            self.assertEqual(state_at(phase).bloom_factor, 1.0)

    def test_closing_ramp_measured_from_eclipse_end(self) -> None:
        self.assertAlmostEqual(state_at(0.65).bloom_factor, 0.5)
        self.assertAlmostEqual(state_at(0.7499).bloom_factor, 0.0005)

    def test_closed_at_night(self) -> None:
        self.assertEqual(state_at(0.75).bloom_factor, 0.0)
        self.assertEqual(state_at(0.9).bloom_factor, 0.0)


class CycleStateTests(unittest.TestCase):
    def test_mid_eclipse_scenario(self) -> None:
        state = compute_cycle_state(0.5, 0.45, 0.55)
        self.assertTrue(state.eclipse_active)
        self.assertEqual(state.sky_blend, 0.2)
        self.assertEqual(state.bloom_factor, 1.0)

    def test_repeated_calls_are_identical(self) -> None:
        for phase in (0.0, 0.123456, 0.5, 0.77, 0.999):
            self.assertEqual(state_at(phase), state_at(phase))

    def test_fortune_window(self) -> None:
        self.assertTrue(fortune_window_open(state_at(0.3), START, END))
        self.assertTrue(fortune_window_open(state_at(0.56), START, END))
        self.assertFalse(fortune_window_open(state_at(0.5), START, END))
        self.assertFalse(fortune_window_open(state_at(END), START, END))
        self.assertFalse(fortune_window_open(state_at(0.1), START, END))
        self.assertFalse(fortune_window_open(state_at(0.6), START, END))


class EclipseWindowValidationTests(unittest.TestCase):
    def test_accepts_default_window(self) -> None:
        validate_eclipse_window(START, END)

    def test_rejects_bad_windows(self) -> None:
        for start, end in ((0.55, 0.45), (0.5, 0.5), (-0.1, 0.5), (0.45, 1.0), (0.45, 0.8)):
            with self.subTest(start=start, end=end):
                with self.assertRaises(InvalidCycleConfiguration):
                    validate_eclipse_window(start, end)


if __name__ == "__main__":
    unittest.main()
