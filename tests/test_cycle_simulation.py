"""Long-run invariants over a simulated cycle and a half."""

from __future__ import annotations

import unittest

import cycle_simulation


class CycleSimulationTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.stats = cycle_simulation.run_simulation(cycles=1.5, seed=7, config_file=None, debug=False)

    def test_phase_stays_in_range_and_wraps_once(self) -> None:
        self.assertEqual(self.stats.phase_range_violations, 0)
        self.assertEqual(self.stats.wraps, 1)

    def test_eclipse_surrounds_the_window(self) -> None:
        self.assertGreater(self.stats.first_eclipse_phase, 0.39)
        self.assertLessEqual(self.stats.first_eclipse_phase, 0.45)
        self.assertGreaterEqual(self.stats.last_eclipse_phase, 0.55)
        self.assertLess(self.stats.last_eclipse_phase, 0.61)

    def test_spores_are_spawned_and_recycled(self) -> None:
        self.assertGreater(self.stats.spores_spawned, 0)
        self.assertLess(self.stats.max_live_spores, self.stats.spores_spawned)


if __name__ == "__main__":
    unittest.main()
