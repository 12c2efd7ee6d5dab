"""Configuration loading and fallback checks."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from garden.config import DEFAULT_FORTUNES, GardenConfig, load_config, parse_config
from garden.cycle import InvalidCycleConfiguration


class LoadConfigTests(unittest.TestCase):
    def test_packaged_defaults(self) -> None:
        config = load_config()
        self.assertEqual(config.eclipse_window, (0.45, 0.55))
        self.assertEqual(config.cycle_speed, 0.0001)
        self.assertEqual(config.tulip_count, 30)
        self.assertEqual(config.cloud_count, 7)
        self.assertEqual(config.fortunes, DEFAULT_FORTUNES)

    def test_loads_custom_file(self) -> None:
        with tempfile.TemporaryDirectory() as directory:
            path = Path(directory) / "garden.json"
            path.write_text(
                json.dumps({"cycle": {"eclipse_start": 0.3, "eclipse_end": 0.4}, "garden": {"tulip_count": 3}}),
                encoding="utf-8",
            )
            config = load_config(path)

        self.assertEqual(config.eclipse_window, (0.3, 0.4))
        self.assertEqual(config.tulip_count, 3)
        self.assertEqual(config.star_count, GardenConfig().star_count)

    def test_missing_file_propagates(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/garden.json")


class ParseConfigTests(unittest.TestCase):
    def test_empty_document_uses_defaults(self) -> None:
        self.assertEqual(parse_config({}), GardenConfig())

    def test_reversed_window_is_rejected(self) -> None:
        with self.assertRaises(InvalidCycleConfiguration):
            parse_config({"cycle": {"eclipse_start": 0.6, "eclipse_end": 0.5}})

    def test_non_numeric_window_is_rejected(self) -> None:
        with self.assertRaises(InvalidCycleConfiguration):
            parse_config({"cycle": {"eclipse_start": "soon"}})

    def test_window_reaching_bloom_close_is_rejected(self) -> None:
        with self.assertRaises(InvalidCycleConfiguration):
            GardenConfig(eclipse_start=0.5, eclipse_end=0.75)

    def test_invalid_counts_fall_back_with_warning(self) -> None:
        with self.assertLogs("garden.config", level="WARNING") as captured:
            config = parse_config({"garden": {"tulip_count": -3, "spore_spawn_chance": 2.0}})

        self.assertEqual(config.tulip_count, 30)
        self.assertEqual(config.spore_spawn_chance, 0.005)
        self.assertEqual(len(captured.output), 2)

    def test_malformed_messages_are_dropped(self) -> None:
        with self.assertLogs("garden.config", level="WARNING"):
            config = parse_config({"fortune": {"messages": ["Veel geluk!", 42, ""]}})
        self.assertEqual(config.fortunes, ("Veel geluk!",))

    def test_empty_message_list_keeps_defaults(self) -> None:
        with self.assertLogs("garden.config", level="WARNING"):
            config = parse_config({"fortune": {"messages": []}})
        self.assertEqual(config.fortunes, DEFAULT_FORTUNES)

    def test_malformed_section_is_ignored(self) -> None:
        with self.assertLogs("garden.config", level="WARNING"):
            config = parse_config({"garden": [1, 2, 3]})
        self.assertEqual(config.tulip_count, 30)


if __name__ == "__main__":
    unittest.main()
