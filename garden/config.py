"""Scene configuration loading and validation."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from garden.cycle import DEFAULT_ORBIT_RADIUS, validate_eclipse_window

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path(__file__).with_name("defaults.json")

DEFAULT_FORTUNES = (
    "Geluk komt binnenkort!",
    "Doe wat je leuk vindt en je hoeft nooit meer te werken.",
    "Grote dingen beginnen klein.",
    "Blijf dromen, blijf groeien.",
    "Elke stap vooruit is vooruitgang.",
    "Succes is het resultaat van doorzetten.",
    "Vandaag is jouw dag!",
)


@dataclass(frozen=True)
class GardenConfig:
    """Resolved tuning values for the cycle, the garden, and fortunes."""

    cycle_speed: float = 0.0001
    eclipse_start: float = 0.45
    eclipse_end: float = 0.55
    orbit_radius: float = DEFAULT_ORBIT_RADIUS
    tulip_count: int = 30
    cloud_count: int = 7
    star_count: int = 800
    spore_spawn_chance: float = 0.005
    spore_lifetime: float = 3.0
    spore_rise: float = 20.0
    fortune_prefix: str = "Gelukswens: "
    fortune_display_seconds: float = 4.0
    fortunes: tuple[str, ...] = field(default=DEFAULT_FORTUNES)

    def __post_init__(self) -> None:
        validate_eclipse_window(self.eclipse_start, self.eclipse_end)

    @property
    def eclipse_window(self) -> tuple[float, float]:
        return self.eclipse_start, self.eclipse_end


def _section(raw_data: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw_data.get(name, {})
    if not isinstance(section, dict):
        LOGGER.warning("Ignoring malformed %s section: expected object", name)
        return {}
    return section


def _read_float(
    section: dict[str, Any],
    key: str,
    default: float,
    minimum: float = 0.0,
    maximum: float | None = None,
) -> float:
    if key not in section:
        return default
    value = section[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        LOGGER.warning("Ignoring non-numeric %s=%r", key, value)
        return default
    if value < minimum or (maximum is not None and value > maximum):
        LOGGER.warning("Ignoring out-of-range %s=%r", key, value)
        return default
    return float(value)


def _read_count(section: dict[str, Any], key: str, default: int) -> int:
    if key not in section:
        return default
    value = section[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        LOGGER.warning("Ignoring invalid count %s=%r", key, value)
        return default
    return value


def _read_window_bound(section: dict[str, Any], key: str, default: float) -> float:
    """Read an eclipse bound as-is; NaN marks a non-numeric value for GardenConfig to reject."""
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return float("nan")
    return float(value)


def _read_fortunes(section: dict[str, Any]) -> tuple[str, ...]:
    messages = section.get("messages")
    if messages is None:
        return DEFAULT_FORTUNES
    if not isinstance(messages, list) or not messages:
        LOGGER.warning("Ignoring fortune messages: expected a non-empty list")
        return DEFAULT_FORTUNES

    valid = tuple(message for message in messages if isinstance(message, str) and message.strip())
    if len(valid) != len(messages):
        LOGGER.warning("Dropped %d malformed fortune message(s)", len(messages) - len(valid))
    return valid or DEFAULT_FORTUNES


def parse_config(raw_data: Any) -> GardenConfig:
    """Convert decoded JSON into a validated :class:`GardenConfig`."""
    if not isinstance(raw_data, dict):
        LOGGER.warning("Ignoring malformed configuration root: expected object")
        raw_data = {}

    defaults = GardenConfig()
    cycle = _section(raw_data, "cycle")
    garden = _section(raw_data, "garden")
    fortune = _section(raw_data, "fortune")

    return replace(
        defaults,
        cycle_speed=_read_float(cycle, "speed", defaults.cycle_speed, minimum=1e-9, maximum=1.0),
        eclipse_start=_read_window_bound(cycle, "eclipse_start", defaults.eclipse_start),
        eclipse_end=_read_window_bound(cycle, "eclipse_end", defaults.eclipse_end),
        orbit_radius=_read_float(cycle, "orbit_radius", defaults.orbit_radius, minimum=1.0),
        tulip_count=_read_count(garden, "tulip_count", defaults.tulip_count),
        cloud_count=_read_count(garden, "cloud_count", defaults.cloud_count),
        star_count=_read_count(garden, "star_count", defaults.star_count),
        spore_spawn_chance=_read_float(
            garden, "spore_spawn_chance", defaults.spore_spawn_chance, maximum=1.0
        ),
        spore_lifetime=_read_float(garden, "spore_lifetime", defaults.spore_lifetime, minimum=0.01),
        spore_rise=_read_float(garden, "spore_rise", defaults.spore_rise),
        fortune_prefix=str(fortune.get("prefix", defaults.fortune_prefix)),
        fortune_display_seconds=_read_float(
            fortune, "display_seconds", defaults.fortune_display_seconds, minimum=0.1
        ),
        fortunes=_read_fortunes(fortune),
    )


def load_config(config_file: str | Path | None = None) -> GardenConfig:
    """Load scene configuration from JSON, defaulting to the packaged file."""
    path = Path(config_file) if config_file is not None else DEFAULT_CONFIG_FILE
    raw_data = json.loads(path.read_text(encoding="utf-8"))
    config = parse_config(raw_data)
    LOGGER.info(
        "Loaded %s: eclipse window %.3f-%.3f, %d tulips",
        path.name,
        config.eclipse_start,
        config.eclipse_end,
        config.tulip_count,
    )
    return config
