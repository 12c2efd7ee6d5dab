"""Entry point for the Tulip Eclipse garden scene."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame

from garden.config import GardenConfig, load_config
from garden.cycle import InvalidCycleConfiguration
from garden.driver import CycleDriver
from garden.randomness import create_random_source
from garden.scene import Scene

INTERNAL_WIDTH = 480
INTERNAL_HEIGHT = 270
PREVIEW_SIZE = (960, 540)
TARGET_FPS = 60


class RuntimeArgs(argparse.Namespace):
    """Container for command-line runtime options."""

    fullscreen: bool
    preview: bool
    debug: bool
    config: str | None
    seed: int | None
    start_phase: float


@dataclass(frozen=True)
class LaunchConfig:
    """Resolved runtime mode and scene configuration."""

    mode: str
    garden: GardenConfig
    seed: int | None = None
    start_phase: float = 0.0


class ShutdownRequested(Exception):
    """Raised when the scene should exit immediately."""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tulip Eclipse animated garden")
    parser.add_argument("--fullscreen", action="store_true", help="force fullscreen mode")
    parser.add_argument("--preview", action="store_true", help="open a local 960x540 preview window")
    parser.add_argument("--debug", action="store_true", help="enable concise debug logging")
    parser.add_argument("--config", help="path to a JSON scene configuration")
    parser.add_argument("--seed", type=int, help="seed for tulip layout, spores, and fortunes")
    parser.add_argument("--start-phase", type=float, default=0.0, help="initial cycle phase in [0, 1)")
    return parser


def parse_arguments(argv: list[str] | None = None) -> RuntimeArgs:
    """Parse CLI arguments."""
    parser = _build_parser()
    args = parser.parse_args(argv, namespace=RuntimeArgs())

    if args.fullscreen and args.preview:
        parser.error("--fullscreen cannot be used with --preview")
    if not 0.0 <= args.start_phase < 1.0:
        parser.error("--start-phase must lie within [0, 1)")

    return args


def configure_logging(debug_enabled: bool) -> logging.Logger:
    """Create a logger that stays quiet unless debug is enabled."""
    logger = logging.getLogger("garden")
    logger.handlers.clear()
    logger.propagate = False

    if debug_enabled:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s garden %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    else:
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.CRITICAL + 1)

    return logger


def resolve_launch_config(args: RuntimeArgs) -> LaunchConfig:
    """Load the scene configuration and pick the display mode.

    Raises :class:`InvalidCycleConfiguration` for an unusable eclipse window.
    """
    garden = load_config(args.config)
    mode = "fullscreen" if args.fullscreen else "preview"
    return LaunchConfig(mode=mode, garden=garden, seed=args.seed, start_phase=args.start_phase)


def _create_window(config: LaunchConfig, logger: logging.Logger) -> tuple[pygame.Surface, tuple[int, int]]:
    """Create the pygame display surface according to resolved mode."""
    if config.mode == "fullscreen":
        display_info = pygame.display.Info()
        fullscreen_size = (display_info.current_w, display_info.current_h)
        try:
            window = pygame.display.set_mode(fullscreen_size, pygame.FULLSCREEN)
            return window, fullscreen_size
        except pygame.error:
            logger.info("fullscreen unavailable on this video driver; using preview window")

    try:
        window = pygame.display.set_mode(PREVIEW_SIZE, pygame.RESIZABLE)
    except pygame.error:
        window = pygame.display.set_mode(PREVIEW_SIZE)
    return window, PREVIEW_SIZE


def _compute_integer_scale(screen_size: tuple[int, int]) -> tuple[tuple[int, int], tuple[int, int]]:
    """Compute integer nearest-neighbor scale and centered offset."""
    screen_width, screen_height = screen_size
    scale = min(screen_width // INTERNAL_WIDTH, screen_height // INTERNAL_HEIGHT)
    if scale < 1:
        scale = 1

    scaled_size = (INTERNAL_WIDTH * scale, INTERNAL_HEIGHT * scale)
    offset = ((screen_width - scaled_size[0]) // 2, (screen_height - scaled_size[1]) // 2)
    return scaled_size, offset


def _rebuild_scaling(screen_size: tuple[int, int]) -> tuple[pygame.Surface, tuple[int, int], tuple[int, int]]:
    """Allocate surfaces only when output size changes."""
    scaled_size, scaled_offset = _compute_integer_scale(screen_size)
    scaled_surface = pygame.Surface(scaled_size)
    return scaled_surface, scaled_size, scaled_offset


def window_to_internal(
    position: tuple[int, int],
    scaled_size: tuple[int, int],
    offset: tuple[int, int],
) -> tuple[int, int] | None:
    """Map a window pixel to internal scene coordinates, or None in the letterbox."""
    scale = scaled_size[0] // INTERNAL_WIDTH
    x = position[0] - offset[0]
    y = position[1] - offset[1]
    if x < 0 or y < 0 or x >= scaled_size[0] or y >= scaled_size[1]:
        return None
    return x // scale, y // scale


def _handle_event(event: pygame.event.Event) -> tuple[bool, tuple[int, int] | None, tuple[int, int] | None]:
    """Return whether to shutdown, an optional new screen size, and an optional click position."""
    if event.type == pygame.QUIT:
        return True, None, None

    if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
        return True, None, None

    if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
        return False, None, event.pos

    if event.type == pygame.VIDEORESIZE:
        return False, (event.w, event.h), None

    if event.type == pygame.WINDOWRESIZED:
        return False, (event.x, event.y), None

    return False, None, None


def run(argv: list[str] | None = None) -> int:
    """Run the animation loop."""
    args = parse_arguments(argv)
    logger = configure_logging(args.debug)
    try:
        config = resolve_launch_config(args)
    except (InvalidCycleConfiguration, OSError, json.JSONDecodeError) as error:
        _build_parser().error(f"invalid configuration: {error}")

    pygame.init()
    window, output_size = _create_window(config, logger)
    pygame.display.set_caption("Tulip Eclipse")

    internal_surface = pygame.Surface((INTERNAL_WIDTH, INTERNAL_HEIGHT))
    scaled_surface, scaled_size, scaled_offset = _rebuild_scaling(output_size)

    clock = pygame.time.Clock()
    rng = create_random_source(config.seed)
    driver = CycleDriver(config.garden, start_phase=config.start_phase)
    scene = Scene((INTERNAL_WIDTH, INTERNAL_HEIGHT), config.garden, rng)

    try:
        while True:
            delta_time = driver.tick()

            for event in pygame.event.get():
                should_shutdown, new_size, click = _handle_event(event)
                if should_shutdown:
                    raise ShutdownRequested
                if new_size and new_size[0] > 0 and new_size[1] > 0:
                    scaled_surface, scaled_size, scaled_offset = _rebuild_scaling(new_size)
                if click is not None:
                    internal_position = window_to_internal(click, scaled_size, scaled_offset)
                    if internal_position is not None:
                        scene.handle_pointer(internal_position)

            scene.update(delta_time, driver)
            scene.render(internal_surface)

            pygame.transform.scale(internal_surface, scaled_size, scaled_surface)
            window.fill((0, 0, 0))
            window.blit(scaled_surface, scaled_offset)
            pygame.display.flip()
            clock.tick(TARGET_FPS)
    except ShutdownRequested:
        return 0
    finally:
        pygame.quit()


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    raise SystemExit(run(argv))


if __name__ == "__main__":
    main()
