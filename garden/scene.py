"""Scene composition and rendering for the tulip garden."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import pygame

from garden.config import GardenConfig
from garden.cycle import CycleState, lerp, lerp_color, orbit_position, sky_color
from garden.driver import CycleDriver
from garden.fortune import Fortune, FortuneTeller
from garden.randomness import RandomSource, uniform
from garden.spores import ParticleSpawner, Spore
from garden.tween import ValueTween

CAMERA_POSITION = (0.0, 50.0, 300.0)
CAMERA_FOV_DEGREES = 75.0
NEAR_PLANE = 0.1
GROUND_LEVEL = -1.0
FOG_COLOR = (0x1A, 0x0E, 0x0C)
FOG_DENSITY = 0.001

GROUND_COLOR = (0x2B, 0x1B, 0x0E)
STEM_COLOR = (0x4C, 0xBB, 0x17)
SUN_COLOR = (0xFF, 0xAA, 0x00)
MOON_COLOR = (0xAA, 0xAA, 0xAA)
MOON_EMISSIVE = (0x44, 0x44, 0x44)
HALO_COLOR = (0xFF, 0xE5, 0xAA)
CLOUD_COLOR = (0x6B, 0x4A, 0x2C)
SPORE_COLOR = (255, 255, 255)
BANNER_TEXT_COLOR = (250, 236, 204)

SUN_RADIUS = 20.0
MOON_RADIUS = 15.0
HALO_INNER_RADIUS = 18.0
HALO_OUTER_RADIUS = 25.0
HALO_OPACITY = 0.6
CLOUD_OPACITY = 0.6
CLOUD_DRIFT_PER_TICK = 0.05
CLOUD_WRAP_X = 300.0

STEM_HEIGHT = 30.0
STEM_RADIUS = 0.8
PETAL_COUNT = 6
PETAL_RADIUS = 5.0
PETAL_DISTANCE = 5.0
PETAL_STRETCH = 1.5
PETAL_CLOSED_ANGLE = 0.4
PETAL_OPEN_ANGLE = -0.7
SWAY_AMPLITUDE = 0.1
SWAY_RATE_PER_MS = 0.0005
SPORE_RADIUS = 0.3

SUN_GLOW_NORMAL = 1.5
SUN_GLOW_ECLIPSE = 3.0
MOON_GLOW_NORMAL = 0.0
MOON_GLOW_ECLIPSE = 1.5
GLOW_TWEEN_SECONDS = 1.0


@dataclass
class Tulip:
    """A stem with six petals pivoting at its top."""

    x: float
    z: float
    color: tuple[int, int, int]

    def sway_angle(self, session_millis: float) -> float:
        return SWAY_AMPLITUDE * math.sin(session_millis * SWAY_RATE_PER_MS + self.x)

    def to_world(self, local: tuple[float, float, float], sway: float) -> tuple[float, float, float]:
        """Rotate a tulip-local point about the stem base, then place it in the garden."""
        lx, ly, lz = local
        cos_s = math.cos(sway)
        sin_s = math.sin(sway)
        return (self.x + lx * cos_s - ly * sin_s, lx * sin_s + ly * cos_s, self.z + lz)

    def petal_centers(self, bloom_factor: float) -> list[tuple[float, float, float]]:
        tilt = lerp(PETAL_CLOSED_ANGLE, PETAL_OPEN_ANGLE, bloom_factor)
        reach_y = -PETAL_DISTANCE * math.sin(tilt)
        reach_z = PETAL_DISTANCE * math.cos(tilt)

        centers: list[tuple[float, float, float]] = []
        for index in range(PETAL_COUNT):
            heading = index * (2.0 * math.pi / PETAL_COUNT)
            centers.append((reach_z * math.sin(heading), STEM_HEIGHT + reach_y, reach_z * math.cos(heading)))
        return centers


@dataclass
class Cloud:
    """Loose group of puffs drifting slowly along x."""

    x: float
    y: float
    z: float
    puffs: list[tuple[float, float, float, float]] = field(default_factory=list)

    def drift(self) -> None:
        self.x += CLOUD_DRIFT_PER_TICK
        if self.x > CLOUD_WRAP_X:
            self.x = -CLOUD_WRAP_X


def fog_factor(depth: float) -> float:
    """Exponential-squared fog blend for a point at the given view depth."""
    return 1.0 - math.exp(-((FOG_DENSITY * depth) ** 2))


def _random_color(rng: RandomSource) -> tuple[int, int, int]:
    return tuple(int(rng.random() * 255) for _ in range(3))


class Scene:
    """High-level scene logic for update, pointer input, and render operations."""

    def __init__(self, internal_size: tuple[int, int], config: GardenConfig, rng: RandomSource) -> None:
        self.width, self.height = internal_size
        self.config = config
        self.rng = rng
        self._focal = (self.height / 2.0) / math.tan(math.radians(CAMERA_FOV_DEGREES / 2.0))

        self.tulips = [
            Tulip(x=uniform(rng, -100.0, 100.0), z=uniform(rng, -100.0, 100.0), color=_random_color(rng))
            for _ in range(config.tulip_count)
        ]
        self.clouds = [self._build_cloud() for _ in range(config.cloud_count)]

        self.spawner = ParticleSpawner(config, rng)
        self.fortune_teller = FortuneTeller(config, rng)
        self.sun_glow = ValueTween(SUN_GLOW_NORMAL, GLOW_TWEEN_SECONDS)
        self.moon_glow = ValueTween(MOON_GLOW_NORMAL, GLOW_TWEEN_SECONDS)

        self._star_layer = self._build_star_layer()
        self._cloud_layer = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        self._effect_layer = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        self._horizon_y = self._compute_horizon()
        self._font: pygame.font.Font | None = None

        self.state: CycleState | None = None
        self._session_time = 0.0

    def _build_cloud(self) -> Cloud:
        cloud = Cloud(
            x=uniform(self.rng, -150.0, 150.0),
            y=uniform(self.rng, 50.0, 100.0),
            z=uniform(self.rng, -100.0, 100.0),
        )
        puff_count = 4 + int(self.rng.random() * 3)
        for _ in range(puff_count):
            cloud.puffs.append(
                (
                    uniform(self.rng, -15.0, 15.0),
                    uniform(self.rng, 0.0, 5.0),
                    uniform(self.rng, -15.0, 15.0),
                    uniform(self.rng, 0.8, 1.5),
                )
            )
        return cloud

    def project(self, point: tuple[float, float, float]) -> tuple[float, float, float] | None:
        """Project a world point to (screen_x, screen_y, pixels_per_unit)."""
        cam_x, cam_y, cam_z = CAMERA_POSITION
        depth = cam_z - point[2]
        if depth <= NEAR_PLANE:
            return None
        scale = self._focal / depth
        return (
            self.width / 2.0 + (point[0] - cam_x) * scale,
            self.height / 2.0 - (point[1] - cam_y) * scale,
            scale,
        )

    def _compute_horizon(self) -> int:
        return int(self.ground_line_y(-1000.0))

    def _build_star_layer(self) -> pygame.Surface:
        """Scatter stars once; their opacity is applied per frame."""
        layer = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        self.star_points: list[tuple[int, int]] = []
        for _ in range(self.config.star_count):
            star = (
                (self.rng.random() - 0.5) * 2000.0,
                self.rng.random() * 1000.0 - 200.0,
                (self.rng.random() - 0.5) * 2000.0,
            )
            projected = self.project(star)
            if projected is None:
                continue
            x, y, _ = projected
            if 0 <= x < self.width and 0 <= y < self.height:
                color = lerp_color((255, 255, 255), FOG_COLOR, fog_factor(CAMERA_POSITION[2] - star[2]))
                layer.set_at((int(x), int(y)), (*color, 255))
                self.star_points.append((int(x), int(y)))
        return layer

    def _ensure_font(self) -> pygame.font.Font | None:
        if not pygame.font.get_init():
            return None
        if self._font is None:
            self._font = pygame.font.Font(None, 18)
        return self._font

    def update(self, delta_time: float, driver: CycleDriver) -> None:
        """Update glow tweens, clouds, and spores from the driver's cycle state."""
        self.state = driver.state
        self._session_time = driver.session_time

        if self.state.eclipse_active:
            self.sun_glow.retarget(SUN_GLOW_ECLIPSE)
            self.moon_glow.retarget(MOON_GLOW_ECLIPSE)
        else:
            self.sun_glow.retarget(SUN_GLOW_NORMAL)
            self.moon_glow.retarget(MOON_GLOW_NORMAL)
        self.sun_glow.update(delta_time)
        self.moon_glow.update(delta_time)

        for cloud in self.clouds:
            cloud.drift()

        self.spawner.update(self.state, self._session_time, len(self.tulips))

    def tulip_bounds(self, tulip: Tulip) -> pygame.Rect | None:
        """Screen rectangle covering a tulip's stem and flower head."""
        base = self.project((tulip.x, 0.0, tulip.z))
        top = self.project((tulip.x, STEM_HEIGHT + PETAL_RADIUS * PETAL_STRETCH, tulip.z))
        if base is None or top is None:
            return None
        half_width = max(2, int(round(PETAL_DISTANCE * 2.0 * base[2])))
        return pygame.Rect(
            int(base[0]) - half_width,
            int(top[1]),
            half_width * 2,
            max(1, int(base[1] - top[1])),
        )

    def tulip_at(self, position: tuple[int, int]) -> Tulip | None:
        """Return the front-most tulip under an internal-resolution position."""
        for tulip in sorted(self.tulips, key=lambda item: item.z, reverse=True):
            bounds = self.tulip_bounds(tulip)
            if bounds is not None and bounds.collidepoint(position):
                return tulip
        return None

    def handle_pointer(self, position: tuple[int, int]) -> Fortune | None:
        if self.state is None or self.tulip_at(position) is None:
            return None
        return self.fortune_teller.on_tulip_clicked(self.state, self._session_time)

    def _render_sky(self, surface: pygame.Surface, state: CycleState) -> None:
        surface.fill(sky_color(state.sky_blend))
        if state.star_opacity > 0.0:
            self._star_layer.set_alpha(int(round(255 * state.star_opacity)))
            surface.blit(self._star_layer, (0, 0))

    def ground_line_y(self, z: float) -> float:
        """Screen row where the ground plane meets world depth ``z``."""
        projected = self.project((0.0, GROUND_LEVEL, z))
        return projected[1] if projected is not None else float(self.height)

    def halo_rect(self, state: CycleState) -> pygame.Rect | None:
        """Bounds of the eclipse halo, a flat ring lying around the moon."""
        if not state.eclipse_active:
            return None
        moon_x, moon_y = orbit_position(state.moon_angle, self.config.orbit_radius)
        moon = self.project((moon_x, moon_y, 0.0))
        front = self.project((moon_x, moon_y, HALO_OUTER_RADIUS))
        back = self.project((moon_x, moon_y, -HALO_OUTER_RADIUS))
        if moon is None or front is None or back is None:
            return None

        half_width = max(2, int(HALO_OUTER_RADIUS * moon[2]))
        height = max(2, int(round(abs(front[1] - back[1]))))
        return pygame.Rect(int(moon[0]) - half_width, int(moon[1]) - height // 2, half_width * 2, height)

    def _render_bodies(self, surface: pygame.Surface, state: CycleState) -> None:
        radius = self.config.orbit_radius
        sun_x, sun_y = orbit_position(state.sun_angle, radius)
        moon_x, moon_y = orbit_position(state.moon_angle, radius)
        sun = self.project((sun_x, sun_y, 0.0))
        moon = self.project((moon_x, moon_y, 0.0))

        # Bodies orbit at z=0; the ground hides whatever sinks below it there.
        surface.set_clip(pygame.Rect(0, 0, self.width, math.ceil(self.ground_line_y(0.0))))
        self._effect_layer.fill((0, 0, 0, 0))
        if sun is not None:
            glow_alpha = int(min(255, 40 * self.sun_glow.value))
            glow_radius = int(SUN_RADIUS * sun[2] * (1.0 + 0.25 * self.sun_glow.value))
            pygame.draw.circle(self._effect_layer, (*SUN_COLOR, glow_alpha), (int(sun[0]), int(sun[1])), glow_radius)
            surface.blit(self._effect_layer, (0, 0))
            pygame.draw.circle(surface, SUN_COLOR, (int(sun[0]), int(sun[1])), max(1, int(SUN_RADIUS * sun[2])))

        if moon is not None:
            glow = self.moon_glow.value
            moon_color = tuple(min(255, int(MOON_COLOR[c] + MOON_EMISSIVE[c] * glow)) for c in range(3))
            center = (int(moon[0]), int(moon[1]))
            pygame.draw.circle(surface, moon_color, center, max(1, int(MOON_RADIUS * moon[2])))

        halo = self.halo_rect(state)
        if halo is not None and moon is not None:
            self._effect_layer.fill((0, 0, 0, 0))
            ring_width = max(1, min(halo.height // 2, int((HALO_OUTER_RADIUS - HALO_INNER_RADIUS) * moon[2])))
            halo_alpha = int(255 * HALO_OPACITY)
            pygame.draw.ellipse(self._effect_layer, (*HALO_COLOR, halo_alpha), halo, ring_width)
            surface.blit(self._effect_layer, (0, 0))
        surface.set_clip(None)

    def _render_clouds(self, surface: pygame.Surface) -> None:
        self._cloud_layer.fill((0, 0, 0, 0))
        alpha = int(255 * CLOUD_OPACITY)
        for cloud in sorted(self.clouds, key=lambda item: item.z):
            for offset_x, offset_y, offset_z, scale in cloud.puffs:
                point = (cloud.x + offset_x, cloud.y + offset_y, cloud.z + offset_z)
                projected = self.project(point)
                if projected is None:
                    continue
                color = lerp_color(CLOUD_COLOR, FOG_COLOR, fog_factor(CAMERA_POSITION[2] - point[2]))
                puff_radius = max(1, int(15.0 * scale * projected[2]))
                pygame.draw.circle(self._cloud_layer, (*color, alpha), (int(projected[0]), int(projected[1])), puff_radius)
        surface.blit(self._cloud_layer, (0, 0))

    def _render_ground(self, surface: pygame.Surface) -> None:
        ground_rect = pygame.Rect(0, self._horizon_y, self.width, self.height - self._horizon_y)
        pygame.draw.rect(surface, GROUND_COLOR, ground_rect)

    def _render_tulip(self, surface: pygame.Surface, tulip: Tulip, bloom_factor: float, sway: float) -> None:
        base = self.project(tulip.to_world((0.0, 0.0, 0.0), sway))
        top = self.project(tulip.to_world((0.0, STEM_HEIGHT, 0.0), sway))
        if base is None or top is None:
            return

        stem_width = max(1, int(round(STEM_RADIUS * 2.0 * base[2])))
        pygame.draw.line(surface, STEM_COLOR, (int(base[0]), int(base[1])), (int(top[0]), int(top[1])), stem_width)

        if bloom_factor <= 0.0:
            return

        petals = []
        for center in tulip.petal_centers(bloom_factor):
            world = tulip.to_world(center, sway)
            projected = self.project(world)
            if projected is not None:
                petals.append((world[2], projected))

        # Back petals first, shaded darker.
        for depth, (x, y, scale) in sorted(petals, key=lambda item: item[0]):
            shade = 0.7 + 0.3 * ((depth - tulip.z) / PETAL_DISTANCE + 1.0) / 2.0
            color = tuple(max(0, min(255, int(channel * shade))) for channel in tulip.color)
            width = max(1, int(PETAL_RADIUS * 2.0 * bloom_factor * scale))
            height = max(1, int(PETAL_RADIUS * 2.0 * PETAL_STRETCH * bloom_factor * scale))
            pygame.draw.ellipse(surface, color, pygame.Rect(int(x) - width // 2, int(y) - height // 2, width, height))

    def _render_spores(self, surface: pygame.Surface, tulip_index: int, sway: float) -> None:
        tulip = self.tulips[tulip_index]
        spores: list[Spore] = self.spawner.spores_for(tulip_index)
        if not spores:
            return

        self._effect_layer.fill((0, 0, 0, 0))
        for spore in spores:
            projected = self.project(tulip.to_world((spore.x, spore.y, 0.0), sway))
            if projected is None:
                continue
            alpha = max(0, min(255, int(255 * spore.opacity)))
            radius = max(1, int(SPORE_RADIUS * projected[2] * 2.0))
            pygame.draw.circle(self._effect_layer, (*SPORE_COLOR, alpha), (int(projected[0]), int(projected[1])), radius)
        surface.blit(self._effect_layer, (0, 0))

    def _render_fortune(self, surface: pygame.Surface) -> None:
        fortune = self.fortune_teller.active_fortune(self._session_time)
        font = self._ensure_font()
        if fortune is None or font is None:
            return

        label = font.render(fortune.text, True, BANNER_TEXT_COLOR)
        padding = 6
        banner = pygame.Surface((label.get_width() + padding * 2, label.get_height() + padding * 2), pygame.SRCALPHA)
        banner.fill((18, 6, 5, 190))
        banner.blit(label, (padding, padding))
        surface.blit(banner, ((self.width - banner.get_width()) // 2, 12))

    def render(self, surface: pygame.Surface) -> None:
        """Render sky, ground, orbiting bodies, clouds, tulips, and overlays."""
        if self.state is None:
            return
        state = self.state

        # 1) Sky and stars
        self._render_sky(surface, state)

        # 2) Ground
        self._render_ground(surface)

        # 3) Sun, moon, eclipse halo above the ground line
        self._render_bodies(surface, state)

        # 4) Clouds
        self._render_clouds(surface)

        # 5) Tulips and their spores, far to near
        session_millis = self._session_time * 1000.0
        order = sorted(range(len(self.tulips)), key=lambda index: self.tulips[index].z)
        for index in order:
            tulip = self.tulips[index]
            sway = tulip.sway_angle(session_millis)
            self._render_tulip(surface, tulip, state.bloom_factor, sway)
            self._render_spores(surface, index, sway)

        # 6) Fortune banner
        self._render_fortune(surface)
