from __future__ import annotations

import logging
import math
from time import perf_counter
from typing import Optional

from ...config import SimulationConfig
from ...rng import DeterministicRng, derive_stream_seed
from ..systems import metrics as metrics_system
from ..systems.flock import update_boids
from ..systems.predators import update_predators
from ..types.metrics import TickMetrics
from ..types.snapshot import Snapshot, SnapshotMetadata, SnapshotWorld
from .frames import AgentFrame, HazardFrame

logger = logging.getLogger(__name__)

_PERTURBATION_RNG_SALT = 0x9E3779B97F4A7C15
_HAZARD_RNG_SALT = 0xA5A5F00DC0FFEE11


class World:
    """Holds the authoritative frames and advances them one tick at a time."""

    def __init__(self, config: SimulationConfig):
        self._config = config
        self._flock_params = config.flock_params()
        self._predator_params = config.predator_params()
        self._rng = DeterministicRng(config.seed)
        self._hazard_rng = DeterministicRng(derive_stream_seed(config.seed, _HAZARD_RNG_SALT))
        self._perturbation_rng = DeterministicRng(derive_stream_seed(config.seed, _PERTURBATION_RNG_SALT))
        self._boids = AgentFrame()
        self._predators = AgentFrame()
        self._hazards = HazardFrame()
        self._metrics: TickMetrics | None = None
        self._bootstrap()

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def boids(self) -> AgentFrame:
        return self._boids

    @property
    def predators(self) -> AgentFrame:
        return self._predators

    @property
    def hazards(self) -> HazardFrame:
        return self._hazards

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    def reset(self) -> None:
        self._rng.reset()
        self._hazard_rng.reset()
        self._perturbation_rng.reset()
        self._metrics = None
        self._bootstrap()

    def step(self, tick: int) -> TickMetrics:
        start = perf_counter()
        predators = self._predators if len(self._predators) else None
        hazards = self._hazards if len(self._hazards) else None
        # boids flee the current predators; predators then chase the moved boids
        boids = update_boids(
            self._boids,
            self._flock_params,
            predators=predators,
            hazards=hazards,
            rng=self._perturbation_rng,
        )
        next_predators = update_predators(self._predators, boids, self._predator_params)
        self._boids = boids
        self._predators = next_predators

        duration_ms = (perf_counter() - start) * 1000.0
        self._metrics = metrics_system.create_metrics(
            tick, self._boids, len(self._predators), len(self._hazards), duration_ms
        )
        logger.debug(
            "tick %d: avg_speed=%.4f polarization=%.4f (%.2f ms)",
            tick,
            self._metrics.average_speed,
            self._metrics.polarization,
            duration_ms,
        )
        return self._metrics

    def snapshot(self, tick: int) -> Snapshot:
        metrics = self._metrics
        if metrics is None:
            metrics = metrics_system.create_metrics(tick, self._boids, len(self._predators), len(self._hazards), 0.0)
        return Snapshot(
            tick=tick,
            metrics=metrics,
            boids=self._boids.to_records(),
            predators=self._predators.to_records(),
            hazards=self._hazards.to_records(),
            world=SnapshotWorld(width=self._config.width, height=self._config.height),
            metadata=SnapshotMetadata(
                seed=self._config.seed,
                variant=self._config.variant,
                config_version=self._config.config_version,
            ),
        )

    def _bootstrap(self) -> None:
        config = self._config
        boid_cfg = config.boids
        predator_cfg = config.predators
        self._boids = self._random_agents(
            boid_cfg.count, boid_cfg.initial_velocity_range, boid_cfg.initial_speed
        )
        self._predators = self._random_agents(config.predator_count(), predator_cfg.initial_velocity_range, None)
        self._hazards = self._build_hazards()
        logger.info(
            "Bootstrapped %s world %.0fx%.0f: %d boids, %d predators, %d hazard zones (seed=%d)",
            config.variant,
            config.width,
            config.height,
            len(self._boids),
            len(self._predators),
            len(self._hazards),
            config.seed,
        )

    def _random_agents(self, count: int, velocity_range: float, initial_speed: Optional[float]) -> AgentFrame:
        frame = AgentFrame()
        rng = self._rng
        for _ in range(count):
            frame.x.append(rng.next_range(0.0, self._config.width))
            frame.y.append(rng.next_range(0.0, self._config.height))
            vx = rng.next_range(-velocity_range, velocity_range)
            vy = rng.next_range(-velocity_range, velocity_range)
            if initial_speed is not None:
                speed = math.hypot(vx, vy)
                if speed > 0.0:
                    vx = vx / speed * initial_speed
                    vy = vy / speed * initial_speed
            frame.vx.append(vx)
            frame.vy.append(vy)
        return frame

    def _build_hazards(self) -> HazardFrame:
        hazard_cfg = self._config.hazards
        frame = HazardFrame()
        if hazard_cfg.zones:
            for zone in hazard_cfg.zones:
                frame.x.append(zone.position[0])
                frame.y.append(zone.position[1])
                frame.radius.append(zone.radius)
            return frame
        rng = self._hazard_rng
        for _ in range(self._config.hazard_count()):
            frame.x.append(rng.next_range(0.0, self._config.width))
            frame.y.append(rng.next_range(0.0, self._config.height))
            divisor = rng.next_range(hazard_cfg.radius_divisor_min, hazard_cfg.radius_divisor_max)
            frame.radius.append(float(round(self._config.width / divisor)))
        return frame
