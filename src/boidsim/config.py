from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from .sim.core.params import FlockParams, PredatorParams, classic_params, weighted_params

VARIANTS = ("classic", "weighted")

# predators and hazard zones only take part in the weighted variant by default
_DEFAULT_THREAT_COUNTS = {"classic": 0, "weighted": 10}

_FLOCK_OVERRIDES = (
    "max_speed",
    "max_force",
    "vision_radius",
    "separation_radius",
    "predator_radius",
    "separation_weight",
    "alignment_weight",
    "cohesion_weight",
    "predator_avoid_weight",
    "area_avoid_weight",
    "steering_clamp",
    "rebound_damping",
    "perturbation",
)


@dataclass
class BoidConfig:
    count: int = 300
    # None keeps the variant's value
    max_speed: Optional[float] = None
    max_force: Optional[float] = None
    # when set, overrides both vision_radius and separation_radius
    neighbor_radius: Optional[float] = None
    vision_radius: Optional[float] = None
    separation_radius: Optional[float] = None
    predator_radius: Optional[float] = None
    separation_weight: Optional[float] = None
    alignment_weight: Optional[float] = None
    cohesion_weight: Optional[float] = None
    predator_avoid_weight: Optional[float] = None
    area_avoid_weight: Optional[float] = None
    initial_velocity_range: float = 1.0
    # when set, initial velocities are rescaled to this speed
    initial_speed: Optional[float] = None
    steering_clamp: Optional[str] = None
    rebound_damping: Optional[float] = None
    perturbation: Optional[float] = None


@dataclass
class PredatorConfig:
    # None picks the variant's default
    count: Optional[int] = None
    pred_rel_speed: float = 1.5
    pursuit_force: float = 0.05
    rebound_damping: float = 1.0
    initial_velocity_range: float = 0.5


@dataclass
class HazardZoneConfig:
    position: tuple[float, float] = (0.0, 0.0)
    radius: float = 50.0


@dataclass
class HazardConfig:
    count: Optional[int] = None
    # random zones get radius round(width / U(min, max))
    radius_divisor_min: float = 10.0
    radius_divisor_max: float = 30.0
    zones: List[HazardZoneConfig] = field(default_factory=list)

@dataclass
class SimulationConfig:
    width: float = 1000.0
    height: float = 1000.0
    seed: int = 42
    variant: str = "weighted"
    config_version: str = "v1"
    boids: BoidConfig = field(default_factory=BoidConfig)
    predators: PredatorConfig = field(default_factory=PredatorConfig)
    hazards: HazardConfig = field(default_factory=HazardConfig)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)

    def flock_params(self) -> FlockParams:
        if self.variant not in VARIANTS:
            raise ValueError(f"Unknown variant: {self.variant}")
        values: dict[str, object] = dict(width=self.width, height=self.height)
        if self.variant == "weighted":
            # radii scale with the domain unless given explicitly
            values["vision_radius"] = values["separation_radius"] = self.width / 10.0
            values["predator_radius"] = float(round(self.width / 20.0))
        boids = self.boids
        for name in _FLOCK_OVERRIDES:
            value = getattr(boids, name)
            if value is not None:
                values[name] = value
        if boids.neighbor_radius is not None:
            values["vision_radius"] = values["separation_radius"] = boids.neighbor_radius
        preset = classic_params if self.variant == "classic" else weighted_params
        return preset(**values)

    def predator_params(self) -> PredatorParams:
        predators = self.predators
        return PredatorParams(
            width=self.width,
            height=self.height,
            max_speed=self.flock_params().max_speed,
            pred_rel_speed=predators.pred_rel_speed,
            pursuit_force=predators.pursuit_force,
            rebound_damping=predators.rebound_damping,
        )

    def predator_count(self) -> int:
        if self.predators.count is not None:
            return self.predators.count
        return _DEFAULT_THREAT_COUNTS.get(self.variant, 0)

    def hazard_count(self) -> int:
        if self.hazards.count is not None:
            return self.hazards.count
        return _DEFAULT_THREAT_COUNTS.get(self.variant, 0)


def load_config(raw: dict) -> SimulationConfig:
    def _pair(value: tuple[float, float] | list[float] | None) -> tuple[float, float]:
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return (float(value[0]), float(value[1]))
        raise ValueError(f"Hazard zone position must be a pair, got {value!r}")

    boids = BoidConfig(**raw.get("boids", {}))
    predators = PredatorConfig(**raw.get("predators", {}))
    hazards_raw = raw.get("hazards", {})
    zones = [
        HazardZoneConfig(position=_pair(zone.get("position")), radius=float(zone.get("radius", 50.0)))
        for zone in hazards_raw.get("zones", [])
    ]
    hazards = HazardConfig(zones=zones, **{k: v for k, v in hazards_raw.items() if k != "zones"})
    sim_values = {k: v for k, v in raw.items() if k not in {"boids", "predators", "hazards"}}
    config = SimulationConfig(boids=boids, predators=predators, hazards=hazards, **sim_values)
    if config.variant not in VARIANTS:
        raise ValueError(f"Unknown variant: {config.variant}")
    return config
