from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class SteeringClamp(str, Enum):
    # each steering component clamped to [-max_force, max_force]
    COMPONENT = "component"
    # steering vector magnitude limited to max_speed
    MAGNITUDE = "magnitude"


@dataclass(frozen=True)
class FlockParams:
    width: float = 1000.0
    height: float = 1000.0
    max_speed: float = 2.0
    max_force: float = 0.05
    vision_radius: float = 100.0
    separation_radius: float = 100.0
    predator_radius: float = 50.0
    separation_weight: float = 1.0
    alignment_weight: float = 1.0
    cohesion_weight: float = 1.0
    predator_avoid_weight: float = 1.0
    area_avoid_weight: float = 1.0
    steering_clamp: SteeringClamp = SteeringClamp.COMPONENT
    rebound_damping: float = 0.9
    perturbation: float = 0.0

    def __post_init__(self) -> None:
        if not isinstance(self.steering_clamp, SteeringClamp):
            object.__setattr__(self, "steering_clamp", SteeringClamp(self.steering_clamp))
        _check_extent(self.width, self.height)
        _check_non_negative(
            max_speed=self.max_speed,
            max_force=self.max_force,
            vision_radius=self.vision_radius,
            separation_radius=self.separation_radius,
            predator_radius=self.predator_radius,
            perturbation=self.perturbation,
        )
        _check_damping(self.rebound_damping)


@dataclass(frozen=True)
class PredatorParams:
    width: float = 1000.0
    height: float = 1000.0
    max_speed: float = 2.0
    pred_rel_speed: float = 1.5
    pursuit_force: float = 0.05
    rebound_damping: float = 1.0

    def __post_init__(self) -> None:
        _check_extent(self.width, self.height)
        _check_non_negative(
            max_speed=self.max_speed,
            pred_rel_speed=self.pred_rel_speed,
            pursuit_force=self.pursuit_force,
        )
        _check_damping(self.rebound_damping)

    @property
    def speed_limit(self) -> float:
        return self.max_speed * self.pred_rel_speed


def classic_params(**overrides: object) -> FlockParams:
    """Unweighted rules, per-component force clamp, damped rebound, no jitter."""
    base = FlockParams(
        width=1000.0,
        height=800.0,
        max_speed=5.0,
        max_force=0.2,
        vision_radius=50.0,
        separation_radius=20.0,
        steering_clamp=SteeringClamp.COMPONENT,
        rebound_damping=0.9,
        perturbation=0.0,
    )
    return replace(base, **overrides)


def weighted_params(**overrides: object) -> FlockParams:
    """Weighted rules with predator/area avoidance, magnitude limits, full inversion and jitter."""
    base = FlockParams(
        width=1000.0,
        height=1000.0,
        max_speed=2.0,
        max_force=0.05,
        vision_radius=100.0,
        separation_radius=100.0,
        predator_radius=50.0,
        separation_weight=1.0,
        alignment_weight=0.1,
        cohesion_weight=0.1,
        predator_avoid_weight=1.5,
        area_avoid_weight=1.0,
        steering_clamp=SteeringClamp.MAGNITUDE,
        rebound_damping=1.0,
        perturbation=0.05,
    )
    return replace(base, **overrides)


def _check_extent(width: float, height: float) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"Domain extent must be positive, got width={width}, height={height}")


def _check_non_negative(**values: float) -> None:
    for name, value in values.items():
        if value < 0:
            raise ValueError(f"{name} must be non-negative, got {value}")


def _check_damping(damping: float) -> None:
    if not 0.0 <= damping <= 1.0:
        raise ValueError(f"rebound_damping must lie in [0, 1], got {damping}")
