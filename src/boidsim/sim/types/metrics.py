from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    boids: int
    predators: int
    hazards: int
    average_speed: float
    max_speed: float
    polarization: float
    neighbor_checks: int
    tick_duration_ms: float = 0.0
