from __future__ import annotations

import math

from pygame.math import Vector2

from ..core.frames import AgentFrame
from ..types.metrics import TickMetrics


def create_metrics(
    tick: int,
    boids: AgentFrame,
    predator_count: int,
    hazard_count: int,
    duration_ms: float,
) -> TickMetrics:
    population = len(boids)
    speeds = boids.speeds()
    average_speed = sum(speeds) / population if population else 0.0
    max_speed = max(speeds) if speeds else 0.0
    return TickMetrics(
        tick=tick,
        boids=population,
        predators=predator_count,
        hazards=hazard_count,
        average_speed=average_speed,
        max_speed=max_speed,
        polarization=polarization(boids),
        neighbor_checks=neighbor_checks(population, predator_count, hazard_count),
        tick_duration_ms=duration_ms,
    )


def polarization(boids: AgentFrame) -> float:
    """Length of the mean unit heading: 1.0 for a fully aligned flock, near 0 for a disordered one."""
    heading_sum = Vector2()
    moving = 0
    for vx, vy in zip(boids.vx, boids.vy):
        speed = math.hypot(vx, vy)
        if speed <= 0.0:
            continue
        heading_sum.x += vx / speed
        heading_sum.y += vy / speed
        moving += 1
    if moving == 0:
        return 0.0
    return heading_sum.length() / moving


def neighbor_checks(boids: int, predators: int, hazards: int) -> int:
    # every pair scan is exhaustive: boid-boid, boid-threat and predator-boid
    return boids * max(0, boids - 1) + boids * (predators + hazards) + predators * boids
