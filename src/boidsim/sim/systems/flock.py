from __future__ import annotations

from typing import Optional, Sequence

from pygame.math import Vector2

from ..core.frames import AgentFrame, HazardFrame
from ..core.params import FlockParams, SteeringClamp
from ..utils.math2d import (
    _clamp_components,
    _clamp_length,
    _clamp_length_xy_f,
    _is_negligible,
    _safe_normalize,
    magnitude,
)
from ...rng import DeterministicRng
from .boundary import rebound


def update_boids(
    boids: AgentFrame,
    params: FlockParams,
    predators: Optional[AgentFrame] = None,
    hazards: Optional[HazardFrame] = None,
    rng: Optional[DeterministicRng] = None,
) -> AgentFrame:
    """Advance every boid by one tick and return the next-state frame.

    All boids read the pre-update state of the others; ``boids`` is left untouched.
    ``rng`` feeds the post-limit perturbation; pass ``None`` to disable it.
    """
    boids.validate("boids")
    if predators is not None:
        predators.validate("predators")
    if hazards is not None:
        hazards.validate("hazards")

    xs, ys, vxs, vys = boids.x, boids.y, boids.vx, boids.vy
    width = params.width
    height = params.height
    max_speed = params.max_speed
    damping = params.rebound_damping
    jitter = params.perturbation if rng is not None else 0.0

    out = AgentFrame()
    for i in range(len(boids)):
        velocity = Vector2(vxs[i], vys[i])
        steering = flocking_steering(i, xs, ys, vxs, vys, params)
        if predators is not None and len(predators) > 0:
            avoid = avoidance_vector(xs[i], ys[i], predators.x, predators.y, params.predator_radius)
            steering += steer_towards(avoid, velocity, params) * params.predator_avoid_weight
        if hazards is not None and len(hazards) > 0:
            avoid = avoidance_vector(xs[i], ys[i], hazards.x, hazards.y, hazards.radius)
            steering += steer_towards(avoid, velocity, params) * params.area_avoid_weight

        vx, vy = _clamp_length_xy_f(velocity.x + steering.x, velocity.y + steering.y, max_speed)
        if jitter > 0.0:
            vx += rng.next_range(-jitter, jitter)
            vy += rng.next_range(-jitter, jitter)

        x, y, vx, vy = rebound(xs[i] + vx, ys[i] + vy, vx, vy, width, height, damping)
        out.x.append(x)
        out.y.append(y)
        out.vx.append(vx)
        out.vy.append(vy)
    return out


def flocking_steering(
    index: int,
    xs: Sequence[float],
    ys: Sequence[float],
    vxs: Sequence[float],
    vys: Sequence[float],
    params: FlockParams,
) -> Vector2:
    """Weighted sum of the separation, alignment and cohesion steering for one boid."""
    px = xs[index]
    py = ys[index]
    separation_radius = params.separation_radius
    vision_radius = params.vision_radius

    sep_x = sep_y = 0.0
    ali_x = ali_y = 0.0
    coh_x = coh_y = 0.0
    sep_count = 0
    vision_count = 0
    for j in range(len(xs)):
        if j == index:
            continue
        dx = px - xs[j]
        dy = py - ys[j]
        d = magnitude(dx, dy)
        if 0.0 < d < separation_radius:
            sep_x += dx / d
            sep_y += dy / d
            sep_count += 1
        if d < vision_radius:
            ali_x += vxs[j]
            ali_y += vys[j]
            coh_x += xs[j]
            coh_y += ys[j]
            vision_count += 1

    velocity = Vector2(vxs[index], vys[index])
    steering = Vector2()
    if sep_count > 0:
        separation = Vector2(sep_x / sep_count, sep_y / sep_count)
        steering += steer_towards(separation, velocity, params) * params.separation_weight
    if vision_count > 0:
        alignment = Vector2(ali_x / vision_count, ali_y / vision_count)
        cohesion = Vector2(coh_x / vision_count - px, coh_y / vision_count - py)
        steering += steer_towards(alignment, velocity, params) * params.alignment_weight
        steering += steer_towards(cohesion, velocity, params) * params.cohesion_weight
    return steering


def avoidance_vector(
    px: float,
    py: float,
    xs: Sequence[float],
    ys: Sequence[float],
    radius: float | Sequence[float],
) -> Vector2:
    """Sum of unit vectors pointing away from every threat closer than its radius.

    ``radius`` is either one threshold for all threats or one per threat.
    """
    per_threat = not isinstance(radius, (int, float))
    away = Vector2()
    for k in range(len(xs)):
        dx = px - xs[k]
        dy = py - ys[k]
        d = magnitude(dx, dy)
        limit = radius[k] if per_threat else radius
        if 0.0 < d < limit:
            away.x += dx / d
            away.y += dy / d
    return away


def steer_towards(target: Vector2, velocity: Vector2, params: FlockParams) -> Vector2:
    """Turn an accumulated rule vector into a capped steering force (desired minus current)."""
    if _is_negligible(target):
        return Vector2()
    if params.steering_clamp is SteeringClamp.COMPONENT:
        desired = _safe_normalize(target) * params.max_speed
        return _clamp_components(desired - velocity, params.max_force)
    desired = _clamp_length(target, params.max_speed)
    return _clamp_length(desired - velocity, params.max_speed)
