from __future__ import annotations

import math
from typing import Optional, Sequence

from ..core.frames import AgentFrame
from ..core.params import PredatorParams
from ..utils.math2d import _clamp_length_xy_f, magnitude
from .boundary import rebound


def update_predators(predators: AgentFrame, boids: AgentFrame, params: PredatorParams) -> AgentFrame:
    """Advance every predator by one tick, each one chasing its nearest boid."""
    predators.validate("predators")
    boids.validate("boids")

    bx = boids.x
    by = boids.y
    speed_limit = params.speed_limit
    pursuit = params.pursuit_force

    out = AgentFrame()
    for i in range(len(predators)):
        px = predators.x[i]
        py = predators.y[i]
        vx = predators.vx[i]
        vy = predators.vy[i]

        target = nearest_index(px, py, bx, by)
        if target is not None:
            dx = bx[target] - px
            dy = by[target] - py
            d = magnitude(dx, dy)
            if d > 0.0:
                vx += dx / d * pursuit
                vy += dy / d * pursuit

        vx, vy = _clamp_length_xy_f(vx, vy, speed_limit)
        x, y, vx, vy = rebound(px + vx, py + vy, vx, vy, params.width, params.height, params.rebound_damping)
        out.x.append(x)
        out.y.append(y)
        out.vx.append(vx)
        out.vy.append(vy)
    return out


def nearest_index(px: float, py: float, xs: Sequence[float], ys: Sequence[float]) -> Optional[int]:
    # strict comparison keeps the first index on ties
    closest: Optional[int] = None
    closest_dist = math.inf
    for j in range(len(xs)):
        dx = xs[j] - px
        dy = ys[j] - py
        d = magnitude(dx, dy)
        if d < closest_dist:
            closest_dist = d
            closest = j
    return closest
