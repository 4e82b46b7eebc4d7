from __future__ import annotations


def rebound_axis(position: float, velocity: float, extent: float, damping: float) -> tuple[float, float]:
    if position < 0.0:
        return 0.0, -velocity * damping
    if position > extent:
        return extent, -velocity * damping
    return position, velocity


def rebound(
    x: float, y: float, vx: float, vy: float, width: float, height: float, damping: float
) -> tuple[float, float, float, float]:
    """Clamp a position into the domain, inverting velocity on each axis that left it."""
    x, vx = rebound_axis(x, vx, width, damping)
    y, vy = rebound_axis(y, vy, height, damping)
    return x, y, vx, vy
