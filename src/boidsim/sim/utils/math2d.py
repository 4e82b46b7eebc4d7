from __future__ import annotations

import math

from pygame.math import Vector2

_MIN_LENGTH_SQ = 1e-10


def magnitude(x: float, y: float) -> float:
    return math.sqrt(x * x + y * y)


def _safe_normalize(vector: Vector2) -> Vector2:
    return _safe_normalize_xy(vector.x, vector.y)


def _safe_normalize_xy(x: float, y: float) -> Vector2:
    magnitude_sq = x * x + y * y
    if magnitude_sq < _MIN_LENGTH_SQ:
        return Vector2()
    inv = 1.0 / math.sqrt(magnitude_sq)
    return Vector2(x * inv, y * inv)


def _clamp_length(vector: Vector2, max_length: float) -> Vector2:
    """Rescale ``vector`` down to ``max_length`` if it is longer; direction is kept."""
    if max_length <= 0:
        return Vector2()
    magnitude_sq = vector.length_squared()
    if magnitude_sq <= max_length * max_length:
        return Vector2(vector)
    return vector * (max_length / math.sqrt(magnitude_sq))


def _clamp_length_xy_f(x: float, y: float, max_length: float) -> tuple[float, float]:
    if max_length <= 0.0:
        return 0.0, 0.0
    magnitude_sq = x * x + y * y
    max_sq = max_length * max_length
    if magnitude_sq <= max_sq:
        return x, y
    inv = max_length / math.sqrt(magnitude_sq)
    return x * inv, y * inv


def _clamp_components(vector: Vector2, limit: float) -> Vector2:
    return Vector2(_clamp_value(vector.x, -limit, limit), _clamp_value(vector.y, -limit, limit))


def _clamp_value(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))


def _is_negligible(vector: Vector2) -> bool:
    return vector.length_squared() < _MIN_LENGTH_SQ
