from __future__ import annotations

import math

from pygame.math import Vector2


def _safe_normalize(vector: Vector2) -> Vector2:
    return _safe_normalize_xy(vector.x, vector.y)


def _safe_normalize_xy(x: float, y: float) -> Vector2:
    magnitude_sq = x * x + y * y
    if magnitude_sq < 1e-12:
        return Vector2()
    inv = 1.0 / math.sqrt(magnitude_sq)
    return Vector2(x * inv, y * inv)


def _clamp_value(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))


def _clamp_to_bounds(position: Vector2, radius: float, world_size: float) -> None:
    position.update(
        _clamp_value(position.x, radius, world_size - radius),
        _clamp_value(position.y, radius, world_size - radius),
    )


def _distance(a: Vector2, b: Vector2) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def _circles_overlap(a: Vector2, radius_a: float, b: Vector2, radius_b: float) -> bool:
    return _distance(a, b) < radius_a + radius_b
