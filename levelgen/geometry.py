"""Geometry helpers shared by the pattern library and the level assembler."""

import math
import random
from typing import Sequence

import numpy as np
from scipy.spatial import cKDTree

from .base import MIN_SPACING, Peg


def safe_spacing(value: float, floor: float = MIN_SPACING) -> float:
    """Floor a spacing or radius so it can safely bound a placement loop.

    Args:
        value: Requested spacing/radius.
        floor: Smallest value allowed.

    Returns:
        value, or floor if value is below it or not finite.
    """
    if not math.isfinite(value) or value < floor:
        return floor
    return value


def peg_positions(pegs: Sequence[Peg]) -> np.ndarray:
    """Return peg positions as an Nx2 float array."""
    if not pegs:
        return np.empty((0, 2), dtype=np.float64)
    return np.array([(peg.x, peg.y) for peg in pegs], dtype=np.float64)


def rotate_about(
    pegs: Sequence[Peg], cx: float, cy: float, angle: float
) -> list[Peg]:
    """Rotate pegs about a point, keeping their colors.

    Args:
        pegs: Pegs to rotate.
        cx: Rotation center X.
        cy: Rotation center Y.
        angle: Rotation angle in radians.

    Returns:
        New list of rotated pegs.
    """
    if not pegs:
        return []

    offsets = peg_positions(pegs) - np.array([cx, cy])
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    rx = offsets[:, 0] * cos_a - offsets[:, 1] * sin_a + cx
    ry = offsets[:, 0] * sin_a + offsets[:, 1] * cos_a + cy

    return [
        Peg(float(x), float(y), peg.color_index)
        for x, y, peg in zip(rx, ry, pegs)
    ]


def sample_spaced_points(
    rng: random.Random,
    min_x: float,
    min_y: float,
    max_x: float,
    max_y: float,
    min_distance: float,
    count: int,
    existing: Sequence[Peg] = (),
    max_attempts: int | None = None,
) -> list[tuple[float, float]]:
    """Rejection-sample points inside a box that keep a minimum distance.

    Gives up once the attempt budget is spent, so fewer than count points
    may be returned.

    Args:
        rng: Random source.
        min_x: Left bound.
        min_y: Top bound.
        max_x: Right bound.
        max_y: Bottom bound.
        min_distance: Minimum distance to existing and newly placed points.
        count: Number of points wanted.
        existing: Pegs the new points must also keep clear of.
        max_attempts: Attempt budget (default: 10 * count).

    Returns:
        List of (x, y) points in placement order.
    """
    count = int(count)
    if count <= 0:
        return []
    if max_attempts is None:
        max_attempts = count * 10

    min_sq = min_distance * min_distance
    blocked = peg_positions(existing)
    placed = np.empty((count, 2), dtype=np.float64)
    num_placed = 0
    attempts = 0

    while num_placed < count and attempts < max_attempts:
        attempts += 1
        x = rng.uniform(min_x, max_x)
        y = rng.uniform(min_y, max_y)

        if blocked.size:
            d = blocked - (x, y)
            if np.any(np.einsum("ij,ij->i", d, d) < min_sq):
                continue
        if num_placed:
            d = placed[:num_placed] - (x, y)
            if np.any(np.einsum("ij,ij->i", d, d) < min_sq):
                continue

        placed[num_placed] = (x, y)
        num_placed += 1

    return [(float(x), float(y)) for x, y in placed[:num_placed]]


def closest_pair_distance(pegs: Sequence[Peg]) -> float:
    """Smallest distance between any two pegs (inf for fewer than two)."""
    if len(pegs) < 2:
        return math.inf
    points = peg_positions(pegs)
    dists, _ = cKDTree(points).query(points, k=2)
    return float(np.min(dists[:, 1]))
