"""Standalone peg cleanup utilities.

These functions are used by the pattern library (clustered pattern), the
level assembler and the minimum-count top-up.
"""

from typing import Sequence

import numpy as np
from scipy.spatial import cKDTree

from .base import LevelGeneratorParams, Peg
from .geometry import peg_positions


def remove_overlaps(pegs: Sequence[Peg], min_distance: float) -> list[Peg]:
    """Drop pegs closer than min_distance to an earlier kept peg.

    Pegs are visited in order; a peg survives only if no peg kept before it
    lies strictly closer than min_distance.

    Args:
        pegs: Candidate pegs, in priority order.
        min_distance: Minimum allowed center-to-center distance.

    Returns:
        Surviving pegs in their original order.
    """
    if len(pegs) < 2 or min_distance <= 0:
        return list(pegs)

    points = peg_positions(pegs)
    tree = cKDTree(points)
    neighbours = tree.query_ball_point(points, r=min_distance)
    kept = np.zeros(len(pegs), dtype=bool)

    for i, candidates in enumerate(neighbours):
        too_close = False
        for j in candidates:
            if j >= i or not kept[j]:
                continue
            dx = points[i, 0] - points[j, 0]
            dy = points[i, 1] - points[j, 1]
            # query_ball_point is inclusive; equal distance is allowed
            if dx * dx + dy * dy < min_distance * min_distance:
                too_close = True
                break
        kept[i] = not too_close

    return [peg for peg, keep in zip(pegs, kept) if keep]


def remove_edge_pegs(
    pegs: Sequence[Peg],
    min_edge_distance: float,
    canvas_width: float,
    canvas_height: float,
    horizontal_margin: float,
) -> list[Peg]:
    """Drop pegs too close to the side margins or the top/bottom edges.

    Args:
        pegs: Candidate pegs.
        min_edge_distance: Required clearance.
        canvas_width: Canvas width.
        canvas_height: Canvas height.
        horizontal_margin: Unplayable margin on each side.

    Returns:
        Pegs inside the allowed rectangle, in their original order.
    """
    if not pegs:
        return []

    points = peg_positions(pegs)
    x = points[:, 0]
    y = points[:, 1]
    inside = (
        (x >= horizontal_margin + min_edge_distance)
        & (x <= canvas_width - horizontal_margin - min_edge_distance)
        & (y >= min_edge_distance)
        & (y <= canvas_height - min_edge_distance)
    )
    return [peg for peg, keep in zip(pegs, inside) if keep]


def cleanup_pegs(
    pegs: Sequence[Peg],
    min_distance: float,
    params: LevelGeneratorParams,
) -> list[Peg]:
    """Remove overlaps, then pegs within two radii of the canvas edges.

    Args:
        pegs: Candidate pegs.
        min_distance: Minimum allowed center-to-center distance.
        params: Generator configuration providing canvas geometry.

    Returns:
        Filtered pegs.
    """
    pegs = remove_overlaps(pegs, min_distance)
    return remove_edge_pegs(
        pegs,
        params.peg_radius * 2,
        params.canvas_width,
        params.canvas_height,
        params.horizontal_margin,
    )
