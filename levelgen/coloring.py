"""Color balancing for generated levels.

Pipeline, always in this order:
1. Clamp provisional colors into the level's palette.
2. Recolor by a spatial gradient (levels above 3).
3. Enforce a minimum peg count per color so every color can be completed.

Every stage builds a new list; pegs are never mutated.
"""

import logging
import math
import random
from typing import Callable, Sequence

from .base import LevelGeneratorParams, Peg

logger = logging.getLogger(__name__)

GRADIENT_MIN_LEVEL = 3  # Gradients apply above this level
BLEND_MIN_LEVEL = 6  # Blended gradients apply above this level
BLEND_CHANCE = 0.4
BLEND_CELL_SIZE = 50.0

# Level 3 guarantees its newly unlocked cyan pegs exist. Applies to this level
# and color only; remove once general balancing covers it.
CYAN_COLOR_INDEX = 5
CYAN_PRIORITY_LEVEL = 3
CYAN_EXTRA_MINIMUM = 2

GradientFn = Callable[[Peg, int, int, LevelGeneratorParams], int]


def _to_index(value: float, available_colors: int) -> int:
    """Scale a normalized value to a color index inside the palette."""
    index = math.floor(value * available_colors)
    return min(available_colors - 1, max(0, index))


def count_colors(pegs: Sequence[Peg], size: int) -> list[int]:
    """Count pegs per color for indices below size."""
    counts = [0] * size
    for peg in pegs:
        if 0 <= peg.color_index < size:
            counts[peg.color_index] += 1
    return counts


def clamp_colors(pegs: Sequence[Peg], available_colors: int) -> list[Peg]:
    """Reassign out-of-range colors to the least used available color.

    Running counts are updated after each reassignment, so reassigned pegs
    spread across the palette. Already valid pegs are returned unchanged.
    """
    counts = count_colors(pegs, available_colors)
    result = []
    for peg in pegs:
        if 0 <= peg.color_index < available_colors:
            result.append(peg)
            continue
        least = min(range(available_colors), key=lambda c: counts[c])
        counts[least] += 1
        result.append(peg.with_color(least))
    return result


# ----------------------------
# Gradient functions
# ----------------------------


def simple_noise(x: float, y: float) -> float:
    """Deterministic pseudo-random value in [0, 1) for a position."""
    n = math.sin(x * 12.9898 + y * 78.233) * 43758.5453
    return n - math.floor(n)


def hash_cell(x: int, y: int, seed: int) -> int:
    """Stable non-negative hash for a grid cell."""
    value = (x * 3733 + y * 2053) ^ (seed * 4057)
    return abs(int(math.fmod(value, 967)))


def horizontal_gradient(
    peg: Peg, available_colors: int, level_number: int, params: LevelGeneratorParams
) -> int:
    normalized = (peg.x - params.horizontal_margin) / params.playable_width
    return _to_index(normalized, available_colors)


def vertical_gradient(
    peg: Peg, available_colors: int, level_number: int, params: LevelGeneratorParams
) -> int:
    return _to_index(peg.y / params.canvas_height, available_colors)


def radial_gradient(
    peg: Peg, available_colors: int, level_number: int, params: LevelGeneratorParams
) -> int:
    cx = params.canvas_width / 2
    cy = params.canvas_height / 2
    dist = math.hypot(peg.x - cx, peg.y - cy)
    return _to_index(dist / math.hypot(cx, cy), available_colors)


def stripe_gradient(
    peg: Peg, available_colors: int, level_number: int, params: LevelGeneratorParams
) -> int:
    """Vertical stripes 40, 55 or 70 pixels wide."""
    stripe_size = 40 + (level_number % 3) * 15
    return math.floor(peg.x / stripe_size) % available_colors


def noise_gradient(
    peg: Peg, available_colors: int, level_number: int, params: LevelGeneratorParams
) -> int:
    scale = 0.01 + level_number * 0.002
    return _to_index(simple_noise(peg.x * scale, peg.y * scale), available_colors)


def spiral_gradient(
    peg: Peg, available_colors: int, level_number: int, params: LevelGeneratorParams
) -> int:
    dx = peg.x - params.canvas_width / 2
    dy = peg.y - params.canvas_height / 2
    angle = math.atan2(dy, dx)
    dist = math.hypot(dx, dy)
    value = (angle + dist * 0.01 * level_number) / (2 * math.pi)
    return _to_index(value % 1.0, available_colors)


def pattern_gradient(
    peg: Peg, available_colors: int, level_number: int, params: LevelGeneratorParams
) -> int:
    """Hashed cells that shrink as the level rises."""
    cell_size = max(20, 100 - level_number * 2)
    cell_x = math.floor(peg.x / cell_size)
    cell_y = math.floor(peg.y / cell_size)
    return hash_cell(cell_x, cell_y, level_number) % available_colors


GRADIENTS: tuple[GradientFn, ...] = (
    horizontal_gradient,
    vertical_gradient,
    radial_gradient,
    stripe_gradient,
    noise_gradient,
    spiral_gradient,
    pattern_gradient,
)


def blend_color_gradients(
    pegs: Sequence[Peg],
    first: GradientFn,
    second: GradientFn,
    available_colors: int,
    level_number: int,
    params: LevelGeneratorParams,
    rng: random.Random,
) -> list[Peg]:
    """Per peg, take the color from one of two gradients.

    The choice strategy depends on level_number % 3: a 50px checkerboard,
    a normalized distance-from-center threshold, or a random draw. The blend
    ratio is drawn once from [0.3, 0.7].
    """
    blend = 0.5 + (rng.random() * 0.4 - 0.2)
    blend_type = level_number % 3
    cx = params.canvas_width / 2
    cy = params.canvas_height / 2
    max_dist = math.hypot(cx, cy)

    result = []
    for peg in pegs:
        if blend_type == 0:
            cell = math.floor(peg.x / BLEND_CELL_SIZE) + math.floor(peg.y / BLEND_CELL_SIZE)
            use_first = cell % 2 == 0
        elif blend_type == 1:
            use_first = math.hypot(peg.x - cx, peg.y - cy) / max_dist < blend
        else:
            use_first = rng.random() < blend

        gradient = first if use_first else second
        result.append(peg.with_color(gradient(peg, available_colors, level_number, params)))
    return result


def apply_color_gradient(
    pegs: Sequence[Peg],
    available_colors: int,
    level_number: int,
    params: LevelGeneratorParams,
    rng: random.Random,
) -> list[Peg]:
    """Recolor pegs with a gradient chosen from the level number.

    Higher levels unlock more gradient types. Above level 6 there is a 40%
    chance two gradients are blended.

    Args:
        pegs: Pegs to recolor.
        available_colors: Palette size for the level.
        level_number: Level being generated.
        params: Generator configuration providing canvas geometry.
        rng: Random source.

    Returns:
        New list of recolored pegs.
    """
    unlocked = min(len(GRADIENTS), 2 + level_number // 2)
    first = (level_number + rng.randrange(3)) % unlocked

    if level_number > BLEND_MIN_LEVEL and rng.random() < BLEND_CHANCE:
        second = (first + 1 + rng.randrange(unlocked - 1)) % unlocked
        logger.debug(
            "Level %d: blending %s with %s",
            level_number, GRADIENTS[first].__name__, GRADIENTS[second].__name__,
        )
        return blend_color_gradients(
            pegs, GRADIENTS[first], GRADIENTS[second],
            available_colors, level_number, params, rng,
        )

    gradient = GRADIENTS[first]
    logger.debug("Level %d: applying %s", level_number, gradient.__name__)
    return [
        peg.with_color(gradient(peg, available_colors, level_number, params))
        for peg in pegs
    ]


# ----------------------------
# Per-color minimum
# ----------------------------


def minimum_per_color(level_number: int) -> int:
    return max(3, math.floor(5 - level_number * 0.1))


def ensure_minimum_color_counts(
    pegs: Sequence[Peg],
    available_colors: int,
    level_number: int,
) -> list[Peg]:
    """Convert pegs so every available color reaches its minimum count.

    Colors are processed in ascending order (level 3 handles cyan first with
    a higher minimum, and never takes cyan pegs as donors). Donors are tried
    in three passes: colors with a clear surplus, then any color above its own
    minimum, then any other color as a last resort.

    Args:
        pegs: Pegs with colors already in range.
        available_colors: Palette size for the level.
        level_number: Level being generated.

    Returns:
        New list of pegs with colors in [0, available_colors).
    """
    base_minimum = minimum_per_color(level_number)
    cyan_priority = (
        level_number == CYAN_PRIORITY_LEVEL and CYAN_COLOR_INDEX < available_colors
    )

    def minimum_for(color: int) -> int:
        if cyan_priority and color == CYAN_COLOR_INDEX:
            return base_minimum + CYAN_EXTRA_MINIMUM
        return base_minimum

    def protected(color: int) -> bool:
        return cyan_priority and color == CYAN_COLOR_INDEX

    result = [peg.with_color(peg.color_index % available_colors) for peg in pegs]
    counts = count_colors(result, available_colors)

    if cyan_priority:
        logger.debug("Level %d color counts before balancing: %s", level_number, counts)
        order = [CYAN_COLOR_INDEX] + [c for c in range(available_colors) if c != CYAN_COLOR_INDEX]
    else:
        order = list(range(available_colors))

    for color in order:
        needed = minimum_for(color) - counts[color]
        if needed <= 0:
            continue
        logger.debug("Level %d: color %d needs %d more pegs", level_number, color, needed)

        excess = {
            c for c in range(available_colors)
            if c != color and not protected(c) and counts[c] > base_minimum + 2
        }
        donor_passes = (
            lambda c: c in excess and counts[c] > minimum_for(c),
            lambda c: c != color and not protected(c) and counts[c] > minimum_for(c),
            lambda c: c != color and not protected(c),
        )

        for can_donate in donor_passes:
            for i, peg in enumerate(result):
                if needed <= 0:
                    break
                donor = peg.color_index
                if donor == color or not can_donate(donor):
                    continue
                result[i] = peg.with_color(color)
                counts[donor] -= 1
                counts[color] += 1
                needed -= 1
            if needed <= 0:
                break

    if cyan_priority:
        logger.debug("Level %d color counts after balancing: %s", level_number, counts)

    return result


def balance_colors(
    pegs: Sequence[Peg],
    available_colors: int,
    level_number: int,
    params: LevelGeneratorParams,
    rng: random.Random,
) -> list[Peg]:
    """Run the full clamp -> gradient -> minimum pipeline.

    Args:
        pegs: Assembled pegs with provisional colors.
        available_colors: Palette size for the level.
        level_number: Level being generated.
        params: Generator configuration.
        rng: Random source.

    Returns:
        New list of pegs with colors in [0, available_colors).
    """
    balanced = clamp_colors(pegs, available_colors)
    if level_number > GRADIENT_MIN_LEVEL:
        balanced = apply_color_gradient(balanced, available_colors, level_number, params, rng)
    return ensure_minimum_color_counts(balanced, available_colors, level_number)
