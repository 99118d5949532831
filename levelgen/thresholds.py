"""Per-color completion thresholds."""

import logging
import random
from typing import Sequence

from .base import MAX_COLORS

logger = logging.getLogger(__name__)

MIN_THRESHOLD = 0.20
MAX_THRESHOLD = 0.85
EXPERT_CAP = 0.80
INERT_THRESHOLD = 0.0

VARIATION_MIN_LEVEL = 3  # Per-color variation applies above this level
FIRST_COLOR_BONUS = 0.05
LAST_COLOR_PENALTY = -0.03
JITTER = 0.03


def base_threshold(level_number: int) -> float:
    """Level-scaled threshold before per-color variation.

    Four linear bands: levels 1-5 go 0.25 -> 0.40, 6-10 go 0.40 -> 0.55,
    11-15 go 0.55 -> 0.70 and 16+ go 0.70 -> 0.80 (capped).
    """
    if level_number <= 5:
        return 0.25 + (level_number - 1) / 4 * 0.15
    if level_number <= 10:
        return 0.40 + (level_number - 6) / 4 * 0.15
    if level_number <= 15:
        return 0.55 + (level_number - 11) / 4 * 0.15
    return min(EXPERT_CAP, 0.70 + (level_number - 16) / 10 * 0.10)


def color_thresholds(
    level_number: int,
    available_colors: int,
    rng: random.Random,
    max_colors: int = MAX_COLORS,
) -> list[float]:
    """Compute the fraction of each color's pegs that must be hit.

    Args:
        level_number: Level being played.
        available_colors: Palette size for the level.
        rng: Random source for the per-color jitter.
        max_colors: Length of the returned list.

    Returns:
        List of max_colors thresholds; entries at or beyond available_colors
        are inert (0.0).
    """
    base = base_threshold(level_number)
    thresholds = [INERT_THRESHOLD] * max_colors

    for i in range(min(available_colors, max_colors)):
        variation = 0.0
        if level_number > VARIATION_MIN_LEVEL:
            if i == 0:
                variation = FIRST_COLOR_BONUS
            elif i == available_colors - 1:
                variation = LAST_COLOR_PENALTY
            variation += rng.uniform(-JITTER, JITTER)
        thresholds[i] = min(MAX_THRESHOLD, max(MIN_THRESHOLD, base + variation))

    logger.debug("Level %d thresholds: %s", level_number, thresholds[:available_colors])
    return thresholds


def is_level_complete(
    peg_counts: Sequence[int],
    hit_counts: Sequence[int],
    thresholds: Sequence[float],
) -> bool:
    """Check whether every color has reached its hit threshold.

    Colors without pegs count as complete.

    Args:
        peg_counts: Pegs per color in the level.
        hit_counts: Pegs hit per color so far.
        thresholds: Required hit fraction per color.

    Returns:
        True if the level is complete.
    """
    for i, threshold in enumerate(thresholds):
        total = peg_counts[i] if i < len(peg_counts) else 0
        if total <= 0:
            continue
        hits = hit_counts[i] if i < len(hit_counts) else 0
        if hits / total < threshold:
            return False
    return True
