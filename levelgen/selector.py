"""Difficulty-weighted pattern selection."""

import random
from typing import Sequence

from .patterns import PatternKind, pattern_difficulty

# Levels up to this number favor simple patterns
SIMPLE_BIAS_MAX_LEVEL = 5


def select_patterns_by_difficulty(difficulty_factor: float) -> list[PatternKind]:
    """Return catalog patterns rated at most difficulty_factor + 2."""
    return [
        kind for kind in PatternKind
        if pattern_difficulty(kind) <= difficulty_factor + 2
    ]


def pattern_weight(kind: PatternKind, level_number: int) -> int:
    """Selection weight: simple patterns early, complex ones later."""
    difficulty = pattern_difficulty(kind)
    if level_number <= SIMPLE_BIAS_MAX_LEVEL:
        return max(0, 10 - difficulty)
    return difficulty


def select_random_patterns_for_level(
    rng: random.Random,
    available: Sequence[PatternKind],
    count: int,
    level_number: int,
) -> list[PatternKind]:
    """Draw distinct patterns by weighted sampling without replacement.

    Each pattern enters the pool once per unit of weight. After a draw every
    copy of the drawn pattern leaves the pool. If the pool runs dry with a
    single slot left, that slot may repeat a pattern; otherwise the result is
    simply shorter than count.

    Args:
        rng: Random source.
        available: Candidate patterns.
        count: Number of patterns wanted.
        level_number: Level used to pick the weighting.

    Returns:
        Selected patterns, at most count long.
    """
    weighted: list[PatternKind] = []
    for kind in available:
        weighted.extend([kind] * pattern_weight(kind, level_number))

    pool = list(weighted)
    selected: list[PatternKind] = []

    while len(selected) < count:
        if not pool:
            if selected and len(selected) == count - 1 and weighted:
                # Last slot with nothing left: tolerate one repeat
                pool = list(weighted)
            else:
                break

        kind = rng.choice(pool)
        selected.append(kind)
        pool = [k for k in pool if k is not kind]

    return selected
