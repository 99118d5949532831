"""
Tests for color balancing.
"""

import random

import pytest

from levelgen.base import Peg
from levelgen.coloring import (
    GRADIENTS,
    apply_color_gradient,
    balance_colors,
    blend_color_gradients,
    clamp_colors,
    count_colors,
    ensure_minimum_color_counts,
    hash_cell,
    horizontal_gradient,
    minimum_per_color,
    simple_noise,
)


def _scatter(n, color=0, seed=0):
    rng = random.Random(seed)
    return [Peg(rng.uniform(120, 680), rng.uniform(140, 560), color) for _ in range(n)]


def test_clamp_reassigns_out_of_range():
    pegs = [Peg(0, 0, 0), Peg(1, 0, 7), Peg(2, 0, -1), Peg(3, 0, 5)]
    result = clamp_colors(pegs, 4)
    assert result[0] == pegs[0]
    assert all(0 <= p.color_index < 4 for p in result)
    # Reassigned pegs go to the least used colors in turn
    assert [p.color_index for p in result[1:]] == [1, 2, 3]


def test_clamp_is_idempotent():
    pegs = [Peg(i, 0, i % 9) for i in range(40)]
    once = clamp_colors(pegs, 6)
    assert clamp_colors(once, 6) == once


def test_clamp_returns_new_list():
    pegs = [Peg(0, 0, 1)]
    result = clamp_colors(pegs, 4)
    assert result == pegs
    assert result is not pegs


def test_simple_noise_range():
    for x in range(0, 500, 37):
        for y in range(0, 500, 41):
            assert 0 <= simple_noise(x * 0.013, y * 0.021) < 1


def test_hash_cell_non_negative():
    for x in range(-5, 5):
        for y in range(-5, 5):
            assert 0 <= hash_cell(x, y, 7) < 967


def test_horizontal_gradient_spans_palette(params):
    left = horizontal_gradient(Peg(params.horizontal_margin, 300, 0), 4, 5, params)
    right = horizontal_gradient(
        Peg(params.canvas_width - params.horizontal_margin, 300, 0), 4, 5, params
    )
    assert left == 0
    assert right == 3


@pytest.mark.parametrize("gradient", GRADIENTS)
def test_gradients_stay_in_range(params, gradient):
    """Pegs beyond the playable area still map into the palette"""
    points = [(0, 0), (50, 700), (400, 325), (790, 10), (1200, -40)]
    for x, y in points:
        for level in (4, 9, 20, 60):
            color = gradient(Peg(x, y, 0), 6, level, params)
            assert 0 <= color < 6


def test_apply_color_gradient_in_range(params):
    pegs = _scatter(80)
    for level in range(4, 25):
        result = apply_color_gradient(pegs, 8, level, params, random.Random(level))
        assert len(result) == len(pegs)
        assert all(0 <= p.color_index < 8 for p in result)
        assert [(p.x, p.y) for p in result] == [(p.x, p.y) for p in pegs]


def test_blend_uses_both_gradients(params):
    pegs = _scatter(100, seed=3)
    first, second = GRADIENTS[0], GRADIENTS[1]
    result = blend_color_gradients(pegs, first, second, 6, 9, params, random.Random(1))
    for peg, blended in zip(pegs, result):
        assert blended.color_index in (
            first(peg, 6, 9, params),
            second(peg, 6, 9, params),
        )


def test_minimum_per_color():
    assert minimum_per_color(1) == 4
    assert minimum_per_color(10) == 4
    assert minimum_per_color(11) == 3
    assert minimum_per_color(40) == 3


def test_ensure_minimum_fills_missing_colors():
    pegs = _scatter(40, color=0)
    result = ensure_minimum_color_counts(pegs, 4, 2)
    counts = count_colors(result, 4)
    assert sum(counts) == 40
    assert all(c >= 4 for c in counts)


def test_ensure_minimum_does_not_drain_donors():
    """Colors with a surplus donate before colors near their minimum"""
    pegs = (
        [Peg(i, 0, 0) for i in range(30)]
        + [Peg(i, 10, 1) for i in range(4)]
        + [Peg(i, 20, 2) for i in range(4)]
    )
    counts = count_colors(ensure_minimum_color_counts(pegs, 4, 1), 4)
    assert counts == [26, 4, 4, 4]


def test_ensure_minimum_wraps_out_of_range_colors():
    pegs = [Peg(i, 0, 6 + i % 2) for i in range(20)]
    result = ensure_minimum_color_counts(pegs, 4, 1)
    assert all(0 <= p.color_index < 4 for p in result)


def test_level_three_cyan_priority():
    """Cyan gets two extra pegs on level 3 and is never used as a donor"""
    pegs = _scatter(60, color=0)
    counts = count_colors(ensure_minimum_color_counts(pegs, 6, 3), 6)
    assert counts[5] == minimum_per_color(3) + 2
    assert all(c >= minimum_per_color(3) for c in counts)


def test_cyan_priority_only_on_level_three():
    pegs = _scatter(60, color=0)
    counts = count_colors(ensure_minimum_color_counts(pegs, 6, 4), 6)
    assert counts[5] == minimum_per_color(4)


def test_balance_colors_pipeline(params):
    pegs = _scatter(60, color=7)
    for level in (1, 3, 5, 12):
        result = balance_colors(pegs, 4, level, params, random.Random(level))
        counts = count_colors(result, 4)
        assert sum(counts) == 60
        assert all(c >= minimum_per_color(level) for c in counts)


def test_balance_colors_does_not_mutate(params):
    pegs = _scatter(20, color=9)
    snapshot = list(pegs)
    balance_colors(pegs, 4, 8, params, random.Random(0))
    assert pegs == snapshot
