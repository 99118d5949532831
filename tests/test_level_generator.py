"""
Tests for the level assembler and the properties every generated level holds.
"""

import math
import threading

import pytest

from levelgen import LevelGenerator, LevelGeneratorParams, create_generator
from levelgen.base import LevelContext, Peg
from levelgen.cleanup import cleanup_pegs
from levelgen.coloring import CYAN_COLOR_INDEX, count_colors, minimum_per_color
from levelgen.geometry import closest_pair_distance
from levelgen.patterns import get_pattern, pattern_difficulty, random_pattern
from levelgen.sections import create_overlapping_sections, divide_canvas_into_sections


SHORTFALL_TOLERANCE = 0.85
SAMPLE_LEVELS = [1, 2, 3, 4, 5, 6, 7, 8, 10, 12, 15, 20]


def _check_level(generator, level_number):
    """Assert the structural invariants of a generated level."""
    params = generator.params
    level = generator.generate(level_number)
    colors = generator.get_available_colors(level_number)
    clearance = params.peg_radius * 2

    assert level.available_colors == colors
    for peg in level.pegs:
        assert 0 <= peg.color_index < colors
        assert params.horizontal_margin + clearance <= peg.x
        assert peg.x <= params.canvas_width - params.horizontal_margin - clearance
        assert clearance <= peg.y <= params.canvas_height - clearance

    assert closest_pair_distance(level.pegs) >= level.min_separation - 1e-9

    minimum = generator.get_minimum_peg_count(level_number)
    assert level.num_pegs >= math.floor(minimum * SHORTFALL_TOLERANCE)

    counts = count_colors(level.pegs, colors)
    for color, count in enumerate(counts):
        assert count >= minimum_per_color(level_number)
    if level_number == 3:
        assert counts[CYAN_COLOR_INDEX] >= minimum_per_color(3) + 2
    return level


@pytest.mark.parametrize("level_number", SAMPLE_LEVELS)
def test_level_invariants_default_canvas(level_number):
    for seed in (1, 2, 3):
        _check_level(LevelGenerator(LevelGeneratorParams(seed=seed)), level_number)


@pytest.mark.parametrize("level_number", [1, 2, 3, 5, 10, 20])
@pytest.mark.parametrize("preset", ["compact", "wide"])
def test_level_invariants_presets(preset, level_number):
    _check_level(create_generator(preset, seed=17), level_number)


def test_available_colors_steps(generator):
    assert generator.get_available_colors(1) == 4
    assert generator.get_available_colors(2) == 4
    assert generator.get_available_colors(3) == 6
    assert generator.get_available_colors(10) == 6
    assert generator.get_available_colors(11) == 8
    assert generator.get_available_colors(50) == 8


def test_minimum_peg_count(generator):
    assert generator.get_minimum_peg_count(1) == 35
    assert generator.get_minimum_peg_count(5) == 55
    assert generator.get_minimum_peg_count(18) == 120
    assert generator.get_minimum_peg_count(40) == 120


def test_context_values(params):
    ctx = LevelContext.for_level(10, params)
    assert ctx.peg_spacing == pytest.approx(32.0)
    assert ctx.difficulty_factor == 6
    assert ctx.pattern_count == 4

    late = LevelContext.for_level(30, params)
    assert late.peg_spacing == pytest.approx(23.0)
    assert late.difficulty_factor == 10


def test_invalid_level_number(generator):
    with pytest.raises(ValueError, match="level_number"):
        generator.generate_level(0)


def test_level_one_compact_canvas(compact_generator):
    """Level 1 on 600x650 is one centered grid inside the clearance band"""
    level = compact_generator.generate(1)
    assert level.strategy == "simple"
    assert level.patterns == ["grid"]
    assert level.pegs
    for peg in level.pegs:
        assert 100 + 20 <= peg.x <= 600 - 100 - 20
        assert 140 <= peg.y <= 650 - 20


def test_level_one_grid_rows(generator):
    """On the default canvas the grid alone exceeds the minimum"""
    level = generator.generate(1)
    spacing = generator.context(1).peg_spacing
    assert level.num_pegs >= generator.get_minimum_peg_count(1)
    for peg in level.pegs:
        row = (peg.y - 180) / spacing
        assert row == pytest.approx(round(row), abs=1e-6)
        assert 0 <= round(row) < 6


def test_level_one_thresholds(generator):
    thresholds = generator.get_color_thresholds(1)
    assert all(0.20 <= t <= 0.30 for t in thresholds[:4])
    assert thresholds[4:] == [0.0] * 4


def test_strategy_by_level(generator):
    assert generator.generate(1).strategy == "simple"
    assert generator.generate(2).strategy == "intermediate"
    assert generator.generate(3).strategy == "advanced"
    assert generator.generate(4).strategy == "procedural"
    assert generator.generate(14).strategy == "procedural"


def test_intermediate_uses_simple_patterns(generator):
    for _ in range(5):
        patterns = generator.generate(2).patterns
        assert len(patterns) == 2
        assert set(patterns) <= {"grid", "checkerboard", "diamond", "random"}


def test_advanced_uses_distinct_medium_patterns():
    """Level 3 draws two or three different patterns rated 2-6"""
    for seed in range(30):
        patterns = LevelGenerator(LevelGeneratorParams(seed=seed)).generate(3).patterns
        assert 2 <= len(patterns) <= 3
        assert len(set(patterns)) == len(patterns)
        assert all(2 <= pattern_difficulty(get_pattern(name)) <= 6 for name in patterns)


@pytest.mark.parametrize("level_number,expected", [(4, False), (5, False), (6, True), (7, True)])
def test_challenge_cluster_from_level_six(generator, monkeypatch, level_number, expected):
    calls = []
    original = generator.create_challenge_cluster

    def spy(ctx, spacing):
        calls.append(ctx.level_number)
        return original(ctx, spacing)

    monkeypatch.setattr(generator, "create_challenge_cluster", spy)
    generator.generate(level_number)
    assert bool(calls) is expected


@pytest.mark.parametrize("level_number,overlapping", [(6, False), (7, False), (8, True), (12, True)])
def test_overlapping_sections_after_level_seven(generator, monkeypatch, level_number, overlapping):
    calls = {"overlapping": [], "divided": []}

    def recording(name, fn):
        def wrapper(*args, **kwargs):
            sections = fn(*args, **kwargs)
            calls[name].append(sections)
            return sections
        return wrapper

    monkeypatch.setattr(
        "levelgen.level_generator.create_overlapping_sections",
        recording("overlapping", create_overlapping_sections),
    )
    monkeypatch.setattr(
        "levelgen.level_generator.divide_canvas_into_sections",
        recording("divided", divide_canvas_into_sections),
    )
    level = generator.generate(level_number)

    used = calls["overlapping"] if overlapping else calls["divided"]
    unused = calls["divided"] if overlapping else calls["overlapping"]
    assert len(used) == 1
    assert unused == []
    # Every section gets a pattern, extra sections included
    assert len(level.patterns) == len(used[0])


@pytest.mark.parametrize("level_number", [4, 9, 14])
def test_random_peg_count_grows_with_level(generator, monkeypatch, level_number):
    counts = []

    def spy(*args, **kwargs):
        counts.append(args[5])
        return random_pattern(*args, **kwargs)

    monkeypatch.setattr("levelgen.level_generator.random_pattern", spy)
    generator.generate(level_number)
    assert counts == [10 + 5 * (level_number // 2)]


def test_procedural_layout_filtered_once(generator, monkeypatch):
    """Layouts come back unfiltered; generate() runs the overlap and edge pass"""
    state = {"in_layout": False}
    filtered = []
    original_layout = generator._procedural_layout

    def layout_spy(ctx, patterns):
        state["in_layout"] = True
        try:
            return original_layout(ctx, patterns)
        finally:
            state["in_layout"] = False

    def cleanup_spy(pegs, min_distance, params):
        filtered.append((state["in_layout"], min_distance))
        return cleanup_pegs(pegs, min_distance, params)

    monkeypatch.setattr(generator, "_procedural_layout", layout_spy)
    monkeypatch.setattr("levelgen.level_generator.cleanup_pegs", cleanup_spy)
    generator.generate(6)

    assert filtered
    assert not any(inside for inside, _ in filtered)
    assert filtered[0][1] == pytest.approx(generator.context(6).peg_spacing * 0.8)


def test_seed_reproducible():
    first = LevelGenerator(LevelGeneratorParams(seed=42)).generate(9)
    second = LevelGenerator(LevelGeneratorParams(seed=42)).generate(9)
    assert first.pegs == second.pegs
    assert first.thresholds == second.thresholds


def test_generate_level_returns_pegs(generator):
    pegs = generator.generate_level(6)
    assert pegs
    assert all(isinstance(p, Peg) for p in pegs)


def test_noise_skipped_on_early_levels(generator):
    pegs = [Peg(300, 300, 0), Peg(400, 300, 1)]
    assert generator.apply_procedural_noise(pegs, 2, 40) == pegs


def test_noise_moves_pegs_within_bound(generator):
    pegs = [Peg(300 + i * 50, 300, 0) for i in range(8)]
    noisy = generator.apply_procedural_noise(pegs, 10, 40)
    assert len(noisy) <= len(pegs)
    max_shift = 40 * 0.25 + 1e-9
    for peg in noisy:
        assert any(
            abs(peg.x - p.x) <= max_shift and abs(peg.y - p.y) <= max_shift for p in pegs
        )


@pytest.mark.parametrize("level_number", [8, 9, 10, 11])
def test_challenge_cluster_shapes(generator, level_number):
    """One formation per level % 4, colored inside the palette"""
    ctx = generator.context(level_number)
    pegs = generator.create_challenge_cluster(ctx, 25)
    expected = {
        0: 5 + level_number // 3,
        1: 5 + level_number // 3,
        2: (2 + level_number // 4) ** 2,
        3: (2 + level_number // 5) * (3 + level_number // 4),
    }[level_number % 4]
    assert len(pegs) == expected
    assert all(0 <= p.color_index < ctx.available_colors for p in pegs)


def test_filler_pegs_avoid_existing(generator):
    existing = [Peg(400, 300, 0)]
    fillers = generator.create_filler_pegs(20, 40, existing, 4)
    assert fillers
    for peg in fillers:
        assert math.hypot(peg.x - 400, peg.y - 300) >= 40
        assert 150 <= peg.y <= generator.params.play_area_bottom


def test_filler_pegs_prefer_least_used(generator):
    existing = [Peg(120 + i * 45, 200, 0) for i in range(10)]
    fillers = generator.create_filler_pegs(6, 30, existing, 4)
    assert fillers
    assert sum(1 for p in fillers if p.color_index == 0) < len(fillers)


def test_ensure_minimum_pegs_tops_up(generator):
    ctx = generator.context(5)
    pegs, min_separation = generator.ensure_minimum_pegs([], 40, ctx.peg_spacing, ctx)
    assert len(pegs) >= 40
    assert min_separation <= ctx.peg_spacing * 0.8
    assert closest_pair_distance(pegs) >= min_separation - 1e-9


def test_ensure_minimum_pegs_terminates_when_impossible():
    params = LevelGeneratorParams(canvas_width=260, canvas_height=300, seed=5)
    generator = LevelGenerator(params)
    ctx = generator.context(1)
    pegs, _ = generator.ensure_minimum_pegs([], 500, ctx.peg_spacing, ctx)
    assert len(pegs) < 500


def test_generators_are_independent():
    """Separate instances can run on separate threads"""
    results = {}

    def run(seed):
        results[seed] = LevelGenerator(LevelGeneratorParams(seed=seed)).generate(12).pegs

    threads = [threading.Thread(target=run, args=(seed,)) for seed in (3, 4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results[3] == LevelGenerator(LevelGeneratorParams(seed=3)).generate(12).pegs
    assert results[4] == LevelGenerator(LevelGeneratorParams(seed=4)).generate(12).pegs


def test_metadata(generator):
    level = generator.generate(7)
    assert level.level_number == 7
    assert level.params["canvas_width"] == 800.0
    assert level.params["minimum_peg_count"] == 65
    assert sum(level.color_counts()) == level.num_pegs


@pytest.mark.parametrize(
    "kwargs",
    [
        {"peg_radius": 0},
        {"canvas_width": -1},
        {"canvas_width": 150},
        {"canvas_height": 150},
        {"max_colors": 9},
    ],
)
def test_invalid_params(kwargs):
    with pytest.raises(ValueError):
        LevelGeneratorParams(**kwargs)


def test_unknown_canvas_preset():
    with pytest.raises(ValueError, match="Unknown canvas preset"):
        create_generator("huge")
