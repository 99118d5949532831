"""Pattern library for PegRogue levels.

Each pattern maps placement parameters to a list of pegs with provisional
colors. Patterns anchored at a center take (cx, cy, radius, spacing, ...);
patterns spanning a rectangle take (x, y, width, height, spacing, ...).
The random source and the level's color count are always passed in as
keyword arguments.
"""

import math
import random
from enum import Enum
from typing import Callable

import numpy as np

from .base import Peg
from .cleanup import remove_overlaps
from .geometry import safe_spacing, sample_spaced_points


class PatternKind(Enum):
    """Catalog of placement algorithms, in catalog order."""

    GRID = "grid"
    CHECKERBOARD = "checkerboard"
    DIAMOND = "diamond"
    SPIRAL = "spiral"
    TUNNEL = "tunnel"
    WAVE = "wave"
    VORTEX = "vortex"
    CONCENTRIC = "concentric"
    ZIGZAG = "zigzag"
    HOURGLASS = "hourglass"
    MAZE = "maze"
    RANDOM = "random"
    CLUSTERED = "clustered"


# Difficulty ratings (1-10 scale)
PATTERN_DIFFICULTY: dict[PatternKind, int] = {
    PatternKind.GRID: 1,
    PatternKind.CHECKERBOARD: 2,
    PatternKind.RANDOM: 3,
    PatternKind.DIAMOND: 4,
    PatternKind.WAVE: 5,
    PatternKind.CLUSTERED: 6,
    PatternKind.CONCENTRIC: 6,
    PatternKind.TUNNEL: 7,
    PatternKind.ZIGZAG: 7,
    PatternKind.SPIRAL: 8,
    PatternKind.HOURGLASS: 8,
    PatternKind.MAZE: 9,
    PatternKind.VORTEX: 10,
}

DEFAULT_DIFFICULTY = 5

PEGS_PER_CLUSTER = 15
TUNNEL_GAP = 3  # In peg spacings


def pattern_difficulty(kind: PatternKind) -> int:
    return PATTERN_DIFFICULTY.get(kind, DEFAULT_DIFFICULTY)


def get_pattern(name: str) -> PatternKind:
    """Resolve a pattern name.

    Raises:
        ValueError: If name is not in the catalog.
    """
    try:
        return PatternKind(name)
    except ValueError:
        available = ", ".join(kind.value for kind in PatternKind)
        raise ValueError(f"Unknown pattern: {name}. Available: {available}") from None


def _random_color(rng: random.Random, available_colors: int) -> int:
    return rng.randrange(max(1, available_colors))


def grid_pattern(
    start_x: float,
    start_y: float,
    columns: int,
    rows: int,
    spacing: float,
    density: float = 1.0,
    *,
    rng: random.Random,
    available_colors: int,
) -> list[Peg]:
    """Lattice of pegs, each kept with probability density."""
    spacing = safe_spacing(spacing)
    pegs = []
    for row in range(int(rows)):
        for col in range(int(columns)):
            if rng.random() > density:
                continue
            pegs.append(Peg(
                start_x + col * spacing,
                start_y + row * spacing,
                _random_color(rng, available_colors),
            ))
    return pegs


def checkerboard_pattern(
    start_x: float,
    start_y: float,
    columns: int,
    rows: int,
    spacing: float,
    density: float = 1.0,
    *,
    rng: random.Random,
    available_colors: int,
) -> list[Peg]:
    """Lattice restricted to cells where row + col is even."""
    spacing = safe_spacing(spacing)
    pegs = []
    for row in range(int(rows)):
        for col in range(int(columns)):
            if (row + col) % 2 == 0 and rng.random() <= density:
                pegs.append(Peg(
                    start_x + col * spacing,
                    start_y + row * spacing,
                    _random_color(rng, available_colors),
                ))
    return pegs


def diamond_pattern(
    cx: float,
    cy: float,
    radius: float,
    spacing: float,
    *,
    rng: random.Random,
    available_colors: int,
) -> list[Peg]:
    """Lattice points inside a rhombus; rows shrink away from the center row."""
    spacing = safe_spacing(spacing)
    steps = int(max(0.0, radius) // spacing)
    pegs = []
    for i in range(-steps, steps + 1):
        half_width = steps - abs(i)
        for j in range(-half_width, half_width + 1):
            pegs.append(Peg(
                cx + j * spacing,
                cy + i * spacing,
                _random_color(rng, available_colors),
            ))
    return pegs


def _spiral_arm(
    cx: float,
    cy: float,
    radius: float,
    turns: float,
    spacing: float,
    offset: float,
) -> list[tuple[float, float]]:
    """Sample an Archimedean spiral arm at a fixed angular step."""
    if radius <= 0:
        return []
    angle_step = spacing / radius
    max_angle = max(1.0, turns) * 2 * math.pi
    steps = int(max_angle // angle_step)

    angles = np.arange(steps) * angle_step + offset
    dist = radius * angles / max_angle
    inside = dist < radius
    xs = cx + np.cos(angles[inside]) * dist[inside]
    ys = cy + np.sin(angles[inside]) * dist[inside]
    return [(float(x), float(y)) for x, y in zip(xs, ys)]


def spiral_pattern(
    cx: float,
    cy: float,
    radius: float,
    turns: float,
    spacing: float,
    *,
    rng: random.Random,
    available_colors: int,
) -> list[Peg]:
    spacing = safe_spacing(spacing)
    return [
        Peg(x, y, _random_color(rng, available_colors))
        for x, y in _spiral_arm(cx, cy, radius, turns, spacing, 0.0)
    ]


def vortex_pattern(
    cx: float,
    cy: float,
    radius: float,
    turns: float,
    spacing: float,
    arms: int = 3,
    *,
    rng: random.Random,
    available_colors: int,
) -> list[Peg]:
    """Interleaved spiral arms; each arm keeps one color."""
    spacing = safe_spacing(spacing)
    arms = max(1, int(arms))
    pegs = []
    for arm in range(arms):
        offset = arm * 2 * math.pi / arms
        color = arm % max(1, available_colors)
        pegs.extend(
            Peg(x, y, color)
            for x, y in _spiral_arm(cx, cy, radius, turns, spacing, offset)
        )
    return pegs


def tunnel_pattern(
    cx: float,
    cy: float,
    radius: float,
    spacing: float,
    horizontal: bool = True,
    *,
    rng: random.Random,
    available_colors: int,
) -> list[Peg]:
    """Two parallel lines forming a corridor."""
    spacing = safe_spacing(spacing)
    steps = int(max(0.0, radius) // spacing)
    half_gap = TUNNEL_GAP * spacing / 2
    pegs = []
    for i in range(-steps, steps + 1):
        along = i * spacing
        if horizontal:
            first = (cx + along, cy - half_gap)
            second = (cx + along, cy + half_gap)
        else:
            first = (cx - half_gap, cy + along)
            second = (cx + half_gap, cy + along)
        pegs.append(Peg(*first, _random_color(rng, available_colors)))
        pegs.append(Peg(*second, _random_color(rng, available_colors)))
    return pegs


def wave_pattern(
    start_x: float,
    start_y: float,
    width: float,
    height: float,
    spacing: float,
    waves: int = 3,
    *,
    rng: random.Random,
    available_colors: int,
) -> list[Peg]:
    """Sine wave, one peg per column plus one above and one below."""
    spacing = safe_spacing(spacing)
    columns = int(max(0.0, width) // spacing)
    rows = int(max(0.0, height) // spacing)
    if columns == 0:
        return []

    amplitude = rows / 3
    frequency = math.pi * waves / columns

    pegs = []
    for col in range(columns):
        wave_y = math.sin(col * frequency) * amplitude
        peg_row = math.floor(rows / 2 + wave_y + 0.5)
        x = start_x + col * spacing
        y = start_y + peg_row * spacing
        for dy in (0.0, -spacing, spacing):
            pegs.append(Peg(x, y + dy, _random_color(rng, available_colors)))
    return pegs


def concentric_pattern(
    cx: float,
    cy: float,
    radius: float,
    spacing: float,
    *,
    rng: random.Random,
    available_colors: int,
) -> list[Peg]:
    """Rings of pegs; each ring takes one color."""
    spacing = safe_spacing(spacing)
    rings = int(max(0.0, radius) // spacing)
    pegs = []
    for ring in range(1, rings + 1):
        ring_radius = ring * spacing
        count = int(2 * math.pi * ring_radius // spacing)
        color = ring % max(1, available_colors)
        for i in range(count):
            angle = i / count * 2 * math.pi
            pegs.append(Peg(
                cx + math.cos(angle) * ring_radius,
                cy + math.sin(angle) * ring_radius,
                color,
            ))
    return pegs


def zigzag_pattern(
    start_x: float,
    start_y: float,
    width: float,
    height: float,
    spacing: float,
    *,
    rng: random.Random,
    available_colors: int,
) -> list[Peg]:
    """Vertical peg columns, odd columns shifted by half a period."""
    spacing = safe_spacing(spacing)
    columns = int(max(0.0, width) // spacing)
    period = 3 * spacing
    rows = math.ceil(max(0.0, height) / period)
    colors = max(1, available_colors)
    pegs = []
    for col in range(columns):
        x = start_x + col * spacing
        offset = 0.0 if col % 2 == 0 else period / 2
        for row in range(rows):
            pegs.append(Peg(x, start_y + row * period + offset, (col + row) % colors))
    return pegs


def hourglass_pattern(
    cx: float,
    cy: float,
    radius: float,
    spacing: float,
    *,
    rng: random.Random,
    available_colors: int,
) -> list[Peg]:
    """Rows pinched at the vertical center, widening toward top and bottom."""
    spacing = safe_spacing(spacing)
    max_rows = int(max(0.0, radius) // spacing)
    if max_rows == 0:
        return []

    colors = max(1, available_colors)
    pegs = []
    for row in range(-max_rows, max_rows + 1):
        row_fraction = abs(row) / max_rows
        half_width = max(1, math.floor(row_fraction * max_rows))
        for col in range(-half_width, half_width + 1):
            pegs.append(Peg(
                cx + col * spacing,
                cy + row * spacing,
                (abs(row) + abs(col)) % colors,
            ))
    return pegs


def maze_pattern(
    start_x: float,
    start_y: float,
    width: float,
    height: float,
    spacing: float,
    *,
    rng: random.Random,
    available_colors: int,
) -> list[Peg]:
    """Wall cells of a simple binary maze."""
    spacing = safe_spacing(spacing)
    cols = int(max(0.0, width) // spacing)
    rows = int(max(0.0, height) // spacing)
    walls = np.zeros((rows, cols), dtype=bool)

    for row in range(0, rows, 2):
        for col in range(0, cols, 2):
            walls[row, col] = True
            # Extend the wall down or right
            directions = [
                (r, c) for r, c in ((row + 1, col), (row, col + 1))
                if r < rows and c < cols
            ]
            if directions and rng.random() < 0.7:
                wall_row, wall_col = rng.choice(directions)
                walls[wall_row, wall_col] = True

    colors = max(1, available_colors)
    return [
        Peg(start_x + col * spacing, start_y + row * spacing, int(row + col) % colors)
        for row, col in np.argwhere(walls)
    ]


def random_pattern(
    min_x: float,
    min_y: float,
    max_x: float,
    max_y: float,
    min_distance: float,
    count: int,
    *,
    rng: random.Random,
    available_colors: int,
) -> list[Peg]:
    """Scattered pegs keeping a minimum distance, best effort up to count."""
    points = sample_spaced_points(
        rng, min_x, min_y, max_x, max_y, min_distance, count,
        max_attempts=int(count) * 10,
    )
    return [Peg(x, y, _random_color(rng, available_colors)) for x, y in points]


def clustered_pattern(
    start_x: float,
    start_y: float,
    width: float,
    height: float,
    spacing: float,
    cluster_count: int = 3,
    *,
    rng: random.Random,
    available_colors: int,
) -> list[Peg]:
    """Dense clusters, each dominated by its own primary color."""
    spacing = safe_spacing(spacing)
    clusters = [
        (
            start_x + rng.random() * width,
            start_y + rng.random() * height,
            _random_color(rng, available_colors),
        )
        for _ in range(max(0, int(cluster_count)))
    ]

    cluster_radius = spacing * 3
    pegs = []
    for ccx, ccy, primary in clusters:
        for _ in range(PEGS_PER_CLUSTER):
            angle = rng.random() * 2 * math.pi
            dist = cluster_radius * math.sqrt(rng.random())
            color = primary if rng.random() < 0.7 else _random_color(rng, available_colors)
            pegs.append(Peg(
                ccx + math.cos(angle) * dist,
                ccy + math.sin(angle) * dist,
                color,
            ))

    return remove_overlaps(pegs, spacing * 0.8)


PATTERN_FUNCTIONS: dict[PatternKind, Callable[..., list[Peg]]] = {
    PatternKind.GRID: grid_pattern,
    PatternKind.CHECKERBOARD: checkerboard_pattern,
    PatternKind.DIAMOND: diamond_pattern,
    PatternKind.SPIRAL: spiral_pattern,
    PatternKind.TUNNEL: tunnel_pattern,
    PatternKind.WAVE: wave_pattern,
    PatternKind.VORTEX: vortex_pattern,
    PatternKind.CONCENTRIC: concentric_pattern,
    PatternKind.ZIGZAG: zigzag_pattern,
    PatternKind.HOURGLASS: hourglass_pattern,
    PatternKind.MAZE: maze_pattern,
    PatternKind.RANDOM: random_pattern,
    PatternKind.CLUSTERED: clustered_pattern,
}
