"""Section composer: partitions the playable area and renders patterns into it."""

import math
import random

from .base import LevelContext, LevelGeneratorParams, Peg, Section
from .geometry import rotate_about, safe_spacing
from .patterns import PATTERN_FUNCTIONS, PatternKind

SPLIT_JITTER = 0.1  # Fraction of the playable size
ORGANIC_GAP = 20.0
MAX_ROTATION_DEG = 15.0
ROTATION_MIN_LEVEL = 5  # Rotation only above this level
ROTATION_CHANCE = 0.3
SECTION_RADIUS_FRACTION = 0.45
SECTION_GRID_DENSITY = 0.5


def _split_in_two(rng: random.Random, area: Section) -> list[Section]:
    """Split at the midpoint +/- 10% jitter with a 30-50px gap."""
    gap = 30 + rng.random() * 20

    if rng.random() > 0.5:
        # Stacked: top and bottom
        jitter = area.height * SPLIT_JITTER
        divider = area.y + area.height / 2 + (rng.random() * jitter * 2 - jitter)
        return [
            Section(area.x, area.y, area.width, divider - area.y - gap / 2),
            Section(area.x, divider + gap / 2, area.width,
                    area.y + area.height - divider - gap / 2),
        ]

    # Side by side
    jitter = area.width * SPLIT_JITTER
    divider = area.x + area.width / 2 + (rng.random() * jitter * 2 - jitter)
    return [
        Section(area.x, area.y, divider - area.x - gap / 2, area.height),
        Section(divider + gap / 2, area.y,
                area.x + area.width - divider - gap / 2, area.height),
    ]


def _grid_sections(rng: random.Random, area: Section, count: int) -> list[Section]:
    """Jittered grid; each cell shrunk to ~90% of its slot."""
    rows = math.ceil(math.sqrt(count))
    cols = math.ceil(count / rows)
    base_w = area.width / cols
    base_h = area.height / rows
    jitter_x = area.width * SPLIT_JITTER
    jitter_y = area.height * SPLIT_JITTER

    sections = []
    for i in range(count):
        row, col = divmod(i, cols)
        x_jitter = (rng.random() * jitter_x * 2 - jitter_x) * 0.5
        y_jitter = (rng.random() * jitter_y * 2 - jitter_y) * 0.5
        w_jitter = rng.random() * base_w * 0.4 - base_w * 0.2
        h_jitter = rng.random() * base_h * 0.4 - base_h * 0.2
        sections.append(Section(
            area.x + col * base_w + x_jitter,
            area.y + row * base_h + y_jitter,
            base_w * 0.9 + w_jitter,
            base_h * 0.9 + h_jitter,
        ))
    return sections


def _columnar_sections(rng: random.Random, area: Section, count: int) -> list[Section]:
    """Full-height columns of unequal width."""
    sections = []
    remaining = area.width
    x = area.x
    for i in range(count):
        if i == count - 1:
            width = remaining
        else:
            base = remaining / (count - i)
            variation = base * 0.3
            width = base + (rng.random() * variation * 2 - variation)
        sections.append(Section(x, area.y, width, area.height))
        x += width
        remaining -= width
    return sections


def _organic_sections(rng: random.Random, area: Section, count: int) -> list[Section]:
    """Repeatedly split the largest section along its longer axis."""
    sections = [area]

    while len(sections) < count:
        index = max(range(len(sections)), key=lambda i: sections[i].area)
        section = sections[index]

        if section.width > section.height:
            split = section.width * (0.3 + rng.random() * 0.4)
            halves = [
                Section(section.x, section.y, split - ORGANIC_GAP / 2, section.height),
                Section(section.x + split + ORGANIC_GAP / 2, section.y,
                        section.width - split - ORGANIC_GAP / 2, section.height),
            ]
        else:
            split = section.height * (0.3 + rng.random() * 0.4)
            halves = [
                Section(section.x, section.y, section.width, split - ORGANIC_GAP / 2),
                Section(section.x, section.y + split + ORGANIC_GAP / 2,
                        section.width, section.height - split - ORGANIC_GAP / 2),
            ]
        sections[index:index + 1] = halves

    while len(sections) > count:
        smallest = min(range(len(sections)), key=lambda i: sections[i].area)
        del sections[smallest]

    return sections


def _maybe_rotate(
    rng: random.Random,
    section: Section,
    area: Section,
    level_number: int,
) -> Section:
    allow = (
        level_number > ROTATION_MIN_LEVEL
        and section.width < area.width * 0.6
        and section.height < area.height * 0.6
    )
    if allow and rng.random() < ROTATION_CHANCE:
        degrees = rng.random() * 2 * MAX_ROTATION_DEG - MAX_ROTATION_DEG
        return section.with_rotation(math.radians(degrees))
    return section


def divide_canvas_into_sections(
    rng: random.Random,
    params: LevelGeneratorParams,
    count: int,
    level_number: int,
) -> list[Section]:
    """Partition the playable area into count sections.

    Strategy by count: one section is the whole area; two is a jittered split
    in a random direction; three or more picks a jittered grid, unequal
    columns or an organic recursive subdivision at random. Small sections on
    levels above 5 may receive a slight rotation.

    Args:
        rng: Random source.
        params: Generator configuration.
        count: Number of sections wanted (values below 1 count as 1).
        level_number: Level being generated.

    Returns:
        List of exactly max(1, count) sections.
    """
    area = params.playable_area
    count = max(1, int(count))

    if count == 1:
        sections = [area]
    elif count == 2:
        sections = _split_in_two(rng, area)
    else:
        strategy = rng.randrange(3)
        if strategy == 0:
            sections = _grid_sections(rng, area, count)
        elif strategy == 1:
            sections = _columnar_sections(rng, area, count)
        else:
            sections = _organic_sections(rng, area, count)

    return [_maybe_rotate(rng, section, area, level_number) for section in sections]


def create_overlapping_sections(
    rng: random.Random,
    params: LevelGeneratorParams,
    count: int,
    level_number: int,
) -> list[Section]:
    """Base division plus up to three free-floating overlapping sections."""
    area = params.playable_area
    sections = divide_canvas_into_sections(rng, params, count, level_number)

    overlap_count = min(3, level_number // 4)
    for _ in range(overlap_count):
        width = area.width * (0.3 + rng.random() * 0.4)
        height = area.height * (0.3 + rng.random() * 0.4)
        x = area.x + rng.random() * (area.width - width)
        y = area.y + rng.random() * (area.height - height)
        sections.append(Section(x, y, width, height))

    return sections


def generate_pattern_in_section(
    kind: PatternKind,
    section: Section,
    spacing: float,
    ctx: LevelContext,
    rng: random.Random,
    peg_radius: float,
) -> list[Peg]:
    """Render one pattern into a section.

    Parameters for the pattern are fitted to the section; pegs of a rotated
    section are rotated about its center afterwards.

    Args:
        kind: Pattern to render.
        section: Target section.
        spacing: Peg spacing for the level.
        ctx: Level difficulty context.
        rng: Random source.
        peg_radius: Peg radius, used to inset random placement.

    Returns:
        Pegs with provisional colors.
    """
    spacing = safe_spacing(spacing)
    cx, cy = section.center
    radius = max(0.0, min(section.width, section.height) * SECTION_RADIUS_FRACTION)
    level = ctx.level_number
    box = (section.x, section.y, section.width, section.height, spacing)

    match kind:
        case PatternKind.GRID | PatternKind.CHECKERBOARD:
            cols = int(max(0.0, section.width) // spacing)
            rows = int(max(0.0, section.height) // spacing)
            start_x = cx - max(0, cols - 1) * spacing / 2
            start_y = cy - max(0, rows - 1) * spacing / 2
            args = (start_x, start_y, cols, rows, spacing, SECTION_GRID_DENSITY)
        case PatternKind.DIAMOND | PatternKind.CONCENTRIC | PatternKind.HOURGLASS:
            args = (cx, cy, radius, spacing)
        case PatternKind.SPIRAL | PatternKind.VORTEX:
            args = (cx, cy, radius, 2 + level % 3, spacing)
        case PatternKind.WAVE:
            args = (*box, 2 + level % 3)
        case PatternKind.TUNNEL:
            args = (cx, cy, radius, spacing, level % 2 == 0)
        case PatternKind.RANDOM:
            count = int(section.area / (spacing * spacing) * 0.3)
            inset = peg_radius * 2
            args = (
                section.x + inset,
                section.y + inset,
                section.x + section.width - inset,
                section.y + section.height - inset,
                spacing,
                count,
            )
        case PatternKind.CLUSTERED:
            args = (*box, 1 + level // 5)
        case PatternKind.ZIGZAG | PatternKind.MAZE:
            args = box
        case _:
            return []

    pegs = PATTERN_FUNCTIONS[kind](*args, rng=rng, available_colors=ctx.available_colors)

    if section.rotation is not None:
        pegs = rotate_about(pegs, cx, cy, section.rotation)
    return pegs
