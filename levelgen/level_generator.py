"""Level assembler for PegRogue.

Generates peg layouts with increasing difficulty. The first levels use fixed
simple layouts; from level 4 on every level is composed procedurally from
sections, difficulty-weighted patterns, noise, random filler and challenge
clusters.
"""

import logging
import math
import random
from dataclasses import asdict
from typing import NamedTuple, Sequence

from .base import GeneratedLevel, LevelContext, LevelGeneratorParams, Peg
from .cleanup import cleanup_pegs
from .coloring import balance_colors, count_colors
from .geometry import safe_spacing, sample_spaced_points
from .patterns import (
    PatternKind,
    grid_pattern,
    pattern_difficulty,
    random_pattern,
)
from .sections import (
    create_overlapping_sections,
    divide_canvas_into_sections,
    generate_pattern_in_section,
)
from .selector import select_patterns_by_difficulty, select_random_patterns_for_level
from .thresholds import color_thresholds

logger = logging.getLogger(__name__)

OVERLAP_FACTOR = 0.8  # Minimum separation as a fraction of peg spacing
OVERLAPPING_SECTIONS_MIN_LEVEL = 7
CHALLENGE_MIN_LEVEL = 5
NOISE_MIN_LEVEL = 2  # Noise applies above this level

SIMPLE_GRID_ROWS = 6
SIMPLE_GRID_TOP = 180.0
SIMPLE_GRID_DENSITY = 0.8

RANDOM_BAND_INSET = 150.0  # Random pegs stay this far from top and bottom
CHALLENGE_MARGIN = 150.0

FILLER_SPACING_FACTOR = 1.2
FILLER_ATTEMPTS_PER_PEG = 20
FILLER_LEAST_USED_CHANCE = 0.7
SPACING_SHRINK = 0.9


class _Layout(NamedTuple):
    """Assembled pegs before color balancing."""

    pegs: list[Peg]
    strategy: str
    patterns: list[PatternKind]


class LevelGenerator:
    """Generates PegRogue levels.

    Method:
    1. Derive the level context (colors, spacing, minimum count)
    2. Assemble pegs with the level's strategy
    3. Filter overlaps and edge pegs, top up to the minimum count
    4. Balance colors and compute per-color thresholds

    A generator keeps no per-call state besides its random source, so
    separate instances can generate levels concurrently.
    """

    def __init__(self, params: LevelGeneratorParams | None = None) -> None:
        """Initialize generator.

        Args:
            params: Generator configuration. Defaults to the 800x650 canvas.
        """
        self.params = params if params is not None else LevelGeneratorParams()
        self.rng = random.Random(self.params.seed)

    @classmethod
    def from_canvas(
        cls,
        peg_radius: float,
        canvas_width: float,
        canvas_height: float,
        seed: int | None = None,
    ) -> "LevelGenerator":
        """Create a generator for a canvas size and peg radius."""
        return cls(LevelGeneratorParams(
            peg_radius=peg_radius,
            canvas_width=canvas_width,
            canvas_height=canvas_height,
            seed=seed,
        ))

    # ----------------------------
    # Level difficulty
    # ----------------------------

    def context(self, level_number: int) -> LevelContext:
        return LevelContext.for_level(level_number, self.params)

    def get_available_colors(self, level_number: int) -> int:
        return self.context(level_number).available_colors

    def get_minimum_peg_count(self, level_number: int) -> int:
        return self.context(level_number).minimum_peg_count

    def get_color_thresholds(self, level_number: int) -> list[float]:
        """Fraction of each color's pegs that must be hit to finish the level."""
        ctx = self.context(level_number)
        return color_thresholds(
            level_number, ctx.available_colors, self.rng, self.params.max_colors
        )

    # ----------------------------
    # Public entry points
    # ----------------------------

    def generate_level(self, level_number: int) -> list[Peg]:
        """Generate the peg layout for a level.

        Args:
            level_number: 1-based level number.

        Returns:
            List of pegs with colors in [0, available_colors).
        """
        return list(self.generate(level_number).pegs)

    def generate(self, level_number: int) -> GeneratedLevel:
        """Generate a level with its thresholds and metadata.

        Args:
            level_number: 1-based level number.

        Returns:
            GeneratedLevel with pegs, thresholds and generation details.

        Raises:
            ValueError: If level_number is below 1.
        """
        ctx = self.context(level_number)
        spacing = ctx.peg_spacing
        available = select_patterns_by_difficulty(ctx.difficulty_factor)

        if level_number == 1:
            layout = self._simple_layout(ctx)
        elif level_number == 2:
            layout = self._intermediate_layout(ctx, available)
        elif level_number == 3:
            layout = self._advanced_layout(ctx, available)
        else:
            layout = self._procedural_layout(ctx, self._pick_patterns(ctx, available))
        logger.debug(
            "Level %d: %s layout with %s, %d pegs",
            level_number, layout.strategy,
            [kind.value for kind in layout.patterns], len(layout.pegs),
        )

        min_separation = spacing * OVERLAP_FACTOR
        pegs = cleanup_pegs(layout.pegs, min_separation, self.params)

        if len(pegs) < ctx.minimum_peg_count:
            pegs, min_separation = self.ensure_minimum_pegs(
                pegs, ctx.minimum_peg_count, spacing, ctx
            )

        pegs = balance_colors(
            pegs, ctx.available_colors, level_number, self.params, self.rng
        )

        return GeneratedLevel(
            level_number=level_number,
            pegs=tuple(pegs),
            thresholds=self.get_color_thresholds(level_number),
            available_colors=ctx.available_colors,
            min_separation=min_separation,
            strategy=layout.strategy,
            patterns=[kind.value for kind in layout.patterns],
            params={
                **asdict(self.params),
                "peg_spacing": spacing,
                "minimum_peg_count": ctx.minimum_peg_count,
                "difficulty_factor": ctx.difficulty_factor,
            },
        )

    # ----------------------------
    # Strategies
    # ----------------------------

    def _simple_layout(self, ctx: LevelContext) -> _Layout:
        """Level 1: one dense, centered grid."""
        spacing = ctx.peg_spacing
        usable = self.params.playable_width - 4 * self.params.peg_radius
        cols = int(usable // spacing) + 1
        start_x = self.params.canvas_width / 2 - (cols - 1) * spacing / 2

        pegs = grid_pattern(
            start_x, SIMPLE_GRID_TOP, cols, SIMPLE_GRID_ROWS, spacing, SIMPLE_GRID_DENSITY,
            rng=self.rng, available_colors=ctx.available_colors,
        )
        return _Layout(pegs, "simple", [PatternKind.GRID])

    def _intermediate_layout(
        self, ctx: LevelContext, available: Sequence[PatternKind]
    ) -> _Layout:
        """Level 2: two sections, each with a simple pattern."""
        simple = [
            kind for kind in (PatternKind.GRID, PatternKind.CHECKERBOARD, PatternKind.DIAMOND)
            if kind in available
        ]
        if len(simple) < 2:
            simple.append(PatternKind.RANDOM)
        patterns = self.rng.sample(simple, 2) if len(simple) >= 2 else simple * 2

        sections = divide_canvas_into_sections(self.rng, self.params, 2, ctx.level_number)
        pegs: list[Peg] = []
        for kind, section in zip(patterns, sections):
            pegs.extend(generate_pattern_in_section(
                kind, section, ctx.peg_spacing, ctx, self.rng, self.params.peg_radius
            ))
        return _Layout(pegs, "intermediate", patterns)

    def _advanced_layout(
        self, ctx: LevelContext, available: Sequence[PatternKind]
    ) -> _Layout:
        """Level 3: two or three medium patterns, composed procedurally."""
        count = 2 + (1 if self.rng.random() > 0.5 else 0)
        medium = [kind for kind in available if 2 <= pattern_difficulty(kind) <= 6]
        pool = medium if len(medium) >= count else list(available)
        patterns = self.rng.sample(pool, min(count, len(pool)))

        layout = self._procedural_layout(ctx, patterns)
        return _Layout(layout.pegs, "advanced", layout.patterns)

    def _pick_patterns(
        self, ctx: LevelContext, available: Sequence[PatternKind]
    ) -> list[PatternKind]:
        patterns = select_random_patterns_for_level(
            self.rng, available, ctx.pattern_count, ctx.level_number
        )
        if not patterns:
            # Empty weighted pool: fall back to the whole catalog
            patterns = select_random_patterns_for_level(
                self.rng, list(PatternKind), ctx.pattern_count, ctx.level_number
            )
        return patterns

    def _procedural_layout(
        self, ctx: LevelContext, patterns: Sequence[PatternKind]
    ) -> _Layout:
        """Compose sections, patterns, noise, random pegs and a challenge.

        Args:
            ctx: Level difficulty context.
            patterns: Patterns to render, one per base section.

        Returns:
            Unfiltered layout; overlap and edge filtering happen in generate().
        """
        level = ctx.level_number
        spacing = ctx.peg_spacing
        count = max(1, len(patterns))

        if level > OVERLAPPING_SECTIONS_MIN_LEVEL:
            sections = create_overlapping_sections(self.rng, self.params, count, level)
        else:
            sections = divide_canvas_into_sections(self.rng, self.params, count, level)

        used = list(patterns)
        if len(sections) > len(used) and used:
            # Overlapping sections get extra patterns of their own
            extra = select_random_patterns_for_level(
                self.rng, select_patterns_by_difficulty(ctx.difficulty_factor),
                len(sections) - len(used), level,
            )
            used.extend(extra)
        if used and len(used) < len(sections):
            used = [used[i % len(used)] for i in range(len(sections))]

        pegs: list[Peg] = []
        for section, kind in zip(sections, used):
            section_pegs = generate_pattern_in_section(
                kind, section, spacing, ctx, self.rng, self.params.peg_radius
            )
            pegs.extend(self.apply_procedural_noise(section_pegs, level, spacing))

        random_count = 10 + (level // 2) * 5
        pegs.extend(random_pattern(
            self.params.horizontal_margin,
            RANDOM_BAND_INSET,
            self.params.canvas_width - self.params.horizontal_margin,
            self.params.canvas_height - RANDOM_BAND_INSET,
            spacing * 1.5,
            random_count,
            rng=self.rng,
            available_colors=ctx.available_colors,
        ))

        if level > CHALLENGE_MIN_LEVEL:
            pegs.extend(self.create_challenge_cluster(ctx, spacing * OVERLAP_FACTOR))

        return _Layout(pegs, "procedural", used)

    # ----------------------------
    # Post-processing
    # ----------------------------

    def apply_procedural_noise(
        self, pegs: Sequence[Peg], level_number: int, spacing: float
    ) -> list[Peg]:
        """Randomly drop and jitter pegs, more strongly on higher levels.

        Levels 1 and 2 are returned unchanged.
        """
        if level_number <= NOISE_MIN_LEVEL:
            return list(pegs)

        removal_chance = min(0.3, 0.05 + level_number * 0.01)
        max_shift = spacing * min(0.3, 0.05 + level_number * 0.02)

        result = []
        for peg in pegs:
            if self.rng.random() <= removal_chance:
                continue
            dx = (self.rng.random() * 2 - 1) * max_shift
            dy = (self.rng.random() * 2 - 1) * max_shift
            result.append(peg.moved(dx, dy))
        return result

    def create_challenge_cluster(self, ctx: LevelContext, spacing: float) -> list[Peg]:
        """Build a small dense formation at a random spot.

        The formation is chosen by level % 4: a radial cluster, a tight line,
        a small grid or a multi-arm spiral.
        """
        level = ctx.level_number
        colors = ctx.available_colors
        spacing = safe_spacing(spacing)
        width = self.params.canvas_width
        height = self.params.canvas_height
        x = CHALLENGE_MARGIN + self.rng.random() * max(0.0, width - 2 * CHALLENGE_MARGIN)
        y = CHALLENGE_MARGIN + self.rng.random() * max(0.0, height - 2 * CHALLENGE_MARGIN)

        pegs = []
        challenge = level % 4
        if challenge == 0:
            size = 5 + level // 3
            radius = spacing * 2
            for i in range(size):
                angle = i / size * 2 * math.pi
                dist = radius * self.rng.random()
                pegs.append(Peg(x + math.cos(angle) * dist, y + math.sin(angle) * dist, i % colors))
        elif challenge == 1:
            length = 5 + level // 3
            angle = self.rng.random() * math.pi
            step = spacing * 0.8
            for i in range(length):
                pegs.append(Peg(
                    x + math.cos(angle) * i * step,
                    y + math.sin(angle) * i * step,
                    i % colors,
                ))
        elif challenge == 2:
            size = 2 + level // 4
            step = spacing * 0.8
            for row in range(size):
                for col in range(size):
                    pegs.append(Peg(
                        x + (col - size / 2) * step,
                        y + (row - size / 2) * step,
                        (row + col) % colors,
                    ))
        else:
            arms = 2 + level // 5
            points_per_arm = 3 + level // 4
            for arm in range(arms):
                offset = arm * 2 * math.pi / arms
                for i in range(points_per_arm):
                    dist = i * spacing * 0.7
                    angle = offset + i * 0.4
                    pegs.append(Peg(
                        x + math.cos(angle) * dist,
                        y + math.sin(angle) * dist,
                        (arm + i) % colors,
                    ))
        return pegs

    def create_filler_pegs(
        self,
        count: int,
        min_distance: float,
        existing: Sequence[Peg],
        available_colors: int,
    ) -> list[Peg]:
        """Place up to count extra pegs clear of existing ones.

        Each filler takes the least used color 70% of the time, otherwise a
        random one.
        """
        clearance = self.params.peg_radius * 2
        points = sample_spaced_points(
            self.rng,
            self.params.horizontal_margin + clearance,
            RANDOM_BAND_INSET,
            self.params.canvas_width - self.params.horizontal_margin - clearance,
            self.params.play_area_bottom,
            min_distance,
            count,
            existing=existing,
            max_attempts=count * FILLER_ATTEMPTS_PER_PEG,
        )

        counts = count_colors(existing, available_colors)
        fillers = []
        for x, y in points:
            if self.rng.random() < FILLER_LEAST_USED_CHANCE:
                color = min(range(available_colors), key=lambda c: counts[c])
            else:
                color = self.rng.randrange(available_colors)
            counts[color] += 1
            fillers.append(Peg(x, y, color))
        return fillers

    def ensure_minimum_pegs(
        self,
        pegs: Sequence[Peg],
        min_count: int,
        spacing: float,
        ctx: LevelContext,
    ) -> tuple[list[Peg], float]:
        """Top up a level with filler pegs until it reaches min_count.

        Each round adds fillers and re-filters; while still short, spacing
        shrinks by 10% as long as it stays above three peg radii.

        Args:
            pegs: Filtered pegs.
            min_count: Required number of pegs.
            spacing: Current peg spacing.
            ctx: Level difficulty context.

        Returns:
            Tuple of (pegs, min_separation) where min_separation is the
            distance used in the last overlap filter. May hold fewer than
            min_count pegs if placement budgets run out.
        """
        result = list(pegs)
        min_separation = spacing * OVERLAP_FACTOR
        floor = self.params.peg_radius * 3

        while len(result) < min_count:
            logger.debug(
                "Level %d: adding pegs to reach minimum (%d/%d, spacing %.1f)",
                ctx.level_number, len(result), min_count, spacing,
            )
            fillers = self.create_filler_pegs(
                min_count - len(result),
                spacing * FILLER_SPACING_FACTOR,
                result,
                ctx.available_colors,
            )
            min_separation = spacing * OVERLAP_FACTOR
            result = cleanup_pegs(result + fillers, min_separation, self.params)

            if len(result) >= min_count or spacing <= floor:
                break
            spacing *= SPACING_SHRINK

        if len(result) < min_count:
            logger.debug(
                "Level %d: minimum not reached (%d/%d)",
                ctx.level_number, len(result), min_count,
            )
        return result, min_separation
