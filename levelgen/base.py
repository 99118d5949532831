"""Core data types for PegRogue level generation."""

from dataclasses import dataclass, field, replace


# Maximum number of peg colors the game supports
MAX_COLORS = 8

# Floor applied to degenerate spacing/radius values before they bound a loop
MIN_SPACING = 1.0

# (first level, color count) steps, ascending by level
COLOR_PROGRESSION = (
    (1, 4),   # Levels 1-2
    (3, 6),   # Levels 3-10
    (11, 8),  # Levels 11+
)


def available_colors_for_level(level_number: int) -> int:
    """Return how many peg colors are unlocked at a level (4, 6 or 8)."""
    colors = COLOR_PROGRESSION[0][1]
    for first_level, count in COLOR_PROGRESSION:
        if level_number >= first_level:
            colors = count
        else:
            break
    return colors


@dataclass(frozen=True)
class Peg:
    """A single peg placement.

    Pegs are values: recoloring or moving a peg produces a new one.
    """

    x: float
    y: float
    color_index: int

    def with_color(self, color_index: int) -> "Peg":
        return replace(self, color_index=color_index)

    def moved(self, dx: float, dy: float) -> "Peg":
        return Peg(self.x + dx, self.y + dy, self.color_index)


@dataclass(frozen=True)
class Section:
    """Rectangular sub-region of the playable area scoping one pattern."""

    x: float
    y: float
    width: float
    height: float
    rotation: float | None = None  # Radians, about the section center

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def area(self) -> float:
        return self.width * self.height

    def with_rotation(self, rotation: float) -> "Section":
        return replace(self, rotation=rotation)


@dataclass
class LevelGeneratorParams:
    """Configuration fixed at generator construction.

    Defaults match the classic 800x650 game canvas.
    """

    peg_radius: float = 10.0
    canvas_width: float = 800.0
    canvas_height: float = 650.0
    horizontal_margin: float = 100.0  # Equal margin on both sides
    play_area_top: float = 120.0  # Space reserved for the launcher
    play_area_bottom_margin: float = 80.0  # Space reserved for the bucket
    min_peg_spacing: float = 50.0
    max_patterns: int = 4
    min_peg_count: int = 35  # Minimum pegs for level 1
    peg_increase_per_level: int = 5
    max_peg_count: int = 120
    max_colors: int = MAX_COLORS
    seed: int | None = None  # None = unseeded

    def __post_init__(self) -> None:
        if self.peg_radius <= 0:
            raise ValueError(f"peg_radius must be positive, got {self.peg_radius}")
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError(
                f"Canvas size must be positive, got {self.canvas_width}x{self.canvas_height}"
            )
        if self.playable_width <= 0:
            raise ValueError(
                f"Canvas width {self.canvas_width} leaves no room inside "
                f"horizontal margins of {self.horizontal_margin}"
            )
        if self.play_area_height <= 0:
            raise ValueError(
                f"Canvas height {self.canvas_height} leaves no room between "
                f"launcher and bucket"
            )
        if not 1 <= self.max_colors <= MAX_COLORS:
            raise ValueError(f"max_colors must be in [1, {MAX_COLORS}], got {self.max_colors}")

    @property
    def playable_width(self) -> float:
        return self.canvas_width - 2 * self.horizontal_margin

    @property
    def play_area_bottom(self) -> float:
        return self.canvas_height - self.play_area_bottom_margin

    @property
    def play_area_height(self) -> float:
        return self.play_area_bottom - self.play_area_top

    @property
    def playable_area(self) -> Section:
        return Section(
            self.horizontal_margin,
            self.play_area_top,
            self.playable_width,
            self.play_area_height,
        )


@dataclass(frozen=True)
class LevelContext:
    """Difficulty values derived from a level number.

    Built once per generation call and passed explicitly to every helper
    that needs it.
    """

    level_number: int
    available_colors: int
    minimum_peg_count: int
    peg_spacing: float
    difficulty_factor: int
    pattern_count: int

    @classmethod
    def for_level(cls, level_number: int, params: LevelGeneratorParams) -> "LevelContext":
        """Derive the difficulty context for a level.

        Args:
            level_number: 1-based level number.
            params: Generator configuration.

        Returns:
            LevelContext for the level.

        Raises:
            ValueError: If level_number is below 1.
        """
        if level_number < 1:
            raise ValueError(f"level_number must be >= 1, got {level_number}")

        minimum = params.min_peg_count + (level_number - 1) * params.peg_increase_per_level
        spacing = max(
            params.min_peg_spacing - level_number * 1.8,
            params.peg_radius * 2.3,
        )
        return cls(
            level_number=level_number,
            available_colors=min(available_colors_for_level(level_number), params.max_colors),
            minimum_peg_count=min(minimum, params.max_peg_count),
            peg_spacing=max(spacing, MIN_SPACING),
            difficulty_factor=min(10, level_number // 2 + 1),
            pattern_count=min(params.max_patterns, 1 + level_number // 2),
        )


@dataclass
class GeneratedLevel:
    """Output from the level generator."""

    level_number: int
    pegs: tuple[Peg, ...]
    thresholds: list[float]
    available_colors: int
    min_separation: float  # Distance used by the last overlap filter
    strategy: str
    patterns: list[str] = field(default_factory=list)
    params: dict = field(default_factory=dict)

    @property
    def num_pegs(self) -> int:
        return len(self.pegs)

    def color_counts(self) -> list[int]:
        """Count pegs per color index (length = available_colors)."""
        counts = [0] * self.available_colors
        for peg in self.pegs:
            counts[peg.color_index] += 1
        return counts
