"""Procedural level generation for PegRogue.

This module builds peg layouts for a peg-shooting game: patterns placed
into sections of the playable area, color-balanced, with per-color hit
thresholds that rise with the level number.

Canvas presets:
- classic: 800x650, the standard game canvas
- compact: 600x650, narrow portrait layout
- wide: 1000x700, widescreen layout
"""

from .base import (
    GeneratedLevel,
    LevelContext,
    LevelGeneratorParams,
    MAX_COLORS,
    Peg,
    Section,
    available_colors_for_level,
)
from .cleanup import cleanup_pegs, remove_edge_pegs, remove_overlaps
from .coloring import (
    apply_color_gradient,
    balance_colors,
    clamp_colors,
    ensure_minimum_color_counts,
)
from .export import DEFAULT_PEG_PALETTE, level_to_dict, render_preview, save_preview
from .geometry import closest_pair_distance
from .level_generator import LevelGenerator
from .patterns import PATTERN_FUNCTIONS, PatternKind, get_pattern, pattern_difficulty
from .sections import (
    create_overlapping_sections,
    divide_canvas_into_sections,
    generate_pattern_in_section,
)
from .selector import select_patterns_by_difficulty, select_random_patterns_for_level
from .thresholds import base_threshold, color_thresholds, is_level_complete

__all__ = [
    # Core types
    "GeneratedLevel",
    "LevelContext",
    "LevelGeneratorParams",
    "MAX_COLORS",
    "Peg",
    "Section",
    "available_colors_for_level",
    # Generator
    "LevelGenerator",
    # Patterns and sections
    "PATTERN_FUNCTIONS",
    "PatternKind",
    "get_pattern",
    "pattern_difficulty",
    "select_patterns_by_difficulty",
    "select_random_patterns_for_level",
    "create_overlapping_sections",
    "divide_canvas_into_sections",
    "generate_pattern_in_section",
    # Cleanup utilities
    "cleanup_pegs",
    "remove_edge_pegs",
    "remove_overlaps",
    "closest_pair_distance",
    # Colors and thresholds
    "apply_color_gradient",
    "balance_colors",
    "clamp_colors",
    "ensure_minimum_color_counts",
    "base_threshold",
    "color_thresholds",
    "is_level_complete",
    # Export functions
    "DEFAULT_PEG_PALETTE",
    "level_to_dict",
    "render_preview",
    "save_preview",
    # Presets
    "CANVAS_PRESETS",
    "create_generator",
]


# Canvas configurations for easy access
CANVAS_PRESETS = {
    "classic": {
        "params": {"canvas_width": 800.0, "canvas_height": 650.0},
        "description": "Standard 800x650 game canvas",
    },
    "compact": {
        "params": {"canvas_width": 600.0, "canvas_height": 650.0},
        "description": "Narrow 600x650 portrait canvas",
    },
    "wide": {
        "params": {"canvas_width": 1000.0, "canvas_height": 700.0},
        "description": "Widescreen 1000x700 canvas",
    },
}


def create_generator(preset_name: str = "classic", **kwargs) -> LevelGenerator:
    """Create a level generator from a canvas preset.

    Args:
        preset_name: Name of the canvas preset (e.g., "classic").
        **kwargs: LevelGeneratorParams fields overriding the preset.

    Returns:
        Initialized generator instance.

    Raises:
        ValueError: If preset_name is not recognized or a parameter is invalid.
    """
    if preset_name not in CANVAS_PRESETS:
        available = ", ".join(CANVAS_PRESETS.keys())
        raise ValueError(f"Unknown canvas preset: {preset_name}. Available: {available}")

    options = {**CANVAS_PRESETS[preset_name]["params"], **kwargs}
    return LevelGenerator(LevelGeneratorParams(**options))
