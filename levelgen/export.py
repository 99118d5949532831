"""Level export: JSON-ready dicts and PNG previews."""

import json
from pathlib import Path
from typing import Sequence

from PIL import Image, ImageDraw

from .base import GeneratedLevel, LevelGeneratorParams


# Peg colors used by the game, indexed by color_index
DEFAULT_PEG_PALETTE = [
    (255, 0, 0),      # Red
    (0, 0, 255),      # Blue
    (255, 255, 0),    # Yellow
    (0, 255, 0),      # Green
    (255, 0, 255),    # Magenta
    (0, 255, 255),    # Cyan
    (255, 136, 0),    # Orange
    (136, 0, 255),    # Purple
]

BACKGROUND_COLOR = (0, 51, 102)
MARGIN_COLOR = (0, 34, 68)
PEG_OUTLINE_COLOR = (255, 255, 255)


def level_to_dict(level: GeneratedLevel) -> dict:
    """Convert a generated level to a JSON-serializable dict.

    Args:
        level: Generated level.

    Returns:
        Dict with pegs, thresholds and generator metadata.
    """
    return {
        "version": 1,
        "level": level.level_number,
        "available_colors": level.available_colors,
        "thresholds": [round(t, 4) for t in level.thresholds],
        "pegs": [
            {"x": round(peg.x, 2), "y": round(peg.y, 2), "color": peg.color_index}
            for peg in level.pegs
        ],
        "color_counts": level.color_counts(),
        "generator": {
            "strategy": level.strategy,
            "patterns": list(level.patterns),
            "min_separation": level.min_separation,
            "params": level.params,
        },
    }


def level_to_json(level: GeneratedLevel, indent: int | None = 2) -> str:
    return json.dumps(level_to_dict(level), indent=indent)


def render_preview(
    level: GeneratedLevel,
    params: LevelGeneratorParams,
    palette: Sequence[tuple[int, int, int]] | None = None,
    scale: float = 1.0,
) -> Image.Image:
    """Draw a level onto an RGB image.

    The unplayable side margins and the launcher/bucket bands are shaded;
    pegs are drawn as outlined circles in their palette color.

    Args:
        level: Generated level.
        params: Generator configuration the level was built with.
        palette: RGB colors by color index (default: DEFAULT_PEG_PALETTE).
        scale: Output scale relative to canvas units.

    Returns:
        PIL image of size (canvas_width * scale, canvas_height * scale).

    Raises:
        ValueError: If scale is not positive or the palette is too short.
    """
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")
    palette = list(palette) if palette is not None else list(DEFAULT_PEG_PALETTE)
    if len(palette) < level.available_colors:
        raise ValueError(
            f"Palette has {len(palette)} colors, level needs {level.available_colors}"
        )

    width = max(1, round(params.canvas_width * scale))
    height = max(1, round(params.canvas_height * scale))
    img = Image.new("RGB", (width, height), BACKGROUND_COLOR)
    draw = ImageDraw.Draw(img)

    margin = params.horizontal_margin * scale
    draw.rectangle([0, 0, margin, height], fill=MARGIN_COLOR)
    draw.rectangle([width - margin, 0, width, height], fill=MARGIN_COLOR)
    draw.rectangle([margin, 0, width - margin, params.play_area_top * scale], fill=MARGIN_COLOR)
    draw.rectangle(
        [margin, params.play_area_bottom * scale, width - margin, height], fill=MARGIN_COLOR
    )

    r = params.peg_radius * scale
    for peg in level.pegs:
        x = peg.x * scale
        y = peg.y * scale
        draw.ellipse(
            [x - r, y - r, x + r, y + r],
            fill=tuple(palette[peg.color_index]),
            outline=PEG_OUTLINE_COLOR,
        )

    return img


def save_preview(
    level: GeneratedLevel,
    params: LevelGeneratorParams,
    path: Path,
    palette: Sequence[tuple[int, int, int]] | None = None,
    scale: float = 1.0,
) -> Path:
    """Render a level preview and write it as PNG.

    Args:
        level: Generated level.
        params: Generator configuration the level was built with.
        path: Output file path; parent directories are created.
        palette: RGB colors by color index.
        scale: Output scale relative to canvas units.

    Returns:
        The path written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    render_preview(level, params, palette, scale).save(path)
    return path
