"""Peg color palettes for PegRogue level previews.

Each palette holds 8 colors indexed like peg color indices, so colors
unlocked later in the game sit at the end. Levels use a prefix of 4, 6 or 8.
"""

import random
from collections import OrderedDict

# Names of the game's peg colors, by color index
COLOR_NAMES: list[str] = [
    "Red", "Blue", "Yellow", "Green", "Magenta", "Cyan", "Orange", "Purple",
]

PALETTES: OrderedDict[str, list[tuple[int, int, int]]] = OrderedDict()

PALETTES["Classic"] = [
    (255, 0, 0),       # Red
    (0, 0, 255),       # Blue
    (255, 255, 0),     # Yellow
    (0, 255, 0),       # Green
    (255, 0, 255),     # Magenta
    (0, 255, 255),     # Cyan
    (255, 136, 0),     # Orange
    (136, 0, 255),     # Purple
]

PALETTES["Pastel"] = [
    (255, 179, 186),   # Pastel red
    (167, 199, 231),   # Pastel blue
    (255, 255, 186),   # Pastel yellow
    (186, 255, 201),   # Pastel green
    (255, 186, 255),   # Pastel magenta
    (186, 255, 255),   # Pastel cyan
    (255, 223, 186),   # Pastel orange
    (218, 186, 255),   # Pastel purple
]

PALETTES["Jewel"] = [
    (224, 17, 95),     # Ruby
    (15, 82, 186),     # Sapphire
    (255, 191, 0),     # Topaz
    (80, 200, 120),    # Emerald
    (199, 21, 133),    # Rhodolite
    (0, 168, 164),     # Aquamarine
    (230, 126, 34),    # Fire opal
    (153, 102, 204),   # Amethyst
]

PALETTES["Colorblind"] = [
    (213, 94, 0),      # Vermillion
    (0, 114, 178),     # Blue
    (240, 228, 66),    # Yellow
    (0, 158, 115),     # Bluish green
    (204, 121, 167),   # Reddish purple
    (86, 180, 233),    # Sky blue
    (230, 159, 0),     # Orange
    (120, 94, 240),    # Violet
]

PALETTE_NAMES: list[str] = list(PALETTES.keys())


def get_palette(name: str, num_colors: int = 8) -> list[tuple[int, int, int]]:
    """Return the first num_colors colors from the named palette.

    Args:
        name: Palette name, or "Random" to pick one at random.
        num_colors: How many colors to return.

    Returns:
        List of RGB tuples, at most num_colors long.

    Raises:
        ValueError: If name is not recognized and is not "Random".
    """
    if name == "Random":
        name = random.choice(PALETTE_NAMES)

    if name not in PALETTES:
        raise ValueError(f"Unknown palette: {name!r}. Available: {PALETTE_NAMES}")

    colors = PALETTES[name]
    return colors[:num_colors]
