#!/usr/bin/env python3
"""CLI script to generate PegRogue levels.

Usage:
    python generate_level.py LEVEL [LEVEL ...] [options]

Examples:
    python generate_level.py 1 2 3
    python generate_level.py 12 --canvas wide --seed 42 --preview previews
    python generate_level.py 5 --json > level5.json
"""

import argparse
import logging
from pathlib import Path

from levelgen import CANVAS_PRESETS, create_generator
from levelgen.export import level_to_json, save_preview
from palettes import COLOR_NAMES, PALETTE_NAMES, get_palette


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate peg layouts for PegRogue levels",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Available canvas presets:\n" + "\n".join(
            f"  {name:<8} - {preset['description']}"
            for name, preset in CANVAS_PRESETS.items()
        ),
    )

    parser.add_argument(
        "levels",
        type=int,
        nargs="+",
        metavar="LEVEL",
        help="Level numbers to generate (1-based)",
    )
    parser.add_argument(
        "--canvas",
        choices=list(CANVAS_PRESETS.keys()),
        default="classic",
        help="Canvas preset (default: classic)",
    )
    parser.add_argument(
        "--width",
        type=float,
        default=None,
        help="Canvas width, overrides the preset",
    )
    parser.add_argument(
        "--height",
        type=float,
        default=None,
        help="Canvas height, overrides the preset",
    )
    parser.add_argument(
        "--radius",
        type=float,
        default=None,
        help="Peg radius (default: 10)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print each level as JSON instead of a summary",
    )
    parser.add_argument(
        "--preview",
        type=Path,
        default=None,
        metavar="DIR",
        help="Write a PNG preview per level into DIR",
    )
    parser.add_argument(
        "--palette",
        choices=PALETTE_NAMES + ["Random"],
        default="Classic",
        help="Palette for previews (default: Classic)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log generation details",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for level generation CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    overrides = {}
    if args.width is not None:
        overrides["canvas_width"] = args.width
    if args.height is not None:
        overrides["canvas_height"] = args.height
    if args.radius is not None:
        overrides["peg_radius"] = args.radius

    try:
        generator = create_generator(args.canvas, seed=args.seed, **overrides)
        levels = [generator.generate(number) for number in args.levels]
    except ValueError as e:
        parser.error(str(e))

    palette = get_palette(args.palette)
    for level in levels:
        if args.json:
            print(level_to_json(level))
        else:
            counts = ", ".join(
                f"{COLOR_NAMES[i]}={count}" for i, count in enumerate(level.color_counts())
            )
            thresholds = ", ".join(
                f"{t:.2f}" for t in level.thresholds[:level.available_colors]
            )
            print(f"Level {level.level_number} ({level.strategy}):")
            print(f"  Pegs: {level.num_pegs}")
            print(f"  Patterns: {', '.join(level.patterns)}")
            print(f"  Colors: {counts}")
            print(f"  Thresholds: {thresholds}")

        if args.preview is not None:
            path = save_preview(
                level,
                generator.params,
                args.preview / f"level{level.level_number}.png",
                palette=palette,
            )
            if not args.json:
                print(f"  Preview: {path}")


if __name__ == "__main__":
    main()
