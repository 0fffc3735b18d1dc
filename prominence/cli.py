"""Extract a palette from an image file and print it."""

import argparse
import json
import sys
from pathlib import Path

from PIL import UnidentifiedImageError

from prominence.services.colors import PaletteBuilder
from prominence.services.imaging import load_image
from prominence.utils.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prominence",
        description="Extract prominent colors from an image."
    )
    parser.add_argument('image', help='Path to the image file')
    parser.add_argument(
        '--max-colors', '-k',
        type=int,
        default=None,
        help='Maximum number of swatches to generate (default 16)'
    )
    resize = parser.add_mutually_exclusive_group()
    resize.add_argument(
        '--resize-area',
        type=int,
        default=None,
        help='Pixel area to shrink the image to before quantizing (default 112*112)'
    )
    resize.add_argument(
        '--no-resize',
        action='store_true',
        help='Process at full resolution'
    )
    parser.add_argument(
        '--region',
        type=int,
        nargs=4,
        metavar=('X', 'Y', 'WIDTH', 'HEIGHT'),
        help='Only use pixels inside this rectangle of the original image'
    )
    parser.add_argument(
        '--no-default-filter',
        action='store_true',
        help='Keep near-black, near-white and skin-tone colors'
    )
    parser.add_argument('--json', action='store_true', help='Print the palette as JSON')
    parser.add_argument('--log-level', default='WARNING', help='Log level (default WARNING)')
    return parser


def format_palette(palette) -> str:
    lines = ["Swatches:"]
    for swatch in palette.swatches:
        h, s, l = swatch.hsl
        lines.append(f"  {swatch.hex}  population={swatch.population:<6} "
                     f"hsl=({h:.0f}, {s:.2f}, {l:.2f})")
    lines.append("Targets:")
    for label, swatch in palette.selected_swatches().items():
        lines.append(f"  {label:<14} {swatch.hex if swatch is not None else '-'}")
    dominant = palette.dominant_swatch
    lines.append(f"Most prominent: {dominant.hex if dominant is not None else '-'}")
    return "\n".join(lines)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    image_path = Path(args.image)
    if not image_path.is_file():
        print(f"Error: Image not found: {image_path}", file=sys.stderr)
        return 2

    try:
        image = load_image(image_path)
    except (UnidentifiedImageError, OSError) as e:
        print(f"Error: Could not read image {image_path}: {e}", file=sys.stderr)
        return 2

    try:
        builder = PaletteBuilder.from_image(image)
        if args.max_colors is not None:
            builder.maximum_color_count(args.max_colors)
        if args.no_resize:
            builder.resize_image_area(None)
        elif args.resize_area is not None:
            builder.resize_image_area(args.resize_area)
        if args.region:
            builder.region(*args.region)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.no_default_filter:
        builder.clear_filters()

    palette = builder.generate()

    if args.json:
        print(json.dumps(palette.to_dict(), indent=2))
    else:
        print(format_palette(palette))
    return 0


if __name__ == '__main__':
    sys.exit(main())
