"""
Swatch Rendering Module

Renders palette swatches as a horizontal PNG strip for quick visual QA.
Chip widths can follow swatch populations so dominant colors read as dominant.
"""

import base64
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np
from loguru import logger

from prominence.config import config

from .swatch import Swatch


def rgb_to_bgr(rgb: Tuple[int, int, int]) -> Tuple[int, int, int]:
    """Reorder an RGB tuple for OpenCV."""
    r, g, b = rgb
    return (b, g, r)


def chip_widths(swatches: Sequence[Swatch], chip_size: int, proportional: bool) -> list:
    """Width of each chip; proportional widths share ``chip_size * len(swatches)``."""
    if not proportional:
        return [chip_size] * len(swatches)

    total_width = chip_size * len(swatches)
    total_population = sum(swatch.population for swatch in swatches)
    if total_population == 0:
        return [chip_size] * len(swatches)

    widths = [max(1, int(total_width * swatch.population / total_population)) for swatch in swatches]
    # Hand rounding leftovers to the widest chip
    widths[widths.index(max(widths))] += max(0, total_width - sum(widths))
    return widths


def render_swatch_strip(swatches: Sequence[Swatch],
                        chip_size: int = 40,
                        highlight_index: Optional[int] = None,
                        proportional: bool = False,
                        border_color: Tuple[int, int, int] = (0, 0, 0),
                        border_width: int = 2) -> str:
    """
    Render a horizontal strip of color swatches.

    Args:
        swatches: Swatches to draw, left to right
        chip_size: Chip height, and width of each chip when not proportional
        highlight_index: Index of the chip to outline (e.g. the dominant swatch)
        proportional: Size chips by population instead of uniformly
        border_color: BGR color for the highlight border
        border_width: Width of the highlight border in pixels

    Returns:
        Base64-encoded PNG image string
    """
    validate_swatch_params(swatches, chip_size, highlight_index)

    widths = chip_widths(swatches, chip_size, proportional)
    img_height = chip_size
    img_width = sum(widths)
    img = np.zeros((img_height, img_width, 3), dtype=np.uint8)

    logger.debug(f"Rendering swatch strip with {len(swatches)} colors, {img_width}x{img_height}")

    x_start = 0
    bounds = []
    for swatch, width in zip(swatches, widths):
        x_end = x_start + width
        img[:, x_start:x_end, :] = rgb_to_bgr(swatch.rgb)
        bounds.append((x_start, x_end))
        x_start = x_end

    if highlight_index is not None:
        x_start, x_end = bounds[highlight_index]
        cv2.rectangle(img, (x_start, 0), (x_end - 1, img_height - 1), border_color, border_width)

    success, buffer = cv2.imencode('.png', img)
    if not success:
        raise RuntimeError("Failed to encode swatch strip as PNG")

    return base64.b64encode(buffer.tobytes()).decode('ascii')


def validate_swatch_params(swatches: Sequence[Swatch], chip_size: int,
                           highlight_index: Optional[int]) -> None:
    """Validate swatch rendering parameters."""
    if not swatches:
        raise ValueError("swatches cannot be empty")

    if not config.validate_chip_size(chip_size):
        raise ValueError(f"chip_size must be between 4 and 256, got {chip_size}")

    if highlight_index is not None and not 0 <= highlight_index < len(swatches):
        raise ValueError(f"highlight_index {highlight_index} out of range [0, {len(swatches)})")
