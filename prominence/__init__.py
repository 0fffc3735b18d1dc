"""
Prominence

Extract prominent colors from an image: a color-cut quantizer reduces the image
to a handful of swatches, which are then matched against perceptual targets
such as "vibrant" or "dark muted".
"""

from prominence.services.colors import (
    DARK_MUTED, DARK_VIBRANT, DEFAULT_TARGETS, LIGHT_MUTED, LIGHT_VIBRANT, MUTED, VIBRANT,
    ColorFilter, DefaultFilter, LightnessFilter, Palette, PaletteBuilder, Swatch, Target,
)
from prominence.services.colors.palette import (
    DEFAULT_CALCULATE_NUMBER_COLORS, DEFAULT_RESIZE_IMAGE_AREA,
)

__version__ = "0.2.0"

__all__ = [
    "ColorFilter", "DefaultFilter", "LightnessFilter",
    "Palette", "PaletteBuilder", "Swatch", "Target",
    "LIGHT_VIBRANT", "VIBRANT", "DARK_VIBRANT", "LIGHT_MUTED", "MUTED", "DARK_MUTED",
    "DEFAULT_TARGETS", "DEFAULT_CALCULATE_NUMBER_COLORS", "DEFAULT_RESIZE_IMAGE_AREA",
]
