"""
Prominence Colors Module

Color-cut quantization of image pixels into swatches, and matching of those
swatches against perceptual targets to build a palette.
"""

from .filters import ColorFilter, DefaultFilter, LightnessFilter
from .palette import Palette, PaletteBuilder
from .swatch import Swatch
from .target import (
    DARK_MUTED, DARK_VIBRANT, DEFAULT_TARGETS, LIGHT_MUTED, LIGHT_VIBRANT, MUTED, VIBRANT, Target,
)

__all__ = [
    "ColorFilter", "DefaultFilter", "LightnessFilter",
    "Palette", "PaletteBuilder", "Swatch", "Target",
    "LIGHT_VIBRANT", "VIBRANT", "DARK_VIBRANT", "LIGHT_MUTED", "MUTED", "DARK_MUTED",
    "DEFAULT_TARGETS",
]
