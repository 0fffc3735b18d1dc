"""
Color Space Utilities

Bit-width requantization used by the color-cut quantizer, plus RGB <-> HSL and
hex conversions used by filters and target scoring.
"""

import colorsys
from typing import Tuple

import numpy as np

QUANTIZE_WORD_WIDTH = 5
QUANTIZE_WORD_MASK = (1 << QUANTIZE_WORD_WIDTH) - 1

RGB = Tuple[int, int, int]
HSL = Tuple[float, float, float]


def requantize(value, from_bits: int, to_bits: int):
    """
    Change the bit width of a channel value.

    Widening shifts left and narrowing shifts right by the width difference; the
    result is masked to ``to_bits`` significant bits. No rounding is applied.

    Args:
        value: Channel value (int or numpy integer array)
        from_bits: Current bit width of ``value``
        to_bits: Desired bit width

    Returns:
        Requantized value of the same kind as ``value``
    """
    if to_bits > from_bits:
        new_value = value << (to_bits - from_bits)
    else:
        new_value = value >> (from_bits - to_bits)
    return new_value & ((1 << to_bits) - 1)


def quantize_color(rgb: RGB) -> RGB:
    """Reduce an 8-bit RGB color to the quantizer word width."""
    r, g, b = rgb
    return (
        requantize(int(r), 8, QUANTIZE_WORD_WIDTH),
        requantize(int(g), 8, QUANTIZE_WORD_WIDTH),
        requantize(int(b), 8, QUANTIZE_WORD_WIDTH),
    )


def approximate_to_rgb888(rgb: RGB) -> RGB:
    """Expand a quantized color back onto the 8-bit grid."""
    r, g, b = rgb
    return (
        requantize(int(r), QUANTIZE_WORD_WIDTH, 8),
        requantize(int(g), QUANTIZE_WORD_WIDTH, 8),
        requantize(int(b), QUANTIZE_WORD_WIDTH, 8),
    )


def pack_quantized(r, g, b):
    """Pack quantized channels into one key, red most significant."""
    return (r << (2 * QUANTIZE_WORD_WIDTH)) | (g << QUANTIZE_WORD_WIDTH) | b


def unpack_quantized(key: int) -> RGB:
    """Inverse of :func:`pack_quantized`."""
    return (
        (key >> (2 * QUANTIZE_WORD_WIDTH)) & QUANTIZE_WORD_MASK,
        (key >> QUANTIZE_WORD_WIDTH) & QUANTIZE_WORD_MASK,
        key & QUANTIZE_WORD_MASK,
    )


def quantize_pixels(pixels_rgb_u8: np.ndarray) -> np.ndarray:
    """
    Requantize an (N, 3) uint8 pixel array and pack each row into a histogram key.

    Returns:
        (N,) int64 array of packed keys
    """
    quantized = requantize(pixels_rgb_u8.astype(np.int64), 8, QUANTIZE_WORD_WIDTH)
    return pack_quantized(quantized[:, 0], quantized[:, 1], quantized[:, 2])


def rgb_to_hsl(rgb: RGB) -> HSL:
    """
    Convert an 8-bit RGB color to HSL.

    Returns:
        Tuple of (H, S, L) where H ∈ [0,360), S ∈ [0,1], L ∈ [0,1]
    """
    r, g, b = rgb
    h, l, s = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)
    return h * 360.0, s, l


def rgb_to_hex(rgb: RGB) -> str:
    """Convert an RGB tuple to an uppercase hex string."""
    r, g, b = [int(x) for x in rgb]
    return f"#{r:02X}{g:02X}{b:02X}"

