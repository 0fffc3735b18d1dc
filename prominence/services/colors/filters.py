"""
Color Filters

A filter decides whether a color may take part in palette generation. The
quantizer consults its filters twice: once for every histogram color before
partitioning, and again for every averaged swatch afterwards, since a box
average can land outside the bounds its members respected.
"""

from typing import Iterable, Optional, Protocol, runtime_checkable

from .color_space import HSL, RGB, rgb_to_hsl

BLACK_MAX_LIGHTNESS = 0.05
WHITE_MIN_LIGHTNESS = 0.95

RED_I_LINE_HUE_MIN = 10.0
RED_I_LINE_HUE_MAX = 37.0
RED_I_LINE_MAX_SATURATION = 0.82


@runtime_checkable
class ColorFilter(Protocol):
    """Anything with an ``is_allowed(rgb, hsl)`` method."""

    def is_allowed(self, rgb: RGB, hsl: HSL) -> bool:
        ...


class DefaultFilter:
    """
    Rejects near-black, near-white, and colors close to the red side of the I line
    (the skin-tone band between 10° and 37° hue with moderate saturation).
    """

    def is_allowed(self, rgb: RGB, hsl: HSL) -> bool:
        h, s, l = hsl
        return not is_black(l) and not is_white(l) and not is_near_red_i_line(h, s)

    def __repr__(self) -> str:
        return "DefaultFilter()"


class LightnessFilter:
    """Rejects colors outside an open lightness window."""

    def __init__(self, black_max_lightness: float = BLACK_MAX_LIGHTNESS,
                 white_min_lightness: float = WHITE_MIN_LIGHTNESS):
        if not 0.0 <= black_max_lightness < white_min_lightness <= 1.0:
            raise ValueError(
                f"Invalid lightness window ({black_max_lightness}, {white_min_lightness})"
            )
        self.black_max_lightness = black_max_lightness
        self.white_min_lightness = white_min_lightness

    def is_allowed(self, rgb: RGB, hsl: HSL) -> bool:
        l = hsl[2]
        return self.black_max_lightness < l < self.white_min_lightness

    def __repr__(self) -> str:
        return f"LightnessFilter({self.black_max_lightness}, {self.white_min_lightness})"


def is_black(l: float) -> bool:
    return l <= BLACK_MAX_LIGHTNESS


def is_white(l: float) -> bool:
    return l >= WHITE_MIN_LIGHTNESS


def is_near_red_i_line(h: float, s: float) -> bool:
    return RED_I_LINE_HUE_MIN <= h <= RED_I_LINE_HUE_MAX and s <= RED_I_LINE_MAX_SATURATION


def is_allowed_by_all(filters: Iterable[ColorFilter], rgb: RGB, hsl: Optional[HSL] = None) -> bool:
    """
    Return True only if every filter allows the color. An empty filter list
    accepts everything.
    """
    filters = list(filters)
    if not filters:
        return True
    if hsl is None:
        hsl = rgb_to_hsl(rgb)
    return all(f.is_allowed(rgb, hsl) for f in filters)
