"""
Color-Cut Quantizer

Median-cut style quantization over a 5-bit color histogram. The population is
recursively partitioned into boxes, always splitting the box with the largest
volume next, until the requested number of boxes exists or no box can be split.
Each surviving box becomes one swatch: the population-weighted average of its
colors.

All boxes index into one shared entry arena. A box owns the half-open range
``[lower, upper)`` exclusively; splitting hands two disjoint sub-ranges to two
new boxes, so no entry is ever shared between boxes.
"""

import heapq
from itertools import count
from operator import itemgetter
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from .color_space import (
    QUANTIZE_WORD_WIDTH, approximate_to_rgb888, quantize_pixels, requantize, unpack_quantized,
)
from .filters import ColorFilter, is_allowed_by_all
from .swatch import Swatch

RED, GREEN, BLUE = 0, 1, 2


class HistogramEntry(NamedTuple):
    """A quantized color and the number of pixels that mapped to it."""
    red: int
    green: int
    blue: int
    population: int

    @property
    def color(self) -> Tuple[int, int, int]:
        return (self.red, self.green, self.blue)


class Histogram(NamedTuple):
    """Histogram entries ordered by packed key, plus the mean source color per entry."""
    entries: List[HistogramEntry]
    source_means: List[Tuple[int, int, int]]

    @property
    def total_population(self) -> int:
        return sum(entry.population for entry in self.entries)


def as_pixel_array(pixels) -> np.ndarray:
    """
    Coerce a pixel buffer into an (N, 3) uint8 RGB array.

    Accepts (N, 3|4) or (H, W, 3|4) arrays and sequences of RGB/RGBA tuples.
    Alpha is dropped. Malformed input yields an empty array.
    """
    empty = np.zeros((0, 3), dtype=np.uint8)
    if pixels is None:
        return empty

    try:
        arr = np.asarray(pixels)
    except (TypeError, ValueError) as e:
        logger.warning(f"Unreadable pixel buffer: {e}")
        return empty

    if arr.size == 0:
        return empty
    if arr.ndim == 3:
        arr = arr.reshape(-1, arr.shape[-1])
    if arr.ndim != 2 or arr.shape[1] not in (3, 4):
        logger.warning(f"Malformed pixel buffer with shape {arr.shape}, expected (N, 3|4)")
        return empty
    if not np.issubdtype(arr.dtype, np.number):
        logger.warning(f"Non-numeric pixel buffer of dtype {arr.dtype}")
        return empty

    rgb = arr[:, :3]
    if rgb.dtype != np.uint8:
        rgb = np.clip(rgb, 0, 255).astype(np.uint8)
    return np.ascontiguousarray(rgb)


def build_histogram(pixels_rgb_u8: np.ndarray) -> Histogram:
    """
    Count pixels per quantized color.

    Args:
        pixels_rgb_u8: (N, 3) uint8 RGB pixels

    Returns:
        Histogram with entries sorted by packed (R, G, B) key; populations sum to N
    """
    if len(pixels_rgb_u8) == 0:
        return Histogram([], [])

    keys = quantize_pixels(pixels_rgb_u8)
    unique_keys, inverse, counts = np.unique(keys, return_inverse=True, return_counts=True)
    inverse = inverse.reshape(-1)

    channel_sums = np.stack(
        [np.bincount(inverse, weights=pixels_rgb_u8[:, c], minlength=len(unique_keys))
         for c in (RED, GREEN, BLUE)],
        axis=1,
    )

    entries = []
    source_means = []
    for key, population, sums in zip(unique_keys.tolist(), counts.tolist(), channel_sums):
        r, g, b = unpack_quantized(key)
        entries.append(HistogramEntry(r, g, b, population))
        source_means.append(tuple(int(s / population) for s in sums))

    return Histogram(entries, source_means)


class ColorBox:
    """A bounding box in quantized RGB space over a range of the entry arena."""

    def __init__(self, entries: List[HistogramEntry], lower: int, upper: int):
        self._entries = entries
        self.lower = lower
        self.upper = upper
        self.population = 0
        self.red = (0, 0)
        self.green = (0, 0)
        self.blue = (0, 0)
        self.fit_box()

    def __len__(self) -> int:
        return self.upper - self.lower

    @property
    def entries(self) -> List[HistogramEntry]:
        return self._entries[self.lower:self.upper]

    def fit_box(self):
        """Recompute population and tight per-channel bounds from the current range."""
        red_min = green_min = blue_min = 255
        red_max = green_max = blue_max = 0
        population = 0

        for r, g, b, n in self.entries:
            population += n
            red_min, red_max = min(red_min, r), max(red_max, r)
            green_min, green_max = min(green_min, g), max(green_max, g)
            blue_min, blue_max = min(blue_min, b), max(blue_max, b)

        self.population = population
        self.red = (red_min, red_max)
        self.green = (green_min, green_max)
        self.blue = (blue_min, blue_max)

    def volume(self) -> int:
        return ((self.red[1] - self.red[0] + 1)
                * (self.green[1] - self.green[0] + 1)
                * (self.blue[1] - self.blue[0] + 1))

    def can_split(self) -> bool:
        return len(self) > 1

    def longest_dimension(self) -> int:
        red_length = self.red[1] - self.red[0]
        green_length = self.green[1] - self.green[0]
        blue_length = self.blue[1] - self.blue[0]

        if red_length >= green_length and red_length >= blue_length:
            return RED
        if green_length >= blue_length:
            return GREEN
        return BLUE

    def find_split_point(self) -> int:
        """
        Sort the range along the longest dimension and return the arena index at
        which the population median is reached. Always leaves both sides non-empty.
        """
        dimension = self.longest_dimension()
        self._entries[self.lower:self.upper] = sorted(self.entries, key=itemgetter(dimension))

        midpoint = self.population // 2
        cumulative = 0
        offset = len(self) - 1
        for i, entry in enumerate(self.entries):
            cumulative += entry.population
            if cumulative >= midpoint:
                offset = i
                break

        offset = max(1, min(offset, len(self) - 1))
        return self.lower + offset

    def split_box(self) -> Tuple["ColorBox", "ColorBox"]:
        assert self.can_split(), "Can not split a box with only 1 color"

        split_point = self.find_split_point()
        return (ColorBox(self._entries, self.lower, split_point),
                ColorBox(self._entries, split_point, self.upper))

    def get_average_color(self) -> Swatch:
        """Population-weighted mean color, expanded back onto the 8-bit grid."""
        red_sum = green_sum = blue_sum = 0
        population = 0
        for r, g, b, n in self.entries:
            population += n
            red_sum += r * n
            green_sum += g * n
            blue_sum += b * n

        red_mean = int(red_sum / population)
        green_mean = int(green_sum / population)
        blue_mean = int(blue_sum / population)

        return Swatch(
            (requantize(red_mean, QUANTIZE_WORD_WIDTH, 8),
             requantize(green_mean, QUANTIZE_WORD_WIDTH, 8),
             requantize(blue_mean, QUANTIZE_WORD_WIDTH, 8)),
            population,
        )

    def __repr__(self) -> str:
        return (f"ColorBox([{self.lower}, {self.upper}), population={self.population}, "
                f"volume={self.volume()})")


class ColorCutQuantizer:
    """
    Reduce a pixel buffer to at most ``max_colors`` swatches.

    Args:
        pixels: Pixel buffer, see :func:`as_pixel_array`
        max_colors: Maximum number of swatches to produce (K >= 1)
        filters: Filters every histogram color and final swatch must pass
    """

    def __init__(self, pixels, max_colors: int, filters: Optional[Sequence[ColorFilter]] = None):
        if max_colors < 1:
            raise ValueError(f"max_colors must be at least 1, got {max_colors}")
        self.pixels = as_pixel_array(pixels)
        self.max_colors = max_colors
        self.filters = list(filters) if filters is not None else []

    def get_quantized_colors(self) -> List[Swatch]:
        histogram = build_histogram(self.pixels)

        kept_entries = []
        kept_means = []
        for entry, source_mean in zip(histogram.entries, histogram.source_means):
            if self._should_keep(approximate_to_rgb888(entry.color)):
                kept_entries.append(entry)
                kept_means.append(source_mean)

        hist_len = len(kept_entries)
        logger.debug(f"Histogram: {len(histogram.entries)} colors from {len(self.pixels)} pixels, "
                     f"{hist_len} after filtering")

        if hist_len == 0:
            return []

        if hist_len <= self.max_colors:
            return [Swatch(mean, entry.population) for entry, mean in zip(kept_entries, kept_means)
                    if self._should_keep(mean)]

        return self.quantize_pixels(kept_entries)

    def quantize_pixels(self, entries: List[HistogramEntry]) -> List[Swatch]:
        """Partition the entries into boxes and average each one."""
        queue = split_boxes(ColorBox(entries, 0, len(entries)), self.max_colors)

        swatches = []
        for _, _, vbox in queue:
            swatch = vbox.get_average_color()
            if self._should_keep(swatch.rgb):
                swatches.append(swatch)

        logger.debug(f"Quantized into {len(queue)} boxes, kept {len(swatches)} swatches")
        return swatches

    def _should_keep(self, rgb) -> bool:
        return is_allowed_by_all(self.filters, rgb)


def split_boxes(seed: ColorBox, max_size: int) -> List[Tuple[int, int, ColorBox]]:
    """
    Greedily split the largest-volume box until ``max_size`` boxes exist or the
    largest box holds a single color.

    Volume ties pop in insertion order.

    Returns:
        The heap of ``(-volume, sequence, box)`` items
    """
    sequence = count()
    queue = [(-seed.volume(), next(sequence), seed)]

    while len(queue) < max_size:
        _, _, vbox = heapq.heappop(queue)
        if not vbox.can_split():
            heapq.heappush(queue, (-vbox.volume(), next(sequence), vbox))
            break

        first, second = vbox.split_box()
        heapq.heappush(queue, (-first.volume(), next(sequence), first))
        heapq.heappush(queue, (-second.volume(), next(sequence), second))

    return queue
