"""
Unit tests for the color-cut quantizer.

Tests the quantization pipeline:
- pixel buffer coercion and histogram construction
- box fitting, splitting and averaging
- greedy largest-volume partitioning
- filtering before and after quantization
"""

import numpy as np
import pytest

from prominence.services.colors.filters import DefaultFilter
from prominence.services.colors.quantizer import (
    BLUE, GREEN, RED, ColorBox, ColorCutQuantizer, HistogramEntry, as_pixel_array,
    build_histogram, split_boxes,
)
from prominence.services.colors.swatch import Swatch


def make_pixels(*groups):
    """Build an (N, 3) pixel array from (color, count) pairs."""
    rows = []
    for color, n in groups:
        rows.extend([color] * n)
    return np.array(rows, dtype=np.uint8)


def red_line(*populations):
    """Histogram entries along the red axis, one per population."""
    return [HistogramEntry(i, 0, 0, n) for i, n in enumerate(populations)]


class TestPixelBuffer:
    """Test coercion of input pixels"""

    def test_none_is_empty(self):
        assert as_pixel_array(None).shape == (0, 3)

    def test_image_shaped_array_is_flattened(self, red_image):
        pixels = as_pixel_array(red_image)
        assert pixels.shape == (100, 3)
        assert pixels.dtype == np.uint8

    def test_alpha_is_dropped(self):
        pixels = as_pixel_array(np.array([[10, 20, 30, 0], [40, 50, 60, 255]], dtype=np.uint8))
        assert pixels.tolist() == [[10, 20, 30], [40, 50, 60]]

    def test_out_of_range_values_are_clipped(self):
        pixels = as_pixel_array(np.array([[300.0, -5.0, 10.0]]))
        assert pixels.tolist() == [[255, 0, 10]]

    def test_malformed_buffers_are_empty(self):
        assert as_pixel_array(np.zeros((5, 2), dtype=np.uint8)).shape == (0, 3)
        assert as_pixel_array([[1, 2, 3], [1, 2]]).shape == (0, 3)
        assert as_pixel_array([["a", "b", "c"]]).shape == (0, 3)


class TestHistogram:
    """Test histogram construction"""

    def test_entries_are_sorted_by_key(self):
        pixels = make_pixels(((255, 0, 0), 3), ((0, 0, 255), 1))
        histogram = build_histogram(pixels)

        assert histogram.entries == [HistogramEntry(0, 0, 31, 1), HistogramEntry(31, 0, 0, 3)]
        assert histogram.total_population == 4

    def test_source_means_track_original_colors(self):
        # Both map to the same 5-bit bucket
        pixels = make_pixels(((248, 0, 0), 1), ((255, 0, 0), 1))
        histogram = build_histogram(pixels)

        assert len(histogram.entries) == 1
        assert histogram.entries[0].population == 2
        assert histogram.source_means == [(251, 0, 0)]

    def test_empty_pixels(self):
        histogram = build_histogram(np.zeros((0, 3), dtype=np.uint8))
        assert histogram.entries == []
        assert histogram.total_population == 0

    def test_population_sums_to_pixel_count(self, random_image):
        histogram = build_histogram(as_pixel_array(random_image))
        assert histogram.total_population == 64 * 64


class TestColorBox:
    """Test box geometry and splitting"""

    def test_fit_box(self):
        entries = [HistogramEntry(0, 0, 0, 2), HistogramEntry(3, 1, 0, 5)]
        box = ColorBox(entries, 0, 2)

        assert box.population == 7
        assert box.red == (0, 3)
        assert box.green == (0, 1)
        assert box.blue == (0, 0)
        assert box.volume() == 8

    def test_single_color_volume(self):
        box = ColorBox([HistogramEntry(4, 4, 4, 1)], 0, 1)
        assert box.volume() == 1
        assert not box.can_split()

    def test_longest_dimension(self):
        assert ColorBox([HistogramEntry(0, 0, 0, 1), HistogramEntry(5, 1, 1, 1)], 0, 2).longest_dimension() == RED
        assert ColorBox([HistogramEntry(0, 0, 0, 1), HistogramEntry(1, 5, 1, 1)], 0, 2).longest_dimension() == GREEN
        assert ColorBox([HistogramEntry(0, 0, 0, 1), HistogramEntry(1, 1, 5, 1)], 0, 2).longest_dimension() == BLUE

    def test_longest_dimension_ties_prefer_red_then_green(self):
        assert ColorBox([HistogramEntry(0, 0, 0, 1), HistogramEntry(3, 3, 3, 1)], 0, 2).longest_dimension() == RED
        assert ColorBox([HistogramEntry(0, 0, 0, 1), HistogramEntry(1, 3, 3, 1)], 0, 2).longest_dimension() == GREEN

    def test_split_at_population_median(self):
        entries = red_line(1, 1, 1, 1)
        left, right = ColorBox(entries, 0, 4).split_box()

        assert (left.lower, left.upper) == (0, 1)
        assert (right.lower, right.upper) == (1, 4)
        assert left.population + right.population == 4

    def test_split_point_is_clamped(self):
        """A heavy first entry must still leave both sides non-empty"""
        entries = red_line(100, 1, 1)
        left, right = ColorBox(entries, 0, 3).split_box()

        assert len(left) == 1
        assert len(right) == 2
        assert left.population == 100

    def test_split_sorts_range_along_longest_dimension(self):
        entries = [HistogramEntry(0, 9, 0, 1), HistogramEntry(1, 0, 0, 1),
                   HistogramEntry(2, 5, 0, 1)]
        box = ColorBox(entries, 0, 3)
        box.find_split_point()

        assert [e.green for e in entries] == [0, 5, 9]

    def test_split_only_touches_own_range(self):
        entries = [HistogramEntry(0, 9, 0, 1), HistogramEntry(1, 0, 0, 1),
                   HistogramEntry(2, 5, 0, 1), HistogramEntry(0, 0, 0, 1)]
        ColorBox(entries, 1, 3).split_box()

        assert entries[0] == HistogramEntry(0, 9, 0, 1)
        assert entries[3] == HistogramEntry(0, 0, 0, 1)

    def test_cannot_split_single_color(self):
        box = ColorBox([HistogramEntry(1, 1, 1, 10)], 0, 1)
        with pytest.raises(AssertionError):
            box.split_box()

    def test_average_color_is_population_weighted(self):
        entries = [HistogramEntry(0, 0, 31, 1), HistogramEntry(31, 0, 0, 3)]
        swatch = ColorBox(entries, 0, 2).get_average_color()

        # 93 / 4 -> 23 -> 184 and 31 / 4 -> 7 -> 56
        assert swatch == Swatch((184, 0, 56), 4)


class TestSplitBoxes:
    """Test greedy partitioning"""

    def test_splits_until_max_size(self):
        entries = [HistogramEntry(r, 0, 0, 1) for r in (0, 8, 16, 24)]
        queue = split_boxes(ColorBox(entries, 0, 4), 4)

        assert len(queue) == 4
        assert all(len(box) == 1 for _, _, box in queue)

    def test_stops_when_nothing_can_split(self):
        entries = [HistogramEntry(r, 0, 0, 1) for r in (0, 8, 16, 24)]
        queue = split_boxes(ColorBox(entries, 0, 4), 10)
        assert len(queue) == 4

    def test_single_box_when_max_size_is_one(self):
        entries = red_line(1, 2, 3)
        queue = split_boxes(ColorBox(entries, 0, 3), 1)
        assert len(queue) == 1
        assert queue[0][2].population == 6

    def test_boxes_partition_the_arena(self, random_image):
        histogram = build_histogram(as_pixel_array(random_image))
        entries = histogram.entries
        queue = split_boxes(ColorBox(entries, 0, len(entries)), 16)

        ranges = sorted((box.lower, box.upper) for _, _, box in queue)
        assert ranges[0][0] == 0
        assert ranges[-1][1] == len(entries)
        for (_, upper), (lower, _) in zip(ranges, ranges[1:]):
            assert upper == lower, "Boxes must cover disjoint, adjacent ranges"
        assert sum(box.population for _, _, box in queue) == 64 * 64


class TestColorCutQuantizer:
    """Test end-to-end quantization"""

    def test_single_color_image(self, red_image):
        swatches = ColorCutQuantizer(red_image, 16, [DefaultFilter()]).get_quantized_colors()
        assert swatches == [Swatch((255, 0, 0), 100)]

    def test_few_colors_use_source_means(self):
        pixels = make_pixels(((250, 10, 10), 4), ((12, 200, 40), 6))
        swatches = ColorCutQuantizer(pixels, 16).get_quantized_colors()

        assert sorted(swatches, key=lambda s: s.population) == [
            Swatch((250, 10, 10), 4), Swatch((12, 200, 40), 6)
        ]

    def test_merged_into_one_box(self):
        pixels = make_pixels(((255, 0, 0), 3), ((0, 0, 255), 1))
        swatches = ColorCutQuantizer(pixels, 1).get_quantized_colors()
        assert swatches == [Swatch((184, 0, 56), 4)]

    def test_equal_halves_merge_to_midpoint(self):
        pixels = make_pixels(((255, 0, 0), 1), ((0, 0, 255), 1))
        swatches = ColorCutQuantizer(pixels, 1).get_quantized_colors()
        assert swatches == [Swatch((120, 0, 120), 2)]

    def test_swatch_count_bounded(self, random_image):
        swatches = ColorCutQuantizer(random_image, 16).get_quantized_colors()

        assert len(swatches) == 16
        assert sum(s.population for s in swatches) == 64 * 64

    def test_filtered_swatch_count_bounded(self, random_image):
        swatches = ColorCutQuantizer(random_image, 16, [DefaultFilter()]).get_quantized_colors()
        assert 0 < len(swatches) <= 16

    def test_filtered_colors_are_dropped(self):
        pixels = make_pixels(((0, 0, 0), 50), ((255, 0, 0), 10), ((255, 255, 255), 20))
        swatches = ColorCutQuantizer(pixels, 16, [DefaultFilter()]).get_quantized_colors()
        assert swatches == [Swatch((255, 0, 0), 10)]

    def test_source_color_filtered_without_partitioning(self):
        """Bucket 30 expands to 240 and passes, but the 246 source color is near white"""
        pixels = make_pixels(((246, 246, 246), 10), ((200, 50, 50), 5))
        filters = [DefaultFilter()]
        swatches = ColorCutQuantizer(pixels, 16, filters).get_quantized_colors()

        assert swatches == [Swatch((200, 50, 50), 5)]
        assert all(f.is_allowed(s.rgb, s.hsl) for f in filters for s in swatches)

    def test_box_average_filtered_after_partitioning(self):
        """Orange and gray both pass, but their average lands in the skin-tone band"""
        pixels = make_pixels(((248, 136, 0), 5), ((128, 128, 128), 5))

        unfiltered = ColorCutQuantizer(pixels, 1).get_quantized_colors()
        assert unfiltered == [Swatch((184, 128, 64), 10)]
        assert not DefaultFilter().is_allowed(unfiltered[0].rgb, unfiltered[0].hsl)

        assert ColorCutQuantizer(pixels, 1, [DefaultFilter()]).get_quantized_colors() == []

    def test_box_average_kept_when_allowed(self):
        pixels = make_pixels(((255, 0, 0), 3), ((0, 0, 255), 1))
        swatches = ColorCutQuantizer(pixels, 1, [DefaultFilter()]).get_quantized_colors()
        assert swatches == [Swatch((184, 0, 56), 4)]

    def test_everything_filtered(self):
        pixels = make_pixels(((255, 255, 255), 10))
        assert ColorCutQuantizer(pixels, 16, [DefaultFilter()]).get_quantized_colors() == []

    def test_empty_input(self):
        assert ColorCutQuantizer(None, 16).get_quantized_colors() == []
        assert ColorCutQuantizer(np.zeros((0, 3), dtype=np.uint8), 16).get_quantized_colors() == []

    def test_invalid_max_colors(self, red_image):
        with pytest.raises(ValueError):
            ColorCutQuantizer(red_image, 0)

    def test_deterministic(self, random_image):
        first = ColorCutQuantizer(random_image, 12, [DefaultFilter()]).get_quantized_colors()
        second = ColorCutQuantizer(random_image, 12, [DefaultFilter()]).get_quantized_colors()
        assert first == second
