"""
Palette Generation

``PaletteBuilder`` collects options, harvests pixels from an image, runs the
color-cut quantizer and matches the resulting swatches to targets. The result
is an immutable ``Palette``.
"""

import time
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
from loguru import logger
from PIL import Image

from prominence.config import config
from prominence.services.imaging import Region, harvest_pixels, validate_region

from .filters import ColorFilter, DefaultFilter
from .quantizer import ColorCutQuantizer
from .scoring import select_swatches
from .swatch import Swatch
from .target import (
    DARK_MUTED, DARK_VIBRANT, DEFAULT_TARGETS, LIGHT_MUTED, LIGHT_VIBRANT, MUTED, VIBRANT, Target,
)

DEFAULT_CALCULATE_NUMBER_COLORS = config.MAX_COLORS
DEFAULT_RESIZE_IMAGE_AREA = config.RESIZE_AREA


class Palette:
    """A color palette derived from an image."""

    def __init__(self, swatches: Sequence[Swatch], targets: Sequence[Target],
                 selected_swatches: Dict[int, Optional[Swatch]]):
        self._swatches = tuple(swatches)
        self._targets = tuple(targets)
        self._selected = dict(selected_swatches)

    @staticmethod
    def from_image(image: Union[Image.Image, np.ndarray]) -> "PaletteBuilder":
        return PaletteBuilder.from_image(image)

    @staticmethod
    def from_swatches(swatches: Sequence[Swatch]) -> "PaletteBuilder":
        return PaletteBuilder.from_swatches(swatches)

    @property
    def swatches(self) -> Tuple[Swatch, ...]:
        return self._swatches

    @property
    def targets(self) -> Tuple[Target, ...]:
        return self._targets

    def get_swatch_for_target(self, target: Target) -> Optional[Swatch]:
        """The swatch selected for ``target``, or None."""
        return self._selected.get(target.id)

    def get_color_for_target(self, target: Target) -> Optional[Tuple[int, int, int]]:
        swatch = self.get_swatch_for_target(target)
        return swatch.rgb if swatch is not None else None

    def selected_swatches(self) -> Dict[str, Optional[Swatch]]:
        """Target label -> selected swatch, in target order."""
        return {target.label: self._selected.get(target.id) for target in self._targets}

    @property
    def light_vibrant_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(LIGHT_VIBRANT)

    @property
    def vibrant_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(VIBRANT)

    @property
    def dark_vibrant_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(DARK_VIBRANT)

    @property
    def light_muted_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(LIGHT_MUTED)

    @property
    def muted_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(MUTED)

    @property
    def dark_muted_swatch(self) -> Optional[Swatch]:
        return self.get_swatch_for_target(DARK_MUTED)

    @property
    def light_vibrant_color(self) -> Optional[Tuple[int, int, int]]:
        return self.get_color_for_target(LIGHT_VIBRANT)

    @property
    def vibrant_color(self) -> Optional[Tuple[int, int, int]]:
        return self.get_color_for_target(VIBRANT)

    @property
    def dark_vibrant_color(self) -> Optional[Tuple[int, int, int]]:
        return self.get_color_for_target(DARK_VIBRANT)

    @property
    def light_muted_color(self) -> Optional[Tuple[int, int, int]]:
        return self.get_color_for_target(LIGHT_MUTED)

    @property
    def muted_color(self) -> Optional[Tuple[int, int, int]]:
        return self.get_color_for_target(MUTED)

    @property
    def dark_muted_color(self) -> Optional[Tuple[int, int, int]]:
        return self.get_color_for_target(DARK_MUTED)

    @property
    def dominant_swatch(self) -> Optional[Swatch]:
        """Swatch with the largest population; the first one wins ties."""
        if not self._swatches:
            return None
        return max(self._swatches, key=lambda swatch: swatch.population)

    @property
    def most_prominent_color(self) -> Optional[Tuple[int, int, int]]:
        swatch = self.dominant_swatch
        return swatch.rgb if swatch is not None else None

    def to_dict(self) -> Dict[str, Any]:
        selected = self.selected_swatches()
        return {
            "swatches": [swatch.to_dict() for swatch in self._swatches],
            "targets": {
                label: swatch.to_dict() if swatch is not None else None
                for label, swatch in selected.items()
            },
            "most_prominent": self.dominant_swatch.to_dict() if self._swatches else None,
        }

    def __len__(self) -> int:
        return len(self._swatches)

    def __repr__(self) -> str:
        return f"Palette(swatches={len(self._swatches)}, targets={len(self._targets)})"


class PaletteBuilder:
    """
    Fluent builder for :class:`Palette`.

    Every option method returns the builder itself so calls can be chained::

        palette = PaletteBuilder.from_image(img).maximum_color_count(24).generate()
    """

    def __init__(self, image: Optional[np.ndarray] = None,
                 swatches: Optional[Sequence[Swatch]] = None):
        if image is None and swatches is None:
            raise ValueError("Either an image or a list of swatches must be provided")

        self._image = image
        self._swatches = list(swatches) if swatches is not None else None
        self._targets: List[Target] = list(DEFAULT_TARGETS)
        self._maximum_color_count = DEFAULT_CALCULATE_NUMBER_COLORS
        self._resize_area: Optional[int] = DEFAULT_RESIZE_IMAGE_AREA
        self._region: Optional[Region] = None
        self._filters: List[ColorFilter] = [DefaultFilter()]

    @classmethod
    def from_image(cls, image: Union[Image.Image, np.ndarray]) -> "PaletteBuilder":
        """Start a builder from a decoded PIL image or (H, W, 3|4) array."""
        return cls(image=image)

    @classmethod
    def from_swatches(cls, swatches: Sequence[Swatch]) -> "PaletteBuilder":
        """Start a builder that skips quantization and scores the given swatches."""
        return cls(swatches=swatches)

    def maximum_color_count(self, count: int) -> "PaletteBuilder":
        """Set the maximum number of swatches the quantizer may produce (default 16)."""
        if not config.validate_max_colors(count):
            raise ValueError(f"maximum color count must be a positive integer, got {count}")
        self._maximum_color_count = count
        return self

    def resize_image_area(self, resize_area: Optional[int]) -> "PaletteBuilder":
        """
        Set the area to shrink the image to before quantizing; ``None`` or 0
        disables shrinking. Images smaller than the area are never grown.
        """
        if not config.validate_resize_area(resize_area):
            raise ValueError(f"resize area must be non-negative, got {resize_area}")
        self._resize_area = resize_area
        return self

    def region(self, x: int, y: int, width: int, height: int) -> "PaletteBuilder":
        """
        Restrict palette generation to a rectangle of the original image. When the
        image is shrunk first, the region is scaled by the same ratio.
        """
        self._region = validate_region(x, y, width, height)
        return self

    def clear_region(self) -> "PaletteBuilder":
        self._region = None
        return self

    def add_target(self, target: Target) -> "PaletteBuilder":
        """Append a target; targets already present are ignored."""
        if target not in self._targets:
            self._targets.append(target)
        return self

    def clear_targets(self) -> "PaletteBuilder":
        """Remove all targets, including the presets."""
        self._targets = []
        return self

    def add_filter(self, color_filter: ColorFilter) -> "PaletteBuilder":
        """Append a filter; a color must pass every filter to be used."""
        if not isinstance(color_filter, ColorFilter):
            raise TypeError(f"{color_filter!r} has no is_allowed(rgb, hsl) method")
        self._filters.append(color_filter)
        return self

    def clear_filters(self) -> "PaletteBuilder":
        """Remove all filters, including the default filter."""
        self._filters = []
        return self

    @property
    def targets(self) -> Tuple[Target, ...]:
        return tuple(self._targets)

    @property
    def filters(self) -> Tuple[ColorFilter, ...]:
        return tuple(self._filters)

    def generate(self) -> Palette:
        """Run quantization (unless built from swatches) and target selection."""
        start_time = time.time()

        if self._swatches is not None:
            swatches = self._swatches
        else:
            try:
                pixels = harvest_pixels(self._image, self._resize_area, self._region)
            except ValueError as e:
                logger.warning(f"Could not read pixels from image: {e}")
                pixels = None
            quantizer = ColorCutQuantizer(pixels, self._maximum_color_count, self._filters)
            swatches = quantizer.get_quantized_colors()

        targets = [target.normalize_weights() for target in self._targets]
        selected = select_swatches(swatches, targets)

        logger.debug(f"Generated palette with {len(swatches)} swatches and "
                     f"{sum(s is not None for s in selected.values())}/{len(targets)} targets "
                     f"in {(time.time() - start_time) * 1000:.1f}ms")

        return Palette(swatches, targets, selected)
