"""
Prominence Imaging Utilities
Turns decoded images into pixel buffers: format normalization, nearest-neighbor
downscaling to a target area, and region cropping.
"""
import math
from pathlib import Path
from typing import NamedTuple, Optional, Tuple, Union

import cv2
import numpy as np
from loguru import logger
from PIL import Image

from prominence.config import config


class Region(NamedTuple):
    """Rectangle in image coordinates."""
    x: int
    y: int
    width: int
    height: int


def validate_region(x: int, y: int, width: int, height: int) -> Region:
    """
    Validate a region rectangle.

    Raises:
        ValueError: For a negative origin or a non-positive size
    """
    if x < 0 or y < 0:
        raise ValueError(f"Region origin must be non-negative, got ({x}, {y})")
    if width <= 0 or height <= 0:
        raise ValueError(f"Region size must be positive, got {width}x{height}")
    return Region(int(x), int(y), int(width), int(height))


def load_image(path: Union[str, Path]) -> np.ndarray:
    """Open an image file and return it as an RGB or RGBA uint8 array."""
    with Image.open(path) as image:
        return to_rgb_array(image)


def to_rgb_array(image: Union[Image.Image, np.ndarray]) -> np.ndarray:
    """
    Normalize a PIL image or numpy array to an (H, W, 3|4) uint8 array.

    Grayscale is expanded to RGB, palette and other PIL modes are converted,
    and non-uint8 arrays are clipped into [0, 255].

    Raises:
        ValueError: If the array shape cannot be interpreted as an image
    """
    if isinstance(image, Image.Image):
        if image.mode not in ("RGB", "RGBA"):
            has_alpha = image.mode in ("LA", "PA") or "transparency" in image.info
            image = image.convert("RGBA" if has_alpha else "RGB")
        return np.array(image)

    arr = np.asarray(image)
    if arr.ndim == 2:
        arr = np.stack([arr, arr, arr], axis=-1)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(f"Expected an (H, W, 3|4) image array, got shape {arr.shape}")
    if arr.dtype != np.uint8:
        arr = np.clip(arr, 0, 255).astype(np.uint8)
    return np.ascontiguousarray(arr)


def compute_scale_ratio(width: int, height: int, resize_area: Optional[int]) -> float:
    """
    Ratio to shrink an image by so its area is about ``resize_area``.

    Returns 0.0 when no scaling is needed: resizing disabled (``None`` or 0) or
    the image already small enough. Images are never grown.
    """
    area = width * height
    if resize_area is None or resize_area <= 0 or area <= resize_area:
        return 0.0
    return math.sqrt(resize_area / area)


def scale_image_down(image: np.ndarray, resize_area: Optional[int]) -> Tuple[np.ndarray, float]:
    """
    Downscale with nearest-neighbor sampling, preserving aspect ratio.

    Returns:
        Tuple of (image, scale ratio); the ratio is 0.0 when the image was left untouched
    """
    height, width = image.shape[:2]
    scale_ratio = compute_scale_ratio(width, height, resize_area)
    if scale_ratio <= 0.0:
        return image, 0.0

    new_width = max(1, math.ceil(width * scale_ratio))
    new_height = max(1, math.ceil(height * scale_ratio))
    resized = cv2.resize(image, (new_width, new_height), interpolation=cv2.INTER_NEAREST)

    logger.debug(f"Scaled image {width}x{height} -> {new_width}x{new_height} (ratio={scale_ratio:.4f})")
    return resized, scale_ratio


def scale_region(region: Region, scale_ratio: float, image_width: int, image_height: int) -> Region:
    """
    Map a region in original coordinates onto an image scaled by ``scale_ratio``,
    clipped to the scaled image. The clipped size may be 0.
    """
    x = min(int(math.floor(region.x * scale_ratio)), image_width)
    y = min(int(math.floor(region.y * scale_ratio)), image_height)
    width = max(1, int(math.floor(region.width * scale_ratio)))
    height = max(1, int(math.floor(region.height * scale_ratio)))
    return clip_region(Region(x, y, width, height), image_width, image_height)


def clip_region(region: Region, image_width: int, image_height: int) -> Region:
    x = min(region.x, image_width)
    y = min(region.y, image_height)
    width = max(0, min(region.width, image_width - x))
    height = max(0, min(region.height, image_height - y))
    return Region(x, y, width, height)


def harvest_pixels(image: Union[Image.Image, np.ndarray],
                   resize_area: Optional[int] = config.RESIZE_AREA,
                   region: Optional[Region] = None) -> np.ndarray:
    """
    Produce the (N, 3|4) pixel buffer fed to the quantizer.

    Args:
        image: Decoded image
        resize_area: Target pixel area for downscaling, ``None`` or 0 to disable
        region: Optional rectangle in original image coordinates

    Returns:
        Pixel rows in row-major order; empty when the region misses the image
    """
    arr = to_rgb_array(image)
    original_height, original_width = arr.shape[:2]

    arr, scale_ratio = scale_image_down(arr, resize_area)
    height, width = arr.shape[:2]

    if region is not None:
        if scale_ratio > 0.0:
            region = scale_region(region, scale_ratio, width, height)
        else:
            region = clip_region(region, width, height)
        arr = arr[region.y:region.y + region.height, region.x:region.x + region.width]
        logger.debug(f"Region {region} of {original_width}x{original_height} image: "
                     f"{arr.shape[0] * arr.shape[1]} pixels")

    return arr.reshape(-1, arr.shape[-1])
