"""
Prominence Configuration
Manages environment variables and defaults for palette generation and the HTTP service.
"""
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Configuration class for prominence services."""

    # Quantization defaults
    MAX_COLORS: int = int(os.environ.get("PROMINENCE_MAX_COLORS", "16"))
    RESIZE_AREA: int = int(os.environ.get("PROMINENCE_RESIZE_AREA", str(112 * 112)))

    # Logging
    LOG_LEVEL: str = os.environ.get("PROMINENCE_LOG_LEVEL", "INFO")

    # Upload limits
    MAX_FILE_MB: int = int(os.environ.get("PROMINENCE_MAX_FILE_MB", "10"))
    MAX_IMAGE_PIXELS: int = int(os.environ.get("PROMINENCE_MAX_IMAGE_PIXELS", "50000000"))

    # Swatch rendering
    SWATCH_CHIP_SIZE: int = int(os.environ.get("PROMINENCE_SWATCH_CHIP_SIZE", "40"))

    # CORS settings
    ALLOWED_ORIGINS: str = os.environ.get("PROMINENCE_ALLOWED_ORIGINS", "")

    # Observability
    METRICS_ENABLED: bool = bool(int(os.environ.get("PROMINENCE_METRICS_ENABLED", "1")))

    # Supported image formats
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/png", "image/webp", "image/gif"]
    SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}

    @classmethod
    def validate_max_colors(cls, max_colors: int) -> bool:
        """Validate maximum swatch count."""
        return isinstance(max_colors, int) and max_colors >= 1

    @classmethod
    def validate_resize_area(cls, resize_area: Optional[int]) -> bool:
        """Validate resize area. ``None`` and 0 disable resizing."""
        return resize_area is None or resize_area >= 0

    @classmethod
    def validate_chip_size(cls, chip_size: int) -> bool:
        """Validate swatch chip size."""
        return 4 <= chip_size <= 256

    @classmethod
    def allowed_origins(cls) -> list:
        """Parse comma separated CORS origins."""
        return [origin.strip() for origin in cls.ALLOWED_ORIGINS.split(",") if origin.strip()]


# Global config instance
config = Config()
