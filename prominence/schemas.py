"""
Prominence API Schemas
Pydantic models for palette extraction responses.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from prominence.services.colors import Palette, Swatch


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("prominence", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


class SwatchEntry(BaseModel):
    """Single swatch in a palette."""
    hex: str = Field(
        ...,
        pattern=r"^#[0-9A-Fa-f]{6}$",
        description="Hex color code in format #RRGGBB"
    )
    rgb: List[int] = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Color as [R, G, B] with 8-bit channels"
    )
    hsl: List[float] = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Color as [H (degrees), S, L]"
    )
    population: int = Field(..., ge=0, description="Number of pixels summarized by this swatch")

    @classmethod
    def from_swatch(cls, swatch: Swatch) -> "SwatchEntry":
        return cls(**swatch.to_dict())


class PaletteArtifacts(BaseModel):
    """Palette output artifacts."""
    swatch_png_b64: Optional[str] = Field(
        None,
        description="Base64-encoded PNG showing the swatch strip, dominant swatch outlined"
    )


class PaletteDebug(BaseModel):
    """Parameters and timings used to build the palette."""
    max_colors: int = Field(..., description="Maximum number of swatches requested")
    resize_area: Optional[int] = Field(None, description="Area the image was shrunk to, if any")
    region: Optional[List[int]] = Field(
        None,
        description="Region as [x, y, width, height] in original image coordinates"
    )
    timings_ms: Dict[str, float] = Field(..., description="Processing time per stage")


class PaletteResponse(BaseModel):
    """Main palette extraction response."""
    request_id: str = Field(..., description="Request identifier for tracing")
    width: int = Field(..., description="Decoded image width in pixels")
    height: int = Field(..., description="Decoded image height in pixels")
    swatches: List[SwatchEntry] = Field(
        ...,
        description="All swatches produced by the quantizer, in quantizer order"
    )
    targets: Dict[str, Optional[SwatchEntry]] = Field(
        ...,
        description="Selected swatch per target name, null when no swatch qualified"
    )
    most_prominent: Optional[SwatchEntry] = Field(
        None,
        description="Swatch with the largest population"
    )
    debug: PaletteDebug = Field(..., description="Debug information and parameters")
    artifacts: Optional[PaletteArtifacts] = Field(
        None,
        description="Optional artifacts like the swatch strip"
    )

    @classmethod
    def from_palette(cls, palette: Palette, **kwargs) -> "PaletteResponse":
        dominant = palette.dominant_swatch
        return cls(
            swatches=[SwatchEntry.from_swatch(s) for s in palette.swatches],
            targets={
                label: SwatchEntry.from_swatch(s) if s is not None else None
                for label, s in palette.selected_swatches().items()
            },
            most_prominent=SwatchEntry.from_swatch(dominant) if dominant is not None else None,
            **kwargs,
        )
