"""
Prominence v1 API Routes
Implements the /v1/palette endpoint.
"""
import time
from typing import Optional

from fastapi import APIRouter, File, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool

from prominence.api.uploads import read_image
from prominence.config import config
from prominence.schemas import ErrorResponse, PaletteArtifacts, PaletteDebug, PaletteResponse
from prominence.services.colors import PaletteBuilder
from prominence.services.colors.swatches import render_swatch_strip
from prominence.utils.ids import generate_request_id
from prominence.utils.logging import get_logger
from prominence.utils.metrics import get_metrics

logger = get_logger()
router = APIRouter(prefix="/v1", tags=["Palette"])


@router.post("/palette",
             response_model=PaletteResponse,
             responses={
                 400: {"model": ErrorResponse, "description": "Corrupt upload or invalid region"},
                 415: {"model": ErrorResponse, "description": "Unsupported image format"},
                 500: {"model": ErrorResponse, "description": "Palette generation failed"},
             },
             summary="Extract Palette",
             description="Quantize an uploaded image into swatches and match them to palette targets")
async def extract_palette(
    file: UploadFile = File(..., description="Image file (JPEG, PNG, WebP or GIF)"),
    max_colors: int = Query(config.MAX_COLORS, ge=1, le=256, description="Maximum number of swatches"),
    resize_area: int = Query(config.RESIZE_AREA, ge=0, description="Area to shrink the image to, 0 disables"),
    x: Optional[int] = Query(None, ge=0, description="Region left edge"),
    y: Optional[int] = Query(None, ge=0, description="Region top edge"),
    width: Optional[int] = Query(None, gt=0, description="Region width"),
    height: Optional[int] = Query(None, gt=0, description="Region height"),
    include_swatch: bool = Query(False, description="Include a PNG swatch strip"),
) -> PaletteResponse:
    request_id = generate_request_id()
    metrics = get_metrics()
    metrics.increment_request_count()
    start_time = time.time()

    region_values = (x, y, width, height)
    if any(v is not None for v in region_values) and any(v is None for v in region_values):
        metrics.increment_failure_count("bad_region")
        raise HTTPException(status_code=400, detail="Region requires all of x, y, width and height")
    region = list(region_values) if x is not None else None

    logger.bind(request_id=request_id).info(f"Palette request: max_colors={max_colors}, "
                                            f"resize_area={resize_area}, region={region}")

    try:
        image = await read_image(file)
    except HTTPException:
        metrics.increment_failure_count("decode")
        raise
    decode_ms = (time.time() - start_time) * 1000

    builder = PaletteBuilder.from_image(image).maximum_color_count(max_colors).resize_image_area(resize_area)
    if region is not None:
        builder.region(*region)

    generate_start = time.time()
    try:
        palette = await run_in_threadpool(builder.generate)
    except Exception as e:
        metrics.increment_failure_count("generate")
        logger.bind(request_id=request_id).error(f"Palette generation failed: {str(e)}")
        raise HTTPException(status_code=500, detail="Palette generation failed")
    generate_ms = (time.time() - generate_start) * 1000

    artifacts = None
    if include_swatch and palette.swatches:
        dominant_index = palette.swatches.index(palette.dominant_swatch)
        artifacts = PaletteArtifacts(
            swatch_png_b64=render_swatch_strip(
                palette.swatches, chip_size=config.SWATCH_CHIP_SIZE, highlight_index=dominant_index
            )
        )

    total_ms = (time.time() - start_time) * 1000
    metrics.record_timing("decode", decode_ms)
    metrics.record_timing("generate", generate_ms)
    metrics.record_timing("total", total_ms)
    metrics.record_swatch_count(len(palette.swatches))
    if not palette.swatches:
        metrics.increment_empty_palette_count()

    logger.bind(request_id=request_id).info(
        f"Palette complete: {len(palette.swatches)} swatches in {total_ms:.1f}ms"
    )

    return PaletteResponse.from_palette(
        palette,
        request_id=request_id,
        width=int(image.shape[1]),
        height=int(image.shape[0]),
        debug=PaletteDebug(
            max_colors=max_colors,
            resize_area=resize_area or None,
            region=region,
            timings_ms={
                "decode": round(decode_ms, 2),
                "generate": round(generate_ms, 2),
                "total": round(total_ms, 2),
            },
        ),
        artifacts=artifacts,
    )
