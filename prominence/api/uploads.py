"""
Prominence Upload Handling
Validates uploaded image files and decodes them into pixel arrays.
"""
import io

import numpy as np
from fastapi import HTTPException, UploadFile
from PIL import Image, UnidentifiedImageError

from prominence.config import config
from prominence.services.imaging import to_rgb_array


def validate_file_upload(file: UploadFile) -> None:
    """
    Validate uploaded file metadata.

    Raises:
        HTTPException: 400 for oversized files, 415 for unsupported formats
    """
    if getattr(file, "size", None) and file.size > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    if file.content_type not in config.SUPPORTED_MIME_TYPES:
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )

    if file.filename and '.' in file.filename:
        ext = "." + file.filename.lower().rsplit('.', 1)[-1]
        if ext not in config.SUPPORTED_EXTENSIONS:
            raise HTTPException(
                status_code=415,
                detail=f"Unsupported file extension. Supported: {', '.join(sorted(config.SUPPORTED_EXTENSIONS))}"
            )


def validate_magic_bytes(file_bytes: bytes) -> str:
    """
    Check file magic bytes to make sure the payload really is an image.

    Returns:
        Detected MIME type

    Raises:
        HTTPException: 400 for invalid or corrupt files
    """
    if len(file_bytes) < 12:
        raise HTTPException(status_code=400, detail="File too small or corrupt")

    if file_bytes.startswith(b'\xff\xd8\xff'):
        return "image/jpeg"
    if file_bytes.startswith(b'\x89PNG\r\n\x1a\n'):
        return "image/png"
    if file_bytes[:6] in (b'GIF87a', b'GIF89a'):
        return "image/gif"
    if file_bytes[:4] == b'RIFF' and file_bytes[8:12] == b'WEBP':
        return "image/webp"

    raise HTTPException(
        status_code=400,
        detail="Invalid image file. Magic bytes don't match supported formats."
    )


def decode_image_bytes(file_bytes: bytes) -> np.ndarray:
    """
    Decode image bytes into an (H, W, 3|4) uint8 array.

    Raises:
        HTTPException: 400 for decode errors or images above the pixel limit
    """
    validate_magic_bytes(file_bytes)

    try:
        with Image.open(io.BytesIO(file_bytes)) as pil_image:
            width, height = pil_image.size
            if width * height > config.MAX_IMAGE_PIXELS:
                raise HTTPException(
                    status_code=400,
                    detail=f"Image too large. Maximum pixels: {config.MAX_IMAGE_PIXELS}"
                )
            return to_rgb_array(pil_image)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Failed to decode image: {str(e)}")


async def read_image(file: UploadFile) -> np.ndarray:
    """
    Read and decode an uploaded image.

    Raises:
        HTTPException: 400 for unreadable, oversized or corrupt uploads
    """
    validate_file_upload(file)

    try:
        file_bytes = await file.read()
    except OSError as e:
        raise HTTPException(status_code=400, detail=f"Failed to read file: {str(e)}")

    if len(file_bytes) > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    return decode_image_bytes(file_bytes)
