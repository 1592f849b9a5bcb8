"""
PaletteLab Imaging Utilities
Upload validation and safety checks ahead of pixel decoding.
"""
from fastapi import HTTPException, UploadFile

from palettelab.config import config

MAGIC_BYTES = [
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
]


def validate_upload_size(num_bytes: int) -> None:
    """
    Reject uploads larger than the configured limit.

    Raises:
        HTTPException: 413 when the payload is too large
    """
    if num_bytes > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )


def validate_magic_bytes(file_bytes: bytes) -> str:
    """
    Validate file magic bytes to ensure it's actually an image.

    Args:
        file_bytes: Raw file bytes

    Returns:
        Detected MIME type

    Raises:
        HTTPException: 400 for invalid/corrupt files
    """
    if len(file_bytes) < 12:
        raise HTTPException(status_code=400, detail="File too small or corrupt")

    for signature, mime_type in MAGIC_BYTES:
        if file_bytes.startswith(signature):
            return mime_type
    if file_bytes[:4] == b"RIFF" and file_bytes[8:12] == b"WEBP":
        return "image/webp"

    raise HTTPException(
        status_code=400,
        detail="Invalid image file. Magic bytes don't match supported formats."
    )


async def read_upload(file: UploadFile) -> bytes:
    """
    Read an uploaded image and validate size and format.

    Decoding itself is left to the extraction core, which treats decode
    failures as "no data" rather than client errors.

    Raises:
        HTTPException: 400 for unreadable or non-image files, 413 when too large
    """
    if file.content_type and file.content_type not in config.SUPPORTED_MIME_TYPES \
            and file.content_type != "application/octet-stream":
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )

    try:
        file_bytes = await file.read()
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Failed to read file: {str(e)}")

    validate_upload_size(len(file_bytes))
    validate_magic_bytes(file_bytes)
    return file_bytes
