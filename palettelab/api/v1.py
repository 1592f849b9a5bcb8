"""
PaletteLab v1 API Routes
Palette extraction, luminosity analysis, color tools and the palette library.
"""
import time
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile
from fastapi.concurrency import run_in_threadpool

from palettelab.config import config
from palettelab.schemas import (
    HarmoniesResponse, ImagePayload, LuminosityResponse, PaletteResponse,
    SavePaletteRequest, SavedPaletteModel, VariationsResponse,
)
from palettelab.services.colors.conversion import normalize_hex
from palettelab.services.colors.errors import DecodeFailure, InvalidColorFormat
from palettelab.services.colors.decoding import decode_base64_image
from palettelab.services.colors.extract_api import handle_extract, handle_luminosity
from palettelab.services.colors.harmony import generate_color_harmonies
from palettelab.services.colors.harmony.variations import generate_color_variations
from palettelab.services.imaging import read_upload, validate_magic_bytes, validate_upload_size
from palettelab.services.library import PaletteLibrary
from palettelab.utils.metrics import get_metrics_instance

router = APIRouter(prefix="/v1", tags=["Palette Extraction"])

_library = PaletteLibrary()


def get_library() -> PaletteLibrary:
    """Library dependency (overridable in tests)."""
    return _library


def _decode_payload(payload: ImagePayload) -> bytes:
    try:
        image_bytes = decode_base64_image(payload.image_b64)
    except DecodeFailure as e:
        raise HTTPException(status_code=400, detail=str(e))
    validate_upload_size(len(image_bytes))
    validate_magic_bytes(image_bytes)
    return image_bytes


def _hex_or_400(hex_color: str) -> str:
    try:
        return normalize_hex(hex_color)
    except InvalidColorFormat as e:
        raise HTTPException(status_code=400, detail=str(e))


# ============================================================================
# EXTRACTION
# ============================================================================

@router.post("/palette",
             response_model=PaletteResponse,
             summary="Extract Palette",
             description="Extract an ordered palette from an uploaded image")
async def extract_palette_upload(
    file: UploadFile = File(..., description="Image file (PNG/JPEG/WEBP/GIF)"),
    color_count: int = Query(config.DEFAULT_COLOR_COUNT, ge=3, le=8, description="Palette size"),
    method: str = Query(config.DEFAULT_METHOD, pattern="^(kmeans|histogram)$", description="Extraction method"),
    include_histogram: bool = Query(False, description="Include the luminosity histogram")
) -> PaletteResponse:
    image_bytes = await read_upload(file)
    return await run_in_threadpool(handle_extract, image_bytes, color_count, method, include_histogram)


@router.post("/palette/base64",
             response_model=PaletteResponse,
             summary="Extract Palette (base64)",
             description="Extract an ordered palette from a base64-encoded image")
async def extract_palette_base64(
    payload: ImagePayload,
    color_count: int = Query(config.DEFAULT_COLOR_COUNT, ge=3, le=8, description="Palette size"),
    method: str = Query(config.DEFAULT_METHOD, pattern="^(kmeans|histogram)$", description="Extraction method"),
    include_histogram: bool = Query(False, description="Include the luminosity histogram")
) -> PaletteResponse:
    image_bytes = _decode_payload(payload)
    return await run_in_threadpool(handle_extract, image_bytes, color_count, method, include_histogram)


@router.post("/luminosity",
             response_model=LuminosityResponse,
             summary="Luminosity Histogram",
             description="32-bin luminance histogram with contrast and tonal zone statistics")
async def luminosity_upload(
    file: UploadFile = File(..., description="Image file (PNG/JPEG/WEBP/GIF)")
) -> LuminosityResponse:
    image_bytes = await read_upload(file)
    return await run_in_threadpool(handle_luminosity, image_bytes)


@router.post("/luminosity/base64",
             response_model=LuminosityResponse,
             summary="Luminosity Histogram (base64)")
async def luminosity_base64(payload: ImagePayload) -> LuminosityResponse:
    image_bytes = _decode_payload(payload)
    return await run_in_threadpool(handle_luminosity, image_bytes)


# ============================================================================
# COLOR TOOLS
# ============================================================================

@router.get("/colors/{hex_value}/harmonies",
            response_model=HarmoniesResponse,
            summary="Color Harmonies")
async def color_harmonies(hex_value: str) -> HarmoniesResponse:
    """Harmonies for a color given without the leading '#' (e.g. /v1/colors/FF6B6B/harmonies)."""
    base_hex = _hex_or_400(f"#{hex_value.lstrip('#')}")
    harmonies = generate_color_harmonies(base_hex)
    return HarmoniesResponse(base_hex=base_hex, harmonies=[h.to_dict() for h in harmonies])


@router.get("/colors/{hex_value}/variations",
            response_model=VariationsResponse,
            summary="Shadow/Highlight Variations")
async def color_variations(
    hex_value: str,
    use_hue_shift: bool = Query(False, description="Shift shadows toward blue and highlights toward yellow")
) -> VariationsResponse:
    base_hex = _hex_or_400(f"#{hex_value.lstrip('#')}")
    variations = generate_color_variations(base_hex, use_hue_shift)
    return VariationsResponse(
        base_hex=base_hex,
        use_hue_shift=use_hue_shift,
        variations=[v.to_dict() for v in variations]
    )


# ============================================================================
# LIBRARY
# ============================================================================

@router.get("/library", response_model=List[SavedPaletteModel], summary="List Saved Palettes")
async def list_palettes(library: PaletteLibrary = Depends(get_library)) -> List[SavedPaletteModel]:
    return [SavedPaletteModel(**p.to_dict()) for p in library.list()]


@router.post("/library", response_model=SavedPaletteModel, status_code=201, summary="Save Palette")
async def save_palette(request: SavePaletteRequest,
                       library: PaletteLibrary = Depends(get_library)) -> SavedPaletteModel:
    try:
        saved = library.save(request.colors, name=request.name, image_ref=request.image_ref)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SavedPaletteModel(**saved.to_dict())


@router.delete("/library/{palette_id}", status_code=204, summary="Delete Palette")
async def delete_palette(palette_id: str, library: PaletteLibrary = Depends(get_library)):
    if not library.delete(palette_id):
        raise HTTPException(status_code=404, detail=f"Palette {palette_id} not found")
    return Response(status_code=204)


# ============================================================================
# OPERATIONS
# ============================================================================

@router.get("/metrics", summary="Service Metrics")
async def metrics_summary() -> Dict[str, Any]:
    """In-process counters and timing statistics."""
    summary = get_metrics_instance().get_summary()
    summary["timestamp"] = int(time.time())
    return summary
