"""
PaletteLab API Schemas
Pydantic models for palette extraction request/response validation.
"""
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field

HEX_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("palettelab", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


# ============================================================================
# EXTRACTION SCHEMAS
# ============================================================================

class ImagePayload(BaseModel):
    """JSON request body carrying a base64-encoded image."""
    image_b64: str = Field(
        ...,
        min_length=1,
        description="Base64-encoded image (PNG/JPEG/WEBP/GIF), data URLs accepted"
    )


class LuminosityHistogramModel(BaseModel):
    """Luminance histogram with summary statistics."""
    bins: List[int] = Field(
        ...,
        min_length=32,
        max_length=32,
        description="32 luminance bins normalized so the tallest bin is 100"
    )
    average: int = Field(..., ge=0, le=255, description="Mean luminance")
    contrast: int = Field(..., ge=0, le=100, description="Contrast score 0-100")
    dark_percent: int = Field(..., ge=0, le=100, description="Share of pixels with luminance < 85")
    mid_percent: int = Field(..., ge=0, le=100, description="Share of pixels with luminance in [85, 170)")
    bright_percent: int = Field(..., ge=0, le=100, description="Share of pixels with luminance >= 170")
    min_value: int = Field(..., ge=0, le=255, description="Minimum luminance")
    max_value: int = Field(..., ge=0, le=255, description="Maximum luminance")


class PaletteResponse(BaseModel):
    """Palette extraction response."""
    request_id: str = Field(..., description="Request identifier for tracing")
    method: str = Field(..., description="Extraction method used: 'kmeans' or 'histogram'")
    color_count: int = Field(..., ge=3, le=8, description="Requested palette size")
    colors: List[str] = Field(
        ...,
        description="Hex colors (#RRGGBB) sorted brightest first"
    )
    fallback_used: bool = Field(
        ...,
        description="Whether the fixed fallback palette was returned"
    )
    sampled_pixels: int = Field(0, ge=0, description="Opaque pixels fed to the extractor")
    histogram: Optional[LuminosityHistogramModel] = Field(
        None,
        description="Luminosity histogram when requested and available"
    )


class LuminosityResponse(BaseModel):
    """Luminosity analysis response; histogram is null when there is no data."""
    request_id: str = Field(..., description="Request identifier for tracing")
    histogram: Optional[LuminosityHistogramModel] = Field(
        None,
        description="Histogram, or null if the image could not be decoded"
    )


# ============================================================================
# COLOR TOOL SCHEMAS
# ============================================================================

class HarmonyColorModel(BaseModel):
    hex: str = Field(..., pattern=HEX_PATTERN)
    name: str
    angle: int = Field(..., description="Hue rotation from the base color in degrees")


class ColorHarmonyModel(BaseModel):
    type: str = Field(..., description="complementary, analogous, triadic, split-complementary, tetradic")
    name: str
    description: str
    colors: List[HarmonyColorModel]


class HarmoniesResponse(BaseModel):
    base_hex: str = Field(..., pattern=HEX_PATTERN)
    harmonies: List[ColorHarmonyModel]


class ColorVariationModel(BaseModel):
    hex: str = Field(..., pattern=HEX_PATTERN)
    label: str
    full_label: str
    hsl: Tuple[int, int, int]


class VariationsResponse(BaseModel):
    base_hex: str = Field(..., pattern=HEX_PATTERN)
    use_hue_shift: bool
    variations: List[ColorVariationModel]


# ============================================================================
# LIBRARY SCHEMAS
# ============================================================================

class SavePaletteRequest(BaseModel):
    """Request to save a palette to the library."""
    colors: List[str] = Field(..., min_length=1, max_length=8)
    name: Optional[str] = Field(None, max_length=80)
    image_ref: Optional[str] = Field(None, max_length=2048)


class SavedPaletteModel(BaseModel):
    id: str
    name: str
    colors: List[str]
    image_ref: Optional[str] = None
    created_at: float
