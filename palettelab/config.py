"""
PaletteLab Configuration
Manages environment variables and defaults for the extraction service.
"""
import os
from typing import Literal


class Config:
    """Configuration class for PaletteLab services."""

    # Upload limits
    MAX_FILE_MB: int = int(os.environ.get("PALETTELAB_MAX_FILE_MB", "10"))

    # Resize-before-decode bound (longest edge, pixels)
    MAX_EDGE: int = int(os.environ.get("PALETTELAB_MAX_EDGE", "150"))

    # Extraction defaults
    DEFAULT_COLOR_COUNT: int = int(os.environ.get("PALETTELAB_DEFAULT_COLOR_COUNT", "5"))
    DEFAULT_METHOD: Literal["kmeans", "histogram"] = os.environ.get("PALETTELAB_DEFAULT_METHOD", "kmeans")
    KMEANS_MAX_ITERATIONS: int = int(os.environ.get("PALETTELAB_KMEANS_MAX_ITERATIONS", "20"))
    EXTRACT_SAMPLE_STEP: int = int(os.environ.get("PALETTELAB_EXTRACT_SAMPLE_STEP", "4"))
    HISTOGRAM_SAMPLE_STEP: int = int(os.environ.get("PALETTELAB_HISTOGRAM_SAMPLE_STEP", "2"))

    # Logging
    LOG_LEVEL: str = os.environ.get("PALETTELAB_LOG_LEVEL", "INFO")

    # Library
    LIBRARY_MAX_PALETTES: int = int(os.environ.get("PALETTELAB_LIBRARY_MAX_PALETTES", "100"))

    # Service
    VERSION: str = "1.0.0"
    SERVICE_NAME: str = "palettelab"
    ALLOWED_ORIGINS: str = os.environ.get("PALETTELAB_ALLOWED_ORIGINS", "*")

    # Palette bounds
    MIN_COLOR_COUNT: int = 3
    MAX_COLOR_COUNT: int = 8

    # Accepted upload formats
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/png", "image/webp", "image/gif"]

    @classmethod
    def validate_color_count(cls, count: int) -> bool:
        """Validate requested palette size."""
        return cls.MIN_COLOR_COUNT <= count <= cls.MAX_COLOR_COUNT

    @classmethod
    def validate_sample_step(cls, step: int) -> bool:
        """Validate pixel sampling stride."""
        return 1 <= step <= 64


# Global config instance
config = Config()
