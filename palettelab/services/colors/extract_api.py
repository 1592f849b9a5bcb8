"""
Palette Extraction API Orchestrator

Runs extraction and luminosity analysis for the HTTP layer: request ids,
timing, metrics and structured logging around the extraction core.
"""

import time
from typing import Union

from palettelab.config import config
from palettelab.schemas import LuminosityHistogramModel, LuminosityResponse, PaletteResponse
from palettelab.services.colors.decoding import ImageRef, decode_image, resize_long_edge
from palettelab.services.colors.errors import DecodeFailure
from palettelab.services.colors.extraction import ExtractionMethod, run_extraction
from palettelab.services.colors.luminosity import analyze_luminosity
from palettelab.utils.ids import generate_request_id
from palettelab.utils.logging import get_logger
from palettelab.utils.metrics import get_metrics_instance


def _histogram_model(image: ImageRef):
    histogram = analyze_luminosity(
        image, sample_step=config.HISTOGRAM_SAMPLE_STEP, max_edge=config.MAX_EDGE
    )
    if histogram is None:
        return None
    return LuminosityHistogramModel(**histogram.to_dict())


def _downscaled(image: ImageRef):
    # Decode once so palette and histogram share the resized buffer
    try:
        return resize_long_edge(decode_image(image), config.MAX_EDGE)
    except DecodeFailure:
        return image


def handle_extract(image: ImageRef,
                   color_count: int = None,
                   method: Union[ExtractionMethod, str] = None,
                   include_histogram: bool = False) -> PaletteResponse:
    """
    Extract a palette for an API request.

    Decode failures are not errors here: the response carries the fallback
    palette with `fallback_used=True`.

    Args:
        image: Uploaded image bytes or base64 text
        color_count: Palette size (default from config)
        method: Extraction method (default from config)
        include_histogram: Also compute the luminosity histogram

    Raises:
        ValueError: For an unknown method
    """
    log = get_logger()
    metrics = get_metrics_instance()
    request_id = generate_request_id("pal")
    start_time = time.time()

    color_count = color_count or config.DEFAULT_COLOR_COUNT
    method = ExtractionMethod(method or config.DEFAULT_METHOD)

    log.info("Starting palette extraction", extra={
        "request_id": request_id, "method": method.value, "color_count": color_count
    })

    source = _downscaled(image)
    result = run_extraction(
        source, color_count, method,
        sample_step=config.EXTRACT_SAMPLE_STEP,
        max_iterations=config.KMEANS_MAX_ITERATIONS,
    )
    extract_ms = (time.time() - start_time) * 1000

    histogram = None
    if include_histogram and not result.fallback_used:
        histogram = _histogram_model(source)

    total_ms = (time.time() - start_time) * 1000

    metrics.record_extraction(method.value, result.sampled_pixels, result.fallback_used)
    metrics.record_timing("palette_extract_duration_ms", extract_ms)
    if result.fallback_used:
        log.warning("Palette extraction fell back to default palette", extra={
            "request_id": request_id, "error": result.error, "ms_total": total_ms
        })
    else:
        log.info("Palette extraction completed", extra={
            "request_id": request_id,
            "method": method.value,
            "sampled_pixels": result.sampled_pixels,
            "colors": ",".join(result.colors),
            "ms_extract": extract_ms,
            "ms_total": total_ms,
            "result": "ok"
        })

    return PaletteResponse(
        request_id=request_id,
        method=method.value,
        color_count=color_count,
        colors=result.colors,
        fallback_used=result.fallback_used,
        sampled_pixels=result.sampled_pixels,
        histogram=histogram,
    )


def handle_luminosity(image: ImageRef) -> LuminosityResponse:
    """Luminosity histogram for an API request; histogram is None when there is no data."""
    log = get_logger()
    metrics = get_metrics_instance()
    request_id = generate_request_id("lum")
    start_time = time.time()

    histogram = _histogram_model(image)
    total_ms = (time.time() - start_time) * 1000

    metrics.increment_counter("luminosity_requests_total")
    metrics.record_timing("luminosity_duration_ms", total_ms)
    if histogram is None:
        metrics.increment_counter("luminosity_no_data_total")

    log.info("Luminosity analysis completed", extra={
        "request_id": request_id,
        "has_data": histogram is not None,
        "ms_total": total_ms
    })

    return LuminosityResponse(request_id=request_id, histogram=histogram)
