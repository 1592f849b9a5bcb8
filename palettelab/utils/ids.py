"""
PaletteLab Request ID Utilities
Generate unique request IDs for tracing.
"""
import uuid
from datetime import datetime


def generate_request_id(prefix: str = "pal") -> str:
    """
    Generate a unique request ID for tracking.

    Args:
        prefix: Short tag naming the operation (e.g. "pal", "lum")

    Returns:
        Request ID of the form "{prefix}-{YYYYmmddHHMMSS}-{uuid8}"
    """
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    short_uuid = str(uuid.uuid4())[:8]
    return f"{prefix}-{timestamp}-{short_uuid}"


def extract_timestamp_from_request_id(request_id: str) -> str:
    """Timestamp part of a request ID, or empty string if it has none."""
    parts = request_id.split("-")
    if len(parts) >= 3 and parts[1].isdigit():
        return parts[1]
    return ""
