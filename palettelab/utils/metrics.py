"""
PaletteLab Metrics Collection
In-process counters and distributions for extraction and luminosity requests.
"""
import time
from collections import defaultdict, Counter
from typing import Any, Dict, List, Optional
from threading import Lock


def _distribution(values: List[float]) -> Dict[str, float]:
    ordered = sorted(values)
    return {
        "count": len(ordered),
        "mean": sum(ordered) / len(ordered),
        "min": ordered[0],
        "max": ordered[-1],
        "p50": MetricsCollector._percentile(ordered, 50),
        "p95": MetricsCollector._percentile(ordered, 95),
    }


class MetricsCollector:
    """Thread-safe collector for palette service metrics."""

    def __init__(self):
        self._lock = Lock()
        self._counters: Dict[str, int] = Counter()
        self._timings: Dict[str, List[float]] = defaultdict(list)
        self._sampled_pixels: List[int] = []
        self._start_time = time.time()

    def increment_counter(self, name: str, amount: int = 1):
        with self._lock:
            self._counters[name] += amount

    def record_extraction(self, method: str, sampled_pixels: int, fallback_used: bool):
        """Count one palette extraction and the pixels it consumed."""
        with self._lock:
            self._counters["palette_extract_requests_total"] += 1
            self._counters[f"palette_extract_method_total_{method}"] += 1
            if fallback_used:
                self._counters["palette_extract_fallback_total"] += 1
            else:
                self._sampled_pixels.append(sampled_pixels)

    def record_timing(self, name: str, duration_ms: float):
        """Record a duration sample in milliseconds."""
        with self._lock:
            self._timings[name].append(duration_ms)

    def get_counters(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def get_timing_stats(self) -> Dict[str, Dict[str, float]]:
        """Distribution of every recorded timing series."""
        with self._lock:
            return {name: _distribution(samples) for name, samples in self._timings.items() if samples}

    def get_sampled_pixel_stats(self) -> Dict[str, float]:
        """Distribution of opaque pixels fed to successful extractions."""
        with self._lock:
            if not self._sampled_pixels:
                return {}
            return _distribution(self._sampled_pixels)

    def get_fallback_rate(self) -> float:
        with self._lock:
            total = self._counters["palette_extract_requests_total"]
            return self._counters["palette_extract_fallback_total"] / total if total else 0.0

    def get_uptime_seconds(self) -> float:
        return time.time() - self._start_time

    def get_summary(self) -> Dict[str, Any]:
        return {
            "uptime_seconds": self.get_uptime_seconds(),
            "counters": self.get_counters(),
            "fallback_rate": self.get_fallback_rate(),
            "timing_stats": self.get_timing_stats(),
            "sampled_pixel_stats": self.get_sampled_pixel_stats(),
        }

    def reset(self):
        """Clear everything and restart the uptime clock (tests)."""
        with self._lock:
            self._counters.clear()
            self._timings.clear()
            self._sampled_pixels.clear()
            self._start_time = time.time()

    @staticmethod
    def _percentile(ordered: List[float], percentile: int) -> float:
        """Linear-interpolated percentile of already sorted data."""
        if not ordered:
            return 0.0
        position = (len(ordered) - 1) * percentile / 100
        lower = int(position)
        if lower + 1 >= len(ordered):
            return ordered[lower]
        return ordered[lower] + (position - lower) * (ordered[lower + 1] - ordered[lower])


# Global metrics instance
_metrics: Optional[MetricsCollector] = None


def get_metrics_instance() -> MetricsCollector:
    """Get or create global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def reset_metrics():
    """Reset global metrics (for testing)."""
    if _metrics is not None:
        _metrics.reset()
