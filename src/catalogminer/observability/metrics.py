"""
Defines Prometheus metrics for the extraction pipeline.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Module reloads (and repeated imports under the test suite) must not raise
# duplicate-registration errors, so existing collectors are reused.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            # Registration lost the race; use the now-existing collector.
            return _PROM_REGISTRY._names_to_collectors[name]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]
Histogram = _duplicate_safe_factory(_OrigHistogram)  # type: ignore[assignment]


def _create_metrics() -> Dict[str, Any]:
    return {
        "records_extracted": Counter(
            "catalogminer_records_extracted_total",
            "Records accepted from raw responses (fallback records excluded)",
        ),
        "candidates_dropped": Counter(
            "catalogminer_candidates_dropped_total",
            "Candidate records discarded during extraction",
            ["reason"],
        ),
        "fallback_used": Counter(
            "catalogminer_fallback_used_total",
            "Extraction runs answered from the fallback catalog",
        ),
        "extraction_duration": Histogram(
            "catalogminer_extraction_duration_seconds",
            "Wall time of one extraction run",
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()
