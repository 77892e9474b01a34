"""Logging and metrics for CatalogMiner."""

from __future__ import annotations

from .logging import configure_logging
from .metrics import METRICS

__all__ = ["configure_logging", "METRICS"]


def export_prometheus() -> str:
    """Export metrics in Prometheus text format."""
    from prometheus_client import generate_latest

    return generate_latest().decode("utf-8")
