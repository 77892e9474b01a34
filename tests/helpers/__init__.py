"""Test helpers."""

from .metric_delta import metric_delta
from .responses import make_response, make_volume, titled_volumes

__all__ = ["metric_delta", "make_response", "make_volume", "titled_volumes"]
