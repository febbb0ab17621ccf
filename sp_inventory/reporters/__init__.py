"""Output destinations for inventory runs."""

from .output_sink import OutputSink

__all__ = ["OutputSink"]
