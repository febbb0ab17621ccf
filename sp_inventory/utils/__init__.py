"""Utility modules for the SharePoint inventory."""

from .formatters import timestamp, bytes_to_kb, format_size_kb, format_table

__all__ = ["timestamp", "bytes_to_kb", "format_size_kb", "format_table"]
