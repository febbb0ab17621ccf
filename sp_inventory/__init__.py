"""
SharePoint Inventory - a file inventory tool for SharePoint Online tenants.

This package provides tools for enumerating a tenant's sites, collecting
document library file metadata, and exporting the results to CSV.
"""

__version__ = "1.0.0"

from .core.inventory import SiteInventory
from .core.client import Office365Client
from .reporters.output_sink import OutputSink

__all__ = ["SiteInventory", "Office365Client", "OutputSink"]
