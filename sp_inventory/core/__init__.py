"""Core inventory functionality."""

from .inventory import SiteInventory
from .client import SharePointClient, Office365Client
from .analyzer import InventoryAnalyzer
from .models import RunConfiguration, SiteRecord, FileRecord, FailureRecord, InventoryResult

__all__ = ["SiteInventory", "SharePointClient", "Office365Client", "InventoryAnalyzer",
           "RunConfiguration", "SiteRecord", "FileRecord", "FailureRecord", "InventoryResult"]
