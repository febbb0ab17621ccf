"""Data models for the SharePoint file inventory."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..utils.formatters import format_date

NOBODY = "Nobody"


@dataclass(frozen=True)
class RunConfiguration:
    """Settings for a single inventory run."""
    tenant_name: str = ""
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    console_output: bool = True
    persist_to_disk: bool = True
    include_personal_sites: bool = False
    register_consent: bool = False
    site_filter: str = ""
    log_directory: str = "logs"
    execution_log: str = "SPInventory_Execution.log"
    failures_file: str = "SPInventory_Failures.csv"
    files_file: str = "SPInventory_FilesFound.csv"
    sites_file: str = "SPInventory_Sites.csv"

    @property
    def admin_url(self) -> str:
        return f"https://{self.tenant_name}-admin.sharepoint.com"

    @property
    def log_path(self) -> Path:
        return Path(self.log_directory) / self.execution_log

    @property
    def failures_path(self) -> Path:
        return Path(self.log_directory) / self.failures_file

    @property
    def files_path(self) -> Path:
        return Path(self.log_directory) / self.files_file

    @property
    def sites_path(self) -> Path:
        return Path(self.log_directory) / self.sites_file


@dataclass(frozen=True)
class SiteRecord:
    """A discovered site collection."""
    url: str
    is_personal: bool = False

    FIELDS = ["Url", "Personal"]

    def to_row(self) -> Dict[str, Any]:
        return {"Url": self.url, "Personal": self.is_personal}


@dataclass(frozen=True)
class FileRecord:
    """Metadata about a file found in a document library."""
    unique_id: str
    name: str
    leaf_name: str
    file_type: str
    size_kb: float
    created: Optional[datetime]
    created_by: str
    modified: Optional[datetime]
    modified_by: str
    checkout_user: str
    shared_with: str
    is_current_version: bool
    checked_out_locally: bool
    url: str
    site_url: str = ""

    FIELDS = [
        "UniqueId", "Name", "FileLeafRef", "FileType", "FileSize_KB",
        "Created", "CreatedBy", "Modified", "ModifiedBy", "CheckoutUser",
        "SharedWithUsers", "IsCurrentVersion", "CheckedOutLocally",
        "FileRef", "SiteUrl",
    ]

    def to_row(self) -> Dict[str, Any]:
        return {
            "UniqueId": self.unique_id,
            "Name": self.name,
            "FileLeafRef": self.leaf_name,
            "FileType": self.file_type,
            "FileSize_KB": f"{self.size_kb:.2f}",
            "Created": format_date(self.created),
            "CreatedBy": self.created_by,
            "Modified": format_date(self.modified),
            "ModifiedBy": self.modified_by,
            "CheckoutUser": self.checkout_user,
            "SharedWithUsers": self.shared_with,
            "IsCurrentVersion": self.is_current_version,
            "CheckedOutLocally": self.checked_out_locally,
            "FileRef": self.url,
            "SiteUrl": self.site_url,
        }


@dataclass(frozen=True)
class FailureRecord:
    """A failed connection or listing operation."""
    host: str
    time: str
    action: str
    reason: str

    FIELDS = ["Host", "Time", "Action", "Reason"]

    def to_row(self) -> Dict[str, Any]:
        return {"Host": self.host, "Time": self.time,
                "Action": self.action, "Reason": self.reason}


# Output payloads accepted by the OutputSink, one variant per destination.

@dataclass(frozen=True)
class PlainMessage:
    text: str
    level: str = "INFO"


@dataclass(frozen=True)
class FailureBatch:
    records: List[FailureRecord]


@dataclass(frozen=True)
class SiteBatch:
    records: List[SiteRecord]


@dataclass(frozen=True)
class FileBatch:
    records: List[FileRecord]


@dataclass
class InventoryResult:
    """Outcome of one inventory run."""
    sites: List[SiteRecord] = field(default_factory=list)
    files: List[FileRecord] = field(default_factory=list)
    failures: List[FailureRecord] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)
    completed: bool = False
