"""Main inventory orchestration."""

import logging
import socket
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from .analyzer import InventoryAnalyzer
from .client import DOCUMENT_LIBRARY, PAGE_SIZE, PERSONAL_SITE_FILTER, SharePointClient
from .models import (FailureBatch, FailureRecord, FileBatch, FileRecord, InventoryResult,
                     RunConfiguration, SiteBatch, SiteRecord)
from .records import build_file_records
from ..reporters.output_sink import OutputSink
from ..utils.formatters import format_date, format_table

SITE_COLUMNS = ["Url", "Personal"]
FILE_COLUMNS = ["Name", "FileType", "FileSize_KB", "Modified", "ModifiedBy",
                "CheckoutUser", "SharedWithUsers", "FileRef"]


class SiteInventory:
    """Walks a tenant's sites and collects file metadata."""

    def __init__(self, config: RunConfiguration, client: SharePointClient,
                 sink: Optional[OutputSink] = None):
        """Initialize inventory.

        Args:
            config: Settings for this run.
            client: Connection and listing service.
            sink: Output destination. Built from ``config`` when omitted.
        """
        self.config = config
        self.client = client
        self.sink = sink or OutputSink.from_config(config)
        self.analyzer = InventoryAnalyzer()
        self.logger = logging.getLogger(__name__)

    def run(self) -> InventoryResult:
        """Run the inventory from connection to persisted output.

        Returns:
            InventoryResult. ``completed`` is False when a fatal step aborted
            the run before enumeration.
        """
        result = InventoryResult()

        if not self._prepare_log_directory():
            return result

        self.sink.info("Starting SharePoint file inventory")

        if self.config.register_consent:
            self._register_consent()

        if not self.config.tenant_name or not self.config.tenant_name.strip():
            self.sink.error("Tenant name is not set. Provide it with --tenant or in the config file")
            return result

        try:
            admin_connection = self.client.connect_admin(self.config.admin_url)
        except Exception as e:
            self.sink.error(f"Unable to connect to {self.config.admin_url}: {e}")
            return result

        self.sink.info(f"Connected to {self.config.admin_url}")

        result.sites = self._enumerate_sites(admin_connection, result.failures)
        self.sink.info(f"Found {len(result.sites)} sites")

        for site in result.sites:
            result.files.extend(self._collect_site_files(site, result.failures))

        result.summary = self.analyzer.summarize(result.sites, result.files, result.failures)

        self._report(result)
        self._persist(result)

        result.completed = True
        self.sink.info(f"Inventory finished: {self.analyzer.format_summary(result.summary)}")
        return result

    def _prepare_log_directory(self) -> bool:
        log_dir = Path(self.config.log_directory)
        if log_dir.is_dir():
            return True
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.sink.error(f"Unable to create log directory {log_dir}: {e}")
            return False
        self.logger.info(f"Created log directory {log_dir}")
        return True

    def _register_consent(self):
        try:
            url = self.client.register_management_consent(self.config.tenant_name)
        except Exception as e:
            self.sink.error(f"Management consent failed: {e}")
            return
        self.sink.info(f"Management consent requested: {url}")

    def _enumerate_sites(self, admin_connection: Any, failures: List[FailureRecord]) -> List[SiteRecord]:
        """List personal sites (when requested) followed by the filtered site set."""
        sites: List[SiteRecord] = []

        if self.config.include_personal_sites:
            try:
                personal = self.client.list_sites(admin_connection, PERSONAL_SITE_FILTER,
                                                  include_personal=True)
                sites.extend(personal)
                self.logger.info(f"Found {len(personal)} personal sites")
            except Exception as e:
                self._record_failure(failures, "List personal sites", e)

        try:
            sites.extend(self.client.list_sites(admin_connection, self.config.site_filter))
        except Exception as e:
            self._record_failure(failures, "List sites", e)

        return sites

    def _collect_site_files(self, site: SiteRecord, failures: List[FailureRecord]) -> List[FileRecord]:
        self.logger.info(f"Listing files in {site.url}")
        try:
            connection = self.client.connect_site(site.url)
            items = list(self.client.list_items(connection, DOCUMENT_LIBRARY, PAGE_SIZE))
        except Exception as e:
            self._record_failure(failures, f"List files in {site.url}", e)
            return []

        records = build_file_records(items, site.url)
        self.logger.info(f"{site.url}: {len(records)} files out of {len(items)} items")
        return records

    def _record_failure(self, failures: List[FailureRecord], action: str, error: Exception):
        failures.append(FailureRecord(
            host=socket.gethostname(),
            time=format_date(datetime.now()),
            action=action,
            reason=str(error),
        ))
        self.logger.info(f"{action} failed: {error}")

    def _report(self, result: InventoryResult):
        if not self.config.console_output:
            return

        if self.config.include_personal_sites:
            self.sink.display("\nSites:")
            self.sink.display(format_table([site.to_row() for site in result.sites], SITE_COLUMNS,
                                           max_width=80))

        self.sink.display("\nFiles:")
        self.sink.display(format_table([record.to_row() for record in result.files], FILE_COLUMNS))
        self.sink.display("")

    def _persist(self, result: InventoryResult):
        if result.failures:
            self.sink.warning(f"{len(result.failures)} operations failed, "
                              f"see {self.config.failures_path}")
            self.sink.emit(FailureBatch(result.failures))

        if not self.config.persist_to_disk:
            return

        if self.config.include_personal_sites:
            self.sink.emit(SiteBatch(result.sites))
        self.sink.emit(FileBatch(result.files))
        self.sink.info(f"Saved {len(result.files)} files to {self.config.files_path}")
