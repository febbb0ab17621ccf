"""Summary statistics for a completed inventory run."""

import logging
from typing import Any, Dict, List

from .models import FailureRecord, FileRecord, NOBODY, SiteRecord
from ..utils.formatters import format_size_kb


class InventoryAnalyzer:
    """Analyzes inventory results and generates statistics."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def summarize(self, sites: List[SiteRecord], files: List[FileRecord],
                  failures: List[FailureRecord]) -> Dict[str, Any]:
        """Summarize one run's accumulators.

        Args:
            sites: Sites enumerated during the run.
            files: Files collected across all sites.
            failures: Failed operations.

        Returns:
            Dictionary containing summary statistics.
        """
        per_site: Dict[str, Dict[str, Any]] = {}
        for site in sites:
            per_site[site.url] = {'files': 0, 'total_size_kb': 0.0}

        total_size_kb = 0.0
        checked_out = 0
        shared = 0

        for record in files:
            total_size_kb += record.size_kb
            if record.checkout_user != NOBODY:
                checked_out += 1
            if record.shared_with != NOBODY:
                shared += 1

            site_stats = per_site.setdefault(record.site_url, {'files': 0, 'total_size_kb': 0.0})
            site_stats['files'] += 1
            site_stats['total_size_kb'] = round(site_stats['total_size_kb'] + record.size_kb, 2)

        summary = {
            'sites': len(sites),
            'personal_sites': sum(1 for site in sites if site.is_personal),
            'files': len(files),
            'total_size_kb': round(total_size_kb, 2),
            'checked_out_files': checked_out,
            'shared_files': shared,
            'failures': len(failures),
            'per_site': per_site,
        }

        self.logger.info(f"Analysis complete: {summary['sites']} sites, "
                         f"{summary['files']} files, {summary['failures']} failures")

        return summary

    @staticmethod
    def format_summary(summary: Dict[str, Any]) -> str:
        """Render a summary as a single line for the execution log."""
        return (f"{summary.get('files', 0)} files "
                f"({format_size_kb(summary.get('total_size_kb', 0.0))}) "
                f"across {summary.get('sites', 0)} sites; "
                f"{summary.get('checked_out_files', 0)} checked out, "
                f"{summary.get('shared_files', 0)} shared, "
                f"{summary.get('failures', 0)} failures")
