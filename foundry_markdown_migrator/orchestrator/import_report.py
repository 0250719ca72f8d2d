"""
Import report generator for aggregating statistics and formatting reports.

This module turns the per-phase statistics of an import run into a summary,
formats it for console display and exports it as JSON.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional


class ImportReport:
    """Generates import reports aggregating statistics from all phases."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize import report generator.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger('foundry_markdown_migrator.orchestrator.import_report')

    def generate_report(
        self,
        phase_stats: Dict[str, Any],
        import_duration: float,
        dry_run: bool = False
    ) -> Dict[str, Any]:
        """
        Generate the import report.

        Args:
            phase_stats: Statistics from all phases
            import_duration: Total import duration in seconds
            dry_run: Whether the vault was left untouched

        Returns:
            Import report dictionary
        """
        report = {
            'summary': self._build_summary(phase_stats, import_duration, dry_run),
            'phases': phase_stats,
            'errors': self._build_error_summary(phase_stats),
            'warnings': list(phase_stats.get('build', {}).get('warnings', [])),
            'unresolved_references': list(phase_stats.get('rewrite', {}).get('unresolved_references', [])),
            'timestamp': datetime.now().isoformat()
        }

        self.logger.info(
            f"Report generated: {report['summary']['entries_written']} entries written, "
            f"{report['summary']['total_errors']} errors"
        )
        return report

    def _build_summary(self, phase_stats: Dict[str, Any], duration: float, dry_run: bool) -> Dict[str, Any]:
        fetch = phase_stats.get('fetch', {})
        build = phase_stats.get('build', {})
        folders = phase_stats.get('folders', {})
        rewrite = phase_stats.get('rewrite', {})
        assets = phase_stats.get('assets', {})
        export = phase_stats.get('export', {})

        return {
            'dry_run': dry_run,
            'source_folders': fetch.get('folders', 0),
            'source_documents': fetch.get('documents', 0),
            'entries_built': build.get('entries', 0),
            'virtual_folders': build.get('virtual_folders', 0),
            'folders': folders.get('folders_total', 0),
            'folders_failed': folders.get('folders_failed', 0),
            'folder_notes': folders.get('folder_notes_written', 0),
            'entries_written': export.get('written', 0),
            'entries_failed': export.get('failed', 0),
            'references_rewritten': rewrite.get('links_rewritten', 0),
            'references_unresolved': rewrite.get('links_unresolved', 0),
            'assets_copied': assets.get('copied', 0),
            'assets_failed': assets.get('failed', 0),
            'total_warnings': len(build.get('warnings', [])) + folders.get('cycles_detected', 0),
            'total_errors': self._count_total_errors(phase_stats),
            'duration_seconds': duration,
            'duration_formatted': self._format_duration(duration)
        }

    def _build_error_summary(self, phase_stats: Dict[str, Any]) -> List[Dict[str, Any]]:
        errors = []
        for phase in ('assets', 'export'):
            for failure in phase_stats.get(phase, {}).get('failures', []):
                errors.append(dict(failure, phase=phase))
        return errors

    def _count_total_errors(self, phase_stats: Dict[str, Any]) -> int:
        """Count recoverable I/O failures across all phases."""
        folders = phase_stats.get('folders', {})
        return (
            folders.get('folders_failed', 0)
            + folders.get('folder_notes_failed', 0)
            + phase_stats.get('assets', {}).get('failed', 0)
            + phase_stats.get('export', {}).get('failed', 0)
        )

    def _format_duration(self, seconds: float) -> str:
        """Format duration in human-readable format."""
        if seconds < 60:
            return f"{seconds:.1f}s"
        elif seconds < 3600:
            minutes = int(seconds // 60)
            secs = int(seconds % 60)
            return f"{minutes}m {secs}s"
        else:
            hours = int(seconds // 3600)
            minutes = int((seconds % 3600) // 60)
            secs = int(seconds % 60)
            return f"{hours}h {minutes}m {secs}s"

    def format_console_report(self, report: Dict[str, Any]) -> str:
        """
        Format report for console display.

        Args:
            report: Import report dictionary

        Returns:
            Formatted console string
        """
        sections = []
        summary = report.get('summary', {})

        sections.append("=" * 60)
        sections.append("IMPORT REPORT (DRY RUN)" if summary.get('dry_run') else "IMPORT REPORT")
        sections.append("=" * 60)
        sections.append("")

        sections.append("Summary:")
        sections.append(f"  Source:      {summary.get('source_folders', 0)} folders, "
                        f"{summary.get('source_documents', 0)} journal entries")
        sections.append(f"  Entries:     {summary.get('entries_built', 0)} built, "
                        f"{summary.get('entries_written', 0)} written, {summary.get('entries_failed', 0)} failed")
        sections.append(f"  Folders:     {summary.get('folders', 0)} "
                        f"({summary.get('virtual_folders', 0)} from multi-page entries)")
        if summary.get('folder_notes'):
            sections.append(f"  Notes:       {summary['folder_notes']} folder notes")
        sections.append(f"  References:  {summary.get('references_rewritten', 0)} rewritten, "
                        f"{summary.get('references_unresolved', 0)} unresolved")
        sections.append(f"  Assets:      {summary.get('assets_copied', 0)} copied, "
                        f"{summary.get('assets_failed', 0)} failed")
        sections.append(f"  Duration:    {summary.get('duration_formatted', '0s')}")

        if summary.get('total_warnings', 0) > 0:
            sections.append(f"  Warnings:    {summary['total_warnings']}")

        preview = report.get('phases', {}).get('preview')
        if preview:
            sections.append("")
            sections.append("Planned Files:")
            sections.append("-" * 60)
            for path in preview:
                sections.append(f"  {path}")

        errors = report.get('errors', [])
        if errors:
            sections.append("")
            sections.append(f"Errors ({len(errors)}):")
            sections.append("-" * 60)
            for error in errors[:20]:
                detail = error.get('reason') or error.get('error', '')
                sections.append(f"  [{error.get('phase')}] {error.get('entry')}: {detail}")
            if len(errors) > 20:
                sections.append(f"  ... and {len(errors) - 20} more")

        warnings = report.get('warnings', [])
        if warnings:
            sections.append("")
            sections.append(f"Warnings ({len(warnings)}):")
            sections.append("-" * 60)
            for warning in warnings[:20]:
                sections.append(f"  {warning}")

        sections.append("")
        sections.append("=" * 60)

        return "\n".join(sections)

    def export_json_report(self, report: Dict[str, Any], filepath: str) -> None:
        """
        Export report to JSON file.

        Args:
            report: Import report dictionary
            filepath: Output file path
        """
        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(report, f, indent=2, ensure_ascii=False, default=str)

            self.logger.info(f"JSON report exported to {filepath}")

        except OSError as e:
            self.logger.error(f"Failed to export JSON report: {str(e)}")


__all__ = ['ImportReport']
