"""Output writer that materializes entries as markdown files in the vault."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..logger import ProgressTracker
from ..models import DocumentNode
from ..vault import VaultFileSystem, join_path
from .folder_resolver import FolderResolver


class MarkdownExporter:
    """
    Writes one markdown file per entry.

    Every output path is deleted and recreated, so repeated imports replace
    files instead of appending to them. Failures are isolated per entry and
    nothing is rolled back.
    """

    def __init__(
        self,
        fs: VaultFileSystem,
        resolver: FolderResolver,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the markdown exporter.

        Args:
            fs: Vault file-system capability
            resolver: Resolver holding the folder paths
            logger: Logger instance
        """
        self.fs = fs
        self.resolver = resolver
        self.logger = logger or logging.getLogger('foundry_markdown_migrator.exporters.markdown_exporter')

        self.stats = {
            'total_entries': 0,
            'written': 0,
            'replaced': 0,
            'failed': 0
        }
        self.failures: List[Dict[str, str]] = []

    def output_path(self, node: DocumentNode) -> str:
        """Resolve the vault path of an entry's file."""
        folder_path = self.resolver.path_for(node.parent_folder_id) or self.resolver.root
        return join_path(folder_path, f"{node.sanitized_filename}.md")

    def export_entries(self, entries: Sequence[DocumentNode]) -> Dict[str, Any]:
        """
        Write entries in build order.

        Args:
            entries: Entries with final markdown

        Returns:
            Statistics dictionary
        """
        self.logger.info(f"Writing {len(entries)} entries under '{self.resolver.root}'")

        with ProgressTracker(total_items=len(entries), item_type='entries') as tracker:
            for node in entries:
                tracker.start_item(node.title)
                self.stats['total_entries'] += 1
                success = self._write_entry(node)
                tracker.increment(success=success)

        return self.get_stats()

    def _write_entry(self, node: DocumentNode) -> bool:
        path = self.output_path(node)

        try:
            if self.fs.delete_if_exists(path):
                self.stats['replaced'] += 1
            self.fs.create_file(path, node.full_text())
        except OSError as e:
            self.logger.error(f"Failed to write entry '{node.title}' to '{path}': {e}")
            self.stats['failed'] += 1
            self.failures.append({'entry': node.title, 'path': path, 'error': str(e)})
            return False

        self.stats['written'] += 1
        self.logger.debug(f"Wrote entry '{node.title}' -> {path}")
        return True

    def get_stats(self) -> Dict[str, Any]:
        """Get export statistics."""
        stats = self.stats.copy()
        stats['failures'] = list(self.failures)
        return stats


__all__ = ['MarkdownExporter']
