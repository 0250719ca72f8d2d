"""
Import orchestrator for coordinating the complete import pipeline.

This module provides the central coordinator that sequences all import phases:
Fetch → Build → Resolve folders → Rewrite → Relocate assets → Write → Report.
Every phase runs in sequence and performs one I/O operation at a time.
"""

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from ..config_loader import get_nested
from ..converters import DocumentModelBuilder, MarkdownConverter
from ..exporters import AssetRelocator, FolderResolver, LinkRewriter, MarkdownExporter
from ..fetchers import BaseFetcher, WorldFetcher
from ..logger import log_section
from ..vault import LocalVaultFileSystem, VaultFileSystem, join_path
from .import_report import ImportReport


def resolve_data_root(config: Dict[str, Any]) -> Path:
    """
    Return the Foundry data directory that asset paths are relative to.

    Defaults to two levels above the world folder (``<data>/worlds/<world>``).
    """
    data_path = get_nested(config, 'source.data_path')
    if data_path:
        return Path(data_path).resolve()
    world_path = Path(get_nested(config, 'source.world_path', '.')).resolve()
    return world_path.parent.parent


class ImportOrchestrator:
    """Central coordinator sequencing all import phases."""

    def __init__(
        self,
        config: Dict[str, Any],
        fs: Optional[VaultFileSystem] = None,
        fetcher: Optional[BaseFetcher] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize import orchestrator.

        Args:
            config: Configuration dictionary (merged with defaults)
            fs: Vault file-system capability (local vault at export.vault_path by default)
            fetcher: Record source (world folder by default)
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger('foundry_markdown_migrator.orchestrator')

        self.fs = fs or LocalVaultFileSystem(get_nested(config, 'export.vault_path', '.'), logger=self.logger)
        self.fetcher = fetcher or WorldFetcher(config, logger=self.logger)

        self.root = get_nested(config, 'export.destination_folder', 'FoundryImport')
        self.asset_folder_path = join_path(self.root, get_nested(config, 'export.asset_folder', 'assets'))
        self.folder_notes = get_nested(config, 'export.folder_notes', False)
        self.show_progress = get_nested(config, 'export.progress_bars', True)
        self.data_root = resolve_data_root(config)

        self.report_generator = ImportReport(logger=self.logger)

        self.logger.info(
            f"ImportOrchestrator initialized: root='{self.root}', assets='{self.asset_folder_path}', "
            f"folder_notes={self.folder_notes}"
        )

    def run(self, dry_run: bool = False) -> Dict[str, Any]:
        """
        Run the import once.

        A ``RecordReadError`` from the fetch phase propagates before anything
        is written to the vault.

        Args:
            dry_run: Build and resolve everything but leave the vault untouched

        Returns:
            Import report dictionary
        """
        self.logger.info("Starting journal import")
        start_time = time.time()
        phase_stats: Dict[str, Any] = {}

        log_section("Reading world data")
        folders = self.fetcher.fetch_folders()
        documents = self.fetcher.fetch_documents()
        phase_stats['fetch'] = {'folders': len(folders), 'documents': len(documents)}

        log_section("Building entries")
        builder = DocumentModelBuilder(
            renderer=MarkdownConverter(logger=self.logger, config=self.config),
            logger=self.logger
        )
        build = builder.build(documents)
        phase_stats['build'] = {
            'entries': len(build.entries),
            'virtual_folders': len(build.virtual_folders),
            'identifiers': len(build.identifier_map),
            'render_failures': build.render_failures,
            'warnings': list(build.warnings)
        }

        log_section("Resolving folders")
        resolver = FolderResolver(self.root, logger=self.logger)
        resolver.resolve(FolderResolver.nodes_from_records(folders) + build.virtual_folders)

        rewriter = LinkRewriter(self.data_root, self.asset_folder_path, logger=self.logger)
        exporter = MarkdownExporter(self.fs, resolver, logger=self.logger)

        if dry_run:
            relocations = rewriter.rewrite_all(build.entries, build.identifier_map)
            phase_stats['folders'] = {'folders_total': len(resolver.nodes)}
            phase_stats['rewrite'] = self._rewrite_stats(rewriter)
            phase_stats['preview'] = [exporter.output_path(node) for node in build.entries]
            phase_stats['preview'].extend(
                sorted({relocation.destination_path for relocation in relocations})
            )
            self.logger.info("Dry run: vault left untouched")
        else:
            phase_stats['folders'] = resolver.materialize(self.fs, folder_notes=self.folder_notes)

            log_section("Rewriting references")
            relocations = rewriter.rewrite_all(build.entries, build.identifier_map)
            phase_stats['rewrite'] = self._rewrite_stats(rewriter)

            log_section("Relocating assets")
            relocator = AssetRelocator(
                self.fs, self.asset_folder_path, show_progress=self.show_progress, logger=self.logger
            )
            phase_stats['assets'] = relocator.relocate(relocations)

            log_section("Writing entries")
            phase_stats['export'] = exporter.export_entries(build.entries)

        duration = time.time() - start_time
        self.logger.info(f"Import complete in {duration:.2f}s")
        return self.report_generator.generate_report(phase_stats, duration, dry_run=dry_run)

    @staticmethod
    def _rewrite_stats(rewriter: LinkRewriter) -> Dict[str, Any]:
        stats = rewriter.get_stats()
        stats['unresolved_references'] = list(rewriter.unresolved_references)
        return stats


__all__ = ['ImportOrchestrator', 'resolve_data_root']
