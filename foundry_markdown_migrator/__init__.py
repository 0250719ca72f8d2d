"""Foundry Journal to Markdown Import Tool

A standalone tool for importing the journal entries of a Foundry VTT world
into an Obsidian-style markdown vault.

Features:
- Reads the world's folders.db and journal.db (NDJSON, tombstones skipped)
- Rebuilds the journal folder hierarchy inside a destination folder
- Multi-page entries become a folder with a table of contents and one file per page
- HTML to Markdown conversion with tables and images
- @JournalEntry / @UUID references rewritten to [[wikilinks]]
- Embedded images copied into a single asset folder
- Re-imports replace files, so repeated runs are byte-identical
- Optional folder notes, dry-run preview and JSON report

Basic Usage:
    1. Copy config.yaml.example to config.yaml
    2. Point source.world_path at the world and export.vault_path at the vault
    3. Run: foundry-markdown-migrator --config config.yaml
"""

__version__ = "1.0.0"
__description__ = "Foundry VTT journal to Markdown vault import tool"

from .models import (
    AssetRelocation,
    ContentFormat,
    DocumentNode,
    FolderNode,
    FolderRecord,
    IdentifierMap,
    JournalPage,
    JournalRecord,
    PageKey,
    PageType,
    sanitize_filename
)
from .config_loader import ConfigLoader, get_nested
from .logger import setup_logging, ProgressTracker, log_section, log_config
from .vault import LocalVaultFileSystem, VaultFileSystem

# Expose main entry point for CLI
from .migrate import main as cli_main

__all__ = [
    # Version info
    '__version__',
    '__description__',

    # Core data models
    'AssetRelocation',
    'ContentFormat',
    'DocumentNode',
    'FolderNode',
    'FolderRecord',
    'IdentifierMap',
    'JournalPage',
    'JournalRecord',
    'PageKey',
    'PageType',
    'sanitize_filename',

    # Configuration
    'ConfigLoader',
    'get_nested',

    # Logging
    'setup_logging',
    'ProgressTracker',
    'log_section',
    'log_config',

    # Vault
    'LocalVaultFileSystem',
    'VaultFileSystem',

    # CLI entry point
    'cli_main',
]
