"""Export package that materializes converted journal entries in a vault.

Package Structure:
- folder_resolver: Resolves folder paths and creates folders (plus optional folder notes)
- link_rewriter: Rewrites Foundry references to wikilinks and queues asset copies
- asset_relocator: Copies queued assets into the asset folder
- markdown_exporter: Writes one markdown file per entry

Configuration Referenced:
- export.destination_folder: Import root inside the vault
- export.asset_folder: Asset folder under the import root
- export.folder_notes: Enable/disable folder note generation
- export.progress_bars: Enable/disable tqdm progress bars
"""

from .asset_relocator import AssetRelocator
from .folder_resolver import FolderResolver
from .link_rewriter import LinkRewriter, RewriteResult
from .markdown_exporter import MarkdownExporter

__all__ = [
    'AssetRelocator',
    'FolderResolver',
    'LinkRewriter',
    'MarkdownExporter',
    'RewriteResult'
]
