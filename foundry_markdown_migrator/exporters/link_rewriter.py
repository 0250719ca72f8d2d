"""Link rewriter for turning Foundry references into vault wikilinks and embeds."""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union
from urllib.parse import unquote

from ..models import AssetRelocation, DocumentNode, IdentifierMap
from ..vault import join_path

logger = logging.getLogger('foundry_markdown_migrator.exporters.link_rewriter')

LABEL_GROUP = r'(?:\{(?P<label>[^}]*)\})?'

# Escaped variants come from HTML content that went through markdown
# conversion; unescaped variants come from content that was already markdown.
REFERENCE_PATTERNS = [
    re.compile(r'@JournalEntry\\\[(?P<id>[^\]\\]*)\\\]' + LABEL_GROUP),
    re.compile(r'@JournalEntry\[(?P<id>[^\]]*)\]' + LABEL_GROUP),
    re.compile(r'@UUID\\\[JournalEntry\.(?P<id>[^\]\\]*)\\\]' + LABEL_GROUP),
    re.compile(r'@UUID\[JournalEntry\.(?P<id>[^\]]*)\]' + LABEL_GROUP),
]

# Paths may hold one level of balanced parentheses, e.g. "Map (Night).png"
ASSET_PATTERN = re.compile(r'!\[\]\(((?:[^()\n]|\([^()\n]*\))*)\)')

# Optional CommonMark title after the destination: ![](img.png "Map")
ASSET_TITLE_PATTERN = re.compile(r'^(?P<path>.*?)\s+(?:"[^"]*"|\'[^\']*\')$')


@dataclass
class RewriteResult:
    """Rewritten markdown of one entry plus its relocation work-list."""

    markdown: str
    relocations: List[AssetRelocation] = field(default_factory=list)
    links_rewritten: int = 0
    unresolved: List[str] = field(default_factory=list)

    @property
    def assets_queued(self) -> int:
        return len(self.relocations)


class LinkRewriter:
    """
    Rewrites cross-entry references and embedded asset links.

    This rewriter:
    1. Replaces @JournalEntry / @UUID references with [[wikilinks]]
    2. Replaces ![](path) embeds with ![[basename]] and queues the asset copy
    """

    def __init__(
        self,
        data_root: Union[str, Path],
        asset_folder_path: str,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the link rewriter.

        Args:
            data_root: Foundry data directory that asset paths are relative to
            asset_folder_path: Vault path of the asset folder
            logger: Logger instance
        """
        self.data_root = Path(data_root)
        self.asset_folder_path = asset_folder_path
        self.logger = logger or logging.getLogger('foundry_markdown_migrator.exporters.link_rewriter')

        self.stats = {
            'entries_processed': 0,
            'links_rewritten': 0,
            'links_unresolved': 0,
            'assets_queued': 0
        }
        self.unresolved_references: List[Dict[str, str]] = []

    def rewrite_all(self, entries: Iterable[DocumentNode], identifier_map: IdentifierMap) -> List[AssetRelocation]:
        """
        Rewrite every entry in place and collect all relocations.

        Args:
            entries: Entries with rendered markdown
            identifier_map: Fully populated identifier map

        Returns:
            Relocations in entry order
        """
        relocations: List[AssetRelocation] = []

        for node in entries:
            result = self.rewrite(node, identifier_map)
            node.final_markdown = result.markdown
            relocations.extend(result.relocations)

        self.logger.info(
            f"Rewrote {self.stats['links_rewritten']} references "
            f"({self.stats['links_unresolved']} unresolved), queued {self.stats['assets_queued']} assets"
        )
        return relocations

    def rewrite(self, node: DocumentNode, identifier_map: IdentifierMap) -> RewriteResult:
        """
        Rewrite references and asset embeds of a single entry.

        Args:
            node: Entry whose rendered markdown is rewritten
            identifier_map: Fully populated identifier map

        Returns:
            RewriteResult with markdown, relocations and counters
        """
        result = RewriteResult(markdown=node.rendered_markdown or '')

        result.markdown = self._rewrite_references(result.markdown, identifier_map, node.title, result)
        result.markdown = self._rewrite_assets(result.markdown, node.title, result)

        self.stats['entries_processed'] += 1
        self.stats['links_rewritten'] += result.links_rewritten
        self.stats['links_unresolved'] += len(result.unresolved)
        self.stats['assets_queued'] += result.assets_queued

        self.logger.debug(
            f"Rewrote {result.links_rewritten} references for '{node.title}', "
            f"{len(result.unresolved)} unresolved, {result.assets_queued} assets queued"
        )
        return result

    def _rewrite_references(
        self,
        markdown: str,
        identifier_map: IdentifierMap,
        owner: str,
        result: RewriteResult
    ) -> str:
        def replace_reference(match):
            raw_id = match.group('id')
            label = match.group('label')

            filename = identifier_map.resolve(raw_id)
            if filename is None:
                self.logger.debug(f"Unresolved reference '{match.group(0)}' in '{owner}'")
                result.unresolved.append(raw_id)
                self.unresolved_references.append({'entry': owner, 'reference': match.group(0)})
                return match.group(0)

            result.links_rewritten += 1
            if not label or label == filename:
                return f"[[{filename}]]"
            return f"[[{filename}|{label}]]"

        for pattern in REFERENCE_PATTERNS:
            markdown = pattern.sub(replace_reference, markdown)
        return markdown

    def _rewrite_assets(self, markdown: str, owner: str, result: RewriteResult) -> str:
        def replace_asset(match):
            path = self._asset_destination(match.group(1))

            # Data URIs and external URLs stay as they are
            if not path or ':' in path:
                return match.group(0)

            decoded = unquote(path)
            basename = decoded.rstrip('/').split('/')[-1]
            if not basename:
                return match.group(0)

            result.relocations.append(AssetRelocation(
                source_path=str(self.data_root / decoded.lstrip('/')),
                destination_path=join_path(self.asset_folder_path, basename),
                owning_entry=owner
            ))
            return f"![[{basename}]]"

        return ASSET_PATTERN.sub(replace_asset, markdown)

    @staticmethod
    def _asset_destination(target: str) -> str:
        """Strip an optional title and ``<...>`` brackets from an embed target."""
        target = target.strip()
        title_match = ASSET_TITLE_PATTERN.match(target)
        if title_match:
            target = title_match.group('path')
        if target.startswith('<') and target.endswith('>'):
            target = target[1:-1]
        return target.strip()

    def get_stats(self) -> Dict[str, Any]:
        """Get rewrite statistics."""
        return self.stats.copy()


__all__ = ['LinkRewriter', 'RewriteResult']
