"""Turns journal records into output entries and the identifier map."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from ..models import (
    ContentFormat,
    DocumentNode,
    FolderNode,
    IdentifierMap,
    JournalPage,
    JournalRecord,
    PageKey,
    PageType,
    sanitize_filename
)
from .frontmatter import build_frontmatter
from .markdown_converter import MarkdownConverter

MEDIA_PAGE_TYPES = (PageType.IMAGE, PageType.PDF, PageType.VIDEO)


@dataclass
class BuildResult:
    """Output of the document model builder."""

    entries: List[DocumentNode] = field(default_factory=list)
    virtual_folders: List[FolderNode] = field(default_factory=list)
    identifier_map: IdentifierMap = field(default_factory=IdentifierMap)
    warnings: List[str] = field(default_factory=list)

    @property
    def render_failures(self) -> int:
        return sum(1 for entry in self.entries if entry.warnings)


class DocumentModelBuilder:
    """
    Builds one or more DocumentNodes per journal record.

    Decision policy per record:
    - no pages: one entry from the record's own content
    - one page: one entry from the page payload, no extra nesting level
    - several pages: a virtual folder holding a TOC entry plus one entry per page
    """

    def __init__(self, renderer: Optional[MarkdownConverter] = None, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('foundry_markdown_migrator.converters.document_builder')
        self.renderer = renderer or MarkdownConverter(logger=self.logger)

    def build(self, documents: Iterable[JournalRecord]) -> BuildResult:
        """
        Build entries for every record.

        The identifier map is complete once this returns, so references can
        point forward or backward in the source stream.

        Args:
            documents: Journal records in source order

        Returns:
            BuildResult with entries in build order
        """
        result = BuildResult()

        for record in documents:
            page_count = len(record.pages)
            if page_count == 0:
                self._build_single(record, record.content or '', ContentFormat.HTML, result)
            elif page_count == 1:
                payload, content_format = self._page_payload(record.pages[0], result)
                self._build_single(record, payload, content_format, result)
                result.identifier_map.register(
                    PageKey(record.id, record.pages[0].id), result.entries[-1].sanitized_filename
                )
            else:
                self._build_multi_page(record, result)

        for node in result.entries:
            self._render(node, result)

        self.logger.info(
            f"Built {len(result.entries)} entries and {len(result.virtual_folders)} virtual folders "
            f"({len(result.identifier_map)} identifiers)"
        )
        return result

    def _build_single(
        self,
        record: JournalRecord,
        content: str,
        content_format: ContentFormat,
        result: BuildResult
    ) -> None:
        title, filename = self._naming(record.name, record.id)
        node = DocumentNode(
            key=PageKey(record.id),
            title=title,
            sanitized_filename=filename,
            parent_folder_id=record.folder_id,
            raw_content=content,
            content_format=content_format
        )
        self._add(node, result)

    def _build_multi_page(self, record: JournalRecord, result: BuildResult) -> None:
        title, filename = self._naming(record.name, record.id)

        result.virtual_folders.append(FolderNode(
            id=record.id,
            display_name=title,
            sanitized_name=filename,
            parent_id=record.folder_id,
            virtual=True
        ))

        toc = DocumentNode(
            key=PageKey(record.id),
            title=title,
            sanitized_filename=filename,
            parent_folder_id=record.id,
            content_format=ContentFormat.MARKDOWN
        )
        self._add(toc, result)

        toc_lines = []
        for page in record.pages:
            page_title, page_filename = self._naming(page.name, page.id)
            payload, content_format = self._page_payload(page, result)
            node = DocumentNode(
                key=PageKey(record.id, page.id),
                title=page_title,
                sanitized_filename=page_filename,
                parent_folder_id=record.id,
                raw_content=payload,
                content_format=content_format
            )
            self._add(node, result)
            toc_lines.append(f"- [[{page_filename}]]")

        toc.raw_content = '\n'.join(toc_lines) + '\n'
        self.logger.debug(f"Entry '{title}' split into {len(record.pages)} pages")

    def _page_payload(self, page: JournalPage, result: BuildResult) -> Tuple[str, ContentFormat]:
        if page.type is PageType.TEXT:
            return page.payload

        if page.type in MEDIA_PAGE_TYPES:
            if not page.src:
                return '', ContentFormat.MARKDOWN
            return f"![]({page.src})\n", ContentFormat.MARKDOWN

        message = f"Unknown page type '{page.raw_type}' on page '{page.name or page.id}'"
        self.logger.warning(message)
        result.warnings.append(message)
        return '', ContentFormat.MARKDOWN

    def _render(self, node: DocumentNode, result: BuildResult) -> None:
        """Render content and attach frontmatter. Renderer failures leave an empty body."""
        node.frontmatter = build_frontmatter(node.title, node.import_id)

        if node.content_format is ContentFormat.MARKDOWN:
            node.rendered_markdown = node.raw_content
            return

        try:
            node.rendered_markdown = self.renderer.render_html(node.raw_content)
        except Exception as e:
            message = f"Failed to render '{node.title}': {e}"
            self.logger.warning(message)
            node.rendered_markdown = ''
            node.warnings.append(message)
            result.warnings.append(message)

    def _add(self, node: DocumentNode, result: BuildResult) -> None:
        result.entries.append(node)
        result.identifier_map.register(node.key, node.sanitized_filename)

    @staticmethod
    def _naming(name: str, fallback_id: str) -> Tuple[str, str]:
        title = name.strip() if name and name.strip() else fallback_id
        return title, sanitize_filename(title, default=fallback_id)


__all__ = ['BuildResult', 'DocumentModelBuilder']
