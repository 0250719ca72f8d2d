"""Data models for the Foundry journal to Markdown migration pipeline."""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Tuple

logger = logging.getLogger('foundry_markdown_migrator')

ILLEGAL_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')
PAGE_SEPARATOR = '.JournalEntryPage.'
DOCUMENT_PREFIX = 'JournalEntry.'


def sanitize_filename(name: Optional[str], default: str = 'Untitled') -> str:
    """
    Replace characters that are illegal in file paths with underscores.

    Args:
        name: Source display name
        default: Fallback used when the name is empty

    Returns:
        Filesystem-safe name
    """
    if not name or not name.strip():
        return default
    return ILLEGAL_FILENAME_CHARS.sub('_', name.strip())


class PageType(Enum):
    """Journal page kinds understood by the builder."""
    TEXT = "text"
    IMAGE = "image"
    PDF = "pdf"
    VIDEO = "video"

    @classmethod
    def parse(cls, value: Any) -> Optional['PageType']:
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


class ContentFormat(Enum):
    """Format of a content payload."""
    HTML = "html"
    MARKDOWN = "markdown"

    @classmethod
    def parse(cls, value: Any) -> 'ContentFormat':
        """Accept Foundry's numeric codes (1 = HTML, 2 = MARKDOWN) or names."""
        if value == 2 or str(value).lower() == 'markdown':
            return cls.MARKDOWN
        return cls.HTML


class PageKey(NamedTuple):
    """Composite identifier of an output entry: a document or one of its pages."""
    document_id: str
    page_id: Optional[str] = None

    def format(self) -> str:
        if self.page_id is None:
            return self.document_id
        return f"{self.document_id}{PAGE_SEPARATOR}{self.page_id}"

    @classmethod
    def parse(cls, raw_id: str) -> 'PageKey':
        """Parse ``<doc>`` or ``<doc>.JournalEntryPage.<page>``, ignoring any ``#fragment``."""
        base_id = raw_id.split('#', 1)[0].strip()
        if PAGE_SEPARATOR in base_id:
            document_id, page_id = base_id.split(PAGE_SEPARATOR, 1)
            return cls(document_id, page_id)
        return cls(base_id)


def _record_id(data: Dict[str, Any]) -> Optional[str]:
    record_id = data.get('_id') or data.get('id')
    return str(record_id) if record_id else None


@dataclass
class FolderRecord:
    """A folder record from ``folders.db``."""

    id: str
    name: str
    parent_id: Optional[str] = None
    type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FolderRecord':
        """Build a folder record, raising ``ValueError`` when the id is missing."""
        record_id = _record_id(data)
        if not record_id:
            raise ValueError(f"Folder record without id: {data.get('name')!r}")
        parent = data.get('parent', data.get('folder'))
        return cls(
            id=record_id,
            name=data.get('name') or '',
            parent_id=str(parent) if parent else None,
            type=data.get('type')
        )


@dataclass
class JournalPage:
    """One page of a journal entry."""

    id: str
    name: str
    type: Optional[PageType]
    raw_type: str = 'text'
    text_format: ContentFormat = ContentFormat.HTML
    content: Optional[str] = None
    markdown: Optional[str] = None
    src: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'JournalPage':
        record_id = _record_id(data)
        if not record_id:
            raise ValueError(f"Journal page without id: {data.get('name')!r}")
        raw_type = str(data.get('type') or 'text')
        text = data.get('text') or {}
        return cls(
            id=record_id,
            name=data.get('name') or '',
            type=PageType.parse(raw_type),
            raw_type=raw_type,
            text_format=ContentFormat.parse(text.get('format', 1)),
            content=text.get('content'),
            markdown=text.get('markdown'),
            src=data.get('src')
        )

    @property
    def payload(self) -> Tuple[str, ContentFormat]:
        """Return the page's content and its format."""
        if self.text_format is ContentFormat.MARKDOWN:
            return self.markdown or '', ContentFormat.MARKDOWN
        return self.content or '', ContentFormat.HTML


@dataclass
class JournalRecord:
    """A journal entry record from ``journal.db``."""

    id: str
    name: str
    folder_id: Optional[str] = None
    content: Optional[str] = None
    pages: List[JournalPage] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'JournalRecord':
        """Build a journal record, raising ``ValueError`` when an id is missing."""
        record_id = _record_id(data)
        if not record_id:
            raise ValueError(f"Journal record without id: {data.get('name')!r}")
        folder = data.get('folder')
        return cls(
            id=record_id,
            name=data.get('name') or '',
            folder_id=str(folder) if folder else None,
            content=data.get('content'),
            pages=[JournalPage.from_dict(page) for page in data.get('pages') or []]
        )


@dataclass
class FolderNode:
    """A folder in the output tree, real or synthesized for a multi-page entry."""

    id: str
    display_name: str
    sanitized_name: str
    parent_id: Optional[str] = None
    full_path: Optional[str] = None
    virtual: bool = False


@dataclass
class DocumentNode:
    """One output markdown file."""

    key: PageKey
    title: str
    sanitized_filename: str
    parent_folder_id: Optional[str] = None
    raw_content: str = ''
    content_format: ContentFormat = ContentFormat.HTML
    frontmatter: str = ''
    rendered_markdown: str = ''
    final_markdown: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def import_id(self) -> str:
        """Stable identifier written to the frontmatter."""
        return f"{DOCUMENT_PREFIX}{self.key.format()}"

    def full_text(self) -> str:
        """Frontmatter followed by the final (or rendered) markdown."""
        body = self.final_markdown if self.final_markdown is not None else self.rendered_markdown
        return f"{self.frontmatter}\n{body}"


@dataclass
class AssetRelocation:
    """A binary asset to copy into the asset folder."""

    source_path: str
    destination_path: str
    owning_entry: str


class IdentifierMap:
    """Maps source identifiers to output filenames for link resolution."""

    def __init__(self) -> None:
        self._filenames: Dict[PageKey, str] = {}

    def register(self, key: PageKey, filename: str) -> None:
        if key in self._filenames and self._filenames[key] != filename:
            logger.debug(
                f"Identifier {key.format()} remapped from '{self._filenames[key]}' to '{filename}'"
            )
        self._filenames[key] = filename

    def resolve(self, raw_id: str) -> Optional[str]:
        """Resolve a reference id (fragment allowed) to a filename, or ``None``."""
        return self._filenames.get(PageKey.parse(raw_id))

    def __contains__(self, key: PageKey) -> bool:
        return key in self._filenames

    def __len__(self) -> int:
        return len(self._filenames)

    def __iter__(self) -> Iterator[PageKey]:
        return iter(self._filenames)


__all__ = [
    'sanitize_filename',
    'PageType',
    'ContentFormat',
    'PageKey',
    'FolderRecord',
    'JournalPage',
    'JournalRecord',
    'FolderNode',
    'DocumentNode',
    'AssetRelocation',
    'IdentifierMap'
]
