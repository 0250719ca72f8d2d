"""Converters package for turning journal records into markdown entries."""

from .document_builder import BuildResult, DocumentModelBuilder
from .frontmatter import build_frontmatter
from .html_cleaner import HtmlCleaner
from .markdown_converter import MarkdownConverter

__all__ = [
    'build_frontmatter',
    'BuildResult',
    'DocumentModelBuilder',
    'HtmlCleaner',
    'MarkdownConverter'
]
