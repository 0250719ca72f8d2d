"""HTML to Markdown renderer for journal content."""

import logging
import re
from typing import Any, Dict, Optional

from bs4 import BeautifulSoup
from markdownify import MarkdownConverter as MarkdownifyConverter

from .html_cleaner import HtmlCleaner

logger = logging.getLogger('foundry_markdown_migrator.converters.markdownconverter')


class MarkdownConverter(MarkdownifyConverter):
    """
    Renders journal HTML to Markdown.

    This class extends markdownify.MarkdownConverter to provide:
    - Foundry HTML cleanup (scripts, content links, empty wrappers)
    - GFM pipe tables
    - Plain ``![alt](src)`` images so assets can be relocated afterwards
    """

    def __init__(self, logger: logging.Logger = None, config: Dict[str, Any] = None, **kwargs):
        """Initialize markdown converter with logger and configuration."""
        markdownify_options = {
            'heading_style': 'ATX',
            'bullets': '-',
            'escape_asterisks': False,
            'escape_underscores': False,
            'escape_misc': False,
            'wrap': False
        }
        markdownify_options.update(kwargs)

        super().__init__(**markdownify_options)

        self.logger = logger or logging.getLogger('foundry_markdown_migrator.converters.markdownconverter')
        self.config = config or {}
        self.html_cleaner = HtmlCleaner(self.logger)

    def render_html(self, html_content: Optional[str]) -> str:
        """
        Convert a journal HTML fragment to markdown.

        Args:
            html_content: HTML string (may be empty)

        Returns:
            Markdown text ending with a single newline, or an empty string
        """
        if not html_content or not html_content.strip():
            return ''

        soup = BeautifulSoup(html_content, 'lxml')
        soup = self.html_cleaner.clean(soup)

        raw_markdown = self.convert_soup(soup)
        return self._post_process_markdown(raw_markdown)

    def _post_process_markdown(self, markdown: str) -> str:
        """Trim trailing whitespace and collapse runs of blank lines."""
        lines = [line.rstrip() for line in markdown.split('\n')]
        markdown = '\n'.join(lines)

        markdown = re.sub(r'\n{3,}', '\n\n', markdown)
        markdown = markdown.strip('\n')

        return markdown + '\n' if markdown else ''

    def _get_cell_text(self, cell) -> str:
        """Render a table cell on one line."""
        text = self.convert(cell.decode_contents())
        text = text.strip()
        text = re.sub(r'\s*\n+\s*', '<br>', text)
        return text.replace('|', '\\|')

    def convert_table(self, el, text, parent_tags=None, **kwargs):
        """Custom table converter to ensure proper markdown table syntax."""
        rows = el.find_all('tr')
        if not rows:
            return ''

        header_cells = rows[0].find_all(['th', 'td'])
        if not header_cells:
            return ''

        markdown_rows = []
        markdown_rows.append('| ' + ' | '.join(self._get_cell_text(cell) for cell in header_cells) + ' |')
        markdown_rows.append('| ' + ' | '.join('---' for _ in header_cells) + ' |')

        for row in rows[1:]:
            cells = row.find_all(['td', 'th'])
            if not cells:
                continue
            values = [self._get_cell_text(cell) for cell in cells]
            # Pad short rows so every row has the header's column count
            values.extend([''] * (len(header_cells) - len(values)))
            markdown_rows.append('| ' + ' | '.join(values) + ' |')

        return '\n\n' + '\n'.join(markdown_rows) + '\n\n'

    def convert_img(self, el, text, parent_tags=None, **kwargs):
        """Handle images."""
        src = el.get('src', '')
        alt = el.get('alt', '')

        if not src:
            return alt

        return f'![{alt}]({src})'


__all__ = ['MarkdownConverter']
