"""HTML cleaner for removing Foundry-specific markup without losing content."""

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup, NavigableString, Tag

DROPPED_TAGS = ('script', 'style', 'template')
EMPTY_REMOVABLE_TAGS = ('span', 'div', 'p', 'strong', 'em', 'b', 'i', 'u')


class HtmlCleaner:
    """Prepares journal HTML for markdown conversion."""

    def __init__(self, logger: logging.Logger = None):
        """Initialize HTML cleaner with optional logger."""
        self.logger = logger or logging.getLogger('foundry_markdown_migrator.converters.htmlcleaner')

    def clean(self, soup: BeautifulSoup) -> BeautifulSoup:
        """
        Main entry point to clean journal HTML.

        Args:
            soup: BeautifulSoup object with journal HTML

        Returns:
            Cleaned BeautifulSoup object
        """
        for tag_name in DROPPED_TAGS:
            for element in soup.find_all(tag_name):
                element.decompose()

        self._restore_content_links(soup)
        self._remove_empty_elements(soup)

        self.logger.debug("HTML cleaning completed")
        return soup

    def _restore_content_links(self, soup: BeautifulSoup) -> None:
        """Turn rendered Foundry content links back into reference markup."""
        for anchor in soup.find_all('a'):
            reference = self._reference_for_anchor(anchor)
            if reference:
                anchor.replace_with(NavigableString(reference))

    def _reference_for_anchor(self, anchor: Tag) -> Optional[str]:
        classes = anchor.get('class') or []
        if 'content-link' not in classes and 'entity-link' not in classes:
            return None

        label = re.sub(r'\s+', ' ', anchor.get_text()).strip()
        label_part = f"{{{label}}}" if label else ''

        uuid = anchor.get('data-uuid')
        if uuid and uuid.startswith('JournalEntry.'):
            return f"@UUID[{uuid}]{label_part}"

        if anchor.get('data-entity') == 'JournalEntry' and anchor.get('data-id'):
            return f"@JournalEntry[{anchor['data-id']}]{label_part}"

        return None

    def _remove_empty_elements(self, soup: BeautifulSoup) -> None:
        """Remove formatting elements that carry neither text nor media."""
        for element in reversed(soup.find_all(EMPTY_REMOVABLE_TAGS)):
            if element.decomposed or element.get_text(strip=True):
                continue
            if element.find(['img', 'video', 'iframe', 'br', 'hr', 'table']):
                continue
            element.decompose()


__all__ = ['HtmlCleaner']
