"""Abstract base fetcher interface and common functionality."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models import FolderRecord, JournalRecord


class FetcherError(Exception):
    """Base exception for fetcher-related errors."""
    pass


class RecordReadError(FetcherError):
    """A source stream could not be read or decoded; the import must abort."""

    def __init__(self, message: str, source: Optional[str] = None, line_number: Optional[int] = None):
        self.source = source
        self.line_number = line_number
        location = source or 'source'
        if line_number is not None:
            location = f"{location}:{line_number}"
        super().__init__(f"{location}: {message}")


class BaseFetcher(ABC):
    """Abstract base class for journal export fetchers."""

    def __init__(self, config: Dict[str, Any], logger: Optional[logging.Logger] = None):
        """
        Initialize base fetcher with configuration and logger.

        Args:
            config: Configuration dictionary
            logger: Logger instance (optional, uses module logger if not provided)
        """
        self.config = config
        self.logger = logger or logging.getLogger('foundry_markdown_migrator.fetcher')

    @abstractmethod
    def fetch_folders(self) -> List[FolderRecord]:
        """
        Fetch folder records of the journal category.

        Returns:
            Folder records in source order
        """
        pass

    @abstractmethod
    def fetch_documents(self) -> List[JournalRecord]:
        """
        Fetch journal entry records.

        Returns:
            Journal records in source order
        """
        pass

    def _log_progress(self, message: str, level: str = 'info') -> None:
        """
        Log progress message at specified level.

        Args:
            message: Message to log
            level: Log level (debug, info, warning, error)
        """
        log_method = getattr(self.logger, level, self.logger.info)
        log_method(message)
