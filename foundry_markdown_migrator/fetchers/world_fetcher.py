"""Fetcher reading folder and journal records from a Foundry world folder."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config_loader import get_nested
from ..models import FolderRecord, JournalRecord
from .base_fetcher import BaseFetcher, RecordReadError
from .record_reader import RecordReader


class WorldFetcher(BaseFetcher):
    """Reads ``folders.db`` and ``journal.db`` of a world into typed records."""

    def __init__(
        self,
        config: Dict[str, Any],
        logger: Optional[logging.Logger] = None,
        reader: Optional[RecordReader] = None
    ):
        super().__init__(config, logger)
        self.reader = reader or RecordReader(self.logger)

        world_path = Path(get_nested(config, 'source.world_path', '.'))
        folders_file = get_nested(config, 'source.folders_file')
        journal_file = get_nested(config, 'source.journal_file')

        self.world_path = world_path
        self.folders_file = Path(folders_file) if folders_file else world_path / 'data' / 'folders.db'
        self.journal_file = Path(journal_file) if journal_file else world_path / 'data' / 'journal.db'
        self.document_type = get_nested(config, 'source.document_type', 'JournalEntry')

    def fetch_folders(self) -> List[FolderRecord]:
        """Read folder records, keeping only the journal category. A world may have no folders."""
        raw_records = self.reader.read_file(self.folders_file, allow_empty=True)

        folders = []
        for index, data in enumerate(raw_records, start=1):
            if data.get('type') != self.document_type:
                continue
            try:
                folders.append(FolderRecord.from_dict(data))
            except ValueError as e:
                raise RecordReadError(f"record {index}: {e}", source=str(self.folders_file))

        self._log_progress(
            f"Loaded {len(folders)} {self.document_type} folders "
            f"({len(raw_records) - len(folders)} of other types ignored)"
        )
        return folders

    def fetch_documents(self) -> List[JournalRecord]:
        """Read journal entry records."""
        raw_records = self.reader.read_file(self.journal_file)

        documents = []
        for index, data in enumerate(raw_records, start=1):
            try:
                documents.append(JournalRecord.from_dict(data))
            except ValueError as e:
                raise RecordReadError(f"record {index}: {e}", source=str(self.journal_file))

        page_count = sum(len(document.pages) for document in documents)
        self._log_progress(f"Loaded {len(documents)} journal entries with {page_count} pages")
        return documents


__all__ = ['WorldFetcher']
