"""Line-delimited JSON reader for Foundry world database files."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .base_fetcher import RecordReadError

TOMBSTONE_MARKER = '$$deleted'


class RecordReader:
    """
    Decodes NDJSON exports into an ordered list of records.

    Every non-empty line must hold one JSON object. Tombstoned records are
    dropped. A single undecodable line fails the whole read: no partial
    result is ever returned.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('foundry_markdown_migrator.fetchers.record_reader')

    def read_file(self, path: Union[str, Path], allow_empty: bool = False) -> List[Dict[str, Any]]:
        """
        Read and decode an NDJSON file.

        Args:
            path: Path to the ``.db`` file
            allow_empty: Return an empty list for a blank file instead of failing

        Returns:
            Decoded records in file order

        Raises:
            RecordReadError: If the file is missing, unreadable or corrupt, or
                empty while ``allow_empty`` is false
        """
        path = Path(path)
        self.logger.info(f"Reading records from {path}")

        try:
            text = path.read_text(encoding='utf-8')
        except FileNotFoundError:
            raise RecordReadError("file not found", source=str(path))
        except (OSError, UnicodeDecodeError) as e:
            raise RecordReadError(f"failed to read file: {e}", source=str(path))

        if not text.strip():
            if allow_empty:
                self.logger.info(f"{path} holds no records")
                return []
            raise RecordReadError("file is empty", source=str(path))

        return self.parse_lines(text, source=str(path))

    def parse_lines(self, text: str, source: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Decode NDJSON text.

        Args:
            text: Raw file content
            source: Name used in error messages

        Returns:
            Decoded, non-tombstoned records in line order
        """
        records = []
        skipped = 0

        for line_number, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue

            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                raise RecordReadError(f"invalid JSON: {e.msg}", source=source, line_number=line_number)

            if not isinstance(record, dict):
                raise RecordReadError(
                    f"expected a JSON object, got {type(record).__name__}",
                    source=source,
                    line_number=line_number
                )

            if record.get(TOMBSTONE_MARKER):
                skipped += 1
                continue

            records.append(record)

        self.logger.debug(
            f"Decoded {len(records)} records from {source or 'text'} ({skipped} tombstoned)"
        )
        return records


__all__ = ['RecordReader', 'TOMBSTONE_MARKER']
