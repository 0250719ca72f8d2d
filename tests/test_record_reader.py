"""Tests for NDJSON record decoding."""

import pytest

from foundry_markdown_migrator.fetchers import RecordReadError, RecordReader


class TestParseLines:
    """Line decoding and tombstone filtering."""

    def setup_method(self):
        self.reader = RecordReader()

    def test_records_in_line_order(self):
        text = '{"_id": "a"}\n{"_id": "b"}\n{"_id": "c"}\n'

        records = self.reader.parse_lines(text)

        assert [record['_id'] for record in records] == ['a', 'b', 'c']

    def test_blank_lines_are_skipped(self):
        text = '\n{"_id": "a"}\n   \n\n{"_id": "b"}'

        records = self.reader.parse_lines(text)

        assert len(records) == 2

    def test_tombstoned_records_are_dropped(self):
        text = '{"_id": "a"}\n{"_id": "b", "$$deleted": true}\n{"_id": "c", "$$deleted": false}\n'

        records = self.reader.parse_lines(text)

        assert [record['_id'] for record in records] == ['a', 'c']

    def test_invalid_json_fails_whole_read(self):
        text = '{"_id": "a"}\n{"_id": \n{"_id": "c"}\n'

        with pytest.raises(RecordReadError) as exc_info:
            self.reader.parse_lines(text, source='journal.db')

        assert exc_info.value.line_number == 2
        assert 'journal.db:2' in str(exc_info.value)

    def test_non_object_line_is_fatal(self):
        with pytest.raises(RecordReadError, match='expected a JSON object'):
            self.reader.parse_lines('{"_id": "a"}\n[1, 2, 3]\n')


class TestReadFile:
    """File access failures surface as RecordReadError."""

    def test_reads_file(self, tmp_path):
        path = tmp_path / 'folders.db'
        path.write_text('{"_id": "f1", "name": "Lore"}\n', encoding='utf-8')

        records = RecordReader().read_file(path)

        assert records == [{'_id': 'f1', 'name': 'Lore'}]

    def test_missing_file(self, tmp_path):
        with pytest.raises(RecordReadError, match='file not found'):
            RecordReader().read_file(tmp_path / 'missing.db')

    def test_empty_file(self, tmp_path):
        path = tmp_path / 'journal.db'
        path.write_text('\n\n', encoding='utf-8')

        with pytest.raises(RecordReadError, match='empty'):
            RecordReader().read_file(path)

    def test_empty_file_allowed(self, tmp_path):
        path = tmp_path / 'folders.db'
        path.write_text('\n', encoding='utf-8')

        assert RecordReader().read_file(path, allow_empty=True) == []

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / 'journal.db'
        path.write_bytes(b'\xff\xfe\x00garbage')

        with pytest.raises(RecordReadError, match='failed to read'):
            RecordReader().read_file(path)
