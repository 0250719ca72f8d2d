"""Tests for reading typed records from a world folder."""

import pytest

from foundry_markdown_migrator.fetchers import RecordReadError, WorldFetcher
from foundry_markdown_migrator.models import ContentFormat, PageType


class TestWorldFetcher:

    def test_only_journal_folders_are_kept(self, world):
        config = world.write(
            folders=[
                {'_id': 'f1', 'name': 'Lore', 'type': 'JournalEntry', 'folder': None},
                {'_id': 'f2', 'name': 'Monsters', 'type': 'Actor', 'folder': None},
                {'_id': 'f3', 'name': 'Regions', 'type': 'JournalEntry', 'folder': 'f1'},
            ],
            documents=[{'_id': 'd1', 'name': 'Intro'}]
        )

        folders = WorldFetcher(config).fetch_folders()

        assert [folder.id for folder in folders] == ['f1', 'f3']
        assert folders[1].parent_id == 'f1'

    def test_world_without_folders(self, world):
        config = world.write(folders=[], documents=[{'_id': 'd1', 'name': 'Intro'}])

        assert WorldFetcher(config).fetch_folders() == []

    def test_empty_journal_is_fatal(self, world):
        config = world.write(folders=[], documents=[])

        with pytest.raises(RecordReadError, match='empty'):
            WorldFetcher(config).fetch_documents()

    def test_documents_with_pages(self, world):
        config = world.write(documents=[{
            '_id': 'd2',
            'name': 'Atlas',
            'folder': 'f1',
            'pages': [
                {'_id': 'p1', 'name': 'A', 'type': 'text', 'text': {'content': '<p>a</p>', 'format': 1}},
                {'_id': 'p2', 'name': 'B', 'type': 'text', 'text': {'markdown': '# B', 'format': 2}},
                {'_id': 'p3', 'name': 'Map', 'type': 'image', 'src': 'worlds/w/map.png'},
            ]
        }])

        documents = WorldFetcher(config).fetch_documents()

        assert len(documents) == 1
        pages = documents[0].pages
        assert documents[0].folder_id == 'f1'
        assert pages[0].payload == ('<p>a</p>', ContentFormat.HTML)
        assert pages[1].payload == ('# B', ContentFormat.MARKDOWN)
        assert pages[2].type is PageType.IMAGE
        assert pages[2].src == 'worlds/w/map.png'

    def test_explicit_record_files(self, world, tmp_path):
        folders_file = tmp_path / 'custom-folders.db'
        folders_file.write_text('{"_id": "f9", "name": "Other", "type": "JournalEntry"}\n', encoding='utf-8')
        config = world.write(documents=[{'_id': 'd1', 'name': 'Intro'}])
        config['source']['folders_file'] = str(folders_file)

        folders = WorldFetcher(config).fetch_folders()

        assert [folder.id for folder in folders] == ['f9']

    def test_record_without_id_is_fatal(self, world):
        config = world.write(documents=[{'_id': 'd1', 'name': 'Intro'}, {'name': 'No id'}])

        with pytest.raises(RecordReadError, match='record 2'):
            WorldFetcher(config).fetch_documents()

    def test_missing_world_data(self, tmp_path):
        config = {'source': {'world_path': str(tmp_path / 'nowhere')}}

        with pytest.raises(RecordReadError):
            WorldFetcher(config).fetch_documents()
