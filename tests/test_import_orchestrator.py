"""End-to-end tests of the import pipeline and CLI."""

import json
from pathlib import Path

import pytest

from foundry_markdown_migrator.fetchers import RecordReadError
from foundry_markdown_migrator.migrate import main
from foundry_markdown_migrator.orchestrator import ImportOrchestrator, resolve_data_root

LORE = {'_id': 'f1', 'name': 'Lore', 'type': 'JournalEntry', 'folder': None}
INTRO = {'_id': 'd1', 'name': 'Intro', 'folder': 'f1', 'content': '<p>Hi</p>'}
ATLAS = {
    '_id': 'd2',
    'pages': [
        {'_id': 'p1', 'name': 'A', 'type': 'text', 'text': {'content': '<p>alpha</p>', 'format': 1}},
        {'_id': 'p2', 'name': 'B', 'type': 'text', 'text': {'markdown': 'See @JournalEntry[d1]{Intro}', 'format': 2}},
    ]
}


def vault_files(vault: Path):
    return {
        str(path.relative_to(vault)): path.read_bytes()
        for path in sorted(vault.rglob('*')) if path.is_file()
    }


class TestScenarios:

    def test_single_entry_in_folder(self, world):
        config = world.write(folders=[LORE], documents=[INTRO])

        report = ImportOrchestrator(config).run()

        text = world.read_note('FoundryImport/Lore/Intro.md')
        assert 'title: "Intro"' in text
        assert text.startswith('---\n')
        assert text.endswith('---\nHi\n')
        assert report['summary']['entries_written'] == 1
        assert report['summary']['total_errors'] == 0

    def test_multi_page_entry_without_folder(self, world):
        config = world.write(folders=[], documents=[ATLAS, INTRO])

        ImportOrchestrator(config).run()

        toc = world.read_note('FoundryImport/d2/d2.md')
        assert toc.endswith('- [[A]]\n- [[B]]\n')
        assert world.read_note('FoundryImport/d2/A.md').endswith('alpha\n')
        assert world.read_note('FoundryImport/d2/B.md').endswith('See [[Intro]]')
        assert world.read_note('FoundryImport/Intro.md').endswith('Hi\n')

    def test_asset_relocation(self, world):
        world.write_asset('worlds/w/assets/img.png', b'\x89PNG')
        config = world.write(folders=[LORE], documents=[
            {'_id': 'd1', 'name': 'Intro', 'folder': 'f1', 'content': '<p><img src="worlds/w/assets/img.png"></p>'}
        ])

        report = ImportOrchestrator(config).run()

        assert world.read_note('FoundryImport/Lore/Intro.md').endswith('![[img.png]]\n')
        assert (world.vault_path / 'FoundryImport' / 'assets' / 'img.png').read_bytes() == b'\x89PNG'
        assert report['summary']['assets_copied'] == 1

    def test_asset_with_parentheses(self, world):
        world.write_asset('worlds/w/Map (Night).png', b'night')
        config = world.write(folders=[LORE], documents=[
            {'_id': 'd1', 'name': 'Intro', 'folder': 'f1', 'content': '<p><img src="worlds/w/Map (Night).png"></p>'}
        ])

        report = ImportOrchestrator(config).run()

        assert world.read_note('FoundryImport/Lore/Intro.md').endswith('![[Map (Night).png]]\n')
        assert (world.vault_path / 'FoundryImport' / 'assets' / 'Map (Night).png').read_bytes() == b'night'
        assert report['summary']['assets_copied'] == 1

    def test_missing_asset_is_reported(self, world):
        config = world.write(folders=[LORE], documents=[
            {'_id': 'd1', 'name': 'Intro', 'folder': 'f1', 'content': '<p><img src="worlds/w/gone.png"></p>'}
        ])

        report = ImportOrchestrator(config).run()

        assert report['summary']['assets_failed'] == 1
        assert report['summary']['total_errors'] == 1
        assert report['errors'][0]['entry'] == 'Intro'
        assert world.read_note('FoundryImport/Lore/Intro.md').endswith('![[gone.png]]\n')

    def test_cross_references_from_html(self, world):
        config = world.write(folders=[LORE], documents=[
            INTRO,
            {
                '_id': 'd3', 'name': 'Index', 'folder': 'f1',
                'content': '<p><a class="content-link" data-uuid="JournalEntry.d1">the intro</a> and '
                           '@UUID[JournalEntry.missing]{Lost}</p>'
            }
        ])

        report = ImportOrchestrator(config).run()

        assert '[[Intro|the intro]] and @UUID[JournalEntry.missing]{Lost}' in world.read_note(
            'FoundryImport/Lore/Index.md'
        )
        assert report['summary']['references_unresolved'] == 1

    def test_tombstoned_records_are_not_written(self, world):
        config = world.write(folders=[LORE], documents=[
            INTRO, {'_id': 'd4', 'name': 'Deleted', 'folder': 'f1', '$$deleted': True}
        ])

        ImportOrchestrator(config).run()

        assert not (world.vault_path / 'FoundryImport' / 'Lore' / 'Deleted.md').exists()

    def test_folder_notes(self, world):
        config = world.write(folders=[LORE], documents=[INTRO, ATLAS])
        config['export']['folder_notes'] = True

        ImportOrchestrator(config).run()

        assert world.read_note('FoundryImport/Lore/Lore.md').endswith('# Lore\n')
        assert world.read_note('FoundryImport/d2/d2.md').endswith('- [[A]]\n- [[B]]\n')

    def test_repeated_import_is_byte_identical(self, world):
        world.write_asset('worlds/w/assets/img.png', b'\x89PNG')
        config = world.write(folders=[LORE], documents=[
            INTRO, ATLAS,
            {'_id': 'd5', 'name': 'Pic', 'folder': 'f1', 'content': '<img src="worlds/w/assets/img.png">'}
        ])
        config['export']['folder_notes'] = True

        ImportOrchestrator(config).run()
        first = vault_files(world.vault_path)
        ImportOrchestrator(config).run()
        second = vault_files(world.vault_path)

        assert first == second
        assert len(first) == 7

    def test_corrupt_source_writes_nothing(self, world):
        config = world.write(folders=[LORE], documents=[INTRO])
        journal = world.world_path / 'data' / 'journal.db'
        journal.write_text(journal.read_text(encoding='utf-8') + '{not json\n', encoding='utf-8')

        with pytest.raises(RecordReadError):
            ImportOrchestrator(config).run()

        assert not world.vault_path.exists()

    def test_dry_run_leaves_vault_untouched(self, world):
        config = world.write(folders=[LORE], documents=[INTRO, ATLAS])

        report = ImportOrchestrator(config).run(dry_run=True)

        assert not world.vault_path.exists()
        assert 'FoundryImport/Lore/Intro.md' in report['phases']['preview']
        assert 'FoundryImport/d2/A.md' in report['phases']['preview']
        assert report['summary']['dry_run'] is True


class TestDataRoot:

    def test_defaults_to_two_levels_above_world(self, tmp_path):
        world_path = tmp_path / 'Data' / 'worlds' / 'w'

        assert resolve_data_root({'source': {'world_path': str(world_path)}}) == (tmp_path / 'Data').resolve()

    def test_explicit_data_path(self, tmp_path):
        config = {'source': {'world_path': str(tmp_path), 'data_path': '/srv/foundry/Data'}}

        assert resolve_data_root(config) == Path('/srv/foundry/Data')


class TestCli:

    def test_successful_import(self, world, tmp_path, capsys):
        world.write(folders=[LORE], documents=[INTRO])
        report_path = tmp_path / 'report.json'

        exit_code = main([
            '--world', str(world.world_path), '--vault', str(world.vault_path),
            '--destination', 'Journals', '--report', str(report_path)
        ])

        assert exit_code == 0
        assert (world.vault_path / 'Journals' / 'Lore' / 'Intro.md').exists()
        assert 'IMPORT REPORT' in capsys.readouterr().out
        assert json.loads(report_path.read_text(encoding='utf-8'))['summary']['entries_written'] == 1

    def test_config_file_and_folder_notes_flag(self, world, tmp_path):
        world.write(folders=[LORE], documents=[INTRO])
        config_path = tmp_path / 'config.yaml'
        config_path.write_text(
            f"source:\n  world_path: '{world.world_path}'\n"
            f"export:\n  vault_path: '{world.vault_path}'\n  progress_bars: false\n",
            encoding='utf-8'
        )

        exit_code = main(['--config', str(config_path), '--folder-notes'])

        assert exit_code == 0
        assert (world.vault_path / 'FoundryImport' / 'Lore' / 'Lore.md').exists()

    def test_dry_run(self, world, capsys):
        world.write(folders=[LORE], documents=[INTRO])

        exit_code = main(['--world', str(world.world_path), '--vault', str(world.vault_path), '--dry-run'])

        assert exit_code == 0
        assert not world.vault_path.exists()
        assert 'FoundryImport/Lore/Intro.md' in capsys.readouterr().out

    def test_read_error_exit_code(self, world):
        world.write(folders=[LORE], documents=[INTRO])
        (world.world_path / 'data' / 'journal.db').write_text('', encoding='utf-8')

        assert main(['--world', str(world.world_path), '--vault', str(world.vault_path)]) == 2

    def test_errors_exit_code(self, world):
        world.write(folders=[LORE], documents=[
            {'_id': 'd1', 'name': 'Intro', 'folder': 'f1', 'content': '<img src="worlds/w/gone.png">'}
        ])

        assert main(['--world', str(world.world_path), '--vault', str(world.vault_path)]) == 1

    def test_missing_config_file(self, tmp_path):
        assert main(['--config', str(tmp_path / 'missing.yaml')]) == 2

    def test_invalid_destination(self, world):
        world.write(folders=[LORE], documents=[INTRO])

        assert main(['--world', str(world.world_path), '--destination', 'a:b']) == 2
