"""Shared fixtures for building Foundry worlds and vaults on disk."""

import json
from pathlib import Path

import pytest

from foundry_markdown_migrator.config_loader import ConfigLoader


class WorldBuilder:
    """Writes a minimal Foundry data folder: <root>/data/worlds/w/data/*.db."""

    def __init__(self, root: Path):
        self.data_root = root / 'data'
        self.world_path = self.data_root / 'worlds' / 'w'
        self.vault_path = root / 'vault'
        (self.world_path / 'data').mkdir(parents=True)

    def write(self, folders=(), documents=()):
        self._write_db('folders.db', folders)
        self._write_db('journal.db', documents)
        return self.config()

    def write_asset(self, relative_path: str, content: bytes) -> Path:
        target = self.data_root / relative_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        return target

    def config(self, **export):
        settings = {
            'source': {'world_path': str(self.world_path)},
            'export': {'vault_path': str(self.vault_path), 'progress_bars': False}
        }
        settings['export'].update(export)
        return ConfigLoader.with_defaults(settings)

    def read_note(self, relative_path: str) -> str:
        return (self.vault_path / relative_path).read_text(encoding='utf-8')

    def _write_db(self, name, records):
        lines = [json.dumps(record) for record in records]
        (self.world_path / 'data' / name).write_text('\n'.join(lines) + '\n', encoding='utf-8')


@pytest.fixture
def world(tmp_path):
    return WorldBuilder(tmp_path)
