"""File-system capability used by the exporters to materialize the output tree."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Optional, Union

logger = logging.getLogger('foundry_markdown_migrator.vault')


class VaultFileSystem(ABC):
    """
    Minimal file-system capability over vault-relative POSIX paths.

    Writes never overwrite: callers delete an existing file first.
    """

    @abstractmethod
    def create_folder(self, path: str) -> None:
        """Create a folder, raising ``FileExistsError`` if it already exists."""

    @abstractmethod
    def create_file(self, path: str, text: str) -> None:
        """Create a UTF-8 text file, raising ``FileExistsError`` if it exists."""

    @abstractmethod
    def create_binary_file(self, path: str, data: bytes) -> None:
        """Create a binary file, raising ``FileExistsError`` if it exists."""

    @abstractmethod
    def delete_if_exists(self, path: str) -> bool:
        """Delete a file if present. Returns True when something was deleted."""

    @abstractmethod
    def path_exists(self, path: str) -> bool:
        """Check whether a file or folder exists."""

    @abstractmethod
    def read_binary(self, path: Union[str, Path]) -> bytes:
        """Read a source file. Absolute paths are read as-is."""


class LocalVaultFileSystem(VaultFileSystem):
    """Vault backed by a directory on the local disk."""

    def __init__(self, root: Union[str, Path], logger: Optional[logging.Logger] = None):
        self.root = Path(root)
        self.logger = logger or logging.getLogger('foundry_markdown_migrator.vault')

    def resolve(self, path: Union[str, Path]) -> Path:
        """Map a vault-relative path to a local path."""
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        parts = [part for part in PurePosixPath(str(path)).parts if part not in ('', '.')]
        return self.root.joinpath(*parts)

    def create_folder(self, path: str) -> None:
        target = self.resolve(path)
        if target.exists():
            raise FileExistsError(f"Folder already exists: {path}")
        target.mkdir(parents=True)
        self.logger.debug(f"Created folder {target}")

    def create_file(self, path: str, text: str) -> None:
        self.create_binary_file(path, text.encode('utf-8'))

    def create_binary_file(self, path: str, data: bytes) -> None:
        target = self.resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, 'xb') as f:
            f.write(data)
        self.logger.debug(f"Wrote {len(data)} bytes to {target}")

    def delete_if_exists(self, path: str) -> bool:
        target = self.resolve(path)
        if target.is_file():
            target.unlink()
            self.logger.debug(f"Deleted existing file {target}")
            return True
        return False

    def path_exists(self, path: str) -> bool:
        return self.resolve(path).exists()

    def read_binary(self, path: Union[str, Path]) -> bytes:
        return self.resolve(path).read_bytes()


def join_path(*segments: Optional[str]) -> str:
    """Join vault path segments with ``/``, skipping empty ones."""
    return '/'.join(str(segment).strip('/') for segment in segments if segment and str(segment).strip('/'))


__all__ = ['VaultFileSystem', 'LocalVaultFileSystem', 'join_path']
