"""Asset relocator for copying embedded binaries into the vault asset folder."""

import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

from tqdm import tqdm

from ..models import AssetRelocation
from ..vault import VaultFileSystem


class AssetRelocator:
    """
    Copies queued assets into the single asset folder.

    This relocator:
    1. Creates the asset folder once, only when there is something to copy
    2. Reads each source binary (failures are logged and skipped)
    3. Deletes any existing destination and writes the new file
    """

    def __init__(
        self,
        fs: VaultFileSystem,
        asset_folder_path: str,
        show_progress: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the asset relocator.

        Args:
            fs: Vault file-system capability
            asset_folder_path: Vault path of the asset folder
            show_progress: Whether to display a tqdm progress bar on a TTY
            logger: Logger instance
        """
        self.fs = fs
        self.asset_folder_path = asset_folder_path
        self.show_progress = show_progress
        self.logger = logger or logging.getLogger('foundry_markdown_migrator.exporters.asset_relocator')

        self.stats = {
            'total_assets': 0,
            'copied': 0,
            'replaced': 0,
            'failed': 0,
            'total_size_bytes': 0
        }
        self.failures: List[Dict[str, str]] = []

    def relocate(self, relocations: Sequence[AssetRelocation]) -> Dict[str, Any]:
        """
        Copy every queued asset. Later relocations to the same destination win.

        Args:
            relocations: Relocation work-list in entry order

        Returns:
            Statistics dictionary
        """
        if not relocations:
            self.logger.debug("No assets to relocate")
            return self.get_stats()

        self._ensure_asset_folder()

        relocations_iter = relocations
        if self._should_show_progress():
            relocations_iter = tqdm(relocations, desc="Assets", leave=False)

        for relocation in relocations_iter:
            self.stats['total_assets'] += 1
            self._relocate_one(relocation)

        self.logger.info(
            f"Assets: {self.stats['copied']} copied ({self.stats['replaced']} replaced), "
            f"{self.stats['failed']} failed"
        )
        return self.get_stats()

    def _relocate_one(self, relocation: AssetRelocation) -> None:
        try:
            content = self.fs.read_binary(relocation.source_path)
        except OSError as e:
            self._record_failure(relocation, f"cannot read source: {e}")
            return

        try:
            if self.fs.delete_if_exists(relocation.destination_path):
                self.stats['replaced'] += 1
            self.fs.create_binary_file(relocation.destination_path, content)
        except OSError as e:
            self._record_failure(relocation, f"cannot write destination: {e}")
            return

        self.stats['copied'] += 1
        self.stats['total_size_bytes'] += len(content)
        self.logger.debug(f"Copied asset {relocation.source_path} -> {relocation.destination_path}")

    def _ensure_asset_folder(self) -> None:
        try:
            self.fs.create_folder(self.asset_folder_path)
            self.logger.debug(f"Created asset folder {self.asset_folder_path}")
        except FileExistsError:
            pass
        except OSError as e:
            # Individual writes will report their own failures
            self.logger.error(f"Failed to create asset folder '{self.asset_folder_path}': {e}")

    def _record_failure(self, relocation: AssetRelocation, reason: str) -> None:
        self.logger.warning(
            f"Skipping asset '{relocation.source_path}' referenced by '{relocation.owning_entry}': {reason}"
        )
        self.stats['failed'] += 1
        self.failures.append({
            'entry': relocation.owning_entry,
            'source': relocation.source_path,
            'reason': reason
        })

    def _should_show_progress(self) -> bool:
        """Check if progress bars should be displayed."""
        if not self.show_progress:
            return False
        if not sys.stdout.isatty():
            return False
        return True

    def get_stats(self) -> Dict[str, Any]:
        """Get asset relocation statistics."""
        stats = self.stats.copy()
        stats['failures'] = list(self.failures)
        return stats


__all__ = ['AssetRelocator']
