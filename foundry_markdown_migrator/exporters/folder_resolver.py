"""
Folder hierarchy resolver for the import tree.

Maps Foundry's parent-pointer folder records to vault paths
(e.g., FoundryImport/Lore/Regions) and creates the folders in the vault.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ..converters.frontmatter import build_frontmatter
from ..models import FolderNode, FolderRecord, sanitize_filename
from ..vault import VaultFileSystem, join_path

FOLDER_ID_PREFIX = 'Folder.'


class FolderResolver:
    """
    Resolves full vault paths for folder nodes and materializes them.

    Paths are computed once, before any entry is written, because entries
    reference folders only by id.
    """

    def __init__(self, root: str, logger: Optional[logging.Logger] = None):
        """
        Initialize the resolver.

        Args:
            root: Import root folder inside the vault (e.g., "FoundryImport")
            logger: Optional logger instance
        """
        self.root = root
        self.logger = logger or logging.getLogger('foundry_markdown_migrator.exporters.folder_resolver')
        self.nodes: Dict[str, FolderNode] = {}
        self.stats = {
            'folders_total': 0,
            'folders_created': 0,
            'folders_existing': 0,
            'folders_failed': 0,
            'folder_notes_written': 0,
            'folder_notes_failed': 0,
            'cycles_detected': 0,
            'dangling_parents': 0
        }

    @staticmethod
    def nodes_from_records(records: Iterable[FolderRecord]) -> List[FolderNode]:
        """Convert folder records into unresolved folder nodes."""
        nodes = []
        for record in records:
            display_name = record.name.strip() if record.name and record.name.strip() else record.id
            nodes.append(FolderNode(
                id=record.id,
                display_name=display_name,
                sanitized_name=sanitize_filename(display_name, default=record.id),
                parent_id=record.parent_id
            ))
        return nodes

    def resolve(self, nodes: Iterable[FolderNode]) -> Dict[str, FolderNode]:
        """
        Compute ``full_path`` for every node.

        Args:
            nodes: Real and virtual folder nodes

        Returns:
            Mapping from folder id to resolved node
        """
        self.nodes = {node.id: node for node in nodes}

        for node in self.nodes.values():
            node.full_path = self._compute_path(node)

        self.stats['folders_total'] = len(self.nodes)
        self.logger.info(f"Resolved {len(self.nodes)} folder paths under '{self.root}'")
        return self.nodes

    def path_for(self, folder_id: Optional[str]) -> Optional[str]:
        """Return the resolved path of a folder, or None when unknown."""
        if not folder_id:
            return None
        node = self.nodes.get(folder_id)
        return node.full_path if node else None

    def _compute_path(self, node: FolderNode) -> str:
        """Walk parent pointers root-ward, accumulating sanitized names."""
        segments = [node.sanitized_name]
        visited = {node.id}
        parent_id = node.parent_id

        while parent_id:
            if parent_id in visited:
                self.logger.warning(
                    f"Folder cycle detected at '{node.display_name}' ({node.id}); placing it at the import root"
                )
                self.stats['cycles_detected'] += 1
                return join_path(self.root, node.sanitized_name)

            parent = self.nodes.get(parent_id)
            if parent is None:
                self.logger.debug(f"Folder '{node.display_name}' has unknown parent {parent_id}; path truncated")
                self.stats['dangling_parents'] += 1
                break

            visited.add(parent_id)
            segments.insert(0, parent.sanitized_name)
            parent_id = parent.parent_id

        return join_path(self.root, *segments)

    def materialize(self, fs: VaultFileSystem, folder_notes: bool = False) -> Dict[str, int]:
        """
        Create the import root and every resolved folder, parents first.

        Args:
            fs: Vault file-system capability
            folder_notes: Whether to write a note file into each real folder

        Returns:
            Statistics dictionary
        """
        self._ensure_folder(fs, self.root)

        ordered = sorted(self.nodes.values(), key=lambda node: node.full_path.count('/'))

        for node in ordered:
            if not self._ensure_folder(fs, node.full_path):
                self.stats['folders_failed'] += 1
                continue

            if folder_notes and not node.virtual:
                self._write_folder_note(fs, node)

        self.logger.info(
            f"Folders: {self.stats['folders_created']} created, "
            f"{self.stats['folders_existing']} existing, {self.stats['folders_failed']} failed"
        )
        return self.stats.copy()

    def _ensure_folder(self, fs: VaultFileSystem, path: str) -> bool:
        """Create a folder. Returns False only when creation failed for a reason other than existence."""
        try:
            fs.create_folder(path)
            self.stats['folders_created'] += 1
            return True
        except FileExistsError:
            self.stats['folders_existing'] += 1
            return True
        except OSError as e:
            self.logger.error(f"Failed to create folder '{path}': {e}")
            return False

    def _write_folder_note(self, fs: VaultFileSystem, node: FolderNode) -> None:
        note_path = join_path(node.full_path, f"{node.sanitized_name}.md")
        frontmatter = build_frontmatter(node.display_name, f"{FOLDER_ID_PREFIX}{node.id}")
        text = f"{frontmatter}\n# {node.display_name}\n"

        try:
            fs.delete_if_exists(note_path)
            fs.create_file(note_path, text)
            self.stats['folder_notes_written'] += 1
            self.logger.debug(f"Wrote folder note {note_path}")
        except OSError as e:
            self.stats['folder_notes_failed'] += 1
            self.logger.error(f"Failed to write folder note '{note_path}': {e}")


__all__ = ['FolderResolver']
