"""
Materialize service for reposeed.

Copies a staged clone (or one subdirectory of it) into the working directory,
renames it to the requested name and strips the .git directory. Each step
fails with its own error type; nothing is rolled back.
"""

import logging
import os
import shutil
from pathlib import Path, PurePosixPath
from typing import Optional

from ..exit_codes import CopyFault, RenameFault, MetadataRemovalFault

logger = logging.getLogger(__name__)

METADATA_DIR = '.git'


class MaterializeService:
    """
    Service for turning a staged clone into a standalone project directory.

    Two modes, chosen by whether a subdirectory is given:

    - Whole-tree: copy the staging directory into the working directory,
      rename it, then remove the embedded .git directory.
    - Subtree: copy only the subdirectory, rename it, and remove .git only if
      one turns up at its root.

    Example:
        service = MaterializeService()
        dest = service.materialize(Path("/tmp/Ab3dE9x"), None, "myproj", Path.cwd())
    """

    def materialize(
        self,
        staging_path: Path,
        subdirectory: Optional[str],
        destination_name: str,
        working_directory: Path,
    ) -> Path:
        """
        Materialize the staged tree as ``working_directory / destination_name``.

        Returns:
            Path of the new project directory

        Raises:
            CopyFault: Copy failed, or a target already exists
            RenameFault: Rename to the destination name failed
            MetadataRemovalFault: Removing .git failed
        """
        staging_path = Path(staging_path)
        working_directory = Path(working_directory)
        destination = working_directory / destination_name

        if subdirectory:
            source = self._subtree_source(staging_path, subdirectory)
        else:
            source = staging_path

        copied = self._copy(source, working_directory, destination)
        self._rename(copied, destination)

        if subdirectory:
            if (destination / METADATA_DIR).exists():
                logger.debug(f"Subtree copy carried {METADATA_DIR}; removing it")
                self._strip_metadata(destination)
        else:
            self._strip_metadata(destination)

        return destination

    def _subtree_source(self, staging_path: Path, subdirectory: str) -> Path:
        """Resolve a subdirectory inside the staged tree."""
        relative = PurePosixPath(subdirectory.strip('/'))
        if not relative.parts or '..' in relative.parts:
            raise CopyFault(f"Invalid template subdirectory: {subdirectory}")

        source = staging_path.joinpath(*relative.parts)
        resolved_root = staging_path.resolve()
        if resolved_root not in source.resolve().parents:
            raise CopyFault(f"Subdirectory {subdirectory} escapes {staging_path}")
        if not source.is_dir():
            raise CopyFault(f"Subdirectory {subdirectory} not found in {staging_path}")
        return source

    def _copy(self, source: Path, working_directory: Path, destination: Path) -> Path:
        """Copy ``source`` into the working directory under its own name."""
        target = working_directory / source.name

        for existing in (destination, target):
            if os.path.lexists(existing):
                raise CopyFault(f"Destination already exists: {existing}")

        logger.debug(f"Copying {source} to {target}")
        try:
            shutil.copytree(source, target, symlinks=True)
        except (OSError, shutil.Error) as e:
            logger.debug(f"Failed to copy {source}: {e}")
            raise CopyFault(f"Failed to copy {source} to {target}: {e}", cause=e) from e
        return target

    def _rename(self, copied: Path, destination: Path) -> None:
        if copied == destination:
            return

        if os.path.lexists(destination):
            raise RenameFault(f"Destination already exists: {destination}")

        logger.debug(f"Renaming {copied} to {destination}")
        try:
            os.rename(copied, destination)
        except OSError as e:
            logger.debug(f"Failed to rename {copied}: {e}")
            raise RenameFault(f"Failed to rename {copied} to {destination}: {e}", cause=e) from e

    def _strip_metadata(self, destination: Path) -> None:
        metadata = destination / METADATA_DIR
        logger.debug(f"Removing {metadata}")
        try:
            if metadata.is_dir() and not metadata.is_symlink():
                shutil.rmtree(metadata)
            else:
                # A gitfile (worktree/submodule pointer) or a missing directory
                metadata.unlink()
        except OSError as e:
            logger.debug(f"Failed to remove {metadata}: {e}")
            raise MetadataRemovalFault(f"Failed to remove {metadata}: {e}", cause=e) from e
