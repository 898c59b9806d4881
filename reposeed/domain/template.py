"""
Template domain objects for reposeed.

TemplateEntry describes where a template lives; TemplateTable is the
read-only lookup built once at startup; RunContext holds everything one
scaffolding run needs.
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional
from urllib.parse import urlparse

from ..exit_codes import MalformedLocationError, WorkingDirectoryUnavailableError

# scp-like syntax accepted by git: user@host:owner/repo.git
SCP_LOCATION = re.compile(r"^[\w.-]+@[\w.-]+:(?!//)(.+)$")


@dataclass(frozen=True)
class TemplateEntry:
    """Where a template lives: repository location, branch and subdirectory."""
    location: str
    branch: Optional[str] = None
    subdirectory: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Convert to dictionary for JSON serialization."""
        return {
            'location': self.location,
            'branch': self.branch,
            'subdirectory': self.subdirectory,
        }


class TemplateTable(Mapping):
    """
    Read-only mapping of template identifier to TemplateEntry.

    Example:
        table = TemplateTable({
            "demo": TemplateEntry("https://example.com/demo.git", branch="main"),
        })
        table["demo"].branch  # "main"
    """

    def __init__(self, entries: Mapping[str, TemplateEntry]):
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, identifier: str) -> TemplateEntry:
        return self._entries[identifier]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TemplateTable({dict(self._entries)!r})"


def repository_base_name(location: str) -> str:
    """
    Derive a directory name from a repository location.

    Uses the file stem of the location's path, so
    ``https://github.com/owner/starter.git`` gives ``starter``.

    Raises:
        MalformedLocationError: If the location has no usable path stem
    """
    if not location or not location.strip():
        raise MalformedLocationError(location)

    scp = SCP_LOCATION.match(location)
    if scp:
        path = scp.group(1)
    else:
        parsed = urlparse(location)
        if not parsed.scheme or len(parsed.scheme) < 2:
            raise MalformedLocationError(location)
        path = parsed.path

    stem = PurePosixPath(path.rstrip('/')).stem
    if not stem or stem in ('.', '..'):
        raise MalformedLocationError(location)
    return stem


def _overlaps(a: Path, b: Path) -> bool:
    """True if a and b are equal or one contains the other."""
    return a == b or a in b.parents or b in a.parents


@dataclass(frozen=True)
class RunContext:
    """Immutable per-run values for one fetch-and-materialize pipeline."""
    location: str
    staging_path: Path
    destination_name: str
    working_directory: Path
    branch: Optional[str] = None
    subdirectory: Optional[str] = None

    @property
    def destination(self) -> Path:
        return self.working_directory / self.destination_name

    @classmethod
    def build(
        cls,
        entry: TemplateEntry,
        staging_path: Path,
        destination_name: Optional[str] = None,
        working_directory: Optional[Path] = None,
    ) -> 'RunContext':
        """
        Build a context from a resolved template entry.

        Args:
            entry: Resolved template entry
            staging_path: Temporary path the repository is cloned into
            destination_name: Final directory name; defaults to the
                repository's base name
            working_directory: Directory to materialize into; defaults to
                the process working directory

        Raises:
            MalformedLocationError: If the location cannot be parsed
            WorkingDirectoryUnavailableError: If the working directory cannot
                be read or overlaps the staging path
        """
        base_name = repository_base_name(entry.location)

        if working_directory is None:
            try:
                working_directory = Path.cwd()
            except OSError as e:
                raise WorkingDirectoryUnavailableError(
                    f"Cannot read working directory: {e}", cause=e
                ) from e
        elif not working_directory.is_dir():
            raise WorkingDirectoryUnavailableError(
                f"Working directory does not exist: {working_directory}"
            )

        working_directory = Path(os.path.abspath(working_directory))
        staging_path = Path(os.path.abspath(staging_path))
        context = cls(
            location=entry.location,
            staging_path=staging_path,
            destination_name=destination_name or base_name,
            working_directory=working_directory,
            branch=entry.branch,
            subdirectory=entry.subdirectory,
        )

        for other in (context.working_directory, context.destination):
            if _overlaps(context.staging_path, other):
                raise WorkingDirectoryUnavailableError(
                    f"Staging path {context.staging_path} overlaps {other}"
                )

        return context
