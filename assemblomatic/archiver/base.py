"""
Archive-writer contract shared by every concrete writer and the proxy.

The module depends only on the standard library so that it can be imported
by tests and phases without pulling in any writer implementation.

Key types
---------
* :class:`FileInfo` – what a selector gets to see about a candidate entry.
* :data:`FileSelector` – ``Callable[[FileInfo], bool]``; *True* keeps the entry.
* :class:`FileSet` / :class:`ArchivedFileSet` – directory or archive sources
  with include/exclude patterns, target prefix, modes and selectors.
* :class:`Archiver` – abstract writer.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Sequence

from assemblomatic.utils.modes import UNSET_MODE

__all__ = [
    "Archiver",
    "ArchivedFileSet",
    "DEFAULT_DIRECTORY_MODE",
    "DEFAULT_FILE_MODE",
    "DuplicateBehavior",
    "FileInfo",
    "FileSelector",
    "FileSet",
    "accepts",
]

DEFAULT_FILE_MODE: int = 0o644
DEFAULT_DIRECTORY_MODE: int = 0o755


@dataclass(frozen=True)
class FileInfo:
    """Candidate entry presented to selectors.

    Attributes:
        name: Entry path relative to its source root (``a/b.txt``).
        source: File on disk, or *None* for entries read from an archive.
        is_file: *True* for regular files, *False* for directories.
    """

    name: str
    source: Path | None = None
    is_file: bool = True

    @property
    def is_dir(self) -> bool:
        return not self.is_file


FileSelector = Callable[[FileInfo], bool]


def accepts(selectors: Sequence[FileSelector], info: FileInfo) -> bool:
    """Run *selectors* in order; stop at the first rejection."""
    for selector in selectors:
        if not selector(info):
            return False
    return True


class DuplicateBehavior(str, enum.Enum):
    """What a writer does when two files map onto the same entry name."""

    SKIP = "skip"  # keep the first entry
    ADD = "add"  # last one wins
    FAIL = "fail"  # raise ArchiverError


@dataclass(frozen=True)
class FileSet:
    """Directory tree to copy into the archive below *prefix*."""

    directory: Path
    prefix: str = ""
    includes: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()
    selectors: tuple[FileSelector, ...] = ()
    file_mode: int = UNSET_MODE
    directory_mode: int = UNSET_MODE
    use_default_excludes: bool = True


@dataclass(frozen=True)
class ArchivedFileSet:
    """Contents of an existing zip/tar archive to expand below *prefix*."""

    archive: Path
    prefix: str = ""
    includes: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()
    selectors: tuple[FileSelector, ...] = ()
    file_mode: int = UNSET_MODE
    directory_mode: int = UNSET_MODE


class Archiver(ABC):
    """Abstract archive writer.

    Concrete writers collect entries through the ``add_*`` methods and
    serialise them in :meth:`create_archive`. Modes passed as ``-1`` fall
    back to :pyattr:`override_file_mode` / :pyattr:`override_directory_mode`
    and then to the writer defaults.
    """

    def __init__(
        self,
        dest_file: Path | None = None,
        *,
        duplicate_behavior: DuplicateBehavior = DuplicateBehavior.SKIP,
    ) -> None:
        self.dest_file = dest_file
        self.duplicate_behavior = DuplicateBehavior(duplicate_behavior)
        self.forced = True
        self.override_file_mode: int = UNSET_MODE
        self.override_directory_mode: int = UNSET_MODE

    # ------------------------------------------------------------------ #
    # content
    # ------------------------------------------------------------------ #
    @abstractmethod
    def add_file(self, source: Path, dest: str, mode: int = UNSET_MODE) -> None:
        """Add *source* as entry *dest*."""
        raise NotImplementedError

    @abstractmethod
    def add_file_set(self, file_set: FileSet) -> None:
        """Add every selected file below ``file_set.directory``."""
        raise NotImplementedError

    @abstractmethod
    def add_archived_file_set(self, file_set: ArchivedFileSet) -> None:
        """Expand the entries of ``file_set.archive`` into this archive."""
        raise NotImplementedError

    def add_directory(
        self,
        directory: Path,
        prefix: str = "",
        includes: Iterable[str] | None = None,
        excludes: Iterable[str] | None = None,
    ) -> None:
        """Convenience wrapper building a :class:`FileSet` for *directory*."""
        self.add_file_set(
            FileSet(
                directory=Path(directory),
                prefix=prefix,
                includes=tuple(includes or ()),
                excludes=tuple(excludes or ()),
            )
        )

    # ------------------------------------------------------------------ #
    # finalisation
    # ------------------------------------------------------------------ #
    @abstractmethod
    def create_archive(self) -> Path:
        """Write the archive to :pyattr:`dest_file` and return its path."""
        raise NotImplementedError

    # ------------------------------------------------------------------ #
    # helpers
    # ------------------------------------------------------------------ #
    def effective_file_mode(self, mode: int) -> int:
        if mode >= 0:
            return mode
        if self.override_file_mode >= 0:
            return self.override_file_mode
        return DEFAULT_FILE_MODE

    def effective_directory_mode(self, mode: int) -> int:
        if mode >= 0:
            return mode
        if self.override_directory_mode >= 0:
            return self.override_directory_mode
        return DEFAULT_DIRECTORY_MODE
