"""
A writer that records what it was asked to add instead of writing bytes.

Used for ``--dry-run`` on the CLI and as a lightweight collaborator in tests.
File sets are recorded as a single addition; the directory is not walked.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from assemblomatic.archiver.base import ArchivedFileSet, Archiver, FileSet
from assemblomatic.utils.modes import UNSET_MODE

__all__ = ["Addition", "TrackingArchiver"]


@dataclass(frozen=True)
class Addition:
    """One recorded ``add_*`` call.

    Attributes:
        kind: ``"file"``, ``"file-set"`` or ``"archive"``.
        source: File, directory or archive that was added.
        dest: Entry name (files) or target prefix (sets).
        includes / excludes: Pattern lists of set additions.
        file_mode / directory_mode: Modes requested by the caller.
    """

    kind: str
    source: Path
    dest: str
    includes: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()
    file_mode: int = UNSET_MODE
    directory_mode: int = UNSET_MODE


class TrackingArchiver(Archiver):
    """Archiver double that keeps an ordered log of additions."""

    def __init__(self, dest_file: Path | None = None) -> None:
        super().__init__(dest_file)
        self.added: list[Addition] = []
        self.created = False

    def add_file(self, source: Path, dest: str, mode: int = UNSET_MODE) -> None:
        self.added.append(Addition("file", Path(source), dest, file_mode=mode))

    def add_file_set(self, file_set: FileSet) -> None:
        self.added.append(
            Addition(
                "file-set",
                Path(file_set.directory),
                file_set.prefix,
                includes=tuple(file_set.includes),
                excludes=tuple(file_set.excludes),
                file_mode=file_set.file_mode,
                directory_mode=file_set.directory_mode,
            )
        )

    def add_archived_file_set(self, file_set: ArchivedFileSet) -> None:
        self.added.append(
            Addition(
                "archive",
                Path(file_set.archive),
                file_set.prefix,
                includes=tuple(file_set.includes),
                excludes=tuple(file_set.excludes),
                file_mode=file_set.file_mode,
                directory_mode=file_set.directory_mode,
            )
        )

    def create_archive(self) -> Path:
        self.created = True
        return Path(self.dest_file) if self.dest_file is not None else Path()

