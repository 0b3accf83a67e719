"""
Zip and tar writers built on :mod:`zipfile` / :mod:`tarfile`.

Both writers share :class:`FileArchiver`, which collects entries in insertion
order, applies the duplicate policy and the include/exclude/selector rules,
and defers all byte copying to :meth:`FileArchiver.create_archive`. Entry
order in the finished archive is the order of the ``add_*`` calls, with
directory trees walked in sorted order, so identical inputs produce identical
archives.
"""

from __future__ import annotations

import io
import logging
import os
import tarfile
import time
import zipfile
from abc import abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from assemblomatic.archiver.base import (
    ArchivedFileSet,
    Archiver,
    DuplicateBehavior,
    FileInfo,
    FileSet,
    accepts,
)
from assemblomatic.utils.errors import ArchiverError
from assemblomatic.utils.modes import UNSET_MODE, mode_to_string
from assemblomatic.utils.patterns import PathMatcher, normalize_path

__all__ = ["FileArchiver", "TarArchiver", "ZipArchiver", "create_writer"]

log = logging.getLogger(__name__)

# Earliest timestamp representable in a zip entry.
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


@dataclass(frozen=True)
class _Entry:
    name: str
    mode: int
    is_dir: bool = False
    source: Path | None = None
    archive: Path | None = None
    member: str | None = None


def _join(prefix: str, name: str) -> str:
    prefix = normalize_path(prefix)
    if prefix and not prefix.endswith("/"):
        prefix += "/"
    return prefix + normalize_path(name)


class FileArchiver(Archiver):
    """Entry-collecting base for the on-disk writers."""

    def __init__(
        self,
        dest_file: Path | None = None,
        *,
        duplicate_behavior: DuplicateBehavior = DuplicateBehavior.SKIP,
    ) -> None:
        super().__init__(dest_file, duplicate_behavior=duplicate_behavior)
        self._entries: dict[str, _Entry] = {}

    # ------------------------------------------------------------------ #
    # entry bookkeeping
    # ------------------------------------------------------------------ #
    @property
    def entry_names(self) -> list[str]:
        return list(self._entries)

    def _put(self, entry: _Entry) -> None:
        existing = self._entries.get(entry.name)
        if existing is None:
            self._entries[entry.name] = entry
            return
        if existing.is_dir and entry.is_dir:
            return
        if self.duplicate_behavior is DuplicateBehavior.FAIL:
            raise ArchiverError(f"Duplicate archive entry: {entry.name}")
        if self.duplicate_behavior is DuplicateBehavior.ADD:
            log.debug("Replacing duplicate entry %s", entry.name)
            self._entries[entry.name] = entry
            return
        log.debug("Skipping duplicate entry %s", entry.name)

    def _put_parents(self, name: str, mode: int) -> None:
        parts = name.rstrip("/").split("/")[:-1]
        for depth in range(1, len(parts) + 1):
            self._put(_Entry(name="/".join(parts[:depth]) + "/", mode=mode, is_dir=True))

    # ------------------------------------------------------------------ #
    # Archiver API
    # ------------------------------------------------------------------ #
    def add_file(self, source: Path, dest: str, mode: int = UNSET_MODE) -> None:
        source = Path(source)
        if not source.is_file():
            raise ArchiverError(f"{source} is not a regular file")
        name = normalize_path(dest)
        if not name or name.endswith("/"):
            raise ArchiverError(f"Invalid entry name {dest!r} for {source}")
        self._put_parents(name, self.effective_directory_mode(UNSET_MODE))
        self._put(_Entry(name=name, mode=self.effective_file_mode(mode), source=source))

    def add_file_set(self, file_set: FileSet) -> None:
        root = Path(file_set.directory)
        if not root.is_dir():
            raise ArchiverError(f"{root} is not a directory")

        matcher = PathMatcher(
            file_set.includes,
            file_set.excludes,
            use_default_excludes=file_set.use_default_excludes,
        )
        file_mode = self.effective_file_mode(file_set.file_mode)
        dir_mode = self.effective_directory_mode(file_set.directory_mode)

        added = 0
        for path, rel in self._walk(root, matcher):
            if not accepts(file_set.selectors, FileInfo(name=rel, source=path)):
                continue
            name = _join(file_set.prefix, rel)
            self._put_parents(name, dir_mode)
            self._put(_Entry(name=name, mode=file_mode, source=path))
            added += 1
        log.debug(
            "Added %d file(s) from %s below '%s' (mode %s)",
            added,
            root,
            file_set.prefix,
            mode_to_string(file_mode),
        )

    @staticmethod
    def _walk(root: Path, matcher: PathMatcher) -> Iterator[tuple[Path, str]]:
        for dirpath, dirnames, filenames in os.walk(root):
            base = Path(dirpath)
            rel_dir = base.relative_to(root).as_posix()
            rel_dir = "" if rel_dir == "." else rel_dir + "/"
            # prune excluded directories in place; sorted for stable order
            dirnames[:] = sorted(d for d in dirnames if not matcher.is_excluded(rel_dir + d))
            for fname in sorted(filenames):
                rel = rel_dir + fname
                if matcher.matches(rel):
                    yield base / fname, rel

    def add_archived_file_set(self, file_set: ArchivedFileSet) -> None:
        archive = Path(file_set.archive)
        matcher = PathMatcher(file_set.includes, file_set.excludes, use_default_excludes=False)
        dir_mode = self.effective_directory_mode(file_set.directory_mode)

        for member, raw_name, member_mode in self._list_members(archive):
            if not matcher.matches(member):
                continue
            if not accepts(file_set.selectors, FileInfo(name=member)):
                continue
            if file_set.file_mode >= 0:
                mode = file_set.file_mode
            elif self.override_file_mode < 0 and member_mode > 0:
                mode = member_mode
            else:
                mode = self.effective_file_mode(UNSET_MODE)
            name = _join(file_set.prefix, member)
            self._put_parents(name, dir_mode)
            self._put(_Entry(name=name, mode=mode, archive=archive, member=raw_name))

    @staticmethod
    def _list_members(archive: Path) -> list[tuple[str, str, int]]:
        """Return ``(name, raw name, mode)`` for every regular file in *archive*."""
        try:
            if zipfile.is_zipfile(archive):
                with zipfile.ZipFile(archive) as zf:
                    return [
                        (normalize_path(i.filename), i.filename, (i.external_attr >> 16) & 0o7777)
                        for i in zf.infolist()
                        if not i.is_dir()
                    ]
            if tarfile.is_tarfile(archive):
                with tarfile.open(archive) as tf:
                    return [
                        (normalize_path(m.name), m.name, m.mode & 0o7777)
                        for m in tf.getmembers()
                        if m.isfile()
                    ]
        except (OSError, zipfile.BadZipFile, tarfile.TarError) as exc:
            raise ArchiverError(f"Cannot read archive {archive}: {exc}") from exc
        raise ArchiverError(f"{archive} is not a zip or tar archive")

    # ------------------------------------------------------------------ #
    # finalisation
    # ------------------------------------------------------------------ #
    def _is_up_to_date(self) -> bool:
        dest = self.dest_file
        if dest is None or not dest.exists():
            return False
        newest = 0.0
        for entry in self._entries.values():
            src = entry.source or entry.archive
            if src is not None:
                newest = max(newest, src.stat().st_mtime)
        return dest.stat().st_mtime >= newest

    def _read(self, entry: _Entry) -> bytes:
        if entry.source is not None:
            return entry.source.read_bytes()
        if entry.archive is None or entry.member is None:
            raise ArchiverError(f"Entry {entry.name} has no content source")
        if zipfile.is_zipfile(entry.archive):
            with zipfile.ZipFile(entry.archive) as zf:
                return zf.read(entry.member)
        with tarfile.open(entry.archive) as tf:
            handle = tf.extractfile(entry.member)
            if handle is None:
                raise ArchiverError(f"{entry.member} in {entry.archive} is not a file")
            return handle.read()

    def create_archive(self) -> Path:
        if self.dest_file is None:
            raise ArchiverError("No destination file set for the archive")
        if not any(not e.is_dir for e in self._entries.values()):
            raise ArchiverError(f"Refusing to create empty archive {self.dest_file}")

        dest = Path(self.dest_file)
        # written beside dest and moved into place only once complete
        partial = dest.with_name(f".{dest.name}.part")
        try:
            if not self.forced and self._is_up_to_date():
                log.info("Archive %s is up to date", dest)
                return dest
            dest.parent.mkdir(parents=True, exist_ok=True)
            try:
                self._write(partial, list(self._entries.values()))
                os.replace(partial, dest)
            finally:
                partial.unlink(missing_ok=True)
        except OSError as exc:
            raise ArchiverError(f"Failed to write {dest}: {exc}") from exc
        log.info("Created %s with %d entries", dest, len(self._entries))
        return dest

    @abstractmethod
    def _write(self, dest: Path, entries: list[_Entry]) -> None:
        raise NotImplementedError


class ZipArchiver(FileArchiver):
    """Writes zip (and jar) archives."""

    def _write(self, dest: Path, entries: list[_Entry]) -> None:
        with zipfile.ZipFile(dest, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for entry in entries:
                if entry.is_dir:
                    info = zipfile.ZipInfo(entry.name, date_time=_ZIP_EPOCH)
                    info.external_attr = ((0o040000 | entry.mode) << 16) | 0x10
                    zf.writestr(info, b"")
                    continue
                info = zipfile.ZipInfo(entry.name, date_time=self._date_time(entry))
                info.external_attr = (0o100000 | entry.mode) << 16
                info.compress_type = zipfile.ZIP_DEFLATED
                zf.writestr(info, self._read(entry))

    @staticmethod
    def _date_time(entry: _Entry) -> tuple[int, int, int, int, int, int]:
        if entry.source is None:
            return _ZIP_EPOCH
        stamp = time.localtime(entry.source.stat().st_mtime)[:6]
        return max(stamp, _ZIP_EPOCH)


class TarArchiver(FileArchiver):
    """Writes plain or gzip-compressed tar archives."""

    def __init__(
        self,
        dest_file: Path | None = None,
        *,
        compression: str = "",
        duplicate_behavior: DuplicateBehavior = DuplicateBehavior.SKIP,
    ) -> None:
        super().__init__(dest_file, duplicate_behavior=duplicate_behavior)
        if compression not in {"", "gz"}:
            raise ValueError(f"Unsupported tar compression: {compression}")
        self.compression = compression

    def _write(self, dest: Path, entries: list[_Entry]) -> None:
        mode = f"w:{self.compression}" if self.compression else "w"
        with tarfile.open(dest, mode) as tf:
            for entry in entries:
                info = tarfile.TarInfo(entry.name.rstrip("/"))
                info.mode = entry.mode
                if entry.is_dir:
                    info.type = tarfile.DIRTYPE
                    tf.addfile(info)
                    continue
                data = self._read(entry)
                info.size = len(data)
                if entry.source is not None:
                    info.mtime = int(entry.source.stat().st_mtime)
                tf.addfile(info, io.BytesIO(data))


def create_writer(
    fmt: str,
    dest_file: Path | None = None,
    *,
    duplicate_behavior: DuplicateBehavior = DuplicateBehavior.SKIP,
) -> FileArchiver:
    """Return a writer producing *fmt* (``zip``, ``jar``, ``tar``, ``tar.gz``, ``tgz``).

    Raises:
        ArchiverError: For unknown formats.
    """
    if fmt in {"zip", "jar"}:
        return ZipArchiver(dest_file, duplicate_behavior=duplicate_behavior)
    if fmt == "tar":
        return TarArchiver(dest_file, duplicate_behavior=duplicate_behavior)
    if fmt in {"tar.gz", "tgz"}:
        return TarArchiver(dest_file, compression="gz", duplicate_behavior=duplicate_behavior)
    raise ArchiverError(f"Unsupported archive format: {fmt}")
