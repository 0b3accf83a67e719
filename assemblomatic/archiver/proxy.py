"""
Selector-gated façade in front of the real archive writer.

Every assembly phase talks to :class:`AssemblyProxyArchiver` rather than to a
writer directly. The proxy

* prepends the assembly's root prefix (the base directory) to every entry,
* runs the shared selector chain exactly once per candidate file, whichever
  ``add_*`` call introduced it,
* keeps the archiver's own working directory out of the archive.

It never caches decisions between calls, and errors raised by the delegate
propagate unchanged.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Iterable, Sequence

from assemblomatic.archiver.base import (
    ArchivedFileSet,
    Archiver,
    FileInfo,
    FileSelector,
    FileSet,
    accepts,
)
from assemblomatic.utils.modes import UNSET_MODE
from assemblomatic.utils.patterns import normalize_path

__all__ = ["AssemblyProxyArchiver"]

log = logging.getLogger(__name__)


def _prefixed(root_prefix: str, name: str) -> str:
    if not root_prefix:
        return name
    return root_prefix + normalize_path(name)


class AssemblyProxyArchiver(Archiver):
    """Wrap *delegate* and gate every entry through *selectors*.

    Args:
        root_prefix: Prepended to every entry name (``""`` or ``"dir/"``).
        delegate: The writer that actually produces the archive.
        selectors: Ordered predicates; an entry is added only when all accept.
            The list is shared, not copied, so callers may append to it
            before the first addition.
        working_directory: Staging directory that must never be archived.
        logger: Optional logger; defaults to the module logger.
    """

    def __init__(
        self,
        root_prefix: str,
        delegate: Archiver,
        selectors: list[FileSelector] | None = None,
        working_directory: Path | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        # Deliberately not calling Archiver.__init__: state lives in the delegate.
        prefix = normalize_path(root_prefix or "")
        if prefix and not prefix.endswith("/"):
            prefix += "/"
        self.root_prefix = prefix
        self.delegate = delegate
        self.selectors: list[FileSelector] = selectors if selectors is not None else []
        self.working_directory = (
            Path(working_directory).resolve() if working_directory is not None else None
        )
        self.log = logger or log

    # ------------------------------------------------------------------ #
    # forwarded state
    # ------------------------------------------------------------------ #
    @property
    def forced(self) -> bool:  # type: ignore[override]
        return self.delegate.forced

    @forced.setter
    def forced(self, value: bool) -> None:
        self.delegate.forced = value

    @property
    def dest_file(self) -> Path | None:  # type: ignore[override]
        return self.delegate.dest_file

    @dest_file.setter
    def dest_file(self, value: Path | None) -> None:
        self.delegate.dest_file = value

    @property
    def duplicate_behavior(self):  # type: ignore[override]
        return self.delegate.duplicate_behavior

    @property
    def override_file_mode(self) -> int:  # type: ignore[override]
        return self.delegate.override_file_mode

    @override_file_mode.setter
    def override_file_mode(self, value: int) -> None:
        self.delegate.override_file_mode = value

    @property
    def override_directory_mode(self) -> int:  # type: ignore[override]
        return self.delegate.override_directory_mode

    @override_directory_mode.setter
    def override_directory_mode(self, value: int) -> None:
        self.delegate.override_directory_mode = value

    # ------------------------------------------------------------------ #
    # content
    # ------------------------------------------------------------------ #
    def add_file(self, source: Path, dest: str, mode: int = UNSET_MODE) -> None:
        source = Path(source)
        if not accepts(self.selectors, FileInfo(name=normalize_path(dest), source=source)):
            self.log.debug("Selector rejected %s", dest)
            return
        self.delegate.add_file(source, _prefixed(self.root_prefix, dest), mode)

    def add_directory(
        self,
        directory: Path,
        prefix: str = "",
        includes: Iterable[str] | None = None,
        excludes: Iterable[str] | None = None,
    ) -> None:
        self.add_file_set(
            FileSet(
                directory=Path(directory),
                prefix=prefix,
                includes=tuple(includes or ()),
                excludes=tuple(excludes or ()),
            )
        )

    def add_file_set(self, file_set: FileSet) -> None:
        """Forward *file_set* unless it is, or contains, the working directory.

        * directory == working directory → no-op;
        * directory is an ancestor → the working directory (relative to the
          file-set directory) is appended to the excludes;
        * otherwise forwarded unchanged apart from prefix and selectors.
        """
        excludes = tuple(file_set.excludes)

        if self.working_directory is not None:
            directory = Path(file_set.directory).resolve()
            if directory == self.working_directory:
                self.log.debug(
                    "Not adding working directory %s to the archive", directory
                )
                return
            if self.working_directory.is_relative_to(directory):
                rel = self.working_directory.relative_to(directory).as_posix()
                self.log.debug(
                    "File set %s contains the working directory; excluding '%s'",
                    directory,
                    rel,
                )
                excludes = excludes + (rel,)

        self.delegate.add_file_set(
            dataclasses.replace(
                file_set,
                prefix=_prefixed(self.root_prefix, file_set.prefix),
                excludes=excludes,
                selectors=self._combined(file_set.selectors),
            )
        )

    def add_archived_file_set(self, file_set: ArchivedFileSet) -> None:
        self.delegate.add_archived_file_set(
            dataclasses.replace(
                file_set,
                prefix=_prefixed(self.root_prefix, file_set.prefix),
                selectors=self._combined(file_set.selectors),
            )
        )

    def _combined(self, extra: Sequence[FileSelector]) -> tuple[FileSelector, ...]:
        return tuple(self.selectors) + tuple(extra)

    # ------------------------------------------------------------------ #
    # finalisation
    # ------------------------------------------------------------------ #
    def create_archive(self) -> Path:
        return self.delegate.create_archive()
