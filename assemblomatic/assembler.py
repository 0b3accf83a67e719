"""
Top-level driver turning a descriptor into finished archives.

:class:`AssemblyArchiver` creates one writer per requested format, wraps it
in an :class:`~assemblomatic.archiver.proxy.AssemblyProxyArchiver` (base
directory prefix, selectors, working-directory guard), runs every phase and
finalises the archive. Any fatal error aborts the run before
``create_archive`` is reached, so no partial archive is written.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Sequence

from assemblomatic.archiver.base import Archiver, DuplicateBehavior, FileSelector
from assemblomatic.archiver.proxy import AssemblyProxyArchiver
from assemblomatic.archiver.writers import create_writer
from assemblomatic.config.schema import Assembly
from assemblomatic.config.source import ConfigurationSource
from assemblomatic.phases import AssemblyPhase, default_phases
from assemblomatic.resolution.dependencies import DependencyResolver, ReactorDependencyResolver
from assemblomatic.utils.errors import ArchiveCreationError, ArchiverError
from assemblomatic.utils.interpolation import format_output_directory

__all__ = ["AssemblyArchiver", "WriterFactory"]

log = logging.getLogger(__name__)

WriterFactory = Callable[..., Archiver]


class AssemblyArchiver:
    """Build the archives described by an :class:`Assembly`.

    Args:
        dependency_resolver: Resolver for dependency sets. Defaults to a
            :class:`ReactorDependencyResolver` over the run's reactor.
        phases: Phase sequence; defaults to :func:`default_phases`.
        writer_factory: ``factory(fmt, dest_file, duplicate_behavior=…)``
            returning the underlying writer.
        duplicate_behavior: Policy for colliding entry names.
        logger: Optional logger.
    """

    def __init__(
        self,
        dependency_resolver: DependencyResolver | None = None,
        phases: Sequence[AssemblyPhase] | None = None,
        *,
        writer_factory: WriterFactory = create_writer,
        duplicate_behavior: DuplicateBehavior = DuplicateBehavior.SKIP,
        logger: logging.Logger | None = None,
    ) -> None:
        self.dependency_resolver = dependency_resolver
        self._phases = list(phases) if phases is not None else None
        self.writer_factory = writer_factory
        self.duplicate_behavior = duplicate_behavior
        self.log = logger or log

    def _phases_for(self, config_source: ConfigurationSource) -> list[AssemblyPhase]:
        if self._phases is not None:
            return self._phases
        resolver = self.dependency_resolver or ReactorDependencyResolver(
            config_source.reactor, self.log
        )
        return default_phases(resolver, self.log)

    @staticmethod
    def base_directory(assembly: Assembly, config_source: ConfigurationSource) -> str:
        """Return the root prefix of every entry (``""`` when disabled)."""
        if not assembly.include_base_directory:
            return ""
        return format_output_directory(
            assembly.base_directory or "${finalName}", config_source
        )

    def create_archive(
        self,
        assembly: Assembly,
        fmt: str,
        config_source: ConfigurationSource,
        *,
        selectors: Iterable[FileSelector] | None = None,
        forced: bool = True,
    ) -> Path:
        """Build *assembly* in format *fmt* and return the archive path.

        Raises:
            AssemblyError: Any configuration, formatting, dependency or
                archive failure. Writer failures surface as
                :class:`ArchiveCreationError`.
        """
        dest = config_source.dest_file(assembly.id, fmt)
        writer = self.writer_factory(fmt, dest, duplicate_behavior=self.duplicate_behavior)
        archiver = AssemblyProxyArchiver(
            self.base_directory(assembly, config_source),
            writer,
            selectors=list(selectors or ()),
            working_directory=config_source.working_directory,
            logger=self.log,
        )
        archiver.forced = forced

        self.log.info("Building %s archive for assembly %s", fmt, assembly.id)
        try:
            for phase in self._phases_for(config_source):
                phase.execute(assembly, archiver, config_source)
            return archiver.create_archive()
        except ArchiverError as exc:
            raise ArchiveCreationError(
                f"Error creating assembly archive {assembly.id}: {exc}"
            ) from exc

    def create_archives(
        self,
        assembly: Assembly,
        config_source: ConfigurationSource,
        *,
        formats: Sequence[str] | None = None,
        selectors: Iterable[FileSelector] | None = None,
        forced: bool = True,
    ) -> list[Path]:
        """Build *assembly* once per format (descriptor formats by default)."""
        selectors = list(selectors or ())
        return [
            self.create_archive(assembly, fmt, config_source, selectors=selectors, forced=forced)
            for fmt in (formats or assembly.formats)
        ]
