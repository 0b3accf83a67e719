"""Phases adding the descriptor's top-level ``file_sets`` and ``files``."""

from __future__ import annotations

import logging

from assemblomatic.archiver.base import Archiver
from assemblomatic.config.schema import Assembly
from assemblomatic.config.source import ConfigurationSource
from assemblomatic.phases.base import AssemblyPhase
from assemblomatic.phases.tasks import add_file_sets, resolve_source_directory
from assemblomatic.utils.errors import ArchiveCreationError
from assemblomatic.utils.interpolation import format_output_directory, interpolate
from assemblomatic.utils.modes import mode_to_int

__all__ = ["FileItemAssemblyPhase", "FileSetAssemblyPhase"]

log = logging.getLogger(__name__)


class FileSetAssemblyPhase(AssemblyPhase):
    """Copy directory trees of the root project."""

    order = 10

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.log = logger or log

    def execute(
        self,
        assembly: Assembly,
        archiver: Archiver,
        config_source: ConfigurationSource,
    ) -> None:
        if not assembly.file_sets:
            return
        add_file_sets(assembly.file_sets, archiver, config_source, logger=self.log)


class FileItemAssemblyPhase(AssemblyPhase):
    """Copy single files of the root project, optionally renamed.

    Unlike file sets, a missing source file is an error: the descriptor
    names it explicitly.
    """

    order = 20

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.log = logger or log

    def execute(
        self,
        assembly: Assembly,
        archiver: Archiver,
        config_source: ConfigurationSource,
    ) -> None:
        basedir = config_source.project.basedir
        for item in assembly.files:
            source = resolve_source_directory(
                interpolate(item.source, config_source.interpolation_values()), basedir
            )
            if not source.is_file():
                raise ArchiveCreationError(f"File {source} listed in the assembly does not exist")

            out_dir = format_output_directory(item.output_directory, config_source)
            name = item.dest_name or source.name
            self.log.debug("Adding file %s as %s%s", source, out_dir, name)
            archiver.add_file(source, out_dir + name, mode_to_int(item.file_mode, self.log))
