"""
Content-adding tasks shared by several assembly phases.

* :func:`add_file_sets`   – descriptor file sets → archiver file sets.
* :func:`add_artifact`    – one artifact, copied or unpacked.
* :func:`add_dependency_set` – filtered dependency artifacts of a project.

The same code paths serve the top-level descriptor sections and the
module-set phase; module-specific callers pass ``module_project`` and
``module_artifact`` so that ``${module.*}`` expressions resolve.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Sequence

from assemblomatic.archiver.base import ArchivedFileSet, Archiver
from assemblomatic.archiver.base import FileSet as ArchiveFileSet
from assemblomatic.config.schema import DependencySet, FileSet
from assemblomatic.config.source import ConfigurationSource
from assemblomatic.models import Artifact, Project
from assemblomatic.resolution.filters import CoordinateFilter
from assemblomatic.utils.errors import ArchiveCreationError
from assemblomatic.utils.interpolation import (
    format_file_name,
    format_output_directory,
    normalize_output_directory,
)
from assemblomatic.utils.modes import UNSET_MODE, mode_to_int, mode_to_string

__all__ = ["add_artifact", "add_dependency_set", "add_file_sets", "resolve_source_directory"]

log = logging.getLogger(__name__)


def resolve_source_directory(directory: str | None, basedir: Path) -> Path:
    """Return *directory* resolved against *basedir* (``None`` → *basedir*)."""
    if not directory:
        return basedir
    path = Path(directory).expanduser()
    return path if path.is_absolute() else basedir / path


# --------------------------------------------------------------------------- #
# File sets
# --------------------------------------------------------------------------- #
def add_file_sets(
    file_sets: Iterable[FileSet],
    archiver: Archiver,
    config_source: ConfigurationSource,
    *,
    module_project: Project | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """Add each descriptor file set to *archiver*.

    Source directories are relative to the module project's basedir (or the
    root project's basedir outside module sets). Missing directories are
    skipped with a warning. Module file sets come from
    ``ModuleSetAssemblyPhase.create_file_set`` with their output directory
    already rendered; it is only normalised here.
    """
    logger = logger or log
    owner = module_project or config_source.project

    for file_set in file_sets:
        directory = resolve_source_directory(file_set.directory, owner.basedir)
        if not directory.is_dir():
            logger.warning("File set directory %s does not exist; skipping", directory)
            continue

        if module_project is not None:
            prefix = normalize_output_directory(file_set.output_directory)
        else:
            prefix = format_output_directory(file_set.output_directory, config_source)
        file_mode = mode_to_int(file_set.file_mode, logger)
        dir_mode = mode_to_int(file_set.directory_mode, logger)
        logger.debug(
            "Adding file set %s → '%s' (file mode %s, dir mode %s)",
            directory,
            prefix,
            mode_to_string(file_mode),
            mode_to_string(dir_mode),
        )
        archiver.add_file_set(
            ArchiveFileSet(
                directory=directory,
                prefix=prefix,
                includes=tuple(file_set.includes),
                excludes=tuple(file_set.excludes),
                file_mode=file_mode,
                directory_mode=dir_mode,
                use_default_excludes=file_set.use_default_excludes,
            )
        )


# --------------------------------------------------------------------------- #
# Artifacts
# --------------------------------------------------------------------------- #
def add_artifact(
    artifact: Artifact,
    archiver: Archiver,
    config_source: ConfigurationSource | None,
    *,
    output_directory: str | None,
    file_name_mapping: str,
    file_mode: int = UNSET_MODE,
    directory_mode: int = UNSET_MODE,
    unpack: bool = False,
    module_project: Project | None = None,
    module_artifact: Artifact | None = None,
) -> None:
    """Copy (or unpack) *artifact* into *archiver*.

    An unset *file_mode* falls back to the archiver's current override file
    mode; an explicit *directory_mode* temporarily replaces the archiver's
    override directory mode for the duration of the addition.

    Raises:
        ArchiveCreationError: When the artifact has no backing file.
        AssemblyFormattingError: When a template cannot be rendered.
    """
    if artifact.file is None:
        raise ArchiveCreationError(
            f"Artifact {artifact.id} has no file; build it before assembling"
        )

    out_dir = format_output_directory(
        output_directory,
        config_source,
        module_project=module_project,
        module_artifact=module_artifact,
        artifact=artifact,
    )

    previous_dir_mode = archiver.override_directory_mode
    if directory_mode >= 0:
        archiver.override_directory_mode = directory_mode
    try:
        if unpack:
            archiver.add_archived_file_set(
                ArchivedFileSet(
                    archive=artifact.file,
                    prefix=out_dir,
                    file_mode=file_mode,
                    directory_mode=directory_mode,
                )
            )
            return

        name = format_file_name(
            file_name_mapping,
            config_source,
            module_project=module_project,
            module_artifact=module_artifact,
            artifact=artifact,
        )
        mode = file_mode if file_mode >= 0 else archiver.override_file_mode
        archiver.add_file(artifact.file, out_dir + name, mode)
    finally:
        archiver.override_directory_mode = previous_dir_mode


# --------------------------------------------------------------------------- #
# Dependency sets
# --------------------------------------------------------------------------- #
def add_dependency_set(
    dependency_set: DependencySet,
    project: Project,
    artifacts: Sequence[Artifact],
    archiver: Archiver,
    config_source: ConfigurationSource,
    *,
    module_project: Project | None = None,
    module_artifact: Artifact | None = None,
    logger: logging.Logger | None = None,
) -> int:
    """Add the resolved *artifacts* of *project* selected by *dependency_set*.

    Returns:
        Number of artifacts added.
    """
    logger = logger or log
    candidates = list(artifacts)
    if (
        dependency_set.use_project_artifact
        and project.artifact is not None
        and project.packaging != "pom"
    ):
        candidates.insert(0, project.artifact)

    flt = CoordinateFilter(dependency_set.includes, dependency_set.excludes)
    file_mode = mode_to_int(dependency_set.file_mode, logger)
    dir_mode = mode_to_int(dependency_set.directory_mode, logger)

    added = 0
    for artifact in candidates:
        if not flt.allows([artifact.coordinate, artifact.dependency_conflict_id]):
            logger.debug("Dependency %s filtered out", artifact.id)
            continue
        add_artifact(
            artifact,
            archiver,
            config_source,
            output_directory=dependency_set.output_directory,
            file_name_mapping=dependency_set.output_file_name_mapping,
            file_mode=file_mode,
            directory_mode=dir_mode,
            unpack=dependency_set.unpack,
            module_project=module_project,
            module_artifact=module_artifact,
        )
        added += 1
    flt.report_untriggered(logger, what="dependency")
    return added
