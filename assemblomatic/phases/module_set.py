"""
Module-set phase: contributes reactor sub-modules to the archive.

For every module set of the descriptor the phase

1. resolves the selected projects (:func:`get_module_projects`),
2. adds their binaries – the primary artifact or a classified attachment,
   optionally unpacked and optionally followed by their dependencies,
3. adds their source file sets, nested below the module directory and
   with nested sub-module directories excluded.

A module set without ``binaries`` and ``sources`` is legal and adds nothing.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from assemblomatic.archiver.base import Archiver
from assemblomatic.config.schema import (
    DEFAULT_DEPENDENCY_FILE_NAME_MAPPING,
    Assembly,
    DependencySet,
    FileSet,
    ModuleBinaries,
    ModuleSet,
    ModuleSources,
)
from assemblomatic.config.source import ConfigurationSource
from assemblomatic.models import Artifact, Project
from assemblomatic.phases.base import AssemblyPhase
from assemblomatic.phases.tasks import (
    add_artifact,
    add_dependency_set,
    add_file_sets,
    resolve_source_directory,
)
from assemblomatic.resolution.dependencies import DependencyResolver
from assemblomatic.resolution.modules import get_module_projects
from assemblomatic.utils.errors import (
    ArchiveCreationError,
    InvalidAssemblerConfigurationError,
)
from assemblomatic.utils.interpolation import format_output_directory
from assemblomatic.utils.modes import mode_to_int

__all__ = ["ModuleSetAssemblyPhase"]

log = logging.getLogger(__name__)


def _ordered(projects: Iterable[Project]) -> list[Project]:
    """Stable iteration order for an unordered project set."""
    return sorted(projects, key=lambda p: p.id)


class ModuleSetAssemblyPhase(AssemblyPhase):
    """Add binaries and sources of reactor modules.

    Args:
        dependency_resolver: Resolver used when module binaries include
            dependencies. May be *None* if no module set needs it.
        logger: Optional logger.
    """

    order = 40

    def __init__(
        self,
        dependency_resolver: Optional[DependencyResolver] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.dependency_resolver = dependency_resolver
        self.log = logger or log

    # ------------------------------------------------------------------ #
    # orchestration
    # ------------------------------------------------------------------ #
    def execute(
        self,
        assembly: Assembly,
        archiver: Archiver,
        config_source: ConfigurationSource,
    ) -> None:
        module_sets = assembly.module_sets
        if not module_sets:
            self.log.debug("No module sets in assembly %s", assembly.id)
            return

        for index, module_set in enumerate(module_sets, start=1):
            self.log.info("Processing module set %d of %d", index, len(module_sets))
            projects = get_module_projects(
                module_set, config_source.reactor, config_source.project, self.log
            )
            if not projects:
                self.log.warning("Module set %d selected no modules", index)
                continue

            self.add_module_binaries(
                module_set, module_set.binaries, projects, archiver, config_source
            )
            self.add_module_source_file_sets(
                module_set.sources, projects, archiver, config_source
            )

    # ------------------------------------------------------------------ #
    # binaries
    # ------------------------------------------------------------------ #
    def add_module_binaries(
        self,
        module_set: ModuleSet | None,
        binaries: ModuleBinaries | None,
        projects: Iterable[Project] | None,
        archiver: Archiver | None,
        config_source: ConfigurationSource | None,
    ) -> None:
        """Add the artifact (and optionally dependencies) of every project.

        ``pom`` projects are skipped. Artifacts are selected for all projects
        before anything is added, so a classifier mismatch leaves the archive
        untouched.

        Raises:
            InvalidAssemblerConfigurationError: A project has no attachment
                with the configured classifier.
            ArchiveCreationError: A selected artifact has no file.
        """
        if binaries is None:
            return

        classifier = binaries.attachment_classifier
        selected: list[tuple[Project, Artifact]] = []
        for project in _ordered(projects or ()):
            if project.packaging == "pom":
                self.log.debug("Skipping pom module %s", project.id)
                continue

            if classifier:
                artifact = next(
                    (a for a in project.attached_artifacts if a.classifier == classifier),
                    None,
                )
                if artifact is None:
                    raise InvalidAssemblerConfigurationError(
                        f"Cannot find attachment with classifier '{classifier}' "
                        f"in module project {project.id}. Please exclude this "
                        "module from the module set."
                    )
            else:
                artifact = project.artifact
                if artifact is None:
                    raise ArchiveCreationError(
                        f"Module project {project.id} has no artifact; "
                        "build it before assembling"
                    )
            selected.append((project, artifact))

        for project, artifact in selected:
            self.add_module_artifact(artifact, project, archiver, config_source, binaries)
            if binaries.include_dependencies:
                self._add_module_dependencies(
                    binaries, project, artifact, archiver, config_source
                )

    def add_module_artifact(
        self,
        artifact: Artifact,
        project: Project | None,
        archiver: Archiver | None,
        config_source: ConfigurationSource | None,
        binaries: ModuleBinaries | None,
    ) -> None:
        """Add one module artifact at its mapped location.

        Raises:
            ArchiveCreationError: When ``artifact.file`` is unset.
        """
        if artifact.file is None:
            raise ArchiveCreationError(
                f"Included module {artifact.id} does not have an artifact with a file. "
                "Please ensure the package phase is run before the assembly is generated."
            )
        if archiver is None or binaries is None:
            raise ArchiveCreationError(f"No archiver or binaries section for {artifact.id}")

        add_artifact(
            artifact,
            archiver,
            config_source,
            output_directory=binaries.output_directory,
            file_name_mapping=binaries.output_file_name_mapping,
            file_mode=mode_to_int(binaries.file_mode, self.log),
            directory_mode=mode_to_int(binaries.directory_mode, self.log),
            unpack=binaries.unpack,
            module_project=project,
            module_artifact=artifact,
        )

    def _module_dependency_sets(self, binaries: ModuleBinaries) -> list[DependencySet]:
        """Dependency sets for a module; the module artifact itself is never repeated.

        The implied set names each dependency after itself unless the
        binaries section sets ``output_file_name_mapping`` explicitly.
        """
        if binaries.dependency_sets:
            return [
                ds.model_copy(update={"use_project_artifact": False})
                for ds in binaries.dependency_sets
            ]
        mapping = DEFAULT_DEPENDENCY_FILE_NAME_MAPPING
        if "output_file_name_mapping" in binaries.model_fields_set:
            mapping = binaries.output_file_name_mapping
        return [
            DependencySet(
                output_directory=binaries.output_directory,
                output_file_name_mapping=mapping,
                includes=list(binaries.includes),
                excludes=list(binaries.excludes),
                use_project_artifact=False,
                unpack=binaries.unpack,
                file_mode=binaries.file_mode,
                directory_mode=binaries.directory_mode,
            )
        ]

    def _add_module_dependencies(
        self,
        binaries: ModuleBinaries,
        project: Project,
        artifact: Artifact,
        archiver: Archiver | None,
        config_source: ConfigurationSource | None,
    ) -> None:
        if self.dependency_resolver is None:
            raise InvalidAssemblerConfigurationError(
                f"Module binaries of {project.id} include dependencies "
                "but no dependency resolver is configured"
            )
        if archiver is None or config_source is None:
            raise ArchiveCreationError(f"No archiver or configuration for {project.id}")

        resolved = self.dependency_resolver.resolve_dependency_sets(
            self._module_dependency_sets(binaries), project
        )
        for dependency_set, artifacts in resolved:
            count = add_dependency_set(
                dependency_set,
                project,
                artifacts,
                archiver,
                config_source,
                module_project=project,
                module_artifact=artifact,
                logger=self.log,
            )
            self.log.debug("Added %d dependency artifact(s) of %s", count, project.id)

    # ------------------------------------------------------------------ #
    # sources
    # ------------------------------------------------------------------ #
    def add_module_source_file_sets(
        self,
        sources: ModuleSources | None,
        projects: Iterable[Project] | None,
        archiver: Archiver | None,
        config_source: ConfigurationSource | None,
    ) -> None:
        """Add the declared (or legacy) source file sets of every project."""
        if sources is None:
            return

        file_sets = list(sources.file_sets)
        legacy = self.deprecated_module_sources_fields(sources)
        if legacy:
            self.log.warning(
                "Module sources use deprecated field(s) %s; declare a fileSets entry instead",
                ", ".join(legacy),
            )
            file_sets.append(
                FileSet(
                    output_directory=sources.output_directory,
                    includes=list(sources.includes),
                    excludes=list(sources.excludes),
                    file_mode=sources.file_mode,
                    directory_mode=sources.directory_mode,
                    use_default_excludes=sources.use_default_excludes,
                )
            )
        if not file_sets:
            self.log.debug("Module sources declare no file sets")
            return
        if archiver is None or config_source is None:
            raise ArchiveCreationError("No archiver or configuration for module sources")

        for project in _ordered(projects or ()):
            module_file_sets = [
                self.create_file_set(fs, sources, project, config_source)
                for fs in file_sets
            ]
            add_file_sets(
                module_file_sets,
                archiver,
                config_source,
                module_project=project,
                logger=self.log,
            )

    def create_file_set(
        self,
        file_set: FileSet,
        sources: ModuleSources,
        project: Project,
        config_source: ConfigurationSource | None,
    ) -> FileSet:
        """Return *file_set* rebased onto *project*.

        * ``directory`` becomes absolute (relative to the project basedir);
        * ``output_directory`` is nested below the module directory when
          ``include_module_directory`` is set, and always ends in ``/``
          unless it is the archive root;
        * ``<module>/**`` is excluded for every declared child module when
          ``exclude_sub_module_directories`` is set;
        * unset modes inherit the sources-level modes.
        """
        directory = resolve_source_directory(file_set.directory, project.basedir)

        dest = file_set.output_directory or ""
        if sources.include_module_directory:
            module_dir = format_output_directory(
                sources.output_directory_mapping,
                config_source,
                module_project=project,
                module_artifact=project.artifact,
            )
            dest = module_dir + dest

        output_directory = format_output_directory(
            dest,
            config_source,
            module_project=project,
            module_artifact=project.artifact,
        )

        excludes = list(file_set.excludes)
        if sources.exclude_sub_module_directories:
            excludes.extend(f"{module}/**" for module in project.modules)

        return file_set.model_copy(
            update={
                "directory": str(directory),
                "output_directory": output_directory,
                "excludes": excludes,
                "file_mode": file_set.file_mode or sources.file_mode,
                "directory_mode": file_set.directory_mode or sources.directory_mode,
            }
        )

    # ------------------------------------------------------------------ #
    # legacy detection
    # ------------------------------------------------------------------ #
    @staticmethod
    def deprecated_module_sources_fields(sources: ModuleSources) -> list[str]:
        """Names of the legacy structural fields set on *sources*."""
        present: list[str] = []
        if sources.output_directory:
            present.append("output_directory")
        if sources.includes:
            present.append("includes")
        if sources.excludes:
            present.append("excludes")
        return present

    def is_deprecated_module_sources_config_present(self, sources: ModuleSources) -> bool:
        """*True* when legacy structural fields are set.

        ``file_mode`` and ``directory_mode`` alone do not count.
        """
        return bool(self.deprecated_module_sources_fields(sources))
