"""Phase adding the descriptor's top-level ``dependency_sets``."""

from __future__ import annotations

import logging

from assemblomatic.archiver.base import Archiver
from assemblomatic.config.schema import Assembly
from assemblomatic.config.source import ConfigurationSource
from assemblomatic.phases.base import AssemblyPhase
from assemblomatic.phases.tasks import add_dependency_set
from assemblomatic.resolution.dependencies import DependencyResolver

__all__ = ["DependencySetAssemblyPhase"]

log = logging.getLogger(__name__)


class DependencySetAssemblyPhase(AssemblyPhase):
    """Add the root project's dependencies selected by each dependency set."""

    order = 30

    def __init__(
        self,
        dependency_resolver: DependencyResolver,
        logger: logging.Logger | None = None,
    ) -> None:
        self.dependency_resolver = dependency_resolver
        self.log = logger or log

    def execute(
        self,
        assembly: Assembly,
        archiver: Archiver,
        config_source: ConfigurationSource,
    ) -> None:
        if not assembly.dependency_sets:
            return

        project = config_source.project
        resolved = self.dependency_resolver.resolve_dependency_sets(
            assembly.dependency_sets, project
        )
        for dependency_set, artifacts in resolved:
            count = add_dependency_set(
                dependency_set,
                project,
                artifacts,
                archiver,
                config_source,
                logger=self.log,
            )
            self.log.info("Added %d dependency artifact(s) of %s", count, project.id)
