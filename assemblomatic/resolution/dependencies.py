"""
Dependency resolution for dependency sets.

:class:`DependencyResolver` is the contract the assembly phases rely on.
:class:`ReactorDependencyResolver` is the bundled implementation: it works
purely from the dependency lists recorded on each :class:`Project` and from
sibling modules of the reactor, and never touches the network.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Sequence

from assemblomatic.config.schema import DependencySet
from assemblomatic.models import Artifact, Project, Reactor
from assemblomatic.utils.errors import DependencyResolutionError

__all__ = ["DependencyResolver", "ReactorDependencyResolver", "SCOPE_MAP"]

log = logging.getLogger(__name__)

#: Dependency scopes visible from each resolution scope.
SCOPE_MAP: dict[str, frozenset[str]] = {
    "compile": frozenset({"compile", "provided", "system"}),
    "runtime": frozenset({"compile", "runtime"}),
    "test": frozenset({"compile", "provided", "system", "runtime", "test"}),
    "provided": frozenset({"provided"}),
    "system": frozenset({"system"}),
}


class DependencyResolver(ABC):
    """Resolve the artifacts each dependency set of a project refers to."""

    @abstractmethod
    def resolve_dependency_sets(
        self,
        dependency_sets: Sequence[DependencySet],
        project: Project,
    ) -> list[tuple[DependencySet, list[Artifact]]]:
        """Return ``(dependency set, artifacts)`` pairs in input order.

        Raises:
            DependencyResolutionError: When an artifact cannot be resolved.
        """
        raise NotImplementedError


class ReactorDependencyResolver(DependencyResolver):
    """Resolve dependencies from project metadata and the reactor.

    A dependency whose coordinates match a reactor project takes that
    project's artifact file (when the dependency itself carries none) and
    brings that project's own dependencies along transitively.
    """

    def __init__(self, reactor: Reactor | None = None, logger: logging.Logger | None = None):
        self.reactor = reactor
        self.log = logger or log

    def _reactor_project(self, artifact: Artifact) -> Project | None:
        if self.reactor is None:
            return None
        for project in self.reactor:
            if project.coordinate == artifact.coordinate and project.version == artifact.version:
                return project
        return None

    def _collect(self, project: Project, scopes: frozenset[str]) -> list[Artifact]:
        seen: set[str] = set()
        ordered: list[Artifact] = []
        pending = list(project.dependencies)
        while pending:
            dep = pending.pop(0)
            if dep.scope not in scopes or dep.dependency_conflict_id in seen:
                continue
            seen.add(dep.dependency_conflict_id)

            sibling = self._reactor_project(dep)
            if sibling is not None:
                if dep.file is None and sibling.artifact is not None:
                    dep = dep.model_copy(update={"file": sibling.artifact.file})
                # transitive deps of a sibling keep their own (narrower) scopes
                pending.extend(sibling.dependencies)
            ordered.append(dep)
        return ordered

    def resolve_dependency_sets(
        self,
        dependency_sets: Sequence[DependencySet],
        project: Project,
    ) -> list[tuple[DependencySet, list[Artifact]]]:
        resolved: list[tuple[DependencySet, list[Artifact]]] = []
        for dependency_set in dependency_sets:
            artifacts = self._collect(project, SCOPE_MAP[dependency_set.scope])
            missing = [a.id for a in artifacts if a.file is None or not a.file.exists()]
            if missing:
                raise DependencyResolutionError(
                    f"Cannot resolve dependencies of {project.id}: "
                    f"no file for {', '.join(missing)}"
                )
            self.log.debug(
                "Resolved %d dependency artifact(s) of %s in scope %s",
                len(artifacts),
                project.id,
                dependency_set.scope,
            )
            resolved.append((dependency_set, artifacts))
        return resolved
