"""
Domain-level models describing the projects of a multi-module build.

The module provides:

* **`Artifact`** – a built (or resolved) file identified by Maven-style
  coordinates plus an optional classifier.
* **`Project`** – one node of the build graph. The parent link is a *handle*
  (the parent's :pyattr:`Project.id`) rather than an object reference, so
  projects stay immutable, hashable and free of ownership cycles.
* **`Reactor`** – the arena holding every project of the current build run.
  All parent/child navigation goes through the reactor.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional

from pydantic import BaseModel

log = logging.getLogger(__name__)

__all__ = ["Artifact", "Project", "Reactor"]

# Artifact types whose file extension differs from the type name.
_TYPE_EXTENSIONS: dict[str, str] = {
    "test-jar": "jar",
    "ejb": "jar",
    "ejb-client": "jar",
    "maven-plugin": "jar",
    "java-source": "jar",
    "javadoc": "jar",
    "bundle": "jar",
}


# --------------------------------------------------------------------------- #
# 1 – Artifacts
# --------------------------------------------------------------------------- #
class Artifact(BaseModel, frozen=True):
    """A single build output or dependency.

    Attributes
    ----------
    group_id, artifact_id, version
        Coordinates of the artifact.
    type
        Artifact type (``jar``, ``war``, ``pom``, ``test-jar`` …).
    classifier
        Optional tag distinguishing attached artifacts (``sources``, ``test``).
    scope
        Dependency scope; only meaningful for dependency artifacts.
    file
        Backing file. *None* until the artifact has been built or resolved.
    """

    group_id: str
    artifact_id: str
    version: str
    type: str = "jar"
    classifier: Optional[str] = None
    scope: str = "compile"
    file: Optional[Path] = None

    @property
    def extension(self) -> str:
        return _TYPE_EXTENSIONS.get(self.type, self.type)

    @property
    def coordinate(self) -> str:
        """``group:artifact`` pair used by include/exclude patterns."""
        return f"{self.group_id}:{self.artifact_id}"

    @property
    def dependency_conflict_id(self) -> str:
        cid = f"{self.group_id}:{self.artifact_id}:{self.type}"
        if self.classifier:
            cid += f":{self.classifier}"
        return cid

    @property
    def id(self) -> str:
        return f"{self.dependency_conflict_id}:{self.version}"

    def __str__(self) -> str:
        return self.id


# --------------------------------------------------------------------------- #
# 2 – Projects
# --------------------------------------------------------------------------- #
class Project(BaseModel, frozen=True):
    """One module of the build.

    Attributes
    ----------
    group_id, artifact_id, version
        Project coordinates.
    packaging
        Packaging kind. ``"pom"`` projects are aggregators and never
        contribute a binary.
    basedir
        Directory holding the project's sources.
    parent
        :pyattr:`id` of the parent project or *None* for a root.
    modules
        Child module directory names declared by the project (relative to
        :pyattr:`basedir`).
    artifact
        Primary artifact.
    attached_artifacts
        Secondary artifacts distinguished by classifier.
    dependencies
        Declared (already resolved) dependency artifacts.
    final_name
        Base name of the build output; defaults to ``<artifactId>-<version>``.
    """

    group_id: str
    artifact_id: str
    version: str
    packaging: str = "jar"
    basedir: Path
    parent: Optional[str] = None
    modules: tuple[str, ...] = ()
    artifact: Optional[Artifact] = None
    attached_artifacts: tuple[Artifact, ...] = ()
    dependencies: tuple[Artifact, ...] = ()
    final_name: Optional[str] = None

    @property
    def id(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    @property
    def coordinate(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    @property
    def build_final_name(self) -> str:
        return self.final_name or f"{self.artifact_id}-{self.version}"

    def __str__(self) -> str:
        return self.id


# --------------------------------------------------------------------------- #
# 3 – Reactor arena
# --------------------------------------------------------------------------- #
class Reactor:
    """Ordered, read-only collection of every project in the build run.

    Projects are indexed by :pyattr:`Project.id`. A parent handle that does
    not resolve inside the reactor is treated as "no parent" (the parent is
    outside this build).

    Raises:
        ValueError: On duplicate project ids or a cyclic parent chain.
    """

    def __init__(self, projects: Iterable[Project]) -> None:
        self._projects: dict[str, Project] = {}
        for project in projects:
            if project.id in self._projects:
                raise ValueError(f"Duplicate project in reactor: {project.id}")
            self._projects[project.id] = project
        self._check_acyclic()

    # ------------------------------------------------------------------ #
    def _check_acyclic(self) -> None:
        for project in self._projects.values():
            seen = {project.id}
            parent = self.parent_of(project)
            while parent is not None:
                if parent.id in seen:
                    raise ValueError(f"Cyclic parent chain through {parent.id}")
                seen.add(parent.id)
                parent = self.parent_of(parent)

    # ------------------------------------------------------------------ #
    def __iter__(self) -> Iterator[Project]:
        return iter(self._projects.values())

    def __len__(self) -> int:
        return len(self._projects)

    def __contains__(self, project: object) -> bool:
        return isinstance(project, Project) and project.id in self._projects

    @property
    def projects(self) -> list[Project]:
        return list(self._projects.values())

    @property
    def root(self) -> Project:
        """First project of the reactor (the top-level build)."""
        if not self._projects:
            raise ValueError("Reactor is empty")
        return next(iter(self._projects.values()))

    def get(self, project_id: str) -> Project | None:
        return self._projects.get(project_id)

    def parent_of(self, project: Project) -> Project | None:
        if project.parent is None:
            return None
        return self._projects.get(project.parent)

    def ancestors(self, project: Project) -> Iterator[Project]:
        """Yield the parent chain of *project*, nearest first."""
        parent = self.parent_of(project)
        while parent is not None:
            yield parent
            parent = self.parent_of(parent)

    def children(self, project: Project) -> list[Project]:
        return [p for p in self._projects.values() if p.parent == project.id]

    def descendants(self, project: Project, *, recursive: bool = True) -> list[Project]:
        """Return strict descendants of *project* in reactor order.

        Args:
            project: Subtree root. It is never part of the result.
            recursive: *False* restricts the result to immediate children.
        """
        if not recursive:
            return self.children(project)
        return [
            p
            for p in self._projects.values()
            if any(a.id == project.id for a in self.ancestors(p))
        ]
