"""Builders for reactor projects used across the tests."""

from __future__ import annotations

from pathlib import Path

from assemblomatic.models import Artifact, Project


def make_project(
    basedir: Path,
    artifact_id: str,
    *,
    group_id: str = "group",
    version: str = "1",
    packaging: str = "jar",
    parent: Project | None = None,
    modules: tuple[str, ...] = (),
    artifact_file: Path | None = None,
    attached: tuple[Artifact, ...] = (),
    dependencies: tuple[Artifact, ...] = (),
) -> Project:
    """Return a project whose primary artifact is backed by *artifact_file*."""
    artifact = None
    if packaging != "pom":
        artifact = Artifact(
            group_id=group_id,
            artifact_id=artifact_id,
            version=version,
            type=packaging,
            file=artifact_file,
        )
    return Project(
        group_id=group_id,
        artifact_id=artifact_id,
        version=version,
        packaging=packaging,
        basedir=basedir,
        parent=parent.id if parent is not None else None,
        modules=modules,
        artifact=artifact,
        attached_artifacts=attached,
        dependencies=dependencies,
    )
