"""Tests for reactor-backed dependency resolution and dependency sets."""

from pathlib import Path

import pytest

from assemblomatic.archiver.tracking import TrackingArchiver
from assemblomatic.config.schema import DependencySet
from assemblomatic.models import Artifact, Reactor
from assemblomatic.phases.tasks import add_dependency_set
from assemblomatic.resolution.dependencies import ReactorDependencyResolver
from assemblomatic.utils.errors import DependencyResolutionError
from tests.factories import make_project


def _dep(artifact_id: str, file: Path | None, scope: str = "compile", group_id: str = "lib"):
    return Artifact(group_id=group_id, artifact_id=artifact_id, version="1", scope=scope, file=file)


def test_scopes_and_transitive_siblings(tmp_path: Path, jar_file):
    """Sibling modules bring their own dependencies; test scope is dropped."""
    util_jar = jar_file("util.jar")
    core = make_project(
        tmp_path / "core",
        "core",
        artifact_file=jar_file("core.jar"),
        dependencies=(_dep("util", util_jar),),
    )
    app = make_project(
        tmp_path / "app",
        "app",
        dependencies=(
            Artifact(group_id="group", artifact_id="core", version="1"),
            _dep("junit", jar_file("junit.jar"), scope="test"),
        ),
    )
    resolver = ReactorDependencyResolver(Reactor([app, core]))

    ((_, artifacts),) = resolver.resolve_dependency_sets([DependencySet()], app)

    assert [a.artifact_id for a in artifacts] == ["core", "util"]
    assert artifacts[0].file == core.artifact.file


def test_missing_dependency_file_fails(tmp_path: Path):
    """Unresolvable artifacts raise DependencyResolutionError."""
    app = make_project(tmp_path, "app", dependencies=(_dep("ghost", None),))
    resolver = ReactorDependencyResolver(Reactor([app]))

    with pytest.raises(DependencyResolutionError, match="ghost"):
        resolver.resolve_dependency_sets([DependencySet()], app)


def test_add_dependency_set_filters_and_project_artifact(tmp_path: Path, jar_file, source_for):
    """Includes filter dependencies; the project artifact comes first when requested."""
    a = _dep("a", jar_file("a.jar"))
    b = _dep("b", jar_file("b.jar"))
    project = make_project(tmp_path, "app", artifact_file=jar_file("app.jar"))
    tracker = TrackingArchiver()
    dependency_set = DependencySet(output_directory="lib", excludes=["lib:b"])

    count = add_dependency_set(
        dependency_set, project, [a, b], tracker, source_for(project)
    )

    assert count == 2
    assert [x.dest for x in tracker.added] == ["lib/app-1.jar", "lib/a-1.jar"]


def test_dependency_set_with_unknown_scope_is_rejected():
    """Scopes are validated when the descriptor is loaded."""
    with pytest.raises(ValueError):
        DependencySet(scope="everything")
