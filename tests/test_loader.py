"""Tests for the YAML descriptor and reactor loaders."""

from pathlib import Path
from textwrap import dedent

import pytest

from assemblomatic.config import load_descriptor, load_reactor


def test_descriptor_accepts_camel_case(tmp_path: Path):
    """camelCase keys map onto the snake_case model fields."""
    path = tmp_path / "assembly.yaml"
    path.write_text(
        dedent(
            """
            assembly:
              id: bin
              formats: [zip, tar.gz]
              includeBaseDirectory: false
              moduleSets:
                - useAllReactorProjects: true
                  excludes: ["org.example:tests"]
                  binaries:
                    outputDirectory: lib
                    unpack: false
                    attachmentClassifier: shaded
            """
        )
    )

    assembly = load_descriptor(path)

    assert assembly.formats == ["zip", "tar.gz"]
    assert assembly.include_base_directory is False
    (module_set,) = assembly.module_sets
    assert module_set.use_all_reactor_projects
    assert module_set.binaries.attachment_classifier == "shaded"
    assert module_set.binaries.include_dependencies is True


def test_descriptor_errors_are_wrapped(tmp_path: Path):
    """Schema violations surface as RuntimeError naming the file."""
    path = tmp_path / "bad.yaml"
    path.write_text("id: x\nformats: [rar]\n")
    with pytest.raises(RuntimeError, match="Invalid assembly descriptor"):
        load_descriptor(path)

    path.write_text("id: x\nunknownField: 1\n")
    with pytest.raises(RuntimeError):
        load_descriptor(path)


def test_reactor_paths_and_parents(tmp_path: Path):
    """Relative paths resolve against the reactor file; short parents expand."""
    path = tmp_path / "reactor.yaml"
    path.write_text(
        dedent(
            """
            projects:
              - groupId: org.example
                artifactId: parent
                version: 1.0
                packaging: pom
                modules: [core]
              - groupId: org.example
                artifactId: core
                version: 1.0
                basedir: core
                parent: org.example:parent
                artifact: {file: core/target/core-1.0.jar}
                attachedArtifacts:
                  - {classifier: tests, type: test-jar, file: core/target/core-1.0-tests.jar}
                dependencies:
                  - {groupId: org.lib, artifactId: lib, version: 2, file: libs/lib-2.jar}
            """
        )
    )

    reactor = load_reactor(path)

    parent, core = reactor.projects
    assert reactor.root == parent
    assert parent.basedir == tmp_path.resolve()
    assert parent.artifact is None
    assert parent.modules == ("core",)
    assert core.parent == "org.example:parent:1.0"
    assert reactor.parent_of(core) == parent
    assert core.basedir == (tmp_path / "core").resolve()
    assert core.artifact.file == (tmp_path / "core/target/core-1.0.jar").resolve()
    assert core.artifact.artifact_id == "core"
    (tests_jar,) = core.attached_artifacts
    assert tests_jar.classifier == "tests" and tests_jar.extension == "jar"
    (lib,) = core.dependencies
    assert lib.version == "2"
    assert lib.file == (tmp_path / "libs/lib-2.jar").resolve()


def test_reactor_errors_are_wrapped(tmp_path: Path):
    """Duplicate projects are reported as RuntimeError."""
    path = tmp_path / "reactor.yaml"
    path.write_text(
        "projects:\n"
        "  - {groupId: g, artifactId: a, version: '1'}\n"
        "  - {groupId: g, artifactId: a, version: '1'}\n"
    )
    with pytest.raises(RuntimeError, match="Invalid reactor file"):
        load_reactor(path)
